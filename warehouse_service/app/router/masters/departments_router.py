# app/router/masters/departments_router.py
from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from shared.core.database import get_warehouse_db as get_db
from shared.core.schemas import UserToken
from shared.core.auth import allow_admin, validate_current_token
from ...schemas.masters.departments_schemas import DepartmentCreate, DepartmentOut, DepartmentUpdate
from ...crud.masters import departments_crud as crud

router = APIRouter(prefix="/api/departments", tags=["departments"],
                   dependencies=[Depends(validate_current_token)])


@router.get("", response_model=List[DepartmentOut])
def read_departments(db: Session = Depends(get_db)):
    return crud.get_departments(db)


@router.post("", response_model=DepartmentOut)
def create_department(
    payload: DepartmentCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_admin)
):
    return crud.create_department(db, payload)


@router.put("/{department_id}", response_model=DepartmentOut)
def update_department(
    department_id: UUID,
    payload: DepartmentUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_admin)
):
    return crud.update_department(db, department_id, payload)


@router.delete("/{department_id}", response_model=DepartmentOut)
def delete_department(
    department_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_admin)
):
    return crud.delete_department(db, department_id)
