# app/router/masters/users_router.py
from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from shared.core.database import get_warehouse_db as get_db
from shared.core.schemas import UserToken
from shared.core.auth import allow_admin, allow_manager, validate_current_token
from ...schemas.masters.users_schemas import (
    UserCreate, UserDepartmentUpdate, UserManagerUpdate, UserOut, UserStatusUpdate, UserUpdate)
from ...crud.masters import users_crud as crud

router = APIRouter(prefix="/api/users", tags=["users"],
                   dependencies=[Depends(validate_current_token)])


@router.get("", response_model=List[UserOut])
def read_users(
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_manager)
):
    return crud.get_users(db)


@router.get("/active", response_model=List[UserOut])
def read_active_users(db: Session = Depends(get_db)):
    return crud.get_active_users(db)


@router.post("", response_model=UserOut)
def create_user(
    payload: UserCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_admin)
):
    return crud.create_user(db, payload)


@router.put("/{user_id}", response_model=UserOut)
def update_user(
    user_id: UUID,
    payload: UserUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_admin)
):
    return crud.update_user(db, user_id, payload)


@router.patch("/{user_id}/status", response_model=UserOut)
def update_user_status(
    user_id: UUID,
    payload: UserStatusUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_admin)
):
    return crud.set_user_status(db, user_id, payload.status, current_user)


@router.patch("/{user_id}/manager", response_model=UserOut)
def assign_manager(
    user_id: UUID,
    payload: UserManagerUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_admin)
):
    return crud.assign_manager(db, user_id, payload.manager_id)


@router.patch("/{user_id}/department", response_model=UserOut)
def assign_department(
    user_id: UUID,
    payload: UserDepartmentUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_manager)
):
    return crud.assign_department(db, user_id, payload.department_id)


@router.delete("/{user_id}", response_model=UserOut)
def delete_user(
    user_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_admin)
):
    return crud.delete_user(db, user_id, current_user)
