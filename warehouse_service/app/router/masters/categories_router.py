# app/router/masters/categories_router.py
from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from shared.core.database import get_warehouse_db as get_db
from shared.core.schemas import UserToken
from shared.core.auth import allow_manager, validate_current_token
from ...schemas.masters.categories_schemas import CategoryCreate, CategoryOut, CategoryUpdate
from ...crud.masters import categories_crud as crud

router = APIRouter(prefix="/api/categories", tags=["categories"],
                   dependencies=[Depends(validate_current_token)])


@router.get("", response_model=List[CategoryOut])
def read_categories(db: Session = Depends(get_db)):
    return crud.get_categories(db)


@router.post("", response_model=CategoryOut)
def create_category(
    payload: CategoryCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_manager)
):
    return crud.create_category(db, payload)


@router.put("/{category_id}", response_model=CategoryOut)
def update_category(
    category_id: UUID,
    payload: CategoryUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_manager)
):
    return crud.update_category(db, category_id, payload)


@router.delete("/{category_id}", response_model=CategoryOut)
def delete_category(
    category_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_manager)
):
    return crud.delete_category(db, category_id)
