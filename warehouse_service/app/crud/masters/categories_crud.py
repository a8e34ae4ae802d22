# app/crud/masters/categories_crud.py
from typing import List
from uuid import UUID
from sqlalchemy.orm import Session

from shared.helpers.json_response_helper import error_response, not_found
from shared.utils.app_status_code import AppStatusCode
from ...models.masters.categories import Category
from ...models.masters.items import Item
from ...schemas.masters.categories_schemas import CategoryCreate, CategoryOut, CategoryUpdate


def get_categories(db: Session) -> List[Category]:
    return db.query(Category).order_by(Category.name.asc()).all()


def _ensure_unique_name(db: Session, name: str, exclude_id: UUID = None):
    query = db.query(Category).filter(Category.name == name)
    if exclude_id:
        query = query.filter(Category.id != exclude_id)
    if query.first():
        return error_response(
            message="Category name already exists",
            status_code=AppStatusCode.DUPLICATE_ADD_ERROR
        )


def create_category(db: Session, payload: CategoryCreate) -> Category:
    _ensure_unique_name(db, payload.name)
    category = Category(**payload.model_dump())
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


def update_category(db: Session, category_id: UUID, payload: CategoryUpdate) -> Category:
    category = db.query(Category).filter(Category.id == category_id).first()
    if not category:
        return not_found("Category")

    data = payload.model_dump(exclude_unset=True)
    if data.get("name"):
        _ensure_unique_name(db, data["name"], exclude_id=category_id)

    for key, value in data.items():
        setattr(category, key, value)

    db.commit()
    db.refresh(category)
    return category


def delete_category(db: Session, category_id: UUID) -> CategoryOut:
    category = db.query(Category).filter(Category.id == category_id).first()
    if not category:
        return not_found("Category")

    # items keep existing but lose their category
    db.query(Item).filter(Item.category_id == category_id).update(
        {Item.category_id: None}, synchronize_session=False)
    out = CategoryOut.model_validate(category)
    db.delete(category)
    db.commit()
    return out
