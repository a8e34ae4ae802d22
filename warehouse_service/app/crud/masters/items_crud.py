# app/crud/masters/items_crud.py
import logging
from typing import List
from uuid import UUID
from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from shared.helpers.json_response_helper import error_response, not_found
from shared.utils.app_status_code import AppStatusCode
from ...enum.inventory_enum import ItemStatus, TransactionType
from ...models.masters.categories import Category
from ...models.masters.items import Item
from ...models.stock.inventory import Inventory
from ...models.stock.transactions import Transaction
from ...schemas.masters.items_schemas import CheckInHistoryOut, ItemCreate, ItemOut, ItemUpdate

logger = logging.getLogger(__name__)


def to_item_out(item: Item) -> ItemOut:
    return ItemOut(
        id=item.id,
        sku=item.sku,
        name=item.name,
        description=item.description,
        unit=item.unit,
        min_stock_level=item.min_stock_level,
        category_id=item.category_id,
        category_name=item.category.name if item.category else None,
        status=item.status,
        created_at=item.created_at,
    )


def get_item_or_404(db: Session, item_id: UUID) -> Item:
    item = db.query(Item).filter(Item.id == item_id, Item.is_deleted == False).first()
    if not item:
        return not_found("Item")
    return item


def total_stock(db: Session, item_id: UUID) -> int:
    return int(
        db.query(func.coalesce(func.sum(Inventory.quantity), 0))
        .filter(Inventory.item_id == item_id)
        .scalar()
    )


def get_items(db: Session) -> List[ItemOut]:
    items = (
        db.query(Item)
        .options(joinedload(Item.category))
        .filter(Item.is_deleted == False)
        .order_by(Item.name.asc())
        .all()
    )
    return [to_item_out(item) for item in items]


def get_item(db: Session, item_id: UUID) -> ItemOut:
    return to_item_out(get_item_or_404(db, item_id))


def _ensure_unique_sku(db: Session, sku: str, exclude_id: UUID = None):
    # soft deleted items still own their sku
    query = db.query(Item).filter(Item.sku == sku)
    if exclude_id:
        query = query.filter(Item.id != exclude_id)
    if query.first():
        return error_response(
            message=f"Item with SKU {sku} already exists",
            status_code=AppStatusCode.DUPLICATE_ADD_ERROR
        )


def _validate_category(db: Session, category_id):
    if category_id and not db.query(Category).filter(Category.id == category_id).first():
        raise ValueError("Category not found")


def create_item(db: Session, payload: ItemCreate) -> ItemOut:
    _ensure_unique_sku(db, payload.sku)
    _validate_category(db, payload.category_id)

    item = Item(**payload.model_dump())
    db.add(item)
    db.commit()
    db.refresh(item)
    logger.info("Created item %s (%s)", item.name, item.sku)
    return to_item_out(item)


def update_item(db: Session, item_id: UUID, payload: ItemUpdate) -> ItemOut:
    item = get_item_or_404(db, item_id)
    data = payload.model_dump(exclude_unset=True)

    if data.get("sku"):
        _ensure_unique_sku(db, data["sku"], exclude_id=item_id)
    _validate_category(db, data.get("category_id"))

    for key, value in data.items():
        setattr(item, key, value)

    db.commit()
    db.refresh(item)
    return to_item_out(item)


def delete_item(db: Session, item_id: UUID) -> ItemOut:
    item = get_item_or_404(db, item_id)

    on_hand = total_stock(db, item_id)
    if on_hand > 0:
        raise ValueError(
            f"Cannot delete item. It has {on_hand} units in stock. Please dispose or issue them first.")

    # ✅ Soft delete
    item.is_deleted = True
    item.status = ItemStatus.INACTIVE.value
    db.commit()
    db.refresh(item)
    logger.info("Soft deleted item %s", item.sku)
    return to_item_out(item)


def set_item_status(db: Session, item_id: UUID, status: ItemStatus) -> ItemOut:
    item = get_item_or_404(db, item_id)

    if status == ItemStatus.INACTIVE:
        on_hand = total_stock(db, item_id)
        if on_hand > 0:
            raise ValueError(
                f"Cannot deactivate item. It has {on_hand} units in stock.")

    item.status = status.value
    db.commit()
    db.refresh(item)
    return to_item_out(item)


def get_checkin_history(db: Session, item_id: UUID) -> List[CheckInHistoryOut]:
    get_item_or_404(db, item_id)
    rows = (
        db.query(Transaction)
        .options(joinedload(Transaction.destination_warehouse), joinedload(Transaction.user))
        .filter(
            Transaction.item_id == item_id,
            Transaction.transaction_type == TransactionType.CHECK_IN.value
        )
        .order_by(Transaction.created_at.desc())
        .all()
    )
    return [
        CheckInHistoryOut(
            id=row.id,
            transaction_code=row.transaction_code,
            quantity=row.quantity,
            cost=float(row.cost) if row.cost is not None else None,
            supplier_name=row.supplier_name,
            po_number=row.po_number,
            delivery_challan_number=row.delivery_challan_number,
            check_in_date=row.check_in_date,
            warehouse_id=row.destination_warehouse_id,
            warehouse_name=row.destination_warehouse.name if row.destination_warehouse else None,
            user_name=row.user.name if row.user else None,
            created_at=row.created_at,
        )
        for row in rows
    ]
