# app/crud/masters/warehouses_crud.py
import logging
from typing import List
from uuid import UUID
from sqlalchemy import case, func
from sqlalchemy.orm import Session, joinedload

from shared.helpers.json_response_helper import error_response, not_found
from shared.models.users import Users
from shared.utils.app_status_code import AppStatusCode
from shared.utils.enums import UserRole
from ...enum.inventory_enum import WarehouseStatus
from ...models.masters.items import Item
from ...models.masters.warehouses import Warehouse
from ...models.stock.inventory import Inventory
from ...schemas.masters.items_schemas import ItemSummary
from ...schemas.masters.warehouses_schemas import WarehouseCreate, WarehouseStatsOut, WarehouseUpdate
from ...schemas.stock.inventory_schemas import AvailableInventoryOut

logger = logging.getLogger(__name__)


def get_warehouse_or_404(db: Session, warehouse_id: UUID) -> Warehouse:
    warehouse = db.query(Warehouse).filter(Warehouse.id == warehouse_id).first()
    if not warehouse:
        return not_found("Warehouse")
    return warehouse


def get_warehouses(db: Session) -> List[Warehouse]:
    return (
        db.query(Warehouse)
        .options(joinedload(Warehouse.manager))
        .order_by(Warehouse.name.asc())
        .all()
    )


def get_active_warehouses(db: Session) -> List[Warehouse]:
    return (
        db.query(Warehouse)
        .options(joinedload(Warehouse.manager))
        .filter(Warehouse.is_active == True)
        .order_by(Warehouse.name.asc())
        .all()
    )


def get_warehouse_stats(db: Session) -> List[WarehouseStatsOut]:
    low_stock = case((Inventory.quantity < Item.min_stock_level, 1), else_=0)
    totals = dict(
        (row.warehouse_id, row)
        for row in db.query(
            Inventory.warehouse_id.label("warehouse_id"),
            func.coalesce(func.sum(Inventory.quantity), 0).label("total_quantity"),
            func.coalesce(func.sum(low_stock), 0).label("low_stock_count"),
        )
        .join(Item, Item.id == Inventory.item_id)
        .filter(Item.is_deleted == False)
        .group_by(Inventory.warehouse_id)
        .all()
    )

    stats = []
    for warehouse in get_warehouses(db):
        row = totals.get(warehouse.id)
        total_quantity = int(row.total_quantity) if row else 0
        capacity_used = (
            round(total_quantity / warehouse.capacity * 100, 2)
            if warehouse.capacity else 0.0
        )
        stats.append(WarehouseStatsOut(
            id=warehouse.id,
            name=warehouse.name,
            location=warehouse.location,
            capacity=warehouse.capacity,
            manager_name=warehouse.manager.name if warehouse.manager else None,
            total_items=total_quantity,
            low_stock_items=int(row.low_stock_count) if row else 0,
            capacity_used=capacity_used,
            is_active=warehouse.is_active,
            status=warehouse.status,
        ))
    return stats


def _ensure_unique_name(db: Session, name: str, exclude_id: UUID = None):
    query = db.query(Warehouse).filter(Warehouse.name == name)
    if exclude_id:
        query = query.filter(Warehouse.id != exclude_id)
    if query.first():
        return error_response(
            message="Warehouse name already exists",
            status_code=AppStatusCode.DUPLICATE_ADD_ERROR
        )


def _validate_manager(db: Session, manager_id: UUID) -> Users:
    manager = db.query(Users).filter(Users.id == manager_id, Users.is_deleted == False).first()
    if not manager:
        return not_found("Manager")
    if manager.role not in (UserRole.ADMIN.value, UserRole.MANAGER.value):
        raise ValueError("Warehouse manager must have the manager or admin role")
    return manager


def create_warehouse(db: Session, payload: WarehouseCreate) -> Warehouse:
    _ensure_unique_name(db, payload.name)
    if payload.manager_id:
        _validate_manager(db, payload.manager_id)

    warehouse = Warehouse(**payload.model_dump())
    db.add(warehouse)
    db.commit()
    db.refresh(warehouse)
    logger.info("Created warehouse %s", warehouse.name)
    return warehouse


def update_warehouse(db: Session, warehouse_id: UUID, payload: WarehouseUpdate) -> Warehouse:
    warehouse = get_warehouse_or_404(db, warehouse_id)
    data = payload.model_dump(exclude_unset=True)

    if data.get("name"):
        _ensure_unique_name(db, data["name"], exclude_id=warehouse_id)
    if data.get("manager_id"):
        _validate_manager(db, data["manager_id"])

    for key, value in data.items():
        setattr(warehouse, key, value)

    db.commit()
    db.refresh(warehouse)
    return warehouse


def assign_manager(db: Session, warehouse_id: UUID, manager_id: UUID) -> Warehouse:
    warehouse = get_warehouse_or_404(db, warehouse_id)
    _validate_manager(db, manager_id)

    warehouse.manager_id = manager_id
    db.commit()
    db.refresh(warehouse)
    logger.info("Warehouse %s manager set to %s", warehouse.name, manager_id)
    return warehouse


def archive_warehouse(db: Session, warehouse_id: UUID) -> Warehouse:
    warehouse = get_warehouse_or_404(db, warehouse_id)
    warehouse.is_active = False
    warehouse.status = WarehouseStatus.ARCHIVED.value
    db.commit()
    db.refresh(warehouse)
    logger.info("Archived warehouse %s", warehouse.name)
    return warehouse


def restore_warehouse(db: Session, warehouse_id: UUID) -> Warehouse:
    warehouse = get_warehouse_or_404(db, warehouse_id)
    warehouse.is_active = True
    warehouse.status = WarehouseStatus.ACTIVE.value
    db.commit()
    db.refresh(warehouse)
    logger.info("Restored warehouse %s", warehouse.name)
    return warehouse


def get_available_inventory(db: Session, warehouse_id: UUID) -> List[AvailableInventoryOut]:
    get_warehouse_or_404(db, warehouse_id)
    rows = (
        db.query(Inventory)
        .options(joinedload(Inventory.item))
        .join(Item, Item.id == Inventory.item_id)
        .filter(
            Inventory.warehouse_id == warehouse_id,
            Inventory.quantity > 0,
            Item.is_deleted == False
        )
        .order_by(Item.name.asc())
        .all()
    )
    return [
        AvailableInventoryOut(
            id=row.id,
            item_id=row.item_id,
            quantity=row.quantity,
            item=ItemSummary.model_validate(row.item),
        )
        for row in rows
    ]
