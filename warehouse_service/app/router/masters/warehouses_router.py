# app/router/masters/warehouses_router.py
from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from shared.core.database import get_warehouse_db as get_db
from shared.core.schemas import UserToken
from shared.core.auth import allow_admin, validate_current_token
from ...schemas.masters.warehouses_schemas import (
    WarehouseCreate, WarehouseManagerUpdate, WarehouseOut, WarehouseStatsOut, WarehouseUpdate)
from ...schemas.stock.inventory_schemas import AvailableInventoryOut
from ...crud.masters import warehouses_crud as crud

router = APIRouter(prefix="/api/warehouses", tags=["warehouses"],
                   dependencies=[Depends(validate_current_token)])


@router.get("", response_model=List[WarehouseOut])
def read_warehouses(db: Session = Depends(get_db)):
    return crud.get_warehouses(db)


@router.get("/active", response_model=List[WarehouseOut])
def read_active_warehouses(db: Session = Depends(get_db)):
    return crud.get_active_warehouses(db)


@router.get("/stats", response_model=List[WarehouseStatsOut])
def read_warehouse_stats(db: Session = Depends(get_db)):
    return crud.get_warehouse_stats(db)


@router.get("/{warehouse_id}", response_model=WarehouseOut)
def read_warehouse(warehouse_id: UUID, db: Session = Depends(get_db)):
    return crud.get_warehouse_or_404(db, warehouse_id)


@router.post("", response_model=WarehouseOut)
def create_warehouse(
    payload: WarehouseCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_admin)
):
    return crud.create_warehouse(db, payload)


@router.put("/{warehouse_id}", response_model=WarehouseOut)
def update_warehouse(
    warehouse_id: UUID,
    payload: WarehouseUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_admin)
):
    return crud.update_warehouse(db, warehouse_id, payload)


@router.patch("/{warehouse_id}/manager", response_model=WarehouseOut)
def assign_manager(
    warehouse_id: UUID,
    payload: WarehouseManagerUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_admin)
):
    return crud.assign_manager(db, warehouse_id, payload.manager_id)


@router.delete("/{warehouse_id}", response_model=WarehouseOut)
def archive_warehouse(
    warehouse_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_admin)
):
    return crud.archive_warehouse(db, warehouse_id)


@router.patch("/{warehouse_id}/restore", response_model=WarehouseOut)
def restore_warehouse(
    warehouse_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_admin)
):
    return crud.restore_warehouse(db, warehouse_id)


@router.get("/{warehouse_id}/available-inventory", response_model=List[AvailableInventoryOut])
def read_available_inventory(warehouse_id: UUID, db: Session = Depends(get_db)):
    return crud.get_available_inventory(db, warehouse_id)
