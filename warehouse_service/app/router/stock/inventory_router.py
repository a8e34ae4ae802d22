# app/router/stock/inventory_router.py
from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from shared.core.database import get_warehouse_db as get_db
from shared.core.schemas import UserToken
from shared.core.auth import allow_admin, allow_manager, validate_current_token
from ...schemas.stock.inventory_schemas import (
    DisposedInventoryParams, DisposedInventoryRow, DisposeOut, DisposeRequest,
    InventoryOut, InventoryQuantityUpdate, InventoryUpsert)
from ...crud.stock import inventory_crud as crud

router = APIRouter(prefix="/api", tags=["inventory"],
                   dependencies=[Depends(validate_current_token)])


@router.get("/inventory", response_model=List[InventoryOut])
def read_inventory(db: Session = Depends(get_db)):
    return crud.get_inventory(db)


@router.get("/inventory/warehouse/{warehouse_id}", response_model=List[InventoryOut])
def read_inventory_by_warehouse(warehouse_id: UUID, db: Session = Depends(get_db)):
    return crud.get_inventory_by_warehouse(db, warehouse_id)


@router.post("/inventory", response_model=InventoryOut)
def upsert_inventory(
    payload: InventoryUpsert,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_manager)
):
    return crud.upsert_inventory(db, payload)


@router.put("/inventory/update-quantity", response_model=InventoryOut)
def update_inventory_quantity(
    payload: InventoryQuantityUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_manager)
):
    return crud.update_inventory_quantity(db, payload)


@router.post("/inventory/dispose", response_model=DisposeOut)
def dispose_inventory(
    payload: DisposeRequest,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_admin)
):
    return crud.dispose_inventory(db, payload, current_user)


@router.get("/disposed-inventory", response_model=List[DisposedInventoryRow])
def read_disposed_inventory(
    params: DisposedInventoryParams = Depends(),
    db: Session = Depends(get_db)
):
    return crud.get_disposed_inventory(db, params)
