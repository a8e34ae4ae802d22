# app/router/stock/transactions_router.py
from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from shared.core.database import get_warehouse_db as get_db
from shared.core.schemas import UserToken
from shared.core.auth import allow_manager, validate_current_token
from ...schemas.stock.transactions_schemas import (
    TransactionCreate, TransactionOut, TransactionStatusUpdate)
from ...crud.stock import transactions_crud as crud

router = APIRouter(prefix="/api/transactions", tags=["transactions"],
                   dependencies=[Depends(validate_current_token)])


@router.get("", response_model=List[TransactionOut])
def read_transactions(db: Session = Depends(get_db)):
    return crud.get_transactions(db)


@router.get("/type/{transaction_type}", response_model=List[TransactionOut])
def read_transactions_by_type(transaction_type: str, db: Session = Depends(get_db)):
    return crud.get_transactions_by_type(db, transaction_type)


@router.get("/warehouse/{warehouse_id}", response_model=List[TransactionOut])
def read_transactions_by_warehouse(warehouse_id: UUID, db: Session = Depends(get_db)):
    return crud.get_transactions_by_warehouse(db, warehouse_id)


@router.post("", response_model=TransactionOut)
def create_transaction(
    payload: TransactionCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.create_transaction(db, payload, current_user)


@router.patch("/{transaction_id}/status", response_model=TransactionOut)
def update_transaction_status(
    transaction_id: UUID,
    payload: TransactionStatusUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_manager)
):
    return crud.update_transaction_status(db, transaction_id, payload.status, current_user)
