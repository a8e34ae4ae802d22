# app/router/transfers/rejected_goods_router.py
from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from shared.core.database import get_warehouse_db as get_db
from shared.core.schemas import UserToken
from shared.core.auth import validate_current_token
from ...schemas.transfers.transfers_schemas import RejectedGoodsOut, RejectedGoodsUpdate
from ...crud.transfers import rejected_goods_crud as crud

router = APIRouter(prefix="/api/rejected-goods", tags=["rejected goods"],
                   dependencies=[Depends(validate_current_token)])


@router.get("", response_model=List[RejectedGoodsOut])
def read_rejected_goods(db: Session = Depends(get_db)):
    return crud.get_rejected_goods(db)


@router.get("/warehouse/{warehouse_id}", response_model=List[RejectedGoodsOut])
def read_rejected_goods_by_warehouse(warehouse_id: UUID, db: Session = Depends(get_db)):
    return crud.get_rejected_goods(db, warehouse_id=warehouse_id)


@router.patch("/{rejected_id}", response_model=RejectedGoodsOut)
def update_rejected_goods(
    rejected_id: UUID,
    payload: RejectedGoodsUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.update_rejected_goods(db, rejected_id, payload, current_user)
