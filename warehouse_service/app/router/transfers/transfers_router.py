# app/router/transfers/transfers_router.py
from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from shared.core.database import get_warehouse_db as get_db
from shared.core.schemas import UserToken
from shared.core.auth import allow_admin, validate_current_token
from ...enum.transfer_enum import TransferStatus
from ...schemas.transfers.transfers_schemas import (
    DisposalApproveIn, ReturnApproveIn, ReturnDeliveryIn, ReturnShipmentIn, TransferCreate,
    TransferDetailOut, TransferItemPatch, TransferOut, TransferPatch, TransferRejectIn)
from ...crud.transfers import transfers_crud as crud

router = APIRouter(prefix="/api/transfers", tags=["transfers"],
                   dependencies=[Depends(validate_current_token)])


@router.get("", response_model=List[TransferOut])
def read_transfers(db: Session = Depends(get_db)):
    return crud.get_transfers(db)


@router.get("/status/{status}", response_model=List[TransferOut])
def read_transfers_by_status(status: TransferStatus, db: Session = Depends(get_db)):
    return crud.get_transfers(db, status=status.value)


@router.get("/{transfer_id}", response_model=TransferDetailOut)
def read_transfer(transfer_id: UUID, db: Session = Depends(get_db)):
    return crud.get_transfer(db, transfer_id)


@router.post("", response_model=TransferDetailOut)
def create_transfer(
    payload: TransferCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.create_transfer(db, payload, current_user)


@router.patch("/{transfer_id}", response_model=TransferDetailOut)
def patch_transfer(
    transfer_id: UUID,
    payload: TransferPatch,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.patch_transfer(db, transfer_id, payload, current_user)


@router.patch("/{transfer_id}/items/{item_id}", response_model=TransferDetailOut)
def patch_transfer_item(
    transfer_id: UUID,
    item_id: UUID,
    payload: TransferItemPatch,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.patch_transfer_item(db, transfer_id, item_id, payload, current_user)


@router.post("/{transfer_id}/reject", response_model=TransferDetailOut)
def reject_transfer(
    transfer_id: UUID,
    payload: TransferRejectIn,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.reject_transfer(db, transfer_id, payload.reason, current_user)


@router.post("/{transfer_id}/approve-return", response_model=TransferDetailOut)
def approve_return(
    transfer_id: UUID,
    payload: Optional[ReturnApproveIn] = None,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_admin)
):
    return crud.run_action(db, transfer_id, TransferStatus.RETURN_APPROVED, current_user,
                           reason=payload.reason if payload else None)


@router.post("/{transfer_id}/approve-disposal", response_model=TransferDetailOut)
def approve_disposal(
    transfer_id: UUID,
    payload: DisposalApproveIn,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_admin)
):
    return crud.run_action(db, transfer_id, TransferStatus.DISPOSED, current_user,
                           reason=payload.reason)


@router.post("/{transfer_id}/return-shipment", response_model=TransferDetailOut)
def return_shipment(
    transfer_id: UUID,
    payload: ReturnShipmentIn,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.run_action(db, transfer_id, TransferStatus.RETURN_SHIPPED, current_user,
                           extra=payload.model_dump(exclude_none=True))


@router.post("/{transfer_id}/return-delivery", response_model=TransferDetailOut)
def return_delivery(
    transfer_id: UUID,
    payload: Optional[ReturnDeliveryIn] = None,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    extra = payload.model_dump(exclude_none=True) if payload else {}
    return crud.run_action(db, transfer_id, TransferStatus.RETURNED, current_user,
                           reason=extra.pop("notes", None), extra=extra)
