# app/router/requests/request_approvals_router.py
from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from shared.core.database import get_warehouse_db as get_db
from shared.core.schemas import UserToken
from shared.core.auth import validate_current_token
from ...enum.request_enum import ApprovalAction
from ...schemas.requests.requests_schemas import ApprovalDecision, RequestApprovalOut
from ...crud.requests import requests_crud as crud

router = APIRouter(prefix="/api", tags=["request approvals"],
                   dependencies=[Depends(validate_current_token)])


@router.get("/request-approvals/{request_id}", response_model=List[RequestApprovalOut])
def read_request_approvals(
    request_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_request_approvals(db, request_id, current_user)


@router.get("/pending-approvals", response_model=List[RequestApprovalOut])
def read_pending_approvals(
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_pending_approvals(db, current_user)


@router.post("/request-approvals/{approval_id}/approve", response_model=RequestApprovalOut)
def approve(
    approval_id: UUID,
    payload: Optional[ApprovalDecision] = None,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.act_on_approval(db, approval_id, ApprovalAction.APPROVE, current_user,
                                payload.comments if payload else None)


@router.post("/request-approvals/{approval_id}/reject", response_model=RequestApprovalOut)
def reject(
    approval_id: UUID,
    payload: Optional[ApprovalDecision] = None,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.act_on_approval(db, approval_id, ApprovalAction.REJECT, current_user,
                                payload.comments if payload else None)


@router.patch("/approvals/{approval_id}/{action}", response_model=RequestApprovalOut)
def act_on_approval(
    approval_id: UUID,
    action: ApprovalAction,
    payload: Optional[ApprovalDecision] = None,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.act_on_approval(db, approval_id, action, current_user,
                                payload.comments if payload else None)
