# app/router/requests/requests_router.py
from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from shared.core.database import get_warehouse_db as get_db
from shared.core.schemas import UserToken
from shared.core.auth import allow_manager, validate_current_token
from ...schemas.requests.requests_schemas import (
    RequestCreate, RequestItemOut, RequestOut, RequestStatusUpdate)
from ...crud.requests import requests_crud as crud

router = APIRouter(prefix="/api/requests", tags=["requests"],
                   dependencies=[Depends(validate_current_token)])


@router.get("", response_model=List[RequestOut])
def read_requests(
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_requests(db, current_user)


@router.get("/status/{status}", response_model=List[RequestOut])
def read_requests_by_status(
    status: str,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_requests_by_status(db, status, current_user)


@router.get("/{request_id}", response_model=RequestOut)
def read_request(
    request_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_request(db, request_id, current_user)


@router.get("/{request_id}/items", response_model=List[RequestItemOut])
def read_request_items(
    request_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_request_items(db, request_id, current_user)


@router.post("", response_model=RequestOut)
def create_request(
    payload: RequestCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.create_request(db, payload, current_user)


@router.patch("/{request_id}/status", response_model=RequestOut)
def update_request_status(
    request_id: UUID,
    payload: RequestStatusUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_manager)
):
    return crud.update_request_status(db, request_id, payload.status, current_user)
