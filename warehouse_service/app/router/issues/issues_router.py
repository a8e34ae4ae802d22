# app/router/issues/issues_router.py
from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from shared.core.database import get_warehouse_db as get_db
from shared.core.schemas import UserToken
from shared.core.auth import validate_current_token
from ...schemas.issues.issues_schemas import (
    IssueActivityOut, IssueClose, IssueCreate, IssueOut, IssueStatusUpdate)
from ...crud.issues import issues_crud as crud

router = APIRouter(prefix="/api/issues", tags=["issues"],
                   dependencies=[Depends(validate_current_token)])


@router.get("", response_model=List[IssueOut])
def read_issues(
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_issues(db, current_user)


@router.post("", response_model=IssueOut)
def create_issue(
    payload: IssueCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.create_issue(db, payload, current_user)


@router.get("/{issue_id}", response_model=IssueOut)
def read_issue(
    issue_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_issue(db, issue_id, current_user)


@router.patch("/{issue_id}/status", response_model=IssueOut)
def update_issue_status(
    issue_id: UUID,
    payload: IssueStatusUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.update_issue_status(db, issue_id, payload, current_user)


@router.patch("/{issue_id}/close", response_model=IssueOut)
def close_issue(
    issue_id: UUID,
    payload: IssueClose,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.close_issue(db, issue_id, payload, current_user)


@router.patch("/{issue_id}/reopen", response_model=IssueOut)
def reopen_issue(
    issue_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.reopen_issue(db, issue_id, current_user)


@router.get("/{issue_id}/activities", response_model=List[IssueActivityOut])
def read_issue_activities(
    issue_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_issue_activities(db, issue_id, current_user)


@router.delete("/{issue_id}", response_model=IssueOut)
def delete_issue(
    issue_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.delete_issue(db, issue_id, current_user)
