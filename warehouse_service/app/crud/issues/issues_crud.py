# app/crud/issues/issues_crud.py
import logging
from datetime import datetime, timezone
from typing import List
from uuid import UUID
from sqlalchemy import or_, select
from sqlalchemy.orm import Session, joinedload

from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import error_response, forbidden, not_found
from shared.utils.app_status_code import AppStatusCode
from ...enum.issue_enum import IssueAction, IssueStatus
from ...helpers.access_helper import manages_warehouse
from ...models.issues.issues import Issue, IssueActivity
from ...models.masters.warehouses import Warehouse
from ...schemas.issues.issues_schemas import (
    IssueActivityOut, IssueClose, IssueCreate, IssueOut, IssueStatusUpdate)
from ..masters.items_crud import get_item_or_404
from ..masters.users_crud import get_user_or_404
from ..masters.warehouses_crud import get_warehouse_or_404

logger = logging.getLogger(__name__)


def _now():
    return datetime.now(timezone.utc)


def _issue_query(db: Session):
    return db.query(Issue).options(
        joinedload(Issue.reporter),
        joinedload(Issue.assignee),
        joinedload(Issue.warehouse),
        joinedload(Issue.item),
    )


def to_issue_out(issue: Issue) -> IssueOut:
    return IssueOut(
        id=issue.id,
        title=issue.title,
        description=issue.description,
        category=issue.category,
        priority=issue.priority,
        status=issue.status,
        reported_by=issue.reported_by,
        reporter_name=issue.reporter.name if issue.reporter else None,
        assigned_to=issue.assigned_to,
        assignee_name=issue.assignee.name if issue.assignee else None,
        warehouse_id=issue.warehouse_id,
        warehouse_name=issue.warehouse.name if issue.warehouse else None,
        item_id=issue.item_id,
        item_name=issue.item.name if issue.item else None,
        resolution_notes=issue.resolution_notes,
        closed_by=issue.closed_by,
        closed_at=issue.closed_at,
        reopened_by=issue.reopened_by,
        reopened_at=issue.reopened_at,
        created_at=issue.created_at,
        updated_at=issue.updated_at,
    )


def _can_access(db: Session, issue: Issue, current_user: UserToken) -> bool:
    """Admins, the reporter, the assignee and staff of the issue's warehouse."""
    if current_user.is_admin:
        return True
    if current_user.user_id in (issue.reported_by, issue.assigned_to):
        return True
    return issue.warehouse_id is not None and manages_warehouse(
        db, current_user, issue.warehouse_id, issue.warehouse)


def _log_activity(db: Session, issue: Issue, user_id: UUID, action: IssueAction,
                  previous_value: str = None, new_value: str = None, comment: str = None):
    # explicit timestamp keeps activities ordered within the same second
    db.add(IssueActivity(
        issue_id=issue.id,
        user_id=user_id,
        action=action.value,
        previous_value=previous_value,
        new_value=new_value,
        comment=comment,
        created_at=_now(),
    ))


# ---------------- Read ----------------

def get_issues(db: Session, current_user: UserToken) -> List[IssueOut]:
    query = _issue_query(db)
    if not current_user.is_admin:
        managed = select(Warehouse.id).where(Warehouse.manager_id == current_user.user_id)
        conditions = [
            Issue.reported_by == current_user.user_id,
            Issue.assigned_to == current_user.user_id,
            Issue.warehouse_id.in_(managed),
        ]
        if current_user.warehouse_id:
            conditions.append(Issue.warehouse_id == current_user.warehouse_id)
        query = query.filter(or_(*conditions))

    rows = query.order_by(Issue.created_at.desc()).all()
    return [to_issue_out(i) for i in rows]


def get_issue_or_404(db: Session, issue_id: UUID) -> Issue:
    issue = _issue_query(db).filter(Issue.id == issue_id).first()
    if not issue:
        return not_found("Issue")
    return issue


def _accessible_issue(db: Session, issue_id: UUID, current_user: UserToken) -> Issue:
    issue = get_issue_or_404(db, issue_id)
    if not _can_access(db, issue, current_user):
        return forbidden("Not authorized to access this issue")
    return issue


def get_issue(db: Session, issue_id: UUID, current_user: UserToken) -> IssueOut:
    return to_issue_out(_accessible_issue(db, issue_id, current_user))


def get_issue_activities(db: Session, issue_id: UUID, current_user: UserToken) -> List[IssueActivityOut]:
    issue = get_issue_or_404(db, issue_id)
    if not _can_access(db, issue, current_user):
        return forbidden("Not authorized to view issue activities")

    rows = (
        db.query(IssueActivity)
        .options(joinedload(IssueActivity.user))
        .filter(IssueActivity.issue_id == issue.id)
        .order_by(IssueActivity.created_at.asc())
        .all()
    )
    return [
        IssueActivityOut(
            id=a.id,
            issue_id=a.issue_id,
            user_id=a.user_id,
            user_name=a.user.name if a.user else None,
            action=a.action,
            previous_value=a.previous_value,
            new_value=a.new_value,
            comment=a.comment,
            created_at=a.created_at,
        )
        for a in rows
    ]


# ---------------- Mutations ----------------

def create_issue(db: Session, payload: IssueCreate, current_user: UserToken) -> IssueOut:
    if payload.warehouse_id:
        get_warehouse_or_404(db, payload.warehouse_id)
    if payload.item_id:
        get_item_or_404(db, payload.item_id)
    if payload.assigned_to:
        get_user_or_404(db, payload.assigned_to)

    issue = Issue(
        title=payload.title.strip(),
        description=payload.description.strip(),
        category=payload.category.value,
        priority=payload.priority.value,
        status=IssueStatus.OPEN.value,
        reported_by=current_user.user_id,
        assigned_to=payload.assigned_to,
        warehouse_id=payload.warehouse_id,
        item_id=payload.item_id,
    )
    db.add(issue)
    db.flush()
    _log_activity(db, issue, current_user.user_id, IssueAction.CREATED,
                  new_value=issue.status)
    db.commit()

    logger.info("Issue %s reported by %s (%s/%s)", issue.id, current_user.user_id,
                issue.category, issue.priority)
    return to_issue_out(get_issue_or_404(db, issue.id))


def update_issue_status(db: Session, issue_id: UUID, payload: IssueStatusUpdate,
                        current_user: UserToken) -> IssueOut:
    issue = _accessible_issue(db, issue_id, current_user)
    status = payload.status.value

    if status == IssueStatus.CLOSED.value:
        return error_response(
            message="Use the close action so resolution notes are recorded",
            status_code=AppStatusCode.INVALID_STATUS_TRANSITION
        )
    if issue.status == IssueStatus.CLOSED.value:
        return error_response(
            message="Closed issues must be reopened first",
            status_code=AppStatusCode.INVALID_STATUS_TRANSITION
        )

    previous = issue.status
    if previous != status:
        issue.status = status
        _log_activity(db, issue, current_user.user_id, IssueAction.STATUS_CHANGED,
                      previous_value=previous, new_value=status, comment=payload.comment)
        db.commit()
        logger.info("Issue %s moved %s -> %s by %s", issue.id, previous, status, current_user.user_id)

    return to_issue_out(get_issue_or_404(db, issue.id))


def close_issue(db: Session, issue_id: UUID, payload: IssueClose, current_user: UserToken) -> IssueOut:
    notes = (payload.resolution_notes or "").strip()
    if not notes:
        return error_response(
            message="Resolution comments are required when closing an issue",
            status_code=AppStatusCode.REQUIRED_VALIDATION_ERROR
        )

    issue = _accessible_issue(db, issue_id, current_user)
    if issue.status == IssueStatus.CLOSED.value:
        return error_response(
            message="Issue is already closed",
            status_code=AppStatusCode.INVALID_STATUS_TRANSITION
        )

    previous = issue.status
    issue.status = IssueStatus.CLOSED.value
    issue.resolution_notes = notes
    issue.closed_by = current_user.user_id
    issue.closed_at = _now()
    _log_activity(db, issue, current_user.user_id, IssueAction.CLOSED,
                  previous_value=previous, new_value=issue.status, comment=notes)
    db.commit()

    logger.info("Issue %s closed by %s", issue.id, current_user.user_id)
    return to_issue_out(get_issue_or_404(db, issue.id))


def reopen_issue(db: Session, issue_id: UUID, current_user: UserToken) -> IssueOut:
    issue = get_issue_or_404(db, issue_id)
    if issue.reported_by != current_user.user_id:
        return forbidden("Only the reporter can reopen this issue")
    if issue.status != IssueStatus.CLOSED.value:
        return error_response(
            message="Issue is not closed",
            status_code=AppStatusCode.INVALID_STATUS_TRANSITION
        )

    issue.status = IssueStatus.OPEN.value
    issue.reopened_by = current_user.user_id
    issue.reopened_at = _now()
    issue.closed_by = None
    issue.closed_at = None
    _log_activity(db, issue, current_user.user_id, IssueAction.REOPENED,
                  previous_value=IssueStatus.CLOSED.value, new_value=issue.status)
    db.commit()

    logger.info("Issue %s reopened by %s", issue.id, current_user.user_id)
    return to_issue_out(get_issue_or_404(db, issue.id))


def delete_issue(db: Session, issue_id: UUID, current_user: UserToken) -> IssueOut:
    if not current_user.is_admin:
        return forbidden("Only administrators can delete issues")

    issue = get_issue_or_404(db, issue_id)
    if issue.status != IssueStatus.CLOSED.value:
        return error_response(
            message="Only closed issues can be deleted",
            status_code=AppStatusCode.INVALID_STATUS_TRANSITION
        )

    out = to_issue_out(issue)
    db.delete(issue)
    db.commit()
    logger.info("Issue %s deleted by %s", issue_id, current_user.user_id)
    return out
