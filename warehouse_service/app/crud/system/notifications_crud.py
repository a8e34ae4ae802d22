# app/crud/system/notifications_crud.py
from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session

from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import not_found
from shared.models.users import Users
from ...enum.sales_enum import NotificationStatus
from ...models.system.notifications import Notification
from ...schemas.system.notifications_schemas import NotificationCreate


def notify(db: Session, recipient_id: UUID, subject: str, message: str,
           sender_id: Optional[UUID] = None, category: str = "general",
           priority: str = "medium", related_entity_type: Optional[str] = None,
           related_entity_id: Optional[UUID] = None) -> Notification:
    """Queue a notification inside the caller's unit of work."""
    notification = Notification(
        sender_id=sender_id,
        recipient_id=recipient_id,
        subject=subject,
        message=message,
        category=category,
        priority=priority,
        related_entity_type=related_entity_type,
        related_entity_id=related_entity_id,
    )
    db.add(notification)
    return notification


def get_notifications(db: Session, current_user: UserToken) -> List[Notification]:
    return (
        db.query(Notification)
        .filter(
            Notification.recipient_id == current_user.user_id,
            Notification.is_archived == False
        )
        .order_by(Notification.created_at.desc())
        .all()
    )


def get_unread_count(db: Session, current_user: UserToken) -> int:
    return (
        db.query(Notification)
        .filter(
            Notification.recipient_id == current_user.user_id,
            Notification.is_archived == False,
            Notification.status == NotificationStatus.UNREAD.value
        )
        .count()
    )


def send_notification(db: Session, payload: NotificationCreate, current_user: UserToken) -> Notification:
    recipient = db.query(Users).filter(
        Users.id == payload.recipient_id, Users.is_deleted == False).first()
    if not recipient:
        return not_found("Recipient")

    notification = notify(
        db,
        recipient_id=recipient.id,
        subject=payload.subject,
        message=payload.message,
        sender_id=current_user.user_id,
        category=payload.category,
        priority=payload.priority.value,
        related_entity_type=payload.related_entity_type,
        related_entity_id=payload.related_entity_id,
    )
    db.commit()
    db.refresh(notification)
    return notification


def _own_notification(db: Session, notification_id: UUID, current_user: UserToken) -> Notification:
    notification = db.query(Notification).filter(
        Notification.id == notification_id,
        Notification.recipient_id == current_user.user_id
    ).first()
    if not notification:
        return not_found("Notification")
    return notification


def mark_read(db: Session, notification_id: UUID, current_user: UserToken) -> Notification:
    notification = _own_notification(db, notification_id, current_user)
    if notification.status != NotificationStatus.READ.value:
        notification.status = NotificationStatus.READ.value
        notification.read_at = datetime.now(timezone.utc)
        db.commit()
        db.refresh(notification)
    return notification


def archive(db: Session, notification_id: UUID, current_user: UserToken) -> Notification:
    notification = _own_notification(db, notification_id, current_user)
    notification.is_archived = True
    db.commit()
    db.refresh(notification)
    return notification
