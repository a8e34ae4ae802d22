from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, Field

from ...enum.issue_enum import IssueCategory, IssuePriority, IssueStatus


class IssueCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=1000)
    category: IssueCategory = IssueCategory.OTHER
    priority: IssuePriority = IssuePriority.MEDIUM
    warehouse_id: Optional[UUID] = None
    item_id: Optional[UUID] = None
    assigned_to: Optional[UUID] = None


class IssueStatusUpdate(BaseModel):
    status: IssueStatus
    comment: Optional[str] = None


class IssueClose(BaseModel):
    resolution_notes: Optional[str] = None


class IssueOut(BaseModel):
    id: UUID
    title: str
    description: str
    category: str
    priority: str
    status: str
    reported_by: UUID
    reporter_name: Optional[str] = None
    assigned_to: Optional[UUID] = None
    assignee_name: Optional[str] = None
    warehouse_id: Optional[UUID] = None
    warehouse_name: Optional[str] = None
    item_id: Optional[UUID] = None
    item_name: Optional[str] = None
    resolution_notes: Optional[str] = None
    closed_by: Optional[UUID] = None
    closed_at: Optional[datetime] = None
    reopened_by: Optional[UUID] = None
    reopened_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class IssueActivityOut(BaseModel):
    id: UUID
    issue_id: UUID
    user_id: UUID
    user_name: Optional[str] = None
    action: str
    previous_value: Optional[str] = None
    new_value: Optional[str] = None
    comment: Optional[str] = None
    created_at: Optional[datetime] = None
