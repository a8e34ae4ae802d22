# app/models/issues/issues.py
import uuid
from sqlalchemy import Column, DateTime, ForeignKey, String, Text, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from shared.core.database import Base


class Issue(Base):
    __tablename__ = "issues"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(32), default="other", nullable=False)
    priority = Column(String(16), default="medium", nullable=False)
    status = Column(String(16), default="open", nullable=False, index=True)
    reported_by = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False)
    assigned_to = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=True)
    warehouse_id = Column(UUID(as_uuid=True), ForeignKey("warehouses.id"), nullable=True)
    item_id = Column(UUID(as_uuid=True), ForeignKey("items.id"), nullable=True)
    resolution_notes = Column(Text)
    closed_by = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=True)
    closed_at = Column(DateTime(timezone=True), nullable=True)
    reopened_by = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=True)
    reopened_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True),
                        server_default=func.now(), onupdate=func.now())

    reporter = relationship("Users", foreign_keys=[reported_by])
    assignee = relationship("Users", foreign_keys=[assigned_to])
    warehouse = relationship("Warehouse")
    item = relationship("Item")
    activities = relationship("IssueActivity", back_populates="issue",
                              cascade="all, delete-orphan")


class IssueActivity(Base):
    __tablename__ = "issue_activities"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    issue_id = Column(UUID(as_uuid=True), ForeignKey("issues.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False)
    action = Column(String(32), nullable=False)
    previous_value = Column(String(64))
    new_value = Column(String(64))
    comment = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    issue = relationship("Issue", back_populates="activities")
    user = relationship("Users")
