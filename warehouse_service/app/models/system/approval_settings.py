# app/models/system/approval_settings.py
import uuid
from sqlalchemy import Boolean, Column, DateTime, Numeric, String, func
from sqlalchemy.dialects.postgresql import UUID
from shared.core.database import Base


class ApprovalSettings(Base):
    __tablename__ = "approval_settings"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    request_type = Column(String(32), default="issue", nullable=False)
    min_approval_level = Column(String(16), default="manager", nullable=False)
    max_amount = Column(Numeric(12, 2), nullable=True)
    requires_second_approval = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True),
                        server_default=func.now(), onupdate=func.now())
