# app/models/system/organization_settings.py
import uuid
from sqlalchemy import Column, DateTime, String, func
from sqlalchemy.dialects.postgresql import UUID
from shared.core.database import Base


class OrganizationSettings(Base):
    __tablename__ = "organization_settings"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    organization_name = Column(String(200), default="My Organization", nullable=False)
    currency = Column(String(8), default="USD", nullable=False)
    currency_symbol = Column(String(8), default="$", nullable=False)
    timezone = Column(String(64), default="UTC", nullable=False)
    inventory_valuation_method = Column(String(32), default="Last Value", nullable=False)
    updated_by = Column(UUID(as_uuid=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True),
                        server_default=func.now(), onupdate=func.now())
