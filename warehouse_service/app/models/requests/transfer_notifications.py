# app/models/requests/transfer_notifications.py
import uuid
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from shared.core.database import Base


class TransferNotification(Base):
    """Raised when a request cannot be covered by its own warehouse."""
    __tablename__ = "transfer_notifications"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    request_id = Column(UUID(as_uuid=True), ForeignKey("requests.id"), nullable=False)
    warehouse_id = Column(UUID(as_uuid=True), ForeignKey("warehouses.id"), nullable=False)
    item_id = Column(UUID(as_uuid=True), ForeignKey("items.id"), nullable=False)
    required_quantity = Column(Integer, nullable=False)
    available_quantity = Column(Integer, nullable=False)
    status = Column(String(16), default="pending", nullable=False)
    notified_user_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=True)
    transfer_id = Column(UUID(as_uuid=True), ForeignKey("transfers.id"), nullable=True)
    notes = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    resolved_at = Column(DateTime(timezone=True))

    request = relationship("Request")
    warehouse = relationship("Warehouse")
    item = relationship("Item")
