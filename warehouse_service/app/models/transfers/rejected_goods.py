# app/models/transfers/rejected_goods.py
import uuid
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from shared.core.database import Base


class RejectedGoods(Base):
    __tablename__ = "rejected_goods"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    transfer_id = Column(UUID(as_uuid=True), ForeignKey("transfers.id"), nullable=False)
    item_id = Column(UUID(as_uuid=True), ForeignKey("items.id"), nullable=False)
    quantity = Column(Integer, nullable=False)
    rejection_reason = Column(Text, nullable=False)
    rejected_by = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False)
    warehouse_id = Column(UUID(as_uuid=True), ForeignKey("warehouses.id"), nullable=False)
    status = Column(String(16), default="rejected", nullable=False)
    notes = Column(Text)
    rejected_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True),
                        server_default=func.now(), onupdate=func.now())

    transfer = relationship("Transfer")
    item = relationship("Item")
    warehouse = relationship("Warehouse")
