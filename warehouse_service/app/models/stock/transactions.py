# app/models/stock/transactions.py
import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from shared.core.database import Base


def _utcnow():
    return datetime.now(timezone.utc)


class Transaction(Base):
    """Append-only ledger row; one per stock movement."""
    __tablename__ = "transactions"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    transaction_code = Column(String(32), unique=True, nullable=False)
    transaction_type = Column(String(16), nullable=False, index=True)
    item_id = Column(UUID(as_uuid=True), ForeignKey("items.id"), nullable=False)
    quantity = Column(Integer, nullable=False)
    source_warehouse_id = Column(UUID(as_uuid=True), ForeignKey("warehouses.id"), nullable=True)
    destination_warehouse_id = Column(UUID(as_uuid=True), ForeignKey("warehouses.id"), nullable=True)
    request_id = Column(UUID(as_uuid=True), ForeignKey("requests.id"), nullable=True)
    transfer_id = Column(UUID(as_uuid=True), ForeignKey("transfers.id"), nullable=True)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False)
    requester_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=True)
    status = Column(String(16), default="completed", nullable=False)

    # purchase details, check-in only
    cost = Column(Numeric(12, 2), nullable=True)
    supplier_name = Column(String(200))
    po_number = Column(String(64))
    delivery_challan_number = Column(String(64))
    check_in_date = Column(Date)

    # python side default keeps sub-second ordering for valuation
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)

    item = relationship("Item")
    source_warehouse = relationship("Warehouse", foreign_keys=[source_warehouse_id])
    destination_warehouse = relationship("Warehouse", foreign_keys=[destination_warehouse_id])
    user = relationship("Users", foreign_keys=[user_id])
