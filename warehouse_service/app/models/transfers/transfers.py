# app/models/transfers/transfers.py
import uuid
from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from shared.core.database import Base


class Transfer(Base):
    __tablename__ = "transfers"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    transfer_code = Column(String(32), unique=True, nullable=False)
    source_warehouse_id = Column(UUID(as_uuid=True), ForeignKey("warehouses.id"), nullable=False)
    destination_warehouse_id = Column(UUID(as_uuid=True), ForeignKey("warehouses.id"), nullable=True)
    initiated_by = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False)
    approved_by = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=True)
    status = Column(String(32), default="pending", nullable=False, index=True)
    transfer_mode = Column(String(16), default="courier", nullable=False)

    expected_shipment_date = Column(DateTime(timezone=True))
    expected_arrival_date = Column(DateTime(timezone=True))
    actual_shipment_date = Column(DateTime(timezone=True))
    actual_arrival_date = Column(DateTime(timezone=True))

    # source side dispatch details
    courier_name = Column(String(128))
    tracking_number = Column(String(128))
    receipt_number = Column(String(128))
    handover_person_name = Column(String(128))
    handover_person_contact = Column(String(64))
    handover_date = Column(DateTime(timezone=True))
    transport_notes = Column(Text)

    # destination side receipt details
    received_by = Column(String(128))
    received_date = Column(DateTime(timezone=True))
    receiver_notes = Column(Text)
    overall_condition = Column(String(16))

    rejection_reason = Column(Text)
    rejected_by = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=True)
    rejected_date = Column(DateTime(timezone=True))

    return_reason = Column(Text)
    return_courier_name = Column(String(128))
    return_tracking_number = Column(String(128))
    return_shipped_date = Column(DateTime(timezone=True))
    return_delivered_date = Column(DateTime(timezone=True))

    disposal_reason = Column(Text)
    disposal_date = Column(DateTime(timezone=True))

    notes = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True),
                        server_default=func.now(), onupdate=func.now())

    items = relationship("TransferItem", back_populates="transfer",
                         cascade="all, delete-orphan")
    updates = relationship("TransferUpdate", back_populates="transfer",
                           cascade="all, delete-orphan",
                           order_by="TransferUpdate.created_at")
    source_warehouse = relationship("Warehouse", foreign_keys=[source_warehouse_id])
    destination_warehouse = relationship("Warehouse", foreign_keys=[destination_warehouse_id])


class TransferItem(Base):
    __tablename__ = "transfer_items"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    transfer_id = Column(UUID(as_uuid=True), ForeignKey("transfers.id", ondelete="CASCADE"), nullable=False)
    item_id = Column(UUID(as_uuid=True), ForeignKey("items.id"), nullable=False)
    requested_quantity = Column(Integer, nullable=False)
    approved_quantity = Column(Integer)
    actual_quantity = Column(Integer)
    condition = Column(String(16), default="good")
    notes = Column(Text)

    transfer = relationship("Transfer", back_populates="items")
    item = relationship("Item")

    @property
    def shipped_quantity(self) -> int:
        """Quantity that leaves the source warehouse."""
        return self.approved_quantity if self.approved_quantity is not None else self.requested_quantity

    @property
    def received_quantity(self) -> int:
        """Quantity that lands at the destination warehouse."""
        if self.actual_quantity is not None:
            return self.actual_quantity
        return self.shipped_quantity


class TransferUpdate(Base):
    __tablename__ = "transfer_updates"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    transfer_id = Column(UUID(as_uuid=True), ForeignKey("transfers.id", ondelete="CASCADE"), nullable=False)
    updated_by = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False)
    status = Column(String(32), nullable=False)
    update_type = Column(String(32), default="status_change", nullable=False)
    description = Column(Text)
    # "metadata" is reserved on declarative classes
    details = Column("metadata", JSON)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    transfer = relationship("Transfer", back_populates="updates")
