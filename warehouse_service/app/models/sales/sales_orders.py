# app/models/sales/sales_orders.py
import uuid
from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, Text, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from shared.core.database import Base


class SalesOrder(Base):
    __tablename__ = "sales_orders"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    order_code = Column(String(32), unique=True, nullable=False)
    client_id = Column(UUID(as_uuid=True), ForeignKey("clients.id"), nullable=False)
    warehouse_id = Column(UUID(as_uuid=True), ForeignKey("warehouses.id"), nullable=False)
    order_date = Column(DateTime(timezone=True), server_default=func.now())
    status = Column(String(32), default="draft", nullable=False, index=True)
    currency = Column(String(8), default="USD", nullable=False)
    shipping_address = Column(Text)
    subtotal = Column(Numeric(14, 2), default=0, nullable=False)
    tax_amount = Column(Numeric(14, 2), default=0, nullable=False)
    total_amount = Column(Numeric(14, 2), default=0, nullable=False)
    notes = Column(Text)
    created_by = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False)
    approved_by = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=True)
    approved_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True),
                        server_default=func.now(), onupdate=func.now())

    client = relationship("Client")
    warehouse = relationship("Warehouse")
    items = relationship("SalesOrderItem", back_populates="sales_order",
                         cascade="all, delete-orphan")
    approvals = relationship("SalesOrderApproval", back_populates="sales_order",
                             cascade="all, delete-orphan")
    dispatches = relationship("SalesOrderDispatch", back_populates="sales_order",
                              cascade="all, delete-orphan")


class SalesOrderItem(Base):
    __tablename__ = "sales_order_items"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    sales_order_id = Column(UUID(as_uuid=True), ForeignKey("sales_orders.id", ondelete="CASCADE"), nullable=False)
    item_id = Column(UUID(as_uuid=True), ForeignKey("items.id"), nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(12, 2), nullable=False)
    tax_percent = Column(Numeric(5, 2), default=0, nullable=False)
    tax_amount = Column(Numeric(14, 2), default=0, nullable=False)
    line_total = Column(Numeric(14, 2), default=0, nullable=False)
    dispatched_quantity = Column(Integer, default=0, nullable=False)

    sales_order = relationship("SalesOrder", back_populates="items")
    item = relationship("Item")

    @property
    def remaining_quantity(self) -> int:
        return self.quantity - (self.dispatched_quantity or 0)


class SalesOrderApproval(Base):
    __tablename__ = "sales_order_approvals"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    sales_order_id = Column(UUID(as_uuid=True), ForeignKey("sales_orders.id", ondelete="CASCADE"), nullable=False)
    approver_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False)
    status = Column(String(16), default="pending", nullable=False)
    comments = Column(Text)
    approved_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    sales_order = relationship("SalesOrder", back_populates="approvals")


class SalesOrderDispatch(Base):
    __tablename__ = "sales_order_dispatches"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    dispatch_code = Column(String(32), unique=True, nullable=False)
    sales_order_id = Column(UUID(as_uuid=True), ForeignKey("sales_orders.id", ondelete="CASCADE"), nullable=False)
    courier_name = Column(String(128))
    tracking_number = Column(String(128))
    vehicle_number = Column(String(32))
    driver_name = Column(String(128))
    driver_contact = Column(String(32))
    dispatch_date = Column(DateTime(timezone=True), server_default=func.now())
    delivered_at = Column(DateTime(timezone=True))
    status = Column(String(16), default="dispatched", nullable=False)
    notes = Column(Text)
    dispatched_by = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False)

    sales_order = relationship("SalesOrder", back_populates="dispatches")
    items = relationship("SalesOrderDispatchItem", back_populates="dispatch",
                         cascade="all, delete-orphan")


class SalesOrderDispatchItem(Base):
    __tablename__ = "sales_order_dispatch_items"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    dispatch_id = Column(UUID(as_uuid=True), ForeignKey("sales_order_dispatches.id", ondelete="CASCADE"), nullable=False)
    sales_order_item_id = Column(UUID(as_uuid=True), ForeignKey("sales_order_items.id"), nullable=False)
    item_id = Column(UUID(as_uuid=True), ForeignKey("items.id"), nullable=False)
    quantity = Column(Integer, nullable=False)

    dispatch = relationship("SalesOrderDispatch", back_populates="items")
    item = relationship("Item")
