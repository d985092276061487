"""
Aby Stock Models
SQLAlchemy models for inventory and the site material requisition workflow
"""
import enum

from sqlalchemy import (
    Column, String, Integer, Numeric, DateTime, Text,
    ForeignKey, CheckConstraint, Index
)
from sqlalchemy.orm import relationship

from aby_api.core.database import Base, TimestampMixin

QTY = Numeric(14, 2)


class MovementType(str, enum.Enum):
    IN = "IN"
    OUT = "OUT"
    ADJUSTMENT = "ADJUSTMENT"


class SourceType(str, enum.Enum):
    STOCK_IN = "STOCK_IN"
    ISSUE = "ISSUE"
    RECEIPT = "RECEIPT"
    ADJUSTMENT = "ADJUSTMENT"


class RequestStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    PARTIALLY_ISSUED = "PARTIALLY_ISSUED"
    ISSUED = "ISSUED"
    RECEIVED = "RECEIVED"
    CLOSED = "CLOSED"
    REJECTED = "REJECTED"


class StockCategory(TimestampMixin, Base):
    __tablename__ = "stock_categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(120), nullable=False)
    description = Column(Text)

    stock_items = relationship("StockIn", back_populates="category")


class StockIn(TimestampMixin, Base):
    """
    Stock-in record

    Quantity on hand for one product in one store. Issues against site
    requisitions decrement ``quantity``; every change is journalled in
    StockHistory.
    """
    __tablename__ = "stock_ins"
    __table_args__ = (
        CheckConstraint("quantity >= 0", name="quantity_non_negative"),
        Index("ix_stock_ins_category_store", "stock_category_id", "store_id"),
    )

    id = Column(Integer, primary_key=True, index=True)
    product_name = Column(String(150), nullable=False)
    sku = Column(String(40), unique=True, nullable=False, index=True)
    quantity = Column(QTY, default=0, nullable=False)
    unit = Column(String(20), nullable=False)
    unit_price = Column(QTY, default=0, nullable=False)
    reorder_level = Column(QTY, default=0, nullable=False)
    supplier = Column(String(150))
    location = Column(String(150))
    description = Column(Text)
    stock_category_id = Column(Integer, ForeignKey("stock_categories.id"), nullable=False)
    store_id = Column(Integer, ForeignKey("stores.id"), nullable=False)

    category = relationship("StockCategory", back_populates="stock_items")
    store = relationship("Store", back_populates="stock_items")
    history = relationship("StockHistory", back_populates="stock_in", cascade="all, delete-orphan")

    @property
    def total_value(self):
        return (self.quantity or 0) * (self.unit_price or 0)

    def __repr__(self):
        return f"<StockIn(id={self.id}, sku='{self.sku}', quantity={self.quantity})>"


class StockHistory(Base):
    """Journal of every quantity movement on a stock-in record"""
    __tablename__ = "stock_history"
    __table_args__ = (
        Index("ix_stock_history_source", "source_type", "source_id"),
    )

    id = Column(Integer, primary_key=True, index=True)
    stock_in_id = Column(Integer, ForeignKey("stock_ins.id", ondelete="CASCADE"), nullable=False, index=True)
    movement_type = Column(String(20), nullable=False)
    source_type = Column(String(20), nullable=False)
    source_id = Column(Integer)
    qty_before = Column(QTY, nullable=False)
    qty_change = Column(QTY, nullable=False)
    qty_after = Column(QTY, nullable=False)
    unit_price = Column(QTY)
    notes = Column(Text)
    created_by_admin_id = Column(Integer, ForeignKey("admins.id", ondelete="SET NULL"))
    created_by_employee_id = Column(Integer, ForeignKey("employees.id", ondelete="SET NULL"))
    created_at = Column(DateTime(timezone=True), nullable=False)

    stock_in = relationship("StockIn", back_populates="history")


class StockRequest(TimestampMixin, Base):
    """Site requisition for materials held in stock"""
    __tablename__ = "stock_requests"

    id = Column(Integer, primary_key=True, index=True)
    ref_no = Column(String(20), unique=True, nullable=False, index=True)
    site_id = Column(Integer, ForeignKey("sites.id"), nullable=False)
    status = Column(String(20), default=RequestStatus.PENDING.value, nullable=False, index=True)
    notes = Column(Text)

    requested_by_admin_id = Column(Integer, ForeignKey("admins.id", ondelete="SET NULL"))
    requested_by_employee_id = Column(Integer, ForeignKey("employees.id", ondelete="SET NULL"))
    approved_by_admin_id = Column(Integer, ForeignKey("admins.id", ondelete="SET NULL"))
    approved_by_employee_id = Column(Integer, ForeignKey("employees.id", ondelete="SET NULL"))
    issued_by_admin_id = Column(Integer, ForeignKey("admins.id", ondelete="SET NULL"))
    issued_by_employee_id = Column(Integer, ForeignKey("employees.id", ondelete="SET NULL"))
    received_by_admin_id = Column(Integer, ForeignKey("admins.id", ondelete="SET NULL"))
    received_by_employee_id = Column(Integer, ForeignKey("employees.id", ondelete="SET NULL"))
    closed_by_admin_id = Column(Integer, ForeignKey("admins.id", ondelete="SET NULL"))
    closed_by_employee_id = Column(Integer, ForeignKey("employees.id", ondelete="SET NULL"))
    rejected_by_admin_id = Column(Integer, ForeignKey("admins.id", ondelete="SET NULL"))
    rejected_by_employee_id = Column(Integer, ForeignKey("employees.id", ondelete="SET NULL"))

    approved_at = Column(DateTime(timezone=True))
    issued_at = Column(DateTime(timezone=True))
    received_at = Column(DateTime(timezone=True))
    closed_at = Column(DateTime(timezone=True))
    rejected_at = Column(DateTime(timezone=True))

    site = relationship("Site")
    items = relationship(
        "StockRequestItem",
        back_populates="request",
        cascade="all, delete-orphan",
        order_by="StockRequestItem.id",
    )
    attachments = relationship(
        "RequestAttachment",
        back_populates="request",
        cascade="all, delete-orphan",
        order_by="RequestAttachment.id",
    )
    comments = relationship(
        "RequestComment",
        back_populates="request",
        cascade="all, delete-orphan",
        order_by="RequestComment.id",
    )

    def __repr__(self):
        return f"<StockRequest(ref_no='{self.ref_no}', status='{self.status}')>"


class StockRequestItem(Base):
    """
    Requisition line

    qty_remaining tracks what is still to be issued against qty_approved.
    """
    __tablename__ = "stock_request_items"
    __table_args__ = (
        CheckConstraint("qty_requested > 0", name="qty_requested_positive"),
    )

    id = Column(Integer, primary_key=True, index=True)
    request_id = Column(Integer, ForeignKey("stock_requests.id", ondelete="CASCADE"), nullable=False, index=True)
    stock_in_id = Column(Integer, ForeignKey("stock_ins.id"), nullable=False)
    qty_requested = Column(QTY, nullable=False)
    qty_approved = Column(QTY)
    qty_issued = Column(QTY, default=0, nullable=False)
    qty_received = Column(QTY, default=0, nullable=False)
    qty_remaining = Column(QTY, default=0, nullable=False)
    notes = Column(Text)

    request = relationship("StockRequest", back_populates="items")
    stock_in = relationship("StockIn")


class RequestAttachment(Base):
    __tablename__ = "stock_request_attachments"

    id = Column(Integer, primary_key=True, index=True)
    request_id = Column(Integer, ForeignKey("stock_requests.id", ondelete="CASCADE"), nullable=False)
    file_url = Column(String(255), nullable=False)
    description = Column(Text)
    uploaded_by_role = Column(String(20))
    uploaded_by_id = Column(Integer)
    created_at = Column(DateTime(timezone=True), nullable=False)

    request = relationship("StockRequest", back_populates="attachments")


class RequestComment(Base):
    __tablename__ = "stock_request_comments"

    id = Column(Integer, primary_key=True, index=True)
    request_id = Column(Integer, ForeignKey("stock_requests.id", ondelete="CASCADE"), nullable=False)
    description = Column(Text, nullable=False)
    author_role = Column(String(20))
    author_id = Column(Integer)
    created_at = Column(DateTime(timezone=True), nullable=False)

    request = relationship("StockRequest", back_populates="comments")
