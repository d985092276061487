"""
Asset Models
Company assets and employee asset requisitions
"""
import enum

from sqlalchemy import Column, String, Integer, Numeric, Date, Text, ForeignKey
from sqlalchemy.orm import relationship

from aby_api.core.database import Base, TimestampMixin


class AssetStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    MAINTENANCE = "MAINTENANCE"
    DISPOSED = "DISPOSED"


class AssetRequestStatus(str, enum.Enum):
    PENDING = "PENDING"
    PARTIALLY_ISSUED = "PARTIALLY_ISSUED"
    ISSUED = "ISSUED"
    REJECTED = "REJECTED"


class ItemStatus(str, enum.Enum):
    PENDING = "PENDING"
    PARTIALLY_ISSUED = "PARTIALLY_ISSUED"
    ISSUED = "ISSUED"
    REJECTED = "REJECTED"


class ProcurementStatus(str, enum.Enum):
    NOT_REQUIRED = "NOT_REQUIRED"
    REQUIRED = "REQUIRED"
    PROCURED = "PROCURED"


class Asset(TimestampMixin, Base):
    __tablename__ = "assets"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(150), nullable=False)
    category = Column(String(80), nullable=False)
    description = Column(Text)
    asset_img = Column(String(255))
    location = Column(String(150))
    quantity = Column(Integer, default=0, nullable=False)
    purchase_date = Column(Date)
    purchase_cost = Column(Numeric(14, 2))
    status = Column(String(20), default=AssetStatus.ACTIVE.value, nullable=False)


class AssetRequest(TimestampMixin, Base):
    __tablename__ = "asset_requests"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False)
    description = Column(Text)
    status = Column(String(20), default=AssetRequestStatus.PENDING.value, nullable=False)

    employee = relationship("Employee")
    items = relationship(
        "AssetRequestItem",
        back_populates="request",
        cascade="all, delete-orphan",
        order_by="AssetRequestItem.id",
    )


class AssetRequestItem(Base):
    __tablename__ = "asset_request_items"

    id = Column(Integer, primary_key=True, index=True)
    request_id = Column(Integer, ForeignKey("asset_requests.id", ondelete="CASCADE"), nullable=False)
    asset_id = Column(Integer, ForeignKey("assets.id"), nullable=False)
    quantity = Column(Integer, default=1, nullable=False)
    quantity_issued = Column(Integer, default=0, nullable=False)
    status = Column(String(20), default=ItemStatus.PENDING.value, nullable=False)
    procurement_status = Column(String(20), default=ProcurementStatus.NOT_REQUIRED.value, nullable=False)

    request = relationship("AssetRequest", back_populates="items")
    asset = relationship("Asset")

    @property
    def quantity_outstanding(self) -> int:
        return max(self.quantity - (self.quantity_issued or 0), 0)
