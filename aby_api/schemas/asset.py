"""Asset and Asset Requisition Schemas"""

from pydantic import Field
from typing import Optional, List
from datetime import datetime, date
from decimal import Decimal

from aby_api.models.asset import AssetStatus, AssetRequestStatus, ItemStatus, ProcurementStatus
from .common import InputSchema, ORMSchema
from .hr import EmployeeBrief


class AssetCreate(InputSchema):
    name: str
    category: str
    quantity: int
    description: Optional[str] = None
    location: Optional[str] = None
    purchase_date: Optional[date] = None
    purchase_cost: Optional[Decimal] = None
    status: AssetStatus = AssetStatus.ACTIVE


class AssetUpdate(InputSchema):
    name: Optional[str] = None
    category: Optional[str] = None
    quantity: Optional[int] = None
    description: Optional[str] = None
    location: Optional[str] = None
    purchase_date: Optional[date] = None
    purchase_cost: Optional[Decimal] = None


class AssetStatusUpdate(InputSchema):
    status: AssetStatus


class AssetResponse(ORMSchema):
    id: int
    name: str
    category: str
    description: Optional[str] = None
    asset_img: Optional[str] = None
    location: Optional[str] = None
    quantity: int
    purchase_date: Optional[date] = None
    purchase_cost: Optional[Decimal] = None
    status: AssetStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AssetRequestItemInput(InputSchema):
    asset_id: int
    quantity: int = Field(default=1, ge=1)


class AssetRequestCreate(InputSchema):
    employee_id: int
    description: Optional[str] = None
    items: List[AssetRequestItemInput] = Field(default_factory=list)


class AssetRequestUpdate(InputSchema):
    description: Optional[str] = None
    items: Optional[List[AssetRequestItemInput]] = None


class IssuedItem(InputSchema):
    item_id: int
    issued_quantity: int = Field(ge=0)


class ApproveAssetRequest(InputSchema):
    issued_items: List[IssuedItem] = Field(default_factory=list)


class ProcurementUpdate(InputSchema):
    asset_id: int
    ordered_quantity: int = Field(gt=0)


class AssetRequestItemResponse(ORMSchema):
    id: int
    request_id: int
    asset_id: int
    quantity: int
    quantity_issued: int
    status: ItemStatus
    procurement_status: ProcurementStatus
    asset: Optional[AssetResponse] = None


class AssetRequestResponse(ORMSchema):
    id: int
    employee_id: int
    description: Optional[str] = None
    status: AssetRequestStatus
    employee: Optional[EmployeeBrief] = None
    items: List[AssetRequestItemResponse] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
