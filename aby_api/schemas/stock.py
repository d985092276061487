"""Stock and Requisition Schemas"""

from pydantic import Field
from typing import Optional, List
from datetime import datetime
from decimal import Decimal

from aby_api.models.stock import MovementType, SourceType, RequestStatus
from .common import InputSchema, ORMSchema, PaginationMeta
from .organization import SiteBrief, StoreBrief


# Category Schemas
class StockCategoryCreate(InputSchema):
    name: str
    description: Optional[str] = None


class StockCategoryUpdate(InputSchema):
    name: Optional[str] = None
    description: Optional[str] = None


class StockCategoryResponse(ORMSchema):
    id: int
    name: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# Stock-in Schemas
class StockInCreate(InputSchema):
    product_name: str
    sku: Optional[str] = None
    quantity: Decimal = Decimal("0")
    unit: str
    unit_price: Decimal = Decimal("0")
    reorder_level: Decimal = Decimal("0")
    supplier: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None
    stock_category_id: int
    store_id: int


class StockInUpdate(InputSchema):
    product_name: Optional[str] = None
    quantity: Optional[Decimal] = None
    unit: Optional[str] = None
    unit_price: Optional[Decimal] = None
    reorder_level: Optional[Decimal] = None
    supplier: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None
    stock_category_id: Optional[int] = None
    store_id: Optional[int] = None


class StockInBrief(ORMSchema):
    id: int
    product_name: str
    sku: str
    unit: str
    quantity: Decimal
    unit_price: Decimal


class StockInResponse(StockInBrief):
    reorder_level: Decimal
    supplier: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None
    stock_category_id: int
    store_id: int
    total_value: Decimal
    category: Optional[StockCategoryResponse] = None
    store: Optional[StoreBrief] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class StockHistoryResponse(ORMSchema):
    id: int
    stock_in_id: int
    movement_type: MovementType
    source_type: SourceType
    source_id: Optional[int] = None
    qty_before: Decimal
    qty_change: Decimal
    qty_after: Decimal
    unit_price: Optional[Decimal] = None
    notes: Optional[str] = None
    created_by_admin_id: Optional[int] = None
    created_by_employee_id: Optional[int] = None
    created_at: datetime
    stock_in: Optional[StockInBrief] = None


# Requisition Schemas
class RequestItemInput(InputSchema):
    stock_in_id: int
    qty_requested: Decimal
    notes: Optional[str] = None


class StockRequestCreate(InputSchema):
    site_id: int
    notes: Optional[str] = None
    items: List[RequestItemInput] = Field(default_factory=list)


class StockRequestUpdate(InputSchema):
    site_id: Optional[int] = None
    notes: Optional[str] = None
    items: Optional[List[RequestItemInput]] = None


class ItemModification(InputSchema):
    item_id: int
    stock_in_id: Optional[int] = None
    qty_requested: Optional[Decimal] = None
    qty_approved: Optional[Decimal] = None


class NewRequestItem(InputSchema):
    stock_in_id: int
    qty_requested: Decimal
    qty_approved: Optional[Decimal] = None


class ApproveRequest(InputSchema):
    item_modifications: List[ItemModification] = Field(default_factory=list)
    items_to_add: List[NewRequestItem] = Field(default_factory=list)
    items_to_remove: List[int] = Field(default_factory=list)
    comment: Optional[str] = None


class ModifyApproveRequest(ApproveRequest):
    notes: Optional[str] = None


class RejectRequest(InputSchema):
    notes: Optional[str] = None


class IssueLine(InputSchema):
    request_item_id: int
    qty_issued: Decimal
    notes: Optional[str] = None


class IssueMaterials(InputSchema):
    request_id: int
    items: List[IssueLine] = Field(default_factory=list)


class ReceiveLine(InputSchema):
    request_item_id: int
    qty_received: Decimal


class ReceiveMaterials(InputSchema):
    request_id: int
    items: List[ReceiveLine] = Field(default_factory=list)


class CommentCreate(InputSchema):
    description: str


class RequestItemResponse(ORMSchema):
    id: int
    stock_in_id: int
    qty_requested: Decimal
    qty_approved: Optional[Decimal] = None
    qty_issued: Decimal
    qty_received: Decimal
    qty_remaining: Decimal
    notes: Optional[str] = None
    stock_in: Optional[StockInBrief] = None


class AttachmentResponse(ORMSchema):
    id: int
    file_url: str
    description: Optional[str] = None
    uploaded_by_role: Optional[str] = None
    uploaded_by_id: Optional[int] = None
    created_at: datetime


class CommentResponse(ORMSchema):
    id: int
    description: str
    author_role: Optional[str] = None
    author_id: Optional[int] = None
    created_at: datetime


class StockRequestResponse(ORMSchema):
    id: int
    ref_no: str
    site_id: int
    status: RequestStatus
    notes: Optional[str] = None
    requested_by_admin_id: Optional[int] = None
    requested_by_employee_id: Optional[int] = None
    approved_by_admin_id: Optional[int] = None
    approved_by_employee_id: Optional[int] = None
    issued_by_admin_id: Optional[int] = None
    issued_by_employee_id: Optional[int] = None
    received_by_admin_id: Optional[int] = None
    received_by_employee_id: Optional[int] = None
    closed_by_admin_id: Optional[int] = None
    closed_by_employee_id: Optional[int] = None
    rejected_by_admin_id: Optional[int] = None
    rejected_by_employee_id: Optional[int] = None
    approved_at: Optional[datetime] = None
    issued_at: Optional[datetime] = None
    received_at: Optional[datetime] = None
    closed_at: Optional[datetime] = None
    rejected_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    site: Optional[SiteBrief] = None
    items: List[RequestItemResponse] = Field(default_factory=list)
    attachments: List[AttachmentResponse] = Field(default_factory=list)
    comments: List[CommentResponse] = Field(default_factory=list)


class StockRequestPage(ORMSchema):
    requests: List[StockRequestResponse]
    pagination: PaginationMeta
