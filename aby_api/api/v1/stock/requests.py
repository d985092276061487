"""
Stock Requisition API endpoints
Site requests for materials: approval, issue from stock and receipt on site
"""

from typing import List, Optional
from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.orm import Session

from aby_api.api import deps
from aby_api.core.exceptions import ValidationError
from aby_api.core.security import Principal
from aby_api.models.stock import RequestStatus, StockRequest
from aby_api.realtime import requisition_gateway
from aby_api.schemas.common import PaginationMeta, SuccessResponse, envelope
from aby_api.schemas.stock import (
    ApproveRequest,
    AttachmentResponse,
    CommentCreate,
    CommentResponse,
    IssueMaterials,
    ModifyApproveRequest,
    ReceiveMaterials,
    RejectRequest,
    RequestItemResponse,
    StockRequestCreate,
    StockRequestResponse,
    StockRequestUpdate,
)
from aby_api.services.file_storage import ATTACHMENT_IMAGES, FileStorage
from aby_api.services.stock import StockRequestService
from aby_api.services.stock.requisition import APPROVER_ROLES

router = APIRouter()

approver = deps.RoleChecker(list(APPROVER_ROLES))


def _serialize(request: StockRequest) -> dict:
    return StockRequestResponse.model_validate(request).model_dump(mode="json")


def _page(requests: List[StockRequest], total: int, page: int, limit: int) -> dict:
    return {
        "requests": [_serialize(r) for r in requests],
        "pagination": PaginationMeta.build(page, limit, total).model_dump(),
    }


@router.post("/", response_model=SuccessResponse, status_code=status.HTTP_201_CREATED)
def create_request(
    request_in: StockRequestCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    """
    Raise a stock requisition for a site.
    """
    request = StockRequestService(db, principal).create_request(request_in)
    payload = _serialize(request)
    background_tasks.add_task(requisition_gateway.emit, "requestCreated", payload)
    return envelope({"request": payload}, "Request created successfully")


@router.get("/", response_model=SuccessResponse)
def list_requests(
    pagination: dict = Depends(deps.get_pagination_params),
    site_id: Optional[int] = Query(None, alias="siteId"),
    request_status: Optional[RequestStatus] = Query(None, alias="status"),
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    """
    Retrieve requisitions, newest first.
    """
    requests, total = StockRequestService(db, principal).find_all(
        page=pagination["page"],
        limit=pagination["limit"],
        site_id=site_id,
        status=request_status.value if request_status else None
    )
    return envelope(_page(requests, total, **pagination), "Requests retrieved successfully")


@router.get("/issuable", response_model=SuccessResponse)
def list_issuable_requests(
    pagination: dict = Depends(deps.get_pagination_params),
    site_id: Optional[int] = Query(None, alias="siteId"),
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    """
    Approved or partially issued requisitions waiting in the issue queue.

    Only lines still owed material are listed for each request.
    """
    service = StockRequestService(db, principal)
    requests, total = service.get_issuable_requests(
        page=pagination["page"], limit=pagination["limit"], site_id=site_id
    )

    data = _page(requests, total, **pagination)
    for serialized, request in zip(data["requests"], requests):
        serialized["items"] = [
            RequestItemResponse.model_validate(item).model_dump(mode="json")
            for item in service.issuable_lines(request)
        ]
    return envelope(data, "Issuable requests retrieved successfully")


@router.post("/issue-materials", response_model=SuccessResponse)
def issue_materials(
    issue_in: IssueMaterials,
    background_tasks: BackgroundTasks,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    """
    Issue approved quantities from stock; the whole batch fails together.
    """
    request = StockRequestService(db, principal).issue_materials(issue_in)
    payload = _serialize(request)
    background_tasks.add_task(requisition_gateway.emit, "materialsIssued", payload)
    return envelope({"request": payload}, "Materials issued successfully")


@router.post("/receive-materials", response_model=SuccessResponse)
def receive_materials(
    receive_in: ReceiveMaterials,
    background_tasks: BackgroundTasks,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    """
    Confirm receipt on site of issued materials.
    """
    request = StockRequestService(db, principal).receive_materials(receive_in)
    payload = _serialize(request)
    background_tasks.add_task(requisition_gateway.emit, "materialsReceived", payload)
    if request.status == RequestStatus.CLOSED.value:
        background_tasks.add_task(requisition_gateway.emit, "requestClosed", payload)
    return envelope({"request": payload}, "Materials received successfully")


@router.get("/{request_id}", response_model=SuccessResponse)
def get_request(
    request_id: int,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    request = StockRequestService(db, principal).find_one(request_id)
    return envelope({"request": _serialize(request)}, "Request retrieved successfully")


@router.put("/{request_id}", response_model=SuccessResponse)
def update_request(
    request_id: int,
    request_in: StockRequestUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    """
    Edit a pending requisition.
    """
    request = StockRequestService(db, principal).update_request(request_id, request_in)
    payload = _serialize(request)
    background_tasks.add_task(requisition_gateway.emit, "requestUpdated", payload)
    return envelope({"request": payload}, "Request updated successfully")


@router.delete("/{request_id}", response_model=SuccessResponse)
def delete_request(
    request_id: int,
    background_tasks: BackgroundTasks,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    """
    Delete a pending requisition.
    """
    StockRequestService(db, principal).delete_request(request_id)
    background_tasks.add_task(requisition_gateway.emit, "requestDeleted", {"id": request_id})
    return envelope({"id": request_id}, "Request deleted successfully")


@router.patch("/{request_id}/approve", response_model=SuccessResponse)
def approve_request(
    request_id: int,
    background_tasks: BackgroundTasks,
    approve_in: Optional[ApproveRequest] = None,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(approver)
):
    """
    Approve a pending requisition, optionally adjusting its lines first.
    """
    request = StockRequestService(db, principal).approve_request(request_id, approve_in)
    payload = _serialize(request)
    background_tasks.add_task(requisition_gateway.emit, "requestApproved", payload)
    return envelope({"request": payload}, "Request approved successfully")


@router.patch("/{request_id}/modify-approve", response_model=SuccessResponse)
def modify_and_approve_request(
    request_id: int,
    modify_in: ModifyApproveRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    """
    Rework a requisition. ADMIN and PADIRI approve the result;
    DIOCESAN_SITE_ENGINEER sends it back for approval.
    """
    request = StockRequestService(db, principal).modify_and_approve(
        request_id, modify_in, role=principal.role
    )
    payload = _serialize(request)
    background_tasks.add_task(requisition_gateway.emit, "requestUpdated", payload)
    return envelope({"request": payload}, "Request modified and approved successfully")


@router.patch("/{request_id}/reject", response_model=SuccessResponse)
def reject_request(
    request_id: int,
    background_tasks: BackgroundTasks,
    reject_in: Optional[RejectRequest] = None,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    request = StockRequestService(db, principal).reject_request(
        request_id, reject_in.notes if reject_in else None
    )
    payload = _serialize(request)
    background_tasks.add_task(requisition_gateway.emit, "requestRejected", payload)
    return envelope({"request": payload}, "Request rejected")


@router.post("/{request_id}/attachments", response_model=List[AttachmentResponse])
async def add_attachment(
    request_id: int,
    attachment_img: Optional[UploadFile] = File(None, alias="attachmentImg"),
    file_url: Optional[str] = Form(None, alias="fileUrl"),
    description: Optional[str] = Form(None),
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    """
    Attach an uploaded image (``attachmentImg``) or an existing URL to a requisition.
    """
    service = StockRequestService(db, principal)
    service.find_one(request_id)

    if attachment_img is not None and attachment_img.filename:
        file_url = await FileStorage().save(attachment_img, ATTACHMENT_IMAGES)
    if not file_url:
        raise ValidationError("An attachment file or URL is required")

    return service.add_attachment(request_id, file_url, description)


@router.post("/{request_id}/comments", response_model=List[CommentResponse])
def add_comment(
    request_id: int,
    comment_in: CommentCreate,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return StockRequestService(db, principal).add_comment(request_id, comment_in.description)
