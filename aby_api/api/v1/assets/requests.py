"""
Asset Requisition API endpoints
"""

from typing import List, Optional
from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.orm import Session

from aby_api.api import deps
from aby_api.core.security import Principal
from aby_api.models.asset import AssetRequestStatus
from aby_api.realtime import asset_gateway
from aby_api.schemas.asset import (
    ApproveAssetRequest,
    AssetRequestCreate,
    AssetRequestItemResponse,
    AssetRequestResponse,
    AssetRequestUpdate,
    AssetResponse,
    ProcurementUpdate,
)
from aby_api.schemas.common import MessageResponse
from aby_api.services.assets import AssetRequestService

router = APIRouter()


# Procurement routes are declared before /{request_id} so they are matched first

@router.get("/procurement", response_model=List[AssetRequestItemResponse])
def list_procurement_items(
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    """
    Request lines the register could not cover and that still need buying.
    """
    return AssetRequestService(db).get_items_for_procurement()


@router.patch("/procurement/update", response_model=AssetResponse)
def update_procurement(
    procurement_in: ProcurementUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    """
    Book an ordered quantity into the register.
    """
    asset = AssetResponse.model_validate(
        AssetRequestService(db).update_procurement(
            procurement_in.asset_id, procurement_in.ordered_quantity
        )
    )
    background_tasks.add_task(asset_gateway.emit, "assetUpdated", asset)
    return asset


@router.get("/procurement/{item_id}", response_model=AssetRequestItemResponse)
def get_procurement_item(
    item_id: int,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return AssetRequestService(db).get_procurement_item(item_id)


@router.post("/", response_model=AssetRequestResponse, status_code=status.HTTP_201_CREATED)
def create_asset_request(
    request_in: AssetRequestCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    request = AssetRequestResponse.model_validate(AssetRequestService(db).create(request_in))
    background_tasks.add_task(asset_gateway.emit, "assetRequestCreated", request)
    return request


@router.get("/", response_model=List[AssetRequestResponse])
def list_asset_requests(
    request_status: Optional[AssetRequestStatus] = Query(None, alias="status"),
    employee_id: Optional[int] = Query(None, alias="employeeId"),
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return AssetRequestService(db).find_all(
        status=request_status.value if request_status else None,
        employee_id=employee_id
    )


@router.get("/{request_id}", response_model=AssetRequestResponse)
def get_asset_request(
    request_id: int,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return AssetRequestService(db).find_one(request_id)


@router.put("/{request_id}", response_model=AssetRequestResponse)
def update_asset_request(
    request_id: int,
    request_in: AssetRequestUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    request = AssetRequestResponse.model_validate(
        AssetRequestService(db).update(request_id, request_in)
    )
    background_tasks.add_task(asset_gateway.emit, "assetRequestUpdated", request)
    return request


@router.delete("/{request_id}", response_model=MessageResponse)
def delete_asset_request(
    request_id: int,
    background_tasks: BackgroundTasks,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    AssetRequestService(db).remove(request_id)
    background_tasks.add_task(asset_gateway.emit, "assetRequestDeleted", {"id": request_id})
    return {"message": "Request deleted successfully"}


@router.patch("/{request_id}/approve", response_model=AssetRequestResponse)
def approve_asset_request(
    request_id: int,
    background_tasks: BackgroundTasks,
    approve_in: Optional[ApproveAssetRequest] = None,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    """
    Approve a pending request and issue what the register holds.

    Lines that cannot be covered in full are flagged for procurement.
    """
    request = AssetRequestResponse.model_validate(
        AssetRequestService(db).approve_and_issue(request_id, approve_in or ApproveAssetRequest())
    )
    background_tasks.add_task(asset_gateway.emit, "assetRequestStatusChanged", request)
    return request


@router.patch("/{request_id}/issue", response_model=AssetRequestResponse)
def issue_outstanding_assets(
    request_id: int,
    background_tasks: BackgroundTasks,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    request = AssetRequestResponse.model_validate(AssetRequestService(db).issue_outstanding(request_id))
    background_tasks.add_task(asset_gateway.emit, "assetRequestStatusChanged", request)
    return request


@router.patch("/{request_id}/reject", response_model=AssetRequestResponse)
def reject_asset_request(
    request_id: int,
    background_tasks: BackgroundTasks,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    request = AssetRequestResponse.model_validate(AssetRequestService(db).reject(request_id))
    background_tasks.add_task(asset_gateway.emit, "assetRequestStatusChanged", request)
    return request
