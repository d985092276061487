"""
Asset API endpoints
Company asset register with optional asset photos
"""

from datetime import date
from decimal import Decimal
from typing import List, Optional
from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.orm import Session

from aby_api.api import deps
from aby_api.core.security import Principal
from aby_api.models.asset import AssetStatus
from aby_api.realtime import asset_gateway
from aby_api.schemas.asset import AssetCreate, AssetResponse, AssetStatusUpdate, AssetUpdate
from aby_api.schemas.common import MessageResponse
from aby_api.services.assets import AssetService
from aby_api.services.file_storage import ASSET_IMAGES, FileStorage

router = APIRouter()


async def _store_image(asset_img: Optional[UploadFile]) -> Optional[str]:
    if asset_img is None or not asset_img.filename:
        return None
    return await FileStorage().save(asset_img, ASSET_IMAGES)


@router.get("/", response_model=List[AssetResponse])
def list_assets(
    search: Optional[str] = None,
    category: Optional[str] = None,
    asset_status: Optional[AssetStatus] = Query(None, alias="status"),
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return AssetService(db).list_assets(
        search=search,
        category=category,
        status=asset_status.value if asset_status else None
    )


@router.post("/", response_model=AssetResponse, status_code=status.HTTP_201_CREATED)
async def create_asset(
    background_tasks: BackgroundTasks,
    name: str = Form(...),
    category: str = Form(...),
    quantity: int = Form(...),
    description: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    purchase_date: Optional[date] = Form(None, alias="purchaseDate"),
    purchase_cost: Optional[Decimal] = Form(None, alias="purchaseCost"),
    asset_status: AssetStatus = Form(AssetStatus.ACTIVE, alias="status"),
    asset_img: Optional[UploadFile] = File(None, alias="assetImg"),
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    """
    Add an asset. Sent as multipart form data with an optional ``assetImg`` file.
    """
    asset_in = deps.validate_form(AssetCreate, {
        "name": name,
        "category": category,
        "quantity": quantity,
        "description": description,
        "location": location,
        "purchase_date": purchase_date,
        "purchase_cost": purchase_cost,
        "status": asset_status,
    })
    image_url = await _store_image(asset_img)
    asset = AssetResponse.model_validate(AssetService(db).create_asset(asset_in, asset_img=image_url))
    background_tasks.add_task(asset_gateway.emit, "assetCreated", asset)
    return asset


@router.get("/{asset_id}", response_model=AssetResponse)
def get_asset(
    asset_id: int,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return AssetService(db).get_asset(asset_id)


@router.put("/{asset_id}", response_model=AssetResponse)
async def update_asset(
    asset_id: int,
    background_tasks: BackgroundTasks,
    name: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    quantity: Optional[int] = Form(None),
    description: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    purchase_date: Optional[date] = Form(None, alias="purchaseDate"),
    purchase_cost: Optional[Decimal] = Form(None, alias="purchaseCost"),
    asset_img: Optional[UploadFile] = File(None, alias="assetImg"),
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    """
    Update an asset; a new ``assetImg`` replaces the stored photo.
    """
    fields = {
        "name": name,
        "category": category,
        "quantity": quantity,
        "description": description,
        "location": location,
        "purchase_date": purchase_date,
        "purchase_cost": purchase_cost,
    }
    asset_in = deps.validate_form(AssetUpdate, fields)

    service = AssetService(db)
    old_image = service.get_asset(asset_id).asset_img
    image_url = await _store_image(asset_img)
    asset = AssetResponse.model_validate(service.update_asset(asset_id, asset_in, asset_img=image_url))
    if image_url and old_image:
        FileStorage().delete(old_image)

    background_tasks.add_task(asset_gateway.emit, "assetUpdated", asset)
    return asset


@router.patch("/{asset_id}/status", response_model=AssetResponse)
def update_asset_status(
    asset_id: int,
    status_in: AssetStatusUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    asset = AssetResponse.model_validate(AssetService(db).update_status(asset_id, status_in.status))
    background_tasks.add_task(asset_gateway.emit, "assetUpdated", asset)
    return asset


@router.delete("/{asset_id}", response_model=MessageResponse)
def delete_asset(
    asset_id: int,
    background_tasks: BackgroundTasks,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    service = AssetService(db)
    image = service.get_asset(asset_id).asset_img
    service.delete_asset(asset_id)
    FileStorage().delete(image)

    background_tasks.add_task(asset_gateway.emit, "assetDeleted", {"id": asset_id})
    return {"message": "Asset deleted successfully"}
