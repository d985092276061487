"""
Asset Service
Company asset register
"""
from typing import List, Optional
import logging

from sqlalchemy import or_
from sqlalchemy.orm import Session

from aby_api.core.exceptions import NotFoundError, ValidationError, ConflictError
from aby_api.models.asset import Asset, AssetRequestItem
from aby_api.schemas.asset import AssetCreate, AssetUpdate

logger = logging.getLogger(__name__)


class AssetService:
    def __init__(self, db: Session):
        self.db = db

    def list_assets(
        self,
        search: Optional[str] = None,
        category: Optional[str] = None,
        status: Optional[str] = None
    ) -> List[Asset]:
        query = self.db.query(Asset)
        if search:
            search_filter = f"%{search}%"
            query = query.filter(
                or_(Asset.name.ilike(search_filter), Asset.location.ilike(search_filter))
            )
        if category:
            query = query.filter(Asset.category == category)
        if status:
            query = query.filter(Asset.status == status)
        return query.order_by(Asset.created_at.desc(), Asset.id.desc()).all()

    def get_asset(self, asset_id: int) -> Asset:
        asset = self.db.get(Asset, asset_id)
        if not asset:
            raise NotFoundError("Asset not found")
        return asset

    def create_asset(self, data: AssetCreate, asset_img: Optional[str] = None) -> Asset:
        if not data.name.strip() or not data.category.strip():
            raise ValidationError("Name, category and quantity are required")
        if data.quantity < 0:
            raise ValidationError("Quantity cannot be negative")

        asset = Asset(**data.model_dump(), asset_img=asset_img)
        asset.name = asset.name.strip()
        self.db.add(asset)
        self.db.commit()
        self.db.refresh(asset)

        logger.info(f"Asset created: {asset.name} x{asset.quantity}")
        return asset

    def update_asset(self, asset_id: int, data: AssetUpdate, asset_img: Optional[str] = None) -> Asset:
        asset = self.get_asset(asset_id)
        update_data = data.model_dump(exclude_unset=True)
        if update_data.get("quantity") is not None and update_data["quantity"] < 0:
            raise ValidationError("Quantity cannot be negative")
        for field in ("name", "category"):
            if field in update_data and not (update_data[field] or "").strip():
                raise ValidationError(f"{field.capitalize()} cannot be empty")

        for field, value in update_data.items():
            setattr(asset, field, value)
        if asset_img:
            asset.asset_img = asset_img

        self.db.commit()
        self.db.refresh(asset)
        return asset

    def update_status(self, asset_id: int, status: str) -> Asset:
        asset = self.get_asset(asset_id)
        asset.status = status
        self.db.commit()
        self.db.refresh(asset)
        logger.info(f"Asset {asset_id} status set to {status}")
        return asset

    def delete_asset(self, asset_id: int) -> None:
        asset = self.get_asset(asset_id)
        requested = self.db.query(AssetRequestItem).filter(AssetRequestItem.asset_id == asset_id).first()
        if requested:
            raise ConflictError("Asset is referenced by asset requests and cannot be deleted")

        self.db.delete(asset)
        self.db.commit()
        logger.info(f"Asset {asset_id} deleted")
