"""Asset Services - asset register and asset requisitions"""

from .asset_service import AssetService
from .asset_requisition import AssetRequestService

__all__ = ["AssetService", "AssetRequestService"]
