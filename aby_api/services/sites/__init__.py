"""Site and store services"""

from .site_service import SiteService
from .store_service import StoreService

__all__ = ["SiteService", "StoreService"]
