"""Stock Services - inventory, movement journal and site requisitions"""

from .stock_service import StockService
from .requisition import StockRequestService
from .export_service import StockExportService

__all__ = ["StockService", "StockRequestService", "StockExportService"]
