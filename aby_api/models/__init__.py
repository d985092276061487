"""
Aby SQLAlchemy Models
Database models for the Aby management API
"""

# Import all models to ensure they are registered with SQLAlchemy
from .auth import Admin
from .organization import Site, Store, site_assignments
from .hr import Department, Employee, Contract, Job, Applicant, Client
from .stock import (
    StockCategory, StockIn, StockHistory, StockRequest, StockRequestItem,
    RequestAttachment, RequestComment
)
from .asset import Asset, AssetRequest, AssetRequestItem
from .aquaculture import (
    Cage, FeedStock, FeedCage, Medication, Medicine,
    ParentFishPool, ParentWaterChange, GrownEggPond, LaboratoryBox, BoxWaterChange,
    ParentEggMigration, EggToPondMigration, PondWaterChange, ParentFishFeeding,
    EggFishFeeding, GrownEggPondFeeding, ParentFishMedication, EggFishMedication,
    PondMedication
)

__all__ = [
    "Admin",
    "Site",
    "Store",
    "site_assignments",
    "Department",
    "Employee",
    "Contract",
    "Job",
    "Applicant",
    "Client",
    "StockCategory",
    "StockIn",
    "StockHistory",
    "StockRequest",
    "StockRequestItem",
    "RequestAttachment",
    "RequestComment",
    "Asset",
    "AssetRequest",
    "AssetRequestItem",
    "Cage",
    "FeedStock",
    "FeedCage",
    "Medication",
    "Medicine",
    "ParentFishPool",
    "ParentWaterChange",
    "GrownEggPond",
    "LaboratoryBox",
    "BoxWaterChange",
    "ParentEggMigration",
    "EggToPondMigration",
    "PondWaterChange",
    "ParentFishFeeding",
    "EggFishFeeding",
    "GrownEggPondFeeding",
    "ParentFishMedication",
    "EggFishMedication",
    "PondMedication",
]
