"""Aquaculture Services - cages, feeding, medication, medicines, ponds and the hatchery"""

from .cage_service import CageService, MedicationService
from .feed_service import (
    FeedService, ParentFishFeedingService, EggFishFeedingService, GrownEggPondFeedingService
)
from .medicine_service import MedicineService
from .pond_service import ParentPoolService, GrownEggPondService
from .hatchery_service import (
    LaboratoryBoxService, MigrationService, BoxWaterChangeService, PondWaterChangeService
)
from .treatment_service import (
    ParentFishMedicationService, EggFishMedicationService, PondMedicationService
)

__all__ = [
    "CageService",
    "MedicationService",
    "FeedService",
    "ParentFishFeedingService",
    "EggFishFeedingService",
    "GrownEggPondFeedingService",
    "MedicineService",
    "ParentPoolService",
    "GrownEggPondService",
    "LaboratoryBoxService",
    "MigrationService",
    "BoxWaterChangeService",
    "PondWaterChangeService",
    "ParentFishMedicationService",
    "EggFishMedicationService",
    "PondMedicationService",
]
