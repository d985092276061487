"""Treatment Service - medicine given to parent pools, laboratory batches and pond batches"""
from decimal import Decimal
from typing import Optional
import logging

from sqlalchemy.orm import Session

from aby_api.core.exceptions import NotFoundError, ValidationError
from aby_api.core.security import Principal
from aby_api.models.aquaculture import (
    EggFishMedication, EggToPondMigration, Medicine, ParentEggMigration, ParentFishMedication,
    ParentFishPool, PondMedication
)
from aby_api.schemas.aquaculture import (
    BatchMedicationUpdate, EggFishMedicationCreate, ParentFishMedicationCreate, PondMedicationCreate
)
from .recording import require, resolve_employee

logger = logging.getLogger(__name__)


class BatchMedicationService:
    model = None
    batch_model = None
    batch_field = None
    batch_label = None

    def __init__(self, db: Session, actor: Optional[Principal] = None):
        self.db = db
        self.actor = actor

    def list_treatments(self, batch_id: Optional[int] = None) -> list:
        query = self.db.query(self.model)
        if batch_id:
            query = query.filter(getattr(self.model, self.batch_field) == batch_id)
        return query.order_by(self.model.created_at.desc(), self.model.id.desc()).all()

    def get_treatment(self, treatment_id: int):
        treatment = self.db.get(self.model, treatment_id)
        if not treatment:
            raise NotFoundError("Medication record not found")
        return treatment

    def create_treatment(self, data):
        batch_id = getattr(data, self.batch_field)
        require(self.db, self.batch_model, batch_id, self.batch_label)
        require(self.db, Medicine, data.medicine_id, "Medicine")
        self._check_quantity(data.quantity)
        employee_id = resolve_employee(self.db, self.actor, data.employee_id)

        treatment = self.model(**data.model_dump(exclude={"employee_id"}), employee_id=employee_id)
        self.db.add(treatment)
        self.db.commit()
        self.db.refresh(treatment)
        logger.info(f"Medicine {treatment.medicine_id} given to {self.batch_label.lower()} {batch_id}")
        return treatment

    def update_treatment(self, treatment_id: int, data: BatchMedicationUpdate):
        treatment = self.get_treatment(treatment_id)
        update_data = data.model_dump(exclude_unset=True, exclude_none=True)
        if "medicine_id" in update_data:
            require(self.db, Medicine, update_data["medicine_id"], "Medicine")
        if "quantity" in update_data:
            self._check_quantity(update_data["quantity"])
        if "employee_id" in update_data:
            resolve_employee(self.db, None, update_data["employee_id"])

        for field, value in update_data.items():
            setattr(treatment, field, value)
        self.db.commit()
        self.db.refresh(treatment)
        return treatment

    def delete_treatment(self, treatment_id: int) -> None:
        treatment = self.get_treatment(treatment_id)
        self.db.delete(treatment)
        self.db.commit()

    @staticmethod
    def _check_quantity(quantity: Decimal) -> None:
        if quantity < 0:
            raise ValidationError("Quantity cannot be negative")


class ParentFishMedicationService(BatchMedicationService):
    model = ParentFishMedication
    batch_model = ParentFishPool
    batch_field = "parent_pool_id"
    batch_label = "Parent fish pool"

    def create_treatment(self, data: ParentFishMedicationCreate) -> ParentFishMedication:
        return super().create_treatment(data)


class EggFishMedicationService(BatchMedicationService):
    model = EggFishMedication
    batch_model = ParentEggMigration
    batch_field = "parent_egg_migration_id"
    batch_label = "Parent egg migration"

    def create_treatment(self, data: EggFishMedicationCreate) -> EggFishMedication:
        return super().create_treatment(data)


class PondMedicationService(BatchMedicationService):
    model = PondMedication
    batch_model = EggToPondMigration
    batch_field = "egg_to_pond_migration_id"
    batch_label = "Egg to pond migration"

    def create_treatment(self, data: PondMedicationCreate) -> PondMedication:
        return super().create_treatment(data)
