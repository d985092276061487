"""Medicine Service - medicine stock with its total cost"""
from decimal import Decimal
from typing import List, Optional
import logging

from sqlalchemy.orm import Session

from aby_api.core.exceptions import NotFoundError, ValidationError
from aby_api.core.security import Principal
from aby_api.models.aquaculture import EggFishMedication, Medicine, ParentFishMedication, PondMedication
from aby_api.models.hr import Employee
from aby_api.schemas.aquaculture import MedicineCreate, MedicineUpdate
from aby_api.services.references import ensure_unreferenced

logger = logging.getLogger(__name__)


def total_cost(price_per_unit, quantity) -> Decimal:
    return (Decimal(price_per_unit) * Decimal(quantity)).quantize(Decimal("0.01"))


class MedicineService:
    def __init__(self, db: Session, actor: Optional[Principal] = None):
        self.db = db
        self.actor = actor

    def list_medicines(self) -> List[Medicine]:
        return self.db.query(Medicine).order_by(Medicine.created_at.desc(), Medicine.id.desc()).all()

    def get_medicine(self, medicine_id: int) -> Medicine:
        medicine = self.db.get(Medicine, medicine_id)
        if not medicine:
            raise NotFoundError("Medicine not found")
        return medicine

    def create_medicine(self, data: MedicineCreate) -> Medicine:
        """
        Add medicine to stock

        The employee who added it defaults to the signed-in employee.
        """
        if not data.name.strip():
            raise ValidationError("Medicine name is required")
        self._check_amounts(data.quantity, data.price_per_unit)

        added_by_id = data.added_by_id
        if added_by_id is None and self.actor is not None:
            added_by_id = self.actor.employee_id
        if added_by_id is None:
            raise ValidationError("The employee adding the medicine is required")
        if not self.db.get(Employee, added_by_id):
            raise ValidationError("Employee not found")

        values = data.model_dump(exclude={"added_by_id"})
        medicine = Medicine(
            **values,
            added_by_id=added_by_id,
            total_cost=total_cost(data.price_per_unit, data.quantity),
        )
        self.db.add(medicine)
        self.db.commit()
        self.db.refresh(medicine)
        logger.info(f"Medicine added: {medicine.name} x{medicine.quantity} ({medicine.total_cost})")
        return medicine

    def update_medicine(self, medicine_id: int, data: MedicineUpdate) -> Medicine:
        medicine = self.get_medicine(medicine_id)
        update_data = data.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            if value is not None or field not in ("quantity", "price_per_unit"):
                setattr(medicine, field, value)

        self._check_amounts(medicine.quantity, medicine.price_per_unit)
        medicine.total_cost = total_cost(medicine.price_per_unit, medicine.quantity)
        self.db.commit()
        self.db.refresh(medicine)
        return medicine

    def delete_medicine(self, medicine_id: int) -> None:
        medicine = self.get_medicine(medicine_id)
        ensure_unreferenced(self.db, "Medicine", [
            (model.medicine_id, medicine_id, "medication records")
            for model in (ParentFishMedication, EggFishMedication, PondMedication)
        ])
        self.db.delete(medicine)
        self.db.commit()
        logger.info(f"Medicine {medicine_id} deleted")

    @staticmethod
    def _check_amounts(quantity, price_per_unit) -> None:
        if Decimal(quantity) < 0:
            raise ValidationError("Quantity cannot be negative")
        if Decimal(price_per_unit) < 0:
            raise ValidationError("Price per unit cannot be negative")
