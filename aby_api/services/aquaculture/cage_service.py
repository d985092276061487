"""
Cage Service
Fish cages and the medication given to them
"""
from typing import List, Optional
import logging

from sqlalchemy.orm import Session

from aby_api.core.exceptions import NotFoundError, ConflictError, ValidationError
from aby_api.models.aquaculture import Cage, FeedCage, Medication
from aby_api.models.hr import Employee
from aby_api.schemas.aquaculture import CageCreate, CageUpdate, MedicationCreate, MedicationUpdate
from aby_api.services.references import ensure_unreferenced

logger = logging.getLogger(__name__)


class CageService:
    def __init__(self, db: Session):
        self.db = db

    def list_cages(self, status: Optional[str] = None) -> List[Cage]:
        query = self.db.query(Cage)
        if status:
            query = query.filter(Cage.status == status)
        return query.order_by(Cage.name).all()

    def get_cage(self, cage_id: int) -> Cage:
        cage = self.db.get(Cage, cage_id)
        if not cage:
            raise NotFoundError("Cage not found")
        return cage

    def create_cage(self, data: CageCreate) -> Cage:
        if not data.name.strip():
            raise ValidationError("Cage name is required")
        if data.code:
            self._check_code(data.code)
        cage = Cage(**data.model_dump())
        cage.name = cage.name.strip()
        self.db.add(cage)
        self.db.commit()
        self.db.refresh(cage)
        logger.info(f"Cage created: {cage.name}")
        return cage

    def update_cage(self, cage_id: int, data: CageUpdate) -> Cage:
        cage = self.get_cage(cage_id)
        update_data = data.model_dump(exclude_unset=True)
        if update_data.get("code"):
            self._check_code(update_data["code"], exclude_id=cage_id)
        for field, value in update_data.items():
            setattr(cage, field, value)
        self.db.commit()
        self.db.refresh(cage)
        return cage

    def delete_cage(self, cage_id: int) -> None:
        """Cages with feeding records cannot be deleted"""
        cage = self.get_cage(cage_id)
        ensure_unreferenced(self.db, "Cage", [(FeedCage.cage_id, cage_id, "feeding records")])
        self.db.delete(cage)
        self.db.commit()
        logger.info(f"Cage {cage_id} deleted")

    def _check_code(self, code: str, exclude_id: Optional[int] = None) -> None:
        query = self.db.query(Cage.id).filter(Cage.code == code)
        if exclude_id is not None:
            query = query.filter(Cage.id != exclude_id)
        if query.first():
            raise ConflictError("A cage with this code already exists")


class MedicationService:
    """Treatments recorded against a cage"""

    def __init__(self, db: Session):
        self.db = db

    def list_medications(self, cage_id: Optional[int] = None) -> List[Medication]:
        query = self.db.query(Medication)
        if cage_id:
            query = query.filter(Medication.cage_id == cage_id)
        return query.order_by(Medication.created_at.desc(), Medication.id.desc()).all()

    def get_medication(self, medication_id: int) -> Medication:
        medication = self.db.get(Medication, medication_id)
        if not medication:
            raise NotFoundError("Medication not found")
        return medication

    def create_medication(self, data: MedicationCreate) -> Medication:
        if not self.db.get(Cage, data.cage_id):
            raise NotFoundError("Cage not found")
        self._check_employee(data.employee_id)

        medication = Medication(**data.model_dump())
        self.db.add(medication)
        self.db.commit()
        self.db.refresh(medication)
        logger.info(f"Medication {medication.medicine_name} recorded for cage {medication.cage_id}")
        return medication

    def update_medication(self, medication_id: int, data: MedicationUpdate) -> Medication:
        medication = self.get_medication(medication_id)
        update_data = data.model_dump(exclude_unset=True)
        self._check_employee(update_data.get("employee_id"))
        for field, value in update_data.items():
            setattr(medication, field, value)
        self.db.commit()
        self.db.refresh(medication)
        return medication

    def delete_medication(self, medication_id: int) -> None:
        medication = self.get_medication(medication_id)
        self.db.delete(medication)
        self.db.commit()

    def _check_employee(self, employee_id: Optional[int]) -> None:
        if employee_id is not None and not self.db.get(Employee, employee_id):
            raise ValidationError("Employee not found")
