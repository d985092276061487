"""
Pond Service
Parent fish pools with their water changes, and grown egg ponds
"""
from typing import List, Optional
import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from aby_api.core.exceptions import NotFoundError, ConflictError, ValidationError
from aby_api.models.aquaculture import (
    EggToPondMigration, GrownEggPond, ParentEggMigration, ParentFishFeeding, ParentFishMedication,
    ParentFishPool, ParentWaterChange
)
from aby_api.models.hr import Employee
from aby_api.schemas.aquaculture import (
    GrownEggPondCreate, GrownEggPondUpdate, ParentFishPoolCreate, ParentFishPoolUpdate,
    WaterChangeCreate
)
from aby_api.services.references import ensure_unreferenced

logger = logging.getLogger(__name__)


def _clean_name(name: Optional[str], label: str) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError(f"{label} name is required")
    return cleaned


class ParentPoolService:
    def __init__(self, db: Session):
        self.db = db

    def list_pools(self) -> List[ParentFishPool]:
        return self.db.query(ParentFishPool).order_by(ParentFishPool.name).all()

    def get_pool(self, pool_id: int) -> ParentFishPool:
        pool = self.db.get(ParentFishPool, pool_id)
        if not pool:
            raise NotFoundError("Parent fish pool not found")
        return pool

    def create_pool(self, data: ParentFishPoolCreate) -> ParentFishPool:
        name = _clean_name(data.name, "Pool")
        self._check_name(name)
        self._check_employee(data.employee_id)

        pool = ParentFishPool(name=name, description=data.description, employee_id=data.employee_id)
        self.db.add(pool)
        self.db.commit()
        self.db.refresh(pool)
        logger.info(f"Parent fish pool created: {pool.name}")
        return pool

    def update_pool(self, pool_id: int, data: ParentFishPoolUpdate) -> ParentFishPool:
        pool = self.get_pool(pool_id)
        update_data = data.model_dump(exclude_unset=True)
        if "name" in update_data:
            update_data["name"] = _clean_name(update_data["name"], "Pool")
            self._check_name(update_data["name"], exclude_id=pool_id)
        if "employee_id" in update_data:
            self._check_employee(update_data["employee_id"])

        for field, value in update_data.items():
            setattr(pool, field, value)
        self.db.commit()
        self.db.refresh(pool)
        return pool

    def delete_pool(self, pool_id: int) -> None:
        pool = self.get_pool(pool_id)
        ensure_unreferenced(self.db, "Parent fish pool", [
            (ParentEggMigration.parent_pool_id, pool_id, "egg migrations"),
            (ParentFishFeeding.parent_pool_id, pool_id, "feeding records"),
            (ParentFishMedication.parent_pool_id, pool_id, "medication records"),
        ])
        self.db.delete(pool)
        self.db.commit()

    def record_water_change(self, pool_id: int, data: WaterChangeCreate) -> ParentWaterChange:
        pool = self.get_pool(pool_id)
        if data.liters_changed <= 0:
            raise ValidationError("Liters changed must be greater than zero")
        self._check_employee(data.employee_id)

        change = ParentWaterChange(parent_pool_id=pool.id, **data.model_dump())
        self.db.add(change)
        self.db.commit()
        self.db.refresh(change)
        logger.info(f"Water change of {change.liters_changed}L recorded for pool {pool.id}")
        return change

    def list_water_changes(self, pool_id: int) -> List[ParentWaterChange]:
        return self.get_pool(pool_id).water_changes

    def _check_name(self, name: str, exclude_id: Optional[int] = None) -> None:
        query = self.db.query(ParentFishPool.id).filter(func.lower(ParentFishPool.name) == name.lower())
        if exclude_id is not None:
            query = query.filter(ParentFishPool.id != exclude_id)
        if query.first():
            raise ConflictError("A pool with this name already exists")

    def _check_employee(self, employee_id: Optional[int]) -> None:
        if employee_id is None or not self.db.get(Employee, employee_id):
            raise ValidationError("Employee not found")


class GrownEggPondService:
    def __init__(self, db: Session):
        self.db = db

    def list_ponds(self) -> List[GrownEggPond]:
        return self.db.query(GrownEggPond).order_by(GrownEggPond.name).all()

    def get_pond(self, pond_id: int) -> GrownEggPond:
        pond = self.db.get(GrownEggPond, pond_id)
        if not pond:
            raise NotFoundError("Pond not found")
        return pond

    def create_pond(self, data: GrownEggPondCreate) -> GrownEggPond:
        name = _clean_name(data.name, "Pond")
        self._check_name(name)
        if data.size <= 0:
            raise ValidationError("Pond size must be greater than zero")

        pond = GrownEggPond(name=name, code=data.code, size=data.size, description=data.description)
        self.db.add(pond)
        self.db.commit()
        self.db.refresh(pond)
        logger.info(f"Grown egg pond created: {pond.name}")
        return pond

    def update_pond(self, pond_id: int, data: GrownEggPondUpdate) -> GrownEggPond:
        pond = self.get_pond(pond_id)
        update_data = data.model_dump(exclude_unset=True)
        if "name" in update_data:
            update_data["name"] = _clean_name(update_data["name"], "Pond")
            self._check_name(update_data["name"], exclude_id=pond_id)
        if "size" in update_data and (update_data["size"] is None or update_data["size"] <= 0):
            raise ValidationError("Pond size must be greater than zero")

        for field, value in update_data.items():
            setattr(pond, field, value)
        self.db.commit()
        self.db.refresh(pond)
        return pond

    def delete_pond(self, pond_id: int) -> None:
        pond = self.get_pond(pond_id)
        ensure_unreferenced(self.db, "Pond", [(EggToPondMigration.pond_id, pond_id, "egg migrations")])
        self.db.delete(pond)
        self.db.commit()

    def _check_name(self, name: str, exclude_id: Optional[int] = None) -> None:
        query = self.db.query(GrownEggPond.id).filter(func.lower(GrownEggPond.name) == name.lower())
        if exclude_id is not None:
            query = query.filter(GrownEggPond.id != exclude_id)
        if query.first():
            raise ConflictError("A pond with this name already exists")
