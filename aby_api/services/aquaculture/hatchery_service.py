"""
Hatchery Service
Laboratory boxes, the migration of eggs from parent pools into boxes and
from boxes into grown egg ponds, and the water changes kept for boxes and
pond batches
"""
from datetime import date
from decimal import Decimal
from typing import List, Optional
import logging

from sqlalchemy import or_
from sqlalchemy.orm import Session

from aby_api.core.exceptions import NotFoundError, ConflictError, ValidationError
from aby_api.core.security import Principal
from aby_api.models.aquaculture import (
    BoxWaterChange, EggFishFeeding, EggFishMedication, EggToPondMigration, GrownEggPond,
    GrownEggPondFeeding, LaboratoryBox, ParentEggMigration, ParentFishPool, PondMedication,
    PondWaterChange
)
from aby_api.schemas.aquaculture import (
    BoxWaterChangeCreate, EggToPondMigrationCreate, EggToPondMigrationUpdate,
    LaboratoryBoxCreate, LaboratoryBoxUpdate, ParentEggMigrationCreate, ParentEggMigrationUpdate,
    PondWaterChangeCreate, WaterChangeUpdate
)
from aby_api.services.references import ensure_unreferenced
from .recording import require, resolve_employee

logger = logging.getLogger(__name__)

ACTIVE = "ACTIVE"


def _required(value: Optional[str], label: str) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValidationError(f"{label} is required")
    return cleaned


class LaboratoryBoxService:
    def __init__(self, db: Session):
        self.db = db

    def list_boxes(self) -> List[LaboratoryBox]:
        return self.db.query(LaboratoryBox).order_by(
            LaboratoryBox.created_at.desc(), LaboratoryBox.id.desc()
        ).all()

    def get_box(self, box_id: int) -> LaboratoryBox:
        return require(self.db, LaboratoryBox, box_id, "Laboratory box")

    def create_box(self, data: LaboratoryBoxCreate) -> LaboratoryBox:
        name = _required(data.name, "Box name")
        code = _required(data.code, "Box code")
        clash = self.db.query(LaboratoryBox.id).filter(
            or_(LaboratoryBox.name == name, LaboratoryBox.code == code)
        ).first()
        if clash:
            raise ConflictError("A laboratory box with this name or code already exists")

        box = LaboratoryBox(name=name, code=code, description=data.description)
        self.db.add(box)
        self.db.commit()
        self.db.refresh(box)
        logger.info(f"Laboratory box created: {box.code}")
        return box

    def update_box(self, box_id: int, data: LaboratoryBoxUpdate) -> LaboratoryBox:
        box = self.get_box(box_id)
        update_data = data.model_dump(exclude_unset=True)
        if "name" in update_data:
            update_data["name"] = _required(update_data["name"], "Box name")
            self._check_unique(LaboratoryBox.name, update_data["name"], box_id, "Name")
        if "code" in update_data:
            update_data["code"] = _required(update_data["code"], "Box code")
            self._check_unique(LaboratoryBox.code, update_data["code"], box_id, "Code")

        for field, value in update_data.items():
            setattr(box, field, value)
        self.db.commit()
        self.db.refresh(box)
        return box

    def delete_box(self, box_id: int) -> None:
        box = self.get_box(box_id)
        ensure_unreferenced(self.db, "Laboratory box", [
            (ParentEggMigration.laboratory_box_id, box_id, "egg migrations"),
        ])
        self.db.delete(box)
        self.db.commit()
        logger.info(f"Laboratory box {box_id} deleted")

    def _check_unique(self, column, value: str, box_id: int, label: str) -> None:
        if self.db.query(LaboratoryBox.id).filter(column == value, LaboratoryBox.id != box_id).first():
            raise ConflictError(f"{label} already in use")


class MigrationService:
    """
    Egg migrations

    A parent egg migration opens a laboratory batch (parent pool to box); an
    egg to pond migration moves that batch on into a grown egg pond. Feeding,
    medication and water-change records hang off these batches.
    """

    def __init__(self, db: Session, actor: Optional[Principal] = None):
        self.db = db
        self.actor = actor

    # Parent pool to laboratory box

    def list_egg_migrations(self, status: Optional[str] = None) -> List[ParentEggMigration]:
        query = self.db.query(ParentEggMigration)
        if status:
            query = query.filter(ParentEggMigration.status == status.upper())
        return query.order_by(ParentEggMigration.created_at.desc(), ParentEggMigration.id.desc()).all()

    def get_egg_migration(self, migration_id: int) -> ParentEggMigration:
        return require(self.db, ParentEggMigration, migration_id, "Parent egg migration")

    def create_egg_migration(self, data: ParentEggMigrationCreate) -> ParentEggMigration:
        require(self.db, ParentFishPool, data.parent_pool_id, "Parent fish pool")
        require(self.db, LaboratoryBox, data.laboratory_box_id, "Laboratory box")
        employee_id = resolve_employee(self.db, self.actor, data.employee_id)

        migration = ParentEggMigration(
            parent_pool_id=data.parent_pool_id,
            laboratory_box_id=data.laboratory_box_id,
            employee_id=employee_id,
            description=(data.description or "").strip() or None,
            migrated_on=data.migrated_on or date.today(),
            status=ACTIVE,
        )
        self.db.add(migration)
        self.db.commit()
        self.db.refresh(migration)
        logger.info(
            f"Eggs moved from pool {migration.parent_pool_id} to box {migration.laboratory_box_id}"
        )
        return migration

    def update_egg_migration(self, migration_id: int, data: ParentEggMigrationUpdate) -> ParentEggMigration:
        migration = self.get_egg_migration(migration_id)
        update_data = data.model_dump(exclude_unset=True)
        if update_data.get("parent_pool_id") is not None:
            require(self.db, ParentFishPool, update_data["parent_pool_id"], "Parent fish pool")
        if update_data.get("laboratory_box_id") is not None:
            require(self.db, LaboratoryBox, update_data["laboratory_box_id"], "Laboratory box")
        if update_data.get("employee_id") is not None:
            resolve_employee(self.db, None, update_data["employee_id"])
        if update_data.get("status"):
            update_data["status"] = update_data["status"].upper()

        for field, value in update_data.items():
            if value is not None or field == "description":
                setattr(migration, field, value)
        self.db.commit()
        self.db.refresh(migration)
        return migration

    def delete_egg_migration(self, migration_id: int) -> None:
        migration = self.get_egg_migration(migration_id)
        ensure_unreferenced(self.db, "Parent egg migration", [
            (EggToPondMigration.parent_egg_migration_id, migration_id, "pond migrations"),
            (EggFishFeeding.parent_egg_migration_id, migration_id, "feeding records"),
            (EggFishMedication.parent_egg_migration_id, migration_id, "medication records"),
        ])
        self.db.delete(migration)
        self.db.commit()
        logger.info(f"Parent egg migration {migration_id} deleted")

    # Laboratory batch to grown egg pond

    def list_pond_migrations(self, pond_id: Optional[int] = None) -> List[EggToPondMigration]:
        query = self.db.query(EggToPondMigration)
        if pond_id:
            query = query.filter(EggToPondMigration.pond_id == pond_id)
        return query.order_by(EggToPondMigration.created_at.desc(), EggToPondMigration.id.desc()).all()

    def get_pond_migration(self, migration_id: int) -> EggToPondMigration:
        return require(self.db, EggToPondMigration, migration_id, "Egg to pond migration")

    def create_pond_migration(self, data: EggToPondMigrationCreate) -> EggToPondMigration:
        self.get_egg_migration(data.parent_egg_migration_id)
        require(self.db, GrownEggPond, data.pond_id, "Pond")
        employee_id = resolve_employee(self.db, self.actor, data.employee_id)

        migration = EggToPondMigration(
            parent_egg_migration_id=data.parent_egg_migration_id,
            pond_id=data.pond_id,
            employee_id=employee_id,
            description=(data.description or "").strip() or None,
            migrated_on=data.migrated_on or date.today(),
            status=(data.status or ACTIVE).upper(),
        )
        self.db.add(migration)
        self.db.commit()
        self.db.refresh(migration)
        logger.info(
            f"Batch {migration.parent_egg_migration_id} moved to pond {migration.pond_id}"
        )
        return migration

    def update_pond_migration(self, migration_id: int, data: EggToPondMigrationUpdate) -> EggToPondMigration:
        migration = self.get_pond_migration(migration_id)
        update_data = data.model_dump(exclude_unset=True)
        if update_data.get("status"):
            update_data["status"] = update_data["status"].upper()

        for field, value in update_data.items():
            if value is not None or field == "description":
                setattr(migration, field, value)
        self.db.commit()
        self.db.refresh(migration)
        return migration

    def delete_pond_migration(self, migration_id: int) -> None:
        migration = self.get_pond_migration(migration_id)
        ensure_unreferenced(self.db, "Egg to pond migration", [
            (GrownEggPondFeeding.egg_to_pond_migration_id, migration_id, "feeding records"),
            (PondMedication.egg_to_pond_migration_id, migration_id, "medication records"),
        ])
        self.db.delete(migration)
        self.db.commit()
        logger.info(f"Egg to pond migration {migration_id} deleted")


class _WaterChangeLog:
    """Liters of water changed in a box or pond batch, per visit"""

    model = None
    parent_model = None
    parent_field = None
    parent_label = None

    def __init__(self, db: Session, actor: Optional[Principal] = None):
        self.db = db
        self.actor = actor

    def list_changes(self, parent_id: Optional[int] = None) -> list:
        query = self.db.query(self.model)
        if parent_id:
            query = query.filter(getattr(self.model, self.parent_field) == parent_id)
        return query.order_by(self.model.created_at.desc(), self.model.id.desc()).all()

    def get_change(self, change_id: int):
        change = self.db.get(self.model, change_id)
        if not change:
            raise NotFoundError("Water change record not found")
        return change

    def record_change(self, data):
        parent_id = getattr(data, self.parent_field)
        require(self.db, self.parent_model, parent_id, self.parent_label)
        self._check_liters(data.liters_changed)
        employee_id = resolve_employee(self.db, self.actor, data.employee_id)

        change = self.model(**data.model_dump(exclude={"employee_id"}), employee_id=employee_id)
        self.db.add(change)
        self.db.commit()
        self.db.refresh(change)
        logger.info(f"Water change of {change.liters_changed}L recorded for {self.parent_label.lower()} {parent_id}")
        return change

    def update_change(self, change_id: int, data: WaterChangeUpdate):
        change = self.get_change(change_id)
        update_data = data.model_dump(exclude_unset=True)
        if "liters_changed" in update_data:
            self._check_liters(update_data["liters_changed"])
        for field, value in update_data.items():
            setattr(change, field, value)
        self.db.commit()
        self.db.refresh(change)
        return change

    def delete_change(self, change_id: int) -> None:
        change = self.get_change(change_id)
        self.db.delete(change)
        self.db.commit()

    @staticmethod
    def _check_liters(liters: Optional[Decimal]) -> None:
        if liters is None or liters <= 0:
            raise ValidationError("Liters changed must be greater than zero")


class BoxWaterChangeService(_WaterChangeLog):
    model = BoxWaterChange
    parent_model = LaboratoryBox
    parent_field = "box_id"
    parent_label = "Laboratory box"

    def record_change(self, data: BoxWaterChangeCreate) -> BoxWaterChange:
        return super().record_change(data)


class PondWaterChangeService(_WaterChangeLog):
    model = PondWaterChange
    parent_model = EggToPondMigration
    parent_field = "egg_to_pond_migration_id"
    parent_label = "Egg to pond migration"

    def record_change(self, data: PondWaterChangeCreate) -> PondWaterChange:
        return super().record_change(data)
