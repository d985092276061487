"""Aquaculture Schemas - cages, feeding, medication, medicines, ponds and the hatchery"""

from pydantic import Field
from typing import Optional, List
from datetime import datetime, date
from decimal import Decimal

from .common import InputSchema, ORMSchema
from .hr import EmployeeBrief


# Cage Schemas
class CageCreate(InputSchema):
    name: str
    code: Optional[str] = None
    location: Optional[str] = None
    capacity: Optional[int] = None
    status: str = "ACTIVE"
    description: Optional[str] = None


class CageUpdate(InputSchema):
    name: Optional[str] = None
    code: Optional[str] = None
    location: Optional[str] = None
    capacity: Optional[int] = None
    status: Optional[str] = None
    description: Optional[str] = None


class CageResponse(ORMSchema):
    id: int
    name: str
    code: Optional[str] = None
    location: Optional[str] = None
    capacity: Optional[int] = None
    status: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None


# Feed Schemas
class FeedStockCreate(InputSchema):
    name: str
    type: Optional[str] = None
    quantity: Decimal = Decimal("0")
    unit: str = "kg"
    unit_price: Optional[Decimal] = None
    supplier: Optional[str] = None


class FeedStockUpdate(InputSchema):
    name: Optional[str] = None
    type: Optional[str] = None
    quantity: Optional[Decimal] = None
    unit: Optional[str] = None
    unit_price: Optional[Decimal] = None
    supplier: Optional[str] = None


class FeedStockResponse(ORMSchema):
    id: int
    name: str
    type: Optional[str] = None
    quantity: Decimal
    unit: str
    unit_price: Optional[Decimal] = None
    supplier: Optional[str] = None
    created_at: Optional[datetime] = None


class FeedCageCreate(InputSchema):
    cage_id: int
    feed_id: int
    employee_id: int
    quantity_given: Decimal
    notes: Optional[str] = None
    fed_at: Optional[datetime] = None


class FeedCageUpdate(InputSchema):
    quantity_given: Optional[Decimal] = None
    notes: Optional[str] = None
    fed_at: Optional[datetime] = None


class FeedCageResponse(ORMSchema):
    id: int
    cage_id: int
    feed_id: int
    employee_id: int
    quantity_given: Decimal
    notes: Optional[str] = None
    fed_at: Optional[datetime] = None
    cage: Optional[CageResponse] = None
    feed: Optional[FeedStockResponse] = None
    employee: Optional[EmployeeBrief] = None
    created_at: Optional[datetime] = None


# Medication Schemas
class MedicationCreate(InputSchema):
    cage_id: int
    medicine_name: str
    dosage: Optional[str] = None
    method: Optional[str] = None
    date_given: Optional[date] = None
    notes: Optional[str] = None
    employee_id: Optional[int] = None


class MedicationUpdate(InputSchema):
    medicine_name: Optional[str] = None
    dosage: Optional[str] = None
    method: Optional[str] = None
    date_given: Optional[date] = None
    notes: Optional[str] = None
    employee_id: Optional[int] = None


class MedicationResponse(ORMSchema):
    id: int
    cage_id: int
    medicine_name: str
    dosage: Optional[str] = None
    method: Optional[str] = None
    date_given: Optional[date] = None
    notes: Optional[str] = None
    employee_id: Optional[int] = None
    created_at: Optional[datetime] = None


# Medicine Schemas
class MedicineCreate(InputSchema):
    name: str
    type: Optional[str] = None
    quantity: Decimal
    unit: Optional[str] = None
    price_per_unit: Decimal
    expiry_date: Optional[date] = None
    description: Optional[str] = None
    added_by_id: Optional[int] = None


class MedicineUpdate(InputSchema):
    name: Optional[str] = None
    type: Optional[str] = None
    quantity: Optional[Decimal] = None
    unit: Optional[str] = None
    price_per_unit: Optional[Decimal] = None
    expiry_date: Optional[date] = None
    description: Optional[str] = None


class MedicineResponse(ORMSchema):
    id: int
    name: str
    type: Optional[str] = None
    quantity: Decimal
    unit: Optional[str] = None
    price_per_unit: Decimal
    total_cost: Decimal
    expiry_date: Optional[date] = None
    description: Optional[str] = None
    added_by_id: int
    added_by: Optional[EmployeeBrief] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# Pond Schemas
class ParentFishPoolCreate(InputSchema):
    name: str
    description: Optional[str] = None
    employee_id: int


class ParentFishPoolUpdate(InputSchema):
    name: Optional[str] = None
    description: Optional[str] = None
    employee_id: Optional[int] = None


class WaterChangeCreate(InputSchema):
    employee_id: int
    liters_changed: Decimal
    description: Optional[str] = None
    change_date: Optional[date] = None


class WaterChangeResponse(ORMSchema):
    id: int
    parent_pool_id: int
    employee_id: int
    liters_changed: Decimal
    description: Optional[str] = None
    change_date: Optional[date] = None
    created_at: Optional[datetime] = None


class ParentFishPoolResponse(ORMSchema):
    id: int
    name: str
    description: Optional[str] = None
    employee_id: int
    employee: Optional[EmployeeBrief] = None
    water_changes: List[WaterChangeResponse] = Field(default_factory=list)
    created_at: Optional[datetime] = None


class GrownEggPondCreate(InputSchema):
    name: str
    code: Optional[str] = None
    size: Decimal
    description: Optional[str] = None


class GrownEggPondUpdate(InputSchema):
    name: Optional[str] = None
    code: Optional[str] = None
    size: Optional[Decimal] = None
    description: Optional[str] = None


class GrownEggPondResponse(ORMSchema):
    id: int
    name: str
    code: Optional[str] = None
    size: Decimal
    description: Optional[str] = None
    created_at: Optional[datetime] = None


# Laboratory box Schemas
class LaboratoryBoxCreate(InputSchema):
    name: str
    code: str
    description: Optional[str] = None


class LaboratoryBoxUpdate(InputSchema):
    name: Optional[str] = None
    code: Optional[str] = None
    description: Optional[str] = None


class LaboratoryBoxResponse(ORMSchema):
    id: int
    name: str
    code: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None


# Water change Schemas
class BoxWaterChangeCreate(InputSchema):
    box_id: int
    liters_changed: Decimal
    description: Optional[str] = None
    employee_id: Optional[int] = None


class PondWaterChangeCreate(InputSchema):
    egg_to_pond_migration_id: int
    liters_changed: Decimal
    description: Optional[str] = None
    employee_id: Optional[int] = None


class WaterChangeUpdate(InputSchema):
    liters_changed: Optional[Decimal] = None
    description: Optional[str] = None


class BoxWaterChangeResponse(ORMSchema):
    id: int
    box_id: int
    employee_id: int
    liters_changed: Decimal
    description: Optional[str] = None
    box: Optional[LaboratoryBoxResponse] = None
    employee: Optional[EmployeeBrief] = None
    created_at: Optional[datetime] = None


class PondWaterChangeResponse(ORMSchema):
    id: int
    egg_to_pond_migration_id: int
    employee_id: int
    liters_changed: Decimal
    description: Optional[str] = None
    employee: Optional[EmployeeBrief] = None
    created_at: Optional[datetime] = None


# Migration Schemas
class ParentEggMigrationCreate(InputSchema):
    parent_pool_id: int
    laboratory_box_id: int
    employee_id: Optional[int] = None
    description: Optional[str] = None
    migrated_on: Optional[date] = None


class ParentEggMigrationUpdate(InputSchema):
    parent_pool_id: Optional[int] = None
    laboratory_box_id: Optional[int] = None
    employee_id: Optional[int] = None
    description: Optional[str] = None
    status: Optional[str] = None
    migrated_on: Optional[date] = None


class PoolBrief(ORMSchema):
    id: int
    name: str


class ParentEggMigrationResponse(ORMSchema):
    id: int
    parent_pool_id: int
    laboratory_box_id: int
    employee_id: int
    description: Optional[str] = None
    status: str
    migrated_on: Optional[date] = None
    parent_pool: Optional[PoolBrief] = None
    laboratory_box: Optional[LaboratoryBoxResponse] = None
    employee: Optional[EmployeeBrief] = None
    created_at: Optional[datetime] = None


class EggToPondMigrationCreate(InputSchema):
    parent_egg_migration_id: int
    pond_id: int
    employee_id: Optional[int] = None
    description: Optional[str] = None
    status: Optional[str] = None
    migrated_on: Optional[date] = None


class EggToPondMigrationUpdate(InputSchema):
    description: Optional[str] = None
    status: Optional[str] = None
    migrated_on: Optional[date] = None


class EggToPondMigrationResponse(ORMSchema):
    id: int
    parent_egg_migration_id: int
    pond_id: int
    employee_id: int
    description: Optional[str] = None
    status: str
    migrated_on: Optional[date] = None
    pond: Optional[GrownEggPondResponse] = None
    employee: Optional[EmployeeBrief] = None
    created_at: Optional[datetime] = None


# Batch feeding Schemas
class ParentFishFeedingCreate(InputSchema):
    parent_pool_id: int
    feed_id: int
    quantity: Decimal
    employee_id: Optional[int] = None


class EggFishFeedingCreate(InputSchema):
    parent_egg_migration_id: int
    feed_id: int
    quantity: Decimal
    employee_id: Optional[int] = None


class GrownEggPondFeedingCreate(InputSchema):
    egg_to_pond_migration_id: int
    feed_id: int
    quantity: Decimal
    employee_id: Optional[int] = None


class BatchFeedingUpdate(InputSchema):
    quantity: Optional[Decimal] = None
    employee_id: Optional[int] = None


class BatchFeedingResponse(ORMSchema):
    id: int
    feed_id: int
    employee_id: int
    quantity: Decimal
    feed: Optional[FeedStockResponse] = None
    employee: Optional[EmployeeBrief] = None
    created_at: Optional[datetime] = None


class ParentFishFeedingResponse(BatchFeedingResponse):
    parent_pool_id: int


class EggFishFeedingResponse(BatchFeedingResponse):
    parent_egg_migration_id: int


class GrownEggPondFeedingResponse(BatchFeedingResponse):
    egg_to_pond_migration_id: int


# Batch medication Schemas
class ParentFishMedicationCreate(InputSchema):
    parent_pool_id: int
    medicine_id: int
    quantity: Decimal = Decimal("0")
    employee_id: Optional[int] = None


class EggFishMedicationCreate(InputSchema):
    parent_egg_migration_id: int
    medicine_id: int
    quantity: Decimal = Decimal("0")
    employee_id: Optional[int] = None


class PondMedicationCreate(InputSchema):
    egg_to_pond_migration_id: int
    medicine_id: int
    quantity: Decimal = Decimal("0")
    employee_id: Optional[int] = None


class BatchMedicationUpdate(InputSchema):
    medicine_id: Optional[int] = None
    quantity: Optional[Decimal] = None
    employee_id: Optional[int] = None


class MedicineBrief(ORMSchema):
    id: int
    name: str
    unit: Optional[str] = None


class BatchMedicationResponse(ORMSchema):
    id: int
    medicine_id: int
    employee_id: int
    quantity: Decimal
    medicine: Optional[MedicineBrief] = None
    employee: Optional[EmployeeBrief] = None
    created_at: Optional[datetime] = None


class ParentFishMedicationResponse(BatchMedicationResponse):
    parent_pool_id: int


class EggFishMedicationResponse(BatchMedicationResponse):
    parent_egg_migration_id: int


class PondMedicationResponse(BatchMedicationResponse):
    egg_to_pond_migration_id: int
