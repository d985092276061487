"""
Hatchery API endpoints
Laboratory boxes, egg migrations, box and pond water changes, and the
feeding and medication of parent pools, laboratory batches and pond batches
"""

from typing import Dict, List, Optional
from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.orm import Session

from aby_api.api import deps
from aby_api.core.security import Principal
from aby_api.realtime import (
    Gateway,
    box_water_gateway,
    egg_fish_medication_gateway,
    laboratory_box_gateway,
    pond_medication_gateway,
    pond_water_gateway,
)
from aby_api.schemas.aquaculture import (
    BatchFeedingUpdate, BatchMedicationUpdate,
    BoxWaterChangeCreate, BoxWaterChangeResponse,
    EggFishFeedingCreate, EggFishFeedingResponse,
    EggFishMedicationCreate, EggFishMedicationResponse,
    EggToPondMigrationCreate, EggToPondMigrationResponse, EggToPondMigrationUpdate,
    GrownEggPondFeedingCreate, GrownEggPondFeedingResponse,
    LaboratoryBoxCreate, LaboratoryBoxResponse, LaboratoryBoxUpdate,
    ParentEggMigrationCreate, ParentEggMigrationResponse, ParentEggMigrationUpdate,
    ParentFishFeedingCreate, ParentFishFeedingResponse,
    ParentFishMedicationCreate, ParentFishMedicationResponse,
    PondMedicationCreate, PondMedicationResponse,
    PondWaterChangeCreate, PondWaterChangeResponse,
    WaterChangeUpdate,
)
from aby_api.schemas.common import MessageResponse
from aby_api.services.aquaculture import (
    BoxWaterChangeService, EggFishFeedingService, EggFishMedicationService,
    GrownEggPondFeedingService, LaboratoryBoxService, MigrationService,
    ParentFishFeedingService, ParentFishMedicationService, PondMedicationService,
    PondWaterChangeService,
)

boxes_router = APIRouter()
box_water_router = APIRouter()
migrations_router = APIRouter()
pond_water_router = APIRouter()


# Laboratory boxes

@boxes_router.get("/", response_model=List[LaboratoryBoxResponse])
def list_boxes(
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return LaboratoryBoxService(db).list_boxes()


@boxes_router.post("/", response_model=LaboratoryBoxResponse, status_code=status.HTTP_201_CREATED)
def create_box(
    box_in: LaboratoryBoxCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    box = LaboratoryBoxResponse.model_validate(LaboratoryBoxService(db).create_box(box_in))
    background_tasks.add_task(laboratory_box_gateway.emit, "laboratoryBoxCreated", box)
    return box


@boxes_router.get("/{box_id}", response_model=LaboratoryBoxResponse)
def get_box(
    box_id: int,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return LaboratoryBoxService(db).get_box(box_id)


@boxes_router.put("/{box_id}", response_model=LaboratoryBoxResponse)
def update_box(
    box_id: int,
    box_in: LaboratoryBoxUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    box = LaboratoryBoxResponse.model_validate(LaboratoryBoxService(db).update_box(box_id, box_in))
    background_tasks.add_task(laboratory_box_gateway.emit, "laboratoryBoxUpdated", box)
    return box


@boxes_router.delete("/{box_id}", response_model=MessageResponse)
def delete_box(
    box_id: int,
    background_tasks: BackgroundTasks,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    LaboratoryBoxService(db).delete_box(box_id)
    background_tasks.add_task(laboratory_box_gateway.emit, "laboratoryBoxDeleted", {"id": box_id})
    return {"message": "Laboratory box deleted successfully"}


# Box water changes

@box_water_router.get("/", response_model=List[BoxWaterChangeResponse])
def list_box_water_changes(
    box_id: Optional[int] = Query(None, alias="boxId"),
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return BoxWaterChangeService(db).list_changes(box_id)


@box_water_router.post("/", response_model=BoxWaterChangeResponse, status_code=status.HTTP_201_CREATED)
def record_box_water_change(
    change_in: BoxWaterChangeCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    """
    Record a water change for a laboratory box; the employee defaults to the caller.
    """
    change = BoxWaterChangeResponse.model_validate(
        BoxWaterChangeService(db, principal).record_change(change_in)
    )
    background_tasks.add_task(box_water_gateway.emit, "waterChangeCreated", change)
    return change


@box_water_router.get("/{change_id}", response_model=BoxWaterChangeResponse)
def get_box_water_change(
    change_id: int,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return BoxWaterChangeService(db).get_change(change_id)


@box_water_router.put("/{change_id}", response_model=BoxWaterChangeResponse)
def update_box_water_change(
    change_id: int,
    change_in: WaterChangeUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    change = BoxWaterChangeResponse.model_validate(
        BoxWaterChangeService(db).update_change(change_id, change_in)
    )
    background_tasks.add_task(box_water_gateway.emit, "waterChangeUpdated", change)
    return change


@box_water_router.delete("/{change_id}", response_model=MessageResponse)
def delete_box_water_change(
    change_id: int,
    background_tasks: BackgroundTasks,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    BoxWaterChangeService(db).delete_change(change_id)
    background_tasks.add_task(box_water_gateway.emit, "waterChangeDeleted", {"id": change_id})
    return {"message": "Water change record deleted successfully"}


# Egg migrations

@migrations_router.get("/parent-egg", response_model=List[ParentEggMigrationResponse])
def list_egg_migrations(
    migration_status: Optional[str] = Query(None, alias="status"),
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return MigrationService(db).list_egg_migrations(status=migration_status)


@migrations_router.post(
    "/parent-egg",
    response_model=ParentEggMigrationResponse,
    status_code=status.HTTP_201_CREATED
)
def create_egg_migration(
    migration_in: ParentEggMigrationCreate,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    """
    Move eggs from a parent fish pool into a laboratory box.
    """
    return MigrationService(db, principal).create_egg_migration(migration_in)


@migrations_router.get("/parent-egg/{migration_id}", response_model=ParentEggMigrationResponse)
def get_egg_migration(
    migration_id: int,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return MigrationService(db).get_egg_migration(migration_id)


@migrations_router.put("/parent-egg/{migration_id}", response_model=ParentEggMigrationResponse)
def update_egg_migration(
    migration_id: int,
    migration_in: ParentEggMigrationUpdate,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return MigrationService(db).update_egg_migration(migration_id, migration_in)


@migrations_router.delete("/parent-egg/{migration_id}", response_model=MessageResponse)
def delete_egg_migration(
    migration_id: int,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    MigrationService(db).delete_egg_migration(migration_id)
    return {"message": "Migration deleted successfully"}


@migrations_router.get("/egg-to-pond", response_model=List[EggToPondMigrationResponse])
def list_pond_migrations(
    pond_id: Optional[int] = Query(None, alias="pondId"),
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return MigrationService(db).list_pond_migrations(pond_id=pond_id)


@migrations_router.post(
    "/egg-to-pond",
    response_model=EggToPondMigrationResponse,
    status_code=status.HTTP_201_CREATED
)
def create_pond_migration(
    migration_in: EggToPondMigrationCreate,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    """
    Move a laboratory batch into a grown egg pond.
    """
    return MigrationService(db, principal).create_pond_migration(migration_in)


@migrations_router.get("/egg-to-pond/{migration_id}", response_model=EggToPondMigrationResponse)
def get_pond_migration(
    migration_id: int,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return MigrationService(db).get_pond_migration(migration_id)


@migrations_router.put("/egg-to-pond/{migration_id}", response_model=EggToPondMigrationResponse)
def update_pond_migration(
    migration_id: int,
    migration_in: EggToPondMigrationUpdate,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return MigrationService(db).update_pond_migration(migration_id, migration_in)


@migrations_router.delete("/egg-to-pond/{migration_id}", response_model=MessageResponse)
def delete_pond_migration(
    migration_id: int,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    MigrationService(db).delete_pond_migration(migration_id)
    return {"message": "Migration deleted successfully"}


# Pond water changes

@pond_water_router.get("/", response_model=List[PondWaterChangeResponse])
def list_pond_water_changes(
    migration_id: Optional[int] = Query(None, alias="eggToPondMigrationId"),
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return PondWaterChangeService(db).list_changes(migration_id)


@pond_water_router.post("/", response_model=PondWaterChangeResponse, status_code=status.HTTP_201_CREATED)
def record_pond_water_change(
    change_in: PondWaterChangeCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    change = PondWaterChangeResponse.model_validate(
        PondWaterChangeService(db, principal).record_change(change_in)
    )
    background_tasks.add_task(pond_water_gateway.emit, "pondWaterChangeCreated", change)
    return change


@pond_water_router.get("/{change_id}", response_model=PondWaterChangeResponse)
def get_pond_water_change(
    change_id: int,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return PondWaterChangeService(db).get_change(change_id)


@pond_water_router.put("/{change_id}", response_model=PondWaterChangeResponse)
def update_pond_water_change(
    change_id: int,
    change_in: WaterChangeUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    change = PondWaterChangeResponse.model_validate(
        PondWaterChangeService(db).update_change(change_id, change_in)
    )
    background_tasks.add_task(pond_water_gateway.emit, "pondWaterChangeUpdated", change)
    return change


@pond_water_router.delete("/{change_id}", response_model=MessageResponse)
def delete_pond_water_change(
    change_id: int,
    background_tasks: BackgroundTasks,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    PondWaterChangeService(db).delete_change(change_id)
    background_tasks.add_task(pond_water_gateway.emit, "pondWaterChangeDeleted", {"id": change_id})
    return {"message": "Pond water change record deleted successfully"}


# Feeding and medication of batches. The three batch kinds share one set of
# endpoints; only the service, the schemas and the batch filter differ.

def _feeding_router(service_cls, create_schema, response_model, batch_alias: str) -> APIRouter:
    router = APIRouter()

    @router.get("/", response_model=List[response_model])
    def list_feedings(
        batch_id: Optional[int] = Query(None, alias=batch_alias),
        db: Session = Depends(deps.get_db),
        principal: Principal = Depends(deps.get_current_principal)
    ):
        return service_cls(db).list_feedings(batch_id)

    @router.post("/", response_model=response_model, status_code=status.HTTP_201_CREATED)
    def create_feeding(
        feeding_in: create_schema,
        db: Session = Depends(deps.get_db),
        principal: Principal = Depends(deps.get_current_principal)
    ):
        """
        Record a feeding; the quantity is drawn from feed stock.
        """
        return service_cls(db, principal).create_feeding(feeding_in)

    @router.get("/{feeding_id}", response_model=response_model)
    def get_feeding(
        feeding_id: int,
        db: Session = Depends(deps.get_db),
        principal: Principal = Depends(deps.get_current_principal)
    ):
        return service_cls(db).get_feeding(feeding_id)

    @router.put("/{feeding_id}", response_model=response_model)
    def update_feeding(
        feeding_id: int,
        feeding_in: BatchFeedingUpdate,
        db: Session = Depends(deps.get_db),
        principal: Principal = Depends(deps.get_current_principal)
    ):
        return service_cls(db).update_feeding(feeding_id, feeding_in)

    @router.delete("/{feeding_id}", response_model=MessageResponse)
    def delete_feeding(
        feeding_id: int,
        db: Session = Depends(deps.get_db),
        principal: Principal = Depends(deps.get_current_principal)
    ):
        service_cls(db).delete_feeding(feeding_id)
        return {"message": "Feeding record deleted successfully"}

    return router


def _treatment_router(
    service_cls,
    create_schema,
    response_model,
    batch_alias: str,
    gateway: Optional[Gateway] = None,
    events: Optional[Dict[str, str]] = None
) -> APIRouter:
    router = APIRouter()

    def broadcast(background_tasks: BackgroundTasks, action: str, payload) -> None:
        if gateway is not None:
            background_tasks.add_task(gateway.emit, events[action], payload)

    @router.get("/", response_model=List[response_model])
    def list_treatments(
        batch_id: Optional[int] = Query(None, alias=batch_alias),
        db: Session = Depends(deps.get_db),
        principal: Principal = Depends(deps.get_current_principal)
    ):
        return service_cls(db).list_treatments(batch_id)

    @router.post("/", response_model=response_model, status_code=status.HTTP_201_CREATED)
    def create_treatment(
        treatment_in: create_schema,
        background_tasks: BackgroundTasks,
        db: Session = Depends(deps.get_db),
        principal: Principal = Depends(deps.get_current_principal)
    ):
        treatment = response_model.model_validate(service_cls(db, principal).create_treatment(treatment_in))
        broadcast(background_tasks, "created", treatment)
        return treatment

    @router.get("/{treatment_id}", response_model=response_model)
    def get_treatment(
        treatment_id: int,
        db: Session = Depends(deps.get_db),
        principal: Principal = Depends(deps.get_current_principal)
    ):
        return service_cls(db).get_treatment(treatment_id)

    @router.put("/{treatment_id}", response_model=response_model)
    def update_treatment(
        treatment_id: int,
        treatment_in: BatchMedicationUpdate,
        background_tasks: BackgroundTasks,
        db: Session = Depends(deps.get_db),
        principal: Principal = Depends(deps.get_current_principal)
    ):
        treatment = response_model.model_validate(service_cls(db).update_treatment(treatment_id, treatment_in))
        broadcast(background_tasks, "updated", treatment)
        return treatment

    @router.delete("/{treatment_id}", response_model=MessageResponse)
    def delete_treatment(
        treatment_id: int,
        background_tasks: BackgroundTasks,
        db: Session = Depends(deps.get_db),
        principal: Principal = Depends(deps.get_current_principal)
    ):
        service_cls(db).delete_treatment(treatment_id)
        broadcast(background_tasks, "deleted", {"id": treatment_id})
        return {"message": "Medication record deleted successfully"}

    return router


parent_fish_feeding_router = _feeding_router(
    ParentFishFeedingService, ParentFishFeedingCreate, ParentFishFeedingResponse, "parentPoolId"
)
egg_fish_feeding_router = _feeding_router(
    EggFishFeedingService, EggFishFeedingCreate, EggFishFeedingResponse, "parentEggMigrationId"
)
grown_egg_pond_feeding_router = _feeding_router(
    GrownEggPondFeedingService, GrownEggPondFeedingCreate, GrownEggPondFeedingResponse,
    "eggToPondMigrationId"
)

parent_fish_medication_router = _treatment_router(
    ParentFishMedicationService, ParentFishMedicationCreate, ParentFishMedicationResponse,
    "parentPoolId"
)
egg_fish_medication_router = _treatment_router(
    EggFishMedicationService, EggFishMedicationCreate, EggFishMedicationResponse,
    "parentEggMigrationId",
    gateway=egg_fish_medication_gateway,
    events={
        "created": "eggFishMedication.create",
        "updated": "eggFishMedication.update",
        "deleted": "eggFishMedication.delete",
    },
)
pond_medication_router = _treatment_router(
    PondMedicationService, PondMedicationCreate, PondMedicationResponse,
    "eggToPondMigrationId",
    gateway=pond_medication_gateway,
    events={
        "created": "pondMedicationCreated",
        "updated": "pondMedicationUpdated",
        "deleted": "pondMedicationDeleted",
    },
)
