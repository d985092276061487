"""
Aquaculture API endpoints
Cages, feed stock and feeding, medication, medicine stock and ponds
"""

from typing import List, Optional
from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.orm import Session

from aby_api.api import deps
from aby_api.core.security import Principal
from aby_api.realtime import medicine_gateway
from aby_api.schemas.aquaculture import (
    CageCreate, CageResponse, CageUpdate,
    FeedCageCreate, FeedCageResponse, FeedCageUpdate,
    FeedStockCreate, FeedStockResponse, FeedStockUpdate,
    GrownEggPondCreate, GrownEggPondResponse, GrownEggPondUpdate,
    MedicationCreate, MedicationResponse, MedicationUpdate,
    MedicineCreate, MedicineResponse, MedicineUpdate,
    ParentFishPoolCreate, ParentFishPoolResponse, ParentFishPoolUpdate,
    WaterChangeCreate, WaterChangeResponse,
)
from aby_api.schemas.common import MessageResponse
from aby_api.services.aquaculture import (
    CageService, FeedService, GrownEggPondService, MedicationService, MedicineService,
    ParentPoolService,
)

cages_router = APIRouter()
feed_router = APIRouter()
medications_router = APIRouter()
medicines_router = APIRouter()
ponds_router = APIRouter()


# Cages

@cages_router.get("/", response_model=List[CageResponse])
def list_cages(
    cage_status: Optional[str] = Query(None, alias="status"),
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return CageService(db).list_cages(status=cage_status)


@cages_router.post("/", response_model=CageResponse, status_code=status.HTTP_201_CREATED)
def create_cage(
    cage_in: CageCreate,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return CageService(db).create_cage(cage_in)


@cages_router.get("/{cage_id}", response_model=CageResponse)
def get_cage(
    cage_id: int,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return CageService(db).get_cage(cage_id)


@cages_router.put("/{cage_id}", response_model=CageResponse)
def update_cage(
    cage_id: int,
    cage_in: CageUpdate,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return CageService(db).update_cage(cage_id, cage_in)


@cages_router.delete("/{cage_id}", response_model=MessageResponse)
def delete_cage(
    cage_id: int,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    CageService(db).delete_cage(cage_id)
    return {"message": "Cage deleted successfully"}


# Feed stock and cage feeding

@feed_router.get("/stock", response_model=List[FeedStockResponse])
def list_feeds(
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return FeedService(db).list_feeds()


@feed_router.post("/stock", response_model=FeedStockResponse, status_code=status.HTTP_201_CREATED)
def create_feed(
    feed_in: FeedStockCreate,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return FeedService(db).create_feed(feed_in)


@feed_router.get("/stock/{feed_id}", response_model=FeedStockResponse)
def get_feed(
    feed_id: int,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return FeedService(db).get_feed(feed_id)


@feed_router.put("/stock/{feed_id}", response_model=FeedStockResponse)
def update_feed(
    feed_id: int,
    feed_in: FeedStockUpdate,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return FeedService(db).update_feed(feed_id, feed_in)


@feed_router.delete("/stock/{feed_id}", response_model=MessageResponse)
def delete_feed(
    feed_id: int,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    FeedService(db).delete_feed(feed_id)
    return {"message": "Feed deleted successfully"}


@feed_router.get("/cage", response_model=List[FeedCageResponse])
def list_feedings(
    cage_id: Optional[int] = Query(None, alias="cageId"),
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return FeedService(db).list_feedings(cage_id=cage_id)


@feed_router.post("/cage", response_model=FeedCageResponse, status_code=status.HTTP_201_CREATED)
def feed_cage(
    feeding_in: FeedCageCreate,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    """
    Record feed given to a cage; the quantity is drawn from feed stock.
    """
    return FeedService(db).feed_cage(feeding_in)


@feed_router.get("/cage/{feeding_id}", response_model=FeedCageResponse)
def get_feeding(
    feeding_id: int,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return FeedService(db).get_feeding(feeding_id)


@feed_router.put("/cage/{feeding_id}", response_model=FeedCageResponse)
def update_feeding(
    feeding_id: int,
    feeding_in: FeedCageUpdate,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return FeedService(db).update_feeding(feeding_id, feeding_in)


@feed_router.delete("/cage/{feeding_id}", response_model=MessageResponse)
def delete_feeding(
    feeding_id: int,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    FeedService(db).delete_feeding(feeding_id)
    return {"message": "Feeding record deleted successfully"}


# Medication

@medications_router.get("/", response_model=List[MedicationResponse])
def list_medications(
    cage_id: Optional[int] = Query(None, alias="cageId"),
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return MedicationService(db).list_medications(cage_id=cage_id)


@medications_router.post("/", response_model=MedicationResponse, status_code=status.HTTP_201_CREATED)
def create_medication(
    medication_in: MedicationCreate,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return MedicationService(db).create_medication(medication_in)


@medications_router.get("/{medication_id}", response_model=MedicationResponse)
def get_medication(
    medication_id: int,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return MedicationService(db).get_medication(medication_id)


@medications_router.put("/{medication_id}", response_model=MedicationResponse)
def update_medication(
    medication_id: int,
    medication_in: MedicationUpdate,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return MedicationService(db).update_medication(medication_id, medication_in)


@medications_router.delete("/{medication_id}", response_model=MessageResponse)
def delete_medication(
    medication_id: int,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    MedicationService(db).delete_medication(medication_id)
    return {"message": "Medication deleted successfully"}


# Medicines

@medicines_router.get("/", response_model=List[MedicineResponse])
def list_medicines(
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return MedicineService(db, principal).list_medicines()


@medicines_router.post("/", status_code=status.HTTP_201_CREATED)
def create_medicine(
    medicine_in: MedicineCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    """
    Add medicine to stock; ``total_cost`` is price per unit times quantity.
    """
    medicine = MedicineResponse.model_validate(MedicineService(db, principal).create_medicine(medicine_in))
    background_tasks.add_task(medicine_gateway.emit, "medicineCreated", medicine)
    return {"message": "Medicine created successfully", "medicine": medicine}


@medicines_router.get("/{medicine_id}", response_model=MedicineResponse)
def get_medicine(
    medicine_id: int,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return MedicineService(db, principal).get_medicine(medicine_id)


@medicines_router.put("/{medicine_id}")
def update_medicine(
    medicine_id: int,
    medicine_in: MedicineUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    medicine = MedicineResponse.model_validate(
        MedicineService(db, principal).update_medicine(medicine_id, medicine_in)
    )
    background_tasks.add_task(medicine_gateway.emit, "medicineUpdated", medicine)
    return {"message": "Medicine updated successfully", "medicine": medicine}


@medicines_router.delete("/{medicine_id}", response_model=MessageResponse)
def delete_medicine(
    medicine_id: int,
    background_tasks: BackgroundTasks,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    MedicineService(db, principal).delete_medicine(medicine_id)
    background_tasks.add_task(medicine_gateway.emit, "medicineDeleted", {"id": medicine_id})
    return {"message": "Medicine deleted successfully"}


# Parent fish pools

@ponds_router.get("/parent-pools", response_model=List[ParentFishPoolResponse])
def list_parent_pools(
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return ParentPoolService(db).list_pools()


@ponds_router.post("/parent-pools", response_model=ParentFishPoolResponse, status_code=status.HTTP_201_CREATED)
def create_parent_pool(
    pool_in: ParentFishPoolCreate,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return ParentPoolService(db).create_pool(pool_in)


@ponds_router.get("/parent-pools/{pool_id}", response_model=ParentFishPoolResponse)
def get_parent_pool(
    pool_id: int,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return ParentPoolService(db).get_pool(pool_id)


@ponds_router.put("/parent-pools/{pool_id}", response_model=ParentFishPoolResponse)
def update_parent_pool(
    pool_id: int,
    pool_in: ParentFishPoolUpdate,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return ParentPoolService(db).update_pool(pool_id, pool_in)


@ponds_router.delete("/parent-pools/{pool_id}", response_model=MessageResponse)
def delete_parent_pool(
    pool_id: int,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    ParentPoolService(db).delete_pool(pool_id)
    return {"message": "Pool deleted successfully"}


@ponds_router.get("/parent-pools/{pool_id}/water-changes", response_model=List[WaterChangeResponse])
def list_water_changes(
    pool_id: int,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return ParentPoolService(db).list_water_changes(pool_id)


@ponds_router.post(
    "/parent-pools/{pool_id}/water-changes",
    response_model=WaterChangeResponse,
    status_code=status.HTTP_201_CREATED
)
def record_water_change(
    pool_id: int,
    change_in: WaterChangeCreate,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return ParentPoolService(db).record_water_change(pool_id, change_in)


# Grown egg ponds

@ponds_router.get("/grown-egg-ponds", response_model=List[GrownEggPondResponse])
def list_grown_egg_ponds(
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return GrownEggPondService(db).list_ponds()


@ponds_router.post("/grown-egg-ponds", response_model=GrownEggPondResponse, status_code=status.HTTP_201_CREATED)
def create_grown_egg_pond(
    pond_in: GrownEggPondCreate,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return GrownEggPondService(db).create_pond(pond_in)


@ponds_router.get("/grown-egg-ponds/{pond_id}", response_model=GrownEggPondResponse)
def get_grown_egg_pond(
    pond_id: int,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return GrownEggPondService(db).get_pond(pond_id)


@ponds_router.put("/grown-egg-ponds/{pond_id}", response_model=GrownEggPondResponse)
def update_grown_egg_pond(
    pond_id: int,
    pond_in: GrownEggPondUpdate,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return GrownEggPondService(db).update_pond(pond_id, pond_in)


@ponds_router.delete("/grown-egg-ponds/{pond_id}", response_model=MessageResponse)
def delete_grown_egg_pond(
    pond_id: int,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    GrownEggPondService(db).delete_pond(pond_id)
    return {"message": "Pond deleted successfully"}
