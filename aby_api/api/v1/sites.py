"""
Site and Store API endpoints
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from aby_api.api import deps
from aby_api.core.security import Principal
from aby_api.schemas.common import MessageResponse, PaginationMeta
from aby_api.schemas.organization import (
    AssignEmployees,
    SiteCreate,
    SiteResponse,
    SiteUpdate,
    StoreCreate,
    StorePage,
    StoreResponse,
    StoreUpdate,
)
from aby_api.services.sites import SiteService, StoreService

sites_router = APIRouter()
stores_router = APIRouter()


# Sites

@sites_router.get("/", response_model=List[SiteResponse])
def list_sites(
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return SiteService(db).list_sites()


@sites_router.post("/", response_model=SiteResponse, status_code=status.HTTP_201_CREATED)
def create_site(
    site_in: SiteCreate,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    """
    Create a site. Manager and supervisor must be different employees.
    """
    return SiteService(db).create_site(site_in)


@sites_router.get("/{site_id}", response_model=SiteResponse)
def get_site(
    site_id: int,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return SiteService(db).get_site(site_id)


@sites_router.put("/{site_id}", response_model=SiteResponse)
def update_site(
    site_id: int,
    site_in: SiteUpdate,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return SiteService(db).update_site(site_id, site_in)


@sites_router.put("/{site_id}/employees", response_model=SiteResponse)
def assign_site_employees(
    site_id: int,
    assignment: AssignEmployees,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    """
    Replace the staff assigned to a site.
    """
    return SiteService(db).assign_employees(site_id, assignment.employee_ids)


@sites_router.delete("/{site_id}", response_model=MessageResponse)
def delete_site(
    site_id: int,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    SiteService(db).delete_site(site_id)
    return {"message": "Site deleted successfully"}


# Stores

@stores_router.get("/", response_model=StorePage)
def list_stores(
    search: Optional[str] = None,
    pagination: dict = Depends(deps.get_pagination_params),
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    """
    Stores matching ``search`` on name, location or code, one page at a time.
    """
    stores, total = StoreService(db).list_stores(search=search, **pagination)
    return {
        "stores": stores,
        "pagination": PaginationMeta.build(pagination["page"], pagination["limit"], total),
    }


@stores_router.post("/", response_model=StoreResponse, status_code=status.HTTP_201_CREATED)
def create_store(
    store_in: StoreCreate,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return StoreService(db).create_store(store_in)


@stores_router.get("/{store_id}", response_model=StoreResponse)
def get_store(
    store_id: int,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return StoreService(db).get_store(store_id)


@stores_router.put("/{store_id}", response_model=StoreResponse)
def update_store(
    store_id: int,
    store_in: StoreUpdate,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return StoreService(db).update_store(store_id, store_in)


@stores_router.delete("/{store_id}", response_model=MessageResponse)
def delete_store(
    store_id: int,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    StoreService(db).delete_store(store_id)
    return {"message": "Store deleted successfully"}
