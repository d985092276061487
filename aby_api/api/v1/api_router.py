"""
Main API Router - Consolidates all module routes
"""

from fastapi import APIRouter
from aby_api.api.v1 import (
    aquaculture,
    assets,
    auth,
    hatchery,
    hr,
    sites,
    stock,
)
from aby_api.schemas.common import ErrorResponse

# Documented on every route; bodies come from the exception handlers in main
ERROR_RESPONSES = {
    code: {"model": ErrorResponse, "description": description}
    for code, description in (
        (400, "Invalid input or business rule violation"),
        (401, "Not signed in"),
        (403, "Role not allowed"),
        (404, "Record not found"),
        (409, "Duplicate or still-referenced record"),
    )
}

api_router = APIRouter(responses=ERROR_RESPONSES)

# Authentication routes
api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])

# Stock routes
api_router.include_router(stock.requests.router, prefix="/stock-requests", tags=["stock-requests"])
api_router.include_router(stock.inventory.router, prefix="/stock", tags=["stock"])

# Asset routes
api_router.include_router(assets.assets.router, prefix="/assets", tags=["assets"])
api_router.include_router(assets.requests.router, prefix="/asset-requests", tags=["asset-requests"])

# HR routes
api_router.include_router(hr.employees.router, prefix="/employees", tags=["employees"])
api_router.include_router(hr.departments.router, prefix="/departments", tags=["departments"])
api_router.include_router(hr.contracts.router, prefix="/contracts", tags=["contracts"])
api_router.include_router(hr.recruitment.jobs_router, prefix="/jobs", tags=["jobs"])
api_router.include_router(hr.recruitment.applicants_router, prefix="/applicants", tags=["applicants"])
api_router.include_router(hr.clients.router, prefix="/clients", tags=["clients"])

# Site routes
api_router.include_router(sites.sites_router, prefix="/sites", tags=["sites"])
api_router.include_router(sites.stores_router, prefix="/stores", tags=["stores"])

# Aquaculture routes
api_router.include_router(aquaculture.cages_router, prefix="/cages", tags=["cages"])
api_router.include_router(aquaculture.feed_router, prefix="/feed", tags=["feeding"])
api_router.include_router(aquaculture.medications_router, prefix="/medications", tags=["medications"])
api_router.include_router(aquaculture.medicines_router, prefix="/medicines", tags=["medicines"])
api_router.include_router(aquaculture.ponds_router, prefix="/ponds", tags=["ponds"])

# Hatchery routes
api_router.include_router(hatchery.boxes_router, prefix="/laboratory-boxes", tags=["laboratory-boxes"])
api_router.include_router(hatchery.box_water_router, prefix="/box-water-changes", tags=["water-changes"])
api_router.include_router(hatchery.pond_water_router, prefix="/pond-water-changes", tags=["water-changes"])
api_router.include_router(hatchery.migrations_router, prefix="/migrations", tags=["migrations"])
api_router.include_router(
    hatchery.parent_fish_feeding_router, prefix="/parent-fish-feedings", tags=["feeding"]
)
api_router.include_router(hatchery.egg_fish_feeding_router, prefix="/egg-fish-feedings", tags=["feeding"])
api_router.include_router(
    hatchery.grown_egg_pond_feeding_router, prefix="/grown-egg-pond-feedings", tags=["feeding"]
)
api_router.include_router(
    hatchery.parent_fish_medication_router, prefix="/parent-fish-medications", tags=["medications"]
)
api_router.include_router(
    hatchery.egg_fish_medication_router, prefix="/egg-fish-medications", tags=["medications"]
)
api_router.include_router(hatchery.pond_medication_router, prefix="/pond-medications", tags=["medications"])
