"""Site and Store Schemas"""

from pydantic import Field
from typing import Optional, List
from datetime import datetime

from .common import InputSchema, ORMSchema, PaginationMeta
from .hr import EmployeeBrief


class SiteBrief(ORMSchema):
    id: int
    name: str
    code: Optional[str] = None
    location: Optional[str] = None


class SiteCreate(InputSchema):
    name: str
    code: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None
    manager_id: Optional[int] = None
    supervisor_id: Optional[int] = None


class SiteUpdate(InputSchema):
    name: Optional[str] = None
    code: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None
    manager_id: Optional[int] = None
    supervisor_id: Optional[int] = None


class AssignEmployees(InputSchema):
    employee_ids: List[int] = Field(default_factory=list)


class SiteResponse(SiteBrief):
    description: Optional[str] = None
    manager_id: Optional[int] = None
    supervisor_id: Optional[int] = None
    manager: Optional[EmployeeBrief] = None
    supervisor: Optional[EmployeeBrief] = None
    employees: List[EmployeeBrief] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class StoreBrief(ORMSchema):
    id: int
    name: str
    code: str
    location: Optional[str] = None


class StoreCreate(InputSchema):
    name: str
    code: str
    location: Optional[str] = None
    description: Optional[str] = None


class StoreUpdate(InputSchema):
    name: Optional[str] = None
    code: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None


class StoreResponse(StoreBrief):
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class StorePage(ORMSchema):
    stores: List[StoreResponse]
    pagination: PaginationMeta
