"""
Department API endpoints
"""

from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from aby_api.api import deps
from aby_api.core.security import Principal
from aby_api.schemas.common import MessageResponse
from aby_api.schemas.hr import DepartmentCreate, DepartmentResponse, DepartmentUpdate
from aby_api.services.hr import DepartmentService

router = APIRouter()


@router.get("/", response_model=List[DepartmentResponse])
def list_departments(
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return DepartmentService(db).list_departments()


@router.post("/", response_model=DepartmentResponse, status_code=status.HTTP_201_CREATED)
def create_department(
    department_in: DepartmentCreate,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return DepartmentService(db).create_department(department_in)


@router.get("/{department_id}", response_model=DepartmentResponse)
def get_department(
    department_id: int,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return DepartmentService(db).get_department(department_id)


@router.put("/{department_id}", response_model=DepartmentResponse)
def update_department(
    department_id: int,
    department_in: DepartmentUpdate,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return DepartmentService(db).update_department(department_id, department_in)


@router.delete("/{department_id}", response_model=MessageResponse)
def delete_department(
    department_id: int,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    DepartmentService(db).delete_department(department_id)
    return {"message": "Department deleted successfully"}
