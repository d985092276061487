"""
Contract API endpoints
"""

from typing import List, Optional
from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.orm import Session

from aby_api.api import deps
from aby_api.core.security import Principal
from aby_api.models.hr import ContractStatus
from aby_api.realtime import contract_gateway
from aby_api.schemas.common import MessageResponse
from aby_api.schemas.hr import ContractCreate, ContractResponse, ContractUpdate
from aby_api.services.hr import ContractService

router = APIRouter()


@router.get("/", response_model=List[ContractResponse])
def list_contracts(
    employee_id: Optional[int] = Query(None, alias="employeeId"),
    contract_status: Optional[ContractStatus] = Query(None, alias="status"),
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return ContractService(db).list_contracts(
        employee_id=employee_id, status=contract_status.value if contract_status else None
    )


@router.post("/", response_model=ContractResponse, status_code=status.HTTP_201_CREATED)
def create_contract(
    contract_in: ContractCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.AdminOnly)
):
    """
    Create a contract; an ACTIVE contract terminates the employee's other active ones.
    """
    contract = ContractResponse.model_validate(ContractService(db).create_contract(contract_in))
    background_tasks.add_task(contract_gateway.emit, "contractCreated", contract)
    return contract


@router.get("/{contract_id}", response_model=ContractResponse)
def get_contract(
    contract_id: int,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return ContractService(db).get_contract(contract_id)


@router.patch("/{contract_id}", response_model=ContractResponse)
def update_contract(
    contract_id: int,
    contract_in: ContractUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.AdminOnly)
):
    contract = ContractResponse.model_validate(ContractService(db).update_contract(contract_id, contract_in))
    background_tasks.add_task(contract_gateway.emit, "contractUpdated", contract)
    return contract


@router.delete("/{contract_id}", response_model=MessageResponse)
def delete_contract(
    contract_id: int,
    background_tasks: BackgroundTasks,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.AdminOnly)
):
    ContractService(db).delete_contract(contract_id)
    background_tasks.add_task(contract_gateway.emit, "contractDeleted", {"id": contract_id})
    return {"message": "Contract deleted successfully"}
