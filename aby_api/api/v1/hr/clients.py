"""
Client API endpoints
"""

from typing import List, Optional
from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.orm import Session

from aby_api.api import deps
from aby_api.core.security import Principal
from aby_api.models.hr import ClientStatus
from aby_api.realtime import client_gateway
from aby_api.schemas.common import MessageResponse
from aby_api.schemas.hr import ClientCreate, ClientResponse, ClientUpdate
from aby_api.services.hr import ClientService

router = APIRouter()


@router.get("/", response_model=List[ClientResponse])
def list_clients(
    search: Optional[str] = None,
    client_status: Optional[ClientStatus] = Query(None, alias="status"),
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return ClientService(db).list_clients(
        search=search, status=client_status.value if client_status else None
    )


@router.post("/", response_model=ClientResponse, status_code=status.HTTP_201_CREATED)
def create_client(
    client_in: ClientCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    client = ClientResponse.model_validate(ClientService(db).create_client(client_in))
    background_tasks.add_task(client_gateway.emit, "clientCreated", client)
    return client


@router.get("/{client_id}", response_model=ClientResponse)
def get_client(
    client_id: int,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return ClientService(db).get_client(client_id)


@router.put("/{client_id}", response_model=ClientResponse)
def update_client(
    client_id: int,
    client_in: ClientUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    client = ClientResponse.model_validate(ClientService(db).update_client(client_id, client_in))
    background_tasks.add_task(client_gateway.emit, "clientUpdated", client)
    return client


@router.delete("/{client_id}", response_model=MessageResponse)
def delete_client(
    client_id: int,
    background_tasks: BackgroundTasks,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    ClientService(db).delete_client(client_id)
    background_tasks.add_task(client_gateway.emit, "clientDeleted", {"id": client_id})
    return {"message": "Client deleted successfully"}
