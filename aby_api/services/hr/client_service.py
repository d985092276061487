"""Client Service"""
from typing import List, Optional
import logging

from sqlalchemy import or_
from sqlalchemy.orm import Session

from aby_api.core.exceptions import NotFoundError, ValidationError
from aby_api.models.hr import Client, ClientStatus
from aby_api.schemas.hr import ClientCreate, ClientUpdate

logger = logging.getLogger(__name__)


class ClientService:
    def __init__(self, db: Session):
        self.db = db

    def list_clients(self, search: Optional[str] = None, status: Optional[str] = None) -> List[Client]:
        query = self.db.query(Client)
        if search:
            search_filter = f"%{search}%"
            query = query.filter(
                or_(Client.names.ilike(search_filter), Client.email.ilike(search_filter))
            )
        if status:
            query = query.filter(Client.status == status)
        return query.order_by(Client.created_at.desc(), Client.id.desc()).all()

    def get_client(self, client_id: int) -> Client:
        client = self.db.get(Client, client_id)
        if not client:
            raise NotFoundError("Client not found")
        return client

    def create_client(self, data: ClientCreate) -> Client:
        if not data.names.strip():
            raise ValidationError("Client names are required")
        client = Client(**data.model_dump(), status=ClientStatus.ACTIVE.value)
        client.names = client.names.strip()
        self.db.add(client)
        self.db.commit()
        self.db.refresh(client)
        logger.info(f"Client created: {client.names}")
        return client

    def update_client(self, client_id: int, data: ClientUpdate) -> Client:
        client = self.get_client(client_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(client, field, value)
        self.db.commit()
        self.db.refresh(client)
        return client

    def delete_client(self, client_id: int) -> None:
        client = self.get_client(client_id)
        self.db.delete(client)
        self.db.commit()
