"""Store Service"""
from typing import List, Optional, Tuple
import logging

from sqlalchemy import or_
from sqlalchemy.orm import Session

from aby_api.core.exceptions import NotFoundError, ConflictError, ValidationError
from aby_api.models.organization import Store
from aby_api.models.stock import StockIn
from aby_api.schemas.organization import StoreCreate, StoreUpdate

logger = logging.getLogger(__name__)


class StoreService:
    def __init__(self, db: Session):
        self.db = db

    def list_stores(
        self,
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None
    ) -> Tuple[List[Store], int]:
        """One page of stores matching ``search`` on name, location or code"""
        query = self.db.query(Store)
        if search:
            search_filter = f"%{search}%"
            query = query.filter(
                or_(
                    Store.name.ilike(search_filter),
                    Store.location.ilike(search_filter),
                    Store.code.ilike(search_filter),
                )
            )
        total = query.count()
        stores = (
            query.order_by(Store.created_at.desc(), Store.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return stores, total

    def get_store(self, store_id: int) -> Store:
        store = self.db.get(Store, store_id)
        if not store:
            raise NotFoundError("Store not found")
        return store

    def create_store(self, data: StoreCreate) -> Store:
        name, code = data.name.strip(), data.code.strip()
        if not name or not code:
            raise ValidationError("Store name and code are required")
        self._check_code(code)

        store = Store(
            name=name,
            code=code,
            location=data.location,
            description=data.description,
        )
        self.db.add(store)
        self.db.commit()
        self.db.refresh(store)
        logger.info(f"Store created: {store.code}")
        return store

    def update_store(self, store_id: int, data: StoreUpdate) -> Store:
        store = self.get_store(store_id)
        update_data = data.model_dump(exclude_unset=True)
        if "code" in update_data:
            code = (update_data["code"] or "").strip()
            if not code:
                raise ValidationError("Store code cannot be empty")
            self._check_code(code, exclude_id=store_id)
            update_data["code"] = code

        for field, value in update_data.items():
            setattr(store, field, value)
        self.db.commit()
        self.db.refresh(store)
        return store

    def delete_store(self, store_id: int) -> None:
        store = self.get_store(store_id)
        if self.db.query(StockIn.id).filter(StockIn.store_id == store_id).first():
            raise ConflictError("Store holds stock items and cannot be deleted")
        self.db.delete(store)
        self.db.commit()
        logger.info(f"Store {store_id} deleted")

    def _check_code(self, code: str, exclude_id: Optional[int] = None) -> None:
        query = self.db.query(Store.id).filter(Store.code == code)
        if exclude_id is not None:
            query = query.filter(Store.id != exclude_id)
        if query.first():
            raise ConflictError("A store with this code already exists")
