"""
Stock Service
Stock categories, stock-in records and the stock movement journal
"""
from typing import List, Optional
from decimal import Decimal
from datetime import datetime, timezone
import logging
import uuid

from sqlalchemy import or_
from sqlalchemy.orm import Session

from aby_api.core.exceptions import NotFoundError, ValidationError, ConflictError
from aby_api.core.security import Principal
from aby_api.models.organization import Store
from aby_api.models.stock import (
    StockCategory, StockIn, StockHistory, StockRequestItem, MovementType, SourceType
)
from aby_api.schemas.stock import (
    StockCategoryCreate, StockCategoryUpdate, StockInCreate, StockInUpdate
)

logger = logging.getLogger(__name__)


def generate_sku(product_name: str) -> str:
    """Initials of the product name plus a short random suffix ("Portland Cement" -> PC1A2B)"""
    initials = "".join(word[0] for word in product_name.split()).upper()
    return f"{initials}{uuid.uuid4().hex[:4].upper()}"


class StockService:
    """Inventory master data and movement history"""

    def __init__(self, db: Session, actor: Optional[Principal] = None):
        self.db = db
        self.actor = actor

    # Category Methods

    def list_categories(self) -> List[StockCategory]:
        return self.db.query(StockCategory).order_by(StockCategory.name).all()

    def get_category(self, category_id: int) -> StockCategory:
        category = self.db.get(StockCategory, category_id)
        if not category:
            raise NotFoundError("Category not found")
        return category

    def create_category(self, data: StockCategoryCreate) -> StockCategory:
        if not data.name or not data.name.strip():
            raise ValidationError("Category name is required")

        category = StockCategory(name=data.name.strip(), description=data.description)
        self.db.add(category)
        self.db.commit()
        self.db.refresh(category)

        logger.info(f"Stock category created: {category.name}")
        return category

    def update_category(self, category_id: int, data: StockCategoryUpdate) -> StockCategory:
        category = self.get_category(category_id)
        update_data = data.model_dump(exclude_unset=True)

        if "name" in update_data:
            if not update_data["name"] or not update_data["name"].strip():
                raise ValidationError("Category name is required")
            update_data["name"] = update_data["name"].strip()

        for field, value in update_data.items():
            setattr(category, field, value)

        self.db.commit()
        self.db.refresh(category)
        return category

    def delete_category(self, category_id: int) -> None:
        category = self.get_category(category_id)
        if category.stock_items:
            raise ConflictError("Category still has stock items and cannot be deleted")

        self.db.delete(category)
        self.db.commit()
        logger.info(f"Stock category {category_id} deleted")

    # Stock-in Methods

    def list_stock_ins(
        self,
        search: Optional[str] = None,
        category_id: Optional[int] = None,
        store_id: Optional[int] = None,
        low_stock: bool = False
    ) -> List[StockIn]:
        """Stock-in records with optional filters; ``low_stock`` keeps items at or below reorder level"""
        query = self.db.query(StockIn)

        if search:
            search_filter = f"%{search}%"
            query = query.filter(
                or_(
                    StockIn.product_name.ilike(search_filter),
                    StockIn.sku.ilike(search_filter),
                    StockIn.supplier.ilike(search_filter)
                )
            )
        if category_id:
            query = query.filter(StockIn.stock_category_id == category_id)
        if store_id:
            query = query.filter(StockIn.store_id == store_id)
        if low_stock:
            query = query.filter(StockIn.quantity <= StockIn.reorder_level)

        return query.order_by(StockIn.created_at.desc(), StockIn.id.desc()).all()

    def get_stock_in(self, stock_in_id: int) -> StockIn:
        stock = self.db.get(StockIn, stock_in_id)
        if not stock:
            raise NotFoundError("Stock item not found")
        return stock

    def create_stock_in(self, data: StockInCreate) -> StockIn:
        """
        Register stock in a store

        An opening quantity is journalled as an IN/STOCK_IN movement.
        """
        self._validate_stock_values(data.model_dump())
        self._check_references(data.stock_category_id, data.store_id)

        sku = (data.sku or "").strip() or generate_sku(data.product_name)
        if self.db.query(StockIn).filter(StockIn.sku == sku).first():
            raise ConflictError(f"SKU {sku} already exists")

        stock = StockIn(
            product_name=data.product_name.strip(),
            sku=sku,
            quantity=data.quantity,
            unit=data.unit.strip(),
            unit_price=data.unit_price,
            reorder_level=data.reorder_level,
            supplier=data.supplier,
            location=data.location,
            description=data.description,
            stock_category_id=data.stock_category_id,
            store_id=data.store_id,
        )

        try:
            self.db.add(stock)
            self.db.flush()
            if data.quantity > 0:
                self.db.add(self._history(
                    stock,
                    MovementType.IN,
                    SourceType.STOCK_IN,
                    Decimal("0"),
                    data.quantity,
                    notes="Opening stock",
                ))
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(stock)
        logger.info(f"Stock-in created: {stock.sku} ({stock.quantity} {stock.unit})")
        return stock

    def update_stock_in(self, stock_in_id: int, data: StockInUpdate) -> StockIn:
        """Update a stock-in; a quantity change is journalled as an ADJUSTMENT"""
        stock = self.get_stock_in(stock_in_id)
        update_data = data.model_dump(exclude_unset=True)

        self._validate_stock_values(update_data, partial=True)
        self._check_references(update_data.get("stock_category_id"), update_data.get("store_id"))

        qty_before = stock.quantity
        try:
            for field, value in update_data.items():
                if isinstance(value, str):
                    value = value.strip()
                setattr(stock, field, value)

            if "quantity" in update_data and update_data["quantity"] != qty_before:
                self.db.add(self._history(
                    stock,
                    MovementType.ADJUSTMENT,
                    SourceType.ADJUSTMENT,
                    qty_before,
                    update_data["quantity"] - qty_before,
                    notes="Manual stock adjustment",
                ))
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(stock)
        return stock

    def delete_stock_in(self, stock_in_id: int) -> None:
        stock = self.get_stock_in(stock_in_id)
        in_use = (
            self.db.query(StockRequestItem)
            .filter(StockRequestItem.stock_in_id == stock_in_id)
            .first()
        )
        if in_use:
            raise ConflictError("Stock item is referenced by requisitions and cannot be deleted")

        self.db.delete(stock)
        self.db.commit()
        logger.info(f"Stock-in {stock_in_id} deleted")

    # History Methods

    def get_history(
        self,
        stock_in_id: Optional[int] = None,
        request_id: Optional[int] = None,
        movement_type: Optional[str] = None
    ) -> List[StockHistory]:
        """Movement journal, newest first"""
        query = self.db.query(StockHistory)

        if stock_in_id:
            query = query.filter(StockHistory.stock_in_id == stock_in_id)
        if request_id:
            query = query.filter(
                StockHistory.source_id == request_id,
                StockHistory.source_type.in_([SourceType.ISSUE.value, SourceType.RECEIPT.value])
            )
        if movement_type:
            try:
                movement_type = MovementType(movement_type.upper()).value
            except ValueError:
                raise ValidationError(f"Invalid movement type: {movement_type}")
            query = query.filter(StockHistory.movement_type == movement_type)

        return query.order_by(StockHistory.created_at.desc(), StockHistory.id.desc()).all()

    # Helpers

    @staticmethod
    def _validate_stock_values(values: dict, partial: bool = False) -> None:
        required = (
            ("product_name", "Product name"),
            ("unit", "Unit"),
            ("stock_category_id", "Category"),
            ("store_id", "Store"),
        )
        for field, label in required:
            if partial and field not in values:
                continue
            value = values.get(field)
            if value is None or not str(value).strip():
                raise ValidationError(f"{label} is required")

        for field, label in (("quantity", "Quantity"), ("unit_price", "Unit price"), ("reorder_level", "Reorder level")):
            value = values.get(field)
            if partial and field not in values:
                continue
            if value is None or value < 0:
                raise ValidationError(f"{label} must be zero or more")

    def _check_references(self, category_id: Optional[int], store_id: Optional[int]) -> None:
        if category_id is not None and not self.db.get(StockCategory, category_id):
            raise ValidationError("Invalid category ID")
        if store_id is not None and not self.db.get(Store, store_id):
            raise ValidationError("Invalid store ID")

    def _history(
        self,
        stock: StockIn,
        movement_type: MovementType,
        source_type: SourceType,
        qty_before: Decimal,
        qty_change: Decimal,
        notes: str
    ) -> StockHistory:
        return StockHistory(
            stock_in_id=stock.id,
            movement_type=movement_type.value,
            source_type=source_type.value,
            source_id=stock.id,
            qty_before=qty_before,
            qty_change=qty_change,
            qty_after=qty_before + qty_change,
            unit_price=stock.unit_price,
            notes=notes,
            created_by_admin_id=self.actor.admin_id if self.actor else None,
            created_by_employee_id=self.actor.employee_id if self.actor else None,
            created_at=datetime.now(timezone.utc),
        )
