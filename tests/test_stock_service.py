"""
Tests for Stock Services
Categories, stock-in records, the movement journal and the Excel export
"""

import pytest
from decimal import Decimal
from io import BytesIO
from openpyxl import load_workbook
from sqlalchemy.orm import Session

from aby_api.core.exceptions import ConflictError, NotFoundError, ValidationError
from aby_api.models.stock import StockRequest, StockRequestItem
from aby_api.schemas.stock import (
    StockCategoryCreate, StockCategoryUpdate, StockInCreate, StockInUpdate
)
from aby_api.services.stock import StockExportService, StockService
from aby_api.services.stock.stock_service import generate_sku


class TestStockCategories:
    """Test suite for stock categories"""

    def test_create_category(self, db_session: Session):
        service = StockService(db_session)

        category = service.create_category(StockCategoryCreate(name="  Plumbing  ", description="Pipes"))

        assert category.id is not None
        assert category.name == "Plumbing"

    def test_create_category_blank_name(self, db_session: Session):
        with pytest.raises(ValidationError, match="Category name is required"):
            StockService(db_session).create_category(StockCategoryCreate(name="   "))

    def test_update_category(self, db_session: Session, test_category):
        service = StockService(db_session)

        updated = service.update_category(test_category.id, StockCategoryUpdate(description="Updated"))

        assert updated.name == "Building Materials"
        assert updated.description == "Updated"

    def test_delete_category_in_use(self, db_session: Session, test_category, cement):
        with pytest.raises(ConflictError):
            StockService(db_session).delete_category(test_category.id)

    def test_delete_missing_category(self, db_session: Session):
        with pytest.raises(NotFoundError, match="Category not found"):
            StockService(db_session).delete_category(99)


class TestStockIns:
    """Test suite for stock-in records"""

    def _data(self, category, store, **overrides):
        values = {
            "product_name": "Steel Bar 12mm",
            "quantity": Decimal("50"),
            "unit": "piece",
            "unit_price": Decimal("9000"),
            "reorder_level": Decimal("10"),
            "stock_category_id": category.id,
            "store_id": store.id,
        }
        values.update(overrides)
        return StockInCreate(**values)

    def test_generate_sku_uses_initials(self):
        sku = generate_sku("Portland Cement")

        assert sku.startswith("PC")
        assert len(sku) == 6

    def test_create_stock_in_journals_opening_stock(
        self, db_session: Session, admin_principal, test_category, test_store
    ):
        service = StockService(db_session, admin_principal)

        stock = service.create_stock_in(self._data(test_category, test_store))

        assert stock.sku.startswith("SB1")
        assert stock.total_value == Decimal("450000")
        history = service.get_history(stock_in_id=stock.id)
        assert len(history) == 1
        assert history[0].movement_type == "IN"
        assert history[0].source_type == "STOCK_IN"
        assert history[0].qty_after == Decimal("50")
        assert history[0].created_by_admin_id == admin_principal.id

    def test_create_stock_in_without_quantity_has_no_history(
        self, db_session: Session, test_category, test_store
    ):
        service = StockService(db_session)

        stock = service.create_stock_in(self._data(test_category, test_store, quantity=Decimal("0")))

        assert service.get_history(stock_in_id=stock.id) == []

    def test_create_stock_in_duplicate_sku(self, db_session: Session, test_category, test_store, cement):
        with pytest.raises(ConflictError, match="SKU CEM-001 already exists"):
            StockService(db_session).create_stock_in(
                self._data(test_category, test_store, sku="CEM-001")
            )

    def test_create_stock_in_negative_price(self, db_session: Session, test_category, test_store):
        with pytest.raises(ValidationError, match="Unit price must be zero or more"):
            StockService(db_session).create_stock_in(
                self._data(test_category, test_store, unit_price=Decimal("-1"))
            )

    def test_create_stock_in_invalid_store(self, db_session: Session, test_category, test_store):
        with pytest.raises(ValidationError, match="Invalid store ID"):
            StockService(db_session).create_stock_in(
                self._data(test_category, test_store, store_id=999)
            )

    def test_quantity_update_is_an_adjustment(self, db_session: Session, cement):
        service = StockService(db_session)

        service.update_stock_in(cement.id, StockInUpdate(quantity=Decimal("80")))

        history = service.get_history(stock_in_id=cement.id, movement_type="adjustment")
        assert len(history) == 1
        assert history[0].qty_before == Decimal("100")
        assert history[0].qty_change == Decimal("-20")
        assert history[0].qty_after == Decimal("80")

    def test_update_without_quantity_change_has_no_history(self, db_session: Session, cement):
        service = StockService(db_session)

        service.update_stock_in(cement.id, StockInUpdate(supplier="CIMERWA"))

        assert cement.supplier == "CIMERWA"
        assert service.get_history(stock_in_id=cement.id) == []

    def test_update_cannot_clear_store_or_category(self, db_session: Session, cement, test_store, test_category):
        service = StockService(db_session)

        with pytest.raises(ValidationError, match="Store is required"):
            service.update_stock_in(cement.id, StockInUpdate(store_id=None))
        with pytest.raises(ValidationError, match="Category is required"):
            service.update_stock_in(cement.id, StockInUpdate(stock_category_id=None))
        with pytest.raises(ValidationError, match="Product name is required"):
            service.update_stock_in(cement.id, StockInUpdate(product_name="  "))

        db_session.expire_all()
        assert cement.store_id == test_store.id
        assert cement.stock_category_id == test_category.id

    def test_invalid_movement_type(self, db_session: Session):
        with pytest.raises(ValidationError, match="Invalid movement type"):
            StockService(db_session).get_history(movement_type="SIDEWAYS")

    def test_list_filters(self, db_session: Session, cement, sand):
        service = StockService(db_session)

        assert [s.id for s in service.list_stock_ins(search="sand")] == [sand.id]
        assert [s.id for s in service.list_stock_ins(low_stock=True)] == [sand.id]
        assert len(service.list_stock_ins(store_id=cement.store_id)) == 2

    def test_delete_stock_in_referenced_by_request(self, db_session: Session, test_site, cement):
        request = StockRequest(ref_no="REQ-202401-0001", site_id=test_site.id, status="PENDING")
        request.items.append(StockRequestItem(
            stock_in_id=cement.id, qty_requested=Decimal("1"), qty_remaining=Decimal("1")
        ))
        db_session.add(request)
        db_session.commit()

        with pytest.raises(ConflictError):
            StockService(db_session).delete_stock_in(cement.id)

    def test_delete_stock_in(self, db_session: Session, sand):
        service = StockService(db_session)

        service.delete_stock_in(sand.id)

        with pytest.raises(NotFoundError, match="Stock item not found"):
            service.get_stock_in(sand.id)


class TestStockExport:
    """Excel export of the movement journal"""

    def test_history_workbook(self, db_session: Session, test_category, test_store):
        service = StockService(db_session)
        service.create_stock_in(StockInCreate(
            product_name="Roofing Sheet",
            sku="RS-01",
            quantity=Decimal("12"),
            unit="sheet",
            stock_category_id=test_category.id,
            store_id=test_store.id,
        ))

        content = StockExportService().history_workbook(service.get_history())

        sheet = load_workbook(BytesIO(content)).active
        assert sheet["A1"].value == "Stock History"
        assert sheet["A4"].value == "Date"
        assert sheet["B5"].value == "RS-01"
        assert sheet["D5"].value == "IN"
        assert sheet["I5"].value == 12
