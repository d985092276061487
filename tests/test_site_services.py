"""
Tests for Site and Store Services
"""

import pytest
from sqlalchemy.orm import Session

from aby_api.core.exceptions import ConflictError, NotFoundError, ValidationError
from aby_api.models.stock import StockRequest
from aby_api.schemas.organization import SiteCreate, SiteUpdate, StoreCreate, StoreUpdate
from aby_api.services.sites import SiteService, StoreService


class TestSiteService:
    """Sites and their staff"""

    def test_create_site(self, db_session: Session, test_employee, second_employee):
        site = SiteService(db_session).create_site(SiteCreate(
            name=" Nyamata Church ", code="NYM", manager_id=test_employee.id, supervisor_id=second_employee.id
        ))

        assert site.name == "Nyamata Church"
        assert site.manager.id == test_employee.id
        assert site.supervisor.id == second_employee.id

    def test_manager_and_supervisor_differ(self, db_session: Session, test_employee):
        with pytest.raises(ValidationError, match="must be different employees"):
            SiteService(db_session).create_site(SiteCreate(
                name="Site X", manager_id=test_employee.id, supervisor_id=test_employee.id
            ))

    def test_unknown_manager(self, db_session: Session):
        with pytest.raises(ValidationError, match="Manager not found"):
            SiteService(db_session).create_site(SiteCreate(name="Site Y", manager_id=321))

    def test_duplicate_code(self, db_session: Session, test_site):
        with pytest.raises(ConflictError):
            SiteService(db_session).create_site(SiteCreate(name="Other", code=test_site.code))

    def test_assign_employees_skips_manager(self, db_session: Session, test_site, test_employee, second_employee):
        site = SiteService(db_session).assign_employees(
            test_site.id, [test_employee.id, second_employee.id, second_employee.id]
        )

        assert [e.id for e in site.employees] == [second_employee.id]

    def test_assign_unknown_employee(self, db_session: Session, test_site):
        with pytest.raises(ValidationError, match="Employees not found"):
            SiteService(db_session).assign_employees(test_site.id, [999])

    def test_promoted_supervisor_leaves_staff_list(
        self, db_session: Session, test_site, second_employee
    ):
        service = SiteService(db_session)
        service.assign_employees(test_site.id, [second_employee.id])

        site = service.update_site(test_site.id, SiteUpdate(supervisor_id=second_employee.id))

        assert site.supervisor_id == second_employee.id
        assert site.employees == []

    def test_delete_site_with_requests(self, db_session: Session, test_site):
        db_session.add(StockRequest(ref_no="REQ-202401-0001", site_id=test_site.id, status="PENDING"))
        db_session.commit()

        with pytest.raises(ConflictError):
            SiteService(db_session).delete_site(test_site.id)

    def test_delete_site(self, db_session: Session, test_site):
        service = SiteService(db_session)

        service.delete_site(test_site.id)

        with pytest.raises(NotFoundError, match="Site not found"):
            service.get_site(test_site.id)


class TestStoreService:
    """Stores holding stock"""

    def test_paged_search(self, db_session: Session):
        service = StoreService(db_session)
        for i in range(3):
            service.create_store(StoreCreate(name=f"Depot {i}", code=f"DP-{i}", location="Huye"))
        service.create_store(StoreCreate(name="Annex", code="AX-1", location="Musanze"))

        stores, total = service.list_stores(page=1, limit=2, search="huye")

        assert total == 3
        assert len(stores) == 2

    def test_code_required_and_unique(self, db_session: Session, test_store):
        service = StoreService(db_session)

        with pytest.raises(ValidationError):
            service.create_store(StoreCreate(name="Empty code", code="  "))
        with pytest.raises(ConflictError):
            service.create_store(StoreCreate(name="Copy", code=test_store.code))

    def test_update_store(self, db_session: Session, test_store):
        store = StoreService(db_session).update_store(test_store.id, StoreUpdate(location="Kicukiro"))

        assert store.location == "Kicukiro"

    def test_delete_store_holding_stock(self, db_session: Session, test_store, cement):
        with pytest.raises(ConflictError, match="holds stock items"):
            StoreService(db_session).delete_store(test_store.id)
