"""
Tests for the asset register and asset requisitions
"""

import pytest
from sqlalchemy.orm import Session

from aby_api.core.exceptions import BusinessLogicError, ConflictError, NotFoundError, ValidationError
from aby_api.models.asset import AssetRequestStatus, ItemStatus, ProcurementStatus
from aby_api.schemas.asset import (
    ApproveAssetRequest, AssetCreate, AssetRequestCreate, AssetRequestItemInput,
    AssetRequestUpdate, AssetUpdate, IssuedItem
)
from aby_api.services.assets import AssetRequestService, AssetService


@pytest.fixture
def laptop(db_session: Session):
    return AssetService(db_session).create_asset(AssetCreate(
        name="Laptop", category="IT Equipment", quantity=3, location="Head office"
    ))


@pytest.fixture
def helmet(db_session: Session):
    return AssetService(db_session).create_asset(AssetCreate(
        name="Safety Helmet", category="PPE", quantity=20
    ))


def _request(db_session, employee, *lines):
    return AssetRequestService(db_session).create(AssetRequestCreate(
        employee_id=employee.id,
        description="Site kit",
        items=[AssetRequestItemInput(asset_id=asset.id, quantity=qty) for asset, qty in lines],
    ))


class TestAssetService:
    """Asset register"""

    def test_create_asset(self, laptop):
        assert laptop.id is not None
        assert laptop.status == "ACTIVE"
        assert laptop.quantity == 3

    def test_create_asset_negative_quantity(self, db_session: Session):
        with pytest.raises(ValidationError, match="Quantity cannot be negative"):
            AssetService(db_session).create_asset(AssetCreate(name="Drill", category="Tools", quantity=-1))

    def test_update_and_status(self, db_session: Session, laptop):
        service = AssetService(db_session)

        service.update_asset(laptop.id, AssetUpdate(location="Site B"), asset_img="/uploads/asset_images/l.png")
        asset = service.update_status(laptop.id, "MAINTENANCE")

        assert asset.location == "Site B"
        assert asset.asset_img == "/uploads/asset_images/l.png"
        assert asset.status == "MAINTENANCE"

    def test_list_assets_filters(self, db_session: Session, laptop, helmet):
        service = AssetService(db_session)

        assert [a.id for a in service.list_assets(category="PPE")] == [helmet.id]
        assert [a.id for a in service.list_assets(search="office")] == [laptop.id]

    def test_delete_requested_asset_conflicts(self, db_session: Session, test_employee, laptop):
        _request(db_session, test_employee, (laptop, 1))

        with pytest.raises(ConflictError):
            AssetService(db_session).delete_asset(laptop.id)

    def test_get_missing_asset(self, db_session: Session):
        with pytest.raises(NotFoundError, match="Asset not found"):
            AssetService(db_session).get_asset(42)


class TestAssetRequests:
    """Request, approve-and-issue and rejection"""

    def test_create_request(self, db_session: Session, test_employee, laptop):
        request = _request(db_session, test_employee, (laptop, 2))

        assert request.status == AssetRequestStatus.PENDING.value
        assert request.items[0].status == ItemStatus.PENDING.value
        assert request.items[0].procurement_status == ProcurementStatus.NOT_REQUIRED.value

    def test_create_request_unknown_employee(self, db_session: Session, laptop):
        with pytest.raises(ValidationError, match="Employee not found"):
            AssetRequestService(db_session).create(AssetRequestCreate(
                employee_id=999, items=[AssetRequestItemInput(asset_id=laptop.id)]
            ))

    def test_create_request_unknown_asset(self, db_session: Session, test_employee):
        with pytest.raises(ValidationError, match="Asset not found: 77"):
            AssetRequestService(db_session).create(AssetRequestCreate(
                employee_id=test_employee.id, items=[AssetRequestItemInput(asset_id=77)]
            ))

    def test_approve_issues_everything_in_stock(self, db_session: Session, test_employee, laptop, helmet):
        request = _request(db_session, test_employee, (laptop, 2), (helmet, 5))

        approved = AssetRequestService(db_session).approve_and_issue(request.id, ApproveAssetRequest())

        assert approved.status == AssetRequestStatus.ISSUED.value
        assert [i.quantity_issued for i in approved.items] == [2, 5]
        assert laptop.quantity == 1
        assert helmet.quantity == 15

    def test_approve_beyond_register_needs_procurement(self, db_session: Session, test_employee, laptop):
        request = _request(db_session, test_employee, (laptop, 5))
        service = AssetRequestService(db_session)

        approved = service.approve_and_issue(request.id, ApproveAssetRequest())

        item = approved.items[0]
        assert approved.status == AssetRequestStatus.PARTIALLY_ISSUED.value
        assert item.quantity_issued == 3
        assert item.status == ItemStatus.PARTIALLY_ISSUED.value
        assert item.procurement_status == ProcurementStatus.REQUIRED.value
        assert laptop.quantity == 0
        assert [i.id for i in service.get_items_for_procurement()] == [item.id]

    def test_procurement_then_issue_outstanding(self, db_session: Session, test_employee, laptop):
        request = _request(db_session, test_employee, (laptop, 5))
        service = AssetRequestService(db_session)
        service.approve_and_issue(request.id, ApproveAssetRequest())
        item_id = request.items[0].id

        asset = service.update_procurement(laptop.id, 4)
        assert asset.quantity == 4
        assert service.get_procurement_item(item_id).procurement_status == ProcurementStatus.PROCURED.value

        issued = service.issue_outstanding(request.id)

        assert issued.status == AssetRequestStatus.ISSUED.value
        assert issued.items[0].quantity_issued == 5
        assert issued.items[0].status == ItemStatus.ISSUED.value
        assert laptop.quantity == 2

    def test_approve_with_explicit_quantities(self, db_session: Session, test_employee, helmet):
        request = _request(db_session, test_employee, (helmet, 4))
        item = request.items[0]

        approved = AssetRequestService(db_session).approve_and_issue(
            request.id, ApproveAssetRequest(issued_items=[IssuedItem(item_id=item.id, issued_quantity=1)])
        )

        assert approved.status == AssetRequestStatus.PARTIALLY_ISSUED.value
        assert approved.items[0].quantity_issued == 1
        assert helmet.quantity == 19

    def test_issue_more_than_requested(self, db_session: Session, test_employee, helmet):
        request = _request(db_session, test_employee, (helmet, 2))

        with pytest.raises(ValidationError, match="Cannot issue more than the 2 requested"):
            AssetRequestService(db_session).approve_and_issue(
                request.id,
                ApproveAssetRequest(issued_items=[IssuedItem(item_id=request.items[0].id, issued_quantity=3)]),
            )

    def test_only_pending_requests_can_be_approved(self, db_session: Session, test_employee, helmet):
        request = _request(db_session, test_employee, (helmet, 1))
        service = AssetRequestService(db_session)
        service.approve_and_issue(request.id, ApproveAssetRequest())

        with pytest.raises(BusinessLogicError, match="Only PENDING requests can be approved"):
            service.approve_and_issue(request.id, ApproveAssetRequest())

    def test_issue_outstanding_requires_partial_issue(self, db_session: Session, test_employee, helmet):
        request = _request(db_session, test_employee, (helmet, 1))

        with pytest.raises(BusinessLogicError):
            AssetRequestService(db_session).issue_outstanding(request.id)

    def test_reject_marks_items(self, db_session: Session, test_employee, helmet):
        request = _request(db_session, test_employee, (helmet, 1))

        rejected = AssetRequestService(db_session).reject(request.id)

        assert rejected.status == AssetRequestStatus.REJECTED.value
        assert rejected.items[0].status == ItemStatus.REJECTED.value
        assert helmet.quantity == 20

    def test_update_and_remove_pending(self, db_session: Session, test_employee, laptop, helmet):
        request = _request(db_session, test_employee, (laptop, 1))
        service = AssetRequestService(db_session)

        updated = service.update(request.id, AssetRequestUpdate(
            items=[AssetRequestItemInput(asset_id=helmet.id, quantity=2)]
        ))
        assert [i.asset_id for i in updated.items] == [helmet.id]

        service.remove(request.id)
        assert service.find_all(employee_id=test_employee.id) == []

    def test_procurement_item_not_required(self, db_session: Session, test_employee, helmet):
        request = _request(db_session, test_employee, (helmet, 1))

        with pytest.raises(NotFoundError, match="Procurement item not found"):
            AssetRequestService(db_session).get_procurement_item(request.items[0].id)
