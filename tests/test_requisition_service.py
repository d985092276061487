"""
Tests for the Stock Requisition Service
Request lifecycle from site request to receipt, with stock bookkeeping
"""

import pytest
from decimal import Decimal
from sqlalchemy.orm import Session

from aby_api.core.exceptions import (
    BusinessLogicError, InsufficientPermissionsError, NotFoundError, ValidationError
)
from aby_api.core.security import EMPLOYEE, Principal
from aby_api.models.stock import StockHistory, RequestStatus
from aby_api.schemas.stock import (
    ApproveRequest, IssueLine, IssueMaterials, ItemModification, ModifyApproveRequest,
    NewRequestItem, ReceiveLine, ReceiveMaterials, RequestItemInput, StockRequestCreate,
    StockRequestUpdate
)
from aby_api.services.stock import StockRequestService, StockService


def _create(service, site, *lines, notes=None):
    return service.create_request(StockRequestCreate(
        site_id=site.id,
        notes=notes,
        items=[RequestItemInput(stock_in_id=stock.id, qty_requested=qty) for stock, qty in lines],
    ))


def _issue(service, request, *lines):
    return service.issue_materials(IssueMaterials(
        request_id=request.id,
        items=[IssueLine(request_item_id=item.id, qty_issued=qty) for item, qty in lines],
    ))


def _receive(service, request, *lines):
    return service.receive_materials(ReceiveMaterials(
        request_id=request.id,
        items=[ReceiveLine(request_item_id=item.id, qty_received=qty) for item, qty in lines],
    ))


class TestRequestCreation:
    """Raising and editing requests"""

    def test_create_request_success(self, db_session: Session, admin_principal, test_site, cement):
        """A new request is PENDING with every line still outstanding"""
        service = StockRequestService(db_session, admin_principal)

        request = _create(service, test_site, (cement, Decimal("40")), notes="Foundation pour")

        assert request.id is not None
        assert request.ref_no.startswith("REQ-")
        assert request.status == RequestStatus.PENDING.value
        assert request.requested_by_admin_id == admin_principal.id
        assert request.requested_by_employee_id is None
        assert len(request.items) == 1
        item = request.items[0]
        assert item.qty_requested == Decimal("40")
        assert item.qty_remaining == Decimal("40")
        assert item.qty_issued == Decimal("0")
        assert item.qty_approved is None

    def test_reference_numbers_are_sequential(self, db_session: Session, admin_principal, test_site, cement):
        """Reference numbers count up within the month"""
        service = StockRequestService(db_session, admin_principal)

        first = _create(service, test_site, (cement, 1))
        second = _create(service, test_site, (cement, 2))

        assert first.ref_no.endswith("0001")
        assert second.ref_no.endswith("0002")
        assert first.ref_no[:-4] == second.ref_no[:-4]

    def test_create_request_invalid_site(self, db_session: Session, admin_principal, cement):
        service = StockRequestService(db_session, admin_principal)

        with pytest.raises(ValidationError, match="Invalid site ID"):
            service.create_request(StockRequestCreate(
                site_id=999,
                items=[RequestItemInput(stock_in_id=cement.id, qty_requested=1)],
            ))

    def test_create_request_without_items(self, db_session: Session, admin_principal, test_site):
        service = StockRequestService(db_session, admin_principal)

        with pytest.raises(ValidationError, match="at least one item"):
            service.create_request(StockRequestCreate(site_id=test_site.id, items=[]))

    def test_create_request_unknown_stock_item(self, db_session: Session, admin_principal, test_site):
        service = StockRequestService(db_session, admin_principal)

        with pytest.raises(ValidationError, match="Stock item 404 not found"):
            service.create_request(StockRequestCreate(
                site_id=test_site.id,
                items=[RequestItemInput(stock_in_id=404, qty_requested=1)],
            ))

    def test_create_request_rejects_zero_quantity(self, db_session: Session, admin_principal, test_site, cement):
        service = StockRequestService(db_session, admin_principal)

        with pytest.raises(ValidationError, match="greater than zero"):
            _create(service, test_site, (cement, 0))

    def test_find_one_missing(self, db_session: Session):
        with pytest.raises(NotFoundError, match="Request not found"):
            StockRequestService(db_session).find_one(12345)

    def test_update_pending_request_replaces_items(
        self, db_session: Session, admin_principal, test_site, cement, sand
    ):
        service = StockRequestService(db_session, admin_principal)
        request = _create(service, test_site, (cement, 10))

        updated = service.update_request(request.id, StockRequestUpdate(
            notes="Switch to sand",
            items=[RequestItemInput(stock_in_id=sand.id, qty_requested=3)],
        ))

        assert updated.notes == "Switch to sand"
        assert [item.stock_in_id for item in updated.items] == [sand.id]

    def test_update_approved_request_fails(self, db_session: Session, admin_principal, test_site, cement):
        service = StockRequestService(db_session, admin_principal)
        request = _create(service, test_site, (cement, 10))
        service.approve_request(request.id)

        with pytest.raises(BusinessLogicError, match="Only pending requests can be updated"):
            service.update_request(request.id, StockRequestUpdate(notes="too late"))

    def test_delete_pending_request(self, db_session: Session, admin_principal, test_site, cement):
        service = StockRequestService(db_session, admin_principal)
        request = _create(service, test_site, (cement, 10))

        service.delete_request(request.id)

        with pytest.raises(NotFoundError):
            service.find_one(request.id)

    def test_list_requests_filters_and_counts(
        self, db_session: Session, admin_principal, test_site, cement
    ):
        service = StockRequestService(db_session, admin_principal)
        first = _create(service, test_site, (cement, 1))
        _create(service, test_site, (cement, 2))
        service.approve_request(first.id)

        requests, total = service.find_all(page=1, limit=10, status=RequestStatus.PENDING.value)
        assert total == 1
        assert requests[0].status == RequestStatus.PENDING.value

        requests, total = service.find_all(page=1, limit=1, site_id=test_site.id)
        assert total == 2
        assert len(requests) == 1


class TestApproval:
    """Approval, modification and rejection"""

    def test_approve_defaults_to_requested_quantities(
        self, db_session: Session, admin_principal, test_site, cement
    ):
        service = StockRequestService(db_session, admin_principal)
        request = _create(service, test_site, (cement, 25))

        approved = service.approve_request(request.id)

        assert approved.status == RequestStatus.APPROVED.value
        assert approved.approved_at is not None
        assert approved.approved_by_admin_id == admin_principal.id
        assert approved.items[0].qty_approved == Decimal("25")
        assert approved.items[0].qty_remaining == Decimal("25")

    def test_approve_with_reduced_quantity_and_comment(
        self, db_session: Session, admin_principal, test_site, cement
    ):
        service = StockRequestService(db_session, admin_principal)
        request = _create(service, test_site, (cement, 25))
        item = request.items[0]

        approved = service.approve_request(request.id, ApproveRequest(
            item_modifications=[ItemModification(item_id=item.id, qty_approved=Decimal("15"))],
            comment="Only 15 this week",
        ))

        assert approved.items[0].qty_approved == Decimal("15")
        assert approved.items[0].qty_remaining == Decimal("15")
        assert [c.description for c in approved.comments] == ["Only 15 this week"]
        assert approved.comments[0].author_role == "ADMIN"

    def test_approve_can_add_and_remove_items(
        self, db_session: Session, admin_principal, test_site, cement, sand
    ):
        service = StockRequestService(db_session, admin_principal)
        request = _create(service, test_site, (cement, 5), (sand, 2))
        sand_item = request.items[1]

        approved = service.approve_request(request.id, ApproveRequest(
            items_to_remove=[sand_item.id],
            items_to_add=[NewRequestItem(stock_in_id=sand.id, qty_requested=4, qty_approved=3)],
        ))

        quantities = {(i.stock_in_id, i.qty_requested, i.qty_approved) for i in approved.items}
        assert quantities == {
            (cement.id, Decimal("5"), Decimal("5")),
            (sand.id, Decimal("4"), Decimal("3")),
        }

    def test_approve_cannot_remove_every_item(self, db_session: Session, admin_principal, test_site, cement):
        service = StockRequestService(db_session, admin_principal)
        request = _create(service, test_site, (cement, 5))

        with pytest.raises(BusinessLogicError, match="at least one item"):
            service.approve_request(request.id, ApproveRequest(items_to_remove=[request.items[0].id]))

    def test_approve_twice_fails(self, db_session: Session, admin_principal, test_site, cement):
        service = StockRequestService(db_session, admin_principal)
        request = _create(service, test_site, (cement, 5))
        service.approve_request(request.id)

        with pytest.raises(BusinessLogicError, match="Only pending requests can be approved"):
            service.approve_request(request.id)

    @pytest.mark.parametrize("role", ["SITE_ENGINEER", "DIOCESAN_SITE_ENGINEER", "STORE_KEEPER"])
    def test_approve_requires_approver_role(
        self, db_session: Session, admin_principal, test_employee, test_site, cement, role
    ):
        """Only ADMIN and PADIRI approve; the request stays pending otherwise"""
        request = _create(StockRequestService(db_session, admin_principal), test_site, (cement, 5))
        engineer = Principal(kind=EMPLOYEE, id=test_employee.id, role=role, name=test_employee.full_name)

        with pytest.raises(InsufficientPermissionsError, match="Only ADMIN, PADIRI can approve requests"):
            StockRequestService(db_session, engineer).approve_request(request.id)

        db_session.expire_all()
        assert request.status == RequestStatus.PENDING.value
        assert request.approved_at is None

    def test_padiri_approves(self, db_session: Session, admin_principal, test_employee, test_site, cement):
        request = _create(StockRequestService(db_session, admin_principal), test_site, (cement, 5))
        padiri = Principal(kind=EMPLOYEE, id=test_employee.id, role="PADIRI", name=test_employee.full_name)

        approved = StockRequestService(db_session, padiri).approve_request(request.id)

        assert approved.status == RequestStatus.APPROVED.value

    def test_reject_pending_request(self, db_session: Session, admin_principal, test_site, cement):
        service = StockRequestService(db_session, admin_principal)
        request = _create(service, test_site, (cement, 5))

        rejected = service.reject_request(request.id, notes="Budget exhausted")

        assert rejected.status == RequestStatus.REJECTED.value
        assert rejected.rejected_at is not None
        assert rejected.notes == "Budget exhausted"

    def test_reject_after_issue_fails(self, db_session: Session, admin_principal, test_site, cement):
        service = StockRequestService(db_session, admin_principal)
        request = _create(service, test_site, (cement, 5))
        service.approve_request(request.id)
        _issue(service, request, (request.items[0], 5))

        with pytest.raises(BusinessLogicError):
            service.reject_request(request.id)

    def test_modify_by_site_engineer_returns_to_pending(
        self, db_session: Session, admin_principal, test_site, cement
    ):
        """Diocesan site engineers rework an approved request and send it back for approval"""
        service = StockRequestService(db_session, admin_principal)
        request = _create(service, test_site, (cement, 5))
        service.approve_request(request.id)

        modified = service.modify_and_approve(
            request.id,
            ModifyApproveRequest(
                item_modifications=[ItemModification(item_id=request.items[0].id, qty_requested=8)],
                notes="Scope grew",
            ),
            role="DIOCESAN_SITE_ENGINEER",
        )

        assert modified.status == RequestStatus.PENDING.value
        assert modified.approved_at is None
        assert modified.approved_by_admin_id is None
        assert modified.items[0].qty_requested == Decimal("8")
        assert modified.notes == "Scope grew"

    def test_modify_by_admin_approves_pending(self, db_session: Session, admin_principal, test_site, cement):
        service = StockRequestService(db_session, admin_principal)
        request = _create(service, test_site, (cement, 5))

        modified = service.modify_and_approve(request.id, ModifyApproveRequest(), role="ADMIN")

        assert modified.status == RequestStatus.APPROVED.value
        assert modified.items[0].qty_approved == Decimal("5")

    def test_modify_after_partial_issue_recomputes_status(
        self, db_session: Session, admin_principal, test_site, cement
    ):
        """Lowering the approved quantity to what was issued completes the request"""
        service = StockRequestService(db_session, admin_principal)
        request = _create(service, test_site, (cement, 10))
        service.approve_request(request.id)
        item = request.items[0]
        _issue(service, request, (item, 4))

        modified = service.modify_and_approve(
            request.id,
            ModifyApproveRequest(item_modifications=[ItemModification(item_id=item.id, qty_approved=4)]),
            role="PADIRI",
        )

        assert modified.status == RequestStatus.ISSUED.value
        assert modified.items[0].qty_remaining == Decimal("0")

    def test_modify_below_issued_quantity_fails(self, db_session: Session, admin_principal, test_site, cement):
        service = StockRequestService(db_session, admin_principal)
        request = _create(service, test_site, (cement, 10))
        service.approve_request(request.id)
        item = request.items[0]
        _issue(service, request, (item, 6))

        with pytest.raises(BusinessLogicError, match="cannot be below the issued quantity"):
            service.modify_and_approve(
                request.id,
                ModifyApproveRequest(item_modifications=[ItemModification(item_id=item.id, qty_approved=5)]),
                role="ADMIN",
            )

    def test_modify_requires_privileged_role(self, db_session: Session, admin_principal, test_site, cement):
        service = StockRequestService(db_session, admin_principal)
        request = _create(service, test_site, (cement, 5))

        with pytest.raises(InsufficientPermissionsError):
            service.modify_and_approve(request.id, ModifyApproveRequest(), role="STORE_KEEPER")

    def test_site_engineer_cannot_modify_after_issue(
        self, db_session: Session, admin_principal, test_site, cement
    ):
        service = StockRequestService(db_session, admin_principal)
        request = _create(service, test_site, (cement, 10))
        service.approve_request(request.id)
        _issue(service, request, (request.items[0], 2))

        with pytest.raises(InsufficientPermissionsError, match="ADMIN or PADIRI"):
            service.modify_and_approve(request.id, ModifyApproveRequest(), role="DIOCESAN_SITE_ENGINEER")

    def test_modify_rejected_request_forbidden(self, db_session: Session, admin_principal, test_site, cement):
        service = StockRequestService(db_session, admin_principal)
        request = _create(service, test_site, (cement, 5))
        service.reject_request(request.id)

        with pytest.raises(InsufficientPermissionsError):
            service.modify_and_approve(request.id, ModifyApproveRequest(), role="ADMIN")


class TestIssueAndReceipt:
    """Issuing from stock and confirming receipt on site"""

    def test_partial_issue_decrements_stock_and_journals(
        self, db_session: Session, admin_principal, test_site, cement
    ):
        service = StockRequestService(db_session, admin_principal)
        request = _create(service, test_site, (cement, 30))
        service.approve_request(request.id)
        item = request.items[0]

        issued = _issue(service, request, (item, 12))

        assert issued.status == RequestStatus.PARTIALLY_ISSUED.value
        assert issued.items[0].qty_issued == Decimal("12")
        assert issued.items[0].qty_remaining == Decimal("18")
        assert cement.quantity == Decimal("88")

        history = StockService(db_session).get_history(request_id=request.id)
        assert len(history) == 1
        assert history[0].movement_type == "OUT"
        assert history[0].source_type == "ISSUE"
        assert history[0].qty_before == Decimal("100")
        assert history[0].qty_change == Decimal("-12")
        assert history[0].qty_after == Decimal("88")
        assert history[0].created_by_admin_id == admin_principal.id

    def test_issue_rest_completes_request(self, db_session: Session, admin_principal, test_site, cement):
        service = StockRequestService(db_session, admin_principal)
        request = _create(service, test_site, (cement, 30))
        service.approve_request(request.id)
        item = request.items[0]
        _issue(service, request, (item, 12))

        issued = _issue(service, request, (item, 18))

        assert issued.status == RequestStatus.ISSUED.value
        assert issued.items[0].qty_remaining == Decimal("0")
        assert cement.quantity == Decimal("70")

    def test_issue_requires_approval(self, db_session: Session, admin_principal, test_site, cement):
        service = StockRequestService(db_session, admin_principal)
        request = _create(service, test_site, (cement, 5))

        with pytest.raises(BusinessLogicError, match="approved before issuing"):
            _issue(service, request, (request.items[0], 5))

    def test_issue_more_than_approved_rolls_back(
        self, db_session: Session, admin_principal, test_site, cement, sand
    ):
        """A failing line leaves stock and the other lines untouched"""
        service = StockRequestService(db_session, admin_principal)
        request = _create(service, test_site, (cement, 5), (sand, 2))
        service.approve_request(request.id)
        cement_item, sand_item = request.items

        with pytest.raises(BusinessLogicError, match="Cannot issue more than approved"):
            _issue(service, request, (cement_item, 5), (sand_item, 3))

        db_session.expire_all()
        assert cement.quantity == Decimal("100")
        assert service.find_one(request.id).items[0].qty_issued == Decimal("0")
        assert db_session.query(StockHistory).count() == 0

    def test_issue_more_than_in_stock(self, db_session: Session, admin_principal, test_site, sand):
        service = StockRequestService(db_session, admin_principal)
        request = _create(service, test_site, (sand, 12))
        service.approve_request(request.id)

        with pytest.raises(BusinessLogicError, match="Insufficient stock for River Sand"):
            _issue(service, request, (request.items[0], 12))

    def test_issue_foreign_item(self, db_session: Session, admin_principal, test_site, cement):
        service = StockRequestService(db_session, admin_principal)
        request = _create(service, test_site, (cement, 5))
        other = _create(service, test_site, (cement, 5))
        service.approve_request(request.id)

        with pytest.raises(ValidationError, match="does not belong"):
            _issue(service, request, (other.items[0], 1))

    def test_receive_everything_closes_request(self, db_session: Session, admin_principal, test_site, cement):
        service = StockRequestService(db_session, admin_principal)
        request = _create(service, test_site, (cement, 10))
        service.approve_request(request.id)
        item = request.items[0]
        _issue(service, request, (item, 10))

        received = _receive(service, request, (item, 10))

        assert received.status == RequestStatus.CLOSED.value
        assert received.closed_at is not None
        assert received.items[0].qty_received == Decimal("10")
        # receipt is journalled but stock is not put back
        assert cement.quantity == Decimal("90")
        movements = [h.movement_type for h in StockService(db_session).get_history(request_id=request.id)]
        assert sorted(movements) == ["IN", "OUT"]

    def test_partial_receipt_then_close(self, db_session: Session, admin_principal, test_site, cement):
        service = StockRequestService(db_session, admin_principal)
        request = _create(service, test_site, (cement, 10))
        service.approve_request(request.id)
        item = request.items[0]
        _issue(service, request, (item, 10))

        partly = _receive(service, request, (item, 6))
        assert partly.status == RequestStatus.RECEIVED.value

        closed = _receive(service, request, (item, 4))
        assert closed.status == RequestStatus.CLOSED.value

    def test_receipt_on_partially_issued_keeps_status(
        self, db_session: Session, admin_principal, test_site, cement
    ):
        service = StockRequestService(db_session, admin_principal)
        request = _create(service, test_site, (cement, 10))
        service.approve_request(request.id)
        item = request.items[0]
        _issue(service, request, (item, 4))

        received = _receive(service, request, (item, 4))

        assert received.status == RequestStatus.PARTIALLY_ISSUED.value
        assert received.items[0].qty_received == Decimal("4")

    def test_receive_more_than_issued(self, db_session: Session, admin_principal, test_site, cement):
        service = StockRequestService(db_session, admin_principal)
        request = _create(service, test_site, (cement, 10))
        service.approve_request(request.id)
        item = request.items[0]
        _issue(service, request, (item, 5))

        with pytest.raises(BusinessLogicError, match="Cannot receive more than issued"):
            _receive(service, request, (item, 6))

    def test_receive_before_issue(self, db_session: Session, admin_principal, test_site, cement):
        service = StockRequestService(db_session, admin_principal)
        request = _create(service, test_site, (cement, 10))
        service.approve_request(request.id)

        with pytest.raises(BusinessLogicError, match="only be received for issued requests"):
            _receive(service, request, (request.items[0], 1))

    def test_issuable_queue(self, db_session: Session, admin_principal, test_site, cement):
        service = StockRequestService(db_session, admin_principal)
        pending = _create(service, test_site, (cement, 1))
        approved = _create(service, test_site, (cement, 2))
        service.approve_request(approved.id)

        requests, total = service.get_issuable_requests()

        assert total == 1
        assert requests[0].id == approved.id
        assert pending.id not in [r.id for r in requests]
        assert StockRequestService.issuable_lines(requests[0]) == requests[0].items


class TestCommentsAndAttachments:
    """Discussion and evidence attached to a request"""

    def test_add_comment(self, db_session: Session, employee_principal, test_site, cement):
        service = StockRequestService(db_session, employee_principal)
        request = _create(service, test_site, (cement, 1))

        comments = service.add_comment(request.id, "  Needed by Friday  ")

        assert len(comments) == 1
        assert comments[0].description == "Needed by Friday"
        assert comments[0].author_role == "SITE_ENGINEER"
        assert comments[0].author_id == employee_principal.id

    def test_empty_comment_rejected(self, db_session: Session, employee_principal, test_site, cement):
        service = StockRequestService(db_session, employee_principal)
        request = _create(service, test_site, (cement, 1))

        with pytest.raises(ValidationError, match="Comment cannot be empty"):
            service.add_comment(request.id, "   ")

    def test_add_attachment(self, db_session: Session, employee_principal, test_site, cement):
        service = StockRequestService(db_session, employee_principal)
        request = _create(service, test_site, (cement, 1))

        attachments = service.add_attachment(request.id, "/uploads/attachment_images/note.png", "Delivery note")

        assert len(attachments) == 1
        assert attachments[0].file_url == "/uploads/attachment_images/note.png"
        assert attachments[0].uploaded_by_role == "SITE_ENGINEER"
