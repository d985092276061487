"""
Stock Requisition Service
Site material requests: approval, issue from stock and receipt on site

Lifecycle::

    PENDING -> APPROVED -> PARTIALLY_ISSUED -> ISSUED -> RECEIVED -> CLOSED
    PENDING / APPROVED -> REJECTED

Quantities per line are reconciled as requested >= approved >= issued >=
received, with qty_remaining = approved - issued (never negative).
"""
from typing import List, Optional, Tuple
from decimal import Decimal
from datetime import datetime, timezone
import logging

from sqlalchemy.orm import Session

from aby_api.core.exceptions import (
    NotFoundError, ValidationError, BusinessLogicError, InsufficientPermissionsError
)
from aby_api.core.security import Principal
from aby_api.models.organization import Site
from aby_api.models.stock import (
    StockIn, StockHistory, StockRequest, StockRequestItem, RequestAttachment,
    RequestComment, RequestStatus, MovementType, SourceType
)
from aby_api.schemas.stock import (
    StockRequestCreate, StockRequestUpdate, ApproveRequest, ModifyApproveRequest,
    IssueMaterials, ReceiveMaterials, RequestItemInput
)

logger = logging.getLogger(__name__)

ZERO = Decimal("0")

# Roles allowed to rework a request after submission
MODIFY_ROLES = ("ADMIN", "PADIRI", "DIOCESAN_SITE_ENGINEER")
APPROVER_ROLES = ("ADMIN", "PADIRI")

ISSUABLE_STATUSES = (RequestStatus.APPROVED.value, RequestStatus.PARTIALLY_ISSUED.value)
RECEIVABLE_STATUSES = (
    RequestStatus.ISSUED.value,
    RequestStatus.PARTIALLY_ISSUED.value,
    RequestStatus.RECEIVED.value,
)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _qty(value) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value or 0))


def approved_quantity(item: StockRequestItem) -> Decimal:
    """Approved amount, falling back to the requested amount before approval"""
    return _qty(item.qty_approved if item.qty_approved is not None else item.qty_requested)


class StockRequestService:
    """
    Stock requisition workflow

    Every mutating call runs in the session transaction: a failing line
    rolls back the whole operation.
    """

    def __init__(self, db: Session, actor: Optional[Principal] = None):
        self.db = db
        self.actor = actor

    # Queries

    def find_all(
        self,
        page: int = 1,
        limit: int = 10,
        site_id: Optional[int] = None,
        status: Optional[str] = None
    ) -> Tuple[List[StockRequest], int]:
        """Newest requests first, with the total count for pagination"""
        query = self.db.query(StockRequest)
        if site_id:
            query = query.filter(StockRequest.site_id == site_id)
        if status:
            query = query.filter(StockRequest.status == status)

        total = query.count()
        requests = (
            query.order_by(StockRequest.created_at.desc(), StockRequest.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return requests, total

    def get_issuable_requests(
        self,
        page: int = 1,
        limit: int = 10,
        site_id: Optional[int] = None
    ) -> Tuple[List[StockRequest], int]:
        """Approved or partially issued requests, oldest first (issue queue)"""
        query = self.db.query(StockRequest).filter(StockRequest.status.in_(ISSUABLE_STATUSES))
        if site_id:
            query = query.filter(StockRequest.site_id == site_id)

        total = query.count()
        requests = (
            query.order_by(StockRequest.created_at.asc(), StockRequest.id.asc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return requests, total

    @staticmethod
    def issuable_lines(request: StockRequest) -> List[StockRequestItem]:
        """Lines still waiting for material"""
        return [
            item for item in request.items
            if _qty(item.qty_remaining) > 0 or _qty(item.qty_issued) == 0
        ]

    def find_one(self, request_id: int) -> StockRequest:
        request = self.db.get(StockRequest, request_id)
        if not request:
            raise NotFoundError("Request not found")
        return request

    # Creation and editing

    def create_request(self, data: StockRequestCreate) -> StockRequest:
        """Raise a new PENDING requisition for a site"""
        if not self.db.get(Site, data.site_id):
            raise ValidationError("Invalid site ID")
        if not data.items:
            raise ValidationError("A request must contain at least one item")

        request = StockRequest(
            ref_no=self._generate_ref_no(),
            site_id=data.site_id,
            notes=data.notes,
            status=RequestStatus.PENDING.value,
        )
        self._stamp(request, "requested")

        try:
            for item_data in data.items:
                request.items.append(self._build_item(item_data))
            self.db.add(request)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(request)
        logger.info(f"Stock request {request.ref_no} created for site {request.site_id}")
        return request

    def update_request(self, request_id: int, data: StockRequestUpdate) -> StockRequest:
        """Edit a request that nobody has acted on yet"""
        request = self.find_one(request_id)
        if request.status != RequestStatus.PENDING.value:
            raise BusinessLogicError("Only pending requests can be updated")

        try:
            if data.site_id is not None:
                if not self.db.get(Site, data.site_id):
                    raise ValidationError("Invalid site ID")
                request.site_id = data.site_id
            if data.notes is not None:
                request.notes = data.notes
            if data.items is not None:
                if not data.items:
                    raise ValidationError("A request must contain at least one item")
                request.items.clear()
                for item_data in data.items:
                    request.items.append(self._build_item(item_data))
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(request)
        logger.info(f"Stock request {request.ref_no} updated")
        return request

    def delete_request(self, request_id: int) -> None:
        request = self.find_one(request_id)
        if request.status != RequestStatus.PENDING.value:
            raise BusinessLogicError("Only pending requests can be deleted")

        ref_no = request.ref_no
        self.db.delete(request)
        self.db.commit()
        logger.info(f"Stock request {ref_no} deleted")

    # Approval

    def approve_request(self, request_id: int, data: Optional[ApproveRequest] = None) -> StockRequest:
        """
        Approve a pending request, optionally reworking its lines first

        Lines without an explicit approved quantity are approved in full.
        """
        data = data or ApproveRequest()
        if self.actor is not None and self.actor.role not in APPROVER_ROLES:
            raise InsufficientPermissionsError(
                f"Only {', '.join(APPROVER_ROLES)} can approve requests"
            )
        request = self.find_one(request_id)
        if request.status != RequestStatus.PENDING.value:
            raise BusinessLogicError("Only pending requests can be approved")

        try:
            self._apply_item_changes(request, data)
            self._settle_approved_quantities(request)
            request.status = RequestStatus.APPROVED.value
            request.approved_at = _now()
            self._stamp(request, "approved")
            if data.comment:
                self._add_comment(request, data.comment)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(request)
        logger.info(f"Stock request {request.ref_no} approved")
        return request

    def modify_and_approve(
        self,
        request_id: int,
        data: ModifyApproveRequest,
        role: str
    ) -> StockRequest:
        """
        Rework a request on behalf of a privileged role

        ADMIN and PADIRI approve the result; a DIOCESAN_SITE_ENGINEER sends it
        back to PENDING for approval and may only do so before any issue.
        """
        if role not in MODIFY_ROLES:
            raise InsufficientPermissionsError(
                f"Only {', '.join(MODIFY_ROLES)} can modify requests"
            )

        request = self.find_one(request_id)
        if request.status in (RequestStatus.CLOSED.value, RequestStatus.REJECTED.value):
            raise InsufficientPermissionsError("Cannot modify a closed or rejected request")
        if request.status in (RequestStatus.ISSUED.value, RequestStatus.RECEIVED.value):
            raise BusinessLogicError("Cannot modify a request whose materials have been fully issued")

        issuance_started = any(_qty(item.qty_issued) > 0 for item in request.items)
        if role not in APPROVER_ROLES and issuance_started:
            raise InsufficientPermissionsError(
                "Requests with issued materials can only be modified by ADMIN or PADIRI"
            )

        try:
            self._apply_item_changes(request, data)
            if data.notes is not None:
                request.notes = data.notes

            if role in APPROVER_ROLES:
                self._settle_approved_quantities(request)
                if request.status == RequestStatus.PENDING.value:
                    request.status = RequestStatus.APPROVED.value
                    request.approved_at = _now()
                    self._stamp(request, "approved")
                else:
                    request.status = self._issuance_status(request)
            else:
                request.status = RequestStatus.PENDING.value
                request.approved_at = None
                request.approved_by_admin_id = None
                request.approved_by_employee_id = None

            if data.comment:
                self._add_comment(request, data.comment)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(request)
        logger.info(f"Stock request {request.ref_no} modified by {role}, now {request.status}")
        return request

    def reject_request(self, request_id: int, notes: Optional[str] = None) -> StockRequest:
        request = self.find_one(request_id)
        if request.status not in (RequestStatus.PENDING.value, RequestStatus.APPROVED.value):
            raise BusinessLogicError("Only pending or approved requests can be rejected")

        request.status = RequestStatus.REJECTED.value
        request.rejected_at = _now()
        self._stamp(request, "rejected")
        if notes is not None:
            request.notes = notes
        self.db.commit()
        self.db.refresh(request)

        logger.info(f"Stock request {request.ref_no} rejected")
        return request

    # Issue and receipt

    def issue_materials(self, data: IssueMaterials) -> StockRequest:
        """
        Issue approved quantities from stock

        Decrements each stock-in, journals an OUT/ISSUE movement and derives
        the request status from the issued totals.
        """
        request = self.find_one(data.request_id)
        if request.status not in ISSUABLE_STATUSES:
            raise BusinessLogicError("Request must be approved before issuing materials")
        if not data.items:
            raise ValidationError("No items to issue")

        items_by_id = {item.id: item for item in request.items}
        now = _now()

        try:
            for line in data.items:
                item = items_by_id.get(line.request_item_id)
                if item is None:
                    raise ValidationError(
                        f"Item {line.request_item_id} does not belong to request {request.ref_no}"
                    )

                qty = _qty(line.qty_issued)
                if qty <= 0:
                    raise ValidationError("Issued quantity must be greater than zero")

                stock = item.stock_in
                new_issued = _qty(item.qty_issued) + qty
                if new_issued > approved_quantity(item):
                    raise BusinessLogicError(f"Cannot issue more than approved for {stock.product_name}")
                if _qty(stock.quantity) < qty:
                    raise BusinessLogicError(
                        f"Insufficient stock for {stock.product_name}. Available: {stock.quantity}"
                    )

                qty_before = _qty(stock.quantity)
                stock.quantity = qty_before - qty
                item.qty_issued = new_issued
                item.qty_remaining = max(_qty(item.qty_remaining) - qty, ZERO)
                if line.notes:
                    item.notes = line.notes

                self.db.add(self._history(
                    stock,
                    movement_type=MovementType.OUT,
                    source_type=SourceType.ISSUE,
                    source_id=request.id,
                    qty_before=qty_before,
                    qty_change=-qty,
                    qty_after=stock.quantity,
                    notes=f"Issued for request {request.ref_no}",
                    created_at=now,
                ))

            request.status = self._issuance_status(request)
            request.issued_at = now
            self._stamp(request, "issued")
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(request)
        logger.info(f"Materials issued for {request.ref_no}, status {request.status}")
        return request

    def receive_materials(self, data: ReceiveMaterials) -> StockRequest:
        """
        Confirm delivery on site

        A fully issued request closes once every line is fully received.
        """
        request = self.find_one(data.request_id)
        if request.status not in RECEIVABLE_STATUSES:
            raise BusinessLogicError("Materials can only be received for issued requests")
        if not data.items:
            raise ValidationError("No items to receive")

        items_by_id = {item.id: item for item in request.items}
        now = _now()

        try:
            for line in data.items:
                item = items_by_id.get(line.request_item_id)
                if item is None:
                    raise ValidationError(
                        f"Item {line.request_item_id} does not belong to request {request.ref_no}"
                    )

                qty = _qty(line.qty_received)
                if qty <= 0:
                    raise ValidationError("Received quantity must be greater than zero")

                stock = item.stock_in
                received_before = _qty(item.qty_received)
                new_received = received_before + qty
                if new_received > _qty(item.qty_issued):
                    raise BusinessLogicError(f"Cannot receive more than issued for {stock.product_name}")

                item.qty_received = new_received
                self.db.add(self._history(
                    stock,
                    movement_type=MovementType.IN,
                    source_type=SourceType.RECEIPT,
                    source_id=request.id,
                    qty_before=received_before,
                    qty_change=qty,
                    qty_after=new_received,
                    notes=f"Received for request {request.ref_no}",
                    created_at=now,
                ))

            request.received_at = now
            self._stamp(request, "received")

            if request.status != RequestStatus.PARTIALLY_ISSUED.value:
                fully_received = all(
                    _qty(item.qty_received) >= _qty(item.qty_issued) for item in request.items
                )
                if fully_received:
                    request.status = RequestStatus.CLOSED.value
                    request.closed_at = now
                    self._stamp(request, "closed")
                else:
                    request.status = RequestStatus.RECEIVED.value

            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(request)
        logger.info(f"Materials received for {request.ref_no}, status {request.status}")
        return request

    # Attachments and comments

    def add_attachment(
        self,
        request_id: int,
        file_url: str,
        description: Optional[str] = None
    ) -> List[RequestAttachment]:
        request = self.find_one(request_id)
        request.attachments.append(RequestAttachment(
            file_url=file_url,
            description=description,
            uploaded_by_role=self.actor.role if self.actor else None,
            uploaded_by_id=self.actor.id if self.actor else None,
            created_at=_now(),
        ))
        self.db.commit()
        self.db.refresh(request)
        return request.attachments

    def add_comment(self, request_id: int, description: str) -> List[RequestComment]:
        if not description or not description.strip():
            raise ValidationError("Comment cannot be empty")
        request = self.find_one(request_id)
        self._add_comment(request, description.strip())
        self.db.commit()
        self.db.refresh(request)
        return request.comments

    # Helpers

    def _generate_ref_no(self) -> str:
        """REQ-YYYYMM-NNNN, numbered per calendar month"""
        prefix = f"REQ-{_now():%Y%m}-"
        refs = (
            self.db.query(StockRequest.ref_no)
            .filter(StockRequest.ref_no.like(f"{prefix}%"))
            .all()
        )
        sequence = max((int(ref[0][len(prefix):]) for ref in refs), default=0) + 1
        return f"{prefix}{sequence:04d}"

    def _get_stock_in(self, stock_in_id: int) -> StockIn:
        stock = self.db.get(StockIn, stock_in_id)
        if not stock:
            raise ValidationError(f"Stock item {stock_in_id} not found")
        return stock

    def _build_item(self, item_data: RequestItemInput) -> StockRequestItem:
        self._get_stock_in(item_data.stock_in_id)
        qty = _qty(item_data.qty_requested)
        if qty <= 0:
            raise ValidationError("Requested quantity must be greater than zero")
        return StockRequestItem(
            stock_in_id=item_data.stock_in_id,
            qty_requested=qty,
            qty_issued=ZERO,
            qty_received=ZERO,
            qty_remaining=qty,
            notes=item_data.notes,
        )

    def _apply_item_changes(self, request: StockRequest, data: ApproveRequest) -> None:
        """Remove, add and modify lines; issued quantities are never undercut"""
        items_by_id = {item.id: item for item in request.items}

        for item_id in data.items_to_remove:
            item = items_by_id.pop(item_id, None)
            if item is None:
                raise ValidationError(f"Item {item_id} does not belong to request {request.ref_no}")
            if _qty(item.qty_issued) > 0:
                raise BusinessLogicError(f"Item {item_id} has issued materials and cannot be removed")
            request.items.remove(item)

        for new_item in data.items_to_add:
            self._get_stock_in(new_item.stock_in_id)
            qty = _qty(new_item.qty_requested)
            if qty <= 0:
                raise ValidationError("Requested quantity must be greater than zero")
            approved = _qty(new_item.qty_approved) if new_item.qty_approved is not None else qty
            if approved < 0:
                raise ValidationError("Approved quantity cannot be negative")
            request.items.append(StockRequestItem(
                stock_in_id=new_item.stock_in_id,
                qty_requested=qty,
                qty_approved=approved,
                qty_issued=ZERO,
                qty_received=ZERO,
                qty_remaining=approved,
            ))

        for modification in data.item_modifications:
            item = items_by_id.get(modification.item_id)
            if item is None:
                raise ValidationError(
                    f"Item {modification.item_id} does not belong to request {request.ref_no}"
                )

            if modification.stock_in_id is not None and modification.stock_in_id != item.stock_in_id:
                if _qty(item.qty_issued) > 0:
                    raise BusinessLogicError(
                        f"Item {item.id} has issued materials; its product cannot change"
                    )
                item.stock_in = self._get_stock_in(modification.stock_in_id)

            if modification.qty_requested is not None:
                qty = _qty(modification.qty_requested)
                if qty <= 0:
                    raise ValidationError("Requested quantity must be greater than zero")
                item.qty_requested = qty

            if modification.qty_approved is not None:
                approved = _qty(modification.qty_approved)
                if approved < 0:
                    raise ValidationError("Approved quantity cannot be negative")
                if approved < _qty(item.qty_issued):
                    raise BusinessLogicError(
                        f"Approved quantity for item {item.id} cannot be below the issued quantity ({item.qty_issued})"
                    )
                item.qty_approved = approved
                item.qty_remaining = approved - _qty(item.qty_issued)

        if not request.items:
            raise BusinessLogicError("A request must keep at least one item")

    @staticmethod
    def _settle_approved_quantities(request: StockRequest) -> None:
        for item in request.items:
            if item.qty_approved is None:
                item.qty_approved = _qty(item.qty_requested)
            item.qty_remaining = max(_qty(item.qty_approved) - _qty(item.qty_issued), ZERO)

    @staticmethod
    def _issuance_status(request: StockRequest) -> str:
        fully_issued = all(
            _qty(item.qty_issued) >= approved_quantity(item) for item in request.items
        )
        if fully_issued:
            return RequestStatus.ISSUED.value
        if any(_qty(item.qty_issued) > 0 for item in request.items):
            return RequestStatus.PARTIALLY_ISSUED.value
        return RequestStatus.APPROVED.value

    def _stamp(self, request: StockRequest, action: str) -> None:
        """Record who performed ``action`` (requested, approved, issued...)"""
        if not self.actor:
            return
        setattr(request, f"{action}_by_admin_id", self.actor.admin_id)
        setattr(request, f"{action}_by_employee_id", self.actor.employee_id)

    def _add_comment(self, request: StockRequest, description: str) -> None:
        request.comments.append(RequestComment(
            description=description,
            author_role=self.actor.role if self.actor else None,
            author_id=self.actor.id if self.actor else None,
            created_at=_now(),
        ))

    def _history(
        self,
        stock: StockIn,
        movement_type: MovementType,
        source_type: SourceType,
        source_id: Optional[int],
        qty_before: Decimal,
        qty_change: Decimal,
        qty_after: Decimal,
        notes: str,
        created_at: datetime
    ) -> StockHistory:
        return StockHistory(
            stock_in_id=stock.id,
            movement_type=movement_type.value,
            source_type=source_type.value,
            source_id=source_id,
            qty_before=qty_before,
            qty_change=qty_change,
            qty_after=qty_after,
            unit_price=stock.unit_price,
            notes=notes,
            created_by_admin_id=self.actor.admin_id if self.actor else None,
            created_by_employee_id=self.actor.employee_id if self.actor else None,
            created_at=created_at,
        )
