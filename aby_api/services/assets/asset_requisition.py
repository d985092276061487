"""
Asset Requisition Service
Employee requests for company assets, issue from the register and procurement follow-up
"""
from typing import Dict, List, Optional
import logging

from sqlalchemy.orm import Session

from aby_api.core.exceptions import NotFoundError, ValidationError, BusinessLogicError
from aby_api.models.asset import (
    Asset, AssetRequest, AssetRequestItem, AssetRequestStatus, ItemStatus, ProcurementStatus
)
from aby_api.models.hr import Employee
from aby_api.schemas.asset import (
    AssetRequestCreate, AssetRequestUpdate, ApproveAssetRequest, AssetRequestItemInput
)

logger = logging.getLogger(__name__)


class AssetRequestService:
    """
    Asset requisition workflow

    A request is approved and issued in one step; lines the register cannot
    cover are flagged for procurement and issued later.
    """

    def __init__(self, db: Session):
        self.db = db

    def find_all(
        self,
        status: Optional[str] = None,
        employee_id: Optional[int] = None
    ) -> List[AssetRequest]:
        query = self.db.query(AssetRequest)
        if status:
            query = query.filter(AssetRequest.status == status)
        if employee_id:
            query = query.filter(AssetRequest.employee_id == employee_id)
        return query.order_by(AssetRequest.created_at.desc(), AssetRequest.id.desc()).all()

    def find_one(self, request_id: int) -> AssetRequest:
        request = self.db.get(AssetRequest, request_id)
        if not request:
            raise NotFoundError("Request not found")
        return request

    def create(self, data: AssetRequestCreate) -> AssetRequest:
        if not self.db.get(Employee, data.employee_id):
            raise ValidationError("Employee not found")
        if not data.items:
            raise ValidationError("A request must contain at least one asset")

        request = AssetRequest(
            employee_id=data.employee_id,
            description=data.description,
            status=AssetRequestStatus.PENDING.value,
        )
        for item_data in data.items:
            request.items.append(self._build_item(item_data))

        self.db.add(request)
        self.db.commit()
        self.db.refresh(request)

        logger.info(f"Asset request {request.id} created by employee {request.employee_id}")
        return request

    def update(self, request_id: int, data: AssetRequestUpdate) -> AssetRequest:
        request = self._pending(request_id, "updated")

        try:
            if data.description is not None:
                request.description = data.description
            if data.items is not None:
                if not data.items:
                    raise ValidationError("A request must contain at least one asset")
                request.items.clear()
                for item_data in data.items:
                    request.items.append(self._build_item(item_data))
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(request)
        return request

    def remove(self, request_id: int) -> None:
        request = self._pending(request_id, "deleted")
        self.db.delete(request)
        self.db.commit()
        logger.info(f"Asset request {request_id} deleted")

    def approve_and_issue(self, request_id: int, data: ApproveAssetRequest) -> AssetRequest:
        """
        Approve a pending request and hand out what the register holds

        Without explicit ``issued_items`` every line is issued in full,
        limited by the quantity available.
        """
        request = self._pending(request_id, "approved")
        items_by_id = {item.id: item for item in request.items}

        if data.issued_items:
            wanted: Dict[int, int] = {}
            for issued in data.issued_items:
                item = items_by_id.get(issued.item_id)
                if item is None:
                    raise ValidationError(f"Item {issued.item_id} does not belong to this request")
                if issued.issued_quantity > item.quantity:
                    raise ValidationError(
                        f"Cannot issue more than the {item.quantity} requested for {item.asset.name}"
                    )
                wanted[item.id] = issued.issued_quantity
        else:
            wanted = {item.id: item.quantity for item in request.items}

        try:
            for item_id, quantity in wanted.items():
                self._issue(items_by_id[item_id], quantity)
            request.status = self._request_status(request)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(request)
        logger.info(f"Asset request {request.id} approved, status {request.status}")
        return request

    def issue_outstanding(self, request_id: int) -> AssetRequest:
        """Issue what is still owed on a partially issued request"""
        request = self.find_one(request_id)
        if request.status != AssetRequestStatus.PARTIALLY_ISSUED.value:
            raise BusinessLogicError("Only partially issued requests have outstanding items")

        try:
            for item in request.items:
                if item.quantity_outstanding > 0:
                    self._issue(item, item.quantity_outstanding)
            request.status = self._request_status(request)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(request)
        logger.info(f"Outstanding assets issued for request {request.id}, status {request.status}")
        return request

    def reject(self, request_id: int) -> AssetRequest:
        request = self._pending(request_id, "rejected")
        request.status = AssetRequestStatus.REJECTED.value
        for item in request.items:
            item.status = ItemStatus.REJECTED.value
        self.db.commit()
        self.db.refresh(request)
        return request

    # Procurement

    def get_items_for_procurement(self) -> List[AssetRequestItem]:
        return (
            self.db.query(AssetRequestItem)
            .filter(AssetRequestItem.procurement_status == ProcurementStatus.REQUIRED.value)
            .order_by(AssetRequestItem.id)
            .all()
        )

    def get_procurement_item(self, item_id: int) -> AssetRequestItem:
        item = self.db.get(AssetRequestItem, item_id)
        if not item or item.procurement_status == ProcurementStatus.NOT_REQUIRED.value:
            raise NotFoundError("Procurement item not found")
        return item

    def update_procurement(self, asset_id: int, ordered_quantity: int) -> Asset:
        """Book ordered stock into the register and mark waiting lines as procured"""
        asset = self.db.get(Asset, asset_id)
        if not asset:
            raise NotFoundError("Asset not found")
        if ordered_quantity <= 0:
            raise ValidationError("Ordered quantity must be greater than zero")

        asset.quantity += ordered_quantity
        waiting = (
            self.db.query(AssetRequestItem)
            .filter(
                AssetRequestItem.asset_id == asset_id,
                AssetRequestItem.procurement_status == ProcurementStatus.REQUIRED.value
            )
            .all()
        )
        for item in waiting:
            item.procurement_status = ProcurementStatus.PROCURED.value

        self.db.commit()
        self.db.refresh(asset)
        logger.info(f"Procured {ordered_quantity} of asset {asset_id}; {len(waiting)} lines updated")
        return asset

    # Helpers

    def _pending(self, request_id: int, action: str) -> AssetRequest:
        request = self.find_one(request_id)
        if request.status != AssetRequestStatus.PENDING.value:
            raise BusinessLogicError(f"Only PENDING requests can be {action}")
        return request

    def _build_item(self, item_data: AssetRequestItemInput) -> AssetRequestItem:
        if not self.db.get(Asset, item_data.asset_id):
            raise ValidationError(f"Asset not found: {item_data.asset_id}")
        return AssetRequestItem(
            asset_id=item_data.asset_id,
            quantity=item_data.quantity or 1,
            quantity_issued=0,
            status=ItemStatus.PENDING.value,
            procurement_status=ProcurementStatus.NOT_REQUIRED.value,
        )

    @staticmethod
    def _issue(item: AssetRequestItem, quantity: int) -> None:
        """Hand out up to ``quantity`` units, capped by what the register holds"""
        asset = item.asset
        issue_qty = max(min(quantity, asset.quantity), 0)
        asset.quantity -= issue_qty
        item.quantity_issued = (item.quantity_issued or 0) + issue_qty

        if item.quantity_issued >= item.quantity:
            item.status = ItemStatus.ISSUED.value
            if item.procurement_status == ProcurementStatus.REQUIRED.value:
                item.procurement_status = ProcurementStatus.NOT_REQUIRED.value
        else:
            item.status = ItemStatus.PARTIALLY_ISSUED.value
            if item.procurement_status != ProcurementStatus.PROCURED.value:
                item.procurement_status = ProcurementStatus.REQUIRED.value

    @staticmethod
    def _request_status(request: AssetRequest) -> str:
        if all(item.status == ItemStatus.ISSUED.value for item in request.items):
            return AssetRequestStatus.ISSUED.value
        return AssetRequestStatus.PARTIALLY_ISSUED.value
