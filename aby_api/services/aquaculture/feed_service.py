"""
Feed Service
Feed stock, the feeding of cages and the feeding of hatchery batches

Every feeding record draws from feed stock inside the same transaction,
so stock on hand always equals receipts minus recorded feedings.
"""
from decimal import Decimal
from typing import List, Optional
import logging

from sqlalchemy.orm import Session

from aby_api.core.exceptions import NotFoundError, ValidationError, BusinessLogicError
from aby_api.core.security import Principal
from aby_api.models.aquaculture import (
    Cage, EggFishFeeding, EggToPondMigration, FeedCage, FeedStock, GrownEggPondFeeding,
    ParentEggMigration, ParentFishFeeding, ParentFishPool
)
from aby_api.models.hr import Employee
from aby_api.schemas.aquaculture import (
    BatchFeedingUpdate, EggFishFeedingCreate, FeedCageCreate, FeedCageUpdate, FeedStockCreate,
    FeedStockUpdate, GrownEggPondFeedingCreate, ParentFishFeedingCreate
)
from aby_api.services.references import ensure_unreferenced
from .recording import require, resolve_employee

logger = logging.getLogger(__name__)


def draw_feed(feed: FeedStock, quantity: Decimal) -> None:
    available = Decimal(feed.quantity)
    if available < quantity:
        raise BusinessLogicError(
            f"Insufficient feed stock for {feed.name}. Available: {available}"
        )
    feed.quantity = available - Decimal(quantity)


class FeedService:
    def __init__(self, db: Session):
        self.db = db

    # Feed stock

    def list_feeds(self) -> List[FeedStock]:
        return self.db.query(FeedStock).order_by(FeedStock.name).all()

    def get_feed(self, feed_id: int) -> FeedStock:
        feed = self.db.get(FeedStock, feed_id)
        if not feed:
            raise NotFoundError("Feed not found")
        return feed

    def create_feed(self, data: FeedStockCreate) -> FeedStock:
        if not data.name.strip():
            raise ValidationError("Feed name is required")
        if data.quantity < 0:
            raise ValidationError("Quantity cannot be negative")
        feed = FeedStock(**data.model_dump())
        self.db.add(feed)
        self.db.commit()
        self.db.refresh(feed)
        logger.info(f"Feed stock created: {feed.name} {feed.quantity}{feed.unit}")
        return feed

    def update_feed(self, feed_id: int, data: FeedStockUpdate) -> FeedStock:
        feed = self.get_feed(feed_id)
        update_data = data.model_dump(exclude_unset=True)
        if update_data.get("quantity") is not None and update_data["quantity"] < 0:
            raise ValidationError("Quantity cannot be negative")
        for field, value in update_data.items():
            setattr(feed, field, value)
        self.db.commit()
        self.db.refresh(feed)
        return feed

    def delete_feed(self, feed_id: int) -> None:
        feed = self.get_feed(feed_id)
        ensure_unreferenced(self.db, "Feed", [
            (model.feed_id, feed_id, "feeding records")
            for model in (FeedCage, ParentFishFeeding, EggFishFeeding, GrownEggPondFeeding)
        ])
        self.db.delete(feed)
        self.db.commit()

    # Cage feeding

    def list_feedings(self, cage_id: Optional[int] = None) -> List[FeedCage]:
        query = self.db.query(FeedCage)
        if cage_id:
            query = query.filter(FeedCage.cage_id == cage_id)
        return query.order_by(FeedCage.created_at.desc(), FeedCage.id.desc()).all()

    def get_feeding(self, feeding_id: int) -> FeedCage:
        feeding = self.db.get(FeedCage, feeding_id)
        if not feeding:
            raise NotFoundError("Feeding record not found")
        return feeding

    def feed_cage(self, data: FeedCageCreate) -> FeedCage:
        """Record a feeding and draw its quantity from feed stock"""
        if data.quantity_given <= 0:
            raise ValidationError("Quantity given must be greater than zero")
        if not self.db.get(Cage, data.cage_id):
            raise NotFoundError("Cage not found")
        if not self.db.get(Employee, data.employee_id):
            raise NotFoundError("Employee not found")
        feed = self.get_feed(data.feed_id)
        draw_feed(feed, data.quantity_given)

        feeding = FeedCage(**data.model_dump())
        try:
            self.db.add(feeding)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(feeding)
        logger.info(
            f"Cage {feeding.cage_id} fed {feeding.quantity_given}{feed.unit} of {feed.name}; "
            f"{feed.quantity} left"
        )
        return feeding

    def update_feeding(self, feeding_id: int, data: FeedCageUpdate) -> FeedCage:
        """A changed quantity moves only the difference in or out of feed stock"""
        feeding = self.get_feeding(feeding_id)
        update_data = data.model_dump(exclude_unset=True)

        try:
            new_qty = update_data.pop("quantity_given", None)
            if new_qty is not None:
                if new_qty <= 0:
                    raise ValidationError("Quantity given must be greater than zero")
                difference = Decimal(new_qty) - Decimal(feeding.quantity_given)
                if difference > 0:
                    draw_feed(feeding.feed, difference)
                elif difference < 0:
                    feeding.feed.quantity = Decimal(feeding.feed.quantity) - difference
                feeding.quantity_given = new_qty

            for field, value in update_data.items():
                setattr(feeding, field, value)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(feeding)
        return feeding

    def delete_feeding(self, feeding_id: int) -> None:
        """Remove a feeding record and return its quantity to stock"""
        feeding = self.get_feeding(feeding_id)
        try:
            feeding.feed.quantity = Decimal(feeding.feed.quantity) + Decimal(feeding.quantity_given)
            self.db.delete(feeding)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logger.info(f"Feeding record {feeding_id} deleted")


class BatchFeedingService:
    """
    Feeding of a hatchery batch

    Subclasses name the record model and the batch it points at. Stock moves
    the same way as for cages: drawn on create, the difference on update,
    returned on delete.
    """

    model = None
    batch_model = None
    batch_field = None
    batch_label = None

    def __init__(self, db: Session, actor: Optional[Principal] = None):
        self.db = db
        self.actor = actor

    def list_feedings(self, batch_id: Optional[int] = None) -> list:
        query = self.db.query(self.model)
        if batch_id:
            query = query.filter(getattr(self.model, self.batch_field) == batch_id)
        return query.order_by(self.model.created_at.desc(), self.model.id.desc()).all()

    def get_feeding(self, feeding_id: int):
        feeding = self.db.get(self.model, feeding_id)
        if not feeding:
            raise NotFoundError("Feeding record not found")
        return feeding

    def create_feeding(self, data):
        if data.quantity <= 0:
            raise ValidationError("Quantity must be greater than zero")
        batch_id = getattr(data, self.batch_field)
        require(self.db, self.batch_model, batch_id, self.batch_label)
        employee_id = resolve_employee(self.db, self.actor, data.employee_id)
        feed = require(self.db, FeedStock, data.feed_id, "Feed")

        try:
            draw_feed(feed, data.quantity)
            feeding = self.model(**data.model_dump(exclude={"employee_id"}), employee_id=employee_id)
            self.db.add(feeding)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(feeding)
        logger.info(
            f"{self.batch_label} {batch_id} fed {feeding.quantity}{feed.unit} of {feed.name}; "
            f"{feed.quantity} left"
        )
        return feeding

    def update_feeding(self, feeding_id: int, data: BatchFeedingUpdate):
        feeding = self.get_feeding(feeding_id)
        update_data = data.model_dump(exclude_unset=True)

        try:
            new_qty = update_data.pop("quantity", None)
            if new_qty is not None:
                if new_qty <= 0:
                    raise ValidationError("Quantity must be greater than zero")
                difference = Decimal(new_qty) - Decimal(feeding.quantity)
                if difference > 0:
                    draw_feed(feeding.feed, difference)
                elif difference < 0:
                    feeding.feed.quantity = Decimal(feeding.feed.quantity) - difference
                feeding.quantity = new_qty
            if update_data.get("employee_id") is not None:
                feeding.employee_id = resolve_employee(self.db, None, update_data["employee_id"])
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(feeding)
        return feeding

    def delete_feeding(self, feeding_id: int) -> None:
        feeding = self.get_feeding(feeding_id)
        try:
            feeding.feed.quantity = Decimal(feeding.feed.quantity) + Decimal(feeding.quantity)
            self.db.delete(feeding)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logger.info(f"{self.batch_label} feeding record {feeding_id} deleted")


class ParentFishFeedingService(BatchFeedingService):
    model = ParentFishFeeding
    batch_model = ParentFishPool
    batch_field = "parent_pool_id"
    batch_label = "Parent fish pool"

    def create_feeding(self, data: ParentFishFeedingCreate) -> ParentFishFeeding:
        return super().create_feeding(data)


class EggFishFeedingService(BatchFeedingService):
    model = EggFishFeeding
    batch_model = ParentEggMigration
    batch_field = "parent_egg_migration_id"
    batch_label = "Parent egg migration"

    def create_feeding(self, data: EggFishFeedingCreate) -> EggFishFeeding:
        return super().create_feeding(data)


class GrownEggPondFeedingService(BatchFeedingService):
    model = GrownEggPondFeeding
    batch_model = EggToPondMigration
    batch_field = "egg_to_pond_migration_id"
    batch_label = "Egg to pond migration"

    def create_feeding(self, data: GrownEggPondFeedingCreate) -> GrownEggPondFeeding:
        return super().create_feeding(data)
