"""
Aquaculture Models
Cages, feeding, medication, medicine stock, ponds and the hatchery
(laboratory boxes, egg migrations and the records kept against each batch)
"""
from sqlalchemy import Column, String, Integer, Numeric, Date, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship

from aby_api.core.database import Base, TimestampMixin

QTY = Numeric(14, 2)


class Cage(TimestampMixin, Base):
    __tablename__ = "cages"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(120), nullable=False)
    code = Column(String(40), unique=True)
    location = Column(String(150))
    capacity = Column(Integer)
    status = Column(String(20), default="ACTIVE", nullable=False)
    description = Column(Text)

    feedings = relationship("FeedCage", back_populates="cage")
    medications = relationship("Medication", back_populates="cage", cascade="all, delete-orphan")


class FeedStock(TimestampMixin, Base):
    """Fish feed held in stock"""
    __tablename__ = "feed_stock"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(120), nullable=False)
    type = Column(String(80))
    quantity = Column(QTY, default=0, nullable=False)
    unit = Column(String(20), default="kg", nullable=False)
    unit_price = Column(QTY)
    supplier = Column(String(150))


class FeedCage(TimestampMixin, Base):
    """Feed given to a cage"""
    __tablename__ = "feed_cage"

    id = Column(Integer, primary_key=True, index=True)
    cage_id = Column(Integer, ForeignKey("cages.id"), nullable=False)
    feed_id = Column(Integer, ForeignKey("feed_stock.id"), nullable=False)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False)
    quantity_given = Column(QTY, nullable=False)
    notes = Column(Text)
    fed_at = Column(DateTime(timezone=True))

    cage = relationship("Cage", back_populates="feedings")
    feed = relationship("FeedStock")
    employee = relationship("Employee")


class Medication(TimestampMixin, Base):
    """Treatment given to a cage"""
    __tablename__ = "medications"

    id = Column(Integer, primary_key=True, index=True)
    cage_id = Column(Integer, ForeignKey("cages.id", ondelete="CASCADE"), nullable=False)
    medicine_name = Column(String(120), nullable=False)
    dosage = Column(String(80))
    method = Column(String(80))
    date_given = Column(Date)
    notes = Column(Text)
    employee_id = Column(Integer, ForeignKey("employees.id", ondelete="SET NULL"))

    cage = relationship("Cage", back_populates="medications")


class Medicine(TimestampMixin, Base):
    """Medicine stock"""
    __tablename__ = "medicines"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(120), nullable=False)
    type = Column(String(80))
    quantity = Column(QTY, default=0, nullable=False)
    unit = Column(String(20))
    price_per_unit = Column(QTY, default=0, nullable=False)
    total_cost = Column(QTY, default=0, nullable=False)
    expiry_date = Column(Date)
    description = Column(Text)
    added_by_id = Column(Integer, ForeignKey("employees.id"), nullable=False)

    added_by = relationship("Employee")


class ParentFishPool(TimestampMixin, Base):
    __tablename__ = "parent_fish_pools"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(120), unique=True, nullable=False)
    description = Column(Text)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False)

    employee = relationship("Employee")
    water_changes = relationship(
        "ParentWaterChange",
        back_populates="pool",
        cascade="all, delete-orphan",
        order_by="ParentWaterChange.id.desc()",
    )


class ParentWaterChange(TimestampMixin, Base):
    __tablename__ = "parent_water_changes"

    id = Column(Integer, primary_key=True, index=True)
    parent_pool_id = Column(Integer, ForeignKey("parent_fish_pools.id", ondelete="CASCADE"), nullable=False)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False)
    liters_changed = Column(QTY, nullable=False)
    description = Column(Text)
    change_date = Column(Date)

    pool = relationship("ParentFishPool", back_populates="water_changes")


class GrownEggPond(TimestampMixin, Base):
    __tablename__ = "grown_egg_ponds"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(120), unique=True, nullable=False)
    code = Column(String(40))
    size = Column(Numeric(12, 2), nullable=False)
    description = Column(Text)


class LaboratoryBox(TimestampMixin, Base):
    """Hatchery box that receives eggs from a parent pool"""
    __tablename__ = "laboratory_boxes"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(120), unique=True, nullable=False)
    code = Column(String(40), unique=True, nullable=False)
    description = Column(Text)

    water_changes = relationship(
        "BoxWaterChange",
        back_populates="box",
        cascade="all, delete-orphan",
        order_by="BoxWaterChange.id.desc()",
    )


class BoxWaterChange(TimestampMixin, Base):
    __tablename__ = "laboratory_box_water_changes"

    id = Column(Integer, primary_key=True, index=True)
    box_id = Column(Integer, ForeignKey("laboratory_boxes.id", ondelete="CASCADE"), nullable=False)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False)
    liters_changed = Column(QTY, nullable=False)
    description = Column(Text)

    box = relationship("LaboratoryBox", back_populates="water_changes")
    employee = relationship("Employee")


class ParentEggMigration(TimestampMixin, Base):
    """Eggs moved from a parent fish pool into a laboratory box"""
    __tablename__ = "parent_egg_migrations"

    id = Column(Integer, primary_key=True, index=True)
    parent_pool_id = Column(Integer, ForeignKey("parent_fish_pools.id"), nullable=False)
    laboratory_box_id = Column(Integer, ForeignKey("laboratory_boxes.id"), nullable=False)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False)
    description = Column(Text)
    status = Column(String(20), default="ACTIVE", nullable=False)
    migrated_on = Column(Date)

    parent_pool = relationship("ParentFishPool")
    laboratory_box = relationship("LaboratoryBox")
    employee = relationship("Employee")


class EggToPondMigration(TimestampMixin, Base):
    """Grown eggs moved from a laboratory batch into a grown egg pond"""
    __tablename__ = "egg_to_pond_migrations"

    id = Column(Integer, primary_key=True, index=True)
    parent_egg_migration_id = Column(Integer, ForeignKey("parent_egg_migrations.id"), nullable=False)
    pond_id = Column(Integer, ForeignKey("grown_egg_ponds.id"), nullable=False)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False)
    description = Column(Text)
    status = Column(String(20), default="ACTIVE", nullable=False)
    migrated_on = Column(Date)

    parent_egg_migration = relationship("ParentEggMigration")
    pond = relationship("GrownEggPond")
    employee = relationship("Employee")
    water_changes = relationship(
        "PondWaterChange",
        back_populates="migration",
        cascade="all, delete-orphan",
        order_by="PondWaterChange.id.desc()",
    )


class PondWaterChange(TimestampMixin, Base):
    __tablename__ = "pond_water_changes"

    id = Column(Integer, primary_key=True, index=True)
    egg_to_pond_migration_id = Column(
        Integer, ForeignKey("egg_to_pond_migrations.id", ondelete="CASCADE"), nullable=False
    )
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False)
    liters_changed = Column(QTY, nullable=False)
    description = Column(Text)

    migration = relationship("EggToPondMigration", back_populates="water_changes")
    employee = relationship("Employee")


# Feeding and medication of hatchery batches. Each row points at one batch:
# a parent fish pool, a laboratory batch or a pond batch.

class ParentFishFeeding(TimestampMixin, Base):
    __tablename__ = "parent_fish_feedings"

    id = Column(Integer, primary_key=True, index=True)
    parent_pool_id = Column(Integer, ForeignKey("parent_fish_pools.id"), nullable=False)
    feed_id = Column(Integer, ForeignKey("feed_stock.id"), nullable=False)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False)
    quantity = Column(QTY, nullable=False)

    feed = relationship("FeedStock")
    employee = relationship("Employee")


class EggFishFeeding(TimestampMixin, Base):
    __tablename__ = "egg_fish_feedings"

    id = Column(Integer, primary_key=True, index=True)
    parent_egg_migration_id = Column(Integer, ForeignKey("parent_egg_migrations.id"), nullable=False)
    feed_id = Column(Integer, ForeignKey("feed_stock.id"), nullable=False)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False)
    quantity = Column(QTY, nullable=False)

    feed = relationship("FeedStock")
    employee = relationship("Employee")


class GrownEggPondFeeding(TimestampMixin, Base):
    __tablename__ = "grown_egg_pond_feedings"

    id = Column(Integer, primary_key=True, index=True)
    egg_to_pond_migration_id = Column(Integer, ForeignKey("egg_to_pond_migrations.id"), nullable=False)
    feed_id = Column(Integer, ForeignKey("feed_stock.id"), nullable=False)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False)
    quantity = Column(QTY, nullable=False)

    feed = relationship("FeedStock")
    employee = relationship("Employee")


class ParentFishMedication(TimestampMixin, Base):
    __tablename__ = "parent_fish_medications"

    id = Column(Integer, primary_key=True, index=True)
    parent_pool_id = Column(Integer, ForeignKey("parent_fish_pools.id"), nullable=False)
    medicine_id = Column(Integer, ForeignKey("medicines.id"), nullable=False)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False)
    quantity = Column(QTY, default=0, nullable=False)

    medicine = relationship("Medicine")
    employee = relationship("Employee")


class EggFishMedication(TimestampMixin, Base):
    __tablename__ = "egg_fish_medications"

    id = Column(Integer, primary_key=True, index=True)
    parent_egg_migration_id = Column(Integer, ForeignKey("parent_egg_migrations.id"), nullable=False)
    medicine_id = Column(Integer, ForeignKey("medicines.id"), nullable=False)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False)
    quantity = Column(QTY, default=0, nullable=False)

    medicine = relationship("Medicine")
    employee = relationship("Employee")


class PondMedication(TimestampMixin, Base):
    __tablename__ = "pond_medications"

    id = Column(Integer, primary_key=True, index=True)
    egg_to_pond_migration_id = Column(Integer, ForeignKey("egg_to_pond_migrations.id"), nullable=False)
    medicine_id = Column(Integer, ForeignKey("medicines.id"), nullable=False)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False)
    quantity = Column(QTY, default=0, nullable=False)

    medicine = relationship("Medicine")
    employee = relationship("Employee")
