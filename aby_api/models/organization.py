"""
Organization Models
Sites (construction / farm locations) and stores holding stock
"""
from sqlalchemy import Column, String, Integer, Text, ForeignKey, Table
from sqlalchemy.orm import relationship

from aby_api.core.database import Base, TimestampMixin

site_assignments = Table(
    "site_assignments",
    Base.metadata,
    Column("site_id", Integer, ForeignKey("sites.id", ondelete="CASCADE"), primary_key=True),
    Column("employee_id", Integer, ForeignKey("employees.id", ondelete="CASCADE"), primary_key=True),
)


class Site(TimestampMixin, Base):
    """A site that raises stock requisitions"""
    __tablename__ = "sites"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(120), nullable=False)
    code = Column(String(30), unique=True)
    location = Column(String(200))
    description = Column(Text)
    manager_id = Column(Integer, ForeignKey("employees.id", ondelete="SET NULL"))
    supervisor_id = Column(Integer, ForeignKey("employees.id", ondelete="SET NULL"))

    manager = relationship("Employee", foreign_keys=[manager_id])
    supervisor = relationship("Employee", foreign_keys=[supervisor_id])
    employees = relationship("Employee", secondary=site_assignments, order_by="Employee.id")

    def __repr__(self):
        return f"<Site(id={self.id}, name='{self.name}')>"


class Store(TimestampMixin, Base):
    """Physical store where stock-in records are kept"""
    __tablename__ = "stores"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(120), nullable=False)
    code = Column(String(30), unique=True, nullable=False)
    location = Column(String(200))
    description = Column(Text)

    stock_items = relationship("StockIn", back_populates="store")

    def __repr__(self):
        return f"<Store(id={self.id}, code='{self.code}')>"
