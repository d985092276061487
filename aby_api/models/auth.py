"""
Authentication Models
Dashboard administrators (employees authenticate against the employees table)
"""
from sqlalchemy import Column, String, Boolean, Integer, DateTime

from aby_api.core.database import Base, TimestampMixin


class Admin(TimestampMixin, Base):
    """System administrators"""
    __tablename__ = "admins"

    id = Column(Integer, primary_key=True, index=True)
    names = Column(String(120), nullable=False)
    email = Column(String(120), unique=True, nullable=False, index=True)
    phone = Column(String(30))
    password_hash = Column(String(255), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    last_login = Column(DateTime(timezone=True))

    def __repr__(self):
        return f"<Admin(id={self.id}, email='{self.email}')>"
