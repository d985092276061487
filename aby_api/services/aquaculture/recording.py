"""Lookups shared by the records kept against cages, pools, boxes and ponds"""
from typing import Optional, Type, TypeVar

from sqlalchemy.orm import Session

from aby_api.core.exceptions import NotFoundError, ValidationError
from aby_api.core.security import Principal
from aby_api.models.hr import Employee

T = TypeVar("T")


def require(db: Session, model: Type[T], record_id: int, label: str) -> T:
    record = db.get(model, record_id)
    if not record:
        raise NotFoundError(f"{label} not found")
    return record


def resolve_employee(db: Session, actor: Optional[Principal], employee_id: Optional[int]) -> int:
    """
    Employee named on a record

    Falls back to the signed-in employee; admins have to name one.
    """
    if employee_id is None and actor is not None:
        employee_id = actor.employee_id
    if employee_id is None:
        raise ValidationError("The employee recording this entry is required")
    if not db.get(Employee, employee_id):
        raise ValidationError("Employee not found")
    return employee_id
