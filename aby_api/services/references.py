"""
Reference checks used before deleting master records

Callers pass ``(column, value, label)`` triples; the first table that still
points at the record decides the conflict message.
"""
from typing import Any, Iterable, Optional, Tuple

from sqlalchemy.orm import Session

from aby_api.core.exceptions import ConflictError

Reference = Tuple[Any, Any, str]


def find_reference(db: Session, references: Iterable[Reference]) -> Optional[str]:
    """Label of the first referencing table, or None when nothing points at the record"""
    for column, value, label in references:
        if db.query(column).filter(column == value).first() is not None:
            return label
    return None


def ensure_unreferenced(db: Session, subject: str, references: Iterable[Reference]) -> None:
    label = find_reference(db, references)
    if label:
        raise ConflictError(f"{subject} has {label} and cannot be deleted")
