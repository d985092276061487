"""Department Service"""
from typing import List
import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from aby_api.core.exceptions import NotFoundError, ConflictError, ValidationError
from aby_api.models.hr import Contract, Department
from aby_api.schemas.hr import DepartmentCreate, DepartmentUpdate
from aby_api.services.references import ensure_unreferenced

logger = logging.getLogger(__name__)


class DepartmentService:
    def __init__(self, db: Session):
        self.db = db

    def list_departments(self) -> List[Department]:
        return self.db.query(Department).order_by(Department.name).all()

    def get_department(self, department_id: int) -> Department:
        department = self.db.get(Department, department_id)
        if not department:
            raise NotFoundError("Department not found")
        return department

    def create_department(self, data: DepartmentCreate) -> Department:
        name = data.name.strip()
        if not name:
            raise ValidationError("Department name is required")
        self._check_name(name)

        department = Department(name=name, description=data.description)
        self.db.add(department)
        self.db.commit()
        self.db.refresh(department)
        logger.info(f"Department created: {department.name}")
        return department

    def update_department(self, department_id: int, data: DepartmentUpdate) -> Department:
        department = self.get_department(department_id)
        update_data = data.model_dump(exclude_unset=True)
        if "name" in update_data:
            name = (update_data["name"] or "").strip()
            if not name:
                raise ValidationError("Department name is required")
            self._check_name(name, exclude_id=department_id)
            update_data["name"] = name

        for field, value in update_data.items():
            setattr(department, field, value)
        self.db.commit()
        self.db.refresh(department)
        return department

    def delete_department(self, department_id: int) -> None:
        department = self.get_department(department_id)
        ensure_unreferenced(self.db, "Department", [(Contract.department_id, department_id, "contracts")])
        self.db.delete(department)
        self.db.commit()
        logger.info(f"Department {department_id} deleted")

    def _check_name(self, name: str, exclude_id: int = None) -> None:
        query = self.db.query(Department.id).filter(func.lower(Department.name) == name.lower())
        if exclude_id is not None:
            query = query.filter(Department.id != exclude_id)
        if query.first():
            raise ConflictError("Department already exists")
