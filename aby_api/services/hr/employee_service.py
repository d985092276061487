"""
Employee Service
Staff records, login credentials and uploaded documents
"""
from typing import Dict, List, Optional, Tuple
import logging

from sqlalchemy import or_
from sqlalchemy.orm import Session

from aby_api.core.exceptions import NotFoundError, ConflictError, ValidationError
from aby_api.core.security import generate_password, get_password_hash
from aby_api.models.aquaculture import (
    BoxWaterChange, EggFishFeeding, EggFishMedication, EggToPondMigration, FeedCage,
    GrownEggPondFeeding, Medicine, ParentEggMigration, ParentFishFeeding, ParentFishMedication,
    ParentFishPool, ParentWaterChange, PondMedication, PondWaterChange
)
from aby_api.models.asset import AssetRequest
from aby_api.models.hr import Contract, Department, Employee
from aby_api.schemas.hr import EmployeeCreate, EmployeeUpdate
from aby_api.services.email_service import EmailService
from aby_api.services.file_storage import FileStorage
from aby_api.services.references import Reference, ensure_unreferenced

logger = logging.getLogger(__name__)

# Columns holding the URL of an uploaded document
DOCUMENT_FIELDS = ("profile_picture", "cv", "application_letter")


def employee_references(employee_id: int) -> List[Reference]:
    """Records that must keep the employee who made them"""
    columns = (
        (AssetRequest.employee_id, "asset requests"),
        (Contract.employee_id, "contracts"),
        (Medicine.added_by_id, "medicine stock entries"),
        (ParentFishPool.employee_id, "parent fish pools"),
        (ParentEggMigration.employee_id, "egg migrations"),
        (EggToPondMigration.employee_id, "egg migrations"),
        (FeedCage.employee_id, "feeding records"),
        (ParentFishFeeding.employee_id, "feeding records"),
        (EggFishFeeding.employee_id, "feeding records"),
        (GrownEggPondFeeding.employee_id, "feeding records"),
        (ParentFishMedication.employee_id, "medication records"),
        (EggFishMedication.employee_id, "medication records"),
        (PondMedication.employee_id, "medication records"),
        (ParentWaterChange.employee_id, "water change records"),
        (BoxWaterChange.employee_id, "water change records"),
        (PondWaterChange.employee_id, "water change records"),
    )
    return [(column, employee_id, label) for column, label in columns]


class EmployeeService:
    """Service for employee management"""

    def __init__(
        self,
        db: Session,
        storage: Optional[FileStorage] = None,
        mailer: Optional[EmailService] = None
    ):
        self.db = db
        self.storage = storage or FileStorage()
        self.mailer = mailer or EmailService()

    def list_employees(
        self,
        search: Optional[str] = None,
        status: Optional[str] = None,
        department_id: Optional[int] = None
    ) -> List[Employee]:
        query = self.db.query(Employee)
        if search:
            search_filter = f"%{search}%"
            query = query.filter(
                or_(
                    Employee.first_name.ilike(search_filter),
                    Employee.last_name.ilike(search_filter),
                    Employee.email.ilike(search_filter),
                    Employee.phone.ilike(search_filter),
                    Employee.position.ilike(search_filter),
                )
            )
        if status:
            query = query.filter(Employee.status == status)
        if department_id:
            query = query.filter(Employee.department_id == department_id)
        return query.order_by(Employee.created_at.desc(), Employee.id.desc()).all()

    def get_employee(self, employee_id: int) -> Employee:
        employee = self.db.get(Employee, employee_id)
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def create_employee(
        self,
        data: EmployeeCreate,
        documents: Optional[Dict[str, str]] = None
    ) -> Tuple[Employee, str]:
        """
        Register an employee with a generated password

        Returns:
            The employee and the plain temporary password sent in the welcome email
        """
        values = data.model_dump()
        values["email"] = values["email"].lower()
        self._check_unique(values["phone"], values["email"], values.get("national_id"))
        self._check_department(values.get("department_id"))

        password = generate_password()
        employee = Employee(**values, password_hash=get_password_hash(password))
        for field, url in (documents or {}).items():
            if field in DOCUMENT_FIELDS and url:
                setattr(employee, field, url)

        try:
            self.db.add(employee)
            self.db.commit()
            self.db.refresh(employee)
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"Employee created: {employee.email} ({employee.position})")

        try:
            self.mailer.send_welcome_email(employee, password)
        except Exception as e:
            logger.error(f"Welcome email for {employee.email} failed: {e}")

        return employee, password

    def update_employee(
        self,
        employee_id: int,
        data: EmployeeUpdate,
        documents: Optional[Dict[str, str]] = None
    ) -> Employee:
        """Update fields; a newly uploaded document replaces and deletes the old one"""
        employee = self.get_employee(employee_id)
        update_data = data.model_dump(exclude_unset=True)
        if update_data.get("email"):
            update_data["email"] = update_data["email"].lower()

        self._check_unique(
            update_data.get("phone"),
            update_data.get("email"),
            update_data.get("national_id"),
            exclude_id=employee_id
        )
        if "department_id" in update_data:
            self._check_department(update_data["department_id"])

        replaced = []
        for field, value in update_data.items():
            setattr(employee, field, value)
        for field, url in (documents or {}).items():
            if field in DOCUMENT_FIELDS and url:
                old_url = getattr(employee, field)
                if old_url and old_url != url:
                    replaced.append(old_url)
                setattr(employee, field, url)

        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        for url in replaced:
            self.storage.delete(url)

        self.db.refresh(employee)
        logger.info(f"Employee {employee_id} updated")
        return employee

    def delete_employee(self, employee_id: int) -> None:
        employee = self.get_employee(employee_id)
        ensure_unreferenced(self.db, "Employee", employee_references(employee_id))
        files = [getattr(employee, field) for field in DOCUMENT_FIELDS if getattr(employee, field)]

        try:
            self.db.delete(employee)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        for url in files:
            self.storage.delete(url)
        logger.info(f"Employee {employee_id} deleted")

    def _check_unique(
        self,
        phone: Optional[str],
        email: Optional[str],
        national_id: Optional[str],
        exclude_id: Optional[int] = None
    ) -> None:
        checks = (
            (Employee.phone, phone, "phone number"),
            (Employee.email, email, "email"),
            (Employee.national_id, national_id, "national ID"),
        )
        for column, value, label in checks:
            if not value:
                continue
            query = self.db.query(Employee.id).filter(column == value)
            if exclude_id is not None:
                query = query.filter(Employee.id != exclude_id)
            if query.first():
                raise ConflictError(f"An employee with this {label} already exists")

    def _check_department(self, department_id: Optional[int]) -> None:
        if department_id is not None and not self.db.get(Department, department_id):
            raise ValidationError("Invalid department ID")
