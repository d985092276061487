"""
Authentication Service
Admin and employee sign-in, tokens and password management
"""

from typing import Optional, Union
from datetime import datetime, timezone
import logging

from sqlalchemy import or_
from sqlalchemy.orm import Session

from aby_api.core.exceptions import AuthenticationError, ConflictError, ValidationError
from aby_api.core.security import (
    ADMIN, EMPLOYEE, Principal, create_access_token, get_password_hash,
    role_from_position, verify_password
)
from aby_api.models.auth import Admin
from aby_api.models.hr import Employee, EmployeeStatus
from aby_api.schemas.auth import AdminCreate

logger = logging.getLogger(__name__)
security_logger = logging.getLogger("aby_api.security")


class AuthService:
    """Service for authentication operations"""

    def __init__(self, db: Session):
        self.db = db

    # Admin accounts

    def get_admin_by_email(self, email: str) -> Optional[Admin]:
        return self.db.query(Admin).filter(Admin.email == email.strip().lower()).first()

    def create_admin(self, data: AdminCreate) -> Admin:
        """Create a dashboard administrator"""
        if self.get_admin_by_email(data.email):
            raise ConflictError("An admin with this email already exists")

        admin = Admin(
            names=data.names,
            email=data.email.strip().lower(),
            phone=data.phone,
            password_hash=get_password_hash(data.password),
            is_active=True,
        )
        self.db.add(admin)
        self.db.commit()
        self.db.refresh(admin)

        logger.info(f"Admin created: {admin.email}")
        return admin

    def authenticate_admin(self, email: str, password: str) -> Admin:
        admin = self.get_admin_by_email(email)
        if not admin or not verify_password(password, admin.password_hash):
            security_logger.warning(f"Failed admin login for {email}")
            raise AuthenticationError("Incorrect email or password")
        if not admin.is_active:
            raise AuthenticationError("Inactive account")

        admin.last_login = datetime.now(timezone.utc)
        self.db.commit()
        security_logger.info(f"Admin login: {admin.email}")
        return admin

    # Employee accounts

    def authenticate_employee(self, identifier: str, password: str) -> Employee:
        """Employees sign in with their email address or phone number"""
        identifier = identifier.strip()
        employee = (
            self.db.query(Employee)
            .filter(or_(Employee.email == identifier.lower(), Employee.phone == identifier))
            .first()
        )
        if not employee or not employee.password_hash or not verify_password(password, employee.password_hash):
            security_logger.warning(f"Failed employee login for {identifier}")
            raise AuthenticationError("Invalid credentials")
        if employee.status != EmployeeStatus.ACTIVE.value:
            raise AuthenticationError("Employee account is not active")

        employee.last_login = datetime.now(timezone.utc)
        self.db.commit()
        security_logger.info(f"Employee login: {employee.email}")
        return employee

    # Tokens and principals

    @staticmethod
    def principal_for(account: Union[Admin, Employee]) -> Principal:
        if isinstance(account, Admin):
            return Principal(kind=ADMIN, id=account.id, role="ADMIN", name=account.names)
        return Principal(
            kind=EMPLOYEE,
            id=account.id,
            role=role_from_position(account.position),
            name=account.full_name,
        )

    @staticmethod
    def issue_token(principal: Principal) -> str:
        return create_access_token({"sub": str(principal.id), "kind": principal.kind})

    def resolve_principal(self, payload: dict) -> Optional[Principal]:
        """Load the account a verified token refers to"""
        try:
            account_id = int(payload["sub"])
        except (KeyError, TypeError, ValueError):
            return None

        if payload.get("kind") == ADMIN:
            admin = self.db.get(Admin, account_id)
            if admin and admin.is_active:
                return self.principal_for(admin)
            return None

        employee = self.db.get(Employee, account_id)
        if employee and employee.status == EmployeeStatus.ACTIVE.value:
            return self.principal_for(employee)
        return None

    def get_account(self, principal: Principal) -> Union[Admin, Employee, None]:
        model = Admin if principal.is_admin else Employee
        return self.db.get(model, principal.id)

    def change_password(self, principal: Principal, current_password: str, new_password: str) -> None:
        account = self.get_account(principal)
        if account is None or not account.password_hash:
            raise AuthenticationError("Account not found")
        if not verify_password(current_password, account.password_hash):
            raise ValidationError("Current password is incorrect")
        if current_password == new_password:
            raise ValidationError("New password must differ from the current password")

        account.password_hash = get_password_hash(new_password)
        self.db.commit()
        security_logger.info(f"Password changed for {principal.kind} {principal.id}")
