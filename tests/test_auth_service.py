"""
Tests for Authentication Service
Admin and employee sign-in, tokens and password changes
"""

import pytest
from sqlalchemy.orm import Session

from aby_api.core.exceptions import AuthenticationError, ConflictError, ValidationError
from aby_api.core.security import (
    ADMIN, EMPLOYEE, create_access_token, role_from_position, verify_password, verify_token
)
from aby_api.schemas.auth import AdminCreate
from aby_api.services.auth_service import AuthService

from conftest import ADMIN_PASSWORD, EMPLOYEE_PASSWORD


class TestAdminAccounts:
    """Test suite for administrator accounts"""

    def test_create_admin(self, db_session: Session):
        admin = AuthService(db_session).create_admin(AdminCreate(
            names="Second Admin", email="Second@Example.com", password="strongpass1"
        ))

        assert admin.email == "second@example.com"
        assert admin.is_active
        assert verify_password("strongpass1", admin.password_hash)

    def test_create_admin_duplicate_email(self, db_session: Session, test_admin):
        with pytest.raises(ConflictError):
            AuthService(db_session).create_admin(AdminCreate(
                names="Copy", email=test_admin.email, password="strongpass1"
            ))

    def test_authenticate_admin(self, db_session: Session, test_admin):
        admin = AuthService(db_session).authenticate_admin("ADMIN@example.com", ADMIN_PASSWORD)

        assert admin.id == test_admin.id
        assert admin.last_login is not None

    def test_authenticate_admin_wrong_password(self, db_session: Session, test_admin):
        with pytest.raises(AuthenticationError, match="Incorrect email or password"):
            AuthService(db_session).authenticate_admin(test_admin.email, "wrong")

    def test_inactive_admin(self, db_session: Session, test_admin):
        test_admin.is_active = False
        db_session.commit()

        with pytest.raises(AuthenticationError, match="Inactive account"):
            AuthService(db_session).authenticate_admin(test_admin.email, ADMIN_PASSWORD)


class TestEmployeeAccounts:
    """Employees sign in with email or phone"""

    def test_login_with_phone(self, db_session: Session, test_employee):
        employee = AuthService(db_session).authenticate_employee(test_employee.phone, EMPLOYEE_PASSWORD)

        assert employee.id == test_employee.id

    def test_login_with_email(self, db_session: Session, test_employee):
        employee = AuthService(db_session).authenticate_employee(" JEAN@example.com ", EMPLOYEE_PASSWORD)

        assert employee.id == test_employee.id

    def test_inactive_employee(self, db_session: Session, test_employee):
        test_employee.status = "TERMINATED"
        db_session.commit()

        with pytest.raises(AuthenticationError, match="not active"):
            AuthService(db_session).authenticate_employee(test_employee.email, EMPLOYEE_PASSWORD)

    def test_employee_without_password(self, db_session: Session, second_employee):
        with pytest.raises(AuthenticationError, match="Invalid credentials"):
            AuthService(db_session).authenticate_employee(second_employee.email, "anything")

    def test_role_from_position(self):
        assert role_from_position("Diocesan Site Engineer") == "DIOCESAN_SITE_ENGINEER"
        assert role_from_position("  padiri ") == "PADIRI"
        assert role_from_position(None) == "EMPLOYEE"


class TestTokens:
    """Token round trip and principal resolution"""

    def test_issue_and_resolve_admin_token(self, db_session: Session, test_admin):
        service = AuthService(db_session)
        token = service.issue_token(service.principal_for(test_admin))

        payload = verify_token(token)
        principal = service.resolve_principal(payload)

        assert payload["kind"] == ADMIN
        assert principal.is_admin
        assert principal.admin_id == test_admin.id
        assert principal.employee_id is None
        assert principal.role == "ADMIN"

    def test_resolve_employee_token(self, db_session: Session, test_employee):
        service = AuthService(db_session)
        principal = service.resolve_principal(verify_token(service.issue_token(service.principal_for(test_employee))))

        assert principal.kind == EMPLOYEE
        assert principal.employee_id == test_employee.id
        assert principal.role == "SITE_ENGINEER"
        assert principal.name == "Jean Mugisha"

    def test_token_without_kind_is_rejected(self):
        assert verify_token(create_access_token({"sub": "1"})) is None

    def test_garbage_token(self):
        assert verify_token("not-a-jwt") is None

    def test_token_for_deleted_account(self, db_session: Session):
        assert AuthService(db_session).resolve_principal({"sub": "99", "kind": ADMIN}) is None


class TestPasswordChange:
    """Changing the signed-in account's password"""

    def test_change_password(self, db_session: Session, test_employee):
        service = AuthService(db_session)
        principal = service.principal_for(test_employee)

        service.change_password(principal, EMPLOYEE_PASSWORD, "brandnewpass")

        assert verify_password("brandnewpass", test_employee.password_hash)

    def test_wrong_current_password(self, db_session: Session, test_admin):
        service = AuthService(db_session)

        with pytest.raises(ValidationError, match="Current password is incorrect"):
            service.change_password(service.principal_for(test_admin), "nope", "brandnewpass")

    def test_same_password(self, db_session: Session, test_admin):
        service = AuthService(db_session)

        with pytest.raises(ValidationError, match="must differ"):
            service.change_password(service.principal_for(test_admin), ADMIN_PASSWORD, ADMIN_PASSWORD)
