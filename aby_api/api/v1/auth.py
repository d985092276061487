"""
Authentication API endpoints
Admin and employee login, logout and password management
"""
from typing import Any
from fastapi import APIRouter, Depends, Response, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from aby_api.api import deps
from aby_api.core.config import settings
from aby_api.core.security import ADMIN, Principal
from aby_api.schemas.auth import EmployeeLogin, PasswordChange, PrincipalResponse, Token
from aby_api.schemas.common import MessageResponse
from aby_api.services.auth_service import AuthService

router = APIRouter()


def _set_auth_cookie(response: Response, principal: Principal, token: str) -> None:
    cookie_name = settings.ADMIN_COOKIE_NAME if principal.kind == ADMIN else settings.EMPLOYEE_COOKIE_NAME
    response.set_cookie(
        key=cookie_name,
        value=token,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


def _token_response(response: Response, principal: Principal, email: str) -> dict:
    token = AuthService.issue_token(principal)
    _set_auth_cookie(response, principal, token)
    return {
        "access_token": token,
        "token_type": "bearer",
        "user": {
            "id": principal.id,
            "kind": principal.kind,
            "role": principal.role,
            "name": principal.name,
            "email": email,
        },
    }


@router.post("/login", response_model=Token)
def login(
    response: Response,
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(deps.get_db)
) -> Any:
    """
    OAuth2 compatible token login for administrators (username is the email)
    """
    service = AuthService(db)
    admin = service.authenticate_admin(form_data.username, form_data.password)
    return _token_response(response, service.principal_for(admin), admin.email)


@router.post("/employee/login", response_model=Token)
def employee_login(
    credentials: EmployeeLogin,
    response: Response,
    db: Session = Depends(deps.get_db)
) -> Any:
    """
    Employee login with email address or phone number
    """
    service = AuthService(db)
    employee = service.authenticate_employee(credentials.identifier, credentials.password)
    return _token_response(response, service.principal_for(employee), employee.email)


@router.post("/logout", response_model=MessageResponse)
def logout(response: Response) -> Any:
    """
    Clear the auth cookies
    """
    response.delete_cookie(settings.ADMIN_COOKIE_NAME)
    response.delete_cookie(settings.EMPLOYEE_COOKIE_NAME)
    return {"message": "Successfully logged out"}


@router.get("/me", response_model=PrincipalResponse)
def read_current_principal(
    principal: Principal = Depends(deps.get_current_principal),
    db: Session = Depends(deps.get_db)
) -> Any:
    """
    Get current account info
    """
    account = AuthService(db).get_account(principal)
    return {
        "id": principal.id,
        "kind": principal.kind,
        "role": principal.role,
        "name": principal.name,
        "email": account.email if account else None,
    }


@router.post("/change-password", response_model=MessageResponse, status_code=status.HTTP_200_OK)
def change_password(
    password_data: PasswordChange,
    principal: Principal = Depends(deps.get_current_principal),
    db: Session = Depends(deps.get_db)
) -> Any:
    """
    Change current account's password
    """
    AuthService(db).change_password(principal, password_data.current_password, password_data.new_password)
    return {"message": "Password changed successfully"}
