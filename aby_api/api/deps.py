"""
API Dependencies
Common dependencies for API endpoints
"""

from typing import Any, Dict, Optional, Type, TypeVar
from fastapi import Depends, HTTPException, Query, Request, status
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError as PydanticValidationError
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from aby_api.core.config import settings
from aby_api.core.database import get_db
from aby_api.core.security import Principal, verify_token
from aby_api.services.auth_service import AuthService

# Security scheme; the token may also arrive in a cookie, so a missing header is not an error here
security = HTTPBearer(auto_error=False)

SchemaT = TypeVar("SchemaT", bound=BaseModel)

__all__ = [
    "get_db",
    "get_current_principal",
    "get_optional_principal",
    "RoleChecker",
    "AdminOnly",
    "get_pagination_params",
    "validate_form",
]


def _token_from_request(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials]
) -> Optional[str]:
    if credentials and credentials.credentials:
        return credentials.credentials
    return (
        request.cookies.get(settings.ADMIN_COOKIE_NAME)
        or request.cookies.get(settings.EMPLOYEE_COOKIE_NAME)
    )


def get_optional_principal(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> Optional[Principal]:
    """
    Caller identity when a valid token is present, otherwise None.
    """
    token = _token_from_request(request, credentials)
    if not token:
        return None
    payload = verify_token(token)
    if not payload:
        return None
    return AuthService(db).resolve_principal(payload)


def get_current_principal(
    principal: Optional[Principal] = Depends(get_optional_principal)
) -> Principal:
    """
    Get the authenticated admin or employee from a Bearer token or auth cookie.
    """
    if principal is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return principal


class RoleChecker:
    """
    Role checker dependency for specific roles.
    """
    def __init__(self, allowed_roles: list):
        self.allowed_roles = allowed_roles

    def __call__(self, principal: Principal = Depends(get_current_principal)) -> Principal:
        if principal.role not in self.allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Role not allowed. Required one of: {', '.join(self.allowed_roles)}"
            )
        return principal


AdminOnly = RoleChecker(["ADMIN"])


def get_pagination_params(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE)
) -> dict:
    """
    Common pagination parameters.
    """
    return {"page": page, "limit": limit}


def validate_form(schema: Type[SchemaT], values: Dict[str, Any]) -> SchemaT:
    """
    Build an input schema from multipart form fields.

    Fields left out of the form are not passed on, so update schemas only see what was sent.
    """
    try:
        return schema(**{k: v for k, v in values.items() if v is not None})
    except PydanticValidationError as e:
        raise RequestValidationError(e.errors(include_url=False, include_context=False))
