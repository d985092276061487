"""
Security utilities for Aby
Password hashing, JWT tokens and the authenticated principal
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
import secrets
import string

from jose import JWTError, jwt
from passlib.context import CryptContext

from aby_api.core.config import settings

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ADMIN = "admin"
EMPLOYEE = "employee"


@dataclass
class Principal:
    """The authenticated caller of a request"""
    kind: str  # ADMIN or EMPLOYEE
    id: int
    role: str
    name: str = ""

    @property
    def is_admin(self) -> bool:
        return self.kind == ADMIN

    @property
    def admin_id(self) -> Optional[int]:
        return self.id if self.kind == ADMIN else None

    @property
    def employee_id(self) -> Optional[int]:
        return self.id if self.kind == EMPLOYEE else None


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a hash"""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Generate password hash"""
    return pwd_context.hash(password)


def generate_password(length: int = 12) -> str:
    """Random temporary password for newly created accounts"""
    alphabet = string.ascii_letters + string.digits
    return "".join(secrets.choice(alphabet) for _ in range(length))


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token"""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def verify_token(token: str) -> Optional[Dict[str, Any]]:
    """Decode a JWT; returns None when it is invalid or expired"""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    if payload.get("sub") is None or payload.get("kind") not in (ADMIN, EMPLOYEE):
        return None
    return payload


def role_from_position(position: Optional[str]) -> str:
    """Employee workflow role derived from the job position ("Site Engineer" -> SITE_ENGINEER)"""
    if not position:
        return "EMPLOYEE"
    return "_".join(position.strip().upper().split())
