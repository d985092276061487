"""Authentication Schemas"""

from pydantic import BaseModel, Field
from typing import Optional

from .common import InputSchema


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: "PrincipalResponse"


class EmployeeLogin(InputSchema):
    identifier: str = Field(..., description="Email address or phone number")
    password: str


class PasswordChange(InputSchema):
    current_password: str
    new_password: str = Field(..., min_length=8)


class PrincipalResponse(BaseModel):
    id: int
    kind: str
    role: str
    name: str
    email: Optional[str] = None


class AdminCreate(InputSchema):
    names: str
    email: str
    phone: Optional[str] = None
    password: str = Field(..., min_length=8)


Token.model_rebuild()
