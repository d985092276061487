"""
Aby Pydantic Schemas
Request/Response models for the Aby management API
"""

from .common import (
    InputSchema, ORMSchema, PaginationMeta, ErrorResponse, SuccessResponse,
    MessageResponse, envelope
)

__all__ = [
    "InputSchema",
    "ORMSchema",
    "PaginationMeta",
    "ErrorResponse",
    "SuccessResponse",
    "MessageResponse",
    "envelope",
]
