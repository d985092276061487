"""
Aby Common Schemas
Shared Pydantic models for common API structures
"""
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Any, Dict, Optional


class InputSchema(BaseModel):
    """
    Base for request bodies

    Fields are snake_case; the dashboard's camelCase spelling
    (``siteId``, ``qtyRequested``) is accepted as well.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        validate_default=True,
    )


class ORMSchema(BaseModel):
    """Base for responses read straight from SQLAlchemy rows"""
    model_config = ConfigDict(from_attributes=True)


class PaginationMeta(BaseModel):
    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PaginationMeta":
        return cls(
            current_page=page,
            total_pages=(total + limit - 1) // limit if limit else 0,
            total_items=total,
            items_per_page=limit,
        )


class ErrorResponse(BaseModel):
    """
    Standard error response model

    Every 4xx/5xx carries a human-readable ``detail`` string.
    """
    detail: str = Field(..., description="Human-readable error message")

    model_config = ConfigDict(
        json_schema_extra={"example": {"detail": "Request not found"}}
    )


class SuccessResponse(BaseModel):
    """
    Envelope used by the requisition endpoints
    """
    success: bool = Field(True, description="Operation success flag")
    message: str = Field(..., description="Success message")
    data: Optional[Dict[str, Any]] = Field(None, description="Response payload")


class MessageResponse(BaseModel):
    message: str


def envelope(data: Optional[Dict[str, Any]], message: str) -> Dict[str, Any]:
    """``{success, data, message}`` body"""
    return {"success": True, "data": data, "message": message}
