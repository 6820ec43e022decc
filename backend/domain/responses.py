"""
Standard API response models and helpers for consistent response formatting.

- List endpoints: { "success": true, "data": [...], "meta": {...} }
- Errors:         { "success": false, "error": { "code": "...", "message": "...", "details": {...} } }

Single-record endpoints return the record itself (or the documented
{checkout, message} / {user, token} shapes) without an envelope.
"""
from typing import Any

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """Standard error detail structure."""
    code: str = Field(..., description="Error code (e.g., 'unauthorized', 'http_error')")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] | None = Field(default=None, description="Additional error context")


class StandardErrorResponse(BaseModel):
    """Standard error response envelope."""
    success: bool = Field(False, description="Always false for errors")
    error: ErrorDetail = Field(..., description="Error details")


def error_response(code: str, message: str, details: Any = None) -> dict[str, Any]:
    """Build the error envelope used by every exception handler."""
    return StandardErrorResponse(
        error=ErrorDetail(code=code, message=message, details=details or None)
    ).model_dump()


def paginated_response(
    items: list[Any],
    limit: int,
    offset: int = 0,
    total: int | None = None,
) -> dict[str, Any]:
    """
    Create a standardized paginated response.

    Args:
        items: List of items for this page
        limit: Number of items per page
        offset: Offset of the first item
        total: Total number of items (if None, uses len(items))

    Returns:
        dict: { "success": true, "data": <items>, "meta": { "limit", "offset", "total", "hasMore" } }
    """
    if total is None:
        total = len(items)

    meta = {
        "limit": limit,
        "offset": offset,
        "total": total,
        "hasMore": (offset + limit) < total,
    }
    return {"success": True, "data": items, "meta": meta}
