"""
CatVote: Shared Response Schemas
================================

What:  Response models used across several routers: plain acknowledgements,
       the health probe, and the error envelope every failure uses.
"""

from typing import Optional

from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    """Acknowledgement returned by mutating endpoints (vote, clear)."""
    success: bool = True
    message: str = Field(description="Human-readable outcome")


class HealthResponse(BaseModel):
    """Constant liveness signal; producing it never touches the store."""
    status: str = Field(default="ok")


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "validation_error",
            "message": "Invalid cat_id or vote_type",
            "details": {"field": "vote_type"},
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")
