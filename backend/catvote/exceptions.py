"""
CatVote: Custom Exception Hierarchy
===================================

What:  Application-specific exceptions for the error categories CatVote knows.
How:   Each exception carries a user-safe message and an optional context dict.
       Global exception handlers (registered in main.py) turn server-side
       exceptions into structured JSON responses with the right status code.
Who:   Raised by services and the client data layer.

Exception Hierarchy:
    CatVoteError (base)
    ├── ValidationError   → 400 Bad Request (malformed client input)
    ├── DatabaseError     → 500 Internal Server Error (store failure)
    ├── UpstreamError     → client side: external cat-image source failed
    └── ApiRequestError   → client side: the CatVote API call failed
"""

from typing import Any, Dict, Optional


class CatVoteError(Exception):
    """
    Base exception for all CatVote application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(CatVoteError):
    """
    Raised when client input fails validation.

    When:    Missing cat_id, unknown vote_type, empty seed batch.
    HTTP:    400 Bad Request, raised before any store access.

    Example response:
        {
            "error": "validation_error",
            "message": "Invalid cat_id or vote_type",
            "details": {"field": "vote_type"}
        }
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class DatabaseError(CatVoteError):
    """
    Raised when store operations fail.

    When:    Constraint violation (vote for an unknown cat), unreadable file,
             locked database, etc.
    HTTP:    500 Internal Server Error

    The message returned to the client is always generic; the driver error is
    logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class UpstreamError(CatVoteError):
    """
    Raised when the external cat-image source cannot deliver images.

    When:    Network failure, non-2xx status, or a body that is not a list of
             {id, url} records. No retry is attempted.
    """

    def __init__(
        self,
        message: str = "Could not load cat images. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ApiRequestError(CatVoteError):
    """
    Raised by the client when a CatVote API request fails.

    Attributes:
        status_code: HTTP status of the failed response, None for network errors
    """

    def __init__(
        self,
        message: str = "API request failed",
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if status_code is not None:
            ctx["status_code"] = status_code
        super().__init__(message=message, context=ctx)
        self.status_code = status_code
