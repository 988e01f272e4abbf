"""
Error response schemas for API documentation and consistent error formatting.
"""

from pydantic import BaseModel, Field
from typing import List, Optional, Any, Dict


class ErrorDetail(BaseModel):
    """Schema for individual error detail."""

    field: Optional[str] = Field(None, description="Field name that caused the error", examples=["title"])
    message: str = Field(..., description="Human-readable error message")
    type: Optional[str] = Field(None, description="Error type identifier", examples=["value_error"])


class ErrorResponse(BaseModel):
    """Schema for standardized error responses."""

    code: str = Field(..., description="Error code identifier", examples=["VALIDATION_ERROR"])
    message: str = Field(..., description="Human-readable error message")
    timestamp: str = Field(..., description="Error timestamp in ISO format")
    request_id: Optional[str] = Field(None, description="Request identifier for tracking", examples=["abc12345"])
    details: Optional[List[ErrorDetail]] = None


class APIErrorResponse(BaseModel):
    """Schema for API error response wrapper."""

    error: ErrorResponse


def _example(code: str, message: str) -> Dict[str, Any]:
    return {
        "application/json": {
            "example": {
                "error": {
                    "code": code,
                    "message": message,
                    "timestamp": "2024-01-01T00:00:00Z",
                    "request_id": "abc12345"
                }
            }
        }
    }


COMMON_ERROR_RESPONSES: Dict[int, Dict[str, Any]] = {
    400: {
        "description": "Bad Request",
        "model": APIErrorResponse,
        "content": _example("BAD_REQUEST", "Rejection reason is required"),
    },
    401: {
        "description": "Unauthorized - Authentication required",
        "model": APIErrorResponse,
        "content": _example("UNAUTHORIZED", "Authentication token required"),
    },
    403: {
        "description": "Forbidden - Insufficient permissions",
        "model": APIErrorResponse,
        "content": _example("FORBIDDEN", "Insufficient permissions to access admin resources"),
    },
    404: {
        "description": "Not Found",
        "model": APIErrorResponse,
        "content": _example("NOT_FOUND", "Listing not found"),
    },
    409: {
        "description": "Conflict",
        "model": APIErrorResponse,
        "content": _example("CONFLICT", "User with identifier 'anna@example.com' already exists"),
    },
    422: {
        "description": "Validation Error",
        "model": APIErrorResponse,
        "content": _example("VALIDATION_ERROR", "Request validation failed"),
    },
    500: {
        "description": "Internal Server Error",
        "model": APIErrorResponse,
        "content": _example("INTERNAL_SERVER_ERROR", "An unexpected error occurred. Please try again later."),
    },
}


def get_error_responses(*status_codes: int) -> Dict[int, Dict[str, Any]]:
    """
    Get error response schemas for specific status codes.

    Args:
        status_codes: HTTP status codes to include

    Returns:
        Dictionary of error response schemas
    """
    return {
        code: COMMON_ERROR_RESPONSES[code]
        for code in status_codes
        if code in COMMON_ERROR_RESPONSES
    }


def get_auth_error_responses() -> Dict[int, Dict[str, Any]]:
    """Get authentication and authorization error response schemas."""
    return get_error_responses(401, 403, 422, 500)


def get_crud_error_responses() -> Dict[int, Dict[str, Any]]:
    """Get error response schemas for CRUD operations."""
    return get_error_responses(400, 401, 403, 404, 409, 422, 500)
