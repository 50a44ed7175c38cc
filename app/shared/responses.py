"""
Standard HTTP error format and status code system.

Successful product responses are returned bare (an id or a product
document); every failure goes through the error envelope defined here.
"""

from typing import Any, Dict, List, Optional, Union
from datetime import datetime, timezone
from enum import Enum
from pydantic import BaseModel, Field, ConfigDict
from fastapi import status
from fastapi.responses import JSONResponse


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')


class ResponseStatus(str, Enum):
    """Standard response status values."""
    SUCCESS = "success"
    ERROR = "error"


class ErrorDetail(BaseModel):
    """Detailed error information."""
    code: str = Field(..., description="Error code for programmatic handling")
    message: str = Field(..., description="Human-readable error message")
    field: Optional[str] = Field(None, description="Field name for validation errors")
    context: Optional[Dict[str, Any]] = Field(None, description="Additional error context")


class ErrorResponse(BaseModel):
    """
    Standard error response format.

    Used for validation failures, missing resources and unhandled faults.
    """
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": False,
                "errors": [
                    {
                        "code": "NOT_EMPTY",
                        "message": "'name' must not be empty.",
                        "field": "name"
                    }
                ],
                "message": "Data validation failed",
                "timestamp": "2024-01-25T12:00:00Z",
                "request_id": "req_20240125_120000_1a2b3c4d"
            }
        }
    )

    success: bool = Field(default=False, description="Always false for errors")
    errors: List[ErrorDetail] = Field(..., description="List of error details")
    message: str = Field(..., description="Summary error message")
    timestamp: str = Field(default_factory=_utc_timestamp, description="Error timestamp")
    status: ResponseStatus = Field(
        default=ResponseStatus.ERROR,
        description="Always 'error' for error responses"
    )
    request_id: Optional[str] = Field(None, description="Request tracking ID")
    error_type: Optional[str] = Field(None, description="Error classification")
    path: Optional[str] = Field(None, description="Request path")
    method: Optional[str] = Field(None, description="Request method")


# HTTP Status Code Mapping
class HTTPStatusCodes:
    """Status codes used by the catalog endpoints."""

    OK = status.HTTP_200_OK

    BAD_REQUEST = status.HTTP_400_BAD_REQUEST  # Rejected by a validator
    NOT_FOUND = status.HTTP_404_NOT_FOUND
    METHOD_NOT_ALLOWED = status.HTTP_405_METHOD_NOT_ALLOWED
    UNPROCESSABLE_ENTITY = 422  # Request body does not match the schema

    INTERNAL_SERVER_ERROR = status.HTTP_500_INTERNAL_SERVER_ERROR


def error_response(
    errors: List[Union[ErrorDetail, Dict[str, Any]]],
    message: str = "Request failed",
    status_code: int = HTTPStatusCodes.BAD_REQUEST,
    headers: Optional[Dict[str, str]] = None,
    **kwargs
) -> JSONResponse:
    """
    Create a standard error response.

    Args:
        errors: List of error details
        message: Error summary message
        status_code: HTTP status code (default 400)
        headers: Extra response headers
        **kwargs: Additional envelope fields (request_id, error_type, ...)

    Returns:
        JSONResponse with error format
    """
    error_details = []
    for error in errors:
        if isinstance(error, dict):
            error_details.append(ErrorDetail(**error))
        else:
            error_details.append(error)

    response = ErrorResponse(
        success=False,
        errors=error_details,
        message=message,
        status=ResponseStatus.ERROR,
        **kwargs
    )
    return JSONResponse(
        content=response.model_dump(mode="json", exclude_none=True),
        status_code=status_code,
        headers=headers
    )


def validation_error_response(
    errors: List[Dict[str, Any]],
    message: str = "Validation failed",
    **kwargs
) -> JSONResponse:
    """Create a request-schema validation error response (422)."""
    return error_response(
        errors=errors,
        message=message,
        status_code=HTTPStatusCodes.UNPROCESSABLE_ENTITY,
        error_type="VALIDATION_ERROR",
        **kwargs
    )
