"""
HTTP-facing exception classes.

Extends FastAPI's HTTPException with structured error information
that integrates with the standard error envelope.
"""

from typing import Any, Dict, List, Optional, Union
from fastapi import HTTPException
from ..responses import ErrorDetail, HTTPStatusCodes


class BaseAPIException(HTTPException):
    """
    Base exception class for all API exceptions.
    
    Carries a machine-readable error code and optional per-field
    details next to the HTTP status and message.
    """
    
    def __init__(
        self,
        status_code: int,
        error_code: str,
        message: str,
        errors: Optional[List[ErrorDetail]] = None,
        headers: Optional[Dict[str, Any]] = None,
        **kwargs
    ):
        self.error_code = error_code
        self.errors = errors or []
        self.context = kwargs
        
        super().__init__(
            status_code=status_code,
            detail=message,
            headers=headers
        )
    
    def to_error_detail(self) -> ErrorDetail:
        """Convert exception to ErrorDetail object."""
        return ErrorDetail(
            code=self.error_code,
            message=self.detail,
            context=self.context or None
        )


class NotFoundException(BaseAPIException):
    """Exception for resource not found errors (404)."""
    
    def __init__(
        self,
        resource: str,
        resource_id: Union[str, int],
        message: Optional[str] = None,
        **kwargs
    ):
        default_message = f"{resource} with id '{resource_id}' not found"
        
        super().__init__(
            status_code=HTTPStatusCodes.NOT_FOUND,
            error_code="RESOURCE_NOT_FOUND",
            message=message or default_message,
            resource=resource,
            resource_id=str(resource_id),
            **kwargs
        )
