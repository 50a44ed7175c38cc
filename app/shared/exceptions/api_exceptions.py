"""
Base exception classes for the product catalog service.

Errors raised below the HTTP layer (dispatch, validation, storage) derive
from CatalogError and are translated into responses by the handlers module.
"""

from typing import Optional, Dict, Any


class CatalogError(Exception):
    """Base exception for all product catalog errors"""
    
    def __init__(
        self, 
        message: str, 
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details or {}
    
    def __str__(self):
        if self.status_code:
            return f"[{self.status_code}] {self.message}"
        return self.message


class StoreError(CatalogError):
    """Data store failure (treated as an unhandled fault)"""
    
    def __init__(self, message: str = "Data store failure", operation: Optional[str] = None):
        super().__init__(message, status_code=500, error_code="STORE_ERROR")
        self.operation = operation
