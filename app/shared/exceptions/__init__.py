"""
Shared exceptions for the product catalog service.

Defines custom exception classes for different error scenarios.
"""

from .api_exceptions import CatalogError, StoreError
from .data_exceptions import DataValidationError
from .custom_exceptions import BaseAPIException, NotFoundException
from .handlers import register_exception_handlers

__all__ = [
    # Catalog Exceptions
    'CatalogError',
    'StoreError',
    
    # Data Exceptions
    'DataValidationError',
    
    # HTTP Exceptions
    'BaseAPIException',
    'NotFoundException',
    
    # Exception Handlers
    'register_exception_handlers'
]
