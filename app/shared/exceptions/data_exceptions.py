"""
Data-related exception classes.

Handles rejection of commands by the declarative validators.
"""

from typing import List, Dict, Optional
from .api_exceptions import CatalogError


class DataValidationError(CatalogError):
    """Data validation error"""
    
    def __init__(
        self, 
        message: str = "Data validation failed",
        validation_errors: Optional[List[Dict[str, str]]] = None,
        field_name: Optional[str] = None
    ):
        super().__init__(message, status_code=400, error_code="DATA_VALIDATION_ERROR")
        # Each entry: {"field": ..., "message": ..., "code": ...}
        self.validation_errors = validation_errors or []
        self.field_name = field_name or (
            self.validation_errors[0].get("field") if self.validation_errors else None
        )
    
    @property
    def field_names(self) -> List[str]:
        """Names of the failing fields, in rule order, without duplicates."""
        names = []
        for error in self.validation_errors:
            field = error.get("field")
            if field and field not in names:
                names.append(field)
        return names
