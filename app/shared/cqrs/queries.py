"""
Query pattern implementation for CQRS.

Queries represent read operations that don't change system state.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import TypeVar, Generic, Optional, Any, Protocol
import uuid

from pydantic import BaseModel, ConfigDict, Field

# Type variables
TResult = TypeVar('TResult')
TQuery = TypeVar('TQuery', bound='Query')


class Query(BaseModel, ABC):
    """
    Base query class.
    
    Queries represent read operations that don't change system state.
    They are immutable and contain all necessary parameters.
    """
    
    # Queries should be immutable
    model_config = ConfigDict(frozen=True)
    
    # Query metadata
    query_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    correlation_id: Optional[str] = None


class QueryHandler(ABC, Generic[TQuery, TResult]):
    """
    Abstract base class for query handlers.
    
    Each query type has exactly one handler bound to it on the bus.
    """
    
    @abstractmethod
    async def handle(self, query: TQuery) -> TResult:
        """
        Handle the query and return result.
        
        Args:
            query: The query to handle
            
        Returns:
            Query execution result
        """
        pass


class IQueryBus(Protocol):
    """
    Query bus interface.
    
    Responsible for routing queries to appropriate handlers.
    """
    
    async def execute(self, query: Query) -> Any:
        """Execute a query and return the result."""
        ...
    
    def register_handler(self, query_type: type, handler: QueryHandler) -> None:
        """Register a query handler for a specific query type."""
        ...
    
    def unregister_handler(self, query_type: type) -> None:
        """Unregister a query handler."""
        ...


# Domain-specific query base classes

class ProductQuery(Query):
    """Base class for product-related queries."""
    pass


# Specific query implementations

class GetProductByIdQuery(ProductQuery):
    """Query to get a product by id. Returns None when absent."""
    
    product_id: int
