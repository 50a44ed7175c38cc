"""
Command pattern implementation for CQRS.

Commands represent write operations that change system state.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from decimal import Decimal
from typing import TypeVar, Generic, Optional, Any, Protocol
import uuid

from pydantic import BaseModel, ConfigDict, Field

# Type variables
TResult = TypeVar('TResult')
TCommand = TypeVar('TCommand', bound='Command')


class Command(BaseModel, ABC):
    """
    Base command class.
    
    Commands represent operations that change system state.
    They are immutable and contain all necessary data.
    """
    
    # Commands should be immutable
    model_config = ConfigDict(frozen=True)
    
    # Command metadata
    command_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    correlation_id: Optional[str] = None


class CommandHandler(ABC, Generic[TCommand, TResult]):
    """
    Abstract base class for command handlers.
    
    Each command type has exactly one handler bound to it on the bus.
    """
    
    @abstractmethod
    async def handle(self, command: TCommand) -> TResult:
        """
        Handle the command and return result.
        
        Args:
            command: The command to handle
            
        Returns:
            Command execution result
        """
        pass


class ICommandBus(Protocol):
    """
    Command bus interface.
    
    Responsible for routing commands to appropriate handlers.
    """
    
    async def execute(self, command: Command) -> Any:
        """Execute a command and return the result."""
        ...
    
    def register_handler(self, command_type: type, handler: CommandHandler) -> None:
        """Register a command handler for a specific command type."""
        ...
    
    def unregister_handler(self, command_type: type) -> None:
        """Unregister a command handler."""
        ...


# Domain-specific command base classes

class ProductCommand(Command):
    """Base class for product-related commands."""
    pass


# Specific command implementations

class CreateProductCommand(ProductCommand):
    """Command to create a new product. Returns the new product id."""
    
    name: str
    price: Decimal
