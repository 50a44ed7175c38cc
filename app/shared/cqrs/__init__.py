"""
CQRS (Command Query Responsibility Segregation) pattern implementation.

Provides clear separation between read (Query) and write (Command) operations,
routed through a single Mediator.
"""

from .commands import Command, CommandHandler, ICommandBus, CreateProductCommand
from .queries import Query, QueryHandler, IQueryBus, GetProductByIdQuery
from .bus import (
    CommandBus,
    QueryBus,
    Mediator,
    CommandBusError,
    QueryBusError,
    UnsupportedRequestError,
    LoggingMiddleware,
    ValidationMiddleware
)
from .decorators import command_handler, query_handler, auto_register_handlers

__all__ = [
    # Base interfaces
    'Command',
    'Query',
    'CommandHandler',
    'QueryHandler',
    'ICommandBus',
    'IQueryBus',

    # Requests
    'CreateProductCommand',
    'GetProductByIdQuery',

    # Implementations
    'CommandBus',
    'QueryBus',
    'Mediator',
    'LoggingMiddleware',
    'ValidationMiddleware',

    # Errors
    'CommandBusError',
    'QueryBusError',
    'UnsupportedRequestError',

    # Decorators
    'command_handler',
    'query_handler',
    'auto_register_handlers'
]
