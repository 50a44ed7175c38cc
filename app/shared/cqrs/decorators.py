"""
Decorators for CQRS handler registration.

Handler classes are tagged with the request type they serve and bound
to the mediator once, at application startup.
"""

import logging
from typing import Type, Callable, Any, Dict, Optional
from .commands import Command
from .queries import Query

logger = logging.getLogger(__name__)


def command_handler(command_type: Type[Command]):
    """
    Decorator to mark a class as the handler for a command type.

    Usage:
        @command_handler(CreateProductCommand)
        class CreateProductHandler(CommandHandler[CreateProductCommand, int]):
            async def handle(self, command: CreateProductCommand) -> int:
                ...
    """
    def decorator(handler_class):
        handler_class._command_type = command_type
        handler_class._is_command_handler = True
        return handler_class

    return decorator


def query_handler(query_type: Type[Query]):
    """
    Decorator to mark a class as the handler for a query type.

    Usage:
        @query_handler(GetProductByIdQuery)
        class GetProductByIdHandler(QueryHandler[GetProductByIdQuery, Optional[Product]]):
            async def handle(self, query: GetProductByIdQuery) -> Optional[Product]:
                ...
    """
    def decorator(handler_class):
        handler_class._query_type = query_type
        handler_class._is_query_handler = True
        return handler_class

    return decorator


def get_command_handlers_from_module(module) -> Dict[type, type]:
    """
    Extract all command handlers from a module.

    Returns:
        Dict mapping command types to handler classes
    """
    handlers = {}

    for name in dir(module):
        obj = getattr(module, name)
        if (isinstance(obj, type) and
                getattr(obj, '_is_command_handler', False) and
                hasattr(obj, '_command_type')):
            handlers[obj._command_type] = obj

    return handlers


def get_query_handlers_from_module(module) -> Dict[type, type]:
    """
    Extract all query handlers from a module.

    Returns:
        Dict mapping query types to handler classes
    """
    handlers = {}

    for name in dir(module):
        obj = getattr(module, name)
        if (isinstance(obj, type) and
                getattr(obj, '_is_query_handler', False) and
                hasattr(obj, '_query_type')):
            handlers[obj._query_type] = obj

    return handlers


def auto_register_handlers(
    module,
    mediator,
    resolve: Optional[Callable[[type], Any]] = None
) -> int:
    """
    Register all tagged handlers from a module with the mediator.

    Args:
        module: Python module to scan
        mediator: Mediator (or anything with register_handler(type, handler))
        resolve: Builds a handler instance from its class; defaults to
            calling the class with no arguments

    Returns:
        Number of handlers registered
    """
    resolve = resolve or (lambda handler_class: handler_class())

    command_handlers = get_command_handlers_from_module(module)
    for command_type, handler_class in command_handlers.items():
        mediator.register_handler(command_type, resolve(handler_class))
        logger.info(f"Auto-registered command handler: {handler_class.__name__}")

    query_handlers = get_query_handlers_from_module(module)
    for query_type, handler_class in query_handlers.items():
        mediator.register_handler(query_type, resolve(handler_class))
        logger.info(f"Auto-registered query handler: {handler_class.__name__}")

    logger.info(
        f"Auto-registration complete: {len(command_handlers)} command handlers, "
        f"{len(query_handlers)} query handlers"
    )
    return len(command_handlers) + len(query_handlers)
