"""
Command and Query bus implementations.

Provides centralized routing of commands and queries to their handlers,
and the mediator that fronts both buses with a single send() entry point.
"""

import logging
from typing import Dict, Type, Any, List, Optional
from .commands import Command, ICommandBus
from .queries import Query, IQueryBus
from ..exceptions import CatalogError, DataValidationError

logger = logging.getLogger(__name__)


class CommandBusError(CatalogError):
    """Command bus specific error."""
    pass


class QueryBusError(CatalogError):
    """Query bus specific error."""
    pass


class UnsupportedRequestError(CatalogError):
    """Raised when an object that is neither a Command nor a Query is sent."""
    pass


class _HandlerBus:
    """
    Handler table and middleware chain shared by both buses.

    Subclasses name the request kind, the dispatch log level and the error
    raised when a request type has no handler.
    """

    kind = "Request"
    dispatch_level = logging.INFO
    not_found_error = CatalogError

    def __init__(self):
        self._handlers: Dict[type, Any] = {}
        self._middleware: list = []

    async def _dispatch(self, request: Any, request_id: str) -> Any:
        request_type = type(request)
        name = request_type.__name__
        handler = self._handlers.get(request_type)

        if handler is None:
            raise self.not_found_error(
                f"No handler registered for {self.kind.lower()} type: {name}",
                status_code=500,
                error_code=f"{self.kind.upper()}_HANDLER_NOT_FOUND",
                details={f"{self.kind.lower()}_type": name}
            )

        logger.log(self.dispatch_level, f"Executing {self.kind.lower()}: {name} (ID: {request_id})")

        try:
            for middleware in self._middleware:
                await middleware.before_execute(request)

            result = await handler.handle(request)

            for middleware in reversed(self._middleware):
                await middleware.after_execute(request, result)
        except Exception as e:
            # Rejected input is a client error; anything else is a fault
            log = logger.warning if isinstance(e, DataValidationError) else logger.error
            log(f"{self.kind} execution failed: {name} (ID: {request_id}) - Error: {e}")

            for middleware in reversed(self._middleware):
                await middleware.on_error(request, e)
            raise

        logger.log(self.dispatch_level, f"{self.kind} executed successfully: {name} (ID: {request_id})")
        return result

    def register_handler(self, request_type: type, handler: Any) -> None:
        if request_type in self._handlers:
            logger.warning(
                f"Overriding existing handler for {self.kind.lower()}: {request_type.__name__}"
            )

        self._handlers[request_type] = handler
        logger.info(f"Registered handler for {self.kind.lower()}: {request_type.__name__}")

    def unregister_handler(self, request_type: type) -> None:
        if self._handlers.pop(request_type, None) is not None:
            logger.info(f"Unregistered handler for {self.kind.lower()}: {request_type.__name__}")

    def add_middleware(self, middleware) -> None:
        self._middleware.append(middleware)


class CommandBus(_HandlerBus, ICommandBus):
    """Routes each command to the handler bound to its exact type."""

    kind = "Command"
    not_found_error = CommandBusError

    async def execute(self, command: Command) -> Any:
        """
        Execute a command using its registered handler.

        Raises:
            CommandBusError: If no handler is registered for the command
        """
        return await self._dispatch(command, command.command_id)

    def get_registered_commands(self) -> List[Type[Command]]:
        return list(self._handlers)


class QueryBus(_HandlerBus, IQueryBus):
    """Routes each query to its handler. None is a valid "absent" result."""

    kind = "Query"
    dispatch_level = logging.DEBUG
    not_found_error = QueryBusError

    async def execute(self, query: Query) -> Any:
        """
        Execute a query using its registered handler.

        Raises:
            QueryBusError: If no handler is registered for the query
        """
        return await self._dispatch(query, query.query_id)

    def get_registered_queries(self) -> List[Type[Query]]:
        return list(self._handlers)


class Mediator:
    """
    Single dispatch entry point for the HTTP layer.

    Commands go to the command bus and queries to the query bus; each bus
    resolves the one handler bound to the request's exact type. The
    mediator itself keeps no per-call state.
    """

    def __init__(
        self,
        command_bus: Optional[CommandBus] = None,
        query_bus: Optional[QueryBus] = None
    ):
        self.command_bus = command_bus or CommandBus()
        self.query_bus = query_bus or QueryBus()

    async def send(self, request: Any) -> Any:
        """
        Dispatch a command or query to its handler and return the result.

        Raises:
            CommandBusError / QueryBusError: If no handler is registered
            UnsupportedRequestError: If the request is neither kind
        """
        if isinstance(request, Command):
            return await self.command_bus.execute(request)
        if isinstance(request, Query):
            return await self.query_bus.execute(request)

        raise UnsupportedRequestError(
            f"Cannot dispatch object of type {type(request).__name__}: "
            f"not a Command or Query",
            status_code=500,
            error_code="UNSUPPORTED_REQUEST"
        )

    def register_handler(self, request_type: type, handler: Any) -> None:
        """Bind a handler on whichever bus owns the request type."""
        if issubclass(request_type, Command):
            self.command_bus.register_handler(request_type, handler)
        elif issubclass(request_type, Query):
            self.query_bus.register_handler(request_type, handler)
        else:
            raise UnsupportedRequestError(
                f"Cannot register handler for {request_type.__name__}: "
                f"not a Command or Query",
                status_code=500,
                error_code="UNSUPPORTED_REQUEST"
            )

    def add_middleware(self, middleware) -> None:
        """Add middleware to both buses."""
        self.command_bus.add_middleware(middleware)
        self.query_bus.add_middleware(middleware)

    def get_registered_requests(self) -> List[type]:
        """All request types with a bound handler."""
        return self.command_bus.get_registered_commands() + self.query_bus.get_registered_queries()


# Middleware base classes

class CommandMiddleware:
    """Base class for command middleware."""

    async def before_execute(self, command: Command) -> None:
        """Called before command execution."""
        pass

    async def after_execute(self, command: Command, result: Any) -> None:
        """Called after successful command execution."""
        pass

    async def on_error(self, command: Command, error: Exception) -> None:
        """Called when command execution fails."""
        pass


class QueryMiddleware:
    """Base class for query middleware."""

    async def before_execute(self, query: Query) -> None:
        """Called before query execution."""
        pass

    async def after_execute(self, query: Query, result: Any) -> None:
        """Called after successful query execution."""
        pass

    async def on_error(self, query: Query, error: Exception) -> None:
        """Called when query execution fails."""
        pass


# Built-in middleware implementations

class LoggingMiddleware(CommandMiddleware, QueryMiddleware):
    """Middleware that logs command/query execution."""

    async def before_execute(self, operation) -> None:
        logger.debug(f"Starting execution: {type(operation).__name__}")

    async def after_execute(self, operation, result) -> None:
        logger.debug(f"Completed execution: {type(operation).__name__}")

    async def on_error(self, operation, error) -> None:
        logger.debug(f"Execution aborted: {type(operation).__name__} - {type(error).__name__}")


class ValidationMiddleware(CommandMiddleware, QueryMiddleware):
    """
    Middleware that runs the validator registered for the operation type
    before its handler executes.
    """

    def __init__(self, registry):
        self.registry = registry

    async def before_execute(self, operation) -> None:
        self.registry.validate_or_raise(operation)
