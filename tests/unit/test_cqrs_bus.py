"""
Unit tests for the command/query buses and the mediator.
"""

from decimal import Decimal
import logging

import pytest

from app.shared.cqrs import (
    Command,
    CommandHandler,
    Query,
    QueryHandler,
    CommandBus,
    QueryBus,
    Mediator,
    CommandBusError,
    QueryBusError,
    UnsupportedRequestError,
    ValidationMiddleware,
    CreateProductCommand,
    command_handler,
    query_handler,
    auto_register_handlers
)
from app.shared.cqrs.bus import CommandMiddleware
from app.shared.exceptions import DataValidationError
from app.shared.validators import ValidatorRegistry, CreateProductCommandValidator


class Ping(Command):
    message: str = "ping"


class PingHandler(CommandHandler[Ping, str]):
    def __init__(self):
        self.calls = 0

    async def handle(self, command: Ping) -> str:
        self.calls += 1
        return "pong"


class LoudPing(Ping):
    pass


class Fetch(Query):
    key: int


class FetchHandler(QueryHandler[Fetch, int]):
    async def handle(self, query: Fetch) -> int:
        return query.key * 2


class ExplodingHandler(CommandHandler[Ping, str]):
    async def handle(self, command: Ping) -> str:
        raise RuntimeError("boom")


class RecordingMiddleware(CommandMiddleware):
    def __init__(self, name, events):
        self.name = name
        self.events = events

    async def before_execute(self, command):
        self.events.append(f"{self.name}:before")

    async def after_execute(self, command, result):
        self.events.append(f"{self.name}:after")

    async def on_error(self, command, error):
        self.events.append(f"{self.name}:error")


class TestRequests:

    def test_requests_get_metadata(self):
        first, second = Ping(), Ping()

        assert first.command_id != second.command_id
        assert first.timestamp.tzinfo is not None
        assert Fetch(key=1).query_id

    def test_requests_are_immutable(self):
        command = CreateProductCommand(name="Widget", price=Decimal("9.99"))

        with pytest.raises(Exception):
            command.name = "Other"


class TestCommandBus:

    @pytest.mark.asyncio
    async def test_dispatches_to_registered_handler(self):
        bus = CommandBus()
        handler = PingHandler()
        bus.register_handler(Ping, handler)

        assert await bus.execute(Ping()) == "pong"
        assert handler.calls == 1

    @pytest.mark.asyncio
    async def test_missing_handler_raises(self):
        bus = CommandBus()

        with pytest.raises(CommandBusError) as exc_info:
            await bus.execute(Ping())

        assert exc_info.value.error_code == "COMMAND_HANDLER_NOT_FOUND"
        assert "Ping" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_dispatch_uses_exact_type(self):
        bus = CommandBus()
        bus.register_handler(Ping, PingHandler())

        with pytest.raises(CommandBusError):
            await bus.execute(LoudPing())

    @pytest.mark.asyncio
    async def test_unregister_handler(self):
        bus = CommandBus()
        bus.register_handler(Ping, PingHandler())
        bus.unregister_handler(Ping)

        assert bus.get_registered_commands() == []
        with pytest.raises(CommandBusError):
            await bus.execute(Ping())

    def test_override_logs_warning(self, caplog):
        bus = CommandBus()
        bus.register_handler(Ping, PingHandler())

        with caplog.at_level(logging.WARNING, logger="app.shared.cqrs.bus"):
            bus.register_handler(Ping, PingHandler())

        assert "Overriding existing handler for command: Ping" in caplog.text

    @pytest.mark.asyncio
    async def test_middleware_order(self):
        events = []
        bus = CommandBus()
        bus.register_handler(Ping, PingHandler())
        bus.add_middleware(RecordingMiddleware("outer", events))
        bus.add_middleware(RecordingMiddleware("inner", events))

        await bus.execute(Ping())

        assert events == ["outer:before", "inner:before", "inner:after", "outer:after"]

    @pytest.mark.asyncio
    async def test_handler_error_is_logged_and_reraised(self, caplog):
        events = []
        bus = CommandBus()
        bus.register_handler(Ping, ExplodingHandler())
        bus.add_middleware(RecordingMiddleware("m", events))

        with caplog.at_level(logging.ERROR, logger="app.shared.cqrs.bus"):
            with pytest.raises(RuntimeError, match="boom"):
                await bus.execute(Ping())

        assert events == ["m:before", "m:error"]
        assert "Command execution failed: Ping" in caplog.text


class TestQueryBus:

    @pytest.mark.asyncio
    async def test_dispatches_to_registered_handler(self):
        bus = QueryBus()
        bus.register_handler(Fetch, FetchHandler())

        assert await bus.execute(Fetch(key=21)) == 42
        assert bus.get_registered_queries() == [Fetch]

    @pytest.mark.asyncio
    async def test_missing_handler_raises(self):
        with pytest.raises(QueryBusError) as exc_info:
            await QueryBus().execute(Fetch(key=1))

        assert exc_info.value.error_code == "QUERY_HANDLER_NOT_FOUND"


class TestMediator:

    @pytest.mark.asyncio
    async def test_routes_commands_and_queries(self):
        mediator = Mediator()
        mediator.register_handler(Ping, PingHandler())
        mediator.register_handler(Fetch, FetchHandler())

        assert await mediator.send(Ping()) == "pong"
        assert await mediator.send(Fetch(key=5)) == 10
        assert set(mediator.get_registered_requests()) == {Ping, Fetch}

    @pytest.mark.asyncio
    async def test_unknown_request_type_rejected(self):
        with pytest.raises(UnsupportedRequestError) as exc_info:
            await Mediator().send({"name": "Widget"})

        assert exc_info.value.error_code == "UNSUPPORTED_REQUEST"

    def test_register_non_request_type_rejected(self):
        with pytest.raises(UnsupportedRequestError):
            Mediator().register_handler(dict, PingHandler())

    @pytest.mark.asyncio
    async def test_validation_runs_before_handler(self):
        calls = []

        class RecordingCreateHandler(CommandHandler[CreateProductCommand, int]):
            async def handle(self, command):
                calls.append(command)
                return 1

        registry = ValidatorRegistry()
        registry.register(CreateProductCommand, CreateProductCommandValidator())
        mediator = Mediator()
        mediator.add_middleware(ValidationMiddleware(registry))
        mediator.register_handler(CreateProductCommand, RecordingCreateHandler())

        with pytest.raises(DataValidationError):
            await mediator.send(CreateProductCommand(name="", price=Decimal("1")))
        assert calls == []

        assert await mediator.send(CreateProductCommand(name="Widget", price=Decimal("1"))) == 1
        assert len(calls) == 1


class TestAutoRegistration:

    @pytest.mark.asyncio
    async def test_registers_tagged_handlers_from_module(self):
        import types

        module = types.ModuleType("fake_handlers")

        @command_handler(Ping)
        class TaggedPingHandler(PingHandler):
            pass

        @query_handler(Fetch)
        class TaggedFetchHandler(FetchHandler):
            pass

        module.TaggedPingHandler = TaggedPingHandler
        module.TaggedFetchHandler = TaggedFetchHandler
        module.Untagged = PingHandler

        mediator = Mediator()
        count = auto_register_handlers(module, mediator)

        assert count == 2
        assert await mediator.send(Ping()) == "pong"
        assert await mediator.send(Fetch(key=2)) == 4

    def test_uses_resolver(self):
        import types

        built = []
        module = types.ModuleType("fake_handlers")

        @command_handler(Ping)
        class TaggedPingHandler(PingHandler):
            pass

        module.TaggedPingHandler = TaggedPingHandler

        def resolve(handler_class):
            built.append(handler_class)
            return handler_class()

        auto_register_handlers(module, Mediator(), resolve)

        assert built == [TaggedPingHandler]
