"""
Pytest configuration and shared fixtures.

Every test gets its own product store, container and application, so ids
always start at 1 and no state leaks between tests.
"""

import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.core.di_config import configure_dependencies
from app.domains.products.repository import InMemoryProductStore
from app.main import create_app
from app.shared.cqrs import Mediator


@pytest.fixture
def test_settings():
    """Settings isolated from the environment defaults that matter here"""
    return Settings(debug=False, log_level="WARNING", api_prefix="/api")


@pytest.fixture
def store():
    """Fresh, empty product store"""
    return InMemoryProductStore()


@pytest.fixture
def container(test_settings, store):
    """DI container wired around the test store"""
    return configure_dependencies(test_settings, store=store)


@pytest.fixture
def mediator(container):
    """Fully wired mediator (validation middleware + product handlers)"""
    return container.resolve(Mediator)


@pytest.fixture
def app(test_settings, store):
    """Application instance sharing the test store"""
    return create_app(test_settings, store=store)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client
