"""
FastAPI Dependencies for Dependency Injection.

Resolve services from the container owned by the running application.
"""

from fastapi import Depends, Request

from .container import DIContainer


def get_di_container(request: Request) -> DIContainer:
    """FastAPI dependency to get the application's DI container"""
    return request.app.state.container


def get_mediator(container: DIContainer = Depends(get_di_container)):
    """Get the Mediator instance"""
    from ..shared.cqrs import Mediator
    return container.resolve(Mediator)


def get_product_store(container: DIContainer = Depends(get_di_container)):
    """Get the InMemoryProductStore instance"""
    from ..domains.products.repository import InMemoryProductStore
    return container.resolve(InMemoryProductStore)
