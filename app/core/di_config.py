"""
Dependency Injection Configuration.

Wires the product store, validators, handlers and mediator into a
container. The handler table is built once here and not changed while
the application runs.
"""

import logging
from typing import Optional

from .config import Settings, settings as default_settings
from .container import DIContainer, Lifetime

logger = logging.getLogger(__name__)


def configure_dependencies(
    app_settings: Optional[Settings] = None,
    store=None
) -> DIContainer:
    """
    Configure and setup the DI container with all dependencies.

    Args:
        app_settings: Settings to register (defaults to the process settings)
        store: Pre-built product store to share (a fresh one otherwise)

    Returns:
        Configured DIContainer instance
    """
    from ..domains.products import handlers as product_handlers
    from ..domains.products.repository import InMemoryProductStore
    from ..shared.cqrs import (
        Mediator,
        CreateProductCommand,
        LoggingMiddleware,
        ValidationMiddleware,
        auto_register_handlers
    )
    from ..shared.validators import ValidatorRegistry, CreateProductCommandValidator

    app_settings = app_settings or default_settings
    container = DIContainer()
    container.register_instance(Settings, app_settings)

    if store is not None:
        container.register_instance(InMemoryProductStore, store)
    else:
        container.register_singleton(InMemoryProductStore)

    def build_validators(config: Settings) -> ValidatorRegistry:
        registry = ValidatorRegistry()
        registry.register(
            CreateProductCommand,
            CreateProductCommandValidator(max_name_length=config.product_name_max_length)
        )
        return registry

    container.register_factory(ValidatorRegistry, build_validators)

    # Handlers share the singleton store
    container.register_singleton(product_handlers.CreateProductHandler)
    container.register_singleton(product_handlers.GetProductByIdHandler)

    def build_mediator(validators: ValidatorRegistry) -> Mediator:
        mediator = Mediator()
        mediator.add_middleware(LoggingMiddleware())
        mediator.add_middleware(ValidationMiddleware(validators))
        auto_register_handlers(product_handlers, mediator, container.resolve)
        return mediator

    container.register_factory(Mediator, build_mediator, lifetime=Lifetime.SINGLETON)

    logger.debug(f"Registered services: {list(container.list_registrations().keys())}")
    return container


def validate_container_setup(container: DIContainer) -> dict:
    """
    Resolve every registration once and report which ones fail.

    Returns:
        Dict of service name -> {"status": "ok"} or {"status": "error", "error": str}
    """
    results = {}
    for service_type in container.registered_types():
        try:
            container.resolve(service_type)
            results[service_type.__name__] = {"status": "ok"}
        except Exception as e:
            results[service_type.__name__] = {"status": "error", "error": str(e)}
    return results
