"""
Dependency Injection Container implementation.

Supports singleton and transient lifetimes, instance and factory
registration, and constructor injection driven by type annotations.
Resolution is serialised by a re-entrant lock, so concurrent first
requests share one singleton.
One container is built per application instance and kept on app.state,
so every test fixture can own a fresh store.
"""

import inspect
import logging
import threading
from enum import Enum
from typing import TypeVar, Type, Any, Dict, Callable, Optional, List, get_type_hints

logger = logging.getLogger(__name__)

T = TypeVar('T')


class Lifetime(Enum):
    """Service lifetime enumeration"""
    SINGLETON = "singleton"
    TRANSIENT = "transient"


class CircularDependencyError(Exception):
    """Raised when circular dependency is detected"""
    pass


class ServiceNotFoundError(Exception):
    """Raised when requested service is not registered"""
    pass


class ServiceBinding:
    """How one service type is produced."""

    def __init__(
        self,
        service_type: type,
        implementation: Optional[type] = None,
        factory: Optional[Callable[..., Any]] = None,
        lifetime: Lifetime = Lifetime.TRANSIENT
    ):
        if (implementation is None) == (factory is None):
            raise ValueError(
                f"Binding for {service_type.__name__} needs exactly one of implementation or factory"
            )
        self.service_type = service_type
        self.implementation = implementation
        self.factory = factory
        self.lifetime = lifetime


class DIContainer:
    """Dependency Injection Container"""

    def __init__(self):
        self._bindings: Dict[type, ServiceBinding] = {}
        self._singletons: Dict[type, Any] = {}
        self._lock = threading.RLock()
        self._local = threading.local()

    def register_singleton(self, service_type: Type[T], implementation: Optional[type] = None) -> 'DIContainer':
        """Register a class built once and shared"""
        impl = implementation or service_type
        self._bindings[service_type] = ServiceBinding(service_type, implementation=impl, lifetime=Lifetime.SINGLETON)
        logger.debug(f"Registered singleton: {service_type.__name__} -> {impl.__name__}")
        return self

    def register_transient(self, service_type: Type[T], implementation: Optional[type] = None) -> 'DIContainer':
        """Register a class built on every resolve"""
        impl = implementation or service_type
        self._bindings[service_type] = ServiceBinding(service_type, implementation=impl, lifetime=Lifetime.TRANSIENT)
        logger.debug(f"Registered transient: {service_type.__name__} -> {impl.__name__}")
        return self

    def register_factory(
        self,
        service_type: Type[T],
        factory: Callable[..., T],
        lifetime: Lifetime = Lifetime.SINGLETON
    ) -> 'DIContainer':
        """Register a factory whose annotated parameters are injected"""
        self._bindings[service_type] = ServiceBinding(service_type, factory=factory, lifetime=lifetime)
        logger.debug(f"Registered factory: {service_type.__name__} -> {factory.__name__}")
        return self

    def register_instance(self, service_type: Type[T], instance: T) -> 'DIContainer':
        """Register an already-built object"""
        self._bindings[service_type] = ServiceBinding(
            service_type, factory=lambda: instance, lifetime=Lifetime.SINGLETON
        )
        self._singletons[service_type] = instance
        logger.debug(f"Registered instance: {service_type.__name__}")
        return self

    def is_registered(self, service_type: type) -> bool:
        return service_type in self._bindings

    def resolve(self, service_type: Type[T]) -> T:
        """Resolve a service instance"""
        # One resolution at a time, so a singleton is built exactly once
        with self._lock:
            stack = self._resolution_stack
            if service_type in stack:
                cycle = " -> ".join(t.__name__ for t in stack) + f" -> {service_type.__name__}"
                raise CircularDependencyError(f"Circular dependency detected: {cycle}")

            binding = self._bindings.get(service_type)
            if binding is None:
                raise ServiceNotFoundError(f"Service {service_type.__name__} is not registered")

            if binding.lifetime == Lifetime.SINGLETON and service_type in self._singletons:
                return self._singletons[service_type]

            stack.append(service_type)
            try:
                if binding.factory is not None:
                    instance = self._call_with_injection(binding.factory)
                else:
                    instance = self._call_with_injection(binding.implementation)
            finally:
                stack.pop()

            if binding.lifetime == Lifetime.SINGLETON:
                self._singletons[service_type] = instance
            return instance

    @property
    def _resolution_stack(self) -> List[type]:
        """Types being built by the current thread, outermost first"""
        stack = getattr(self._local, "stack", None)
        if stack is None:
            stack = self._local.stack = []
        return stack

    def _call_with_injection(self, target: Callable[..., Any]) -> Any:
        """Call a class or function, resolving annotated parameters"""
        hints_source = target.__init__ if inspect.isclass(target) else target
        try:
            hints = get_type_hints(hints_source)
        except (NameError, TypeError):
            hints = {}

        kwargs = {}
        for name, param in inspect.signature(target).parameters.items():
            if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
                continue
            annotation = hints.get(name)
            if annotation is not None and self.is_registered(annotation):
                kwargs[name] = self.resolve(annotation)
            elif param.default is inspect.Parameter.empty:
                owner = getattr(target, "__name__", repr(target))
                raise ServiceNotFoundError(
                    f"Cannot inject parameter '{name}' of {owner}: no registered service"
                )
        return target(**kwargs)

    def list_registrations(self) -> Dict[str, str]:
        """Service name -> lifetime, for diagnostics"""
        return {t.__name__: b.lifetime.value for t, b in self._bindings.items()}

    def registered_types(self) -> List[type]:
        return list(self._bindings)
