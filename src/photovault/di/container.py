from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Type

from .lifetime import Lifetime
from ..errors import CircularDependencyError, ResolutionError


@dataclass
class Registration:
    interface: Type
    build: Callable[[], Any]
    lifetime: Lifetime = Lifetime.TRANSIENT


class Container:
    """Resolve the download services by interface.

    Only what :func:`photovault.di.bootstrap.bootstrap` needs: singleton and
    transient classes, and factories for services whose constructors take
    other registered services.
    """

    def __init__(self):
        self._registrations: Dict[Type, Registration] = {}
        self._singletons: Dict[Type, Any] = {}
        self._resolving: List[Type] = []

    def register_singleton(self, interface: Type, implementation: Optional[Type] = None, **kwargs):
        self._register_class(interface, implementation, Lifetime.SINGLETON, kwargs)

    def register_transient(self, interface: Type, implementation: Optional[Type] = None, **kwargs):
        self._register_class(interface, implementation, Lifetime.TRANSIENT, kwargs)

    def register_factory(self, interface: Type, factory: Callable[[], Any], singleton: bool = False):
        lifetime = Lifetime.SINGLETON if singleton else Lifetime.TRANSIENT
        self._registrations[interface] = Registration(interface, factory, lifetime)
        self._singletons.pop(interface, None)

    def resolve(self, interface: Type) -> Any:
        if interface in self._singletons:
            return self._singletons[interface]
        reg = self._registrations.get(interface)
        if reg is None:
            raise ResolutionError(f"No registration found for {interface.__name__}")
        if interface in self._resolving:
            chain = " -> ".join(t.__name__ for t in [*self._resolving, interface])
            raise CircularDependencyError(f"Circular dependency: {chain}")

        self._resolving.append(interface)
        try:
            instance = reg.build()
        finally:
            self._resolving.pop()

        if reg.lifetime is Lifetime.SINGLETON:
            self._singletons[interface] = instance
        return instance

    def _register_class(self, interface: Type, implementation: Optional[Type], lifetime: Lifetime, kwargs):
        impl = implementation or interface
        self._registrations[interface] = Registration(interface, lambda: impl(**kwargs), lifetime)
        self._singletons.pop(interface, None)
