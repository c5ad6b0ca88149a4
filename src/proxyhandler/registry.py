"""
=============================================================================
HANDLER REGISTRY
=============================================================================

Maps HTTP methods to method handler factories.

=============================================================================
REGISTRY LAYOUT
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        HANDLER REGISTRY                             │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   canonical method      factory(configuration) → MethodHandler      │
    │   ────────────────      ──────────────────────────────────────      │
    │   "get"            ──►  ListOrders                                   │
    │   "post"           ──►  CreateOrder                                  │
    │   "delete"         ──►  lambda cfg: DeleteOrder(cfg.table)           │
    │                                                                      │
    │   register("POST", f)  → stored under "post" (last one wins)        │
    │   is_registered("Post") → True                                       │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Factories are called once per invocation, with that invocation's
configuration, so handlers never share configuration across requests.

=============================================================================
THREAD SAFETY
=============================================================================

A host may route concurrent invocations into the same process, so
registration can in principle race with dispatch. The registry never
mutates the mapping readers see:

    register()                          is_registered() / resolve()
    ──────────                          ───────────────────────────
    with lock:                          entries = self._entries
        copy = dict(self._entries)      entries.get(method)
        copy[method] = factory
        self._entries = copy   ◄── single reference swap

Readers take no lock; they always see either the old snapshot or the new
one, never a half-registered mapping.

=============================================================================
"""

from types import MappingProxyType
from typing import Any, Callable, Iterator, Mapping, Optional
import logging
import threading

from .handlers.base import MethodHandler


logger = logging.getLogger(__name__)


HandlerFactory = Callable[[Any], MethodHandler]


class UnregisteredMethodError(LookupError):
    """
    Raised by resolve() for a method with no registered factory.

    The dispatcher checks is_registered() first, so seeing this means a
    caller skipped that check.
    """

    def __init__(self, method: str):
        super().__init__(f"No handler registered for method {method}")
        self.method = method


class HandlerRegistry:
    """
    Method → handler factory mapping with case-insensitive method names.
    """

    def __init__(self, factories: Optional[Mapping[str, HandlerFactory]] = None):
        """
        Args:
            factories: Initial method → factory mapping. Method names are
                       lower-cased; on a collision the later entry wins.
        """
        self._lock = threading.Lock()
        self._entries: Mapping[str, HandlerFactory] = MappingProxyType({
            method.lower(): factory for method, factory in (factories or {}).items()
        })

    # =========================================================================
    # REGISTRATION
    # =========================================================================

    def register(self, method: str, factory: HandlerFactory) -> "HandlerRegistry":
        """
        Register a handler factory for a method.

        Args:
            method: HTTP method, any case.
            factory: Callable taking the configuration and returning a
                     MethodHandler. A MethodHandler subclass works as is.

        Returns:
            Self for method chaining.
        """
        canonical = method.lower()
        with self._lock:
            entries = dict(self._entries)
            replaced = canonical in entries
            entries[canonical] = factory
            self._entries = MappingProxyType(entries)

        if replaced:
            logger.warning(f"Replaced handler factory for method {canonical}")
        else:
            logger.debug(f"Registered handler factory for method {canonical}")
        return self

    # =========================================================================
    # LOOKUP
    # =========================================================================

    def is_registered(self, method: str) -> bool:
        return method.lower() in self._entries

    def resolve(self, configuration: Any, method: str) -> MethodHandler:
        """
        Build the handler for a method.

        Precondition: is_registered(method). The dispatcher checks that
        first so it can answer with a precise 400.

        Args:
            configuration: Per-invocation configuration handed to the factory.
            method: HTTP method, any case.

        Returns:
            A fresh handler from the registered factory.

        Raises:
            UnregisteredMethodError: If the precondition was not met.
        """
        canonical = method.lower()
        factory = self._entries.get(canonical)
        if factory is None:
            raise UnregisteredMethodError(canonical)
        return factory(configuration)

    @property
    def methods(self) -> list[str]:
        """Registered canonical method names, sorted."""
        return sorted(self._entries)

    def __contains__(self, method: object) -> bool:
        return isinstance(method, str) and self.is_registered(method)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.methods)
