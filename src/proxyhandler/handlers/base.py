"""
=============================================================================
METHOD HANDLER CONTRACT
=============================================================================

A method handler holds the business logic for ONE HTTP method. The
dispatcher knows nothing about it beyond this contract.

=============================================================================
THE CONTRACT
=============================================================================

    class MethodHandler:
        def handle(request, content_types, accept_types, context) -> ProxyResponse
        def required_headers() -> set[str]

    handle()
        Called once per request, after the dispatcher has checked that
        Content-Type and Accept are present and parsed them. Whatever it
        returns is sent back (plus the CORS origin header); it raises only
        for unexpected failures, which become a 500 envelope.

    required_headers()
        The request headers a caller must send for this method to work.
        Only consulted during CORS preflight, to check that the browser is
        going to send them. Not enforced on the real request.

=============================================================================
HANDLER FACTORIES
=============================================================================

The registry stores FACTORIES, not handlers: a callable taking the
per-invocation configuration and returning a handler. A handler class
whose __init__ takes the configuration is therefore its own factory:

    class CreateOrder(MethodHandler):
        def __init__(self, configuration):
            super().__init__(configuration)
            self.table = configuration.orders_table

        def required_headers(self):
            return {"x-api-key"}

        def handle(self, request, content_types, accept_types, context):
            ...

    dispatcher.register_method_handler("POST", CreateOrder)

For stateless logic, a plain function will do:

    @dispatcher.route("GET")
    def list_orders(request, content_types, accept_types, context):
        return ok({"orders": []})

=============================================================================
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Iterable, Optional
import logging

from ..http.media_types import MediaType
from ..http.request import ProxyRequest
from ..http.response import ProxyResponse


logger = logging.getLogger(__name__)


# Signature of a function handler
HandlerFunction = Callable[
    [ProxyRequest, list[MediaType], list[MediaType], Any],
    ProxyResponse,
]


class MethodHandler(ABC):
    """
    Abstract base class for method handlers.

    Subclasses implement handle() and usually override required_headers().
    """

    def __init__(self, configuration: Any = None):
        """
        Args:
            configuration: The per-invocation configuration the handler was
                           built from (opaque to the dispatcher).
        """
        self.configuration = configuration

    @abstractmethod
    def handle(
        self,
        request: ProxyRequest,
        content_types: list[MediaType],
        accept_types: list[MediaType],
        context: Any,
    ) -> ProxyResponse:
        """
        Process the request.

        Args:
            request: The inbound request, as received.
            content_types: Parsed Content-Type, in header order.
            accept_types: Parsed Accept, in header order.
            context: The invocation context, passed through untouched.

        Returns:
            The response to send.
        """
        pass

    def required_headers(self) -> frozenset[str]:
        """Headers (case-insensitive) callers must send. None by default."""
        return frozenset()

    @property
    def name(self) -> str:
        """Handler name for logging."""
        return self.__class__.__name__


# =============================================================================
# FUNCTION HANDLERS
# =============================================================================

class FunctionHandler(MethodHandler):
    """
    Wraps a plain function as a method handler.

    Usage:
        def echo(request, content_types, accept_types, context):
            return ok(request.body)

        handler = FunctionHandler(echo, required_headers={"X-Api-Key"})
        registry.register("post", handler.as_factory())
    """

    def __init__(
        self,
        func: HandlerFunction,
        required_headers: Iterable[str] = (),
        name: Optional[str] = None,
    ):
        super().__init__()
        self._func = func
        self._required_headers = frozenset(h.lower() for h in required_headers)
        self._name = name or getattr(func, "__name__", "handler")

    def handle(
        self,
        request: ProxyRequest,
        content_types: list[MediaType],
        accept_types: list[MediaType],
        context: Any,
    ) -> ProxyResponse:
        """Delegate to the wrapped function."""
        return self._func(request, content_types, accept_types, context)

    def required_headers(self) -> frozenset[str]:
        return self._required_headers

    @property
    def name(self) -> str:
        return self._name

    def as_factory(self) -> Callable[[Any], "FunctionHandler"]:
        """
        A registry factory that ignores the configuration and returns self.
        """
        def factory(configuration: Any) -> "FunctionHandler":
            return self

        return factory

    def __call__(self, request, content_types, accept_types, context) -> ProxyResponse:
        return self.handle(request, content_types, accept_types, context)


def method_handler(
    func: Optional[HandlerFunction] = None,
    *,
    required_headers: Iterable[str] = (),
) -> Any:
    """
    Decorator to create a FunctionHandler from a function.

    Works bare or with arguments:

        @method_handler
        def read(request, content_types, accept_types, context): ...

        @method_handler(required_headers={"authorization"})
        def write(request, content_types, accept_types, context): ...
    """
    def decorator(f: HandlerFunction) -> FunctionHandler:
        handler = FunctionHandler(f, required_headers=required_headers)
        logger.debug(f"Created function handler: {handler.name}")
        return handler

    if func is not None:
        return decorator(func)
    return decorator
