"""
=============================================================================
PROXY DISPATCHER
=============================================================================

The entry point: takes one request from the invocation host and returns
exactly one response, whatever happens in between.

=============================================================================
DISPATCH FLOW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                       REQUEST DISPATCH                              │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   ProxyRequest + context                                            │
    │        │                                                             │
    │        ▼                                                             │
    │   1. acquire configuration ──fails──► 500 "mis-configured" envelope │
    │        │                                                             │
    │        ▼                                                             │
    │   2. canonical method  (POST → post)                                │
    │        │                                                             │
    │        ▼                                                             │
    │   3. CORS on and OPTIONS? ──yes──► PreflightNegotiator ──► 200/400  │
    │        │ no                          (final, no post-processing)    │
    │        ▼                                                             │
    │   4. method registered? ──no──► 400 "Lambda cannot handle..."       │
    │        │                                                             │
    │        ▼                                                             │
    │   5. resolve handler from the registry                              │
    │        │                                                             │
    │        ▼                                                             │
    │   6. Content-Type and Accept present? ──no──► 415 "No ... header"   │
    │        │                                                             │
    │        ▼                                                             │
    │   7. parse both (lower-cased) ──bad──► 400 "Malformed media type."  │
    │        │                                                             │
    │        ▼                                                             │
    │   8. handler.handle(request, content_types, accept_types, context)  │
    │        │                                                             │
    │        ▼                                                             │
    │   9. any exception on the way:                                      │
    │        RequestShapeError ──► 500 "Failed to parse: ..."             │
    │        other Exception   ──► 500 {"message", "cause"}               │
    │        │                                                             │
    │        ▼                                                             │
    │  10. not OPTIONS? force Access-Control-Allow-Origin: *              │
    │        │                                                             │
    │        ▼                                                             │
    │   ProxyResponse                                                      │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Steps 1-8 are stages of a StagePipeline; each returns Continue or
Terminate and the first Terminate is the answer.

Only BaseExceptions that are not Exceptions (KeyboardInterrupt,
SystemExit, ...) escape; those belong to the host.

=============================================================================
USAGE
=============================================================================

    dispatcher = ProxyDispatcher(
        configuration_factory=lambda request, context: AppConfig.load(),
        cors_support=True,
    )
    dispatcher.register_method_handler("POST", CreateOrder)

    @dispatcher.route("GET")
    def list_orders(request, content_types, accept_types, context):
        return ok({"orders": []})

    # AWS Lambda handler setting: module.dispatcher
    # (the dispatcher is callable with (event, context))

=============================================================================
"""

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, Iterable, Mapping, Optional
import logging
import time

from . import errors
from .config import DispatcherSettings
from .errors import ConfigurationError
from .handlers.base import FunctionHandler, HandlerFunction, MethodHandler
from .http import headers as h
from .http.media_types import MalformedMediaTypeError, MediaType, parse_media_types
from .http.request import ProxyRequest, RequestShapeError
from .http.response import ProxyResponse
from .pipeline.base import Continue, Outcome, StagePipeline, Terminate
from .pipeline.cors import PreflightNegotiator
from .pipeline.logging import AccessLogger
from .registry import HandlerFactory, HandlerRegistry


logger = logging.getLogger(__name__)


ConfigurationFactory = Callable[[ProxyRequest, Any], Any]

OPTIONS_METHOD = "options"
ANY_ORIGIN = "*"


@dataclass(frozen=True)
class DispatchState:
    """Everything the dispatch stages have established about one request."""

    request: ProxyRequest
    context: Any = None
    configuration: Any = None
    method: Optional[str] = None
    handler: Optional[MethodHandler] = None
    headers: Mapping[str, str] = field(default_factory=dict)
    content_types: tuple[MediaType, ...] = ()
    accept_types: tuple[MediaType, ...] = ()
    response: Optional[ProxyResponse] = None


class ProxyDispatcher:
    """
    Dispatches proxy requests to method handlers.

    Subclasses may override get_configuration() instead of passing a
    configuration factory.
    """

    def __init__(
        self,
        configuration_factory: Optional[ConfigurationFactory] = None,
        cors_support: Optional[bool] = None,
        handlers: Optional[Mapping[str, HandlerFactory]] = None,
        settings: Optional[DispatcherSettings] = None,
    ):
        """
        Args:
            configuration_factory: Builds the per-invocation configuration
                from (request, context). May raise; that becomes the
                "mis-configured" 500.
            cors_support: Answer CORS preflights. Overrides
                ``settings.cors_support`` when given.
            handlers: Initial method → handler factory mapping.
            settings: Dispatcher settings (defaults if omitted).
        """
        settings = settings or DispatcherSettings()
        if cors_support is not None:
            settings = replace(settings, cors_support=cors_support)
        settings.validate()

        self.settings = settings
        self.registry = HandlerRegistry(handlers)
        self._configuration_factory = configuration_factory
        self._negotiator = PreflightNegotiator(self.registry)
        self._access_log = (
            AccessLogger(settings.log_format, settings.level) if settings.access_log else None
        )
        self._pipeline: StagePipeline[DispatchState] = (StagePipeline("dispatch")
            .add(self._acquire_configuration)
            .add(self._canonicalize_method)
            .add(self._negotiate_preflight)
            .add(self._require_registered_method)
            .add(self._resolve_handler)
            .add(self._require_negotiation_headers)
            .add(self._parse_negotiation_headers)
            .add(self._invoke_handler))

    @property
    def cors_support(self) -> bool:
        return self.settings.cors_support

    # =========================================================================
    # REGISTRATION
    # =========================================================================

    def register_method_handler(self, method: str, factory: HandlerFactory) -> "ProxyDispatcher":
        """
        Register a handler factory for an HTTP method (any case).

        Registration is meant to happen at import time, before traffic;
        it is safe while requests are in flight, see HandlerRegistry.

        Returns:
            Self for method chaining.
        """
        self.registry.register(method, factory)
        return self

    def route(
        self,
        method: str,
        required_headers: Iterable[str] = (),
    ) -> Callable[[HandlerFunction], FunctionHandler]:
        """
        Decorator registering a plain function as the handler for a method.

        Usage:
            @dispatcher.route("DELETE", required_headers={"authorization"})
            def delete_order(request, content_types, accept_types, context):
                ...
        """
        def decorator(func: HandlerFunction) -> FunctionHandler:
            handler = FunctionHandler(func, required_headers=required_headers)
            self.register_method_handler(method, handler.as_factory())
            return handler

        return decorator

    # =========================================================================
    # CONFIGURATION
    # =========================================================================

    def get_configuration(self, request: ProxyRequest, context: Any) -> Any:
        """
        Acquire the configuration for one invocation.

        Calls the configuration factory; without one, the configuration
        is None. Override in a subclass to build it differently.
        """
        if self._configuration_factory is None:
            return None
        return self._configuration_factory(request, context)

    # =========================================================================
    # ENTRY POINTS
    # =========================================================================

    def __call__(self, event: Any, context: Any = None) -> Dict[str, Any]:
        """
        Invocation host entry point: event mapping in, response mapping out.
        """
        started = time.perf_counter()
        try:
            request = ProxyRequest.from_event(event)
        except RequestShapeError as e:
            logger.error(f"Failed to parse event: {e}")
            response = errors.parse_failure(event).with_header(
                h.ACCESS_CONTROL_ALLOW_ORIGIN, ANY_ORIGIN
            )
            self._log_completion(ProxyRequest(http_method=None), response, started)
            return response.to_dict()

        return self.handle_request(request, context).to_dict()

    def handle_request(self, request: ProxyRequest, context: Any = None) -> ProxyResponse:
        """
        Dispatch one request.

        Args:
            request: The inbound request.
            context: The invocation context, handed untouched to the
                     configuration factory and the handler.

        Returns:
            The response. Never raises an Exception.
        """
        started = time.perf_counter()

        try:
            outcome = self._pipeline.run(DispatchState(request=request, context=context))
            if outcome.is_terminal:
                response = outcome.response
            else:
                response = outcome.value.response
        except RequestShapeError as e:
            logger.error(f"Failed to parse request {request!r}: {e}")
            response = errors.parse_failure(request)
        except Exception as e:
            logger.exception(f"Unexpected failure dispatching {request!r}: {e}")
            response = errors.server_error(e)

        if not request.is_options:
            response = response.with_header(h.ACCESS_CONTROL_ALLOW_ORIGIN, ANY_ORIGIN)

        self._log_completion(request, response, started)
        return response

    def _log_completion(
        self,
        request: ProxyRequest,
        response: ProxyResponse,
        started: float,
    ) -> None:
        logger.info(
            f"Completed response: {response.status_code} with size {len(response.body)}."
        )
        if self._access_log is not None:
            self._access_log.record(request, response, started)

    # =========================================================================
    # DISPATCH STAGES
    # =========================================================================

    def _acquire_configuration(self, state: DispatchState) -> Outcome:
        try:
            configuration = self.get_configuration(state.request, state.context)
        except Exception as e:
            error = e if isinstance(e, ConfigurationError) else ConfigurationError(e)
            logger.exception(f"Failed to acquire configuration: {e}")
            return Terminate(errors.configuration_error(error))
        return Continue(replace(state, configuration=configuration))

    def _canonicalize_method(self, state: DispatchState) -> Outcome:
        method = state.request.method
        logger.info(f"Method: {method}")
        return Continue(replace(state, method=method))

    def _negotiate_preflight(self, state: DispatchState) -> Outcome:
        if self.cors_support and state.method == OPTIONS_METHOD:
            return Terminate(self._negotiator.negotiate(
                state.request.normalized_headers, state.configuration
            ))
        return Continue(state)

    def _require_registered_method(self, state: DispatchState) -> Outcome:
        if not self.registry.is_registered(state.method):
            return Terminate(errors.unsupported_method(state.method))
        return Continue(state)

    def _resolve_handler(self, state: DispatchState) -> Outcome:
        handler = self.registry.resolve(state.configuration, state.method)
        return Continue(replace(state, handler=handler))

    def _require_negotiation_headers(self, state: DispatchState) -> Outcome:
        headers = state.request.normalized_headers
        for header in (h.CONTENT_TYPE, h.ACCEPT):
            if header not in headers:
                return Terminate(errors.missing_header(header))
        return Continue(replace(state, headers=headers))

    def _parse_negotiation_headers(self, state: DispatchState) -> Outcome:
        try:
            content_types = parse_media_types(state.headers[h.CONTENT_TYPE].lower())
            accept_types = parse_media_types(state.headers[h.ACCEPT].lower())
        except MalformedMediaTypeError as e:
            logger.info(f"Rejecting malformed media type: {e}")
            return Terminate(errors.malformed_media_type(str(e)))

        logger.info(f"Content-Type: {[str(m) for m in content_types]}")
        logger.info(f"Accept: {[str(m) for m in accept_types]}")
        return Continue(replace(
            state,
            content_types=tuple(content_types),
            accept_types=tuple(accept_types),
        ))

    def _invoke_handler(self, state: DispatchState) -> Outcome:
        response = state.handler.handle(
            state.request,
            list(state.content_types),
            list(state.accept_types),
            state.context,
        )
        if not isinstance(response, ProxyResponse):
            raise TypeError(
                f"{type(state.handler).__name__}.handle() returned "
                f"{type(response).__name__}, expected ProxyResponse"
            )
        if not isinstance(response.body, str) or not isinstance(response.status_code, int):
            raise TypeError(
                f"{type(state.handler).__name__}.handle() returned a response with "
                f"status {response.status_code!r} and a {type(response.body).__name__} body"
            )
        return Continue(replace(state, response=response))
