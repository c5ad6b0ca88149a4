"""
=============================================================================
PROXYHANDLER - Request Dispatch for API Gateway Proxy Functions
=============================================================================

A small dispatch layer for functions sitting behind an API gateway proxy
integration. It takes the request the gateway hands over, does the
checks every endpoint needs, and calls the business handler registered
for the request's HTTP method.

=============================================================================
PROJECT OVERVIEW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    PROXYHANDLER ARCHITECTURE                        │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   1. METHOD DISPATCH                                                │
    │      - One handler factory per HTTP method, case-insensitive       │
    │      - Handlers built per invocation from that invocation's        │
    │        configuration                                                │
    │                                                                      │
    │   2. CONTENT NEGOTIATION                                            │
    │      - Content-Type and Accept are mandatory (415 otherwise)       │
    │      - Parsed into MediaType lists before the handler runs         │
    │                                                                      │
    │   3. CORS                                                           │
    │      - Preflight answered from the target handler's declared       │
    │        required headers                                             │
    │      - Access-Control-Allow-Origin: * on every other response      │
    │                                                                      │
    │   4. ERROR ENVELOPES                                                │
    │      - Every failure becomes a response, never an exception        │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    proxyhandler/
    ├── __init__.py          # This file - package exports
    ├── dispatcher.py        # ProxyDispatcher, the entry point
    ├── registry.py          # Method → handler factory registry
    ├── errors.py            # Error envelope builders
    ├── config.py            # DispatcherSettings, logging setup
    ├── http/                # Request/response values
    │   ├── request.py       # ProxyRequest
    │   ├── response.py      # ProxyResponse + ResponseBuilder
    │   ├── headers.py       # Header names and normalization
    │   ├── media_types.py   # Media type parsing
    │   └── status_codes.py  # HTTP status enum
    ├── pipeline/            # Dispatch building blocks
    │   ├── base.py          # Continue / Terminate / StagePipeline
    │   ├── cors.py          # CORS preflight negotiation
    │   └── logging.py       # Access log
    └── handlers/
        └── base.py          # MethodHandler contract

=============================================================================
QUICK START
=============================================================================

    from proxyhandler import ProxyDispatcher, DispatcherSettings, configure_logging
    from proxyhandler.http import ok

    settings = DispatcherSettings.from_env()
    configure_logging(settings)

    dispatcher = ProxyDispatcher(settings=settings)

    @dispatcher.route("GET")
    def read(request, content_types, accept_types, context):
        return ok({"id": request.path_params.get("id")})

    @dispatcher.route("POST", required_headers={"x-api-key"})
    def write(request, content_types, accept_types, context):
        return ok(request.json)

    # Function handler setting: app.dispatcher

=============================================================================
"""

__version__ = "1.0.0"

from .dispatcher import ProxyDispatcher
from .config import DispatcherSettings, configure_logging
from .handlers import MethodHandler, FunctionHandler, method_handler
from .registry import HandlerRegistry, UnregisteredMethodError
from .errors import ConfigurationError

__all__ = [
    "ProxyDispatcher",
    "DispatcherSettings",
    "configure_logging",
    "MethodHandler",
    "FunctionHandler",
    "method_handler",
    "HandlerRegistry",
    "UnregisteredMethodError",
    "ConfigurationError",
    "__version__",
]
