"""
pytest configuration and fixtures.
"""

from typing import Any
import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from proxyhandler import ProxyDispatcher, DispatcherSettings, MethodHandler
from proxyhandler.http import ProxyResponse, ResponseBuilder, HTTPStatus
from proxyhandler.registry import HandlerRegistry


class RecordingHandler(MethodHandler):
    """Handler that records what it was called with and echoes it back."""

    def __init__(self, configuration: Any = None, required: frozenset = frozenset()):
        super().__init__(configuration)
        self.required = required
        self.calls: list = []

    def required_headers(self) -> frozenset:
        return self.required

    def handle(self, request, content_types, accept_types, context) -> ProxyResponse:
        self.calls.append((request, content_types, accept_types, context))
        return (ResponseBuilder()
            .status(HTTPStatus.OK)
            .json({
                "method": request.http_method,
                "content_types": [str(m) for m in content_types],
                "accept_types": [str(m) for m in accept_types],
            })
            .build())


@pytest.fixture
def get_handler() -> RecordingHandler:
    return RecordingHandler()


@pytest.fixture
def post_handler() -> RecordingHandler:
    """POST handler that requires x-foo."""
    return RecordingHandler(required=frozenset({"x-foo"}))


@pytest.fixture
def registry(get_handler, post_handler) -> HandlerRegistry:
    """Registry with GET and POST handlers."""
    return HandlerRegistry({
        "GET": lambda configuration: get_handler,
        "POST": lambda configuration: post_handler,
    })


@pytest.fixture
def dispatcher(get_handler, post_handler) -> ProxyDispatcher:
    """CORS-enabled dispatcher with GET and POST handlers."""
    d = ProxyDispatcher(
        configuration_factory=lambda request, context: {"table": "orders"},
        settings=DispatcherSettings(cors_support=True, access_log=False),
    )
    d.register_method_handler("GET", lambda configuration: get_handler)
    d.register_method_handler("POST", lambda configuration: post_handler)
    return d
