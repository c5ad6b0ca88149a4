"""
=============================================================================
PROXY REQUEST
=============================================================================

The inbound request as delivered by the invocation host.

Unlike a socket server, we never see raw bytes: an API gateway has already
parsed the HTTP message and hands us a structured event. This module turns
that event into an immutable ProxyRequest the dispatcher can read.

=============================================================================
PROXY INTEGRATION EVENT
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                  API GATEWAY PROXY EVENT (subset)                   │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   {                                                                  │
    │     "httpMethod": "POST",                     ──► http_method       │
    │     "path": "/orders",                        ──► path              │
    │     "headers": {                              ──► headers           │
    │       "Content-Type": "application/json",        (case as sent)     │
    │       "Accept": "application/json"                                  │
    │     },                                                               │
    │     "queryStringParameters": {"page": "1"},   ──► query_params      │
    │     "pathParameters": {"id": "42"},           ──► path_params       │
    │     "requestContext": {...},                  ──► request_context   │
    │     "body": "{\"sku\": \"A-1\"}",             ──► body              │
    │     "isBase64Encoded": false                  ──► is_base64_encoded │
    │   }                                                                  │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The gateway sends ``null`` for headers, query and path parameters when
there are none; those become empty mappings.

=============================================================================
HEADER CASE
=============================================================================

Headers are stored exactly as received. HTTP header names are
case-insensitive (RFC 7230), so every lookup goes through
``get_header()`` or through ``normalize_headers()`` first:

    request.headers       → {"Content-Type": "application/json"}
    request.get_header("content-type")  → "application/json"

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional
import base64
import binascii
import json

from .headers import normalize_headers


class RequestShapeError(Exception):
    """
    Raised when the request itself is structurally malformed.

    This is not a business failure: the event does not look like an HTTP
    request at all (no method, headers that are not a mapping, a body that
    claims to be JSON but isn't). The dispatcher answers these with a bare
    500 "Failed to parse" and never echoes internals back to the caller.
    """

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class ProxyRequest:
    """
    Immutable inbound request.

    The dispatch core only ever reads ``http_method`` and ``headers``; the
    other fields are carried along for the business handlers.
    """

    http_method: Optional[str]
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Optional[str] = None

    # Carried for handlers, never inspected by the dispatcher
    path: str = "/"
    query_params: Mapping[str, str] = field(default_factory=dict)
    path_params: Mapping[str, str] = field(default_factory=dict)
    request_context: Mapping[str, Any] = field(default_factory=dict, repr=False)
    is_base64_encoded: bool = False

    # =========================================================================
    # CONSTRUCTION
    # =========================================================================

    @classmethod
    def from_event(cls, event: Any) -> "ProxyRequest":
        """
        Build a request from an API gateway proxy-integration event.

        Args:
            event: The event mapping handed over by the invocation host.

        Returns:
            The corresponding ProxyRequest.

        Raises:
            RequestShapeError: If the event is not a mapping, has no string
                ``httpMethod``, or carries non-mapping headers.
        """
        if not isinstance(event, Mapping):
            raise RequestShapeError(
                f"Expected an event mapping, got {type(event).__name__}"
            )

        method = event.get("httpMethod")
        if not isinstance(method, str):
            raise RequestShapeError(f"Event has no usable httpMethod: {method!r}")

        headers = event.get("headers") or {}
        if not isinstance(headers, Mapping):
            raise RequestShapeError(
                f"Event headers must be a mapping, got {type(headers).__name__}"
            )

        return cls(
            http_method=method,
            headers=dict(headers),
            body=event.get("body"),
            path=event.get("path") or "/",
            query_params=dict(event.get("queryStringParameters") or {}),
            path_params=dict(event.get("pathParameters") or {}),
            request_context=dict(event.get("requestContext") or {}),
            is_base64_encoded=bool(event.get("isBase64Encoded", False)),
        )

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def method(self) -> str:
        """
        The canonical (lower-cased) method name.

        Raises:
            RequestShapeError: If the request carries no method string.
        """
        if not isinstance(self.http_method, str):
            raise RequestShapeError(f"Request has no HTTP method: {self!r}")
        return self.http_method.lower()

    @property
    def is_options(self) -> bool:
        """True for OPTIONS requests, whatever case the method was sent in."""
        return isinstance(self.http_method, str) and self.http_method.lower() == "options"

    @property
    def normalized_headers(self) -> Dict[str, str]:
        """
        Headers with lower-cased names.

        Raises:
            RequestShapeError: If the headers are not a mapping.
        """
        try:
            return normalize_headers(self.headers)
        except TypeError as e:
            raise RequestShapeError(f"Malformed request headers: {e}")

    @property
    def raw_body(self) -> bytes:
        """
        The body as bytes, decoding base64 when the gateway says so.

        Raises:
            RequestShapeError: If the body is flagged base64 but isn't.
        """
        if not self.body:
            return b""
        if self.is_base64_encoded:
            try:
                return base64.b64decode(self.body, validate=True)
            except (binascii.Error, ValueError) as e:
                raise RequestShapeError(f"Invalid base64 body: {e}")
        return self.body.encode("utf-8")

    @property
    def json(self) -> Any:
        """
        Parse the body as JSON.

        An invalid JSON body is a malformed request, so it raises
        RequestShapeError and the dispatcher answers "Failed to parse".

        Returns:
            Parsed JSON data, or None for an empty body.
        """
        raw = self.raw_body
        if not raw:
            return None
        try:
            return json.loads(raw.decode("utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise RequestShapeError(f"Invalid JSON body: {e}")

    # =========================================================================
    # ACCESSORS
    # =========================================================================

    def get_header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """
        Get a header value (case-insensitive lookup).

        Example:
            request.get_header("Content-Type")
            request.get_header("content-type")   # same value
        """
        return self.normalized_headers.get(name.lower(), default)

    def get_query(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Get a query string parameter."""
        return self.query_params.get(name, default)
