"""
=============================================================================
PROXY RESPONSE AND RESPONSE BUILDER
=============================================================================

The outbound response handed back to the invocation host.

=============================================================================
PROXY INTEGRATION RESPONSE
=============================================================================

The gateway does the HTTP serialization for us; we only produce the
structured value it expects:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                   PROXY RESPONSE (what the host receives)           │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   {                                                                  │
    │     "statusCode": 200,                                               │
    │     "headers": {                                                     │
    │       "Content-Type": "application/json; charset=utf-8",            │
    │       "Access-Control-Allow-Origin": "*"                            │
    │     },                                                               │
    │     "body": "{\"id\": 42}"                                          │
    │   }                                                                  │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
IMMUTABILITY AND THE BUILDER PATTERN
=============================================================================

ProxyResponse is frozen. The dispatcher must add or overwrite headers on
whatever a handler returned, so instead of mutating it derives a copy:

    response = handler.handle(...)
    response = response.with_header("Access-Control-Allow-Origin", "*")
                        ─────┬─────
                             └── new ProxyResponse, original untouched

Responses are assembled with a fluent builder:

    ResponseBuilder()
        .status(HTTPStatus.CREATED)
        .json({"id": 42})
        .header("Location", "/orders/42")
        .build()

and an existing response can be turned back into a builder:

    response.builder().header("X-Trace", trace_id).build()

=============================================================================
"""

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Union
import json

from .status_codes import HTTPStatus


@dataclass(frozen=True)
class ProxyResponse:
    """
    Immutable outbound response.

    ``headers`` is exposed as a read-only mapping; use ``with_header()`` or
    ``builder()`` to obtain a modified copy.
    """

    status_code: int = HTTPStatus.OK
    headers: Mapping[str, str] = field(default_factory=dict)
    body: str = ""

    def __post_init__(self):
        # Freeze a private copy so callers can't mutate through their dict
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))
        # The gateway requires a string body
        if self.body is None:
            object.__setattr__(self, "body", "")
        elif isinstance(self.body, bytes):
            object.__setattr__(self, "body", self.body.decode("utf-8"))

    @property
    def status(self) -> Union[HTTPStatus, int]:
        """The status code as an HTTPStatus when it is a known one."""
        try:
            return HTTPStatus(self.status_code)
        except ValueError:
            return self.status_code

    def with_header(self, name: str, value: str) -> "ProxyResponse":
        """
        Derive a copy with one header set (added or replaced).

        Args:
            name: Header name
            value: Header value

        Returns:
            A new ProxyResponse; self is left unchanged.
        """
        return self.with_headers({name: value})

    def with_headers(self, headers: Mapping[str, str]) -> "ProxyResponse":
        """
        Derive a copy with several headers set.

        Header names are case-insensitive, so an existing
        "access-control-allow-origin" is replaced by a new
        "Access-Control-Allow-Origin" rather than sent alongside it.
        """
        replaced = {name.lower() for name in headers}
        merged = {
            name: value for name, value in self.headers.items()
            if name.lower() not in replaced
        }
        merged.update(headers)
        return replace(self, headers=merged)

    def builder(self) -> "ResponseBuilder":
        """Get a ResponseBuilder seeded with this response's fields."""
        return (ResponseBuilder()
            .status(self.status_code)
            .headers(self.headers)
            .body(self.body))

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize to the structure the invocation host expects.

        Returns:
            {"statusCode": int, "headers": dict, "body": str}
        """
        return {
            "statusCode": int(self.status_code),
            "headers": dict(self.headers),
            "body": self.body,
        }


class ResponseBuilder:
    """
    Fluent builder for ProxyResponse.

    Every method except build() returns self, so calls chain:

        builder.status(415).text("No accept header").build()
    """

    def __init__(self):
        self._status_code: int = HTTPStatus.OK
        self._headers: Dict[str, str] = {}
        self._body: str = ""

    # =========================================================================
    # STATUS
    # =========================================================================

    def status(self, status: Union[HTTPStatus, int]) -> "ResponseBuilder":
        """Set the status code."""
        self._status_code = status
        return self

    # =========================================================================
    # HEADERS
    # =========================================================================

    def header(self, name: str, value: str) -> "ResponseBuilder":
        """Set a single header."""
        self._headers[name] = value
        return self

    def headers(self, headers: Mapping[str, str]) -> "ResponseBuilder":
        """Set several headers at once."""
        self._headers.update(headers)
        return self

    def content_type(self, content_type: str) -> "ResponseBuilder":
        return self.header("Content-Type", content_type)

    # =========================================================================
    # BODY
    # =========================================================================

    def body(self, body: Optional[Union[str, bytes]]) -> "ResponseBuilder":
        """
        Set the body as-is.

        Bytes are decoded as UTF-8; None becomes the empty string, since
        the gateway requires a string body.
        """
        if body is None:
            self._body = ""
        elif isinstance(body, bytes):
            self._body = body.decode("utf-8")
        else:
            self._body = body
        return self

    def text(self, text: str, content_type: Optional[str] = None) -> "ResponseBuilder":
        """
        Set a plain text body.

        The Content-Type header is only set when ``content_type`` is given:
        the dispatcher's own error bodies go out without one.
        """
        self._body = text
        if content_type:
            self._headers["Content-Type"] = content_type
        return self

    def json(self, data: Any, pretty: bool = False) -> "ResponseBuilder":
        """
        Set a JSON body and its Content-Type.

        Args:
            data: Any JSON-serializable value
            pretty: Indent the output for readability
        """
        indent = 2 if pretty else None
        self._body = json.dumps(data, indent=indent, ensure_ascii=False)
        self._headers["Content-Type"] = "application/json; charset=utf-8"
        return self

    # =========================================================================
    # BUILD
    # =========================================================================

    def build(self) -> ProxyResponse:
        """Build the immutable ProxyResponse."""
        return ProxyResponse(
            status_code=self._status_code,
            headers=self._headers,
            body=self._body,
        )


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================
#
# Quick one-liners for handlers:
#
#     return ok({"id": 42})
#     return bad_request("sku is required")
#
# =============================================================================

def ok(body: Union[str, dict, list] = "", content_type: Optional[str] = None) -> ProxyResponse:
    """
    Create a 200 OK response.

    dict/list bodies are serialized as JSON; strings are sent as they are.
    """
    builder = ResponseBuilder().status(HTTPStatus.OK)
    if isinstance(body, (dict, list)):
        builder.json(body)
    else:
        builder.text(body, content_type)
    return builder.build()


def bad_request(message: str = "Bad Request") -> ProxyResponse:
    """Create a 400 Bad Request response with a plain string body."""
    return ResponseBuilder().status(HTTPStatus.BAD_REQUEST).text(message).build()


def unsupported_media_type(message: str = "Unsupported Media Type") -> ProxyResponse:
    """Create a 415 Unsupported Media Type response with a plain string body."""
    return ResponseBuilder().status(HTTPStatus.UNSUPPORTED_MEDIA_TYPE).text(message).build()


def internal_error(message: str = "Internal Server Error") -> ProxyResponse:
    """
    Create a 500 response with a plain string body.

    Don't put internal details in ``message``; see errors.server_error for
    the operator-facing envelope.
    """
    return ResponseBuilder().status(HTTPStatus.INTERNAL_SERVER_ERROR).text(message).build()
