"""
=============================================================================
HTTP DATA CARRIERS
=============================================================================

The request/response values and the header-level parsing the dispatch
pipeline relies on.

    ┌─────────────────────────────────────────────────────────────────────┐
    │ REQUEST (request.py)                                                │
    │ ─────────────────────────────────────────────────────────────────── │
    │ Immutable ProxyRequest built from the gateway event                 │
    │   • http_method, headers (case as received), body                   │
    │   • path / query / path params carried for handlers                 │
    │   • RequestShapeError for events that aren't requests at all        │
    └─────────────────────────────────────────────────────────────────────┘

    ┌─────────────────────────────────────────────────────────────────────┐
    │ RESPONSE (response.py)                                              │
    │ ─────────────────────────────────────────────────────────────────── │
    │ Immutable ProxyResponse + fluent ResponseBuilder                    │
    │   • with_header() derives a modified copy                           │
    │   • to_dict() → {"statusCode", "headers", "body"}                   │
    └─────────────────────────────────────────────────────────────────────┘

    ┌─────────────────────────────────────────────────────────────────────┐
    │ HEADERS (headers.py)                                                │
    │ ─────────────────────────────────────────────────────────────────── │
    │ Canonical header names, normalize_headers(), split_header_list()    │
    └─────────────────────────────────────────────────────────────────────┘

    ┌─────────────────────────────────────────────────────────────────────┐
    │ MEDIA TYPES (media_types.py)                                        │
    │ ─────────────────────────────────────────────────────────────────── │
    │ "application/json, text/*" → [MediaType(...), MediaType(...)]       │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .request import ProxyRequest, RequestShapeError
from .response import (
    ProxyResponse,
    ResponseBuilder,
    ok,                      # 200 OK
    bad_request,             # 400 Bad Request
    unsupported_media_type,  # 415 Unsupported Media Type
    internal_error,          # 500 Internal Server Error
)
from .headers import normalize_headers, split_header_list
from .media_types import (
    MediaType,
    MalformedMediaTypeError,
    parse_media_types,
    best_match,
)
from .status_codes import HTTPStatus

__all__ = [
    # Request
    "ProxyRequest",
    "RequestShapeError",

    # Response
    "ProxyResponse",
    "ResponseBuilder",
    "ok",
    "bad_request",
    "unsupported_media_type",
    "internal_error",

    # Headers
    "normalize_headers",
    "split_header_list",

    # Media types
    "MediaType",
    "MalformedMediaTypeError",
    "parse_media_types",
    "best_match",

    # Status codes
    "HTTPStatus",
]
