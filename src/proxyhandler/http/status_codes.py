"""
=============================================================================
HTTP STATUS CODES
=============================================================================

Status codes produced by the dispatcher and by the method handlers it
delegates to, with their reason phrases.

=============================================================================
STATUS CODES USED BY THE DISPATCH PIPELINE
=============================================================================

    ┌────────┬────────────────────────────────────────────────────────────┐
    │  Code  │ When the dispatcher produces it                            │
    ├────────┼────────────────────────────────────────────────────────────┤
    │  200   │ CORS preflight approved                                    │
    │  400   │ Unregistered method, malformed media type,                 │
    │        │ any CORS preflight rejection                               │
    │  415   │ Missing Content-Type or Accept header                      │
    │  500   │ Mis-configured service, malformed request structure,       │
    │        │ unexpected failure inside a handler                        │
    └────────┴────────────────────────────────────────────────────────────┘

Handlers are free to return any other code; the dispatcher passes their
responses through untouched (apart from the CORS origin header).

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes and reason phrases.

    Extends IntEnum, so a member compares equal to its integer code and can
    be stored directly in ``ProxyResponse.status_code``:

        >>> HTTPStatus.UNSUPPORTED_MEDIA_TYPE == 415
        True
        >>> HTTPStatus.UNSUPPORTED_MEDIA_TYPE.phrase
        'Unsupported Media Type'
    """

    # =========================================================================
    # 2xx SUCCESS
    # =========================================================================
    OK = 200
    CREATED = 201
    ACCEPTED = 202
    NO_CONTENT = 204

    # =========================================================================
    # 4xx CLIENT ERRORS
    # =========================================================================
    BAD_REQUEST = 400                   # Malformed request or CORS rejection
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    METHOD_NOT_ALLOWED = 405
    NOT_ACCEPTABLE = 406                # No acceptable representation for Accept
    CONFLICT = 409
    UNSUPPORTED_MEDIA_TYPE = 415        # Content-Type / Accept missing
    UNPROCESSABLE_ENTITY = 422
    TOO_MANY_REQUESTS = 429

    # =========================================================================
    # 5xx SERVER ERRORS
    # =========================================================================
    INTERNAL_SERVER_ERROR = 500         # Catch-all for every 500 tier
    NOT_IMPLEMENTED = 501
    BAD_GATEWAY = 502
    SERVICE_UNAVAILABLE = 503
    GATEWAY_TIMEOUT = 504

    @property
    def phrase(self) -> str:
        """Get the reason phrase for this status code."""
        return _STATUS_PHRASES.get(self, "Unknown")

    @property
    def is_success(self) -> bool:
        """Check if this is a 2xx (success) status code."""
        return 200 <= self < 300

    @property
    def is_client_error(self) -> bool:
        """Check if this is a 4xx (client error) status code."""
        return 400 <= self < 500

    @property
    def is_server_error(self) -> bool:
        """Check if this is a 5xx (server error) status code."""
        return 500 <= self < 600


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.CREATED: "Created",
    HTTPStatus.ACCEPTED: "Accepted",
    HTTPStatus.NO_CONTENT: "No Content",

    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.UNAUTHORIZED: "Unauthorized",
    HTTPStatus.FORBIDDEN: "Forbidden",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.METHOD_NOT_ALLOWED: "Method Not Allowed",
    HTTPStatus.NOT_ACCEPTABLE: "Not Acceptable",
    HTTPStatus.CONFLICT: "Conflict",
    HTTPStatus.UNSUPPORTED_MEDIA_TYPE: "Unsupported Media Type",
    HTTPStatus.UNPROCESSABLE_ENTITY: "Unprocessable Entity",
    HTTPStatus.TOO_MANY_REQUESTS: "Too Many Requests",

    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
    HTTPStatus.NOT_IMPLEMENTED: "Not Implemented",
    HTTPStatus.BAD_GATEWAY: "Bad Gateway",
    HTTPStatus.SERVICE_UNAVAILABLE: "Service Unavailable",
    HTTPStatus.GATEWAY_TIMEOUT: "Gateway Timeout",
}
