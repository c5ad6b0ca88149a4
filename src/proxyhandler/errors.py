"""
=============================================================================
ERROR ENVELOPES
=============================================================================

Every failure the dispatcher can detect is turned into a terminal
ProxyResponse here, so nothing but host-fatal exceptions ever crosses the
dispatch boundary.

=============================================================================
ERROR TAXONOMY
=============================================================================

    ┌──────────────────────────────────────┬────────┬──────────────────────┐
    │ Kind                                 │ Status │ Body                 │
    ├──────────────────────────────────────┼────────┼──────────────────────┤
    │ Configuration acquisition failed     │  500   │ JSON message + cause │
    │ Method not registered                │  400   │ plain string         │
    │ Content-Type / Accept missing        │  415   │ plain string         │
    │ Malformed media type                 │  400   │ plain string         │
    │ CORS: Origin missing                 │  400   │ plain string         │
    │ CORS: request-method missing         │  400   │ plain string         │
    │ CORS: target method not registered   │  400   │ plain string         │
    │ CORS: request-headers missing        │  400   │ plain string         │
    │ CORS: required headers not proposed  │  400   │ plain string         │
    │ Request structurally malformed       │  500   │ plain string         │
    │ Unexpected failure while handling    │  500   │ JSON message + cause │
    └──────────────────────────────────────┴────────┴──────────────────────┘

The two JSON envelopes carry the full traceback in "cause". The
"Failed to parse" body never carries one.

=============================================================================
"""

from typing import Iterable, Optional
import traceback

from .http.response import ProxyResponse, ResponseBuilder
from .http.status_codes import HTTPStatus


MISCONFIGURED_MESSAGE = (
    "This service is mis-configured. Please contact your system administrator.\n"
)


class ConfigurationError(Exception):
    """
    Raised when the per-invocation configuration cannot be acquired.

    Wraps whatever the configuration factory raised; the original is kept
    as ``__cause__`` and is what ends up in the response envelope.
    """

    status_code = 500

    def __init__(self, cause: BaseException):
        super().__init__(MISCONFIGURED_MESSAGE)
        self.__cause__ = cause


# =============================================================================
# 500 TIERS
# =============================================================================

def format_cause(error: BaseException) -> str:
    """Render the full traceback of ``error`` as text."""
    return "".join(
        traceback.format_exception(type(error), error, error.__traceback__)
    )


def server_error(error: BaseException, base_message: Optional[str] = None) -> ProxyResponse:
    """
    Build the 500 JSON envelope.

    Body:
        {"message": "<base_message>\\n<error message>", "cause": "<traceback>"}

    Args:
        error: The exception being reported.
        base_message: Fixed text placed before the error's own message.
    """
    message = ""
    if base_message:
        message = base_message + "\n"
    message += str(error)

    return (ResponseBuilder()
        .status(HTTPStatus.INTERNAL_SERVER_ERROR)
        .json({"message": message, "cause": format_cause(error)})
        .build())


def configuration_error(error: ConfigurationError) -> ProxyResponse:
    """The fixed-message 500 for a configuration failure."""
    cause = error.__cause__ or error
    return server_error(cause, MISCONFIGURED_MESSAGE)


def parse_failure(request: object) -> ProxyResponse:
    """500 for a structurally malformed request. Never includes a traceback."""
    return _plain(HTTPStatus.INTERNAL_SERVER_ERROR, f"Failed to parse: {request!r}")


# =============================================================================
# DISPATCH REJECTIONS
# =============================================================================

def unsupported_method(method: str) -> ProxyResponse:
    return _plain(HTTPStatus.BAD_REQUEST, f"Lambda cannot handle the method {method}")


def missing_header(header: str) -> ProxyResponse:
    """415 for a missing content negotiation header."""
    return _plain(HTTPStatus.UNSUPPORTED_MEDIA_TYPE, f"No {header} header")


def malformed_media_type(detail: str) -> ProxyResponse:
    return _plain(HTTPStatus.BAD_REQUEST, f"Malformed media type. {detail}")


# =============================================================================
# CORS PREFLIGHT REJECTIONS
# =============================================================================

def cors_missing_header(header: str) -> ProxyResponse:
    return _plain(
        HTTPStatus.BAD_REQUEST,
        f"Options method should include the {header} header",
    )


def cors_headers_not_present(headers: Iterable[str]) -> ProxyResponse:
    """400 listing the headers a preflight failed to propose."""
    return _plain(
        HTTPStatus.BAD_REQUEST,
        f"The required header(s) not present: {', '.join(headers)}",
    )


def _plain(status: HTTPStatus, message: str) -> ProxyResponse:
    return ResponseBuilder().status(status).text(message).build()
