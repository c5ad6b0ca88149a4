"""
=============================================================================
HEADER NAMES AND NORMALIZATION
=============================================================================

Header names are case-insensitive (RFC 7230 §3.2), but an API gateway
forwards them with whatever case the client used:

    curl -H "content-type: application/json"   → "content-type"
    browser fetch()                             → "Content-Type"
    some proxies                                → "CONTENT-TYPE"

Instead of calling .lower() at every lookup, the dispatcher normalizes the
whole mapping once, up front, and then looks names up in lower case.

=============================================================================
"""

from typing import Dict, Mapping, Optional


# Request headers the dispatcher inspects, in canonical (lower) case
CONTENT_TYPE = "content-type"
ACCEPT = "accept"
ORIGIN = "origin"
ACCESS_CONTROL_REQUEST_METHOD = "access-control-request-method"
ACCESS_CONTROL_REQUEST_HEADERS = "access-control-request-headers"

# Response headers, in the case they are sent
ACCESS_CONTROL_ALLOW_ORIGIN = "Access-Control-Allow-Origin"
ACCESS_CONTROL_ALLOW_HEADERS = "Access-Control-Allow-Headers"
ACCESS_CONTROL_ALLOW_METHODS = "Access-Control-Allow-Methods"

HEADER_LIST_SEPARATOR = ","


def normalize_headers(headers: Optional[Mapping[str, str]]) -> Dict[str, str]:
    """
    Return a copy of ``headers`` with every name lower-cased.

    Values are kept as they are and must be strings. When two names collide after folding
    ("Accept" and "accept"), the one that comes later in iteration order
    wins.

    Args:
        headers: Header name → value, names in any case. None is treated
                 as "no headers" (the gateway sends null when there are none).

    Returns:
        A new dict with lower-case names.

    Raises:
        TypeError: If ``headers`` is not a mapping or a value is not a string.

    Example:
        >>> normalize_headers({"Content-Type": "text/plain", "ACCEPT": "*/*"})
        {'content-type': 'text/plain', 'accept': '*/*'}
    """
    if headers is None:
        return {}
    if not isinstance(headers, Mapping):
        raise TypeError(f"headers must be a mapping, not {type(headers).__name__}")
    for name, value in headers.items():
        if not isinstance(value, str):
            raise TypeError(
                f"header {name!r} must have a string value, not {type(value).__name__}"
            )
    return {str(name).lower(): value for name, value in headers.items()}


def split_header_list(value: str) -> list[str]:
    """
    Split a comma-separated header value into lower-cased tokens.

    ALL whitespace is removed (not only around the commas), so
    ``"X-Foo, x bar"`` becomes ``["x-foo", "xbar"]``. Trailing empty
    entries are dropped; order is preserved.

    Used for Access-Control-Request-Headers.
    """
    collapsed = "".join(value.split())
    tokens = collapsed.split(HEADER_LIST_SEPARATOR)
    while len(tokens) > 1 and tokens[-1] == "":
        tokens.pop()
    return [token.lower() for token in tokens]
