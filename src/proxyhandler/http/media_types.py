"""
=============================================================================
MEDIA TYPE PARSING
=============================================================================

Parses Content-Type and Accept header values into MediaType descriptors.

=============================================================================
WHAT IS A MEDIA TYPE?
=============================================================================

A media type (a.k.a. MIME type) tells the other side how to interpret a
body. Content-Type describes what the client SENT; Accept lists what the
client is willing to RECEIVE.

    ┌────────────────────────────────────────────────────────────────────┐
    │                    MEDIA TYPE SYNTAX (RFC 7231 §3.1.1.1)           │
    ├────────────────────────────────────────────────────────────────────┤
    │                                                                     │
    │   application/json;charset=utf-8                                   │
    │   ─────┬───── ──┬─ ──────┬──────                                   │
    │        │        │        │                                          │
    │      type   subtype   parameter (attribute=value)                  │
    │                                                                     │
    │   Wildcards are allowed in Accept:                                 │
    │     */*            any type                                        │
    │     text/*         any text subtype                                │
    │     */json         INVALID (wildcard type needs wildcard subtype)  │
    │                                                                     │
    └────────────────────────────────────────────────────────────────────┘

Both headers may carry several media types separated by commas:

    Accept: application/json, text/plain;q=0.5, */*;q=0.1

The list ORDER is kept as sent. Ranking by q-value is left to the method
handlers, which know what they can produce.

=============================================================================
PARSING RULES
=============================================================================

1. Split the header value on ","
2. Remove ALL whitespace from each piece (not only at the edges)
3. Parse each piece as type "/" subtype *( ";" attribute "=" value )
4. Any bad piece fails the whole header; no partial list is returned

Type, subtype and attribute names are tokens: visible ASCII characters
other than the RFC 2045 "tspecials" ()<>@,;:\\"/[]?=

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Dict, Optional


MEDIA_TYPE_LIST_SEPARATOR = ","
WILDCARD = "*"

# RFC 2045 tspecials - never part of a token
_TSPECIALS = frozenset('()<>@,;:\\"/[]?=')

# Some application/* types are text as well
_TEXT_APPLICATION_TYPES = frozenset({
    "application/json",
    "application/xml",
    "application/javascript",
    "application/x-www-form-urlencoded",
    "image/svg+xml",
})


class MalformedMediaTypeError(ValueError):
    """
    Raised when a media type string is not syntactically valid.

    Distinct from a *missing* header: the header was sent, but one of its
    entries could not be parsed. Carries the offending token so the 400
    response can say which entry was wrong.
    """

    def __init__(self, token: str, reason: str, status_code: int = 400):
        super().__init__(f"Could not parse '{token}': {reason}")
        self.token = token
        self.reason = reason
        self.status_code = status_code


def _is_token_char(char: str) -> bool:
    return 32 < ord(char) < 127 and char not in _TSPECIALS


class _Tokenizer:
    """Cursor over a media type string."""

    def __init__(self, text: str):
        self.text = text
        self.position = 0

    @property
    def has_more(self) -> bool:
        return self.position < len(self.text)

    def peek(self) -> str:
        return self.text[self.position] if self.has_more else ""

    def skip_whitespace(self) -> None:
        while self.has_more and self.text[self.position] in " \t":
            self.position += 1

    def consume_char(self, expected: str) -> None:
        if self.peek() != expected:
            found = repr(self.peek()) if self.has_more else "end of input"
            raise ValueError(
                f"expected {expected!r} at position {self.position}, found {found}"
            )
        self.position += 1

    def consume_token(self) -> str:
        start = self.position
        while self.has_more and _is_token_char(self.text[self.position]):
            self.position += 1
        if self.position == start:
            raise ValueError(f"expected a token at position {start}")
        return self.text[start:self.position]

    def consume_quoted_string(self) -> str:
        self.consume_char('"')
        chars = []
        while True:
            if not self.has_more:
                raise ValueError("unterminated quoted string")
            char = self.text[self.position]
            self.position += 1
            if char == '"':
                return "".join(chars)
            if char == "\\":
                if not self.has_more:
                    raise ValueError("dangling escape in quoted string")
                char = self.text[self.position]
                self.position += 1
                if not char.isascii():
                    raise ValueError(f"non-ASCII character {char!r} in quoted string")
            elif not char.isascii() or char == "\r":
                raise ValueError(f"character {char!r} not allowed in quoted string")
            chars.append(char)


@dataclass(frozen=True)
class MediaType:
    """
    A parsed media type: ``type/subtype`` plus ordered parameters.

    Equality is structural, so parsing the same string twice yields equal
    values. Names are stored lower-cased, as is the charset value.
    """

    type: str
    subtype: str
    parameters: tuple[tuple[str, str], ...] = field(default=())

    # =========================================================================
    # PARSING
    # =========================================================================

    @classmethod
    def parse(cls, text: str) -> "MediaType":
        """
        Parse a single media type.

        Args:
            text: e.g. "application/json;charset=utf-8"

        Returns:
            The parsed MediaType.

        Raises:
            MalformedMediaTypeError: If ``text`` is not a valid media type.

        Examples:
            >>> MediaType.parse("text/html")
            MediaType(type='text', subtype='html', parameters=())

            >>> MediaType.parse("bad/type/broken")
            Traceback (most recent call last):
            ...
            MalformedMediaTypeError: Could not parse 'bad/type/broken': ...
        """
        tokenizer = _Tokenizer(text)
        try:
            type_ = tokenizer.consume_token().lower()
            tokenizer.consume_char("/")
            subtype = tokenizer.consume_token().lower()

            parameters = []
            while True:
                tokenizer.skip_whitespace()
                if not tokenizer.has_more:
                    break
                tokenizer.consume_char(";")
                tokenizer.skip_whitespace()
                attribute = tokenizer.consume_token().lower()
                tokenizer.consume_char("=")
                if tokenizer.peek() == '"':
                    value = tokenizer.consume_quoted_string()
                else:
                    value = tokenizer.consume_token()
                if attribute == "charset":
                    value = value.lower()
                parameters.append((attribute, value))
        except ValueError as e:
            raise MalformedMediaTypeError(text, str(e)) from None

        if type_ == WILDCARD and subtype != WILDCARD:
            raise MalformedMediaTypeError(
                text, "a wildcard type cannot be used with a non-wildcard subtype"
            )

        return cls(type=type_, subtype=subtype, parameters=tuple(parameters))

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def essence(self) -> str:
        """``type/subtype`` without parameters."""
        return f"{self.type}/{self.subtype}"

    @property
    def params(self) -> Dict[str, str]:
        """Parameters as a dict (last value wins for repeated attributes)."""
        return dict(self.parameters)

    @property
    def charset(self) -> Optional[str]:
        """The charset parameter, if any."""
        return self.params.get("charset")

    @property
    def quality(self) -> float:
        """The q parameter (1.0 when absent or unparseable)."""
        try:
            return float(self.params.get("q", "1"))
        except ValueError:
            return 1.0

    @property
    def has_wildcard(self) -> bool:
        return self.type == WILDCARD or self.subtype == WILDCARD

    @property
    def is_text(self) -> bool:
        """
        Whether bodies of this type are text.

        All text/* types are; a few application/* types are too.
        """
        return self.type == "text" or self.essence in _TEXT_APPLICATION_TYPES

    # =========================================================================
    # MATCHING
    # =========================================================================

    def matches(self, other: "MediaType") -> bool:
        """
        Check whether ``other`` falls within the range described by self.

        Wildcards on self match anything; parameters are ignored.

        Examples:
            >>> MediaType.parse("text/*").matches(MediaType.parse("text/plain"))
            True
            >>> MediaType.parse("text/plain").matches(MediaType.parse("text/*"))
            False
        """
        if self.type != WILDCARD and self.type != other.type:
            return False
        if self.subtype != WILDCARD and self.subtype != other.subtype:
            return False
        return True

    def without_parameters(self) -> "MediaType":
        return MediaType(self.type, self.subtype)

    def __str__(self) -> str:
        rendered = [self.essence]
        for attribute, value in self.parameters:
            if value and all(_is_token_char(c) for c in value):
                rendered.append(f"{attribute}={value}")
            else:
                escaped = value.replace("\\", "\\\\").replace('"', '\\"')
                rendered.append(f'{attribute}="{escaped}"')
        return "; ".join(rendered)


# =============================================================================
# PUBLIC FUNCTIONS
# =============================================================================

def parse_media_types(value: str) -> list[MediaType]:
    """
    Parse a comma-separated header value into an ordered list of MediaType.

    Args:
        value: Content-Type or Accept header value.

    Returns:
        The media types, in the order they were sent.

    Raises:
        MalformedMediaTypeError: If any entry is malformed. Nothing is
            returned for the entries that did parse.

    Examples:
        >>> [str(m) for m in parse_media_types("application/json, text/plain")]
        ['application/json', 'text/plain']

        >>> parse_media_types("application/ json")[0].essence
        'application/json'
    """
    entries = value.split(MEDIA_TYPE_LIST_SEPARATOR)

    # "a/b," lists an empty trailing entry; ignore it
    while len(entries) > 1 and entries[-1] == "":
        entries.pop()

    return [MediaType.parse("".join(entry.split())) for entry in entries]


def best_match(
    candidates: list[MediaType],
    accepted: list[MediaType],
) -> Optional[MediaType]:
    """
    Pick the first candidate that any accepted range matches.

    Accepted ranges are tried by descending q-value, ties keeping header
    order; ranges with q=0 are skipped. Handlers use this to choose a
    response representation.

    Returns:
        The chosen candidate, or None if nothing is acceptable.
    """
    ranked = sorted(
        (media_range for media_range in accepted if media_range.quality > 0),
        key=lambda media_range: -media_range.quality,
    )
    for media_range in ranked:
        for candidate in candidates:
            if media_range.matches(candidate):
                return candidate
    return None
