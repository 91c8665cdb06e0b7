"""
Scalar queries: strings, numbers, regular expression matches and links.
"""

import math
import re
from typing import Any, Optional, Pattern, Union
from urllib.parse import quote, urljoin, urlsplit

from gleaner.document.base import Document
from gleaner.models import MISSING
from gleaner.query.base import Query
from gleaner.utils.errors import MalformedLinkError


class StringQuery(Query):
    """Resolves a value as a string (``""`` when missing)."""

    def empty_value(self) -> Any:
        return ""

    async def build(self, value: Any, document: Document) -> Any:
        return str(value)


_DECIMAL_PATTERN = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_INTEGER_PATTERN = re.compile(r"[+-]?\d+")
_INFINITY_PATTERN = re.compile(r"[+-]?Infinity")
_PREFIXED_PATTERN = re.compile(r"0[xX][0-9a-fA-F]+|0[oO][0-7]+|0[bB][01]+")


def to_number(value: Any) -> Union[int, float]:
    """
    Coerce a value to a number; unparseable values become NaN.

    Text must be a plain decimal (optionally signed, with a fraction or
    exponent), ``Infinity``, or an unsigned ``0x``/``0o``/``0b`` literal.
    Python-only spellings such as ``1_000``, ``inf`` or ``nan`` are NaN.
    Blank text and None are 0.
    """
    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return value

    text = str(value).strip()
    if text == "":
        return 0
    if _INTEGER_PATTERN.fullmatch(text):
        return int(text)
    if _DECIMAL_PATTERN.fullmatch(text):
        return float(text)
    if _INFINITY_PATTERN.fullmatch(text):
        return -math.inf if text.startswith("-") else math.inf
    if _PREFIXED_PATTERN.fullmatch(text):
        return int(text, 0)
    return math.nan


class NumberQuery(Query):
    """Resolves a value as a number (NaN when missing)."""

    def empty_value(self) -> Any:
        return math.nan

    async def build(self, value: Any, document: Document) -> Any:
        return to_number(value)


class RegexQuery(Query):
    """
    Matches a pattern against the string found at the selector.

    With a ``group`` the value is that capture group; without one it is the
    list ``[whole match, group 1, group 2, ...]``. No match, a missing string
    or a group that did not take part in the match all count as missing.
    """

    def __init__(
        self,
        selector: Any,
        pattern: Union[str, Pattern[str]],
        group: Optional[Union[int, str]] = None,
        **options: Any,
    ) -> None:
        self.pattern = re.compile(pattern) if isinstance(pattern, str) else pattern
        self.group = group
        super().__init__(selector, **options)

    def empty_value(self) -> Any:
        return [] if self.group is None else ""

    async def find(self, document: Document) -> Any:
        string = await super().find(document)

        if string is MISSING or string is None:
            return MISSING

        match = self.pattern.search(str(string))

        if match is None:
            return MISSING

        if self.group is None:
            return [match.group(0), *match.groups()]

        try:
            value = match.group(self.group)
        except IndexError:
            return MISSING

        return MISSING if value is None else value


class UriQuery(StringQuery):
    """
    Resolves a link and makes it absolute against ``base``.

    The link is read with ``document.uri``, so for HTML documents the
    ``href`` attribute is preferred over text. A link that cannot be
    resolved raises MalformedLinkError instead of falling back to the
    default.
    """

    def __init__(self, selector: Any = None, base: str = "", **options: Any) -> None:
        self.base = base or ""
        super().__init__(selector, **options)

    async def find(self, document: Document) -> Any:
        uri = document.uri(self.selector)

        if uri is MISSING or uri is None:
            return MISSING

        return resolve_uri(self.base, str(uri))


LinkQuery = UriQuery

# Characters percent-encoded in resolved links instead of being rejected
ESCAPED_CHARACTERS = frozenset("\t\n\r \"'<>\\^`{|}")


def resolve_uri(base: str, uri: str) -> str:
    """
    Resolve ``uri`` against ``base`` using standard relative resolution.

    Spaces, quotes and other characters that may not appear in a URI are
    percent-encoded, so ``"/search?q=a b"`` becomes ``"/search?q=a%20b"``.

    Raises:
        MalformedLinkError: If either URI cannot be parsed (e.g. a bad port
            or IPv6 host)
    """
    try:
        resolved = urljoin(base, uri.strip())
        parts = urlsplit(resolved)
        # Accessing the port validates it
        parts.port
    except ValueError as e:
        raise MalformedLinkError(uri, base, str(e))

    return "".join(quote(character) if character in ESCAPED_CHARACTERS else character for character in resolved)
