"""
Document adapter for decoded JSON (or any nested mapping/list data).

Selectors are dotted paths with optional bracket indexes, e.g.
``"items[0].author.name"``, or pre-split sequences of keys/indexes.
"""

import json
import re
from collections.abc import Mapping, Sequence
from typing import Any, Callable, Tuple, Union

from gleaner.document.base import Document, DocumentFactory
from gleaner.models import MISSING, DocumentType

JSONSelector = Union[Tuple[Any, ...], Callable[..., Any]]

_SEGMENT_PATTERN = re.compile(r"[^.\[\]]+")


def split_path(path: str) -> Tuple[str, ...]:
    """Split ``"a.b[0].c"`` into ``("a", "b", "0", "c")``."""
    return tuple(_SEGMENT_PATTERN.findall(path))


class JSONDocument(Document):
    """Document over decoded JSON data."""

    kind = DocumentType.JSON.value

    @classmethod
    def load_store(cls, body: Any) -> Any:
        """Decode text/bytes as JSON; anything else is taken as decoded data."""
        if isinstance(body, (str, bytes, bytearray)):
            return json.loads(body)
        return body

    def format_selector(self, selector: Any) -> JSONSelector:
        if callable(selector):
            return selector
        if selector is None:
            return ()
        if isinstance(selector, (list, tuple)):
            return tuple(selector)
        return split_path(str(selector))

    def query(self, selector: JSONSelector) -> Any:
        if callable(selector):
            result = selector(self.store, self.root)
            return MISSING if result is None else result

        current = self.root
        for segment in selector:
            current = self._step(current, segment)
            if current is MISSING:
                return MISSING

        return current

    @staticmethod
    def _step(current: Any, segment: Any) -> Any:
        if isinstance(current, Mapping):
            if segment in current:
                return current[segment]
            # Path strings carry keys as text, so "1" also matches a key of 1
            if isinstance(segment, str) and segment.lstrip("-").isdigit():
                return current.get(int(segment), MISSING)
            return MISSING

        if isinstance(current, Sequence) and not isinstance(current, (str, bytes)):
            try:
                index = int(segment)
            except (TypeError, ValueError):
                return MISSING
            if 0 <= index < len(current):
                return current[index]
            return MISSING

        return MISSING


DocumentFactory.register(JSONDocument.kind, JSONDocument)
