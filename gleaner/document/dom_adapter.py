"""
HTML/XML document adapter backed by BeautifulSoup.

Selectors have the form ``"<css selector>/<attribute>"``. The css part is
matched with ``Tag.select`` relative to the cursor; an empty css part
addresses the cursor itself. The attribute part is optional: without it,
values resolve to the text of the selection.
"""

from typing import Any, Callable, List, Optional, Sequence, Tuple, Union

from bs4 import BeautifulSoup, Tag

from gleaner.config import get_settings
from gleaner.document.base import Document, DocumentFactory
from gleaner.models import MISSING, DocumentType

DOMSelector = Union[Tuple[str, Optional[str]], Callable[..., Any]]

# Attributes tried, in order, when a link is requested without one
LINK_ATTRIBUTES: Tuple[str, ...] = ("href",)


def _is_selection(result: Any) -> bool:
    if isinstance(result, Tag):
        return True
    return isinstance(result, (list, tuple)) and all(isinstance(el, Tag) for el in result)


def _attribute(element: Tag, name: str) -> Any:
    value = element.get(name)
    if isinstance(value, list):
        return " ".join(value)
    return value


class DOMDocument(Document):
    """Document over a parsed HTML tree."""

    kind = DocumentType.DOM.value

    @classmethod
    def load_store(cls, body: Any) -> BeautifulSoup:
        """Parse markup; an existing soup is used as is."""
        if isinstance(body, BeautifulSoup):
            return body
        return BeautifulSoup(body, get_settings().html_parser)

    def format_selector(self, selector: Any) -> DOMSelector:
        if callable(selector):
            return selector
        if selector is None:
            return ("", None)

        css, _, attr = str(selector).partition("/")
        return (css.strip(), attr.strip() or None)

    def query(self, selector: DOMSelector) -> Any:
        if callable(selector):
            result = selector(self.store, self.root)
            if result is None:
                return MISSING
            if isinstance(result, Tag):
                return [result]
            return result

        css, _ = selector
        if css == "":
            return [self.root]

        return self.root.select(css)

    def query_value(self, selector: DOMSelector) -> Any:
        return self._extract(selector, ())

    def query_uri(self, selector: DOMSelector) -> Any:
        return self._extract(selector, LINK_ATTRIBUTES, text_fallback=True)

    def query_children(self, selector: DOMSelector) -> Any:
        result = self.query(selector)

        if not _is_selection(result) or len(result) == 0:
            return MISSING

        return list(result)

    def _extract(
        self,
        selector: DOMSelector,
        default_attributes: Sequence[str],
        text_fallback: bool = False,
    ) -> Any:
        """
        Read a value off the selection matched by ``selector``.

        An attribute named in the selector wins. Otherwise the text of the
        selection is used, unless default attributes are given, in which case
        they are tried in order first (falling back to text only when
        ``text_fallback`` is set).
        """
        result = self.query(selector)

        # Callables may return plain values, which are used as they are
        if not _is_selection(result):
            return result

        if len(result) == 0:
            return MISSING

        attribute = None if callable(selector) else selector[1]
        attributes: List[str] = [attribute] if attribute else list(default_attributes)

        if not attributes:
            return self._text(result)

        for name in attributes:
            value = _attribute(result[0], name)
            if value is not None:
                return value

        if text_fallback and not attribute:
            return self._text(result)

        return MISSING

    @staticmethod
    def _text(selection: Sequence[Tag]) -> Any:
        text = "".join(element.get_text() for element in selection)
        return text if text != "" else MISSING


DocumentFactory.register(DOMDocument.kind, DOMDocument)
