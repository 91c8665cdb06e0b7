"""
Abstract base interface for document adapters.

A document is a read-only view over a parsed backing store (an HTML tree, a
decoded JSON value, ...) plus a cursor (``root``) that every lookup is
relative to. Child documents share the parent's store and only move the
cursor, so they are cheap to create and need no synchronisation.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List

from gleaner.models import MISSING
from gleaner.utils.errors import DocumentParseError, UnknownDocumentTypeError
from gleaner.utils.logging import get_logger

logger = get_logger(__name__)


class Document(ABC):
    """
    Abstract base class for document adapters.

    Adapters must implement ``query``; the remaining lookups fall back to it.
    Every lookup returns ``MISSING`` (never raises) when nothing was found.
    """

    kind: str = ""

    def __init__(self, store: Any, root: Any = MISSING) -> None:
        """
        Wrap an already loaded store.

        Args:
            store: Parsed backing structure, as returned by ``load_store``
            root: Cursor inside the store (defaults to the whole store)
        """
        self.store = store
        self.root = self.load_root(root)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} root={self.root!r:.60}>"

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    @classmethod
    def load_store(cls, body: Any) -> Any:
        """Parse a raw body into the backing store. Passthrough by default."""
        return body

    @classmethod
    def from_body(cls, body: Any, root: Any = MISSING) -> "Document":
        """Parse ``body`` once and wrap it in a new document."""
        return cls(cls.load_store(body), root)

    def load_root(self, root: Any) -> Any:
        """Resolve the initial cursor; MISSING means the whole store."""
        if root is MISSING:
            return self.store
        return root

    def create(self, root: Any) -> "Document":
        """Create a child document of the same kind over the same store."""
        return type(self)(self.store, root)

    # -------------------------------------------------------------------------
    # Lookup primitives
    # -------------------------------------------------------------------------

    def format_selector(self, selector: Any) -> Any:
        """Normalise a selector before it is handed to ``query``."""
        return selector

    @abstractmethod
    def query(self, selector: Any) -> Any:
        """
        Look up a normalised selector relative to the cursor.

        An empty selector must return the cursor itself.

        Returns:
            The raw result, or MISSING when nothing was found
        """
        pass

    def query_value(self, selector: Any) -> Any:
        return self.query(selector)

    def query_children(self, selector: Any) -> Any:
        return self.query(selector)

    def query_uri(self, selector: Any) -> Any:
        return self.query_value(selector)

    # -------------------------------------------------------------------------
    # Public surface
    # -------------------------------------------------------------------------

    def value(self, selector: Any = None) -> Any:
        """Resolve a leaf value, or MISSING."""
        return self.query_value(self.format_selector(selector))

    def children(self, selector: Any = None) -> Any:
        """
        Resolve the nested contexts at ``selector`` as child documents.

        Returns:
            A list of child documents (possibly empty for an empty but valid
            container), or MISSING when the selector matched nothing
        """
        result = self.query_children(self.format_selector(selector))

        if result is MISSING:
            return MISSING

        if not isinstance(result, (list, tuple)):
            result = [result]

        return [self.create(root) for root in result]

    def uri(self, selector: Any = None) -> Any:
        """Resolve a value meant to be used as a hyperlink, or MISSING."""
        return self.query_uri(self.format_selector(selector))

    link = uri

    def raw(self, fn: Callable[[Any, Any], Any]) -> Any:
        """Call ``fn`` with the native store and cursor."""
        return fn(self.store, self.root)


class DocumentFactory:
    """Registry of document adapters keyed by type name."""

    _documents: Dict[str, type[Document]] = {}

    @classmethod
    def register(cls, kind: str, document_class: type[Document]) -> None:
        """
        Register a document adapter.

        Args:
            kind: Document type identifier
            document_class: Adapter class
        """
        cls._documents[kind] = document_class
        logger.debug(f"Registered document type: {kind}")

    @classmethod
    def get(cls, kind: str) -> type[Document]:
        """Return the adapter class registered for ``kind``."""
        if kind not in cls._documents:
            raise UnknownDocumentTypeError(kind, cls.available())
        return cls._documents[kind]

    @classmethod
    def available(cls) -> List[str]:
        return sorted(cls._documents)

    @classmethod
    def create(cls, kind: str, body: Any, root: Any = MISSING) -> Document:
        """
        Parse a body into a document of the given type.

        Args:
            kind: Document type
            body: Raw body (text, bytes or an already parsed store)
            root: Optional initial cursor

        Returns:
            Document instance

        Raises:
            UnknownDocumentTypeError: If the type is not registered
            DocumentParseError: If the body cannot be parsed
        """
        document_class = cls.get(kind)

        try:
            return document_class.from_body(body, root)
        except DocumentParseError:
            raise
        except Exception as e:
            raise DocumentParseError(
                f"Failed to load {kind} document: {str(e)}",
                {"kind": kind},
            )


def load_document(kind: str, body: Any, root: Any = MISSING) -> Document:
    """Shortcut for ``DocumentFactory.create``."""
    return DocumentFactory.create(kind, body, root)
