"""
gleaner: declarative, asynchronous extraction of data from HTML and JSON.

Entry points return a Scope straight away; the document behind it is
retrieved the first time a query runs:

    import gleaner
    from gleaner import query

    scope = gleaner.request("https://example.com/articles")
    articles = await scope.collection(
        "article",
        {"title": "h2", "url": query.uri("a", base="https://example.com")},
    )
"""

from pathlib import Path
from typing import Any, Union

from gleaner import query, retrieve
from gleaner.document import Document, DocumentFactory, DOMDocument, JSONDocument
from gleaner.models import MISSING, DocumentType, RetrieveOptions
from gleaner.scope import Scope

__version__ = "0.1.0"


def request(request: retrieve.RequestLike, options: retrieve.OptionsLike = None) -> Scope:
    """Scope over the page at a URL (or request mapping)."""
    return Scope(retrieve.request(request, options))


def file(path: Union[str, Path], options: retrieve.OptionsLike = None) -> Scope:
    """Scope over the contents of a local file."""
    return Scope(retrieve.file(path, options))


def body(content: Any, options: retrieve.OptionsLike = None) -> Scope:
    """Scope over a raw body (markup, JSON text or already parsed data)."""
    return Scope(retrieve.body(content, options))


__all__ = [
    "MISSING",
    "Document",
    "DocumentFactory",
    "DocumentType",
    "DOMDocument",
    "JSONDocument",
    "RetrieveOptions",
    "Scope",
    "body",
    "file",
    "query",
    "request",
    "retrieve",
]
