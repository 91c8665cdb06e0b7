"""
Document adapters.

This package provides the document interface queries run against, and the
built-in adapters for HTML (BeautifulSoup) and JSON data.
"""

from gleaner.document.base import Document, DocumentFactory, load_document
from gleaner.document.dom_adapter import DOMDocument
from gleaner.document.json_adapter import JSONDocument

__all__ = ["Document", "DocumentFactory", "DOMDocument", "JSONDocument", "load_document"]
