"""
Custom exceptions for the gleaner extraction engine.

This module defines all custom exceptions raised while loading documents,
retrieving pages and resolving queries.
"""

from typing import Any, Optional


class GleanerException(Exception):
    """Base exception for all gleaner-specific errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        """
        Initialize the exception.

        Args:
            message: Error message
            details: Optional dictionary with additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# =============================================================================
# Query Exceptions
# =============================================================================


class QueryError(GleanerException):
    """Base exception for query resolution errors."""

    pass


class MissingValueError(QueryError):
    """No value was found and the query was told not to fall back to a default."""

    def __init__(self, selector: Any) -> None:
        """Initialize with the selector that matched nothing."""
        message = f"No value found for selector {selector!r}"
        super().__init__(message, {"selector": repr(selector)})


class MalformedLinkError(QueryError):
    """A found link could not be resolved into a valid URI."""

    def __init__(self, uri: str, base: str, reason: str) -> None:
        """Initialize with the link, its base and the resolution failure."""
        message = f"Cannot resolve link {uri!r} against {base!r}: {reason}"
        super().__init__(message, {"uri": uri, "base": base})


# =============================================================================
# Document Exceptions
# =============================================================================


class DocumentError(GleanerException):
    """Base exception for document loading errors."""

    pass


class DocumentParseError(DocumentError):
    """The raw body could not be parsed into a document store."""

    pass


class UnknownDocumentTypeError(DocumentError):
    """Requested document type has no registered adapter."""

    def __init__(self, kind: str, supported: list[str]) -> None:
        """Initialize with type information."""
        message = f"Document type '{kind}' not supported. Supported types: {', '.join(supported)}"
        super().__init__(message, {"kind": kind, "supported": supported})


# =============================================================================
# Retrieval Exceptions
# =============================================================================


class RetrievalError(GleanerException):
    """A page or file could not be retrieved."""

    pass


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationError(GleanerException):
    """Configuration error."""

    def __init__(self, name: str, value: Any, reason: str) -> None:
        """Initialize with the offending setting."""
        message = f"Invalid value {value!r} for '{name}': {reason}"
        super().__init__(message, {"name": name, "value": value})
