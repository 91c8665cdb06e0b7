"""
Core data models for the gleaner extraction engine.

This module defines the missing-value sentinel shared by documents and
queries, the built-in document types and the Pydantic model describing how
pages are retrieved.
"""

from enum import Enum
from typing import Any, Callable, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# Missing Sentinel
# =============================================================================


class _Missing:
    """Marker for "nothing was found", distinct from a present ``None``."""

    _instance: Optional["_Missing"] = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"

    def __copy__(self) -> "_Missing":
        return self

    def __deepcopy__(self, memo: Dict[int, Any]) -> "_Missing":
        return self

    def __reduce__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


# =============================================================================
# Enums
# =============================================================================


class DocumentType(str, Enum):
    """Built-in document adapters."""

    DOM = "dom"
    JSON = "json"


# =============================================================================
# Retrieval Models
# =============================================================================


class RetrieveOptions(BaseModel):
    """How a page is fetched and which adapter wraps its body."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    type: Optional[str] = Field(
        None,
        description="Document type used to load the body (defaults to settings)",
    )
    client: Optional[Callable[..., Any]] = Field(
        None,
        description="Callable taking the request mapping and returning the body",
    )
    request: Dict[str, Any] = Field(
        default_factory=dict,
        description="Extra request fields merged into followed requests",
    )

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, v: Any) -> Optional[str]:
        """Accept DocumentType members as well as plain names."""
        if isinstance(v, DocumentType):
            return v.value
        return v

    @classmethod
    def coerce(cls, options: Any = None) -> "RetrieveOptions":
        """Build options from None, a mapping or an existing instance."""
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        return cls(**options)

    def merged_request(self, **fields: Any) -> Dict[str, Any]:
        """Return the configured request fields updated with ``fields``."""
        request = dict(self.request)
        request.update(fields)
        return request
