"""
Base query and its resolution pipeline.

Every query resolves a value from a document in four ordered stages:

    find -> default -> build -> format

``find`` locates the raw value (MISSING when there is none), ``default``
substitutes the configured default (or raises when told to), ``build``
coerces or joins the value and ``format`` runs the configured transforms
left to right. Variants customise individual stages, never the order.
"""

import asyncio
import copy
import inspect
from dataclasses import dataclass, replace
from typing import Any, Callable, Iterable, List, Tuple, Union

from gleaner.document.base import Document
from gleaner.models import MISSING
from gleaner.utils.errors import MissingValueError

Formatter = Callable[[Any], Any]


@dataclass(frozen=True)
class QueryOptions:
    """Options shared by every query variant."""

    default: Any = MISSING
    throw_on_missing: bool = False
    format: Tuple[Formatter, ...] = ()

    @classmethod
    def build(
        cls,
        default: Any = MISSING,
        throw_on_missing: bool = False,
        format: Union[Formatter, Iterable[Formatter], None] = None,
    ) -> "QueryOptions":
        """Build options, accepting a single format function or a sequence."""
        if format is None:
            formatters: Tuple[Formatter, ...] = ()
        elif callable(format):
            formatters = (format,)
        else:
            formatters = tuple(format)

        return cls(default=default, throw_on_missing=throw_on_missing, format=formatters)

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING

    def with_default(self, default: Any) -> "QueryOptions":
        """Return options using ``default`` unless one was configured."""
        if self.has_default:
            return self
        return replace(self, default=default)

    def with_format(self, *formatters: Formatter) -> "QueryOptions":
        """Return options with ``formatters`` appended."""
        return replace(self, format=self.format + formatters)


async def settle(value: Any) -> Any:
    """Await ``value`` if it is awaitable, otherwise return it."""
    if inspect.isawaitable(value):
        return await value
    return value


async def gather_all(values: Iterable[Any]) -> List[Any]:
    """
    Join pending sub-results, preserving their order.

    Every pending value is waited on; if any failed, the first failure (in
    order) is raised and the partial results are discarded.
    """
    results = await asyncio.gather(*(settle(value) for value in values), return_exceptions=True)

    for result in results:
        if isinstance(result, BaseException):
            raise result

    return list(results)


class Query:
    """
    A selector plus options describing how to extract one value.

    The base query resolves ``document.value(selector)`` and leaves it
    untouched; without a configured default a missing value becomes None.
    """

    def __init__(self, selector: Any = None, **options: Any) -> None:
        """
        Initialize the query.

        Args:
            selector: Where the value lives in a document
            **options: default, throw_on_missing and format (see QueryOptions)
        """
        self.selector = selector
        self.options = QueryOptions.build(**options).with_default(self.empty_value())

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.selector!r})"

    def empty_value(self) -> Any:
        """Default used when none was configured."""
        return None

    async def find(self, document: Document) -> Any:
        """Retrieve the raw value from the document."""
        return document.value(self.selector)

    def default(self, value: Any, document: Document) -> Any:
        """
        Substitute the default for a missing value.

        Raises:
            MissingValueError: If nothing was found and throw_on_missing is set
        """
        if value is not MISSING:
            return value

        if self.options.throw_on_missing:
            raise MissingValueError(self.selector)

        # Each miss gets its own copy of a mutable default
        return copy.copy(self.options.default)

    async def build(self, value: Any, document: Document) -> Any:
        """Prepare the value for formatting."""
        return value

    def format(self, value: Any, document: Document) -> Any:
        """Feed the value through the format functions, left to right."""
        for formatter in self.options.format:
            value = formatter(value)
        return value

    async def on(self, document: Document) -> Any:
        """
        Execute this query on a document.

        Args:
            document: Document to resolve against

        Returns:
            The resolved, defaulted, built and formatted value
        """
        value = await self.find(document)
        value = self.default(value, document)
        value = await self.build(value, document)
        return self.format(value, document)

