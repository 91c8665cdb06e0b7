"""
Composite queries: objects, collections and contexts.

Sub-queries are created when the composite is configured. Object and
collection queries start all of their sub-queries before waiting on any of
them, then join the results in declaration/document order.
"""

import asyncio
from collections.abc import Mapping
from typing import Any, Callable, Dict, Optional

from gleaner.document.base import Document
from gleaner.models import MISSING
from gleaner.query.base import Query, gather_all


class ObjectQuery(Query):
    """Resolves a mapping of names to the results of their sub-queries."""

    def __init__(self, pick: Mapping, **options: Any) -> None:
        """
        Initialize the object query.

        Args:
            pick: Mapping of names to queries (anything else is converted
                with the query factory)
            **options: Query options
        """
        from gleaner.query.dispatch import factory

        self.pick: Dict[Any, Query] = {name: factory(value) for name, value in pick.items()}
        super().__init__(None, **options)

    def __repr__(self) -> str:
        return f"ObjectQuery({list(self.pick)!r})"

    def empty_value(self) -> Any:
        return {}

    async def find(self, document: Document) -> Any:
        return {name: asyncio.ensure_future(query.on(document)) for name, query in self.pick.items()}

    async def build(self, value: Any, document: Document) -> Any:
        if not isinstance(value, Mapping):
            return value

        results = await gather_all(value.values())
        return dict(zip(value.keys(), results))


class CollectionQuery(Query):
    """
    Runs one sub-query on every child document found at the selector.

    Results keep the children's order. An optional ``filter`` predicate is
    applied to the resolved list, after any other format functions.
    """

    def __init__(
        self,
        selector: Any,
        inner: Any,
        filter: Optional[Callable[[Any], bool]] = None,
        **options: Any,
    ) -> None:
        from gleaner.query.dispatch import factory

        self.inner = factory(inner)
        self.filter = filter
        super().__init__(selector, **options)

        if filter is not None:
            self.options = self.options.with_format(self._apply_filter)

    def __repr__(self) -> str:
        return f"CollectionQuery({self.selector!r}, {self.inner!r})"

    def empty_value(self) -> Any:
        return []

    def _apply_filter(self, items: Any) -> Any:
        return [item for item in items if self.filter(item)]

    async def find(self, document: Document) -> Any:
        children = document.children(self.selector)

        if children is MISSING:
            return MISSING

        return [asyncio.ensure_future(self.inner.on(child)) for child in children]

    async def build(self, value: Any, document: Document) -> Any:
        if not isinstance(value, (list, tuple)):
            return value
        return await gather_all(value)


class ContextQuery(Query):
    """
    Runs one sub-query on the first child document found at the selector.

    This query's default only applies when no child is found; whatever the
    sub-query resolves to (including its own default) is returned as is.
    """

    def __init__(self, selector: Any, inner: Any, **options: Any) -> None:
        from gleaner.query.dispatch import factory

        self.inner = factory(inner)
        super().__init__(selector, **options)

    def __repr__(self) -> str:
        return f"ContextQuery({self.selector!r}, {self.inner!r})"

    async def find(self, document: Document) -> Any:
        children = document.children(self.selector)

        if children is MISSING or len(children) == 0:
            return MISSING

        return await self.inner.on(children[0])
