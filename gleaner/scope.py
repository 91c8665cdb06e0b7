"""
Scope: a document paired with query constructors that run immediately.

    scope = gleaner.request("https://example.com")
    title = await scope.string("h1")
    links = await scope.collection("a", query.uri("/href"))

A scope may wrap a document that is still being retrieved. The retrieval
is started on first use and shared by every query run through the scope.
"""

import asyncio
import inspect
from typing import Any, Awaitable, Optional, Union

from gleaner.document.base import Document
from gleaner.query.base import Query
from gleaner.query.dispatch import factory


class Scope:
    """Runs queries against one (possibly pending) document."""

    def __init__(self, document: Union[Document, Awaitable[Document]]) -> None:
        """
        Initialize the scope.

        Args:
            document: A document, or an awaitable resolving to one
        """
        self._document: Optional[Document] = None
        self._pending: Optional[Awaitable[Document]] = None
        self._future: Optional[asyncio.Future] = None

        if inspect.isawaitable(document):
            self._pending = document
        else:
            self._document = document

    @classmethod
    def factory(cls, document: Union["Scope", Document, Awaitable[Document]]) -> "Scope":
        """Wrap ``document`` in a scope, unless it already is one."""
        if isinstance(document, Scope):
            return document
        return cls(document)

    def __repr__(self) -> str:
        if self._document is None:
            return "Scope(<pending>)"
        return f"Scope({self._document!r})"

    async def document(self) -> Document:
        """Return the wrapped document, waiting for its retrieval if needed."""
        if self._document is None:
            if self._future is None:
                self._future = asyncio.ensure_future(self._pending)
            self._document = await self._future
        return self._document

    async def execute(self, query: Query) -> Any:
        """Execute a query within the context of this scope."""
        return await query.on(await self.document())

    # -------------------------------------------------------------------------
    # Query shortcuts
    # -------------------------------------------------------------------------

    async def string(self, *args: Any, **kwargs: Any) -> Any:
        return await self.execute(factory.string(*args, **kwargs))

    async def number(self, *args: Any, **kwargs: Any) -> Any:
        return await self.execute(factory.number(*args, **kwargs))

    async def regex(self, *args: Any, **kwargs: Any) -> Any:
        return await self.execute(factory.regex(*args, **kwargs))

    async def uri(self, *args: Any, **kwargs: Any) -> Any:
        return await self.execute(factory.uri(*args, **kwargs))

    link = uri

    async def object(self, *args: Any, **kwargs: Any) -> Any:
        return await self.execute(factory.object(*args, **kwargs))

    async def collection(self, *args: Any, **kwargs: Any) -> Any:
        return await self.execute(factory.collection(*args, **kwargs))

    async def context(self, *args: Any, **kwargs: Any) -> Any:
        return await self.execute(factory.context(*args, **kwargs))

    async def follow(self, *args: Any, **kwargs: Any) -> Any:
        return await self.execute(factory.follow(*args, **kwargs))

    async def paginate(self, *args: Any, **kwargs: Any) -> Any:
        return await self.execute(factory.paginate(*args, **kwargs))

    async def callback(self, *args: Any, **kwargs: Any) -> Any:
        return await self.execute(factory.callback(*args, **kwargs))

    async def raw(self, *args: Any, **kwargs: Any) -> Any:
        return await self.execute(factory.raw(*args, **kwargs))
