"""
Escape hatches for values the selector syntax cannot express.
"""

from typing import Any, Callable

from gleaner.document.base import Document
from gleaner.models import MISSING
from gleaner.query.base import Query, settle


class CallbackQuery(Query):
    """
    Hands a Scope over the document to ``fn`` and resolves to its result.

    ``fn`` may be a plain function or a coroutine function, so it can run
    further queries through the scope. Returning None counts as missing.
    """

    def __init__(self, fn: Callable[..., Any], **options: Any) -> None:
        self.fn = fn
        super().__init__(None, **options)

    def __repr__(self) -> str:
        return f"CallbackQuery({getattr(self.fn, '__name__', self.fn)!r})"

    async def find(self, document: Document) -> Any:
        from gleaner.scope import Scope

        result = await settle(self.fn(Scope.factory(document)))
        return MISSING if result is None else result


class RawQuery(Query):
    """Calls ``fn(store, root)`` with the document's native handles."""

    def __init__(self, fn: Callable[[Any, Any], Any], **options: Any) -> None:
        super().__init__(fn, **options)

    async def find(self, document: Document) -> Any:
        result = document.raw(self.selector)
        return MISSING if result is None else result
