"""
Query factory.

Turns "selector-like" values into queries: an existing query is used as is,
a mapping becomes an object query, a callable becomes a callback query and
anything else goes to a default constructor (a string query unless told
otherwise). Each variant also has a named constructor on the factory.
"""

import functools
from collections.abc import Mapping
from typing import Any, Callable, Optional

from gleaner.query.base import Query
from gleaner.query.composite import CollectionQuery, ContextQuery, ObjectQuery
from gleaner.query.custom import CallbackQuery, RawQuery
from gleaner.query.remote import FollowQuery, PaginateQuery
from gleaner.query.scalar import NumberQuery, RegexQuery, StringQuery, UriQuery


def _passthrough(query_class: type[Query]) -> Callable[..., Query]:
    """Build a constructor that returns an existing Query unchanged."""

    @functools.wraps(query_class, updated=())
    def create(*args: Any, **kwargs: Any) -> Query:
        if args and isinstance(args[0], Query):
            return args[0]
        return query_class(*args, **kwargs)

    return create


class QueryFactory:
    """Creates queries, inferring the variant from the selector when asked."""

    string = staticmethod(_passthrough(StringQuery))
    number = staticmethod(_passthrough(NumberQuery))
    regex = staticmethod(_passthrough(RegexQuery))
    uri = staticmethod(_passthrough(UriQuery))
    link = uri
    object = staticmethod(_passthrough(ObjectQuery))
    collection = staticmethod(_passthrough(CollectionQuery))
    context = staticmethod(_passthrough(ContextQuery))
    follow = staticmethod(_passthrough(FollowQuery))
    paginate = staticmethod(_passthrough(PaginateQuery))
    callback = staticmethod(_passthrough(CallbackQuery))
    raw = staticmethod(_passthrough(RawQuery))

    def __call__(self, selector: Any = None, create: Optional[Callable[..., Query]] = None) -> Query:
        """
        Infer and build a query for ``selector``.

        Args:
            selector: A Query, mapping, callable or plain selector
            create: Constructor for plain selectors (defaults to ``string``)

        Returns:
            The query
        """
        if isinstance(selector, Query):
            return selector
        if isinstance(selector, Mapping):
            return self.object(selector)
        if callable(selector):
            return self.callback(selector)

        return (create or self.string)(selector)


factory = QueryFactory()
