"""
Queries and the query factory.

The module-level constructors mirror ``QueryFactory``, so queries can be
built as ``query.string("h1")``, ``query.collection("li", {...})`` and so on.
``query.create(selector)`` infers the variant from the selector.
"""

from gleaner.query.base import Query, QueryOptions, gather_all
from gleaner.query.composite import CollectionQuery, ContextQuery, ObjectQuery
from gleaner.query.custom import CallbackQuery, RawQuery
from gleaner.query.dispatch import QueryFactory, factory
from gleaner.query.remote import FollowQuery, PaginateQuery, flatten
from gleaner.query.scalar import LinkQuery, NumberQuery, RegexQuery, StringQuery, UriQuery

create = factory
string = factory.string
number = factory.number
regex = factory.regex
uri = factory.uri
link = factory.link
object = factory.object
collection = factory.collection
context = factory.context
follow = factory.follow
paginate = factory.paginate
callback = factory.callback
raw = factory.raw

__all__ = [
    "CallbackQuery",
    "CollectionQuery",
    "ContextQuery",
    "FollowQuery",
    "LinkQuery",
    "NumberQuery",
    "ObjectQuery",
    "PaginateQuery",
    "Query",
    "QueryFactory",
    "QueryOptions",
    "RawQuery",
    "RegexQuery",
    "StringQuery",
    "UriQuery",
    "factory",
    "flatten",
    "gather_all",
]
