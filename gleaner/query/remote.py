"""
Cross-document queries: following a link, and paginating through pages.

These are the only queries that do I/O. Failures while following (a bad
link, a network error, a body that will not parse) are logged and treated as
a missing value, so one broken page never aborts the surrounding extraction.
"""

from typing import Any, Callable, List, Optional, Union

from gleaner import retrieve
from gleaner.document.base import Document
from gleaner.models import MISSING, RetrieveOptions
from gleaner.query.base import Query
from gleaner.utils.logging import get_logger

logger = get_logger(__name__)

MaxPages = Union[int, Callable[[int, List[Any]], bool], None]


class FollowQuery(Query):
    """Finds a link in the document, fetches it and runs ``inner`` on that page."""

    def __init__(
        self,
        uri: Any,
        inner: Any,
        request: Optional[dict] = None,
        document_type: Optional[str] = None,
        client: Optional[Callable[..., Any]] = None,
        **options: Any,
    ) -> None:
        """
        Initialize the follow query.

        Args:
            uri: Query (or selector) locating the link to follow
            inner: Query (or selector) to run on the followed page
            request: Extra request fields merged with the link
            document_type: Adapter used for the followed page
            client: Custom retrieval client
            **options: Query options
        """
        from gleaner.query.dispatch import factory

        self.uri = factory(uri, factory.uri)
        self.inner = factory(inner)
        self.retrieve_options = RetrieveOptions(
            type=document_type,
            client=client,
            request=request or {},
        )
        super().__init__(None, **options)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.uri!r}, {self.inner!r})"

    async def find(self, document: Document) -> Any:
        try:
            uri = await self.uri.on(document)
            if not uri:
                return MISSING

            page = await self.next(uri)
            return await self.inner.on(page)
        except Exception as e:
            logger.debug(f"Follow failed, using default: {str(e)}", extra={"error": str(e)})
            return MISSING

    async def next(self, uri: str) -> Document:
        """Retrieve the page at ``uri``."""
        return await retrieve.request(
            self.retrieve_options.merged_request(url=uri),
            self.retrieve_options,
        )


def flatten(pages: Any) -> Any:
    """Merge page results one level deep: lists are spliced, other values appended."""
    if not isinstance(pages, (list, tuple)):
        return pages

    merged: List[Any] = []
    for page in pages:
        if isinstance(page, (list, tuple)):
            merged.extend(page)
        else:
            merged.append(page)
    return merged


class PaginateQuery(FollowQuery):
    """
    Runs ``inner`` on a page, then follows ``uri`` to the next page, and so on.

    Pages are visited strictly one after another, since each next link is
    read from the current page. Paginating stops when a page has no next
    link or when ``max_pages`` says so. The per-page results are combined
    with ``merge`` (one-level flatten by default).
    """

    def __init__(
        self,
        inner: Any,
        uri: Any,
        max_pages: MaxPages = None,
        merge: Optional[Callable[[List[Any]], Any]] = None,
        **options: Any,
    ) -> None:
        """
        Initialize the paginate query.

        Args:
            inner: Query (or selector) run on every page
            uri: Query (or selector) locating the next page's link
            max_pages: Page limit (``None`` or ``0`` means no limit), or
                ``fn(count, pages)`` returning whether to continue
            merge: Function combining the list of page results
            **options: Query and retrieval options (see FollowQuery)
        """
        if not max_pages or callable(max_pages):
            self.max_pages = max_pages or None
        else:
            limit = int(max_pages)
            self.max_pages = lambda count, pages: count < limit
        self.merge = merge or flatten
        super().__init__(uri, inner, **options)

    def empty_value(self) -> Any:
        return []

    def should_continue(self, pages: List[Any]) -> bool:
        if self.max_pages is None:
            return True
        return bool(self.max_pages(len(pages), pages))

    async def find(self, document: Document) -> Any:
        pages: List[Any] = []
        page = document

        try:
            while True:
                pages.append(await self.inner.on(page))

                uri = await self.uri.on(page)
                if not uri or not self.should_continue(pages):
                    return pages

                page = await self.next(uri)
        except Exception as e:
            logger.debug(
                f"Pagination failed after {len(pages)} pages, using default: {str(e)}",
                extra={"error": str(e), "pages": len(pages)},
            )
            return MISSING

    async def build(self, value: Any, document: Document) -> Any:
        return self.merge(value)
