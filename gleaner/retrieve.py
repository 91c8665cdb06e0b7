"""
Retrieval of documents from URLs, files and raw bodies.

The default HTTP client is ``requests``, run in the default executor so the
event loop is never blocked. A custom ``client`` may be supplied through
RetrieveOptions; it receives the request mapping and returns the body (or an
awaitable resolving to it). Nothing is retried here.
"""

import asyncio
import inspect
from pathlib import Path
from typing import Any, Dict, Mapping, Union

import requests

from gleaner.config import get_settings
from gleaner.document.base import Document, DocumentFactory
from gleaner.models import RetrieveOptions
from gleaner.utils.errors import RetrievalError
from gleaner.utils.logging import LogContext, get_logger, log_performance

logger = get_logger(__name__)

RequestLike = Union[str, Mapping[str, Any]]
OptionsLike = Union[RetrieveOptions, Mapping[str, Any], None]


def build_request(request: RequestLike) -> Dict[str, Any]:
    """Normalise a URL or request mapping into keyword arguments for ``requests``."""
    if isinstance(request, str):
        request = {"url": request}

    fields = dict(request)
    if "uri" in fields and "url" not in fields:
        fields["url"] = fields.pop("uri")
    if not fields.get("url"):
        raise RetrievalError("Request has no URL", {"request": fields})

    fields.setdefault("method", "GET")
    return fields


def http_client(request: Dict[str, Any]) -> str:
    """
    Fetch a request with ``requests`` and return the decoded body.

    Raises:
        requests.RequestException: On connection errors and HTTP error statuses
    """
    settings = get_settings()

    fields = dict(request)
    headers = {"User-Agent": settings.user_agent}
    headers.update(fields.pop("headers", None) or {})
    fields.setdefault("timeout", settings.request_timeout)

    response = requests.request(headers=headers, **fields)
    response.raise_for_status()
    response.encoding = response.apparent_encoding or "utf-8"
    return response.text


def _document_type(options: RetrieveOptions) -> str:
    return options.type or get_settings().default_document_type


@log_performance
async def request(request: RequestLike, options: OptionsLike = None) -> Document:
    """
    Retrieve a page and wrap its body in a document.

    Args:
        request: URL, or mapping of request fields (``url``, ``method``,
            ``headers``, ``params``, ...)
        options: RetrieveOptions or an equivalent mapping

    Returns:
        Document created from the response body

    Raises:
        RetrievalError: If the page cannot be fetched
        DocumentParseError: If the body cannot be parsed
    """
    options = RetrieveOptions.coerce(options)
    fields = build_request(request)

    with LogContext(url=fields["url"]):
        logger.debug(f"Retrieving {fields['method']} {fields['url']}")

        try:
            if options.client is not None:
                content = options.client(fields)
                if inspect.isawaitable(content):
                    content = await content
            else:
                loop = asyncio.get_running_loop()
                content = await loop.run_in_executor(None, http_client, fields)
        except RetrievalError:
            raise
        except Exception as e:
            raise RetrievalError(
                f"Failed to retrieve {fields['url']}: {str(e)}",
                {"url": fields["url"]},
            )

    return await body(content, options)


@log_performance
async def file(path: Union[str, Path], options: OptionsLike = None) -> Document:
    """
    Read a file and wrap its contents in a document.

    Raises:
        RetrievalError: If the file cannot be read
        DocumentParseError: If the contents cannot be parsed
    """
    options = RetrieveOptions.coerce(options)
    path = Path(path)

    logger.debug(f"Reading {path}")

    try:
        loop = asyncio.get_running_loop()
        content = await loop.run_in_executor(None, path.read_bytes)
    except OSError as e:
        raise RetrievalError(f"Failed to read {path}: {str(e)}", {"path": str(path)})

    return await body(content, options)


async def body(content: Any, options: OptionsLike = None) -> Document:
    """
    Wrap a raw body (markup, JSON text, bytes or parsed data) in a document.

    Raises:
        UnknownDocumentTypeError: If the configured document type is unknown
        DocumentParseError: If the body cannot be parsed
    """
    options = RetrieveOptions.coerce(options)
    return DocumentFactory.create(_document_type(options), content)
