"""
Shared fixtures for gleaner tests.
"""

import json
from typing import Any, Dict, List

import pytest

from gleaner.config import reset_settings
from gleaner.document import DocumentFactory

SAMPLE_HTML = """
<html>
<head><title>Listing</title></head>
<body>
<h1 class="title main">Articles</h1>
<p id="empty"></p>
<div class="count">3 articles</div>
<ul id="articles">
<li class="article"><a href="/a/1">First</a><span class="score">10</span></li>
<li class="article"><a href="/a/2">Second</a><span class="score">2.5</span></li>
<li class="article"><a href="http://other.test/3">Third</a><span class="score">n/a</span></li>
</ul>
<a class="next" href="/page/2">Next</a>
<span class="nolink">plain text link</span>
</body>
</html>
"""

SAMPLE_DATA: Dict[str, Any] = {
    "title": "Feed",
    "count": 3,
    "missing": None,
    "items": [
        {"name": "a", "tags": ["x", "y"], "score": 1},
        {"name": "b", "tags": [], "score": "2.5"},
    ],
    "meta": {"1": "one"},
    "next": "/page/2",
}


class PageClient:
    """Retrieval client serving canned bodies keyed by URL."""

    def __init__(self, pages: Dict[str, Any]) -> None:
        self.pages = pages
        self.requests: List[Dict[str, Any]] = []

    def __call__(self, request: Dict[str, Any]) -> Any:
        self.requests.append(request)
        if request["url"] not in self.pages:
            raise ConnectionError(f"no route to {request['url']}")
        return self.pages[request["url"]]

    @property
    def urls(self) -> List[str]:
        return [request["url"] for request in self.requests]


@pytest.fixture(autouse=True)
def fresh_settings():
    """Make every test read settings from its own environment."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def sample_html():
    return SAMPLE_HTML


@pytest.fixture
def sample_data():
    return json.loads(json.dumps(SAMPLE_DATA))


@pytest.fixture
def dom_document(sample_html):
    """DOM document over the sample listing page."""
    return DocumentFactory.create("dom", sample_html)


@pytest.fixture
def json_document(sample_data):
    """JSON document over the sample feed."""
    return DocumentFactory.create("json", sample_data)


@pytest.fixture
def page_client():
    """Factory for PageClient instances."""
    return PageClient
