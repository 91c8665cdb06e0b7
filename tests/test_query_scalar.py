"""
Tests for the base query pipeline and scalar queries.
"""

import math
import re

import pytest

from gleaner import query
from gleaner.document import DocumentFactory
from gleaner.query import NumberQuery, Query, QueryOptions, RegexQuery, StringQuery, UriQuery
from gleaner.query.scalar import resolve_uri, to_number
from gleaner.utils.errors import MalformedLinkError, MissingValueError


class TestQueryOptions:
    """Test option normalisation."""

    def test_single_formatter(self):
        """A single function is wrapped in a tuple."""
        options = QueryOptions.build(format=str.upper)

        assert options.format == (str.upper,)

    def test_with_default_keeps_configured(self):
        """An explicit default is never replaced by the variant's empty value."""
        assert QueryOptions.build(default="x").with_default("").default == "x"
        assert QueryOptions.build().with_default("").default == ""

    def test_falsy_default_counts_as_configured(self):
        """None and 0 are real defaults."""
        assert QueryOptions.build(default=None).has_default
        assert StringQuery("x", default=0).options.default == 0


class TestBaseQuery:
    """Test the find -> default -> build -> format pipeline."""

    @pytest.mark.asyncio
    async def test_found_value_unchanged(self, json_document):
        """The base query returns what the document holds."""
        assert await Query("count").on(json_document) == 3
        assert await Query("items[0].tags").on(json_document) == ["x", "y"]

    @pytest.mark.asyncio
    async def test_missing_value_is_none(self, json_document):
        """Without a default a missing value becomes None."""
        assert await Query("nope").on(json_document) is None

    @pytest.mark.asyncio
    async def test_default_law(self, json_document):
        """A missing value resolves to format(build(default))."""
        q = StringQuery("nope", default=12, format=[lambda v: v + "!", str.upper])

        assert await q.on(json_document) == "12!"

    @pytest.mark.asyncio
    async def test_format_order(self, json_document):
        """Format functions run left to right."""
        q = StringQuery("title", format=[lambda v: v + "a", lambda v: v + "b"])

        assert await q.on(json_document) == "Feedab"

    @pytest.mark.asyncio
    async def test_throw_on_missing(self, json_document):
        """throw_on_missing turns a missing value into an error."""
        with pytest.raises(MissingValueError) as exc_info:
            await StringQuery("nope", throw_on_missing=True).on(json_document)

        assert "nope" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_throw_ignores_present_values(self, json_document):
        """Present values, even null, do not raise."""
        assert await Query("missing", throw_on_missing=True).on(json_document) is None

    @pytest.mark.asyncio
    async def test_idempotent(self, dom_document):
        """Running a query twice gives the same result."""
        q = query.collection("li.article", {"name": "a", "link": query.uri("a", base="http://site.test/")})

        assert await q.on(dom_document) == await q.on(dom_document)

    @pytest.mark.asyncio
    async def test_mutating_a_default_does_not_leak(self, dom_document, json_document):
        """Every missing result gets its own copy of the default."""
        regex = RegexQuery("div.count", r"zzz")
        (await regex.on(dom_document)).append("changed")

        assert await regex.on(dom_document) == []

        mapping = Query("nope", default={})
        (await mapping.on(json_document))["key"] = "changed"

        assert await mapping.on(json_document) == {}

        collection = query.collection(".nope", "a")
        (await collection.on(dom_document)).append("changed")

        assert await collection.on(dom_document) == []


class TestStringQuery:
    """Test string queries."""

    @pytest.mark.asyncio
    async def test_coerces_to_string(self, json_document, dom_document):
        """Found values are converted with str()."""
        assert await StringQuery("count").on(json_document) == "3"
        assert await StringQuery("h1").on(dom_document) == "Articles"

    @pytest.mark.asyncio
    async def test_missing_is_empty_string(self, dom_document):
        """The empty value is the empty string."""
        assert await StringQuery(".nope").on(dom_document) == ""

    @pytest.mark.asyncio
    async def test_null_is_present(self, json_document):
        """A present null is converted, not defaulted."""
        assert await StringQuery("missing", default="fallback").on(json_document) == "None"


class TestNumberQuery:
    """Test number queries."""

    @pytest.mark.parametrize(
        "raw,expected",
        [(3, 3), ("10", 10), (" 2.5 ", 2.5), (True, 1), ("1e3", 1000.0)],
    )
    def test_to_number(self, raw, expected):
        """Numbers and numeric text convert to int or float."""
        assert to_number(raw) == expected

    def test_to_number_nan(self):
        """Unparseable values become NaN."""
        assert math.isnan(to_number("n/a"))

    @pytest.mark.parametrize("raw", ["1_000", "inf", "nan", "-0x1", "1.2.3", "0x"])
    def test_python_only_literals_are_nan(self, raw):
        """Underscores and Python spellings of special floats are not numbers."""
        assert math.isnan(to_number(raw))

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("", 0),
            ("  ", 0),
            (None, 0),
            ("Infinity", math.inf),
            ("-Infinity", -math.inf),
            ("0x1A", 26),
            ("0b11", 3),
            ("0o17", 15),
            (".5", 0.5),
            ("-3", -3),
        ],
    )
    def test_to_number_text_forms(self, raw, expected):
        """Blank text is zero; Infinity and prefixed literals are accepted."""
        assert to_number(raw) == expected

    @pytest.mark.asyncio
    async def test_null_is_zero(self, json_document):
        """A present null builds to zero rather than defaulting."""
        assert await NumberQuery("missing", default=5).on(json_document) == 0

    @pytest.mark.asyncio
    async def test_values(self, dom_document, json_document):
        """Found values are parsed as numbers."""
        assert await NumberQuery("li.article:nth-of-type(1) span").on(dom_document) == 10
        assert await NumberQuery("items[1].score").on(json_document) == 2.5

    @pytest.mark.asyncio
    async def test_missing_is_nan(self, dom_document):
        """The empty value is NaN."""
        assert math.isnan(await NumberQuery(".nope").on(dom_document))

    @pytest.mark.asyncio
    async def test_default_is_coerced(self, dom_document):
        """A textual default is built like any other value."""
        assert await NumberQuery(".nope", default="7").on(dom_document) == 7


class TestRegexQuery:
    """Test regular expression queries."""

    @pytest.mark.asyncio
    async def test_match_list(self, dom_document):
        """Without a group the value is [whole match, groups...]."""
        q = RegexQuery("div.count", r"(\d+) (\w+)")

        assert await q.on(dom_document) == ["3 articles", "3", "articles"]

    @pytest.mark.asyncio
    async def test_group(self, dom_document):
        """With a group the value is that group."""
        assert await RegexQuery("div.count", r"(\d+)", group=1).on(dom_document) == "3"
        assert await RegexQuery("div.count", r"(?P<n>\d+)", group="n").on(dom_document) == "3"

    @pytest.mark.asyncio
    async def test_compiled_pattern(self, dom_document):
        """Pre-compiled patterns keep their flags."""
        q = RegexQuery("h1", re.compile("articles", re.IGNORECASE), group=0)

        assert await q.on(dom_document) == "Articles"

    @pytest.mark.asyncio
    async def test_no_match_uses_default(self, dom_document):
        """No match, a missing string or a missing group are all missing."""
        assert await RegexQuery("div.count", r"zzz").on(dom_document) == []
        assert await RegexQuery(".nope", r".").on(dom_document) == []
        assert await RegexQuery("div.count", r"(\d+)", group=3).on(dom_document) == ""
        assert await RegexQuery("div.count", r"(x)?\d", group=1, default="none").on(dom_document) == "none"


class TestUriQuery:
    """Test link queries."""

    @pytest.mark.asyncio
    async def test_resolves_against_base(self, dom_document):
        """Relative links are resolved, absolute ones kept."""
        base = "http://site.test/list/index.html"

        assert await UriQuery("a.next", base=base).on(dom_document) == "http://site.test/page/2"
        q = query.collection("li.article", query.uri("a", base=base))
        assert await q.on(dom_document) == [
            "http://site.test/a/1",
            "http://site.test/a/2",
            "http://other.test/3",
        ]

    @pytest.mark.asyncio
    async def test_without_base(self, dom_document):
        """Without a base the link is returned as found."""
        assert await UriQuery("a.next").on(dom_document) == "/page/2"

    @pytest.mark.asyncio
    async def test_json_link(self, json_document):
        """JSON links are plain values."""
        assert await query.link("next", base="https://api.test/v1/").on(json_document) == "https://api.test/page/2"

    @pytest.mark.asyncio
    async def test_missing_is_empty_string(self, dom_document):
        """A missing link resolves to the empty string."""
        assert await UriQuery(".nope", base="http://site.test/").on(dom_document) == ""

    @pytest.mark.asyncio
    async def test_malformed_link_raises(self):
        """A link that cannot be resolved raises instead of defaulting."""
        document = DocumentFactory.create("dom", '<a href="http://[::1/broken">x</a>')

        with pytest.raises(MalformedLinkError):
            await UriQuery("a", base="http://site.test/", default="x").on(document)

    @pytest.mark.asyncio
    async def test_spaces_are_encoded(self, dom_document):
        """Spaces inside a link are percent-encoded rather than rejected."""
        document = DocumentFactory.create("dom", '<a href="/search?q=a b">search</a>')

        assert await UriQuery("a", base="http://site.test/").on(document) == "http://site.test/search?q=a%20b"
        assert await UriQuery("span.nolink", base="http://site.test/").on(dom_document) == (
            "http://site.test/plain%20text%20link"
        )

    @pytest.mark.asyncio
    async def test_spaced_link_does_not_abort_collection(self):
        """One badly written href still leaves the rest of the collection intact."""
        document = DocumentFactory.create(
            "dom", '<a href="/a b">1</a><a href="/c">2</a>'
        )
        q = query.collection("a", query.uri(base="http://site.test/"))

        assert await q.on(document) == ["http://site.test/a%20b", "http://site.test/c"]

    def test_resolve_uri(self):
        """Standard relative resolution applies."""
        assert resolve_uri("http://a.test/b/c", "../d") == "http://a.test/d"
        assert resolve_uri("http://a.test/b/", " e ") == "http://a.test/b/e"
        assert resolve_uri("", "http://x.test/") == "http://x.test/"

    def test_resolve_uri_bad_port(self):
        """Unparseable ports are malformed."""
        with pytest.raises(MalformedLinkError):
            resolve_uri("", "http://a.test:99999/")

    def test_resolve_uri_escapes_unsafe_characters(self):
        """Quotes and brackets are percent-encoded too."""
        assert resolve_uri("http://a.test/", "x\"y{z}") == "http://a.test/x%22y%7Bz%7D"
