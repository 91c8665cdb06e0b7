"""
Command-line interface for gleaner.

This module provides the ``gleaner`` entry point for running queries against
a URL, a local file or standard input from the shell.
"""

import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

import gleaner
from gleaner.config import get_settings
from gleaner.document import DocumentFactory
from gleaner.models import RetrieveOptions
from gleaner.query import factory
from gleaner.scope import Scope
from gleaner.utils.errors import GleanerException
from gleaner.utils.logging import setup_logging

# Initialize Typer app and Rich console
app = typer.Typer(
    name="gleaner",
    help="Declarative data extraction from HTML and JSON documents",
    add_completion=False,
)
console = Console()


def open_source(source: str, document_type: Optional[str]) -> Scope:
    """
    Build a scope for a CLI source argument.

    ``-`` reads standard input, an existing path is read from disk and
    anything else is requested as a URL.
    """
    options = RetrieveOptions(type=document_type)

    if source == "-":
        return gleaner.body(sys.stdin.read(), options)
    if Path(source).exists():
        return gleaner.file(source, options)
    return gleaner.request(source, options)


def load_query_mapping(text: str) -> Any:
    """Parse an inline JSON query mapping, or read it from ``@path``."""
    if text.startswith("@"):
        text = Path(text[1:]).read_text(encoding="utf-8")
    return json.loads(text)


def _print_result(result: Any) -> None:
    if isinstance(result, str):
        console.print(result, markup=False, highlight=False, soft_wrap=True)
    else:
        console.print_json(data=result)


@app.command()
def value(
    source: str = typer.Argument(..., help="URL, file path, or - for stdin"),
    selector: str = typer.Argument(..., help="Selector of the value (e.g. 'h1' or 'a/href')"),
    document_type: Optional[str] = typer.Option(
        None,
        "--type",
        "-t",
        help="Document type (defaults to GLEANER_DOCUMENT_TYPE)",
    ),
    as_link: bool = typer.Option(
        False,
        "--link",
        "-l",
        help="Resolve the value as a link",
    ),
    base: str = typer.Option(
        "",
        "--base",
        "-b",
        help="Base URI for --link (defaults to the source URL)",
    ),
):
    """Print a single value from a document."""

    async def _value():
        scope = open_source(source, document_type)
        if as_link:
            link_base = base or (source if source.startswith(("http://", "https://")) else "")
            return await scope.uri(selector, link_base, throw_on_missing=True)
        return await scope.string(selector, throw_on_missing=True)

    try:
        result = asyncio.run(_value())
    except GleanerException as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    _print_result(result)


@app.command()
def extract(
    source: str = typer.Argument(..., help="URL, file path, or - for stdin"),
    query_json: str = typer.Argument(
        ...,
        help="JSON mapping of field names to selectors, or @file.json",
    ),
    document_type: Optional[str] = typer.Option(
        None,
        "--type",
        "-t",
        help="Document type (defaults to GLEANER_DOCUMENT_TYPE)",
    ),
    each: Optional[str] = typer.Option(
        None,
        "--each",
        "-e",
        help="Apply the mapping to every element found at this selector",
    ),
):
    """Extract a JSON object (or a list of them) from a document."""
    try:
        mapping = load_query_mapping(query_json)
    except (OSError, json.JSONDecodeError) as e:
        console.print(f"[red]Error:[/red] Invalid query mapping: {escape(str(e))}")
        raise typer.Exit(1)

    if not isinstance(mapping, dict):
        console.print("[red]Error:[/red] Query mapping must be a JSON object")
        raise typer.Exit(1)

    async def _extract():
        scope = open_source(source, document_type)
        if each:
            return await scope.collection(each, mapping)
        return await scope.execute(factory(mapping))

    try:
        result = asyncio.run(_extract())
    except GleanerException as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    _print_result(result)


@app.command()
def types():
    """List the registered document types."""
    settings = get_settings()

    table = Table(title="Document types")
    table.add_column("Type", style="cyan")
    table.add_column("Adapter")
    table.add_column("Default", justify="center")

    for kind in DocumentFactory.available():
        table.add_row(
            kind,
            DocumentFactory.get(kind).__name__,
            "✓" if kind == settings.default_document_type else "",
        )

    console.print(table)


@app.callback()
def main(
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
):
    """gleaner - declarative extraction from HTML and JSON documents."""
    setup_logging(log_level="DEBUG" if debug else None)


if __name__ == "__main__":
    app()
