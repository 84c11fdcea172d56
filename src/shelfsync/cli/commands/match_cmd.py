# ABOUTME: The `shelfsync match` command for looking up one book in a Goodreads export.
# ABOUTME: Runs the match policy offline and shows the best candidate with its confidence.

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from shelfsync.cli.options import export_option, threshold_option
from shelfsync.core.config import DEFAULT_EXPORT_PATH
from shelfsync.formats.goodreads import GoodreadsExportError, load_goodreads_export
from shelfsync.matching.authors import resolve_author
from shelfsync.matching.engine import DEFAULT_THRESHOLD, find_match
from shelfsync.matching.normalizer import clean_title
from shelfsync.matching.types import SourceRecord


@click.command("match")
@click.argument("title")
@click.option("-a", "--author", default=None, help="Author as recorded in Audiobookshelf.")
@click.option("--isbn", default=None, help="ISBN-10 of the book.")
@click.option("--isbn13", default=None, help="ISBN-13 of the book.")
@export_option
@threshold_option
def match(
    title: str,
    author: str | None,
    isbn: str | None,
    isbn13: str | None,
    export_path: Path | None,
    threshold: float | None,
) -> None:
    """Find the best Goodreads match for a single book title."""
    console = Console()

    try:
        candidates = load_goodreads_export(export_path or DEFAULT_EXPORT_PATH)
    except GoodreadsExportError as exc:
        raise click.ClickException(str(exc)) from exc

    source = SourceRecord(identifier="cli", title=title, author=author, isbn=isbn, isbn13=isbn13)
    if threshold is None:
        threshold = DEFAULT_THRESHOLD
    result = find_match(source, candidates, threshold)

    console.print(f"[dim]Cleaned title:[/dim] {clean_title(title)}")
    console.print(f"[dim]Resolved author:[/dim] {resolve_author(author, title) or '—'}")

    if result is None:
        console.print("[yellow]No match found[/yellow]")
        return

    table = Table(title="Best Match")
    table.add_column("Title", style="bold")
    table.add_column("Author")
    table.add_column("ISBN")
    table.add_column("Date Read")
    table.add_column("Rating", justify="right")
    table.add_column("Confidence", justify="right")
    candidate = result.candidate
    table.add_row(
        candidate.title,
        candidate.author,
        candidate.isbn or candidate.isbn13 or "—",
        candidate.date_read or "—",
        candidate.rating or "—",
        f"{result.confidence:.0%}",
    )
    console.print(table)
