# ABOUTME: The `shelfsync normalize` command for inspecting title and author normalization.
# ABOUTME: Prints what the matcher will compare for a raw title and optional author.

import click
from rich.console import Console

from shelfsync.matching.authors import resolve_author
from shelfsync.matching.normalizer import clean_title, normalize_author


@click.command("normalize")
@click.argument("title")
@click.option("-a", "--author", default=None, help="Raw author string.")
def normalize(title: str, author: str | None) -> None:
    """Show the normalized form of a title and author."""
    console = Console()
    resolved = resolve_author(author, title)
    console.print(f"Title:  {clean_title(title)!r}")
    console.print(f"Author: {normalize_author(resolved)!r}")
