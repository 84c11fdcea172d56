# ABOUTME: The `shelfsync sync` command that marks Audiobookshelf books finished.
# ABOUTME: Matches each server's unfinished books against the Goodreads read shelf and submits updates.

import logging
from pathlib import Path

import click
from rich.console import Console

from shelfsync.audiobookshelf.client import AudiobookshelfClient
from shelfsync.audiobookshelf.http import AbsHttpClient, AbsRequestError
from shelfsync.cli.options import export_option, threshold_option
from shelfsync.core.config import DEFAULT_CONFIG_PATH, ConfigError, load_config
from shelfsync.core.credentials import CredentialError, fetch_credentials
from shelfsync.core.pipeline import SyncSummary, sync_server, write_failed_matches
from shelfsync.formats.goodreads import GoodreadsExportError, load_goodreads_export
from shelfsync.matching.authors import resolve_author
from shelfsync.matching.types import MatchResult, SourceRecord

logger = logging.getLogger(__name__)


def _create_client(base_url: str) -> AudiobookshelfClient:
    """Create the default Audiobookshelf client for a server."""
    return AudiobookshelfClient(http_client=AbsHttpClient(base_url))


def _make_decision_printer(console: Console):
    """Build an on_decision callback that narrates each match attempt."""

    def print_decision(source: SourceRecord, result: MatchResult | None) -> None:
        author = resolve_author(source.author, source.title)
        if author is None:
            author = "[dim]unknown[/dim]"
        elif not (source.author or "").strip():
            author = f"{author} [dim](extracted)[/dim]"
        state = f" [dim]\\[{source.progress_state}][/dim]" if source.progress_state else ""
        console.print(f"\n[bold]{source.title}[/bold] by {author}{state}")
        if result is None:
            console.print("  [yellow]No match found[/yellow]")
            return
        console.print(
            f"  [green]Found match:[/green] {result.candidate.title} by "
            f"{result.candidate.author} (confidence: {result.confidence:.2f})"
        )
        if result.candidate.has_date_read:
            console.print(f"  [dim]Queued - finished on {result.candidate.date_read}[/dim]")

    return print_decision


def _print_summary(console: Console, summary: SyncSummary, dry_run: bool) -> None:
    prefix = "[yellow]DRY RUN[/yellow] - " if dry_run else ""
    console.print(
        f"\n{prefix}Processed {summary.updates_processed} updates "
        f"in {summary.batches_sent} batch{'es' if summary.batches_sent != 1 else ''}"
    )
    if summary.failed_batches:
        console.print(f"[red]{summary.failed_batches} batch(es) failed to submit[/red]")
    console.print(
        f"Matched {summary.matched} out of {summary.total} books "
        f"({summary.match_rate:.1f}%)"
    )


@click.command("sync")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(path_type=Path),
    default=DEFAULT_CONFIG_PATH,
    help=f"Path to the YAML config file (default: {DEFAULT_CONFIG_PATH}).",
)
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    envvar="DRY_RUN",
    help="Match and report without sending updates.",
)
@threshold_option
@click.option(
    "--batch-size",
    type=click.IntRange(min=1),
    default=None,
    help="Number of updates per batch (default 10).",
)
@click.option(
    "--limit",
    type=click.IntRange(min=1),
    default=None,
    envvar="TEST_LIMIT",
    help="Only process the first N books per server.",
)
@export_option
@click.option(
    "--failed-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    help="Directory for failed-match logs (default: current directory).",
)
def sync(
    config_path: Path,
    dry_run: bool,
    threshold: float | None,
    batch_size: int | None,
    limit: int | None,
    export_path: Path | None,
    failed_dir: Path,
) -> None:
    """Mark Audiobookshelf books finished when Goodreads has them as read."""
    console = Console()

    try:
        config = load_config(config_path)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    config = config.with_overrides(
        dry_run=True if dry_run else None,
        confidence_threshold=threshold,
        batch_size=batch_size,
        test_limit=limit,
        goodreads_export_file=export_path,
    )

    console.print("Loading Goodreads export...")
    try:
        candidates = load_goodreads_export(config.goodreads_export_file)
    except GoodreadsExportError as exc:
        raise click.ClickException(str(exc)) from exc
    console.print(f"Loaded {len(candidates)} books from Goodreads")

    servers = []
    for server in config.servers:
        try:
            servers.append((server, fetch_credentials(server.onepassword_item)))
        except CredentialError as exc:
            console.print(f"[red]Error fetching credentials for {server.label}:[/red] {exc}")

    if not servers:
        raise click.ClickException("No servers configured successfully.")

    print_decision = _make_decision_printer(console)
    for server, credentials in servers:
        console.print(f"\n[bold]Processing server:[/bold] {server.base_url}")
        client = _create_client(server.base_url)
        try:
            summary = sync_server(
                server,
                credentials,
                candidates,
                config,
                client=client,
                on_decision=print_decision,
            )
        except AbsRequestError as exc:
            console.print(f"[red]Failed to sync {server.label}:[/red] {exc}")
            continue
        finally:
            client.close()

        _print_summary(console, summary, config.dry_run)

        failed_path = write_failed_matches(summary.failed, server.base_url, failed_dir)
        if failed_path is not None:
            console.print(
                f"[yellow]Failed to match {len(summary.failed)} books.[/yellow] "
                f"See {failed_path} for details."
            )

    console.print("\n[green]Reverse matching sync complete![/green]")
    if not config.dry_run:
        console.print("[dim]Run with --dry-run to test without making changes.[/dim]")
