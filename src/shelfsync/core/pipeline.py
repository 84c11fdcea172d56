# ABOUTME: Sync pipeline: match unfinished Audiobookshelf books against the Goodreads read shelf.
# ABOUTME: Queues finished-dates for matches, collects failures, and writes the failure log.

import json
import logging
import re
from collections.abc import Callable, Sequence
from dataclasses import asdict, dataclass, field
from pathlib import Path

from shelfsync.audiobookshelf.client import AudiobookshelfClient
from shelfsync.core.config import ServerConfig, SyncConfig
from shelfsync.core.credentials import Credentials
from shelfsync.core.dispatcher import BatchDispatcher, progress_update_for
from shelfsync.matching.engine import find_match
from shelfsync.matching.types import CandidateRecord, MatchResult, SourceRecord

logger = logging.getLogger(__name__)

_NON_WORD_RE = re.compile(r"[^\w]")


@dataclass
class FailedMatch:
    """A source record for which no candidate reached the threshold."""

    title: str | None
    author: str | None
    isbn: str | None
    isbn13: str | None
    server: str


@dataclass
class SyncSummary:
    """Summary of matching one server's books against the reference catalog."""

    total: int = 0
    matched: int = 0
    queued: int = 0
    failed: list[FailedMatch] = field(default_factory=list)
    batches_sent: int = 0
    updates_processed: int = 0
    failed_batches: int = 0

    @property
    def match_rate(self) -> float:
        """Matched books as a percentage of all books processed."""
        if not self.total:
            return 0.0
        return self.matched / self.total * 100


# Called once per source record with the match (or None for no match).
DecisionFn = Callable[[SourceRecord, MatchResult | None], None]


def sync_books(
    sources: Sequence[SourceRecord],
    candidates: Sequence[CandidateRecord],
    dispatcher: BatchDispatcher,
    *,
    threshold: float,
    server: str = "",
    limit: int | None = None,
    on_decision: DecisionFn | None = None,
) -> SyncSummary:
    """Match each source record and queue progress updates for dated matches.

    Args:
        sources: Unfinished books from the server, in processing order.
        candidates: Reference records; the same sequence is searched for every source.
        dispatcher: Receives updates for matches that carry a date read.
        threshold: Minimum confidence for a match.
        server: Label recorded on failed matches.
        limit: Only process the first N sources when set.
        on_decision: Optional callback for reporting each decision.

    Returns:
        SyncSummary with counts, failures, and the dispatcher's batch counters.
    """
    if limit is not None:
        sources = sources[:limit]

    summary = SyncSummary(total=len(sources))
    for source in sources:
        result = find_match(source, candidates, threshold)
        if on_decision is not None:
            on_decision(source, result)

        if result is None:
            logger.debug("No match for %r by %r", source.title, source.author)
            summary.failed.append(
                FailedMatch(
                    title=source.title,
                    author=source.author,
                    isbn=source.isbn,
                    isbn13=source.isbn13,
                    server=server,
                )
            )
            continue

        summary.matched += 1
        logger.debug(
            "Matched %r to %r (confidence %.2f)",
            source.title,
            result.candidate.title,
            result.confidence,
        )
        try:
            update = progress_update_for(result)
        except ValueError:
            logger.warning(
                "Unparseable date read %r for %r", result.candidate.date_read, source.title
            )
            continue
        if update is not None:
            dispatcher.add(update)
            summary.queued += 1

    dispatcher.close()
    summary.batches_sent = dispatcher.batches_sent
    summary.updates_processed = dispatcher.updates_processed
    summary.failed_batches = dispatcher.failed_batches
    return summary


def failed_matches_filename(base_url: str) -> str:
    return f"failed_matches_reverse_{_NON_WORD_RE.sub('_', base_url)}.log"


def write_failed_matches(
    failures: list[FailedMatch], base_url: str, directory: Path
) -> Path | None:
    """Write failed matches as pretty-printed JSON.

    Returns:
        Path of the written log, or None when there were no failures.
    """
    if not failures:
        return None
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / failed_matches_filename(base_url)
    path.write_text(json.dumps([asdict(f) for f in failures], indent=2), encoding="utf-8")
    return path


def sync_server(
    server: ServerConfig,
    credentials: Credentials,
    candidates: Sequence[CandidateRecord],
    config: SyncConfig,
    *,
    client: AudiobookshelfClient,
    on_decision: DecisionFn | None = None,
) -> SyncSummary:
    """Run the full sync for one Audiobookshelf server.

    Logs in, fetches unfinished books from the first library, matches them,
    and submits progress updates (unless config.dry_run).

    Raises:
        AbsRequestError: If login or the library lookup fails.
    """
    client.login(credentials.username, credentials.password)
    library_id = client.first_library_id()

    sources = client.fetch_unfinished_books(library_id)
    dispatcher = BatchDispatcher(
        client, batch_size=config.batch_size, dry_run=config.dry_run
    )
    return sync_books(
        sources,
        candidates,
        dispatcher,
        threshold=config.confidence_threshold,
        server=server.base_url,
        limit=config.test_limit,
        on_decision=on_decision,
    )
