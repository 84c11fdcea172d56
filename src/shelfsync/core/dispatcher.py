# ABOUTME: Turns accepted matches into Audiobookshelf progress updates and sends them in batches.
# ABOUTME: Supports dry runs that log the pending updates without submitting anything.

import logging
import time
from datetime import datetime
from typing import Any, Protocol

from shelfsync.audiobookshelf.http import AbsRequestError
from shelfsync.matching.types import MatchResult

logger = logging.getLogger(__name__)

DATE_READ_FORMAT = "%Y/%m/%d"


class ProgressSink(Protocol):
    """Anything that accepts a batch of progress updates."""

    def batch_update_progress(self, updates: list[dict[str, Any]]) -> None: ...


def finished_at_millis(date_read: str) -> int:
    """Convert a Goodreads "2023/04/17" date to epoch milliseconds at local midnight."""
    finished = datetime.strptime(date_read.strip(), DATE_READ_FORMAT)
    return int(finished.timestamp()) * 1000


def progress_update_for(result: MatchResult) -> dict[str, Any] | None:
    """Build the ABS "mark finished" update for a match.

    Returns None when the matched candidate has no date read; only books
    with a known completion date become state changes.

    Raises:
        ValueError: If the date read is not in YYYY/MM/DD form.
    """
    if not result.candidate.has_date_read:
        return None
    return {
        "libraryItemId": result.source.identifier,
        "isFinished": True,
        "finishedAt": finished_at_millis(result.candidate.date_read),
    }


class BatchDispatcher:
    """Queues progress updates and submits them in fixed-size batches.

    A batch is sent as soon as the queue reaches batch_size; close() sends
    whatever is left. Failed submissions are logged and counted, not raised.
    """

    def __init__(
        self,
        sink: ProgressSink,
        *,
        batch_size: int = 10,
        dry_run: bool = False,
        pause: float = 1.0,
    ) -> None:
        if batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {batch_size}")
        self._sink = sink
        self._batch_size = batch_size
        self._dry_run = dry_run
        self._pause = pause
        self._queue: list[dict[str, Any]] = []
        self.batches_sent = 0
        self.updates_processed = 0
        self.failed_batches = 0

    @property
    def dry_run(self) -> bool:
        return self._dry_run

    @property
    def pending(self) -> int:
        return len(self._queue)

    def add(self, update: dict[str, Any]) -> None:
        self._queue.append(update)
        if len(self._queue) >= self._batch_size:
            self.flush()

    def flush(self) -> None:
        """Send the queued updates as one batch."""
        if not self._queue:
            return

        batch, self._queue = self._queue, []
        self.batches_sent += 1
        self.updates_processed += len(batch)

        if self._dry_run:
            logger.info(
                "DRY RUN - batch %d would update: %s",
                self.batches_sent,
                ", ".join(str(update["libraryItemId"]) for update in batch),
            )
            return

        try:
            self._sink.batch_update_progress(batch)
        except AbsRequestError as exc:
            self.failed_batches += 1
            logger.warning("Failed to update batch %d: %s", self.batches_sent, exc)
        else:
            logger.info("Updated batch %d (%d items)", self.batches_sent, len(batch))

        if self._pause > 0:
            time.sleep(self._pause)

    def close(self) -> None:
        self.flush()
