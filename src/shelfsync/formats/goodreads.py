# ABOUTME: Reader for the Goodreads library CSV export.
# ABOUTME: Turns rows on the "read" shelf into CandidateRecords, preserving file order.

import csv
import logging
import re
from pathlib import Path

from shelfsync.matching.types import CandidateRecord

logger = logging.getLogger(__name__)

READ_SHELF = "read"

# Goodreads wraps ISBNs as ="0451524934" so spreadsheets keep leading zeros.
_ISBN_NOISE_RE = re.compile(r"[=\"']")


class GoodreadsExportError(Exception):
    """Raised when the Goodreads export cannot be read."""


def _clean_isbn(value: str | None) -> str | None:
    if value is None:
        return None
    cleaned = _ISBN_NOISE_RE.sub("", value).strip()
    return cleaned or None


def _optional(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def parse_goodreads_row(row: dict[str, str]) -> CandidateRecord | None:
    """Convert one export row into a CandidateRecord.

    Returns None for rows not on the read shelf, or missing title or author.
    """
    if row.get("Exclusive Shelf") != READ_SHELF:
        return None

    title = row.get("Title")
    author = row.get("Author")
    if not title or not author:
        return None

    return CandidateRecord(
        title=title,
        author=author,
        isbn=_clean_isbn(row.get("ISBN")),
        isbn13=_clean_isbn(row.get("ISBN13")),
        date_read=_optional(row.get("Date Read")),
        rating=_optional(row.get("My Rating")),
    )


def load_goodreads_export(path: Path) -> list[CandidateRecord]:
    """Load read books from a Goodreads library export.

    Args:
        path: Path to goodreads_library_export.csv.

    Returns:
        CandidateRecords in file order.

    Raises:
        GoodreadsExportError: If the file is missing or not valid CSV.
    """
    if not path.is_file():
        raise GoodreadsExportError(f"Goodreads export not found: {path}")

    records: list[CandidateRecord] = []
    try:
        with path.open(newline="", encoding="utf-8-sig") as fh:
            for row in csv.DictReader(fh):
                record = parse_goodreads_row(row)
                if record is not None:
                    records.append(record)
    except (OSError, UnicodeDecodeError, csv.Error) as exc:
        raise GoodreadsExportError(f"Cannot read Goodreads export {path}: {exc}") from exc

    logger.debug("Loaded %d read books from %s", len(records), path)
    return records
