# ABOUTME: Record types flowing through the matching engine.
# ABOUTME: SourceRecord is searched for, CandidateRecord is searched, MatchResult binds them.

from dataclasses import dataclass


@dataclass(frozen=True)
class SourceRecord:
    """A book from the catalog that needs a match (an Audiobookshelf item).

    The identifier is an opaque handle used for reporting and dispatch only;
    it never takes part in matching. Series and year ride along untouched.
    """

    identifier: str
    title: str | None
    author: str | None = None
    isbn: str | None = None
    isbn13: str | None = None
    series: str | None = None
    published_year: str | None = None
    progress_state: str | None = None


@dataclass(frozen=True)
class CandidateRecord:
    """A book from the reference catalog (a Goodreads 'read' shelf row)."""

    title: str
    author: str
    isbn: str | None = None
    isbn13: str | None = None
    date_read: str | None = None
    rating: str | None = None

    @property
    def has_date_read(self) -> bool:
        """Whether the reference catalog recorded when the book was finished."""
        return bool(self.date_read and self.date_read.strip())


@dataclass(frozen=True)
class MatchResult:
    """The best candidate chosen for a source record, with its confidence."""

    source: SourceRecord
    candidate: CandidateRecord
    confidence: float

    def __post_init__(self) -> None:
        if not 0.0 <= self.confidence <= 1.0:
            msg = f"confidence must be between 0.0 and 1.0, got {self.confidence}"
            raise ValueError(msg)
