# ABOUTME: Staged match policy that picks the best reference candidate for a source record.
# ABOUTME: Identifier match, exact normalized match, fuzzy title, then fuzzy title + author.

from collections.abc import Sequence
from dataclasses import dataclass

from shelfsync.matching.authors import resolve_author
from shelfsync.matching.normalizer import clean_title, normalize_author
from shelfsync.matching.similarity import similarity
from shelfsync.matching.types import CandidateRecord, MatchResult, SourceRecord

DEFAULT_THRESHOLD = 0.7

# Confidence assigned by each stage of the cascade.
_IDENTIFIER_CONFIDENCE = 1.0
_EXACT_CONFIDENCE = 0.95
_SAME_AUTHOR_BASE = 0.7
_SAME_AUTHOR_TITLE_WEIGHT = 0.2
_FUZZY_MIN_SIMILARITY = 0.6
_FUZZY_SCALE = 0.8


@dataclass(frozen=True)
class MatchPolicy:
    """Tunable parameters of the match policy."""

    threshold: float = DEFAULT_THRESHOLD

    def __post_init__(self) -> None:
        if not 0.0 <= self.threshold <= 1.0:
            msg = f"threshold must be between 0.0 and 1.0, got {self.threshold}"
            raise ValueError(msg)


@dataclass(frozen=True)
class _SourceKey:
    """Source-side values computed once per find_match call."""

    title: str
    author: str
    isbn: str | None
    isbn13: str | None

    @classmethod
    def from_record(cls, source: SourceRecord) -> "_SourceKey":
        author = resolve_author(source.author, source.title)
        return cls(
            title=clean_title(source.title) or "",
            author=normalize_author(author or "") or "",
            isbn=source.isbn,
            isbn13=source.isbn13,
        )


def _same_identifier(a: str | None, b: str | None) -> bool:
    return bool(a) and bool(b) and a == b


def _title_similarity(a: str, b: str) -> float:
    """Similarity on the title axis; an empty title contributes nothing."""
    if not a or not b:
        return 0.0
    return similarity(a, b)


def _score(key: _SourceKey, candidate: CandidateRecord) -> float:
    if _same_identifier(key.isbn, candidate.isbn):
        return _IDENTIFIER_CONFIDENCE
    if _same_identifier(key.isbn13, candidate.isbn13):
        return _IDENTIFIER_CONFIDENCE

    candidate_title = clean_title(candidate.title) or ""
    candidate_author = normalize_author(candidate.author) or ""
    same_author = bool(key.author) and key.author == candidate_author

    if same_author and key.title and key.title == candidate_title:
        return _EXACT_CONFIDENCE

    title_sim = _title_similarity(key.title, candidate_title)
    if same_author:
        return _SAME_AUTHOR_BASE + title_sim * _SAME_AUTHOR_TITLE_WEIGHT

    author_sim = similarity(key.author, candidate_author) if key.author else 0.0
    if title_sim > _FUZZY_MIN_SIMILARITY and author_sim > _FUZZY_MIN_SIMILARITY:
        return (title_sim + author_sim) / 2 * _FUZZY_SCALE
    return 0.0


def score_candidate(source: SourceRecord, candidate: CandidateRecord) -> float:
    """Confidence that a candidate is the same book as the source record.

    The first satisfied stage decides the score, even if a later stage would
    score higher:

    1. Equal non-empty ISBN, or else equal non-empty ISBN13: 1.0.
    2. Equal cleaned titles and equal normalized authors: 0.95.
    3. Equal normalized authors: 0.7 + title similarity * 0.2.
    4. Title and author similarity both above 0.6: their mean * 0.8,
       otherwise 0.0.
    """
    return _score(_SourceKey.from_record(source), candidate)


def find_match(
    source: SourceRecord,
    candidates: Sequence[CandidateRecord],
    threshold: float = DEFAULT_THRESHOLD,
    *,
    policy: MatchPolicy | None = None,
) -> MatchResult | None:
    """Pick the best candidate for a source record.

    Scans every candidate in the given order. Ties keep the earlier
    candidate, so callers wanting deterministic tie-breaks must pass a
    deterministic ordering. A candidate scoring 0.0 is never chosen.

    Args:
        source: The record to find a match for.
        candidates: A finite, materialized sequence of reference records.
        threshold: Minimum confidence for a match (inclusive).
        policy: Overrides threshold when given.

    Returns:
        MatchResult for the best candidate, or None when nothing reaches the
        threshold.
    """
    if policy is not None:
        threshold = policy.threshold

    key = _SourceKey.from_record(source)
    best: CandidateRecord | None = None
    best_confidence = 0.0
    for candidate in candidates:
        confidence = _score(key, candidate)
        if confidence > best_confidence:
            best, best_confidence = candidate, confidence

    if best is None or best_confidence < threshold:
        return None
    return MatchResult(source=source, candidate=best, confidence=best_confidence)
