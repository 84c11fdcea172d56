# ABOUTME: Fuzzy matching engine for reconciling two book catalogs.
# ABOUTME: Exports the record types, normalizers, similarity scorer and match policy.

from shelfsync.matching.authors import (
    extract_author_from_title,
    normalize_author_field,
    resolve_author,
)
from shelfsync.matching.engine import DEFAULT_THRESHOLD, MatchPolicy, find_match, score_candidate
from shelfsync.matching.normalizer import (
    clean_author,
    clean_title,
    normalize_author,
    normalize_title,
)
from shelfsync.matching.similarity import similarity
from shelfsync.matching.types import CandidateRecord, MatchResult, SourceRecord

__all__ = [
    "DEFAULT_THRESHOLD",
    "CandidateRecord",
    "MatchPolicy",
    "MatchResult",
    "SourceRecord",
    "clean_author",
    "clean_title",
    "extract_author_from_title",
    "find_match",
    "normalize_author",
    "normalize_author_field",
    "normalize_title",
    "resolve_author",
    "score_candidate",
    "similarity",
]
