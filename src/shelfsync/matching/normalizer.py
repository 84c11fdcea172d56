# ABOUTME: Pure canonicalization of noisy book titles and author names before comparison.
# ABOUTME: clean_title runs an ordered pipeline of regex rewrites; the order is part of the contract.

import re

# Edition qualifiers in parentheses or square brackets: "(Unabridged)", "[German Edition]".
_EDITION_QUALIFIER_RES = (
    re.compile(r"\s*\([^)]*\bUnabridged\b[^)]*\)", re.IGNORECASE),
    re.compile(r"\s*\([^)]*\bGerman edition\b[^)]*\)", re.IGNORECASE),
    re.compile(r"\s*\[[^\]]*\bUnabridged\b[^\]]*\]", re.IGNORECASE),
    re.compile(r"\s*\[[^\]]*\bGerman edition\b[^\]]*\]", re.IGNORECASE),
)

# Any colon, hyphen or em-dash together with surrounding whitespace.
_SUBTITLE_SPLIT_RE = re.compile(r"\s*[:\-—]\s*")

# "Author - Series 03 - Title"
_AUTHOR_SERIES_PREAMBLE_RE = re.compile(r"^[^-]+ - [^-]+ \d+ - ")
# "Space Team - 01 - Title"
_SERIES_NUMBER_PREAMBLE_RE = re.compile(r"^[^-]+ - \d{2} - ")

_VOLUME_MARKER_RE = re.compile(r"\b(Book|Vol\.?|Volume)\s+\d+\b", re.IGNORECASE)

# "Space Team - 01 - Title" / "Series 01 - Title"
_SERIES_PREFIX_RE = re.compile(r"^.*\s+\d{2}\s+-\s+")
# "01 - Title" / "01 Title"
_BARE_NUMBER_PREFIX_RE = re.compile(r"^\d{2}\s+-?\s*")

_PARENTHESIZED_RE = re.compile(r"\s*\([^)]*\)")

_COLLECTION_RE = re.compile(
    r"\s*(Box Set|Collection|Omnibus|Complete Series|The Complete|Complete Edition)",
    re.IGNORECASE,
)

_LEADING_ARTICLE_RE = re.compile(r"^The\s+", re.IGNORECASE)

_AUTHOR_SUFFIX_RE = re.compile(r"\s+(Jr\.?|Sr\.?|III?|IV)\s*$", re.IGNORECASE)
_INITIALS_RE = re.compile(r"\b([A-Z])\.\s*([A-Z])\.")


def strip_edition_qualifiers(title: str) -> str:
    """Remove bracketed "Unabridged" / "German edition" qualifiers."""
    for pattern in _EDITION_QUALIFIER_RES:
        title = pattern.sub("", title)
    return title


def has_series_preamble(title: str) -> bool:
    """Check whether a title starts with numbered series information.

    Matches "Author - Series 03 - Title" and "Series - 01 - Title" shapes,
    where the dashes separate series data rather than a subtitle.
    """
    return bool(
        _AUTHOR_SERIES_PREAMBLE_RE.match(title) or _SERIES_NUMBER_PREAMBLE_RE.match(title)
    )


def strip_subtitle(title: str) -> str:
    """Truncate a title at the first colon, " - " or em-dash separator.

    Titles without one of those separators, and titles whose dashes belong to
    a numbered series preamble, are returned unchanged.
    """
    if has_series_preamble(title):
        return title
    if ":" in title or " - " in title or "—" in title:
        return _SUBTITLE_SPLIT_RE.split(title, maxsplit=1)[0]
    return title


def strip_author_series_preamble(title: str) -> str:
    """Reduce "Author - Series 03 - Title" to its last " - " segment."""
    if _AUTHOR_SERIES_PREAMBLE_RE.match(title):
        parts = title.split(" - ")
        if len(parts) >= 3:
            return parts[-1]
    return title


def strip_volume_markers(title: str) -> str:
    """Remove "Book N", "Vol N", "Vol. N" and "Volume N" tokens."""
    return _VOLUME_MARKER_RE.sub("", title).strip()


def strip_series_prefix(title: str) -> str:
    """Remove a leading "Series 01 - " run, then a bare "01 - " or "01" prefix."""
    title = _SERIES_PREFIX_RE.sub("", title)
    return _BARE_NUMBER_PREFIX_RE.sub("", title)


def strip_parenthesized(title: str) -> str:
    """Remove every remaining parenthesized segment."""
    return _PARENTHESIZED_RE.sub("", title)


def strip_collection_markers(title: str) -> str:
    """Remove "Box Set", "Collection", "Omnibus" and similar phrases."""
    return _COLLECTION_RE.sub("", title)


def strip_leading_article(title: str) -> str:
    """Remove a leading "The "."""
    return _LEADING_ARTICLE_RE.sub("", title)


# Order matters: later steps assume earlier ones already ran.
TITLE_PIPELINE = (
    strip_edition_qualifiers,
    strip_subtitle,
    strip_author_series_preamble,
    strip_volume_markers,
    strip_series_prefix,
    strip_parenthesized,
    strip_collection_markers,
    strip_leading_article,
    str.strip,
)


def clean_title(title: str | None) -> str | None:
    """Canonicalize a raw title for comparison.

    Runs every step of TITLE_PIPELINE in order. The result may be an empty
    string when the title consisted only of noise; that is not an error.

    Returns:
        The cleaned title, or None for a None or empty input.
    """
    if not title:
        return None

    cleaned = title
    for step in TITLE_PIPELINE:
        cleaned = step(cleaned)
    return cleaned


def normalize_title(raw: str | None) -> str | None:
    """Public entry point for title normalization; same as clean_title."""
    return clean_title(raw)


def clean_author(author: str | None) -> str | None:
    """Reorder a "Last, First" author into "First Last".

    Only the first two comma-separated segments are used. Authors without a
    comma are returned trimmed.
    """
    if not author:
        return None

    if "," in author:
        parts = [p.strip() for p in author.split(",")]
        return f"{parts[1]} {parts[0]}".strip()
    return author.strip()


def normalize_author(author: str | None) -> str | None:
    """Strip generational suffixes and space out adjacent initials.

    "Martin Luther King Jr." becomes "Martin Luther King" and "J.K. Rowling"
    becomes "J. K. Rowling". Applying it twice gives the same result.
    """
    if author is None:
        return None

    normalized = _AUTHOR_SUFFIX_RE.sub("", author)
    normalized = _INITIALS_RE.sub(r"\1. \2.", normalized)
    return normalized.strip()
