# ABOUTME: Picks the author string to match on for a source record.
# ABOUTME: Recovers authors embedded in titles and drops translators and co-authors.

import re

from shelfsync.matching.normalizer import normalize_author

# "Brandon Sanderson - The Way of Kings"
_NAME_DASH_TITLE_RE = re.compile(r"^([A-Z][a-z]+ [A-Z][a-z]+(?:\s+[A-Z][a-z]+)*)\s+-\s+")
# "Sanderson, Brandon - The Way of Kings"
_LAST_FIRST_DASH_TITLE_RE = re.compile(r"^([A-Z][a-z]+,\s+[A-Z][a-z]+)\s+-\s+")

# ", Jay Rubin translator" and everything after it
_TRANSLATOR_SPLIT_RE = re.compile(r",\s*[^,]*translator", re.IGNORECASE)
_LAST_FIRST_RE = re.compile(r"^[^,]+,\s*[^,]+$")


def extract_author_from_title(title: str | None) -> str | None:
    """Recover an author name from the start of a title.

    Recognizes "First Last - Title" (two or more capitalized words) and
    "Last, First - Title", returning the name as "First Last".
    """
    if not title:
        return None

    m = _NAME_DASH_TITLE_RE.match(title)
    if m:
        return m.group(1).strip()

    m = _LAST_FIRST_DASH_TITLE_RE.match(title)
    if m:
        last, first = (part.strip() for part in m.group(1).split(","))
        return f"{first} {last}"

    return None


def resolve_author(author: str | None, title: str | None) -> str | None:
    """Decide which author string a source record is matched on.

    A blank author falls back to extraction from the title. Otherwise
    translator annotations are dropped, multi-author lists are cut to the
    first author (a simple "Last, First" pair is left alone), and the result
    goes through normalize_author.

    Returns:
        The resolved author, or None when no author can be determined.
    """
    if author is None or not author.strip():
        return extract_author_from_title(title)

    if "translator" in author.lower():
        author = _TRANSLATOR_SPLIT_RE.split(author, maxsplit=1)[0]

    if "," in author and not _LAST_FIRST_RE.match(author):
        author = author.split(",")[0].strip()

    return normalize_author(author)


def normalize_author_field(raw: str | None, title_context: str | None) -> str | None:
    """Public entry point for author normalization; same as resolve_author."""
    return resolve_author(raw, title_context)
