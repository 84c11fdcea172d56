# ABOUTME: Parsing functions for Audiobookshelf API JSON responses.
# ABOUTME: Converts ABS library items into SourceRecord instances for matching.

from typing import Any

from shelfsync.matching.types import SourceRecord


def _text(value: Any) -> str | None:
    """Coerce an optional JSON scalar to a string, keeping None for null."""
    if value is None:
        return None
    return str(value)


def parse_library_item(item: dict[str, Any], progress_state: str) -> SourceRecord | None:
    """Parse an ABS library item into a SourceRecord.

    Library items store book metadata under media.metadata. Podcasts and
    items without metadata return None.
    """
    if item.get("mediaType") != "book":
        return None

    metadata = (item.get("media") or {}).get("metadata")
    if not metadata:
        return None

    return SourceRecord(
        identifier=str(item["id"]),
        title=metadata.get("title"),
        author=metadata.get("authorName"),
        isbn=metadata.get("isbn") or None,
        isbn13=metadata.get("isbn13") or None,
        series=metadata.get("seriesName") or None,
        published_year=_text(metadata.get("publishedYear")),
        progress_state=progress_state,
    )


def parse_login_token(data: dict[str, Any]) -> str | None:
    """Extract the API token from a /login response."""
    return (data.get("user") or {}).get("token")


def parse_first_library_id(data: dict[str, Any]) -> str | None:
    """Extract the id of the first library from an /api/libraries response."""
    libraries = data.get("libraries") or []
    if not libraries:
        return None
    return libraries[0].get("id")
