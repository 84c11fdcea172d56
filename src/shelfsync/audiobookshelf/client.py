# ABOUTME: Audiobookshelf API client used as the source-record adapter.
# ABOUTME: Logs in, lists unfinished books, and submits batched progress updates.

import logging
from typing import Any

from shelfsync.audiobookshelf.http import AbsRequestError, HttpClient
from shelfsync.audiobookshelf.parser import (
    parse_first_library_id,
    parse_library_item,
    parse_login_token,
)
from shelfsync.matching.types import SourceRecord

logger = logging.getLogger(__name__)

PAGE_SIZE = 100
MAX_UNFINISHED_BOOKS = 200

IN_PROGRESS = "in_progress"
UNFINISHED = "unfinished"
NO_PROGRESS = "no_progress"


class AudiobookshelfClient:
    """Client for a single Audiobookshelf server.

    Uses a dependency-injected HttpClient for testability. Call login()
    before any other method.
    """

    def __init__(self, http_client: HttpClient) -> None:
        self._http = http_client

    def login(self, username: str, password: str) -> str:
        """Authenticate and attach the returned token to later requests.

        Raises:
            AbsRequestError: If the login is rejected or returns no token.
        """
        data = self._http.post("/login", json={"username": username, "password": password})
        token = parse_login_token(data)
        if not token:
            raise AbsRequestError("Login response did not include a token")
        self._http.set_token(token)
        return token

    def first_library_id(self) -> str:
        """Return the id of the first library on the server."""
        library_id = parse_first_library_id(self._http.get("/api/libraries"))
        if not library_id:
            raise AbsRequestError("Server has no libraries")
        return library_id

    def items_in_progress(self) -> list[dict[str, Any]]:
        data = self._http.get("/api/me/items-in-progress")
        return data.get("libraryItems") or []

    def library_items(self, library_id: str, page: int, limit: int = PAGE_SIZE) -> list[dict[str, Any]]:
        data = self._http.get(
            f"/api/libraries/{library_id}/items",
            params={"limit": str(limit), "page": str(page)},
        )
        return data.get("results") or []

    def progress(self, item_id: str) -> dict[str, Any] | None:
        """Fetch the user's progress for an item, or None if none is recorded.

        ABS answers 404 for items never started; any HTTP error status is
        treated the same way. Transport failures still raise.
        """
        try:
            return self._http.get(f"/api/me/progress/{item_id}")
        except AbsRequestError as exc:
            if exc.status_code is None:
                raise
            logger.debug("No progress for %s (HTTP %d)", item_id, exc.status_code)
            return None

    def batch_update_progress(self, updates: list[dict[str, Any]]) -> None:
        self._http.patch("/api/me/progress/batch/update", json=updates)

    def close(self) -> None:
        """Release the underlying HTTP connections."""
        self._http.close()

    def fetch_unfinished_books(
        self, library_id: str, max_books: int = MAX_UNFINISHED_BOOKS
    ) -> list[SourceRecord]:
        """Collect books that are not marked finished on the server.

        In-progress items come first. Then library pages are walked, skipping
        finished items and items already collected, until an empty page, a
        failed page fetch, or max_books is reached (checked per page).
        """
        in_progress: list[SourceRecord] = []
        try:
            raw_items = self.items_in_progress()
        except AbsRequestError as exc:
            logger.warning("Could not fetch items in progress: %s", exc)
            raw_items = []
        for item in raw_items:
            record = parse_library_item(item, IN_PROGRESS)
            if record is not None:
                in_progress.append(record)

        seen = {record.identifier for record in in_progress}
        others: list[SourceRecord] = []
        page = 0
        while True:
            try:
                items = self.library_items(library_id, page=page)
            except AbsRequestError as exc:
                logger.warning("Error fetching library page %d: %s", page, exc)
                break
            if not items:
                break

            for item in items:
                if item.get("mediaType") != "book" or str(item.get("id")) in seen:
                    continue
                progress = self.progress(item["id"])
                if progress is not None and progress.get("isFinished"):
                    continue
                record = parse_library_item(item, UNFINISHED if progress is not None else NO_PROGRESS)
                if record is not None:
                    others.append(record)
                    seen.add(record.identifier)

            page += 1
            if len(in_progress) + len(others) >= max_books:
                break

        logger.info(
            "Found %d in-progress and %d other unfinished books", len(in_progress), len(others)
        )
        return in_progress + others
