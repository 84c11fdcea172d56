# ABOUTME: In-memory stand-in for the Audiobookshelf HTTP API.
# ABOUTME: Routes GET/POST/PATCH calls to canned responses and records every request.

from typing import Any

from shelfsync.audiobookshelf.http import AbsRequestError
from tests.fixtures.audiobookshelf_responses import (
    ITEMS_IN_PROGRESS_RESPONSE,
    LIBRARIES_RESPONSE,
    LIBRARY_PAGE_0,
    LIBRARY_PAGE_1,
    LIBRARY_PAGE_EMPTY,
    LOGIN_RESPONSE,
    PROGRESS_FINISHED,
    PROGRESS_UNFINISHED,
)

DEFAULT_PROGRESS: dict[str, Any] = {
    "li_hobbit": PROGRESS_UNFINISHED,
    "li_finished": PROGRESS_FINISHED,
    "li_wood": PROGRESS_UNFINISHED,
}


class FakeAbsHttp:
    """Fake HttpClient serving a small Audiobookshelf library."""

    def __init__(
        self,
        *,
        pages: list[dict[str, Any]] | None = None,
        in_progress: dict[str, Any] | Exception | None = None,
        progress: dict[str, Any] | None = None,
        login: dict[str, Any] | Exception | None = None,
        libraries: dict[str, Any] | None = None,
        patch_error: Exception | None = None,
    ) -> None:
        self._pages = pages if pages is not None else [LIBRARY_PAGE_0, LIBRARY_PAGE_1]
        self._in_progress = in_progress if in_progress is not None else ITEMS_IN_PROGRESS_RESPONSE
        self._progress = progress if progress is not None else DEFAULT_PROGRESS
        self._login = login if login is not None else LOGIN_RESPONSE
        self._libraries = libraries if libraries is not None else LIBRARIES_RESPONSE
        self._patch_error = patch_error
        self.token: str | None = None
        self.closed = False
        self.request_log: list[tuple[str, str]] = []
        self.patched: list[Any] = []
        self.pages_requested: list[int] = []

    def set_token(self, token: str) -> None:
        self.token = token

    def close(self) -> None:
        self.closed = True

    def get(self, path: str, params: dict[str, str] | None = None) -> dict[str, Any]:
        self.request_log.append(("GET", path))
        if path == "/api/libraries":
            return self._libraries
        if path == "/api/me/items-in-progress":
            return _answer(self._in_progress)
        if path.startswith("/api/libraries/") and path.endswith("/items"):
            page = int((params or {}).get("page", "0"))
            self.pages_requested.append(page)
            if page < len(self._pages):
                return _answer(self._pages[page])
            return LIBRARY_PAGE_EMPTY
        if path.startswith("/api/me/progress/"):
            item_id = path.rsplit("/", 1)[-1]
            value = self._progress.get(item_id)
            if value is None:
                raise AbsRequestError(f"HTTP 404 from GET {path}", status_code=404)
            return _answer(value)
        raise AbsRequestError(f"HTTP 404 from GET {path}", status_code=404)

    def post(self, path: str, json: Any = None) -> dict[str, Any]:
        self.request_log.append(("POST", path))
        if path == "/login":
            return _answer(self._login)
        raise AbsRequestError(f"HTTP 404 from POST {path}", status_code=404)

    def patch(self, path: str, json: Any = None) -> dict[str, Any]:
        self.request_log.append(("PATCH", path))
        if self._patch_error is not None:
            raise self._patch_error
        self.patched.append(json)
        return {}


def _answer(value: Any) -> Any:
    if isinstance(value, Exception):
        raise value
    return value
