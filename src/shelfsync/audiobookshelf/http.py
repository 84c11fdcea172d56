# ABOUTME: HTTP client abstraction for Audiobookshelf API calls.
# ABOUTME: Provides bearer auth, rate limiting, retry with backoff, and injectable transport for testing.

import logging
import time
from typing import Any, Protocol, runtime_checkable

import httpx

logger = logging.getLogger(__name__)

_RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}


class AbsRequestError(Exception):
    """Raised when an HTTP request to an Audiobookshelf server fails."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


@runtime_checkable
class HttpClient(Protocol):
    """Protocol for the JSON HTTP operations the Audiobookshelf client needs."""

    def get(self, path: str, params: dict[str, str] | None = None) -> dict[str, Any]: ...

    def post(self, path: str, json: Any = None) -> dict[str, Any]: ...

    def patch(self, path: str, json: Any = None) -> dict[str, Any]: ...

    def set_token(self, token: str) -> None: ...

    def close(self) -> None: ...


class AbsHttpClient:
    """HTTP client with rate limiting and retry for one Audiobookshelf server.

    Wraps httpx.Client bound to the server's base URL. Transient failures
    (429, 5xx) are retried with exponential backoff.
    """

    def __init__(
        self,
        base_url: str,
        *,
        min_request_interval: float = 0.1,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        client_kwargs: dict[str, Any] = {
            "base_url": base_url.rstrip("/"),
            "headers": {"User-Agent": "shelfsync/0.1.0"},
            "timeout": 30.0,
        }
        if transport is not None:
            client_kwargs["transport"] = transport
        self._client = httpx.Client(**client_kwargs)
        self._min_interval = min_request_interval
        self._max_retries = max_retries
        self._retry_delay = retry_delay
        self._last_request_time: float = 0.0

    def set_token(self, token: str) -> None:
        """Authenticate every following request with a bearer token."""
        self._client.headers["Authorization"] = f"Bearer {token}"

    def get(self, path: str, params: dict[str, str] | None = None) -> dict[str, Any]:
        return self._request("GET", path, params=params)

    def post(self, path: str, json: Any = None) -> dict[str, Any]:
        return self._request("POST", path, json=json)

    def patch(self, path: str, json: Any = None) -> dict[str, Any]:
        return self._request("PATCH", path, json=json)

    def close(self) -> None:
        self._client.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        """Send a request with rate limiting and retry.

        Returns:
            Parsed JSON response body ({} for an empty body).

        Raises:
            AbsRequestError: On non-retryable HTTP errors or exhausted retries.
        """
        self._rate_limit()

        attempts = 1 + self._max_retries
        last_status = 0
        for attempt in range(attempts):
            try:
                response = self._client.request(method, path, **kwargs)
                last_status = response.status_code
            except httpx.HTTPError as exc:
                raise AbsRequestError(f"Request failed: {method} {path}: {exc}") from exc

            if response.is_success:
                return _parse_body(response)

            if response.status_code not in _RETRYABLE_STATUS_CODES:
                raise AbsRequestError(
                    f"HTTP {response.status_code} from {method} {path}",
                    status_code=response.status_code,
                )

            if attempt < attempts - 1:
                delay = self._retry_delay * (2**attempt)
                logger.warning(
                    "HTTP %d from %s %s, retrying in %.1fs (attempt %d/%d)",
                    response.status_code,
                    method,
                    path,
                    delay,
                    attempt + 1,
                    self._max_retries,
                )
                time.sleep(delay)

        raise AbsRequestError(
            f"HTTP {last_status} from {method} {path} after {attempts} attempts",
            status_code=last_status,
        )

    def _rate_limit(self) -> None:
        """Sleep if needed to maintain minimum interval between requests."""
        if self._min_interval <= 0:
            return
        now = time.monotonic()
        elapsed = now - self._last_request_time
        if elapsed < self._min_interval and self._last_request_time > 0:
            time.sleep(self._min_interval - elapsed)
        self._last_request_time = time.monotonic()


def _parse_body(response: httpx.Response) -> dict[str, Any]:
    # Some ABS endpoints answer with an empty body or plain "OK".
    if not response.content:
        return {}
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {"data": data}
