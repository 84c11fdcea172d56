# ABOUTME: Audiobookshelf adapter: HTTP transport, JSON parsing, and API client.
# ABOUTME: Supplies unfinished books as SourceRecords and accepts progress updates.

from shelfsync.audiobookshelf.client import AudiobookshelfClient
from shelfsync.audiobookshelf.http import AbsHttpClient, AbsRequestError, HttpClient

__all__ = [
    "AbsHttpClient",
    "AbsRequestError",
    "AudiobookshelfClient",
    "HttpClient",
]
