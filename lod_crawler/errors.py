"""Exception hierarchy for the LOD crawler."""

from __future__ import annotations


class LodCrawlerError(Exception):
    """Base class for crawler errors."""


class FetchError(LodCrawlerError):
    """A source could not be retrieved or parsed."""

    def __init__(self, uri: str, message: str) -> None:
        super().__init__(f"{message}: {uri}")
        self.uri = uri


class SourceFetchError(LodCrawlerError):
    """Delivered to fact subscribers when one branch of the crawl fails."""

    def __init__(self, uri: str, fetched_uri: str | None = None) -> None:
        super().__init__(f"Fetching source failed: {uri}")
        self.uri = uri
        self.fetched_uri = fetched_uri or uri


class CrawlerStoppedError(LodCrawlerError):
    """Raised when a stopped crawler is asked to run again."""


__all__ = ["CrawlerStoppedError", "FetchError", "LodCrawlerError", "SourceFetchError"]
