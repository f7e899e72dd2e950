"""Follow owl:sameAs links across Linked Open Data endpoints."""

from .crawler import CrawlSummary, Crawler, CrawlerState, crawl
from .engine import Fact, LodFetcher, RewriteChain, TripleStore
from .errors import CrawlerStoppedError, FetchError, LodCrawlerError, SourceFetchError

__all__ = [
    "CrawlSummary",
    "Crawler",
    "CrawlerState",
    "CrawlerStoppedError",
    "Fact",
    "FetchError",
    "LodCrawlerError",
    "LodFetcher",
    "RewriteChain",
    "SourceFetchError",
    "TripleStore",
    "crawl",
]
