"""HTTP dereferencing of Linked Data sources into facts."""

from __future__ import annotations

import asyncio
from typing import AsyncIterator

import httpx
import structlog
from rdflib import Graph
from rdflib.util import guess_format

from ..config import FetchConfig
from ..errors import FetchError
from .facts import Fact

# Content types mapped to rdflib parser names.
RDF_FORMATS = {
    "text/turtle": "turtle",
    "application/x-turtle": "turtle",
    "application/rdf+xml": "xml",
    "application/xml": "xml",
    "text/xml": "xml",
    "application/n-triples": "nt",
    "text/plain": "nt",
    "application/n-quads": "nquads",
    "application/ld+json": "json-ld",
    "application/json": "json-ld",
    "text/n3": "n3",
    "application/trig": "trig",
}


def rdf_format(content_type: str | None, url: str) -> str:
    """Pick an rdflib parser from the response type, then the URL suffix."""

    if content_type:
        media_type = content_type.split(";", 1)[0].strip().lower()
        if media_type in RDF_FORMATS:
            return RDF_FORMATS[media_type]
    return guess_format(url) or "xml"


class LodFetcher:
    """Fetch capability backed by ``httpx.AsyncClient`` and rdflib parsers."""

    def __init__(
        self,
        config: FetchConfig | None = None,
        client: httpx.AsyncClient | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.config = config or FetchConfig()
        self.logger = logger or structlog.get_logger("lod_crawler.fetcher")
        self._owns_client = client is None
        headers = {"Accept": self.config.accept, "User-Agent": self.config.user_agent}
        headers.update(self.config.extra_headers)
        self._headers = headers
        self._client = client or httpx.AsyncClient(
            follow_redirects=self.config.follow_redirects,
            timeout=self.config.timeout,
        )

    async def __aenter__(self) -> "LodFetcher":
        return self

    async def __aexit__(self, *_exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __call__(self, uri: str) -> AsyncIterator[Fact]:
        async for fact in self.fetch(uri):
            yield fact

    async def fetch(self, uri: str) -> AsyncIterator[Fact]:
        """Yield every triple published at ``uri`` as a :class:`Fact`."""

        response = await self._request(uri)
        graph = await asyncio.to_thread(self._parse, uri, response)
        self.logger.debug("source_parsed", url=uri, triples=len(graph))
        for triple in graph:
            yield Fact.from_triple(triple, graph=uri)

    # ------------------------------------------------------------------
    async def _request(self, uri: str) -> httpx.Response:
        attempts = self.config.retry_on_fail + 1
        last_error: Exception | None = None
        for attempt in range(1, attempts + 1):
            try:
                response = await self._client.get(
                    uri, headers=self._headers, timeout=self.config.timeout
                )
            except httpx.HTTPError as exc:
                self.logger.warning("fetch_error", url=uri, attempt=attempt, error=str(exc))
                last_error = exc
                continue
            if self._is_failure(response):
                self.logger.warning(
                    "fetch_status", url=uri, attempt=attempt, status=response.status_code
                )
                last_error = RuntimeError(f"Unexpected status {response.status_code}")
                continue
            return response
        raise FetchError(uri, f"Fetch failed after {attempts} attempts") from last_error

    def _parse(self, uri: str, response: httpx.Response) -> Graph:
        fmt = rdf_format(response.headers.get("content-type"), str(response.url))
        graph = Graph()
        try:
            graph.parse(data=response.content, format=fmt, publicID=str(response.url))
        except Exception as exc:  # noqa: BLE001
            raise FetchError(uri, f"Unparsable {fmt} payload") from exc
        return graph

    @staticmethod
    def _is_failure(response: httpx.Response) -> bool:
        return response.status_code >= 400


__all__ = ["LodFetcher", "RDF_FORMATS", "rdf_format"]
