"""Domain-keyed admission control for candidate sources."""

from __future__ import annotations

from threading import Lock
from typing import Callable, Optional

import structlog

from .identifiers import extract_domain

DomainExtractor = Callable[[str], Optional[str]]


class EquivalenceFrontier:
    """Admit a URI only if its domain has never been seen.

    Unparseable URIs, including ones the domain extractor fails on, are
    treated as already visited. The visited set only grows until
    :meth:`reset`.
    """

    def __init__(
        self,
        domain_extractor: DomainExtractor = extract_domain,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self._extract_domain = domain_extractor
        self.logger = logger or structlog.get_logger("lod_crawler.frontier")
        self._visited: set[str] = set()
        self._lock = Lock()

    def _domain(self, uri: str) -> Optional[str]:
        try:
            return self._extract_domain(uri) or None
        except Exception:  # noqa: BLE001
            self.logger.debug("domain_extraction_failed", source=uri)
            return None

    def admit(self, uri: str) -> bool:
        domain = self._domain(uri)
        if domain is None:
            return False
        with self._lock:
            if domain in self._visited:
                return False
            self._visited.add(domain)
        return True

    def is_visited(self, uri: str) -> bool:
        domain = self._domain(uri)
        if domain is None:
            return True
        with self._lock:
            return domain in self._visited

    @property
    def visited(self) -> frozenset[str]:
        with self._lock:
            return frozenset(self._visited)

    def reset(self) -> None:
        with self._lock:
            self._visited = set()

    def __len__(self) -> int:
        return len(self._visited)


__all__ = ["DomainExtractor", "EquivalenceFrontier"]
