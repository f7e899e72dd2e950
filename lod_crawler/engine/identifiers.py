"""Default domain and resource-identifier extraction."""

from __future__ import annotations

from urllib.parse import urlparse


def extract_domain(uri: str) -> str | None:
    """Return the lower-cased host of ``uri`` without a leading ``www.``.

    Returns ``None`` when the URI has no host or cannot be parsed.
    """

    if not isinstance(uri, str) or not uri.strip():
        return None
    try:
        hostname = urlparse(uri.strip()).hostname
    except ValueError:
        return None
    if not hostname:
        return None
    if hostname.startswith("www."):
        hostname = hostname[4:]
    return hostname or None


def extract_identifier(uri: str) -> str:
    """Return the local identifier of ``uri``: its fragment or last path segment."""

    if not isinstance(uri, str):
        return ""
    try:
        parsed = urlparse(uri.strip())
    except ValueError:
        return ""
    if parsed.fragment:
        return parsed.fragment
    segments = [segment for segment in parsed.path.split("/") if segment]
    return segments[-1] if segments else ""


__all__ = ["extract_domain", "extract_identifier"]
