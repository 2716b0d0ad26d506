"""URL validation and host checks."""

from __future__ import annotations

from urllib.parse import urljoin, urlparse


class InvalidURLError(ValueError):
    """Raised when user input cannot be turned into a website URL."""


def validate_url(raw: str) -> str:
    """Normalize user input to an absolute http(s) URL.

    A missing scheme becomes ``https://``. Anything that still does not
    parse as ``scheme://host`` is rejected.
    """
    url = (raw or "").strip()
    if not url:
        raise InvalidURLError("Please enter a website URL")

    if not url.startswith(("http://", "https://")):
        url = "https://" + url

    try:
        parsed = urlparse(url)
        host = parsed.hostname
    except ValueError as exc:
        raise InvalidURLError("Please enter a valid website URL") from exc

    if parsed.scheme not in ("http", "https") or not host:
        raise InvalidURLError("Please enter a valid website URL")
    if any(ch.isspace() for ch in url) or host.startswith(".") or ".." in host:
        raise InvalidURLError("Please enter a valid website URL")
    return url


def same_host(url: str, base_url: str) -> bool:
    """Check if a URL belongs to the same host as the base URL."""
    try:
        return urlparse(url).hostname == urlparse(base_url).hostname
    except ValueError:
        return False


def resolve(link: str, base_url: str) -> str | None:
    """Resolve a possibly-relative link against base_url; None if unusable."""
    try:
        absolute = urljoin(base_url, link.strip())
        parsed = urlparse(absolute)
    except ValueError:
        return None
    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        return None
    return parsed._replace(fragment="").geturl()
