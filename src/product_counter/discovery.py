"""Heuristic page discovery: homepage links plus a conventional sitemap."""

from __future__ import annotations

import logging
import re
from urllib.parse import urlparse

from product_counter.config import Settings
from product_counter.fetcher import FetchError, fetch_sitemap, scrape_page
from product_counter.urls import resolve, same_host

logger = logging.getLogger(__name__)

LINK_KEYWORDS = (
    "/product", "/item", "/shop", "/store", "/category",
    "/collection", "/catalog", "/p/", "/products/", "/items/", "page=",
)
PRODUCT_KEYWORDS = ("/product", "/item", "/p/")
CATEGORY_KEYWORDS = ("/category", "/collection", "/shop")

_ID_SEGMENT = re.compile(r"/\d+")
_SITEMAP_LOC = re.compile(r"<loc>(.*?)</loc>", re.DOTALL)


def _path_of(url: str) -> str:
    parsed = urlparse(url)
    path = parsed.path.lower()
    if parsed.query:
        path += "?" + parsed.query.lower()
    return path


def is_candidate_link(url: str) -> bool:
    """Whether a same-host link is worth analysing."""
    path = _path_of(url)
    return (
        any(keyword in path for keyword in LINK_KEYWORDS)
        or bool(_ID_SEGMENT.search(path))
        or len(path) > 3
    )


def parse_sitemap(xml: str, base_url: str) -> list[str]:
    """Same-host URLs listed in <loc> tags."""
    urls = []
    for match in _SITEMAP_LOC.findall(xml):
        url = match.strip()
        parsed = urlparse(url)
        if parsed.scheme in ("http", "https") and same_host(url, base_url):
            urls.append(url)
    return urls


def _sitemap_urls(base_url: str, settings: Settings) -> list[str]:
    root = base_url.rstrip("/")
    for path in settings.sitemap_paths:
        sitemap_url = f"{root}/{path}"
        try:
            body = fetch_sitemap(sitemap_url, settings)
        except FetchError as exc:
            logger.debug("Sitemap %s unavailable: %s", sitemap_url, exc)
            continue
        if body:
            urls = parse_sitemap(body, base_url)
            logger.info("Found sitemap %s with %d URLs", sitemap_url, len(urls))
            return urls
    logger.info("No sitemap found, using link discovery only")
    return []


def prioritize(pages: list[str], settings: Settings) -> list[str]:
    """Bucket URLs into product, category and other pages and apply the caps."""
    product_pages, category_pages, other_pages = [], [], []
    for url in pages:
        lowered = url.lower()
        if any(k in lowered for k in PRODUCT_KEYWORDS):
            product_pages.append(url)
        elif any(k in lowered for k in CATEGORY_KEYWORDS):
            category_pages.append(url)
        else:
            other_pages.append(url)

    logger.info(
        "Discovered %d product, %d category, %d other pages",
        len(product_pages), len(category_pages), len(other_pages),
    )
    prioritized = (
        product_pages[: settings.max_product_pages]
        + category_pages[: settings.max_category_pages]
        + other_pages[: settings.max_other_pages]
    )
    return prioritized[: settings.max_total_pages]


def discover_pages(base_url: str, settings: Settings) -> list[str]:
    """
    Find candidate pages to analyse, starting from base_url.

    Returns at most ``settings.max_total_pages`` URLs and falls back to
    ``[base_url]`` when the homepage cannot be scraped.
    """
    try:
        page = scrape_page(base_url, settings)
    except FetchError as exc:
        logger.warning("Discovery failed for %s: %s", base_url, exc)
        return [base_url]

    found: dict[str, None] = {base_url: None}
    for link in page.links:
        url = resolve(link, base_url)
        if url and same_host(url, base_url) and is_candidate_link(url):
            found.setdefault(url, None)
    logger.info("Found %d candidate links on %s", len(found) - 1, base_url)

    for url in _sitemap_urls(base_url, settings):
        found.setdefault(url, None)

    pages = prioritize(list(found), settings)
    return pages or [base_url]
