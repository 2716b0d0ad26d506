"""Fetch pages, sitemaps and screenshots via ScraperAPI."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from product_counter.cleaner import parse_page
from product_counter.config import Settings
from product_counter.models import ScrapedPage

logger = logging.getLogger(__name__)

SCRAPERAPI_ENDPOINT = "https://api.scraperapi.com/"
SCREENSHOT_HEADER = "sa-screenshot"


class FetchError(Exception):
    """Raised when fetching a page, sitemap or screenshot fails."""


@dataclass
class Screenshot:
    """A rendered full-page screenshot."""

    url: str
    image: bytes
    mime_type: str = "image/png"


def _retrying(settings: Settings) -> Retrying:
    return Retrying(
        stop=stop_after_attempt(max(settings.fetch_attempts, 1)),
        wait=wait_exponential(multiplier=2, min=4, max=30),
        retry=retry_if_exception_type((httpx.TimeoutException, httpx.HTTPStatusError)),
        reraise=True,
    )


def _scraperapi_get(url: str, settings: Settings, **params: str) -> httpx.Response:
    headers: dict[str, str] = {
        "x-sapi-api_key": settings.scraper_api_key,
        "x-sapi-render": str(settings.render_js).lower(),
    }
    for attempt in _retrying(settings):
        with attempt:
            with httpx.Client(timeout=settings.scraper_timeout) as client:
                response = client.get(
                    SCRAPERAPI_ENDPOINT,
                    params={"url": url, **params},
                    headers=headers,
                )
                response.raise_for_status()
    return response


def fetch_html(url: str, settings: Settings) -> str:
    """Fetch the fully-rendered HTML for a URL via ScraperAPI."""
    try:
        response = _scraperapi_get(url, settings)
    except Exception as exc:
        logger.error("Fetch failed for %s: %s", url, exc)
        raise FetchError(f"Failed to fetch {url}: {exc}") from exc
    logger.info("Fetched %d bytes from %s", len(response.text), url)
    return response.text


def scrape_page(url: str, settings: Settings) -> ScrapedPage:
    """Fetch a page and extract its text, title and outbound links."""
    page = parse_page(fetch_html(url, settings), url)
    logger.debug("Scraped %s: %d chars, %d links", url, len(page.text), len(page.links))
    return page


def fetch_sitemap(url: str, settings: Settings) -> str | None:
    """GET a sitemap directly. Returns the body, or None unless it answered 200 with content."""
    try:
        with httpx.Client(timeout=settings.scraper_timeout, follow_redirects=True) as client:
            response = client.get(url)
    except httpx.HTTPError as exc:
        raise FetchError(f"Failed to fetch {url}: {exc}") from exc
    if response.status_code != 200 or not response.text:
        logger.debug("No sitemap at %s (HTTP %d)", url, response.status_code)
        return None
    return response.text


def capture_screenshot(url: str, settings: Settings) -> Screenshot:
    """Render the page and return its full-page screenshot.

    ScraperAPI answers with the page HTML and puts the screenshot's location
    in the ``sa-screenshot`` header; the image itself is downloaded from there.
    """
    try:
        response = _scraperapi_get(
            url, settings, screenshot="true", device_type=settings.screenshot_device,
        )
        shot_url = response.headers.get(SCREENSHOT_HEADER, "")
        if not shot_url:
            raise FetchError(f"No screenshot returned for {url}")
        with httpx.Client(timeout=settings.scraper_timeout, follow_redirects=True) as client:
            image = client.get(shot_url)
            image.raise_for_status()
    except FetchError:
        raise
    except Exception as exc:
        logger.error("Screenshot failed for %s: %s", url, exc)
        raise FetchError(f"Failed to capture screenshot of {url}: {exc}") from exc

    mime_type = image.headers.get("content-type", "image/png").split(";")[0].strip()
    logger.info("Captured %d byte screenshot of %s", len(image.content), url)
    return Screenshot(url=shot_url, image=image.content, mime_type=mime_type or "image/png")
