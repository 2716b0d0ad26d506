"""Per-page product count estimation for the multi-page flow."""

from __future__ import annotations

import logging

from product_counter.config import Settings
from product_counter.fetcher import FetchError, scrape_page
from product_counter.models import PageResult
from product_counter.providers.base import AIProvider, ExtractionError

logger = logging.getLogger(__name__)

NO_CONTENT_EVIDENCE = "No content could be scraped from this page"
NO_CONTENT_ERROR = "Could not scrape page content"


def failed_page(url: str, message: str, *, title: str = "Unknown", evidence: str | None = None) -> PageResult:
    return PageResult(
        url=url,
        product_count=0,
        categories=[],
        confidence=0,
        evidence=[evidence or f"Analysis failed: {message}"],
        page_type="unknown",
        title=title,
        status="failed",
        error_message=message,
    )


def analyze_page(url: str, provider: AIProvider, settings: Settings) -> PageResult:
    """Scrape one page and ask the provider how many products it shows.

    Never raises for fetch or model failures; those become failed results.
    """
    try:
        page = scrape_page(url, settings)
    except FetchError as exc:
        logger.warning("Failed to scrape %s: %s", url, exc)
        return failed_page(url, str(exc))

    title = page.title or "Unknown"
    if len(page.text) < settings.min_content_chars:
        logger.info("Page %s: only %d chars of content", url, len(page.text))
        return failed_page(url, NO_CONTENT_ERROR, title=title, evidence=NO_CONTENT_EVIDENCE)

    try:
        estimate = provider.estimate_page(page.text, url, title)
    except ExtractionError as exc:
        logger.warning("Analysis failed for %s: %s", url, exc)
        return failed_page(url, str(exc), title=title)

    logger.info(
        "Page %s: %d products (%s, %d%% confidence). %s",
        url, estimate.product_count, estimate.page_type, estimate.confidence, estimate.reasoning,
    )
    return PageResult(
        url=url,
        product_count=estimate.product_count,
        categories=estimate.categories,
        confidence=estimate.confidence,
        evidence=estimate.evidence,
        page_type=estimate.page_type or "unknown",
        title=title,
        status="completed",
    )
