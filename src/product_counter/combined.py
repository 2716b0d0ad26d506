"""Single-page analysis combining a text estimate with a screenshot estimate."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

from product_counter.config import Settings
from product_counter.crawler import THIN, _elapsed, _out
from product_counter.fetcher import FetchError, capture_screenshot, scrape_page
from product_counter.models import (
    AnalysisDetails,
    AnalysisResult,
    PageEstimate,
    PageResult,
    VisualEstimate,
)
from product_counter.providers import get_provider
from product_counter.providers.base import ExtractionError

logger = logging.getLogger(__name__)

SINGLE_PAGE_METHOD = "Single-page text and screenshot analysis"


class AnalysisError(Exception):
    """Raised when a single-page run cannot complete."""


@dataclass
class CombinedAnalysis:
    result: AnalysisResult
    screenshot_url: str


def reconcile_counts(text: PageEstimate, visual: VisualEstimate) -> int:
    """
    Merge the text and screenshot estimates into one store total.

    Start from the text count; a larger pagination-based total replaces it;
    products the screenshot shows beyond the text count are added on top.
    """
    total = text.product_count
    if text.has_pagination and text.total_products_if_paginated > total:
        total = text.total_products_if_paginated
    if visual.visible_product_count > text.product_count:
        total += visual.visible_product_count - text.product_count
    return total


def _merge(first: list[str], second: list[str]) -> list[str]:
    return list(dict.fromkeys([*first, *second]))


def analyze_combined(
    url: str,
    provider_name: str | None = None,
    settings: Settings | None = None,
) -> CombinedAnalysis:
    """Estimate a store's product count from one page's text and screenshot.

    Raises:
        AnalysisError: if the screenshot, the scrape or either AI call fails.
    """
    if settings is None:
        settings = Settings.from_env()
    provider_name = provider_name or settings.default_provider
    provider = get_provider(provider_name, settings)

    _out(f"  Single-page analysis of {url} with {provider_name}")
    try:
        t0 = time.time()
        _out("  Step 1/4  Capturing screenshot...")
        screenshot = capture_screenshot(url, settings)
        _out(f"            done ({_elapsed(t0)})")

        t0 = time.time()
        _out("  Step 2/4  Scraping page text...")
        page = scrape_page(url, settings)
        _out(f"            {len(page.text):,} chars ({_elapsed(t0)})")
    except FetchError as exc:
        raise AnalysisError(str(exc)) from exc

    if len(page.text) < settings.min_content_chars:
        raise AnalysisError("Could not scrape page content")

    title = page.title or "Unknown"
    try:
        t0 = time.time()
        _out("  Step 3/4  Text analysis...")
        text = provider.estimate_store(page.text, url, title)
        _out(f"            done ({_elapsed(t0)})")

        t0 = time.time()
        _out("  Step 4/4  Screenshot analysis...")
        visual = provider.estimate_screenshot(screenshot, url)
        _out(f"            done ({_elapsed(t0)})")
    except ExtractionError as exc:
        raise AnalysisError(str(exc)) from exc

    total = reconcile_counts(text, visual)
    confidence = round((text.confidence + visual.confidence) / 2)
    categories = _merge(text.categories, visual.categories)

    _out(f"  {THIN}")
    _out(f"  Text:     {text.product_count} on page, {text.total_products_if_paginated} paginated")
    _out(f"  Visual:   {visual.visible_product_count} visible")
    _out(f"  Total:    {total} ({confidence}% confidence)")
    _out(f"  {THIN}")
    logger.info(
        "Combined estimate for %s: text=%d paginated=%d visual=%d -> %d",
        url, text.product_count, text.total_products_if_paginated,
        visual.visible_product_count, total,
    )

    page_result = PageResult(
        url=url,
        product_count=total,
        categories=categories,
        confidence=confidence,
        evidence=_merge(text.evidence, visual.evidence),
        page_type=text.page_type or "unknown",
        title=title,
        status="completed",
    )
    result = AnalysisResult(
        total_product_count=total,
        pages_analyzed=1,
        page_results=[page_result],
        sitemap=[url],
        summary=(
            f"Estimated {total} products from text and screenshot analysis "
            f"with {confidence}% confidence. {text.reasoning}".strip()
        ),
        status="completed",
        details=AnalysisDetails(
            total_products=total,
            # A page's count is credited to every category it lists, as in the multi-page breakdown.
            products_by_category={category: total for category in categories},
            analysis_method=SINGLE_PAGE_METHOD,
            confidence=confidence,
            page_breakdown={url: total},
        ),
    )
    return CombinedAnalysis(result=result, screenshot_url=screenshot.url)
