"""Multi-page crawl: discover pages, count products on each, add them up.

Pipeline:
  Stage 1 — Discover:  homepage links + sitemap, bucketed and capped
  Stage 2 — Analyze:   one AI estimate per page, paced by a rate limiter
  Stage 3 — Aggregate: totals, category breakdown, average confidence
"""

from __future__ import annotations

import logging
import sys
import time
from typing import Callable

from product_counter.analyzer import analyze_page
from product_counter.config import Settings
from product_counter.discovery import discover_pages
from product_counter.models import AnalysisDetails, AnalysisResult, CrawlProgress, PageResult
from product_counter.providers import get_provider
from product_counter.ratelimit import RateLimiter

logger = logging.getLogger(__name__)

LINE = "=" * 60
THIN = "-" * 55

MULTI_PAGE_METHOD = "Multi-page crawl with AI analysis per page"

ProgressCallback = Callable[[CrawlProgress], None]


def _out(msg: str = "") -> None:
    """Print a status message to stderr so it doesn't mix with JSON output."""
    print(msg, file=sys.stderr, flush=True)


def _elapsed(t: float) -> str:
    """Format elapsed seconds as human-readable string."""
    secs = time.time() - t
    if secs < 60:
        return f"{secs:.1f}s"
    return f"{secs / 60:.1f}m"


def aggregate(page_results: list[PageResult], discovered: list[str]) -> AnalysisResult:
    """Combine per-page results into the run's AnalysisResult.

    Only completed pages contribute to totals, categories and confidence.
    """
    completed = [p for p in page_results if p.status == "completed"]
    total = sum(p.product_count for p in completed)

    by_category: dict[str, int] = {}
    breakdown: dict[str, int] = {}
    for page in completed:
        for category in page.categories:
            by_category[category] = by_category.get(category, 0) + page.product_count
        breakdown[page.url] = page.product_count

    confidence = round(sum(p.confidence for p in completed) / len(completed)) if completed else 0

    if not completed:
        status = "failed"
    elif len(completed) < len(page_results):
        status = "partial"
    else:
        status = "completed"

    return AnalysisResult(
        total_product_count=total,
        pages_analyzed=len(completed),
        page_results=list(page_results),
        sitemap=list(discovered),
        summary=(
            f"Found {total} products across {len(completed)} pages. "
            f"Analyzed {len(discovered)} pages total with {confidence}% average confidence."
        ),
        status=status,
        details=AnalysisDetails(
            total_products=total,
            products_by_category=by_category,
            analysis_method=MULTI_PAGE_METHOD,
            confidence=confidence,
            page_breakdown=breakdown,
        ),
    )


def crawl(
    start_url: str,
    provider_name: str | None = None,
    settings: Settings | None = None,
    on_progress: ProgressCallback | None = None,
    limiter: RateLimiter | None = None,
) -> AnalysisResult:
    """
    Discover pages under start_url and estimate the products on each, one at a time.

    Args:
        provider_name: AI provider. Defaults to settings.default_provider.
        on_progress: Called after discovery and after every page.
        limiter: Pauses between pages. Defaults to settings.page_delay seconds
            from the end of one page to the start of the next.
    """
    if settings is None:
        settings = Settings.from_env()

    provider_name = provider_name or settings.default_provider
    provider = get_provider(provider_name, settings)
    limiter = limiter or RateLimiter(settings.page_delay, name="Page delay")
    crawl_start = time.time()

    def report(progress: CrawlProgress) -> None:
        if on_progress is not None:
            on_progress(progress)

    _out(f"\n{LINE}")
    _out("  Product Counter - Multi-page analysis")
    _out(LINE)
    _out(f"  URL:      {start_url}")
    _out(f"  Provider: {provider_name}")
    _out(LINE)

    _out()
    _out("--- Stage 1: Discovering pages ---")
    report(CrawlProgress(stage="Discovering pages", current_page=start_url))
    t0 = time.time()
    pages = discover_pages(start_url, settings)
    _out(f"  Found {len(pages)} pages to analyze ({_elapsed(t0)})")
    logger.info("Found %d pages to analyze", len(pages))

    progress = CrawlProgress(stage="Analyzing pages for products", pages_found=len(pages))
    report(progress)

    _out()
    _out(f"--- Stage 2: Analyzing pages ({len(pages)} URLs) ---")
    _out()

    page_results: list[PageResult] = []
    total_products = 0
    for i, url in enumerate(pages):
        limiter.wait()
        _out(f"[{i + 1}/{len(pages)}] {url}")
        progress = progress.model_copy(update={"current_page": url, "pages_analyzed": i})
        report(progress)

        t0 = time.time()
        result = analyze_page(url, provider, settings)
        limiter.mark()
        page_results.append(result)

        if result.status == "completed":
            total_products += result.product_count
            _out(f"  {THIN}")
            _out(f"  Products: {result.product_count} ({result.page_type}, {result.confidence}% confidence)")
            _out(f"  {THIN}")
        else:
            _out(f"  [!] {result.error_message}")
        _out(f"  Progress: {total_products} products so far ({_elapsed(t0)})")
        _out()

        progress = progress.model_copy(update={"pages_analyzed": i + 1, "total_products": total_products})
        report(progress)

    result = aggregate(page_results, pages)
    report(CrawlProgress(
        stage="Complete",
        pages_found=len(pages),
        pages_analyzed=len(page_results),
        total_products=result.total_product_count,
    ))

    _out(LINE)
    _out("  ANALYSIS COMPLETE")
    _out(LINE)
    _out(f"  Pages analyzed:   {result.pages_analyzed}/{len(pages)}")
    _out(f"  Total products:   {result.total_product_count}")
    _out(f"  Confidence:       {result.details.confidence}%")
    _out(f"  Total time:       {_elapsed(crawl_start)}")
    _out(LINE)
    _out()

    logger.info(
        "Crawl complete. Pages: %d/%d, Products: %d, Status: %s",
        result.pages_analyzed, len(pages), result.total_product_count, result.status,
    )
    return result
