"""CSV export of per-page results."""

from __future__ import annotations

import csv
import io
import logging
from datetime import date
from pathlib import Path

from product_counter.models import AnalysisResult

logger = logging.getLogger(__name__)

CSV_HEADER = [
    "Page URL", "Page Title", "Product Count", "Page Type",
    "Categories", "Confidence", "Status", "Evidence",
]


def export_filename(today: date | None = None) -> str:
    return f"product-analysis-{(today or date.today()).isoformat()}.csv"


def build_csv(result: AnalysisResult | None) -> str | None:
    """Generate the CSV text for a result, or None when there is nothing to export."""
    if result is None or not result.page_results:
        return None

    output = io.StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for page in result.page_results:
        writer.writerow([
            page.url,
            page.title,
            str(page.product_count),
            page.page_type,
            "; ".join(page.categories),
            str(page.confidence),
            page.status,
            "; ".join(page.evidence),
        ])
    return output.getvalue()


def export_csv(result: AnalysisResult | None, directory: Path, today: date | None = None) -> Path | None:
    """Write ``product-analysis-<date>.csv`` into directory. Writes nothing for an empty result."""
    content = build_csv(result)
    if content is None:
        logger.info("Nothing to export")
        return None

    directory.mkdir(parents=True, exist_ok=True)
    path = directory / export_filename(today)
    path.write_text(content, encoding="utf-8")
    logger.info("Exported %d rows to %s", len(result.page_results), path)
    return path
