"""One analysis run end to end: validate, record, analyse, report."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal

from product_counter.combined import AnalysisError, analyze_combined
from product_counter.config import Settings
from product_counter.crawler import ProgressCallback, crawl
from product_counter.fetcher import FetchError
from product_counter.models import AnalysisRecord, AnalysisResult
from product_counter.providers.base import ExtractionError
from product_counter.session import NotSignedInError, Session
from product_counter.store import AnalysisStore, StoreError
from product_counter.urls import InvalidURLError, validate_url

logger = logging.getLogger(__name__)

Mode = Literal["multi", "single"]

NO_PAGES_ERROR = "No pages could be analyzed"


@dataclass
class RunOutcome:
    """What the user sees after a run: a result, an error message, or both."""

    url: str | None
    result: AnalysisResult | None = None
    record: AnalysisRecord | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ProductCounter:
    """Runs analyses for the session's user and keeps their history current."""

    def __init__(
        self,
        settings: Settings,
        session: Session,
        store: AnalysisStore,
        provider_name: str | None = None,
    ) -> None:
        self.settings = settings
        self.session = session
        self.store = store
        self.provider_name = provider_name

    def _save(self, record: AnalysisRecord | None, **fields) -> AnalysisRecord | None:
        if record is None:
            return None
        try:
            return self.store.update(record.id, **fields)
        except StoreError as exc:
            logger.error("Failed to update analysis record: %s", exc)
            return record

    def analyze(
        self,
        raw_url: str,
        mode: Mode = "multi",
        on_progress: ProgressCallback | None = None,
    ) -> RunOutcome:
        """Run one analysis. Never raises for user-facing failures; see RunOutcome.error."""
        try:
            user = self.session.require_user()
            url = validate_url(raw_url)
        except (NotSignedInError, InvalidURLError) as exc:
            return RunOutcome(url=None, error=str(exc))

        logger.info("Starting %s-page analysis for %s", mode, url)
        try:
            record: AnalysisRecord | None = self.store.create(user.id, url)
        except StoreError as exc:
            logger.error("Failed to create analysis record: %s", exc)
            record = None

        outcome = RunOutcome(url=url, record=record)
        try:
            if mode == "single":
                combined = analyze_combined(url, self.provider_name, self.settings)
                result, screenshot_url = combined.result, combined.screenshot_url
            else:
                result = crawl(url, self.provider_name, self.settings, on_progress=on_progress)
                screenshot_url = None
        except (AnalysisError, FetchError, ExtractionError, ValueError) as exc:
            logger.error("Analysis failed for %s: %s", url, exc)
            outcome.error = str(exc) or "Analysis failed. Please try again."
            outcome.record = self._save(record, status="failed", error_message=outcome.error)
        except Exception as exc:
            logger.exception("Unexpected error analyzing %s", url)
            outcome.error = f"Analysis failed: {exc}" if str(exc) else "Analysis failed. Please try again."
            outcome.record = self._save(record, status="failed", error_message=outcome.error)
        else:
            outcome.result = result
            if result.status == "failed":
                outcome.error = NO_PAGES_ERROR
            outcome.record = self._save(
                record,
                status="failed" if result.status == "failed" else "completed",
                product_count=result.total_product_count,
                screenshot_url=screenshot_url,
                analysis_details=result.model_dump_json(),
                error_message=outcome.error,
            )
        finally:
            self.session.refresh_history()

        return outcome
