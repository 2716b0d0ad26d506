"""JSON file store for analysis history records."""

from __future__ import annotations

import json
import logging
import secrets
import time
from datetime import datetime, timezone
from pathlib import Path

from pydantic import ValidationError

from product_counter.models import AnalysisRecord

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path(".product_counter")


class StoreError(Exception):
    """Raised when a record cannot be written."""


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def new_record_id() -> str:
    return f"analysis_{int(time.time() * 1000)}_{secrets.token_hex(3)}"


class AnalysisStore:
    """Stores one AnalysisRecord per JSON file in a records directory."""

    def __init__(self, data_dir: Path | None = None) -> None:
        self._dir = (data_dir or DEFAULT_DATA_DIR) / "analyses"
        self._dir.mkdir(parents=True, exist_ok=True)

    def _path(self, record_id: str) -> Path:
        return self._dir / f"{record_id}.json"

    def _write(self, record: AnalysisRecord) -> None:
        try:
            self._path(record.id).write_text(record.model_dump_json(), encoding="utf-8")
        except OSError as exc:
            raise StoreError(f"Failed to save analysis {record.id}: {exc}") from exc
        logger.debug("Saved analysis %s (%s)", record.id, record.status)

    def get(self, record_id: str) -> AnalysisRecord | None:
        path = self._path(record_id)
        if not path.exists():
            return None
        try:
            return AnalysisRecord.model_validate_json(path.read_text(encoding="utf-8"))
        except (ValidationError, UnicodeDecodeError, OSError):
            logger.warning("Unreadable analysis record %s", path)
            return None

    def create(self, user_id: str, website_url: str, status: str = "analyzing") -> AnalysisRecord:
        now = utc_now()
        record = AnalysisRecord(
            id=new_record_id(),
            user_id=user_id,
            website_url=website_url,
            status=status,
            created_at=now,
            updated_at=now,
        )
        self._write(record)
        return record

    def update(self, record_id: str, **fields) -> AnalysisRecord:
        record = self.get(record_id)
        if record is None:
            raise StoreError(f"Unknown analysis {record_id}")
        updated = record.model_copy(update={**fields, "updated_at": utc_now()})
        # model_copy skips validation; round-trip to reject bad field values
        updated = AnalysisRecord.model_validate(updated.model_dump())
        self._write(updated)
        return updated

    def list_for_user(self, user_id: str, limit: int = 10) -> list[AnalysisRecord]:
        """The user's records, newest first."""
        records = []
        for path in self._dir.glob("*.json"):
            record = self.get(path.stem)
            if record is not None and record.user_id == user_id:
                records.append(record)
        records.sort(key=lambda r: (r.created_at, r.id), reverse=True)
        return records[:limit]
