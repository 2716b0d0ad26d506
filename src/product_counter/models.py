"""Pydantic models for the product counting pipeline."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

RecordStatus = Literal["pending", "analyzing", "completed", "failed"]
PageStatus = Literal["completed", "failed", "skipped"]
RunStatus = Literal["completed", "partial", "failed"]


# Coercion helpers signal bad model output with ValueError only.

def _as_number(value) -> int:
    if value is None or value == "":
        return 0
    try:
        return int(round(float(value)))
    except (TypeError, ValueError, OverflowError) as exc:
        raise ValueError(f"expected a number, got {value!r}") from exc


def _as_count(value) -> int:
    return max(_as_number(value), 0)


def _as_confidence(value) -> int:
    return min(max(_as_number(value), 0), 100)


def _as_strings(value) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value else []
    if not isinstance(value, (list, tuple)):
        raise ValueError(f"expected a list of strings, got {value!r}")
    return [str(v) for v in value if v is not None and str(v)]


class _ModelResponse(BaseModel):
    """Base for schemas returned by the AI. Accepts camelCase or snake_case keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class PageEstimate(_ModelResponse):
    """What the AI returns when asked to count products on one page."""

    product_count: int = Field(default=0, description="Products shown on this page")
    page_type: str = Field(default="unknown", description="product|category|homepage|search|other")
    categories: list[str] = Field(default_factory=list)
    confidence: int = Field(default=0, description="0-100 confidence score")
    evidence: list[str] = Field(default_factory=list)
    reasoning: str = Field(default="")
    has_pagination: bool = Field(default=False)
    total_products_if_paginated: int = Field(
        default=0,
        description="Estimated total across all pages when pagination was detected",
    )

    @field_validator("product_count", "total_products_if_paginated", mode="before")
    @classmethod
    def _count(cls, v):
        return _as_count(v)

    @field_validator("confidence", mode="before")
    @classmethod
    def _confidence(cls, v):
        return _as_confidence(v)

    @field_validator("categories", "evidence", mode="before")
    @classmethod
    def _strings(cls, v):
        return _as_strings(v)

    @field_validator("page_type", "reasoning", mode="before")
    @classmethod
    def _text(cls, v):
        return "" if v is None else str(v)

    @field_validator("has_pagination", mode="before")
    @classmethod
    def _flag(cls, v):
        # Strings such as "false" are left to pydantic's bool parsing.
        return False if v is None else v


class VisualEstimate(_ModelResponse):
    """What the AI returns when asked to count products on a screenshot."""

    visible_product_count: int = Field(default=0)
    confidence: int = Field(default=0)
    categories: list[str] = Field(default_factory=list)
    evidence: list[str] = Field(default_factory=list)
    layout: str = Field(default="", description="Short description of the page layout")

    @field_validator("visible_product_count", mode="before")
    @classmethod
    def _count(cls, v):
        return _as_count(v)

    @field_validator("confidence", mode="before")
    @classmethod
    def _confidence(cls, v):
        return _as_confidence(v)

    @field_validator("categories", "evidence", mode="before")
    @classmethod
    def _strings(cls, v):
        return _as_strings(v)

    @field_validator("layout", mode="before")
    @classmethod
    def _text(cls, v):
        return "" if v is None else str(v)


class ScrapedPage(BaseModel):
    """Text, title and outbound links of a fetched page."""

    url: str
    title: str = ""
    text: str = ""
    links: list[str] = Field(default_factory=list)


class PageResult(BaseModel):
    """Outcome of product-count estimation for a single URL."""

    model_config = ConfigDict(frozen=True)

    url: str
    product_count: int = 0
    categories: list[str] = Field(default_factory=list)
    confidence: int = 0
    evidence: list[str] = Field(default_factory=list)
    page_type: str = "unknown"
    title: str = "Unknown"
    status: PageStatus = "completed"
    error_message: str | None = None


class AnalysisDetails(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_products: int = 0
    products_by_category: dict[str, int] = Field(default_factory=dict)
    analysis_method: str = ""
    confidence: int = 0
    page_breakdown: dict[str, int] = Field(default_factory=dict)


class AnalysisResult(BaseModel):
    """Final aggregated output of one analysis run."""

    model_config = ConfigDict(frozen=True)

    total_product_count: int = 0
    pages_analyzed: int = Field(default=0, description="Pages that completed analysis")
    page_results: list[PageResult] = Field(default_factory=list)
    sitemap: list[str] = Field(default_factory=list, description="Discovered URLs")
    summary: str = ""
    status: RunStatus = "completed"
    details: AnalysisDetails = Field(default_factory=AnalysisDetails)


class AnalysisRecord(BaseModel):
    """Persisted history entry for one analysis run."""

    id: str
    user_id: str
    website_url: str
    status: RecordStatus = "pending"
    product_count: int | None = None
    screenshot_url: str | None = None
    analysis_details: str | None = Field(
        default=None,
        description="AnalysisResult serialized as JSON",
    )
    error_message: str | None = None
    created_at: str
    updated_at: str


class CrawlProgress(BaseModel):
    stage: str = ""
    current_page: str = ""
    pages_found: int = 0
    pages_analyzed: int = 0
    total_products: int = 0
