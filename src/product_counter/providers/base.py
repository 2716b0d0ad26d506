"""Abstract base class for all AI providers."""

from __future__ import annotations

import base64
import json
import logging
from abc import ABC, abstractmethod
from typing import TypeVar

from pydantic import BaseModel

from product_counter.cleaner import truncate
from product_counter.config import Settings
from product_counter.fetcher import Screenshot
from product_counter.models import PageEstimate, VisualEstimate

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

SYSTEM_PROMPT = """\
You are an ecommerce analyst who counts the products a web page offers for \
sale. Only count what is actually present. Do not invent data. \
Return ONLY valid JSON matching the requested schema. No code fences."""

PAGE_COUNT_PROMPT = """\
TASK: Count the exact number of products displayed on this ecommerce page.

PAGE URL: {page_url}
PAGE TITLE: {title}

CONTENT TO ANALYZE:
{content}

INSTRUCTIONS:
1. Count ONLY actual products that are for sale on this specific page
2. Look for clear product indicators:
   - Product titles/names
   - Prices ($ amounts)
   - "Add to Cart" or "Buy Now" buttons
   - Product images with descriptions
   - SKU numbers or product codes

3. Determine page type:
   - "product": Single product detail page (usually count = 1)
   - "category": Category/listing page with multiple products
   - "homepage": Main page (may have featured products)
   - "search": Search results page
   - "other": Non-product page (count = 0)

4. For listing/category pages: Count each distinct product shown
5. Don't count:
   - Navigation menu items
   - Related/recommended products in sidebars (unless main content)
   - Advertisements
   - Blog posts or articles

6. Look for pagination indicators like "Page 1 of 5" or "Showing 1-20 of 100 products"

Respond with JSON only:
{{
  "productCount": <exact number of products on this page>,
  "pageType": "<product|category|homepage|search|other>",
  "categories": ["<category1>", "<category2>"],
  "confidence": <0-100 confidence score>,
  "evidence": ["<specific evidence found>"],
  "reasoning": "<brief explanation of your count>",
  "hasPagination": <true/false if pagination detected>,
  "totalProductsIfPaginated": <estimated total if pagination found>
}}"""

STORE_TOTAL_PROMPT = """\
TASK: Estimate how many products this online store sells in total, starting \
from the page below.

PAGE URL: {page_url}
PAGE TITLE: {title}

CONTENT TO ANALYZE:
{content}

INSTRUCTIONS:
1. Count the distinct products listed on this page (productCount)
2. Use result counters ("Showing 1-24 of 380 results", "Page 1 of 12", \
"412 items") to estimate the total across all pages of the listing \
(totalProductsIfPaginated) and set hasPagination accordingly
3. List the product categories you can identify
4. Ignore navigation items, advertisements, blog posts and articles

Respond with JSON only:
{{
  "productCount": <number of products on this page>,
  "pageType": "<product|category|homepage|search|other>",
  "categories": ["<category1>", "<category2>"],
  "confidence": <0-100 confidence score>,
  "evidence": ["<specific evidence found>"],
  "reasoning": "<brief explanation of your count>",
  "hasPagination": <true/false>,
  "totalProductsIfPaginated": <estimated total across all pages, 0 if unknown>
}}"""

SCREENSHOT_PROMPT = """\
TASK: The attached image is a full-page screenshot of {page_url}. Count the \
distinct products visibly offered for sale in it.

Count a product when you can see a product tile or listing: an image with a \
name, a price, or a buy/add-to-cart control. Do not count banners, logos, \
navigation entries or advertisements.

Respond with JSON only:
{{
  "visibleProductCount": <number of products visible in the screenshot>,
  "confidence": <0-100 confidence score>,
  "categories": ["<category1>", "<category2>"],
  "evidence": ["<what you saw>"],
  "layout": "<grid|list|single product|other>"
}}"""


class ExtractionError(Exception):
    """Raised when an AI call fails or its answer cannot be parsed."""


class AIProvider(ABC):
    """Contract for AI-powered product counting providers."""

    name: str

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    @abstractmethod
    def generate(self, system: str, user: str, image: Screenshot | None = None) -> str:
        """
        Send one prompt (optionally with an image attached) and return the raw JSON text.

        Raises:
            ExtractionError: when the provider call fails.
        """
        ...

    def estimate_page(self, content: str, page_url: str, title: str) -> PageEstimate:
        """Ask for the product count of one page (multi-page flow)."""
        user = PAGE_COUNT_PROMPT.format(
            page_url=page_url,
            title=title or "Unknown",
            content=truncate(content, self.settings.page_content_chars),
        )
        return self._parse_response(self.generate(SYSTEM_PROMPT, user), PageEstimate)

    def estimate_store(self, content: str, page_url: str, title: str) -> PageEstimate:
        """Ask for the store-wide total implied by one page's text (single-page flow)."""
        user = STORE_TOTAL_PROMPT.format(
            page_url=page_url,
            title=title or "Unknown",
            content=truncate(content, self.settings.combined_content_chars),
        )
        return self._parse_response(self.generate(SYSTEM_PROMPT, user), PageEstimate)

    def estimate_screenshot(self, screenshot: Screenshot, page_url: str) -> VisualEstimate:
        """Ask for the number of products visible in a screenshot."""
        user = SCREENSHOT_PROMPT.format(page_url=page_url)
        raw = self.generate(SYSTEM_PROMPT, user, image=screenshot)
        return self._parse_response(raw, VisualEstimate)

    @staticmethod
    def _encode_image(image: Screenshot) -> str:
        return base64.b64encode(image.image).decode("ascii")

    def _parse_response(self, raw_json: str, model: type[ModelT]) -> ModelT:
        """Parse AI response JSON into the given schema."""
        text = raw_json.strip()

        # Strip markdown code fences if present (```json ... ```)
        if text.startswith("```"):
            first_nl = text.find("\n")
            if first_nl != -1:
                text = text[first_nl + 1:]
            if text.rstrip().endswith("```"):
                text = text.rstrip()[:-3].rstrip()

        try:
            return model.model_validate(json.loads(text))
        except (json.JSONDecodeError, ValueError):
            pass

        # Chatty models wrap the object in prose; decode from the first brace.
        start = text.find("{")
        if start != -1:
            try:
                obj, _ = json.JSONDecoder().raw_decode(text[start:])
                return model.model_validate(obj)
            except (json.JSONDecodeError, ValueError):
                pass

        raise ExtractionError(f"Failed to parse AI response: {text[:200]}")
