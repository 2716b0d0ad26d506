"""Google Gemini provider — generous free tier, native image input."""

from __future__ import annotations

import logging

from google import genai
from google.genai import types

from product_counter.config import Settings
from product_counter.fetcher import Screenshot
from product_counter.providers.base import AIProvider, ExtractionError
from product_counter.ratelimit import RateLimiter

logger = logging.getLogger(__name__)

# Seconds between API calls to stay within the free tier's 10 RPM.
GEMINI_RATE_LIMIT_DELAY = 7


class GeminiProvider(AIProvider):
    name = "gemini"

    def __init__(self, settings: Settings) -> None:
        super().__init__(settings)
        if not settings.gemini_api_key:
            raise ValueError("GEMINI_API_KEY is required for the Gemini provider")
        self._client = genai.Client(api_key=settings.gemini_api_key)
        self._model = settings.gemini_model
        self._limiter = RateLimiter(GEMINI_RATE_LIMIT_DELAY, name="Gemini rate limit")

    def _chat(self, system: str, user: str, image: Screenshot | None) -> str:
        """Send a request to Gemini and return the response text."""
        self._limiter.wait()

        config = types.GenerateContentConfig(
            system_instruction=system,
            temperature=self.settings.temperature,
            response_mime_type="application/json",
        )
        contents: list = [user]
        if image is not None:
            contents.insert(0, types.Part.from_bytes(data=image.image, mime_type=image.mime_type))

        response = self._client.models.generate_content(
            model=self._model,
            config=config,
            contents=contents,
        )
        return response.text or ""

    def generate(self, system: str, user: str, image: Screenshot | None = None) -> str:
        try:
            return self._chat(system, user, image)
        except Exception as exc:
            logger.error("Gemini request failed: %s", exc)
            raise ExtractionError(f"Gemini request failed: {exc}") from exc
