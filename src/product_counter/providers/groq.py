"""Groq provider — free, fast inference via OpenAI-compatible API."""

from __future__ import annotations

import logging

from openai import OpenAI

from product_counter.config import Settings
from product_counter.fetcher import Screenshot
from product_counter.providers.base import AIProvider, ExtractionError
from product_counter.providers.openai import chat_messages
from product_counter.ratelimit import RateLimiter

logger = logging.getLogger(__name__)

GROQ_BASE_URL = "https://api.groq.com/openai/v1"

# Seconds to wait between API calls to respect free-tier TPM limits.
GROQ_RATE_LIMIT_DELAY = 15


class GroqProvider(AIProvider):
    name = "groq"

    def __init__(self, settings: Settings) -> None:
        super().__init__(settings)
        if not settings.groq_api_key:
            raise ValueError("GROQ_API_KEY is required for the Groq provider")
        self._client = OpenAI(
            api_key=settings.groq_api_key,
            base_url=GROQ_BASE_URL,
        )
        self._model = settings.groq_model
        self._limiter = RateLimiter(GROQ_RATE_LIMIT_DELAY, name="Groq rate limit")

    def _chat(self, system: str, user: str, image: Screenshot | None) -> str:
        """Send a chat request to Groq and return the response text."""
        self._limiter.wait()
        response = self._client.chat.completions.create(
            model=self._model,
            messages=chat_messages(self, system, user, image),
            temperature=self.settings.temperature,
            response_format={"type": "json_object"},
        )
        return response.choices[0].message.content or ""

    def generate(self, system: str, user: str, image: Screenshot | None = None) -> str:
        try:
            return self._chat(system, user, image)
        except Exception as exc:
            logger.error("Groq request failed: %s", exc)
            raise ExtractionError(f"Groq request failed: {exc}") from exc
