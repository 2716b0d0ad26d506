"""Anthropic Claude provider."""

from __future__ import annotations

import logging

import anthropic

from product_counter.config import Settings
from product_counter.fetcher import Screenshot
from product_counter.providers.base import AIProvider, ExtractionError

logger = logging.getLogger(__name__)


class AnthropicProvider(AIProvider):
    name = "anthropic"

    def __init__(self, settings: Settings) -> None:
        super().__init__(settings)
        if not settings.anthropic_api_key:
            raise ValueError("ANTHROPIC_API_KEY is required for the Anthropic provider")
        self._client = anthropic.Anthropic(api_key=settings.anthropic_api_key)

    def _chat(self, system: str, user: str, image: Screenshot | None) -> str:
        """Send a message to Anthropic and return the response text."""
        content: list[dict] = []
        if image is not None:
            content.append({
                "type": "image",
                "source": {
                    "type": "base64",
                    "media_type": image.mime_type,
                    "data": self._encode_image(image),
                },
            })
        content.append({"type": "text", "text": user})

        response = self._client.messages.create(
            model=self.settings.claude_model,
            max_tokens=2048,
            system=system,
            messages=[{"role": "user", "content": content}],
            temperature=self.settings.temperature,
        )
        return response.content[0].text

    def generate(self, system: str, user: str, image: Screenshot | None = None) -> str:
        try:
            return self._chat(system, user, image)
        except Exception as exc:
            logger.error("Anthropic request failed: %s", exc)
            raise ExtractionError(f"Anthropic request failed: {exc}") from exc
