"""OpenAI provider using GPT-4o."""

from __future__ import annotations

import logging

from openai import OpenAI

from product_counter.config import Settings
from product_counter.fetcher import Screenshot
from product_counter.providers.base import AIProvider, ExtractionError

logger = logging.getLogger(__name__)


def chat_messages(provider: AIProvider, system: str, user: str, image: Screenshot | None) -> list[dict]:
    """Chat-completions messages, with the image inlined as a data URI."""
    if image is None:
        user_content: str | list[dict] = user
    else:
        data_uri = f"data:{image.mime_type};base64,{provider._encode_image(image)}"
        user_content = [
            {"type": "text", "text": user},
            {"type": "image_url", "image_url": {"url": data_uri}},
        ]
    return [
        {"role": "system", "content": system},
        {"role": "user", "content": user_content},
    ]


class OpenAIProvider(AIProvider):
    name = "openai"

    def __init__(self, settings: Settings) -> None:
        super().__init__(settings)
        if not settings.openai_api_key:
            raise ValueError("OPENAI_API_KEY is required for the OpenAI provider")
        self._client = OpenAI(api_key=settings.openai_api_key)

    def _chat(self, system: str, user: str, image: Screenshot | None) -> str:
        """Send a chat request to OpenAI and return the response text."""
        response = self._client.chat.completions.create(
            model=self.settings.openai_model,
            messages=chat_messages(self, system, user, image),
            temperature=self.settings.temperature,
            response_format={"type": "json_object"},
        )
        return response.choices[0].message.content or ""

    def generate(self, system: str, user: str, image: Screenshot | None = None) -> str:
        try:
            return self._chat(system, user, image)
        except Exception as exc:
            logger.error("OpenAI request failed: %s", exc)
            raise ExtractionError(f"OpenAI request failed: {exc}") from exc
