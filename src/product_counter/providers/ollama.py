"""Ollama provider for local inference (e.g., llava for screenshots)."""

from __future__ import annotations

import logging

import httpx

from product_counter.config import Settings
from product_counter.fetcher import Screenshot
from product_counter.providers.base import AIProvider, ExtractionError

logger = logging.getLogger(__name__)


class OllamaProvider(AIProvider):
    name = "ollama"

    def __init__(self, settings: Settings) -> None:
        super().__init__(settings)
        self._base_url = settings.ollama_base_url.rstrip("/")
        self._model = settings.ollama_model

    def _chat(self, system: str, user: str, image: Screenshot | None, num_ctx: int = 16384) -> str:
        """Send a chat request to Ollama and return the response text."""
        user_message: dict = {"role": "user", "content": user}
        if image is not None:
            user_message["images"] = [self._encode_image(image)]

        payload: dict = {
            "model": self._model,
            "messages": [
                {"role": "system", "content": system},
                user_message,
            ],
            "stream": False,
            "format": "json",
            "options": {
                "temperature": self.settings.temperature,
                "num_ctx": num_ctx,
            },
        }

        with httpx.Client(timeout=600) as client:
            response = client.post(f"{self._base_url}/api/chat", json=payload)
            response.raise_for_status()

        return response.json().get("message", {}).get("content", "")

    def generate(self, system: str, user: str, image: Screenshot | None = None) -> str:
        try:
            return self._chat(system, user, image)
        except Exception as exc:
            logger.error("Ollama request failed: %s", exc)
            raise ExtractionError(f"Ollama request failed: {exc}") from exc
