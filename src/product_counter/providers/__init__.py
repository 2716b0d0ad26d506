"""Provider registry and factory with lazy imports."""

from __future__ import annotations

import importlib

from product_counter.config import Settings
from product_counter.providers.base import AIProvider

_PROVIDER_REGISTRY: dict[str, str] = {
    "openai": "product_counter.providers.openai.OpenAIProvider",
    "anthropic": "product_counter.providers.anthropic.AnthropicProvider",
    "ollama": "product_counter.providers.ollama.OllamaProvider",
    "groq": "product_counter.providers.groq.GroqProvider",
    "gemini": "product_counter.providers.gemini.GeminiProvider",
}


def get_provider(name: str, settings: Settings) -> AIProvider:
    """Instantiate an AI provider by name. Uses lazy imports."""
    if name not in _PROVIDER_REGISTRY:
        available = ", ".join(sorted(_PROVIDER_REGISTRY))
        raise ValueError(f"Unknown provider '{name}'. Available: {available}")

    module_path, class_name = _PROVIDER_REGISTRY[name].rsplit(".", 1)
    module = importlib.import_module(module_path)
    provider_class = getattr(module, class_name)
    return provider_class(settings)


def list_providers() -> list[str]:
    return sorted(_PROVIDER_REGISTRY)
