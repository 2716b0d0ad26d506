"""Centralized configuration loaded from .env."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


def _load_env() -> None:
    env_path = Path.cwd() / ".env"
    if env_path.exists():
        load_dotenv(dotenv_path=env_path)
    else:
        load_dotenv()


@dataclass(frozen=True)
class Settings:
    scraper_api_key: str = ""

    # AI provider keys
    openai_api_key: str = ""
    openai_model: str = "gpt-4o"
    anthropic_api_key: str = ""
    claude_model: str = "claude-haiku-4-5-20251001"

    # Ollama config (use a vision-capable model for single-page mode)
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "llava"

    # Groq config (OpenAI-compatible, free tier)
    groq_api_key: str = ""
    groq_model: str = "meta-llama/llama-4-scout-17b-16e-instruct"

    # Gemini config
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"

    default_provider: str = "openai"
    temperature: float = 0.0

    # ScraperAPI tuning
    scraper_timeout: int = 60
    render_js: bool = True
    fetch_attempts: int = 1  # 1 = no retries
    screenshot_device: str = "desktop"

    # Discovery policy
    sitemap_paths: tuple[str, ...] = ("sitemap.xml", "sitemap_index.xml", "product-sitemap.xml")
    max_product_pages: int = 15
    max_category_pages: int = 10
    max_other_pages: int = 5
    max_total_pages: int = 30

    # Analysis policy
    min_content_chars: int = 100
    page_content_chars: int = 20_000
    combined_content_chars: int = 25_000
    page_delay: float = 1.0

    # Record store
    data_dir: str = ".product_counter"
    history_limit: int = 10

    @classmethod
    def from_env(cls) -> Settings:
        _load_env()
        scraper_key = os.getenv("SCRAPER_API_KEY", "")
        if not scraper_key:
            raise ValueError(
                "SCRAPER_API_KEY is required. Set it in your .env file."
            )
        return cls(
            scraper_api_key=scraper_key,
            openai_api_key=os.getenv("OPENAI_API_KEY", ""),
            openai_model=os.getenv("OPENAI_MODEL", "gpt-4o"),
            anthropic_api_key=os.getenv("ANTHROPIC_API_KEY", ""),
            claude_model=os.getenv("CLAUDE_MODEL", "claude-haiku-4-5-20251001"),
            ollama_base_url=os.getenv("OLLAMA_BASE_URL", "http://localhost:11434"),
            ollama_model=os.getenv("OLLAMA_MODEL", "llava"),
            groq_api_key=os.getenv("GROQ_API_KEY", ""),
            groq_model=os.getenv("GROQ_MODEL", "meta-llama/llama-4-scout-17b-16e-instruct"),
            gemini_api_key=os.getenv("GEMINI_API_KEY", ""),
            gemini_model=os.getenv("GEMINI_MODEL", "gemini-2.5-flash"),
            default_provider=os.getenv("DEFAULT_PROVIDER", "openai"),
            fetch_attempts=int(os.getenv("FETCH_ATTEMPTS", "1")),
            page_delay=float(os.getenv("PAGE_DELAY", "1.0")),
            data_dir=os.getenv("PRODUCT_COUNTER_DATA_DIR", ".product_counter"),
        )
