"""Tests for product_counter.config module."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from product_counter.config import Settings


class TestSettings:
    def test_default_values(self):
        s = Settings(scraper_api_key="test-key")
        assert s.scraper_api_key == "test-key"
        assert s.openai_api_key == ""
        assert s.anthropic_api_key == ""
        assert s.claude_model == "claude-haiku-4-5-20251001"
        assert s.ollama_base_url == "http://localhost:11434"
        assert s.gemini_model == "gemini-2.5-flash"
        assert s.render_js is True
        assert s.temperature == 0.0
        assert s.default_provider == "openai"
        assert s.fetch_attempts == 1

    def test_policy_defaults(self):
        s = Settings()
        assert s.sitemap_paths == ("sitemap.xml", "sitemap_index.xml", "product-sitemap.xml")
        assert (s.max_product_pages, s.max_category_pages, s.max_other_pages) == (15, 10, 5)
        assert s.max_total_pages == 30
        assert s.min_content_chars == 100
        assert s.page_content_chars == 20_000
        assert s.combined_content_chars == 25_000
        assert s.page_delay == 1.0
        assert s.history_limit == 10

    def test_frozen_dataclass(self):
        s = Settings(scraper_api_key="test-key")
        with pytest.raises(AttributeError):
            s.scraper_api_key = "new-key"  # type: ignore[misc]

    def test_from_env_reads_env_vars(self):
        env = {
            "SCRAPER_API_KEY": "my-scraper-key",
            "OPENAI_API_KEY": "my-openai-key",
            "OPENAI_MODEL": "gpt-4o-mini",
            "ANTHROPIC_API_KEY": "my-anthropic-key",
            "CLAUDE_MODEL": "claude-sonnet-4-20250514",
            "OLLAMA_BASE_URL": "http://myhost:11434",
            "OLLAMA_MODEL": "llava:13b",
            "GROQ_API_KEY": "my-groq-key",
            "GEMINI_API_KEY": "my-gemini-key",
            "GEMINI_MODEL": "gemini-pro",
            "DEFAULT_PROVIDER": "anthropic",
            "FETCH_ATTEMPTS": "3",
            "PAGE_DELAY": "2.5",
            "PRODUCT_COUNTER_DATA_DIR": "/tmp/pc",
        }
        with patch.dict("os.environ", env, clear=False), \
             patch("product_counter.config.load_dotenv"):
            s = Settings.from_env()
            assert s.scraper_api_key == "my-scraper-key"
            assert s.openai_api_key == "my-openai-key"
            assert s.openai_model == "gpt-4o-mini"
            assert s.anthropic_api_key == "my-anthropic-key"
            assert s.claude_model == "claude-sonnet-4-20250514"
            assert s.ollama_base_url == "http://myhost:11434"
            assert s.ollama_model == "llava:13b"
            assert s.groq_api_key == "my-groq-key"
            assert s.gemini_api_key == "my-gemini-key"
            assert s.gemini_model == "gemini-pro"
            assert s.default_provider == "anthropic"
            assert s.fetch_attempts == 3
            assert s.page_delay == 2.5
            assert s.data_dir == "/tmp/pc"

    def test_from_env_requires_scraper_key(self):
        with (
            patch.dict("os.environ", {"SCRAPER_API_KEY": ""}, clear=False),
            patch("product_counter.config.load_dotenv"),
            pytest.raises(ValueError, match="SCRAPER_API_KEY is required"),
        ):
            Settings.from_env()
