"""Shared fixtures for Product Counter tests."""

from __future__ import annotations

import pytest

from product_counter.config import Settings

SAMPLE_HTML = """\
<!DOCTYPE html>
<html>
<head>
    <title>Acme Outdoor Store</title>
    <script>var x = 1; console.log("hello");</script>
    <style>body { color: red; }</style>
</head>
<body>
    <nav>
        <a href="/">Home</a>
        <a href="/collections/tents">Tents</a>
        <a href="/category/backpacks">Backpacks</a>
    </nav>
    <div class="content">
        <h1>Summer Sale</h1>
        <div class="product"><a href="/products/trail-tent">Trail Tent</a> $199.00 Add to Cart</div>
        <div class="product"><a href="/products/summit-pack">Summit Pack</a> $89.00 Add to Cart</div>
        <a href="https://other-store.com/products/x">Partner</a>
        <a href="#top">Top</a>
        <img src="https://acme.example/img/tent.jpg" alt="tent">
    </div>
    <footer>Copyright 2024 <a href="/pages/about-us">About</a></footer>
    <!-- This is a comment -->
    <noscript>Please enable JavaScript</noscript>
    <iframe src="https://ads.example.com"></iframe>
</body>
</html>
"""

SAMPLE_SITEMAP = """\
<?xml version="1.0" encoding="UTF-8"?>
<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">
  <url><loc>https://acme.example/products/camp-stove</loc></url>
  <url><loc> https://acme.example/blog/gear-guide </loc></url>
  <url><loc>https://cdn.other.example/products/ignored</loc></url>
</urlset>
"""

SAMPLE_PAGE_RESPONSE = """\
{
    "productCount": 24,
    "pageType": "category",
    "categories": ["Tents", "Backpacks"],
    "confidence": 85,
    "evidence": ["24 Add to Cart buttons", "Showing 1-24 of 120 products"],
    "reasoning": "Grid of 24 product tiles",
    "hasPagination": true,
    "totalProductsIfPaginated": 120
}
"""


@pytest.fixture()
def settings() -> Settings:
    """Minimal settings with dummy keys for testing."""
    return Settings(
        scraper_api_key="test-scraper-key",
        openai_api_key="test-openai-key",
        anthropic_api_key="test-anthropic-key",
        groq_api_key="test-groq-key",
        gemini_api_key="test-gemini-key",
        page_delay=0.0,
    )


@pytest.fixture()
def sample_html() -> str:
    return SAMPLE_HTML


@pytest.fixture()
def sample_sitemap() -> str:
    return SAMPLE_SITEMAP


@pytest.fixture()
def sample_page_response() -> str:
    return SAMPLE_PAGE_RESPONSE
