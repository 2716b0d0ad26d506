"""Tests for product_counter.discovery module."""

from __future__ import annotations

from dataclasses import replace
from unittest.mock import patch

import pytest

from product_counter.discovery import (
    discover_pages,
    is_candidate_link,
    parse_sitemap,
    prioritize,
)
from product_counter.fetcher import FetchError
from product_counter.models import ScrapedPage

BASE = "https://acme.example"


def _homepage(links: list[str]) -> ScrapedPage:
    return ScrapedPage(url=BASE, title="Acme", text="Welcome", links=links)


class TestIsCandidateLink:
    @pytest.mark.parametrize("url", [
        "https://acme.example/products/tent",
        "https://acme.example/p/123",
        "https://acme.example/12345",
        "https://acme.example/?page=2",
        "https://acme.example/about-us",
    ])
    def test_accepts(self, url):
        assert is_candidate_link(url)

    @pytest.mark.parametrize("url", ["https://acme.example/", "https://acme.example/a", "https://acme.example"])
    def test_rejects_trivial_paths(self, url):
        assert not is_candidate_link(url)


class TestParseSitemap:
    def test_extracts_same_host_locs(self, sample_sitemap):
        urls = parse_sitemap(sample_sitemap, BASE)
        assert urls == [
            "https://acme.example/products/camp-stove",
            "https://acme.example/blog/gear-guide",
        ]

    def test_empty_document(self):
        assert parse_sitemap("<urlset></urlset>", BASE) == []


class TestPrioritize:
    def test_buckets_and_caps(self, settings):
        products = [f"{BASE}/products/{i}" for i in range(20)]
        categories = [f"{BASE}/category/{i}" for i in range(20)]
        others = [f"{BASE}/pages/{i}" for i in range(20)]

        result = prioritize(others + categories + products, settings)

        assert len(result) == 30
        assert result[:15] == products[:15]
        assert result[15:25] == categories[:10]
        assert result[25:] == others[:5]

    def test_total_cap_applies_last(self, settings):
        capped = replace(settings, max_total_pages=4)
        pages = [f"{BASE}/products/{i}" for i in range(3)] + [f"{BASE}/shop/{i}" for i in range(3)]
        result = prioritize(pages, capped)
        assert result == pages[:3] + [f"{BASE}/shop/0"]


class TestDiscoverPages:
    def test_merges_links_and_sitemap(self, settings, sample_sitemap):
        links = ["/products/tent", "/collections/tents", "https://other.example/products/x", "/"]
        with patch("product_counter.discovery.scrape_page", return_value=_homepage(links)), \
             patch("product_counter.discovery.fetch_sitemap", return_value=sample_sitemap) as mock_sitemap:
            pages = discover_pages(BASE, settings)

        assert pages[0] == f"{BASE}/products/tent"
        assert f"{BASE}/products/camp-stove" in pages
        assert f"{BASE}/collections/tents" in pages
        assert f"{BASE}/blog/gear-guide" in pages
        assert BASE in pages
        assert not any("other.example" in p for p in pages)
        mock_sitemap.assert_called_once_with(f"{BASE}/sitemap.xml", settings)

    def test_tries_sitemap_paths_in_order(self, settings, sample_sitemap):
        with patch("product_counter.discovery.scrape_page", return_value=_homepage([])), \
             patch(
                 "product_counter.discovery.fetch_sitemap",
                 side_effect=[None, FetchError("boom"), sample_sitemap],
             ) as mock_sitemap:
            pages = discover_pages(BASE, settings)

        called = [c.args[0] for c in mock_sitemap.call_args_list]
        assert called == [
            f"{BASE}/sitemap.xml",
            f"{BASE}/sitemap_index.xml",
            f"{BASE}/product-sitemap.xml",
        ]
        assert f"{BASE}/products/camp-stove" in pages

    def test_falls_back_to_base_url(self, settings):
        with patch("product_counter.discovery.scrape_page", side_effect=FetchError("down")), \
             patch("product_counter.discovery.fetch_sitemap") as mock_sitemap:
            assert discover_pages(BASE, settings) == [BASE]
        mock_sitemap.assert_not_called()

    def test_never_more_than_thirty(self, settings):
        links = [f"/products/{i}" for i in range(50)] + [f"/category/{i}" for i in range(50)] + [
            f"/pages/{i}" for i in range(50)
        ]
        with patch("product_counter.discovery.scrape_page", return_value=_homepage(links)), \
             patch("product_counter.discovery.fetch_sitemap", return_value=None):
            pages = discover_pages(BASE, settings)

        assert 1 <= len(pages) <= 30

    def test_always_returns_base_when_nothing_found(self, settings):
        with patch("product_counter.discovery.scrape_page", return_value=_homepage([])), \
             patch("product_counter.discovery.fetch_sitemap", return_value=None):
            assert discover_pages(BASE, settings) == [BASE]
