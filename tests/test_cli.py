"""Tests for product_counter.cli module."""

from __future__ import annotations

import json
from unittest.mock import patch

import pytest

from product_counter.cli import build_parser, main
from product_counter.counter import RunOutcome
from product_counter.models import AnalysisResult, PageResult


class TestBuildParser:
    def test_url_optional(self):
        args = build_parser().parse_args([])
        assert args.url is None

    def test_defaults(self):
        args = build_parser().parse_args(["https://example.com"])
        assert args.url == "https://example.com"
        assert args.mode == "multi"
        assert args.provider is None
        assert args.max_pages is None
        assert args.export is None
        assert args.history is False

    def test_mode_flag(self):
        args = build_parser().parse_args(["example.com", "--mode", "single"])
        assert args.mode == "single"

    def test_invalid_mode(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["example.com", "--mode", "deep"])

    def test_provider_short_flag(self):
        args = build_parser().parse_args(["example.com", "-p", "anthropic"])
        assert args.provider == "anthropic"

    def test_max_pages_flag(self):
        args = build_parser().parse_args(["example.com", "--max-pages", "12"])
        assert args.max_pages == 12


def _outcome(error=None) -> RunOutcome:
    result = AnalysisResult(
        total_product_count=7,
        pages_analyzed=1,
        page_results=[PageResult(url="https://shop.example", product_count=7)],
    )
    return RunOutcome(url="https://shop.example", result=result, error=error)


class TestMain:
    def test_requires_url_without_history(self):
        with pytest.raises(SystemExit):
            main([])

    @patch("product_counter.cli.Settings.from_env")
    @patch("product_counter.cli.ProductCounter")
    def test_writes_json_and_csv(self, mock_counter_cls, mock_from_env, settings, tmp_path, capsys):
        mock_from_env.return_value = settings
        mock_counter_cls.return_value.analyze.return_value = _outcome()
        out_file = tmp_path / "result.json"

        with patch("product_counter.cli.AnalysisStore") as mock_store_cls:
            mock_store_cls.return_value.list_for_user.return_value = []
            code = main([
                "shop.example", "--user", "alice", "--max-pages", "5",
                "-o", str(out_file), "--export", str(tmp_path),
            ])

        assert code == 0
        assert json.loads(out_file.read_text())["total_product_count"] == 7
        assert len(list(tmp_path.glob("product-analysis-*.csv"))) == 1
        passed_settings = mock_counter_cls.call_args[0][0]
        assert passed_settings.max_total_pages == 5
        mock_counter_cls.return_value.analyze.assert_called_once_with("shop.example", mode="multi")

    @patch("product_counter.cli.Settings.from_env")
    @patch("product_counter.cli.ProductCounter")
    def test_error_without_result(self, mock_counter_cls, mock_from_env, settings, capsys):
        mock_from_env.return_value = settings
        mock_counter_cls.return_value.analyze.return_value = RunOutcome(
            url=None, error="Please enter a valid website URL"
        )

        with patch("product_counter.cli.AnalysisStore") as mock_store_cls:
            mock_store_cls.return_value.list_for_user.return_value = []
            code = main(["bad url"])

        assert code == 1
        assert "Please enter a valid website URL" in capsys.readouterr().err

    @patch("product_counter.cli.Settings.from_env")
    @patch("product_counter.cli.ProductCounter")
    def test_partial_failure_still_prints_result(self, mock_counter_cls, mock_from_env, settings, capsys):
        mock_from_env.return_value = settings
        mock_counter_cls.return_value.analyze.return_value = _outcome(error="No pages could be analyzed")

        with patch("product_counter.cli.AnalysisStore") as mock_store_cls:
            mock_store_cls.return_value.list_for_user.return_value = []
            code = main(["shop.example"])

        captured = capsys.readouterr()
        assert code == 1
        assert json.loads(captured.out)["total_product_count"] == 7

    @patch("product_counter.cli.Settings.from_env")
    def test_history(self, mock_from_env, settings, tmp_path, capsys):
        from dataclasses import replace

        from product_counter.store import AnalysisStore

        mock_from_env.return_value = replace(settings, data_dir=str(tmp_path))
        store = AnalysisStore(tmp_path)
        record = store.create("alice", "https://shop.example")
        store.update(record.id, status="completed", product_count=31)

        code = main(["--history", "--user", "alice"])

        out = capsys.readouterr().out
        assert code == 0
        assert "completed" in out
        assert "31" in out
        assert "https://shop.example" in out
