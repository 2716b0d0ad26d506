"""Command-line interface for Product Counter."""

from __future__ import annotations

import argparse
import getpass
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path

from product_counter.config import Settings
from product_counter.counter import ProductCounter
from product_counter.export import export_csv
from product_counter.providers import list_providers
from product_counter.session import Session, User
from product_counter.store import AnalysisStore


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="product-counter",
        description="Estimate how many products an ecommerce website sells.",
    )
    parser.add_argument("url", nargs="?", help="Website to analyze (https:// is added if missing)")
    parser.add_argument(
        "--mode",
        choices=["multi", "single"],
        default="multi",
        help="multi: crawl discovered pages (default); single: text + screenshot of one page",
    )
    parser.add_argument(
        "-p", "--provider",
        choices=list_providers(),
        default=None,
        help="AI provider to use (default: from .env DEFAULT_PROVIDER)",
    )
    parser.add_argument(
        "--user",
        default=None,
        help="User id the analysis is recorded under (default: current OS user)",
    )
    parser.add_argument(
        "--max-pages",
        type=int,
        default=None,
        help="Cap on discovered pages to analyze (default: 30)",
    )
    parser.add_argument(
        "--export",
        default=None,
        metavar="DIR",
        help="Write product-analysis-<date>.csv into DIR",
    )
    parser.add_argument(
        "-o", "--output",
        default=None,
        help="Output file path for the JSON result (default: stdout)",
    )
    parser.add_argument(
        "--history",
        action="store_true",
        help="List the user's recent analyses and exit",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if not args.url and not args.history:
        parser.error("a URL is required unless --history is given")

    settings = Settings.from_env()
    if args.max_pages is not None:
        settings = replace(settings, max_total_pages=args.max_pages)

    store = AnalysisStore(Path(settings.data_dir))
    session = Session(store, history_limit=settings.history_limit)
    session.sign_in(User(id=args.user or getpass.getuser()))

    if args.history:
        for record in session.history:
            count = record.product_count if record.product_count is not None else 0
            print(f"{record.created_at}  {record.status:<10} {count:>6}  {record.website_url}")
        return 0

    counter = ProductCounter(settings, session, store, provider_name=args.provider)
    outcome = counter.analyze(args.url, mode=args.mode)

    if outcome.error:
        print(f"Error: {outcome.error}", file=sys.stderr)
    if outcome.result is None:
        return 1

    output = json.dumps(outcome.result.model_dump(), indent=2, ensure_ascii=False)
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(output)
        print(f"Output written to {args.output}", file=sys.stderr)
    else:
        print(output)

    if args.export:
        path = export_csv(outcome.result, Path(args.export))
        if path is not None:
            print(f"CSV written to {path}", file=sys.stderr)

    return 0 if outcome.ok else 1


if __name__ == "__main__":
    sys.exit(main())
