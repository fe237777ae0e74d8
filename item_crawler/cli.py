"""Command-line entry point for the item crawler."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import time
from dataclasses import replace
from typing import Sequence

from .config import DEFAULT_USER_AGENT, CrawlConfig, MatchRules
from .crawler import run_crawler
from .models import CrawlReport

logger = logging.getLogger("item_crawler.cli")


def render_summary(report: CrawlReport) -> str:
    """Render the item count followed by one ``id, page_ref, title`` line each."""
    lines = [f"Found {report.count} unique items:"]
    for item in report.items:
        lines.append(f"{item.id}, {item.page_ref}, {item.title}")
    return "\n".join(lines) + "\n"


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Extract id/image/link items from web pages, crawling all seeds concurrently.",
    )
    parser.add_argument("urls", nargs="*", help="Seed page URLs to crawl")
    parser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="Connect/read timeout in seconds for each page request",
    )
    parser.add_argument(
        "--chunk-size",
        type=int,
        default=8192,
        help="Bytes read from the network per tokenizer step",
    )
    parser.add_argument(
        "--user-agent",
        default=DEFAULT_USER_AGENT,
        help="User-Agent header sent with each request",
    )
    parser.add_argument(
        "--queue-size",
        type=int,
        default=1,
        help="Items buffered between workers and the collector (0 = unbounded)",
    )
    parser.add_argument(
        "--prefix",
        default="http",
        help="Required prefix for an item's link to be accepted",
    )
    parser.add_argument(
        "--no-restart",
        action="store_true",
        help="Keep matching the current item when a new labelled container appears",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> CrawlConfig:
    rules = replace(
        MatchRules(),
        absolute_prefix=args.prefix,
        restart_on_container=not args.no_restart,
    )
    return CrawlConfig(
        timeout=args.timeout,
        chunk_size=args.chunk_size,
        user_agent=args.user_agent,
        queue_size=args.queue_size,
        rules=rules,
    )


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )

    config = build_config(args)
    overall_start = time.perf_counter()
    report = asyncio.run(run_crawler(args.urls, config))
    total_elapsed = time.perf_counter() - overall_start

    logger.info(
        "Finished in %.2fs (%d/%d succeeded, %d failed)",
        total_elapsed,
        report.seeds - len(report.failures),
        report.seeds,
        len(report.failures),
    )

    sys.stdout.write(render_summary(report))
    sys.stdout.flush()


if __name__ == "__main__":
    main()
