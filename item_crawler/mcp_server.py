"""MCP server exposing the item crawler as a tool."""

from __future__ import annotations

import logging
from typing import List

from mcp.server.fastmcp import FastMCP

from .cli import render_summary
from .config import CrawlConfig
from .crawler import run_crawler

logger = logging.getLogger("item_crawler.mcp")
logger.setLevel(logging.ERROR)

mcp = FastMCP(name="item-crawler")


@mcp.tool()
async def extract_items(
    urls: List[str],
) -> str:
    """Crawl the given pages concurrently and list every extracted item."""
    if not urls:
        raise ValueError("At least one URL is required")
    report = await run_crawler(urls, CrawlConfig())
    summary = render_summary(report)
    for failure in report.failures:
        summary += f"Failed to crawl {failure.url}: {failure.reason}\n"
    return summary


def main() -> None:
    """Entry point for running the MCP server."""
    logging.basicConfig(level=logging.ERROR)
    mcp.run()


if __name__ == "__main__":
    main()
