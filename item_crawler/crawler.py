"""High-level orchestration for crawling seed pages concurrently."""

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Union

from .config import CrawlConfig
from .extractor import extract_items
from .fetcher import FetchError, PageStream, fetch_page
from .models import CrawlReport, Item, PageFailure
from .tokens import tokenize

logger = logging.getLogger("item_crawler")


@dataclass(frozen=True)
class ItemFound:
    """An item produced by the worker for ``url``."""

    url: str
    item: Item


@dataclass(frozen=True)
class WorkerFinished:
    """Completion signal; sent exactly once per worker."""

    url: str
    failure: Optional[PageFailure] = None


Message = Union[ItemFound, WorkerFinished]
Fetcher = Callable[[str, CrawlConfig], PageStream]


def crawl_page(
    url: str,
    config: CrawlConfig,
    send: Callable[[Message], None],
    fetch: Fetcher = fetch_page,
) -> None:
    """Fetch one page, forward each matched item, then signal completion."""
    failure: Optional[PageFailure] = None
    try:
        with fetch(url, config) as page:
            for item in extract_items(tokenize(page.iter_text()), config.rules):
                logger.debug("Found item %r on %s", item.id, url)
                send(ItemFound(url, item))
    except FetchError as exc:
        logger.error("Failed to crawl %s: %s", url, exc.reason)
        failure = PageFailure(url, exc.reason)
    except Exception as exc:  # pylint: disable=broad-except
        logger.exception("Unexpected error crawling %s", url)
        failure = PageFailure(url, f"unexpected error: {exc}")
    finally:
        send(WorkerFinished(url, failure))


async def run_crawler(
    urls: Iterable[str],
    config: Optional[CrawlConfig] = None,
    fetch: Fetcher = fetch_page,
) -> CrawlReport:
    """Crawl every seed in its own worker thread and collect all items.

    Workers share a single bounded queue; sends block the worker until the
    coordinator has room for them. Returns once every worker has sent its
    completion signal.
    """
    config = config or CrawlConfig()
    seeds = list(urls)
    report = CrawlReport(seeds=len(seeds))
    if not seeds:
        return report

    loop = asyncio.get_running_loop()
    channel: asyncio.Queue[Message] = asyncio.Queue(maxsize=config.queue_size)

    def send(message: Message) -> None:
        asyncio.run_coroutine_threadsafe(channel.put(message), loop).result()

    executor = ThreadPoolExecutor(
        max_workers=len(seeds), thread_name_prefix="item-crawler"
    )
    try:
        workers = [
            loop.run_in_executor(executor, crawl_page, url, config, send, fetch)
            for url in seeds
        ]
        finished = 0
        while finished < len(seeds):
            message = await channel.get()
            if isinstance(message, ItemFound):
                report.items.append(message.item)
                continue
            finished += 1
            if message.failure is not None:
                report.failures.append(message.failure)
        await asyncio.gather(*workers)
    finally:
        executor.shutdown(wait=False)

    logger.info(
        "Crawled %d pages (%d failed), %d items found",
        report.seeds,
        len(report.failures),
        report.count,
    )
    return report


def crawl(
    urls: Iterable[str],
    config: Optional[CrawlConfig] = None,
    fetch: Fetcher = fetch_page,
) -> CrawlReport:
    """Synchronous wrapper around :func:`run_crawler`."""
    return asyncio.run(run_crawler(urls, config, fetch))
