"""Data models used throughout the crawler pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class Item:
    """A fully matched record extracted from one page."""

    id: str
    image_ref: str
    page_ref: str
    title: str = ""


@dataclass(frozen=True)
class PageFailure:
    """A seed address that could not be crawled."""

    url: str
    reason: str


@dataclass
class CrawlReport:
    """Everything collected once every worker has finished."""

    seeds: int
    items: List[Item] = field(default_factory=list)
    failures: List[PageFailure] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.items)
