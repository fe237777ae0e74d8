"""Configuration objects and constants for the item crawler."""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120 Safari/537.36"
)


@dataclass(frozen=True)
class MatchRules:
    """Tag and attribute names the extractor looks for, in match order."""

    container_tag: str = "span"
    label_attr: str = "title"
    image_tag: str = "img"
    source_attr: str = "src"
    anchor_tag: str = "a"
    reference_attr: str = "href"
    absolute_prefix: str = "http"
    # A new labelled container seen mid-match starts a fresh item.
    restart_on_container: bool = True
    image_requires_self_closing: bool = True


@dataclass
class CrawlConfig:
    """Top-level settings that control fetching and extraction."""

    timeout: float = 30.0
    chunk_size: int = 8192
    user_agent: str = DEFAULT_USER_AGENT
    queue_size: int = 1
    rules: MatchRules = field(default_factory=MatchRules)
