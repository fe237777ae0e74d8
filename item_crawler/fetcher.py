"""HTTP fetching of seed pages as decoded text streams."""

from __future__ import annotations

import codecs
import logging
from typing import Iterator, Optional

import requests
from bs4.dammit import EncodingDetector

from .config import CrawlConfig

logger = logging.getLogger("item_crawler")

DEFAULT_ENCODING = "utf-8"


class FetchError(Exception):
    """Raised when a seed page cannot be retrieved or read."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


def _lookup_encoding(name: Optional[str]) -> Optional[str]:
    if not name:
        return None
    try:
        return codecs.lookup(name).name
    except LookupError:
        logger.debug("Ignoring unknown encoding %r", name)
        return None


class PageStream:
    """Open streaming response for one page; close it when done."""

    def __init__(self, url: str, response: requests.Response, chunk_size: int) -> None:
        self.url = url
        self.response = response
        self.chunk_size = chunk_size

    def __enter__(self) -> "PageStream":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self.response.close()

    def _header_encoding(self) -> Optional[str]:
        content_type = self.response.headers.get("Content-Type", "")
        if "charset=" not in content_type.lower():
            return None
        return _lookup_encoding(self.response.encoding)

    def iter_text(self) -> Iterator[str]:
        """Yield decoded chunks of the body as they arrive."""
        decoder = None
        try:
            for chunk in self.response.iter_content(chunk_size=self.chunk_size):
                if not chunk:
                    continue
                if decoder is None:
                    encoding = (
                        self._header_encoding()
                        or _lookup_encoding(
                            EncodingDetector.find_declared_encoding(chunk, is_html=True)
                        )
                        or DEFAULT_ENCODING
                    )
                    logger.debug("Decoding %s as %s", self.url, encoding)
                    decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
                text = decoder.decode(chunk)
                if text:
                    yield text
        except requests.RequestException as exc:
            raise FetchError(self.url, f"read failed: {exc}") from exc
        if decoder is not None:
            tail = decoder.decode(b"", final=True)
            if tail:
                yield tail


def fetch_page(url: str, config: CrawlConfig) -> PageStream:
    """Issue a streaming GET for ``url`` and return the open page stream."""
    logger.info("Loading %s", url)
    try:
        resp = requests.get(
            url,
            headers={"User-Agent": config.user_agent},
            timeout=config.timeout,
            stream=True,
        )
    except requests.RequestException as exc:
        raise FetchError(url, str(exc)) from exc
    try:
        resp.raise_for_status()
    except requests.RequestException as exc:
        resp.close()
        raise FetchError(url, str(exc)) from exc
    return PageStream(url, resp, config.chunk_size)
