"""Single-pass item matcher over a page's token stream."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable, Iterator, Optional

from .config import MatchRules
from .models import Item
from .tokens import Token, TokenKind, get_attr

logger = logging.getLogger("item_crawler")


class MatchState(Enum):
    SEEKING_ID = "seeking_id"
    SEEKING_IMAGE = "seeking_image"
    SEEKING_LINK = "seeking_link"


class ItemMatcher:
    """Greedy matcher for the container -> image -> anchor sequence.

    Only the item under construction is retained. Each call to :meth:`feed`
    tests the token against the current state's pattern and returns a
    completed :class:`Item` when the anchor qualifies.
    """

    def __init__(self, rules: Optional[MatchRules] = None) -> None:
        self.rules = rules or MatchRules()
        self.state = MatchState.SEEKING_ID
        self._id = ""
        self._image_ref = ""

    def reset(self) -> None:
        self.state = MatchState.SEEKING_ID
        self._id = ""
        self._image_ref = ""

    def feed(self, token: Token) -> Optional[Item]:
        if token.kind is TokenKind.END_OF_STREAM:
            if self.state is not MatchState.SEEKING_ID:
                logger.debug("Discarding incomplete item %r at end of stream", self._id)
            self.reset()
            return None
        if self.state is MatchState.SEEKING_ID:
            self._seek_id(token)
            return None
        if self.state is MatchState.SEEKING_IMAGE:
            self._seek_image(token)
            return None
        return self._seek_link(token)

    def _container_label(self, token: Token) -> Optional[str]:
        if token.kind is not TokenKind.START_TAG or token.name != self.rules.container_tag:
            return None
        # An empty label never starts an item.
        return get_attr(token, self.rules.label_attr) or None

    def _seek_id(self, token: Token) -> None:
        label = self._container_label(token)
        if label is None:
            return
        self._id = label
        self.state = MatchState.SEEKING_IMAGE

    def _restarted(self, token: Token) -> bool:
        if not self.rules.restart_on_container:
            return False
        label = self._container_label(token)
        if label is None:
            return False
        logger.debug("Restarting match at container %r (was %r)", label, self._id)
        self._id = label
        self._image_ref = ""
        self.state = MatchState.SEEKING_IMAGE
        return True

    def _seek_image(self, token: Token) -> None:
        if self._restarted(token):
            return
        if token.name != self.rules.image_tag:
            return
        if token.kind is not TokenKind.SELF_CLOSING_TAG and not (
            token.kind is TokenKind.START_TAG
            and not self.rules.image_requires_self_closing
        ):
            return
        src = get_attr(token, self.rules.source_attr)
        if src is None:
            return
        self._image_ref = src
        self.state = MatchState.SEEKING_LINK

    def _seek_link(self, token: Token) -> Optional[Item]:
        if self._restarted(token):
            return None
        if token.kind is not TokenKind.START_TAG or token.name != self.rules.anchor_tag:
            return None
        href = get_attr(token, self.rules.reference_attr)
        if href is None:
            return None
        if not href.startswith(self.rules.absolute_prefix):
            logger.debug("Discarding item %r with unqualified link %r", self._id, href)
            self.reset()
            return None
        item = Item(
            id=self._id,
            image_ref=self._image_ref,
            page_ref=href,
            title=get_attr(token, self.rules.label_attr) or "",
        )
        self.reset()
        return item


def extract_items(
    tokens: Iterable[Token],
    rules: Optional[MatchRules] = None,
) -> Iterator[Item]:
    """Yield every item matched in ``tokens``, stopping at end of stream."""
    matcher = ItemMatcher(rules)
    for token in tokens:
        if token.kind is TokenKind.END_OF_STREAM:
            matcher.feed(token)
            return
        item = matcher.feed(token)
        if item is not None:
            yield item
