"""Streaming markup tokenizer producing typed tag tokens."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from html.parser import HTMLParser
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

Attribute = Tuple[str, str]


class TokenKind(Enum):
    START_TAG = "start_tag"
    SELF_CLOSING_TAG = "self_closing_tag"
    END_TAG = "end_tag"
    TEXT = "text"
    END_OF_STREAM = "end_of_stream"


@dataclass(frozen=True)
class Token:
    """One lexical unit of markup with its attributes in source order."""

    kind: TokenKind
    name: str = ""
    attrs: Tuple[Attribute, ...] = ()


END_OF_STREAM = Token(TokenKind.END_OF_STREAM)


def get_attr(token: Token, key: str) -> Optional[str]:
    """Return the value of ``key`` on ``token``, or ``None`` if it is absent.

    Duplicate keys are not collapsed; the last occurrence wins.
    """
    value: Optional[str] = None
    for name, attr_value in token.attrs:
        if name == key:
            value = attr_value
    return value


def _normalize_attrs(attrs: Sequence[Tuple[str, Optional[str]]]) -> Tuple[Attribute, ...]:
    return tuple((name, value if value is not None else "") for name, value in attrs)


class _TokenCollector(HTMLParser):
    """HTMLParser that records tokens instead of building a tree."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.pending: List[Token] = []

    def handle_starttag(self, tag, attrs):
        self.pending.append(Token(TokenKind.START_TAG, tag, _normalize_attrs(attrs)))

    def handle_startendtag(self, tag, attrs):
        self.pending.append(
            Token(TokenKind.SELF_CLOSING_TAG, tag, _normalize_attrs(attrs))
        )

    def handle_endtag(self, tag):
        self.pending.append(Token(TokenKind.END_TAG, tag))

    def handle_data(self, data):
        if data:
            self.pending.append(Token(TokenKind.TEXT))

    def drain(self) -> List[Token]:
        tokens, self.pending = self.pending, []
        return tokens


def tokenize(chunks: Iterable[str]) -> Iterator[Token]:
    """Lazily tokenize markup arriving as a sequence of text chunks.

    Tokens are yielded as soon as the chunk that completes them has been
    fed, and the sequence always ends with a single ``END_OF_STREAM`` token.
    """
    parser = _TokenCollector()
    for chunk in chunks:
        parser.feed(chunk)
        yield from parser.drain()
    parser.close()
    yield from parser.drain()
    yield END_OF_STREAM
