from item_crawler.tokens import END_OF_STREAM, Token, TokenKind, get_attr, tokenize


def _tags(tokens):
    return [(t.kind, t.name) for t in tokens if t.kind is not TokenKind.TEXT]


def test_tokenize_distinguishes_start_and_self_closing_tags():
    tokens = list(tokenize(['<span title="x1"><img src="/i.png"/><img src="/j.png"></span>']))

    assert _tags(tokens) == [
        (TokenKind.START_TAG, "span"),
        (TokenKind.SELF_CLOSING_TAG, "img"),
        (TokenKind.START_TAG, "img"),
        (TokenKind.END_TAG, "span"),
        (TokenKind.END_OF_STREAM, ""),
    ]
    assert tokens[0].attrs == (("title", "x1"),)


def test_tokenize_always_ends_with_single_end_of_stream():
    tokens = list(tokenize([]))
    assert tokens == [END_OF_STREAM]

    tokens = list(tokenize(["<p>hello</p>"]))
    assert tokens[-1] is END_OF_STREAM
    assert sum(1 for t in tokens if t.kind is TokenKind.END_OF_STREAM) == 1


def test_tokenize_handles_tags_split_across_chunks():
    tokens = list(tokenize(["<sp", 'an tit', 'le="x1">', "<a href='http://a/'>"]))

    assert _tags(tokens)[:2] == [
        (TokenKind.START_TAG, "span"),
        (TokenKind.START_TAG, "a"),
    ]
    assert get_attr(tokens[0], "title") == "x1"


def test_tokenize_is_lazy():
    fed = []

    def chunks():
        for chunk in ['<span title="a">', '<span title="b">']:
            fed.append(chunk)
            yield chunk

    stream = tokenize(chunks())
    first = next(stream)

    assert first.name == "span"
    assert fed == ['<span title="a">']


def test_tokenize_lowercases_names_and_fills_valueless_attributes():
    tokens = list(tokenize(['<A HREF="http://x/" Download>']))

    assert tokens[0].name == "a"
    assert tokens[0].attrs == (("href", "http://x/"), ("download", ""))


def test_get_attr_missing_returns_none():
    token = Token(TokenKind.START_TAG, "span", (("class", "c"),))
    assert get_attr(token, "title") is None


def test_get_attr_last_duplicate_wins():
    token = Token(TokenKind.START_TAG, "span", (("title", "first"), ("title", "second")))
    assert get_attr(token, "title") == "second"


def test_tokenize_keeps_duplicate_attributes_in_order():
    tokens = list(tokenize(['<span title="a" title="b">']))
    assert tokens[0].attrs == (("title", "a"), ("title", "b"))
    assert get_attr(tokens[0], "title") == "b"
