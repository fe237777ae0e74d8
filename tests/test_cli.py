import asyncio

import pytest

from item_crawler import cli, mcp_server
from item_crawler.models import CrawlReport, Item, PageFailure


def _report():
    return CrawlReport(
        seeds=2,
        items=[Item(id="x1", image_ref="/i.png", page_ref="http://dest/a", title="A")],
        failures=[PageFailure("http://pageB/", "unreachable")],
    )


def test_render_summary_lists_count_then_items():
    assert cli.render_summary(_report()) == "Found 1 unique items:\nx1, http://dest/a, A\n"


def test_render_summary_empty():
    assert cli.render_summary(CrawlReport(seeds=0)) == "Found 0 unique items:\n"


def test_build_config_maps_flags():
    args = cli.parse_args([
        "http://a/", "--timeout", "5", "--chunk-size", "128",
        "--queue-size", "0", "--prefix", "https", "--no-restart",
    ])
    config = cli.build_config(args)

    assert args.urls == ["http://a/"]
    assert config.timeout == 5.0
    assert config.chunk_size == 128
    assert config.queue_size == 0
    assert config.rules.absolute_prefix == "https"
    assert config.rules.restart_on_container is False
    assert config.rules.container_tag == "span"


def test_main_prints_summary(monkeypatch, capsys):
    seen = {}

    async def fake_run_crawler(urls, config):
        seen["urls"] = list(urls)
        return _report()

    monkeypatch.setattr(cli, "run_crawler", fake_run_crawler)

    cli.main(["http://pageA/", "http://pageB/"])

    out = capsys.readouterr().out
    assert seen["urls"] == ["http://pageA/", "http://pageB/"]
    assert out.startswith("Found 1 unique items:\n")
    assert "x1, http://dest/a, A" in out
    assert "/i.png" not in out


def test_main_without_seeds_reports_zero(capsys):
    cli.main([])
    assert capsys.readouterr().out == "Found 0 unique items:\n"


def test_mcp_tool_requires_urls():
    with pytest.raises(ValueError):
        asyncio.run(mcp_server.extract_items([]))


def test_mcp_tool_returns_summary_with_failures(monkeypatch):
    async def fake_run_crawler(urls, config):
        return _report()

    monkeypatch.setattr(mcp_server, "run_crawler", fake_run_crawler)

    text = asyncio.run(mcp_server.extract_items(["http://pageA/", "http://pageB/"]))

    assert text.startswith("Found 1 unique items:\n")
    assert "Failed to crawl http://pageB/: unreachable" in text
