import logging

import pytest
import requests

from news_hooks.errors import FeedFetchError
from news_hooks.fetcher import FeedFetcher, clean_html, is_recent, parse_feed
from news_hooks.models import FeedSource
from news_hooks.registry import FeedRegistry
from tests.helpers import FakeHTTP, FakeResponse, days_ago, outlet_feed, rss_feed

SOURCE = FeedSource(domain="techcrunch.com", feed_url="https://techcrunch.com/feed/")


def test_clean_html():
    assert clean_html("<p>Hello <b>world</b></p>\n\n  again") == "Hello world again"
    assert clean_html("") == ""


def test_is_recent():
    assert is_recent(days_ago(59), 60)
    assert not is_recent(days_ago(61), 60)
    assert not is_recent(None, 60)


def test_parse_feed_filters_old_and_undated_items():
    body = rss_feed([
        {"title": "fresh", "link": "https://techcrunch.com/fresh", "age_days": 2},
        {"title": "stale", "link": "https://techcrunch.com/stale", "age_days": 90},
        {"title": "undated", "link": "https://techcrunch.com/undated", "age_days": None},
    ])

    articles = parse_feed(body, SOURCE, max_age_days=60)

    assert [a.title for a in articles] == ["fresh"]
    assert articles[0].domain == "techcrunch.com"
    assert articles[0].content_snippet == "Some html text"
    assert articles[0].published_date is not None


def test_parse_feed_caps_items_after_recency_filter():
    items = [{"title": "old", "link": "https://techcrunch.com/old", "age_days": 100}]
    items += [{"title": f"new {i}", "link": f"https://techcrunch.com/{i}", "age_days": 1} for i in range(15)]

    articles = parse_feed(rss_feed(items), SOURCE, limit=10)

    assert len(articles) == 10
    assert articles[0].title == "new 0"


def test_parse_feed_rejects_garbage():
    with pytest.raises(FeedFetchError):
        parse_feed(b"<html><body>this is not a feed", SOURCE)


def test_fetch_feed_wraps_http_errors():
    http = FakeHTTP({SOURCE.feed_url: FakeResponse(b"", status_code=503)})

    with pytest.raises(FeedFetchError):
        FeedFetcher(http=http).fetch_feed(SOURCE)


def test_fetch_all_isolates_failing_feeds(caplog):
    registry = FeedRegistry({
        "techcrunch.com": "https://techcrunch.com/feed/",
        "theverge.com": "https://theverge.com/rss",
        "wired.com": "https://wired.com/feed",
        "cnbc.com": "https://cnbc.com/rss",
    })
    http = FakeHTTP({
        "https://techcrunch.com/feed/": outlet_feed("techcrunch.com", 2),
        "https://theverge.com/rss": requests.Timeout("read timed out"),
        "https://wired.com/feed": b"garbage that is not xml <",
        "https://cnbc.com/rss": outlet_feed("cnbc.com", 3),
    })

    with caplog.at_level(logging.WARNING, logger="news_hooks.fetcher"):
        articles = FeedFetcher(http=http).fetch_all(registry)

    assert [a.domain for a in articles] == ["techcrunch.com"] * 2 + ["cnbc.com"] * 3
    assert len(http.calls) == 4
    assert "theverge.com" in caplog.text
    assert "wired.com" in caplog.text


def test_fetch_all_passes_timeout():
    seen = {}

    class RecordingHTTP(FakeHTTP):
        def get(self, url, timeout=None, headers=None):
            seen["timeout"] = timeout
            seen["ua"] = headers["User-Agent"]
            return super().get(url, timeout, headers)

    http = RecordingHTTP({SOURCE.feed_url: outlet_feed("techcrunch.com", 1)})
    FeedFetcher(http=http, timeout=10).fetch_all([SOURCE])

    assert seen["timeout"] == 10
    assert seen["ua"]


def test_fetch_all_with_no_sources():
    assert FeedFetcher(http=FakeHTTP({})).fetch_all([]) == []
