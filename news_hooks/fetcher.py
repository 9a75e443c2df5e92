"""Feed Fetcher.

Downloads every registry feed concurrently. Each feed is its own failure
domain: a timeout, HTTP error or unparseable body is logged and that feed
contributes zero articles. The join waits for every feed before returning.
"""
import calendar
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable, Optional

import feedparser
import requests
from bs4 import BeautifulSoup

from news_hooks.errors import FeedFetchError
from news_hooks.models import FeedSource, RawArticle

logger = logging.getLogger(__name__)

USER_AGENT = "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) PRNewsHooks/1.0"


def clean_html(html_text: str) -> str:
    """Strip markup and collapse whitespace."""
    if not html_text:
        return ""
    text = BeautifulSoup(html_text, "html.parser").get_text(" ")
    return " ".join(text.split())


def is_recent(published: Optional[datetime], max_age_days: int = 60) -> bool:
    """True if the article was published within the last max_age_days.

    Undated entries are dropped: they would otherwise be stamped with today's
    date downstream and outlive the retention window.
    """
    if published is None:
        return False
    threshold = datetime.now(timezone.utc) - timedelta(days=max_age_days)
    return published >= threshold


def entry_published(entry: Any) -> Optional[datetime]:
    parsed = entry.get("published_parsed") or entry.get("updated_parsed")
    if not parsed:
        return None
    try:
        return datetime.fromtimestamp(calendar.timegm(parsed), tz=timezone.utc)
    except (TypeError, ValueError, OverflowError):
        return None


def parse_feed(
    content: bytes,
    source: FeedSource,
    max_age_days: int = 60,
    limit: int = 10,
) -> list[RawArticle]:
    """Parse a feed body into at most `limit` recent RawArticles, in feed order."""
    feed = feedparser.parse(content)
    if feed.bozo and not feed.entries:
        raise FeedFetchError(f"{source.domain}: malformed feed ({feed.get('bozo_exception')})")

    articles: list[RawArticle] = []
    for entry in feed.entries:
        link = entry.get("link", "")
        if not link:
            continue
        published = entry_published(entry)
        if not is_recent(published, max_age_days):
            continue
        articles.append(RawArticle(
            title=clean_html(entry.get("title", "")),
            url=link,
            content_snippet=clean_html(entry.get("summary", entry.get("description", ""))),
            published_date=published,
            domain=source.domain,
        ))
        if len(articles) >= limit:
            break
    return articles


class FeedFetcher:
    def __init__(
        self,
        http: Any = None,
        timeout: float = 10,
        max_age_days: int = 60,
        items_per_feed: int = 10,
        max_workers: int = 12,
    ):
        self.http = http or requests
        self.timeout = timeout
        self.max_age_days = max_age_days
        self.items_per_feed = items_per_feed
        self.max_workers = max_workers

    def fetch_feed(self, source: FeedSource) -> list[RawArticle]:
        try:
            resp = self.http.get(
                source.feed_url,
                timeout=self.timeout,
                headers={"User-Agent": USER_AGENT},
            )
            resp.raise_for_status()
        except requests.RequestException as e:
            raise FeedFetchError(f"{source.domain}: {e}") from e
        return parse_feed(resp.content, source, self.max_age_days, self.items_per_feed)

    def fetch_all(self, sources: Iterable[FeedSource]) -> list[RawArticle]:
        """Fan out over all sources; returns the union of the feeds that succeeded.

        Output is grouped per source in registry order, so repeated runs over
        the same feeds produce the same sequence regardless of completion order.
        """
        sources = list(sources)
        if not sources:
            return []

        per_source: dict[int, list[RawArticle]] = {}
        failed = 0
        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(sources))) as executor:
            futures = {executor.submit(self.fetch_feed, s): i for i, s in enumerate(sources)}
            for future in as_completed(futures):
                idx = futures[future]
                source = sources[idx]
                try:
                    per_source[idx] = future.result()
                except Exception as e:
                    failed += 1
                    logger.warning("[Fetcher] Feed failed, skipping %s: %s", source.domain, e)
                    continue
                logger.info("[Fetcher] %s: %d recent articles", source.domain, len(per_source[idx]))

        articles = [a for i in range(len(sources)) for a in per_source.get(i, [])]
        logger.info(
            "[Fetcher] Fetched %d articles from %d/%d feeds (%d failed).",
            len(articles), len(sources) - failed, len(sources), failed,
        )
        return articles
