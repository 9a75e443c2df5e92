"""Tavily news search as a supplementary article source.

Runs a fixed set of topic queries restricted to the registry's outlet domains.
Each query is isolated the same way a feed is: a failed query logs a warning
and contributes nothing.
"""
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import timezone
from typing import Any, Optional
from urllib.parse import urlparse

from dateutil import parser as date_parser

from news_hooks.fetcher import clean_html
from news_hooks.models import RawArticle
from news_hooks.registry import canonical_domain

logger = logging.getLogger(__name__)

SEARCH_QUERIES = [
    "generative AI marketing creative tools",
    "AI image generation visual content",
    "3D product visualization rendering",
    "e-commerce product photography AI",
    "retail technology digital transformation",
    "enterprise AI adoption brand strategy",
    "design software 3D CAD creative tools",
    "fashion technology e-commerce digital innovation",
]


def _result_to_article(result: dict) -> Optional[RawArticle]:
    url = result.get("url", "")
    if not url:
        return None
    published = None
    if result.get("published_date"):
        try:
            published = date_parser.parse(result["published_date"])
        except (ValueError, OverflowError):
            published = None
        if published is not None and published.tzinfo is None:
            published = published.replace(tzinfo=timezone.utc)
    return RawArticle(
        title=result.get("title", ""),
        url=url,
        content_snippet=clean_html(result.get("content", "")),
        published_date=published,
        domain=canonical_domain(urlparse(url).netloc),
    )


class TavilySearchSource:
    def __init__(
        self,
        api_key: str,
        domains: list[str],
        queries: Optional[list[str]] = None,
        days: int = 30,
        max_results: int = 6,
        client: Any = None,
    ):
        if client is None:
            from tavily import TavilyClient
            client = TavilyClient(api_key=api_key)
        self.client = client
        self.domains = domains
        self.queries = queries or SEARCH_QUERIES
        self.days = days
        self.max_results = max_results

    def search(self, query: str) -> list[RawArticle]:
        response = self.client.search(
            query=query,
            search_depth="basic",
            topic="news",
            days=self.days,
            max_results=self.max_results,
            include_domains=self.domains,
        )
        articles = []
        for result in response.get("results", []):
            article = _result_to_article(result)
            if article is not None:
                articles.append(article)
        return articles

    def fetch_all(self) -> list[RawArticle]:
        per_query: dict[int, list[RawArticle]] = {}
        with ThreadPoolExecutor(max_workers=min(8, len(self.queries))) as executor:
            futures = {executor.submit(self.search, q): i for i, q in enumerate(self.queries)}
            for future in as_completed(futures):
                idx = futures[future]
                try:
                    per_query[idx] = future.result()
                except Exception as e:
                    logger.warning("[Search] Query %r failed: %s", self.queries[idx], e)
        articles = [a for i in range(len(self.queries)) for a in per_query.get(i, [])]
        logger.info("[Search] Tavily returned %d articles for %d queries.", len(articles), len(self.queries))
        return articles
