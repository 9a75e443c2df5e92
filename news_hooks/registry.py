"""Outlet Feed Registry.

Static outlet domain -> syndication feed map, plus the domain -> display name
map used by the normalizer. Both may grow freely: outlet names are re-applied
on every read, so older cache rows pick up new names without a migration.
"""
from typing import Iterator, Mapping, Optional

from news_hooks.models import FeedSource

OUTLET_FEEDS: dict[str, str] = {
    "techcrunch.com": "https://techcrunch.com/feed/",
    "theverge.com": "https://www.theverge.com/rss/index.xml",
    "wired.com": "https://www.wired.com/feed/rss",
    "venturebeat.com": "https://venturebeat.com/feed/",
    "technologyreview.com": "https://www.technologyreview.com/feed/",
    "arstechnica.com": "https://feeds.arstechnica.com/arstechnica/index",
    "fastcompany.com": "https://www.fastcompany.com/latest/rss",
    "businessinsider.com": "https://feeds.businessinsider.com/custom/all",
    "cnbc.com": "https://www.cnbc.com/id/19854910/device/rss/rss.html",
    "tldr.tech": "https://tldr.tech/api/rss/ai",
    "businessoffashion.com": "https://www.businessoffashion.com/arc/outboundfeeds/rss/",
    "theinterline.com": "https://www.theinterline.com/feed/",
}

OUTLET_NAMES: dict[str, str] = {
    "techcrunch.com": "TechCrunch",
    "theverge.com": "The Verge",
    "wired.com": "WIRED",
    "venturebeat.com": "VentureBeat",
    "technologyreview.com": "MIT Technology Review",
    "arstechnica.com": "Ars Technica",
    "fastcompany.com": "Fast Company",
    "businessinsider.com": "Business Insider",
    "forbes.com": "Forbes",
    "cnbc.com": "CNBC",
    "reuters.com": "Reuters",
    "bloomberg.com": "Bloomberg",
    "tldr.tech": "TLDR",
    "businessoffashion.com": "Business of Fashion",
    "theinterline.com": "The Interline",
    "blog.google": "Google",
    "fortune.com": "Fortune",
    "9to5mac.com": "9to5Mac",
    "arxiv.org": "arXiv",
}


def canonical_domain(domain: str) -> str:
    return domain.strip().lower().removeprefix("www.")


class FeedRegistry:
    """Immutable, ordered collection of FeedSource values."""

    def __init__(self, feeds: Optional[Mapping[str, str]] = None):
        feeds = OUTLET_FEEDS if feeds is None else feeds
        self._sources = tuple(
            FeedSource(domain=canonical_domain(domain), feed_url=url)
            for domain, url in feeds.items()
        )

    def __iter__(self) -> Iterator[FeedSource]:
        return iter(self._sources)

    def __len__(self) -> int:
        return len(self._sources)

    @property
    def sources(self) -> tuple[FeedSource, ...]:
        return self._sources

    def domains(self) -> list[str]:
        return [s.domain for s in self._sources]
