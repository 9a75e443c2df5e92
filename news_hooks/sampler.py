"""Deduplicator/Sampler.

Turns the fetched union into a batch the curator can take in one prompt:
  1. drop repeated URLs (first occurrence wins)
  2. group by outlet domain
  3. keep at most `per_domain` articles per outlet, in feed order
  4. concatenate and cap at `batch_size`
"""
import logging

from news_hooks.models import RawArticle

logger = logging.getLogger(__name__)


def dedupe_by_url(articles: list[RawArticle]) -> list[RawArticle]:
    seen: set[str] = set()
    unique = []
    for article in articles:
        if article.url in seen:
            continue
        seen.add(article.url)
        unique.append(article)
    return unique


def group_by_domain(articles: list[RawArticle]) -> dict[str, list[RawArticle]]:
    groups: dict[str, list[RawArticle]] = {}
    for article in articles:
        groups.setdefault(article.domain, []).append(article)
    return groups


def sample_batch(
    articles: list[RawArticle],
    per_domain: int = 3,
    batch_size: int = 30,
) -> list[RawArticle]:
    unique = dedupe_by_url(articles)
    groups = group_by_domain(unique)

    sampled: list[RawArticle] = []
    for group in groups.values():
        sampled.extend(group[:per_domain])
    batch = sampled[:batch_size]

    logger.info(
        "[Sampler] %d fetched -> %d unique -> %d sampled from %d outlets.",
        len(articles), len(unique), len(batch), len(groups),
    )
    return batch
