"""News Hooks Pipeline - refresh cycle.

Step 0: Fail fast if the LLM key is missing (no feed is fetched)
Step 1: Retention sweep (best effort, never blocks the refresh)
Step 2: Fetch all outlet feeds concurrently (+ Tavily search when configured)
Step 3: Dedup by URL, sample max 3 per outlet, cap batch at 30
Step 4: Relevance Curator (one LLM call; the only failure that aborts a refresh)
Step 5: Normalize outlet names and dates
Step 6: Accumulate: insert-if-new, one item at a time, failures skipped

The cache grows across refreshes; the response carries everything inside the
retention window plus the count of rows this run added.
"""
import logging
from collections import Counter
from typing import Any, Optional

from curator_agent.agent import RelevanceCurator
from news_hooks.db import make_supabase_client
from news_hooks.errors import NewsHooksError, StoreError
from news_hooks.fetcher import FeedFetcher
from news_hooks.models import CachedNewsHook, RawArticle, RefreshResult
from news_hooks.normalizer import normalize_item
from news_hooks.registry import FeedRegistry
from news_hooks.sampler import sample_batch
from news_hooks.search_source import TavilySearchSource
from news_hooks.settings import PipelineSettings, load_settings, settings_from_env
from news_hooks.store import HookStore, build_store

logger = logging.getLogger(__name__)


class NewsHooksPipeline:
    def __init__(
        self,
        settings: PipelineSettings,
        registry: FeedRegistry,
        store: HookStore,
        curator: RelevanceCurator,
        fetcher: Optional[FeedFetcher] = None,
        search: Optional[Any] = None,
    ):
        self.settings = settings
        self.registry = registry
        self.store = store
        self.curator = curator
        self.fetcher = fetcher or FeedFetcher(
            timeout=settings.feed_timeout,
            max_age_days=settings.feed_max_age_days,
            items_per_feed=settings.feed_items_per_feed,
        )
        self.search = search

    # --- Steps ---------------------------------------------------------------
    def evict_best_effort(self) -> None:
        try:
            deleted = self.store.evict(self.settings.retention_days)
            logger.info("[Pipeline] Retention sweep removed %d hooks older than %d days.",
                        deleted, self.settings.retention_days)
        except StoreError as e:
            logger.error("[Pipeline] Retention sweep failed, continuing: %s", e)

    def fetch_articles(self) -> list[RawArticle]:
        articles = self.fetcher.fetch_all(self.registry)
        if self.search is not None:
            articles.extend(self.search.fetch_all())
        return articles

    def load_talking_points(self) -> list[str]:
        try:
            return self.store.load_talking_points()
        except StoreError as e:
            logger.warning("[Pipeline] Talking points unavailable, curating without them: %s", e)
            return []

    def accumulate(self, items: list) -> tuple[int, int, int]:
        """Returns (inserted, duplicates, failed)."""
        inserted = duplicates = failed = 0
        for item in items:
            try:
                if self.store.upsert_if_new(item):
                    inserted += 1
                else:
                    duplicates += 1
            except StoreError as e:
                failed += 1
                logger.error("[Pipeline] Could not store %r: %s", item.headline[:70], e)
        return inserted, duplicates, failed

    # --- Operations ----------------------------------------------------------
    def refresh(self) -> RefreshResult:
        """Run one refresh cycle.

        Raises:
            ConfigurationError: no LLM key, raised before any network access.
            CuratorTransportError: the curator call failed.
        """
        self.curator.ensure_configured()
        self.evict_best_effort()

        raw = self.fetch_articles()
        if not raw:
            logger.warning("[Pipeline] No articles fetched from any source; skipping curation.")
            return RefreshResult(success=True)

        batch = sample_batch(
            raw,
            per_domain=self.settings.sample_per_domain,
            batch_size=self.settings.sample_batch_size,
        )
        if not batch:
            return RefreshResult(success=True)

        result = self.curator.curate(batch, self.load_talking_points())
        curated = [normalize_item(item) for item in result.items]
        inserted, duplicates, failed = self.accumulate(curated)

        items = self.read()
        outlets = Counter(item.outlet for item in curated)

        logger.info("=" * 60)
        logger.info("NEWS HOOKS REFRESH SUMMARY")
        logger.info("=" * 60)
        logger.info("  Fetched:      %d", len(raw))
        logger.info("  Sampled:      %d", len(batch))
        logger.info("  Curated:      %d", len(curated))
        logger.info("  Inserted:     %d", inserted)
        logger.info("  Duplicates:   %d", duplicates)
        logger.info("  Store errors: %d", failed)
        logger.info("  In cache:     %d", len(items))
        for outlet, count in outlets.most_common():
            logger.info("    %s: %d", outlet, count)
        logger.info("=" * 60)

        return RefreshResult(success=True, items=items, new_count=inserted)

    def read(self) -> list[CachedNewsHook]:
        return self.store.read(self.settings.retention_days)

    def cleanup(self) -> int:
        return self.store.evict(self.settings.retention_days)


def build_pipeline(settings: Optional[PipelineSettings] = None) -> NewsHooksPipeline:
    """Wire the pipeline from environment configuration (+ feeder_settings overrides)."""
    env = settings or settings_from_env()
    client = make_supabase_client(env.supabase_url, env.supabase_key)
    if settings is None:
        settings = load_settings(client)

    registry = FeedRegistry()
    search = None
    if settings.tavily_api_key:
        search = TavilySearchSource(settings.tavily_api_key, registry.domains())

    return NewsHooksPipeline(
        settings=settings,
        registry=registry,
        store=build_store(settings, client),
        curator=RelevanceCurator.from_settings(settings),
        search=search,
    )


# --- Entry points returning the response envelope ------------------------------
def refresh_news_hooks(pipeline: NewsHooksPipeline) -> RefreshResult:
    try:
        return pipeline.refresh()
    except NewsHooksError as e:
        logger.error("[Pipeline] Refresh failed: %s", e)
        return RefreshResult(success=False, error=str(e))


def read_news_hooks(pipeline: NewsHooksPipeline) -> RefreshResult:
    try:
        return RefreshResult(success=True, items=pipeline.read())
    except StoreError as e:
        logger.error("[Pipeline] Read failed: %s", e)
        return RefreshResult(success=False, error=str(e))


if __name__ == "__main__":
    from news_hooks.cli import cli
    cli()
