"""Pipeline settings.

Defaults come from the environment (.env is loaded on import). When a
Supabase client is available, rows in the `feeder_settings` key/value table
override them, so thresholds can be tuned without a redeploy.
"""
import logging
import os
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ValidationError

load_dotenv()

logger = logging.getLogger(__name__)

# Keys that may be overridden from the feeder_settings table.
TUNABLE_KEYS = {
    "curator_min_items",
    "curator_max_items",
    "feed_timeout",
    "feed_max_age_days",
    "feed_items_per_feed",
    "sample_per_domain",
    "sample_batch_size",
    "retention_days",
    "dedupe_on_headline",
}


class PipelineSettings(BaseModel):
    openai_api_key: Optional[str] = None
    openai_base_url: Optional[str] = None
    curator_model: str = "gpt-4o-mini"
    curator_max_tokens: int = 8192
    curator_timeout: float = 120
    curator_min_items: int = 5
    curator_max_items: int = 18

    feed_timeout: float = 10
    feed_max_age_days: int = 60
    feed_items_per_feed: int = 10
    sample_per_domain: int = 3
    sample_batch_size: int = 30

    retention_days: int = 30
    dedupe_on_headline: bool = True

    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    news_hooks_file: str = "data/news_hooks.json"

    tavily_api_key: Optional[str] = None

    @property
    def use_supabase(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)


_ENV_VARS = {
    "openai_api_key": "OPENAI_API_KEY",
    "openai_base_url": "OPENAI_BASE_URL",
    "curator_model": "CURATOR_MODEL",
    "curator_max_tokens": "CURATOR_MAX_TOKENS",
    "curator_timeout": "CURATOR_TIMEOUT",
    "curator_min_items": "CURATOR_MIN_ITEMS",
    "curator_max_items": "CURATOR_MAX_ITEMS",
    "feed_timeout": "FEED_TIMEOUT",
    "feed_max_age_days": "FEED_MAX_AGE_DAYS",
    "feed_items_per_feed": "FEED_ITEMS_PER_FEED",
    "sample_per_domain": "SAMPLE_PER_DOMAIN",
    "sample_batch_size": "SAMPLE_BATCH_SIZE",
    "retention_days": "RETENTION_DAYS",
    "dedupe_on_headline": "DEDUPE_ON_HEADLINE",
    "supabase_url": "SUPABASE_URL",
    "supabase_key": "SUPABASE_KEY",
    "news_hooks_file": "NEWS_HOOKS_FILE",
    "tavily_api_key": "TAVILY_API_KEY",
}


def settings_from_env(environ: Optional[dict[str, str]] = None) -> PipelineSettings:
    environ = os.environ if environ is None else environ
    values = {
        field: environ[var]
        for field, var in _ENV_VARS.items()
        if environ.get(var, "").strip()
    }
    return PipelineSettings(**values)


def load_settings(client: Any = None, environ: Optional[dict[str, str]] = None) -> PipelineSettings:
    settings = settings_from_env(environ)
    if client is None:
        return settings

    try:
        res = client.table("feeder_settings").select("key,value").execute()
    except Exception as e:
        logger.warning("[Settings] Could not load feeder_settings, using defaults: %s", e)
        return settings

    overrides = {
        row["key"]: row["value"]
        for row in (res.data or [])
        if row.get("key") in TUNABLE_KEYS
    }
    if not overrides:
        return settings
    try:
        return PipelineSettings(**{**settings.model_dump(), **overrides})
    except ValidationError as e:
        logger.warning("[Settings] Ignoring invalid feeder_settings overrides: %s", e)
        return settings
