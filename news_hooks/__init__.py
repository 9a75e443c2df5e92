"""News Hooks - RSS ingestion, LLM curation and accumulation of PR news hooks.

Stages (see news_hooks.pipeline):
  Registry  -> static outlet domain -> feed URL map
  Fetcher   -> concurrent feed download, 60-day recency filter
  Sampler   -> URL dedup, max 3 per outlet, max 30 per batch
  Curator   -> single LLM call (curator_agent) returning curated items + content plans
  Normalize -> outlet display names, YYYY-MM-DD dates
  Store     -> insert-if-new accumulation with 30-day retention
"""
