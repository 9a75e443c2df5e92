"""Exception types for the news hooks pipeline.

Only `ConfigurationError` and `CuratorTransportError` ever reach the caller of
a refresh. Feed and store errors are caught inside the pipeline and logged.
"""


class NewsHooksError(Exception):
    """Base class for every error raised by the pipeline."""


class ConfigurationError(NewsHooksError):
    """A required setting (e.g. the LLM API key) is missing."""


class CuratorTransportError(NewsHooksError):
    """The text-generation call itself failed (network, auth, rate limit)."""


class FeedFetchError(NewsHooksError):
    """A single feed could not be downloaded or parsed."""


class StoreError(NewsHooksError):
    """A read or write against the news hooks store failed."""
