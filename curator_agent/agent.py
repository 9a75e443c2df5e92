"""Relevance Curator - Core Agent

Single-shot LLM call through an OpenAI-compatible endpoint (OpenAI directly,
or a LiteLLM proxy via OPENAI_BASE_URL). No retry: a failed call raises
CuratorTransportError and aborts the refresh. An unusable answer does not.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from langchain_openai import ChatOpenAI

from curator_agent.prompts import (
    BUSINESS_CONTEXT,
    CURATOR_SYSTEM_PROMPT,
    CURATOR_USER_TEMPLATE,
    EXCLUDE_TOPICS,
    INCLUDE_TOPICS,
    TALKING_POINTS_TEMPLATE,
)
from curator_agent.tools import parse_curator_output
from news_hooks.errors import ConfigurationError, CuratorTransportError
from news_hooks.models import Audience, ContentType, CurationResult, RawArticle

logger = logging.getLogger(__name__)

SNIPPET_CHARS = 300


# ── Format helpers ────────────────────────────────────────────────────────────
def format_batch(articles: list[RawArticle]) -> str:
    """Format articles as a numbered list for the prompt."""
    lines = []
    for i, art in enumerate(articles, start=1):
        published = art.published_date.date().isoformat() if art.published_date else "Recent"
        snippet = art.content_snippet[:SNIPPET_CHARS].replace("\n", " ").strip() or "No preview"
        lines.append(f"[{i}] TITLE: {art.title}")
        lines.append(f"    SOURCE: {art.domain or 'Unknown'}")
        lines.append(f"    DATE: {published}")
        lines.append(f"    URL: {art.url}")
        lines.append(f"    SNIPPET: {snippet}")
        lines.append("")
    return "\n".join(lines)


def _bullets(values: list[str]) -> str:
    return "\n".join(f"- {v}" for v in values)


def build_user_prompt(
    articles: list[RawArticle],
    talking_points: Optional[list[str]] = None,
    min_items: int = 5,
    max_items: int = 18,
    today: Optional[str] = None,
) -> str:
    talking_points_block = ""
    if talking_points:
        talking_points_block = TALKING_POINTS_TEMPLATE.format(talking_points=_bullets(talking_points))
    return CURATOR_USER_TEMPLATE.format(
        today=today or datetime.now(timezone.utc).date().isoformat(),
        business_context=BUSINESS_CONTEXT,
        talking_points_block=talking_points_block,
        include_topics=_bullets(INCLUDE_TOPICS),
        exclude_topics=_bullets(EXCLUDE_TOPICS),
        min_items=min_items,
        max_items=max_items,
        content_types=", ".join(t.value for t in ContentType),
        audiences=", ".join(a.value for a in Audience),
        n_batch=len(articles),
        batch_text=format_batch(articles),
    )


def _response_text(response: Any) -> str:
    content = getattr(response, "content", response)
    if isinstance(content, str):
        return content
    # content blocks (e.g. Anthropic models behind LiteLLM)
    if isinstance(content, list):
        return "".join(
            block.get("text", "") if isinstance(block, dict) else str(block)
            for block in content
        )
    return str(content or "")


class RelevanceCurator:
    def __init__(
        self,
        api_key: Optional[str],
        model: str = "gpt-4o-mini",
        base_url: Optional[str] = None,
        max_tokens: int = 8192,
        timeout: float = 120,
        min_items: int = 5,
        max_items: int = 18,
        llm: Any = None,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url
        self.max_tokens = max_tokens
        self.timeout = timeout
        self.min_items = min_items
        self.max_items = max_items
        self._llm = llm

    @classmethod
    def from_settings(cls, settings: Any) -> "RelevanceCurator":
        return cls(
            api_key=settings.openai_api_key,
            model=settings.curator_model,
            base_url=settings.openai_base_url,
            max_tokens=settings.curator_max_tokens,
            timeout=settings.curator_timeout,
            min_items=settings.curator_min_items,
            max_items=settings.curator_max_items,
        )

    def ensure_configured(self) -> None:
        if not self.api_key:
            raise ConfigurationError("OPENAI_API_KEY is not configured")

    def _make_model(self) -> ChatOpenAI:
        return ChatOpenAI(
            model=self.model,
            api_key=self.api_key,
            base_url=self.base_url,
            temperature=0.2,
            max_tokens=self.max_tokens,
            timeout=self.timeout,
            max_retries=0,
        )

    @property
    def llm(self) -> Any:
        if self._llm is None:
            self._llm = self._make_model()
        return self._llm

    def curate(
        self,
        articles: list[RawArticle],
        talking_points: Optional[list[str]] = None,
    ) -> CurationResult:
        """Filter and enrich `articles` in one LLM call.

        Raises:
            ConfigurationError: no API key.
            CuratorTransportError: the call itself failed.
        """
        self.ensure_configured()
        if not articles:
            return CurationResult(usable=False, reason="empty batch")

        messages = [
            {"role": "system", "content": CURATOR_SYSTEM_PROMPT},
            {"role": "user", "content": build_user_prompt(
                articles, talking_points, self.min_items, self.max_items,
            )},
        ]
        logger.info("[Curator] Sending %d articles to %s.", len(articles), self.model)

        try:
            response = self.llm.invoke(messages)
        except Exception as e:
            raise CuratorTransportError(f"curator call failed: {e}") from e

        text = _response_text(response)
        result = parse_curator_output(text)
        if not result.usable:
            logger.warning(
                "[Curator] No usable output (%s); all %d articles filtered out. Raw: %s",
                result.reason, len(articles), text[:300],
            )
        else:
            logger.info(
                "[Curator] Kept %d of %d articles (%d filtered out).",
                len(result.items), len(articles), len(articles) - len(result.items),
            )
        return result
