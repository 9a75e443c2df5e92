"""Relevance Curator - Output decoding

The model is asked for bare JSON but often wraps it in markdown fences or
adds a sentence of prose. Decoding is two stages:
  1. strip code-fence markers
  2. strict-decode the first top-level JSON object in the remaining text
Anything that fails either stage becomes a CurationResult with usable=False.
This function never raises; transport failures are handled by the caller.
"""
import json
import logging
import re
from typing import Any, Optional

from pydantic import ValidationError

from news_hooks.models import ContentPlanItem, CuratedItem, CurationResult

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```[a-zA-Z]*")


def strip_fences(text: str) -> str:
    return _FENCE_RE.sub("", text).strip()


def extract_json_object(text: str) -> Optional[dict[str, Any]]:
    """Decode the object starting at the first '{', ignoring trailing prose."""
    start = text.find("{")
    if start == -1:
        return None
    try:
        obj, _ = json.JSONDecoder().raw_decode(text, start)
    except json.JSONDecodeError:
        return None
    return obj


def _parse_plan(raw_plan: Any, rejected: list[str]) -> list[ContentPlanItem]:
    plan = []
    for entry in raw_plan if isinstance(raw_plan, list) else []:
        try:
            plan.append(ContentPlanItem.model_validate(entry))
        except ValidationError:
            tag = entry if not isinstance(entry, dict) else f"{entry.get('type')}/{entry.get('audience')}"
            rejected.append(str(tag))
    return plan


def parse_curator_output(text: str) -> CurationResult:
    payload = extract_json_object(strip_fences(text or ""))
    if payload is None:
        return CurationResult(usable=False, reason="no JSON object in model output")

    news = payload.get("news")
    if not isinstance(news, list):
        return CurationResult(usable=False, reason="JSON object has no 'news' array")

    items: list[CuratedItem] = []
    rejected: list[str] = []
    for raw in news:
        if not isinstance(raw, dict):
            continue
        plan = _parse_plan(raw.get("contentPlan"), rejected)
        try:
            items.append(CuratedItem.model_validate({**raw, "contentPlan": plan}))
        except ValidationError as e:
            logger.warning("[Curator] Dropping malformed item %r: %s", raw.get("headline"), e.errors()[0]["msg"])

    if rejected:
        logger.warning("[Curator] Rejected %d content plan entries with unknown tags: %s", len(rejected), rejected)
    if not items:
        return CurationResult(usable=False, reason="model returned zero items", rejected_tags=rejected)
    return CurationResult(items=items, rejected_tags=rejected)
