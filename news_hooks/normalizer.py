"""Normalizer: outlet display names and calendar dates.

Pure functions. `normalize_outlet_name` runs both when an item is written and
again on every read, and is idempotent so the two passes agree.
"""
import re
from datetime import date, datetime, timezone
from typing import Optional

from dateutil import parser as date_parser

from news_hooks.models import CuratedItem
from news_hooks.registry import OUTLET_NAMES, canonical_domain

DATE_SENTINELS = {"recent"}
_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def today_utc() -> date:
    return datetime.now(timezone.utc).date()


def normalize_outlet_name(raw_outlet: Optional[str]) -> str:
    if not raw_outlet or not raw_outlet.strip():
        return "Unknown"
    return OUTLET_NAMES.get(canonical_domain(raw_outlet), raw_outlet.strip())


def normalize_date(raw_date: Optional[str], today: Optional[date] = None) -> str:
    """Coerce a free-form date into YYYY-MM-DD, falling back to today (UTC)."""
    fallback = (today or today_utc()).isoformat()
    if not raw_date or raw_date.strip().lower() in DATE_SENTINELS:
        return fallback

    value = raw_date.strip()
    if _ISO_DATE_RE.match(value):
        try:
            return date.fromisoformat(value).isoformat()
        except ValueError:
            return fallback

    try:
        parsed = date_parser.parse(value)
    except (ValueError, OverflowError):
        return fallback
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.date().isoformat()


def normalize_item(item: CuratedItem, today: Optional[date] = None) -> CuratedItem:
    return item.model_copy(update={
        "outlet": normalize_outlet_name(item.outlet),
        "date": normalize_date(item.date, today),
    })
