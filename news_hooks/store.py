"""Accumulation Store for curated news hooks.

Insert-only-if-new: a refresh adds rows, it never replaces the cache. Rows are
immutable once written and leave only through the age-based `evict` sweep.

Identity: a row with the same URL is always a duplicate. A row with the same
headline is a duplicate too unless `dedupe_on_headline` is turned off.

Two backends share the same contract:
  SupabaseHookStore  -> `news_hooks` table (see schema.sql)
  JsonFileHookStore  -> a local JSON file, used when Supabase is not configured

Concurrent refreshes are not locked against each other; two runs can both
pass the existence check for the same new item and insert it twice.
"""
import json
import logging
import threading
from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Callable, Optional

from pydantic import ValidationError

from news_hooks.errors import StoreError
from news_hooks.models import CachedNewsHook, ContentPlanItem, CuratedItem
from news_hooks.normalizer import normalize_outlet_name

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def item_to_row(item: CuratedItem) -> dict[str, Any]:
    return {
        "headline": item.headline,
        "outlet": item.outlet or "Unknown",
        "date": item.date,
        "url": item.url,
        "summary": item.summary,
        "relevance": item.relevance,
        "angle_title": item.angle_title,
        "angle_narrative": item.angle_narrative,
        "content_plan": json.dumps([p.model_dump(mode="json") for p in item.content_plan]),
    }


def _decode_plan(raw: Any) -> list[ContentPlanItem]:
    if not raw:
        return []
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError:
            return []
    plan = []
    for entry in raw if isinstance(raw, list) else []:
        try:
            plan.append(ContentPlanItem.model_validate(entry))
        except ValidationError:
            continue
    return plan


def row_to_hook(row: dict[str, Any]) -> CachedNewsHook:
    """Build a CachedNewsHook from a stored row, re-applying outlet names."""
    return CachedNewsHook(
        id=row["id"],
        headline=row.get("headline") or "No title",
        outlet=normalize_outlet_name(row.get("outlet")),
        date=str(row.get("date") or ""),
        url=row.get("url") or "",
        summary=row.get("summary") or "",
        relevance=row.get("relevance") or "",
        angle_title=row.get("angle_title") or "",
        angle_narrative=row.get("angle_narrative") or "",
        content_plan=_decode_plan(row.get("content_plan")),
        fetched_at=row["fetched_at"],
    )


class HookStore(ABC):
    def __init__(self, dedupe_on_headline: bool = True, clock: Optional[Clock] = None):
        self.dedupe_on_headline = dedupe_on_headline
        self.clock = clock or _utc_now

    def cutoff(self, max_age_days: int) -> date:
        return self.clock().astimezone(timezone.utc).date() - timedelta(days=max_age_days)

    def upsert_if_new(self, item: CuratedItem) -> bool:
        """Insert `item` unless an existing row shares its identity. Returns True if inserted."""
        existing_id = self.find_existing(item)
        if existing_id is not None:
            logger.debug("[Store] Duplicate of row %s, skipped: %s", existing_id, item.headline[:70])
            return False
        self.insert(item)
        return True

    @abstractmethod
    def find_existing(self, item: CuratedItem) -> Optional[int]:
        """Id of a row matching `item` by URL (or headline), else None."""

    @abstractmethod
    def insert(self, item: CuratedItem) -> None:
        ...

    @abstractmethod
    def read(self, max_age_days: int = 30) -> list[CachedNewsHook]:
        """Rows with date > today - max_age_days, newest date first, then newest fetch."""

    @abstractmethod
    def evict(self, max_age_days: int = 30) -> int:
        """Delete rows with date < today - max_age_days. Returns the number deleted."""

    @abstractmethod
    def load_talking_points(self) -> list[str]:
        ...


def _format_talking_point(point: Any) -> str:
    if isinstance(point, dict):
        title = (point.get("title") or "").strip()
        content = (point.get("content") or "").strip()
        return f"{title}: {content}" if title and content else (title or content)
    return str(point).strip()


class SupabaseHookStore(HookStore):
    def __init__(
        self,
        client: Any,
        table: str = "news_hooks",
        dedupe_on_headline: bool = True,
        clock: Optional[Clock] = None,
    ):
        super().__init__(dedupe_on_headline, clock)
        self.client = client
        self.table = table

    def _table(self):
        return self.client.table(self.table)

    def find_existing(self, item: CuratedItem) -> Optional[int]:
        checks = []
        if item.url:
            checks.append(("url", item.url))
        if self.dedupe_on_headline and item.headline:
            checks.append(("headline", item.headline))
        try:
            for column, value in checks:
                res = self._table().select("id").eq(column, value).limit(1).execute()
                if res.data:
                    return res.data[0]["id"]
        except Exception as e:
            raise StoreError(f"duplicate check failed: {e}") from e
        return None

    def insert(self, item: CuratedItem) -> None:
        # id and fetched_at are assigned by the database defaults
        try:
            self._table().insert(item_to_row(item)).execute()
        except Exception as e:
            raise StoreError(f"insert failed: {e}") from e

    def read(self, max_age_days: int = 30) -> list[CachedNewsHook]:
        try:
            res = (
                self._table()
                .select("*")
                .gt("date", self.cutoff(max_age_days).isoformat())
                .order("date", desc=True)
                .order("fetched_at", desc=True)
                .execute()
            )
        except Exception as e:
            raise StoreError(f"read failed: {e}") from e
        return [row_to_hook(row) for row in (res.data or [])]

    def evict(self, max_age_days: int = 30) -> int:
        try:
            res = self._table().delete().lt("date", self.cutoff(max_age_days).isoformat()).execute()
        except Exception as e:
            raise StoreError(f"evict failed: {e}") from e
        return len(res.data or [])

    def load_talking_points(self) -> list[str]:
        try:
            res = self.client.table("talking_points").select("title,content").order("created_at").execute()
        except Exception as e:
            raise StoreError(f"talking points load failed: {e}") from e
        return [p for p in (_format_talking_point(row) for row in (res.data or [])) if p]


class JsonFileHookStore(HookStore):
    """Flat-file store: {"next_id": int, "news_hooks": [row, ...], "talking_points": [...]}."""

    def __init__(
        self,
        path: str | Path,
        dedupe_on_headline: bool = True,
        clock: Optional[Clock] = None,
    ):
        super().__init__(dedupe_on_headline, clock)
        self.path = Path(path)
        self._lock = threading.Lock()

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {"next_id": 1, "news_hooks": [], "talking_points": []}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise StoreError(f"cannot read {self.path}: {e}") from e
        data.setdefault("news_hooks", [])
        data.setdefault("talking_points", [])
        data.setdefault("next_id", max((r["id"] for r in data["news_hooks"]), default=0) + 1)
        return data

    def _save(self, data: dict[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self.path.with_suffix(self.path.suffix + ".tmp")
            tmp.write_text(json.dumps(data, indent=2), encoding="utf-8")
            tmp.replace(self.path)
        except OSError as e:
            raise StoreError(f"cannot write {self.path}: {e}") from e

    def _matches(self, row: dict[str, Any], item: CuratedItem) -> bool:
        if item.url and row.get("url") == item.url:
            return True
        return bool(self.dedupe_on_headline and item.headline and row.get("headline") == item.headline)

    def find_existing(self, item: CuratedItem) -> Optional[int]:
        for row in self._load()["news_hooks"]:
            if self._matches(row, item):
                return row["id"]
        return None

    def insert(self, item: CuratedItem) -> None:
        with self._lock:
            data = self._load()
            row = item_to_row(item)
            row["id"] = data["next_id"]
            row["fetched_at"] = self.clock().isoformat()
            data["next_id"] += 1
            data["news_hooks"].append(row)
            self._save(data)

    def read(self, max_age_days: int = 30) -> list[CachedNewsHook]:
        cutoff = self.cutoff(max_age_days).isoformat()
        hooks = [row_to_hook(r) for r in self._load()["news_hooks"] if str(r.get("date", "")) > cutoff]
        hooks.sort(key=lambda h: (h.date, h.fetched_at), reverse=True)
        return hooks

    def evict(self, max_age_days: int = 30) -> int:
        cutoff = self.cutoff(max_age_days).isoformat()
        with self._lock:
            data = self._load()
            kept = [r for r in data["news_hooks"] if not str(r.get("date", "")) < cutoff]
            deleted = len(data["news_hooks"]) - len(kept)
            if deleted:
                data["news_hooks"] = kept
                self._save(data)
        return deleted

    def load_talking_points(self) -> list[str]:
        return [p for p in (_format_talking_point(tp) for tp in self._load()["talking_points"]) if p]


def build_store(settings: Any, client: Any = None) -> HookStore:
    if client is not None:
        return SupabaseHookStore(client, dedupe_on_headline=settings.dedupe_on_headline)
    return JsonFileHookStore(settings.news_hooks_file, dedupe_on_headline=settings.dedupe_on_headline)
