"""Fakes and builders shared by the test modules."""
import json
from datetime import datetime, timedelta, timezone
from email.utils import format_datetime
from types import SimpleNamespace

import requests

from news_hooks.models import RawArticle


def days_ago(n: float) -> datetime:
    return datetime.now(timezone.utc) - timedelta(days=n)


def iso_days_ago(n: int) -> str:
    return (datetime.now(timezone.utc).date() - timedelta(days=n)).isoformat()


def make_article(url: str, domain: str = "techcrunch.com", title: str = "", age_days: float = 1) -> RawArticle:
    return RawArticle(
        title=title or f"Story at {url}",
        url=url,
        content_snippet="snippet",
        published_date=days_ago(age_days),
        domain=domain,
    )


def rss_feed(items: list[dict]) -> bytes:
    """items: [{"title", "link", "age_days" (None = undated), "description"}]"""
    parts = []
    for item in items:
        pub = ""
        if item.get("age_days") is not None:
            pub = f"<pubDate>{format_datetime(days_ago(item['age_days']))}</pubDate>"
        parts.append(
            "<item>"
            f"<title>{item['title']}</title>"
            f"<link>{item['link']}</link>"
            f"<description>{item.get('description', '&lt;p&gt;Some &lt;b&gt;html&lt;/b&gt; text&lt;/p&gt;')}</description>"
            f"{pub}"
            "</item>"
        )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<rss version="2.0"><channel><title>Test</title><link>https://example.com</link>'
        f"<description>t</description>{''.join(parts)}</channel></rss>"
    ).encode("utf-8")


def outlet_feed(domain: str, count: int, age_days: float = 1) -> bytes:
    return rss_feed([
        {"title": f"{domain} story {i}", "link": f"https://{domain}/story-{i}", "age_days": age_days}
        for i in range(count)
    ])


class FakeResponse:
    def __init__(self, content: bytes, status_code: int = 200):
        self.content = content
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")


class FakeHTTP:
    """Stands in for the `requests` module: url -> bytes | FakeResponse | Exception."""

    def __init__(self, routes: dict):
        self.routes = routes
        self.calls: list[str] = []

    def get(self, url, timeout=None, headers=None):
        self.calls.append(url)
        route = self.routes.get(url)
        if route is None:
            return FakeResponse(b"", status_code=404)
        if isinstance(route, Exception):
            raise route
        if isinstance(route, FakeResponse):
            return route
        return FakeResponse(route)


class FakeLLM:
    """Minimal chat model: returns canned text, records every call."""

    def __init__(self, text: str = "", error: Exception | None = None):
        self.text = text
        self.error = error
        self.calls: list[list[dict]] = []

    def invoke(self, messages):
        self.calls.append(messages)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(content=self.text)


def curated(i: int, date: str = "", **overrides) -> dict:
    item = {
        "headline": f"Curated headline {i}",
        "outlet": "www.techcrunch.com",
        "date": date or iso_days_ago(1),
        "url": f"https://techcrunch.com/curated-{i}",
        "summary": "One sentence summary.",
        "relevance": "Why it matters.",
        "angleTitle": "Compositing beats generation",
        "angleNarrative": "The story shows brands want control.",
        "contentPlan": [
            {"type": "quick_reaction", "description": "React on X", "priority": 1, "audience": "press"},
            {"type": "investor_note", "description": "Note for the board", "priority": 2, "audience": "investors"},
        ],
    }
    item.update(overrides)
    return item


def llm_output(items: list[dict], fenced: bool = True) -> str:
    body = json.dumps({"news": items}, indent=2)
    if fenced:
        return f"Here are the curated stories:\n```json\n{body}\n```\nLet me know if you need more."
    return body


# ── Fake Supabase (postgrest-style query builder over in-memory rows) ──────────
class FakeQuery:
    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table = table
        self.filters = []
        self.orders = []
        self.limit_n = None
        self.op = "select"
        self.payload = None

    def select(self, *_columns):
        self.op = "select"
        return self

    def insert(self, row):
        self.op = "insert"
        self.payload = row
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column, value):
        self.filters.append(lambda r: r.get(column) == value)
        return self

    def gt(self, column, value):
        self.filters.append(lambda r: str(r.get(column)) > value)
        return self

    def lt(self, column, value):
        self.filters.append(lambda r: str(r.get(column)) < value)
        return self

    def order(self, column, desc=False):
        self.orders.append((column, desc))
        return self

    def limit(self, n):
        self.limit_n = n
        return self

    def execute(self):
        if self.db.fail_on and self.op in self.db.fail_on:
            raise RuntimeError(f"simulated {self.op} failure")
        rows = self.db.tables.setdefault(self.table, [])
        if self.op == "insert":
            row = dict(self.payload)
            row["id"] = self.db.next_id
            row.setdefault("fetched_at", datetime.now(timezone.utc).isoformat())
            self.db.next_id += 1
            rows.append(row)
            return SimpleNamespace(data=[row])
        matched = [r for r in rows if all(f(r) for f in self.filters)]
        if self.op == "delete":
            self.db.tables[self.table] = [r for r in rows if r not in matched]
            return SimpleNamespace(data=matched)
        for column, desc in reversed(self.orders):
            matched.sort(key=lambda r: str(r.get(column)), reverse=desc)
        if self.limit_n is not None:
            matched = matched[: self.limit_n]
        return SimpleNamespace(data=matched)


class FakeSupabase:
    def __init__(self, tables: dict | None = None, fail_on: set | None = None):
        self.tables = tables or {}
        self.next_id = 1
        self.fail_on = fail_on or set()

    def table(self, name):
        return FakeQuery(self, name)


