import pytest
from fastapi.testclient import TestClient

from curator_agent.agent import RelevanceCurator
from news_hooks.errors import StoreError
from news_hooks.fetcher import FeedFetcher
from news_hooks.pipeline import NewsHooksPipeline
from news_hooks.registry import FeedRegistry
from news_hooks.settings import PipelineSettings
from server import app, get_pipeline
from tests.helpers import FakeHTTP, FakeLLM, curated, iso_days_ago, llm_output, outlet_feed


@pytest.fixture
def llm():
    return FakeLLM(llm_output([curated(1), curated(2, date="Recent")]))


@pytest.fixture
def pipeline(json_store, llm):
    return NewsHooksPipeline(
        settings=PipelineSettings(openai_api_key="sk-test"),
        registry=FeedRegistry({"techcrunch.com": "https://techcrunch.com/feed/"}),
        store=json_store,
        curator=RelevanceCurator(api_key="sk-test", llm=llm),
        fetcher=FeedFetcher(http=FakeHTTP({"https://techcrunch.com/feed/": outlet_feed("techcrunch.com", 3)})),
    )


@pytest.fixture
def client(pipeline):
    app.dependency_overrides[get_pipeline] = lambda: pipeline
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_post_refresh_returns_items_and_count(client):
    res = client.post("/api/pr/news-hooks")

    assert res.status_code == 200
    body = res.json()
    assert body["success"] is True
    assert body["newCount"] == 2
    first = body["items"][0]
    assert {"id", "headline", "outlet", "date", "url", "angleTitle", "angleNarrative", "contentPlan", "fetchedAt"} <= set(first)
    assert first["contentPlan"][0]["type"] == "quick_reaction"


def test_get_returns_cache_without_count(client):
    client.post("/api/pr/news-hooks")

    res = client.get("/api/pr/news-hooks")

    assert res.status_code == 200
    body = res.json()
    assert body["success"] is True
    assert len(body["items"]) == 2
    assert "newCount" not in body


def test_get_on_empty_cache(client):
    res = client.get("/api/pr/news-hooks")
    assert res.json() == {"success": True, "items": []}


def test_refresh_failure_is_500(client, llm):
    llm.error = TimeoutError("upstream timed out")

    res = client.post("/api/pr/news-hooks")

    assert res.status_code == 500
    body = res.json()
    assert body["success"] is False
    assert "upstream timed out" in body["error"]


def test_delete_old_hooks(client, json_store):
    from news_hooks.models import CuratedItem

    json_store.upsert_if_new(CuratedItem.model_validate(curated(1, date=iso_days_ago(45))))
    json_store.upsert_if_new(CuratedItem.model_validate(curated(2, date=iso_days_ago(2))))

    res = client.delete("/api/pr/news-hooks/old")

    assert res.status_code == 200
    assert res.json() == {"success": True, "deleted": 1}


def test_delete_store_failure_is_500(client, json_store, monkeypatch):
    def broken(max_age_days=30):
        raise StoreError("disk full")

    monkeypatch.setattr(json_store, "evict", broken)

    res = client.delete("/api/pr/news-hooks/old")

    assert res.status_code == 500
    assert res.json() == {"success": False, "error": "disk full"}
