import pytest

from news_hooks.store import JsonFileHookStore


@pytest.fixture
def json_store(tmp_path):
    return JsonFileHookStore(tmp_path / "news_hooks.json")
