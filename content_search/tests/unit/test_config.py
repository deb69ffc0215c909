from pathlib import Path

import pytest

from content_search.src.services import config as config_module


@pytest.fixture(autouse=True)
def restore_config_cache():
    """
    Ensure configuration cache is cleared between tests.
    """
    config_module.reload_config()
    yield
    config_module.reload_config()


def test_get_config_allows_missing_github_token(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.setenv("CACHE_DB_PATH", str(tmp_path / "cache.db"))

    cfg = config_module.reload_config()

    assert cfg.github_token is None
    assert cfg.cache_db_path == (tmp_path / "cache.db").resolve()


def test_blank_github_token_is_treated_as_missing(monkeypatch) -> None:
    monkeypatch.setenv("GITHUB_TOKEN", "   ")

    cfg = config_module.reload_config()

    assert cfg.github_token is None


def test_defaults_match_reference_behavior(monkeypatch) -> None:
    for key in (
        "CACHE_TTL_SECONDS",
        "CACHE_RETENTION_SECONDS",
        "INDEX_BATCH_SIZE",
        "CONTENT_DIRECTORIES",
        "CONTENT_STANDALONE_PAGES",
        "CONTENT_PATH",
    ):
        monkeypatch.delenv(key, raising=False)

    cfg = config_module.reload_config()

    assert cfg.cache_ttl_seconds == 1800
    assert cfg.cache_retention_seconds == 86400
    assert cfg.index_batch_size == 10
    assert cfg.content_directories == ("blog", "portfolio", "projects")
    assert cfg.standalone_pages == ("about.md",)
    assert cfg.content_path == "src/content"


def test_comma_lists_are_split_and_trimmed(monkeypatch) -> None:
    monkeypatch.setenv("CONTENT_DIRECTORIES", " blog/ , notes ,, ")
    monkeypatch.setenv("CONTENT_PATH", "/content/")
    monkeypatch.setenv("GITHUB_API_BASE", "https://github.example.com/api/v3/")

    cfg = config_module.reload_config()

    assert cfg.content_directories == ("blog", "notes")
    assert cfg.content_path == "content"
    assert cfg.github_api_base == "https://github.example.com/api/v3"


def test_get_config_rejects_retention_shorter_than_ttl(monkeypatch) -> None:
    monkeypatch.setenv("CACHE_TTL_SECONDS", "600")
    monkeypatch.setenv("CACHE_RETENTION_SECONDS", "60")

    with pytest.raises(ValueError):
        config_module.reload_config()


def test_get_config_rejects_zero_batch_size(monkeypatch) -> None:
    monkeypatch.setenv("INDEX_BATCH_SIZE", "0")

    with pytest.raises(ValueError):
        config_module.reload_config()
