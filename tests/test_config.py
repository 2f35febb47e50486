"""Tests for repo_lister.pipeline.config ensuring env overrides and defaults work.

Run with coverage to validate configuration handling:
    pytest tests/test_config.py --maxfail=1 -v --cov=repo_lister.pipeline.config --cov-report=term-missing
"""

from importlib import reload

import repo_lister.pipeline.config as config
import repo_lister.retrieval.config as retrieval_config


def test_config_defaults_are_present():
    assert config.CONCURRENCY_LIMIT >= 1
    assert "{username}" in config.OUTPUT_FILENAME_TEMPLATE
    assert retrieval_config.PER_PAGE == 100
    assert retrieval_config.BACKOFF_BASE_SEC >= 1
    assert retrieval_config.USER_AGENT.startswith("repo-lister")


def test_env_override_for_concurrency_and_commit_count(monkeypatch):
    monkeypatch.setenv("CONCURRENCY_LIMIT", "3")
    monkeypatch.setenv("FETCH_COMMIT_COUNT", "yes")
    reloaded = reload(config)
    try:
        assert reloaded.CONCURRENCY_LIMIT == 3
        assert reloaded.FETCH_COMMIT_COUNT is True
    finally:
        monkeypatch.delenv("CONCURRENCY_LIMIT", raising=False)
        monkeypatch.delenv("FETCH_COMMIT_COUNT", raising=False)
        reload(config)


def test_commit_count_flag_defaults_off(monkeypatch):
    monkeypatch.delenv("FETCH_COMMIT_COUNT", raising=False)
    assert reload(config).FETCH_COMMIT_COUNT is False
