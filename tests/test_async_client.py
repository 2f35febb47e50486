"""Tests for repo_lister.retrieval.async_client using a stand-in aiohttp session.

Run with coverage:
    pytest tests/test_async_client.py --maxfail=1 -v --cov=repo_lister.retrieval.async_client --cov-report=term-missing
"""

import asyncio

import aiohttp
import pytest

from repo_lister.retrieval import async_client
from repo_lister.retrieval.http_client import GitHubAPIError


class FakeResponse:
    def __init__(self, status=200, payload=None, headers=None):
        self.status = status
        self.payload = payload if payload is not None else {}
        self.headers = headers or {}

    async def json(self, **_kwargs):
        return self.payload

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False


class FakeSession:
    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def get(self, url, params=None):
        self.calls.append((url, params))
        item = self.responses.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item


@pytest.fixture(autouse=True)
def _skip_backoff(monkeypatch):
    monkeypatch.setattr(async_client, "jittered", lambda _seconds: 0.0)


def _client(*responses):
    session = FakeSession(*responses)
    return async_client.AsyncGitHubClient("tok", session=session), session


def _call(client, method, *args, **kwargs):
    async def go():
        async with client:
            return await getattr(client, method)(*args, **kwargs)
    return asyncio.run(go())


def test_get_json_success():
    client, session = _client(FakeResponse(200, {"default_branch": "main"}))
    assert _call(client, "get_json", "repos/o/r") == {"default_branch": "main"}
    assert session.calls == [("https://api.github.com/repos/o/r", None)]
    assert client.request_count == 1


def test_get_json_raises_on_not_found():
    client, _ = _client(FakeResponse(404, {"message": "Not Found"}))
    with pytest.raises(GitHubAPIError) as excinfo:
        _call(client, "get_json", "repos/o/missing")
    assert excinfo.value.is_not_found
    assert "Not Found" in str(excinfo.value)


def test_retries_client_errors_then_succeeds():
    client, session = _client(aiohttp.ClientConnectionError("reset"), FakeResponse(200, [1]))
    assert _call(client, "get_json", "x") == [1]
    assert len(session.calls) == 2


def test_timeout_after_all_retries_propagates(monkeypatch):
    monkeypatch.setattr(async_client, "MAX_RETRIES", 2)
    client, _ = _client(asyncio.TimeoutError(), asyncio.TimeoutError())
    with pytest.raises(asyncio.TimeoutError):
        _call(client, "get_json", "x")


def test_rate_limited_request_is_retried():
    client, session = _client(
        FakeResponse(429, {"message": "slow down"}, headers={"Retry-After": "1"}),
        FakeResponse(200, {"ok": True}),
    )
    assert _call(client, "get_json", "x") == {"ok": True}
    assert len(session.calls) == 2


def test_paged_get_follows_next_links():
    client, session = _client(
        FakeResponse(200, [{"sha": "1"}, {"sha": "2"}],
                     headers={"Link": '<https://api.github.com/x?page=2>; rel="next"'}),
        FakeResponse(200, [{"sha": "3"}]),
    )
    result = _call(client, "paged_get", "x", {"sha": "main"})
    assert [c["sha"] for c in result] == ["1", "2", "3"]
    assert session.calls[0] == ("https://api.github.com/x", {"sha": "main", "per_page": 100})
    assert session.calls[1] == ("https://api.github.com/x?page=2", None)


def test_use_outside_context_is_rejected():
    client = async_client.AsyncGitHubClient("tok")
    with pytest.raises(RuntimeError):
        asyncio.run(client.get_json("x"))
