"""Async GitHub REST client shared by every concurrent enrichment call."""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional, Tuple

import aiohttp

from .config import BASE_URL, MAX_RETRIES, PER_PAGE, REQUEST_TIMEOUT, TERMINAL_STATUSES
from .http_client import (
    GitHubAPIError,
    backoff_delay,
    default_headers,
    error_message,
    jittered,
    parse_next_link,
    rate_limit_wait,
)


class AsyncGitHubClient:
    """aiohttp-based client; use as `async with AsyncGitHubClient(token) as client`.

    The underlying `ClientSession` is only read from once opened, so one
    instance can serve any number of concurrent calls.
    """

    def __init__(self, token: Optional[str], *, base_url: str = BASE_URL,
                 timeout: float = REQUEST_TIMEOUT,
                 session: Optional[aiohttp.ClientSession] = None) -> None:
        self.base_url = base_url.rstrip("/")
        self._headers = default_headers(token)
        self._timeout = timeout
        self._session = session
        self._owns_session = session is None
        self.request_count = 0

    async def __aenter__(self) -> "AsyncGitHubClient":
        if self._session is None:
            self._session = aiohttp.ClientSession(
                headers=self._headers,
                timeout=aiohttp.ClientTimeout(total=self._timeout),
            )
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        if self._session is not None and self._owns_session:
            await self._session.close()
            self._session = None

    def url(self, path: str) -> str:
        if path.startswith("http://") or path.startswith("https://"):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    async def _get(self, url: str, params: Optional[Dict[str, Any]] = None) -> Tuple[Any, Optional[str]]:
        """GET with retry; returns (json body, next page url)."""
        if self._session is None:
            raise RuntimeError("AsyncGitHubClient used outside of 'async with'")

        last_exc: Optional[BaseException] = None
        status = 0
        message = ""
        for attempt in range(1, MAX_RETRIES + 1):
            try:
                async with self._session.get(url, params=params) as resp:
                    self.request_count += 1
                    status = resp.status
                    if 200 <= status < 300:
                        body = await resp.json()
                        return body, parse_next_link(resp.headers.get("Link"))

                    try:
                        payload = await resp.json(content_type=None)
                    except (aiohttp.ContentTypeError, ValueError):
                        payload = None
                    message = error_message(payload)
                    headers = resp.headers
            except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
                last_exc = exc
                if attempt < MAX_RETRIES:
                    await asyncio.sleep(jittered(backoff_delay(attempt)))
                continue

            last_exc = None
            if status in (403, 429):
                wait_sec = rate_limit_wait(status, headers, attempt)
                if wait_sec is None:
                    break
                if attempt < MAX_RETRIES:
                    print(f"[backoff {status}] waiting {wait_sec:.0f}s for {url}")
                    await asyncio.sleep(jittered(wait_sec))
                continue
            if status in TERMINAL_STATUSES:
                break
            if attempt < MAX_RETRIES:
                await asyncio.sleep(jittered(backoff_delay(attempt)))

        if last_exc is not None:
            raise last_exc
        raise GitHubAPIError(status, url, message)

    async def get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """GET a single resource and decode its JSON body."""
        body, _ = await self._get(self.url(path), params)
        return body

    async def paged_get(self, path: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """Follow Link rel="next" until the listing is exhausted."""
        query = dict(params or {})
        query.setdefault("per_page", PER_PAGE)
        results: List[Dict[str, Any]] = []
        batch, next_url = await self._get(self.url(path), query)
        while True:
            if not isinstance(batch, list) or not batch:
                break
            results.extend(batch)
            if not next_url:
                break
            batch, next_url = await self._get(next_url)
        return results


__all__ = ["AsyncGitHubClient"]
