"""Synchronous REST session with retry/backoff logic and Link-header pagination."""

from __future__ import annotations

import os
import re
import time
from typing import Any, Dict, List, Mapping, Optional

import requests

from .config import (
    ACCEPT_HEADER,
    BACKOFF_BASE_SEC,
    BASE_URL,
    MAX_RETRIES,
    MAX_WAIT_ON_403,
    PER_PAGE,
    REQUEST_TIMEOUT,
    TERMINAL_STATUSES,
    USER_AGENT,
)

_NEXT_LINK_RE = re.compile(r'<([^>]+)>\s*;\s*rel="next"')


class GitHubAPIError(RuntimeError):
    """A GitHub API call that ended with a non-success status."""

    def __init__(self, status: int, url: str, message: str = "") -> None:
        self.status = status
        self.url = url
        self.message = message
        super().__init__(f"HTTP {status} for {url}" + (f": {message}" if message else ""))

    @property
    def is_not_found(self) -> bool:
        return self.status == 404

    @property
    def is_unauthorized(self) -> bool:
        return self.status == 401


def sleep_with_jitter(base: float) -> None:
    """Pause execution with +/- 25% jitter to avoid synchronized retries."""
    time.sleep(jittered(base))


def jittered(base: float) -> float:
    """Return `base` shifted by up to +/- 25% of its value."""
    jitter = base * 0.25 * (0.5 - (os.urandom(1)[0] / 255.0))
    return max(0.0, base + jitter)


def backoff_delay(attempt: int) -> float:
    """Exponential backoff for a 1-based attempt number."""
    return BACKOFF_BASE_SEC * (2 ** (attempt - 1))


def rate_limit_wait(status: int, headers: Mapping[str, str], attempt: int) -> Optional[float]:
    """Seconds to wait before retrying a 403/429, or None when it is a plain refusal."""
    retry_after = headers.get("Retry-After")
    remaining = headers.get("X-RateLimit-Remaining")
    reset = headers.get("X-RateLimit-Reset")

    if retry_after and str(retry_after).isdigit():
        wait_sec = float(retry_after)
    elif remaining == "0" and reset and str(reset).isdigit():
        wait_sec = float(max(0, int(reset) - int(time.time())) + 1)
    elif status == 429:
        wait_sec = backoff_delay(attempt)
    else:
        return None
    return min(wait_sec, MAX_WAIT_ON_403)


def parse_next_link(link_header: Optional[str]) -> Optional[str]:
    """Extract the rel="next" URL from a GitHub Link header."""
    if not link_header:
        return None
    match = _NEXT_LINK_RE.search(link_header)
    return match.group(1) if match else None


def error_message(payload: Any, text: str = "") -> str:
    """Pick the human-readable message out of a GitHub error body."""
    if isinstance(payload, dict):
        msg = payload.get("message") or payload.get("error")
        if msg:
            return str(msg)
    return (text or "")[:300]


def default_headers(token: Optional[str]) -> Dict[str, str]:
    """Headers shared by the sync and async clients."""
    headers = {
        "Accept": ACCEPT_HEADER,
        "User-Agent": USER_AGENT,
        "X-GitHub-Api-Version": "2022-11-28",
    }
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


class GitHubSession:
    """Blocking GitHub REST client used for the listing phase.

    Wraps a `requests.Session` carrying the bearer token. Terminal statuses
    and exhausted retries raise `GitHubAPIError`; transient failures
    (connection errors, 5xx, rate limiting) are retried with backoff.
    """

    def __init__(self, token: Optional[str], *, base_url: str = BASE_URL,
                 session: Optional[requests.Session] = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.session.headers.update(default_headers(token))

    def __enter__(self) -> "GitHubSession":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self.session.close()

    def url(self, path: str) -> str:
        if path.startswith("http://") or path.startswith("https://"):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    def request_with_backoff(self, method: str, url: str, **kwargs) -> requests.Response:
        """Perform a REST call with retry and exponential backoff."""
        timeout = kwargs.pop("timeout", REQUEST_TIMEOUT)
        last_exc: Optional[Exception] = None
        resp: Optional[requests.Response] = None

        for attempt in range(1, MAX_RETRIES + 1):
            try:
                resp = self.session.request(method, url, timeout=timeout, **kwargs)
            except requests.RequestException as exc:
                last_exc = exc
                if attempt < MAX_RETRIES:
                    delay = backoff_delay(attempt)
                    print(f"[retry {attempt}/{MAX_RETRIES}] {exc} -> sleep {delay:.1f}s")
                    sleep_with_jitter(delay)
                continue

            last_exc = None
            if 200 <= resp.status_code < 300:
                return resp

            if resp.status_code in (403, 429):
                wait_sec = rate_limit_wait(resp.status_code, resp.headers or {}, attempt)
                if wait_sec is None:
                    break
                if attempt < MAX_RETRIES:
                    print(f"[backoff {resp.status_code}] waiting {wait_sec:.0f}s for {url}")
                    sleep_with_jitter(wait_sec)
                continue

            if resp.status_code in TERMINAL_STATUSES:
                break

            if attempt < MAX_RETRIES:
                delay = backoff_delay(attempt)
                print(f"[retry {attempt}/{MAX_RETRIES}] HTTP {resp.status_code} -> sleep {delay:.1f}s")
                sleep_with_jitter(delay)

        if last_exc is not None:
            raise last_exc
        if resp is None:
            raise RuntimeError("Request failed after retries.")
        raise GitHubAPIError(resp.status_code, url, self._message_of(resp))

    @staticmethod
    def _message_of(resp: requests.Response) -> str:
        try:
            payload = resp.json()
        except ValueError:
            payload = None
        return error_message(payload, resp.text)

    def get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """GET a single resource and decode its JSON body."""
        resp = self.request_with_backoff("GET", self.url(path), params=params)
        return resp.json()

    def paged_get(self, path: str, params: Optional[Dict[str, Any]] = None,
                  *, max_pages: int = 0) -> List[Dict[str, Any]]:
        """Follow Link rel="next" until exhausted (or `max_pages` pages, 0 = no cap)."""
        query = dict(params or {})
        query.setdefault("per_page", PER_PAGE)
        results: List[Dict[str, Any]] = []
        next_url: Optional[str] = self.url(path)
        page = 0

        while next_url:
            if max_pages and page >= max_pages:
                break
            # the next link already carries the query string
            resp = self.request_with_backoff("GET", next_url, params=query if page == 0 else None)
            batch = resp.json()
            if not isinstance(batch, list) or not batch:
                break
            results.extend(batch)
            page += 1
            next_url = parse_next_link(resp.headers.get("Link"))
        return results


__all__ = [
    "GitHubAPIError",
    "GitHubSession",
    "sleep_with_jitter",
    "jittered",
    "backoff_delay",
    "rate_limit_wait",
    "parse_next_link",
    "error_message",
    "default_headers",
]
