"""Central configuration constants for talking to the GitHub REST API."""

from __future__ import annotations

import os

USER_AGENT = "repo-lister/1.0"
BASE_URL = "https://api.github.com"
ACCEPT_HEADER = "application/vnd.github+json"
PER_PAGE = 100
REQUEST_TIMEOUT = int(os.getenv("REQUEST_TIMEOUT", "30"))
MAX_RETRIES = int(os.getenv("MAX_RETRIES", "4"))
BACKOFF_BASE_SEC = 2
MAX_WAIT_ON_403 = int(os.getenv("MAX_WAIT_ON_403", "180"))
TERMINAL_STATUSES = frozenset({400, 401, 404, 409, 410, 422})

__all__ = [
    "USER_AGENT",
    "BASE_URL",
    "ACCEPT_HEADER",
    "PER_PAGE",
    "REQUEST_TIMEOUT",
    "MAX_RETRIES",
    "BACKOFF_BASE_SEC",
    "MAX_WAIT_ON_403",
    "TERMINAL_STATUSES",
]
