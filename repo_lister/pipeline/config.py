"""Central configuration constants for the repository listing pipeline."""

from __future__ import annotations

import os


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


CONCURRENCY_LIMIT = int(os.getenv("CONCURRENCY_LIMIT", "10"))
# Counting walks the full history of the default branch: one call per 100 commits.
FETCH_COMMIT_COUNT = _env_flag("FETCH_COMMIT_COUNT")
OUTPUT_FILENAME_TEMPLATE = "{username}-repositories-{timestamp}.csv"

__all__ = [
    "CONCURRENCY_LIMIT",
    "FETCH_COMMIT_COUNT",
    "OUTPUT_FILENAME_TEMPLATE",
]
