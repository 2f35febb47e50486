"""Utilities for resolving the GitHub token from the environment or a local file."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

DEFAULT_CREDENTIALS_FILENAME = "credentials.json"
TOKEN_ENV_VAR = "GITHUB_TOKEN"
TOKEN_FIELD = "github_token"


class MissingCredentialsError(RuntimeError):
    """Raised when neither the environment nor the credentials file holds a token."""


def _default_credentials_path() -> Path:
    return Path.cwd() / DEFAULT_CREDENTIALS_FILENAME


def load_local_credentials(path: Optional[str | Path] = None) -> Dict[str, Any]:
    """Load credentials from a JSON file; return {} when unavailable or unreadable."""

    candidate = path or os.getenv("CREDENTIALS_FILE") or _default_credentials_path()
    credentials_path = Path(candidate).expanduser()
    if not credentials_path.exists():
        return {}
    try:
        with credentials_path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except (OSError, ValueError) as exc:
        print(f"[warn] Could not read credentials file {credentials_path}: {exc}")
        return {}
    return data if isinstance(data, dict) else {}


def resolve_token(path: Optional[str | Path] = None) -> str:
    """Return the token from GITHUB_TOKEN, falling back to the credentials file."""

    token = os.getenv(TOKEN_ENV_VAR)
    if not token:
        token = load_local_credentials(path).get(TOKEN_FIELD)
    if not token or not isinstance(token, str):
        raise MissingCredentialsError(
            "GitHub token not found. Please provide it via:\n"
            f"1. Environment variable: {TOKEN_ENV_VAR}\n"
            f'2. {DEFAULT_CREDENTIALS_FILENAME} file with format: {{"{TOKEN_FIELD}": "your_token_here"}}'
        )
    return token.strip()


__all__ = [
    "DEFAULT_CREDENTIALS_FILENAME",
    "TOKEN_ENV_VAR",
    "TOKEN_FIELD",
    "MissingCredentialsError",
    "load_local_credentials",
    "resolve_token",
]
