"""Repository listing for an account: own repositories (incl. private) or public ones."""

from __future__ import annotations

import enum
import sys
from typing import Any, Dict, List, Tuple

from repo_lister.models import RepositoryDescriptor

from .http_client import GitHubAPIError, GitHubSession


class ListingMode(enum.Enum):
    """Which listing endpoint to use, decided once per run."""

    OWN = "own"
    PUBLIC = "public"

    @property
    def path_template(self) -> str:
        return "user/repos" if self is ListingMode.OWN else "users/{username}/repos"

    def params(self) -> Dict[str, Any]:
        if self is ListingMode.OWN:
            return {"visibility": "all", "affiliation": "owner", "sort": "updated"}
        return {"type": "all"}


def get_authenticated_login(session: GitHubSession) -> str:
    """Return the login that owns the token."""
    data = session.get_json("user")
    return str(data.get("login") or "")


def select_listing_mode(authenticated_login: str, username: str) -> ListingMode:
    """OWN when the token belongs to `username` (case-insensitive), PUBLIC otherwise."""
    if authenticated_login and authenticated_login.lower() == username.lower():
        return ListingMode.OWN
    return ListingMode.PUBLIC


def list_repositories(session: GitHubSession, username: str, mode: ListingMode) -> List[RepositoryDescriptor]:
    """Fetch every page of the listing before returning."""
    path = mode.path_template.format(username=username)
    raw = session.paged_get(path, mode.params())
    return [RepositoryDescriptor.from_api(entry) for entry in raw]


def _print_listing_error(exc: Exception) -> None:
    print(f"[error] Error fetching repositories: {exc}", file=sys.stderr)
    if isinstance(exc, GitHubAPIError):
        if exc.is_not_found:
            print("[error] User not found or you don't have access to their repositories", file=sys.stderr)
        elif exc.is_unauthorized:
            print("[error] Invalid GitHub token or insufficient permissions", file=sys.stderr)


def fetch_user_repositories(session: GitHubSession, username: str) -> Tuple[ListingMode, List[RepositoryDescriptor]]:
    """Resolve the listing mode and return the complete repository list.

    Errors are reported with a hint (404: unknown user, 401: bad token) and
    re-raised, since there is nothing to report without the full list.
    """
    print(f"Fetching repositories for user: {username}")
    try:
        mode = select_listing_mode(get_authenticated_login(session), username)
        if mode is ListingMode.OWN:
            print("Fetching your own repositories (including private ones)...")
        else:
            print("Fetching repositories for another user (public only)...")
        repos = list_repositories(session, username, mode)
    except Exception as exc:
        _print_listing_error(exc)
        raise

    print(f"Found {len(repos)} repositories")
    return mode, repos


__all__ = [
    "ListingMode",
    "get_authenticated_login",
    "select_listing_mode",
    "list_repositories",
    "fetch_user_repositories",
]
