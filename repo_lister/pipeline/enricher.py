"""Best-effort commit enrichment: default branch -> latest commit (-> commit count)."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from repo_lister.models import COMMIT_COUNT_NOT_COMPUTED, EnrichmentRecord
from repo_lister.retrieval.http_client import GitHubAPIError

from .config import FETCH_COMMIT_COUNT

EMPTY_REPOSITORY_STATUS = 409


def commit_date(commit_obj: Optional[Dict[str, Any]]) -> Optional[str]:
    """Committer timestamp of a commit listing entry."""
    commit = (commit_obj or {}).get("commit") or {}
    return (commit.get("committer") or {}).get("date")


async def get_default_branch(client, owner: str, repo: str) -> str:
    data = await client.get_json(f"repos/{owner}/{repo}")
    branch = data.get("default_branch")
    if not branch:
        raise ValueError(f"{owner}/{repo} has no default branch")
    return branch


async def get_latest_commits(client, owner: str, repo: str, branch: str) -> List[Dict[str, Any]]:
    """Newest commit on `branch` (as a 0- or 1-element list)."""
    try:
        return await client.get_json(
            f"repos/{owner}/{repo}/commits", params={"sha": branch, "per_page": 1}
        )
    except GitHubAPIError as exc:
        # GitHub answers 409 for a repository without any commits
        if exc.status == EMPTY_REPOSITORY_STATUS:
            return []
        raise


async def count_commits(client, owner: str, repo: str, branch: str) -> int:
    commits = await client.paged_get(f"repos/{owner}/{repo}/commits", params={"sha": branch})
    return len(commits)


async def get_repo_commit_info(client, owner: str, repo: str, *,
                               fetch_commit_count: bool = FETCH_COMMIT_COUNT) -> EnrichmentRecord:
    """Return the latest commit date (and optionally commit count) for a repository.

    Never raises for remote failures: any error is reported as a warning and
    turned into `EnrichmentRecord.failed()` so the surrounding batch keeps going.
    """
    try:
        branch = await get_default_branch(client, owner, repo)
        latest = await get_latest_commits(client, owner, repo, branch)
        if fetch_commit_count and latest:
            commit_count = await count_commits(client, owner, repo, branch)
        elif fetch_commit_count:
            commit_count = 0
        else:
            commit_count = COMMIT_COUNT_NOT_COMPUTED
        return EnrichmentRecord(
            commit_count=commit_count,
            last_commit_date=commit_date(latest[0]) if latest else None,
        )
    except Exception as exc:
        print(f"[warn] Could not fetch commit info for {owner}/{repo}: {exc}")
        return EnrichmentRecord.failed()


__all__ = [
    "commit_date",
    "get_default_branch",
    "get_latest_commits",
    "count_commits",
    "get_repo_commit_info",
]
