"""Record types flowing through the pipeline and the report assembler."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

COMMIT_COUNT_NOT_COMPUTED = -1

STATUS_OK = "ok"
STATUS_FAILED = "failed"


@dataclass(frozen=True)
class RepositoryDescriptor:
    """Immutable snapshot of one repository as returned by the listing."""

    name: str
    full_name: str
    owner_login: str
    private: bool
    archived: bool
    fork: bool
    parent_full_name: Optional[str]
    description: Optional[str]
    html_url: str
    stargazers_count: int
    forks_count: int
    language: Optional[str]
    size_kb: int
    created_at: Optional[str]
    updated_at: Optional[str]

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "RepositoryDescriptor":
        owner = data.get("owner") or {}
        full_name = data.get("full_name") or ""
        fork = bool(data.get("fork"))
        parent = data.get("parent") or {}
        return cls(
            name=data.get("name") or "",
            full_name=full_name,
            owner_login=owner.get("login") or full_name.split("/", 1)[0],
            private=bool(data.get("private")),
            archived=bool(data.get("archived")),
            fork=fork,
            parent_full_name=(parent.get("full_name") or None) if fork else None,
            description=data.get("description"),
            html_url=data.get("html_url") or "",
            stargazers_count=int(data.get("stargazers_count") or 0),
            forks_count=int(data.get("forks_count") or 0),
            language=data.get("language"),
            size_kb=int(data.get("size") or 0),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )


@dataclass(frozen=True)
class EnrichmentRecord:
    """Commit data for one repository.

    `commit_count` is COMMIT_COUNT_NOT_COMPUTED when counting was disabled.
    `status` separates a failed lookup from a repository that simply has no
    commits; both carry `last_commit_date=None`.
    """

    commit_count: int = COMMIT_COUNT_NOT_COMPUTED
    last_commit_date: Optional[str] = None
    status: str = STATUS_OK

    @classmethod
    def failed(cls) -> "EnrichmentRecord":
        return cls(commit_count=0, last_commit_date=None, status=STATUS_FAILED)

    @property
    def is_failed(self) -> bool:
        return self.status == STATUS_FAILED


@dataclass(frozen=True)
class ReportRecord:
    """Flattened repository metadata plus enrichment, one per CSV row."""

    name: str
    full_name: str
    private: bool
    archived: bool
    fork: bool
    forked_from: str
    description: str
    url: str
    stars: int
    forks: int
    language: str
    commit_count: int
    last_commit_date: Optional[str]
    created_at: Optional[str]
    updated_at: Optional[str]
    size_kb: int
    enrichment_status: str = STATUS_OK

    @classmethod
    def from_parts(cls, repo: RepositoryDescriptor, enrichment: EnrichmentRecord) -> "ReportRecord":
        return cls(
            name=repo.name,
            full_name=repo.full_name,
            private=repo.private,
            archived=repo.archived,
            fork=repo.fork,
            forked_from=repo.parent_full_name or "",
            description=repo.description or "",
            url=repo.html_url,
            stars=repo.stargazers_count,
            forks=repo.forks_count,
            language=repo.language or "N/A",
            commit_count=enrichment.commit_count,
            last_commit_date=enrichment.last_commit_date,
            created_at=repo.created_at,
            updated_at=repo.updated_at,
            size_kb=repo.size_kb,
            enrichment_status=enrichment.status,
        )


def assemble_report(repos: Sequence[RepositoryDescriptor],
                    enrichments: Sequence[EnrichmentRecord]) -> List[ReportRecord]:
    """Merge descriptors and enrichments index by index."""
    if len(repos) != len(enrichments):
        raise ValueError(
            f"Cannot assemble report: {len(repos)} repositories but {len(enrichments)} enrichment records"
        )
    return [ReportRecord.from_parts(repo, enrichment) for repo, enrichment in zip(repos, enrichments)]


__all__ = [
    "COMMIT_COUNT_NOT_COMPUTED",
    "STATUS_OK",
    "STATUS_FAILED",
    "RepositoryDescriptor",
    "EnrichmentRecord",
    "ReportRecord",
    "assemble_report",
]
