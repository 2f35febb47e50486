"""Entry points for listing, enriching, and exporting a user's repositories."""

from __future__ import annotations

import argparse
import asyncio
import sys
from dataclasses import dataclass
from typing import List, Optional, Sequence

from repo_lister.credentials import MissingCredentialsError, resolve_token
from repo_lister.models import (
    STATUS_FAILED,
    EnrichmentRecord,
    RepositoryDescriptor,
    ReportRecord,
    assemble_report,
)
from repo_lister.retrieval.async_client import AsyncGitHubClient
from repo_lister.retrieval.http_client import GitHubSession
from repo_lister.retrieval.listing import ListingMode, fetch_user_repositories

from .batch import process_concurrently
from .config import CONCURRENCY_LIMIT, FETCH_COMMIT_COUNT
from .enricher import get_repo_commit_info
from .export import default_output_path, write_csv

USAGE = "Usage: repo-lister <username> [output-file.csv]"


@dataclass(frozen=True)
class RunSettings:
    """Resolved runtime settings for one run."""

    username: str
    output_path: str
    concurrency: int
    fetch_commit_count: bool


def build_arg_parser() -> argparse.ArgumentParser:
    """Return the CLI parser used by the entry point."""

    parser = argparse.ArgumentParser(
        prog="repo-lister",
        description="Export a GitHub user's repositories, with latest commit dates, to CSV.",
    )
    parser.add_argument("username", nargs="?", help="GitHub login to list repositories for")
    parser.add_argument("output", nargs="?", help="CSV path (default: <username>-repositories-<timestamp>.csv)")
    parser.add_argument("--concurrency", type=int, default=CONCURRENCY_LIMIT,
                        help="maximum simultaneous enrichment lookups (values below 1 mean 1)")
    parser.add_argument("--commit-count", action="store_true", default=FETCH_COMMIT_COUNT,
                        help="also count every commit on the default branch (slow)")
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments; accepts argv overrides for testing."""

    return build_arg_parser().parse_args(argv)


def resolve_settings(args: argparse.Namespace) -> RunSettings:
    username = args.username.strip()
    return RunSettings(
        username=username,
        output_path=args.output or default_output_path(username),
        concurrency=max(1, int(args.concurrency)),
        fetch_commit_count=bool(args.commit_count),
    )


async def enrich_repositories(client, repos: Sequence[RepositoryDescriptor], *,
                              concurrency: int = CONCURRENCY_LIMIT,
                              fetch_commit_count: bool = FETCH_COMMIT_COUNT) -> List[EnrichmentRecord]:
    """Enrich every repository through the bounded batch runner, preserving order."""

    async def process_repo(repo: RepositoryDescriptor, index: int) -> EnrichmentRecord:
        return await get_repo_commit_info(
            client, repo.owner_login, repo.name, fetch_commit_count=fetch_commit_count
        )

    return await process_concurrently(repos, process_repo, concurrency)


async def _enrich_with_client(token: str, repos: Sequence[RepositoryDescriptor],
                              settings: RunSettings) -> List[EnrichmentRecord]:
    async with AsyncGitHubClient(token) as client:
        return await enrich_repositories(
            client,
            repos,
            concurrency=settings.concurrency,
            fetch_commit_count=settings.fetch_commit_count,
        )


def print_summary(records: Sequence[ReportRecord], mode: ListingMode, settings: RunSettings) -> None:
    """Print the human-readable totals block."""
    print("\n=== Summary ===")
    if mode is ListingMode.OWN:
        print("Analyzed your own repositories (including private ones)")
    else:
        print(f"Analyzed repositories for user: {settings.username} (public only)")
    print(f"Total repositories: {len(records)}")
    print(f"Private repositories: {sum(1 for r in records if r.private)}")
    print(f"Public repositories: {sum(1 for r in records if not r.private)}")
    print(f"Archived repositories: {sum(1 for r in records if r.archived)}")
    print(f"Forked repositories: {sum(1 for r in records if r.fork)}")
    print(f"Original repositories: {sum(1 for r in records if not r.fork)}")
    print(f"Total stars: {sum(r.stars for r in records)}")
    failures = sum(1 for r in records if r.enrichment_status == STATUS_FAILED)
    if failures:
        print(f"Repositories without commit info: {failures}")
    print(f"Output saved to: {settings.output_path}")


def run(settings: RunSettings, token: str) -> List[ReportRecord]:
    """List, enrich, export, and summarize; listing errors propagate."""
    print("Starting GitHub repository analysis...")
    with GitHubSession(token) as session:
        mode, repos = fetch_user_repositories(session, settings.username)

    print("Processing repository details...")
    print(f"Using concurrency limit: {settings.concurrency}")
    enrichments = asyncio.run(_enrich_with_client(token, repos, settings))

    records = assemble_report(repos, enrichments)
    write_csv(records, settings.output_path)
    print_summary(records, mode, settings)
    return records


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point; returns the process exit code."""
    args = parse_args(argv)
    if not args.username or not args.username.strip():
        print("[error] Please provide a GitHub username", file=sys.stderr)
        print(USAGE, file=sys.stderr)
        return 1

    try:
        token = resolve_token()
    except MissingCredentialsError as exc:
        print(f"[error] {exc}", file=sys.stderr)
        return 1
    print("GitHub client initialized successfully")

    settings = resolve_settings(args)
    try:
        run(settings, token)
    except KeyboardInterrupt:
        print("[error] Interrupted", file=sys.stderr)
        return 1
    except Exception as exc:
        print(f"[error] Application error: {exc}", file=sys.stderr)
        return 1
    return 0


def cli() -> None:
    sys.exit(main())


__all__ = [
    "RunSettings",
    "build_arg_parser",
    "parse_args",
    "resolve_settings",
    "enrich_repositories",
    "print_summary",
    "run",
    "main",
    "cli",
]


if __name__ == "__main__":
    cli()
