"""Convenience shim: python list_repos.py <username> [output-file.csv]"""

from __future__ import annotations

from repo_lister.pipeline.runner import cli


if __name__ == "__main__":
    cli()
