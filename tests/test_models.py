"""Tests for repo_lister.models covering API parsing and report assembly.

Run with coverage:
    pytest tests/test_models.py --maxfail=1 -v --cov=repo_lister.models --cov-report=term-missing
"""

import dataclasses

import pytest

from repo_lister import models


def api_repo(**overrides):
    data = {
        "name": "widget",
        "full_name": "octo/widget",
        "owner": {"login": "octo"},
        "private": False,
        "archived": False,
        "fork": False,
        "description": "A widget",
        "html_url": "https://github.com/octo/widget",
        "stargazers_count": 12,
        "forks_count": 3,
        "language": "Python",
        "size": 256,
        "created_at": "2020-01-01T00:00:00Z",
        "updated_at": "2024-01-01T00:00:00Z",
    }
    data.update(overrides)
    return data


def test_from_api_maps_fields():
    repo = models.RepositoryDescriptor.from_api(api_repo())
    assert repo.name == "widget"
    assert repo.owner_login == "octo"
    assert repo.stargazers_count == 12
    assert repo.size_kb == 256
    assert repo.parent_full_name is None


def test_from_api_keeps_parent_only_for_forks():
    fork = models.RepositoryDescriptor.from_api(api_repo(fork=True, parent={"full_name": "up/widget"}))
    assert fork.parent_full_name == "up/widget"
    not_fork = models.RepositoryDescriptor.from_api(api_repo(parent={"full_name": "up/widget"}))
    assert not_fork.parent_full_name is None


def test_descriptor_is_immutable():
    repo = models.RepositoryDescriptor.from_api(api_repo())
    with pytest.raises(dataclasses.FrozenInstanceError):
        repo.name = "other"


def test_failed_enrichment_is_distinct_from_not_computed():
    failed = models.EnrichmentRecord.failed()
    assert (failed.commit_count, failed.last_commit_date) == (0, None)
    assert failed.is_failed
    default = models.EnrichmentRecord()
    assert default.commit_count == models.COMMIT_COUNT_NOT_COMPUTED
    assert not default.is_failed


def test_assemble_report_keeps_order_and_static_fields():
    repos = [
        models.RepositoryDescriptor.from_api(api_repo(name="a", full_name="octo/a")),
        models.RepositoryDescriptor.from_api(
            api_repo(name="b", full_name="octo/b", description=None, language=None, private=True)
        ),
    ]
    enrichments = [
        models.EnrichmentRecord(last_commit_date="2024-02-02T00:00:00Z"),
        models.EnrichmentRecord.failed(),
    ]
    report = models.assemble_report(repos, enrichments)
    assert [r.name for r in report] == ["a", "b"]
    failed = report[1]
    assert failed.full_name == "octo/b"
    assert failed.private is True
    assert failed.stars == 12
    assert failed.url == "https://github.com/octo/widget"
    assert failed.description == ""
    assert failed.language == "N/A"
    assert failed.commit_count == 0
    assert failed.last_commit_date is None
    assert failed.enrichment_status == models.STATUS_FAILED


def test_assemble_report_rejects_length_mismatch():
    repos = [models.RepositoryDescriptor.from_api(api_repo())]
    with pytest.raises(ValueError):
        models.assemble_report(repos, [])
