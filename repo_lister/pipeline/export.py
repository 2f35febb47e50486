"""CSV export of report records and default output naming."""

from __future__ import annotations

import csv
import datetime as dt
import os
from typing import Any, Dict, Iterable, List, Optional, Tuple

from repo_lister.models import ReportRecord

from .config import OUTPUT_FILENAME_TEMPLATE

# (record attribute, column title) in output order
CSV_COLUMNS: List[Tuple[str, str]] = [
    ("name", "Repository Name"),
    ("full_name", "Full Name"),
    ("private", "Private"),
    ("archived", "Archived"),
    ("fork", "Is Fork"),
    ("forked_from", "Forked From"),
    ("description", "Description"),
    ("url", "URL"),
    ("stars", "Stars"),
    ("forks", "Forks"),
    ("language", "Primary Language"),
    ("commit_count", "Commit Count"),
    ("last_commit_date", "Last Commit Date"),
    ("created_at", "Created Date"),
    ("updated_at", "Updated Date"),
    ("size_kb", "Size (KB)"),
]
CSV_HEADER = [title for _, title in CSV_COLUMNS]


def _cell(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


def record_to_row(record: ReportRecord) -> Dict[str, Any]:
    """Map a record onto the CSV column titles."""
    return {title: _cell(getattr(record, attr)) for attr, title in CSV_COLUMNS}


def default_output_path(username: str, now: Optional[dt.datetime] = None) -> str:
    """`<username>-repositories-<UTC timestamp>.csv`, e.g. ...-2025-08-06T13-15-30.csv."""
    now = now or dt.datetime.now(dt.timezone.utc)
    timestamp = now.strftime("%Y-%m-%dT%H:%M:%S").replace(":", "-").replace(".", "-")
    return OUTPUT_FILENAME_TEMPLATE.format(username=username, timestamp=timestamp)


def write_csv(records: Iterable[ReportRecord], output_path: str) -> str:
    """Write records to `output_path` (UTF-8, header row) and return the path."""
    parent = os.path.dirname(output_path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(output_path, "w", encoding="utf-8", newline="") as handle:
        writer = csv.DictWriter(handle, fieldnames=CSV_HEADER)
        writer.writeheader()
        for record in records:
            writer.writerow(record_to_row(record))
    print(f"CSV file generated: {output_path}")
    return output_path


__all__ = [
    "CSV_COLUMNS",
    "CSV_HEADER",
    "record_to_row",
    "default_output_path",
    "write_csv",
]
