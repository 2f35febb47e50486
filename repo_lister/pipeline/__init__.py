"""Repository enrichment pipeline: batch runner, commit enricher, CSV export."""

from .runner import main, run

__all__ = ["main", "run"]
