"""List a GitHub account's repositories, enrich them with commit data, export to CSV."""

__version__ = "1.0.0"
