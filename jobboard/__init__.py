"""Read-only HTTP API over government job postings."""

__version__ = "0.1.0"
