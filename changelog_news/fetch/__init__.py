"""Fetching of remote documents."""

from .fetcher import FetchResult, fetch_url

__all__ = ["FetchResult", "fetch_url"]
