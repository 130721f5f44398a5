"""Nuxeo metadata source adapter."""

from __future__ import annotations

from .client import NuxeoAPIError, NuxeoClient
from .fetcher import NuxeoMetadataFetcher

__all__ = [
    "NuxeoAPIError",
    "NuxeoClient",
    "NuxeoMetadataFetcher",
]
