"""Listing domain: remote entries, per-folder cache, and fetch loaders.

This package contains non-UI listing primitives:
- entry/listing datatypes parsed from Listing API payloads
- the wholesale-invalidated per-folder cache
- sync and threaded loaders that stamp fetches with request ids
- column formatting and sorting helpers
"""

from __future__ import annotations

from .types import EMPTY_ENTRY, UNKNOWN_SIZE, Entry, Listing, parse_entries
from .cache import ListingCache
from .loader import (
    ListingFetch,
    ListingRequest,
    ListingResult,
    SyncListingLoader,
    ThreadedListingLoader,
)
from .format import entry_row, format_file_size, show_value, sort_entries

__all__ = [
    "Entry",
    "EMPTY_ENTRY",
    "UNKNOWN_SIZE",
    "Listing",
    "parse_entries",
    "ListingCache",
    "ListingFetch",
    "ListingRequest",
    "ListingResult",
    "SyncListingLoader",
    "ThreadedListingLoader",
    "entry_row",
    "format_file_size",
    "show_value",
    "sort_entries",
]
