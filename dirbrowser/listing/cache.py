"""Per-folder listing cache.

Holds the most recent listing fetched for each normalized folder path.
Invalidation is wholesale: any mutation or search-mode change clears it.
"""

from __future__ import annotations

import logging

from ..paths import normalize
from .types import Listing

LOGGER = logging.getLogger(__name__)


class ListingCache:
    """In-memory ``path -> Listing`` map, lost with the process."""

    def __init__(self) -> None:
        self._data: dict[str, Listing] = {}

    def get(self, path: str) -> Listing | None:
        """Return cached listing for ``path`` or ``None`` on a miss."""
        return self._data.get(normalize(path))

    def put(self, path: str, listing: Listing) -> None:
        """Store a folder listing. Search listings are never cached."""
        if listing.is_search:
            return
        self._data[normalize(path)] = listing

    def invalidate_all(self) -> None:
        """Forget every cached folder."""
        if self._data:
            LOGGER.debug("dropping %d cached listings", len(self._data))
        self._data.clear()

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and normalize(path) in self._data

    def __len__(self) -> int:
        return len(self._data)


__all__ = ["ListingCache"]
