"""Selection model keyed by entry identity.

The map may hold stale keys from a previous listing; they are harmless until
``clear`` drops them. For command purposes the selection is a single item:
the first key flagged true.
"""

from __future__ import annotations

from .listing.types import EMPTY_ENTRY, Entry, Listing


class SelectionModel:
    """Tracks ``identity key -> selected`` flags."""

    def __init__(self) -> None:
        self._flags: dict[str, bool] = {}

    def toggle(self, key: str, additive: bool = False) -> None:
        """Flip ``key``; without ``additive`` every other key is dropped first."""
        if not additive:
            was_selected = self._flags.get(key, False)
            self._flags = {key: was_selected}
        self._flags[key] = not self._flags.get(key, False)

    def select(self, key: str) -> None:
        """Make ``key`` the only selected entry."""
        self._flags = {key: True}

    def clear(self) -> None:
        self._flags = {}

    def is_selected(self, key: str) -> bool:
        return self._flags.get(key, False)

    def selected_key(self) -> str:
        """First selected key in insertion order, or ``""``."""
        for key, flag in self._flags.items():
            if flag:
                return key
        return ""

    def selected_keys(self) -> list[str]:
        return [key for key, flag in self._flags.items() if flag]

    def resolve_entry(self, listing: Listing | None) -> Entry:
        """Entry of ``listing`` matching :meth:`selected_key`, or the placeholder."""
        key = self.selected_key()
        if not key or listing is None:
            return EMPTY_ENTRY
        found = listing.find(key)
        return found if found is not None else EMPTY_ENTRY

    def __bool__(self) -> bool:
        return bool(self.selected_key())


__all__ = ["SelectionModel"]
