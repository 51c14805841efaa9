"""Domain datatypes for remote listing entries."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from ..paths import identity_key, join_dir, normalize

UNKNOWN_SIZE = -1


@dataclass(frozen=True)
class Entry:
    """One remote file or folder as returned by the Listing API.

    ``path`` is the folder containing the entry. Search results span
    sub-folders, so ``path`` varies between entries of the same listing.
    """

    path: str
    name: str
    is_dir: bool = False
    file_size: int = UNKNOWN_SIZE
    mod_time: int = 0

    @property
    def key(self) -> str:
        """Selection identity: normalized containing folder plus name."""
        return identity_key(self.path, self.name)

    @property
    def folder(self) -> str:
        """Normalized containing folder."""
        return normalize(self.path)

    @property
    def target_path(self) -> str:
        """Folder to enter when this directory entry is opened."""
        return join_dir(self.path, self.name)

    @classmethod
    def from_json(cls, data: Mapping[str, object]) -> Entry:
        """Build an entry from one Listing API record."""
        size = data.get("FileSize", UNKNOWN_SIZE)
        mod_time = data.get("ModTime", 0)
        return cls(
            path=str(data.get("Path") or ""),
            name=str(data.get("Name") or ""),
            is_dir=bool(data.get("IsDir", False)),
            file_size=int(size) if isinstance(size, (int, float)) else UNKNOWN_SIZE,
            mod_time=int(mod_time) if isinstance(mod_time, (int, float)) else 0,
        )


EMPTY_ENTRY = Entry(path="", name="")


@dataclass(frozen=True)
class Listing:
    """Ordered entries for one folder, or a flat search result set."""

    path: str
    entries: tuple[Entry, ...] = ()
    search_expr: str | None = None

    @property
    def is_search(self) -> bool:
        return self.search_expr is not None

    def find(self, key: str) -> Entry | None:
        """Return the entry whose identity key is ``key``."""
        for entry in self.entries:
            if entry.key == key:
                return entry
        return None

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)


def parse_entries(payload: object) -> tuple[Entry, ...]:
    """Convert a Listing API JSON payload into entries.

    ``null`` payloads (empty folders) map to an empty tuple; non-mapping
    items are skipped.
    """
    if not isinstance(payload, Iterable) or isinstance(payload, (str, bytes, Mapping)):
        return ()
    return tuple(Entry.from_json(item) for item in payload if isinstance(item, Mapping))


__all__ = [
    "UNKNOWN_SIZE",
    "Entry",
    "EMPTY_ENTRY",
    "Listing",
    "parse_entries",
]
