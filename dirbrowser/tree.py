"""Lazily expanded remote folder tree for the sidebar."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Protocol

from .listing.types import parse_entries
from .navigation import Route, search_route as _search_route
from .paths import ROOT, join_dir

HOME_LABEL = "Home"


class DirLister(Protocol):
    def list_dir(self, path: str) -> object: ...


@dataclass
class FolderNode:
    """One folder in the sidebar tree.

    ``children`` is ``None`` until the folder is first opened; after that it
    holds only sub-folders, in listing order.
    """

    name: str
    path: str
    children: list[FolderNode] | None = None
    is_open: bool = False
    depth: int = field(default=0, compare=False)

    @property
    def loaded(self) -> bool:
        return self.children is not None

    def toggle(self, api: DirLister) -> bool:
        """Open or close this folder, listing it the first time it opens.

        Transport errors propagate and leave the node closed.
        """
        if self.is_open:
            self.is_open = False
            return False
        if self.children is None:
            entries = parse_entries(api.list_dir(self.path))
            self.children = [
                FolderNode(name=entry.name, path=join_dir(self.path, entry.name), depth=self.depth + 1)
                for entry in entries
                if entry.is_dir
            ]
        self.is_open = True
        return True

    def walk(self) -> Iterator[FolderNode]:
        """Yield this node and every visible descendant, depth first."""
        yield self
        if self.is_open and self.children:
            for child in self.children:
                yield from child.walk()


def root_node() -> FolderNode:
    """Unopened home node at the store root."""
    return FolderNode(name=HOME_LABEL, path=ROOT)


def search_route(expr: str) -> Route | None:
    """Route searching the whole store for ``expr``; blank input gives ``None``."""
    expr = expr.strip()
    if not expr:
        return None
    return _search_route(ROOT, expr)


__all__ = [
    "HOME_LABEL",
    "DirLister",
    "FolderNode",
    "root_node",
    "search_route",
]
