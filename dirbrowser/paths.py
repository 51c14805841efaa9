"""Remote path primitives: normalization, identity keys, and breadcrumbs.

Remote paths are plain ``/``-separated strings, not :class:`pathlib.Path`
objects. A normalized path always starts and ends with the separator.
This module holds no state.
"""

from __future__ import annotations

from dataclasses import dataclass

from .transport.errors import AlreadyAtRoot

SEP = "/"
ROOT = SEP


@dataclass(frozen=True)
class Breadcrumb:
    """One clickable breadcrumb segment."""

    url: str
    name: str


def normalize(path: str) -> str:
    """Return ``path`` with a leading and trailing separator.

    The empty string maps to the root separator.
    """
    if not path:
        return ROOT
    if not path.startswith(SEP):
        path = SEP + path
    if not path.endswith(SEP):
        path = path + SEP
    return path


def identity_key(directory: str, name: str) -> str:
    """Return the absolute key identifying ``name`` inside ``directory``."""
    return normalize(directory) + name


def join_dir(directory: str, name: str) -> str:
    """Return the normalized path of child folder ``name``."""
    return normalize(identity_key(directory, name))


def is_root(path: str) -> bool:
    """Whether ``path`` names the store root."""
    return normalize(path) == ROOT


def breadcrumbs(path: str, highlighted: str = "") -> list[Breadcrumb]:
    """Split a path into breadcrumb segments, root first.

    When ``highlighted`` (an entry identity key) is non-empty it is split in
    place of ``path``. The final segment is never emitted, so a highlighted
    file yields the folders containing it.
    """
    crumbs = [Breadcrumb(url=ROOT, name="")]
    source = highlighted if highlighted else path
    parts = source.split(SEP)
    prefix = ROOT
    for name in parts[1:-1]:
        prefix = prefix + name + SEP
        crumbs.append(Breadcrumb(url=prefix, name=name))
    return crumbs


def ascend_path(path: str, levels: int = -1) -> tuple[str, list[str]]:
    """Walk ``-levels`` folders up from ``path``.

    Returns ``(new_path, exited_keys)``; ``exited_keys`` holds the identity
    key of every folder left on the way, the last one being the folder the
    caller should highlight. Raises :class:`AlreadyAtRoot` when the root is
    reached before all levels are consumed. Non-negative ``levels`` leaves the
    path unchanged.
    """
    path = normalize(path)
    if levels >= 0:
        return path, []

    exited: list[str] = []
    current = path
    while levels < 0 and current != ROOT:
        trimmed = current[:-1]
        exited.append(trimmed)
        current = trimmed[: trimmed.rfind(SEP) + 1]
        levels += 1

    if levels != 0:
        raise AlreadyAtRoot(path)
    return current, exited


__all__ = [
    "SEP",
    "ROOT",
    "Breadcrumb",
    "normalize",
    "identity_key",
    "join_dir",
    "is_root",
    "breadcrumbs",
    "ascend_path",
]
