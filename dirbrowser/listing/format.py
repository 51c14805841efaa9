"""Column display helpers for file and admin tables."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from datetime import datetime

from ..paths import SEP
from .types import Entry

KIB = 1024
MIB = 1024 * KIB
GIB = 1024 * MIB

ENTRY_COLUMNS: dict[str, str] = {
    "Path": "Folder",
    "Name": "Name",
    "FileSize": "Size",
    "ModTime": "Modified",
}

_ENTRY_SORT_FIELDS: dict[str, Callable[[Entry], object]] = {
    "Path": lambda entry: entry.path,
    "Name": lambda entry: entry.name.lower(),
    "FileSize": lambda entry: entry.file_size,
    "ModTime": lambda entry: entry.mod_time,
}


def short_text(value: str, length: int) -> str:
    """Keep the tail of ``value``, prefixing ``...`` when it is cut."""
    keep = length - 3
    if len(value) > keep:
        return "..." + value[len(value) - keep :]
    return value


def format_file_size(value: int) -> str:
    """Human-readable size; negative sizes (folders, unknown) render empty."""
    if value < 0:
        return ""
    if value < KIB:
        return f"{value} bytes"
    if value < MIB:
        return f"{value / KIB:.1f} Kb"
    if value < 10 * GIB:
        return f"{value / MIB:.1f} Mb"
    return f"{value / GIB:.1f} Gb"


def format_timestamp(value: int) -> str:
    """Local ``YYYY-MM-DD HH:MM:SS`` for a Unix timestamp."""
    return datetime.fromtimestamp(value).strftime("%Y-%m-%d %H:%M:%S")


def format_ip(value: int) -> str:
    """Render an IPv4 address stored as a 32-bit integer."""
    octets = []
    for _ in range(4):
        octets.append(str(value & 0xFF))
        value >>= 8
    return ".".join(reversed(octets))


def format_folder(value: str) -> str:
    if not value.endswith(SEP):
        value = value + SEP
    return short_text(value, 30)


_FORMATTERS: dict[str, Callable[[object], str]] = {
    "Path": lambda value: format_folder(str(value)),
    "Name": lambda value: short_text(str(value), 20),
    "FileSize": lambda value: format_file_size(int(value)),
    "ModTime": lambda value: format_timestamp(int(value)),
    "Time": lambda value: format_timestamp(int(value)),
    "LastLoginTime": lambda value: format_timestamp(int(value)),
    "Ip": lambda value: format_ip(int(value)),
    "LastIp": lambda value: format_ip(int(value)),
}


def show_value(column: str, value: object) -> str:
    """Format one cell; columns without a formatter render via ``str``."""
    formatter = _FORMATTERS.get(column)
    if formatter is None:
        return "" if value is None else str(value)
    return formatter(value)


def entry_row(entry: Entry) -> dict[str, str]:
    """Formatted cells for one entry keyed by column name."""
    raw: Mapping[str, object] = {
        "Path": entry.path,
        "Name": entry.name,
        "FileSize": entry.file_size,
        "ModTime": entry.mod_time,
    }
    return {column: show_value(column, raw[column]) for column in ENTRY_COLUMNS}


def sort_entries(entries: Iterable[Entry], key: str = "Name", descending: bool = False) -> list[Entry]:
    """Sort entries by a column name; unknown columns keep listing order."""
    items = list(entries)
    field = _ENTRY_SORT_FIELDS.get(key)
    if field is None:
        return items
    return sorted(items, key=field, reverse=descending)


__all__ = [
    "ENTRY_COLUMNS",
    "short_text",
    "format_file_size",
    "format_timestamp",
    "format_ip",
    "format_folder",
    "show_value",
    "entry_row",
    "sort_entries",
]
