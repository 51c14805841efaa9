"""Static command definitions for the file table toolbar and context menu."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Command(str, Enum):
    REFRESH = "refresh"
    GO_UP = "go-up"
    PREVIEW = "preview"
    RENAME = "rename"
    NEW_FOLDER = "new-folder"
    DELETE = "delete"
    UPLOAD = "upload"
    DOWNLOAD_PACKAGE = "download-package"
    SEARCH = "search"
    LOCATE = "locate"


class CommandStatus(Enum):
    HIDDEN = 0
    DISABLED = 1
    ENABLED = 2


@dataclass(frozen=True)
class CommandSpec:
    """Label, icon, and minimum permission level for one command."""

    label: str
    icon: str
    level: int


COMMAND_SPECS: dict[Command, CommandSpec] = {
    Command.REFRESH: CommandSpec("Refresh", "refresh", 1),
    Command.GO_UP: CommandSpec("Up", "arrow-up", 1),
    Command.PREVIEW: CommandSpec("Preview", "film", 2),
    Command.RENAME: CommandSpec("Rename", "pencil", 3),
    Command.NEW_FOLDER: CommandSpec("New folder", "plus", 3),
    Command.DELETE: CommandSpec("Delete", "remove", 3),
    Command.UPLOAD: CommandSpec("Upload", "upload", 3),
    Command.DOWNLOAD_PACKAGE: CommandSpec("Download", "download", 2),
    Command.SEARCH: CommandSpec("Search", "search", 1),
    Command.LOCATE: CommandSpec("Open containing folder", "screenshot", 1),
}

_missing = set(Command) - set(COMMAND_SPECS)
if _missing:
    raise RuntimeError(f"commands without display details: {sorted(cmd.value for cmd in _missing)}")

TOOLBAR_COMMANDS: tuple[Command, ...] = (
    Command.REFRESH,
    Command.GO_UP,
    Command.PREVIEW,
    Command.RENAME,
    Command.NEW_FOLDER,
    Command.DELETE,
    Command.UPLOAD,
    Command.DOWNLOAD_PACKAGE,
    Command.SEARCH,
)

CONTEXT_MENU_COMMON: tuple[Command, ...] = (
    Command.REFRESH,
    Command.PREVIEW,
    Command.RENAME,
    Command.DELETE,
    Command.DOWNLOAD_PACKAGE,
)

__all__ = [
    "Command",
    "CommandStatus",
    "CommandSpec",
    "COMMAND_SPECS",
    "TOOLBAR_COMMANDS",
    "CONTEXT_MENU_COMMON",
]
