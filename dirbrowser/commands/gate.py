"""Command gating: which commands are hidden, disabled, or enabled."""

from __future__ import annotations

from dataclasses import dataclass

from .preview import PreviewClass, preview_class
from .types import (
    COMMAND_SPECS,
    CONTEXT_MENU_COMMON,
    Command,
    CommandStatus,
)

_NEEDS_SELECTION = frozenset(
    {
        Command.RENAME,
        Command.DELETE,
        Command.DOWNLOAD_PACKAGE,
        Command.PREVIEW,
        Command.LOCATE,
    }
)
_DISABLED_WHILE_SEARCHING = frozenset(
    {
        Command.RENAME,
        Command.NEW_FOLDER,
        Command.UPLOAD,
        Command.GO_UP,
    }
)
_SEARCH_ONLY = frozenset({Command.LOCATE})


@dataclass(frozen=True)
class GateContext:
    """Inputs the gate needs from the controller."""

    selected_key: str = ""
    search_mode: bool = False
    permission_level: int = 1
    preview_class: PreviewClass | None = None

    @property
    def has_selection(self) -> bool:
        return bool(self.selected_key)

    def selected_preview_class(self) -> PreviewClass:
        if self.preview_class is not None:
            return self.preview_class
        return preview_class(self.selected_key)


def status(command: Command, ctx: GateContext) -> CommandStatus:
    """Return the toolbar/menu status for ``command``.

    State rules are checked before the permission level, so a command that
    needs a selection reads as disabled at every level while nothing is
    selected.
    """
    if command is Command.REFRESH:
        return CommandStatus.ENABLED
    if command in _SEARCH_ONLY and not ctx.search_mode:
        return CommandStatus.HIDDEN
    if command in _NEEDS_SELECTION and not ctx.has_selection:
        return CommandStatus.DISABLED
    if command in _DISABLED_WHILE_SEARCHING and ctx.search_mode:
        return CommandStatus.DISABLED
    if command is Command.PREVIEW and ctx.selected_preview_class() is PreviewClass.UNKNOWN:
        return CommandStatus.DISABLED
    if COMMAND_SPECS[command].level > ctx.permission_level:
        return CommandStatus.HIDDEN
    return CommandStatus.ENABLED


def is_enabled(command: Command, ctx: GateContext) -> bool:
    """Whether ``command`` is ENABLED in ``ctx``."""
    return status(command, ctx) is CommandStatus.ENABLED


def context_menu_commands(ctx: GateContext, for_search_result: bool) -> list[Command]:
    """Commands for a freshly opened context menu, enabled ones only."""
    candidates = list(CONTEXT_MENU_COMMON)
    candidates.append(Command.LOCATE if for_search_result else Command.NEW_FOLDER)
    return [command for command in candidates if is_enabled(command, ctx)]


__all__ = [
    "GateContext",
    "status",
    "is_enabled",
    "context_menu_commands",
]
