"""File-table commands: definitions, gating, previews, and key bindings."""

from __future__ import annotations

from .types import (
    COMMAND_SPECS,
    CONTEXT_MENU_COMMON,
    TOOLBAR_COMMANDS,
    Command,
    CommandSpec,
    CommandStatus,
)
from .gate import GateContext, context_menu_commands, is_enabled, status
from .preview import Preview, PreviewClass, highlight_code, preview_class
from .keys import KeyComboBinding, KeyComboRegistry

__all__ = [
    "Command",
    "CommandSpec",
    "CommandStatus",
    "COMMAND_SPECS",
    "CONTEXT_MENU_COMMON",
    "TOOLBAR_COMMANDS",
    "GateContext",
    "status",
    "is_enabled",
    "context_menu_commands",
    "Preview",
    "PreviewClass",
    "preview_class",
    "highlight_code",
    "KeyComboBinding",
    "KeyComboRegistry",
]
