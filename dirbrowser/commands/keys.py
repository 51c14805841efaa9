"""Key-combo dispatch table for global file-table shortcuts."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

KEY_ESCAPE = "Escape"
KEY_DELETE = "Delete"
KEY_F2 = "F2"
KEY_RELOAD = "r"
KEY_ENTER = "Enter"


@dataclass(frozen=True)
class KeyComboBinding:
    """Mapping from one or more key names to a single action callback."""

    combos: tuple[str, ...]
    handler: Callable[[], bool]


def normalize_key(key: str) -> str:
    """Fold named keys case-insensitively; single characters stay exact."""
    if len(key) == 1:
        return key
    return key.lower()


class KeyComboRegistry:
    """Small key-dispatch table keyed by normalized key names."""

    def __init__(self) -> None:
        self._handlers: dict[str, Callable[[], bool]] = {}

    def register_binding(self, binding: KeyComboBinding) -> KeyComboRegistry:
        """Register one binding, overwriting existing handlers for same combos."""
        for combo in binding.combos:
            self._handlers[normalize_key(combo)] = binding.handler
        return self

    def register_bindings(self, *bindings: KeyComboBinding) -> KeyComboRegistry:
        """Register several bindings; returns ``self`` for chaining."""
        for binding in bindings:
            self.register_binding(binding)
        return self

    def dispatch(self, key: str) -> bool:
        """Invoke the handler bound to ``key``; unbound keys are not handled."""
        handler = self._handlers.get(normalize_key(key))
        if handler is None:
            return False
        return handler()


__all__ = [
    "KEY_ESCAPE",
    "KEY_DELETE",
    "KEY_F2",
    "KEY_RELOAD",
    "KEY_ENTER",
    "KeyComboBinding",
    "KeyComboRegistry",
    "normalize_key",
]
