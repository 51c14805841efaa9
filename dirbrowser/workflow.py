"""Edit workflow state machine for the file table's modal operations.

Only one modal edit is active at a time. Every transition between active
states passes through ``IDLE``. Entering a state is applied synchronously;
the request to move keyboard focus into the modal input is a separate,
one-shot signal the host consumes when its input is ready.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

LOGGER = logging.getLogger(__name__)

NEW_FOLDER_PLACEHOLDER = "New folder"


class EditState(Enum):
    IDLE = 0
    RENAMING = 1
    CREATING_FOLDER = 2
    UPLOADING = 3
    SEARCHING = 4


@dataclass(frozen=True)
class EditDialog:
    """Title and placeholder shown by the modal for one state."""

    title: str
    placeholder: str


EDIT_DIALOGS: dict[EditState, EditDialog] = {
    EditState.IDLE: EditDialog(title="", placeholder=""),
    EditState.RENAMING: EditDialog(title="Rename", placeholder="Rename"),
    EditState.CREATING_FOLDER: EditDialog(title="New folder", placeholder="New folder"),
    EditState.UPLOADING: EditDialog(title="Upload files / upload folder archives", placeholder=""),
    EditState.SEARCHING: EditDialog(title="Search files", placeholder="Search in the current folder"),
}


@dataclass(frozen=True)
class UploadItem:
    """One local file chosen for upload."""

    name: str
    size: int
    source: Path

    @classmethod
    def from_path(cls, path: Path) -> UploadItem:
        """Describe a local file for upload."""
        return cls(name=path.name, size=path.stat().st_size, source=path)


@dataclass
class UploadPayload:
    files: list[UploadItem] = field(default_factory=list)
    folder_mode: bool = False


EditHandler = Callable[["EditWorkflow"], bool]


class EditWorkflow:
    """Finite state machine over :class:`EditState` with a text buffer.

    ``value`` is the shared text buffer: the new name while renaming, the
    folder name while creating, the expression while searching. ``commit``
    dispatches through the handler table supplied by the owner.
    """

    def __init__(self, handlers: Mapping[EditState, EditHandler] | None = None) -> None:
        self.state = EditState.IDLE
        self.value = ""
        self.upload = UploadPayload()
        self.focus_pending = False
        self._handlers: dict[EditState, EditHandler] = dict(handlers or {})

    @property
    def active(self) -> bool:
        return self.state is not EditState.IDLE

    @property
    def dialog(self) -> EditDialog:
        return EDIT_DIALOGS[self.state]

    def set_handler(self, state: EditState, handler: EditHandler) -> None:
        self._handlers[state] = handler

    def begin(self, state: EditState, value: str = "") -> bool:
        """Enter ``state`` with an initial buffer.

        An active edit is cancelled first. Entering ``IDLE`` is the same as
        :meth:`cancel`.
        """
        if self.active:
            LOGGER.debug("cancelling %s to begin %s", self.state.name, state.name)
            self.cancel()
        if state is EditState.IDLE:
            return False
        self.state = state
        self.value = value
        self.focus_pending = True
        return True

    def take_focus_request(self) -> bool:
        """Return ``True`` once after each :meth:`begin`."""
        pending = self.focus_pending
        self.focus_pending = False
        return pending

    def set_upload(self, files: Sequence[UploadItem], folder_mode: bool) -> None:
        self.upload = UploadPayload(files=list(files), folder_mode=folder_mode)

    def commit(self) -> bool:
        """Run the handler for the current state.

        Success returns to ``IDLE``. A failed handler leaves state and buffer
        untouched, except uploads, which always return to ``IDLE``.
        """
        if not self.active:
            return True
        state = self.state
        handler = self._handlers.get(state)
        if handler is None:
            raise LookupError(f"no commit handler for {state.name}")
        ok = False
        try:
            ok = handler(self)
        finally:
            if ok or state is EditState.UPLOADING:
                self.cancel()
        return ok

    def cancel(self) -> None:
        """Return to ``IDLE`` and drop the buffer and upload payload."""
        self.state = EditState.IDLE
        self.value = ""
        self.upload = UploadPayload()
        self.focus_pending = False


def accepted_extensions(table: str) -> list[str]:
    """Split a comma-separated extension table, dropping blank items."""
    return [item.strip() for item in table.split(",") if item.strip()]


def extension_allowed(name: str, extensions: Sequence[str]) -> bool:
    """Whether ``name`` ends with one of ``extensions``.

    An empty table does not restrict uploads.
    """
    if not extensions:
        return True
    return any(name.endswith(ext) for ext in extensions)


__all__ = [
    "NEW_FOLDER_PLACEHOLDER",
    "EditState",
    "EditDialog",
    "EDIT_DIALOGS",
    "UploadItem",
    "UploadPayload",
    "EditHandler",
    "EditWorkflow",
    "accepted_extensions",
    "extension_allowed",
]
