"""Directory-browsing controller for the remote file table.

Reconciles the current path, the per-folder listing cache, the selection,
and the modal edit workflow against the external Listing/File API, and
keeps the pushed navigation route consistent with what is displayed.

All state lives on the thread that calls into the controller. Listing
fetches are stamped with request ids and only the newest one is applied.
Uploads run concurrently but their outcomes are handled back on the calling
thread.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from .commands.gate import GateContext, context_menu_commands, is_enabled, status
from .commands.keys import (
    KEY_DELETE,
    KEY_ENTER,
    KEY_ESCAPE,
    KEY_F2,
    KEY_RELOAD,
    KeyComboBinding,
    KeyComboRegistry,
)
from .commands.preview import Preview, PreviewClass, preview_class
from .commands.types import COMMAND_SPECS, TOOLBAR_COMMANDS, Command, CommandSpec, CommandStatus
from .context import MAX_FILE_DOWNLOAD, MAX_FILE_UPLOAD, AppContext
from .listing.cache import ListingCache
from .listing.format import sort_entries
from .listing.loader import ListingRequest, ListingResult, SyncListingLoader
from .listing.types import Entry, Listing, parse_entries
from .navigation import NavigationSync, RouteHistory, Route, browse_route, search_route
from .notify import NotificationSink, NotifyLevel
from .paths import Breadcrumb, ascend_path, breadcrumbs, identity_key, normalize
from .selection import SelectionModel
from .transport.client import ARCHIVE_ENDPOINT, FILE_ENDPOINT
from .transport.errors import AlreadyAtRoot, ErrorChannel, TransportError
from .workflow import (
    NEW_FOLDER_PLACEHOLDER,
    EditState,
    EditWorkflow,
    UploadItem,
    accepted_extensions,
    extension_allowed,
)

LOGGER = logging.getLogger(__name__)

DELETE_PROMPT = "The selected entry will be deleted. This cannot be undone."
STALE_SELECTION = "The selected entry is not in the current listing"
NO_DOWNLOADER = "Downloads are not available here"
DEFAULT_MENU_POSITION = (5, 5)


class FileApi(Protocol):
    def list_dir(self, path: str) -> object: ...

    def search(self, path: str, expr: str) -> object: ...

    def create_dir(self, path: str) -> str: ...

    def delete_dir(self, path: str) -> str: ...

    def delete_file(self, path: str) -> str: ...

    def rename(self, path: str, new_name: str) -> str: ...

    def upload(self, url_path: str, source: Path, name: str) -> str: ...

    def fetch_text(self, path: str) -> str: ...


class ListingLoader(Protocol):
    def submit(self, path: str, search_expr: str | None = None, store: bool = True) -> int: ...

    def drain(self) -> list[ListingResult]: ...


@dataclass(frozen=True)
class ContextMenu:
    """Snapshot of the right-click menu; rebuilt on every open."""

    visible: bool = False
    position: tuple[int, int] = DEFAULT_MENU_POSITION
    commands: tuple[Command, ...] = ()


@dataclass(frozen=True)
class ToolbarButton:
    command: Command
    spec: CommandSpec
    status: CommandStatus


def _decline(_prompt: str) -> bool:
    return False


class DirectoryController:
    """Stateful controller behind the file table."""

    def __init__(
        self,
        *,
        context: AppContext,
        api: FileApi,
        sink: NotificationSink,
        navigation: NavigationSync | None = None,
        downloader: Callable[[str], None] | None = None,
        confirm: Callable[[str], bool] | None = None,
        on_unauthorized: Callable[[], None] | None = None,
        loader_factory: Callable[[Callable[[ListingRequest], tuple[Entry, ...]]], ListingLoader] = SyncListingLoader,
        path: str = "/",
    ) -> None:
        self.context = context
        self.api = api
        self.sink = sink
        self.errors = ErrorChannel(sink, on_unauthorized)
        self.navigation = navigation if navigation is not None else RouteHistory()
        self.downloader = downloader
        self.confirm = confirm if confirm is not None else _decline

        self.path = normalize(path)
        self.listing = Listing(path=self.path)
        self.search_mode = False
        self.search_expr = ""
        self.cache = ListingCache()
        self.selection = SelectionModel()
        self.context_menu = ContextMenu()
        self.sort_key = "Name"
        self.sort_descending = False

        self.workflow = EditWorkflow(
            {
                EditState.RENAMING: self._commit_rename,
                EditState.CREATING_FOLDER: self._commit_create_folder,
                EditState.UPLOADING: self._commit_upload,
                EditState.SEARCHING: self._commit_search,
            }
        )
        self.loader = loader_factory(self._fetch)
        self._expected_request: int | None = None

        self._handlers: dict[Command, Callable[[], bool]] = {
            Command.REFRESH: self.reload,
            Command.GO_UP: self.ascend,
            Command.PREVIEW: lambda: self.preview() is not None,
            Command.RENAME: lambda: self.begin_edit(EditState.RENAMING),
            Command.NEW_FOLDER: lambda: self.begin_edit(EditState.CREATING_FOLDER),
            Command.DELETE: self._confirm_and_remove,
            Command.UPLOAD: lambda: self.begin_edit(EditState.UPLOADING),
            Command.DOWNLOAD_PACKAGE: self.download,
            Command.SEARCH: lambda: self.begin_edit(EditState.SEARCHING),
            Command.LOCATE: self.locate,
        }
        missing = set(Command) - set(self._handlers)
        if missing:
            raise RuntimeError(f"commands without a handler: {sorted(cmd.value for cmd in missing)}")

        self._keys = KeyComboRegistry().register_bindings(
            KeyComboBinding((KEY_ESCAPE,), self.close_context_menu),
            KeyComboBinding((KEY_DELETE,), self._confirm_and_remove_if_enabled),
            KeyComboBinding((KEY_F2,), self._rename_if_enabled),
            KeyComboBinding((KEY_RELOAD,), self.reload),
            KeyComboBinding((KEY_ENTER,), self._enter_selected_folder),
        )

    # ---------- derived state ----------
    def selected_key(self) -> str:
        """Identity key of the selected entry, or ``""``."""
        return self.selection.selected_key()

    def selected_entry(self) -> Entry:
        """Selected entry of the displayed listing, or the empty placeholder."""
        return self.selection.resolve_entry(self.listing)

    def gate_context(self) -> GateContext:
        """Inputs for command gating, taken from the current state."""
        return GateContext(
            selected_key=self.selected_key(),
            search_mode=self.search_mode,
            permission_level=self.context.level,
        )

    def command_status(self, command: Command) -> CommandStatus:
        return status(command, self.gate_context())

    def toolbar(self) -> list[ToolbarButton]:
        """Toolbar buttons that are not hidden, in display order."""
        ctx = self.gate_context()
        buttons = []
        for command in TOOLBAR_COMMANDS:
            command_status = status(command, ctx)
            if command_status is CommandStatus.HIDDEN:
                continue
            buttons.append(ToolbarButton(command, COMMAND_SPECS[command], command_status))
        return buttons

    def breadcrumbs(self) -> list[Breadcrumb]:
        """Crumbs for the current path, highlighting the selection."""
        return breadcrumbs(self.path, self.selected_key())

    def sort_by(self, key: str) -> None:
        """Sort by ``key``; picking the active key again flips the order."""
        if key == self.sort_key:
            self.sort_descending = not self.sort_descending
        else:
            self.sort_key = key
            self.sort_descending = False

    def sorted_entries(self) -> list[Entry]:
        return sort_entries(self.listing.entries, self.sort_key, self.sort_descending)

    # ---------- selection ----------
    def select(self, key: str, additive: bool = False) -> None:
        """Toggle ``key``; ``additive`` keeps the rest of the selection."""
        self.selection.toggle(key, additive)

    def cancel_select(self) -> None:
        self.selection.clear()

    # ---------- fetching ----------
    def _fetch(self, request: ListingRequest) -> tuple[Entry, ...]:
        """Call the Listing API for ``request``; runs on the loader's thread."""
        if request.is_search:
            payload = self.api.search(request.path, request.search_expr or "")
        else:
            payload = self.api.list_dir(request.path)
        return parse_entries(payload)

    def _submit(self, store: bool) -> None:
        expr = self.search_expr if self.search_mode else None
        LOGGER.debug("fetching %s%s", self.path, f" (search {expr!r})" if expr is not None else "")
        self._expected_request = self.loader.submit(self.path, expr, store=store)
        self.poll()

    def poll(self) -> int:
        """Apply completed fetches; return how many replaced the listing."""
        applied = 0
        for result in self.loader.drain():
            if result.request.request_id != self._expected_request:
                LOGGER.debug("dropping stale listing for %s", result.request.path)
                continue
            self._expected_request = None
            if self._apply(result):
                applied += 1
        return applied

    def _apply(self, result: ListingResult) -> bool:
        """Show a current fetch result, or report its error."""
        request = result.request
        if result.error is not None:
            self.errors.report(result.error)
            return False
        listing = Listing(path=request.path, entries=result.entries, search_expr=request.search_expr)
        if request.store:
            self.cache.put(request.path, listing)
        self.listing = listing
        self.navigation.push(self._route_for(request))
        return True

    def _route_for(self, request: ListingRequest) -> Route:
        if request.search_expr is not None:
            return search_route(request.path, request.search_expr)
        return browse_route(request.path)

    def refresh(self, store: bool = True) -> None:
        """Show the current folder or search results.

        Folder listings come from the cache when present; otherwise they are
        fetched and, when ``store`` is set, cached. Search results are always
        fetched.
        """
        self.close_context_menu()
        if not self.search_mode:
            cached = self.cache.get(self.path)
            if cached is not None:
                LOGGER.debug("cache hit for %s", self.path)
                self._expected_request = None
                self.listing = cached
                self.navigation.push(browse_route(self.path))
                return
        self._submit(store)

    def reload(self) -> bool:
        """Drop cached listings and the selection, then refresh."""
        self.cache.invalidate_all()
        self.selection.clear()
        self.refresh()
        return True

    def _reload_after_mutation(self) -> None:
        self.cache.invalidate_all()
        self.refresh(store=False)

    def _leave_search(self) -> None:
        """Drop search mode together with the cache it filled."""
        if self.search_mode:
            self.search_mode = False
            self.search_expr = ""
            self.cache.invalidate_all()

    # ---------- navigation ----------
    def navigate(self, path: str) -> None:
        """Show the folder at ``path`` with an empty selection."""
        self.path = normalize(path)
        self._leave_search()
        self.selection.clear()
        self.refresh()

    def ascend(self, levels: int = -1) -> bool:
        """Go up ``-levels`` folders, highlighting the folder just left."""
        try:
            new_path, exited = ascend_path(self.path, levels)
        except AlreadyAtRoot:
            self.sink.notify(NotifyLevel.WARNING, "Already at the top folder")
            return False
        if not exited:
            return False
        self.path = new_path
        self._leave_search()
        self.selection.select(exited[-1])
        self.refresh()
        return True

    def open(self, entry: Entry) -> bool:
        """Enter a folder, or download a file."""
        if entry.is_dir:
            self.navigate(entry.target_path)
            return True
        return self.download(entry)

    def locate(self) -> bool:
        """Open the folder holding the selected search hit and select it."""
        entry = self.selected_entry()
        if not entry.name:
            return False
        self.navigate(entry.folder)
        self.selection.select(entry.key)
        return True

    def search(self, expr: str) -> None:
        """Show entries under the current path matching ``expr``."""
        if not self.search_mode:
            self.cache.invalidate_all()
        self.search_mode = True
        self.search_expr = expr
        self.selection.clear()
        self.refresh()

    def handle_route(self, route: Route) -> bool:
        """Follow an external navigation change; return whether state moved."""
        path = str(route.query.get("path", ""))
        if route.is_search:
            expr = str(route.query.get("expr", ""))
            target = normalize(path) if path.strip() else self.path
            if self.search_mode and expr == self.search_expr and target == self.path:
                return False
            self.path = target
            self.search(expr)
            return True
        if not path.strip():
            return False
        if normalize(path) == self.path and not self.search_mode:
            return False
        self.navigate(path)
        return True

    # ---------- transfers ----------
    def download(self, entry: Entry | None = None) -> bool:
        """Hand a file or folder archive to the downloader."""
        if entry is None:
            entry = self.selected_entry()
        if not entry.name:
            self.sink.notify(NotifyLevel.WARNING, "Nothing selected")
            return False
        if entry.is_dir and entry.file_size > MAX_FILE_DOWNLOAD:
            self.sink.notify(NotifyLevel.DANGER, "Folder size exceeds the limit, it cannot be downloaded as a package")
            return False
        if self.downloader is None:
            self.sink.notify(NotifyLevel.WARNING, NO_DOWNLOADER)
            return False
        endpoint = ARCHIVE_ENDPOINT if entry.is_dir else FILE_ENDPOINT
        self.downloader(endpoint + entry.key)
        return True

    def upload(self, files: Sequence[UploadItem | Path], folder_mode: bool = False) -> bool:
        """Validate and upload local files into the current folder."""
        items = [item if isinstance(item, UploadItem) else UploadItem.from_path(Path(item)) for item in files]
        if self.workflow.state is not EditState.UPLOADING:
            self.workflow.begin(EditState.UPLOADING)
        self.workflow.set_upload(items, folder_mode)
        return self.workflow.commit()

    def preview(self) -> Preview | None:
        """Classify the selected entry and fetch its text for code previews."""
        key = self.selected_key()
        if not key:
            return None
        kind = preview_class(key)
        result = Preview(key=key, kind=kind, url=FILE_ENDPOINT + key)
        if kind is PreviewClass.UNKNOWN:
            self.sink.notify(NotifyLevel.WARNING, f"{result.name} cannot be previewed")
            return result
        if kind is PreviewClass.CODE:
            try:
                text = self.api.fetch_text(key)
            except TransportError as exc:
                self.errors.report(exc)
                return None
            result = Preview(key=key, kind=kind, url=result.url, text=text)
        return result

    # ---------- mutations ----------
    def _listed_selection(self) -> Entry | None:
        """Selected entry of the displayed listing; warns and gives ``None`` otherwise."""
        if not self.selected_key():
            self.sink.notify(NotifyLevel.WARNING, "Nothing selected")
            return None
        entry = self.selected_entry()
        if not entry.name:
            self.sink.notify(NotifyLevel.WARNING, STALE_SELECTION)
            return None
        return entry

    def remove(self) -> bool:
        """Delete the selected entry. Confirmation is the caller's job."""
        entry = self._listed_selection()
        if entry is None:
            return False
        key = entry.key
        try:
            if entry.is_dir:
                self.api.delete_dir(key)
            else:
                self.api.delete_file(key)
        except TransportError as exc:
            self.errors.report(exc)
            return False
        self.selection.clear()
        self.sink.notify(NotifyLevel.SUCCESS, f"{entry.name} deleted")
        self._reload_after_mutation()
        return True

    def _confirm_and_remove(self) -> bool:
        if self._listed_selection() is None:
            return False
        if not self.confirm(DELETE_PROMPT):
            return False
        return self.remove()

    # ---------- edit workflow ----------
    def begin_edit(self, state: EditState) -> bool:
        """Start a modal edit, prefilling the buffer for rename and new folder."""
        value = ""
        if state is EditState.RENAMING:
            if not self.selected_key():
                return False
            entry = self._listed_selection()
            if entry is None:
                return False
            value = entry.name
        elif state is EditState.CREATING_FOLDER:
            value = NEW_FOLDER_PLACEHOLDER
        self.close_context_menu()
        return self.workflow.begin(state, value)

    def commit_edit(self) -> bool:
        return self.workflow.commit()

    def cancel_edit(self) -> None:
        self.workflow.cancel()
        self.close_context_menu()

    def _commit_rename(self, workflow: EditWorkflow) -> bool:
        new_name = workflow.value.strip()
        entry = self._listed_selection()
        if entry is None:
            return False
        if not new_name or "/" in new_name:
            self.sink.notify(NotifyLevel.WARNING, "Invalid name")
            return False
        try:
            self.api.rename(entry.key, new_name)
        except TransportError as exc:
            self.errors.report(exc)
            return False
        self._reload_after_mutation()
        self.selection.select(identity_key(entry.folder, new_name))
        return True

    def _commit_create_folder(self, workflow: EditWorkflow) -> bool:
        name = workflow.value.strip()
        if not name or "/" in name:
            self.sink.notify(NotifyLevel.WARNING, "Invalid folder name")
            return False
        try:
            self.api.create_dir(self.path + name)
        except TransportError as exc:
            self.errors.report(exc)
            return False
        self._reload_after_mutation()
        return True

    def _commit_search(self, workflow: EditWorkflow) -> bool:
        expr = workflow.value.strip()
        if not expr:
            self.sink.notify(NotifyLevel.WARNING, "Enter something to search for")
            return False
        self.search(expr)
        return True

    def _commit_upload(self, workflow: EditWorkflow) -> bool:
        """Upload accepted files in parallel, reporting each outcome on this thread."""
        payload = workflow.upload
        extensions = accepted_extensions(self.context.config.extension_table(payload.folder_mode))
        endpoint = ARCHIVE_ENDPOINT if payload.folder_mode else FILE_ENDPOINT
        accepted: list[UploadItem] = []
        for item in payload.files:
            if not extension_allowed(item.name, extensions):
                self.sink.notify(NotifyLevel.DANGER, f"{item.name}: file extension is not allowed")
                continue
            if item.size > MAX_FILE_UPLOAD:
                self.sink.notify(NotifyLevel.DANGER, f"{item.name}: file exceeds the upload limit")
                continue
            accepted.append(item)
        if not accepted:
            return False

        folder = self.path
        uploaded = False
        with ThreadPoolExecutor(max_workers=len(accepted)) as pool:
            futures = {
                pool.submit(self.api.upload, endpoint + folder + item.name, item.source, item.name): item
                for item in accepted
            }
            for future in as_completed(futures):
                item = futures[future]
                try:
                    future.result()
                except TransportError as exc:
                    self.errors.report(exc, prefix=f"{item.name} upload failed: ")
                    continue
                except OSError as exc:
                    LOGGER.warning("reading %s failed: %s", item.source, exc)
                    self.sink.notify(NotifyLevel.DANGER, f"{item.name} upload error")
                    continue
                uploaded = True
                self.sink.notify(NotifyLevel.SUCCESS, f"{item.name} uploaded")
                self._reload_after_mutation()
        return uploaded

    # ---------- menu and keys ----------
    def run(self, command: Command) -> bool:
        """Run a toolbar/menu command if the gate enables it."""
        if not is_enabled(command, self.gate_context()):
            LOGGER.debug("command %s is not enabled", command.value)
            return False
        self.close_context_menu()
        return self._handlers[command]()

    def open_context_menu(
        self,
        position: tuple[int, int] = DEFAULT_MENU_POSITION,
        for_search_result: bool | None = None,
    ) -> ContextMenu:
        """Open the right-click menu with the commands enabled right now."""
        for_search = self.search_mode if for_search_result is None else for_search_result
        commands = context_menu_commands(self.gate_context(), for_search)
        self.context_menu = ContextMenu(visible=True, position=position, commands=tuple(commands))
        return self.context_menu

    def close_context_menu(self) -> bool:
        if self.context_menu.visible:
            self.context_menu = ContextMenu(position=self.context_menu.position)
        return True

    def handle_key(self, key: str) -> bool:
        """Global shortcuts; ignored while a modal edit is active."""
        if self.workflow.active:
            return False
        return self._keys.dispatch(key)

    def _confirm_and_remove_if_enabled(self) -> bool:
        if not is_enabled(Command.DELETE, self.gate_context()):
            return False
        return self._confirm_and_remove()

    def _rename_if_enabled(self) -> bool:
        if not is_enabled(Command.RENAME, self.gate_context()):
            return False
        return self.begin_edit(EditState.RENAMING)

    def _enter_selected_folder(self) -> bool:
        """Enter the selected folder; files are left alone."""
        entry = self.selected_entry()
        if not entry.is_dir:
            return False
        return self.open(entry)


__all__ = [
    "DELETE_PROMPT",
    "STALE_SELECTION",
    "NO_DOWNLOADER",
    "FileApi",
    "ListingLoader",
    "ContextMenu",
    "ToolbarButton",
    "DirectoryController",
]
