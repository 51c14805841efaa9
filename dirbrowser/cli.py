"""Command-line front door for dirbrowser.

Signs in to the file store, builds the application context, and drives a
``DirectoryController`` for one command. Notifications go to stderr.
"""

from __future__ import annotations

import argparse
import getpass
import logging
import sys
from pathlib import Path

from .commands.types import Command, CommandStatus
from .config import (
    clear_login,
    load_base_url,
    load_login,
    load_show_captcha,
    save_base_url,
    save_login,
    save_show_captcha,
)
from .context import bootstrap_context
from .controller import DirectoryController
from .listing.format import entry_row
from .listing.types import Entry
from .notify import NotifyLevel
from .paths import identity_key, normalize
from .transport.client import CAPTCHA_ENDPOINT, FileApiClient
from .transport.downloads import BackgroundDownloader
from .transport.errors import BadCredentials, CaptchaRequired, TransportError
from .workflow import EditState

LOGGER = logging.getLogger(__name__)


class ConsoleSink:
    """Prints notifications to stderr and remembers whether any was an error."""

    def __init__(self, stream=None) -> None:
        self.stream = stream if stream is not None else sys.stderr
        self.failed = False

    def notify(self, level: NotifyLevel, text: str) -> None:
        level = NotifyLevel(level)
        if level in (NotifyLevel.WARNING, NotifyLevel.DANGER):
            self.failed = True
        print(f"{level.value}: {text}", file=self.stream)


def _split_remote(path: str) -> tuple[str, str]:
    """Split ``/a/b/name`` into its normalized folder and entry name."""
    trimmed = path.strip().rstrip("/")
    if not trimmed:
        raise SystemExit("The root folder has no parent.")
    folder, _, name = trimmed.rpartition("/")
    return normalize(folder), name


def _build_parser() -> argparse.ArgumentParser:
    """Argument parser with one subparser per file store command."""
    parser = argparse.ArgumentParser(description="Browse and manage a remote file store.")
    parser.add_argument("--url", default=None, help="Server base URL. Defaults to the last one used.")
    parser.add_argument("--user", default=None, help="User name to sign in with.")
    parser.add_argument("--captcha", default=None, help=f"Captcha text (image at {CAPTCHA_ENDPOINT}).")
    parser.add_argument("--remember", action="store_true", help="Remember the password for next time.")
    parser.add_argument("--timeout", type=float, default=None, help="Request timeout in seconds.")
    parser.add_argument("--no-color", action="store_true", help="Disable highlighting for cat.")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log debug output.")

    commands = parser.add_subparsers(dest="command", required=True)
    ls_cmd = commands.add_parser("ls", help="List a folder.")
    ls_cmd.add_argument("path", nargs="?", default="/")
    ls_cmd.add_argument("--sort", default="Name", choices=("Path", "Name", "FileSize", "ModTime"))

    find_cmd = commands.add_parser("find", help="Search below a folder.")
    find_cmd.add_argument("path")
    find_cmd.add_argument("expr")

    get_cmd = commands.add_parser("get", help="Download a file, or a folder as an archive.")
    get_cmd.add_argument("path")
    get_cmd.add_argument("--dest", type=Path, default=Path.cwd(), help="Target directory.")

    put_cmd = commands.add_parser("put", help="Upload files into a folder.")
    put_cmd.add_argument("folder")
    put_cmd.add_argument("files", nargs="+", type=Path)
    put_cmd.add_argument("--archive", action="store_true", help="Upload archives to be unpacked as folders.")

    mkdir_cmd = commands.add_parser("mkdir", help="Create a folder.")
    mkdir_cmd.add_argument("path")

    rm_cmd = commands.add_parser("rm", help="Delete a file or folder.")
    rm_cmd.add_argument("path")
    rm_cmd.add_argument("--yes", "-y", action="store_true", help="Do not ask for confirmation.")

    mv_cmd = commands.add_parser("mv", help="Rename a file or folder.")
    mv_cmd.add_argument("path")
    mv_cmd.add_argument("new_name")

    cat_cmd = commands.add_parser("cat", help="Print a text file.")
    cat_cmd.add_argument("path")
    return parser


def sign_in(client: FileApiClient, user: str | None, captcha: str | None, remember: bool) -> None:
    """Sign in with explicit or remembered credentials; no user means anonymous."""
    saved = load_login()
    name = user or saved.name
    if not name:
        return
    if saved.auto_login and saved.password and name == saved.name:
        password = saved.password
    else:
        password = getpass.getpass(f"Password for {name}: ")
    if load_show_captcha() and not captcha:
        raise SystemExit(f"A captcha is required: open {client.url(CAPTCHA_ENDPOINT)} and pass --captcha.")
    try:
        client.login(name, password, captcha or "")
    except CaptchaRequired as exc:
        save_show_captcha(True)
        raise SystemExit(exc.message) from exc
    except BadCredentials as exc:
        clear_login()
        raise SystemExit(exc.message) from exc
    save_show_captcha(False)
    save_login(name, password, remember or saved.auto_login)


def _require(controller: DirectoryController, command: Command) -> None:
    """Exit unless ``command`` is enabled for the current selection and user."""
    if controller.command_status(command) is not CommandStatus.ENABLED:
        raise SystemExit(f"{command.value} is not available here for this user.")


def _find_entry(controller: DirectoryController, path: str) -> Entry:
    """Navigate to the folder holding ``path`` and select its entry."""
    folder, name = _split_remote(path)
    controller.navigate(folder)
    key = identity_key(folder, name)
    entry = controller.listing.find(key)
    if entry is None:
        raise SystemExit(f"No such entry: {key}")
    controller.select(key)
    return entry


def _print_entries(entries: list[Entry], with_folder: bool) -> None:
    for entry in entries:
        row = entry_row(entry)
        name = row["Name"] + ("/" if entry.is_dir else "")
        cells = [row["ModTime"], f"{row['FileSize']:>12}"]
        if with_folder:
            cells.append(row["Path"])
        cells.append(name)
        print("  ".join(cells))


def run_command(
    args: argparse.Namespace,
    controller: DirectoryController,
    downloads: list[Path | None],
) -> None:
    """Execute one parsed subcommand against ``controller``."""
    if args.command == "ls":
        controller.navigate(args.path)
        controller.sort_key = args.sort
        _print_entries(controller.sorted_entries(), with_folder=False)
    elif args.command == "find":
        controller.navigate(args.path)
        _require(controller, Command.SEARCH)
        controller.search(args.expr)
        _print_entries(list(controller.listing), with_folder=True)
    elif args.command == "get":
        entry = _find_entry(controller, args.path)
        if entry.is_dir:
            _require(controller, Command.DOWNLOAD_PACKAGE)
        if controller.download(entry) and downloads and downloads[-1] is not None:
            print(downloads[-1])
    elif args.command == "put":
        controller.navigate(args.folder)
        _require(controller, Command.UPLOAD)
        try:
            controller.upload(args.files, folder_mode=args.archive)
        except OSError as exc:
            raise SystemExit(f"Cannot read upload: {exc}") from exc
    elif args.command == "mkdir":
        folder, name = _split_remote(args.path)
        controller.navigate(folder)
        _require(controller, Command.NEW_FOLDER)
        controller.begin_edit(EditState.CREATING_FOLDER)
        controller.workflow.value = name
        controller.commit_edit()
    elif args.command == "rm":
        _find_entry(controller, args.path)
        if args.yes:
            controller.confirm = lambda _prompt: True
        _require(controller, Command.DELETE)
        controller.run(Command.DELETE)
    elif args.command == "mv":
        _find_entry(controller, args.path)
        _require(controller, Command.RENAME)
        controller.begin_edit(EditState.RENAMING)
        controller.workflow.value = args.new_name
        controller.commit_edit()
    elif args.command == "cat":
        _find_entry(controller, args.path)
        preview = controller.preview()
        if preview is None or preview.text is None:
            raise SystemExit(f"Cannot print {args.path}")
        if args.no_color or not sys.stdout.isatty():
            sys.stdout.write(preview.text)
        else:
            sys.stdout.write(preview.highlighted())


def _confirm(prompt: str) -> bool:
    return input(f"{prompt} [y/N] ").strip().lower() in ("y", "yes")


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and run one file store command."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    base_url = args.url or load_base_url()
    if not base_url:
        raise SystemExit("No server URL given; pass --url.")
    client = FileApiClient(base_url, timeout=args.timeout)
    try:
        sign_in(client, args.user, args.captcha, args.remember)
        context = bootstrap_context(client)
    except TransportError as exc:
        raise SystemExit(f"Cannot reach {base_url}: {exc.message}") from exc
    save_base_url(base_url)

    fetcher = BackgroundDownloader(client, getattr(args, "dest", Path.cwd()))
    downloads: list[Path | None] = []
    sink = ConsoleSink()
    controller = DirectoryController(
        context=context,
        api=client,
        sink=sink,
        downloader=lambda url_path: downloads.append(fetcher.fetch(url_path)),
        confirm=_confirm,
    )
    run_command(args, controller, downloads)

    if downloads and None in downloads:
        raise SystemExit("Download failed.")
    if sink.failed:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
