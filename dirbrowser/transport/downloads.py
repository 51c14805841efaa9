"""Out-of-band download hand-off.

Downloads do not report through the notification channel: once handed
off, a transfer runs to completion on its own worker and only logs.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Protocol
from urllib.parse import unquote

from .client import ARCHIVE_ENDPOINT, FileApiClient
from .errors import TransportError

LOGGER = logging.getLogger(__name__)

ARCHIVE_SUFFIX = ".zip"


class Downloader(Protocol):
    def __call__(self, url_path: str) -> None: ...


def target_name(url_path: str) -> str:
    """Local file name for a download URL path."""
    name = unquote(url_path.rstrip("/").rsplit("/", 1)[-1]) or "download"
    if url_path.startswith(ARCHIVE_ENDPOINT + "/") and not name.endswith(ARCHIVE_SUFFIX):
        name += ARCHIVE_SUFFIX
    return name


class BackgroundDownloader:
    """Streams each download to ``dest_dir`` on its own daemon thread."""

    def __init__(self, client: FileApiClient, dest_dir: Path) -> None:
        self.client = client
        self.dest_dir = dest_dir
        self._threads: list[threading.Thread] = []

    def __call__(self, url_path: str) -> None:
        worker = threading.Thread(
            target=self.fetch,
            args=(url_path,),
            name="dirbrowser-download",
            daemon=True,
        )
        self._threads.append(worker)
        worker.start()

    def fetch(self, url_path: str) -> Path | None:
        """Download ``url_path`` synchronously; return the written file."""
        target = self.dest_dir / target_name(url_path)
        try:
            self.dest_dir.mkdir(parents=True, exist_ok=True)
            with target.open("wb") as handle:
                for chunk in self.client.stream(url_path):
                    handle.write(chunk)
        except (TransportError, OSError) as exc:
            LOGGER.error("download of %s failed: %s", url_path, exc)
            return None
        LOGGER.info("downloaded %s to %s", url_path, target)
        return target

    def join(self, timeout: float | None = None) -> None:
        """Wait for handed-off downloads."""
        for worker in self._threads:
            worker.join(timeout)
        self._threads = [worker for worker in self._threads if worker.is_alive()]


__all__ = [
    "ARCHIVE_SUFFIX",
    "Downloader",
    "target_name",
    "BackgroundDownloader",
]
