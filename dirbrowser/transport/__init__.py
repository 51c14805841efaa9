"""Transport to the remote file store: HTTP client, errors, downloads."""

from __future__ import annotations

from .errors import (
    AlreadyAtRoot,
    BadCredentials,
    CaptchaRequired,
    DirBrowserError,
    ErrorChannel,
    TransportError,
    ValidationError,
    error_for_status,
    status_message,
)
from .client import (
    ARCHIVE_ENDPOINT,
    DIR_ENDPOINT,
    FILE_ENDPOINT,
    SEARCH_ENDPOINT,
    FileApiClient,
)
from .downloads import BackgroundDownloader, Downloader

__all__ = [
    "AlreadyAtRoot",
    "BadCredentials",
    "CaptchaRequired",
    "DirBrowserError",
    "ErrorChannel",
    "TransportError",
    "ValidationError",
    "error_for_status",
    "status_message",
    "ARCHIVE_ENDPOINT",
    "DIR_ENDPOINT",
    "FILE_ENDPOINT",
    "SEARCH_ENDPOINT",
    "FileApiClient",
    "BackgroundDownloader",
    "Downloader",
]
