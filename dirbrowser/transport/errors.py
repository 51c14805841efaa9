"""Error taxonomy shared by the transport layer and the controller.

Every failure is local and recoverable. ``TransportError`` carries the HTTP
status that produced it; status-keyed user messages live here so every
caller reports the same text for the same code.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..notify import NotificationSink

LOGGER = logging.getLogger(__name__)

STATUS_OK = 200
STATUS_CAPTCHA_INVALID = 600
STATUS_BAD_CREDENTIALS = 601
STATUS_CAPTCHA_REQUIRED = 603
STATUS_NETWORK = 0

_STATUS_MESSAGES: dict[int, str] = {
    400: "Invalid input parameters",
    401: "Not signed in or the session has expired",
    403: "Insufficient permission",
    404: "Page is missing",
    500: "Page is missing",
    503: "Page is missing",
}
UNKNOWN_ERROR_MESSAGE = "Unknown error"


def status_message(status: int) -> str:
    """Return the fixed user-facing message for an HTTP status code."""
    return _STATUS_MESSAGES.get(status, UNKNOWN_ERROR_MESSAGE)


class DirBrowserError(Exception):
    """Base class for all errors raised by this package."""


class ValidationError(DirBrowserError):
    """Client-side validation refused an operation before any request."""


class AlreadyAtRoot(DirBrowserError):
    """Raised when ascending past the root folder."""

    def __init__(self, path: str) -> None:
        super().__init__(f"already at the top folder: {path}")
        self.path = path


class TransportError(DirBrowserError):
    """Request finished with a status other than 200, or never finished."""

    def __init__(self, status: int, message: str | None = None, url: str = "") -> None:
        self.status = status
        self.url = url
        self.message = message if message is not None else status_message(status)
        super().__init__(f"{self.message} (status {status})")

    @property
    def unauthorized(self) -> bool:
        return self.status == 401


class CaptchaRequired(TransportError):
    """Server wants a CAPTCHA on the next attempt (600 or 603)."""

    def __init__(self, status: int, url: str = "") -> None:
        if status == STATUS_CAPTCHA_INVALID:
            message = "Incorrect captcha"
        else:
            message = "Incorrect user name or password"
        super().__init__(status, message, url)


class BadCredentials(TransportError):
    """Server rejected the user name/password pair (601)."""

    def __init__(self, status: int = STATUS_BAD_CREDENTIALS, url: str = "") -> None:
        super().__init__(status, "Incorrect user name or password", url)


def error_for_status(status: int, url: str = "") -> TransportError:
    """Build the most specific :class:`TransportError` for ``status``."""
    if status in (STATUS_CAPTCHA_INVALID, STATUS_CAPTCHA_REQUIRED):
        return CaptchaRequired(status, url)
    if status == STATUS_BAD_CREDENTIALS:
        return BadCredentials(status, url)
    return TransportError(status, url=url)


class ErrorChannel:
    """Turns transport failures into user-visible notifications.

    A 401 additionally calls ``on_unauthorized`` so the host can force the
    sign-in surface.
    """

    def __init__(
        self,
        sink: NotificationSink,
        on_unauthorized: Callable[[], None] | None = None,
    ) -> None:
        self.sink = sink
        self.on_unauthorized = on_unauthorized

    def report(self, error: TransportError, prefix: str = "") -> None:
        """Notify ``exc`` as a danger message; 401 also calls the unauthorized hook."""
        from ..notify import NotifyLevel

        LOGGER.warning("request failed: %s %s", error.url or "<unknown>", error)
        text = f"{prefix}{error.message}" if prefix else error.message
        self.sink.notify(NotifyLevel.DANGER, text)
        if error.unauthorized and self.on_unauthorized is not None:
            self.on_unauthorized()


__all__ = [
    "STATUS_OK",
    "STATUS_CAPTCHA_INVALID",
    "STATUS_BAD_CREDENTIALS",
    "STATUS_CAPTCHA_REQUIRED",
    "STATUS_NETWORK",
    "UNKNOWN_ERROR_MESSAGE",
    "status_message",
    "DirBrowserError",
    "ValidationError",
    "AlreadyAtRoot",
    "TransportError",
    "CaptchaRequired",
    "BadCredentials",
    "error_for_status",
    "ErrorChannel",
]
