"""HTTP client for the remote file store API.

Thin wrappers over a :class:`requests.Session`. Every request carries the
``anti_csrf_token`` header copied from the cookie of the same name. Any
status other than 200 raises :class:`TransportError`; there are no retries
and no explicit timeout unless the caller sets one.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Any

import requests

from .errors import STATUS_NETWORK, STATUS_OK, TransportError, error_for_status

LOGGER = logging.getLogger(__name__)

CSRF_COOKIE = "anti_csrf_token"
CSRF_HEADER = "anti_csrf_token"

DIR_ENDPOINT = "/api/dir"
FILE_ENDPOINT = "/api/file"
SEARCH_ENDPOINT = "/api/files"
ARCHIVE_ENDPOINT = "/api/archive"
USER_ENDPOINT = "/api/usr"
USERS_ENDPOINT = "/api/usrs"
CONFIG_ENDPOINT = "/api/conf"
LOGIN_ENDPOINT = "/api/login"
LOGOUT_ENDPOINT = "/api/logout"
CAPTCHA_ENDPOINT = "/api/captcha"

DOWNLOAD_CHUNK_SIZE = 64 * 1024


class FileApiClient:
    """Session-backed client for the Listing/File API endpoints."""

    def __init__(
        self,
        base_url: str,
        session: requests.Session | None = None,
        timeout: float | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout

    # ---------- plumbing ----------
    def url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _headers(self) -> dict[str, str]:
        """CSRF header copied from the session cookie, when present."""
        token = self.session.cookies.get(CSRF_COOKIE)
        return {CSRF_HEADER: token} if token else {}

    def request(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        """Send one request and raise :class:`TransportError` unless it is a 200."""
        headers = dict(kwargs.pop("headers", None) or {})
        headers.update(self._headers())
        if self.timeout is not None:
            kwargs.setdefault("timeout", self.timeout)
        LOGGER.debug("%s %s", method, path)
        try:
            response = self.session.request(method, self.url(path), headers=headers, **kwargs)
        except requests.exceptions.RequestException as exc:
            raise TransportError(STATUS_NETWORK, f"Connection failed: {exc}", url=path) from exc
        if response.status_code != STATUS_OK:
            raise error_for_status(response.status_code, url=path)
        return response

    def get_json(self, path: str, params: Mapping[str, object] | None = None) -> Any:
        """GET ``path`` and decode JSON; an empty body gives ``None``."""
        response = self.request("GET", path, params=dict(params or {}))
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise TransportError(STATUS_NETWORK, "Malformed server response", url=path) from exc

    def put_json(self, path: str, data: Mapping[str, object]) -> str:
        return self.request("PUT", path, data=dict(data)).text

    def post_form(self, path: str, data: Mapping[str, object] | None = None) -> str:
        return self.request("POST", path, data=dict(data or {})).text

    def delete(self, path: str, params: Mapping[str, object] | None = None) -> str:
        return self.request("DELETE", path, params=dict(params or {})).text

    # ---------- listing ----------
    def list_dir(self, path: str) -> Any:
        """Raw Listing API records for one folder."""
        return self.get_json(DIR_ENDPOINT + path)

    def search(self, path: str, expr: str) -> Any:
        """Raw records matching ``expr`` below ``path``."""
        return self.get_json(SEARCH_ENDPOINT + path, {"Expr": expr})

    # ---------- mutations ----------
    def create_dir(self, path: str) -> str:
        return self.post_form(DIR_ENDPOINT + path)

    def delete_dir(self, path: str) -> str:
        return self.delete(DIR_ENDPOINT + path)

    def delete_file(self, path: str) -> str:
        return self.delete(FILE_ENDPOINT + path)

    def rename(self, path: str, new_name: str) -> str:
        return self.put_json(FILE_ENDPOINT + path, {"NewName": new_name})

    def upload(self, url_path: str, source: Path, name: str) -> str:
        """POST one file as multipart form data to ``url_path``."""
        with source.open("rb") as handle:
            response = self.request(
                "POST",
                url_path,
                files={"File": (name, handle)},
                data={"FileName": name},
            )
        return response.text

    # ---------- content ----------
    def fetch_text(self, path: str) -> str:
        return self.request("GET", FILE_ENDPOINT + path).text

    def stream(self, url_path: str) -> Iterator[bytes]:
        """Yield the body of ``GET url_path`` in chunks."""
        response = self.request("GET", url_path, stream=True)
        try:
            yield from response.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE)
        finally:
            response.close()

    # ---------- session ----------
    def login(self, name: str, password: str, captcha: str = "") -> str:
        """Sign in; captcha and credential failures raise their own errors."""
        data = {"Name": name, "Password": password}
        if captcha:
            data["Captcha"] = captcha
        return self.post_form(LOGIN_ENDPOINT, data)

    def logout(self) -> None:
        self.request("GET", LOGOUT_ENDPOINT)

    def get_user(self) -> Any:
        return self.get_json(USER_ENDPOINT)

    def get_config(self) -> Any:
        return self.get_json(CONFIG_ENDPOINT)


__all__ = [
    "CSRF_COOKIE",
    "CSRF_HEADER",
    "DIR_ENDPOINT",
    "FILE_ENDPOINT",
    "SEARCH_ENDPOINT",
    "ARCHIVE_ENDPOINT",
    "USER_ENDPOINT",
    "USERS_ENDPOINT",
    "CONFIG_ENDPOINT",
    "LOGIN_ENDPOINT",
    "LOGOUT_ENDPOINT",
    "CAPTCHA_ENDPOINT",
    "FileApiClient",
]
