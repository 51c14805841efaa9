"""Persistent JSON config helpers.

Stores the server URL, remembered sign-in details, and whether the sign-in
form must show a captcha. All access is defensive: malformed or missing
config falls back safely.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

LOGGER = logging.getLogger(__name__)

APP_NAME = "dirbrowser"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME


@dataclass(frozen=True)
class SavedLogin:
    name: str = ""
    password: str = ""
    auto_login: bool = False


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Write errors are logged and otherwise ignored.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except (OSError, TypeError, ValueError) as exc:
        LOGGER.debug("could not write %s: %s", CONFIG_PATH, exc)


def _load_str(key: str) -> str:
    value = load_config().get(key)
    return value.strip() if isinstance(value, str) else ""


def load_base_url() -> str | None:
    """Load the last server URL, returning ``None`` when unset/invalid."""
    value = _load_str("base_url")
    return value if value else None


def save_base_url(url: str) -> None:
    """Remember ``url`` as the default server; blank values are ignored."""
    stripped = str(url).strip()
    if not stripped:
        return
    config = load_config()
    config["base_url"] = stripped
    save_config(config)


def load_login() -> SavedLogin:
    """Return remembered sign-in details.

    The password is only returned together with ``auto_login``; a stored
    password without the flag is ignored.
    """
    config = load_config()
    auto_login = config.get("auto_login")
    auto_login = auto_login if isinstance(auto_login, bool) else False
    name = config.get("login_name")
    password = config.get("login_password")
    return SavedLogin(
        name=name if isinstance(name, str) else "",
        password=password if auto_login and isinstance(password, str) else "",
        auto_login=auto_login,
    )


def save_login(name: str, password: str, remember: bool) -> None:
    """Remember the user name, and the password only when ``remember`` is set."""
    config = load_config()
    config["login_name"] = name
    config["auto_login"] = bool(remember)
    if remember:
        config["login_password"] = password
    else:
        config.pop("login_password", None)
    save_config(config)


def clear_login() -> None:
    """Forget the stored password and turn off automatic sign-in."""
    config = load_config()
    config.pop("login_password", None)
    config["auto_login"] = False
    save_config(config)


def load_show_captcha() -> bool:
    """Whether the next sign-in must include a captcha.

    Only explicit boolean values are accepted; anything else is ``False``.
    """
    value = load_config().get("show_captcha")
    return bool(value) if isinstance(value, bool) else False


def save_show_captcha(show_captcha: bool) -> None:
    config = load_config()
    config["show_captcha"] = bool(show_captcha)
    save_config(config)


__all__ = [
    "APP_NAME",
    "CONFIG_PATH",
    "SavedLogin",
    "load_config",
    "save_config",
    "load_base_url",
    "save_base_url",
    "load_login",
    "save_login",
    "clear_login",
    "load_show_captcha",
    "save_show_captcha",
]
