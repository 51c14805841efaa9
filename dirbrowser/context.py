"""Application context fetched once at start-up.

Holds the signed-in user and the server's system configuration. It is
built explicitly and handed to every controller that needs it.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Protocol

LOGGER = logging.getLogger(__name__)

MAX_FILE_UPLOAD = 5 * 1024 * 1024 * 1024
MAX_FILE_DOWNLOAD = 10 * 1024 * 1024 * 1024

# Group names as the server reports them in ``Class``.
CLASS_SYSTEM_ADMIN = "系统管理员"
CLASS_CONFIG_ADMIN = "配置管理员"
CLASS_REGULAR_USER = "普通用户"
CLASS_GUEST = "游客"

CLASS_LEVELS: dict[str, int] = {
    CLASS_SYSTEM_ADMIN: 4,
    CLASS_CONFIG_ADMIN: 3,
    CLASS_REGULAR_USER: 2,
    CLASS_GUEST: 1,
}
MIN_LEVEL = 1
CONFIG_LEVEL = 3


def level_for_class(user_class: str) -> int:
    """Permission level for a server group name; unknown groups get level 1."""
    return CLASS_LEVELS.get(user_class, MIN_LEVEL)


def _int(value: object, default: int = 0) -> int:
    return int(value) if isinstance(value, (int, float)) and not isinstance(value, bool) else default


@dataclass(frozen=True)
class UserInfo:
    """Signed-in user as reported by ``/api/usr``."""

    name: str = ""
    real_name: str = ""
    department: str = ""
    user_class: str = ""
    last_ip: int = 0
    last_login_time: int = 0
    current_ip: int = 0

    @property
    def level(self) -> int:
        return level_for_class(self.user_class)

    @classmethod
    def from_json(cls, data: Mapping[str, object]) -> UserInfo:
        """Build from the ``/api/usr`` payload; missing fields get defaults."""
        return cls(
            name=str(data.get("Name") or ""),
            real_name=str(data.get("RealName") or ""),
            department=str(data.get("Department") or ""),
            user_class=str(data.get("Class") or ""),
            last_ip=_int(data.get("LastIp")),
            last_login_time=_int(data.get("LastLoginTime")),
            current_ip=_int(data.get("CurrentIp")),
        )


@dataclass(frozen=True)
class SystemConfig:
    """Server configuration from ``/api/conf``."""

    ext_table: str = ""
    archive_table: str = ""
    departments: tuple[str, ...] = ()
    root_path: str = ""

    def extension_table(self, folder_mode: bool) -> str:
        """Comma-separated upload extensions for file or folder-archive mode."""
        return self.archive_table if folder_mode else self.ext_table

    @classmethod
    def from_json(cls, data: Mapping[str, object]) -> SystemConfig:
        departments = data.get("Departments") or ()
        return cls(
            ext_table=str(data.get("ExtTable") or ""),
            archive_table=str(data.get("ArchiveTable") or ""),
            departments=tuple(str(item) for item in departments) if isinstance(departments, list) else (),
            root_path=str(data.get("RootPath") or ""),
        )


@dataclass
class AppContext:
    """Explicit start-up state shared by the controllers."""

    user: UserInfo = field(default_factory=UserInfo)
    config: SystemConfig = field(default_factory=SystemConfig)

    @property
    def level(self) -> int:
        return self.user.level


class ContextSource(Protocol):
    def get_user(self) -> object: ...

    def get_config(self) -> object: ...


def bootstrap_context(source: ContextSource) -> AppContext:
    """Fetch the current user, and the system configuration for level >= 3.

    Transport errors propagate: without a user there is nothing to show.
    """
    payload = source.get_user()
    user = UserInfo.from_json(payload if isinstance(payload, Mapping) else {})
    config = SystemConfig()
    if user.level >= CONFIG_LEVEL:
        conf_payload = source.get_config()
        if isinstance(conf_payload, Mapping):
            config = SystemConfig.from_json(conf_payload)
    LOGGER.debug("signed in as %s (level %d)", user.name or "<anonymous>", user.level)
    return AppContext(user=user, config=config)


__all__ = [
    "MAX_FILE_UPLOAD",
    "MAX_FILE_DOWNLOAD",
    "CLASS_SYSTEM_ADMIN",
    "CLASS_CONFIG_ADMIN",
    "CLASS_REGULAR_USER",
    "CLASS_GUEST",
    "CLASS_LEVELS",
    "level_for_class",
    "UserInfo",
    "SystemConfig",
    "AppContext",
    "bootstrap_context",
]
