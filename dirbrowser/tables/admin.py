"""Admin tables (users, download counts, download log) and user management calls."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Protocol

from ..context import MAX_FILE_DOWNLOAD
from ..transport.client import ARCHIVE_ENDPOINT, FILE_ENDPOINT, USER_ENDPOINT, USERS_ENDPOINT
from ..transport.errors import ValidationError
from .paginated import TableSpec

USERS = TableSpec(
    url=USERS_ENDPOINT,
    rows_key="UsrList",
    columns={
        "Uid": "ID",
        "Name": "User name",
        "RealName": "Real name",
        "Department": "Department",
        "Class": "Group",
        "LastIp": "Last login from",
        "LastLoginTime": "Last login",
    },
)

DOWNLOAD_DAY_CHOICES: dict[int, str] = {
    365: "1 year",
    183: "half a year",
    30: "1 month",
    7: "1 week",
    1: "1 day",
}

DOWNLOAD_COUNTS = TableSpec(
    url="/api/cnt/",
    rows_key="CntList",
    columns={"Path": "Path", "Cnt": "Downloads", "FileSize": "Size", "Time": "Last download"},
    extra_params={"Day": 365},
)

DOWNLOADS = TableSpec(
    url="/api/downloads/",
    rows_key="DownloadList",
    columns={
        "Path": "Path",
        "FileSize": "Size",
        "RealName": "Name",
        "Department": "Department",
        "Ip": "IP",
        "Time": "Time",
    },
)

MIN_NAME_LENGTH = 5
MIN_REAL_NAME_LENGTH = 2
MIN_PASSWORD_LENGTH = 5
MIN_DEPARTMENT_LENGTH = 3
MIN_CLASS_LENGTH = 2


class AdminApi(Protocol):
    def put_json(self, path: str, data: Mapping[str, object]) -> str: ...

    def post_form(self, path: str, data: Mapping[str, object] | None = None) -> str: ...

    def delete(self, path: str, params: Mapping[str, object] | None = None) -> str: ...


@dataclass(frozen=True)
class NewUser:
    name: str
    real_name: str
    department: str
    password: str
    user_class: str

    def invalid_fields(self, password_check: str) -> list[str]:
        """Names of the form fields that fail their length/match rules."""
        rules = {
            "Name": len(self.name) >= MIN_NAME_LENGTH,
            "RealName": len(self.real_name) >= MIN_REAL_NAME_LENGTH,
            "Password": len(self.password) >= MIN_PASSWORD_LENGTH,
            "Department": len(self.department) >= MIN_DEPARTMENT_LENGTH,
            "Class": len(self.user_class) >= MIN_CLASS_LENGTH,
            "CheckPasswords": self.password == password_check,
        }
        return [name for name, ok in rules.items() if not ok]

    def to_form(self) -> dict[str, str]:
        return {
            "Name": self.name,
            "RealName": self.real_name,
            "Department": self.department,
            "Password": self.password,
            "Class": self.user_class,
        }


def update_user(api: AdminApi, user: Mapping[str, object]) -> str:
    """Save an edited user row as returned by the users table."""
    return api.put_json(USERS_ENDPOINT, user)


def delete_user(api: AdminApi, uid: object) -> str:
    return api.delete(USERS_ENDPOINT, {"UidList": uid})


def add_user(api: AdminApi, user: NewUser, password_check: str) -> str:
    """Create a user after checking the form locally."""
    invalid = user.invalid_fields(password_check)
    if invalid:
        raise ValidationError(f"invalid fields: {', '.join(invalid)}")
    return api.post_form(USERS_ENDPOINT, user.to_form())


def change_password(api: AdminApi, old_password: str, new_password: str, password_check: str) -> str:
    """Change the signed-in user's password."""
    if len(new_password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"password must have at least {MIN_PASSWORD_LENGTH} characters")
    if new_password != password_check:
        raise ValidationError("passwords do not match")
    return api.put_json(USER_ENDPOINT, {"OldPassword": old_password, "NewPassword": new_password})


def download_row(row: Mapping[str, Any], downloader: Callable[[str], None]) -> str:
    """Download the file or folder archive named by a counter-table row.

    Folders larger than the download limit raise :class:`ValidationError`.
    """
    path = str(row.get("Path") or "")
    if row.get("IsDir"):
        size = row.get("FileSize", 0)
        if isinstance(size, (int, float)) and size > MAX_FILE_DOWNLOAD:
            raise ValidationError("Folder size exceeds the limit, it cannot be downloaded as a package")
        url_path = ARCHIVE_ENDPOINT + path
    else:
        url_path = FILE_ENDPOINT + path
    downloader(url_path)
    return url_path


__all__ = [
    "USERS",
    "DOWNLOAD_COUNTS",
    "DOWNLOADS",
    "DOWNLOAD_DAY_CHOICES",
    "AdminApi",
    "NewUser",
    "update_user",
    "delete_user",
    "add_user",
    "change_password",
    "download_row",
]
