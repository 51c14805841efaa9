"""Paged admin tables and download statistics."""

from __future__ import annotations

from .paginated import PAGE_SIZE_CHOICES, PageButton, PaginatedTable, TableSpec, page_buttons
from .admin import (
    DOWNLOAD_COUNTS,
    DOWNLOADS,
    USERS,
    NewUser,
    add_user,
    change_password,
    delete_user,
    download_row,
    update_user,
)
from .charts import DEFAULT_CHARTS, ChartKind, ChartSeries, ChartSpec, fetch_series

__all__ = [
    "PAGE_SIZE_CHOICES",
    "PageButton",
    "PaginatedTable",
    "TableSpec",
    "page_buttons",
    "USERS",
    "DOWNLOAD_COUNTS",
    "DOWNLOADS",
    "NewUser",
    "add_user",
    "change_password",
    "delete_user",
    "download_row",
    "update_user",
    "DEFAULT_CHARTS",
    "ChartKind",
    "ChartSeries",
    "ChartSpec",
    "fetch_series",
]
