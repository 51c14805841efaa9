"""Server-paged tables: page state, reload, client-side sort, pager buttons."""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

LOGGER = logging.getLogger(__name__)

PAGE_SIZE_CHOICES: tuple[int, ...] = (1, 2, 5, 10, 25, 50, 100)
DEFAULT_PAGE_SIZE = 10
TOTAL_KEY = "Sum"


class JsonSource(Protocol):
    def get_json(self, path: str, params: Mapping[str, object] | None = None) -> Any: ...


@dataclass(frozen=True)
class TableSpec:
    """Endpoint, row key, and display columns of one paged table."""

    url: str
    rows_key: str
    columns: Mapping[str, str]
    extra_params: Mapping[str, object] = field(default_factory=dict)


@dataclass(frozen=True)
class PageButton:
    note: str
    page: int
    kind: str


def page_count(total: int, page_size: int) -> int:
    """Number of pages needed for ``total`` rows."""
    if page_size <= 0:
        return 0
    return math.ceil(total / page_size)


def page_buttons(page: int, total_pages: int) -> list[PageButton]:
    """Pager row: first, previous, up to three page numbers, next, last."""
    buttons = [
        PageButton("<<", 1, "first"),
        PageButton("<", page - 1 if page > 1 else 1, "prev"),
    ]
    if total_pages <= 1:
        numbers = [1]
    elif total_pages <= 3:
        numbers = list(range(1, total_pages + 1))
    elif page <= 2:
        numbers = [1, 2, 3]
    elif page >= total_pages - 1:
        numbers = [total_pages - 2, total_pages - 1, total_pages]
    else:
        numbers = [page - 1, page, page + 1]
    buttons.extend(PageButton(str(number), number, "number") for number in numbers)
    buttons.append(PageButton(">", page + 1 if page < total_pages else total_pages, "next"))
    buttons.append(PageButton(">>", total_pages, "last"))
    return buttons


class PaginatedTable:
    """One server-paged table.

    Any change to the page, the page size, or an extra query parameter
    reloads the current page. Transport errors propagate to the caller and
    leave the previous rows in place.
    """

    def __init__(self, api: JsonSource, spec: TableSpec) -> None:
        self.api = api
        self.spec = spec
        self.page = 1
        self.page_size = DEFAULT_PAGE_SIZE
        self.extra_params: dict[str, object] = dict(spec.extra_params)
        self.rows: list[Mapping[str, Any]] = []
        self.total = 0
        self.sort_key = ""
        self.sort_orders: dict[str, int] = {column: -1 for column in spec.columns}

    def params(self) -> dict[str, object]:
        """Query parameters for the current page."""
        return {"Page": self.page, "OnePageCount": self.page_size, **self.extra_params}

    @property
    def total_pages(self) -> int:
        return page_count(self.total, self.page_size)

    def reload(self) -> None:
        """Fetch the current page and replace ``rows`` and ``total``."""
        data = self.api.get_json(self.spec.url, self.params())
        if not isinstance(data, Mapping):
            data = {}
        rows = data.get(self.spec.rows_key) or []
        self.rows = [row for row in rows if isinstance(row, Mapping)]
        total = data.get(TOTAL_KEY, 0)
        self.total = int(total) if isinstance(total, (int, float)) else 0
        LOGGER.debug("%s page %d: %d of %d rows", self.spec.url, self.page, len(self.rows), self.total)

    def go_to(self, page: int) -> None:
        """Load ``page``; values below 1 load the first page."""
        self.page = max(1, page)
        self.reload()

    def set_page_size(self, page_size: int) -> None:
        if page_size not in PAGE_SIZE_CHOICES:
            raise ValueError(f"page size must be one of {PAGE_SIZE_CHOICES}, got {page_size}")
        self.page_size = page_size
        self.reload()

    def set_param(self, name: str, value: object) -> None:
        """Set an extra query parameter such as ``Day`` and reload."""
        self.extra_params[name] = value
        self.reload()

    def page_buttons(self) -> list[PageButton]:
        return page_buttons(self.page, self.total_pages)

    def sort_by(self, key: str) -> None:
        """Sort by ``key``, flipping its order on every call."""
        self.sort_key = key
        self.sort_orders[key] = self.sort_orders.get(key, -1) * -1

    def sorted_rows(self) -> list[Mapping[str, Any]]:
        """Rows ordered by the active sort key; unsorted tables keep server order."""
        if not self.sort_key:
            return list(self.rows)
        key = self.sort_key
        return sorted(
            self.rows,
            key=lambda row: (row.get(key) is None, row.get(key)),
            reverse=self.sort_orders.get(key, 1) < 0,
        )


__all__ = [
    "PAGE_SIZE_CHOICES",
    "DEFAULT_PAGE_SIZE",
    "JsonSource",
    "TableSpec",
    "PageButton",
    "page_count",
    "page_buttons",
    "PaginatedTable",
]
