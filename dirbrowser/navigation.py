"""External navigation state: routes and a bounded route history.

A route is the URL path plus query of the page showing the file table.
The controller pushes a route after every successful fetch so back/forward
and shared links match what is displayed.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Protocol
from urllib.parse import urlencode

FILES_ROUTE = "/files"
MAX_ROUTE_HISTORY = 256


@dataclass(frozen=True)
class Route:
    """URL path plus query parameters."""

    path: str
    query: Mapping[str, str] = field(default_factory=dict)

    @property
    def is_search(self) -> bool:
        return bool(self.query.get("search"))

    def url(self) -> str:
        """Route as a ``path?query`` string."""
        if not self.query:
            return self.path
        return f"{self.path}?{urlencode(dict(self.query))}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Route):
            return NotImplemented
        return self.path == other.path and dict(self.query) == dict(other.query)

    def __hash__(self) -> int:
        return hash((self.path, tuple(sorted(self.query.items()))))


def browse_route(path: str) -> Route:
    return Route(FILES_ROUTE, {"path": path})


def search_route(path: str, expr: str) -> Route:
    return Route(FILES_ROUTE, {"search": "true", "path": path, "expr": expr})


class NavigationSync(Protocol):
    def push(self, route: Route) -> None: ...


class RouteHistory:
    """Bounded back/forward stacks of routes.

    Adjacent duplicate routes are suppressed to avoid no-op navigation steps.
    """

    def __init__(self, max_entries: int = MAX_ROUTE_HISTORY) -> None:
        self.max_entries = max(1, max_entries)
        self.current: Route | None = None
        self.back: list[Route] = []
        self.forward: list[Route] = []

    def _append_unique(self, stack: list[Route], route: Route) -> None:
        if stack and stack[-1] == route:
            return
        stack.append(route)
        overflow = len(stack) - self.max_entries
        if overflow > 0:
            del stack[:overflow]

    def push(self, route: Route) -> None:
        """Make ``route`` current; the old current moves to the back stack."""
        if self.current == route:
            return
        if self.current is not None:
            self._append_unique(self.back, self.current)
        self.current = route
        self.forward.clear()

    def go_back(self) -> Route | None:
        """Step back one route, or ``None`` when there is no history."""
        if not self.back:
            return None
        target = self.back.pop()
        if self.current is not None:
            self._append_unique(self.forward, self.current)
        self.current = target
        return target

    def go_forward(self) -> Route | None:
        """Step forward again after :meth:`go_back`."""
        if not self.forward:
            return None
        target = self.forward.pop()
        if self.current is not None:
            self._append_unique(self.back, self.current)
        self.current = target
        return target


__all__ = [
    "FILES_ROUTE",
    "MAX_ROUTE_HISTORY",
    "Route",
    "browse_route",
    "search_route",
    "NavigationSync",
    "RouteHistory",
]
