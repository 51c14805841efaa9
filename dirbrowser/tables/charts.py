"""Download-statistics chart series. Data only; drawing is up to the host."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from datetime import date
from enum import Enum
from typing import Any

from .paginated import JsonSource

GRAPH_ENDPOINT = "/api/graph/"

MONTH_LABELS: tuple[str, ...] = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)
WEEKDAY_LABELS: tuple[str, ...] = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)

DAY_UNIT_CHOICES: dict[int, str] = {1: "1 day", 3: "3 days", 7: "1 week", 15: "half a month", 30: "1 month"}
SPAN_POINT_CHOICES: tuple[int, ...] = (5, 7, 10, 12, 15, 30)
YEAR_CHOICE_COUNT = 3


class ChartKind(str, Enum):
    LINE = "Line"
    BAR = "Bar"
    RADAR = "Radar"


@dataclass(frozen=True)
class ChartSpec:
    title: str
    url: str
    params: Mapping[str, object]
    kind: ChartKind = ChartKind.LINE

    def with_params(self, **params: object) -> ChartSpec:
        return replace(self, params={**self.params, **params})


@dataclass(frozen=True)
class ChartSeries:
    labels: tuple[str, ...] = ()
    values: tuple[int, ...] = ()


DEFAULT_CHARTS: dict[str, ChartSpec] = {
    "tendency": ChartSpec("Download trend", GRAPH_ENDPOINT, {"Flag": "Day", "Day": 1, "Limit": 10}, ChartKind.LINE),
    "month": ChartSpec("Monthly downloads", GRAPH_ENDPOINT, {"Flag": "Month", "Year": 0}, ChartKind.BAR),
    "week": ChartSpec("Downloads by weekday", GRAPH_ENDPOINT, {"Flag": "Weekday", "Year": 0}, ChartKind.BAR),
}


def _points(payload: Mapping[str, Any]) -> list[Mapping[str, Any]]:
    points = payload.get("PointList") or []
    return [point for point in points if isinstance(point, Mapping)]


def series_labels(payload: Mapping[str, Any]) -> tuple[str, ...]:
    """X-axis labels for a graph payload, chosen by its ``Flag``."""
    flag = payload.get("Flag")
    if flag == "Year":
        return tuple(str(point.get("Year", "")) for point in _points(payload))
    if flag == "Month":
        return MONTH_LABELS
    if flag == "Weekday":
        return WEEKDAY_LABELS
    if flag == "Day":
        return tuple(
            f"{point.get('Year', '')}-{point.get('Month', '')}-{point.get('Day', '')}"
            for point in _points(payload)
        )
    return ()


def parse_series(payload: object) -> ChartSeries:
    """Labels and counts of a graph payload; anything malformed gives an empty series."""
    if not isinstance(payload, Mapping):
        return ChartSeries()
    values = []
    for point in _points(payload):
        count = point.get("Cnt", 0)
        values.append(int(count) if isinstance(count, (int, float)) else 0)
    return ChartSeries(labels=series_labels(payload), values=tuple(values))


def fetch_series(api: JsonSource, spec: ChartSpec) -> ChartSeries:
    """Fetch and parse one chart."""
    return parse_series(api.get_json(spec.url, spec.params))


def year_choices(today: date | None = None) -> dict[int, str]:
    """Year filter options: ``0`` for any year, then the last three years."""
    year = (today or date.today()).year
    choices = {0: "Any year"}
    for offset in range(YEAR_CHOICE_COUNT):
        choices[year - offset] = str(year - offset)
    return choices


def span_choices(day_unit: int) -> dict[int, str]:
    """Point-count options for the trend chart, labelled with the days covered."""
    return {points: f"{points * day_unit} days" for points in SPAN_POINT_CHOICES}


__all__ = [
    "GRAPH_ENDPOINT",
    "MONTH_LABELS",
    "WEEKDAY_LABELS",
    "DAY_UNIT_CHOICES",
    "ChartKind",
    "ChartSpec",
    "ChartSeries",
    "DEFAULT_CHARTS",
    "series_labels",
    "parse_series",
    "fetch_series",
    "year_choices",
    "span_choices",
]
