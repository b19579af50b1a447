from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Union

from .config import PERIOD_DAYS

PERIOD_KINDS = ("day", "week", "month", "year", "custom")

DateLike = Union[date, datetime]


def _parse_date(s: str) -> date:
    return datetime.strptime(s, "%Y-%m-%d").date()


def _as_datetime(d: DateLike) -> datetime:
    if isinstance(d, datetime):
        return d
    return datetime(d.year, d.month, d.day)


@dataclass(frozen=True)
class Period:
    kind: str = "day"
    start: Optional[DateLike] = None
    end: Optional[DateLike] = None

    def __post_init__(self) -> None:
        if self.kind not in PERIOD_KINDS:
            raise ValueError(f"Unknown period '{self.kind}', expected one of {PERIOD_KINDS}")
        if self.kind == "custom" and (self.start is None or self.end is None):
            raise ValueError("A custom period needs both start and end")

    @property
    def multiplier(self) -> int:
        if self.kind != "custom":
            return PERIOD_DAYS[self.kind]
        seconds = (_as_datetime(self.end) - _as_datetime(self.start)).total_seconds()
        # une plage vide ou inversée compte pour 1 jour, jamais 0
        return max(1, math.ceil(seconds / 86400))


DAY = Period("day")
WEEK = Period("week")
MONTH = Period("month")
YEAR = Period("year")


def as_period(period: Union[Period, str, None]) -> Period:
    if period is None:
        return DAY
    if isinstance(period, Period):
        return period
    return Period(period)


def project(value: float, period: Union[Period, str, None] = None) -> float:
    """Projette une métrique journalière sur la période (multiplicateur constant)."""
    return value * as_period(period).multiplier


def parse_period(kind: str, start: Optional[str] = None, end: Optional[str] = None) -> Period:
    """Construit une Period depuis des arguments CLI (dates YYYY-MM-DD)."""
    if kind == "custom":
        if not start or not end:
            raise ValueError("--start and --end are required for a custom period")
        return Period("custom", _parse_date(start), _parse_date(end))
    return Period(kind)
