"""
cashflow_engines.periods -- Calendar-month bucketing.

Responsibility:
    Map dates and datetimes to the calendar month that contains them, and
    enumerate consecutive months from a base month.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Two values share a period iff their (year, month) pairs are equal.
    - Aware datetimes are converted to the canonical zone BEFORE the month
      is read, so an instant near midnight on the last day of a month lands
      in the month that zone sees.  Naive datetimes are taken as already
      canonical.
    - ``enumerate_periods`` is strictly increasing by exactly one month.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from zoneinfo import ZoneInfo

UTC = ZoneInfo("UTC")

_MONTH_ABBR = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


@dataclass(frozen=True, order=True)
class PeriodKey:
    """A calendar month, ordered chronologically."""

    year: int
    month: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValueError(f"month must be in 1..12, got {self.month}")

    @property
    def start(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def label(self) -> str:
        """Display label, e.g. ``"Sep 2025"``."""
        return f"{_MONTH_ABBR[self.month - 1]} {self.year}"

    @property
    def code(self) -> str:
        """Sortable code, e.g. ``"2025-09"``."""
        return f"{self.year:04d}-{self.month:02d}"

    def next(self) -> PeriodKey:
        return self.shift(1)

    def shift(self, months: int) -> PeriodKey:
        index = self.year * 12 + (self.month - 1) + months
        return PeriodKey(index // 12, index % 12 + 1)

    def contains(self, value: date | datetime, tz: tzinfo | None = None) -> bool:
        return period_key(value, tz) == self

    def __str__(self) -> str:
        return self.code


def resolve_timezone(name: str | tzinfo | None) -> tzinfo:
    """Turn an IANA name (or tzinfo, or None for UTC) into a tzinfo."""
    if name is None:
        return UTC
    if isinstance(name, tzinfo):
        return name
    return ZoneInfo(name)


def to_canonical_date(value: date | datetime, tz: tzinfo | None = None) -> date:
    """Calendar date of ``value`` as seen in ``tz`` (default UTC)."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(tz or UTC)
        return value.date()
    return value


def period_key(value: date | datetime | PeriodKey, tz: tzinfo | None = None) -> PeriodKey:
    """(year, month) containing ``value``; the day is discarded."""
    if isinstance(value, PeriodKey):
        return value
    d = to_canonical_date(value, tz)
    return PeriodKey(d.year, d.month)


def period_start(value: date | datetime | PeriodKey, tz: tzinfo | None = None) -> date:
    """First day of the month containing ``value``."""
    return period_key(value, tz).start


def add_months(value: date | datetime | PeriodKey, n: int, tz: tzinfo | None = None) -> date:
    """Start of the month ``n`` months after the one containing ``value``.

    The result is always day 1, so there is no end-of-month overflow.
    """
    return period_key(value, tz).shift(n).start


def enumerate_periods(
    start: date | datetime | PeriodKey,
    count: int,
    tz: tzinfo | None = None,
) -> list[PeriodKey]:
    """``count`` consecutive months beginning with the one containing ``start``."""
    if count < 0:
        raise ValueError(f"count must be >= 0, got {count}")
    first = period_key(start, tz)
    return [first.shift(i) for i in range(count)]
