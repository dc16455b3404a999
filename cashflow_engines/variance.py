"""
cashflow_engines.variance -- Actual-vs-forecast variance and highlighting.

Responsibility:
    Derive the signed variance of a forecast row, its direction (surplus or
    shortfall) and whether it crosses a caller-supplied threshold.

Architecture position:
    Engines -- pure calculation layer, zero I/O, no state.

Invariants enforced:
    - variance(row) == row.closing_actual - row.closing_forecast.
    - A row is highlighted iff abs(variance) >= threshold.
    - variance >= 0 is a surplus (▲); variance < 0 is a shortfall (▼).
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from cashflow_engines.forecast import ForecastRow

# 500.00 in a two-decimal reporting currency
DEFAULT_THRESHOLD_MINOR_UNITS = 50_000


class VarianceDirection(str, Enum):
    """Which side of the forecast the actual track landed on."""

    SURPLUS = "surplus"
    SHORTFALL = "shortfall"

    @property
    def indicator(self) -> str:
        return "▲" if self is VarianceDirection.SURPLUS else "▼"


@dataclass(frozen=True)
class VarianceAssessment:
    """Variance of one row measured against a threshold."""

    row: ForecastRow
    variance: int
    threshold: int
    direction: VarianceDirection
    is_highlighted: bool

    @property
    def indicator(self) -> str:
        return self.direction.indicator


def variance(row: ForecastRow) -> int:
    """Actual closing minus forecast closing."""
    return row.closing_actual - row.closing_forecast


def direction_of(amount: int) -> VarianceDirection:
    return VarianceDirection.SURPLUS if amount >= 0 else VarianceDirection.SHORTFALL


class VarianceReporter:
    """Assesses forecast rows against a highlight threshold."""

    def __init__(self, default_threshold: int = DEFAULT_THRESHOLD_MINOR_UNITS):
        if default_threshold < 0:
            raise ValueError("threshold must be >= 0")
        self._default_threshold = default_threshold

    def assess(self, row: ForecastRow, threshold: int | None = None) -> VarianceAssessment:
        if threshold is None:
            threshold = self._default_threshold
        amount = variance(row)
        return VarianceAssessment(
            row=row,
            variance=amount,
            threshold=threshold,
            direction=direction_of(amount),
            is_highlighted=abs(amount) >= threshold,
        )

    def assess_all(
        self,
        rows: Iterable[ForecastRow],
        threshold: int | None = None,
    ) -> list[VarianceAssessment]:
        return [self.assess(row, threshold) for row in rows]
