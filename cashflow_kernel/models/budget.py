"""
Module: cashflow_kernel.models.budget
Responsibility: ORM persistence for monthly budget lines.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - At most one line per (month, category): unique constraint
      ``uq_budget_month_category``.
    - month is always the first day of the month (normalized on entry).
"""

from datetime import date

from sqlalchemy import BigInteger, CheckConstraint, Date, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from cashflow_kernel.db.base import TimestampedBase


class BudgetLineModel(TimestampedBase):
    """Planned inflow and outflow for one category in one month."""

    __tablename__ = "budget_lines"

    __table_args__ = (
        UniqueConstraint("month", "category", name="uq_budget_month_category"),
        CheckConstraint(
            "planned_inflow_minor_units >= 0 AND planned_outflow_minor_units >= 0",
            name="ck_budget_amounts_nonneg",
        ),
    )

    month: Mapped[date] = mapped_column(Date, nullable=False)

    category: Mapped[str] = mapped_column(String(100), nullable=False)

    planned_inflow_minor_units: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=0
    )

    planned_outflow_minor_units: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=0
    )

    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="EUR")

    def __repr__(self) -> str:
        return f"<BudgetLine {self.month:%Y-%m} {self.category}>"
