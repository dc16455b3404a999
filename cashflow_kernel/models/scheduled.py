"""
Module: cashflow_kernel.models.scheduled
Responsibility: ORM persistence for scheduled cash movements -- receivables
    (money owed to the organization) and payables (bills to pay).
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - amount_minor_units is non-negative (CHECK constraint).
    - currency is a 3-character ISO 4217 code.
    - is_settled starts False and is toggled by the entry screens; the
      forecaster never writes it.
"""

from datetime import datetime

from sqlalchemy import BigInteger, Boolean, CheckConstraint, DateTime, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from cashflow_kernel.db.base import TimestampedBase


class _ScheduledFlowColumns:
    """Columns shared by receivables and payables."""

    amount_minor_units: Mapped[int] = mapped_column(BigInteger, nullable=False)

    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="EUR")

    settlement_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )

    is_settled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    description: Mapped[str] = mapped_column(String(500), nullable=False, default="")


class ReceivableModel(_ScheduledFlowColumns, TimestampedBase):
    """Money the organization expects to receive."""

    __tablename__ = "receivables"

    __table_args__ = (
        CheckConstraint("amount_minor_units >= 0", name="ck_receivable_amount_nonneg"),
        Index("idx_receivable_settlement", "settlement_date"),
    )

    customer: Mapped[str] = mapped_column(String(200), nullable=False, default="")

    def __repr__(self) -> str:
        state = "settled" if self.is_settled else "open"
        return f"<Receivable {self.customer} {self.amount_minor_units} {self.currency} {state}>"


class PayableModel(_ScheduledFlowColumns, TimestampedBase):
    """Money the organization expects to pay."""

    __tablename__ = "payables"

    __table_args__ = (
        CheckConstraint("amount_minor_units >= 0", name="ck_payable_amount_nonneg"),
        Index("idx_payable_settlement", "settlement_date"),
    )

    payee: Mapped[str] = mapped_column(String(200), nullable=False, default="")

    def __repr__(self) -> str:
        state = "settled" if self.is_settled else "open"
        return f"<Payable {self.payee} {self.amount_minor_units} {self.currency} {state}>"
