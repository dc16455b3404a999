"""
Module: cashflow_kernel.models.balance
Responsibility: ORM persistence for month-end balance snapshots and their
    per-account sub-balances.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - total_minor_units is stored in the reporting currency and equals the
      converted sum of the sub-balances at entry time (checked in the domain
      layer by ``BalanceSnapshot.verify_total``).
    - Sub-balances keep their native currency.
"""

from datetime import date
from uuid import UUID

from sqlalchemy import BigInteger, Date, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cashflow_kernel.db.base import TimestampedBase, UUIDString


class BalanceSnapshotModel(TimestampedBase):
    """Cash position measured at one month."""

    __tablename__ = "balance_snapshots"

    __table_args__ = (
        Index("idx_balance_month", "month"),
    )

    month: Mapped[date] = mapped_column(Date, nullable=False)

    # Reporting-currency total, minor units
    total_minor_units: Mapped[int] = mapped_column(BigInteger, nullable=False)

    notes: Mapped[str] = mapped_column(String(2000), nullable=False, default="")

    sub_balances: Mapped[list["SubBalanceModel"]] = relationship(
        back_populates="snapshot",
        cascade="all, delete-orphan",
        order_by="SubBalanceModel.account",
    )

    def __repr__(self) -> str:
        return f"<BalanceSnapshot {self.month:%Y-%m} total={self.total_minor_units}>"


class SubBalanceModel(TimestampedBase):
    """One account's balance inside a snapshot, in its native currency."""

    __tablename__ = "balance_sub_balances"

    snapshot_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("balance_snapshots.id", ondelete="CASCADE"),
        nullable=False,
    )

    # e.g. "Boursorama", "Revolut"
    account: Mapped[str] = mapped_column(String(100), nullable=False)

    amount_minor_units: Mapped[int] = mapped_column(BigInteger, nullable=False)

    currency: Mapped[str] = mapped_column(String(3), nullable=False)

    snapshot: Mapped[BalanceSnapshotModel] = relationship(back_populates="sub_balances")

    def __repr__(self) -> str:
        return f"<SubBalance {self.account} {self.amount_minor_units} {self.currency}>"
