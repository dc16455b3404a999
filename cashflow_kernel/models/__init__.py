"""ORM models for the ledger store (owned by the entry screens, read by the forecaster)."""

from cashflow_kernel.models.balance import BalanceSnapshotModel, SubBalanceModel
from cashflow_kernel.models.budget import BudgetLineModel
from cashflow_kernel.models.scheduled import PayableModel, ReceivableModel

__all__ = [
    "BalanceSnapshotModel",
    "SubBalanceModel",
    "BudgetLineModel",
    "PayableModel",
    "ReceivableModel",
]
