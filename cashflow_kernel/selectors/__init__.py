"""Read-only selectors over the ledger store."""

from cashflow_kernel.selectors.base import BaseSelector
from cashflow_kernel.selectors.cash_ledger_selector import CashLedgerSelector

__all__ = ["BaseSelector", "CashLedgerSelector"]
