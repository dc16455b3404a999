"""
Cashflow Kernel

Domain core for the cash-position forecaster:
- Minor-unit money values with ISO 4217 precision
- Read-only ledger snapshot of balances, receivables, payables and budget
- Typed exceptions with machine-readable codes
- Structured JSON logging
"""

__version__ = "0.1.0"
