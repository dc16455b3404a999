"""
Budget -- pure helpers over monthly budget lines.

A budget line is unique per (month, category).  ``upsert_budget_line``
keeps that invariant when a line is entered; ``copy_budget_forward``
seeds a month from the previous one without overwriting lines the target
month already has.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace
from datetime import date

from cashflow_kernel.domain.records import BudgetLine
from cashflow_kernel.exceptions import DuplicateBudgetLineError
from cashflow_kernel.logging_config import get_logger

logger = get_logger("domain.budget")


def validate_budget_lines(lines: Iterable[BudgetLine]) -> None:
    """
    Raise if two lines share a (month, category).

    Raises:
        DuplicateBudgetLineError: On the first duplicate found.
    """
    seen: set[tuple[date, str]] = set()
    for line in lines:
        if line.key in seen:
            raise DuplicateBudgetLineError(line.month, line.category)
        seen.add(line.key)


def upsert_budget_line(
    lines: Iterable[BudgetLine], line: BudgetLine
) -> tuple[BudgetLine, ...]:
    """Replace the line with the same (month, category) or append ``line``."""
    result: list[BudgetLine] = []
    replaced = False
    for existing in lines:
        if existing.key == line.key:
            result.append(replace(line, id=existing.id if line.id is None else line.id))
            replaced = True
        else:
            result.append(existing)
    if not replaced:
        result.append(line)
    return tuple(result)


def copy_budget_forward(
    lines: Iterable[BudgetLine], source_month: date, target_month: date
) -> tuple[BudgetLine, ...]:
    """
    Copy every line of ``source_month`` into ``target_month``.

    Lines already present in the target month are left untouched.
    """
    source = source_month.replace(day=1)
    target = target_month.replace(day=1)
    current = tuple(lines)
    existing_keys = {line.key for line in current}

    copied = tuple(
        replace(line, month=target, id=None)
        for line in current
        if line.month == source and (target, line.category) not in existing_keys
    )

    logger.info("budget_copied_forward", extra={
        "source_month": source,
        "target_month": target,
        "copied_count": len(copied),
    })
    return current + copied
