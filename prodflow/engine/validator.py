"""Ledger validation.

Checks a synchronized ledger before it is saved. All problems are
collected and reported together.
"""

from __future__ import annotations

from collections import Counter
from decimal import Decimal

from prodflow.models import (
    TRAVEL_CATEGORY,
    ExpenseLine,
    LedgerValidationError,
)


def validate_ledger(expenses: list[ExpenseLine]) -> list[ExpenseLine]:
    """Validate a shoot ledger.

    Every linked member may own exactly one non-travel line and at most one
    travel line. Amounts must be non-negative and finite. Returns the
    ledger unchanged if all checks pass.
    """
    errors: list[str] = []

    for line in expenses:
        for attr in ("estimated_amount", "actual_amount", "paid_amount"):
            val = getattr(line, attr)
            if not val.is_finite():
                errors.append(f"Line {line.id} ({line.description}): {attr} is not finite")
            elif val < 0:
                errors.append(f"Line {line.id} ({line.description}): negative {attr}={val}")

    id_counts = Counter(line.id for line in expenses)
    for line_id, count in id_counts.items():
        if count > 1:
            errors.append(f"Line id {line_id} appears {count} times")

    link_counts = Counter(
        (line.linked_id, line.category == TRAVEL_CATEGORY)
        for line in expenses
        if line.linked_id
    )
    for (linked_id, is_travel), count in link_counts.items():
        if count > 1:
            kind = "travel" if is_travel else "non-travel"
            errors.append(f"Member link {linked_id} has {count} {kind} lines")

    if errors:
        raise LedgerValidationError(errors)

    return expenses


def ledger_totals(expenses: list[ExpenseLine]) -> dict[str, Decimal]:
    """Estimated, actual and paid sums over a ledger."""
    return {
        "estimated": sum((e.estimated_amount for e in expenses), Decimal("0")),
        "actual": sum((e.actual_amount for e in expenses), Decimal("0")),
        "paid": sum((e.paid_amount for e in expenses), Decimal("0")),
    }
