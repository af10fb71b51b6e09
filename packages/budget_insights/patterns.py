"""Pattern analysis over the transaction history.

All functions are pure: they read a transaction collection (and an explicit
``now``) and return fresh snapshots. Running them again on the same input
gives the same output.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable, Iterable, Sequence
from datetime import datetime, timedelta
from decimal import Decimal
from typing import TypeVar

from .config import (
    DEFAULT_INCOME_CONSISTENCY,
    DEFAULT_INCOME_FREQUENCY,
    DEFAULT_SPENDING_TREND,
    INCOME_WINDOW_DAYS,
    INCOME_WINDOW_MONTHS,
    RECURRING_MIN_OCCURRENCES,
    RECURRING_VARIANCE_COEFFICIENT,
    SPENDING_WINDOW_DAYS,
    UNUSUAL_CATEGORY_THRESHOLD,
)
from .models import (
    Category,
    IncomeFrequency,
    IncomePattern,
    RecurringGroup,
    SpendingPattern,
    Transaction,
    Trend,
)

# ---------------------------------------------------------------------------
# Small aggregation helpers shared with the insight detectors
# ---------------------------------------------------------------------------


def total(transactions: Iterable[Transaction]) -> Decimal:
    return sum((t.amount for t in transactions), Decimal("0"))


def mean_and_variance(values: Sequence[Decimal]) -> tuple[Decimal, Decimal]:
    """Mean and population variance of a non-empty sequence."""

    n = len(values)
    mean = sum(values, Decimal("0")) / n
    variance = sum(((v - mean) ** 2 for v in values), Decimal("0")) / n
    return mean, variance


K = TypeVar("K")


def group_by(
    transactions: Iterable[Transaction], key: Callable[[Transaction], K]
) -> dict[K, list[Transaction]]:
    """Group preserving first-seen key order and input order within groups."""

    grouped: dict[K, list[Transaction]] = defaultdict(list)
    for t in transactions:
        grouped[key(t)].append(t)
    return dict(grouped)


def since(transactions: Iterable[Transaction], start: datetime) -> list[Transaction]:
    return [t for t in transactions if t.date >= start]


# ---------------------------------------------------------------------------
# Recurring detection
# ---------------------------------------------------------------------------


def identify_recurring(transactions: Iterable[Transaction]) -> list[RecurringGroup]:
    """Find merchants (or income sources) charged repeatedly at a steady amount.

    Transactions are grouped by merchant name, falling back to the
    description. A group with at least two occurrences is recurring when the
    population variance of its amounts is below ``0.1 × mean``.
    """

    recurring: list[RecurringGroup] = []
    for key, txs in group_by(transactions, lambda t: t.merchant_key).items():
        if len(txs) < RECURRING_MIN_OCCURRENCES:
            continue
        mean, variance = mean_and_variance([t.amount for t in txs])
        if variance < mean * RECURRING_VARIANCE_COEFFICIENT:
            recurring.append(
                RecurringGroup(merchant_or_source=key, mean_amount=mean, occurrence_count=len(txs))
            )
    return recurring


def _recurring_keys(transactions: Iterable[Transaction]) -> set[str]:
    return {g.merchant_or_source for g in identify_recurring(transactions)}


def mark_recurring(transactions: Sequence[Transaction]) -> list[Transaction]:
    """Return copies with ``is_recurring`` set from recurring detection.

    Expenses and income are analysed separately; a transaction is flagged
    when its merchant group is recurring within its own direction. All other
    transactions come back with ``is_recurring=False``.
    """

    expense_keys = _recurring_keys(t for t in transactions if t.is_expense)
    income_keys = _recurring_keys(t for t in transactions if t.is_income)

    out: list[Transaction] = []
    for t in transactions:
        keys = expense_keys if t.is_expense else income_keys
        flag = t.merchant_key in keys
        out.append(t if t.is_recurring == flag else t.model_copy(update={"is_recurring": flag}))
    return out


# ---------------------------------------------------------------------------
# Spending and income patterns
# ---------------------------------------------------------------------------


def analyze_spending_patterns(
    transactions: Sequence[Transaction], *, now: datetime
) -> list[SpendingPattern]:
    """Summarize expenses per category over the trailing 30 days.

    One pattern per category seen in the window, in first-seen order.
    ``recurring_expenses`` lists the in-window transactions that are flagged
    recurring or whose merchant is recurring across the whole expense history.
    """

    expenses = [t for t in transactions if t.is_expense]
    recurring_keys = _recurring_keys(expenses)
    window = since(expenses, now - timedelta(days=SPENDING_WINDOW_DAYS))

    patterns: list[SpendingPattern] = []
    for category, txs in group_by(window, lambda t: t.category).items():
        category_total = total(txs)
        patterns.append(
            SpendingPattern(
                category=Category(category),
                average_monthly=category_total,
                trend=Trend(DEFAULT_SPENDING_TREND),
                unusual_activity=category_total > UNUSUAL_CATEGORY_THRESHOLD,
                recurring_expenses=tuple(
                    t for t in txs if t.is_recurring or t.merchant_key in recurring_keys
                ),
            )
        )
    return patterns


def analyze_income_patterns(
    transactions: Sequence[Transaction], *, now: datetime
) -> list[IncomePattern]:
    """Summarize income per source over the trailing 90 days.

    ``average_monthly`` divides the 90-day total by three regardless of how
    much of the window the data actually covers.
    """

    window = since(
        (t for t in transactions if t.is_income), now - timedelta(days=INCOME_WINDOW_DAYS)
    )
    return [
        IncomePattern(
            source=source,
            average_monthly=total(txs) / INCOME_WINDOW_MONTHS,
            frequency=IncomeFrequency(DEFAULT_INCOME_FREQUENCY),
            consistency=DEFAULT_INCOME_CONSISTENCY,
        )
        for source, txs in group_by(window, lambda t: t.merchant_key).items()
    ]


__all__ = [
    "analyze_income_patterns",
    "analyze_spending_patterns",
    "group_by",
    "identify_recurring",
    "mark_recurring",
    "mean_and_variance",
    "since",
    "total",
]
