"""Daily spendable amount derived from monthly income and expenses."""

from __future__ import annotations

import calendar
from collections.abc import Sequence
from datetime import datetime, time
from decimal import Decimal

from .config import EXHAUSTED_PERCENTAGE
from .models import DailyBudget, IncomePattern, Transaction
from .patterns import total


def days_remaining_in_month(now: datetime) -> int:
    """Days left in the month, counting today."""

    days_in_month = calendar.monthrange(now.year, now.month)[1]
    return days_in_month - now.day + 1


def compute_daily_budget(
    transactions: Sequence[Transaction],
    income_patterns: Sequence[IncomePattern],
    *,
    now: datetime,
) -> DailyBudget:
    """Compute today's budget snapshot.

    ``available_to_spend`` spreads what is left of the expected monthly income
    (sum of the income patterns) after this month's expenses over the
    remaining days. ``percentage_used`` is ``spent / available × 100``; with a
    negative ``available`` the raw quotient is kept, and with nothing
    available it is 100. Use :attr:`DailyBudget.exhausted` and
    :attr:`DailyBudget.display_percentage` for presentation.
    """

    month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    today_start = datetime.combine(now.date(), time.min)
    today_end = datetime.combine(now.date(), time.max)

    expenses = [t for t in transactions if t.is_expense]
    monthly_income = sum((p.average_monthly for p in income_patterns), Decimal("0"))
    month_expenses = total(t for t in expenses if month_start <= t.date <= now)

    available = (monthly_income - month_expenses) / days_remaining_in_month(now)
    spent = total(t for t in expenses if today_start <= t.date <= today_end)

    if available == 0:
        percentage = EXHAUSTED_PERCENTAGE
    else:
        percentage = spent / available * 100

    return DailyBudget(
        date=now,
        available_to_spend=available,
        spent=spent,
        remaining=available - spent,
        percentage_used=percentage,
    )


__all__ = ["compute_daily_budget", "days_remaining_in_month"]
