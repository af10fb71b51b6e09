"""Builders for canonical transactions used across the analytics tests."""

from __future__ import annotations

import itertools
from datetime import datetime
from decimal import Decimal

from budget_insights.models import Category, Transaction, TransactionType

_ids = itertools.count(1)


def tx(
    amount: str | int | Decimal,
    date: datetime,
    *,
    category: Category = Category.OTHER,
    type: TransactionType = TransactionType.EXPENSE,
    description: str | None = None,
    merchant: str | None = None,
    account_id: str = "",
    is_recurring: bool = False,
) -> Transaction:
    """Build a transaction; the description defaults to the merchant name."""

    n = next(_ids)
    return Transaction(
        id=f"t{n}",
        account_id=account_id,
        date=date,
        description=description or merchant or f"TX {n}",
        amount=Decimal(str(amount)),
        type=type,
        category=category,
        merchant_name=merchant,
        is_recurring=is_recurring,
    )


def expense(amount, date, category: Category = Category.OTHER, **kw) -> Transaction:
    return tx(amount, date, category=category, type=TransactionType.EXPENSE, **kw)


def income(amount, date, **kw) -> Transaction:
    kw.setdefault("category", Category.SALARY)
    return tx(amount, date, type=TransactionType.INCOME, **kw)
