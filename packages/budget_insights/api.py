"""Caller-owned analytics context.

:class:`AnalyticsContext` holds the accounts and transactions of one user
session together with the latest analysis snapshots. Each analysis method
snapshots the transaction list, calls the matching pure function and replaces
its own snapshot wholesale; nothing is patched incrementally and nothing runs
automatically. Hosts call :meth:`AnalyticsContext.refresh` (or the individual
passes) after mutating transactions. Every pass takes an optional ``now``; a
timezone-aware value is reduced to its wall-clock time, like imported dates.

The context is not thread-safe. A multi-threaded host must serialize
mutations against in-flight passes.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import Any

from .budget import compute_daily_budget
from .ingest.importer import import_statement
from .insights import generate_insights as _generate_insights
from .logging_setup import get_logger
from .models import (
    BankAccount,
    DailyBudget,
    ImportResult,
    IncomePattern,
    Insight,
    SpendingPattern,
    Transaction,
)
from .patterns import analyze_income_patterns as _analyze_income_patterns
from .patterns import analyze_spending_patterns as _analyze_spending_patterns
from .patterns import mark_recurring

_logger = get_logger("budget_insights.api")


def _resolve_now(now: datetime | None) -> datetime:
    # Imported dates are naive wall-clock times; an aware "now" keeps its
    # wall clock and drops the offset the same way.
    if now is None:
        return datetime.now()
    return now.replace(tzinfo=None)


class AnalyticsContext:
    """Accounts, transactions and the derived snapshots built from them."""

    def __init__(
        self,
        transactions: Iterable[Transaction] = (),
        accounts: Iterable[BankAccount] = (),
    ) -> None:
        self._transactions: list[Transaction] = list(transactions)
        self._accounts: list[BankAccount] = list(accounts)
        self.spending_patterns: list[SpendingPattern] = []
        self.income_patterns: list[IncomePattern] = []
        self.insights: list[Insight] = []
        self.daily_budget: DailyBudget | None = None

    # ---- Read access -----------------------------------------------------

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        return tuple(self._transactions)

    @property
    def accounts(self) -> tuple[BankAccount, ...]:
        return tuple(self._accounts)

    def _index_of(self, items: list[Any], item_id: str, kind: str) -> int:
        for i, item in enumerate(items):
            if item.id == item_id:
                return i
        raise KeyError(f"unknown {kind} id: {item_id!r}")

    # ---- Accounts --------------------------------------------------------

    def add_account(self, account: BankAccount) -> None:
        self._accounts.append(account)

    def update_account(self, account_id: str, **updates: Any) -> BankAccount:
        """Replace fields on an account; the result is re-validated."""

        i = self._index_of(self._accounts, account_id, "account")
        updated = BankAccount.model_validate({**self._accounts[i].model_dump(), **updates})
        self._accounts[i] = updated
        return updated

    def remove_account(self, account_id: str) -> None:
        """Remove an account and every transaction that belongs to it."""

        i = self._index_of(self._accounts, account_id, "account")
        del self._accounts[i]
        self._transactions = [t for t in self._transactions if t.account_id != account_id]

    # ---- Transactions ----------------------------------------------------

    def add_transaction(self, transaction: Transaction) -> None:
        self._transactions.append(transaction)

    def add_transactions(self, transactions: Iterable[Transaction]) -> None:
        self._transactions.extend(transactions)

    def update_transaction(self, transaction_id: str, **updates: Any) -> Transaction:
        """Replace fields on a transaction; the result is re-validated."""

        i = self._index_of(self._transactions, transaction_id, "transaction")
        current = self._transactions[i]
        updated = Transaction.model_validate({**current.model_dump(), **updates})
        self._transactions[i] = updated
        return updated

    def remove_transaction(self, transaction_id: str) -> None:
        i = self._index_of(self._transactions, transaction_id, "transaction")
        del self._transactions[i]

    def import_file(
        self,
        content: str,
        bank_hint: str | None = None,
        *,
        account_id: str = "",
    ) -> ImportResult:
        """Import a delimited export and append its categorized transactions."""

        result = import_statement(content, bank_hint, account_id=account_id)
        self._transactions.extend(result.transactions)
        return result

    # ---- Analysis passes -------------------------------------------------

    def analyze_spending_patterns(self, *, now: datetime | None = None) -> list[SpendingPattern]:
        self.spending_patterns = _analyze_spending_patterns(
            self.transactions, now=_resolve_now(now)
        )
        return self.spending_patterns

    def analyze_income_patterns(self, *, now: datetime | None = None) -> list[IncomePattern]:
        self.income_patterns = _analyze_income_patterns(
            self.transactions, now=_resolve_now(now)
        )
        return self.income_patterns

    def generate_insights(self, *, now: datetime | None = None) -> list[Insight]:
        self.insights = _generate_insights(self.transactions, now=_resolve_now(now))
        return self.insights

    def compute_daily_budget(self, *, now: datetime | None = None) -> DailyBudget:
        """Budget from the current transactions and the latest income patterns.

        Run :meth:`analyze_income_patterns` first; with no income patterns the
        monthly income is zero.
        """

        self.daily_budget = compute_daily_budget(
            self.transactions, self.income_patterns, now=_resolve_now(now)
        )
        return self.daily_budget

    def refresh(self, *, now: datetime | None = None) -> None:
        """Flag recurring transactions, then rerun every analysis pass."""

        now = _resolve_now(now)
        self._transactions = mark_recurring(self.transactions)
        self.analyze_spending_patterns(now=now)
        self.analyze_income_patterns(now=now)
        self.generate_insights(now=now)
        self.compute_daily_budget(now=now)
        _logger.info(
            "analysis refreshed: %d transactions, %d spending patterns, %d income patterns, "
            "%d insights",
            len(self._transactions),
            len(self.spending_patterns),
            len(self.income_patterns),
            len(self.insights),
        )


__all__ = ["AnalyticsContext"]
