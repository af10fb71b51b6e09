from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

import pydantic
import pytest

from budget_insights import AnalyticsContext, BankAccount, Category

from tests.helpers.transactions import expense, income

CHASE_CSV = (
    "Posting Date,Description,Type,Amount\n"
    "06/05/2025,NETFLIX.COM,DEBIT,-15.99\n"
    "07/05/2025,NETFLIX.COM,DEBIT,-15.99\n"
    "08/05/2025,NETFLIX.COM,DEBIT,-15.99\n"
    "08/10/2025,STARBUCKS #1,DEBIT,-4.50\n"
    "08/01/2025,ACME PAYROLL,CREDIT,3000.00\n"
)


def test_import_file_appends_transactions():
    ctx = AnalyticsContext()
    result = ctx.import_file(CHASE_CSV, account_id="checking")

    assert result.errors == []
    assert len(ctx.transactions) == 5
    assert {t.account_id for t in ctx.transactions} == {"checking"}


def test_refresh_replaces_every_snapshot(now):
    ctx = AnalyticsContext()
    ctx.import_file(CHASE_CSV)

    ctx.refresh(now=now)

    recurring = [t.description for t in ctx.transactions if t.is_recurring]
    assert recurring == ["NETFLIX.COM"] * 3
    assert {p.category for p in ctx.spending_patterns} == {Category.ENTERTAINMENT, Category.FOOD}
    (salary,) = ctx.income_patterns
    assert salary.average_monthly == Decimal("1000")
    assert ctx.insights
    assert ctx.daily_budget is not None
    assert ctx.daily_budget.date == now

    before = ctx.insights
    ctx.refresh(now=now)
    assert ctx.insights == before
    assert ctx.insights is not before


def test_daily_budget_uses_latest_income_patterns(now):
    ctx = AnalyticsContext([income("3100", datetime(2025, 8, 1), merchant="ACME")])

    without_patterns = ctx.compute_daily_budget(now=now)
    assert without_patterns.available_to_spend == 0

    ctx.analyze_income_patterns(now=now)
    budget = ctx.compute_daily_budget(now=now)
    # One payment in 90 days averages to a third per month, spread over 12 days.
    assert budget.available_to_spend == Decimal("3100") / 3 / 12


def test_transaction_crud():
    t = expense("10", datetime(2025, 8, 1), Category.FOOD, merchant="CAFE")
    ctx = AnalyticsContext([t])

    updated = ctx.update_transaction(t.id, category=Category.SHOPPING, notes="gift")
    assert updated.category is Category.SHOPPING
    assert ctx.transactions == (updated,)

    with pytest.raises(pydantic.ValidationError):
        ctx.update_transaction(t.id, amount=Decimal("-5"))
    assert ctx.transactions == (updated,)

    ctx.remove_transaction(t.id)
    assert ctx.transactions == ()
    with pytest.raises(KeyError):
        ctx.remove_transaction(t.id)


def test_snapshots_are_not_live_views():
    ctx = AnalyticsContext()
    snapshot = ctx.transactions
    ctx.add_transaction(expense("1", datetime(2025, 8, 1)))
    assert snapshot == ()
    assert len(ctx.transactions) == 1


def test_removing_an_account_removes_its_transactions():
    ctx = AnalyticsContext()
    ctx.add_account(BankAccount(id="a1", bank_name="Chase"))
    ctx.add_account(BankAccount(id="a2", bank_name="Citi"))
    ctx.add_transactions(
        [
            expense("1", datetime(2025, 8, 1), account_id="a1"),
            expense("2", datetime(2025, 8, 1), account_id="a2"),
        ]
    )

    ctx.update_account("a1", balance=Decimal("250.00"))
    assert ctx.accounts[0].balance == Decimal("250.00")

    ctx.remove_account("a1")

    assert [a.id for a in ctx.accounts] == ["a2"]
    assert [t.account_id for t in ctx.transactions] == ["a2"]
    with pytest.raises(KeyError):
        ctx.update_account("a1", balance=Decimal("0"))


def test_account_updates_are_validated():
    ctx = AnalyticsContext(accounts=[BankAccount(id="a1", bank_name="Chase")])

    with pytest.raises(pydantic.ValidationError):
        ctx.update_account("a1", bank_name="  ")
    with pytest.raises(pydantic.ValidationError):
        ctx.update_account("a1", balance="abc")

    assert ctx.accounts == (BankAccount(id="a1", bank_name="Chase"),)


def test_timezone_aware_now_uses_its_wall_clock(now):
    ctx = AnalyticsContext()
    ctx.import_file(CHASE_CSV)

    ctx.refresh(now=now.replace(tzinfo=timezone.utc))

    assert ctx.daily_budget is not None
    assert ctx.daily_budget.date == now
    assert ctx.insights == AnalyticsContext(ctx.transactions).generate_insights(now=now)
