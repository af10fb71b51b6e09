"""Rule-based financial insights.

Each detector is an independent pure function ``(transactions, now) ->
list[Insight]`` over the full transaction history. :func:`generate_insights`
runs them in ``DETECTORS`` order, concatenates their output and stable-sorts
by priority (high first), so ties keep detector emission order.

Insight ids combine the detector name, the evaluation time and the subject,
making repeated runs over the same input and ``now`` identical.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from datetime import datetime, timedelta
from decimal import Decimal
from typing import TypeAlias

from dateutil.relativedelta import relativedelta

from .categorize import category_label
from .config import (
    BUDGET_RULE_NEEDS,
    BUDGET_RULE_SAVINGS,
    BUDGET_RULE_WANTS,
    HIGH_SPENDING_RATIO,
    INCOME_DIVERSIFICATION_MIN_COUNT,
    INCOME_LOOKBACK_MONTHS,
    INCOME_VARIABILITY_COEFFICIENT,
    INCOME_VARIABILITY_MIN_BUCKETS,
    INSIGHT_WINDOW_DAYS,
    SHOPPING_LIMIT,
    SHOPPING_SAVINGS_RATE,
    SMALL_FOOD_AMOUNT,
    SMALL_FOOD_MIN_COUNT,
    SMALL_FOOD_SAVINGS_RATE,
    SUBSCRIPTION_MONTHS_PER_YEAR,
    UNUSUAL_SPEND_BASELINE_MONTHS,
    UNUSUAL_SPEND_MULTIPLIER,
)
from .logging_setup import get_logger
from .models import Category, Insight, InsightType, Priority, Transaction
from .patterns import group_by, identify_recurring, mean_and_variance, since, total

_logger = get_logger("budget_insights.insights")

Detector: TypeAlias = Callable[[Sequence[Transaction], datetime], list[Insight]]

# Categories compared month over month by the unusual-spend detector.
UNUSUAL_SPEND_CATEGORIES: tuple[Category, ...] = (
    Category.FOOD,
    Category.TRANSPORTATION,
    Category.ENTERTAINMENT,
    Category.UTILITIES,
    Category.SHOPPING,
    Category.HEALTHCARE,
)


def _insight_id(kind: str, now: datetime, subject: str | None = None) -> str:
    stamp = now.strftime("%Y%m%dT%H%M%S")
    return f"insight-{kind}-{stamp}" + (f"-{subject}" if subject else "")


def _money(value: Decimal) -> str:
    return f"${value:,.2f}"


def _month_start(now: datetime) -> datetime:
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def _expenses(
    transactions: Iterable[Transaction], category: Category | None = None
) -> list[Transaction]:
    return [
        t for t in transactions if t.is_expense and (category is None or t.category == category)
    ]


def _income(transactions: Iterable[Transaction]) -> list[Transaction]:
    return [t for t in transactions if t.is_income]


def _recent(transactions: Iterable[Transaction], now: datetime) -> list[Transaction]:
    return since(transactions, now - timedelta(days=INSIGHT_WINDOW_DAYS))


# ---------------------------------------------------------------------------
# Spending detectors
# ---------------------------------------------------------------------------


def detect_small_food_purchases(
    transactions: Sequence[Transaction], now: datetime
) -> list[Insight]:
    """Many small food purchases in the last 30 days."""

    recent_food = _recent(_expenses(transactions, Category.FOOD), now)
    small = [t for t in recent_food if t.amount < SMALL_FOOD_AMOUNT]
    if len(small) <= SMALL_FOOD_MIN_COUNT:
        return []
    small_total = total(small)
    return [
        Insight(
            id=_insight_id("small-food", now),
            type=InsightType.SUGGESTION,
            title="Frequent small food purchases",
            description=(
                f"You made {len(small)} small food purchases in the last month "
                f"({_money(small_total)}). Consider cooking at home or bringing your own coffee."
            ),
            category=Category.FOOD,
            potential_savings=small_total * SMALL_FOOD_SAVINGS_RATE,
            actionable=True,
            priority=Priority.MEDIUM,
            created_at=now,
        )
    ]


def detect_entertainment_subscriptions(
    transactions: Sequence[Transaction], now: datetime
) -> list[Insight]:
    """One insight per recurring entertainment charge in the last 30 days."""

    recent = _recent(_expenses(transactions, Category.ENTERTAINMENT), now)
    return [
        Insight(
            id=_insight_id("subscription", now, group.merchant_or_source),
            type=InsightType.SUGGESTION,
            title="Possibly unused subscription",
            description=(
                f"You have a recurring charge of {_money(group.mean_amount)} at "
                f"{group.merchant_or_source}. Are you really using it?"
            ),
            category=Category.ENTERTAINMENT,
            potential_savings=group.mean_amount * SUBSCRIPTION_MONTHS_PER_YEAR,
            actionable=True,
            priority=Priority.HIGH,
            created_at=now,
        )
        for group in identify_recurring(recent)
    ]


def detect_excessive_shopping(transactions: Sequence[Transaction], now: datetime) -> list[Insight]:
    shopping_total = total(_recent(_expenses(transactions, Category.SHOPPING), now))
    if shopping_total <= SHOPPING_LIMIT:
        return []
    return [
        Insight(
            id=_insight_id("excessive-shopping", now),
            type=InsightType.WARNING,
            title="High shopping spend",
            description=(
                f"You spent {_money(shopping_total)} on shopping in the last month. "
                "Consider setting a monthly shopping budget."
            ),
            category=Category.SHOPPING,
            potential_savings=shopping_total * SHOPPING_SAVINGS_RATE,
            actionable=True,
            priority=Priority.HIGH,
            created_at=now,
        )
    ]


def detect_recurring_expenses(transactions: Sequence[Transaction], now: datetime) -> list[Insight]:
    """Summarize every recurring expense found in the history."""

    recurring_total = sum(
        (g.mean_amount for g in identify_recurring(_expenses(transactions))), Decimal("0")
    )
    if recurring_total <= 0:
        return []
    return [
        Insight(
            id=_insight_id("recurring-expenses", now),
            type=InsightType.SUGGESTION,
            title="Recurring expenses identified",
            description=(
                f"You have {_money(recurring_total)} in recurring monthly expenses. "
                "Review whether all of them are necessary."
            ),
            actionable=True,
            priority=Priority.MEDIUM,
            created_at=now,
        )
    ]


def detect_unusual_category_spending(
    transactions: Sequence[Transaction], now: datetime
) -> list[Insight]:
    """Month-to-date spend well above the average of the two previous months."""

    this_month = _month_start(now)
    baseline_starts = [
        this_month - relativedelta(months=n) for n in range(1, UNUSUAL_SPEND_BASELINE_MONTHS + 1)
    ]

    insights: list[Insight] = []
    for category in UNUSUAL_SPEND_CATEGORIES:
        expenses = _expenses(transactions, category)
        current = total(t for t in expenses if t.date >= this_month)
        baseline_totals = []
        end = this_month
        for start in baseline_starts:
            baseline_totals.append(total(t for t in expenses if start <= t.date < end))
            end = start
        average = sum(baseline_totals, Decimal("0")) / len(baseline_totals)

        if average > 0 and current > average * UNUSUAL_SPEND_MULTIPLIER:
            label = category_label(category).lower()
            insights.append(
                Insight(
                    id=_insight_id("unusual", now, category.value),
                    type=InsightType.WARNING,
                    title=f"High spending on {label}",
                    description=(
                        f"You spent {_money(current)} on {label} this month, "
                        f"{_money(current - average)} more than your average."
                    ),
                    category=category,
                    actionable=True,
                    priority=Priority.HIGH,
                    created_at=now,
                )
            )
    return insights


def _month_totals(transactions: Sequence[Transaction], now: datetime) -> tuple[Decimal, Decimal]:
    this_month = _month_start(now)
    current = [t for t in transactions if t.date >= this_month]
    return total(_expenses(current)), total(_income(current))


def detect_high_spending_ratio(transactions: Sequence[Transaction], now: datetime) -> list[Insight]:
    expenses, income = _month_totals(transactions, now)
    if income <= 0 or expenses / income <= HIGH_SPENDING_RATIO:
        return []
    ratio = expenses / income * 100
    return [
        Insight(
            id=_insight_id("high-spending", now),
            type=InsightType.WARNING,
            title="Very high spending level",
            description=(
                f"You are spending {ratio:.0f}% of your income. "
                "Try to save at least 10-20%."
            ),
            actionable=True,
            priority=Priority.HIGH,
            created_at=now,
        )
    ]


def suggest_budget_rule(transactions: Sequence[Transaction], now: datetime) -> list[Insight]:
    """50/30/20 split of this month's income."""

    _, income = _month_totals(transactions, now)
    if income <= 0:
        return []
    needs = income * BUDGET_RULE_NEEDS
    wants = income * BUDGET_RULE_WANTS
    savings = income * BUDGET_RULE_SAVINGS
    return [
        Insight(
            id=_insight_id("budget-rule", now),
            type=InsightType.SUGGESTION,
            title="Apply the 50/30/20 rule",
            description=(
                f"For your income of {_money(income)}, aim for {_money(needs)} on needs, "
                f"{_money(wants)} on wants and {_money(savings)} on savings."
            ),
            actionable=True,
            priority=Priority.MEDIUM,
            created_at=now,
        )
    ]


# ---------------------------------------------------------------------------
# Income detectors
# ---------------------------------------------------------------------------


def _recent_income(transactions: Sequence[Transaction], now: datetime) -> list[Transaction]:
    return since(_income(transactions), now - relativedelta(months=INCOME_LOOKBACK_MONTHS))


def analyze_income_opportunities(
    transactions: Sequence[Transaction], now: datetime
) -> list[Insight]:
    """Income variability and diversification suggestions.

    Nothing is emitted when there is no income in the lookback window.
    """

    income = _recent_income(transactions, now)
    if not income:
        return []

    insights: list[Insight] = []
    monthly = [total(txs) for txs in group_by(income, lambda t: t.date.strftime("%Y-%m")).values()]
    if len(monthly) >= INCOME_VARIABILITY_MIN_BUCKETS:
        mean, variance = mean_and_variance(monthly)
        if variance > mean * INCOME_VARIABILITY_COEFFICIENT:
            insights.append(
                Insight(
                    id=_insight_id("income-variability", now),
                    type=InsightType.SUGGESTION,
                    title="Variable income detected",
                    description=(
                        "Your income varies significantly from month to month. Consider "
                        "more stable income sources or building an emergency fund."
                    ),
                    actionable=True,
                    priority=Priority.MEDIUM,
                    created_at=now,
                )
            )

    if len(income) < INCOME_DIVERSIFICATION_MIN_COUNT:
        insights.append(
            Insight(
                id=_insight_id("additional-income", now),
                type=InsightType.SUGGESTION,
                title="Consider additional income",
                description=(
                    "Freelance work, selling unused items or investing could "
                    "improve your financial position."
                ),
                actionable=True,
                priority=Priority.LOW,
                created_at=now,
            )
        )
    return insights


def detect_recurring_income(transactions: Sequence[Transaction], now: datetime) -> list[Insight]:
    sources = identify_recurring(_recent_income(transactions, now))
    if not sources:
        return []
    recurring_total = sum((s.mean_amount for s in sources), Decimal("0"))
    return [
        Insight(
            id=_insight_id("recurring-income", now),
            type=InsightType.ACHIEVEMENT,
            title="Stable recurring income",
            description=(
                f"You have {_money(recurring_total)} in recurring monthly income. Nice work!"
            ),
            actionable=False,
            priority=Priority.LOW,
            created_at=now,
        )
    ]


DETECTORS: tuple[Detector, ...] = (
    detect_small_food_purchases,
    detect_entertainment_subscriptions,
    detect_excessive_shopping,
    detect_recurring_expenses,
    detect_unusual_category_spending,
    detect_high_spending_ratio,
    suggest_budget_rule,
    analyze_income_opportunities,
    detect_recurring_income,
)


def sort_insights(insights: Iterable[Insight]) -> list[Insight]:
    """Stable sort by priority, highest first."""

    return sorted(insights, key=lambda i: -i.priority.rank)


def generate_insights(
    transactions: Sequence[Transaction],
    *,
    now: datetime,
    detectors: Sequence[Detector] = DETECTORS,
) -> list[Insight]:
    """Run every detector over ``transactions`` and return sorted insights."""

    insights: list[Insight] = []
    for detector in detectors:
        found = detector(transactions, now)
        if found:
            _logger.debug("%s produced %d insight(s)", detector.__name__, len(found))
        insights.extend(found)
    return sort_insights(insights)


__all__ = [
    "DETECTORS",
    "UNUSUAL_SPEND_CATEGORIES",
    "Detector",
    "analyze_income_opportunities",
    "detect_entertainment_subscriptions",
    "detect_excessive_shopping",
    "detect_high_spending_ratio",
    "detect_recurring_expenses",
    "detect_recurring_income",
    "detect_small_food_purchases",
    "detect_unusual_category_spending",
    "generate_insights",
    "sort_insights",
    "suggest_budget_rule",
]
