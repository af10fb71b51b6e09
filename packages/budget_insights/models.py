"""Data models for ``budget_insights``.

The canonical transaction and bank account are pydantic models so that the
import pipeline cannot emit a record that breaks the amount/description
invariants. Derived analytics snapshots (patterns, insights, the daily
budget) are frozen dataclasses: they are built only by this package and are
replaced wholesale on every analysis pass.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, field_validator

from .config import EXHAUSTED_PERCENTAGE

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class TransactionType(StrEnum):
    INCOME = "income"
    EXPENSE = "expense"


class Category(StrEnum):
    FOOD = "food"
    TRANSPORTATION = "transportation"
    ENTERTAINMENT = "entertainment"
    UTILITIES = "utilities"
    RENT = "rent"
    HEALTHCARE = "healthcare"
    SHOPPING = "shopping"
    EDUCATION = "education"
    SALARY = "salary"
    INVESTMENT = "investment"
    OTHER = "other"


class Trend(StrEnum):
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


class IncomeFrequency(StrEnum):
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    IRREGULAR = "irregular"


class InsightType(StrEnum):
    WARNING = "warning"
    SUGGESTION = "suggestion"
    ACHIEVEMENT = "achievement"


class Priority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {Priority.HIGH: 3, Priority.MEDIUM: 2, Priority.LOW: 1}


class AccountType(StrEnum):
    CHECKING = "checking"
    SAVINGS = "savings"
    CREDIT = "credit"


# ---------------------------------------------------------------------------
# Canonical records
# ---------------------------------------------------------------------------


class Transaction(BaseModel):
    """A normalized, schema-independent transaction.

    ``amount`` is always the absolute value; the direction of money lives in
    ``type``. ``is_recurring`` is only ever set by
    :func:`budget_insights.patterns.mark_recurring`, never by the importer.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str
    account_id: str = ""
    date: datetime
    description: str
    amount: Decimal
    type: TransactionType
    category: Category = Category.OTHER
    is_recurring: bool = False
    merchant_name: str | None = None
    location: str | None = None
    notes: str | None = None

    @field_validator("description")
    @classmethod
    def _description_non_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("description must be non-empty")
        return v

    @field_validator("amount")
    @classmethod
    def _amount_non_negative(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("amount must be stored as an absolute value")
        return v

    @field_validator("merchant_name", "location", "notes")
    @classmethod
    def _blank_to_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v or None

    @property
    def merchant_key(self) -> str:
        """Grouping key for recurring detection: merchant, else description."""

        return self.merchant_name or self.description

    @property
    def is_expense(self) -> bool:
        return self.type is TransactionType.EXPENSE

    @property
    def is_income(self) -> bool:
        return self.type is TransactionType.INCOME


class BankAccount(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str
    bank_name: str
    account_number: str = ""
    account_type: AccountType = AccountType.CHECKING
    balance: Decimal = Decimal("0")
    currency: str = "USD"
    last_sync: datetime | None = None

    @field_validator("id", "bank_name")
    @classmethod
    def _required_text(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must be non-empty")
        return v


# ---------------------------------------------------------------------------
# Import results
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class AccountInfo:
    """Partial account fields recovered from an imported file."""

    bank_name: str
    account_number: str | None = None


@dataclass(frozen=True, slots=True)
class ImportResult:
    transactions: list[Transaction] = field(default_factory=list)
    account_info: AccountInfo | None = None
    errors: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class FileValidation:
    valid: bool
    error: str | None = None


# ---------------------------------------------------------------------------
# Derived analytics snapshots
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RecurringGroup:
    merchant_or_source: str
    mean_amount: Decimal
    occurrence_count: int


@dataclass(frozen=True, slots=True)
class SpendingPattern:
    """Per-category spending over the trailing window.

    ``average_monthly`` holds the trailing-30-day total for the category, not
    an average over several months.
    """

    category: Category
    average_monthly: Decimal
    trend: Trend
    unusual_activity: bool
    recurring_expenses: tuple[Transaction, ...] = ()


@dataclass(frozen=True, slots=True)
class IncomePattern:
    """Per-source income; ``average_monthly`` is the 90-day total divided by 3.

    ``frequency`` and ``consistency`` are fixed placeholders.
    """

    source: str
    average_monthly: Decimal
    frequency: IncomeFrequency
    consistency: int
    next_expected_date: datetime | None = None


@dataclass(frozen=True, slots=True)
class Insight:
    id: str
    type: InsightType
    title: str
    description: str
    actionable: bool
    priority: Priority
    created_at: datetime
    category: Category | None = None
    potential_savings: Decimal | None = None

    def __post_init__(self) -> None:
        if self.potential_savings is not None and self.potential_savings < 0:
            raise ValueError("potential_savings must be non-negative")


@dataclass(frozen=True, slots=True)
class DailyBudget:
    date: datetime
    available_to_spend: Decimal
    spent: Decimal
    remaining: Decimal
    percentage_used: Decimal

    @property
    def exhausted(self) -> bool:
        """True when nothing is left to spend today."""

        return self.available_to_spend <= 0 or self.percentage_used >= EXHAUSTED_PERCENTAGE

    @property
    def display_percentage(self) -> Decimal:
        """Percentage clamped to ``0..100`` for presentation layers."""

        if self.exhausted:
            return EXHAUSTED_PERCENTAGE
        return max(Decimal("0"), self.percentage_used)


__all__ = [
    "AccountInfo",
    "AccountType",
    "BankAccount",
    "Category",
    "DailyBudget",
    "FileValidation",
    "ImportResult",
    "IncomeFrequency",
    "IncomePattern",
    "Insight",
    "InsightType",
    "Priority",
    "RecurringGroup",
    "SpendingPattern",
    "Transaction",
    "TransactionType",
    "Trend",
]
