"""Public interface for the ``budget_insights`` package.

This module re-exports the import pipeline, the categorizer, the analytics
functions and the public models as the stable import surface. There is no
runtime logic here.
"""

from .api import AnalyticsContext
from .budget import compute_daily_budget
from .categorize import categorize, categorize_transactions
from .ingest.detect import detect
from .ingest.importer import import_statement, validate_file
from .ingest.rows import parse_line
from .ingest.schemas import SCHEMAS, BankSchema, get_schema
from .insights import generate_insights, sort_insights
from .models import (
    AccountInfo,
    BankAccount,
    Category,
    DailyBudget,
    FileValidation,
    ImportResult,
    IncomePattern,
    Insight,
    InsightType,
    Priority,
    RecurringGroup,
    SpendingPattern,
    Transaction,
    TransactionType,
)
from .normalizers import extract_merchant_name, parse_amount, parse_date
from .patterns import (
    analyze_income_patterns,
    analyze_spending_patterns,
    identify_recurring,
    mark_recurring,
)

__all__ = [
    # Import pipeline
    "SCHEMAS",
    "BankSchema",
    "detect",
    "extract_merchant_name",
    "get_schema",
    "import_statement",
    "parse_amount",
    "parse_date",
    "parse_line",
    "validate_file",
    # Categorization
    "categorize",
    "categorize_transactions",
    # Analytics
    "AnalyticsContext",
    "analyze_income_patterns",
    "analyze_spending_patterns",
    "compute_daily_budget",
    "generate_insights",
    "identify_recurring",
    "mark_recurring",
    "sort_insights",
    # Models / types
    "AccountInfo",
    "BankAccount",
    "Category",
    "DailyBudget",
    "FileValidation",
    "ImportResult",
    "IncomePattern",
    "Insight",
    "InsightType",
    "Priority",
    "RecurringGroup",
    "SpendingPattern",
    "Transaction",
    "TransactionType",
]
