"""Named constants for the import pipeline and the analytics heuristics.

Every coefficient used by the pattern analyzer, the insight detectors and the
daily budget lives here so that thresholds are auditable in one place. Values
are fixed heuristics, not tuned models.
"""

from __future__ import annotations

from decimal import Decimal

# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------

LOG_LEVEL_ENV = "BUDGET_INSIGHTS_LOG_LEVEL"

# ---------------------------------------------------------------------------
# Import pipeline
# ---------------------------------------------------------------------------

MIN_FILE_LINES = 2
MIN_HEADER_COLUMNS = 2
# Rows with fewer fields than this are treated as empty and skipped.
MIN_ROW_FIELDS = 2
# Header width at or below which a generic date/amount export is Wells Fargo.
WELLS_FARGO_MAX_COLUMNS = 5
MERCHANT_NAME_MAX_WORDS = 3
TRANSACTION_ID_PREFIX = "imported"

# Substrings of a type-column value that mark the row as an expense.
EXPENSE_TYPE_KEYWORDS = ("debit", "withdrawal", "payment")

# ---------------------------------------------------------------------------
# Pattern analyzer
# ---------------------------------------------------------------------------

RECURRING_MIN_OCCURRENCES = 2
# A merchant group is recurring when variance < coefficient * mean amount.
RECURRING_VARIANCE_COEFFICIENT = Decimal("0.1")

SPENDING_WINDOW_DAYS = 30
# Absolute 30-day category total above which activity is flagged unusual.
UNUSUAL_CATEGORY_THRESHOLD = Decimal("1000")
DEFAULT_SPENDING_TREND = "stable"

INCOME_WINDOW_DAYS = 90
# The 90-day window is averaged as exactly three months.
INCOME_WINDOW_MONTHS = 3
DEFAULT_INCOME_FREQUENCY = "monthly"
DEFAULT_INCOME_CONSISTENCY = 85

# ---------------------------------------------------------------------------
# Insight detectors
# ---------------------------------------------------------------------------

INSIGHT_WINDOW_DAYS = 30

SMALL_FOOD_AMOUNT = Decimal("15")
SMALL_FOOD_MIN_COUNT = 15
SMALL_FOOD_SAVINGS_RATE = Decimal("0.6")

SUBSCRIPTION_MONTHS_PER_YEAR = 12

SHOPPING_LIMIT = Decimal("500")
SHOPPING_SAVINGS_RATE = Decimal("0.3")

UNUSUAL_SPEND_MULTIPLIER = Decimal("1.5")
UNUSUAL_SPEND_BASELINE_MONTHS = 2

HIGH_SPENDING_RATIO = Decimal("0.9")

BUDGET_RULE_NEEDS = Decimal("0.5")
BUDGET_RULE_WANTS = Decimal("0.3")
BUDGET_RULE_SAVINGS = Decimal("0.2")

INCOME_LOOKBACK_MONTHS = 3
INCOME_VARIABILITY_MIN_BUCKETS = 2
INCOME_VARIABILITY_COEFFICIENT = Decimal("0.3")
INCOME_DIVERSIFICATION_MIN_COUNT = 5

# ---------------------------------------------------------------------------
# Daily budget
# ---------------------------------------------------------------------------

# Stored percentage when nothing at all is available for the day.
EXHAUSTED_PERCENTAGE = Decimal("100")
