"""Field normalization: raw CSV cells → typed transaction values.

Helpers convert the date, amount and debit/credit indicators of a bank export
into canonical values according to a :class:`BankSchema`, and derive a short
merchant name from free-form descriptions.

Amount parsing never raises: an unparseable amount becomes ``Decimal(0)``,
which the importer reads as "no amount" and drops the row without an error.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from datetime import datetime
from decimal import Decimal, InvalidOperation

from dateutil import parser as date_parser

from .config import EXPENSE_TYPE_KEYWORDS, MERCHANT_NAME_MAX_WORDS
from .errors import AmbiguousAmountError
from .ingest.schemas import BankSchema
from .models import TransactionType

ZERO = Decimal("0")

# ---------------------------------------------------------------------------
# Amounts
# ---------------------------------------------------------------------------

_CURRENCY_SYMBOLS = "$€£¥"
_AMOUNT_NOISE_RE = re.compile(rf"[{_CURRENCY_SYMBOLS},\s]")


def parse_amount(raw: str | None) -> Decimal:
    """Parse a bank amount string into a signed ``Decimal``.

    Currency symbols, thousands separators and whitespace are removed; a value
    wrapped in parentheses is negative (``"(45.00)"`` → ``-45.00``). Anything
    that still does not parse yields ``Decimal(0)``.
    """

    if raw is None:
        return ZERO
    s = _AMOUNT_NOISE_RE.sub("", raw)
    if not s:
        return ZERO

    negative = False
    # Strip leading sign and surrounding parentheses until stable so that
    # combinations like "-(1,234.56)" and "(-12)" are handled.
    while True:
        changed = False
        if s.startswith("+"):
            s = s[1:]
            changed = True
        elif s.startswith("-"):
            negative = True
            s = s[1:]
            changed = True
        if len(s) >= 2 and s.startswith("(") and s.endswith(")"):
            negative = True
            s = s[1:-1]
            changed = True
        if not changed:
            break

    try:
        d = Decimal(s)
    except InvalidOperation:
        return ZERO
    if not d.is_finite():
        return ZERO
    return -abs(d) if negative else d


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------

# Explicit fallbacks, tried in order after the generic parser. Groups are
# mapped to (year, month, day) by the index tuple.
_DATE_PATTERNS: tuple[tuple[re.Pattern[str], tuple[int, int, int]], ...] = (
    (re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$"), (3, 1, 2)),  # MM/DD/YYYY
    (re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$"), (1, 2, 3)),  # YYYY-MM-DD
    (re.compile(r"^(\d{1,2})-(\d{1,2})-(\d{4})$"), (3, 1, 2)),  # MM-DD-YYYY
)


# dateutil fills missing fields from its default. Parsing against two
# defaults that differ in year, month and day exposes any omitted field.
_FILL_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))


def _parse_full_date(s: str) -> datetime | None:
    try:
        first, second = (date_parser.parse(s, default=d) for d in _FILL_DEFAULTS)
    except (ValueError, OverflowError):
        return None
    if first.date() != second.date():
        return None
    # Statement dates are wall-clock dates; drop any offset.
    return first.replace(tzinfo=None)


def parse_date(raw: str | None) -> datetime | None:
    """Parse a statement date, returning ``None`` when nothing fits.

    The generic :mod:`dateutil` parser is tried first (month-first for
    ambiguous numeric dates) and only accepts strings that name a year, month
    and day, so the result never depends on the current date. The explicit
    ``MM/DD/YYYY``, ``YYYY-MM-DD`` and ``MM-DD-YYYY`` patterns follow, each
    validated by building a real ``datetime``.
    """

    if raw is None:
        return None
    s = raw.strip()
    if not s:
        return None

    parsed = _parse_full_date(s)
    if parsed is not None:
        return parsed

    for pattern, (yi, mi, di) in _DATE_PATTERNS:
        m = pattern.match(s)
        if not m:
            continue
        try:
            return datetime(int(m.group(yi)), int(m.group(mi)), int(m.group(di)))
        except ValueError:
            continue
    return None


# ---------------------------------------------------------------------------
# Row lookups
# ---------------------------------------------------------------------------


def cell(row: Mapping[str, str], column: str) -> str:
    """Return the trimmed value of ``column`` (case-insensitive) or ``""``."""

    return (row.get(column.strip().lower()) or "").strip()


def first_non_empty(row: Mapping[str, str], columns: Sequence[str]) -> str | None:
    for col in columns:
        v = cell(row, col)
        if v:
            return v
    return None


def extract_date(row: Mapping[str, str], columns: Sequence[str]) -> datetime | None:
    """Return the first candidate column whose value parses as a date."""

    for col in columns:
        v = cell(row, col)
        if not v:
            continue
        parsed = parse_date(v)
        if parsed is not None:
            return parsed
    return None


# ---------------------------------------------------------------------------
# Amount + type resolution
# ---------------------------------------------------------------------------


def _is_expense_type(value: str) -> bool:
    v = value.lower()
    return any(k in v for k in EXPENSE_TYPE_KEYWORDS)


def resolve_amount(row: Mapping[str, str], schema: BankSchema) -> tuple[Decimal, TransactionType]:
    """Resolve ``(absolute_amount, type)`` for a row.

    Precedence:

    1. An explicit type column with a value decides the type; the amount comes
       from the single amount column.
    2. A debit/credit column pair: a positive debit is an expense, else a
       positive credit is income; both zero returns a zero amount (row is
       dropped by the caller). Both positive raises
       :class:`AmbiguousAmountError`.
    3. A single signed amount column: negative is an expense.

    The returned amount is always non-negative; zero means "no amount".
    """

    if schema.type_column:
        type_value = cell(row, schema.type_column)
        if type_value:
            amount = parse_amount(cell(row, schema.amount_columns[0]))
            if _is_expense_type(type_value):
                kind = TransactionType.EXPENSE
            else:
                kind = TransactionType.INCOME
            return abs(amount), kind

    if schema.has_split_amounts:
        debit_col, credit_col = schema.amount_columns
        debit = parse_amount(cell(row, debit_col))
        credit = parse_amount(cell(row, credit_col))
        if debit > 0 and credit > 0:
            raise AmbiguousAmountError(
                f"both {debit_col} ({debit}) and {credit_col} ({credit}) are set"
            )
        if debit > 0:
            return debit, TransactionType.EXPENSE
        if credit > 0:
            return credit, TransactionType.INCOME
        return ZERO, TransactionType.EXPENSE

    amount = parse_amount(cell(row, schema.amount_columns[0]))
    kind = TransactionType.EXPENSE if amount < 0 else TransactionType.INCOME
    return abs(amount), kind


# ---------------------------------------------------------------------------
# Merchant names
# ---------------------------------------------------------------------------

_LEADING_TYPE_RE = re.compile(
    r"^(DEBIT|CREDIT|ACH|CHECK|TRANSFER|PAYMENT|WITHDRAWAL|DEPOSIT)\s*", re.IGNORECASE
)
_LONG_DIGITS_RE = re.compile(r"\d{4,}")
_REFERENCE_RE = re.compile(r"#\d+")


def extract_merchant_name(description: str) -> str | None:
    """Derive a short merchant name from a statement description.

    Drops one leading transaction-type token, long digit runs (dates and
    references) and ``#123`` reference numbers, then keeps the first three
    words. ``"DEBIT STARBUCKS #1 SEATTLE WA 12345"`` → ``"STARBUCKS SEATTLE WA"``.
    """

    cleaned = _LEADING_TYPE_RE.sub("", description.strip())
    cleaned = _LONG_DIGITS_RE.sub("", cleaned)
    cleaned = _REFERENCE_RE.sub("", cleaned)
    words = cleaned.split()
    return " ".join(words[:MERCHANT_NAME_MAX_WORDS]) or None


__all__ = [
    "cell",
    "extract_date",
    "extract_merchant_name",
    "first_non_empty",
    "parse_amount",
    "parse_date",
    "resolve_amount",
]
