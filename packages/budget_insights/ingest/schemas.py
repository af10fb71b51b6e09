"""Catalog of supported bank export schemas.

Each :class:`BankSchema` maps a bank's CSV column names onto the canonical
fields. Candidate column lists are ordered: the first column with a usable
value wins. ``canonical_header`` is the header row a typical export from
that bank carries; auto-detection recognizes every schema from it.

Catalog order is the auto-detection precedence order.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class BankSchema:
    """Column mapping for one bank's CSV export.

    ``amount_columns`` holds either a single signed amount column or a
    ``(debit, credit)`` pair. ``type_column`` names an explicit
    debit/credit indicator when the export has one.
    """

    key: str
    name: str
    date_columns: tuple[str, ...]
    description_columns: tuple[str, ...]
    amount_columns: tuple[str, ...]
    type_column: str | None
    account_columns: tuple[str, ...]
    canonical_header: tuple[str, ...]

    def __post_init__(self) -> None:
        if len(self.amount_columns) not in (1, 2):
            raise ValueError(f"{self.key}: expected one or two amount columns")

    @property
    def has_split_amounts(self) -> bool:
        return len(self.amount_columns) == 2


BANK_OF_AMERICA = BankSchema(
    key="bank_of_america",
    name="Bank of America",
    date_columns=("Posted Date", "Date"),
    description_columns=("Payee", "Description"),
    amount_columns=("Amount",),
    type_column=None,
    account_columns=("Account",),
    canonical_header=("Posted Date", "Reference Number", "Payee", "Address", "Amount"),
)

CHASE = BankSchema(
    key="chase",
    name="Chase",
    date_columns=("Posting Date", "Transaction Date"),
    description_columns=("Description",),
    amount_columns=("Amount",),
    type_column="Type",
    account_columns=("Account",),
    canonical_header=(
        "Details",
        "Posting Date",
        "Description",
        "Amount",
        "Type",
        "Balance",
        "Check or Slip #",
    ),
)

WELLS_FARGO = BankSchema(
    key="wells_fargo",
    name="Wells Fargo",
    date_columns=("Date",),
    description_columns=("Description", "Merchant"),
    amount_columns=("Amount",),
    type_column=None,
    account_columns=("Account Number",),
    canonical_header=("Date", "Amount", "Description", "Merchant", "Account Number"),
)

CITI = BankSchema(
    key="citi",
    name="Citi",
    date_columns=("Date",),
    description_columns=("Description",),
    amount_columns=("Debit", "Credit"),
    type_column=None,
    account_columns=(),
    canonical_header=("Status", "Date", "Description", "Debit", "Credit"),
)

CAPITAL_ONE = BankSchema(
    key="capital_one",
    name="Capital One",
    date_columns=("Transaction Date",),
    description_columns=("Description",),
    amount_columns=("Debit", "Credit"),
    type_column=None,
    account_columns=("Account Number",),
    canonical_header=(
        "Transaction Date",
        "Posted Date",
        "Account Number",
        "Description",
        "Category",
        "Debit",
        "Credit",
    ),
)

AMERICAN_EXPRESS = BankSchema(
    key="american_express",
    name="American Express",
    date_columns=("Date",),
    description_columns=("Description",),
    amount_columns=("Amount",),
    type_column=None,
    account_columns=("Card Member",),
    canonical_header=(
        "Date",
        "Description",
        "Card Member",
        "Account #",
        "Amount",
        "Extended Details",
        "Appears On Your Statement As",
        "Address",
        "City/State",
        "Zip Code",
        "Country",
        "Reference",
        "Category",
    ),
)

SCHEMAS: tuple[BankSchema, ...] = (
    BANK_OF_AMERICA,
    CHASE,
    WELLS_FARGO,
    CITI,
    CAPITAL_ONE,
    AMERICAN_EXPRESS,
)

_BY_KEY = {s.key: s for s in SCHEMAS}


def get_schema(key: str) -> BankSchema:
    """Return the schema registered under ``key`` (e.g. ``"chase"``).

    Raises ``KeyError`` listing the known keys when ``key`` is unknown.
    """

    try:
        return _BY_KEY[key.strip().lower()]
    except KeyError:
        raise KeyError(f"unknown bank schema {key!r}; known: {', '.join(_BY_KEY)}") from None


__all__ = [
    "AMERICAN_EXPRESS",
    "BANK_OF_AMERICA",
    "CAPITAL_ONE",
    "CHASE",
    "CITI",
    "SCHEMAS",
    "WELLS_FARGO",
    "BankSchema",
    "get_schema",
]
