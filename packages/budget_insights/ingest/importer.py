"""Import a delimited bank export into canonical transactions.

Pipeline: header → :func:`detect` → :func:`parse_line` per row → field
normalization → optional categorization.

Failure modes
-------------
- Whole-file problems (fewer than two non-blank lines, unrecognized format)
  short-circuit: the result has no transactions and one descriptive error.
- Row problems (no valid date, no description, ambiguous debit/credit) are
  reported as ``"Line <n>: <message>"`` using the 1-based line number in the
  source text; the import continues with the next row.
- Rows whose amount resolves to zero are dropped silently.
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence

from pydantic import ValidationError

from ..categorize import categorize
from ..config import MIN_FILE_LINES, MIN_HEADER_COLUMNS, MIN_ROW_FIELDS, TRANSACTION_ID_PREFIX
from ..errors import EmptyFileError, ImportFormatError, RowParseError, UnknownBankFormatError
from ..logging_setup import get_logger
from ..models import AccountInfo, FileValidation, ImportResult, Transaction
from ..normalizers import (
    extract_date,
    extract_merchant_name,
    first_non_empty,
    resolve_amount,
)
from .detect import detect
from .rows import iter_data_lines, parse_line
from .schemas import BankSchema

_logger = get_logger("budget_insights.ingest.importer")


def _row_mapping(headers: Sequence[str], values: Sequence[str]) -> dict[str, str]:
    # Keys are lowercased so schema column lookups are case-insensitive.
    # Missing trailing values read as empty strings.
    row: dict[str, str] = {}
    for i, header in enumerate(headers):
        key = header.strip().lower()
        if key and key not in row:
            row[key] = values[i] if i < len(values) else ""
    return row


def _data_lines(content: str) -> list[tuple[int, str]]:
    # A leading byte order mark would otherwise stick to the first header name.
    return list(iter_data_lines(content.removeprefix("\ufeff")))


def parse_transaction(
    row: dict[str, str],
    schema: BankSchema,
    *,
    transaction_id: str,
    account_id: str = "",
) -> Transaction | None:
    """Build a canonical transaction from one mapped row.

    Returns ``None`` when the row carries no amount. Raises
    :class:`RowParseError` when the date or description is unusable.
    """

    date = extract_date(row, schema.date_columns)
    if date is None:
        raise RowParseError("date missing or invalid")

    description = first_non_empty(row, schema.description_columns)
    if not description:
        raise RowParseError("description missing")

    amount, kind = resolve_amount(row, schema)
    if amount == 0:
        return None

    try:
        return Transaction(
            id=transaction_id,
            account_id=account_id,
            date=date,
            description=description,
            amount=amount,
            type=kind,
            merchant_name=extract_merchant_name(description),
        )
    except ValidationError as exc:
        raise RowParseError(f"invalid transaction: {exc.errors()[0]['msg']}") from exc


def _account_info(
    schema: BankSchema, headers: Sequence[str], first_row: Sequence[str] | None
) -> AccountInfo:
    account_number = None
    if first_row is not None and schema.account_columns:
        account_number = first_non_empty(_row_mapping(headers, first_row), schema.account_columns)
    return AccountInfo(bank_name=schema.name, account_number=account_number)


def import_statement(
    content: str,
    bank_hint: str | None = None,
    *,
    account_id: str = "",
    categorize_rows: bool = True,
) -> ImportResult:
    """Import one delimited file.

    Parameters
    ----------
    content:
        Full text of the export.
    bank_hint:
        Optional bank identifier chosen by the user (e.g. ``"Chase"``).
        Unknown hints fall back to header detection.
    account_id:
        Account identifier stamped onto every imported transaction.
    categorize_rows:
        When true (default), assign categories with
        :func:`budget_insights.categorize.categorize`.
    """

    lines = _data_lines(content)
    try:
        if len(lines) < MIN_FILE_LINES:
            raise EmptyFileError()
        headers = parse_line(lines[0][1])
        schema = detect(headers, bank_hint)
        if schema is None:
            raise UnknownBankFormatError()
    except ImportFormatError as exc:
        _logger.info("import aborted: %s", exc)
        return ImportResult(transactions=[], errors=[str(exc)])

    batch = uuid.uuid4().hex[:12]
    transactions: list[Transaction] = []
    errors: list[str] = []
    first_row: list[str] | None = None

    for line_no, line in lines[1:]:
        values = parse_line(line)
        if len(values) < MIN_ROW_FIELDS:
            continue
        if first_row is None:
            first_row = values
        try:
            tx = parse_transaction(
                _row_mapping(headers, values),
                schema,
                transaction_id=f"{TRANSACTION_ID_PREFIX}-{batch}-{line_no}",
                account_id=account_id,
            )
        except RowParseError as exc:
            errors.append(f"Line {line_no}: {exc}")
            continue
        if tx is None:
            _logger.debug("line %d dropped: no amount", line_no)
            continue
        if categorize_rows:
            tx = tx.model_copy(update={"category": categorize(tx.description, tx.merchant_name)})
        transactions.append(tx)

    _logger.info(
        "imported %d transactions from %s export (%d row errors)",
        len(transactions),
        schema.name,
        len(errors),
    )
    return ImportResult(
        transactions=transactions,
        account_info=_account_info(schema, headers, first_row),
        errors=errors,
    )


def validate_file(content: str) -> FileValidation:
    """Cheap pre-check: at least two non-blank lines and two header columns."""

    lines = _data_lines(content)
    if len(lines) < MIN_FILE_LINES:
        return FileValidation(False, "File is empty or does not contain enough data")
    if len(parse_line(lines[0][1])) < MIN_HEADER_COLUMNS:
        return FileValidation(False, "File does not have enough columns")
    return FileValidation(True)


__all__ = ["import_statement", "parse_transaction", "validate_file"]
