"""Exceptions raised by the import pipeline.

All of them are ``ValueError`` subclasses. The importer raises them internally
and turns them into human-readable strings on :class:`ImportResult`; callers
using the lower-level helpers directly may catch them.
"""

from __future__ import annotations


class ImportFormatError(ValueError):
    """The file as a whole cannot be imported."""


class EmptyFileError(ImportFormatError):
    def __init__(self) -> None:
        super().__init__("File is empty or has no data rows")


class UnknownBankFormatError(ImportFormatError):
    def __init__(self) -> None:
        super().__init__("Bank format not recognized. Please select the bank manually.")


class RowParseError(ValueError):
    """A single data row cannot be turned into a transaction."""


class AmbiguousAmountError(RowParseError):
    """Both the debit and the credit column carry a non-zero amount."""


__all__ = [
    "AmbiguousAmountError",
    "EmptyFileError",
    "ImportFormatError",
    "RowParseError",
    "UnknownBankFormatError",
]
