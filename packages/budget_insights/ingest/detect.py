"""Bank format detection from a CSV header row.

Two ordered rule tables drive detection:

- ``HINT_RULES`` maps a user-supplied bank hint onto a schema.
- ``HEADER_RULES`` recognizes a schema from the header itself. Rules are
  evaluated top to bottom against the lowercased, comma-joined header; the
  first predicate that holds wins, so order encodes precedence.

``None`` means the format is unknown and the caller must ask the user to pick
a bank explicitly.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from ..config import WELLS_FARGO_MAX_COLUMNS
from ..logging_setup import get_logger
from .schemas import (
    AMERICAN_EXPRESS,
    BANK_OF_AMERICA,
    CAPITAL_ONE,
    CHASE,
    CITI,
    WELLS_FARGO,
    BankSchema,
)

_logger = get_logger("budget_insights.ingest.detect")


@dataclass(frozen=True, slots=True)
class HeaderView:
    """Lowercased, comma-joined header plus its column count."""

    text: str
    columns: int

    @classmethod
    def of(cls, header_row: Sequence[str]) -> HeaderView:
        return cls(text=",".join(header_row).lower(), columns=len(header_row))

    def has(self, *needles: str) -> bool:
        return all(n in self.text for n in needles)

    def has_any(self, *needles: str) -> bool:
        return any(n in self.text for n in needles)


@dataclass(frozen=True, slots=True)
class HeaderRule:
    schema: BankSchema
    matches: Callable[[HeaderView], bool]


HEADER_RULES: tuple[HeaderRule, ...] = (
    HeaderRule(BANK_OF_AMERICA, lambda h: h.has("posted date", "payee")),
    HeaderRule(CHASE, lambda h: h.has("posting date") or h.has("type", "description")),
    HeaderRule(
        WELLS_FARGO,
        lambda h: h.has("wells")
        or (h.has("date", "amount") and h.columns <= WELLS_FARGO_MAX_COLUMNS),
    ),
    HeaderRule(CITI, lambda h: h.has("debit", "credit", "status")),
    HeaderRule(CAPITAL_ONE, lambda h: h.has("transaction date") and h.has_any("debit", "credit")),
    HeaderRule(AMERICAN_EXPRESS, lambda h: h.has_any("card member", "amex")),
)


# Substrings of a normalized hint, checked in order.
HINT_RULES: tuple[tuple[tuple[str, ...], BankSchema], ...] = (
    (("bankofamerica", "boa"), BANK_OF_AMERICA),
    (("chase",), CHASE),
    (("wellsfargo", "wells"), WELLS_FARGO),
    (("citi",), CITI),
    (("capitalone", "capital"), CAPITAL_ONE),
    (("amex", "americanexpress"), AMERICAN_EXPRESS),
)

_HINT_STRIP_RE = re.compile(r"[\s_\-]+")


def normalize_hint(hint: str) -> str:
    return _HINT_STRIP_RE.sub("", hint.lower())


def schema_from_hint(hint: str | None) -> BankSchema | None:
    """Resolve a bank hint such as ``"Bank of America"`` or ``"amex"``."""

    if not hint:
        return None
    normalized = normalize_hint(hint)
    if not normalized:
        return None
    for needles, schema in HINT_RULES:
        if any(n in normalized for n in needles):
            return schema
    return None


def auto_detect(header_row: Sequence[str]) -> BankSchema | None:
    """Return the first schema whose header predicate holds, else ``None``."""

    view = HeaderView.of(header_row)
    for rule in HEADER_RULES:
        if rule.matches(view):
            return rule.schema
    return None


def detect(header_row: Sequence[str], hint: str | None = None) -> BankSchema | None:
    """Select the schema for a file given its header and an optional hint.

    A hint that names a known bank takes priority; an unknown or missing hint
    falls through to header heuristics.
    """

    schema = schema_from_hint(hint)
    if schema is not None:
        _logger.debug("schema %s selected from hint %r", schema.key, hint)
        return schema
    if hint:
        _logger.info("bank hint %r not recognized; falling back to header detection", hint)

    schema = auto_detect(header_row)
    if schema is None:
        _logger.info("no bank schema matches header %r", list(header_row))
    else:
        _logger.debug("schema %s detected from header", schema.key)
    return schema


__all__ = [
    "HEADER_RULES",
    "HINT_RULES",
    "HeaderRule",
    "HeaderView",
    "auto_detect",
    "detect",
    "normalize_hint",
    "schema_from_hint",
]
