"""Keyword-based transaction categorization.

``CATEGORY_RULES`` is an ordered rule table: the description and merchant
name are concatenated, lowercased, and tested against each rule's keywords
top to bottom. The first rule with a keyword contained in the text decides
the category; when none match the result is ``Category.OTHER``. Matching is
plain substring containment, so ``"gas"`` also matches ``"gas utility"`` and
transportation wins over utilities for such text.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .models import Category, Transaction


@dataclass(frozen=True, slots=True)
class CategoryRule:
    category: Category
    keywords: tuple[str, ...]

    def matches(self, text: str) -> bool:
        return any(k in text for k in self.keywords)


CATEGORY_RULES: tuple[CategoryRule, ...] = (
    CategoryRule(
        Category.FOOD,
        (
            "restaurant",
            "food",
            "cafe",
            "coffee",
            "pizza",
            "burger",
            "grocery",
            "supermarket",
            "market",
            "starbucks",
        ),
    ),
    CategoryRule(
        Category.TRANSPORTATION,
        ("uber", "lyft", "gas", "fuel", "parking", "transit", "metro", "bus"),
    ),
    CategoryRule(
        Category.ENTERTAINMENT,
        ("netflix", "spotify", "hulu", "disney", "hbo", "movie", "theater", "concert", "game"),
    ),
    CategoryRule(
        Category.UTILITIES,
        ("electric", "water", "gas utility", "internet", "phone", "cable"),
    ),
    CategoryRule(Category.RENT, ("rent", "lease", "mortgage")),
    CategoryRule(
        Category.HEALTHCARE,
        ("pharmacy", "doctor", "hospital", "medical", "health"),
    ),
    CategoryRule(Category.SHOPPING, ("amazon", "walmart", "target", "store", "shop")),
    CategoryRule(
        Category.SALARY,
        ("salary", "payroll", "direct deposit", "payment received"),
    ),
    # Appended after the original cascade so earlier precedence is unchanged.
    CategoryRule(
        Category.EDUCATION,
        ("tuition", "university", "college", "school", "course"),
    ),
    CategoryRule(
        Category.INVESTMENT,
        ("brokerage", "dividend", "invest", "vanguard", "fidelity", "robinhood"),
    ),
)


CATEGORY_LABELS: dict[Category, str] = {
    Category.FOOD: "Food",
    Category.TRANSPORTATION: "Transportation",
    Category.ENTERTAINMENT: "Entertainment",
    Category.UTILITIES: "Utilities",
    Category.RENT: "Rent",
    Category.HEALTHCARE: "Healthcare",
    Category.SHOPPING: "Shopping",
    Category.EDUCATION: "Education",
    Category.SALARY: "Salary",
    Category.INVESTMENT: "Investment",
    Category.OTHER: "Other",
}


def category_label(category: Category) -> str:
    return CATEGORY_LABELS.get(category, str(category))


def categorize(description: str | None, merchant_name: str | None = None) -> Category:
    """Map description/merchant text to a category. Never raises."""

    text = f"{description or ''} {merchant_name or ''}".lower()
    for rule in CATEGORY_RULES:
        if rule.matches(text):
            return rule.category
    return Category.OTHER


def categorize_transactions(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Return copies of ``transactions`` with ``category`` assigned."""

    return [
        t.model_copy(update={"category": categorize(t.description, t.merchant_name)})
        for t in transactions
    ]


__all__ = [
    "CATEGORY_LABELS",
    "CATEGORY_RULES",
    "CategoryRule",
    "categorize",
    "categorize_transactions",
    "category_label",
]
