"""
Category Rules Module
Keyword-based category suggestion and the default category table.
"""

import logging

logger = logging.getLogger(__name__)

UNCATEGORIZED = "Uncategorized"

# Ordering matters: the first rule with a matching keyword wins.
CATEGORY_RULES: list[tuple[str, tuple[str, ...]]] = [
    ("Groceries", ("grocery", "market", "food", "supermarket")),
    ("Dining Out", ("restaurant", "cafe", "bar", "dining")),
    ("Shopping", ("amazon", "walmart", "target", "shop")),
    ("Transportation", ("uber", "lyft", "transit", "transport")),
    ("Subscriptions", ("netflix", "spotify", "subscription", "monthly")),
    ("Income", ("salary", "payroll", "deposit", "income")),
]

# Categories offered for manual entry and reporting; name, type, color, icon.
DEFAULT_CATEGORIES: list[dict] = [
    {"name": "Groceries", "type": "expense", "color": "#43a047", "icon": "shopping_cart"},
    {"name": "Dining Out", "type": "expense", "color": "#e53935", "icon": "restaurant"},
    {"name": "Transportation", "type": "expense", "color": "#1e88e5", "icon": "directions_car"},
    {"name": "Utilities", "type": "expense", "color": "#f9a825", "icon": "bolt"},
    {"name": "Housing", "type": "expense", "color": "#8e24aa", "icon": "home"},
    {"name": "Entertainment", "type": "expense", "color": "#f4511e", "icon": "movie"},
    {"name": "Healthcare", "type": "expense", "color": "#00acc1", "icon": "local_hospital"},
    {"name": "Shopping", "type": "expense", "color": "#7cb342", "icon": "shopping_bag"},
    {"name": "Personal Care", "type": "expense", "color": "#d81b60", "icon": "spa"},
    {"name": "Education", "type": "expense", "color": "#6d4c41", "icon": "school"},
    {"name": "Subscriptions", "type": "expense", "color": "#5e35b1", "icon": "subscriptions"},
    {"name": "Income", "type": "income", "color": "#2e7d32", "icon": "account_balance"},
    {"name": "Salary", "type": "income", "color": "#2e7d32", "icon": "account_balance"},
    {"name": "Investments", "type": "income", "color": "#1565c0", "icon": "trending_up"},
    {"name": "Gifts", "type": "income", "color": "#d32f2f", "icon": "card_giftcard"},
    {"name": UNCATEGORIZED, "type": "expense", "color": "#757575", "icon": "help"},
]


def suggest_category(description: str) -> str:
    """
    Suggest a category label for a transaction description.

    Matching is a case-insensitive substring test against each rule's
    keywords, in CATEGORY_RULES order.

    Args:
        description: Transaction description

    Returns:
        Category label, or "Uncategorized" when nothing matches
    """
    text = (description or "").lower()

    for label, keywords in CATEGORY_RULES:
        if any(keyword in text for keyword in keywords):
            return label

    return UNCATEGORIZED


def known_categories() -> set[str]:
    """All labels a transaction may carry."""
    names = {category["name"] for category in DEFAULT_CATEGORIES}
    names.update(label for label, _ in CATEGORY_RULES)
    return names
