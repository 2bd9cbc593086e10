"""
Extractors Module - Statement parsing and categorization.
"""

from .regex_extractor import (
    TransactionCandidate,
    StatementExtractor,
    extract_transactions_from_text
)

from .financial_rules import (
    TransactionType,
    SectionState,
    determine_transaction_type,
    apply_sign_to_amount,
    format_amount_display
)

from .categories import (
    CATEGORY_RULES,
    DEFAULT_CATEGORIES,
    UNCATEGORIZED,
    suggest_category,
    known_categories
)

__all__ = [
    'TransactionCandidate',
    'StatementExtractor',
    'extract_transactions_from_text',
    'TransactionType',
    'SectionState',
    'determine_transaction_type',
    'apply_sign_to_amount',
    'format_amount_display',
    'CATEGORY_RULES',
    'DEFAULT_CATEGORIES',
    'UNCATEGORIZED',
    'suggest_category',
    'known_categories',
]
