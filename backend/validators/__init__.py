"""
Validators Module - Transaction validation and date normalization.
"""

from .financial_validator import (
    TransactionValidator,
    validate_transactions,
    normalize_date,
    ValidationError
)

__all__ = [
    'TransactionValidator',
    'validate_transactions',
    'normalize_date',
    'ValidationError',
]
