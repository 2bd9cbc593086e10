"""
Financial Validator Module
Validates extracted transaction candidates and normalizes their dates.
"""

import re
import logging
from datetime import date
from typing import Optional
from config import config
from extractors.categories import known_categories
from extractors.regex_extractor import TransactionCandidate

logger = logging.getLogger(__name__)

_STATEMENT_DATE = re.compile(r'^(\d{1,2})[/.\-](\d{1,2})[/.\-](\d{2}|\d{4})$')
_ISO_DATE = re.compile(r'^(\d{4})-(\d{1,2})-(\d{1,2})$')


class ValidationError(Exception):
    """Raised for invalid transactions when validating in strict mode."""
    pass


def normalize_date(date_str: str) -> Optional[str]:
    """
    Convert a statement date token to ISO format (YYYY-MM-DD).

    Supports:
    - MM/DD/YYYY, MM-DD-YYYY, MM.DD.YYYY
    - the same with 2-digit years (00-49 -> 20xx, 50-99 -> 19xx)
    - DD/MM/YYYY when the month-first reading is not a real date
    - YYYY-MM-DD (already normalized)

    Returns:
        ISO date string, or None if the token is not a real calendar date
    """
    if not date_str or not isinstance(date_str, str):
        return None

    date_str = date_str.strip()

    iso_match = _ISO_DATE.match(date_str)
    if iso_match:
        year, month, day = (int(part) for part in iso_match.groups())
        try:
            return date(year, month, day).isoformat()
        except ValueError:
            return None

    match = _STATEMENT_DATE.match(date_str)
    if not match:
        return None

    first, second, year_str = match.groups()
    year = int(year_str)
    if len(year_str) == 2:
        year += 2000 if year <= 49 else 1900

    for month, day in ((int(first), int(second)), (int(second), int(first))):
        try:
            return date(year, month, day).isoformat()
        except ValueError:
            continue

    return None


class TransactionValidator:
    """Validates transaction candidates."""

    def __init__(
        self,
        strict_mode: bool = False,
        allow_zero_amounts: bool = False,
        min_description_length: int = 2
    ):
        """
        Initialize validator with configurable settings.

        Args:
            strict_mode: If True, raise ValidationError on invalid data.
                        If False, log warnings and skip invalid transactions.
            allow_zero_amounts: If True, allow transactions with 0 amount.
            min_description_length: Minimum characters required in description.
        """
        self.strict_mode = strict_mode
        self.allow_zero_amounts = allow_zero_amounts
        self.min_description_length = min_description_length
        self.categories = known_categories()
        self.reset_stats()

    def validate_transaction(self, transaction: TransactionCandidate) -> bool:
        """
        Validate a single transaction.

        Returns:
            True if valid, False if invalid

        Raises:
            ValidationError: If strict_mode is True and validation fails
        """
        self.validation_stats["total_validated"] += 1

        checks = [
            ("invalid_date", normalize_date(transaction.date) is not None,
             f"Invalid date: {transaction.date}"),
            ("invalid_amount", self._validate_amount(transaction.amount),
             f"Invalid amount: {transaction.amount}"),
            ("invalid_description", self._validate_description(transaction.description),
             "Invalid description: empty or too short"),
            ("invalid_category", transaction.category in self.categories,
             f"Unknown category: {transaction.category}"),
        ]

        for stat, passed, msg in checks:
            if passed:
                continue
            self.validation_stats[stat] += 1
            self.validation_stats["invalid"] += 1
            if self.strict_mode:
                raise ValidationError(msg)
            logger.warning(f"{msg} in transaction: {transaction}")
            return False

        self.validation_stats["valid"] += 1
        return True

    def validate_transactions(self, transactions: list[TransactionCandidate]) -> list[TransactionCandidate]:
        """
        Validate a list of transactions.

        Returns:
            List of valid transactions (invalid ones filtered out)
        """
        valid_transactions = [txn for txn in transactions if self.validate_transaction(txn)]

        logger.info(
            f"Validation complete: {self.validation_stats['valid']} valid, "
            f"{self.validation_stats['invalid']} invalid out of "
            f"{self.validation_stats['total_validated']} total"
        )

        return valid_transactions

    def normalize_transactions(self, transactions: list[TransactionCandidate]) -> list[TransactionCandidate]:
        """
        Validate transactions and return copies of the valid ones with ISO dates.
        """
        return [
            TransactionCandidate(
                date=normalize_date(txn.date),
                description=txn.description,
                amount=txn.amount,
                category=txn.category
            )
            for txn in self.validate_transactions(transactions)
        ]

    def _validate_amount(self, amount: float) -> bool:
        if isinstance(amount, bool) or not isinstance(amount, (int, float)):
            return False

        if amount == 0 and not self.allow_zero_amounts:
            logger.debug("Amount is zero (rejected - allow_zero_amounts=False)")
            return False

        return True

    def _validate_description(self, description: str) -> bool:
        if not isinstance(description, str):
            return False

        if len(description.strip()) < self.min_description_length:
            logger.debug(f"Description too short: '{description}' (min: {self.min_description_length})")
            return False

        return True

    def get_stats(self) -> dict:
        """Get validation statistics."""
        return self.validation_stats.copy()

    def reset_stats(self):
        """Reset validation statistics."""
        self.validation_stats = {
            "total_validated": 0,
            "valid": 0,
            "invalid": 0,
            "invalid_date": 0,
            "invalid_amount": 0,
            "invalid_description": 0,
            "invalid_category": 0
        }


def validate_transactions(
    transactions: list[TransactionCandidate],
    strict_mode: bool = False
) -> list[TransactionCandidate]:
    """
    Convenience function to validate a list of transactions.

    Args:
        transactions: List of TransactionCandidate objects
        strict_mode: If True, raise exceptions on invalid data

    Returns:
        List of valid transactions
    """
    validator = TransactionValidator(
        strict_mode=strict_mode,
        allow_zero_amounts=config.ALLOW_ZERO_AMOUNTS,
        min_description_length=config.MIN_DESCRIPTION_LENGTH
    )
    return validator.validate_transactions(transactions)
