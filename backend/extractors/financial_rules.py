"""
Financial Rules Module
Defines transaction-section detection and debit/credit sign rules.
"""

from enum import Enum
import logging

logger = logging.getLogger(__name__)


class TransactionType(Enum):
    """Transaction type enumeration."""
    CREDIT = "credit"
    DEBIT = "debit"


# Section markers are matched as case-sensitive substrings
SECTION_START_MARKERS = ("TRANSACTION HISTORY", "ACCOUNT ACTIVITY")
SECTION_END_MARKERS = ("SUMMARY", "BALANCE")

# Literal tokens anywhere in a line that mark it as money leaving the account
DEBIT_TOKENS = ("DEBIT", "WITHDRAWAL")


class SectionState:
    """
    Tracks whether the parser is inside a statement's transaction listing.
    Two states only: outside (initial) and inside.
    """

    def __init__(
        self,
        start_markers: tuple[str, ...] = SECTION_START_MARKERS,
        end_markers: tuple[str, ...] = SECTION_END_MARKERS
    ):
        self.start_markers = start_markers
        self.end_markers = end_markers
        self.inside = False
        self.sections_seen = 0

    def update_state(self, line: str) -> bool:
        """
        Check if line is a section marker and update state accordingly.

        A start marker always wins; an end marker only counts while inside.

        Returns:
            True if the line was a marker (and must not be parsed), False otherwise
        """
        if any(marker in line for marker in self.start_markers):
            self.inside = True
            self.sections_seen += 1
            logger.debug(f"Entered transaction section: {line[:50]}")
            return True

        if self.inside and any(marker in line for marker in self.end_markers):
            self.inside = False
            logger.debug(f"Left transaction section: {line[:50]}")
            return True

        return False

    def is_inside(self) -> bool:
        return self.inside


def determine_transaction_type(raw_amount: str, line: str) -> TransactionType:
    """
    Decide debit vs credit for a matched amount.

    Debit if the raw amount text carries a minus sign or the full line contains
    one of DEBIT_TOKENS (case-sensitive). Everything else is a credit.
    """
    if '-' in raw_amount:
        return TransactionType.DEBIT
    if any(token in line for token in DEBIT_TOKENS):
        return TransactionType.DEBIT
    return TransactionType.CREDIT


def apply_sign_to_amount(amount: float, transaction_type: TransactionType) -> float:
    """
    Apply correct sign to amount based on transaction type.

    Credit transactions: positive
    Debit transactions: negative

    Args:
        amount: Raw amount (sign is ignored)
        transaction_type: Type of transaction

    Returns:
        Amount with correct sign applied
    """
    amount = abs(amount)

    if transaction_type == TransactionType.DEBIT:
        return -amount
    return amount


def format_amount_display(amount: float) -> str:
    """
    Format amount for display with explicit sign.

    Positive amounts: +1600.00
    Negative amounts: -250.00
    """
    if amount >= 0:
        return f"+{amount:.2f}"
    else:
        return f"{amount:.2f}"  # Negative sign already included
