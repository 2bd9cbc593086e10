"""
Regex Extractor Module
Turns bank statement text into transaction candidates using regex patterns.
Only lines inside a detected transaction section are considered.
"""

import re
import logging
from typing import Optional
from .categories import UNCATEGORIZED, suggest_category
from .financial_rules import (
    SECTION_END_MARKERS,
    SECTION_START_MARKERS,
    SectionState,
    apply_sign_to_amount,
    determine_transaction_type,
    format_amount_display,
)

logger = logging.getLogger(__name__)


class TransactionCandidate:
    """An unvalidated transaction read from statement text."""

    def __init__(self, date: str, description: str, amount: float, category: str = UNCATEGORIZED):
        self.date = date
        self.description = description
        self.amount = amount
        self.category = category

    @property
    def amount_display(self) -> str:
        return format_amount_display(self.amount)

    @property
    def type(self) -> str:
        """'income' for money in, 'expense' for money out."""
        return "income" if self.amount >= 0 else "expense"

    def to_dict(self) -> dict:
        """Convert candidate to a plain record."""
        return {
            "date": self.date,
            "description": self.description,
            "amount": self.amount,
            "category": self.category
        }

    @classmethod
    def from_dict(cls, data: dict) -> "TransactionCandidate":
        """
        Build a candidate from a plain record.

        Raises:
            KeyError: If date, description or amount is missing
            ValueError: If amount is not numeric
        """
        description = str(data["description"])
        category = data.get("category") or suggest_category(description)
        return cls(
            date=str(data["date"]),
            description=description,
            amount=float(data["amount"]),
            category=category
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, TransactionCandidate):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f"TransactionCandidate(date={self.date}, desc={self.description[:30]}, amount={self.amount_display})"


class StatementExtractor:
    """
    Extracts transaction candidates from statement text.

    Holds configuration only; every call to extract() starts from a fresh
    section state, so one instance can be shared freely.
    """

    # D?D sep D?D sep YY(YY), separators / - .; no digit may follow the year
    DATE_PATTERN = re.compile(r'\d{1,2}[/.\-]\d{1,2}[/.\-]\d{2}(?:\d{2})?(?!\d)')

    # Optional sign, optional $, thousands separators, exactly two decimals
    AMOUNT_PATTERN = re.compile(r'[-+]?\$?\s*[\d,]+\.\d{2}')

    # Everything that is not part of the magnitude
    AMOUNT_NOISE = re.compile(r'[$,\s+\-]')

    def __init__(
        self,
        start_markers: tuple[str, ...] = SECTION_START_MARKERS,
        end_markers: tuple[str, ...] = SECTION_END_MARKERS
    ):
        self.start_markers = start_markers
        self.end_markers = end_markers

    def extract(self, text: str) -> list[TransactionCandidate]:
        """
        Extract all transaction candidates from statement text.

        Args:
            text: Full plain-text content of one statement

        Returns:
            Candidates in the order their lines appear

        Raises:
            TypeError: If text is not a string
        """
        if not isinstance(text, str):
            raise TypeError(f"Statement text must be a string, got {type(text).__name__}")

        lines = [line for line in text.split('\n') if line.strip()]
        if not lines:
            logger.warning("Empty text provided for extraction")
            return []

        state = SectionState(self.start_markers, self.end_markers)
        candidates = []
        skipped = 0

        for line in lines:
            if state.update_state(line):
                continue

            if not state.is_inside():
                continue

            candidate = self.parse_line(line)
            if candidate is None:
                skipped += 1
                continue
            candidates.append(candidate)

        logger.info(
            f"Extraction complete: {len(candidates)} candidates from {len(lines)} lines "
            f"({state.sections_seen} sections, {skipped} section lines without a transaction)"
        )

        if state.sections_seen == 0:
            logger.warning("No transaction section markers found in statement text")

        return candidates

    def parse_line(self, line: str) -> Optional[TransactionCandidate]:
        """
        Parse one in-section line.

        Returns:
            A candidate, or None when the line lacks a date or an amount
        """
        date_match = self.DATE_PATTERN.search(line)
        if not date_match:
            return None

        amount_match = self.AMOUNT_PATTERN.search(line, date_match.end())
        if not amount_match:
            logger.debug(f"No amount after date in line: {line[:50]}")
            return None

        raw_amount = amount_match.group(0)
        try:
            magnitude = float(self.AMOUNT_NOISE.sub('', raw_amount))
        except ValueError:
            logger.warning(f"Unparseable amount '{raw_amount}' in line: {line[:50]}")
            return None

        description = ' '.join(line[date_match.end():amount_match.start()].split())
        transaction_type = determine_transaction_type(raw_amount, line)

        candidate = TransactionCandidate(
            date=date_match.group(0),
            description=description,
            amount=apply_sign_to_amount(magnitude, transaction_type),
            category=suggest_category(description)
        )
        logger.debug(f"Parsed: {candidate}")
        return candidate


def extract_transactions_from_text(text: str) -> list[TransactionCandidate]:
    """
    Convenience function to extract transaction candidates from text.

    Args:
        text: Bank statement text

    Returns:
        List of TransactionCandidate objects
    """
    return StatementExtractor().extract(text)
