"""
Statement Extractor - Main Pipeline
Orchestrates loading, extraction, validation, filtering, dashboard
aggregation and report generation.
"""

import argparse
import logging
import re
import sys
from collections import defaultdict
from pathlib import Path
from typing import Optional

from config import config
from extractors.categories import UNCATEGORIZED
from extractors.regex_extractor import TransactionCandidate, extract_transactions_from_text
from loaders.pdf_loader import PDFLoadError, load_pdf
from logging_config import setup_logging
from output.writer import ReportError, export_json, generate_pdf_report
from validators.financial_validator import TransactionValidator, ValidationError, normalize_date

logger = logging.getLogger(__name__)

MONTH_PATTERN = re.compile(r'\d{4}-(0[1-9]|1[0-2])')


def _month_of(txn: TransactionCandidate) -> Optional[str]:
    """YYYY-MM of a transaction, or None if its date cannot be read."""
    iso = normalize_date(txn.date)
    return iso[:7] if iso else None


def check_month(month: str):
    """
    Reject month bounds that do not sort correctly as strings.

    Raises:
        ValueError: If the bound is not a zero-padded YYYY-MM month
    """
    if not isinstance(month, str) or not MONTH_PATTERN.fullmatch(month):
        raise ValueError(f"Months must be in YYYY-MM format, got '{month}'")


class TransactionFilter:
    """Filters transactions by keyword, category, type and month range."""

    @staticmethod
    def filter_by_keyword(transactions: list[TransactionCandidate], keyword: str) -> list[TransactionCandidate]:
        """
        Filter transactions by keyword (case-insensitive substring match
        against description).
        """
        if not keyword:
            return transactions

        keyword_lower = keyword.lower()
        filtered = [
            txn for txn in transactions
            if keyword_lower in txn.description.lower()
        ]

        logger.info(f"Keyword filter '{keyword}': {len(filtered)}/{len(transactions)} transactions matched")
        return filtered

    @staticmethod
    def filter_by_category(transactions: list[TransactionCandidate], category: str) -> list[TransactionCandidate]:
        """Keep transactions whose category equals the given label."""
        if not category:
            return transactions

        filtered = [txn for txn in transactions if txn.category == category]
        logger.info(f"Category filter '{category}': {len(filtered)}/{len(transactions)} transactions matched")
        return filtered

    @staticmethod
    def filter_by_type(transactions: list[TransactionCandidate], txn_type: str) -> list[TransactionCandidate]:
        """
        Keep 'income' (amount >= 0) or 'expense' (amount < 0) transactions.

        Raises:
            ValueError: If txn_type is neither
        """
        if not txn_type:
            return transactions

        if txn_type not in ("income", "expense"):
            raise ValueError(f"Unknown transaction type: {txn_type}")

        return [txn for txn in transactions if txn.type == txn_type]

    @staticmethod
    def filter_by_date_range(
        transactions: list[TransactionCandidate],
        start_month: Optional[str],
        end_month: Optional[str]
    ) -> list[TransactionCandidate]:
        """
        Filter transactions by month range (YYYY-MM, inclusive).
        Either bound may be omitted. Transactions with unreadable dates are dropped
        once any bound is given.

        Raises:
            ValueError: If a bound is not a zero-padded YYYY-MM month
        """
        if not start_month and not end_month:
            return transactions

        for month in (start_month, end_month):
            if month:
                check_month(month)

        filtered = []
        for txn in transactions:
            month = _month_of(txn)
            if month is None:
                continue
            if start_month and month < start_month:
                continue
            if end_month and month > end_month:
                continue
            filtered.append(txn)

        logger.info(
            f"Date range filter ({start_month or '...'} to {end_month or '...'}): "
            f"{len(filtered)}/{len(transactions)} transactions matched"
        )
        return filtered


class TransactionGrouper:
    """Groups transactions for reports and dashboard charts."""

    @staticmethod
    def group_by_month(transactions: list[TransactionCandidate]) -> dict[str, list[TransactionCandidate]]:
        """
        Group transactions by month (YYYY-MM).
        Transactions with unreadable dates are left out.
        """
        grouped = defaultdict(list)

        for txn in transactions:
            month = _month_of(txn)
            if month:
                grouped[month].append(txn)

        logger.info(f"Grouped {len(transactions)} transactions into {len(grouped)} months")
        return dict(grouped)

    @staticmethod
    def category_breakdown(transactions: list[TransactionCandidate]) -> list[dict]:
        """
        Expense totals per category, largest first.

        Returns:
            [{'name': category, 'value': absolute spend}]
        """
        totals = defaultdict(float)
        for txn in transactions:
            if txn.amount < 0:
                totals[txn.category or UNCATEGORIZED] += abs(txn.amount)

        breakdown = [
            {"name": name, "value": round(value, 2)}
            for name, value in totals.items()
        ]
        breakdown.sort(key=lambda item: item["value"], reverse=True)
        return breakdown

    @staticmethod
    def monthly_trend(transactions: list[TransactionCandidate]) -> list[dict]:
        """
        Income and expenses per month, oldest first.

        Returns:
            [{'month': 'YYYY-MM', 'income': ..., 'expenses': ...}]
        """
        months = {}
        for month, txns in TransactionGrouper.group_by_month(transactions).items():
            income = sum(t.amount for t in txns if t.amount > 0)
            expenses = sum(abs(t.amount) for t in txns if t.amount < 0)
            months[month] = {
                "month": month,
                "income": round(income, 2),
                "expenses": round(expenses, 2)
            }

        return [months[month] for month in sorted(months)]


def summarize(transactions: list[TransactionCandidate]) -> dict:
    """
    Compute dashboard summary figures.

    Returns:
        Dict with total_income, total_expenses (absolute), net_cashflow,
        savings_rate (percent), largest_expense_category,
        largest_expense_amount and transaction_count
    """
    total_income = sum(t.amount for t in transactions if t.amount > 0)
    total_expenses = sum(abs(t.amount) for t in transactions if t.amount < 0)
    net_cashflow = total_income - total_expenses

    savings_rate = 0.0
    if total_income > 0:
        savings_rate = round(net_cashflow / total_income * 100, 1)

    breakdown = TransactionGrouper.category_breakdown(transactions)
    largest = breakdown[0] if breakdown else {"name": "None", "value": 0.0}

    return {
        "total_income": round(total_income, 2),
        "total_expenses": round(total_expenses, 2),
        "net_cashflow": round(net_cashflow, 2),
        "savings_rate": savings_rate,
        "largest_expense_category": largest["name"],
        "largest_expense_amount": largest["value"],
        "transaction_count": len(transactions)
    }


def build_dashboard(transactions: list[TransactionCandidate]) -> dict:
    """Summary, category breakdown and monthly trend in one payload."""
    return {
        "summary": summarize(transactions),
        "category_breakdown": TransactionGrouper.category_breakdown(transactions),
        "monthly_trend": TransactionGrouper.monthly_trend(transactions)
    }


class StatementProcessor:
    """Main orchestrator for the statement pipeline."""

    def __init__(self, validator: Optional[TransactionValidator] = None):
        self.validator = validator or TransactionValidator(
            strict_mode=config.STRICT_MODE,
            allow_zero_amounts=config.ALLOW_ZERO_AMOUNTS,
            min_description_length=config.MIN_DESCRIPTION_LENGTH
        )
        self.stats = {
            "characters": 0,
            "total_extracted": 0,
            "valid_transactions": 0,
            "after_filters": 0
        }

    def process_text(
        self,
        text: str,
        keyword: Optional[str] = None,
        category: Optional[str] = None,
        start_month: Optional[str] = None,
        end_month: Optional[str] = None
    ) -> list[TransactionCandidate]:
        """
        Extract, validate and filter transactions from statement text.

        Returns:
            Valid transactions with ISO dates, after filtering
        """
        self.stats["characters"] = len(text)

        candidates = extract_transactions_from_text(text)
        self.stats["total_extracted"] = len(candidates)
        if not candidates:
            logger.warning("No transactions found. Check that the statement has a recognizable transaction section.")

        transactions = self.validator.normalize_transactions(candidates)
        self.stats["valid_transactions"] = len(transactions)

        transactions = TransactionFilter.filter_by_keyword(transactions, keyword)
        transactions = TransactionFilter.filter_by_category(transactions, category)
        transactions = TransactionFilter.filter_by_date_range(transactions, start_month, end_month)
        self.stats["after_filters"] = len(transactions)

        return transactions

    def process(
        self,
        pdf_path: str,
        output_path: Optional[str] = None,
        keyword: Optional[str] = None,
        category: Optional[str] = None,
        start_month: Optional[str] = None,
        end_month: Optional[str] = None
    ) -> dict:
        """
        Process a statement PDF.

        Args:
            pdf_path: Path to PDF file
            output_path: Optional path for a PDF report
            keyword: Optional description keyword filter
            category: Optional category filter
            start_month: Optional first month (YYYY-MM)
            end_month: Optional last month (YYYY-MM)

        Returns:
            Dict with transactions, summary, category_breakdown,
            monthly_trend and stats

        Raises:
            ValueError: If month bounds are malformed or reversed
            PDFLoadError: If no text can be read from the PDF
            ReportError: If the report cannot be written
        """
        self._validate_months(start_month, end_month)

        logger.info(f"Step 1: Loading PDF - {pdf_path}")
        text = load_pdf(pdf_path)

        logger.info("Step 2: Extracting and validating transactions")
        transactions = self.process_text(text, keyword, category, start_month, end_month)

        logger.info("Step 3: Building dashboard figures")
        result = build_dashboard(transactions)
        result["transactions"] = transactions
        result["stats"] = self.stats.copy()

        if output_path:
            logger.info(f"Step 4: Generating PDF report - {output_path}")
            generate_pdf_report(
                output_path=output_path,
                grouped_transactions=TransactionGrouper.group_by_month(transactions),
                summary=result["summary"],
                category_breakdown=result["category_breakdown"],
                title=f"Statement Report - {Path(pdf_path).name}"
            )

        self._log_summary()
        return result

    @staticmethod
    def _validate_months(start_month: Optional[str], end_month: Optional[str]):
        for month in (start_month, end_month):
            if month:
                check_month(month)

        if start_month and end_month and start_month > end_month:
            raise ValueError(f"start_month ({start_month}) must be <= end_month ({end_month})")

    def _log_summary(self):
        logger.info("=" * 60)
        logger.info(f"Candidates extracted:   {self.stats['total_extracted']}")
        logger.info(f"Valid transactions:     {self.stats['valid_transactions']}")
        logger.info(f"After filters:          {self.stats['after_filters']}")
        logger.info("=" * 60)


def main(argv: Optional[list[str]] = None) -> int:
    """Command-line entry point."""
    parser = argparse.ArgumentParser(description="Extract transactions from a bank statement PDF")
    parser.add_argument("pdf_path", help="Statement PDF to read")
    parser.add_argument("--output", help="Write a PDF report to this path")
    parser.add_argument("--json", dest="json_path", help="Write a JSON backup to this path")
    parser.add_argument("--keyword", help="Only keep descriptions containing this text")
    parser.add_argument("--category", help="Only keep this category")
    parser.add_argument("--start-month", help="First month to keep (YYYY-MM)")
    parser.add_argument("--end-month", help="Last month to keep (YYYY-MM)")
    parser.add_argument("--log-level", default=config.LOG_LEVEL)
    args = parser.parse_args(argv)

    setup_logging(log_level=args.log_level, log_file="statement_extractor.log")
    logger.debug(f"Settings: {config.to_dict()}")

    processor = StatementProcessor()
    try:
        result = processor.process(
            args.pdf_path,
            output_path=args.output,
            keyword=args.keyword,
            category=args.category,
            start_month=args.start_month,
            end_month=args.end_month
        )
        if args.json_path:
            export_json(result["transactions"], args.json_path)

    except (ValueError, ValidationError) as e:
        logger.error(f"Invalid input: {e}")
        print(f"Input Error: {e}", file=sys.stderr)
        return 2

    except (PDFLoadError, ReportError) as e:
        logger.error(f"Processing failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    summary = result["summary"]
    print(f"Transactions: {summary['transaction_count']}")
    print(f"Income:       {summary['total_income']:.2f}")
    print(f"Expenses:     {summary['total_expenses']:.2f}")
    print(f"Net:          {summary['net_cashflow']:+.2f}")
    for txn in result["transactions"]:
        print(f"{txn.date}  {txn.amount_display:>12}  {txn.category:<15} {txn.description}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
