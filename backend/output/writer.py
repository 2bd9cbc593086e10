"""
Report Writer Module
Generates PDF reports and JSON backups from extracted transactions.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from xml.sax.saxutils import escape
from reportlab.lib.pagesizes import letter
from reportlab.lib import colors
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer
from reportlab.lib.enums import TA_CENTER
from extractors.regex_extractor import TransactionCandidate

logger = logging.getLogger(__name__)

ACCENT = colors.HexColor('#ef8145')
STRIPE = colors.HexColor('#e8e0dc')
GRID = colors.HexColor('#808183')

REQUIRED_FIELDS = ("date", "description", "amount")


class ReportError(Exception):
    """Raised when a report or backup file cannot be written."""
    pass


class PDFReportWriter:
    """Generates PDF reports from transaction data."""

    def __init__(self, output_path: str, page_size=letter):
        """
        Initialize PDF writer.

        Args:
            output_path: Path where PDF will be saved
            page_size: Page size (default: letter)
        """
        self.output_path = output_path
        self.page_size = page_size
        self.styles = getSampleStyleSheet()
        self._setup_custom_styles()

    def _setup_custom_styles(self):
        """Setup custom paragraph styles."""
        self.styles.add(ParagraphStyle(
            name='CustomTitle',
            parent=self.styles['Heading1'],
            fontSize=24,
            textColor=colors.HexColor('#1a1a1a'),
            spaceAfter=30,
            alignment=TA_CENTER,
            fontName='Helvetica-Bold'
        ))

        self.styles.add(ParagraphStyle(
            name='SectionHeading',
            parent=self.styles['Heading2'],
            fontSize=16,
            textColor=colors.HexColor('#2c5aa0'),
            spaceAfter=12,
            spaceBefore=20,
            fontName='Helvetica-Bold'
        ))

        self.styles.add(ParagraphStyle(
            name='InfoText',
            parent=self.styles['Normal'],
            fontSize=11,
            textColor=colors.HexColor('#444444'),
            spaceAfter=6
        ))

    def generate_report(
        self,
        grouped_transactions: dict[str, list[TransactionCandidate]],
        summary: dict,
        category_breakdown: list[dict],
        title: str = "Statement Transaction Report"
    ):
        """
        Generate PDF report.

        Args:
            grouped_transactions: Dict mapping month (YYYY-MM) to transactions
            summary: Dashboard summary (see pipeline.summarize)
            category_breakdown: [{'name': ..., 'value': ...}] expense totals
            title: Report title

        Raises:
            ValueError: If grouped_transactions is not a dict
            ReportError: If the file cannot be written
        """
        if not isinstance(grouped_transactions, dict):
            logger.error("grouped_transactions must be a dictionary")
            raise ValueError("grouped_transactions must be a dictionary")

        logger.info(f"Generating PDF report: {self.output_path}")

        output_path = Path(self.output_path)
        story = self._create_header(title, summary)
        story.extend(self._create_category_section(category_breakdown))

        if not grouped_transactions:
            logger.warning("No transactions to include in report")
            story.append(Paragraph("No transactions found matching the criteria.", self.styles['InfoText']))
        else:
            for month in sorted(grouped_transactions.keys()):
                transactions = grouped_transactions[month]
                if transactions:
                    logger.debug(f"Adding section for {month} with {len(transactions)} transactions")
                    story.extend(self._create_month_section(month, transactions))

        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            doc = SimpleDocTemplate(
                str(output_path),
                pagesize=self.page_size,
                rightMargin=0.75*inch,
                leftMargin=0.75*inch,
                topMargin=0.75*inch,
                bottomMargin=0.75*inch
            )
            doc.build(story)

        except PermissionError as e:
            logger.error(f"Permission denied writing to {self.output_path}: {e}")
            raise ReportError(f"Cannot write to {self.output_path}. File may be open or directory is read-only.") from e

        except OSError as e:
            logger.error(f"OS error writing PDF: {e}", exc_info=True)
            raise ReportError(f"Failed to write PDF file: {e}") from e

        logger.info(f"PDF report generated successfully: {self.output_path}")

    def _create_header(self, title: str, summary: dict) -> list:
        """Create report title and summary table."""
        elements = [
            Paragraph(escape(title), self.styles['CustomTitle']),
            Paragraph(
                f"<b>Generated:</b> {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
                self.styles['InfoText']
            ),
            Spacer(1, 0.2 * inch),
        ]

        data = [
            ['Transactions', 'Total Income', 'Total Expenses', 'Net Cashflow', 'Savings Rate'],
            [
                str(summary.get('transaction_count', 0)),
                f"+{summary.get('total_income', 0.0):.2f}",
                f"-{summary.get('total_expenses', 0.0):.2f}",
                f"{summary.get('net_cashflow', 0.0):+.2f}",
                f"{summary.get('savings_rate', 0.0):.1f}%",
            ],
        ]
        table = Table(data, colWidths=[1.3 * inch] * 5)
        table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), ACCENT),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('FONTNAME', (0, 1), (-1, 1), 'Helvetica'),
            ('ALIGN', (0, 0), (-1, -1), 'CENTER'),
            ('TOPPADDING', (0, 0), (-1, -1), 8),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 8),
            ('GRID', (0, 0), (-1, -1), 1, GRID),
        ]))
        elements.append(table)

        largest = summary.get('largest_expense_category')
        if largest and largest != 'None':
            elements.append(Spacer(1, 0.1 * inch))
            elements.append(Paragraph(
                f"<b>Largest expense category:</b> {escape(largest)} "
                f"({summary.get('largest_expense_amount', 0.0):.2f})",
                self.styles['InfoText']
            ))

        elements.append(Spacer(1, 0.3 * inch))
        return elements

    def _create_category_section(self, category_breakdown: list[dict]) -> list:
        """Create the expense-by-category table."""
        if not category_breakdown:
            return []

        total = sum(item['value'] for item in category_breakdown)
        data = [['Category', 'Spent', 'Share']]
        for item in category_breakdown:
            share = (item['value'] / total * 100) if total else 0.0
            data.append([item['name'], f"{item['value']:.2f}", f"{share:.1f}%"])

        table = Table(data, colWidths=[3.0 * inch, 1.8 * inch, 1.2 * inch])
        table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), ACCENT),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('ALIGN', (1, 0), (-1, -1), 'RIGHT'),
            ('GRID', (0, 0), (-1, -1), 1, GRID),
            *[('BACKGROUND', (0, i), (-1, i), STRIPE) for i in range(2, len(data), 2)]
        ]))

        return [
            Paragraph("Expenses by Category", self.styles['SectionHeading']),
            table,
            Spacer(1, 0.3 * inch),
        ]

    def _create_month_section(self, month: str, transactions: list[TransactionCandidate]) -> list:
        """
        Create a section for one month's transactions.

        Args:
            month: Month string (YYYY-MM)
            transactions: List of transactions for this month

        Returns:
            List of reportlab elements
        """
        elements = [
            Paragraph(self._format_month_heading(month), self.styles['SectionHeading']),
            Spacer(1, 0.1 * inch),
            self._create_transaction_table(transactions),
            Spacer(1, 0.3 * inch),
        ]
        return elements

    def _create_transaction_table(self, transactions: list[TransactionCandidate]) -> Table:
        """Create table of transactions with a total row."""
        data = [['Date', 'Description', 'Category', 'Amount']]

        for txn in transactions:
            data.append([
                txn.date or '[No date]',
                self._truncate_description(txn.description or '[No description]', max_length=45),
                txn.category,
                txn.amount_display
            ])

        total = sum(t.amount for t in transactions)
        data.append(['', 'TOTAL', '', f"{total:+.2f}"])

        table = Table(data, colWidths=[1.0 * inch, 3.3 * inch, 1.4 * inch, 1.2 * inch])
        table.setStyle(TableStyle([
            # Header row
            ('BACKGROUND', (0, 0), (-1, 0), ACCENT),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
            ('ALIGN', (0, 0), (-1, 0), 'CENTER'),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, 0), 11),

            # Data rows
            ('FONTNAME', (0, 1), (-1, -2), 'Helvetica'),
            ('FONTSIZE', (0, 1), (-1, -2), 9),
            ('ALIGN', (3, 1), (3, -1), 'RIGHT'),

            # Total row
            ('BACKGROUND', (0, -1), (-1, -1), ACCENT),
            ('FONTNAME', (0, -1), (-1, -1), 'Helvetica-Bold'),
            ('LINEABOVE', (0, -1), (-1, -1), 2, colors.black),

            ('GRID', (0, 0), (-1, -1), 1, GRID),
            *[('BACKGROUND', (0, i), (-1, i), STRIPE) for i in range(2, len(data) - 1, 2)]
        ]))

        return table

    @staticmethod
    def _format_month_heading(month: str) -> str:
        """Format YYYY-MM as e.g. 'January 2025'."""
        try:
            return datetime.strptime(month, '%Y-%m').strftime('%B %Y')
        except ValueError:
            return month

    @staticmethod
    def _truncate_description(description: str, max_length: int = 60) -> str:
        if len(description) <= max_length:
            return description
        return description[:max_length - 3] + "..."


def generate_pdf_report(
    output_path: str,
    grouped_transactions: dict[str, list[TransactionCandidate]],
    summary: dict,
    category_breakdown: list[dict],
    title: str = "Statement Transaction Report"
):
    """
    Convenience function to generate a PDF report.

    Args:
        output_path: Path where PDF will be saved
        grouped_transactions: {month: [transactions]}
        summary: Dashboard summary
        category_breakdown: Expense totals per category
        title: Report title
    """
    writer = PDFReportWriter(output_path)
    writer.generate_report(grouped_transactions, summary, category_breakdown, title)


def backup_to_json(transactions: list[TransactionCandidate]) -> str:
    """Serialize transactions in the backup format: a JSON list of records, indent 2."""
    return json.dumps([txn.to_dict() for txn in transactions], indent=2)


def backup_from_json(raw) -> list[TransactionCandidate]:
    """
    Parse backup text (str or bytes) back into transactions.

    Raises:
        ValueError: If the text is not JSON or not a list of transaction records
    """
    data = json.loads(raw)

    if not isinstance(data, list):
        raise ValueError("Invalid data format. Expected an array of transactions.")

    if not all(isinstance(item, dict) and all(field in item for field in REQUIRED_FIELDS) for item in data):
        raise ValueError("Invalid transaction data. Some required fields are missing.")

    try:
        return [TransactionCandidate.from_dict(item) for item in data]
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid transaction data. {e}") from e


def export_json(transactions: list[TransactionCandidate], output_path: str) -> Path:
    """
    Write transactions as a pretty-printed JSON backup.

    Returns:
        Path of the written file

    Raises:
        ReportError: If the file cannot be written
    """
    path = Path(output_path)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(backup_to_json(transactions), encoding='utf-8')
    except OSError as e:
        logger.error(f"Failed to write backup {path}: {e}")
        raise ReportError(f"Failed to write backup file: {e}") from e

    logger.info(f"Exported {len(transactions)} transactions to {path}")
    return path


def load_json(input_path: str) -> list[TransactionCandidate]:
    """
    Read a JSON backup written by export_json.

    Raises:
        ValueError: If the file is not a list of transaction records
    """
    transactions = backup_from_json(Path(input_path).read_text(encoding='utf-8'))
    logger.info(f"Imported {len(transactions)} transactions from {input_path}")
    return transactions
