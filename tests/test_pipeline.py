import json

import pytest

from config import Config
from extractors.regex_extractor import TransactionCandidate
from loaders.pdf_loader import PDFLoadError
from pipeline import (
    StatementProcessor,
    TransactionFilter,
    TransactionGrouper,
    build_dashboard,
    main,
    summarize,
)
from tests.conftest import build_pdf


def txn(date, description, amount, category="Uncategorized"):
    return TransactionCandidate(date=date, description=description, amount=amount, category=category)


@pytest.fixture
def ledger():
    return [
        txn("2023-12-15", "PAYROLL", 2500.0, "Income"),
        txn("2023-12-16", "CORNER MARKET", -54.2, "Groceries"),
        txn("2023-12-20", "ATM WITHDRAWAL", -100.0),
        txn("2024-01-02", "Whole Foods Market", -30.0, "Groceries"),
        txn("not a date", "BROKEN", -1.0),
    ]


def test_summarize(ledger) -> None:
    summary = summarize(ledger)

    assert summary["total_income"] == 2500.0
    assert summary["total_expenses"] == pytest.approx(185.2)
    assert summary["net_cashflow"] == pytest.approx(2314.8)
    assert summary["savings_rate"] == pytest.approx(92.6)
    assert summary["largest_expense_category"] == "Uncategorized"
    assert summary["largest_expense_amount"] == pytest.approx(101.0)
    assert summary["transaction_count"] == 5


def test_summarize_empty() -> None:
    assert summarize([]) == {
        "total_income": 0,
        "total_expenses": 0,
        "net_cashflow": 0,
        "savings_rate": 0.0,
        "largest_expense_category": "None",
        "largest_expense_amount": 0.0,
        "transaction_count": 0,
    }


def test_category_breakdown_counts_expenses_only(ledger) -> None:
    breakdown = TransactionGrouper.category_breakdown(ledger)

    assert [item["name"] for item in breakdown] == ["Uncategorized", "Groceries"]
    assert breakdown[1]["value"] == pytest.approx(84.2)


def test_monthly_trend_is_chronological(ledger) -> None:
    trend = TransactionGrouper.monthly_trend(ledger)

    assert [row["month"] for row in trend] == ["2023-12", "2024-01"]
    assert trend[0]["income"] == 2500.0
    assert trend[0]["expenses"] == pytest.approx(154.2)
    assert trend[1] == {"month": "2024-01", "income": 0, "expenses": 30.0}


def test_group_by_month_skips_unreadable_dates(ledger) -> None:
    grouped = TransactionGrouper.group_by_month(ledger)

    assert sorted(grouped) == ["2023-12", "2024-01"]
    assert len(grouped["2023-12"]) == 3


def test_group_by_month_reads_statement_dates() -> None:
    grouped = TransactionGrouper.group_by_month([txn("03/05/2023", "X", 1.0)])

    assert list(grouped) == ["2023-03"]


def test_filter_by_keyword_is_case_insensitive(ledger) -> None:
    result = TransactionFilter.filter_by_keyword(ledger, "market")

    assert [t.description for t in result] == ["CORNER MARKET", "Whole Foods Market"]
    assert TransactionFilter.filter_by_keyword(ledger, "") == ledger


def test_filter_by_category(ledger) -> None:
    assert len(TransactionFilter.filter_by_category(ledger, "Groceries")) == 2


def test_filter_by_type(ledger) -> None:
    assert [t.description for t in TransactionFilter.filter_by_type(ledger, "income")] == ["PAYROLL"]
    assert len(TransactionFilter.filter_by_type(ledger, "expense")) == 4

    with pytest.raises(ValueError):
        TransactionFilter.filter_by_type(ledger, "transfer")


def test_filter_by_date_range_is_inclusive(ledger) -> None:
    assert len(TransactionFilter.filter_by_date_range(ledger, "2023-12", "2023-12")) == 3
    assert len(TransactionFilter.filter_by_date_range(ledger, "2024-01", None)) == 1
    assert len(TransactionFilter.filter_by_date_range(ledger, None, None)) == 5


def test_build_dashboard_keys(ledger) -> None:
    assert set(build_dashboard(ledger)) == {"summary", "category_breakdown", "monthly_trend"}


def test_process_text(statement_text) -> None:
    processor = StatementProcessor()

    transactions = processor.process_text(statement_text)

    assert len(transactions) == 7
    assert transactions[0].date == "2023-03-01"
    assert processor.stats["total_extracted"] == 7
    assert processor.stats["valid_transactions"] == 7


def test_process_text_without_sections_is_empty() -> None:
    processor = StatementProcessor()

    assert processor.process_text("03/05/2023 COFFEE $4.50") == []
    assert processor.stats["total_extracted"] == 0


def test_process_pdf_end_to_end(statement_pdf, tmp_path) -> None:
    report = tmp_path / "report.pdf"

    result = StatementProcessor().process(str(statement_pdf), output_path=str(report))

    assert len(result["transactions"]) == 7
    assert result["summary"]["total_income"] == 2500.0
    assert result["summary"]["total_expenses"] == pytest.approx(295.53)
    assert [row["month"] for row in result["monthly_trend"]] == ["2023-03", "2023-04"]
    assert report.read_bytes().startswith(b"%PDF")


def test_process_pdf_with_filters(statement_pdf) -> None:
    processor = StatementProcessor()

    groceries = processor.process(str(statement_pdf), category="Groceries")
    april = processor.process(str(statement_pdf), start_month="2023-04", end_month="2023-04")

    assert [t.description for t in groceries["transactions"]] == ["DEBIT CORNER MARKET"]
    assert [t.description for t in april["transactions"]] == ["DEBIT AMAZON MKTP"]


def test_process_rejects_bad_months(statement_pdf) -> None:
    with pytest.raises(ValueError, match="YYYY-MM"):
        StatementProcessor().process(str(statement_pdf), start_month="March")

    with pytest.raises(ValueError, match="must be <="):
        StatementProcessor().process(str(statement_pdf), start_month="2023-05", end_month="2023-04")


def test_process_missing_pdf(tmp_path) -> None:
    with pytest.raises(PDFLoadError):
        StatementProcessor().process(str(tmp_path / "missing.pdf"))


def test_cli_writes_json(statement_pdf, tmp_path, output_dirs, restore_root_logging, capsys) -> None:
    backup = tmp_path / "backup.json"

    assert main([str(statement_pdf), "--json", str(backup), "--keyword", "debit"]) == 0

    records = json.loads(backup.read_text())
    assert len(records) == 4
    assert "Transactions: 4" in capsys.readouterr().out


def test_cli_reports_missing_file(tmp_path, output_dirs, restore_root_logging) -> None:
    assert main([str(tmp_path / "missing.pdf")]) == 1


def test_date_range_rejects_unpadded_months(ledger) -> None:
    with pytest.raises(ValueError, match="YYYY-MM"):
        TransactionFilter.filter_by_date_range(ledger, "2023-2", None)

    with pytest.raises(ValueError, match="YYYY-MM"):
        TransactionFilter.filter_by_date_range(ledger, None, "2023-13")


def test_date_range_spans_two_digit_months() -> None:
    october = txn("2023-10-05", "RENT", -900.0)

    assert TransactionFilter.filter_by_date_range([october], "2023-02", "2023-12") == [october]


def test_process_rejects_unpadded_month(statement_pdf) -> None:
    with pytest.raises(ValueError, match="YYYY-MM"):
        StatementProcessor().process(str(statement_pdf), start_month="2023-2", end_month="2023-12")


def test_cli_unpadded_month_is_input_error(statement_pdf, output_dirs, restore_root_logging) -> None:
    assert main([str(statement_pdf), "--start-month", "2023-2"]) == 2


def test_cli_strict_mode_invalid_row_is_input_error(
    tmp_path, output_dirs, restore_root_logging, monkeypatch, capsys
) -> None:
    monkeypatch.setattr(Config, "STRICT_MODE", True)
    pdf = tmp_path / "bad_date.pdf"
    pdf.write_bytes(build_pdf(["ACCOUNT ACTIVITY", "13/45/2023 MYSTERY $1.00"]))

    assert main([str(pdf)]) == 2
    assert "Invalid date: 13/45/2023" in capsys.readouterr().err
