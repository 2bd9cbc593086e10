import logging

import fitz
import pytest

from config import Config

STATEMENT_LINES = [
    "FIRST NATIONAL BANK",
    "Statement Period 03/01/2023 - 04/30/2023",
    "Opening Balance 03/01/2023 $1,000.00",
    "ACCOUNT ACTIVITY",
    "03/01/2023 PAYROLL DEPOSIT ACME CORP $2,500.00",
    "03/03/2023 DEBIT CORNER MARKET $54.20",
    "03/07/2023 DEBIT JOE'S CAFE $12.75",
    "03/09/2023 ATM WITHDRAWAL $100.00",
    "03/15/2023 DEBIT NETFLIX.COM $15.49",
    "03/20/2023 UBER TRIP -$23.10",
    "Page 1 of 2",
    "04/02/2023 DEBIT AMAZON MKTP $89.99",
    "ACCOUNT SUMMARY",
    "Closing Balance 04/30/2023 $3,184.47",
]


def build_pdf(lines: list[str]) -> bytes:
    """Render one text line per row on a single PDF page."""
    doc = fitz.open()
    page = doc.new_page()
    y = 72
    for line in lines:
        page.insert_text((72, y), line, fontsize=10)
        y += 14
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def statement_text() -> str:
    return "\n".join(STATEMENT_LINES) + "\n"


@pytest.fixture
def statement_pdf_bytes() -> bytes:
    return build_pdf(STATEMENT_LINES)


@pytest.fixture
def statement_pdf(tmp_path, statement_pdf_bytes):
    path = tmp_path / "statement.pdf"
    path.write_bytes(statement_pdf_bytes)
    return path


@pytest.fixture
def output_dirs(tmp_path, monkeypatch):
    """Point OUTPUT_DIR and LOG_DIR at a temporary directory."""
    monkeypatch.setattr(Config, "OUTPUT_DIR", tmp_path / "output")
    monkeypatch.setattr(Config, "LOG_DIR", tmp_path / "logs")
    return tmp_path


@pytest.fixture
def restore_root_logging():
    """setup_logging replaces root handlers; put the originals back afterwards."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
