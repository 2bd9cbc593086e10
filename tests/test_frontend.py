from pathlib import Path

import pytest
from streamlit.testing.v1 import AppTest

from extractors.regex_extractor import TransactionCandidate

APP_PATH = str(Path(__file__).resolve().parents[1] / "frontend" / "app.py")


@pytest.fixture
def app(output_dirs, restore_root_logging):
    at = AppTest.from_file(APP_PATH, default_timeout=30)
    at.session_state["transactions"] = [
        TransactionCandidate("2023-03-01", "PAYROLL DEPOSIT", 2500.0, "Income"),
        TransactionCandidate("2023-03-03", "DEBIT CORNER MARKET", -54.2, "Groceries"),
    ]
    at.session_state["file_name"] = "march.pdf"
    return at


def button(at, label):
    return next(b for b in at.button if b.label == label)


def test_rerun_does_not_write_reports(app, output_dirs) -> None:
    app.run()
    app.run()

    assert not app.exception
    assert app.session_state["report"] is None
    output = output_dirs / "output"
    assert not output.exists() or not any(output.iterdir())


def test_report_is_built_on_request(app, output_dirs) -> None:
    app.run()

    button(app, "🛠️ Build PDF Report").click().run()

    assert not app.exception
    assert app.session_state["report"]["data"].startswith(b"%PDF")
    output = output_dirs / "output"
    assert not output.exists() or not any(output.iterdir())
