"""
Personal Finance Statement Extractor - Streamlit Frontend
Upload a statement, review the extracted transactions and their summary.
"""

import streamlit as st
import sys
import logging
import tempfile
from pathlib import Path
from datetime import datetime

# Add backend to path
backend_path = Path(__file__).parent.parent / 'backend'
sys.path.insert(0, str(backend_path))

from config import config
from logging_config import setup_logging
from loaders.pdf_loader import load_pdf_bytes, PDFLoadError
from extractors.categories import DEFAULT_CATEGORIES
from pipeline import StatementProcessor, TransactionFilter, TransactionGrouper, build_dashboard
from output.writer import ReportError, backup_from_json, backup_to_json, generate_pdf_report

setup_logging()
logger = logging.getLogger(__name__)

st.set_page_config(
    page_title="Statement Extractor",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded"
)

st.markdown("""
<style>
    .main-header {
        font-size: 2.5rem;
        font-weight: bold;
        color: #ef8145;
        margin-bottom: 0.5rem;
    }
    .sub-header {
        font-size: 1.2rem;
        color: #808183;
        margin-bottom: 2rem;
    }
</style>
""", unsafe_allow_html=True)

if 'transactions' not in st.session_state:
    st.session_state.transactions = None
if 'file_name' not in st.session_state:
    st.session_state.file_name = None
if 'report' not in st.session_state:
    st.session_state.report = None


def main():
    """Main application function."""
    st.markdown('<div class="main-header">💰 Statement Extractor</div>', unsafe_allow_html=True)
    st.markdown('<div class="sub-header">Turn a bank statement PDF into categorized transactions</div>', unsafe_allow_html=True)

    with st.sidebar:
        st.header("📋 Statement")
        uploaded_file = st.file_uploader(
            "Choose a bank statement PDF",
            type=['pdf'],
            help=f"PDF only, up to {config.MAX_FILE_SIZE_MB} MB"
        )

        process_btn = st.button(
            "🚀 Extract Transactions",
            type="primary",
            use_container_width=True,
            disabled=uploaded_file is None
        )

        backup_file = st.file_uploader(
            "Restore a JSON backup",
            type=['json'],
            help="A file saved with the JSON Backup download"
        )
        restore_btn = st.button(
            "♻️ Restore Backup",
            use_container_width=True,
            disabled=backup_file is None
        )

        st.divider()
        st.header("🔍 Filters")
        keyword = st.text_input("Description contains")
        category_names = [c["name"] for c in DEFAULT_CATEGORIES]
        category = st.selectbox("Category", ["All"] + category_names)
        txn_type = st.radio("Type", ["All", "income", "expense"], horizontal=True)

    if process_btn and uploaded_file is not None:
        process_statement(uploaded_file)
    if restore_btn and backup_file is not None:
        restore_backup(backup_file)

    if st.session_state.transactions is None:
        st.info("👈 Upload a statement PDF from the sidebar to get started")
        return

    transactions = TransactionFilter.filter_by_keyword(st.session_state.transactions, keyword)
    if category != "All":
        transactions = TransactionFilter.filter_by_category(transactions, category)
    if txn_type != "All":
        transactions = TransactionFilter.filter_by_type(transactions, txn_type)

    display_results(transactions, (keyword, category, txn_type))


def process_statement(uploaded_file):
    """Extract and validate transactions from the uploaded statement."""
    content = uploaded_file.getvalue()
    is_valid, error = config.validate_file(uploaded_file.name, len(content))
    if not is_valid:
        st.error(f"❌ {error}")
        return

    with st.spinner(f"Reading {uploaded_file.name}..."):
        try:
            text = load_pdf_bytes(content, uploaded_file.name)
        except PDFLoadError as e:
            st.error(f"❌ Could not read statement: {e}")
            return

        processor = StatementProcessor()
        transactions = processor.process_text(text)

    stats = processor.stats
    if stats["total_extracted"] == 0:
        st.warning("⚠️ No transactions found. The statement may not contain a recognizable transaction section.")
    elif stats["valid_transactions"] < stats["total_extracted"]:
        st.warning(
            f"⚠️ {stats['total_extracted'] - stats['valid_transactions']} of "
            f"{stats['total_extracted']} extracted lines failed validation and were skipped"
        )

    st.session_state.transactions = transactions
    st.session_state.file_name = uploaded_file.name
    st.session_state.report = None
    logger.info(f"Loaded {len(transactions)} transactions from {uploaded_file.name}")


def restore_backup(backup_file):
    """Replace the current transactions with those from a JSON backup."""
    try:
        transactions = backup_from_json(backup_file.getvalue())
    except ValueError as e:
        st.error(f"❌ Could not restore backup: {e}")
        return

    st.session_state.transactions = transactions
    st.session_state.file_name = backup_file.name
    st.session_state.report = None
    st.success(f"✅ Restored {len(transactions)} transactions from {backup_file.name}")
    logger.info(f"Restored {len(transactions)} transactions from {backup_file.name}")


def build_report_pdf(transactions, dashboard) -> bytes:
    """Render the PDF report in a temporary directory and return its bytes."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        report_path = Path(tmp_dir) / "report.pdf"
        generate_pdf_report(
            output_path=str(report_path),
            grouped_transactions=TransactionGrouper.group_by_month(transactions),
            summary=dashboard["summary"],
            category_breakdown=dashboard["category_breakdown"],
            title=f"Statement Report - {st.session_state.file_name}"
        )
        return report_path.read_bytes()


def display_results(transactions, filters):
    """Show metrics, charts, the transaction table and downloads."""
    dashboard = build_dashboard(transactions)
    summary = dashboard["summary"]

    st.subheader(f"📊 {st.session_state.file_name}")
    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("Total Income", f"${summary['total_income']:,.2f}")
    with col2:
        st.metric("Total Expenses", f"${summary['total_expenses']:,.2f}")
    with col3:
        st.metric("Net Cashflow", f"${summary['net_cashflow']:+,.2f}")
    with col4:
        st.metric("Savings Rate", f"{summary['savings_rate']:.1f}%")

    if summary["largest_expense_category"] != "None":
        st.caption(
            f"Largest expense category: **{summary['largest_expense_category']}** "
            f"(${summary['largest_expense_amount']:,.2f})"
        )

    st.divider()

    chart_col1, chart_col2 = st.columns(2)
    with chart_col1:
        st.markdown("**Expenses by Category**")
        if dashboard["category_breakdown"]:
            st.bar_chart({
                "spent": {item["name"]: item["value"] for item in dashboard["category_breakdown"]}
            })
        else:
            st.caption("No expenses")
    with chart_col2:
        st.markdown("**Monthly Trend**")
        if dashboard["monthly_trend"]:
            st.line_chart({
                "income": {row["month"]: row["income"] for row in dashboard["monthly_trend"]},
                "expenses": {row["month"]: row["expenses"] for row in dashboard["monthly_trend"]},
            })
        else:
            st.caption("No dated transactions")

    st.divider()
    st.subheader(f"🧾 Transactions ({len(transactions)})")
    st.dataframe([txn.to_dict() for txn in transactions], use_container_width=True)

    st.subheader("📥 Download")
    col1, col2 = st.columns(2)
    stamp = datetime.now().strftime('%Y%m%d')

    with col1:
        st.download_button(
            label="💾 JSON Backup",
            data=backup_to_json(transactions),
            file_name=f"finance-tracker-backup-{stamp}.json",
            mime="application/json",
            use_container_width=True
        )

    with col2:
        report = st.session_state.report
        if report is None or report["filters"] != filters:
            if st.button("🛠️ Build PDF Report", use_container_width=True):
                try:
                    st.session_state.report = {
                        "filters": filters,
                        "data": build_report_pdf(transactions, dashboard),
                    }
                except ReportError as e:
                    st.error(f"❌ Could not build report: {e}")
                    logger.error(f"Report generation failed: {e}")
            report = st.session_state.report

        if report is not None and report["filters"] == filters:
            st.download_button(
                label="📄 PDF Report",
                data=report["data"],
                file_name=f"statement_report_{stamp}.pdf",
                mime="application/pdf",
                type="primary",
                use_container_width=True
            )

    if st.button("🔄 Process Another Statement", use_container_width=True):
        st.session_state.transactions = None
        st.session_state.file_name = None
        st.session_state.report = None
        st.rerun()


if __name__ == "__main__":
    main()
