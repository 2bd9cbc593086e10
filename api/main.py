"""
FastAPI Backend for the Personal Finance Statement Extractor
RESTful API endpoints for extracting and summarizing statement transactions
"""

from fastapi import FastAPI, File, UploadFile, HTTPException
from fastapi.responses import FileResponse, Response
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from typing import List, Optional
from pathlib import Path
from datetime import datetime
import logging
import sys

# Add backend to path
backend_path = Path(__file__).parent.parent / 'backend'
sys.path.insert(0, str(backend_path))

from config import config
from logging_config import setup_logging
from loaders.pdf_loader import load_pdf_bytes, PDFLoadError
from extractors.categories import DEFAULT_CATEGORIES
from extractors.regex_extractor import TransactionCandidate, extract_transactions_from_text
from output.writer import ReportError, backup_from_json, backup_to_json, generate_pdf_report
from pipeline import TransactionFilter, TransactionGrouper, build_dashboard

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Statement Extractor API",
    description="Extract, categorize and summarize transactions from bank statements",
    version=config.VERSION
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

REPORTS_DIR = config.OUTPUT_DIR / "api_reports"


class TransactionRecord(BaseModel):
    date: str
    description: str
    amount: float
    category: Optional[str] = None


class ExtractRequest(BaseModel):
    text: str


class TransactionsRequest(BaseModel):
    transactions: List[TransactionRecord]
    type: Optional[str] = None


class ReportRequest(BaseModel):
    transactions: List[TransactionRecord]
    title: str = "Statement Transaction Report"


def _to_candidates(records: List[TransactionRecord]) -> list[TransactionCandidate]:
    return [TransactionCandidate.from_dict(record.model_dump()) for record in records]


def _report_path(filename: str) -> Path:
    """Resolve a report name inside REPORTS_DIR, refusing path traversal."""
    if Path(filename).name != filename or not filename.endswith('.pdf'):
        raise HTTPException(status_code=400, detail="Invalid report name")
    return REPORTS_DIR / filename


@app.get("/")
async def root():
    """Root endpoint - API information"""
    return {
        "message": config.APP_NAME,
        "version": config.VERSION,
        "endpoints": {
            "POST /api/upload/bank-statement": "Extract transactions from a PDF statement",
            "POST /api/transactions/extract": "Extract transactions from statement text",
            "GET /api/categories": "List default categories",
            "POST /api/dashboard": "Summarize transactions",
            "POST /api/backup/export": "Download transactions as a JSON backup",
            "POST /api/backup/restore": "Read transactions back from a JSON backup",
            "POST /api/reports": "Generate a PDF report",
            "GET /api/reports": "List generated reports",
            "GET /health": "Health check"
        }
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat()
    }


@app.post("/api/upload/bank-statement")
async def upload_bank_statement(pdfFile: Optional[UploadFile] = File(None)):
    """
    Extract transaction candidates from an uploaded statement PDF.

    - **pdfFile**: the statement (PDF, at most MAX_FILE_SIZE_MB)
    """
    if pdfFile is None or not pdfFile.filename:
        raise HTTPException(status_code=400, detail="No file uploaded")

    content = await pdfFile.read()

    is_valid, error = config.validate_file(pdfFile.filename, len(content))
    if not is_valid:
        status_code = 413 if len(content) > config.MAX_FILE_SIZE_BYTES else 400
        raise HTTPException(status_code=status_code, detail=error)

    try:
        text = load_pdf_bytes(content, pdfFile.filename)
    except PDFLoadError as e:
        logger.error(f"Error processing {pdfFile.filename}: {e}")
        raise HTTPException(status_code=422, detail=str(e))

    transactions = extract_transactions_from_text(text)
    logger.info(f"Extracted {len(transactions)} transactions from {pdfFile.filename}")

    return {
        "success": True,
        "message": "File processed successfully",
        "fileName": pdfFile.filename,
        "transactions": [txn.to_dict() for txn in transactions]
    }


@app.post("/api/transactions/extract")
async def extract_from_text(request: ExtractRequest):
    """Extract transaction candidates from already-extracted statement text."""
    transactions = extract_transactions_from_text(request.text)
    return {
        "count": len(transactions),
        "transactions": [txn.to_dict() for txn in transactions]
    }


@app.get("/api/categories")
async def list_categories():
    """Default category table"""
    return {"categories": DEFAULT_CATEGORIES}


@app.post("/api/dashboard")
async def dashboard(request: TransactionsRequest):
    """
    Summary figures, expense breakdown by category and monthly trend.

    - **type**: optional 'income' or 'expense' filter
    """
    transactions = _to_candidates(request.transactions)
    try:
        transactions = TransactionFilter.filter_by_type(transactions, request.type)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return build_dashboard(transactions)


@app.post("/api/backup/export")
async def export_backup(request: TransactionsRequest):
    """Return the transactions as a downloadable JSON backup."""
    transactions = _to_candidates(request.transactions)
    filename = f"finance-tracker-backup-{datetime.now().strftime('%Y%m%d')}.json"
    return Response(
        content=backup_to_json(transactions),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )


@app.post("/api/backup/restore")
async def restore_backup(backupFile: Optional[UploadFile] = File(None)):
    """
    Read transactions from a JSON backup file.

    - **backupFile**: a file produced by the JSON backup export
    """
    if backupFile is None or not backupFile.filename:
        raise HTTPException(status_code=400, detail="No file uploaded")

    try:
        transactions = backup_from_json(await backupFile.read())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    logger.info(f"Restored {len(transactions)} transactions from {backupFile.filename}")
    return {
        "success": True,
        "message": f"Restored {len(transactions)} transactions",
        "transactions": [txn.to_dict() for txn in transactions]
    }


@app.post("/api/reports")
async def create_report(request: ReportRequest):
    """Generate a PDF report for the given transactions."""
    transactions = _to_candidates(request.transactions)
    dashboard_data = build_dashboard(transactions)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
    report_filename = f"report_{timestamp}.pdf"
    report_path = REPORTS_DIR / report_filename

    try:
        generate_pdf_report(
            output_path=str(report_path),
            grouped_transactions=TransactionGrouper.group_by_month(transactions),
            summary=dashboard_data["summary"],
            category_breakdown=dashboard_data["category_breakdown"],
            title=request.title
        )
    except ReportError as e:
        logger.error(f"Report generation failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    return {
        "status": "success",
        "report": {
            "filename": report_filename,
            "download_url": f"/api/reports/{report_filename}",
            "generated_at": datetime.now().isoformat()
        },
        "summary": dashboard_data["summary"]
    }


@app.get("/api/reports")
async def list_reports():
    """List all available reports"""
    reports = []

    if REPORTS_DIR.exists():
        for report_file in REPORTS_DIR.glob("*.pdf"):
            stat = report_file.stat()
            reports.append({
                "filename": report_file.name,
                "created_at": datetime.fromtimestamp(stat.st_mtime).isoformat(),
                "size_bytes": stat.st_size,
                "download_url": f"/api/reports/{report_file.name}"
            })

    reports.sort(key=lambda x: x['created_at'], reverse=True)

    return {
        "total_reports": len(reports),
        "reports": reports
    }


@app.get("/api/reports/{filename}")
async def download_report(filename: str):
    """Download a generated PDF report."""
    report_path = _report_path(filename)

    if not report_path.exists():
        raise HTTPException(status_code=404, detail="Report not found")

    return FileResponse(
        path=str(report_path),
        media_type="application/pdf",
        filename=filename
    )


@app.delete("/api/reports/{filename}")
async def delete_report(filename: str):
    """Delete a report file."""
    report_path = _report_path(filename)

    if not report_path.exists():
        raise HTTPException(status_code=404, detail="Report not found")

    try:
        report_path.unlink()
    except OSError as e:
        raise HTTPException(status_code=500, detail=f"Error deleting report: {str(e)}")

    return {
        "status": "success",
        "message": f"Report {filename} deleted successfully"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=config.API_HOST, port=config.API_PORT)
