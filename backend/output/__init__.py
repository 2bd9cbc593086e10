"""
Output Module - PDF report generation and JSON backups.
"""

from .writer import (
    PDFReportWriter,
    ReportError,
    generate_pdf_report,
    backup_to_json,
    backup_from_json,
    export_json,
    load_json
)

__all__ = [
    'PDFReportWriter',
    'ReportError',
    'generate_pdf_report',
    'backup_to_json',
    'backup_from_json',
    'export_json',
    'load_json',
]
