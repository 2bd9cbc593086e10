"""
PDF Loader Module
Extracts text from bank statement PDFs using PyMuPDF (fitz).
"""

import fitz  # PyMuPDF
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class PDFLoadError(Exception):
    """Raised when no statement text can be obtained from a PDF."""
    pass


def _extract_text(doc: "fitz.Document", source: str) -> str:
    """Join the text of every non-empty page of an open document."""
    if doc.page_count == 0:
        logger.error(f"PDF has no pages: {source}")
        raise PDFLoadError(f"PDF has no pages: {source}")

    logger.info(f"Loading PDF: {source} ({doc.page_count} pages)")

    text_chunks = []
    empty_pages = 0

    for page_num in range(doc.page_count):
        text = doc[page_num].get_text()

        if text.strip():
            text_chunks.append(text)
            logger.debug(f"Page {page_num + 1}: extracted {len(text)} characters")
        else:
            empty_pages += 1
            logger.warning(f"Page {page_num + 1}: empty or no extractable text")

    if not text_chunks:
        raise PDFLoadError(f"No text could be extracted from PDF: {source}")

    combined_text = "\n".join(text_chunks)

    logger.info(
        f"Extraction complete: {len(combined_text)} characters from "
        f"{len(text_chunks)} pages ({empty_pages} empty pages skipped)"
    )

    return combined_text


def load_pdf(file_path: str) -> str:
    """
    Extract text from all pages of a PDF file.

    Args:
        file_path: Path to the PDF file

    Returns:
        Combined text from all pages as a single string

    Raises:
        PDFLoadError: If the PDF cannot be loaded or read
    """
    pdf_path = Path(file_path)
    if not pdf_path.exists():
        logger.error(f"PDF file not found: {file_path}")
        raise PDFLoadError(f"PDF file not found: {file_path}")

    if not pdf_path.suffix.lower() == '.pdf':
        logger.error(f"File is not a PDF: {file_path}")
        raise PDFLoadError(f"File is not a PDF: {file_path}")

    doc = None
    try:
        doc = fitz.open(file_path)
        return _extract_text(doc, str(file_path))

    except PDFLoadError:
        raise

    except fitz.FileDataError as e:
        logger.error(f"Invalid or corrupted PDF file: {file_path}", exc_info=True)
        raise PDFLoadError(f"Invalid or corrupted PDF file: {file_path}") from e

    except Exception as e:
        logger.error(f"Unexpected error loading PDF {file_path}: {e}", exc_info=True)
        raise PDFLoadError(f"Failed to load PDF {file_path}: {str(e)}") from e

    finally:
        if doc is not None:
            doc.close()
            logger.debug(f"PDF document closed: {file_path}")


def load_pdf_bytes(data: bytes, name: str = "upload.pdf") -> str:
    """
    Extract text from an in-memory PDF, e.g. an HTTP upload.

    Args:
        data: Raw PDF bytes
        name: Display name used in log and error messages

    Returns:
        Combined text from all pages as a single string

    Raises:
        PDFLoadError: If the bytes are empty or not a readable PDF
    """
    if not data:
        logger.error(f"Empty upload: {name}")
        raise PDFLoadError(f"Uploaded file is empty: {name}")

    doc = None
    try:
        doc = fitz.open(stream=data, filetype="pdf")
        return _extract_text(doc, name)

    except PDFLoadError:
        raise

    except (fitz.FileDataError, RuntimeError, ValueError) as e:
        logger.error(f"Invalid or corrupted PDF upload: {name}", exc_info=True)
        raise PDFLoadError(f"Invalid or corrupted PDF file: {name}") from e

    finally:
        if doc is not None:
            doc.close()
