"""Turn uploaded CV/project files into plain text.

PDFs go through PyPDF2 first, then a Gemini read of the whole document, and
finally a truncated decode of the raw bytes. A bad PDF therefore never fails
an upload; it only degrades the text the evaluator sees.
"""

import io
import os

from flask import current_app
from PyPDF2 import PdfReader

from ..errors import EvaluatorError, ExtractionError
from .gemini_wrap import client_from_app


def _extension(filename: str) -> str:
    return os.path.splitext(filename or "")[1].lower().lstrip(".")


def _decode(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


def extract_pdf_pages(data: bytes) -> str:
    """Return page-labelled text from every page that yields some, or '' if none do."""
    try:
        reader = PdfReader(io.BytesIO(data))
        pages = reader.pages
        page_count = len(pages)
    except Exception as e:
        current_app.logger.warning("failed to read PDF: %s", e)
        return ""

    chunks = []
    for i in range(page_count):
        try:
            text = pages[i].extract_text() or ""
        except Exception as e:
            current_app.logger.warning("error extracting text from page %d: %s", i + 1, e)
            continue
        if text.strip():
            chunks.append(f"--- Page {i + 1} ---\n{text}")
        else:
            current_app.logger.info("no text found on page %d", i + 1)
    return "\n\n".join(chunks).strip()


def extract_pdf_text(data: bytes, client=None) -> str:
    text = extract_pdf_pages(data)
    if text:
        current_app.logger.info("extracted text from PDF (%d characters)", len(text))
        return text

    current_app.logger.warning("standard PDF extraction found no text, trying Gemini")
    client = client or client_from_app()
    try:
        text = client.extract_pdf_text(data)
    except EvaluatorError as e:
        current_app.logger.warning("Gemini PDF extraction failed: %s", e)
        text = ""
    if text:
        return text

    limit = current_app.config.get("RAW_TEXT_LIMIT", 5000)
    current_app.logger.warning("all PDF extraction methods failed, returning raw data")
    return _decode(data[:limit])


def extract_text(data: bytes, filename: str, client=None) -> str:
    """Extract text from an uploaded file, choosing the strategy from its extension."""
    if not isinstance(data, (bytes, bytearray)):
        raise ExtractionError("upload data must be bytes")
    ext = _extension(filename)
    if ext == "txt":
        return _decode(bytes(data))
    if ext == "pdf":
        return extract_pdf_text(bytes(data), client=client)

    limit = current_app.config.get("UNKNOWN_TEXT_LIMIT", 10000)
    return _decode(bytes(data[:limit]))
