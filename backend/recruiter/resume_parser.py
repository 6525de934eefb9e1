"""
CV text extraction from uploaded PDF, Word and plain-text files.

Parsing never raises: a broken document is logged and yields an empty
string, and the batch pipeline skips anything too short to rank.
"""

import io
import logging
import os

import pdfplumber
from docx import Document

from .config import MIN_CV_CHARS

logger = logging.getLogger(__name__)


# ── Media types ─────────────────────────────────────────────────────────────

PDF_TYPE = "application/pdf"
DOCX_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

# Browsers and curl send these when they cannot tell what the file is
GENERIC_TYPES: set[str] = {"", "application/octet-stream", "binary/octet-stream"}

EXTENSION_TYPES: dict[str, str] = {
    ".pdf": PDF_TYPE,
    ".docx": DOCX_TYPE,
}


# ── Helpers ─────────────────────────────────────────────────────────────────

def _resolve_type(content_type: str | None, filename: str) -> str:
    """Return the declared media type, or one guessed from the extension."""
    declared = (content_type or "").split(";")[0].strip().lower()
    if declared in GENERIC_TYPES:
        ext = os.path.splitext(filename)[1].lower()
        return EXTENSION_TYPES.get(ext, declared)
    return declared


def _pdf_text(data: bytes) -> str:
    with pdfplumber.open(io.BytesIO(data)) as pdf:
        return "\n".join(page.extract_text() or "" for page in pdf.pages)


def _docx_text(data: bytes) -> str:
    doc = Document(io.BytesIO(data))
    return "\n".join(p.text for p in doc.paragraphs)


# ── Public API ──────────────────────────────────────────────────────────────

def extract_text(data: bytes, content_type: str | None, filename: str = "") -> str:
    """Extract plain text from a PDF, DOCX or UTF-8 text upload."""
    media_type = _resolve_type(content_type, filename)

    if media_type == PDF_TYPE:
        logger.info("Extracting PDF: %s", filename)
        try:
            return _pdf_text(data)
        except Exception as e:
            logger.error("PDF parsing error for %s: %s", filename, e)
            return ""

    if media_type == DOCX_TYPE:
        logger.info("Extracting Word document: %s", filename)
        try:
            return _docx_text(data)
        except Exception as e:
            logger.error("Word parsing error for %s: %s", filename, e)
            return ""

    logger.info("Reading as text: %s", filename)
    return data.decode("utf-8", errors="replace")


def has_enough_text(text: str | None) -> bool:
    """True when the extracted text is long enough to be worth ranking."""
    return bool(text) and len(text.strip()) >= MIN_CV_CHARS
