"""
Text extraction: pulls plain text out of uploaded PDF / DOCX / DOC / TXT files
so it can be handed to the AI gateway.
"""
from __future__ import annotations

import logging
import re
from io import BytesIO
from typing import List

import docx  # python-docx
import pypdf
from pypdf.errors import PyPdfError

from lawhelper.utils.exceptions import ExtractionError

logger = logging.getLogger(__name__)

PDF_MIME = "application/pdf"
DOC_MIME = "application/msword"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
TXT_MIME = "text/plain"

EXTENSION_MIME_TYPES = {
    ".pdf": PDF_MIME,
    ".doc": DOC_MIME,
    ".docx": DOCX_MIME,
    ".txt": TXT_MIME,
}

# Runs of printable characters worth keeping from a legacy .doc binary
_DOC_TEXT_RUN = re.compile(r"[\x20-\x7E\u00A0-\u024F\t\r\n]{4,}")


# ── Extractors ─────────────────────────────────────────────────────────────


def _extract_pdf(data: bytes) -> str:
    """Extract plain text from a PDF byte blob."""
    try:
        reader = pypdf.PdfReader(BytesIO(data))
        pages: List[str] = []
        for page in reader.pages:
            pages.append(page.extract_text() or "")
    except (PyPdfError, ValueError) as e:
        raise ExtractionError(f"Unreadable PDF: {e}") from e
    return "\n\n".join(pages)


def _extract_docx(data: bytes) -> str:
    """Extract plain text from a DOCX byte blob."""
    try:
        document = docx.Document(BytesIO(data))
    except Exception as e:
        # python-docx surfaces corrupt archives as zipfile / KeyError / lxml errors
        raise ExtractionError(f"Unreadable DOCX: {e}") from e
    paragraphs = [p.text for p in document.paragraphs if p.text.strip()]
    return "\n\n".join(paragraphs)


def _extract_doc(data: bytes) -> str:
    """
    Best-effort text from a legacy Word 97-2003 binary.

    There is no structural parser for the OLE format here: the bytes are decoded
    as UTF-16LE (how Word stores most body text) and as latin-1, and the longer
    set of printable runs wins. Formatting, tables and field codes are lost and
    some binary noise can leak through.
    """
    candidates = []
    for encoding in ("utf-16-le", "latin-1"):
        decoded = data.decode(encoding, errors="ignore")
        runs = [m.group(0).strip() for m in _DOC_TEXT_RUN.finditer(decoded)]
        candidates.append("\n".join(r for r in runs if r))
    return max(candidates, key=len)


def _extract_txt(data: bytes) -> str:
    """Decode a plain-text byte blob (UTF-8 with latin-1 fallback)."""
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return data.decode("latin-1", errors="replace")


def resolve_mime_type(mime_type: str, filename: str = "") -> str:
    """
    Normalize the declared MIME type; fall back to the extension when the
    browser sent nothing useful (empty or application/octet-stream).
    """
    declared = (mime_type or "").split(";")[0].strip().lower()
    if declared in EXTENSION_MIME_TYPES.values():
        return declared
    ext = file_extension(filename)
    return EXTENSION_MIME_TYPES.get(ext, declared)


def file_extension(filename: str) -> str:
    name = (filename or "").lower()
    dot = name.rfind(".")
    return name[dot:] if dot != -1 else ""


def extract_text(data: bytes, mime_type: str, filename: str = "") -> str:
    """
    Dispatch to the right extractor and return non-empty text.

    Raises ExtractionError for unsupported types and for documents that yield
    no text at all (e.g. scanned PDFs without a text layer).
    """
    resolved = resolve_mime_type(mime_type, filename)
    if resolved == PDF_MIME:
        text = _extract_pdf(data)
    elif resolved == DOCX_MIME:
        text = _extract_docx(data)
    elif resolved == DOC_MIME:
        text = _extract_doc(data)
        logger.info("doc_extraction_best_effort filename=%s chars=%d", filename, len(text))
    elif resolved == TXT_MIME:
        text = _extract_txt(data)
    else:
        raise ExtractionError(f"Unsupported MIME type for extraction: {mime_type}")

    text = text.strip()
    if not text:
        raise ExtractionError("Could not extract content from the document")
    return text
