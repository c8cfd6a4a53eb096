"""
Upload ingestion: reads a single multipart file into memory after checking it
against the document allow-list and a per-route size ceiling.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import UploadFile, status

from lawhelper.services.text_extraction_service import EXTENSION_MIME_TYPES, file_extension
from lawhelper.utils.exceptions import UploadRejectedError

logger = logging.getLogger(__name__)

_ALLOWED_MIME_TYPES = set(EXTENSION_MIME_TYPES.values())

# Browsers and curl send these when they cannot tell; the extension decides instead.
_GENERIC_MIME_TYPES = {"", "application/octet-stream", "binary/octet-stream"}

_CHUNK_BYTES = 1024 * 1024


@dataclass
class UploadedDocument:
    filename: str
    mime_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


def _format_limit(max_bytes: int) -> str:
    if max_bytes % (1024 * 1024) == 0:
        return f"{max_bytes // (1024 * 1024)} MB"
    return f"{max_bytes} bytes"


def check_file_type(filename: str, content_type: str) -> str:
    """
    Return the normalized MIME type, or raise UploadRejectedError (415) when
    either the extension or an explicit MIME type is outside the allow-list,
    or when an explicit MIME type disagrees with the extension.
    """
    ext = file_extension(filename)
    declared = (content_type or "").split(";")[0].strip().lower()
    if ext not in EXTENSION_MIME_TYPES:
        raise UploadRejectedError(
            f"Unsupported file type '{ext or filename}'. Allowed: PDF, DOC, DOCX, TXT.",
            status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
        )
    if declared not in _GENERIC_MIME_TYPES and declared not in _ALLOWED_MIME_TYPES:
        raise UploadRejectedError(
            f"Unsupported file type '{declared}'. Allowed: PDF, DOC, DOCX, TXT.",
            status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
        )
    expected = EXTENSION_MIME_TYPES[ext]
    if declared not in _GENERIC_MIME_TYPES and declared != expected:
        logger.info("upload_rejected_mismatch filename=%s declared=%s", filename, declared)
        raise UploadRejectedError(
            f"File type '{declared}' does not match extension '{ext}'.",
            status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
        )
    return expected


async def read_upload(file: UploadFile, max_bytes: int) -> UploadedDocument:
    """
    Validate type first, then read at most ``max_bytes`` + 1 bytes so an
    oversized body is rejected without buffering all of it.
    A file of exactly ``max_bytes`` is accepted.
    """
    filename = file.filename or ""
    mime_type = check_file_type(filename, file.content_type or "")

    buf = bytearray()
    while len(buf) <= max_bytes:
        chunk = await file.read(min(_CHUNK_BYTES, max_bytes + 1 - len(buf)))
        if not chunk:
            break
        buf.extend(chunk)

    if len(buf) > max_bytes:
        logger.info("upload_rejected_size filename=%s limit=%d", filename, max_bytes)
        raise UploadRejectedError(
            f"File too large. Maximum size is {_format_limit(max_bytes)}.",
            status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
        )
    if not buf:
        raise UploadRejectedError("Uploaded file is empty.", status.HTTP_400_BAD_REQUEST)

    return UploadedDocument(filename=filename, mime_type=mime_type, data=bytes(buf))
