"""
Uploaded-document tools: the brief summarizer (generic upload ceiling) and the
document analyzer (its own, smaller ceiling).
"""
import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session

from lawhelper.api.deps import get_ai_service, get_current_user, get_s3_service
from lawhelper.api.errors import ai_failure, upload_failure
from lawhelper.core.config import settings
from lawhelper.db import schemas
from lawhelper.db.database import get_db
from lawhelper.db.models import User
from lawhelper.services.ai_schemas import DocumentAnalysis, DocumentSummary
from lawhelper.services.ai_service import LegalAIService
from lawhelper.services.s3_service import S3Service
from lawhelper.services.search_history_service import SearchHistoryService
from lawhelper.services.text_extraction_service import extract_text
from lawhelper.services.upload_service import UploadedDocument, read_upload

logger = logging.getLogger(__name__)

router = APIRouter()


class AnalyzeDocumentOut(schemas.CamelModel):
    content: str
    analysis: DocumentAnalysis
    file_name: str
    file_size: int
    archive_key: Optional[str] = None


async def _ingest(document: UploadFile, max_bytes: int) -> tuple[UploadedDocument, str]:
    with upload_failure():
        upload = await read_upload(document, max_bytes)
        text = await asyncio.to_thread(extract_text, upload.data, upload.mime_type, upload.filename)
    logger.info(
        "upload_ingested filename=%s mime=%s bytes=%d chars=%d",
        upload.filename, upload.mime_type, upload.size, len(text),
    )
    return upload, text


@router.post("/summarize-document", response_model=DocumentSummary)
async def summarize_document(
    document: UploadFile = File(...),
    summary_type: str = Form("comprehensive", alias="summaryType", max_length=50),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    ai: LegalAIService = Depends(get_ai_service),
    storage: S3Service = Depends(get_s3_service),
):
    upload, text = await _ingest(document, settings.MAX_UPLOAD_BYTES)
    await asyncio.to_thread(storage.archive_upload, current_user.id, upload.filename, upload.data, upload.mime_type)

    with ai_failure("summarize document"):
        summary = await asyncio.to_thread(ai.summarize_document, text, summary_type)

    await asyncio.to_thread(
        SearchHistoryService.record,
        db,
        current_user.id,
        "brief-summarizer",
        upload.filename,
        summary.model_dump(mode="json", by_alias=True),
    )
    return summary


@router.post("/analyze-document", response_model=AnalyzeDocumentOut)
async def analyze_document(
    document: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    ai: LegalAIService = Depends(get_ai_service),
    storage: S3Service = Depends(get_s3_service),
):
    upload, text = await _ingest(document, settings.MAX_ANALYZER_UPLOAD_BYTES)
    archive_key = await asyncio.to_thread(
        storage.archive_upload, current_user.id, upload.filename, upload.data, upload.mime_type
    )

    with ai_failure("analyze document"):
        analysis = await asyncio.to_thread(ai.analyze_document, text, upload.filename)

    await asyncio.to_thread(
        SearchHistoryService.record,
        db,
        current_user.id,
        "document-analysis",
        upload.filename,
        {
            "analysis": analysis.model_dump(mode="json", by_alias=True),
            "fileName": upload.filename,
            "fileSize": upload.size,
            "archiveKey": archive_key,
        },
    )
    return AnalyzeDocumentOut(
        content=text,
        analysis=analysis,
        file_name=upload.filename,
        file_size=upload.size,
        archive_key=archive_key,
    )
