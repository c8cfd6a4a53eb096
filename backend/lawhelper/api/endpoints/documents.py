"""
Saved documents: the caller's library of generated and uploaded documents,
plus file export (PDF / DOCX / TXT).
"""
import io
import logging
from typing import List, Literal, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from lawhelper.api.deps import get_current_user, get_owned_or_404
from lawhelper.db import schemas
from lawhelper.db.database import get_db
from lawhelper.db.models import Case, SavedDocument, User
from lawhelper.services import export_service
from lawhelper.services.document_service import DocumentService

logger = logging.getLogger(__name__)

router = APIRouter()


def _file_response(data: bytes, media_type: str, disposition: str) -> StreamingResponse:
    return StreamingResponse(
        io.BytesIO(data),
        media_type=media_type,
        headers={"Content-Disposition": disposition},
    )


# ── /documents ─────────────────────────────────────────────────────────────


@router.get("/documents", response_model=List[schemas.SavedDocumentOut])
def list_documents(
    case_id: Optional[UUID] = Query(None, alias="caseId"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    The caller's documents, optionally for a single case.
    """
    if case_id is not None:
        get_owned_or_404(db, Case, case_id, current_user)
    return DocumentService.list_documents(db, current_user.id, case_id=case_id)


@router.post("/documents", response_model=schemas.SavedDocumentOut, status_code=status.HTTP_201_CREATED)
def create_document(
    body: schemas.SavedDocumentCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if body.case_id is not None:
        get_owned_or_404(db, Case, body.case_id, current_user)
    data = body.model_dump()
    data["generator_tool"] = "manual"
    return DocumentService.create_document(db, current_user.id, data)


@router.delete("/documents/{document_id}", response_model=schemas.SuccessResponse)
def delete_document(
    document_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    document = get_owned_or_404(db, SavedDocument, document_id, current_user)
    DocumentService.delete_document(db, document)
    return {"success": True}


# ── /saved-documents ───────────────────────────────────────────────────────


@router.get("/saved-documents", response_model=List[schemas.SavedDocumentOut])
def list_saved_documents(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return DocumentService.list_documents(db, current_user.id)


@router.get("/saved-documents/{document_id}", response_model=schemas.SavedDocumentOut)
def get_saved_document(
    document_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_owned_or_404(db, SavedDocument, document_id, current_user)


@router.delete("/saved-documents/{document_id}", response_model=schemas.SuccessResponse)
def delete_saved_document(
    document_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    document = get_owned_or_404(db, SavedDocument, document_id, current_user)
    DocumentService.delete_document(db, document)
    return {"success": True}


@router.get(
    "/saved-documents/{document_id}/export",
    summary="Download a saved document as PDF, DOCX or TXT",
    response_class=StreamingResponse,
)
def export_saved_document(
    document_id: UUID,
    fmt: Literal["pdf", "docx", "txt"] = Query("pdf", alias="format"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> StreamingResponse:
    document = get_owned_or_404(db, SavedDocument, document_id, current_user)
    export_doc = export_service.document_from_saved(document, author=current_user.name)
    data, media_type, disposition = export_service.render_for_download(export_doc, fmt)
    return _file_response(data, media_type, disposition)


# ── /export-document ───────────────────────────────────────────────────────


@router.post(
    "/export-document",
    summary="Render arbitrary content as PDF, DOCX or TXT",
    response_class=StreamingResponse,
)
def export_document(
    body: schemas.ExportRequest,
    current_user: User = Depends(get_current_user),
) -> StreamingResponse:
    export_doc = export_service.build_export_document(body.content, author=current_user.name)
    data, media_type, disposition = export_service.render_for_download(export_doc, body.format)
    return _file_response(data, media_type, disposition)
