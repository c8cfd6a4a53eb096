# lawhelper/api/deps.py

from typing import Optional, Type, TypeVar
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import APIKeyCookie
from sqlalchemy.orm import Session

from lawhelper.core.config import settings
from lawhelper.db.database import Base, get_db
from lawhelper.db.models import Case, MedicalRecord, SavedDocument, User
from lawhelper.services.ai_service import LegalAIService, legal_ai_service
from lawhelper.services.ownership import get_owned
from lawhelper.services.s3_service import S3Service, s3_service
from lawhelper.services.session_service import SessionService
from lawhelper.utils.exceptions import (
    CaseNotFoundError,
    DocumentNotFoundError,
    MedicalRecordNotFoundError,
    NotAuthenticatedError,
)

session_cookie = APIKeyCookie(name=settings.SESSION_COOKIE_NAME, auto_error=False)

ModelT = TypeVar("ModelT", bound=Base)

_NOT_FOUND_ERRORS = {
    Case: CaseNotFoundError,
    SavedDocument: DocumentNotFoundError,
    MedicalRecord: MedicalRecordNotFoundError,
}

# ============================================================================
# Session Dependency
# ============================================================================

def get_current_user(
    token: Optional[str] = Depends(session_cookie),
    db: Session = Depends(get_db),
) -> User:
    """
    Resolve the session cookie to an account; 401 before the handler runs otherwise.
    """
    user = SessionService.resolve_session(db, token)
    if user is None:
        raise NotAuthenticatedError()
    return user


# ============================================================================
# Ownership Policy
# ============================================================================

def get_owned_or_404(db: Session, model: Type[ModelT], record_id: UUID, current_user: User) -> ModelT:
    """
    The one place handlers check that a record belongs to the caller.
    Someone else's record is reported exactly like a missing one.
    """
    record = get_owned(db, model, record_id, current_user.id)
    if record is None:
        error_cls = _NOT_FOUND_ERRORS.get(model)
        if error_cls is not None:
            raise error_cls(str(record_id))
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")
    return record


# ============================================================================
# Service Dependencies
# ============================================================================

def get_ai_service() -> LegalAIService:
    return legal_ai_service


def get_s3_service() -> S3Service:
    return s3_service
