from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from lawhelper.api.deps import get_current_user, get_owned_or_404
from lawhelper.db import schemas
from lawhelper.db.database import get_db
from lawhelper.db.models import Case, CaseStatus, User
from lawhelper.services.case_service import CaseService

router = APIRouter()


@router.get("", response_model=List[schemas.CaseOut])
def list_cases(
    status_filter: Optional[CaseStatus] = Query(None, alias="status"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Get all cases for the current user, newest first.
    """
    return CaseService.list_cases(db, current_user.id, status_filter)


@router.post("", response_model=schemas.CaseOut, status_code=status.HTTP_201_CREATED)
def create_case(
    body: schemas.CaseCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Create a case owned by the current user. Status defaults to active.
    """
    return CaseService.create_case(db, current_user.id, body.model_dump())


@router.get("/{case_id}", response_model=schemas.CaseOut)
def get_case(
    case_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_owned_or_404(db, Case, case_id, current_user)


@router.put("/{case_id}", response_model=schemas.CaseOut)
def update_case(
    case_id: UUID,
    body: schemas.CaseUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Partial update; only the fields present in the body change.
    """
    case = get_owned_or_404(db, Case, case_id, current_user)
    try:
        return CaseService.update_case(db, case, body.model_dump(exclude_unset=True))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.delete("/{case_id}", response_model=schemas.SuccessResponse)
def delete_case(
    case_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Delete a case together with its medical records.
    """
    case = get_owned_or_404(db, Case, case_id, current_user)
    CaseService.delete_case(db, case)
    return {"success": True}
