"""
Medical records for a case and the medical intelligence tool
(chronology, bill analysis, summary).
"""
from typing import List, Optional, Union
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from lawhelper.api.deps import get_ai_service, get_current_user, get_owned_or_404
from lawhelper.api.errors import ai_failure
from lawhelper.db import schemas
from lawhelper.db.database import get_db
from lawhelper.db.models import Case, MedicalRecord, User
from lawhelper.services.ai_schemas import MedicalBillAnalysis, MedicalChronology, MedicalSummary
from lawhelper.services.ai_service import LegalAIService
from lawhelper.services.document_service import DocumentService
from lawhelper.services.medical_record_service import MedicalRecordService
from lawhelper.services.search_history_service import SearchHistoryService

router = APIRouter()

MEDICAL_TITLES = {
    "chronology": "Medical Chronology",
    "bills": "Medical Bill Analysis",
    "summary": "Medical Summary",
}


class MedicalIntelligenceOut(schemas.CamelModel):
    document_id: UUID
    mode: str
    result: Union[MedicalChronology, MedicalBillAnalysis, MedicalSummary]


# ============================================================================
# Records
# ============================================================================

@router.get("/medical-records/{case_id}", response_model=List[schemas.MedicalRecordOut])
def list_medical_records(
    case_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    get_owned_or_404(db, Case, case_id, current_user)
    return MedicalRecordService.list_for_case(db, current_user.id, case_id)


@router.post("/medical-records", response_model=schemas.MedicalRecordOut, status_code=status.HTTP_201_CREATED)
def create_medical_record(
    body: schemas.MedicalRecordCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    get_owned_or_404(db, Case, body.case_id, current_user)
    return MedicalRecordService.create_record(db, current_user.id, body.model_dump())


@router.delete("/medical-records/{record_id}", response_model=schemas.SuccessResponse)
def delete_medical_record(
    record_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    record = get_owned_or_404(db, MedicalRecord, record_id, current_user)
    MedicalRecordService.delete_record(db, record)
    return {"success": True}


# ============================================================================
# Intelligence
# ============================================================================

def _as_document_text(result) -> str:
    if isinstance(result, MedicalChronology):
        lines = [
            f"{e.date.isoformat()}  {e.provider + ': ' if e.provider else ''}{e.event}"
            + (f"\n    {e.details}" if e.details else "")
            for e in result.entries
        ]
        if result.treatment_gaps:
            lines.append("\nTreatment gaps:\n" + "\n".join(f"- {g}" for g in result.treatment_gaps))
        return (result.summary + "\n\n" if result.summary else "") + "\n".join(lines)

    if isinstance(result, MedicalBillAnalysis):
        lines = [
            f"{item.date or 'n/d'}  {item.provider}  {item.description}  charged {item.charged:.2f}  paid {item.paid:.2f}"
            for item in result.line_items
        ]
        t = result.totals
        lines.append(f"\nTotal charged {t.charged:.2f}, paid {t.paid:.2f}, outstanding {t.outstanding:.2f}")
        if result.flags:
            lines.append("\nFlags:\n" + "\n".join(f"- {f}" for f in result.flags))
        return "\n".join(lines)

    parts = [result.summary]
    if result.diagnoses:
        parts.append("Diagnoses:\n" + "\n".join(f"- {d}" for d in result.diagnoses))
    if result.treatments:
        parts.append("Treatments:\n" + "\n".join(f"- {t}" for t in result.treatments))
    if result.prognosis:
        parts.append(f"Prognosis: {result.prognosis}")
    if result.future_care:
        parts.append("Future care:\n" + "\n".join(f"- {c}" for c in result.future_care))
    return "\n\n".join(parts)


@router.post("/medical-intelligence", response_model=MedicalIntelligenceOut)
def medical_intelligence(
    body: schemas.MedicalIntelligenceRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    ai: LegalAIService = Depends(get_ai_service),
):
    """
    Run a medical analysis over pasted record text, or over the records stored
    for a case when only ``caseId`` is given.
    """
    case: Optional[Case] = None
    if body.payload.case_id is not None:
        case = get_owned_or_404(db, Case, body.payload.case_id, current_user)

    text = (body.payload.document_text or "").strip()
    if not text and case is not None:
        records = MedicalRecordService.list_for_case(db, current_user.id, case.id)
        text = MedicalRecordService.records_as_text(records)
    if not text:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No medical records found for this case",
        )

    with ai_failure("analyze medical records"):
        result = ai.run_medical_intelligence(body.mode, text)

    title = MEDICAL_TITLES[body.mode]
    if case is not None:
        title = f"{title} - {case.case_name}"
    result_json = result.model_dump(mode="json", by_alias=True)
    saved = DocumentService.create_document(
        db,
        current_user.id,
        {
            "title": title,
            "document_type": schemas.MEDICAL_DOCUMENT_TYPES[body.mode],
            "content": _as_document_text(result),
            "case_id": case.id if case else None,
            "file_format": "text",
            "generator_tool": "medical-intelligence",
            "ai_model": ai.model_id,
            "doc_metadata": {"mode": body.mode, "result": result_json},
        },
    )
    SearchHistoryService.record(
        db,
        current_user.id,
        "medical-intelligence",
        f"{body.mode} - {case.case_name if case else 'pasted records'}",
        {"documentId": str(saved.id), "mode": body.mode},
    )
    return MedicalIntelligenceOut(document_id=saved.id, mode=body.mode, result=result)
