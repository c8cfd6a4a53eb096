"""
Drafting tools: document generator, section rewrites for the analyzer,
demand letters and discovery responses. Generated documents are saved to the
caller's library.
"""
import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from lawhelper.api.deps import get_ai_service, get_current_user, get_owned_or_404
from lawhelper.api.errors import ai_failure
from lawhelper.db import schemas
from lawhelper.db.database import get_db
from lawhelper.db.models import Case, DocumentType, User
from lawhelper.services.ai_schemas import DiscoveryResponse, SectionImprovement
from lawhelper.services.ai_service import LegalAIService
from lawhelper.services.damages import calculate_damages
from lawhelper.services.document_service import DocumentService
from lawhelper.services.search_history_service import SearchHistoryService

logger = logging.getLogger(__name__)

router = APIRouter()

DISCOVERY_TITLES = {
    "interrogatories": "Responses to Interrogatories",
    "requests": "Responses to Requests for Production",
    "admissions": "Responses to Requests for Admission",
}


class DemandLetterOut(schemas.CamelModel):
    document_id: UUID
    letter_content: str
    key_arguments: list[str]
    damages_breakdown: schemas.DamagesBreakdown


class DiscoveryOut(DiscoveryResponse):
    document_id: UUID


def _check_case(db: Session, case_id: Optional[UUID], current_user: User) -> Optional[Case]:
    if case_id is None:
        return None
    return get_owned_or_404(db, Case, case_id, current_user)


# ── Document generator ─────────────────────────────────────────────────────


@router.post("/generate-document", response_model=schemas.GeneratedDocumentOut)
def generate_document(
    body: schemas.GenerateDocumentRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    ai: LegalAIService = Depends(get_ai_service),
):
    _check_case(db, body.case_id, current_user)

    with ai_failure("generate document"):
        generated = ai.generate_document(
            body.document_type, body.input_method, body.text_content, body.form_data
        )

    formatted = generated.formatted_content or generated.content
    saved = DocumentService.create_document(
        db,
        current_user.id,
        {
            "title": generated.title,
            "document_type": body.document_type.document_type,
            "content": generated.content,
            "case_id": body.case_id,
            "file_format": "text",
            "generator_tool": "document-generation",
            "ai_model": ai.model_id,
            "doc_metadata": {
                "generationType": body.document_type.value,
                "inputMethod": body.input_method,
                "formattedContent": formatted,
            },
        },
    )

    out = schemas.GeneratedDocumentOut(
        id=saved.id,
        type=body.document_type,
        title=saved.title,
        content=saved.content,
        formatted_content=formatted,
        created_at=saved.created_at,
    )
    SearchHistoryService.record(
        db,
        current_user.id,
        "document-generation",
        f"{body.document_type.value} - {body.input_method}",
        {"document": out.model_dump(mode="json", by_alias=True)},
    )
    return out


@router.post("/improve-document-section", response_model=SectionImprovement)
def improve_document_section(
    body: schemas.ImproveSectionRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    ai: LegalAIService = Depends(get_ai_service),
):
    with ai_failure("improve document section"):
        improvement = ai.improve_document_section(body.type, body.item, body.document_content)

    SearchHistoryService.record(
        db,
        current_user.id,
        "document-improvement",
        body.item.subject,
        improvement.model_dump(mode="json", by_alias=True),
    )
    return improvement


# ── Demand letter ──────────────────────────────────────────────────────────


@router.post("/demand-letter", response_model=DemandLetterOut)
def demand_letter(
    body: schemas.DemandLetterRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    ai: LegalAIService = Depends(get_ai_service),
):
    _check_case(db, body.case_id, current_user)

    damages = calculate_damages(
        body.medical_expenses, body.lost_wages, body.pain_multiplier, body.demand_amount
    )
    details = body.model_dump(
        mode="json",
        by_alias=True,
        exclude={"case_id", "medical_expenses", "lost_wages", "pain_multiplier", "demand_amount"},
    )
    damages_json = damages.model_dump(mode="json", by_alias=True)

    with ai_failure("generate demand letter"):
        letter = ai.generate_demand_letter(details, damages_json)

    saved = DocumentService.create_document(
        db,
        current_user.id,
        {
            "title": f"Demand Letter - {body.claimant_name} v. {body.defendant_name}",
            "document_type": DocumentType.demand_letter,
            "content": letter.letter_content,
            "case_id": body.case_id,
            "file_format": "text",
            "generator_tool": "demand-letter",
            "ai_model": ai.model_id,
            "doc_metadata": {"damagesBreakdown": damages_json, "keyArguments": letter.key_arguments},
        },
    )
    SearchHistoryService.record(
        db,
        current_user.id,
        "demand-letter",
        f"{body.claimant_name} v. {body.defendant_name}",
        {"documentId": str(saved.id), "damagesBreakdown": damages_json},
    )
    return DemandLetterOut(
        document_id=saved.id,
        letter_content=letter.letter_content,
        key_arguments=letter.key_arguments,
        damages_breakdown=damages,
    )


# ── Discovery ──────────────────────────────────────────────────────────────


def _discovery_text(reply: DiscoveryResponse) -> str:
    blocks = []
    if reply.general_objections:
        blocks.append("GENERAL OBJECTIONS\n" + "\n".join(f"- {o}" for o in reply.general_objections))
    for n, answer in enumerate(reply.responses, start=1):
        block = f"REQUEST NO. {n}: {answer.request}\n\nRESPONSE: {answer.response}"
        if answer.objections:
            block += "\n\nOBJECTIONS: " + "; ".join(answer.objections)
        blocks.append(block)
    if reply.notes:
        blocks.append(f"NOTES\n{reply.notes}")
    return "\n\n".join(blocks)


@router.post("/discovery-tools", response_model=DiscoveryOut)
def discovery_tools(
    body: schemas.DiscoveryRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    ai: LegalAIService = Depends(get_ai_service),
):
    case = _check_case(db, body.payload.case_id, current_user)

    context = {
        "Case facts": body.payload.case_facts,
        "Available documents": body.payload.documents,
        "Our position": body.payload.case_position,
        "Jurisdiction": body.payload.jurisdiction or (case.jurisdiction if case else None),
        "Case type": body.payload.case_type or (case.case_type.value if case else None),
    }
    with ai_failure("generate discovery responses"):
        reply = ai.generate_discovery_response(body.type, body.source_text, context)

    title = DISCOVERY_TITLES[body.type]
    if case is not None:
        title = f"{title} - {case.case_name}"
    saved = DocumentService.create_document(
        db,
        current_user.id,
        {
            "title": title,
            "document_type": schemas.DISCOVERY_DOCUMENT_TYPES[body.type],
            "content": _discovery_text(reply),
            "case_id": body.payload.case_id,
            "file_format": "text",
            "generator_tool": "discovery-tools",
            "ai_model": ai.model_id,
            "doc_metadata": {"discoveryType": body.type, "responseCount": len(reply.responses)},
        },
    )
    SearchHistoryService.record(
        db,
        current_user.id,
        "discovery-tools",
        f"{body.type} - {len(reply.responses)} responses",
        {"documentId": str(saved.id)},
    )
    return DiscoveryOut(document_id=saved.id, **reply.model_dump())
