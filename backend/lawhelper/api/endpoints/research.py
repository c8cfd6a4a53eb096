"""
Research tools: legal database search, risk analysis, the law agent,
web search and quick questions. Every successful run is added to the caller's
search history.
"""
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from lawhelper.api.deps import get_ai_service, get_current_user
from lawhelper.api.errors import ai_failure
from lawhelper.db import schemas
from lawhelper.db.database import get_db
from lawhelper.db.models import User
from lawhelper.services.ai_schemas import LegalAnswer, LegalSearchResult, RiskAnalysis, WebSearchResult
from lawhelper.services.ai_service import LegalAIService
from lawhelper.services.search_history_service import SearchHistoryService

router = APIRouter()


class QuickAnswerOut(schemas.CamelModel):
    answer: LegalAnswer


def _dump(reply) -> dict:
    return reply.model_dump(mode="json", by_alias=True)


@router.post("/legal-search", response_model=LegalSearchResult)
def legal_search(
    body: schemas.LegalSearchRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    ai: LegalAIService = Depends(get_ai_service),
):
    with ai_failure("search legal database"):
        result = ai.search_legal_database(body.query, body.filters)

    SearchHistoryService.record(db, current_user.id, "legal-research", body.query, _dump(result))
    return result


@router.post("/analyze-risk", response_model=RiskAnalysis)
def analyze_risk(
    body: schemas.RiskAnalysisRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    ai: LegalAIService = Depends(get_ai_service),
):
    with ai_failure("analyze risk"):
        analysis = ai.analyze_risk(body.case_type, body.description, body.jurisdiction, body.case_value)

    query = f"{body.case_type} - {body.description[:100]}"
    SearchHistoryService.record(db, current_user.id, "risk-analysis", query, _dump(analysis))
    return analysis


@router.post("/law-agent", response_model=LegalAnswer)
def law_agent(
    body: schemas.QuestionRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    ai: LegalAIService = Depends(get_ai_service),
):
    with ai_failure("answer legal question"):
        answer = ai.answer_legal_question(body.question)

    SearchHistoryService.record(db, current_user.id, "law-agent", body.question, _dump(answer))
    return answer


@router.post("/web-search", response_model=WebSearchResult)
def web_search(
    body: schemas.WebSearchRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    ai: LegalAIService = Depends(get_ai_service),
):
    with ai_failure("perform web search"):
        result = ai.perform_web_search(body.query)

    SearchHistoryService.record(db, current_user.id, "web-search", body.query, _dump(result))
    return result


@router.post("/quick-question", response_model=QuickAnswerOut)
def quick_question(
    body: schemas.QuestionRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    ai: LegalAIService = Depends(get_ai_service),
):
    with ai_failure("answer question"):
        answer = ai.answer_legal_question(body.question)

    SearchHistoryService.record(db, current_user.id, "quick-question", body.question, {"answer": _dump(answer)})
    return QuickAnswerOut(answer=answer)


@router.get("/search-history", response_model=List[schemas.SearchHistoryOut])
def search_history(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """The caller's ten most recent tool runs, newest first."""
    return SearchHistoryService.list_recent(db, current_user.id)
