"""
Reply contracts for the AI gateway.

Every model reply is parsed into one of these before it reaches a route or the
database. A reply that does not fit (missing fields, a percentage outside
0-100, an unknown severity) is treated as an upstream failure.
"""
from datetime import date as Date
from decimal import Decimal
from typing import Annotated, Any, List, Literal, Optional

from pydantic import BeforeValidator, Field

from lawhelper.db.schemas import CamelModel


def _lower(value: Any) -> Any:
    return value.strip().lower() if isinstance(value, str) else value


def _round_percent(value: Any) -> Any:
    # models occasionally answer 72.0 or "72"
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().rstrip("%").isdigit():
        return int(value.strip().rstrip("%"))
    return value


Percent = Annotated[int, BeforeValidator(_round_percent), Field(ge=0, le=100)]
Level = Annotated[Literal["high", "medium", "low"], BeforeValidator(_lower)]


def _as_text(value: Any) -> Any:
    if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
        return str(value)
    return value


AmountText = Annotated[str, BeforeValidator(_as_text)]


class AIReply(CamelModel):
    """Base for model replies; unknown keys are dropped."""


# ============================================================================
# Legal research
# ============================================================================

class LegalSearchItem(AIReply):
    title: str
    type: str
    citation: str = ""
    relevance: Percent
    summary: str
    key_points: List[str] = Field(default_factory=list)
    url: Optional[str] = None


class LegalSearchResult(AIReply):
    results: List[LegalSearchItem]
    total_results: int = Field(..., ge=0)
    search_time: AmountText = ""


# ============================================================================
# Brief summarizer
# ============================================================================

class LegalImplication(AIReply):
    type: Annotated[Literal["warning", "notice", "recommendation"], BeforeValidator(_lower)]
    message: str
    severity: Level


class FinancialTerms(AIReply):
    total_value: Optional[AmountText] = None
    payment_schedule: Optional[str] = None


class DocumentSummary(AIReply):
    document_type: str
    summary: str
    key_points: List[str] = Field(default_factory=list)
    parties: List[str] = Field(default_factory=list)
    legal_implications: List[LegalImplication] = Field(default_factory=list)
    important_dates: List[str] = Field(default_factory=list)
    financial_terms: Optional[FinancialTerms] = None
    risks: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)


# ============================================================================
# Risk analysis
# ============================================================================

class RiskFactor(AIReply):
    factor: str
    severity: Level
    impact: str = Field(..., min_length=1)


class RiskRecommendations(AIReply):
    immediate: List[str] = Field(default_factory=list)
    longterm: List[str] = Field(default_factory=list)


class PrecedentAnalysis(AIReply):
    similar_cases: int = Field(..., ge=0)
    success_rate: Percent
    average_settlement: AmountText


class SettlementRange(AIReply):
    low: AmountText
    high: AmountText
    recommended: AmountText


class RiskTimeline(AIReply):
    estimated: str
    factors: List[str] = Field(default_factory=list)


class RiskAnalysis(AIReply):
    success_probability: Percent
    confidence_level: Percent
    risk_factors: List[RiskFactor]
    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)
    recommendations: RiskRecommendations
    precedent_analysis: PrecedentAnalysis
    settlement_range: SettlementRange
    timeline: RiskTimeline


# ============================================================================
# Law agent / quick question
# ============================================================================

class RelevantLaw(AIReply):
    name: str
    citation: str = ""
    description: str = ""


class LegalAnswer(AIReply):
    answer: str = Field(..., min_length=1)
    key_points: List[str] = Field(default_factory=list)
    relevant_laws: List[RelevantLaw] = Field(default_factory=list)
    confidence: Percent
    disclaimer: str = ""
    follow_up_questions: List[str] = Field(default_factory=list)


# ============================================================================
# Web search
# ============================================================================

class WebSearchItem(AIReply):
    title: str
    url: str
    snippet: str
    source: str = ""
    published_date: Optional[str] = None
    relevance: Percent


class WebSearchResult(AIReply):
    results: List[WebSearchItem]
    summary: str = ""
    total_results: int = Field(..., ge=0)


# ============================================================================
# Document generator / analyzer
# ============================================================================

class GeneratedText(AIReply):
    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    formatted_content: str = ""


class QualityScore(AIReply):
    score: Percent
    grade: str
    summary: str


class StrongPoint(AIReply):
    point: str
    explanation: str = Field(..., min_length=1)
    category: str = ""


class WeakPoint(AIReply):
    point: str
    explanation: str = Field(..., min_length=1)
    category: str = ""
    severity: Level


class Improvement(AIReply):
    area: str
    suggestion: str
    priority: Level


class LegalInsight(AIReply):
    insight: str
    type: Annotated[Literal["compliance", "risk", "best-practice", "warning"], BeforeValidator(_lower)]
    explanation: str = ""


class DocumentAnalysis(AIReply):
    document_title: str
    document_type: str
    overall_quality: QualityScore
    strong_points: List[StrongPoint] = Field(default_factory=list)
    weak_points: List[WeakPoint] = Field(default_factory=list)
    improvements: List[Improvement] = Field(default_factory=list)
    legal_insights: List[LegalInsight] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)


class SectionImprovement(AIReply):
    improved_text: str = Field(..., min_length=1)
    explanation: str = ""


# ============================================================================
# Medical intelligence
# ============================================================================

class ChronologyEntry(AIReply):
    date: Date
    provider: str = ""
    event: str
    details: str = ""


class MedicalChronology(AIReply):
    entries: List[ChronologyEntry]
    summary: str = ""
    treatment_gaps: List[str] = Field(default_factory=list)


class BillLineItem(AIReply):
    provider: str = ""
    date: Optional[str] = None
    description: str
    charged: Decimal = Field(..., ge=0)
    paid: Decimal = Field(Decimal("0"), ge=0)


class BillTotals(AIReply):
    charged: Decimal = Field(..., ge=0)
    paid: Decimal = Field(..., ge=0)
    outstanding: Decimal


class MedicalBillAnalysis(AIReply):
    line_items: List[BillLineItem]
    totals: BillTotals
    flags: List[str] = Field(default_factory=list)


class MedicalSummary(AIReply):
    summary: str
    diagnoses: List[str] = Field(default_factory=list)
    treatments: List[str] = Field(default_factory=list)
    prognosis: str = ""
    future_care: List[str] = Field(default_factory=list)


# ============================================================================
# Demand letter / discovery
# ============================================================================

class DemandLetterText(AIReply):
    letter_content: str = Field(..., min_length=1)
    key_arguments: List[str] = Field(default_factory=list)


class DiscoveryAnswer(AIReply):
    request: str
    response: str
    objections: List[str] = Field(default_factory=list)


class DiscoveryResponse(AIReply):
    responses: List[DiscoveryAnswer]
    general_objections: List[str] = Field(default_factory=list)
    notes: str = ""
