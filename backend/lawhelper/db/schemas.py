"""
Pydantic validation schemas

Request and response bodies use camelCase on the wire; attribute names stay
snake_case so ORM rows validate directly into the ``*Out`` models.
"""
import enum
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Literal, Optional
from uuid import UUID

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    model_validator,
)
from pydantic.alias_generators import to_camel

from lawhelper.db.models import CaseStatus, CaseType, DocumentType


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


Money = Optional[Decimal]


# ============================================================================
# Account Schemas
# ============================================================================

class RegisterRequest(CamelModel):
    """Registration schema"""
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)


class LoginRequest(CamelModel):
    """Login schema"""
    email: EmailStr
    password: str = Field(..., min_length=1)


class AccountOut(CamelModel):
    """Public view of an account; never carries the password hash"""
    id: UUID
    name: str
    email: str
    created_at: datetime


class MessageResponse(CamelModel):
    message: str


class SuccessResponse(CamelModel):
    success: bool = True


# ============================================================================
# Search History Schemas
# ============================================================================

class SearchHistoryOut(CamelModel):
    id: UUID
    type: str
    query: str
    results: Optional[Any] = None
    created_at: datetime


# ============================================================================
# Case Schemas
# ============================================================================

class _CaseValueRange(CamelModel):
    @model_validator(mode="after")
    def _check_value_range(self):
        low = getattr(self, "value_low", None)
        high = getattr(self, "value_high", None)
        if low is not None and high is not None and low > high:
            raise ValueError("valueLow must not exceed valueHigh")
        return self


class CaseCreate(_CaseValueRange):
    case_name: str = Field(..., min_length=1, max_length=255)
    case_number: Optional[str] = Field(None, max_length=100)
    client_name: str = Field(..., min_length=1, max_length=255)
    case_type: CaseType
    status: CaseStatus = CaseStatus.active
    description: Optional[str] = None
    jurisdiction: Optional[str] = Field(None, max_length=255)
    practice_area: Optional[str] = Field(None, max_length=255)
    lead_attorney: Optional[str] = Field(None, max_length=255)
    opposing_party: Optional[str] = Field(None, max_length=255)
    opposing_counsel: Optional[str] = Field(None, max_length=255)
    value_low: Money = Field(None, ge=0, max_digits=14, decimal_places=2)
    value_high: Money = Field(None, ge=0, max_digits=14, decimal_places=2)
    key_deadlines: Optional[List[Dict[str, Any]]] = None
    date_opened: Optional[datetime] = None
    date_closed: Optional[datetime] = None


class CaseUpdate(_CaseValueRange):
    case_name: Optional[str] = Field(None, min_length=1, max_length=255)
    case_number: Optional[str] = Field(None, max_length=100)
    client_name: Optional[str] = Field(None, min_length=1, max_length=255)
    case_type: Optional[CaseType] = None
    status: Optional[CaseStatus] = None
    description: Optional[str] = None
    jurisdiction: Optional[str] = Field(None, max_length=255)
    practice_area: Optional[str] = Field(None, max_length=255)
    lead_attorney: Optional[str] = Field(None, max_length=255)
    opposing_party: Optional[str] = Field(None, max_length=255)
    opposing_counsel: Optional[str] = Field(None, max_length=255)
    value_low: Money = Field(None, ge=0, max_digits=14, decimal_places=2)
    value_high: Money = Field(None, ge=0, max_digits=14, decimal_places=2)
    key_deadlines: Optional[List[Dict[str, Any]]] = None
    date_closed: Optional[datetime] = None


class CaseOut(CamelModel):
    id: UUID
    case_name: str
    case_number: Optional[str] = None
    client_name: str
    case_type: CaseType
    status: CaseStatus
    description: Optional[str] = None
    jurisdiction: Optional[str] = None
    practice_area: Optional[str] = None
    lead_attorney: Optional[str] = None
    opposing_party: Optional[str] = None
    opposing_counsel: Optional[str] = None
    value_low: Money = None
    value_high: Money = None
    key_deadlines: Optional[List[Dict[str, Any]]] = None
    date_opened: datetime
    date_closed: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


# ============================================================================
# Saved Document Schemas
# ============================================================================

class SavedDocumentCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=500)
    document_type: DocumentType
    content: str = Field(..., min_length=1)
    case_id: Optional[UUID] = None
    file_format: Optional[str] = Field(None, max_length=20)
    doc_metadata: Optional[Dict[str, Any]] = Field(
        None,
        validation_alias=AliasChoices("metadata", "doc_metadata"),
        serialization_alias="metadata",
    )


class SavedDocumentOut(CamelModel):
    id: UUID
    case_id: Optional[UUID] = None
    title: str
    document_type: DocumentType
    content: str
    file_format: Optional[str] = None
    generator_tool: Optional[str] = None
    ai_model: Optional[str] = None
    version: int
    # The ORM attribute is ``doc_metadata``; ``metadata`` on a mapped class is the table registry.
    doc_metadata: Optional[Dict[str, Any]] = Field(
        None,
        validation_alias=AliasChoices("doc_metadata", "metadata"),
        serialization_alias="metadata",
    )
    created_at: datetime
    updated_at: datetime


# ============================================================================
# Medical Record Schemas
# ============================================================================

class MedicalRecordCreate(CamelModel):
    case_id: UUID
    record_type: str = Field(..., min_length=1, max_length=50)
    provider_name: Optional[str] = Field(None, max_length=255)
    facility: Optional[str] = Field(None, max_length=255)
    service_date: date
    diagnosis_codes: List[str] = Field(default_factory=list)
    procedure_codes: List[str] = Field(default_factory=list)
    treatment: Optional[str] = None
    medications: List[str] = Field(default_factory=list)
    charge_amount: Money = Field(None, ge=0, max_digits=12, decimal_places=2)
    paid_amount: Money = Field(None, ge=0, max_digits=12, decimal_places=2)
    notes: Optional[str] = None
    raw_text: Optional[str] = None


class MedicalRecordOut(CamelModel):
    id: UUID
    case_id: UUID
    record_type: str
    provider_name: Optional[str] = None
    facility: Optional[str] = None
    service_date: date
    diagnosis_codes: List[str] = Field(default_factory=list)
    procedure_codes: List[str] = Field(default_factory=list)
    treatment: Optional[str] = None
    medications: List[str] = Field(default_factory=list)
    charge_amount: Money = None
    paid_amount: Money = None
    notes: Optional[str] = None
    raw_text: Optional[str] = None
    created_at: datetime
    updated_at: datetime


# ============================================================================
# Research Tool Schemas
# ============================================================================

class LegalSearchRequest(CamelModel):
    query: str = Field(..., min_length=1, max_length=2000)
    filters: Optional[Dict[str, Any]] = None


class RiskAnalysisRequest(CamelModel):
    case_type: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1)
    jurisdiction: Optional[str] = Field(None, max_length=255)
    case_value: Optional[str] = Field(None, max_length=100)


class QuestionRequest(CamelModel):
    question: str = Field(..., min_length=1, max_length=4000)


class WebSearchRequest(CamelModel):
    query: str = Field(..., min_length=1, max_length=2000)


# ============================================================================
# Drafting Schemas
# ============================================================================

class GenerationType(str, enum.Enum):
    """Templates offered by the document generator"""
    business_letter = "business-letter"
    cover_letter = "cover-letter"
    recommendation_letter = "recommendation-letter"
    complaint_letter = "complaint-letter"
    inquiry_letter = "inquiry-letter"
    thank_you_letter = "thank-you-letter"
    service_agreement = "service-agreement"
    employment_contract = "employment-contract"
    non_disclosure_agreement = "non-disclosure-agreement"
    rental_agreement = "rental-agreement"
    sales_contract = "sales-contract"
    consulting_agreement = "consulting-agreement"
    job_application = "job-application"
    visa_application = "visa-application"
    permit_application = "permit-application"
    loan_application = "loan-application"
    grant_application = "grant-application"
    license_application = "license-application"
    pi_car_accident = "pi-car-accident"

    @property
    def document_type(self) -> DocumentType:
        if self is GenerationType.pi_car_accident:
            return DocumentType.personal_injury
        if self.value.endswith("-letter"):
            return DocumentType.letter
        if self.value.endswith("-application"):
            return DocumentType.application
        return DocumentType.contract

    @property
    def label(self) -> str:
        if self is GenerationType.pi_car_accident:
            return "Personal Injury - Car Accident"
        return self.value.replace("-", " ").title()


class GenerateDocumentRequest(CamelModel):
    document_type: GenerationType
    input_method: Literal["voice", "paste", "manual"]
    text_content: Optional[str] = None
    form_data: Optional[Dict[str, Any]] = None
    case_id: Optional[UUID] = None

    @model_validator(mode="after")
    def _check_input(self):
        if self.input_method in ("voice", "paste"):
            if not (self.text_content or "").strip():
                raise ValueError("textContent is required for voice or paste input")
        elif not self.form_data:
            raise ValueError("formData is required for manual input")
        return self


class GeneratedDocumentOut(CamelModel):
    id: UUID
    type: GenerationType
    title: str
    content: str
    formatted_content: str
    created_at: datetime


class ImprovementItem(CamelModel):
    """A weak point or improvement entry taken from a previous analysis"""
    point: Optional[str] = None
    area: Optional[str] = None
    explanation: Optional[str] = None
    suggestion: Optional[str] = None
    category: Optional[str] = None
    severity: Optional[str] = None
    priority: Optional[str] = None

    @model_validator(mode="after")
    def _check_subject(self):
        if not (self.point or self.area):
            raise ValueError("item must name a point or an area")
        return self

    @property
    def subject(self) -> str:
        return self.point or self.area or ""


class ImproveSectionRequest(CamelModel):
    type: Literal["weak-point", "improvement"]
    item: ImprovementItem
    document_content: str = Field(..., min_length=1)


class DemandLetterRequest(CamelModel):
    claimant_name: str = Field(..., min_length=1, max_length=255)
    defendant_name: str = Field(..., min_length=1, max_length=255)
    incident_date: date
    incident_description: str = Field(..., min_length=1)
    injuries: Optional[str] = None
    medical_treatment: Optional[str] = None
    insurance_company: Optional[str] = Field(None, max_length=255)
    policy_number: Optional[str] = Field(None, max_length=100)
    medical_expenses: Decimal = Field(Decimal("0"), ge=0, max_digits=12, decimal_places=2)
    lost_wages: Decimal = Field(Decimal("0"), ge=0, max_digits=12, decimal_places=2)
    pain_multiplier: Decimal = Field(Decimal("3"), ge=1, le=5, max_digits=3, decimal_places=1)
    demand_amount: Money = Field(None, ge=0, max_digits=14, decimal_places=2)
    case_id: Optional[UUID] = None


class DamagesBreakdown(CamelModel):
    medical_expenses: Decimal
    lost_wages: Decimal
    economic_damages: Decimal
    pain_and_suffering: Decimal
    total: Decimal
    demand_amount: Decimal


class DiscoveryPayload(CamelModel):
    questions: Optional[str] = None
    requests: Optional[str] = None
    admissions: Optional[str] = None
    case_facts: Optional[str] = None
    documents: Optional[str] = None
    case_position: Optional[str] = None
    jurisdiction: Optional[str] = None
    case_type: Optional[str] = None
    case_id: Optional[UUID] = None


DISCOVERY_SOURCE_FIELDS = {
    "interrogatories": "questions",
    "requests": "requests",
    "admissions": "admissions",
}

DISCOVERY_DOCUMENT_TYPES = {
    "interrogatories": DocumentType.interrogatories,
    "requests": DocumentType.request_for_production,
    "admissions": DocumentType.request_for_admission,
}


class DiscoveryRequest(CamelModel):
    type: Literal["interrogatories", "requests", "admissions"]
    payload: DiscoveryPayload

    @model_validator(mode="after")
    def _check_source(self):
        field = DISCOVERY_SOURCE_FIELDS[self.type]
        if not (getattr(self.payload, field) or "").strip():
            raise ValueError(f"payload.{field} is required for {self.type}")
        return self

    @property
    def source_text(self) -> str:
        return getattr(self.payload, DISCOVERY_SOURCE_FIELDS[self.type])


# ============================================================================
# Medical Intelligence Schemas
# ============================================================================

MEDICAL_DOCUMENT_TYPES = {
    "chronology": DocumentType.medical_chronology,
    "bills": DocumentType.medical_bill_analysis,
    "summary": DocumentType.medical_summary,
}


class MedicalIntelligencePayload(CamelModel):
    document_text: Optional[str] = None
    case_id: Optional[UUID] = None


class MedicalIntelligenceRequest(CamelModel):
    mode: Literal["chronology", "bills", "summary"]
    payload: MedicalIntelligencePayload

    @model_validator(mode="after")
    def _check_source(self):
        if not (self.payload.document_text or "").strip() and self.payload.case_id is None:
            raise ValueError("payload needs documentText or caseId")
        return self


# ============================================================================
# Export Schemas
# ============================================================================

class ExportSection(CamelModel):
    heading: Optional[str] = None
    content: str = ""
    items: List[str] = Field(default_factory=list)


class ExportPayload(CamelModel):
    """Free-form export body; anything besides the known keys is rendered as JSON"""
    model_config = ConfigDict(extra="allow")

    title: Optional[str] = None
    subject: Optional[str] = None
    keywords: List[str] = Field(default_factory=list)
    sections: Optional[List[ExportSection]] = None


class ExportRequest(CamelModel):
    format: Literal["pdf", "docx", "txt"]
    content: ExportPayload
