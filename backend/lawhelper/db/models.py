"""
SQLAlchemy ORM Models
"""

from __future__ import annotations

import enum
import uuid
from datetime import datetime

from sqlalchemy import (
    JSON,
    Column,
    Date,
    Enum as SQLEnum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    TIMESTAMP,
    Uuid,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship

from lawhelper.db.database import Base

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


def _enum_column(enum_cls: type[enum.Enum], name: str) -> SQLEnum:
    """Store enum *values* (e.g. "personal-injury") and reject anything else."""
    return SQLEnum(
        enum_cls,
        name=name,
        values_callable=lambda members: [m.value for m in members],
        validate_strings=True,
    )


# ============================================================================
# Enums
# ============================================================================

class CaseType(str, enum.Enum):
    """Practice category of a case"""
    personal_injury = "personal-injury"
    contract_dispute = "contract-dispute"
    employment = "employment"
    intellectual_property = "intellectual-property"
    real_estate = "real-estate"
    family = "family"
    criminal = "criminal"
    medical_malpractice = "medical-malpractice"
    product_liability = "product-liability"
    other = "other"


class CaseStatus(str, enum.Enum):
    """Case status enum"""
    active = "active"
    pending = "pending"
    closed = "closed"


class DocumentType(str, enum.Enum):
    """Kind of saved document"""
    letter = "letter"
    contract = "contract"
    application = "application"
    personal_injury = "personal-injury"
    legal_brief = "legal-brief"
    demand_letter = "demand-letter"
    medical_chronology = "medical-chronology"
    medical_bill_analysis = "medical-bill-analysis"
    medical_summary = "medical-summary"
    interrogatories = "interrogatories"
    request_for_production = "request-for-production"
    request_for_admission = "request-for-admission"
    other = "other"


# ============================================================================
# User Model
# ============================================================================

class User(Base):
    """An account holder. Owns every other record in the system."""
    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow)

    # Relationships
    sessions = relationship("UserSession", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    cases = relationship("Case", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    documents = relationship("SavedDocument", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    search_history = relationship("SearchHistory", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    medical_records = relationship("MedicalRecord", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)


# ============================================================================
# Session Model
# ============================================================================

class UserSession(Base):
    """
    Server-side login session. The cookie only carries the signed id; a row that
    is missing or past ``expires_at`` means the caller is logged out.
    """
    __tablename__ = "user_sessions"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    user_agent = Column(String(512), nullable=True)
    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow)
    last_seen_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow)
    expires_at = Column(TIMESTAMP, nullable=False, index=True)

    user = relationship("User", back_populates="sessions")


# ============================================================================
# Search History Model
# ============================================================================

class SearchHistory(Base):
    """Append-only log of AI tool invocations"""
    __tablename__ = "search_history"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    type = Column(String(50), nullable=False)  # legal-research, risk-analysis, ...
    query = Column(Text, nullable=False)
    results = Column(JSONType, nullable=True)
    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow)

    user = relationship("User", back_populates="search_history")

    __table_args__ = (
        Index("idx_search_history_user_created", "user_id", "created_at"),
    )


# ============================================================================
# Case Model
# ============================================================================

class Case(Base):
    """Legal matter tracked by its owner"""
    __tablename__ = "cases"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    case_name = Column(String(255), nullable=False)
    case_number = Column(String(100), nullable=True)
    client_name = Column(String(255), nullable=False)
    case_type = Column(_enum_column(CaseType, "case_type"), nullable=False)
    status = Column(_enum_column(CaseStatus, "case_status"), nullable=False, default=CaseStatus.active)

    description = Column(Text, nullable=True)
    jurisdiction = Column(String(255), nullable=True)
    practice_area = Column(String(255), nullable=True)
    lead_attorney = Column(String(255), nullable=True)
    opposing_party = Column(String(255), nullable=True)
    opposing_counsel = Column(String(255), nullable=True)

    value_low = Column(Numeric(14, 2), nullable=True)
    value_high = Column(Numeric(14, 2), nullable=True)
    key_deadlines = Column(JSONType, nullable=True)

    date_opened = Column(TIMESTAMP, nullable=False, default=datetime.utcnow)
    date_closed = Column(TIMESTAMP, nullable=True)
    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow)
    updated_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="cases")
    documents = relationship("SavedDocument", back_populates="case", passive_deletes=True)
    medical_records = relationship(
        "MedicalRecord",
        back_populates="case",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("idx_cases_user_created", "user_id", "created_at"),
    )


# ============================================================================
# Saved Document Model
# ============================================================================

class SavedDocument(Base):
    """Generated or uploaded document kept for later listing and export"""
    __tablename__ = "saved_documents"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    case_id = Column(Uuid(as_uuid=True), ForeignKey("cases.id", ondelete="SET NULL"), nullable=True, index=True)

    title = Column(String(500), nullable=False)
    document_type = Column(_enum_column(DocumentType, "document_type"), nullable=False)
    content = Column(Text, nullable=False)
    file_format = Column(String(20), nullable=True)
    generator_tool = Column(String(50), nullable=True)
    ai_model = Column(String(255), nullable=True)
    version = Column(Integer, nullable=False, default=1)
    doc_metadata = Column("metadata", JSONType, nullable=True)

    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow)
    updated_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="documents")
    case = relationship("Case", back_populates="documents")


# ============================================================================
# Medical Record Model
# ============================================================================

class MedicalRecord(Base):
    """Treatment or billing entry attached to a case"""
    __tablename__ = "medical_records"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    case_id = Column(Uuid(as_uuid=True), ForeignKey("cases.id", ondelete="CASCADE"), nullable=False, index=True)

    record_type = Column(String(50), nullable=False)  # treatment, bill, imaging, ...
    provider_name = Column(String(255), nullable=True)
    facility = Column(String(255), nullable=True)
    service_date = Column(Date, nullable=False)

    diagnosis_codes = Column(JSONType, nullable=False, default=list)
    procedure_codes = Column(JSONType, nullable=False, default=list)
    treatment = Column(Text, nullable=True)
    medications = Column(JSONType, nullable=False, default=list)

    charge_amount = Column(Numeric(12, 2), nullable=True)
    paid_amount = Column(Numeric(12, 2), nullable=True)

    notes = Column(Text, nullable=True)
    raw_text = Column(Text, nullable=True)

    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow)
    updated_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="medical_records")
    case = relationship("Case", back_populates="medical_records")
