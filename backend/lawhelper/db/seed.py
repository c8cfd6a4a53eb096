# backend/lawhelper/db/seed.py

"""
Database Seeding Script

Creates the demo account with a few sample cases, medical records and saved
documents for development. Safe to run repeatedly: an existing demo account is
left untouched.

    DEMO_ACCOUNT_PASSWORD=... python -m lawhelper.db.seed
"""

from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import List

from sqlalchemy.orm import Session

from lawhelper.core.config import settings
from lawhelper.core.logger import logger
from lawhelper.db.database import SessionLocal, init_db
from lawhelper.db.models import Case, CaseStatus, CaseType, DocumentType, User
from lawhelper.services.account_service import AccountService
from lawhelper.services.case_service import CaseService
from lawhelper.services.document_service import DocumentService
from lawhelper.services.medical_record_service import MedicalRecordService

DEMO_NAME = "Alex Sterling"

# ============================================================================
# Seed Data
# ============================================================================

SAMPLE_CASES = [
    {
        "case_name": "Sterling v. Global Corp",
        "case_number": "PI-2024-0117",
        "client_name": "Jordan Sterling",
        "case_type": CaseType.personal_injury,
        "status": CaseStatus.active,
        "description": "Rear-end collision on I-95 involving a Global Corp delivery truck. "
                       "Client sustained cervical strain and a fractured wrist.",
        "jurisdiction": "Florida",
        "practice_area": "Personal Injury",
        "lead_attorney": DEMO_NAME,
        "opposing_party": "Global Corp",
        "opposing_counsel": "Hart & Meyers LLP",
        "value_low": Decimal("150000"),
        "value_high": Decimal("450000"),
    },
    {
        "case_name": "TechEdge IP Dispute",
        "case_number": "IP-2024-0042",
        "client_name": "TechEdge Solutions Inc.",
        "case_type": CaseType.intellectual_property,
        "status": CaseStatus.pending,
        "description": "Alleged infringement of TechEdge's routing-optimization patent by a competitor's SaaS product.",
        "jurisdiction": "N.D. California",
        "practice_area": "Intellectual Property",
        "lead_attorney": DEMO_NAME,
        "opposing_party": "RouteWise Labs",
        "value_low": Decimal("500000"),
        "value_high": Decimal("2000000"),
    },
    {
        "case_name": "Rivera Employment Claim",
        "case_number": "EMP-2023-0311",
        "client_name": "Maria Rivera",
        "case_type": CaseType.employment,
        "status": CaseStatus.closed,
        "description": "Wrongful termination and unpaid overtime claim; settled at mediation.",
        "jurisdiction": "New York",
        "practice_area": "Employment",
        "lead_attorney": DEMO_NAME,
        "opposing_party": "Northwind Logistics",
        "value_low": Decimal("40000"),
        "value_high": Decimal("90000"),
    },
]


def create_demo_user(db: Session) -> User:
    """Create the demo account"""
    user = AccountService.create_account(
        db,
        name=DEMO_NAME,
        email=settings.DEMO_ACCOUNT_EMAIL,
        password=settings.DEMO_ACCOUNT_PASSWORD,
    )
    logger.info("seed: created demo user %s", user.id)
    return user


def create_sample_cases(db: Session, user: User) -> List[Case]:
    """Create sample cases"""
    cases = [CaseService.create_case(db, user.id, dict(data)) for data in SAMPLE_CASES]
    closed = cases[2]
    CaseService.update_case(db, closed, {"status": CaseStatus.closed})
    logger.info("seed: created %d cases", len(cases))
    return cases


def create_sample_medical_records(db: Session, user: User, case: Case) -> None:
    """Create medical records for the personal-injury case"""
    accident = date.today() - timedelta(days=120)
    records = [
        {
            "case_id": case.id,
            "record_type": "emergency",
            "provider_name": "Dr. Priya Shah",
            "facility": "St. Mary's Regional ER",
            "service_date": accident,
            "diagnosis_codes": ["S13.4XXA", "S62.101A"],
            "procedure_codes": ["99284", "73110"],
            "treatment": "Cervical collar, wrist splint, X-ray of left wrist",
            "medications": ["Ibuprofen 800mg"],
            "charge_amount": Decimal("4820.00"),
            "paid_amount": Decimal("1200.00"),
        },
        {
            "case_id": case.id,
            "record_type": "treatment",
            "provider_name": "Coastal Physical Therapy",
            "facility": "Coastal PT Clinic",
            "service_date": accident + timedelta(days=21),
            "diagnosis_codes": ["S13.4XXD"],
            "procedure_codes": ["97110", "97140"],
            "treatment": "Therapeutic exercise and manual therapy, 12 sessions",
            "charge_amount": Decimal("3600.00"),
            "paid_amount": Decimal("0.00"),
            "notes": "Patient reports persistent neck stiffness at discharge.",
        },
    ]
    for data in records:
        MedicalRecordService.create_record(db, user.id, data)
    logger.info("seed: created %d medical records", len(records))


def create_sample_documents(db: Session, user: User, cases: List[Case]) -> None:
    """Create saved documents"""
    documents = [
        {
            "title": "Letter of Representation - Global Corp",
            "document_type": DocumentType.letter,
            "case_id": cases[0].id,
            "content": "Dear Claims Manager,\n\nPlease be advised that this office represents "
                       "Jordan Sterling in connection with the collision of "
                       f"{(datetime.utcnow() - timedelta(days=120)):%B %d, %Y}. "
                       "Direct all further communication regarding this matter to the undersigned.\n\n"
                       f"Sincerely,\n{DEMO_NAME}",
            "file_format": "text",
            "generator_tool": "manual",
        },
        {
            "title": "Cease and Desist - RouteWise Labs",
            "document_type": DocumentType.letter,
            "case_id": cases[1].id,
            "content": "RouteWise Labs is hereby notified that its product infringes U.S. Patent "
                       "No. 10,123,456 held by TechEdge Solutions Inc. We demand that you cease all "
                       "infringing activity within thirty (30) days.",
            "file_format": "text",
            "generator_tool": "manual",
        },
    ]
    for data in documents:
        DocumentService.create_document(db, user.id, data)
    logger.info("seed: created %d documents", len(documents))


# ============================================================================
# Main
# ============================================================================

def seed_database(db: Session) -> bool:
    """Seed the demo data. Returns False when the demo account already exists."""
    if not settings.DEMO_ACCOUNT_PASSWORD:
        raise RuntimeError("DEMO_ACCOUNT_PASSWORD must be set to seed the demo account")

    if AccountService.get_by_email(db, settings.DEMO_ACCOUNT_EMAIL) is not None:
        logger.info("seed: demo account already present, nothing to do")
        return False

    user = create_demo_user(db)
    cases = create_sample_cases(db, user)
    create_sample_medical_records(db, user, cases[0])
    create_sample_documents(db, user, cases)
    return True


if __name__ == "__main__":
    init_db()
    session = SessionLocal()
    try:
        seed_database(session)
    finally:
        session.close()
