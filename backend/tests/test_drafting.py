from decimal import Decimal

import pytest

from lawhelper.db.models import DocumentType, SavedDocument, SearchHistory
from lawhelper.db.schemas import GenerationType
from lawhelper.services.damages import calculate_damages

GENERATED_REPLY = {
    "title": "Business Letter to Acme Supplies",
    "content": "Dear Ms. Patel,\n\nWe write regarding the delayed shipment...",
    "formattedContent": "<p>Dear Ms. Patel,</p>",
}

LETTER_REPLY = {
    "letterContent": "RE: Claim of Jordan Sterling\n\nDear Claims Adjuster, ...",
    "keyArguments": ["Clear liability", "Documented injuries"],
}

DEMAND_REQUEST = {
    "claimantName": "Jordan Sterling",
    "defendantName": "Global Corp",
    "incidentDate": "2024-02-14",
    "incidentDescription": "Rear-end collision at a red light.",
    "injuries": "Fractured wrist",
    "medicalExpenses": 5000,
    "lostWages": 2000,
    "painMultiplier": 3,
}


# ── Document generator ─────────────────────────────────────────────────────


def test_generate_document_saves_to_library(client, fake_bedrock, db):
    fake_bedrock.reply = GENERATED_REPLY

    resp = client.post(
        "/api/generate-document",
        json={"documentType": "business-letter", "inputMethod": "paste", "textContent": "Shipment late by 3 weeks"},
    )

    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["type"] == "business-letter"
    assert body["title"] == GENERATED_REPLY["title"]
    assert body["formattedContent"] == "<p>Dear Ms. Patel,</p>"

    saved = db.query(SavedDocument).one()
    assert str(saved.id) == body["id"]
    assert saved.document_type == DocumentType.letter
    assert saved.generator_tool == "document-generation"
    assert saved.ai_model == "test-model"
    history = db.query(SearchHistory).one()
    assert history.type == "document-generation"
    assert history.query == "business-letter - paste"


def test_generate_document_manual_input_goes_into_prompt(client, fake_bedrock):
    fake_bedrock.reply = GENERATED_REPLY

    resp = client.post(
        "/api/generate-document",
        json={
            "documentType": "non-disclosure-agreement",
            "inputMethod": "manual",
            "formData": {"disclosingParty": "TechEdge", "term": "2 years"},
        },
    )

    assert resp.status_code == 200
    assert "disclosingParty: TechEdge" in fake_bedrock.last_prompt
    assert "Non Disclosure Agreement" in fake_bedrock.last_prompt


@pytest.mark.parametrize(
    "payload",
    [
        {"documentType": "business-letter", "inputMethod": "paste"},
        {"documentType": "business-letter", "inputMethod": "voice", "textContent": "   "},
        {"documentType": "business-letter", "inputMethod": "manual"},
        {"documentType": "haiku", "inputMethod": "paste", "textContent": "x"},
    ],
)
def test_generate_document_rejects_incomplete_input(client, fake_bedrock, payload):
    resp = client.post("/api/generate-document", json=payload)

    assert resp.status_code == 400
    assert fake_bedrock.calls == []


def test_generate_document_for_foreign_case_is_404(make_client, fake_bedrock, case_payload):
    owner = make_client("owner@example.com")
    intruder = make_client("intruder@example.com")
    case_id = owner.post("/api/cases", json=case_payload).json()["id"]
    fake_bedrock.reply = GENERATED_REPLY

    resp = intruder.post(
        "/api/generate-document",
        json={"documentType": "cover-letter", "inputMethod": "paste", "textContent": "x", "caseId": case_id},
    )

    assert resp.status_code == 404
    assert fake_bedrock.calls == []


def test_generation_types_map_to_document_types():
    assert GenerationType.pi_car_accident.document_type == DocumentType.personal_injury
    assert GenerationType.visa_application.document_type == DocumentType.application
    assert GenerationType.rental_agreement.document_type == DocumentType.contract
    assert GenerationType.thank_you_letter.document_type == DocumentType.letter


# ── Analyzer follow-up ─────────────────────────────────────────────────────


def test_improve_document_section(client, fake_bedrock, db):
    fake_bedrock.reply = {"improvedText": "Either party may terminate on 30 days' notice.", "explanation": "Adds exit"}

    resp = client.post(
        "/api/improve-document-section",
        json={
            "type": "weak-point",
            "item": {"point": "No termination clause", "explanation": "Parties are locked in"},
            "documentContent": "This agreement continues indefinitely.",
        },
    )

    assert resp.status_code == 200
    assert resp.json()["improvedText"].startswith("Either party")
    assert "No termination clause" in fake_bedrock.last_prompt
    assert db.query(SearchHistory).one().query == "No termination clause"


def test_improve_document_section_needs_point_or_area(client, fake_bedrock):
    resp = client.post(
        "/api/improve-document-section",
        json={"type": "improvement", "item": {"suggestion": "Be clearer"}, "documentContent": "Text"},
    )

    assert resp.status_code == 400


# ── Demand letter ──────────────────────────────────────────────────────────


def test_demand_letter_computes_damages_server_side(client, fake_bedrock, db):
    fake_bedrock.reply = LETTER_REPLY

    resp = client.post("/api/demand-letter", json=DEMAND_REQUEST)

    assert resp.status_code == 200, resp.text
    body = resp.json()
    damages = {k: Decimal(v) for k, v in body["damagesBreakdown"].items()}
    assert damages["economicDamages"] == Decimal("7000")
    assert damages["painAndSuffering"] == Decimal("15000")
    assert damages["total"] == Decimal("22000")
    assert damages["demandAmount"] == Decimal("22000")
    assert body["keyArguments"] == LETTER_REPLY["keyArguments"]
    assert "22000.00" in fake_bedrock.last_prompt

    saved = db.query(SavedDocument).one()
    assert str(saved.id) == body["documentId"]
    assert saved.document_type == DocumentType.demand_letter
    assert saved.title == "Demand Letter - Jordan Sterling v. Global Corp"


def test_demand_letter_rejects_multiplier_out_of_range(client, fake_bedrock):
    resp = client.post("/api/demand-letter", json=dict(DEMAND_REQUEST, painMultiplier=7))

    assert resp.status_code == 400
    assert fake_bedrock.calls == []


def test_calculate_damages_rounds_to_cents_and_honours_explicit_demand():
    breakdown = calculate_damages(Decimal("1234.565"), Decimal("0"), Decimal("1.5"), Decimal("5000"))

    assert breakdown.medical_expenses == Decimal("1234.57")
    assert breakdown.pain_and_suffering == Decimal("1851.85")
    assert breakdown.total == Decimal("3086.41")
    assert breakdown.demand_amount == Decimal("5000.00")


# ── Discovery ──────────────────────────────────────────────────────────────


def test_discovery_interrogatories_saved_with_matching_type(client, fake_bedrock, db, case_payload):
    case = client.post("/api/cases", json=case_payload).json()
    fake_bedrock.reply = {
        "responses": [
            {"request": "State your name.", "response": "Jordan Sterling."},
            {"request": "Describe the collision.", "response": "Rear-ended at a red light.", "objections": ["Vague"]},
        ],
        "generalObjections": ["Privileged material is withheld"],
    }

    resp = client.post(
        "/api/discovery-tools",
        json={
            "type": "interrogatories",
            "payload": {"questions": "1. State your name.\n2. Describe the collision.", "caseId": case["id"]},
        },
    )

    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert len(body["responses"]) == 2
    assert "Jurisdiction: Florida" in fake_bedrock.last_prompt

    saved = db.query(SavedDocument).one()
    assert str(saved.id) == body["documentId"]
    assert saved.document_type == DocumentType.interrogatories
    assert str(saved.case_id) == case["id"]
    assert "REQUEST NO. 2: Describe the collision." in saved.content


def test_discovery_requires_the_field_for_its_type(client, fake_bedrock):
    resp = client.post(
        "/api/discovery-tools",
        json={"type": "admissions", "payload": {"questions": "These belong to interrogatories"}},
    )

    assert resp.status_code == 400
    assert fake_bedrock.calls == []
