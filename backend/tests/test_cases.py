from decimal import Decimal

from lawhelper.db.models import Case, MedicalRecord, SavedDocument, SearchHistory, User, UserSession


def _create_case(client, payload):
    resp = client.post("/api/cases", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_create_case_defaults_to_active(client, case_payload):
    case = _create_case(client, case_payload)

    assert case["status"] == "active"
    assert case["caseType"] == "personal-injury"
    assert Decimal(case["valueLow"]) == Decimal("150000")
    assert case["dateClosed"] is None


def test_create_case_rejects_unknown_type_and_inverted_range(client, case_payload):
    bad_type = dict(case_payload, caseType="maritime")
    assert client.post("/api/cases", json=bad_type).status_code == 400

    inverted = dict(case_payload, valueLow="500", valueHigh="100")
    resp = client.post("/api/cases", json=inverted)
    assert resp.status_code == 400


def test_list_cases_filters_by_status(client, case_payload):
    _create_case(client, case_payload)
    _create_case(client, dict(case_payload, caseName="Rivera Employment Claim", caseType="employment", status="pending"))

    all_cases = client.get("/api/cases").json()
    pending = client.get("/api/cases", params={"status": "pending"}).json()

    assert len(all_cases) == 2
    assert [c["caseName"] for c in pending] == ["Rivera Employment Claim"]


def test_update_case_is_partial_and_closing_stamps_date(client, case_payload):
    case = _create_case(client, case_payload)

    resp = client.put(f"/api/cases/{case['id']}", json={"status": "closed"})
    assert resp.status_code == 200
    updated = resp.json()
    assert updated["status"] == "closed"
    assert updated["dateClosed"] is not None
    assert updated["caseName"] == case_payload["caseName"]
    assert updated["jurisdiction"] == "Florida"


def test_update_case_rejects_range_inverted_against_stored_value(client, case_payload):
    case = _create_case(client, case_payload)

    resp = client.put(f"/api/cases/{case['id']}", json={"valueLow": "900000"})
    assert resp.status_code == 400
    assert client.get(f"/api/cases/{case['id']}").json()["valueLow"] == case["valueLow"]


def test_delete_case_removes_records_and_detaches_documents(client, case_payload, db):
    case = _create_case(client, case_payload)
    record = client.post(
        "/api/medical-records",
        json={"caseId": case["id"], "recordType": "treatment", "serviceDate": "2024-03-01"},
    )
    assert record.status_code == 201
    doc = client.post(
        "/api/documents",
        json={"title": "Intake notes", "documentType": "other", "content": "Notes.", "caseId": case["id"]},
    )
    assert doc.status_code == 201

    resp = client.delete(f"/api/cases/{case['id']}")
    assert resp.status_code == 200
    assert resp.json() == {"success": True}

    assert client.get(f"/api/cases/{case['id']}").status_code == 404
    assert db.query(MedicalRecord).count() == 0
    kept = db.query(SavedDocument).one()
    assert kept.case_id is None


def test_cases_are_isolated_between_accounts(make_client, case_payload):
    owner = make_client("owner@example.com")
    other = make_client("other@example.com")
    case = _create_case(owner, case_payload)

    assert other.get("/api/cases").json() == []
    for method, kwargs in [("get", {}), ("put", {"json": {"caseName": "Hijacked"}}), ("delete", {})]:
        resp = getattr(other, method)(f"/api/cases/{case['id']}", **kwargs)
        assert resp.status_code == 404, method

    assert owner.get(f"/api/cases/{case['id']}").json()["caseName"] == case_payload["caseName"]


def test_unknown_case_is_404(client):
    resp = client.get("/api/cases/00000000-0000-0000-0000-000000000000")
    assert resp.status_code == 404


def test_minimal_case_appears_in_listing_as_active(client):
    created = _create_case(client, {"caseName": "Doe v. Roe", "clientName": "Jane Doe", "caseType": "employment"})

    listed = client.get("/api/cases").json()

    assert [(c["id"], c["status"]) for c in listed] == [(created["id"], "active")]


def test_deleting_account_removes_everything_it_owns(client, fake_bedrock, case_payload, db):
    case = _create_case(client, case_payload)
    client.post(
        "/api/medical-records",
        json={"caseId": case["id"], "recordType": "treatment", "serviceDate": "2024-03-01"},
    )
    client.post("/api/documents", json={"title": "Loose notes", "documentType": "other", "content": "Notes."})
    fake_bedrock.reply = {
        "answer": "Two years.",
        "keyPoints": [],
        "relevantLaws": [],
        "confidence": 70,
        "disclaimer": "Not legal advice.",
    }
    assert client.post("/api/law-agent", json={"question": "Deadline?"}).status_code == 200

    owned = (Case, MedicalRecord, SavedDocument, SearchHistory, UserSession)
    assert all(db.query(model).count() > 0 for model in owned)

    db.delete(db.query(User).filter_by(email="attorney@example.com").one())
    db.commit()

    assert [db.query(model).count() for model in owned] == [0, 0, 0, 0, 0]
    assert client.get("/api/cases").status_code == 401
