import uuid
from datetime import datetime, timedelta

import jwt
import pytest

from conftest import FakeBedrock
from lawhelper.core.config import settings
from lawhelper.core.security import (
    create_session_token,
    decode_session_token,
    get_password_hash,
    verify_password,
)
from lawhelper.db.models import Case, SavedDocument, User, UserSession
from lawhelper.db.seed import seed_database
from lawhelper.services.account_service import AccountService, mask_email
from lawhelper.services.ai_schemas import LegalAnswer
from lawhelper.services.ai_service import LegalAIService, extract_json_object
from lawhelper.services.session_service import SessionService, delete_expired_sessions
from lawhelper.utils.exceptions import AIGatewayError, DuplicateEmailError


def _account(db, email="svc@example.com"):
    return AccountService.create_account(db, "Service Test", email, "a-long-password")


# ── Security ───────────────────────────────────────────────────────────────


def test_password_hash_round_trip():
    hashed = get_password_hash("s3cret-passphrase")

    assert hashed != "s3cret-passphrase"
    assert verify_password("s3cret-passphrase", hashed)
    assert not verify_password("wrong", hashed)
    assert not verify_password("s3cret-passphrase", None)


def test_session_token_rejects_tampering_and_expiry():
    token = create_session_token("abc", datetime.utcnow() + timedelta(hours=1))
    assert decode_session_token(token) == "abc"
    forged = jwt.encode({"sid": "abc", "exp": datetime.utcnow() + timedelta(hours=1)}, "some-other-secret", algorithm="HS256")
    assert decode_session_token(forged) is None

    expired = create_session_token("abc", datetime.utcnow() - timedelta(minutes=1))
    assert decode_session_token(expired) is None


# ── Accounts and sessions ──────────────────────────────────────────────────


def test_duplicate_account_raises(db):
    _account(db)
    with pytest.raises(DuplicateEmailError):
        _account(db)


def test_authenticate(db):
    user = _account(db)

    assert AccountService.authenticate(db, "svc@example.com", "a-long-password").id == user.id
    assert AccountService.authenticate(db, "svc@example.com", "nope") is None
    assert AccountService.authenticate(db, "ghost@example.com", "a-long-password") is None


def test_failed_login_log_does_not_reveal_email(db, caplog):
    _account(db)
    caplog.set_level("INFO", logger="lawhelper")

    AccountService.authenticate(db, "svc@example.com", "nope")
    AccountService.authenticate(db, "ghost@example.com", "nope")

    messages = [r.getMessage() for r in caplog.records if "login_failed" in r.getMessage()]
    assert messages == ["login_failed email=sv*@example.com", "login_failed email=gh***@example.com"]


def test_mask_email():
    assert mask_email("ab@example.com") == "**@example.com"
    assert mask_email("jordan@example.com") == "jo****@example.com"
    assert mask_email("not-an-email") == "****"


def test_session_lifecycle(db):
    user = _account(db)
    token = SessionService.create_session(db, user, "pytest-agent")

    assert SessionService.resolve_session(db, token).id == user.id
    assert SessionService.destroy_session(db, token) is True
    assert SessionService.destroy_session(db, token) is False
    assert SessionService.resolve_session(db, token) is None


def test_expired_session_is_not_resolved_and_gets_swept(db):
    user = _account(db)
    live = SessionService.create_session(db, user)
    stale = SessionService.create_session(db, user)
    stale_row = db.get(UserSession, uuid.UUID(decode_session_token(stale)))
    stale_row.expires_at = datetime.utcnow() - timedelta(seconds=1)
    db.commit()

    assert SessionService.resolve_session(db, stale) is None
    assert delete_expired_sessions(db) == 1
    assert SessionService.resolve_session(db, live).id == user.id


# ── AI gateway ─────────────────────────────────────────────────────────────


def test_extract_json_object_ignores_surrounding_prose():
    assert extract_json_object('Sure!\n```json\n{"a": {"b": 1}}\n```') == {"a": {"b": 1}}
    with pytest.raises(ValueError):
        extract_json_object("no json here")


def test_gateway_sends_one_request_with_configured_inference_settings():
    fake = FakeBedrock()
    fake.reply = {"answer": "Yes.", "confidence": "90"}
    service = LegalAIService(client=fake, model_id="model-x")

    answer = service.answer_legal_question("Is a verbal contract binding?")

    assert isinstance(answer, LegalAnswer)
    assert answer.confidence == 90
    assert len(fake.calls) == 1
    call = fake.calls[0]
    assert call["modelId"] == "model-x"
    assert call["inferenceConfig"] == {"temperature": settings.AI_TEMPERATURE, "maxTokens": settings.AI_MAX_TOKENS}
    assert "Is a verbal contract binding?" in fake.last_prompt


def test_gateway_rejects_reply_missing_required_fields():
    fake = FakeBedrock()
    fake.reply = {"keyPoints": ["no answer field"]}
    service = LegalAIService(client=fake, model_id="model-x")

    with pytest.raises(AIGatewayError):
        service.answer_legal_question("Anything?")


def test_long_documents_are_truncated_before_the_prompt():
    fake = FakeBedrock()
    fake.reply = {"documentType": "Brief", "summary": "Long."}
    service = LegalAIService(client=fake, model_id="model-x")

    service.summarize_document("paragraph\n\n" * 20_000)

    assert "[Document truncated]" in fake.last_prompt
    assert len(fake.last_prompt) < 70_000


# ── Seed data ──────────────────────────────────────────────────────────────


def test_seed_is_idempotent(db, monkeypatch):
    monkeypatch.setattr(settings, "DEMO_ACCOUNT_PASSWORD", "demo-password-123")

    assert seed_database(db) is True
    assert seed_database(db) is False

    demo = db.query(User).filter(User.email == settings.DEMO_ACCOUNT_EMAIL).one()
    assert demo.name == "Alex Sterling"
    assert db.query(Case).count() == 3
    assert db.query(SavedDocument).count() == 2
    closed = db.query(Case).filter(Case.case_name == "Rivera Employment Claim").one()
    assert closed.date_closed is not None


def test_seed_requires_demo_password(db, monkeypatch):
    monkeypatch.setattr(settings, "DEMO_ACCOUNT_PASSWORD", "")

    with pytest.raises(RuntimeError):
        seed_database(db)


# ── App wiring ─────────────────────────────────────────────────────────────


def test_health_endpoints(anon_client):
    assert anon_client.get("/health").json() == {"status": "healthy"}

    ready = anon_client.get("/api/health/ready")
    assert ready.status_code == 200
    assert ready.json()["checks"]["database"]["status"] == "ok"


def test_correlation_id_is_echoed(anon_client):
    resp = anon_client.get("/health", headers={"X-Correlation-ID": "trace-123"})
    assert resp.headers["X-Correlation-ID"] == "trace-123"

    generated = anon_client.get("/health").headers["X-Correlation-ID"]
    assert len(generated) == 36
