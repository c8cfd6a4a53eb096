import json
import os
import tempfile

# Settings are read at import time, so the environment has to be in place first.
_DB_DIR = tempfile.mkdtemp(prefix="lawhelper-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ["SESSION_SECRET"] = "test-session-secret-with-enough-length-for-hs256"
os.environ.setdefault("AWS_REGION", "us-east-1")
os.environ["UPLOAD_ARCHIVE_ENABLED"] = "false"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from lawhelper.api.deps import get_ai_service  # noqa: E402
from lawhelper.db import models  # noqa: E402,F401
from lawhelper.db.database import Base, SessionLocal, engine  # noqa: E402
from lawhelper.main import app  # noqa: E402
from lawhelper.services.ai_service import LegalAIService  # noqa: E402

PASSWORD = "correct-horse-battery"


class FakeBedrock:
    """Stands in for the bedrock-runtime client; answers every converse() with ``reply``."""

    def __init__(self):
        self.reply = {}
        self.raw_text = None
        self.error = None
        self.calls = []

    def converse(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        text = self.raw_text if self.raw_text is not None else json.dumps(self.reply)
        return {"output": {"message": {"role": "assistant", "content": [{"text": text}]}}}

    @property
    def last_prompt(self) -> str:
        return self.calls[-1]["messages"][0]["content"][0]["text"]


@pytest.fixture(autouse=True)
def _reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def fake_bedrock():
    fake = FakeBedrock()
    app.dependency_overrides[get_ai_service] = lambda: LegalAIService(client=fake, model_id="test-model")
    yield fake
    app.dependency_overrides.pop(get_ai_service, None)


@pytest.fixture
def anon_client():
    return TestClient(app)


def register(client: TestClient, email: str, name: str = "Test Attorney", password: str = PASSWORD):
    return client.post("/api/register", json={"name": name, "email": email, "password": password})


@pytest.fixture
def make_client():
    """Factory for logged-in clients, one cookie jar per account."""
    def _make(email: str, name: str = "Test Attorney") -> TestClient:
        client = TestClient(app)
        resp = register(client, email, name)
        assert resp.status_code == 201, resp.text
        return client
    return _make


@pytest.fixture
def client(make_client, fake_bedrock):
    return make_client("attorney@example.com", "Alex Sterling")


@pytest.fixture
def case_payload():
    return {
        "caseName": "Sterling v. Global Corp",
        "clientName": "Jordan Sterling",
        "caseType": "personal-injury",
        "jurisdiction": "Florida",
        "valueLow": "150000",
        "valueHigh": "450000",
    }
