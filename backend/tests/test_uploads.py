import asyncio

import pytest

from lawhelper.api.deps import get_s3_service
from lawhelper.core.config import settings
from lawhelper.db.models import SearchHistory
from lawhelper.db.schemas import ExportSection
from lawhelper.main import app
from lawhelper.services import export_service
from lawhelper.services.s3_service import S3Service
from lawhelper.services.search_history_service import SearchHistoryService
from lawhelper.services.text_extraction_service import extract_text
from lawhelper.services.upload_service import check_file_type
from lawhelper.utils.exceptions import ExtractionError, UploadRejectedError

ANALYSIS_REPLY = {
    "documentTitle": "Services Agreement",
    "documentType": "contract",
    "overallQuality": {"score": 68, "grade": "C+", "summary": "Serviceable but vague on termination."},
    "strongPoints": [{"point": "Clear payment terms", "explanation": "Net-30 with late fees", "category": "payment"}],
    "weakPoints": [
        {"point": "No termination clause", "explanation": "Either party is locked in", "severity": "high"}
    ],
    "improvements": [{"area": "Termination", "suggestion": "Add 30-day notice", "priority": "high"}],
    "legalInsights": [{"insight": "Consider a choice-of-law clause", "type": "best-practice"}],
    "recommendations": ["Add termination rights"],
}

SUMMARY_REPLY = {
    "documentType": "Lease",
    "summary": "A twelve month residential lease.",
    "keyPoints": ["Rent is due on the first"],
    "parties": ["Landlord LLC", "Tenant"],
    "legalImplications": [{"type": "Warning", "message": "Auto-renewal clause", "severity": "medium"}],
    "financialTerms": {"totalValue": 24000, "paymentSchedule": "Monthly"},
}


@pytest.fixture
def small_analyzer_limit(monkeypatch):
    monkeypatch.setattr(settings, "MAX_ANALYZER_UPLOAD_BYTES", 64)
    return 64


@pytest.fixture
def small_general_limit(monkeypatch):
    monkeypatch.setattr(settings, "MAX_UPLOAD_BYTES", 128)
    return 128


def _upload(client, path, filename, data, mime="text/plain", **form):
    return client.post(path, files={"document": (filename, data, mime)}, data=form)


def test_analyzer_accepts_file_exactly_at_limit(client, fake_bedrock, small_analyzer_limit, db):
    fake_bedrock.reply = ANALYSIS_REPLY
    data = b"A" * small_analyzer_limit

    resp = _upload(client, "/api/analyze-document", "agreement.txt", data)

    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["fileName"] == "agreement.txt"
    assert body["fileSize"] == small_analyzer_limit
    assert body["content"] == "A" * small_analyzer_limit
    assert body["analysis"]["overallQuality"]["score"] == 68
    assert body["archiveKey"] is None
    assert db.query(SearchHistory).one().type == "document-analysis"


def test_analyzer_rejects_one_byte_over_limit(client, fake_bedrock, small_analyzer_limit):
    resp = _upload(client, "/api/analyze-document", "agreement.txt", b"A" * (small_analyzer_limit + 1))

    assert resp.status_code == 413
    assert fake_bedrock.calls == []


def test_summarizer_uses_the_larger_general_limit(client, fake_bedrock, small_analyzer_limit):
    fake_bedrock.reply = SUMMARY_REPLY

    resp = _upload(client, "/api/summarize-document", "lease.txt", b"B" * 200, summaryType="brief")

    assert resp.status_code == 200, resp.text
    assert resp.json()["legalImplications"][0]["type"] == "warning"
    assert resp.json()["financialTerms"]["totalValue"] == "24000"
    assert "brief summary" in fake_bedrock.last_prompt


def test_unsupported_extension_is_415(client, fake_bedrock):
    resp = _upload(client, "/api/summarize-document", "malware.exe", b"MZ....", "application/octet-stream")

    assert resp.status_code == 415
    assert fake_bedrock.calls == []


def test_disallowed_mime_is_415_even_with_good_extension(client, fake_bedrock):
    resp = _upload(client, "/api/summarize-document", "photo.pdf", b"\x89PNG", "image/png")

    assert resp.status_code == 415


def test_empty_file_is_400(client, fake_bedrock):
    resp = _upload(client, "/api/summarize-document", "empty.txt", b"")

    assert resp.status_code == 400


def test_unreadable_pdf_is_400(client, fake_bedrock):
    resp = _upload(client, "/api/summarize-document", "broken.pdf", b"%PDF-1.4 garbage", "application/pdf")

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Could not extract content from the document"


def test_pdf_upload_text_reaches_the_model(client, fake_bedrock):
    fake_bedrock.reply = SUMMARY_REPLY
    pdf = export_service.render_pdf(
        export_service.ExportDocument(
            title="Residential Lease",
            sections=[ExportSection(heading="Rent", content="Tenant pays rent monthly.")],
        )
    )

    resp = _upload(client, "/api/summarize-document", "lease.pdf", pdf, "application/pdf")

    assert resp.status_code == 200, resp.text
    assert "Residential Lease" in fake_bedrock.last_prompt
    assert "Tenant pays rent monthly." in fake_bedrock.last_prompt


def test_docx_with_generic_mime_is_resolved_by_extension():
    docx_bytes = export_service.render_docx(
        export_service.ExportDocument(
            title="Engagement Letter",
            sections=[ExportSection(content="Scope of representation.")],
        )
    )

    text = extract_text(docx_bytes, "application/octet-stream", "engagement.docx")

    assert "Engagement Letter" in text
    assert "Scope of representation." in text


def test_check_file_type_normalizes_mime():
    assert check_file_type("Brief.PDF", "application/pdf; charset=binary") == "application/pdf"
    assert check_file_type("notes.txt", "") == "text/plain"
    with pytest.raises(UploadRejectedError) as exc:
        check_file_type("archive.zip", "application/zip")
    assert exc.value.status_code == 415


def test_whitespace_only_text_cannot_be_extracted():
    with pytest.raises(ExtractionError):
        extract_text(b"   \n\t  ", "text/plain", "blank.txt")


def test_legacy_doc_extraction_is_best_effort():
    body = "Plaintiff alleges breach of the lease agreement.".encode("utf-16-le")
    data = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1" + b"\x00" * 32 + body + b"\x00\x01\x02"

    text = extract_text(data, "application/msword", "complaint.doc")

    assert "Plaintiff alleges breach of the lease agreement." in text


class _FakeS3:
    def __init__(self):
        self.objects = {}

    def put_object(self, Bucket, Key, Body, ContentType, ServerSideEncryption):
        self.objects[(Bucket, Key)] = (Body, ContentType, ServerSideEncryption)


def test_analyzer_archives_upload_when_enabled(client, fake_bedrock, monkeypatch):
    fake_s3 = _FakeS3()
    monkeypatch.setattr(settings, "UPLOAD_ARCHIVE_ENABLED", True)
    monkeypatch.setitem(app.dependency_overrides, get_s3_service, lambda: S3Service(client=fake_s3, bucket="archive"))
    fake_bedrock.reply = ANALYSIS_REPLY

    resp = _upload(client, "/api/analyze-document", "my contract.txt", b"Terms and conditions")

    assert resp.status_code == 200, resp.text
    key = resp.json()["archiveKey"]
    assert key.endswith("-my_contract.txt")
    body, content_type, sse = fake_s3.objects[("archive", key)]
    assert body == b"Terms and conditions"
    assert content_type == "text/plain"
    assert sse == "AES256"


def test_unsupported_extension_wins_over_size(client, fake_bedrock, small_analyzer_limit):
    resp = _upload(client, "/api/analyze-document", "huge.exe", b"X" * (small_analyzer_limit * 4), "application/octet-stream")

    assert resp.status_code == 415


def test_summarizer_accepts_file_exactly_at_general_limit(client, fake_bedrock, small_general_limit):
    fake_bedrock.reply = SUMMARY_REPLY

    resp = _upload(client, "/api/summarize-document", "lease.txt", b"C" * small_general_limit)

    assert resp.status_code == 200, resp.text


def test_summarizer_rejects_one_byte_over_general_limit(client, fake_bedrock, small_general_limit):
    resp = _upload(client, "/api/summarize-document", "lease.txt", b"C" * (small_general_limit + 1))

    assert resp.status_code == 413
    assert fake_bedrock.calls == []


def test_mime_type_must_match_extension(client, fake_bedrock):
    with pytest.raises(UploadRejectedError) as exc:
        check_file_type("brief.pdf", "text/plain")
    assert exc.value.status_code == 415
    assert check_file_type("brief.pdf", "application/octet-stream") == "application/pdf"

    resp = _upload(client, "/api/summarize-document", "brief.pdf", b"%PDF-1.4 not really text", "text/plain")
    assert resp.status_code == 415
    assert fake_bedrock.calls == []


def test_upload_history_is_written_off_the_event_loop(client, fake_bedrock, monkeypatch):
    original = SearchHistoryService.record
    loops_seen = []

    def record(*args, **kwargs):
        try:
            asyncio.get_running_loop()
            loops_seen.append(True)
        except RuntimeError:
            loops_seen.append(False)
        return original(*args, **kwargs)

    monkeypatch.setattr(SearchHistoryService, "record", record)
    fake_bedrock.reply = SUMMARY_REPLY
    assert _upload(client, "/api/summarize-document", "lease.txt", b"Rent is due monthly.").status_code == 200
    fake_bedrock.reply = ANALYSIS_REPLY
    assert _upload(client, "/api/analyze-document", "agreement.txt", b"Terms.").status_code == 200

    assert loops_seen == [False, False]
