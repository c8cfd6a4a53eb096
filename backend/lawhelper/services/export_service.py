"""
Export renderer: turns a "title + sections" document into PDF (reportlab),
DOCX (python-docx) or plain text. All three walk the same section list in the
same order so headings and bullet text match across formats.
"""
from __future__ import annotations

import io
import json
import logging
from dataclasses import dataclass, field
from typing import List
from urllib.parse import quote

import docx  # python-docx
from docx.shared import Pt
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer

from lawhelper.db.models import SavedDocument
from lawhelper.db.schemas import ExportPayload, ExportSection

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "LawHelper Document"
DEFAULT_SUBJECT = "Legal Document"
BULLET = "•"

MEDIA_TYPES = {
    "pdf": "application/pdf",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "txt": "text/plain; charset=utf-8",
}


@dataclass
class ExportDocument:
    title: str
    sections: List[ExportSection]
    author: str = ""
    subject: str = DEFAULT_SUBJECT
    keywords: List[str] = field(default_factory=list)


# ── Building the model ─────────────────────────────────────────────────────


def build_export_document(payload: ExportPayload, author: str) -> ExportDocument:
    """
    Normalize a client export body. Without explicit sections the remaining
    content is rendered as one pretty-printed JSON section.
    """
    sections = payload.sections
    if sections is None:
        extra = payload.model_extra or {}
        body = extra if extra else payload.model_dump(by_alias=True, exclude_none=True)
        sections = [ExportSection(heading="Content", content=json.dumps(body, indent=2, ensure_ascii=False, default=str))]
    return ExportDocument(
        title=(payload.title or "").strip() or DEFAULT_TITLE,
        sections=list(sections),
        author=author,
        subject=(payload.subject or "").strip() or DEFAULT_SUBJECT,
        keywords=list(payload.keywords),
    )


def document_from_saved(document: SavedDocument, author: str) -> ExportDocument:
    subject = document.document_type.value.replace("-", " ").title()
    return ExportDocument(
        title=document.title,
        sections=[ExportSection(content=document.content)],
        author=author,
        subject=subject,
        keywords=[document.document_type.value],
    )


def export_filename(title: str, fmt: str) -> str:
    """ASCII-only name; header values are latin-1 on the wire."""
    safe_title = "".join(
        c if (c.isascii() and c.isalnum()) or c in "-_" else "_" for c in title.strip().replace(" ", "_")
    )
    if not safe_title.strip("_"):
        safe_title = ""
    return f"{safe_title or 'document'}.{fmt}"


def content_disposition(title: str, fmt: str) -> str:
    """
    Attachment header with an ASCII ``filename`` and, when the title has
    non-ASCII characters, an RFC 5987 ``filename*`` carrying the original.
    """
    header = f'attachment; filename="{export_filename(title, fmt)}"'
    cleaned = title.strip()
    if cleaned and not cleaned.isascii():
        unicode_name = "".join("_" if c in '\\/"' or not c.isprintable() else c for c in cleaned)
        header += f"; filename*=UTF-8''{quote(unicode_name + '.' + fmt, safe='')}"
    return header


def _paragraphs(text: str) -> List[str]:
    return [p.strip() for p in (text or "").split("\n\n") if p.strip()]


def _escape(text: str) -> str:
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


# ── Renderers ──────────────────────────────────────────────────────────────


def render_pdf(document: ExportDocument) -> bytes:
    """Generate a PDF using reportlab."""
    buf = io.BytesIO()
    doc = SimpleDocTemplate(
        buf,
        pagesize=A4,
        leftMargin=2.5 * cm,
        rightMargin=2.5 * cm,
        topMargin=2.5 * cm,
        bottomMargin=2.5 * cm,
        title=document.title,
        author=document.author,
        subject=document.subject,
        keywords=", ".join(document.keywords),
    )

    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(
        "ExportTitle",
        parent=styles["Title"],
        fontSize=18,
        alignment=TA_CENTER,
        spaceAfter=6,
    )
    meta_style = ParagraphStyle(
        "ExportMeta",
        parent=styles["Normal"],
        fontSize=9,
        alignment=TA_CENTER,
        textColor=colors.grey,
        spaceAfter=18,
    )
    heading_style = ParagraphStyle(
        "ExportHeading",
        parent=styles["Heading2"],
        fontSize=13,
        spaceBefore=10,
        spaceAfter=6,
    )
    body_style = ParagraphStyle(
        "ExportBody",
        parent=styles["Normal"],
        fontSize=11,
        leading=16,
        spaceAfter=6,
    )
    bullet_style = ParagraphStyle(
        "ExportBullet",
        parent=body_style,
        leftIndent=18,
        spaceAfter=3,
    )

    story = [Paragraph(_escape(document.title), title_style)]
    meta = [f"Author: {document.author}" if document.author else "", f"Subject: {document.subject}"]
    story.append(Paragraph(_escape("  |  ".join(m for m in meta if m)), meta_style))

    for section in document.sections:
        if section.heading:
            story.append(Paragraph(_escape(section.heading), heading_style))
        for para in _paragraphs(section.content):
            story.append(Paragraph(_escape(para).replace("\n", "<br/>"), body_style))
        for item in section.items:
            story.append(Paragraph(f"{BULLET} {_escape(item)}", bullet_style))
        story.append(Spacer(1, 6))

    doc.build(story)
    return buf.getvalue()


def render_docx(document: ExportDocument) -> bytes:
    """Generate a DOCX using python-docx."""
    out = docx.Document()

    props = out.core_properties
    props.title = document.title
    props.author = document.author
    props.subject = document.subject
    props.keywords = ", ".join(document.keywords)

    out.add_heading(document.title, level=0)

    meta = out.add_paragraph()
    meta_lines = [f"Author: {document.author}" if document.author else "", f"Subject: {document.subject}"]
    run = meta.add_run("  |  ".join(m for m in meta_lines if m))
    run.italic = True
    run.font.size = Pt(9)

    for section in document.sections:
        if section.heading:
            out.add_heading(section.heading, level=1)
        for para in _paragraphs(section.content):
            out.add_paragraph(para)
        for item in section.items:
            out.add_paragraph(item, style="List Bullet")

    buf = io.BytesIO()
    out.save(buf)
    return buf.getvalue()


def render_txt(document: ExportDocument) -> str:
    lines: List[str] = [document.title.upper(), "=" * len(document.title), ""]
    if document.author:
        lines.append(f"Author: {document.author}")
    lines.append(f"Subject: {document.subject}")
    lines.append("")

    for section in document.sections:
        if section.heading:
            lines.append(section.heading)
            lines.append("-" * len(section.heading))
        for para in _paragraphs(section.content):
            lines.append(para)
            lines.append("")
        for item in section.items:
            lines.append(f"  {BULLET} {item}")
        if section.items:
            lines.append("")

    return "\n".join(lines).rstrip() + "\n"


def render(document: ExportDocument, fmt: str) -> bytes:
    """Render to ``fmt`` (pdf, docx or txt) and return the file bytes."""
    if fmt == "pdf":
        return render_pdf(document)
    if fmt == "docx":
        return render_docx(document)
    if fmt == "txt":
        return render_txt(document).encode("utf-8")
    raise ValueError(f"Unsupported export format: {fmt}")


def render_for_download(document: ExportDocument, fmt: str) -> tuple[bytes, str, str]:
    """Render and return (bytes, media type, Content-Disposition value)."""
    data = render(document, fmt)
    logger.info("export_rendered format=%s bytes=%d", fmt, len(data))
    return data, MEDIA_TYPES[fmt], content_disposition(document.title, fmt)


def outline(document: ExportDocument) -> List[str]:
    """Headings and bullet items in render order; the structure every format must preserve."""
    out: List[str] = []
    for section in document.sections:
        if section.heading:
            out.append(section.heading)
        out.extend(section.items)
    return out
