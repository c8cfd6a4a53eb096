"""
LawHelper prompt templates for the AI gateway.

Each tool has a system persona, a reply-shape block naming the exact JSON keys
the parser expects, and a builder that fills in the user's fields.
"""
import json
from typing import Any, Dict, Optional

JSON_ONLY_RULE = (
    "Respond with a single JSON object only. No markdown fences, no prose before "
    "or after it. Percentages are integers from 0 to 100. Severity and priority "
    'values are exactly one of "high", "medium" or "low".'
)


def _block(value: Optional[str], fallback: str = "Not specified") -> str:
    value = (value or "").strip()
    return value or fallback


# ============================================================================
# LEGAL RESEARCH
# ============================================================================

LEGAL_SEARCH_SYSTEM = """You are a legal research assistant with deep knowledge of US case law, federal and
state statutes and regulations. Cite sources precisely and never invent citations;
when unsure of a citation, leave it empty."""

LEGAL_SEARCH_SHAPE = """{
  "results": [
    {
      "title": "Case or statute title",
      "type": "Case Law | Federal Statute | State Law | Regulation | Supreme Court",
      "citation": "Official citation",
      "relevance": 92,
      "summary": "Two or three sentence summary",
      "keyPoints": ["point", "point"],
      "url": "Link to the full text, or null"
    }
  ],
  "totalResults": 5,
  "searchTime": "1.8 seconds"
}"""


def build_legal_search_prompt(query: str, filters: Optional[Dict[str, Any]]) -> str:
    filter_text = json.dumps(filters, ensure_ascii=False) if filters else "None"
    return (
        f'Find the most relevant legal authorities for this research query: "{query}"\n'
        f"Filters: {filter_text}\n\n"
        "Include case law, statutes, regulations and precedents, each with a relevance "
        "score and a short summary.\n\n"
        f"Reply shape:\n{LEGAL_SEARCH_SHAPE}\n\n{JSON_ONLY_RULE}"
    )


# ============================================================================
# BRIEF SUMMARIZER
# ============================================================================

SUMMARIZE_SYSTEM = """You are a legal document analyst. Read the document carefully and report what it
says, who it binds, and what a practitioner should watch out for."""

SUMMARIZE_SHAPE = """{
  "documentType": "Contract | Brief | Statute | Pleading | ...",
  "summary": "Detailed summary",
  "keyPoints": ["point", "point"],
  "parties": ["party name"],
  "legalImplications": [
    {"type": "warning | notice | recommendation", "message": "consideration", "severity": "high | medium | low"}
  ],
  "importantDates": ["date and what happens on it"],
  "financialTerms": {"totalValue": "amount or null", "paymentSchedule": "schedule or null"},
  "risks": ["risk"],
  "recommendations": ["recommendation"]
}"""


def build_summarize_prompt(document_text: str, summary_type: str) -> str:
    return (
        f"Produce a {summary_type} summary of the legal document below.\n\n"
        f"Document text:\n{document_text}\n\n"
        f"Reply shape:\n{SUMMARIZE_SHAPE}\n\n{JSON_ONLY_RULE}"
    )


# ============================================================================
# RISK ANALYSIS
# ============================================================================

RISK_SYSTEM = """You are a litigation risk analyst with broad knowledge of case outcomes, precedents
and settlement values. Give calibrated, evidence-based estimates."""

RISK_SHAPE = """{
  "successProbability": 70,
  "confidenceLevel": 80,
  "riskFactors": [
    {"factor": "risk", "severity": "high | medium | low", "impact": "how it could affect the outcome"}
  ],
  "strengths": ["strength"],
  "weaknesses": ["weakness"],
  "recommendations": {"immediate": ["action"], "longterm": ["strategy"]},
  "precedentAnalysis": {"similarCases": 120, "successRate": 65, "averageSettlement": "$80,000"},
  "settlementRange": {"low": "$40,000", "high": "$110,000", "recommended": "$75,000"},
  "timeline": {"estimated": "12-18 months", "factors": ["factor"]}
}"""


def build_risk_prompt(
    case_type: str,
    description: str,
    jurisdiction: Optional[str],
    case_value: Optional[str],
) -> str:
    return (
        "Assess the litigation risk of this case.\n\n"
        f"Case type: {case_type}\n"
        f"Description: {description}\n"
        f"Jurisdiction: {_block(jurisdiction)}\n"
        f"Case value: {_block(case_value)}\n\n"
        "Every risk factor must explain its impact. Settlement amounts are strings "
        "with a currency symbol.\n\n"
        f"Reply shape:\n{RISK_SHAPE}\n\n{JSON_ONLY_RULE}"
    )


# ============================================================================
# LAW AGENT / QUICK QUESTION
# ============================================================================

LEGAL_ANSWER_SYSTEM = """You are a legal information assistant. Answer clearly for a professional audience,
name the laws you rely on, and state plainly when the answer depends on
jurisdiction or facts you do not have. You do not give legal advice."""

LEGAL_ANSWER_SHAPE = """{
  "answer": "Direct answer in a few paragraphs",
  "keyPoints": ["point"],
  "relevantLaws": [{"name": "law", "citation": "citation", "description": "why it matters"}],
  "confidence": 80,
  "disclaimer": "This is general legal information, not legal advice.",
  "followUpQuestions": ["question"]
}"""


def build_legal_answer_prompt(question: str) -> str:
    return (
        f"Question: {question}\n\n"
        f"Reply shape:\n{LEGAL_ANSWER_SHAPE}\n\n{JSON_ONLY_RULE}"
    )


# ============================================================================
# WEB SEARCH
# ============================================================================

WEB_SEARCH_SYSTEM = """You are a legal research assistant that surveys public web sources: court
websites, government portals, bar publications and legal news. Prefer primary
and authoritative sources."""

WEB_SEARCH_SHAPE = """{
  "results": [
    {
      "title": "page title",
      "url": "https://...",
      "snippet": "relevant excerpt",
      "source": "publisher",
      "publishedDate": "YYYY-MM-DD or null",
      "relevance": 85
    }
  ],
  "summary": "What the sources say, in one paragraph",
  "totalResults": 6
}"""


def build_web_search_prompt(query: str) -> str:
    return (
        f'Search query: "{query}"\n\n'
        f"Reply shape:\n{WEB_SEARCH_SHAPE}\n\n{JSON_ONLY_RULE}"
    )


# ============================================================================
# DOCUMENT GENERATOR
# ============================================================================

DRAFTING_SYSTEM = """You are a senior legal drafter. Produce complete, professional documents in plain
English with proper structure, headings and signature blocks. Use bracketed
placeholders such as [DATE] for anything the user did not supply."""

GENERATED_DOCUMENT_SHAPE = """{
  "title": "Document title",
  "content": "Full plain-text document",
  "formattedContent": "Same document with markdown headings and emphasis"
}"""


def build_generate_document_prompt(
    document_label: str,
    input_method: str,
    text_content: Optional[str],
    form_data: Optional[Dict[str, Any]],
) -> str:
    if input_method == "manual":
        details = "\n".join(f"- {k}: {v}" for k, v in (form_data or {}).items())
        source = f"Details supplied in a form:\n{details}"
    elif input_method == "voice":
        source = f"Details dictated by the user (speech transcript, may be informal):\n{text_content}"
    else:
        source = f"Details pasted by the user:\n{text_content}"
    return (
        f"Draft a {document_label}.\n\n{source}\n\n"
        f"Reply shape:\n{GENERATED_DOCUMENT_SHAPE}\n\n{JSON_ONLY_RULE}"
    )


# ============================================================================
# DOCUMENT ANALYZER
# ============================================================================

ANALYZER_SYSTEM = """You are a legal document reviewer. Grade the document's quality, point out what
works and what does not, and suggest concrete improvements. Every weak point must
explain why it is a problem."""

DOCUMENT_ANALYSIS_SHAPE = """{
  "documentTitle": "title",
  "documentType": "type",
  "overallQuality": {"score": 78, "grade": "B+", "summary": "one paragraph"},
  "strongPoints": [{"point": "what works", "explanation": "why", "category": "clarity | structure | legal | ..."}],
  "weakPoints": [{"point": "problem", "explanation": "why it matters", "category": "...", "severity": "high | medium | low"}],
  "improvements": [{"area": "section or topic", "suggestion": "what to change", "priority": "high | medium | low"}],
  "legalInsights": [{"insight": "observation", "type": "compliance | risk | best-practice | warning", "explanation": "detail"}],
  "recommendations": ["recommendation"]
}"""


def build_analyze_document_prompt(content: str, file_name: str) -> str:
    return (
        f"Review the document \"{file_name}\".\n\n"
        f"Document text:\n{content}\n\n"
        f"Reply shape:\n{DOCUMENT_ANALYSIS_SHAPE}\n\n{JSON_ONLY_RULE}"
    )


SECTION_IMPROVEMENT_SHAPE = """{
  "improvedText": "Rewritten passage ready to paste into the document",
  "explanation": "What changed and why"
}"""


def build_improve_section_prompt(
    item_type: str,
    subject: str,
    detail: str,
    document_content: str,
) -> str:
    label = "weak point" if item_type == "weak-point" else "suggested improvement"
    return (
        f"A review of the document below flagged this {label}: {subject}\n"
        f"Detail: {_block(detail, 'none')}\n\n"
        "Rewrite only the affected passage so the issue is resolved. Keep the "
        "document's voice and defined terms.\n\n"
        f"Document:\n{document_content}\n\n"
        f"Reply shape:\n{SECTION_IMPROVEMENT_SHAPE}\n\n{JSON_ONLY_RULE}"
    )


# ============================================================================
# MEDICAL INTELLIGENCE
# ============================================================================

MEDICAL_SYSTEM = """You are a medical-legal analyst supporting personal injury attorneys. Read medical
records precisely, keep dates and amounts exactly as written, and never invent
treatment that is not in the records."""

MEDICAL_SHAPES = {
    "chronology": """{
  "entries": [{"date": "YYYY-MM-DD", "provider": "provider", "event": "visit or procedure", "details": "findings"}],
  "summary": "Overall course of treatment",
  "treatmentGaps": ["gap in care and its dates"]
}""",
    "bills": """{
  "lineItems": [{"provider": "provider", "date": "YYYY-MM-DD", "description": "service", "charged": 1250.00, "paid": 300.00}],
  "totals": {"charged": 1250.00, "paid": 300.00, "outstanding": 950.00},
  "flags": ["duplicate charge, unusual code, ..."]
}""",
    "summary": """{
  "summary": "Narrative summary of the injuries and treatment",
  "diagnoses": ["diagnosis"],
  "treatments": ["treatment"],
  "prognosis": "expected outcome",
  "futureCare": ["anticipated future care"]
}""",
}

MEDICAL_TASKS = {
    "chronology": "Build a chronological timeline of every medical event in these records.",
    "bills": "Itemize every billed service in these records and total the charges and payments. Amounts are plain numbers.",
    "summary": "Summarize the injuries, treatment and prognosis documented in these records.",
}


def build_medical_prompt(mode: str, document_text: str) -> str:
    return (
        f"{MEDICAL_TASKS[mode]}\n\n"
        f"Records:\n{document_text}\n\n"
        f"Reply shape:\n{MEDICAL_SHAPES[mode]}\n\n{JSON_ONLY_RULE}"
    )


# ============================================================================
# DEMAND LETTER
# ============================================================================

DEMAND_LETTER_SYSTEM = """You are a personal injury attorney drafting a settlement demand letter to an
insurance carrier. Be firm, factual and persuasive. Use the damages figures
exactly as given."""

DEMAND_LETTER_SHAPE = """{
  "letterContent": "Complete letter text",
  "keyArguments": ["argument"]
}"""


def build_demand_letter_prompt(details: Dict[str, Any], damages: Dict[str, Any]) -> str:
    facts = "\n".join(f"- {k}: {v}" for k, v in details.items() if v not in (None, ""))
    figures = "\n".join(f"- {k}: {v}" for k, v in damages.items())
    return (
        f"Claim details:\n{facts}\n\n"
        f"Damages (computed, do not change):\n{figures}\n\n"
        f"Reply shape:\n{DEMAND_LETTER_SHAPE}\n\n{JSON_ONLY_RULE}"
    )


# ============================================================================
# DISCOVERY TOOLS
# ============================================================================

DISCOVERY_SYSTEM = """You are a litigation associate preparing written discovery responses. Answer each
request precisely, preserve objections (relevance, privilege, overbreadth,
undue burden) where they genuinely apply, and never admit facts beyond what the
case facts support."""

DISCOVERY_SHAPE = """{
  "responses": [{"request": "request text", "response": "response text", "objections": ["objection"]}],
  "generalObjections": ["objection"],
  "notes": "Follow-up items for the attorney"
}"""

DISCOVERY_TASKS = {
    "interrogatories": "Draft answers to the following interrogatories.",
    "requests": "Draft responses to the following requests for production of documents.",
    "admissions": "Draft responses (admit, deny, or lack of knowledge) to the following requests for admission.",
}


def build_discovery_prompt(discovery_type: str, source_text: str, context: Dict[str, Any]) -> str:
    facts = "\n".join(f"- {k}: {v}" for k, v in context.items() if v)
    return (
        f"{DISCOVERY_TASKS[discovery_type]}\n\n"
        f"Requests:\n{source_text}\n\n"
        f"Case context:\n{facts or '- none supplied'}\n\n"
        f"Reply shape:\n{DISCOVERY_SHAPE}\n\n{JSON_ONLY_RULE}"
    )
