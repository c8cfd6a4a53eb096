"""
AI gateway using AWS Bedrock (Claude) through the converse() API.

One public method per tool. Each fills its prompt template, makes a single
model call bounded by AI_TIMEOUT_SECONDS (no retries), pulls the JSON object
out of the reply and validates it against the tool's reply model. Nothing here
touches the database.
"""
from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, Optional, Type, TypeVar, Union

import boto3
from botocore.config import Config
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectTimeoutError,
    ReadTimeoutError,
)
from pydantic import ValidationError

from lawhelper.core.config import settings
from lawhelper.db.schemas import GenerationType, ImprovementItem
from lawhelper.services import ai_prompts as prompts
from lawhelper.services.ai_schemas import (
    AIReply,
    DemandLetterText,
    DiscoveryResponse,
    DocumentAnalysis,
    DocumentSummary,
    GeneratedText,
    LegalAnswer,
    LegalSearchResult,
    MedicalBillAnalysis,
    MedicalChronology,
    MedicalSummary,
    RiskAnalysis,
    SectionImprovement,
    WebSearchResult,
)
from lawhelper.utils.exceptions import AIGatewayError, AITimeoutError

logger = logging.getLogger(__name__)

ReplyT = TypeVar("ReplyT", bound=AIReply)

# Keep prompts inside the model context; long uploads are cut at a paragraph.
_MAX_DOCUMENT_CHARS = 60_000

_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)

MEDICAL_REPLY_MODELS: Dict[str, Type[AIReply]] = {
    "chronology": MedicalChronology,
    "bills": MedicalBillAnalysis,
    "summary": MedicalSummary,
}

MedicalReply = Union[MedicalChronology, MedicalBillAnalysis, MedicalSummary]


def _clip(text: str, limit: int = _MAX_DOCUMENT_CHARS) -> str:
    if len(text) <= limit:
        return text
    cut = text.rfind("\n\n", 0, limit)
    return text[: cut if cut > limit // 2 else limit] + "\n\n[Document truncated]"


def extract_json_object(text: str) -> Dict[str, Any]:
    """Return the outermost JSON object in a model reply."""
    m = _JSON_OBJECT.search(text or "")
    if not m:
        raise ValueError("Model reply does not contain a JSON object")
    parsed = json.loads(m.group(0))
    if not isinstance(parsed, dict):
        raise ValueError("Model reply JSON is not an object")
    return parsed


def _build_bedrock_client():
    return boto3.client(
        "bedrock-runtime",
        region_name=settings.AWS_REGION,
        aws_access_key_id=settings.AWS_ACCESS_KEY_ID or None,
        aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY or None,
        config=Config(
            read_timeout=settings.AI_TIMEOUT_SECONDS,
            connect_timeout=settings.AI_CONNECT_TIMEOUT_SECONDS,
            retries={"total_max_attempts": 1, "mode": "standard"},
        ),
    )


class LegalAIService:
    """
    Stateless (except for the Bedrock client) gateway to the language model.
    """

    def __init__(self, client: Any = None, model_id: Optional[str] = None) -> None:
        self._client = client if client is not None else _build_bedrock_client()
        self.model_id = model_id or settings.BEDROCK_MODEL_ID

    # ── Transport ─────────────────────────────────────────────────────────

    def _converse(self, tool: str, system_prompt: str, user_prompt: str) -> str:
        try:
            response = self._client.converse(
                modelId=self.model_id,
                system=[{"text": system_prompt}],
                messages=[
                    {
                        "role": "user",
                        "content": [{"text": user_prompt}],
                    }
                ],
                inferenceConfig={
                    "temperature": settings.AI_TEMPERATURE,
                    "maxTokens": settings.AI_MAX_TOKENS,
                },
            )
        except (ReadTimeoutError, ConnectTimeoutError) as exc:
            logger.error("bedrock_timeout tool=%s: %s", tool, exc)
            raise AITimeoutError(f"{tool} timed out") from exc
        except (BotoCoreError, ClientError) as exc:
            logger.error("bedrock_call_failed tool=%s: %s", tool, exc)
            raise AIGatewayError(f"{tool} call failed") from exc

        try:
            parts = response["output"]["message"]["content"]
            return "".join(p.get("text", "") for p in parts if isinstance(p, dict))
        except (KeyError, TypeError) as exc:
            logger.error("bedrock_unexpected_response tool=%s keys=%s", tool, list(response or {}))
            raise AIGatewayError(f"{tool} returned an unexpected response") from exc

    def _complete(self, tool: str, system_prompt: str, user_prompt: str, reply_model: Type[ReplyT]) -> ReplyT:
        text = self._converse(tool, system_prompt, user_prompt)
        try:
            payload = extract_json_object(text)
            reply = reply_model.model_validate(payload)
        except (ValueError, ValidationError) as exc:
            logger.error("ai_reply_rejected tool=%s: %s | reply=%.500s", tool, exc, text)
            raise AIGatewayError(f"{tool} returned an invalid reply") from exc
        logger.info("ai_reply_ok tool=%s model=%s", tool, self.model_id)
        return reply

    # ── Research tools ────────────────────────────────────────────────────

    def search_legal_database(self, query: str, filters: Optional[Dict[str, Any]] = None) -> LegalSearchResult:
        return self._complete(
            "legal-research",
            prompts.LEGAL_SEARCH_SYSTEM,
            prompts.build_legal_search_prompt(query, filters),
            LegalSearchResult,
        )

    def summarize_document(self, document_text: str, summary_type: str = "comprehensive") -> DocumentSummary:
        return self._complete(
            "brief-summarizer",
            prompts.SUMMARIZE_SYSTEM,
            prompts.build_summarize_prompt(_clip(document_text), summary_type),
            DocumentSummary,
        )

    def analyze_risk(
        self,
        case_type: str,
        description: str,
        jurisdiction: Optional[str] = None,
        case_value: Optional[str] = None,
    ) -> RiskAnalysis:
        return self._complete(
            "risk-analysis",
            prompts.RISK_SYSTEM,
            prompts.build_risk_prompt(case_type, description, jurisdiction, case_value),
            RiskAnalysis,
        )

    def answer_legal_question(self, question: str) -> LegalAnswer:
        return self._complete(
            "law-agent",
            prompts.LEGAL_ANSWER_SYSTEM,
            prompts.build_legal_answer_prompt(question),
            LegalAnswer,
        )

    def perform_web_search(self, query: str) -> WebSearchResult:
        return self._complete(
            "web-search",
            prompts.WEB_SEARCH_SYSTEM,
            prompts.build_web_search_prompt(query),
            WebSearchResult,
        )

    # ── Document tools ────────────────────────────────────────────────────

    def generate_document(
        self,
        document_type: GenerationType,
        input_method: str,
        text_content: Optional[str] = None,
        form_data: Optional[Dict[str, Any]] = None,
    ) -> GeneratedText:
        return self._complete(
            "document-generation",
            prompts.DRAFTING_SYSTEM,
            prompts.build_generate_document_prompt(document_type.label, input_method, text_content, form_data),
            GeneratedText,
        )

    def analyze_document(self, content: str, file_name: str) -> DocumentAnalysis:
        return self._complete(
            "document-analysis",
            prompts.ANALYZER_SYSTEM,
            prompts.build_analyze_document_prompt(_clip(content), file_name),
            DocumentAnalysis,
        )

    def improve_document_section(
        self,
        item_type: str,
        item: ImprovementItem,
        document_content: str,
    ) -> SectionImprovement:
        detail = item.explanation or item.suggestion or ""
        return self._complete(
            "document-improvement",
            prompts.ANALYZER_SYSTEM,
            prompts.build_improve_section_prompt(item_type, item.subject, detail, _clip(document_content)),
            SectionImprovement,
        )

    # ── Case tools ────────────────────────────────────────────────────────

    def run_medical_intelligence(self, mode: str, document_text: str) -> MedicalReply:
        reply = self._complete(
            f"medical-{mode}",
            prompts.MEDICAL_SYSTEM,
            prompts.build_medical_prompt(mode, _clip(document_text)),
            MEDICAL_REPLY_MODELS[mode],
        )
        if isinstance(reply, MedicalChronology):
            reply.entries.sort(key=lambda entry: entry.date)
        return reply

    def generate_demand_letter(self, details: Dict[str, Any], damages: Dict[str, Any]) -> DemandLetterText:
        return self._complete(
            "demand-letter",
            prompts.DEMAND_LETTER_SYSTEM,
            prompts.build_demand_letter_prompt(details, damages),
            DemandLetterText,
        )

    def generate_discovery_response(
        self,
        discovery_type: str,
        source_text: str,
        context: Dict[str, Any],
    ) -> DiscoveryResponse:
        return self._complete(
            f"discovery-{discovery_type}",
            prompts.DISCOVERY_SYSTEM,
            prompts.build_discovery_prompt(discovery_type, _clip(source_text), context),
            DiscoveryResponse,
        )


# Module-level singleton
legal_ai_service = LegalAIService()
