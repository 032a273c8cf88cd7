from __future__ import annotations

import logging
from typing import Sequence

from ..errors import ResponseParseError
from ..llm.openai_client import CompletionMetadata, OpenAICompletionClient
from ..models import SummaryRequest, VisitSummary
from ..parsing import extract_json_array, extract_json_object
from ..prompts import (
    SYSTEM_PROMPT,
    build_answer_prompt,
    build_suggestion_prompt,
    build_summary_prompt,
)
from .base import VisitAssistant, VisitRecord, visit_summary_text

logger = logging.getLogger(__name__)


class LLMVisitAssistant(VisitAssistant):
    """Visit assistant that prompts a language model directly."""

    name = "openai"

    def __init__(
        self,
        client: OpenAICompletionClient,
        *,
        system_prompt: str = SYSTEM_PROMPT,
    ) -> None:
        self._client = client
        self._system_prompt = system_prompt

    def _check_summary_request(self, request: SummaryRequest) -> None:
        if not request.transcript or not request.transcript.strip():
            raise ValueError(
                "The openai backend summarizes transcripts; provide transcript text."
            )

    def _summarize(self, request: SummaryRequest) -> VisitSummary:
        prompt = build_summary_prompt(request.transcript or "", request.reading_level)
        logger.info("Requesting visit summary at reading level %s", request.reading_level)
        output = self._complete(prompt, "summary", request.reading_level)
        payload = extract_json_object(output, None)
        if payload is None:
            raise ResponseParseError("Could not parse AI summary response.")
        summary = VisitSummary.from_payload(payload)
        if not summary.transcript:
            summary.transcript = (request.transcript or "").strip()
        return summary

    def _answer(self, question: str, visit_context: str, reading_level: int) -> str:
        prompt = build_answer_prompt(question, visit_context, reading_level)
        return self._complete(prompt, "answer", reading_level)

    def _suggest(self, visit_history: Sequence[VisitRecord]) -> list[str]:
        prompt = build_suggestion_prompt(
            [visit_summary_text(record) for record in visit_history]
        )
        output = self._complete(prompt, "suggestions", None)
        questions = extract_json_array(output, None)
        if questions is None:
            raise ResponseParseError("Could not parse suggested questions.")
        return [str(question) for question in questions if str(question).strip()]

    def _complete(self, prompt: str, operation: str, reading_level: int | None) -> str:
        return self._client.complete(
            system_prompt=self._system_prompt,
            user_prompt=prompt,
            metadata=CompletionMetadata(
                operation=operation,
                reading_level=reading_level,
                prompt_chars=len(prompt),
            ),
        )
