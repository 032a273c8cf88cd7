from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Mapping, Sequence, Union

import requests

from ..errors import VisitCompanionError
from ..models import SummaryRequest, VisitSummary

logger = logging.getLogger(__name__)

VisitRecord = Union[VisitSummary, Mapping[str, Any], str]

BACKEND_ERRORS = (VisitCompanionError, requests.RequestException, RuntimeError)

FALLBACK_SUMMARY_TEXT = (
    "We had trouble processing this recording. Please try again or contact "
    "support if the problem continues."
)
NO_ANSWER_TEXT = "I couldn't generate an answer. Please try again."
FALLBACK_ANSWER_TEXT = (
    "I'm having trouble answering that right now. Please try again or ask your "
    "doctor directly."
)
STARTER_QUESTIONS: tuple[str, ...] = (
    "How is my child's lung function?",
    "What symptoms should I watch for?",
    "Are there any new treatment options?",
    "How can we improve daily breathing?",
)
FALLBACK_QUESTIONS: tuple[str, ...] = (
    "How is my child's condition progressing?",
    "What should I watch for between visits?",
    "Are there any changes to the treatment plan?",
    "What can we do to help at home?",
)


def fallback_summary() -> VisitSummary:
    return VisitSummary(
        transcript="",
        summary=FALLBACK_SUMMARY_TEXT,
        key_points=["Unable to process audio at this time"],
        diagnoses=[],
        actions=["Try recording again with clear audio"],
        medical_terms=[],
    )


def visit_summary_text(record: VisitRecord) -> str | None:
    """Return the summary sentence of a stored visit, whatever shape it has."""
    if isinstance(record, VisitSummary):
        return record.summary
    if isinstance(record, str):
        return record
    if not isinstance(record, Mapping):
        return None
    summary = record.get("summary")
    return str(summary) if summary else None


class VisitAssistant(ABC):
    """
    The AI operations offered to parents after a visit.

    Subclasses talk to a backend; this class owns the fallback behavior so a
    failing backend never surfaces as an exception to the caller.
    """

    name = "base"

    def summarize_visit(self, request: SummaryRequest) -> VisitSummary:
        """Summarize a visit at the requested reading level."""
        self._check_summary_request(request)
        try:
            return self._summarize(request)
        except BACKEND_ERRORS as exc:
            logger.warning("%s summary failed: %s", self.name, exc)
            return fallback_summary()

    def answer_question(
        self, question: str, visit_context: str, reading_level: int
    ) -> str:
        """Answer a parent's question using the visit notes as context."""
        if not question.strip() or not visit_context.strip():
            raise ValueError("question and visit_context must not be empty.")
        try:
            answer = self._answer(question, visit_context, reading_level)
        except BACKEND_ERRORS as exc:
            logger.warning("%s answer failed: %s", self.name, exc)
            return FALLBACK_ANSWER_TEXT
        return answer.strip() or NO_ANSWER_TEXT

    def suggest_questions(self, visit_history: Sequence[VisitRecord]) -> list[str]:
        """Suggest questions for the next visit, newest visits first."""
        if not visit_history:
            return list(STARTER_QUESTIONS)
        try:
            return self._suggest(visit_history)
        except BACKEND_ERRORS as exc:
            logger.warning("%s question suggestions failed: %s", self.name, exc)
            return list(FALLBACK_QUESTIONS)

    def _check_summary_request(self, request: SummaryRequest) -> None:
        if not request.transcript and request.audio_path is None:
            raise ValueError("A transcript or an audio recording is required.")

    @abstractmethod
    def _summarize(self, request: SummaryRequest) -> VisitSummary:
        raise NotImplementedError

    @abstractmethod
    def _answer(self, question: str, visit_context: str, reading_level: int) -> str:
        raise NotImplementedError

    @abstractmethod
    def _suggest(self, visit_history: Sequence[VisitRecord]) -> list[str]:
        raise NotImplementedError
