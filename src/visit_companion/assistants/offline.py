from __future__ import annotations

from typing import Sequence

from ..models import MedicalTerm, SummaryRequest, VisitSummary
from .base import VisitAssistant, VisitRecord

OFFLINE_ANSWER = (
    "Based on the visit notes, this is important to discuss with your doctor. "
    "The information suggests monitoring this closely and following the "
    "prescribed treatment plan."
)

OFFLINE_QUESTIONS: tuple[str, ...] = (
    "How is my child's lung function progressing?",
    "Are there any new treatment options we should consider?",
    "What symptoms should I watch for?",
    "How can we improve daily breathing exercises?",
)


class OfflineVisitAssistant(VisitAssistant):
    """
    Returns canned content without contacting any backend. This keeps the
    CLI and demos usable when no AI backend is configured.
    """

    name = "offline"

    def _summarize(self, request: SummaryRequest) -> VisitSummary:
        return VisitSummary(
            transcript=(request.transcript or "").strip(),
            summary=(
                "Doctor discussed recent test results. Lung function has improved "
                "by 15% since last visit. Continue current medication routine."
            ),
            key_points=[
                "Lung function improved 15% since last visit",
                "Continue current medications as prescribed",
                "Schedule follow-up in 3 months",
                "Monitor oxygen levels daily",
            ],
            diagnoses=["Chronic pulmonary condition"],
            actions=[
                "Take medication twice daily",
                "Use oxygen therapy as needed",
                "Track symptoms in diary",
            ],
            medical_terms=[
                MedicalTerm(
                    term="Pulmonary Function",
                    explanation=(
                        "How well your lungs work to move air in and out. "
                        "Higher numbers mean better breathing."
                    ),
                ),
                MedicalTerm(
                    term="Oxygen Saturation",
                    explanation="The amount of oxygen in your blood. Normal is 95-100%.",
                ),
            ],
        )

    def _answer(self, question: str, visit_context: str, reading_level: int) -> str:
        return OFFLINE_ANSWER

    def _suggest(self, visit_history: Sequence[VisitRecord]) -> list[str]:
        return list(OFFLINE_QUESTIONS)
