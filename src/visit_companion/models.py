from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Mapping

Confidence = Literal["low", "medium", "high"]
GradeDescription = Literal["Middle School", "High School", "College"]

DEFAULT_SUMMARY_TEXT = "Visit summary not available"


@dataclass(slots=True)
class Document:
    """Represents a block of input text and where it came from."""

    doc_id: str
    text: str


@dataclass(frozen=True, slots=True)
class ReadingLevelAnalysis:
    """Estimated reading grade for a block of text."""

    grade: int
    description: GradeDescription
    confidence: Confidence
    word_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "grade": self.grade,
            "description": self.description,
            "confidence": self.confidence,
            "wordCount": self.word_count,
        }


@dataclass(slots=True)
class MedicalTerm:
    """A medical term paired with a plain-language explanation."""

    term: str
    explanation: str

    def to_dict(self) -> dict[str, str]:
        return {"term": self.term, "explanation": self.explanation}


@dataclass(slots=True)
class VisitSummary:
    """Structured summary of a recorded doctor visit."""

    transcript: str = ""
    summary: str = DEFAULT_SUMMARY_TEXT
    key_points: list[str] = field(default_factory=list)
    diagnoses: list[str] = field(default_factory=list)
    actions: list[str] = field(default_factory=list)
    medical_terms: list[MedicalTerm] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "VisitSummary":
        """Build a summary from a camel-cased payload, defaulting missing fields."""
        return cls(
            transcript=str(payload.get("transcript") or ""),
            summary=str(payload.get("summary") or DEFAULT_SUMMARY_TEXT),
            key_points=_string_list(payload.get("keyPoints")),
            diagnoses=_string_list(payload.get("diagnoses")),
            actions=_string_list(payload.get("actions")),
            medical_terms=_medical_terms(payload.get("medicalTerms")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "transcript": self.transcript,
            "summary": self.summary,
            "keyPoints": list(self.key_points),
            "diagnoses": list(self.diagnoses),
            "actions": list(self.actions),
            "medicalTerms": [term.to_dict() for term in self.medical_terms],
        }


@dataclass(slots=True)
class SummaryRequest:
    """Input for a visit summary: a transcript, a recording, or both."""

    reading_level: int
    transcript: str | None = None
    audio_path: Path | None = None


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item is not None]


def _medical_terms(value: Any) -> list[MedicalTerm]:
    if not isinstance(value, list):
        return []
    terms: list[MedicalTerm] = []
    for item in value:
        if not isinstance(item, Mapping):
            continue
        term = item.get("term")
        if not term:
            continue
        terms.append(
            MedicalTerm(term=str(term), explanation=str(item.get("explanation") or ""))
        )
    return terms
