from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Literal

from .models import ReadingLevelAnalysis
from .readability import DEFAULT_GRADE, analyze_reading_level
from .textutils import whitespace_words


@dataclass(frozen=True, slots=True)
class OnboardingQuestion:
    """A free-text onboarding prompt and the words required to move on."""

    title: str
    prompt: str
    min_words: int


ONBOARDING_QUESTIONS: tuple[OnboardingQuestion, ...] = (
    OnboardingQuestion(
        title="Welcome!",
        prompt=(
            "We'd love to get to know you better. Tell us a bit about yourself "
            "and your child. What brings you here?"
        ),
        min_words=15,
    ),
    OnboardingQuestion(
        title="Your Questions",
        prompt=(
            "What are your main questions or concerns about your child's health? "
            "What would you like to understand better?"
        ),
        min_words=10,
    ),
)


@dataclass(slots=True)
class UserPreferences:
    """In-memory user settings; only the reading level comes from onboarding."""

    user_name: str = "Parent"
    reading_level: int = DEFAULT_GRADE
    recording_quality: Literal["high", "medium"] = "high"
    auto_save: bool = True

    def apply_analysis(self, analysis: ReadingLevelAnalysis) -> None:
        self.reading_level = analysis.grade


def count_words(text: str) -> int:
    return len(whitespace_words(text))


def meets_minimum(question: OnboardingQuestion, text: str) -> bool:
    """Return True once the response is long enough to continue."""
    return count_words(text) >= question.min_words


def calibrate_reading_level(responses: Iterable[str]) -> ReadingLevelAnalysis:
    """Analyze all onboarding responses as a single block of text."""
    combined = " ".join(responses)
    return analyze_reading_level(combined)
