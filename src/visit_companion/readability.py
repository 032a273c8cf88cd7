"""
SMOG-based reading level estimation.

The estimator turns a few sentences of free text into a U.S. school grade
used to pitch generated content at the author's reading level. Syllables are
counted heuristically from vowel clusters, which is approximate but needs no
dictionary.
"""

from __future__ import annotations

import math

from .models import Confidence, GradeDescription, ReadingLevelAnalysis
from .textutils import SENTENCE_END_RE, clean_word, extract_words

VOWELS = frozenset("aeiouy")

MIN_GRADE = 6
MAX_GRADE = 18
DEFAULT_GRADE = 8
MIN_TEXT_LENGTH = 10
POLYSYLLABLE_THRESHOLD = 3


def count_syllables(word: str) -> int:
    """Estimate the syllables in a single word (always at least 1)."""
    cleaned = clean_word(word)
    if len(cleaned) <= 3:
        return 1

    count = 0
    previous_was_vowel = False
    for char in cleaned:
        is_vowel = char in VOWELS
        if is_vowel and not previous_was_vowel:
            count += 1
        previous_was_vowel = is_vowel

    # Silent trailing e.
    if cleaned.endswith("e"):
        count -= 1
    # Consonant + "le" carries its own syllable ("ta-ble").
    if cleaned.endswith("le") and len(cleaned) > 2 and cleaned[-3] not in VOWELS:
        count += 1

    return max(1, count)


def count_sentences(text: str) -> int:
    """Count runs of sentence terminators; unpunctuated text is one sentence."""
    runs = len(SENTENCE_END_RE.findall(text))
    return runs or 1


def count_polysyllabic_words(text: str) -> int:
    return sum(
        1
        for word in extract_words(text)
        if count_syllables(word) >= POLYSYLLABLE_THRESHOLD
    )


def calculate_smog_grade(text: str) -> int:
    """
    SMOG grade = 3 + sqrt(polysyllables * 30 / sentences), rounded half-up and
    clamped to [MIN_GRADE, MAX_GRADE]. Text shorter than MIN_TEXT_LENGTH once
    stripped returns DEFAULT_GRADE.
    """
    if len(text.strip()) < MIN_TEXT_LENGTH:
        return DEFAULT_GRADE

    sentences = count_sentences(text)
    polysyllables = count_polysyllabic_words(text)
    smog = 3 + math.sqrt(polysyllables * 30 / sentences)
    grade = math.floor(smog + 0.5)
    return max(MIN_GRADE, min(MAX_GRADE, grade))


def describe_grade(grade: int) -> GradeDescription:
    if grade <= 8:
        return "Middle School"
    if grade <= 12:
        return "High School"
    return "College"


def confidence_for_word_count(word_count: int) -> Confidence:
    if word_count < 20:
        return "low"
    if word_count < 50:
        return "medium"
    return "high"


def analyze_reading_level(text: str) -> ReadingLevelAnalysis:
    """Estimate the reading grade of text along with how reliable it is."""
    word_count = len(extract_words(text))
    grade = calculate_smog_grade(text)
    return ReadingLevelAnalysis(
        grade=grade,
        description=describe_grade(grade),
        confidence=confidence_for_word_count(word_count),
        word_count=word_count,
    )
