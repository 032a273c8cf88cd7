import pytest

from visit_companion.readability import (
    analyze_reading_level,
    calculate_smog_grade,
    confidence_for_word_count,
    count_polysyllabic_words,
    count_sentences,
    count_syllables,
    describe_grade,
)

SIXTY_WORDS_NINE_POLYSYLLABLES = (
    "The nurse gave my son a new medication and it was important to take it "
    "with food at the hospital. "
    "Our family read a beautiful book about an elephant that had to stay in bed "
    "for a very long time. "
    "Then I will understand how to help him, so I can call the pediatrician if "
    "he is sick or unhappy."
)


def test_empty_text_returns_default_analysis():
    analysis = analyze_reading_level("")

    assert analysis.grade == 8
    assert analysis.description == "Middle School"
    assert analysis.confidence == "low"
    assert analysis.word_count == 0


def test_short_text_uses_default_grade():
    """Text under ten characters once stripped skips the formula."""
    assert analyze_reading_level("Hi there.").grade == 8
    assert analyze_reading_level("   Medicine.   ").grade == 8
    assert analyze_reading_level(" \n\t ").grade == 8


def test_simple_text_is_clamped_to_minimum_grade():
    text = (
        "The cat sat on the mat and the dog ran to the red barn. "
        "We had a fun day."
    )
    analysis = analyze_reading_level(text)

    assert analysis.word_count == 19
    assert count_polysyllabic_words(text) == 0
    assert analysis.grade == 6
    assert analysis.description == "Middle School"
    assert analysis.confidence == "low"


def test_polysyllabic_text_scores_high_school():
    text = SIXTY_WORDS_NINE_POLYSYLLABLES
    assert count_sentences(text) == 3
    assert count_polysyllabic_words(text) == 9

    analysis = analyze_reading_level(text)

    assert analysis.word_count == 60
    assert analysis.grade == 12
    assert analysis.description == "High School"
    assert analysis.confidence == "high"


def test_unpunctuated_text_counts_as_one_sentence():
    text = "medication elephant hospital"
    assert count_sentences(text) == 1
    assert calculate_smog_grade(text) == 12


def test_grade_is_clamped_to_maximum():
    text = "medication " * 20
    analysis = analyze_reading_level(text)

    assert analysis.grade == 18
    assert analysis.description == "College"


def test_grade_rounds_half_up():
    # 49 polysyllables over 120 sentences gives exactly 3 + sqrt(12.25) = 6.5.
    text = "Medication. " * 49 + "Ok. " * 71
    assert calculate_smog_grade(text) == 7


@pytest.mark.parametrize(
    ("word", "expected"),
    [
        ("a", 1),
        ("the", 1),
        ("eye", 1),
        ("cake", 1),
        ("Hello!", 2),
        ("table", 2),
        ("apple", 2),
        ("little", 2),
        ("whale", 1),
        ("queue", 1),
        ("rhythm", 1),
        ("family", 3),
        ("medication", 4),
    ],
)
def test_count_syllables(word: str, expected: int):
    assert count_syllables(word) == expected


def test_sentence_runs_count_once():
    assert count_sentences("Wait... what?! Really.") == 3
    assert count_sentences("") == 1


def test_words_are_alphabetic_runs():
    analysis = analyze_reading_level("It's 42 degrees, co-pay due.")
    # It, s, degrees, co, pay, due
    assert analysis.word_count == 6


@pytest.mark.parametrize(
    ("grade", "expected"),
    [(6, "Middle School"), (8, "Middle School"), (9, "High School"), (12, "High School"), (13, "College"), (18, "College")],
)
def test_describe_grade(grade: int, expected: str):
    assert describe_grade(grade) == expected


@pytest.mark.parametrize(
    ("word_count", "expected"),
    [(0, "low"), (19, "low"), (20, "medium"), (49, "medium"), (50, "high"), (500, "high")],
)
def test_confidence_for_word_count(word_count: int, expected: str):
    assert confidence_for_word_count(word_count) == expected


@pytest.mark.parametrize(
    "text",
    [
        "",
        "!!!",
        "12345 67890 ...",
        "Short words. Easy text.",
        SIXTY_WORDS_NINE_POLYSYLLABLES,
        "pneumonoultramicroscopicsilicovolcanoconiosis " * 40,
    ],
)
def test_analysis_invariants(text: str):
    first = analyze_reading_level(text)
    second = analyze_reading_level(text)

    assert first == second
    assert 6 <= first.grade <= 18
    assert first.description == describe_grade(first.grade)
    assert first.confidence == confidence_for_word_count(first.word_count)


def test_to_dict_uses_wire_names():
    payload = analyze_reading_level("").to_dict()
    assert payload == {
        "grade": 8,
        "description": "Middle School",
        "confidence": "low",
        "wordCount": 0,
    }
