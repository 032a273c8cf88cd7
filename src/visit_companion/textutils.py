from __future__ import annotations

import re
from typing import List

WORD_RE = re.compile(r"[A-Za-z]+")
SENTENCE_END_RE = re.compile(r"[.!?]+")
NON_LETTER_RE = re.compile(r"[^a-z]")


def extract_words(text: str) -> List[str]:
    """Return every maximal run of ASCII letters in text."""
    return WORD_RE.findall(text)


def clean_word(word: str) -> str:
    """Lower-case a word and drop anything that is not a letter."""
    return NON_LETTER_RE.sub("", word.lower())


def whitespace_words(text: str) -> List[str]:
    """Split text on whitespace, the way free-text input boxes count words."""
    return text.split()
