"""
Word Counter / Input Validator
band_estimator/scoring/word_counter.py

Whitespace folding and word counting used to gate submissions before any
scoring work is done. Only ASCII whitespace separates words.
"""

import re
from typing import Dict, Tuple, Union

from band_estimator.core.exceptions import OutOfRangeError
from band_estimator.models.enumerations import TaskCategory

DEFAULT_MIN_WORDS = 150
DEFAULT_MAX_WORDS = 320

_WHITESPACE_RUN = re.compile(r"[ \t\n\r\f\v]+")


def normalize_whitespace(text: str) -> str:
    """Collapse every whitespace run to one space and trim the ends."""
    return _WHITESPACE_RUN.sub(" ", text or "").strip()


def count_words(text: str) -> int:
    normalized = normalize_whitespace(text)
    if not normalized:
        return 0
    return len(normalized.split(" "))


def validate_word_count(
    text: str,
    min_words: int = DEFAULT_MIN_WORDS,
    max_words: int = DEFAULT_MAX_WORDS,
) -> int:
    """
    Accept text whose word count lies in [min_words, max_words].

    Returns:
        The word count.

    Raises:
        OutOfRangeError: count falls outside the inclusive window.
    """
    words = count_words(text)
    if words < min_words or words > max_words:
        raise OutOfRangeError(words, min_words, max_words)
    return words


# Recommended length per task category, used for feedback and heuristics
TARGET_WORD_BANDS: Dict[str, Tuple[int, int]] = {
    "task1": (150, 220),
    "task2": (250, 320),
}


def target_word_band(task_category: Union[TaskCategory, str]) -> Tuple[int, int]:
    """(low, high) recommended word count for a task category."""
    key = getattr(task_category, "value", task_category)
    return TARGET_WORD_BANDS.get(key, TARGET_WORD_BANDS["task2"])
