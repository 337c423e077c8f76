"""
Feedback Gate
band_estimator/scoring/feedback_gate.py

Rejects feedback that is too short or is a known boilerplate sentence and
writes criterion-specific narrative in its place. The same templates back
the fallback scorer's feedback.
"""

import structlog
from typing import Mapping

from band_estimator.models.enumerations import Criterion, TaskCategory
from band_estimator.models.score import MIN_FEEDBACK_LENGTH
from band_estimator.scoring.score_validator import weakest_criterion
from band_estimator.scoring.vocabulary import DEFAULT_VOCABULARY, ScoringVocabulary
from band_estimator.scoring.word_counter import normalize_whitespace, target_word_band

logger = structlog.get_logger(__name__)

PRIORITY_THRESHOLD = 6.5
REFINE_THRESHOLD = 7.0

# criterion -> (below 6.5, below 7.0, at or above 7.0)
ADVICE = {
    Criterion.TASK_ACHIEVEMENT: (
        "Address every part of the question directly and support each main idea with a specific example.",
        "You cover the task; extend your main ideas a little further so your position is fully developed.",
        "You address the task fully and keep a clear position throughout.",
    ),
    Criterion.COHERENCE: (
        "Work on coherence: give each paragraph one central idea and use linking devices such as however or as a result.",
        "Your organisation is clear; vary your linking devices so progression between paragraphs feels natural.",
        "Your ideas progress logically and paragraphing is well managed.",
    ),
    Criterion.LEXICAL_RESOURCE: (
        "Broaden your vocabulary: replace repeated words with precise alternatives and check word choice.",
        "Your vocabulary is adequate; add a few less common, topic-specific words to show flexibility.",
        "Your vocabulary is wide and used with precision.",
    ),
    Criterion.GRAMMAR: (
        "Focus on grammatical accuracy and attempt more complex sentences with relative or concessive clauses.",
        "Your grammar is generally accurate; use a wider mix of complex structures while keeping control.",
        "You use a wide range of structures accurately.",
    ),
}


def _advice(criterion: Criterion, band: float) -> str:
    priority, refine, strength = ADVICE[criterion]
    if band < PRIORITY_THRESHOLD:
        return priority
    if band < REFINE_THRESHOLD:
        return refine
    return strength


def word_count_remark(word_count: int, task_category: TaskCategory) -> str:
    low, high = target_word_band(task_category)
    if word_count < low:
        return (
            f"At {word_count} words your response is shorter than the recommended "
            f"{low}-{high}; develop your ideas more fully."
        )
    if word_count > high:
        return (
            f"At {word_count} words your response runs past the recommended "
            f"{low}-{high}; tighten it to stay focused."
        )
    return f"At {word_count} words your response sits within the recommended {low}-{high} range."


def compose_feedback(
    bands: Mapping[Criterion, float],
    word_count: int,
    task_category: TaskCategory = TaskCategory.TASK2,
) -> str:
    """Narrative led by the weakest criterion, then the rest in rubric order."""
    weakest = weakest_criterion(bands)
    sentences = [
        f"Your weakest area is {weakest.label} (band {bands[weakest]:g}). "
        f"{_advice(weakest, bands[weakest])}"
    ]
    sentences.extend(
        _advice(criterion, bands[criterion])
        for criterion in Criterion
        if criterion is not weakest
    )
    sentences.append(word_count_remark(word_count, task_category))
    return " ".join(sentences)


def is_acceptable_feedback(
    feedback: str,
    vocabulary: ScoringVocabulary = DEFAULT_VOCABULARY,
) -> bool:
    """Long enough and not one of the known boilerplate strings."""
    normalized = normalize_whitespace(feedback)
    if len(normalized) < MIN_FEEDBACK_LENGTH:
        return False
    lowered = normalized.lower()
    return all(
        lowered != normalize_whitespace(generic).lower()
        for generic in vocabulary.generic_feedback
    )


def gate_feedback(
    feedback: str,
    bands: Mapping[Criterion, float],
    word_count: int,
    task_category: TaskCategory = TaskCategory.TASK2,
    vocabulary: ScoringVocabulary = DEFAULT_VOCABULARY,
) -> str:
    """Return feedback unchanged if acceptable, otherwise a generated narrative."""
    if is_acceptable_feedback(feedback, vocabulary):
        return feedback.strip()
    logger.info("feedback_replaced", original_length=len(feedback or ""))
    return compose_feedback(bands, word_count, task_category)
