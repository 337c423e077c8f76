# band_estimator/scoring/fallback_scorer.py
"""
Fallback Scorer
-------------------------------
Deterministic, model-free scoring used whenever the external model is not
configured, unreachable, or keeps returning unusable output.

Every criterion starts at band 4.0. Independent adjustments, each a pure
function from TextFeatures to fixed per-criterion deltas, are summed
left-to-right:

    word_count   in target band: TA +2.0, CC/LR/GRA +1.0
                 accepted but off target: TA +1.0, CC/LR/GRA +0.5
    paragraphs   >= 4: CC +1.0, TA +0.5
    linking      >= 3 distinct: CC +1.5, TA +0.5 | >= 6: CC +2.0, TA +0.5
    vocabulary   >= 2 distinct: LR +1.0 | >= 5: LR +2.0
                 any content word (> 4 letters) used > 3 times: LR -0.5
    grammar      >= 2 clause markers: GRA +1.0 | >= 4: GRA +1.5
                 common errors: GRA -0.5 each, at most -2.0

Each criterion is then capped at 7.0 before clamp-rounding; a heuristic
never claims top-band proficiency.
"""
import re
import structlog
from collections import Counter
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Sequence, Tuple

from band_estimator.models.enumerations import Criterion, ScoringSource, TaskCategory
from band_estimator.models.score import ScoreResult
from band_estimator.scoring.feedback_gate import compose_feedback
from band_estimator.scoring.score_validator import map_overall_to_tier
from band_estimator.scoring.utils import cap, clamp_round, mean_band
from band_estimator.scoring.vocabulary import (
    DEFAULT_VOCABULARY,
    ScoringVocabulary,
    count_occurrences,
    matched_terms,
)
from band_estimator.scoring.word_counter import (
    DEFAULT_MIN_WORDS,
    count_words,
    target_word_band,
)

logger = structlog.get_logger(__name__)

TA = Criterion.TASK_ACHIEVEMENT
CC = Criterion.COHERENCE
LR = Criterion.LEXICAL_RESOURCE
GRA = Criterion.GRAMMAR

BASE_BAND = 4.0
FALLBACK_CEILING = 7.0

MIN_PARAGRAPHS = 4
LINKING_TIERS = (3, 6)
SOPHISTICATED_TIERS = (2, 5)
CLAUSE_TIERS = (2, 4)
REPETITION_MIN_LENGTH = 5      # "length > 4"
REPETITION_LIMIT = 3
ERROR_PENALTY = 0.5
MAX_ERROR_PENALTY = 2.0

_WORD_TOKEN = re.compile(r"[a-z']+")
_PARAGRAPH_BREAK = re.compile(r"\n[ \t\r\f\v]*\n")
_SENTENCE_END = re.compile(r"[.!?:][\"')\]]*[ \t\r\f\v]*$")

Deltas = Dict[Criterion, float]


@dataclass(frozen=True)
class TextFeatures:
    """Surface features of a submission, extracted once per score call."""
    word_count: int
    paragraph_count: int
    linking_hits: int
    sophisticated_hits: int
    clause_marker_hits: int
    error_count: int
    has_repetition: bool
    target_band: Tuple[int, int]


def _paragraph_count(text: str) -> int:
    """
    Paragraphs are blank-line separated blocks. Without any blank line, a new
    paragraph starts only after a line that closes a sentence, so hard-wrapped
    text stays one paragraph.
    """
    if _PARAGRAPH_BREAK.search(text):
        return sum(1 for block in _PARAGRAPH_BREAK.split(text) if block.strip())
    lines = [line for line in text.splitlines() if line.strip()]
    if not lines:
        return 0
    return 1 + sum(1 for line in lines[:-1] if _SENTENCE_END.search(line))


def _has_repetition(text: str, stopwords: Iterable[str] = ()) -> bool:
    ignored = frozenset(stopwords)
    tokens = (t.strip("'") for t in _WORD_TOKEN.findall(text.lower()))
    counts = Counter(
        t for t in tokens if len(t) >= REPETITION_MIN_LENGTH and t not in ignored
    )
    return any(n > REPETITION_LIMIT for n in counts.values())


def extract_features(
    text: str,
    task_category: TaskCategory,
    vocabulary: ScoringVocabulary = DEFAULT_VOCABULARY,
) -> TextFeatures:
    return TextFeatures(
        word_count=count_words(text),
        paragraph_count=_paragraph_count(text),
        linking_hits=len(matched_terms(text, vocabulary.linking_words)),
        sophisticated_hits=len(matched_terms(text, vocabulary.sophisticated_words)),
        clause_marker_hits=len(matched_terms(text, vocabulary.complex_clause_markers)),
        error_count=count_occurrences(text, vocabulary.common_errors),
        has_repetition=_has_repetition(text, vocabulary.stopwords),
        target_band=target_word_band(task_category),
    )


# ---------------------------------------------------------------------------
# Adjustments
# ---------------------------------------------------------------------------

def word_count_adjustment(features: TextFeatures) -> Deltas:
    low, high = features.target_band
    if low <= features.word_count <= high:
        return {TA: 2.0, CC: 1.0, LR: 1.0, GRA: 1.0}
    if features.word_count >= DEFAULT_MIN_WORDS:
        return {TA: 1.0, CC: 0.5, LR: 0.5, GRA: 0.5}
    return {}


def paragraph_adjustment(features: TextFeatures) -> Deltas:
    if features.paragraph_count >= MIN_PARAGRAPHS:
        return {CC: 1.0, TA: 0.5}
    return {}


def linking_adjustment(features: TextFeatures) -> Deltas:
    tier1, tier2 = LINKING_TIERS
    if features.linking_hits >= tier2:
        return {CC: 2.0, TA: 0.5}
    if features.linking_hits >= tier1:
        return {CC: 1.5, TA: 0.5}
    return {}


def vocabulary_adjustment(features: TextFeatures) -> Deltas:
    tier1, tier2 = SOPHISTICATED_TIERS
    bonus = 0.0
    if features.sophisticated_hits >= tier2:
        bonus = 2.0
    elif features.sophisticated_hits >= tier1:
        bonus = 1.0
    if features.has_repetition:
        bonus -= 0.5
    return {LR: bonus} if bonus else {}


def grammar_adjustment(features: TextFeatures) -> Deltas:
    tier1, tier2 = CLAUSE_TIERS
    bonus = 0.0
    if features.clause_marker_hits >= tier2:
        bonus = 1.5
    elif features.clause_marker_hits >= tier1:
        bonus = 1.0
    bonus -= min(MAX_ERROR_PENALTY, ERROR_PENALTY * features.error_count)
    return {GRA: bonus} if bonus else {}


Adjustment = Callable[[TextFeatures], Deltas]

DEFAULT_ADJUSTMENTS: Tuple[Adjustment, ...] = (
    word_count_adjustment,
    paragraph_adjustment,
    linking_adjustment,
    vocabulary_adjustment,
    grammar_adjustment,
)


def apply_adjustments(
    features: TextFeatures,
    adjustments: Sequence[Adjustment] = DEFAULT_ADJUSTMENTS,
) -> Dict[Criterion, float]:
    """Sum every adjustment onto the base bands, then cap and clamp-round."""
    raw = {c: BASE_BAND for c in Criterion}
    for adjustment in adjustments:
        for criterion, delta in adjustment(features).items():
            raw[criterion] += delta
    return {c: clamp_round(cap(v, FALLBACK_CEILING)) for c, v in raw.items()}


class FallbackScorer:
    """Heuristic scorer with no network dependency."""

    def __init__(
        self,
        vocabulary: ScoringVocabulary = DEFAULT_VOCABULARY,
        adjustments: Sequence[Adjustment] = DEFAULT_ADJUSTMENTS,
    ):
        self.vocabulary = vocabulary
        self.adjustments = tuple(adjustments)

    def score(self, text: str, task_category: TaskCategory = TaskCategory.TASK2) -> ScoreResult:
        task_category = TaskCategory.parse(task_category)
        features = extract_features(text, task_category, self.vocabulary)
        bands = apply_adjustments(features, self.adjustments)
        overall = mean_band(bands.values())
        tier = map_overall_to_tier(overall)

        logger.info(
            "fallback_scored",
            task_category=task_category.value,
            word_count=features.word_count,
            paragraphs=features.paragraph_count,
            linking_hits=features.linking_hits,
            sophisticated_hits=features.sophisticated_hits,
            clause_marker_hits=features.clause_marker_hits,
            error_count=features.error_count,
            overall=overall,
        )

        return ScoreResult(
            task_achievement=bands[TA],
            coherence=bands[CC],
            lexical_resource=bands[LR],
            grammar=bands[GRA],
            overall=overall,
            proficiency_tier=tier,
            feedback=compose_feedback(bands, features.word_count, task_category),
            word_count=features.word_count,
            scored_by=ScoringSource.FALLBACK,
        )
