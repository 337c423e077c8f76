# band_estimator/scoring/score_validator.py
"""
Score Validator
-------------------------------
Turns a decoded model record into trustworthy bands.

Steps, in order:
    1. clamp_round each criterion to [0, 9] in 0.5 steps
    2. overall = mean(criteria) unless the model's own (clamped) overall is
       within 0.5 of it, in which case the model's value is kept
    3. fewer than 200 words  -> Task Achievement capped at 5.5, overall recomputed
    4. overall >= 8.0 without lexical/syntactic evidence -> every criterion
       capped at 7.5, overall recomputed
    5. CEFR tier from the final overall

Tier thresholds:
    >= 8.5 C2 | >= 7.5 C1 | >= 6.0 B2 | >= 4.0 B1 | else A2
"""
import structlog
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

from band_estimator.models.enumerations import Criterion, ProficiencyTier
from band_estimator.models.score import ParsedScore
from band_estimator.scoring.utils import cap, clamp_round, mean_band
from band_estimator.scoring.vocabulary import (
    DEFAULT_VOCABULARY,
    ScoringVocabulary,
    matched_terms,
)
from band_estimator.scoring.word_counter import count_words

logger = structlog.get_logger(__name__)

TIER_THRESHOLDS = (
    (8.5, ProficiencyTier.C2),
    (7.5, ProficiencyTier.C1),
    (6.0, ProficiencyTier.B2),
    (4.0, ProficiencyTier.B1),
)

AGGREGATE_TOLERANCE = 0.5
SHORT_ESSAY_WORDS = 200
SHORT_ESSAY_TA_CAP = 5.5
PLAUSIBILITY_THRESHOLD = 8.0
IMPLAUSIBLE_CAP = 7.5

MIN_ADVANCED_LEXICAL_HITS = 3
MIN_COMPLEX_PATTERN_HITS = 1
MIN_JUSTIFIED_CHARS = 250


def map_overall_to_tier(overall: float) -> ProficiencyTier:
    """Map an overall band to its CEFR tier."""
    for threshold, tier in TIER_THRESHOLDS:
        if overall >= threshold:
            return tier
    return ProficiencyTier.A2


def reconcile_aggregate(
    bands: Mapping[Criterion, float],
    parsed_overall: Optional[float] = None,
) -> float:
    """Keep the model's overall only when it agrees with the criteria mean."""
    computed = mean_band(bands[c] for c in Criterion)
    if not parsed_overall:
        return computed
    claimed = clamp_round(parsed_overall)
    if claimed == 0 or abs(claimed - computed) > AGGREGATE_TOLERANCE:
        return computed
    return claimed


def weakest_criterion(bands: Mapping[Criterion, float]) -> Criterion:
    """Lowest-scoring criterion; ties go to the earliest in Criterion order."""
    return min(Criterion, key=lambda c: (bands[c], list(Criterion).index(c)))


def is_high_score_justified(
    text: str,
    vocabulary: ScoringVocabulary = DEFAULT_VOCABULARY,
) -> bool:
    """
    Evidence check behind any top-band claim.

    Requires at least 3 distinct advanced-lexical terms, at least 1 complex
    syntactic pattern and at least 250 characters. Deliberately strict.
    """
    if len(text) < MIN_JUSTIFIED_CHARS:
        return False
    lexical_hits = matched_terms(text, vocabulary.advanced_lexical)
    if len(lexical_hits) < MIN_ADVANCED_LEXICAL_HITS:
        return False
    pattern_hits = matched_terms(text, vocabulary.complex_patterns)
    return len(pattern_hits) >= MIN_COMPLEX_PATTERN_HITS


@dataclass
class ReconciledScores:
    """Output of ScoreValidator.reconcile()."""
    bands: Dict[Criterion, float]
    overall: float
    tier: ProficiencyTier
    word_count: int
    adjustments: List[str] = field(default_factory=list)


class ScoreValidator:
    """Clamp, reconcile and sanity-check model-reported bands."""

    def __init__(self, vocabulary: ScoringVocabulary = DEFAULT_VOCABULARY):
        self.vocabulary = vocabulary

    def reconcile(self, parsed: ParsedScore, text: str) -> ReconciledScores:
        """
        Args:
            parsed: Decoded model record.
            text: The submission the record claims to score.

        Returns:
            ReconciledScores with bands, overall and tier that satisfy every
            invariant of ScoreResult.
        """
        adjustments: List[str] = []
        bands = {c: clamp_round(getattr(parsed, c.value)) for c in Criterion}
        overall = reconcile_aggregate(bands, parsed.overall)
        claimed_overall = overall

        word_count = count_words(text)
        if word_count < SHORT_ESSAY_WORDS:
            bands[Criterion.TASK_ACHIEVEMENT] = cap(
                bands[Criterion.TASK_ACHIEVEMENT], SHORT_ESSAY_TA_CAP
            )
            overall = mean_band(bands.values())
            adjustments.append("short_essay_cap")

        # A claim that was top-band before the length penalty still needs evidence
        if max(claimed_overall, overall) >= PLAUSIBILITY_THRESHOLD:
            if not is_high_score_justified(text, self.vocabulary):
                bands = {c: cap(v, IMPLAUSIBLE_CAP) for c, v in bands.items()}
                overall = mean_band(bands.values())
                adjustments.append("plausibility_cap")

        tier = map_overall_to_tier(overall)

        logger.info(
            "scores_reconciled",
            word_count=word_count,
            parsed_overall=parsed.overall,
            overall=overall,
            tier=tier.value,
            adjustments=adjustments,
        )

        return ReconciledScores(
            bands=bands,
            overall=overall,
            tier=tier,
            word_count=word_count,
            adjustments=adjustments,
        )
