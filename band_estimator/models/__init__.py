from band_estimator.models.enumerations import (
    Criterion,
    ProficiencyTier,
    ScoringSource,
    TaskCategory,
)
from band_estimator.models.score import ParsedScore, ScoreRequest, ScoreResult

__all__ = [
    "Criterion",
    "ParsedScore",
    "ProficiencyTier",
    "ScoreRequest",
    "ScoreResult",
    "ScoringSource",
    "TaskCategory",
]
