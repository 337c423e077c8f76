#band_estimator/models/score.py
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional

from band_estimator.models.enumerations import (
    Criterion,
    ProficiencyTier,
    ScoringSource,
    TaskCategory,
)

MIN_FEEDBACK_LENGTH = 50


class ScoreRequest(BaseModel):
    """A single scoring call from a collaborator. Never persisted here."""
    task_category: TaskCategory = TaskCategory.TASK2
    task_prompt: Optional[str] = None
    text: str

    @field_validator("task_category", mode="before")
    @classmethod
    def coerce_category(cls, v):
        return TaskCategory.parse(v)


class ParsedScore(BaseModel):
    """Score record as decoded from the model, before reconciliation."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    task_achievement: float = Field(alias="ta")
    coherence: float = Field(alias="cc")
    lexical_resource: float = Field(alias="lr")
    grammar: float = Field(alias="gra")
    overall: Optional[float] = None
    feedback: str = ""
    cefr: Optional[str] = None

    @field_validator("feedback", mode="before")
    @classmethod
    def none_feedback_is_empty(cls, v):
        return "" if v is None else v


class ScoreResult(BaseModel):
    """The pipeline's sole output entity."""
    task_achievement: float = Field(ge=0, le=9)
    coherence: float = Field(ge=0, le=9)
    lexical_resource: float = Field(ge=0, le=9)
    grammar: float = Field(ge=0, le=9)
    overall: float = Field(ge=0, le=9)
    proficiency_tier: ProficiencyTier
    feedback: str = Field(min_length=MIN_FEEDBACK_LENGTH)
    word_count: int = Field(default=0, ge=0)
    scored_by: ScoringSource = ScoringSource.MODEL

    @field_validator("task_achievement", "coherence", "lexical_resource", "grammar", "overall")
    @classmethod
    def half_band_steps(cls, v: float) -> float:
        if (v * 2) != int(v * 2):
            raise ValueError(f"band {v} is not a multiple of 0.5")
        return v

    def criterion(self, criterion: Criterion) -> float:
        return getattr(self, criterion.value)

    @property
    def bands(self) -> dict:
        """Criterion scores keyed by the short wire names."""
        return {
            "ta": self.task_achievement,
            "cc": self.coherence,
            "lr": self.lexical_resource,
            "gra": self.grammar,
        }
