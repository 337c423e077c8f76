from enum import Enum
from typing import Optional


class TaskCategory(str, Enum):
    TASK1 = "task1"   # Report on a chart, graph, table or diagram
    TASK2 = "task2"   # Discursive essay

    @classmethod
    def parse(cls, value: Optional[str]) -> "TaskCategory":
        """Coerce any caller-supplied category; unknown values fall back to task2."""
        if isinstance(value, cls):
            return value
        if value:
            normalized = str(value).strip().lower()
            for member in cls:
                if member.value == normalized:
                    return member
        return cls.TASK2


class Criterion(str, Enum):
    # Declaration order is the tie-break precedence for the weakest criterion
    TASK_ACHIEVEMENT = "task_achievement"
    COHERENCE = "coherence"
    LEXICAL_RESOURCE = "lexical_resource"
    GRAMMAR = "grammar"

    @property
    def label(self) -> str:
        return _CRITERION_LABELS[self]


_CRITERION_LABELS = {
    Criterion.TASK_ACHIEVEMENT: "Task Achievement",
    Criterion.COHERENCE: "Coherence and Cohesion",
    Criterion.LEXICAL_RESOURCE: "Lexical Resource",
    Criterion.GRAMMAR: "Grammatical Range and Accuracy",
}


class ProficiencyTier(str, Enum):
    A2 = "A2"
    B1 = "B1"
    B2 = "B2"
    C1 = "C1"
    C2 = "C2"


class ScoringSource(str, Enum):
    MODEL = "model"          # External model output, reconciled
    FALLBACK = "fallback"    # Deterministic heuristic scorer
