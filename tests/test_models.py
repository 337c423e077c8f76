# tests/test_models.py

"""
Model Validation Tests - enumerations, request coercion and ScoreResult invariants
"""

import pytest
from pydantic import ValidationError

from band_estimator.models.enumerations import Criterion, ProficiencyTier, ScoringSource, TaskCategory
from band_estimator.models.score import ParsedScore, ScoreRequest, ScoreResult

FEEDBACK = "Develop the second argument with an example and vary your sentence openings."


def result(**overrides):
    values = dict(
        task_achievement=6.5,
        coherence=6.0,
        lexical_resource=6.0,
        grammar=5.5,
        overall=6.0,
        proficiency_tier=ProficiencyTier.B2,
        feedback=FEEDBACK,
        word_count=260,
    )
    values.update(overrides)
    return ScoreResult(**values)


# ENUMERATION TESTS


class TestTaskCategory:

    @pytest.mark.parametrize("raw", ["task1", "TASK1", " Task1 ", TaskCategory.TASK1])
    def test_parses_task1(self, raw):
        assert TaskCategory.parse(raw) == TaskCategory.TASK1

    @pytest.mark.parametrize("raw", [None, "", "letter", "task3"])
    def test_unknown_defaults_to_task2(self, raw):
        assert TaskCategory.parse(raw) == TaskCategory.TASK2


class TestCriterion:

    def test_precedence_order(self):
        assert list(Criterion) == [
            Criterion.TASK_ACHIEVEMENT,
            Criterion.COHERENCE,
            Criterion.LEXICAL_RESOURCE,
            Criterion.GRAMMAR,
        ]

    def test_labels(self):
        assert Criterion.GRAMMAR.label == "Grammatical Range and Accuracy"


# SCORE REQUEST TESTS


class TestScoreRequest:

    def test_defaults(self):
        request = ScoreRequest(text="essay")
        assert request.task_category == TaskCategory.TASK2
        assert request.task_prompt is None

    def test_category_coerced(self):
        assert ScoreRequest(text="essay", task_category="TASK1").task_category == TaskCategory.TASK1
        assert ScoreRequest(text="essay", task_category="bogus").task_category == TaskCategory.TASK2


# PARSED SCORE TESTS


class TestParsedScore:

    def test_accepts_wire_names(self):
        parsed = ParsedScore.model_validate({"ta": 6, "cc": 6.5, "lr": 7, "gra": 5.5})
        assert parsed.coherence == 6.5

    def test_accepts_field_names(self):
        parsed = ParsedScore(task_achievement=6, coherence=6, lexical_resource=6, grammar=6)
        assert parsed.grammar == 6


# SCORE RESULT TESTS


class TestScoreResult:

    def test_valid_result(self):
        r = result()
        assert r.scored_by == ScoringSource.MODEL
        assert r.bands == {"ta": 6.5, "cc": 6.0, "lr": 6.0, "gra": 5.5}
        assert r.criterion(Criterion.TASK_ACHIEVEMENT) == 6.5

    @pytest.mark.parametrize("field", ["task_achievement", "coherence", "lexical_resource", "grammar", "overall"])
    def test_rejects_off_grid_band(self, field):
        with pytest.raises(ValidationError):
            result(**{field: 6.3})

    @pytest.mark.parametrize("value", [-0.5, 9.5])
    def test_rejects_out_of_scale(self, value):
        with pytest.raises(ValidationError):
            result(overall=value)

    def test_rejects_short_feedback(self):
        with pytest.raises(ValidationError):
            result(feedback="Too short.")

    def test_json_round_trip_preserves_source(self):
        r = result(scored_by=ScoringSource.FALLBACK)
        assert ScoreResult.model_validate_json(r.model_dump_json()) == r
