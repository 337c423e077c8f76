"""
Essay Scoring API Router
band_estimator/routers/essays.py

Endpoints:
  POST /api/v1/essays/analyze   - Score one essay (model, or heuristic fallback)

Register in main.py:
    from band_estimator.routers.essays import router as essays_router
    app.include_router(essays_router)
"""

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, Optional
import logging

from band_estimator.config import settings
from band_estimator.core.dependencies import get_scoring_pipeline
from band_estimator.core.exceptions import InputRejected, OutOfRangeError
from band_estimator.models.enumerations import ProficiencyTier, ScoringSource, TaskCategory
from band_estimator.models.score import ScoreRequest, ScoreResult
from band_estimator.services.scoring_pipeline import ScoringPipeline

logger = logging.getLogger(__name__)

router = APIRouter(prefix=f"{settings.API_V1_PREFIX}/essays", tags=["Essays"])


# =====================================================================
# Request / Response Models
# =====================================================================

class AnalyzeRequest(BaseModel):
    """Essay submission as sent by the web client."""
    model_config = ConfigDict(populate_by_name=True)

    text: str
    task_type: Optional[str] = Field(default=None, alias="taskType")
    prompt: Optional[str] = None

    def to_score_request(self) -> ScoreRequest:
        return ScoreRequest(
            task_category=TaskCategory.parse(self.task_type),
            task_prompt=self.prompt,
            text=self.text,
        )


class AnalyzeResponse(BaseModel):
    """Scored essay in the client's wire format."""
    model_config = ConfigDict(populate_by_name=True)

    overall: float
    bands: Dict[str, float]
    cefr: ProficiencyTier
    feedback: str
    word_count: int = Field(serialization_alias="wordCount")
    scored_by: ScoringSource = Field(serialization_alias="scoredBy")

    @classmethod
    def from_result(cls, result: ScoreResult) -> "AnalyzeResponse":
        return cls(
            overall=result.overall,
            bands=result.bands,
            cefr=result.proficiency_tier,
            feedback=result.feedback,
            word_count=result.word_count,
            scored_by=result.scored_by,
        )


def rejection_detail(error: InputRejected) -> Dict:
    detail = {"error": error.reason}
    if isinstance(error, OutOfRangeError):
        detail.update(actual=error.actual, min=error.minimum, max=error.maximum)
    return detail


# =====================================================================
# Endpoints
# =====================================================================

@router.post(
    "/analyze",
    response_model=AnalyzeResponse,
    response_model_by_alias=True,
    responses={
        200: {"description": "Essay scored"},
        400: {"description": "Essay rejected (word count outside the accepted window)"},
    },
    summary="Score an essay",
)
async def analyze_essay(
    body: AnalyzeRequest,
    pipeline: ScoringPipeline = Depends(get_scoring_pipeline),
):
    """Score one essay. Model failures fall back to heuristic scoring."""
    try:
        result = await pipeline.score(body.to_score_request())
    except InputRejected as e:
        logger.info(f"Essay rejected: {e.reason}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=rejection_detail(e),
        )
    logger.info(
        f"Essay scored: overall={result.overall} source={result.scored_by.value} words={result.word_count}"
    )
    return AnalyzeResponse.from_result(result)
