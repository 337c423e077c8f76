"""
Scoring Pipeline - IELTS Band Estimator
band_estimator/services/scoring_pipeline.py

Per-request state machine that composes the scoring components:

  VALIDATE_INPUT  -> REJECTED | CACHE_LOOKUP
  CACHE_LOOKUP    -> SERVED (hit) | INVOKE_MODEL | RUN_FALLBACK (no model)
  INVOKE_MODEL    -> PARSE_RESPONSE | RUN_FALLBACK (transport/timeout/quota)
  PARSE_RESPONSE  -> RECONCILE | RETRY_INVOKE (first failure) | RUN_FALLBACK
  RETRY_INVOKE    -> PARSE_RESPONSE | RUN_FALLBACK
  RECONCILE       -> GATE_FEEDBACK -> CACHE_STORE -> SERVED
  RUN_FALLBACK    -> SERVED

Only InputRejected leaves ScoringPipeline.score(); every other failure ends
in a complete ScoreResult. The pipeline keeps no state between requests.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, Dict, List, Optional

import structlog

from band_estimator.config import settings
from band_estimator.core.exceptions import InputRejected, ResponseParseError
from band_estimator.models.enumerations import Criterion, ScoringSource
from band_estimator.models.score import ParsedScore, ScoreRequest, ScoreResult
from band_estimator.scoring.fallback_scorer import FallbackScorer
from band_estimator.scoring.feedback_gate import gate_feedback
from band_estimator.scoring.prompt_builder import build_prompt
from band_estimator.scoring.response_parser import parse_model_response
from band_estimator.scoring.score_validator import ReconciledScores, ScoreValidator
from band_estimator.scoring.vocabulary import DEFAULT_VOCABULARY, ScoringVocabulary
from band_estimator.scoring.word_counter import validate_word_count
from band_estimator.services.cache import ContentCache
from band_estimator.services.model_invoker import ModelInvoker

logger = structlog.get_logger(__name__)

MAX_MODEL_ATTEMPTS = 2


class PipelineState(str, Enum):
    VALIDATE_INPUT = "validate_input"
    CACHE_LOOKUP = "cache_lookup"
    INVOKE_MODEL = "invoke_model"
    PARSE_RESPONSE = "parse_response"
    RETRY_INVOKE = "retry_invoke"
    RECONCILE = "reconcile"
    GATE_FEEDBACK = "gate_feedback"
    CACHE_STORE = "cache_store"
    RUN_FALLBACK = "run_fallback"
    SERVED = "served"
    REJECTED = "rejected"


TERMINAL_STATES = frozenset({PipelineState.SERVED, PipelineState.REJECTED})


@dataclass
class PipelineContext:
    """Artifacts collected while one request moves through the states."""
    request: ScoreRequest
    attempts: int = 0
    raw_text: Optional[str] = None
    parsed: Optional[ParsedScore] = None
    reconciled: Optional[ReconciledScores] = None
    result: Optional[ScoreResult] = None
    rejection: Optional[InputRejected] = None
    trace: List[PipelineState] = field(default_factory=list)


@dataclass
class PipelineRun:
    """Terminal outcome of one request plus the states it visited."""
    result: Optional[ScoreResult]
    rejection: Optional[InputRejected]
    trace: List[PipelineState]

    @property
    def served(self) -> bool:
        return self.result is not None


Handler = Callable[[PipelineContext], Awaitable[PipelineState]]


class ScoringPipeline:
    """
    Orchestrates validation, cache, model call with one strict retry,
    reconciliation, feedback gating and the heuristic fallback.

    Pass invoker=None to run without a model; every cache miss is then
    scored by the fallback.
    """

    def __init__(
        self,
        cache: ContentCache,
        invoker: Optional[ModelInvoker] = None,
        validator: Optional[ScoreValidator] = None,
        fallback: Optional[FallbackScorer] = None,
        vocabulary: ScoringVocabulary = DEFAULT_VOCABULARY,
        min_words: int = settings.MIN_WORDS,
        max_words: int = settings.MAX_WORDS,
    ):
        self.cache = cache
        self.invoker = invoker
        self.vocabulary = vocabulary
        self.validator = validator or ScoreValidator(vocabulary)
        self.fallback = fallback or FallbackScorer(vocabulary)
        self.min_words = min_words
        self.max_words = max_words
        self._handlers: Dict[PipelineState, Handler] = {
            PipelineState.VALIDATE_INPUT: self._validate_input,
            PipelineState.CACHE_LOOKUP: self._cache_lookup,
            PipelineState.INVOKE_MODEL: self._invoke_model,
            PipelineState.PARSE_RESPONSE: self._parse_response,
            PipelineState.RETRY_INVOKE: self._retry_invoke,
            PipelineState.RECONCILE: self._reconcile,
            PipelineState.GATE_FEEDBACK: self._gate_feedback,
            PipelineState.CACHE_STORE: self._cache_store,
            PipelineState.RUN_FALLBACK: self._run_fallback,
        }

    @property
    def model_configured(self) -> bool:
        return self.invoker is not None

    async def run(self, request: ScoreRequest) -> PipelineRun:
        """Drive one request to a terminal state. Never raises InputRejected."""
        ctx = PipelineContext(request=request)
        state = PipelineState.VALIDATE_INPUT
        while state not in TERMINAL_STATES:
            ctx.trace.append(state)
            next_state = await self._handlers[state](ctx)
            logger.debug(
                "pipeline_state",
                state=state.value,
                next_state=next_state.value,
                task_category=request.task_category.value,
            )
            state = next_state
        ctx.trace.append(state)

        logger.info(
            "pipeline_finished",
            outcome=state.value,
            scored_by=ctx.result.scored_by.value if ctx.result else None,
            model_attempts=ctx.attempts,
            path=[s.value for s in ctx.trace],
        )
        return PipelineRun(result=ctx.result, rejection=ctx.rejection, trace=ctx.trace)

    async def score(self, request: ScoreRequest) -> ScoreResult:
        """
        Score one submission.

        Raises:
            InputRejected: word count outside the accepted window.
        """
        outcome = await self.run(request)
        if outcome.rejection is not None:
            raise outcome.rejection
        return outcome.result

    # ------------------------------------------------------------------
    # State handlers
    # ------------------------------------------------------------------

    async def _validate_input(self, ctx: PipelineContext) -> PipelineState:
        try:
            validate_word_count(ctx.request.text, self.min_words, self.max_words)
        except InputRejected as e:
            ctx.rejection = e
            logger.info("input_rejected", reason=e.reason)
            return PipelineState.REJECTED
        return PipelineState.CACHE_LOOKUP

    async def _cache_lookup(self, ctx: PipelineContext) -> PipelineState:
        cached = await self.cache.get(ctx.request.task_category, ctx.request.text)
        if cached is not None:
            ctx.result = cached
            return PipelineState.SERVED
        if self.invoker is None:
            return PipelineState.RUN_FALLBACK
        return PipelineState.INVOKE_MODEL

    async def _invoke_model(self, ctx: PipelineContext) -> PipelineState:
        return await self._call_model(ctx, strict=False)

    async def _retry_invoke(self, ctx: PipelineContext) -> PipelineState:
        return await self._call_model(ctx, strict=True)

    async def _call_model(self, ctx: PipelineContext, strict: bool) -> PipelineState:
        request = ctx.request
        instruction, payload = build_prompt(
            request.task_category, request.task_prompt, request.text, strict=strict
        )
        ctx.attempts += 1
        outcome = await self.invoker.invoke(instruction, payload)
        if not outcome.ok:
            return PipelineState.RUN_FALLBACK
        ctx.raw_text = outcome.raw_text
        return PipelineState.PARSE_RESPONSE

    async def _parse_response(self, ctx: PipelineContext) -> PipelineState:
        try:
            ctx.parsed = parse_model_response(ctx.raw_text)
        except ResponseParseError as e:
            logger.warning("model_response_unparseable", attempt=ctx.attempts, error=e.message)
            if ctx.attempts < MAX_MODEL_ATTEMPTS:
                return PipelineState.RETRY_INVOKE
            return PipelineState.RUN_FALLBACK
        return PipelineState.RECONCILE

    async def _reconcile(self, ctx: PipelineContext) -> PipelineState:
        ctx.reconciled = self.validator.reconcile(ctx.parsed, ctx.request.text)
        return PipelineState.GATE_FEEDBACK

    async def _gate_feedback(self, ctx: PipelineContext) -> PipelineState:
        reconciled = ctx.reconciled
        feedback = gate_feedback(
            ctx.parsed.feedback,
            reconciled.bands,
            reconciled.word_count,
            ctx.request.task_category,
            self.vocabulary,
        )
        ctx.result = ScoreResult(
            task_achievement=reconciled.bands[Criterion.TASK_ACHIEVEMENT],
            coherence=reconciled.bands[Criterion.COHERENCE],
            lexical_resource=reconciled.bands[Criterion.LEXICAL_RESOURCE],
            grammar=reconciled.bands[Criterion.GRAMMAR],
            overall=reconciled.overall,
            proficiency_tier=reconciled.tier,
            feedback=feedback,
            word_count=reconciled.word_count,
            scored_by=ScoringSource.MODEL,
        )
        return PipelineState.CACHE_STORE

    async def _cache_store(self, ctx: PipelineContext) -> PipelineState:
        await self.cache.put(ctx.request.task_category, ctx.request.text, ctx.result)
        return PipelineState.SERVED

    async def _run_fallback(self, ctx: PipelineContext) -> PipelineState:
        # Heuristic results are not cached; a later model-backed run may replace them
        ctx.result = self.fallback.score(ctx.request.text, ctx.request.task_category)
        return PipelineState.SERVED
