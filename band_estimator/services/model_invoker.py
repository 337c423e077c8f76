"""
Model Invoker - IELTS Band Estimator
band_estimator/services/model_invoker.py

Single-attempt call to the external scoring model (OpenAI chat completions)
under a hard deadline. Transport problems come back as a typed
InvocationResult rather than an exception; retry policy belongs to the
pipeline. Cancellation is never swallowed, so a caller that goes away
aborts the outbound request.
"""
import asyncio
import time
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import openai
import structlog
from openai import AsyncOpenAI

from band_estimator.config import Settings, settings

logger = structlog.get_logger(__name__)


class ModelErrorKind(str, Enum):
    TRANSPORT = "transport"
    QUOTA = "quota"
    TIMEOUT = "timeout"


@dataclass(frozen=True)
class InvocationResult:
    """Raw model text, or the kind of failure that prevented it."""
    raw_text: Optional[str] = None
    error: Optional[ModelErrorKind] = None
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None and self.raw_text is not None

    @classmethod
    def failure(cls, kind: ModelErrorKind, detail: str = "") -> "InvocationResult":
        return cls(error=kind, detail=detail)


class ModelInvoker:
    """Thin async wrapper around one chat-completion request."""

    def __init__(
        self,
        api_key: str,
        model: str = settings.DEFAULT_LLM_MODEL,
        temperature: float = settings.LLM_TEMPERATURE,
        max_tokens: int = settings.LLM_MAX_TOKENS,
        deadline_seconds: float = settings.MODEL_DEADLINE_SECONDS,
        client: Optional[AsyncOpenAI] = None,
    ):
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.deadline_seconds = deadline_seconds
        # Retries are the pipeline's job; the SDK must make exactly one attempt
        self.client = client or AsyncOpenAI(
            api_key=api_key,
            max_retries=0,
            timeout=deadline_seconds,
        )

    async def invoke(
        self,
        instruction_text: str,
        payload_text: str,
        deadline: Optional[float] = None,
    ) -> InvocationResult:
        """
        Args:
            instruction_text: System message (rubric and output format).
            payload_text: User message (task metadata and essay).
            deadline: Seconds to wait; never more than the configured ceiling.

        Returns:
            InvocationResult with raw_text on success, error kind otherwise.
        """
        timeout = min(deadline, self.deadline_seconds) if deadline else self.deadline_seconds
        started = time.monotonic()
        try:
            response = await asyncio.wait_for(
                self.client.chat.completions.create(
                    model=self.model,
                    temperature=self.temperature,
                    max_tokens=self.max_tokens,
                    messages=[
                        {"role": "system", "content": instruction_text},
                        {"role": "user", "content": payload_text},
                    ],
                ),
                timeout=timeout,
            )
        except (asyncio.TimeoutError, openai.APITimeoutError) as e:
            return self._failed(ModelErrorKind.TIMEOUT, e, started)
        except openai.RateLimitError as e:
            return self._failed(ModelErrorKind.QUOTA, e, started)
        except openai.OpenAIError as e:
            return self._failed(ModelErrorKind.TRANSPORT, e, started)

        if not response.choices or not response.choices[0].message.content:
            return self._failed(ModelErrorKind.TRANSPORT, "empty response from model", started)

        logger.info(
            "model_invoked",
            model=self.model,
            elapsed_seconds=round(time.monotonic() - started, 3),
        )
        return InvocationResult(raw_text=response.choices[0].message.content)

    def _failed(self, kind: ModelErrorKind, error, started: float) -> InvocationResult:
        logger.warning(
            "model_invocation_failed",
            model=self.model,
            kind=kind.value,
            error=str(error) or type(error).__name__,
            elapsed_seconds=round(time.monotonic() - started, 3),
        )
        return InvocationResult.failure(kind, str(error))


def build_model_invoker(config: Settings = settings) -> Optional[ModelInvoker]:
    """ModelInvoker from settings, or None when no credential is configured."""
    if config.OPENAI_API_KEY is None:
        return None
    return ModelInvoker(
        api_key=config.OPENAI_API_KEY.get_secret_value(),
        model=config.DEFAULT_LLM_MODEL,
        temperature=config.LLM_TEMPERATURE,
        max_tokens=config.LLM_MAX_TOKENS,
        deadline_seconds=config.MODEL_DEADLINE_SECONDS,
    )
