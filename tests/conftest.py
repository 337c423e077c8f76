# tests/conftest.py

"""
Pytest Fixtures - Shared essays, cache backends and clients for all tests

ESSAY REFERENCE:
- band_six_essay: 251 words, 4 paragraphs, task2. Contains exactly three
  linking words (moreover, however, in conclusion), two sophisticated words
  (crucial, beneficial), two clause markers (although, which), no common
  errors and no content word used more than three times.
"""

import json
import pytest
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock
from fastapi.testclient import TestClient

from band_estimator.main import app
from band_estimator.core.dependencies import get_scoring_pipeline
from band_estimator.services.cache import ContentCache
from band_estimator.services.model_invoker import InvocationResult, ModelInvoker
from band_estimator.services.scoring_pipeline import ScoringPipeline


BAND_SIX_ESSAY = """Many people today argue that every young person ought to spend a year working or travelling before starting university. I partly agree with this view, although I also see real costs for families and for the students themselves.

A gap year can give a teenager time to mature. Someone who has held a job, paid rent and managed a budget usually arrives on campus with clearer goals and better habits. Moreover, travel exposes young adults to new cultures, which can make them more tolerant and genuinely curious about others. Employers often value these experiences because they show independence and initiative.

However, a year away from study is not free. Many households cannot afford to support a child who earns little, and time spent abroad may cost more than a modest salary can cover. Some learners also lose their academic rhythm, and they find it hard to return to lectures, essays and exams after twelve months of freedom. For ambitious pupils aiming at medicine or law, a delay can mean an extra year before they qualify and begin earning.

In conclusion, I believe a break of this kind is crucial for some individuals but should remain a personal choice rather than a rule. Governments and colleges could make it more accessible through grants, internships and volunteer schemes, while teenagers who feel ready to continue their education straight away should be free to do so. A flexible approach seems more beneficial than a single path imposed on every school leaver across the country."""

SPECIFIC_FEEDBACK = (
    "Your position is clear and each body paragraph develops one idea. "
    "Vary sentence openings and add a concrete statistic to support the cost argument."
)


# =============================================================================
# IN-MEMORY CACHE BACKEND
# =============================================================================

class InMemoryBackend:
    """Stands in for RedisCache; stores serialized models in a dict."""

    def __init__(self):
        self.store = {}
        self.ttls = {}

    async def ping(self):
        return True

    async def get(self, key, model):
        data = self.store.get(key)
        if data:
            return model.model_validate_json(data)
        return None

    async def set(self, key, value, ttl_seconds):
        self.store[key] = value.model_dump_json()
        self.ttls[key] = ttl_seconds


# =============================================================================
# TEXT FIXTURES
# =============================================================================

@pytest.fixture
def band_six_essay():
    """Fallback-friendly task2 essay (see module docstring)."""
    return BAND_SIX_ESSAY


@pytest.fixture
def make_text():
    """Factory for filler text of an exact word count."""
    def _make(word_count, word="word"):
        return " ".join([word] * word_count)
    return _make


@pytest.fixture
def model_json():
    """Factory for a well-formed model response."""
    def _make(ta=7.0, cc=6.5, lr=7.0, gra=7.5, overall=7.0, feedback=SPECIFIC_FEEDBACK, **extra):
        payload = {
            "ta": ta, "cc": cc, "lr": lr, "gra": gra,
            "overall": overall, "feedback": feedback, "cefr": "B2",
        }
        payload.update(extra)
        return json.dumps(payload)
    return _make


# =============================================================================
# PIPELINE COLLABORATOR FIXTURES
# =============================================================================

@pytest.fixture
def memory_backend():
    return InMemoryBackend()


@pytest.fixture
def memory_cache(memory_backend):
    """ContentCache over the in-memory backend."""
    return ContentCache(memory_backend, ttl_seconds=60)


@pytest.fixture
def fake_invoker():
    """ModelInvoker double; set invoke.side_effect / return_value per test."""
    invoker = MagicMock(spec=ModelInvoker)
    invoker.model = "gpt-test"
    invoker.invoke = AsyncMock(return_value=InvocationResult(raw_text="{}"))
    return invoker


@pytest.fixture
def chat_response():
    """Factory for an OpenAI chat-completion response object."""
    def _make(content):
        message = SimpleNamespace(role="assistant", content=content)
        return SimpleNamespace(choices=[SimpleNamespace(index=0, message=message)])
    return _make


# =============================================================================
# FASTAPI TEST CLIENT FIXTURE
# =============================================================================

@pytest.fixture
def fallback_pipeline(memory_cache):
    """Pipeline with no model configured."""
    return ScoringPipeline(cache=memory_cache, invoker=None)


@pytest.fixture
def client(fallback_pipeline):
    """Create a TestClient with the pipeline dependency overridden."""
    app.dependency_overrides[get_scoring_pipeline] = lambda: fallback_pipeline
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
