# tests/test_config.py

"""
Configuration Tests - defaults, credential aliases and cross-field validation
"""

import pytest
from pydantic import ValidationError

from band_estimator.config import Settings, get_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("OPENAI_API_KEY", "AI_KEY", "MIN_WORDS", "MAX_WORDS", "APP_ENV", "DEBUG"):
        monkeypatch.delenv(name, raising=False)


class TestDefaults:

    def test_scoring_defaults(self):
        config = Settings(_env_file=None)
        assert config.MIN_WORDS == 150
        assert config.MAX_WORDS == 320
        assert config.LLM_TEMPERATURE == 0.2
        assert config.LLM_MAX_TOKENS == 500
        assert config.CACHE_KEY_PREFIX == "essay_cache"
        assert config.CACHE_FINGERPRINT_LENGTH == 16

    def test_no_model_by_default(self):
        config = Settings(_env_file=None)
        assert config.OPENAI_API_KEY is None
        assert config.model_configured is False

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()


class TestModelCredential:

    def test_openai_key_from_env(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
        config = Settings(_env_file=None)
        assert config.model_configured is True
        assert config.OPENAI_API_KEY.get_secret_value() == "sk-env"

    def test_ai_key_alias(self, monkeypatch):
        monkeypatch.setenv("AI_KEY", "sk-alias")
        assert Settings(_env_file=None).OPENAI_API_KEY.get_secret_value() == "sk-alias"

    def test_blank_key_is_unset(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "   ")
        assert Settings(_env_file=None).model_configured is False

    def test_key_is_not_leaked_in_repr(self):
        config = Settings(_env_file=None, OPENAI_API_KEY="sk-secret")
        assert "sk-secret" not in repr(config)


class TestValidation:

    def test_inverted_word_window_rejected(self):
        with pytest.raises(ValidationError, match="MIN_WORDS"):
            Settings(_env_file=None, MIN_WORDS=400, MAX_WORDS=300)

    def test_debug_forbidden_in_production(self):
        with pytest.raises(ValidationError, match="DEBUG"):
            Settings(_env_file=None, APP_ENV="production", DEBUG=True)

    def test_temperature_bounds(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, LLM_TEMPERATURE=3.0)
