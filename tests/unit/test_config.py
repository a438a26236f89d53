"""Unit tests for config."""

import pytest

from hugging.core.config import (
    DEFAULT_GEMINI_BASE_URL,
    DEFAULT_GENERATION_TIMEOUT,
    DEFAULT_IMAGE_PROVIDER,
    DEFAULT_OPENROUTER_BASE_URL,
    KNOWN_IMAGE_PROVIDERS,
    Config,
)
from hugging.utils.exceptions import ConfigurationError


@pytest.mark.unit
class TestConfigValidate:
    def test_validate_raises_when_no_openrouter_key(self):
        c = Config(openrouter_api_key="", image_provider="openrouter")
        with pytest.raises(ConfigurationError) as exc_info:
            c.validate()
        assert "API key" in str(exc_info.value)

    def test_validate_raises_when_openrouter_key_bad_prefix(self):
        c = Config(openrouter_api_key="invalid", image_provider="openrouter")
        with pytest.raises(ConfigurationError) as exc_info:
            c.validate()
        assert "sk-" in str(exc_info.value)

    def test_validate_raises_when_no_gemini_key(self):
        c = Config(openrouter_api_key="sk-ok", image_provider="gemini")
        with pytest.raises(ConfigurationError) as exc_info:
            c.validate()
        assert "Gemini" in str(exc_info.value)

    def test_validate_gemini_with_key(self):
        c = Config(gemini_api_key="AIza-test", image_provider="gemini")
        c.validate()
        assert c.is_valid() is True

    def test_validate_unknown_provider(self):
        c = Config(openrouter_api_key="sk-ok", image_provider="dalle")
        with pytest.raises(ConfigurationError) as exc_info:
            c.validate()
        assert "dalle" in str(exc_info.value)

    def test_validate_non_positive_timeout(self):
        c = Config(openrouter_api_key="sk-ok", generation_timeout=0)
        with pytest.raises(ConfigurationError) as exc_info:
            c.validate()
        assert "generation_timeout" in str(exc_info.value)

    def test_validate_sets_validated(self):
        c = Config(openrouter_api_key="sk-valid-key")
        assert c.is_valid() is False
        c.validate()
        assert c.is_valid() is True


@pytest.mark.unit
class TestConfigFields:
    def test_defaults(self):
        c = Config()
        assert c.image_provider == DEFAULT_IMAGE_PROVIDER
        assert c.image_provider in KNOWN_IMAGE_PROVIDERS
        assert c.image_model == ""
        assert c.openrouter_base_url == DEFAULT_OPENROUTER_BASE_URL
        assert c.gemini_base_url == DEFAULT_GEMINI_BASE_URL
        assert c.generation_timeout == DEFAULT_GENERATION_TIMEOUT
        assert c.debug_api is False

    def test_repr_does_not_contain_api_keys(self):
        c = Config(openrouter_api_key="sk-secret", gemini_api_key="gm-secret")
        r = repr(c)
        assert "sk-secret" not in r
        assert "gm-secret" not in r

    def test_api_key_for(self):
        c = Config(openrouter_api_key="sk-or", gemini_api_key="gm")
        assert c.api_key_for("openrouter") == "sk-or"
        assert c.api_key_for("gemini") == "gm"
        assert c.api_key_for("other") == ""


@pytest.mark.unit
class TestConfigFromEnv:
    def test_from_env_uses_env_vars(self, clean_env):
        for name, value in {
            "HUGGING_IMAGE_PROVIDER": "gemini",
            "HUGGING_IMAGE_MODEL": "gemini-custom",
            "OPENROUTER_API_KEY": "sk-from-env",
            "GEMINI_API_KEY": "gm-from-env",
            "GEMINI_BASE_URL": "http://localhost:9000/v1beta",
            "HUGGING_PROMPT": "Just hug.",
            "HUGGING_GENERATION_TIMEOUT": "30",
            "HUGGING_DEBUG_API": "yes",
        }.items():
            clean_env.setenv(name, value)
        c = Config.from_env()
        assert c.image_provider == "gemini"
        assert c.image_model == "gemini-custom"
        assert c.openrouter_api_key == "sk-from-env"
        assert c.gemini_api_key == "gm-from-env"
        assert c.gemini_base_url == "http://localhost:9000/v1beta"
        assert c.prompt == "Just hug."
        assert c.generation_timeout == 30
        assert c.debug_api is True

    def test_from_env_defaults_when_env_empty(self, clean_env):
        c = Config.from_env()
        assert c.image_provider == DEFAULT_IMAGE_PROVIDER
        assert c.openrouter_api_key == ""
        assert c.gemini_api_key == ""
        assert c.openrouter_base_url == DEFAULT_OPENROUTER_BASE_URL
        assert c.generation_timeout == DEFAULT_GENERATION_TIMEOUT
        assert c.debug_api is False

    def test_google_api_key_fallback(self, clean_env):
        clean_env.setenv("GOOGLE_API_KEY", "google-key")
        assert Config.from_env().gemini_api_key == "google-key"

    def test_gemini_key_preferred_over_google_key(self, clean_env):
        clean_env.setenv("GOOGLE_API_KEY", "google-key")
        clean_env.setenv("GEMINI_API_KEY", "gemini-key")
        assert Config.from_env().gemini_api_key == "gemini-key"

    def test_invalid_timeout_raises(self, clean_env):
        clean_env.setenv("HUGGING_GENERATION_TIMEOUT", "soon")
        with pytest.raises(ConfigurationError) as exc_info:
            Config.from_env()
        assert "HUGGING_GENERATION_TIMEOUT" in str(exc_info.value)

    def test_each_call_returns_new_instance(self, clean_env):
        clean_env.setenv("OPENROUTER_API_KEY", "sk-a")
        a = Config.from_env()
        b = Config.from_env()
        assert a is not b
        a.openrouter_api_key = "sk-changed"
        assert b.openrouter_api_key == "sk-a"
