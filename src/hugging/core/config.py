"""
Configuration management for hugging.

This module handles API keys, provider and model selection, and request settings.
Each Orchestrator builds its own Config; there is no process-wide instance.
"""

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from hugging.logging_config import get_logger
from hugging.utils.exceptions import ConfigurationError

logger = get_logger(__name__)

# Load environment variables from .env file
load_dotenv()

# Default configuration constants
DEFAULT_IMAGE_PROVIDER = "openrouter"
DEFAULT_OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_GENERATION_TIMEOUT = 180  # 3 minutes

# Provider ids accepted by validate(); the provider registry declares one built-in per id
KNOWN_IMAGE_PROVIDERS = ("openrouter", "gemini")


@dataclass
class Config:
    """Configuration for one hugging session."""

    # Provider selection; an empty image_model means "the provider's default model"
    image_provider: str = DEFAULT_IMAGE_PROVIDER
    image_model: str = ""

    # API Configuration (keys excluded from repr to avoid leaking secrets)
    openrouter_api_key: str = field(default="", repr=False)
    openrouter_base_url: str = DEFAULT_OPENROUTER_BASE_URL
    gemini_api_key: str = field(default="", repr=False)
    gemini_base_url: str = DEFAULT_GEMINI_BASE_URL

    # Instructional prompt override; empty uses the bundled prompts.yaml text
    prompt: str = ""

    # Timeout for the HTTP call to the generation service (seconds)
    generation_timeout: int = DEFAULT_GENERATION_TIMEOUT

    # Debug: log raw API payload/response with image data truncated
    debug_api: bool = False

    _validated: bool = field(default=False, repr=False)

    @classmethod
    def from_env(cls) -> "Config":
        """
        Create a Config instance from environment variables.

        Environment variables:
            HUGGING_IMAGE_PROVIDER: "openrouter" (default) or "gemini"
            HUGGING_IMAGE_MODEL: Optional model id for the selected provider
            OPENROUTER_API_KEY: Required when the provider is openrouter
            GEMINI_API_KEY (or GOOGLE_API_KEY): Required when the provider is gemini
            OPENROUTER_BASE_URL, GEMINI_BASE_URL: Optional endpoint overrides
            HUGGING_PROMPT: Optional replacement for the bundled instructional prompt
            HUGGING_GENERATION_TIMEOUT: Optional HTTP timeout in seconds (default 180)
            HUGGING_DEBUG_API: "1"/"true"/"yes" to log truncated request/response bodies

        Returns:
            Config instance populated from environment

        Raises:
            ConfigurationError: If a numeric variable cannot be parsed
        """

        def _int_env(name: str, default: int) -> int:
            val = os.getenv(name)
            if val is None or val.strip() == "":
                return default
            try:
                return int(val)
            except ValueError as e:
                raise ConfigurationError(f"{name} must be an integer, got {val!r}.") from e

        debug_api = os.getenv("HUGGING_DEBUG_API", "").strip().lower() in ("1", "true", "yes")

        return cls(
            image_provider=os.getenv("HUGGING_IMAGE_PROVIDER", DEFAULT_IMAGE_PROVIDER).strip(),
            image_model=os.getenv("HUGGING_IMAGE_MODEL", "").strip(),
            openrouter_api_key=os.getenv("OPENROUTER_API_KEY", ""),
            openrouter_base_url=os.getenv("OPENROUTER_BASE_URL") or DEFAULT_OPENROUTER_BASE_URL,
            gemini_api_key=os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY") or "",
            gemini_base_url=os.getenv("GEMINI_BASE_URL") or DEFAULT_GEMINI_BASE_URL,
            prompt=os.getenv("HUGGING_PROMPT", ""),
            generation_timeout=_int_env("HUGGING_GENERATION_TIMEOUT", DEFAULT_GENERATION_TIMEOUT),
            debug_api=debug_api,
        )

    def api_key_for(self, provider: str) -> str:
        """Return the API key used for the given provider id ("" if none)."""
        if provider == "openrouter":
            return self.openrouter_api_key
        if provider == "gemini":
            return self.gemini_api_key
        return ""

    def validate(self) -> None:
        """
        Validate the configuration for the selected provider.

        Raises:
            ConfigurationError: If configuration is invalid
        """
        logger.debug("Validating config provider=%s", self.image_provider)

        if self.generation_timeout <= 0:
            raise ConfigurationError(
                f"generation_timeout must be positive, got {self.generation_timeout}."
            )

        provider = self.image_provider
        if provider not in KNOWN_IMAGE_PROVIDERS:
            raise ConfigurationError(
                f"Unknown image_provider: {provider!r}. "
                f"Must be one of: {', '.join(KNOWN_IMAGE_PROVIDERS)}."
            )
        if provider == "openrouter":
            if not self.openrouter_api_key:
                raise ConfigurationError(
                    "OpenRouter API key is required when the provider is openrouter. "
                    "Set OPENROUTER_API_KEY environment variable or provide it explicitly."
                )
            if not self.openrouter_api_key.startswith("sk-"):
                raise ConfigurationError(
                    "OpenRouter API key appears to be invalid. It should start with 'sk-'."
                )
        if provider == "gemini" and not self.gemini_api_key:
            raise ConfigurationError(
                "Gemini API key is required when the provider is gemini. "
                "Set GEMINI_API_KEY environment variable or provide it explicitly."
            )

        self._validated = True

    def is_valid(self) -> bool:
        """
        Check if configuration has been validated.

        Returns:
            True if validate() has been called successfully
        """
        return self._validated
