"""Image generation providers (OpenRouter, Gemini) and the registry that finds them."""

from hugging.core.config import KNOWN_IMAGE_PROVIDERS
from hugging.core.providers.base import GeneratedImage, ImageGenerationProvider
from hugging.core.providers.registry import (
    BUILTIN_PROVIDERS,
    PROVIDER_GEMINI,
    PROVIDER_OPENROUTER,
    ProviderRegistry,
    get_registry,
)

__all__ = [
    "BUILTIN_PROVIDERS",
    "GeneratedImage",
    "ImageGenerationProvider",
    "KNOWN_IMAGE_PROVIDERS",
    "PROVIDER_GEMINI",
    "PROVIDER_OPENROUTER",
    "ProviderRegistry",
    "get_registry",
]
