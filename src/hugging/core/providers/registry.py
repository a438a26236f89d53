"""
Provider lookup by id.

Built-in providers are declared as "module:Class" paths and imported the first
time they are requested, so a broken or slow provider module only affects the
lookups that ask for it. Providers hold no credentials; the Config travels with
each generate() call.
"""

import importlib

from hugging.core.providers.base import ImageGenerationProvider
from hugging.logging_config import get_logger
from hugging.utils.exceptions import ConfigurationError

logger = get_logger(__name__)

PROVIDER_OPENROUTER = "openrouter"
PROVIDER_GEMINI = "gemini"

BUILTIN_PROVIDERS: dict[str, str] = {
    PROVIDER_OPENROUTER: "hugging.core.providers.openrouter:OpenRouterProvider",
    PROVIDER_GEMINI: "hugging.core.providers.gemini:GeminiProvider",
}


def _load(target: str) -> ImageGenerationProvider:
    module_name, _, class_name = target.partition(":")
    cls = getattr(importlib.import_module(module_name), class_name)
    return cls()


class ProviderRegistry:
    """Maps provider ids to provider instances, loading declared ones on demand."""

    def __init__(self, declared: dict[str, str] | None = None) -> None:
        self._declared: dict[str, str] = dict(declared or {})
        self._impls: dict[str, ImageGenerationProvider] = {}

    def register(self, provider_id: str, impl: ImageGenerationProvider) -> None:
        """Register an instance, replacing anything known under provider_id."""
        self._declared.pop(provider_id, None)
        self._impls[provider_id] = impl

    def get(self, provider_id: str) -> ImageGenerationProvider | None:
        if provider_id not in self._impls:
            target = self._declared.get(provider_id)
            if target is None:
                return None
            logger.debug("Loading provider %s from %s", provider_id, target)
            # Declaration stays until the import succeeds
            self._impls[provider_id] = _load(target)
            del self._declared[provider_id]
        return self._impls[provider_id]

    def require(self, provider_id: str) -> ImageGenerationProvider:
        """Like get(), but an unknown id raises ConfigurationError."""
        impl = self.get(provider_id)
        if impl is None:
            known = ", ".join(self.provider_ids()) or "none"
            raise ConfigurationError(
                f"Unknown image provider: {provider_id!r}. Registered providers: {known}."
            )
        return impl

    def provider_ids(self) -> list[str]:
        return sorted({*self._impls, *self._declared})


_registry: ProviderRegistry | None = None


def get_registry() -> ProviderRegistry:
    """Process-wide registry preloaded with the built-in provider declarations."""
    global _registry
    if _registry is None:
        _registry = ProviderRegistry(BUILTIN_PROVIDERS)
    return _registry
