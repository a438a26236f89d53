"""
Generation client.

Sends the childhood photo, the recent photo and the instructional prompt to the
configured provider in one request and returns a reference to the generated
image that the UI can render directly (a data URL, or a URL as returned by the
service). No retries and no caching: every call issues a full request.
"""

import asyncio

from hugging.core.config import Config
from hugging.core.encoder import EncodedImage
from hugging.core.prompts_loader import get_hug_prompt
from hugging.core.providers import GeneratedImage, get_registry
from hugging.logging_config import get_logger, log_prompts
from hugging.utils.exceptions import ConfigurationError

logger = get_logger(__name__)

# Max prompt length for logging (large so prompts are effectively never truncated)
_PROMPT_LOG_MAX = 50_000


def resolve_prompt(prompt: str | None, config: Config) -> str:
    """Return the explicit prompt, else the configured override, else the bundled one."""
    for candidate in (prompt, config.prompt):
        if candidate and candidate.strip():
            return candidate.strip()
    return get_hug_prompt()


async def generate(
    child_image: EncodedImage,
    adult_image: EncodedImage,
    *,
    prompt: str | None = None,
    provider: str | None = None,
    model: str | None = None,
    config: Config | None = None,
) -> str:
    """
    Generate the composite image from a childhood photo and a recent photo.

    The blocking HTTP call runs in a worker thread so the event loop stays free.

    Args:
        child_image: The childhood photo (sent first)
        adult_image: The recent photo (sent second)
        prompt: Optional instruction; defaults to config.prompt or the bundled prompt
        provider: Optional provider id; defaults to config.image_provider
        model: Optional model id; defaults to config.image_model or the provider default
        config: Optional config; if None, one is read from the environment

    Returns:
        A directly renderable image reference

    Raises:
        ConfigurationError: If the provider is unknown or its API key is missing
        APIError: If the service returns an error or no image
        NetworkError: If a network error occurs
        RequestTimeoutError: If the request times out
    """
    config = config or Config.from_env()
    provider_id = provider or config.image_provider
    impl = get_registry().require(provider_id)
    if not config.api_key_for(provider_id):
        raise ConfigurationError(
            f"API key for provider {provider_id!r} is not set. "
            "Set it via config or environment variable."
        )

    model = model or config.image_model or impl.default_model
    text = resolve_prompt(prompt, config)
    timeout = config.generation_timeout

    logger.info(
        "Generating image provider=%s model=%s child=%s adult=%s",
        provider_id,
        model,
        child_image.media_type,
        adult_image.media_type,
    )
    if log_prompts():
        truncated = text if len(text) <= _PROMPT_LOG_MAX else text[:_PROMPT_LOG_MAX] + "..."
        logger.info("Prompt (used): %s", truncated)

    result: GeneratedImage = await asyncio.to_thread(
        impl.generate, child_image, adult_image, text, model, timeout, config
    )
    logger.info(
        "Generated in %.1fs provider=%s model=%s",
        result.generation_time,
        result.provider,
        result.model_used,
    )
    return result.reference
