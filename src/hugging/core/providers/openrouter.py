"""
OpenRouter image generation provider.

Sends both photos as image_url parts of one chat/completions message and reads
the generated image from choices[0].message.images.
"""

import base64
import binascii
from typing import Any

import requests

from hugging.core.config import Config
from hugging.core.encoder import EncodedImage
from hugging.core.providers.base import GeneratedImage
from hugging.core.providers.common import image_from_bytes, image_from_data_url, post_json
from hugging.logging_config import get_logger
from hugging.utils.exceptions import APIError, ConfigurationError

logger = get_logger(__name__)

SERVICE_NAME = "OpenRouter"


def _format_from_content_type(content_type: str) -> str:
    """Return the bare MIME type of an image Content-Type header ('' if not an image)."""
    mime = content_type.split(";")[0].strip().lower()
    return mime if mime.startswith("image/") else ""


class OpenRouterProvider:
    """Image generation provider for the OpenRouter API."""

    default_model: str = "google/gemini-2.5-flash-image-preview"

    def _validate_config(self, config: Config) -> None:
        """Raise ConfigurationError if API key is missing."""
        if not config.openrouter_api_key:
            raise ConfigurationError(
                "OpenRouter API key is required. Set OPENROUTER_API_KEY or provide it explicitly."
            )

    def _build_payload(
        self,
        child_image: EncodedImage,
        adult_image: EncodedImage,
        prompt: str,
        model: str,
    ) -> dict[str, Any]:
        """Build OpenRouter chat/completions payload (text first, then child, then adult)."""
        content_parts: list[dict[str, Any]] = [
            {"type": "text", "text": prompt},
            {"type": "image_url", "image_url": {"url": child_image.data_url}},
            {"type": "image_url", "image_url": {"url": adult_image.data_url}},
        ]
        return {
            "model": model,
            "modalities": ["image", "text"],
            "messages": [{"role": "user", "content": content_parts}],
        }

    def _parse_response(self, response: requests.Response) -> tuple[str, str]:
        """Return (reference, media_type) from an OpenRouter response. Raises APIError."""
        content_type = response.headers.get("content-type", "")
        mime = _format_from_content_type(content_type)
        if mime:
            encoded = image_from_bytes(response.content, mime)
            return encoded.data_url, encoded.media_type

        try:
            result = response.json()
        except ValueError as e:
            raise APIError(
                f"Failed to parse API response as JSON: {str(e)}",
                response=response.text,
            ) from e

        try:
            if not isinstance(result, dict):
                raise TypeError("response is not a JSON object")
            images = result.get("choices", [{}])[0].get("message", {}).get("images") or []
            if not images:
                raise APIError(
                    "No images in API response. The model may not support image generation.",
                    response=str(result),
                )
            image_url = images[0].get("image_url", {}).get("url", "")
            if not isinstance(image_url, str):
                raise TypeError(f"image_url.url is {type(image_url).__name__}, not str")
        except (AttributeError, IndexError, KeyError, TypeError) as e:
            raise APIError(
                f"Failed to extract image from API response: {str(e)}",
                response=str(result),
            ) from e
        if not image_url:
            raise APIError("No image URL in response", response=str(result))

        if image_url.startswith("data:"):
            encoded = image_from_data_url(image_url)
            return encoded.data_url, encoded.media_type
        if image_url.startswith(("http://", "https://")):
            return image_url, ""
        try:
            data = base64.b64decode(image_url, validate=True)
        except (binascii.Error, ValueError) as e:
            raise APIError(
                f"Image in API response is neither a URL nor base64: {str(e)}",
                response=str(result),
            ) from e
        encoded = image_from_bytes(data)
        return encoded.data_url, encoded.media_type

    def generate(
        self,
        child_image: EncodedImage,
        adult_image: EncodedImage,
        prompt: str,
        model: str,
        timeout: int,
        config: Config,
    ) -> GeneratedImage:
        """Generate the composite image via the OpenRouter API."""
        self._validate_config(config)
        url = f"{config.openrouter_base_url.rstrip('/')}/chat/completions"
        headers = {
            "Authorization": f"Bearer {config.openrouter_api_key}",
            "Content-Type": "application/json",
        }
        payload = self._build_payload(child_image, adult_image, prompt, model)

        response, elapsed = post_json(
            url,
            headers,
            payload,
            timeout,
            service=SERVICE_NAME,
            model=model,
            debug=config.debug_api,
        )
        reference, media_type = self._parse_response(response)
        logger.debug("Response image media_type=%s", media_type or "<remote url>")
        return GeneratedImage(
            reference=reference,
            media_type=media_type,
            generation_time=elapsed,
            model_used=model,
            provider="openrouter",
        )
