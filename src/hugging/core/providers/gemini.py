"""
Google Gemini image generation provider.

Calls the generativelanguage REST endpoint models/{model}:generateContent with
both photos as inlineData parts followed by the instruction, and reads the
first inlineData part of the first candidate.
"""

from typing import Any

import requests

from hugging.core.config import Config
from hugging.core.encoder import EncodedImage
from hugging.core.providers.base import GeneratedImage
from hugging.core.providers.common import image_from_data_url, post_json
from hugging.logging_config import get_logger
from hugging.utils.exceptions import APIError, ConfigurationError

logger = get_logger(__name__)

SERVICE_NAME = "Gemini"


def _inline_part(image: EncodedImage) -> dict[str, Any]:
    return {"inlineData": {"mimeType": image.media_type, "data": image.payload}}


class GeminiProvider:
    """Image generation provider for the Google Gemini API."""

    default_model: str = "gemini-2.5-flash-image-preview"

    def _validate_config(self, config: Config) -> None:
        """Raise ConfigurationError if API key is missing."""
        if not config.gemini_api_key:
            raise ConfigurationError(
                "Gemini API key is required. Set GEMINI_API_KEY or provide it explicitly."
            )

    def _build_payload(
        self,
        child_image: EncodedImage,
        adult_image: EncodedImage,
        prompt: str,
    ) -> dict[str, Any]:
        """Build generateContent payload: child photo, adult photo, then the instruction."""
        return {
            "contents": [
                {
                    "role": "user",
                    "parts": [
                        _inline_part(child_image),
                        _inline_part(adult_image),
                        {"text": prompt},
                    ],
                }
            ],
            "generationConfig": {"responseModalities": ["IMAGE", "TEXT"]},
        }

    def _parse_response(self, response: requests.Response) -> tuple[str, str]:
        """Return (data URL, media_type) of the first image part. Raises APIError."""
        try:
            result = response.json()
        except ValueError as e:
            raise APIError(
                f"Failed to parse API response as JSON: {str(e)}",
                response=response.text,
            ) from e

        if not isinstance(result, dict):
            raise APIError("Unexpected API response: not a JSON object.", response=str(result))

        candidates = result.get("candidates") or []
        if not isinstance(candidates, list):
            raise APIError(
                "Unexpected API response: candidates is not a list.", response=str(result)
            )
        if not candidates:
            feedback = result.get("promptFeedback")
            reason = feedback.get("blockReason") if isinstance(feedback, dict) else None
            if reason:
                raise APIError(
                    f"Request was blocked by the service: {reason}", response=str(result)
                )
            raise APIError("No candidates in API response.", response=str(result))

        candidate = candidates[0]
        if not isinstance(candidate, dict):
            raise APIError(
                "Unexpected API response: candidate is not an object.", response=str(result)
            )
        content = candidate.get("content")
        parts = content.get("parts") if isinstance(content, dict) else None
        texts: list[str] = []
        for part in parts if isinstance(parts, list) else []:
            if not isinstance(part, dict):
                continue
            inline = part.get("inlineData") or part.get("inline_data")
            if isinstance(inline, dict) and isinstance(inline.get("data"), str) and inline["data"]:
                mime = inline.get("mimeType") or inline.get("mime_type") or "image/png"
                encoded = image_from_data_url(f"data:{mime};base64,{inline['data']}")
                return encoded.data_url, encoded.media_type
            if isinstance(part.get("text"), str) and part["text"]:
                texts.append(part["text"])

        finish_reason = candidate.get("finishReason")
        detail = f" finishReason={finish_reason}" if finish_reason else ""
        if texts:
            detail += f" text={' '.join(texts)[:200]!r}"
        raise APIError(
            f"No image in API response. The model may not support image generation.{detail}",
            response=str(result),
        )

    def generate(
        self,
        child_image: EncodedImage,
        adult_image: EncodedImage,
        prompt: str,
        model: str,
        timeout: int,
        config: Config,
    ) -> GeneratedImage:
        """Generate the composite image via the Gemini API."""
        self._validate_config(config)
        model_path = model if model.startswith("models/") else f"models/{model}"
        url = f"{config.gemini_base_url.rstrip('/')}/{model_path}:generateContent"
        headers = {
            "x-goog-api-key": config.gemini_api_key,
            "Content-Type": "application/json",
        }
        payload = self._build_payload(child_image, adult_image, prompt)

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
        logger.debug("Response image media_type=%s", media_type)
        return GeneratedImage(
            reference=reference,
            media_type=media_type,
            generation_time=elapsed,
            model_used=model,
            provider="gemini",
        )
