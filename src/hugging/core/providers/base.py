"""
What every image generation provider looks like.

A provider owns one remote service's request and response schema. It receives
the two encoded photos (child first) and the instruction, performs one
blocking HTTP call, and returns a GeneratedImage.
"""

from dataclasses import dataclass
from typing import Protocol

from hugging.core.config import Config
from hugging.core.encoder import EncodedImage


@dataclass
class GeneratedImage:
    """Result of one provider call."""

    reference: str  # data URL or http(s) URL; directly renderable
    media_type: str  # MIME type when known ("" for remote URLs)
    generation_time: float  # Time taken in seconds
    model_used: str
    provider: str


class ImageGenerationProvider(Protocol):
    default_model: str

    def generate(
        self,
        child_image: EncodedImage,
        adult_image: EncodedImage,
        prompt: str,
        model: str,
        timeout: int,
        config: Config,
    ) -> GeneratedImage:
        """
        Send both photos and the instruction; return the generated image.

        Raises:
            ConfigurationError: If the provider's API key is missing
            APIError: If the service answers with an error or without an image
            NetworkError: If the connection fails
            RequestTimeoutError: If the request times out
        """
        ...
