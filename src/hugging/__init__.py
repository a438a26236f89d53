"""
hugging - reconnect with your younger self

Upload a childhood photo and a recent photo; a generative image model returns
one picture of the adult hugging their younger self.

Library usage:
- encode(RawImage) turns a selected file into an EncodedImage (MIME type + base64).
- generate(child, adult, config=...) sends both to the configured provider and
  returns a directly renderable image reference.
- Orchestrator drives validate -> encode -> request for one session and exposes
  its GenerationState, previews, result and error message.
- Logging: control verbosity with set_verbosity(0|1|2) or configure_logging(verbose_level, quiet).
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("hugging")
except PackageNotFoundError:
    # Package is not installed (e.g., running from source in development)
    __version__ = "0.0.0.dev"

from hugging.core.config import (
    DEFAULT_IMAGE_PROVIDER,
    DEFAULT_OPENROUTER_BASE_URL,
    Config,
)
from hugging.core.encoder import EncodedImage, RawImage, encode, parse_data_url
from hugging.core.image_gen import GeneratedImage, generate
from hugging.core.orchestrator import (
    FAILURE_MESSAGE,
    VALIDATION_MESSAGE,
    GenerationState,
    Orchestrator,
)
from hugging.logging_config import configure_logging, set_verbosity
from hugging.utils.exceptions import (
    APIError,
    ConfigurationError,
    EncodingError,
    GenerationError,
    HuggingError,
    NetworkError,
    RequestTimeoutError,
    ValidationError,
)

__all__ = [
    "APIError",
    "Config",
    "ConfigurationError",
    "DEFAULT_IMAGE_PROVIDER",
    "DEFAULT_OPENROUTER_BASE_URL",
    "EncodedImage",
    "EncodingError",
    "FAILURE_MESSAGE",
    "GeneratedImage",
    "GenerationError",
    "GenerationState",
    "HuggingError",
    "NetworkError",
    "Orchestrator",
    "RawImage",
    "RequestTimeoutError",
    "VALIDATION_MESSAGE",
    "ValidationError",
    "configure_logging",
    "encode",
    "generate",
    "parse_data_url",
    "set_verbosity",
]
