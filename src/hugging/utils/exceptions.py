"""
Exception hierarchy for hugging.

    HuggingError
    ├── ValidationError      a photo is missing when generation is triggered
    ├── EncodingError        a selected file cannot be read or typed
    ├── GenerationError      the remote call failed
    │   ├── APIError
    │   ├── NetworkError
    │   └── RequestTimeoutError
    └── ConfigurationError   bad settings, unknown provider, broken prompts.yaml
"""


class HuggingError(Exception):
    """Base exception for all hugging errors."""

    pass


class ValidationError(HuggingError):
    """Raised when required input is missing or invalid."""

    def __init__(self, message: str, field: str = "") -> None:
        """
        Args:
            message: Error message
            field: The missing input, "child_photo" or "adult_photo"
        """
        self.field = field
        super().__init__(message)


class EncodingError(HuggingError):
    """Raised when a selected file cannot be turned into an encoded image."""

    def __init__(self, message: str, source: str = "") -> None:
        """
        Initialize encoding error.

        Args:
            message: Error message
            source: Path or name of the file that failed to encode
        """
        self.source = source
        super().__init__(message)


class GenerationError(HuggingError):
    """Raised when the remote image generation call fails."""

    pass


class APIError(GenerationError):
    """Raised when the generation service answers with an error or no image."""

    def __init__(self, message: str, status_code: int = 0, response: str = "") -> None:
        """
        Args:
            message: Error message
            status_code: HTTP status of the failed call (0 when the body was the problem)
            response: Raw response body or parsed JSON, for debugging
        """
        self.status_code = status_code
        self.response = response
        super().__init__(message)


class NetworkError(GenerationError):
    """Raised when a network operation fails."""

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        """
        Args:
            message: Error message
            original_error: The requests exception that was raised
        """
        self.original_error = original_error
        super().__init__(message)


class RequestTimeoutError(GenerationError):
    """Raised when the generation request times out."""

    pass


class ConfigurationError(HuggingError):
    """Raised when there is a configuration problem."""

    pass
