"""
Request orchestration for one UI session.

An Orchestrator owns the two selected photos, their previews, the generated
image reference and the error message, and drives one generation attempt:

    Idle -> Validating -> Encoding -> Requesting -> Succeeded | Failed

A failed validation returns to Idle with a message. Encoding and request
failures end in Failed. Selecting a new photo clears the previous outcome.
All state lives on the instance; nothing is shared between sessions.
"""

import asyncio
import enum
from collections.abc import AsyncIterator, Awaitable, Callable
from functools import partial

from hugging.core.config import Config
from hugging.core.encoder import EncodedImage, RawImage, encode
from hugging.core.image_gen import generate
from hugging.logging_config import get_logger
from hugging.utils.exceptions import GenerationError, HuggingError, ValidationError

logger = get_logger(__name__)

VALIDATION_MESSAGE = "Please upload both photos before generating."
FAILURE_MESSAGE = "Failed to generate the image. Please try again."

Encoder = Callable[[RawImage], Awaitable[EncodedImage]]
GenerationClient = Callable[[EncodedImage, EncodedImage], Awaitable[str]]


class GenerationState(enum.Enum):
    """Lifecycle of a generation attempt."""

    IDLE = "idle"
    VALIDATING = "validating"
    ENCODING = "encoding"
    REQUESTING = "requesting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def is_pending(self) -> bool:
        return self in _PENDING_STATES


_PENDING_STATES = frozenset(
    {GenerationState.VALIDATING, GenerationState.ENCODING, GenerationState.REQUESTING}
)


class Orchestrator:
    """
    Drives validate -> encode -> request -> display for one session.

    Args:
        encoder: Coroutine function turning a RawImage into an EncodedImage
            (defaults to hugging.core.encoder.encode)
        client: Coroutine function taking (child, adult) EncodedImages and
            returning an image reference (defaults to hugging.core.image_gen.generate)
        config: Config for the default client; read from the environment if None
    """

    def __init__(
        self,
        encoder: Encoder | None = None,
        client: GenerationClient | None = None,
        config: Config | None = None,
    ) -> None:
        self.config = config or Config.from_env()
        self._encode: Encoder = encoder or encode
        self._client: GenerationClient = client or partial(generate, config=self.config)

        self.child_photo: RawImage | None = None
        self.adult_photo: RawImage | None = None
        self.child_preview: str | None = None
        self.adult_preview: str | None = None
        self.generated_image: str | None = None
        self.error: str | None = None
        self.last_error: Exception | None = None
        self.state: GenerationState = GenerationState.IDLE
        self.history: list[GenerationState] = []

    @property
    def is_pending(self) -> bool:
        """True while an attempt is in flight."""
        return self.state.is_pending

    @property
    def can_generate(self) -> bool:
        """True when both photos are selected and no attempt is in flight."""
        return (
            self.child_photo is not None and self.adult_photo is not None and not self.is_pending
        )

    @property
    def result_status(self) -> str:
        """Outcome of the current attempt: "none", "pending", "success" or "failure"."""
        if self.is_pending:
            return "pending"
        if self.state is GenerationState.SUCCEEDED:
            return "success"
        if self.state is GenerationState.FAILED:
            return "failure"
        return "none"

    def select_child_photo(self, raw: RawImage | None) -> None:
        """Store (or clear, with None) the childhood photo and its preview."""
        self.child_photo = raw
        self.child_preview = raw.preview if raw is not None else None
        self._after_selection()

    def select_adult_photo(self, raw: RawImage | None) -> None:
        """Store (or clear, with None) the recent photo and its preview."""
        self.adult_photo = raw
        self.adult_preview = raw.preview if raw is not None else None
        self._after_selection()

    def _after_selection(self) -> None:
        if self.is_pending:
            # The in-flight attempt keeps the photos it already read.
            logger.debug("Photo selected while %s; outcome of current attempt kept", self.state.value)
            return
        self.generated_image = None
        self.error = None
        self.last_error = None
        self._set_state(GenerationState.IDLE)

    def _set_state(self, state: GenerationState) -> None:
        logger.debug("State %s -> %s", self.state.value, state.value)
        self.state = state
        self.history.append(state)

    def _fail(self, exc: Exception, stage: str) -> None:
        self.last_error = exc
        self.error = FAILURE_MESSAGE
        if isinstance(exc, HuggingError):
            logger.error("Generation failed during %s: %s", stage, exc)
        else:
            logger.exception("Unexpected error during %s", stage)
        self._set_state(GenerationState.FAILED)

    async def stream(self) -> AsyncIterator[GenerationState]:
        """
        Run one generation attempt, yielding each state as it is entered.

        Triggering while an attempt is pending does nothing.
        """
        if self.is_pending:
            logger.warning("Generation already in progress; ignoring trigger")
            return

        self.history = []
        self.generated_image = None
        self.error = None
        self.last_error = None

        self._set_state(GenerationState.VALIDATING)
        yield self.state

        child, adult = self.child_photo, self.adult_photo
        if child is None or adult is None:
            field = "child_photo" if child is None else "adult_photo"
            err = ValidationError(VALIDATION_MESSAGE, field=field)
            self.last_error = err
            self.error = str(err)
            logger.info("Validation failed: missing %s", field)
            self._set_state(GenerationState.IDLE)
            yield self.state
            return

        self._set_state(GenerationState.ENCODING)
        yield self.state
        try:
            child_image, adult_image = await asyncio.gather(self._encode(child), self._encode(adult))
        except Exception as e:
            self._fail(e, "encoding")
            yield self.state
            return

        self._set_state(GenerationState.REQUESTING)
        yield self.state
        try:
            reference = await self._client(child_image, adult_image)
            if not reference:
                raise GenerationError("The generation service returned no image.")
        except Exception as e:
            self._fail(e, "request")
            yield self.state
            return

        self.generated_image = reference
        self._set_state(GenerationState.SUCCEEDED)
        yield self.state

    async def generate(self) -> GenerationState:
        """Run one generation attempt to completion and return the final state."""
        async for _ in self.stream():
            pass
        return self.state
