"""
Gradio web UI for hugging.

Single page: upload a childhood photo and a recent photo, click "Create My
Image", see the generated picture. Each browser session gets its own
Orchestrator held in gr.State; the UI only renders its state.
"""

import argparse
import io
import os
from collections.abc import AsyncGenerator
from typing import Any, cast

import gradio as gr
from PIL import Image

from hugging import (
    Config,
    ConfigurationError,
    EncodingError,
    GenerationError,
    GenerationState,
    HuggingError,
    Orchestrator,
    RawImage,
    ValidationError,
    __version__,
    parse_data_url,
)
from hugging.logging_config import configure_logging, get_logger, get_verbosity_from_env

logger = get_logger(__name__)

# Default server port; overridable via HUGGING_UI_PORT
DEFAULT_UI_PORT = 7860
DEFAULT_UI_HOST = "127.0.0.1"

BASE_PAGE_TITLE = "Hugging – reconnect with your younger self"

GENERATE_LABEL = "Create My Image"
GENERATING_LABEL = "Generating..."
LOADING_MESSAGE = "Creating your special moment... This can take a moment, please be patient."
PLACEHOLDER_MESSAGE = (
    "Your special moment will appear here. "
    "Upload both photos and click 'Create My Image' to begin."
)
SUCCESS_MESSAGE = "Your Generated Image"

_UI_CONCURRENCY_ID = "hugging_ui"

# Message when an exception carries none; most specific class first
_ERROR_FALLBACKS: tuple[tuple[type[BaseException], str], ...] = (
    (ValidationError, "Please upload both photos."),
    (ConfigurationError, "The app is not configured correctly."),
    (EncodingError, "Could not read the photo."),
    (GenerationError, "The image service did not return a picture."),
    (HuggingError, "An error occurred."),
)

# status type -> (icon, text color, background color)
_STATUS_STYLES: dict[str, tuple[str, str, str]] = {
    "success": ("✅", "#10b981", "#d1fae5"),  # green
    "error": ("❌", "#ef4444", "#fee2e2"),  # red
    "info": ("⏳", "#3b82f6", "#dbeafe"),  # blue
}


def _exception_to_message(exc: BaseException) -> str:
    """Short user-facing text for an exception."""
    if exc.args:
        return str(exc.args[0])
    for cls, fallback in _ERROR_FALLBACKS:
        if isinstance(exc, cls):
            return fallback
    return "An unexpected error occurred."


def _format_status(message: str, status_type: str = "info") -> str:
    """
    Render the status banner as HTML.

    status_type is "success", "error" or "info" (a colored box with an icon),
    "placeholder" (plain centered grey text) or "idle" (nothing).
    """
    if status_type == "placeholder":
        return f'<p style="text-align: center; color: #6b7280; margin: 8px 0;">{message}</p>'
    if status_type not in _STATUS_STYLES:
        return ""
    icon, color, background = _STATUS_STYLES[status_type]
    box_style = (
        f"padding: 12px 16px; border-radius: 8px; background-color: {background}; "
        f"border-left: 4px solid {color}; margin: 8px 0;"
    )
    return (
        f'<div style="{box_style}">'
        f'<span style="font-size: 16px; margin-right: 8px;">{icon}</span>'
        f'<span style="color: {color}; font-weight: 500;">{message}</span>'
        "</div>"
    )


def _raw_image_from_value(value: Any) -> RawImage | None:
    """
    Turn a Gradio Image value into a RawImage.

    Gradio can return: path str, dict with 'path' or 'url' (data URL), or PIL Image.
    """
    if value is None:
        return None
    if isinstance(value, Image.Image):
        buf = io.BytesIO()
        value.save(buf, format="PNG")
        return RawImage(source=buf.getvalue(), media_type="image/png", name="upload.png")
    if isinstance(value, dict):
        value = value.get("path") or value.get("url")
        if not isinstance(value, str):
            return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
        if value.startswith("data:"):
            encoded = parse_data_url(value)
            return RawImage(source=encoded.decode(), media_type=encoded.media_type)
    return RawImage.from_path(value)


def _session(value: Orchestrator | None) -> Orchestrator:
    """Return the session's Orchestrator, creating it on first use."""
    return value if value is not None else Orchestrator()


def _session_failure(exc: ConfigurationError) -> tuple[str, Any, Any, None]:
    """Outputs for a session that could not be created (bad environment settings)."""
    logger.error("Cannot start a session: %s", exc)
    return (
        _format_status(_exception_to_message(exc), "error"),
        None,
        gr.update(interactive=False, value=GENERATE_LABEL),
        None,
    )


def _status_for(session: Orchestrator) -> str:
    """Status banner for the session's current state."""
    if session.is_pending:
        return _format_status(LOADING_MESSAGE, "info")
    if session.error:
        return _format_status(session.error, "error")
    if session.state is GenerationState.SUCCEEDED:
        return _format_status(SUCCESS_MESSAGE, "success")
    return _format_status(PLACEHOLDER_MESSAGE, "placeholder")


def _reference_to_display(reference: str | None) -> Image.Image | str | None:
    """Decode a data URL into a PIL image; remote URLs are handed to Gradio as-is."""
    if not reference:
        return None
    if not reference.startswith("data:"):
        return reference
    data = parse_data_url(reference).decode()
    image = Image.open(io.BytesIO(data))
    image.load()
    return image


def _button_update(session: Orchestrator) -> Any:
    label = GENERATING_LABEL if session.is_pending else GENERATE_LABEL
    return gr.update(interactive=session.can_generate, value=label)


def _select_photo(
    value: Any, session_value: Orchestrator | None, slot: str
) -> tuple[str, Any, Any, Orchestrator | None]:
    try:
        session = _session(session_value)
    except ConfigurationError as e:
        return _session_failure(e)
    try:
        raw = _raw_image_from_value(value)
    except HuggingError as e:
        logger.warning("Could not use selected %s photo: %s", slot, e)
        raw = None
    if slot == "child":
        session.select_child_photo(raw)
    else:
        session.select_adult_photo(raw)
    logger.debug("Selected %s photo: %s", slot, raw.name if raw is not None else None)
    return (
        _status_for(session),
        _reference_to_display(session.generated_image),
        _button_update(session),
        session,
    )


def _child_change_handler(
    value: Any, session_value: Orchestrator | None
) -> tuple[str, Any, Any, Orchestrator | None]:
    """Childhood photo selected or cleared."""
    return _select_photo(value, session_value, "child")


def _adult_change_handler(
    value: Any, session_value: Orchestrator | None
) -> tuple[str, Any, Any, Orchestrator | None]:
    """Recent photo selected or cleared."""
    return _select_photo(value, session_value, "adult")


async def _generate_click_handler(
    session_value: Orchestrator | None,
) -> AsyncGenerator[tuple[Any, ...], None]:
    """Generate button logic: run one attempt, yield (status, image, button, session) per state."""
    logger.debug("Generate clicked")
    try:
        session = _session(session_value)
    except ConfigurationError as e:
        yield _session_failure(e)
        return
    try:
        async for _state in session.stream():
            yield (
                _status_for(session),
                _reference_to_display(session.generated_image),
                _button_update(session),
                session,
            )
    except HuggingError as e:
        yield (
            _format_status(_exception_to_message(e), "error"),
            None,
            _button_update(session),
            session,
        )
    except Exception as e:
        logger.exception("Unexpected error while rendering the result")
        yield (
            _format_status(_exception_to_message(e), "error"),
            None,
            _button_update(session),
            session,
        )


_HEADER_HTML = """
<div style="text-align: center; margin: 16px 0 24px 0;">
    <h1 style="font-size: 2.75em; font-weight: 700; margin: 0; color: #111827; letter-spacing: -0.02em;">Hugging</h1>
    <p style="font-size: 1.1em; color: #4b5563; margin: 12px auto 0 auto; max-width: 40em;">
        Reconnect with your younger self. Upload two photos to create a unique, heartwarming image.
    </p>
</div>
"""


def _build_blocks() -> gr.Blocks:
    """Build the Gradio Blocks UI."""
    with gr.Blocks(title=BASE_PAGE_TITLE) as app:
        gr.HTML(_HEADER_HTML)
        session_state = gr.State(value=None)

        with gr.Row():
            with gr.Column():
                child_image = gr.Image(
                    label="Your Photo as a Child",
                    type="filepath",
                    sources=["upload", "clipboard"],
                    height=360,
                )
            with gr.Column():
                adult_image = gr.Image(
                    label="Your Recent Photo",
                    type="filepath",
                    sources=["upload", "clipboard"],
                    height=360,
                )

        with gr.Row():
            generate_btn = gr.Button(GENERATE_LABEL, variant="primary", interactive=False)

        status_html = gr.HTML(value=_format_status(PLACEHOLDER_MESSAGE, "placeholder"))
        out_image = gr.Image(
            label=SUCCESS_MESSAGE,
            type="pil",
            interactive=False,
            height="60vh",
            elem_id="hugging-output-image",
        )

        _outputs = [status_html, out_image, generate_btn, session_state]

        child_image.change(
            fn=_child_change_handler,
            inputs=[child_image, session_state],
            outputs=_outputs,
            concurrency_id=_UI_CONCURRENCY_ID,
        )
        adult_image.change(
            fn=_adult_change_handler,
            inputs=[adult_image, session_state],
            outputs=_outputs,
            concurrency_id=_UI_CONCURRENCY_ID,
        )
        generate_btn.click(
            fn=_generate_click_handler,
            inputs=[session_state],
            outputs=_outputs,
            concurrency_id=_UI_CONCURRENCY_ID,
        )

        gr.HTML(f"""
<div style="text-align: center; margin: 40px 0 20px 0; padding-top: 20px; border-top: 1px solid #e5e7eb;">
    <p style="font-size: 0.9em; color: #9ca3af; margin: 0;">Create your moment of connection. hugging v{__version__}</p>
</div>
""")

    return cast(gr.Blocks, app)


def _env_port() -> int:
    raw = os.getenv("HUGGING_UI_PORT", "").strip()
    if not raw:
        return DEFAULT_UI_PORT
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring HUGGING_UI_PORT=%r (not an integer)", raw)
        return DEFAULT_UI_PORT


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in ("1", "true", "yes")


def launch(
    server_name: str | None = None,
    server_port: int | None = None,
    share: bool = False,
) -> None:
    """
    Build the Gradio app and serve it.

    Args:
        server_name: Host to bind (default: HUGGING_UI_HOST or 127.0.0.1).
        server_port: Port (default: HUGGING_UI_PORT or 7860).
        share: If True, create a public share link (e.g. gradio.live).
    """
    host = server_name or os.getenv("HUGGING_UI_HOST") or DEFAULT_UI_HOST
    port = server_port if server_port is not None else _env_port()
    try:
        Config.from_env().validate()
    except ConfigurationError as e:
        logger.warning("Configuration problem: %s Generation will fail until it is fixed.", e)
    logger.info("hugging ui v%s starting on http://%s:%s", __version__, host, port)
    _build_blocks().launch(server_name=host, server_port=port, share=share, inbrowser=True)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hugging-ui",
        description="Serve the Hugging page: two photos in, one hug out.",
    )
    parser.add_argument(
        "--host",
        metavar="HOST",
        help=f"Interface to bind (HUGGING_UI_HOST, default {DEFAULT_UI_HOST}; 0.0.0.0 for LAN).",
    )
    parser.add_argument(
        "--port",
        type=int,
        metavar="PORT",
        help=f"Port to bind (HUGGING_UI_PORT, default {DEFAULT_UI_PORT}).",
    )
    parser.add_argument(
        "--share",
        action="store_true",
        default=None,
        help="Create a public gradio.live link (HUGGING_UI_SHARE=1 does the same).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        help="-v logs the prompt, -vv adds HTTP details (HUGGING_VERBOSITY).",
    )
    parser.add_argument("-q", "--quiet", action="store_true", help="Log warnings and errors only.")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Entry point for the hugging-ui console script."""
    args = _build_parser().parse_args(argv)
    verbose = args.verbose if args.verbose is not None else get_verbosity_from_env()
    configure_logging(verbose_level=verbose, quiet=args.quiet)
    share = args.share if args.share is not None else _env_flag("HUGGING_UI_SHARE")
    launch(server_name=args.host, server_port=args.port, share=share)
