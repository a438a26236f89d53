"""
Logging configuration for hugging.

Logging is configured lazily: library users who never call set_verbosity or
configure_logging get no output unless they configure logging themselves.

Verbosity levels:
- 0 (default): INFO, state changes and timings only
- 1: INFO + the instructional prompt sent with the photos
- 2: DEBUG + prompt text, HTTP requests and responses (never API keys)

The UI launcher reads HUGGING_VERBOSITY (0/1/2); its -v/-q flags override it.
"""

import logging
import os

LOG_FORMAT = "%(levelname)s [%(name)s] %(message)s"
ROOT_LOGGER_NAME = "hugging"

# verbosity -> (root level, log prompt text)
_VERBOSITY_LEVELS: dict[int, tuple[int, bool]] = {
    0: (logging.INFO, False),
    1: (logging.INFO, True),
    2: (logging.DEBUG, True),
}

_log_prompts: bool = False
_configured: bool = False


def _root_logger() -> logging.Logger:
    """Return the hugging root logger, attaching a stderr handler on first use."""
    global _configured
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not _configured:
        if not root.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter(LOG_FORMAT))
            root.addHandler(handler)
        _configured = True
    return root


def set_verbosity(level: int) -> None:
    """Set logging verbosity; values below 0 act as 0 and above 2 as 2."""
    global _log_prompts
    clamped = min(max(level, 0), 2)
    log_level, _log_prompts = _VERBOSITY_LEVELS[clamped]
    _root_logger().setLevel(log_level)


def log_prompts() -> bool:
    """Return True if prompt text should be logged at INFO (verbosity 1 or 2)."""
    return _log_prompts


def configure_logging(verbose_level: int = 0, quiet: bool = False) -> None:
    """
    Configure logging from the UI launcher or library.

    quiet wins over verbose_level and limits output to warnings and errors.
    """
    global _log_prompts
    if quiet:
        _root_logger().setLevel(logging.WARNING)
        _log_prompts = False
        return
    set_verbosity(verbose_level)


def get_verbosity_from_env() -> int:
    """Read HUGGING_VERBOSITY (0, 1 or 2); anything else yields 0."""
    raw = os.environ.get("HUGGING_VERBOSITY", "").strip()
    return int(raw) if raw in ("1", "2") else 0


def get_logger(name: str) -> logging.Logger:
    """Return a child logger under hugging (e.g. hugging.core.encoder)."""
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


__all__ = [
    "configure_logging",
    "get_logger",
    "get_verbosity_from_env",
    "log_prompts",
    "set_verbosity",
]
