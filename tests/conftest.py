"""
Shared pytest setup.

Slow tests (live OpenRouter and Gemini calls) are skipped unless --run-slow is
given. The clean_env fixture hides every variable the library and the UI
launcher read, so results do not depend on the developer's shell or .env.
"""

import pytest

HUGGING_ENV_VARS = (
    "HUGGING_IMAGE_PROVIDER",
    "HUGGING_IMAGE_MODEL",
    "HUGGING_PROMPT",
    "HUGGING_GENERATION_TIMEOUT",
    "HUGGING_DEBUG_API",
    "HUGGING_VERBOSITY",
    "HUGGING_UI_HOST",
    "HUGGING_UI_PORT",
    "HUGGING_UI_SHARE",
    "OPENROUTER_API_KEY",
    "OPENROUTER_BASE_URL",
    "GEMINI_API_KEY",
    "GOOGLE_API_KEY",
    "GEMINI_BASE_URL",
)


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="Include slow tests (live OpenRouter and Gemini calls).",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="slow test; pass --run-slow to include it")
    for item in items:
        if item.get_closest_marker("slow") is not None:
            item.add_marker(skip_slow)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Unset all hugging-related environment variables; returns monkeypatch for setenv."""
    for name in HUGGING_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
