"""
Integration tests for the live generation path.

These tests call the real image generation APIs. They are slow and cost money.
Run rarely and only when you need to verify the live API path.

To run:
  HUGGING_RUN_INTEGRATION_TESTS=1 OPENROUTER_API_KEY=sk-... pytest -m integration --run-slow
  HUGGING_RUN_INTEGRATION_TESTS=1 GEMINI_API_KEY=... pytest -m integration --run-slow
"""

import asyncio
import os
from datetime import datetime
from pathlib import Path

import pytest
from PIL import Image, ImageDraw

from hugging.core.config import Config
from hugging.core.encoder import RawImage, parse_data_url
from hugging.core.orchestrator import GenerationState, Orchestrator

# Project root (tests/integration -> tests -> project root)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_TMP_DIR = _PROJECT_ROOT / "tmp"


def _integration_enabled() -> bool:
    return os.getenv("HUGGING_RUN_INTEGRATION_TESTS", "").strip() == "1"


def _portrait(path: Path, head: int, color: tuple[int, int, int]) -> RawImage:
    """Draw a simple figure (head and body) so the service gets two distinct people."""
    img = Image.new("RGB", (256, 256), color=(235, 235, 235))
    draw = ImageDraw.Draw(img)
    draw.ellipse((128 - head, 40, 128 + head, 40 + 2 * head), fill=(224, 180, 150))
    draw.rectangle((128 - head, 40 + 2 * head, 128 + head, 250), fill=color)
    img.save(path, "PNG")
    return RawImage.from_path(path)


def _save_output(reference: str, provider: str) -> None:
    """Save the generated image to tmp/ with a timestamped filename."""
    if not reference.startswith("data:"):
        return
    encoded = parse_data_url(reference)
    ext = encoded.media_type.split("/")[-1].replace("jpeg", "jpg")
    _TMP_DIR.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    (_TMP_DIR / f"{stamp}_{provider}.{ext}").write_bytes(encoded.decode())


def _run(config: Config, tmp_path: Path) -> Orchestrator:
    orch = Orchestrator(config=config)
    orch.select_child_photo(_portrait(tmp_path / "child.png", 30, (220, 60, 60)))
    orch.select_adult_photo(_portrait(tmp_path / "adult.png", 40, (60, 60, 220)))
    asyncio.run(orch.generate())
    return orch


@pytest.mark.integration
@pytest.mark.slow
@pytest.mark.expensive
class TestLiveGeneration:
    """Real generation calls (require API keys and opt-in env)."""

    @pytest.fixture(autouse=True)
    def _require_opt_in(self) -> None:
        if not _integration_enabled():
            pytest.skip(
                "Integration tests are disabled. "
                "Set HUGGING_RUN_INTEGRATION_TESTS=1 to run (slow, costs money)."
            )

    def test_openrouter_generates_image(self, tmp_path: Path) -> None:
        config = Config.from_env()
        if not config.openrouter_api_key.startswith("sk-"):
            pytest.skip("OPENROUTER_API_KEY not set or invalid.")
        config.image_provider = "openrouter"

        orch = _run(config, tmp_path)

        assert orch.state is GenerationState.SUCCEEDED, orch.last_error
        assert orch.generated_image
        _save_output(orch.generated_image, "openrouter")

    def test_gemini_generates_image(self, tmp_path: Path) -> None:
        config = Config.from_env()
        if not config.gemini_api_key:
            pytest.skip("GEMINI_API_KEY not set.")
        config.image_provider = "gemini"

        orch = _run(config, tmp_path)

        assert orch.state is GenerationState.SUCCEEDED, orch.last_error
        assert orch.generated_image.startswith("data:image/")
        _save_output(orch.generated_image, "gemini")
