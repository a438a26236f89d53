"""Unit tests for prompts_loader (bundled prompts.yaml and its schema)."""

from collections.abc import Iterator
from unittest.mock import patch

import pytest
import yaml

import hugging.core.prompts_loader as prompts_loader
from hugging.core.prompts_loader import PromptsSchema, get_hug_prompt, get_prompt, load_prompts
from hugging.utils.exceptions import ConfigurationError


@pytest.fixture
def fresh_cache() -> Iterator[None]:
    """Empty the prompts cache for the test and put the previous value back afterwards."""
    saved = prompts_loader._prompts
    prompts_loader._prompts = None
    yield
    prompts_loader._prompts = saved


def _load_text(text: str) -> PromptsSchema:
    with patch("importlib.resources.files") as mock_files:
        mock_files.return_value.joinpath.return_value.read_text.return_value = text
        return load_prompts()


@pytest.mark.unit
class TestBundledPrompts:
    def test_hug_prompt_names_both_photos(self):
        prompt = get_hug_prompt()
        assert "first image" in prompt
        assert "second image" in prompt
        assert "hug" in prompt.lower()

    def test_hug_prompt_is_stripped(self):
        prompt = get_hug_prompt()
        assert prompt == prompt.strip()

    def test_get_prompt_matches_getter(self):
        assert get_prompt("hug", "template") == get_hug_prompt()

    @pytest.mark.parametrize(
        ("key", "subkey"),
        [("nonexistent_key", None), ("hug", "nonexistent_subkey"), ("hug", None)],
    )
    def test_get_prompt_missing_or_non_string(self, key, subkey):
        assert get_prompt(key, subkey) is None


@pytest.mark.unit
@pytest.mark.usefixtures("fresh_cache")
class TestLoadPrompts:
    """Parsing and schema validation of prompts.yaml."""

    def test_valid_file(self):
        prompts = _load_text(yaml.dump({"hug": {"template": "  Hug them.  "}}))
        assert prompts.hug.template == "Hug them."

    def test_extra_sections_are_kept(self):
        _load_text(yaml.dump({"hug": {"template": "Hug."}, "future": {"x": "y"}}))
        assert get_prompt("future", "x") == "y"
        assert get_hug_prompt() == "Hug."

    def test_malformed_yaml(self):
        with pytest.raises(ConfigurationError) as exc_info:
            _load_text("hug:\n  template: |\n    foo\n  bar:\nbad indentation: [")
        assert "Failed to parse prompts.yaml" in str(exc_info.value)

    def test_empty_file(self):
        with pytest.raises(ConfigurationError) as exc_info:
            _load_text("")
        assert "empty" in str(exc_info.value)

    def test_not_a_mapping(self):
        with pytest.raises(ConfigurationError) as exc_info:
            _load_text("- just\n- a list\n")
        assert "mapping" in str(exc_info.value)

    def test_missing_hug_section(self):
        with pytest.raises(ConfigurationError) as exc_info:
            _load_text(yaml.dump({"some_other_key": "value"}))
        msg = str(exc_info.value)
        assert "Invalid prompts.yaml structure" in msg
        assert "hug" in msg

    def test_blank_template(self):
        with pytest.raises(ConfigurationError) as exc_info:
            _load_text(yaml.dump({"hug": {"template": "   "}}))
        assert "hug.template" in str(exc_info.value)

    def test_file_not_found(self):
        with patch("importlib.resources.files") as mock_files:
            mock_files.return_value.joinpath.return_value.read_text.side_effect = (
                FileNotFoundError
            )
            with pytest.raises(ConfigurationError) as exc_info:
                load_prompts()
        assert "prompts.yaml not found" in str(exc_info.value)

    def test_result_is_cached(self):
        first = load_prompts()
        with patch("importlib.resources.files") as mock_files:
            assert load_prompts() is first
        mock_files.assert_not_called()

    def test_failed_load_is_not_cached(self):
        with pytest.raises(ConfigurationError):
            _load_text("")
        assert prompts_loader._prompts is None
