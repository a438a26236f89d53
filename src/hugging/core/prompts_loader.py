"""
Instruction prompts bundled with the package.

src/hugging/prompts.yaml is read once per process and checked against
PromptsSchema. get_hug_prompt() returns the instruction sent with the two
photos; get_prompt() reaches any other section kept in the file.
"""

import importlib.resources

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from hugging.utils.exceptions import ConfigurationError

PROMPTS_FILE = "prompts.yaml"


class HugPrompt(BaseModel):
    """The instruction that accompanies the childhood and recent photos."""

    template: str

    @field_validator("template")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value.strip()


class PromptsSchema(BaseModel):
    """Top level of prompts.yaml; sections other than hug are kept as extras."""

    model_config = ConfigDict(extra="allow")

    hug: HugPrompt


_prompts: PromptsSchema | None = None


def _read_prompts_file() -> str:
    resource = importlib.resources.files("hugging").joinpath(PROMPTS_FILE)
    try:
        return resource.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ConfigurationError(
            f"{PROMPTS_FILE} not found. It ships with the package and is required."
        ) from e


def _describe(exc: ValidationError) -> str:
    return "\n".join(
        f"  - {'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
    )


def load_prompts() -> PromptsSchema:
    """
    Parse and validate prompts.yaml; the result is cached for the process.

    Raises:
        ConfigurationError: If the file is missing, is not valid YAML, is empty,
            or lacks a non-blank hug.template
    """
    global _prompts
    if _prompts is not None:
        return _prompts

    raw = _read_prompts_file()
    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Failed to parse {PROMPTS_FILE}: {e}") from e
    if not data:
        raise ConfigurationError(f"{PROMPTS_FILE} is empty; a 'hug' section is required.")
    if not isinstance(data, dict):
        raise ConfigurationError(f"{PROMPTS_FILE} must contain a mapping of prompt sections.")

    try:
        _prompts = PromptsSchema.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid {PROMPTS_FILE} structure:\n{_describe(e)}\n"
            "Expected a 'hug' section with a 'template' key."
        ) from e
    return _prompts


def get_prompt(key: str, subkey: str | None = None) -> str | None:
    """
    Look up a string in prompts.yaml, e.g. get_prompt("hug", "template").

    Returns None when the key is absent or does not hold a string.
    """
    value = load_prompts().model_dump().get(key)
    if subkey is not None:
        value = value.get(subkey) if isinstance(value, dict) else None
    return value if isinstance(value, str) else None


def get_hug_prompt() -> str:
    return load_prompts().hug.template
