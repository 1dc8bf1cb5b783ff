import json
from dataclasses import dataclass
from pathlib import Path

from claim_ingest.parsing.exceptions import ClaimParserError

_DEFAULT_PROMPT_DIR = Path(__file__).parent / "prompts"

TASKS = ("entities", "classification", "sentiment")


@dataclass(frozen=True)
class InferenceTask:
    """Prompt template and response schema for one inference call."""

    name: str
    template: str
    json_schema: dict[str, object]


def load_prompt_template(name: str, prompt_dir: Path | None = None) -> str:
    """Load the `{name}_prompt.txt` template.

    Raises:
        ClaimParserError: if the file cannot be read.
    """
    path = (prompt_dir or _DEFAULT_PROMPT_DIR) / f"{name}_prompt.txt"
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ClaimParserError(f"Failed to load prompt template: {exc}") from exc


def load_json_schema(name: str, prompt_dir: Path | None = None) -> dict[str, object]:
    """Load and decode the `{name}_schema.json` response schema.

    Raises:
        ClaimParserError: if the file cannot be read or is not a JSON object.
    """
    path = (prompt_dir or _DEFAULT_PROMPT_DIR) / f"{name}_schema.json"
    try:
        schema = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ClaimParserError(f"Failed to load JSON schema: {exc}") from exc
    if not isinstance(schema, dict):
        raise ClaimParserError(f"JSON schema {path.name} must be an object")
    return schema


def load_tasks(prompt_dir: Path | None = None) -> dict[str, InferenceTask]:
    """Load every bundled inference task, keyed by task name."""
    return {
        name: InferenceTask(
            name=name,
            template=load_prompt_template(name, prompt_dir),
            json_schema=load_json_schema(name, prompt_dir),
        )
        for name in TASKS
    }
