"""Validates decoded inference responses before they feed a claim."""

import json
from typing import Any

from claim_ingest.parsing.exceptions import InferenceValidationError
from claim_ingest.parsing.models import Entity

_MIN_ENTITY_SCORE = 0.5
_MAX_ENTITIES = 50
_LABEL_ALIASES = {
    "PERSON": "PER",
    "ORGANIZATION": "ORG",
    "LOCATION": "LOC",
}
_VALID_LABELS = frozenset({"PER", "ORG", "LOC", "MISC"})


def parse_json_object(raw: str) -> dict[str, Any]:
    """Decode a model response, tolerating a surrounding markdown code fence."""
    cleaned = raw.strip()
    if cleaned.startswith("```"):
        lines = cleaned.splitlines()
        if lines and lines[0].startswith("```"):
            lines = lines[1:]
        if lines and lines[-1].strip() == "```":
            lines = lines[:-1]
        cleaned = "\n".join(lines)

    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise InferenceValidationError(f"Invalid JSON response: {exc}") from exc

    if not isinstance(parsed, dict):
        raise InferenceValidationError("JSON response must be an object")
    return parsed


def validate_entities(data: dict[str, Any]) -> list[Entity]:
    """Build entities, dropping low-confidence and duplicate (case-insensitive) ones."""
    raw = data.get("entities")
    if not isinstance(raw, list):
        raise InferenceValidationError("'entities' must be a list")
    if len(raw) > _MAX_ENTITIES:
        raise InferenceValidationError(
            f"Too many entities: {len(raw)} (max {_MAX_ENTITIES})"
        )
    entities: list[Entity] = []
    seen: set[str] = set()
    for i, item in enumerate(raw):
        entity = _build_entity(item, i)
        if entity.confidence <= _MIN_ENTITY_SCORE or entity.text.lower() in seen:
            continue
        seen.add(entity.text.lower())
        entities.append(entity)
    return entities


def validate_scored_label(data: dict[str, Any], kind: str) -> tuple[str, float]:
    """Validate a {"label": str, "score": number} response."""
    label = data.get("label")
    if not label or not isinstance(label, str):
        raise InferenceValidationError(f"{kind}: 'label' must be a non-empty string")
    return label.strip().lower(), _score(data.get("score"), f"{kind}: 'score'")


def _build_entity(raw: Any, index: int) -> Entity:
    if not isinstance(raw, dict):
        raise InferenceValidationError(f"Entity at index {index} must be an object")
    text = raw.get("text")
    if not text or not isinstance(text, str):
        raise InferenceValidationError(
            f"Entity at index {index}: 'text' must be a non-empty string"
        )
    label = raw.get("label")
    if not isinstance(label, str):
        raise InferenceValidationError(
            f"Entity at index {index}: 'label' must be a string"
        )
    label = _LABEL_ALIASES.get(label.upper(), label.upper())
    if label not in _VALID_LABELS:
        label = "MISC"
    score = _score(raw.get("score"), f"Entity at index {index}: 'score'")
    return Entity(text=text.replace("##", "").strip(), label=label, confidence=score)


def _score(raw: Any, field: str) -> float:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise InferenceValidationError(f"{field} must be a number")
    if not 0.0 <= raw <= 1.0:
        raise InferenceValidationError(f"{field} must be between 0 and 1, got {raw}")
    return float(raw)
