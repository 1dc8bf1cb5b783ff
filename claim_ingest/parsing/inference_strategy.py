"""AI-backed claim extraction.

Entity extraction, zero-shot classification and sentiment run as three
concurrent completions; their answers are combined into one claim.
"""

import asyncio
import re
from pathlib import Path
from typing import Any

from claim_ingest.logging.logger import Log
from claim_ingest.parsing.base import ParseStrategy
from claim_ingest.parsing.client_base import BaseInferenceClient
from claim_ingest.parsing.heuristics import (
    last_resort_object,
    last_resort_predicate,
    last_resort_subject,
    word_count,
)
from claim_ingest.parsing.models import Entity, StructuredClaim
from claim_ingest.parsing.prompt_loader import InferenceTask, load_tasks
from claim_ingest.parsing.validator import (
    parse_json_object,
    validate_entities,
    validate_scored_label,
)

CANDIDATE_LABELS: tuple[str, ...] = (
    "health", "medical", "pandemic",
    "technology", "artificial intelligence", "software",
    "business", "corporate announcement", "financial",
    "social", "political", "economic",
    "environmental", "climate", "energy",
    "quantified", "statistical", "research",
    "general", "news", "statement",
)

_LABEL_FAMILIES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("health", ("health", "medical", "pandemic")),
    ("technology", ("technology", "artificial", "software")),
    ("business", ("business", "corporate", "financial")),
    ("social", ("social", "political", "economic")),
    ("environmental", ("environmental", "climate", "energy")),
    ("quantified", ("quantified", "statistical", "research")),
)

_SUBJECT_PRIORITY = ("PER", "ORG", "LOC")

_TYPE_OBJECT_PATTERNS = {
    "health": re.compile(r"\b(covid|coronavirus|pandemic|virus|disease|vaccine|treatment|infection)\b", re.I),
    "technology": re.compile(r"\b(AI|software|hardware|chip|processor|algorithm|system)\b", re.I),
}

_DECISIVE_SCORE = 0.7
_MAX_CONFIDENCE = 0.95

_SYSTEM_PROMPT = (
    "You analyse short factual claims. Answer only with JSON matching the "
    "requested schema."
)


def map_claim_type(label: str, score: float) -> str:
    """Collapse a zero-shot label into one of the claim types."""
    for claim_type, keywords in _LABEL_FAMILIES:
        if any(keyword in label for keyword in keywords):
            return claim_type
    return "general" if score > _DECISIVE_SCORE else "unstructured"


class InferenceStrategy(ParseStrategy):
    """Primary strategy backed by an inference provider."""

    name = "inference"

    def __init__(
        self,
        *,
        client: BaseInferenceClient,
        model: str,
        temperature: float = 0.0,
        prompt_dir: Path | None = None,
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = max(0.0, min(0.2, temperature))
        self._tasks = load_tasks(prompt_dir)

    async def attempt(self, text: str) -> StructuredClaim | None:
        if not text.strip():
            return None

        # The first failing call cancels the other two.
        try:
            async with asyncio.TaskGroup() as group:
                entity_task = group.create_task(self._run("entities", text))
                class_task = group.create_task(
                    self._run("classification", text, labels=", ".join(CANDIDATE_LABELS))
                )
                sentiment_task = group.create_task(self._run("sentiment", text))
        except ExceptionGroup as errors:
            raise errors.exceptions[0]

        entities = validate_entities(entity_task.result())
        label, label_score = validate_scored_label(class_task.result(), "classification")
        _, sentiment = validate_scored_label(sentiment_task.result(), "sentiment")
        claim_type = map_claim_type(label, label_score)
        Log.debug(
            "Inference results",
            entities=len(entities),
            label=label,
            label_score=label_score,
            sentiment=sentiment,
        )

        subject = self.pick_subject(text, entities)
        return StructuredClaim(
            subject=subject,
            predicate=last_resort_predicate(text),
            object=self.pick_object(text, entities, claim_type, subject),
            claim_type=claim_type,
            confidence=self.confidence(entities, claim_type, sentiment),
            method=self.name,
            entities=tuple(entities),
            sentiment=sentiment,
            word_count=word_count(text),
        )

    async def _run(self, task_name: str, text: str, **params: str) -> dict[str, Any]:
        task: InferenceTask = self._tasks[task_name]
        raw = await self._client.create_chat_completion(
            model=self._model,
            temperature=self._temperature,
            system_prompt=_SYSTEM_PROMPT,
            user_prompt=task.template.format(text=text, **params),
            schema_name=task.name,
            json_schema=task.json_schema,
        )
        return parse_json_object(raw)

    @staticmethod
    def pick_subject(text: str, entities: list[Entity]) -> str:
        """Person beats organization beats location, then first entity."""
        for label in _SUBJECT_PRIORITY:
            for entity in entities:
                if entity.label == label:
                    return entity.text
        if entities:
            return entities[0].text
        return last_resort_subject(text)

    @staticmethod
    def pick_object(
        text: str,
        entities: list[Entity],
        claim_type: str,
        subject: str,
    ) -> str:
        pattern = _TYPE_OBJECT_PATTERNS.get(claim_type)
        if pattern is not None:
            match = pattern.search(text)
            if match:
                return match.group(1)
        for entity in entities:
            if entity.text != subject:
                return entity.text
        return last_resort_object(text)

    @staticmethod
    def confidence(entities: list[Entity], claim_type: str, sentiment: float) -> float:
        score = 0.5
        if entities:
            score += 0.2
        if len(entities) > 2:
            score += 0.1
        if claim_type != "unstructured":
            score += 0.15
        if sentiment > 0.7 or sentiment < 0.3:
            score += 0.05
        return round(min(score, _MAX_CONFIDENCE), 2)
