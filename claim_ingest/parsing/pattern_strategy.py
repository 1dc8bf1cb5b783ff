"""Deterministic, offline claim extraction from keyword patterns."""

import re

from claim_ingest.parsing.base import ParseStrategy
from claim_ingest.parsing.heuristics import (
    ACTION_PATTERNS,
    first_matches,
    last_resort_object,
    last_resort_predicate,
    last_resort_subject,
    word_count,
)
from claim_ingest.parsing.models import Entity, StructuredClaim

_BASE_CONFIDENCE = 0.3
_CATEGORY_BONUS = 0.2
_MAX_CONFIDENCE = 0.8

# Ordered: earlier patterns win the subject slot.
ENTITY_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\b(Apple|Tesla|Microsoft|Google|Amazon|Facebook|Meta|OpenAI|NVIDIA|AMD|Samsung|Sony)\b", re.I), "ORG"),
    (re.compile(r"\b(India|China|USA|America|Europe|Asia|Africa|Australia|Canada|Japan|UK|France|Germany|Brazil|Russia)\b", re.I), "LOC"),
    (re.compile(r"\b(WHO|CDC|FDA)\b"), "ORG"),
    (re.compile(r"\b(COVID|coronavirus|pandemic|virus|disease|vaccine|health|medical)\b", re.I), "MISC"),
    (re.compile(r"\b([A-Z][a-zA-Z]{2,})\b"), "MISC"),
)

CONTEXT_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\b(COVID|coronavirus|pandemic|epidemic|virus|disease|infection|outbreak|vaccine|treatment)\b", re.I),
    re.compile(r"\b(AI|artificial intelligence|machine learning|technology|software|hardware|chip|processor)\b", re.I),
    re.compile(r"\b(economy|market|business|finance|trade|employment|growth|recession)\b", re.I),
    re.compile(r"\b(climate|environment|weather|temperature|pollution|carbon|energy)\b", re.I),
)

CLAIM_TYPE_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("health", re.compile(r"\b(COVID|coronavirus|pandemic|virus|disease|health|medical)\b", re.I)),
    ("technology", re.compile(r"\b(AI|technology|software|hardware|chip|processor)\b", re.I)),
    ("social", re.compile(r"\b(economy|market|politics|government|society)\b", re.I)),
    ("environmental", re.compile(r"\b(climate|environment|weather|pollution|carbon)\b", re.I)),
)


class PatternStrategy(ParseStrategy):
    """Matches text against ordered entity, action and context pattern lists.

    The first match in each category fills subject, predicate and object.
    Confidence starts at 0.3 and gains 0.2 per non-empty category, capped at 0.8.
    """

    name = "patterns"

    async def attempt(self, text: str) -> StructuredClaim:
        entities = self.extract_entities(text)
        actions = tuple(first_matches(ACTION_PATTERNS, text))
        contexts = tuple(first_matches(CONTEXT_PATTERNS, text))

        return StructuredClaim(
            subject=entities[0].text if entities else last_resort_subject(text),
            predicate=actions[0] if actions else last_resort_predicate(text),
            object=contexts[0] if contexts else last_resort_object(text),
            claim_type=self.classify(text, entities, actions),
            confidence=self.confidence(entities, actions, contexts),
            method=self.name,
            entities=entities,
            actions=actions,
            contexts=contexts,
            word_count=word_count(text),
        )

    @staticmethod
    def extract_entities(text: str) -> tuple[Entity, ...]:
        entities: list[Entity] = []
        seen: set[str] = set()
        for pattern, label in ENTITY_PATTERNS:
            match = pattern.search(text)
            if match is None or match.group(1).lower() in seen:
                continue
            seen.add(match.group(1).lower())
            entities.append(Entity(text=match.group(1), label=label))
        return tuple(entities)

    @staticmethod
    def classify(
        text: str,
        entities: tuple[Entity, ...],
        actions: tuple[str, ...],
    ) -> str:
        for claim_type, pattern in CLAIM_TYPE_PATTERNS:
            if pattern.search(text):
                return claim_type
        if entities and actions:
            return "general"
        return "unstructured"

    @staticmethod
    def confidence(*categories: tuple[object, ...]) -> float:
        score = _BASE_CONFIDENCE + _CATEGORY_BONUS * sum(1 for c in categories if c)
        return round(min(score, _MAX_CONFIDENCE), 2)
