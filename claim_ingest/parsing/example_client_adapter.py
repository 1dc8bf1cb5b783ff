"""Example inference client adapter.

Use this module as a reference when implementing new provider adapters.
Implement BaseInferenceClient and register the provider in ClaimParserFactory.
"""

import json
from typing import ClassVar

from claim_ingest.parsing.client_base import BaseInferenceClient


class ExampleClientAdapter(BaseInferenceClient):
    """Example adapter that returns fixed, valid responses for each schema.

    No network calls. Useful for local development and tests.
    """

    DEFAULT_RESPONSES: ClassVar[dict[str, dict[str, object]]] = {
        "entities": {"entities": []},
        "classification": {"label": "general", "score": 0.5},
        "sentiment": {"label": "neutral", "score": 0.5},
    }

    async def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
        schema_name: str,
        json_schema: dict[str, object],
    ) -> str:
        _ = model, temperature, system_prompt, user_prompt, json_schema
        return json.dumps(self.DEFAULT_RESPONSES.get(schema_name, {}))
