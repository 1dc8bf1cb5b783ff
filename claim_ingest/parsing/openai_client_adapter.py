import httpx
import openai

from claim_ingest.parsing.client_base import BaseInferenceClient
from claim_ingest.parsing.exceptions import InferenceError, InferenceNetworkError


class OpenAIClientAdapter(BaseInferenceClient):
    """Inference client built on the OpenAI-compatible async chat API."""

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int,
        base_url: str | None = None,
    ) -> None:
        self._client = openai.AsyncOpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
            max_retries=0,
        )

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
        try:
            response = await self._client.chat.completions.create(
                model=model,
                temperature=temperature,
                response_format={
                    "type": "json_schema",
                    "json_schema": {
                        "name": schema_name,
                        "strict": True,
                        "schema": json_schema,
                    },
                },
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
            )
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise InferenceNetworkError(
                f"Inference provider network error: {exc}"
            ) from exc
        except openai.APIError as exc:
            raise InferenceNetworkError(
                f"Inference provider API error: {exc}"
            ) from exc

        if not response.choices:
            raise InferenceError("Inference provider returned no choices")
        content = response.choices[0].message.content
        if content is None:
            raise InferenceError("Inference provider returned empty response")
        return content
