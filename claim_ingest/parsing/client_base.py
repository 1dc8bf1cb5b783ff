from abc import ABC, abstractmethod


class BaseInferenceClient(ABC):
    """Contract for provider-specific inference clients."""

    @abstractmethod
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
        """Return provider response as plain text (expected to be JSON)."""
