from typing import ClassVar

from claim_ingest.config.settings import Settings
from claim_ingest.logging.logger import Log
from claim_ingest.parsing.base import ParseStrategy
from claim_ingest.parsing.example_client_adapter import ExampleClientAdapter
from claim_ingest.parsing.exceptions import StrategyUnavailableError
from claim_ingest.parsing.inference_strategy import InferenceStrategy
from claim_ingest.parsing.openai_client_adapter import OpenAIClientAdapter
from claim_ingest.parsing.parser import ClaimParser
from claim_ingest.parsing.pattern_strategy import PatternStrategy


class ClaimParserFactory:
    """Creates the configured claim parser and its strategy chain."""

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "openrouter": "https://openrouter.ai/api/v1",
        "groq": "https://api.groq.com/openai/v1",
        "together": "https://api.together.xyz/v1",
        "deepseek": "https://api.deepseek.com/v1",
        "ollama": "http://localhost:11434/v1",
    }

    KEYLESS_PROVIDERS: ClassVar[frozenset[str]] = frozenset({"example", "ollama"})

    STRATEGIES: ClassVar[tuple[str, ...]] = ("inference", "patterns")

    @classmethod
    def create(cls, settings: Settings) -> ClaimParser:
        """Create a parser whose strategies follow `settings.parser_strategies`."""
        strategies: list[ParseStrategy] = []
        for name in settings.parser_strategies:
            try:
                strategies.append(cls._create_strategy(name.strip().lower(), settings))
            except StrategyUnavailableError as exc:
                Log.warning(f"Skipping parser strategy '{name}': {exc}")
        Log.info(
            f"Claim parser strategies: {[s.name for s in strategies] or 'last-resort only'}"
        )
        return ClaimParser(
            strategies,
            cache_capacity=settings.parser_cache_capacity,
            cache_key_length=settings.parser_cache_key_length,
        )

    @classmethod
    def _create_strategy(cls, name: str, settings: Settings) -> ParseStrategy:
        if name == "patterns":
            return PatternStrategy()
        if name == "inference":
            return cls._create_inference_strategy(settings)
        raise ValueError(
            f"Unknown parser strategy '{name}'. Choose from: {list(cls.STRATEGIES)}"
        )

    @classmethod
    def _create_inference_strategy(cls, settings: Settings) -> InferenceStrategy:
        provider = settings.inference_provider.lower()
        if provider == "example":
            return InferenceStrategy(client=ExampleClientAdapter(), model="example")

        base_url = cls._resolve_base_url(provider, settings)
        api_key = settings.inference_api_key.strip()
        if not api_key and provider not in cls.KEYLESS_PROVIDERS:
            raise StrategyUnavailableError(
                f"no API key for inference provider '{provider}'"
            )

        client = OpenAIClientAdapter(
            api_key=api_key or provider,
            timeout_seconds=settings.inference_timeout_seconds,
            base_url=base_url,
        )
        return InferenceStrategy(
            client=client,
            model=settings.inference_model_name,
            temperature=settings.inference_temperature,
        )

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        configured = settings.inference_base_url.strip()
        if provider == "openai":
            return configured or None
        if provider == "openai_compatible":
            if not configured:
                raise ValueError(
                    "inference_base_url is required for "
                    "inference_provider=openai_compatible"
                )
            return configured
        default_base_url = cls.OPENAI_COMPATIBLE_BASE_URLS.get(provider)
        if default_base_url is not None:
            return configured or default_base_url
        supported = [
            "example",
            "openai",
            "openai_compatible",
            *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS),
        ]
        raise ValueError(
            f"Unknown inference provider '{provider}'. Choose from: {supported}"
        )
