from unittest.mock import patch

import pytest

from claim_ingest.config.settings import Settings
from claim_ingest.parsing.factory import ClaimParserFactory
from claim_ingest.parsing.parser import ClaimParser


class TestStrategySelection:
    def test_example_provider_builds_full_chain(self) -> None:
        settings = Settings(inference_provider="example")
        parser = ClaimParserFactory.create(settings)
        assert isinstance(parser, ClaimParser)
        assert parser.strategy_names == ["inference", "patterns"]

    def test_missing_api_key_drops_inference(self) -> None:
        settings = Settings(inference_provider="openai", inference_api_key="")
        parser = ClaimParserFactory.create(settings)
        assert parser.strategy_names == ["patterns"]

    def test_patterns_only(self) -> None:
        settings = Settings(parser_strategies=["patterns"])
        parser = ClaimParserFactory.create(settings)
        assert parser.strategy_names == ["patterns"]

    def test_strategy_order_follows_settings(self) -> None:
        settings = Settings(
            inference_provider="example", parser_strategies=["patterns", "inference"]
        )
        parser = ClaimParserFactory.create(settings)
        assert parser.strategy_names == ["patterns", "inference"]

    def test_empty_chain_is_allowed(self) -> None:
        parser = ClaimParserFactory.create(Settings(parser_strategies=[]))
        assert parser.strategy_names == []

    def test_unknown_strategy_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown parser strategy"):
            ClaimParserFactory.create(Settings(parser_strategies=["magic"]))


class TestOpenAIWiring:
    def test_uses_inference_settings(self) -> None:
        settings = Settings(
            inference_provider="openai",
            inference_api_key="openai-key",
            inference_timeout_seconds=42,
        )
        with patch("claim_ingest.parsing.factory.OpenAIClientAdapter") as mock_adapter:
            parser = ClaimParserFactory.create(settings)
        mock_adapter.assert_called_once_with(
            api_key="openai-key", timeout_seconds=42, base_url=None
        )
        assert parser.strategy_names == ["inference", "patterns"]

    def test_known_provider_default_base_url(self) -> None:
        settings = Settings(inference_provider="groq", inference_api_key="groq-key")
        with patch("claim_ingest.parsing.factory.OpenAIClientAdapter") as mock_adapter:
            ClaimParserFactory.create(settings)
        assert mock_adapter.call_args.kwargs["base_url"] == "https://api.groq.com/openai/v1"

    def test_configured_base_url_wins(self) -> None:
        settings = Settings(
            inference_provider="openrouter",
            inference_api_key="k",
            inference_base_url="https://proxy.test/v1",
        )
        with patch("claim_ingest.parsing.factory.OpenAIClientAdapter") as mock_adapter:
            ClaimParserFactory.create(settings)
        assert mock_adapter.call_args.kwargs["base_url"] == "https://proxy.test/v1"

    def test_ollama_needs_no_key(self) -> None:
        settings = Settings(inference_provider="ollama", inference_api_key="")
        with patch("claim_ingest.parsing.factory.OpenAIClientAdapter") as mock_adapter:
            parser = ClaimParserFactory.create(settings)
        assert mock_adapter.call_args.kwargs["api_key"] == "ollama"
        assert parser.strategy_names == ["inference", "patterns"]

    def test_openai_compatible_requires_base_url(self) -> None:
        settings = Settings(inference_provider="openai_compatible", inference_api_key="k")
        with pytest.raises(ValueError, match="inference_base_url is required"):
            ClaimParserFactory.create(settings)

    def test_unknown_provider_raises(self) -> None:
        settings = Settings(inference_provider="mystery", inference_api_key="k")
        with pytest.raises(ValueError, match="Unknown inference provider"):
            ClaimParserFactory.create(settings)
