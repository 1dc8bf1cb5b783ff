from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    ledger_mirror_url: str = "https://testnet.mirrornode.hedera.com"
    ledger_account_id: str = ""
    ledger_poll_interval_seconds: float = 10.0
    ledger_page_size: int = 10
    ledger_timeout_seconds: float = 10.0

    content_mirrors: list[str] = [
        "https://ipfs.filebase.io/ipfs/",
        "https://ipfs.io/ipfs/",
        "https://gateway.pinata.cloud/ipfs/",
        "https://dweb.link/ipfs/",
        "https://cloudflare-ipfs.com/ipfs/",
    ]
    content_timeout_seconds: float = 20.0
    content_propagation_grace_seconds: float = 30.0
    content_max_rounds: int = 5
    content_base_delay_seconds: float = 5.0
    content_max_delay_seconds: float = 60.0
    content_backoff_factor: float = 1.5
    content_cache_capacity: int = 100

    parser_strategies: list[str] = ["inference", "patterns"]
    parser_cache_capacity: int = 100
    parser_cache_key_length: int = 100

    inference_provider: str = "openai"
    inference_api_key: str = ""
    inference_model_name: str = "gpt-4o-mini"
    inference_base_url: str = ""
    inference_timeout_seconds: int = 30
    inference_temperature: float = 0.0

    registry_capacity: int = 1000
    ingestion_timeout_seconds: float | None = None
