import pytest

from claim_ingest.config.settings import Settings
from tests.helpers import ACCOUNT_ID, LEDGER_URL, MIRRORS


@pytest.fixture()
def fast_settings() -> Settings:
    """Settings with no waits, three mirrors and pattern-only parsing."""
    return Settings(
        ledger_mirror_url=LEDGER_URL,
        ledger_account_id=ACCOUNT_ID,
        ledger_poll_interval_seconds=0.01,
        content_mirrors=MIRRORS,
        content_propagation_grace_seconds=0.0,
        content_base_delay_seconds=0.0,
        content_max_delay_seconds=0.0,
        content_max_rounds=5,
        parser_strategies=["patterns"],
        inference_api_key="",
    )
