import asyncio
import signal

import httpx

from claim_ingest.config.settings import Settings
from claim_ingest.logging.logger import Log
from claim_ingest.worker.orchestrator import build_orchestrator


async def run(settings: Settings) -> None:
    """Start ingestion and keep it running until SIGINT/SIGTERM."""
    stop_requested = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop_requested.set)

    async with httpx.AsyncClient() as client:
        orchestrator = build_orchestrator(settings, client)
        await orchestrator.start()
        await stop_requested.wait()
        Log.info("Shutting down gracefully, waiting for in-flight ingestion")
        await orchestrator.stop()
        await orchestrator.wait_idle()


def main() -> None:
    """Entry point: load settings -> configure logging -> run the orchestrator."""
    settings = Settings()
    Log.configure(settings.log_level)
    if not settings.ledger_account_id:
        Log.error("LEDGER_ACCOUNT_ID is not set, nothing to poll")
        raise SystemExit(1)

    try:
        asyncio.run(run(settings))
    except KeyboardInterrupt:
        Log.info("Worker interrupted")


if __name__ == "__main__":
    main()
