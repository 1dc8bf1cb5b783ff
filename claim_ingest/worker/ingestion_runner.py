import asyncio

from claim_ingest.logging.logger import Log
from claim_ingest.processor.processor import Processor
from claim_ingest.registry.claim_registry import ClaimRegistry
from claim_ingest.registry.exceptions import RegistryError
from claim_ingest.registry.models import ClaimRecord


class IngestionRunner:
    """Run one address through the processor and record failures."""

    def __init__(
        self,
        processor: Processor,
        registry: ClaimRegistry,
        timeout_seconds: float | None = None,
    ) -> None:
        self._processor = processor
        self._registry = registry
        self._timeout_seconds = timeout_seconds

    async def run(self, address: str, *, immediate: bool = False) -> ClaimRecord | None:
        """Process `address`; never raises for pipeline errors.

        Returns the terminal record, or None if the record vanished meanwhile.
        """
        try:
            if self._timeout_seconds is None:
                record = await self._processor.process(address, immediate=immediate)
            else:
                record = await asyncio.wait_for(
                    self._processor.process(address, immediate=immediate),
                    timeout=self._timeout_seconds,
                )
        except TimeoutError:
            return self._handle_failure(
                address,
                f"Ingestion of {address} exceeded {self._timeout_seconds}s deadline",
            )
        except Exception as exc:
            return self._handle_failure(address, str(exc) or type(exc).__name__)
        Log.info("Ingestion completed", address=address)
        return record

    def _handle_failure(self, address: str, message: str) -> ClaimRecord | None:
        try:
            return self._registry.fail(address, message)
        except RegistryError as exc:
            Log.warning(
                "Could not record ingestion failure",
                address=address,
                error=str(exc),
            )
            return self._registry.find(address)
