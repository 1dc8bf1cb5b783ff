import asyncio
import contextlib
from dataclasses import dataclass, field

import httpx

from claim_ingest.config.settings import Settings
from claim_ingest.content.cache import ContentCache
from claim_ingest.content.models import CacheEntry, RetryPolicy
from claim_ingest.content.resolver import ContentResolver
from claim_ingest.ledger.models import DiscoveredAddress
from claim_ingest.ledger.poller import LedgerPoller
from claim_ingest.logging.logger import Log
from claim_ingest.parsing.factory import ClaimParserFactory
from claim_ingest.processor.processor import build_processor
from claim_ingest.registry.claim_registry import ClaimRegistry
from claim_ingest.registry.models import ClaimRecord, SourceMetadata
from claim_ingest.worker.context import IngestionContext
from claim_ingest.worker.ingestion_runner import IngestionRunner


@dataclass(frozen=True)
class OrchestratorStatus:
    running: bool
    processed_count: int
    in_flight: int
    last_processed_timestamp: str | None
    status_counts: dict[str, int] = field(default_factory=dict)
    retry_policy: dict[str, float | int] = field(default_factory=dict)
    parser_stats: dict[str, object] = field(default_factory=dict)
    content_cache: dict[str, object] = field(default_factory=dict)


class Orchestrator:
    """Poll loop: poll ledger -> dispatch one ingestion task per new address.

    Only one task per address is in flight at a time; a second dispatch for
    the same address joins the running task. Stopping halts discovery but
    lets dispatched tasks finish and write their records.
    """

    def __init__(
        self,
        *,
        poller: LedgerPoller,
        runner: IngestionRunner,
        context: IngestionContext,
        retry_policy: RetryPolicy,
        poll_interval_seconds: float,
    ) -> None:
        self._poller = poller
        self._runner = runner
        self._context = context
        self._retry_policy = retry_policy
        self._poll_interval_seconds = poll_interval_seconds
        self._poll_task: asyncio.Task[None] | None = None

    @property
    def context(self) -> IngestionContext:
        return self._context

    @property
    def running(self) -> bool:
        return self._context.running

    async def start(self) -> bool:
        """Begin polling from now. Returns False if already running."""
        if self._context.running:
            Log.warning("Orchestrator is already running")
            return False
        self._poller.reset()
        self._context.running = True
        self._poll_task = asyncio.create_task(self._poll_loop(), name="ledger-poll-loop")
        Log.info(
            f"Orchestrator started, polling every {self._poll_interval_seconds}s",
            high_water_mark=self._poller.high_water_mark,
        )
        return True

    async def stop(self) -> None:
        """Stop discovery. In-flight ingestion tasks keep running."""
        if not self._context.running:
            return
        self._context.running = False
        if self._poll_task is not None:
            self._poll_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._poll_task
            self._poll_task = None
        Log.info(
            "Orchestrator stopped",
            in_flight=len(self._context.in_flight),
        )

    async def wait_idle(self) -> None:
        """Wait until every dispatched ingestion task has finished."""
        while self._context.in_flight:
            await asyncio.gather(
                *self._context.in_flight.values(), return_exceptions=True
            )

    async def poll_once(self) -> list[DiscoveredAddress]:
        """Run one poll tick and dispatch every discovered address."""
        discovered = await self._poller.poll_once()
        for item in discovered:
            self._dispatch(
                item.address,
                SourceMetadata(
                    source="ledger",
                    transaction_id=item.transaction_id,
                    consensus_timestamp=item.consensus_timestamp,
                ),
                immediate=False,
            )
        return discovered

    def trigger(
        self,
        address: str,
        *,
        immediate: bool = True,
        source: str = "manual",
    ) -> "asyncio.Task[ClaimRecord | None]":
        """Ingest one address without waiting for the ledger (backfill, tests)."""
        Log.info("Manual ingestion requested", address=address)
        return self._dispatch(address, SourceMetadata(source=source), immediate=immediate)

    def store_content(
        self,
        address: str,
        content: str,
        content_type: str = "text/plain",
        **metadata: object,
    ) -> CacheEntry:
        """Cache locally produced content so ingestion skips the mirrors."""
        return self._context.content_cache.store(address, content, content_type, **metadata)

    def status(self) -> OrchestratorStatus:
        return OrchestratorStatus(
            running=self._context.running,
            processed_count=len(self._context.registry),
            in_flight=len(self._context.in_flight),
            last_processed_timestamp=self._poller.high_water_mark,
            status_counts=self._context.registry.counts(),
            retry_policy=self._retry_policy.as_dict(),
            parser_stats=self._context.parser.stats(),
            content_cache=self._context.content_cache.stats(),
        )

    def list_claims(self) -> list[ClaimRecord]:
        return self._context.registry.records()

    def get_claim(self, address: str) -> ClaimRecord:
        """Raises ClaimNotFoundError when the address is unknown."""
        return self._context.registry.get(address)

    async def _poll_loop(self) -> None:
        while self._context.running:
            try:
                await self.poll_once()
            except Exception as exc:
                Log.error(f"Poll tick failed: {exc}")
            await asyncio.sleep(self._poll_interval_seconds)

    def _dispatch(
        self,
        address: str,
        source_metadata: SourceMetadata,
        *,
        immediate: bool,
    ) -> "asyncio.Task[ClaimRecord | None]":
        existing = self._context.in_flight.get(address)
        if existing is not None and not existing.done():
            Log.info("Ingestion already in flight, joining it", address=address)
            return existing

        self._context.registry.begin(address, source_metadata)
        task = asyncio.create_task(
            self._runner.run(address, immediate=immediate),
            name=f"ingest:{address}",
        )
        self._context.in_flight[address] = task
        task.add_done_callback(lambda done: self._on_task_done(address, done))
        Log.info(
            "Ingestion dispatched",
            address=address,
            source=source_metadata.source,
        )
        return task

    def _on_task_done(
        self,
        address: str,
        task: "asyncio.Task[ClaimRecord | None]",
    ) -> None:
        if self._context.in_flight.get(address) is task:
            del self._context.in_flight[address]
        if task.cancelled():
            Log.warning("Ingestion task cancelled", address=address)
        elif task.exception() is not None:
            Log.error(
                "Ingestion task crashed",
                address=address,
                error=str(task.exception()),
            )


def build_orchestrator(settings: Settings, client: httpx.AsyncClient) -> Orchestrator:
    """Build an Orchestrator with its own cache, parser and registry."""
    policy = RetryPolicy(
        max_rounds=settings.content_max_rounds,
        base_delay_seconds=settings.content_base_delay_seconds,
        backoff_factor=settings.content_backoff_factor,
        max_delay_seconds=settings.content_max_delay_seconds,
        propagation_grace_seconds=settings.content_propagation_grace_seconds,
    )
    context = IngestionContext(
        content_cache=ContentCache(settings.content_cache_capacity),
        parser=ClaimParserFactory.create(settings),
        registry=ClaimRegistry(settings.registry_capacity),
    )
    resolver = ContentResolver(
        cache=context.content_cache,
        client=client,
        mirrors=settings.content_mirrors,
        policy=policy,
        timeout_seconds=settings.content_timeout_seconds,
    )
    poller = LedgerPoller(
        client=client,
        mirror_url=settings.ledger_mirror_url,
        account_id=settings.ledger_account_id,
        page_size=settings.ledger_page_size,
        timeout_seconds=settings.ledger_timeout_seconds,
    )
    processor = build_processor(resolver, context.parser, context.registry)
    runner = IngestionRunner(
        processor,
        context.registry,
        timeout_seconds=settings.ingestion_timeout_seconds,
    )
    return Orchestrator(
        poller=poller,
        runner=runner,
        context=context,
        retry_policy=policy,
        poll_interval_seconds=settings.ledger_poll_interval_seconds,
    )
