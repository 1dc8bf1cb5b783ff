import asyncio
from dataclasses import dataclass, field

from claim_ingest.content.cache import ContentCache
from claim_ingest.parsing.parser import ClaimParser
from claim_ingest.registry.claim_registry import ClaimRegistry
from claim_ingest.registry.models import ClaimRecord


@dataclass
class IngestionContext:
    """Mutable state owned by exactly one Orchestrator.

    Nothing here is process-global, so independent pipelines can share a
    process. All access happens on a single event loop.
    """

    content_cache: ContentCache
    parser: ClaimParser
    registry: ClaimRegistry
    in_flight: dict[str, "asyncio.Task[ClaimRecord | None]"] = field(default_factory=dict)
    running: bool = False
