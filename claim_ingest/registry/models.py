from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import StrEnum

from claim_ingest.parsing.models import StructuredClaim


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ClaimStatus(StrEnum):
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not ClaimStatus.PROCESSING


@dataclass(frozen=True)
class SourceMetadata:
    """Where an ingestion request came from."""

    source: str = "ledger"
    transaction_id: str | None = None
    consensus_timestamp: str | None = None


@dataclass(frozen=True)
class ClaimRecord:
    """Lifecycle state and result of ingesting one content-address."""

    address: str
    status: ClaimStatus
    source_metadata: SourceMetadata = field(default_factory=SourceMetadata)
    raw_content: str | None = None
    structured_claim: StructuredClaim | None = None
    error: str | None = None
    processing_time_ms: float | None = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
