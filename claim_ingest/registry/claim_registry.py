from dataclasses import replace
from datetime import datetime

from claim_ingest.common.bounded import BoundedStore
from claim_ingest.logging.logger import Log
from claim_ingest.parsing.models import StructuredClaim
from claim_ingest.registry.exceptions import ClaimNotFoundError, InvalidTransitionError
from claim_ingest.registry.models import ClaimRecord, ClaimStatus, SourceMetadata, utcnow


class ClaimRegistry:
    """In-process table of claim records, one per content-address.

    Records are immutable values; every transition stores a new value under
    the same address. Only processing records may transition, so completed
    and failed records are never modified. Starting over on an address
    (`begin`) replaces the old record with a fresh one. When the table is
    full the oldest terminal record is evicted first.
    """

    def __init__(self, capacity: int = 1000) -> None:
        self._records: BoundedStore[str, ClaimRecord] = BoundedStore(
            capacity, evictable=lambda record: record.status.is_terminal
        )

    def begin(self, address: str, source_metadata: SourceMetadata | None = None) -> ClaimRecord:
        """Insert a fresh processing record, replacing any existing one."""
        record = ClaimRecord(
            address=address,
            status=ClaimStatus.PROCESSING,
            source_metadata=source_metadata or SourceMetadata(),
        )
        previous = self._records.get(address)
        evicted = self._records.put(address, record)
        if previous is not None:
            Log.info(
                "Claim record restarted",
                address=address,
                previous_status=previous.status.value,
            )
        if evicted is not None:
            Log.debug("Claim registry evicted record", address=evicted)
        return record

    def attach_content(self, address: str, content: str) -> ClaimRecord:
        """Store resolved content on a processing record. Content is write-once."""
        record = self._processing(address)
        if record.raw_content is not None and record.raw_content != content:
            raise InvalidTransitionError(f"Content already recorded for address {address}")
        return self._store(replace(record, raw_content=content, updated_at=utcnow()))

    def complete(self, address: str, claim: StructuredClaim) -> ClaimRecord:
        record = self._processing(address)
        now = utcnow()
        completed = replace(
            record,
            status=ClaimStatus.COMPLETED,
            structured_claim=claim,
            processing_time_ms=self._elapsed_ms(record, now),
            updated_at=now,
        )
        Log.info(
            "Claim record completed",
            address=address,
            claim_type=claim.claim_type,
            confidence=claim.confidence,
        )
        return self._store(completed)

    def fail(self, address: str, error: str) -> ClaimRecord:
        record = self._processing(address)
        now = utcnow()
        failed = replace(
            record,
            status=ClaimStatus.FAILED,
            error=error,
            processing_time_ms=self._elapsed_ms(record, now),
            updated_at=now,
        )
        Log.error("Claim record failed", address=address, error=error)
        return self._store(failed)

    def get(self, address: str) -> ClaimRecord:
        """Return the record for `address`.

        Raises:
            ClaimNotFoundError: if the address was never ingested (or was evicted).
        """
        record = self._records.get(address)
        if record is None:
            raise ClaimNotFoundError(address)
        return record

    def find(self, address: str) -> ClaimRecord | None:
        return self._records.get(address)

    def records(self) -> list[ClaimRecord]:
        """All records, least recently updated first."""
        return self._records.values()

    def counts(self) -> dict[str, int]:
        counts = {status.value: 0 for status in ClaimStatus}
        for record in self._records.values():
            counts[record.status.value] += 1
        return counts

    def __contains__(self, address: object) -> bool:
        return address in self._records

    def __len__(self) -> int:
        return len(self._records)

    def _processing(self, address: str) -> ClaimRecord:
        record = self.get(address)
        if record.status.is_terminal:
            raise InvalidTransitionError(
                f"Claim record for {address} is already {record.status.value}"
            )
        return record

    def _store(self, record: ClaimRecord) -> ClaimRecord:
        self._records.put(record.address, record)
        return record

    @staticmethod
    def _elapsed_ms(record: ClaimRecord, now: datetime) -> float:
        return round((now - record.created_at).total_seconds() * 1000, 2)
