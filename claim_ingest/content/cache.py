from datetime import datetime, timezone

from claim_ingest.common.bounded import BoundedStore
from claim_ingest.content.models import CacheEntry
from claim_ingest.logging.logger import Log


class ContentCache:
    """Bounded in-process store of content produced by this system.

    The upload path stores content right after writing it, so the resolver can
    skip the eventually-consistent mirrors. Oldest entries are evicted first.
    """

    def __init__(self, capacity: int = 100) -> None:
        self._entries: BoundedStore[str, CacheEntry] = BoundedStore(capacity)

    def store(
        self,
        address: str,
        content: str,
        content_type: str = "text/plain",
        **metadata: object,
    ) -> CacheEntry:
        entry = CacheEntry(
            address=address,
            content=content,
            content_type=content_type,
            size=len(content),
            stored_at=datetime.now(timezone.utc),
            metadata=dict(metadata),
        )
        evicted = self._entries.put(address, entry)
        Log.debug("Content cached", address=address, size=entry.size)
        if evicted is not None:
            Log.debug("Content cache evicted oldest entry", address=evicted)
        return entry

    def get(self, address: str) -> CacheEntry | None:
        return self._entries.get(address)

    def contains(self, address: str) -> bool:
        return address in self._entries

    def addresses(self) -> list[str]:
        return self._entries.keys()

    def clear(self) -> None:
        self._entries.clear()
        Log.info("Content cache cleared")

    def stats(self) -> dict[str, object]:
        entries = self._entries.values()
        return {
            "total_entries": len(entries),
            "total_size": sum(e.size for e in entries),
            "capacity": self._entries.capacity,
            "oldest_entry": entries[0].stored_at.isoformat() if entries else None,
            "newest_entry": entries[-1].stored_at.isoformat() if entries else None,
        }

    def __len__(self) -> int:
        return len(self._entries)
