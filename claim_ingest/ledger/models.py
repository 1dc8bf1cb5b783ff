from dataclasses import dataclass


@dataclass(frozen=True)
class LedgerRecord:
    """One transaction returned by the ledger read API (subset of fields)."""

    transaction_id: str
    consensus_timestamp: str
    memo_base64: str = ""


@dataclass(frozen=True)
class DiscoveredAddress:
    """A content-address announced on the ledger, with where it came from."""

    address: str
    transaction_id: str | None = None
    consensus_timestamp: str | None = None
