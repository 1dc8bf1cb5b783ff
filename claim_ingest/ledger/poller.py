import time
from typing import Any

import httpx

from claim_ingest.ledger.exceptions import MemoDecodeError
from claim_ingest.ledger.memo import decode_memo_address
from claim_ingest.ledger.models import DiscoveredAddress, LedgerRecord
from claim_ingest.logging.logger import Log


def consensus_now() -> str:
    """Current time in ledger consensus-timestamp form (seconds.nanoseconds)."""
    seconds, nanos = divmod(time.time_ns(), 1_000_000_000)
    return f"{seconds}.{nanos:09d}"


class LedgerPoller:
    """Reads new ledger records for one account and extracts content-addresses.

    The high-water-mark only moves forward, to the timestamp of the last record
    in each page, whether or not that record's memo decoded. A failed query
    leaves it untouched so the next tick retries the same window.
    """

    TRANSACTIONS_PATH = "/api/v1/transactions"

    def __init__(
        self,
        *,
        client: httpx.AsyncClient,
        mirror_url: str,
        account_id: str,
        page_size: int = 10,
        timeout_seconds: float = 10.0,
        high_water_mark: str | None = None,
    ) -> None:
        self._client = client
        self._url = mirror_url.rstrip("/") + self.TRANSACTIONS_PATH
        self._account_id = account_id
        self._page_size = page_size
        self._timeout_seconds = timeout_seconds
        self._high_water_mark = high_water_mark
        # ids already handled at exactly the high-water-mark; `gte` returns them again
        self._seen_at_mark: set[str] = set()

    @property
    def high_water_mark(self) -> str | None:
        return self._high_water_mark

    def reset(self, high_water_mark: str | None = None) -> None:
        """Restart from `high_water_mark`, or from now when omitted."""
        self._high_water_mark = high_water_mark or consensus_now()
        self._seen_at_mark = set()
        Log.info("Ledger poller reset", high_water_mark=self._high_water_mark)

    async def poll_once(self) -> list[DiscoveredAddress]:
        """Fetch one page of records and return the addresses they announce."""
        try:
            records = await self._fetch_records()
        except (httpx.HTTPError, ValueError) as exc:
            Log.warning(
                "Ledger query failed, will retry next tick",
                error=str(exc) or type(exc).__name__,
                high_water_mark=self._high_water_mark,
            )
            return []

        discovered: list[DiscoveredAddress] = []
        for record in records:
            if self._already_seen(record):
                continue
            try:
                address = decode_memo_address(record.memo_base64)
            except MemoDecodeError as exc:
                Log.debug(
                    "Skipping ledger record without content-address",
                    transaction_id=record.transaction_id,
                    reason=str(exc),
                )
            else:
                Log.info(
                    "New content-address on ledger",
                    address=address,
                    transaction_id=record.transaction_id,
                )
                discovered.append(
                    DiscoveredAddress(
                        address=address,
                        transaction_id=record.transaction_id,
                        consensus_timestamp=record.consensus_timestamp,
                    )
                )
            self._advance(record)

        Log.debug(
            f"Ledger poll returned {len(records)} records, {len(discovered)} new addresses"
        )
        return discovered

    async def _fetch_records(self) -> list[LedgerRecord]:
        params: dict[str, str | int] = {
            "account.id": self._account_id,
            "order": "asc",
            "limit": self._page_size,
        }
        if self._high_water_mark:
            params["timestamp"] = f"gte:{self._high_water_mark}"
        response = await self._client.get(
            self._url,
            params=params,
            headers={"Accept": "application/json"},
            timeout=self._timeout_seconds,
        )
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, dict):
            raise ValueError("ledger response must be a JSON object")
        records: list[LedgerRecord] = []
        for raw in payload.get("transactions") or []:
            record = self._to_record(raw)
            if record is not None:
                records.append(record)
        return records

    @staticmethod
    def _to_record(raw: Any) -> LedgerRecord | None:
        if not isinstance(raw, dict) or not raw.get("consensus_timestamp"):
            Log.warning("Ignoring ledger record without consensus timestamp")
            return None
        memo = raw.get("memo_base64")
        if memo is not None and not isinstance(memo, str):
            Log.warning(
                "Ignoring non-string ledger memo",
                transaction_id=raw.get("transaction_id"),
            )
            memo = None
        return LedgerRecord(
            transaction_id=str(raw.get("transaction_id", "")),
            consensus_timestamp=str(raw["consensus_timestamp"]),
            memo_base64=memo or "",
        )

    def _already_seen(self, record: LedgerRecord) -> bool:
        return (
            record.consensus_timestamp == self._high_water_mark
            and record.transaction_id in self._seen_at_mark
        )

    def _advance(self, record: LedgerRecord) -> None:
        if record.consensus_timestamp != self._high_water_mark:
            self._high_water_mark = record.consensus_timestamp
            self._seen_at_mark = set()
        self._seen_at_mark.add(record.transaction_id)
