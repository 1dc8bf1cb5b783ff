import httpx
import pytest

from claim_ingest.ledger.memo import encode_memo
from claim_ingest.ledger.poller import LedgerPoller, consensus_now
from tests.helpers import ACCOUNT_ID, LEDGER_URL, make_client


def _tx(tx_id: str, timestamp: str, memo: str = "") -> dict[str, str]:
    return {"transaction_id": tx_id, "consensus_timestamp": timestamp, "memo_base64": memo}


def _make_poller(
    pages: list[httpx.Response],
    high_water_mark: str | None = "100.000000000",
) -> tuple[LedgerPoller, list[httpx.Request]]:
    """Create a LedgerPoller answering each request with the next page."""
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return pages.pop(0) if pages else httpx.Response(200, json={"transactions": []})

    poller = LedgerPoller(
        client=make_client(handler),
        mirror_url=LEDGER_URL,
        account_id=ACCOUNT_ID,
        page_size=10,
        high_water_mark=high_water_mark,
    )
    return poller, requests


def _page(*transactions: dict[str, str]) -> httpx.Response:
    return httpx.Response(200, json={"transactions": list(transactions)})


class TestQuery:
    @pytest.mark.asyncio
    async def test_query_parameters(self) -> None:
        poller, requests = _make_poller([_page()])

        await poller.poll_once()

        params = requests[0].url.params
        assert requests[0].url.path == "/api/v1/transactions"
        assert params["account.id"] == ACCOUNT_ID
        assert params["order"] == "asc"
        assert params["limit"] == "10"
        assert params["timestamp"] == "gte:100.000000000"

    @pytest.mark.asyncio
    async def test_no_timestamp_filter_without_mark(self) -> None:
        poller, requests = _make_poller([_page()], high_water_mark=None)

        await poller.poll_once()

        assert "timestamp" not in requests[0].url.params


class TestDiscovery:
    @pytest.mark.asyncio
    async def test_emits_addresses_in_order(self) -> None:
        poller, _requests = _make_poller(
            [
                _page(
                    _tx("tx1", "101.000000000", encode_memo("cid1")),
                    _tx("tx2", "102.000000000", encode_memo("cid2")),
                )
            ]
        )

        discovered = await poller.poll_once()

        assert [d.address for d in discovered] == ["cid1", "cid2"]
        assert discovered[0].transaction_id == "tx1"
        assert discovered[1].consensus_timestamp == "102.000000000"
        assert poller.high_water_mark == "102.000000000"

    @pytest.mark.asyncio
    async def test_malformed_memo_skipped_but_mark_advances(self) -> None:
        poller, _requests = _make_poller(
            [
                _page(
                    _tx("tx1", "101.000000000", encode_memo("cid1")),
                    _tx("tx2", "102.000000000", "!!garbage!!"),
                )
            ]
        )

        discovered = await poller.poll_once()

        assert [d.address for d in discovered] == ["cid1"]
        assert poller.high_water_mark == "102.000000000"

    @pytest.mark.asyncio
    async def test_record_at_mark_not_emitted_twice(self) -> None:
        record = _tx("tx1", "101.000000000", encode_memo("cid1"))
        later = _tx("tx2", "101.000000000", encode_memo("cid2"))
        poller, _requests = _make_poller([_page(record), _page(record, later)])

        first = await poller.poll_once()
        second = await poller.poll_once()

        assert [d.address for d in first] == ["cid1"]
        assert [d.address for d in second] == ["cid2"]

    @pytest.mark.asyncio
    async def test_empty_page_keeps_mark(self) -> None:
        poller, _requests = _make_poller([_page()])

        assert await poller.poll_once() == []
        assert poller.high_water_mark == "100.000000000"

    @pytest.mark.asyncio
    async def test_record_without_timestamp_ignored(self) -> None:
        poller, _requests = _make_poller(
            [_page({"transaction_id": "tx1", "memo_base64": encode_memo("cid1")})]
        )

        assert await poller.poll_once() == []
        assert poller.high_water_mark == "100.000000000"

    @pytest.mark.asyncio
    async def test_non_ascii_memo_does_not_stall(self) -> None:
        page = _page(
            _tx("tx1", "100.000000001", "bm90IGpzb24é"),
            _tx("tx2", "100.000000002", encode_memo("cid2")),
        )
        poller, _requests = _make_poller([page])

        discovered = await poller.poll_once()

        assert [d.address for d in discovered] == ["cid2"]
        assert poller.high_water_mark == "100.000000002"

    @pytest.mark.asyncio
    async def test_non_string_memo_does_not_stall(self) -> None:
        page = httpx.Response(
            200,
            json={
                "transactions": [
                    {"transaction_id": "tx1", "consensus_timestamp": "100.000000001", "memo_base64": 12345},
                    _tx("tx2", "100.000000002", encode_memo("cid2")),
                ]
            },
        )
        poller, _requests = _make_poller([page])

        discovered = await poller.poll_once()

        assert [d.address for d in discovered] == ["cid2"]
        assert poller.high_water_mark == "100.000000002"


class TestFailures:
    @pytest.mark.asyncio
    async def test_http_error_keeps_mark(self) -> None:
        poller, _requests = _make_poller([httpx.Response(503)])

        assert await poller.poll_once() == []
        assert poller.high_water_mark == "100.000000000"

    @pytest.mark.asyncio
    async def test_invalid_json_keeps_mark(self) -> None:
        poller, _requests = _make_poller([httpx.Response(200, text="<html>")])

        assert await poller.poll_once() == []
        assert poller.high_water_mark == "100.000000000"

    @pytest.mark.asyncio
    async def test_failed_window_retried(self) -> None:
        poller, requests = _make_poller(
            [
                httpx.Response(500),
                _page(_tx("tx1", "101.000000000", encode_memo("cid1"))),
            ]
        )

        await poller.poll_once()
        discovered = await poller.poll_once()

        assert [d.address for d in discovered] == ["cid1"]
        assert requests[1].url.params["timestamp"] == "gte:100.000000000"


class TestReset:
    def test_reset_to_now(self) -> None:
        poller, _requests = _make_poller([], high_water_mark=None)

        poller.reset()

        seconds, nanos = poller.high_water_mark.split(".")
        assert seconds.isdigit()
        assert len(nanos) == 9

    def test_reset_to_explicit_mark(self) -> None:
        poller, _requests = _make_poller([])

        poller.reset("200.000000000")

        assert poller.high_water_mark == "200.000000000"

    def test_consensus_now_format(self) -> None:
        seconds, nanos = consensus_now().split(".")
        assert int(seconds) > 1_600_000_000
        assert len(nanos) == 9
