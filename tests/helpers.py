from collections.abc import Callable

import httpx

MIRRORS = [
    "https://mirror-a.test/ipfs/",
    "https://mirror-b.test/ipfs/",
    "https://mirror-c.test/ipfs/",
]

LEDGER_URL = "https://ledger.test"
ACCOUNT_ID = "0.0.1234"

TESLA_CLAIM = "Tesla announced a battery that increases energy density by 40%"


def make_client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
    """AsyncClient whose requests are answered by `handler`."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))
