import asyncio
import json
from collections.abc import Awaitable, Callable

import httpx

from claim_ingest.content.cache import ContentCache
from claim_ingest.content.exceptions import ContentNotFoundError, EmptyContentError
from claim_ingest.content.models import RetryPolicy
from claim_ingest.logging.logger import Log

_REQUEST_HEADERS = {
    "Accept": "text/plain, application/json, */*",
    "User-Agent": "claim-ingest/1.0",
}


class ContentResolver:
    """Returns the content behind a content-address.

    Lookup order: local content cache, then every mirror in preference order,
    repeated for up to `policy.max_rounds` rounds with exponential backoff
    between rounds. The resolver never writes to the cache.
    """

    def __init__(
        self,
        *,
        cache: ContentCache,
        client: httpx.AsyncClient,
        mirrors: list[str],
        policy: RetryPolicy,
        timeout_seconds: float = 20.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if not mirrors:
            raise ValueError("At least one content mirror is required")
        self._cache = cache
        self._client = client
        self._mirrors = list(mirrors)
        self._policy = policy
        self._timeout_seconds = timeout_seconds
        self._sleep = sleep

    @property
    def policy(self) -> RetryPolicy:
        return self._policy

    async def resolve(self, address: str, *, immediate: bool = False) -> str:
        """Return content for `address`.

        Args:
            address: Content-address to look up.
            immediate: Skip the propagation grace period before the first round.

        Raises:
            ContentNotFoundError: when every mirror failed in every round.
        """
        entry = self._cache.get(address)
        if entry is not None:
            Log.info("Content found in local cache", address=address, size=entry.size)
            return entry.content

        Log.info("Content not cached, querying mirrors", address=address)
        grace = self._policy.propagation_grace_seconds
        if not immediate and grace > 0:
            Log.debug(f"Waiting {grace}s for content propagation", address=address)
            await self._sleep(grace)

        attempts = 0
        last_error: str | None = None
        delays = self._policy.delays()
        for round_number in range(1, self._policy.max_rounds + 1):
            for mirror in self._mirrors:
                attempts += 1
                try:
                    content = await self._fetch(mirror, address)
                except (httpx.HTTPError, EmptyContentError, ValueError) as exc:
                    reason = str(exc) or type(exc).__name__
                    last_error = f"{mirror}: {reason}"
                    Log.warning(
                        "Mirror fetch failed",
                        address=address,
                        mirror=mirror,
                        round=round_number,
                        error=reason,
                    )
                    continue
                Log.info(
                    "Content resolved from mirror",
                    address=address,
                    mirror=mirror,
                    round=round_number,
                    size=len(content),
                )
                return content

            delay = next(delays, None)
            if delay is not None:
                Log.info(
                    f"All mirrors failed in round {round_number}, retrying in {delay}s",
                    address=address,
                )
                await self._sleep(delay)

        raise ContentNotFoundError(address, attempts, self._policy.max_rounds, last_error)

    async def _fetch(self, mirror: str, address: str) -> str:
        response = await self._client.get(
            f"{mirror}{address}",
            headers=_REQUEST_HEADERS,
            timeout=self._timeout_seconds,
            follow_redirects=True,
        )
        response.raise_for_status()
        content = self._body_as_text(response)
        if not content:
            raise EmptyContentError("mirror returned an empty body")
        return content

    @staticmethod
    def _body_as_text(response: httpx.Response) -> str:
        content_type = response.headers.get("content-type", "")
        if "json" in content_type and response.content:
            return json.dumps(response.json(), indent=2, sort_keys=True)
        return response.text
