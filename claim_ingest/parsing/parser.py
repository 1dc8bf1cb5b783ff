import re
import time
from dataclasses import replace

from claim_ingest.common.bounded import BoundedStore
from claim_ingest.logging.logger import Log
from claim_ingest.parsing.base import ParseStrategy
from claim_ingest.parsing.exceptions import StrategyUnavailableError
from claim_ingest.parsing.heuristics import (
    last_resort_object,
    last_resort_predicate,
    last_resort_subject,
    word_count,
)
from claim_ingest.parsing.models import ParserStats, StructuredClaim

_CACHE_KEY_STRIP = re.compile(r"[^\w\s]")

LAST_RESORT_METHOD = "fallback"


def cache_key(text: str, max_length: int = 100) -> str:
    """Lower-cased, punctuation-stripped prefix of `text`."""
    return _CACHE_KEY_STRIP.sub("", text.lower())[:max_length]


class ClaimParser:
    """Turns raw text into a StructuredClaim through an ordered strategy chain.

    `parse` never raises: a failing or unavailable strategy hands over to the
    next one, and when the chain is exhausted a low-confidence last-resort
    claim is returned. Results are cached by normalized text.
    """

    def __init__(
        self,
        strategies: list[ParseStrategy],
        *,
        cache_capacity: int = 100,
        cache_key_length: int = 100,
    ) -> None:
        self._strategies = list(strategies)
        self._cache: BoundedStore[str, StructuredClaim] = BoundedStore(cache_capacity)
        self._cache_key_length = cache_key_length
        self._stats = ParserStats()

    @property
    def strategy_names(self) -> list[str]:
        return [strategy.name for strategy in self._strategies]

    async def parse(self, text: str) -> StructuredClaim:
        started = time.perf_counter()
        text = text or ""
        self._stats.total_queries += 1

        key = cache_key(text, self._cache_key_length)
        cached = self._cache.get(key)
        if cached is not None:
            self._stats.cache_hits += 1
            Log.debug("Parse cache hit", method=cached.method)
            return replace(cached, cached=True)

        claim = await self._run_strategies(text)
        elapsed_ms = (time.perf_counter() - started) * 1000
        claim = replace(claim, processing_time_ms=round(elapsed_ms, 2))
        self._cache.put(key, claim)
        self._stats.record_timing(elapsed_ms)

        Log.info(
            "Claim parsed",
            method=claim.method,
            claim_type=claim.claim_type,
            confidence=claim.confidence,
            elapsed_ms=round(elapsed_ms, 2),
        )
        return claim

    def stats(self) -> dict[str, object]:
        return {**self._stats.as_dict(), "cache_size": len(self._cache)}

    async def _run_strategies(self, text: str) -> StructuredClaim:
        for strategy in self._strategies:
            try:
                claim = await strategy.attempt(text)
            except StrategyUnavailableError as exc:
                Log.debug(f"Parse strategy '{strategy.name}' unavailable: {exc}")
                continue
            except Exception as exc:
                self._stats.record_failure(strategy.name)
                Log.warning(
                    f"Parse strategy '{strategy.name}' failed, falling back",
                    error=str(exc) or type(exc).__name__,
                )
                continue
            if claim is None:
                Log.debug(f"Parse strategy '{strategy.name}' unavailable for input")
                continue
            self._stats.record_success(strategy.name)
            return claim

        self._stats.last_resort_results += 1
        Log.warning("All parse strategies exhausted, using last-resort claim")
        return self._last_resort(text)

    @staticmethod
    def _last_resort(text: str) -> StructuredClaim:
        return StructuredClaim(
            subject=last_resort_subject(text),
            predicate=last_resort_predicate(text),
            object=last_resort_object(text),
            claim_type="unstructured",
            confidence=0.1,
            method=LAST_RESORT_METHOD,
            word_count=word_count(text),
        )
