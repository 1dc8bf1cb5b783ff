from dataclasses import dataclass, field


@dataclass(frozen=True)
class Entity:
    """A named entity found in claim text.

    Labels follow CoNLL conventions: PER, ORG, LOC, MISC.
    """

    text: str
    label: str
    confidence: float = 1.0


@dataclass(frozen=True)
class StructuredClaim:
    """Subject/predicate/object view of a piece of text."""

    subject: str
    predicate: str
    object: str
    claim_type: str
    confidence: float
    method: str
    entities: tuple[Entity, ...] = ()
    actions: tuple[str, ...] = ()
    contexts: tuple[str, ...] = ()
    sentiment: float | None = None
    word_count: int = 0
    processing_time_ms: float = 0.0
    cached: bool = False


@dataclass
class ParserStats:
    """Running counters for one ClaimParser."""

    total_queries: int = 0
    cache_hits: int = 0
    strategy_successes: dict[str, int] = field(default_factory=dict)
    strategy_failures: dict[str, int] = field(default_factory=dict)
    last_resort_results: int = 0
    average_processing_ms: float = 0.0
    _timed_queries: int = field(default=0, repr=False)

    def record_success(self, method: str) -> None:
        self.strategy_successes[method] = self.strategy_successes.get(method, 0) + 1

    def record_failure(self, method: str) -> None:
        self.strategy_failures[method] = self.strategy_failures.get(method, 0) + 1

    def record_timing(self, elapsed_ms: float) -> None:
        self._timed_queries += 1
        self.average_processing_ms += (
            elapsed_ms - self.average_processing_ms
        ) / self._timed_queries

    @property
    def cache_hit_rate(self) -> float:
        if self.total_queries == 0:
            return 0.0
        return self.cache_hits / self.total_queries

    def as_dict(self) -> dict[str, object]:
        return {
            "total_queries": self.total_queries,
            "cache_hits": self.cache_hits,
            "cache_hit_rate": round(self.cache_hit_rate, 3),
            "strategy_successes": dict(self.strategy_successes),
            "strategy_failures": dict(self.strategy_failures),
            "last_resort_results": self.last_resort_results,
            "average_processing_ms": round(self.average_processing_ms, 2),
        }
