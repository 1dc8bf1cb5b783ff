from abc import ABC, abstractmethod
from dataclasses import dataclass

from claim_ingest.parsing.models import StructuredClaim
from claim_ingest.registry.models import ClaimRecord


@dataclass(slots=True)
class PipelineContext:
    address: str
    immediate: bool = False
    content: str = ""
    claim: StructuredClaim | None = None
    record: ClaimRecord | None = None


class PipelineStep(ABC):
    @abstractmethod
    async def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
