from claim_ingest.content.resolver import ContentResolver
from claim_ingest.logging.logger import Log
from claim_ingest.parsing.parser import ClaimParser
from claim_ingest.processor.pipeline import PipelineContext, PipelineStep
from claim_ingest.processor.steps import (
    CompleteClaimStep,
    ParseClaimStep,
    RecordContentStep,
    ResolveContentStep,
)
from claim_ingest.registry.claim_registry import ClaimRegistry
from claim_ingest.registry.models import ClaimRecord


class Processor:
    """Runs the ingestion pipeline for one content-address.

    Pipeline: resolve -> record content -> parse -> complete.
    Steps run strictly in order; any exception aborts the remaining steps
    and propagates to the caller.
    """

    def __init__(self, steps: list[PipelineStep]) -> None:
        self._steps = list(steps)

    async def process(self, address: str, *, immediate: bool = False) -> ClaimRecord:
        Log.info("Processing content-address", address=address)
        context = PipelineContext(address=address, immediate=immediate)
        for step in self._steps:
            context = await step.run(context)
        if context.record is None:
            raise ValueError(f"Pipeline finished without a claim record for {address}")
        return context.record


def build_processor(
    resolver: ContentResolver,
    parser: ClaimParser,
    registry: ClaimRegistry,
) -> Processor:
    """Build a Processor with the standard ingestion steps."""
    return Processor(
        steps=[
            ResolveContentStep(resolver),
            RecordContentStep(registry),
            ParseClaimStep(parser),
            CompleteClaimStep(registry),
        ]
    )
