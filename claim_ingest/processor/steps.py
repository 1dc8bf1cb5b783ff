from claim_ingest.content.resolver import ContentResolver
from claim_ingest.logging.logger import Log
from claim_ingest.parsing.parser import ClaimParser
from claim_ingest.processor.pipeline import PipelineContext, PipelineStep
from claim_ingest.registry.claim_registry import ClaimRegistry


class ResolveContentStep(PipelineStep):
    def __init__(self, resolver: ContentResolver) -> None:
        self._resolver = resolver

    async def run(self, context: PipelineContext) -> PipelineContext:
        context.content = await self._resolver.resolve(
            context.address, immediate=context.immediate
        )
        Log.info(
            f"Resolved {len(context.content)} chars",
            address=context.address,
        )
        return context


class RecordContentStep(PipelineStep):
    def __init__(self, registry: ClaimRegistry) -> None:
        self._registry = registry

    async def run(self, context: PipelineContext) -> PipelineContext:
        context.record = self._registry.attach_content(context.address, context.content)
        return context


class ParseClaimStep(PipelineStep):
    def __init__(self, parser: ClaimParser) -> None:
        self._parser = parser

    async def run(self, context: PipelineContext) -> PipelineContext:
        context.claim = await self._parser.parse(context.content)
        return context


class CompleteClaimStep(PipelineStep):
    def __init__(self, registry: ClaimRegistry) -> None:
        self._registry = registry

    async def run(self, context: PipelineContext) -> PipelineContext:
        if context.claim is None:
            raise ValueError("PipelineContext.claim must be set before completion")
        context.record = self._registry.complete(context.address, context.claim)
        return context
