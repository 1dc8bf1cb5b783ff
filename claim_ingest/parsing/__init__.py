from claim_ingest.parsing.base import ParseStrategy
from claim_ingest.parsing.factory import ClaimParserFactory
from claim_ingest.parsing.inference_strategy import InferenceStrategy
from claim_ingest.parsing.models import Entity, StructuredClaim
from claim_ingest.parsing.parser import ClaimParser
from claim_ingest.parsing.pattern_strategy import PatternStrategy

__all__ = [
    "ClaimParser",
    "ClaimParserFactory",
    "Entity",
    "InferenceStrategy",
    "ParseStrategy",
    "PatternStrategy",
    "StructuredClaim",
]
