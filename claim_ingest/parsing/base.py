from abc import ABC, abstractmethod
from typing import ClassVar

from claim_ingest.parsing.models import StructuredClaim


class ParseStrategy(ABC):
    """Contract for one step of the parser's fallback chain."""

    name: ClassVar[str]

    @abstractmethod
    async def attempt(self, text: str) -> StructuredClaim | None:
        """Try to turn `text` into a structured claim.

        Returns:
            The claim, or None when the strategy is unavailable for this input.

        Raises:
            StrategyUnavailableError when it cannot run at all. Any other
            exception is counted as a failure of this strategy; either way the
            parser moves on to the next one.
        """
