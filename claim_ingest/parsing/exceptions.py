class ClaimParserError(Exception):
    """Base exception for claim parsing errors."""


class StrategyUnavailableError(ClaimParserError):
    """Raised when a parse strategy cannot run with the current configuration."""


class InferenceError(ClaimParserError):
    """Raised when the inference backend returns an unusable response."""


class InferenceValidationError(InferenceError):
    """Raised when an inference response fails schema or domain validation."""


class InferenceNetworkError(InferenceError):
    """Raised when the inference provider call fails due to network/infrastructure issues."""
