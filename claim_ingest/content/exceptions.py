class ContentError(Exception):
    """Base exception for all content-related errors."""


class ContentNotFoundError(ContentError):
    """Raised when no mirror returned content for an address."""

    def __init__(
        self,
        address: str,
        attempts: int,
        rounds: int,
        last_error: str | None = None,
    ) -> None:
        self.address = address
        self.attempts = attempts
        self.rounds = rounds
        self.last_error = last_error
        message = (
            f"Content not found for address {address} after {attempts} attempts "
            f"in {rounds} rounds"
        )
        if last_error:
            message = f"{message}. Last error: {last_error}"
        super().__init__(message)


class EmptyContentError(ContentError):
    """Raised when a mirror answers successfully with an empty body."""
