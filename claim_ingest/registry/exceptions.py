class RegistryError(Exception):
    """Base exception for claim registry errors."""


class ClaimNotFoundError(RegistryError):
    """Raised when no claim record exists for an address."""

    def __init__(self, address: str) -> None:
        self.address = address
        super().__init__(f"No claim record for address {address}")


class InvalidTransitionError(RegistryError):
    """Raised when a record would leave a terminal state."""
