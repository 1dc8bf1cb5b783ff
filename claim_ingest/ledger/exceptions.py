class LedgerError(Exception):
    """Base exception for ledger-related errors."""


class MemoDecodeError(LedgerError):
    """Raised when a record memo does not carry a content-address."""
