class LedgerError(Exception):
    """Base class for failures raised by the ledger core."""


class AccountNotFoundError(LedgerError):
    """Raised when an account id is missing from the store."""


class LedgerValidationError(LedgerError):
    """Raised for malformed input: blank names, non-positive amounts, self-transfers."""


class InsufficientFundsError(LedgerError):
    """Raised when a withdrawal/transfer would drop balance below zero."""


class StorageError(LedgerError):
    """Raised when the backing store fails; callers decide whether to retry."""
