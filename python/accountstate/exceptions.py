"""
Exceptions for account state management.
"""


class AccountStateError(Exception):
    """Base exception for account state errors."""

    pass


class PreconditionError(AccountStateError):
    """Raised when an operation is called before its required state exists."""

    pass


class MetadataNotInitialisedError(PreconditionError):
    """Raised when a metadata field is set before the symbol's metadata was initialised."""

    def __init__(self, symbol: str):
        self.symbol = symbol
        super().__init__(
            f"Symbol metadata not initialised for {symbol}. Prepare full metadata "
            f"state via set_symbol_metadata() before using set_symbol_metadata_value()"
        )


class ZeroBalanceError(AccountStateError, ZeroDivisionError):
    """Raised when a percentage is requested against a zero balance."""

    pass


class InvalidNumberError(AccountStateError, ValueError):
    """Raised when a numeric input is NaN or not a number."""

    pass


class ExternalIOError(AccountStateError):
    """Base exception for failures in external I/O (storage, reporting)."""

    pass


class StorageError(ExternalIOError):
    """Raised when a storage backend fails to read or write."""

    pass


class ReportingError(ExternalIOError):
    """Raised when a balance report cannot be built or submitted."""

    pass
