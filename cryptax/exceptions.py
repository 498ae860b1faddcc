"""Custom exceptions for Cryptax."""

from datetime import datetime
from decimal import Decimal


class CryptaxError(Exception):
    """Base exception for all Cryptax errors."""


class EmptyInputError(CryptaxError):
    """Raised when no transactions remain to process."""

    def __init__(self, source: str = "input"):
        self.source = source
        super().__init__(f"No transactions found in {source}")


class InvalidRecordError(CryptaxError):
    """Raised when a ledger record is malformed or misses required fields."""

    def __init__(self, record_number: int, message: str):
        self.record_number = record_number
        super().__init__(f"Record #{record_number}: {message}")


class EmptyRecordError(CryptaxError):
    """Raised when a ledger record carries no recognizable transaction type."""

    def __init__(self, record_number: int):
        self.record_number = record_number
        super().__init__(f"Record #{record_number} has an empty or unknown transaction type")


class UnsupportedCostBasisMethodError(CryptaxError):
    """Raised when a cost-basis method other than FIFO is requested."""

    def __init__(self, method: str):
        self.method = method
        super().__init__(f"Unsupported cost basis method '{method}'. Only FIFO is supported.")


class InsufficientLotsError(CryptaxError):
    """Raised when a disposal needs more coins than the account ever acquired."""

    def __init__(self, account: str, timestamp: datetime, shortfall: Decimal):
        self.account = account
        self.timestamp = timestamp
        self.shortfall = shortfall
        super().__init__(
            f"Account '{account}' disposed more coins than it acquired at {timestamp.isoformat()} "
            f"(short by {shortfall})"
        )


class OrderingViolationError(CryptaxError):
    """Raised when a transaction is dated before the allocator's current year."""

    def __init__(self, timestamp: datetime, current_year: int):
        self.timestamp = timestamp
        self.current_year = current_year
        super().__init__(
            f"Out of order transaction at {timestamp.isoformat()} "
            f"(already allocating {current_year})"
        )


class MissingPricingDataError(CryptaxError):
    """Raised when a transaction has neither a USD amount nor a USD/unit rate."""

    def __init__(self, timestamp: datetime, context: str):
        self.timestamp = timestamp
        super().__init__(f"Missing USD amount and USD/unit for {context} at {timestamp.isoformat()}")


class ReportWriteError(CryptaxError):
    """Raised when an output file cannot be written."""

    def __init__(self, file_path: str, message: str):
        self.file_path = file_path
        super().__init__(f"Cannot write {file_path}: {message}")
