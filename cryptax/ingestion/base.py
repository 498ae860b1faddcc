"""Base adapter interface for ledger ingestion."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path

from cryptax.models.transaction import Transaction


@dataclass
class SkippedRecord:
    record_number: int
    message: str


@dataclass
class LedgerImportResult:
    """Transactions grouped by account, plus the records that were skipped."""

    source: str
    transactions: dict[str, list[Transaction]] = field(default_factory=dict)
    invalid_records: list[SkippedRecord] = field(default_factory=list)
    empty_records: list[int] = field(default_factory=list)

    @property
    def accounts(self) -> list[str]:
        return sorted(self.transactions)

    @property
    def transaction_count(self) -> int:
        return sum(len(txns) for txns in self.transactions.values())

    def add(self, txn: Transaction) -> None:
        self.transactions.setdefault(txn.account, []).append(txn)


class BaseAdapter(ABC):
    """Abstract base class for ledger adapters."""

    @abstractmethod
    def parse(self, file_path: Path) -> LedgerImportResult:
        """Parse a file into validated transactions grouped by account."""
        ...

    @abstractmethod
    def validate(self, data: LedgerImportResult) -> list[str]:
        """Return human-readable problems found in the parsed data."""
        ...
