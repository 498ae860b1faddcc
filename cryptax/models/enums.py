"""Enumerations for Cryptax."""

from enum import StrEnum


class TransactionType(StrEnum):
    ACQUIRE = "ACQUIRE"
    DISPOSE = "DISPOSE"
    TRANSFER = "TRANSFER"
    INCOME = "INCOME"
    MNG_INCOME = "MNG_INCOME"
    MNG_PURCHASE = "MNG_PURCHASE"
    MNG_REINVEST = "MNG_REINVEST"

    @classmethod
    def from_code(cls, code: str | None) -> "TransactionType | None":
        """Map a ledger type code (e.g. "acq") to its type; None if blank or unknown."""
        if code is None:
            return None
        return _CODES.get(code.strip())


_CODES: dict[str, TransactionType] = {
    "acq": TransactionType.ACQUIRE,
    "disp": TransactionType.DISPOSE,
    "tran": TransactionType.TRANSFER,
    "inc": TransactionType.INCOME,
    "minc": TransactionType.MNG_INCOME,
    "mpur": TransactionType.MNG_PURCHASE,
    "mre": TransactionType.MNG_REINVEST,
}

ACQUISITION_TYPES = frozenset(
    {TransactionType.ACQUIRE, TransactionType.INCOME, TransactionType.MNG_INCOME}
)
DISPOSAL_TYPES = frozenset(
    {
        TransactionType.TRANSFER,
        TransactionType.DISPOSE,
        TransactionType.MNG_PURCHASE,
        TransactionType.MNG_REINVEST,
    }
)
MINING_CONTRACT_TYPES = frozenset({TransactionType.MNG_PURCHASE, TransactionType.MNG_REINVEST})
INCOME_EXPENSE_TYPES = frozenset(
    {
        TransactionType.INCOME,
        TransactionType.MNG_INCOME,
        TransactionType.MNG_PURCHASE,
        TransactionType.MNG_REINVEST,
    }
)


class GainTerm(StrEnum):
    SHORT_TERM = "SHORT_TERM"
    LONG_TERM = "LONG_TERM"

    @property
    def label(self) -> str:
        return "Short-Term" if self is GainTerm.SHORT_TERM else "Long-Term"


class MiningContractType(StrEnum):
    PURCHASE = "PURCHASE"
    REINVESTMENT = "REINVESTMENT"


class CostBasisMethod(StrEnum):
    FIFO = "FIFO"
