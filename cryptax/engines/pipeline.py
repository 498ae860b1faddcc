"""Engine orchestration: the single entry point for one run.

Runs the FIFO lot ledger per account, summarizes unrealized cost basis,
allocates income and expenses to tax years, and generates each account's
daily mining series. Any fatal error aborts the whole run.
"""

import logging
from collections.abc import Mapping, Sequence
from datetime import date

from pydantic import BaseModel, Field

from cryptax.engines.allocator import IncomeYearAllocator
from cryptax.engines.cost_basis import summarize_unrealized
from cryptax.engines.lot_ledger import LotLedger
from cryptax.engines.mining import MiningEconomicsGenerator
from cryptax.exceptions import EmptyInputError, UnsupportedCostBasisMethodError
from cryptax.models.enums import CostBasisMethod
from cryptax.models.gains import GainEntry, RealizedGainEntry, UnrealizedCostBasis
from cryptax.models.income import IncomeYearEntry
from cryptax.models.mining import MiningDayEntry
from cryptax.models.transaction import Transaction

logger = logging.getLogger(__name__)


class EngineResult(BaseModel):
    accounts: list[str]
    gains: dict[str, list[GainEntry]] = Field(default_factory=dict)
    cost_basis: UnrealizedCostBasis = Field(default_factory=UnrealizedCostBasis)
    income: list[IncomeYearEntry] = Field(default_factory=list)
    mining: dict[str, list[MiningDayEntry]] = Field(default_factory=dict)

    def realized(self, account: str) -> list[RealizedGainEntry]:
        return [g for g in self.gains.get(account, []) if isinstance(g, RealizedGainEntry)]


def resolve_method(method: str | CostBasisMethod) -> CostBasisMethod:
    try:
        return CostBasisMethod(str(method).upper())
    except ValueError:
        raise UnsupportedCostBasisMethodError(str(method)) from None


class CryptaxEngine:
    """Runs every computation over one in-memory transaction set."""

    def __init__(self) -> None:
        self.allocator = IncomeYearAllocator()
        self.mining_generator = MiningEconomicsGenerator()

    def run(
        self,
        transactions_by_account: Mapping[str, Sequence[Transaction]],
        now: date,
        method: str | CostBasisMethod = CostBasisMethod.FIFO,
    ) -> EngineResult:
        """Compute gains, cost basis, yearly income and mining economics.

        Args:
            transactions_by_account: Validated transactions grouped by account
                label ("" is the default account). Order within a group does
                not matter.
            now: Reference date for aging lots that remain open.
            method: Cost-basis method; only FIFO is supported.

        Raises:
            UnsupportedCostBasisMethodError: For any method but FIFO.
            EmptyInputError: When there are no transactions at all.
            InsufficientLotsError: When an account disposes more than it holds.
        """
        resolve_method(method)

        grouped = {acct: list(txns) for acct, txns in transactions_by_account.items() if txns}
        if not grouped:
            raise EmptyInputError()
        accounts = sorted(grouped)
        logger.info(
            "Processing %d transactions across %d account(s)",
            sum(len(txns) for txns in grouped.values()),
            len(accounts),
        )

        gains: dict[str, list[GainEntry]] = {}
        for account in accounts:
            gains[account] = LotLedger(account).process(grouped[account], now)
        logger.info("Computed %d gain entries", sum(len(g) for g in gains.values()))

        cost_basis = summarize_unrealized(gains)

        all_transactions = [txn for account in accounts for txn in grouped[account]]
        income = self.allocator.allocate(all_transactions, gains, accounts)
        logger.info("Computed %d income entries", len(income))

        mining = {account: self.mining_generator.generate(grouped[account]) for account in accounts}
        logger.info("Computed %d mining entries", sum(len(m) for m in mining.values()))

        return EngineResult(
            accounts=accounts,
            gains=gains,
            cost_basis=cost_basis,
            income=income,
            mining=mining,
        )
