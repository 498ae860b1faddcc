"""Income/expense year allocator.

Walks the merged, chronologically sorted transaction stream and produces one
IncomeYearEntry per calendar year, with no gaps, from the first year with
activity through the last year that still has income, capital gains or
amortized mining expense pending.
"""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from decimal import Decimal
from functools import reduce

from cryptax.engines.amortizer import CalendarAmortizer, YearAccountAmounts
from cryptax.exceptions import OrderingViolationError
from cryptax.models.enums import INCOME_EXPENSE_TYPES, GainTerm, TransactionType
from cryptax.models.gains import GainEntry, RealizedGainEntry
from cryptax.models.income import IncomeYearEntry
from cryptax.models.transaction import Transaction, chronological
from cryptax.numeric import precise


def _add(amounts: dict[str, Decimal], account: str, value: Decimal) -> None:
    amounts[account] = amounts.get(account, Decimal("0")) + value


@dataclass
class YearAllocationState:
    """Everything the allocator carries from one transaction to the next.

    `cursor` is the year currently being accumulated. The three running sums
    belong to that year only; the per-year maps hold values for the cursor
    year and later, and are drained as each year is flushed.
    """

    accounts: list[str]
    short_term_gains: YearAccountAmounts = field(default_factory=dict)
    long_term_gains: YearAccountAmounts = field(default_factory=dict)
    amortized_expense: YearAccountAmounts = field(default_factory=dict)
    cursor: int | None = None
    ordinary_income: dict[str, Decimal] = field(default_factory=dict)
    mining_income: dict[str, Decimal] = field(default_factory=dict)
    mining_expense: dict[str, Decimal] = field(default_factory=dict)
    entries: list[IncomeYearEntry] = field(default_factory=list)

    @property
    def has_pending(self) -> bool:
        return bool(
            self.ordinary_income
            or self.mining_income
            or self.mining_expense
            or self.amortized_expense
            or self.short_term_gains
            or self.long_term_gains
        )

    def open_at(self, year: int) -> None:
        """Start the cursor, first emitting any capital-gain-only years before it."""
        gain_years = [y for y in (*self.short_term_gains, *self.long_term_gains) if y < year]
        self.cursor = min(gain_years, default=year)
        while self.cursor < year:
            self.flush_year()

    def flush_year(self) -> IncomeYearEntry:
        """Emit the cursor year, drain its per-year values and advance."""
        year = self.cursor
        entry = IncomeYearEntry(
            tax_year=year,
            accounts=list(self.accounts),
            ordinary_income=self.ordinary_income,
            short_term_capital_gain=self.short_term_gains.pop(year, {}),
            long_term_capital_gain=self.long_term_gains.pop(year, {}),
            mining_income=self.mining_income,
            mining_expense=self.mining_expense,
            mining_amortized_expense=self.amortized_expense.pop(year, {}),
        )
        self.entries.append(entry)
        self.cursor = year + 1
        self.ordinary_income = {}
        self.mining_income = {}
        self.mining_expense = {}
        return entry


class IncomeYearAllocator:
    """Buckets income and mining expense by tax year and account."""

    def __init__(self, amortizer: CalendarAmortizer | None = None):
        self.amortizer = amortizer or CalendarAmortizer()

    def allocate(
        self,
        transactions: Iterable[Transaction],
        gains_by_account: Mapping[str, Sequence[GainEntry]],
        accounts: Sequence[str] | None = None,
    ) -> list[IncomeYearEntry]:
        """Produce one IncomeYearEntry per year, contiguous and increasing.

        Args:
            transactions: All accounts' transactions, in any order.
            gains_by_account: Lot ledger output per account. Only realized
                entries contribute capital gains.
            accounts: Account labels to list on every entry; defaults to the
                keys of `gains_by_account`.
        """
        state = self.initial_state(gains_by_account, accounts)
        income_stream = [
            txn for txn in chronological(transactions) if txn.txn_type in INCOME_EXPENSE_TYPES
        ]
        with precise():
            state = reduce(self.step, income_stream, state)
        return self.finish(state).entries

    def initial_state(
        self,
        gains_by_account: Mapping[str, Sequence[GainEntry]],
        accounts: Sequence[str] | None = None,
    ) -> YearAllocationState:
        if accounts is None:
            accounts = sorted(gains_by_account)
        state = YearAllocationState(accounts=list(accounts))
        with precise():
            for account, gains in gains_by_account.items():
                for gain in gains:
                    if not isinstance(gain, RealizedGainEntry):
                        continue
                    bucket = (
                        state.long_term_gains
                        if gain.term == GainTerm.LONG_TERM
                        else state.short_term_gains
                    )
                    _add(bucket.setdefault(gain.tax_year, {}), account, gain.gain)
        return state

    def step(self, state: YearAllocationState, txn: Transaction) -> YearAllocationState:
        """Fold one income/expense transaction into the state."""
        if state.cursor is None:
            state.open_at(txn.year)
        if txn.year < state.cursor:
            raise OrderingViolationError(txn.timestamp, state.cursor)
        while state.cursor < txn.year:
            state.flush_year()

        amount = txn.calculated_usd_amount
        match txn.txn_type:
            case TransactionType.INCOME:
                _add(state.ordinary_income, txn.account, amount)
            case TransactionType.MNG_INCOME:
                _add(state.mining_income, txn.account, amount)
            case TransactionType.MNG_PURCHASE | TransactionType.MNG_REINVEST:
                _add(state.mining_expense, txn.account, amount)
                self.amortizer.amortize_into(
                    state.amortized_expense,
                    txn.account,
                    txn.trade_date,
                    txn.term_months,
                    amount,
                )
        return state

    def finish(self, state: YearAllocationState) -> YearAllocationState:
        """Flush remaining years until nothing is pending."""
        if state.cursor is None:
            gain_years = [*state.short_term_gains, *state.long_term_gains]
            if not gain_years:
                return state
            state.open_at(min(gain_years))
        while state.has_pending:
            state.flush_year()
        return state
