"""Daily mining economics generator.

Rebuilds a continuous day-by-day series from sparse contract purchases,
reinvestments and mining payouts for one account.
"""

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal

from cryptax.calendar_utils import add_months, days_between, iter_days
from cryptax.models.enums import MiningContractType, TransactionType
from cryptax.models.mining import MiningContract, MiningDayEntry
from cryptax.models.transaction import Transaction, chronological
from cryptax.numeric import ONE, ZERO, divide, precise

logger = logging.getLogger(__name__)

# GH/s -> EH/s
HASHRATE_TO_EXAHASH = Decimal(1_000_000_000)


@dataclass
class DailyIncome:
    usd: Decimal = ZERO
    coin: Decimal | None = None
    hashrate: int | None = None

    def add(self, txn: Transaction) -> None:
        self.usd += txn.calculated_usd_amount
        if txn.coin_amount is not None:
            self.coin = (self.coin or ZERO) + txn.coin_amount
        if txn.hashrate is not None:
            self.hashrate = (self.hashrate or 0) + txn.hashrate


def build_contract(txn: Transaction) -> MiningContract:
    """Turn a purchase or reinvestment into a straight-line contract."""
    acquired = txn.trade_date
    end = add_months(acquired, txn.term_months)
    total = txn.calculated_usd_amount
    contract_type = (
        MiningContractType.REINVESTMENT
        if txn.txn_type == TransactionType.MNG_REINVEST
        else MiningContractType.PURCHASE
    )
    return MiningContract(
        contract_type=contract_type,
        acquisition_date=acquired,
        start_date=acquired + timedelta(days=1),
        end_date=end,
        total_amount_usd=total,
        per_day_amount_usd=divide(total, Decimal(days_between(acquired, end))),
    )


class MiningEconomicsGenerator:
    """Produces a dense MiningDayEntry series for one account."""

    def generate(self, transactions: Iterable[Transaction]) -> list[MiningDayEntry]:
        """Walk every day from the first purchase to the last contract end.

        Returns an empty list when the account never bought a contract.
        """
        contracts: list[MiningContract] = []
        income_by_day: dict[date, DailyIncome] = {}
        window_start: date | None = None
        window_end: date | None = None

        with precise():
            for txn in chronological(transactions):
                if txn.is_mining_contract:
                    contract = build_contract(txn)
                    contracts.append(contract)
                    if window_start is None and contract.contract_type == MiningContractType.PURCHASE:
                        window_start = contract.acquisition_date
                    if window_end is None or contract.end_date > window_end:
                        window_end = contract.end_date
                elif txn.txn_type == TransactionType.MNG_INCOME:
                    income_by_day.setdefault(txn.trade_date, DailyIncome()).add(txn)

            if window_start is None or window_end is None or window_start >= window_end:
                logger.info("No mining purchase contracts found")
                return []
            return list(self._walk(window_start, window_end, contracts, income_by_day))

    def _walk(
        self,
        window_start: date,
        window_end: date,
        contracts: list[MiningContract],
        income_by_day: dict[date, DailyIncome],
    ) -> Iterator[MiningDayEntry]:
        cum_basis_purchase: Decimal | None = None
        cum_income: Decimal | None = None
        weighted_rate_sum = ZERO
        weight_sum = ZERO

        for day in iter_days(window_start, window_end):
            purchase: Decimal | None = None
            reinvestment: Decimal | None = None
            basis_purchase: Decimal | None = None
            basis_all: Decimal | None = None

            for contract in contracts:
                is_purchase = contract.contract_type == MiningContractType.PURCHASE
                if contract.acquisition_date == day:
                    if is_purchase:
                        purchase = (purchase or ZERO) + contract.total_amount_usd
                    else:
                        reinvestment = (reinvestment or ZERO) + contract.total_amount_usd
                if contract.is_active_on(day):
                    basis_all = (basis_all or ZERO) + contract.per_day_amount_usd
                    if is_purchase:
                        basis_purchase = (basis_purchase or ZERO) + contract.per_day_amount_usd

            if basis_purchase is not None:
                cum_basis_purchase = (cum_basis_purchase or ZERO) + basis_purchase

            daily = income_by_day.get(day)
            income = daily.usd if daily else None
            income_coin = daily.coin if daily else None
            hashrate = daily.hashrate if daily else None
            if income is not None:
                cum_income = (cum_income or ZERO) + income

            usd_per_coin = None
            if income is not None and income_coin:
                usd_per_coin = divide(income, income_coin)

            mining_yield = None
            if income_coin is not None and hashrate:
                mining_yield = divide(income_coin * HASHRATE_TO_EXAHASH, Decimal(hashrate))

            day_rate_all = None
            avg_day_rate_all = None
            day_rate_purchase = None
            if income is not None and basis_all:
                day_rate_all = divide(income, basis_all) - ONE
                weighted_rate_sum += day_rate_all * income
                weight_sum += income
                if weight_sum:
                    avg_day_rate_all = divide(weighted_rate_sum, weight_sum)
                if basis_purchase:
                    day_rate_purchase = divide(income, basis_purchase) - ONE

            yield MiningDayEntry(
                day=day,
                purchase=purchase,
                reinvestment=reinvestment,
                basis_purchase=basis_purchase,
                cum_basis_purchase=cum_basis_purchase,
                basis_purchase_and_reinvest=basis_all,
                income=income,
                cum_income=cum_income,
                hashrate=hashrate,
                usd_per_coin=usd_per_coin,
                mining_yield=mining_yield,
                day_rate_purchase_and_reinvest=day_rate_all,
                avg_day_rate_purchase_and_reinvest=avg_day_rate_all,
                day_rate_purchase=day_rate_purchase,
            )
