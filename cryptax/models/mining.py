"""Mining contract and daily mining economics models."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from cryptax.models.enums import MiningContractType


class MiningContract(BaseModel):
    model_config = ConfigDict(frozen=True)

    contract_type: MiningContractType
    acquisition_date: date
    # Inclusive; a contract earns from the day after it is bought
    start_date: date
    end_date: date
    total_amount_usd: Decimal
    per_day_amount_usd: Decimal

    def is_active_on(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


class MiningDayEntry(BaseModel):
    """One calendar day of mining economics. None means no data, not zero."""

    model_config = ConfigDict(frozen=True)

    day: date
    purchase: Decimal | None = None
    reinvestment: Decimal | None = None
    basis_purchase: Decimal | None = None
    cum_basis_purchase: Decimal | None = None
    basis_purchase_and_reinvest: Decimal | None = None
    income: Decimal | None = None
    cum_income: Decimal | None = None
    hashrate: int | None = None
    usd_per_coin: Decimal | None = None
    # Coin earned per EH/s
    mining_yield: Decimal | None = None
    day_rate_purchase_and_reinvest: Decimal | None = None
    avg_day_rate_purchase_and_reinvest: Decimal | None = None
    day_rate_purchase: Decimal | None = None

    @property
    def year(self) -> int:
        return self.day.year

    @property
    def gain_purchase(self) -> Decimal | None:
        if self.income is None or self.basis_purchase is None:
            return None
        return self.income - self.basis_purchase

    @property
    def gain_purchase_and_reinvest(self) -> Decimal | None:
        if self.income is None or self.basis_purchase_and_reinvest is None:
            return None
        return self.income - self.basis_purchase_and_reinvest
