"""Ledger transaction model."""

from collections.abc import Iterable
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from cryptax.exceptions import MissingPricingDataError
from cryptax.models.enums import MINING_CONTRACT_TYPES, TransactionType

# Accepted timestamp layouts: "2021-3-7 9:05" and "3/7/2021 9:05"
DASH_FORMAT = "%Y-%m-%d %H:%M"
SLASH_FORMAT = "%m/%d/%Y %H:%M"


def parse_timestamp(value: str) -> datetime:
    text = value.strip()
    fmt = DASH_FORMAT if "-" in text else SLASH_FORMAT
    return datetime.strptime(text, fmt)


class Transaction(BaseModel):
    """One validated ledger event. Immutable once constructed."""

    model_config = ConfigDict(frozen=True)

    account: str = ""
    timestamp: datetime
    txn_type: TransactionType
    source: str | None = None
    destination: str | None = None
    coin_amount: Decimal | None = Field(default=None, ge=0)
    usd_amount: Decimal | None = Field(default=None, ge=0)
    usd_per_unit: Decimal | None = Field(default=None, ge=0)
    coin_fee: Decimal | None = Field(default=None, ge=0)
    broker_fee_usd: Decimal | None = Field(default=None, ge=0)
    term_months: int | None = Field(default=None, gt=0)
    hashrate: int | None = Field(default=None, ge=0)

    @field_validator("timestamp", mode="before")
    @classmethod
    def _parse_timestamp(cls, value: object) -> object:
        if isinstance(value, str):
            return parse_timestamp(value)
        return value

    @field_validator("account", mode="before")
    @classmethod
    def _normalize_account(cls, value: object) -> object:
        if value is None:
            return ""
        if isinstance(value, str):
            return value.strip()
        return value

    @model_validator(mode="after")
    def _check_required_fields(self) -> "Transaction":
        has_price = self.usd_amount is not None or self.usd_per_unit is not None
        match self.txn_type:
            case (
                TransactionType.ACQUIRE
                | TransactionType.INCOME
                | TransactionType.DISPOSE
                | TransactionType.MNG_INCOME
            ):
                if self.coin_amount is None or not has_price:
                    raise ValueError(
                        f"{self.txn_type} requires a coin amount and a USD amount or USD/unit"
                    )
            case TransactionType.TRANSFER:
                if self.coin_amount is None:
                    raise ValueError("TRANSFER requires a coin amount")
                if self.coin_fee is not None and not has_price:
                    raise ValueError("TRANSFER with a coin fee requires a USD amount or USD/unit")
            case TransactionType.MNG_PURCHASE | TransactionType.MNG_REINVEST:
                if self.term_months is None or self.hashrate is None:
                    raise ValueError(f"{self.txn_type} requires term months and hashrate")
                if self.coin_amount is None and self.usd_amount is None:
                    raise ValueError(f"{self.txn_type} requires a coin amount or a USD amount")
                if self.coin_amount is not None and not has_price:
                    raise ValueError(
                        f"{self.txn_type} with a coin amount requires a USD amount or USD/unit"
                    )
        return self

    @property
    def trade_date(self) -> date:
        return self.timestamp.date()

    @property
    def year(self) -> int:
        return self.timestamp.year

    @property
    def is_mining_contract(self) -> bool:
        return self.txn_type in MINING_CONTRACT_TYPES

    @property
    def calculated_usd_amount(self) -> Decimal:
        """USD amount, or coin amount x USD/unit when only the rate is known."""
        if self.usd_amount is not None:
            return self.usd_amount
        if self.coin_amount is None or self.usd_per_unit is None:
            raise MissingPricingDataError(self.timestamp, f"{self.txn_type} USD amount")
        return self.coin_amount * self.usd_per_unit


def chronological(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Sort by timestamp; transactions at the same instant keep their input order."""
    return sorted(transactions, key=lambda txn: txn.timestamp)
