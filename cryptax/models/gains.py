"""Realized and unrealized gain records, and the unrealized cost-basis summary."""

from datetime import date
from decimal import Decimal
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from cryptax.calendar_utils import add_years
from cryptax.models.enums import GainTerm


def holding_term(start: date, end: date) -> GainTerm:
    """Long-term only when held strictly more than one year.

    A disposal exactly one year after acquisition is still short-term.
    """
    if add_years(end, -1) > start:
        return GainTerm.LONG_TERM
    return GainTerm.SHORT_TERM


class _GainFields(BaseModel):
    model_config = ConfigDict(frozen=True)

    date_acquired: date
    broker_acquired: str | None = None
    asset_amount: Decimal
    cost_basis: Decimal


class RealizedGainEntry(_GainFields):
    """One FIFO match segment between a lot and a disposal."""

    kind: Literal["realized"] = "realized"
    date_disposed: date
    broker_disposed: str | None = None
    proceeds: Decimal
    gain: Decimal

    @property
    def term(self) -> GainTerm:
        return holding_term(self.date_acquired, self.date_disposed)

    @property
    def tax_year(self) -> int:
        return self.date_disposed.year


class UnrealizedGainEntry(_GainFields):
    """A lot still open at the end of the ledger, aged against `as_of`."""

    kind: Literal["unrealized"] = "unrealized"
    as_of: date

    @property
    def term(self) -> GainTerm:
        return holding_term(self.date_acquired, self.as_of)


GainEntry = Annotated[RealizedGainEntry | UnrealizedGainEntry, Field(discriminator="kind")]


class UnrealizedCostBasis(BaseModel):
    """Cross-account summary of open lots split by holding term."""

    accounts: list[str] = Field(default_factory=list)
    short_term: dict[str, Decimal | None] = Field(default_factory=dict)
    long_term: dict[str, Decimal | None] = Field(default_factory=dict)
    # Average USD cost per coin across all open lots
    average: dict[str, Decimal | None] = Field(default_factory=dict)

    def short_term_for(self, account: str) -> Decimal | None:
        return self.short_term.get(account)

    def long_term_for(self, account: str) -> Decimal | None:
        return self.long_term.get(account)

    def average_for(self, account: str) -> Decimal | None:
        return self.average.get(account)
