"""Per-tax-year income, capital gain and mining expense totals."""

from decimal import Decimal
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class IncomeColumn(StrEnum):
    ORDINARY_INCOME = "Ord Income"
    SHORT_TERM_CAPITAL_GAIN = "Short-Term Cap Gains"
    LONG_TERM_CAPITAL_GAIN = "Long-Term Cap Gains"
    MINING_INCOME = "Mining Income"
    MINING_EXPENSE = "Mining Expense"
    MINING_AMORTIZED_EXPENSE = "Mining Amortized Expense"


class IncomeYearEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    tax_year: int
    accounts: list[str] = Field(default_factory=list)
    ordinary_income: dict[str, Decimal] = Field(default_factory=dict)
    short_term_capital_gain: dict[str, Decimal] = Field(default_factory=dict)
    long_term_capital_gain: dict[str, Decimal] = Field(default_factory=dict)
    mining_income: dict[str, Decimal] = Field(default_factory=dict)
    # Cash paid for contracts this year
    mining_expense: dict[str, Decimal] = Field(default_factory=dict)
    # This year's share of contract costs spread across their terms
    mining_amortized_expense: dict[str, Decimal] = Field(default_factory=dict)

    def value(self, column: IncomeColumn, account: str) -> Decimal | None:
        return self._column_map(column).get(account)

    def _column_map(self, column: IncomeColumn) -> dict[str, Decimal]:
        match column:
            case IncomeColumn.ORDINARY_INCOME:
                return self.ordinary_income
            case IncomeColumn.SHORT_TERM_CAPITAL_GAIN:
                return self.short_term_capital_gain
            case IncomeColumn.LONG_TERM_CAPITAL_GAIN:
                return self.long_term_capital_gain
            case IncomeColumn.MINING_INCOME:
                return self.mining_income
            case IncomeColumn.MINING_EXPENSE:
                return self.mining_expense
            case IncomeColumn.MINING_AMORTIZED_EXPENSE:
                return self.mining_amortized_expense
