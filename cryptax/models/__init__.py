"""Data models for Cryptax."""

from cryptax.models.enums import CostBasisMethod, GainTerm, MiningContractType, TransactionType
from cryptax.models.gains import (
    GainEntry,
    RealizedGainEntry,
    UnrealizedCostBasis,
    UnrealizedGainEntry,
    holding_term,
)
from cryptax.models.income import IncomeColumn, IncomeYearEntry
from cryptax.models.mining import MiningContract, MiningDayEntry
from cryptax.models.transaction import Transaction, chronological

__all__ = [
    "chronological",
    "CostBasisMethod",
    "GainEntry",
    "GainTerm",
    "holding_term",
    "IncomeColumn",
    "IncomeYearEntry",
    "MiningContract",
    "MiningContractType",
    "MiningDayEntry",
    "RealizedGainEntry",
    "Transaction",
    "TransactionType",
    "UnrealizedCostBasis",
    "UnrealizedGainEntry",
]
