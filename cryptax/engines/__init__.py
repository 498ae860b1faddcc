"""Tax lot and mining economics engines."""

from cryptax.engines.allocator import IncomeYearAllocator, YearAllocationState
from cryptax.engines.amortizer import CalendarAmortizer
from cryptax.engines.cost_basis import summarize_unrealized
from cryptax.engines.lot_ledger import LotLedger, TaxLot
from cryptax.engines.mining import MiningEconomicsGenerator
from cryptax.engines.pipeline import CryptaxEngine, EngineResult

__all__ = [
    "CalendarAmortizer",
    "CryptaxEngine",
    "EngineResult",
    "IncomeYearAllocator",
    "LotLedger",
    "MiningEconomicsGenerator",
    "summarize_unrealized",
    "TaxLot",
    "YearAllocationState",
]
