"""FIFO lot ledger: match disposals against the oldest open lots."""

import logging
from collections import deque
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from cryptax.exceptions import InsufficientLotsError, MissingPricingDataError
from cryptax.models.enums import ACQUISITION_TYPES, DISPOSAL_TYPES, TransactionType
from cryptax.models.gains import GainEntry, RealizedGainEntry, UnrealizedGainEntry
from cryptax.models.transaction import Transaction, chronological
from cryptax.numeric import ZERO, divide, is_negligible, precise

logger = logging.getLogger(__name__)


@dataclass
class TaxLot:
    """An open acquisition. `remaining` shrinks as disposals consume it."""

    acquired_at: datetime
    remaining: Decimal
    cost_per_unit: Decimal
    source: str | None = None
    destination: str | None = None


@dataclass
class _Disposal:
    disposed_at: datetime
    remaining: Decimal
    rate: Decimal
    source: str | None = None


class LotLedger:
    """Converts one account's transaction stream into realized and unrealized gains."""

    def __init__(self, account: str = ""):
        self.account = account
        self._lots: deque[TaxLot] = deque()

    @property
    def open_lots(self) -> list[TaxLot]:
        return list(self._lots)

    def process(self, transactions: Iterable[Transaction], now: date) -> list[GainEntry]:
        """Run FIFO matching over the account's transactions.

        Args:
            transactions: The account's transactions in any order; they are
                sorted chronologically before matching.
            now: Reference date used to age lots that remain open.

        Returns:
            Realized gain entries in disposal order, followed by one
            unrealized entry per lot still open.
        """
        entries: list[GainEntry] = []
        with precise():
            for txn in chronological(transactions):
                if txn.txn_type in ACQUISITION_TYPES:
                    self.acquire(txn)
                elif txn.txn_type in DISPOSAL_TYPES:
                    entries.extend(self.dispose(txn))
            entries.extend(self.unrealized(now))
        return entries

    def acquire(self, txn: Transaction) -> TaxLot | None:
        """Open a new lot at the transaction's fee-inclusive cost per unit."""
        coin_amount = txn.coin_amount
        if coin_amount is None or is_negligible(coin_amount):
            logger.info("Skipping zero-amount %s at %s", txn.txn_type, txn.timestamp)
            return None

        with precise():
            cost_per_unit = self._cost_per_unit(txn, coin_amount)
        lot = TaxLot(
            acquired_at=txn.timestamp,
            remaining=coin_amount,
            cost_per_unit=cost_per_unit,
            source=txn.source,
            destination=txn.destination,
        )
        self._lots.append(lot)
        return lot

    def dispose(self, txn: Transaction) -> list[RealizedGainEntry]:
        """Consume the oldest lots for the coins this transaction gives up.

        A plain transfer between own wallets only disposes of its coin fee.
        """
        amount = self._disposed_amount(txn)
        if is_negligible(amount):
            logger.info("Skipping non-taxable %s at %s", txn.txn_type, txn.timestamp)
            return []

        disposal = _Disposal(
            disposed_at=txn.timestamp,
            remaining=amount,
            rate=self._disposal_rate(txn),
            source=txn.source,
        )
        results: list[RealizedGainEntry] = []
        with precise():
            for lot, consumed in self._consume(disposal):
                proceeds = consumed * disposal.rate
                cost_basis = consumed * lot.cost_per_unit
                gain = proceeds - cost_basis
                # Pass-through movements can net to zero gain; those are not reported
                if is_negligible(gain):
                    continue
                results.append(
                    RealizedGainEntry(
                        date_acquired=lot.acquired_at.date(),
                        date_disposed=disposal.disposed_at.date(),
                        broker_acquired=lot.destination,
                        broker_disposed=disposal.source,
                        asset_amount=consumed,
                        proceeds=proceeds,
                        cost_basis=cost_basis,
                        gain=gain,
                    )
                )
        return results

    def unrealized(self, now: date) -> list[UnrealizedGainEntry]:
        with precise():
            return [
                UnrealizedGainEntry(
                    date_acquired=lot.acquired_at.date(),
                    broker_acquired=lot.source,
                    asset_amount=lot.remaining,
                    cost_basis=lot.remaining * lot.cost_per_unit,
                    as_of=now,
                )
                for lot in self._lots
            ]

    def _consume(self, disposal: _Disposal) -> Iterator[tuple[TaxLot, Decimal]]:
        while not is_negligible(disposal.remaining):
            if not self._lots:
                raise InsufficientLotsError(self.account, disposal.disposed_at, disposal.remaining)
            lot = self._lots[0]
            consumed = min(disposal.remaining, lot.remaining)
            yield lot, consumed
            disposal.remaining -= consumed
            lot.remaining -= consumed
            if is_negligible(lot.remaining):
                self._lots.popleft()

    @staticmethod
    def _cost_per_unit(txn: Transaction, coin_amount: Decimal) -> Decimal:
        if txn.usd_amount is not None:
            cost = txn.usd_amount + (txn.broker_fee_usd or ZERO)
            return divide(cost, coin_amount)
        if txn.usd_per_unit is not None:
            if txn.broker_fee_usd is None:
                return txn.usd_per_unit
            cost = coin_amount * txn.usd_per_unit + txn.broker_fee_usd
            return divide(cost, coin_amount)
        # Unreachable for validated transactions
        raise MissingPricingDataError(txn.timestamp, f"{txn.txn_type} cost basis")

    @staticmethod
    def _disposed_amount(txn: Transaction) -> Decimal:
        amount = txn.coin_fee or ZERO
        if txn.txn_type != TransactionType.TRANSFER and txn.coin_amount is not None:
            amount += txn.coin_amount
        return amount

    @staticmethod
    def _disposal_rate(txn: Transaction) -> Decimal:
        if txn.usd_amount is not None and txn.coin_amount:
            return divide(txn.usd_amount, txn.coin_amount)
        if txn.usd_per_unit is not None:
            return txn.usd_per_unit
        raise MissingPricingDataError(txn.timestamp, f"{txn.txn_type} proceeds")
