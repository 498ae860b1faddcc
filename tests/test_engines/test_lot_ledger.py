"""Tests for the FIFO lot ledger."""

from datetime import date
from decimal import Decimal

import pytest

from cryptax.engines.lot_ledger import LotLedger
from cryptax.exceptions import InsufficientLotsError
from cryptax.models.enums import GainTerm, TransactionType
from cryptax.models.gains import RealizedGainEntry, UnrealizedGainEntry

NOW = date(2023, 1, 1)


def realized(entries):
    return [e for e in entries if isinstance(e, RealizedGainEntry)]


def unrealized(entries):
    return [e for e in entries if isinstance(e, UnrealizedGainEntry)]


class TestFIFOMatching:
    def setup_method(self):
        self.ledger = LotLedger("BTC")

    def test_single_lot_short_term_gain(self, txn):
        entries = self.ledger.process(
            [
                txn(TransactionType.ACQUIRE, "2021-01-01", coin="1.0", usd="100"),
                txn(TransactionType.DISPOSE, "2021-06-01", coin="1.0", usd="150"),
            ],
            NOW,
        )
        assert len(entries) == 1
        gain = entries[0]
        assert isinstance(gain, RealizedGainEntry)
        assert gain.proceeds == Decimal("150")
        assert gain.cost_basis == Decimal("100")
        assert gain.gain == Decimal("50")
        assert gain.term == GainTerm.SHORT_TERM
        assert self.ledger.open_lots == []

    def test_partial_disposal_long_term_with_remainder(self, txn):
        entries = self.ledger.process(
            [
                txn(TransactionType.ACQUIRE, "2020-01-01", coin="2.0", usd="200"),
                txn(TransactionType.DISPOSE, "2021-02-01", coin="1.0", usd="300"),
            ],
            NOW,
        )
        [gain] = realized(entries)
        assert gain.proceeds == Decimal("300")
        assert gain.cost_basis == Decimal("100")
        assert gain.gain == Decimal("200")
        assert gain.term == GainTerm.LONG_TERM

        [lot] = unrealized(entries)
        assert lot.asset_amount == Decimal("1.0")
        assert lot.cost_basis == Decimal("100")
        assert lot.as_of == NOW

    def test_oldest_lot_consumed_first_regardless_of_input_order(self, txn):
        entries = self.ledger.process(
            [
                txn(TransactionType.DISPOSE, "2021-06-01", coin="1.5", usd="300"),
                txn(TransactionType.ACQUIRE, "2021-02-01", coin="1", usd="120"),
                txn(TransactionType.ACQUIRE, "2021-01-01", coin="1", usd="100"),
            ],
            NOW,
        )
        first, second = realized(entries)
        assert first.date_acquired == date(2021, 1, 1)
        assert first.asset_amount == Decimal("1")
        assert first.cost_basis == Decimal("100")
        assert first.proceeds == Decimal("200")
        assert second.date_acquired == date(2021, 2, 1)
        assert second.asset_amount == Decimal("0.5")
        assert second.cost_basis == Decimal("60")
        assert second.proceeds == Decimal("100")

        [lot] = unrealized(entries)
        assert lot.date_acquired == date(2021, 2, 1)
        assert lot.asset_amount == Decimal("0.5")

    def test_broker_fee_included_in_cost(self, txn):
        self.ledger.process(
            [txn(TransactionType.ACQUIRE, "2021-01-01", coin="2", usd="100", broker_fee="10")],
            NOW,
        )
        [lot] = self.ledger.open_lots
        assert lot.cost_per_unit == Decimal("55")

    def test_rate_only_acquisition_with_fee(self, txn):
        self.ledger.process(
            [txn(TransactionType.ACQUIRE, "2021-01-01", coin="2", rate="50", broker_fee="10")],
            NOW,
        )
        [lot] = self.ledger.open_lots
        assert lot.cost_per_unit == Decimal("55")

    def test_disposal_at_rate(self, txn):
        entries = self.ledger.process(
            [
                txn(TransactionType.ACQUIRE, "2021-01-01", coin="1", usd="100"),
                txn(TransactionType.DISPOSE, "2021-03-01", coin="0.5", rate="400"),
            ],
            NOW,
        )
        [gain] = realized(entries)
        assert gain.proceeds == Decimal("200")
        assert gain.gain == Decimal("150")

    def test_zero_gain_segment_not_reported(self, txn):
        entries = self.ledger.process(
            [
                txn(TransactionType.ACQUIRE, "2021-01-01", coin="1", usd="100"),
                txn(TransactionType.DISPOSE, "2021-03-01", coin="1", usd="100"),
            ],
            NOW,
        )
        assert entries == []
        assert self.ledger.open_lots == []

    def test_zero_amount_acquisition_skipped(self, txn):
        self.ledger.process(
            [txn(TransactionType.ACQUIRE, "2021-01-01", coin="0", usd="0")],
            NOW,
        )
        assert self.ledger.open_lots == []

    def test_income_opens_a_lot(self, txn):
        entries = self.ledger.process(
            [txn(TransactionType.MNG_INCOME, "2021-01-01", coin="0.01", usd="300")],
            NOW,
        )
        [lot] = unrealized(entries)
        assert lot.cost_basis == Decimal("300")

    def test_negligible_lot_remainder_closes_lot(self, txn):
        entries = self.ledger.process(
            [
                txn(TransactionType.ACQUIRE, "2021-01-01", coin="1.0000000000000000000000005", usd="100"),
                txn(TransactionType.DISPOSE, "2021-03-01", coin="1", usd="150"),
            ],
            NOW,
        )
        assert len(realized(entries)) == 1
        assert unrealized(entries) == []
        assert self.ledger.open_lots == []

    def test_negligible_disposal_remainder_is_not_a_shortfall(self, txn):
        entries = self.ledger.process(
            [
                txn(TransactionType.ACQUIRE, "2021-01-01", coin="1", usd="100"),
                txn(TransactionType.DISPOSE, "2021-03-01", coin="1.0000000000000000000000005", usd="150"),
            ],
            NOW,
        )
        [gain] = realized(entries)
        assert gain.asset_amount == Decimal("1")
        assert unrealized(entries) == []

    def test_broker_labels(self, txn):
        entries = self.ledger.process(
            [
                txn(
                    TransactionType.ACQUIRE,
                    "2021-01-01",
                    coin="2",
                    usd="200",
                    source="Coinbase",
                    destination="Ledger",
                ),
                txn(
                    TransactionType.DISPOSE,
                    "2021-03-01",
                    coin="1",
                    usd="300",
                    source="Ledger",
                    destination="Kraken",
                ),
            ],
            NOW,
        )
        [gain] = realized(entries)
        assert gain.broker_acquired == "Ledger"
        assert gain.broker_disposed == "Ledger"
        [lot] = unrealized(entries)
        assert lot.broker_acquired == "Coinbase"


class TestTransfers:
    @pytest.fixture(autouse=True)
    def _setup(self, txn):
        self.ledger = LotLedger("BTC")
        self.acquire = txn(TransactionType.ACQUIRE, "2021-01-01", coin="1", usd="100")

    def test_transfer_without_fee_is_not_a_disposal(self, txn):
        entries = self.ledger.process(
            [self.acquire, txn(TransactionType.TRANSFER, "2021-02-01", coin="0.5")],
            NOW,
        )
        assert realized(entries) == []
        [lot] = unrealized(entries)
        assert lot.asset_amount == Decimal("1")

    def test_transfer_disposes_only_its_fee(self, txn):
        entries = self.ledger.process(
            [
                self.acquire,
                txn(TransactionType.TRANSFER, "2021-02-01", coin="0.5", fee="0.01", rate="200"),
            ],
            NOW,
        )
        [gain] = realized(entries)
        assert gain.asset_amount == Decimal("0.01")
        assert gain.proceeds == Decimal("2")
        assert gain.cost_basis == Decimal("1")
        [lot] = unrealized(entries)
        assert lot.asset_amount == Decimal("0.99")

    def test_dispose_fee_adds_to_disposed_amount(self, txn):
        entries = self.ledger.process(
            [
                self.acquire,
                txn(TransactionType.DISPOSE, "2021-02-01", coin="0.5", fee="0.1", rate="200"),
            ],
            NOW,
        )
        [gain] = realized(entries)
        assert gain.asset_amount == Decimal("0.6")
        [lot] = unrealized(entries)
        assert lot.asset_amount == Decimal("0.4")


class TestInsufficientLots:
    def test_disposing_more_than_acquired(self, txn):
        ledger = LotLedger("BTC")
        with pytest.raises(InsufficientLotsError) as exc_info:
            ledger.process(
                [
                    txn(TransactionType.ACQUIRE, "2021-01-01", coin="1", usd="100"),
                    txn(TransactionType.DISPOSE, "2021-02-01", coin="1.5", usd="300"),
                ],
                NOW,
            )
        assert exc_info.value.account == "BTC"
        assert exc_info.value.shortfall == Decimal("0.5")

    def test_disposal_with_no_lots(self, txn):
        with pytest.raises(InsufficientLotsError):
            LotLedger().process(
                [txn(TransactionType.DISPOSE, "2021-02-01", coin="1", usd="100")],
                NOW,
            )


class TestConservation:
    def test_cost_basis_is_conserved(self, txn):
        acquisitions = [
            txn(TransactionType.ACQUIRE, "2020-01-01", coin="0.7", usd="7000"),
            txn(TransactionType.INCOME, "2020-05-01", coin="0.3", usd="2700"),
            txn(TransactionType.ACQUIRE, "2021-01-01", coin="1.25", usd="36000", broker_fee="15"),
        ]
        disposals = [
            txn(TransactionType.DISPOSE, "2020-08-01", coin="0.5", usd="5750"),
            txn(TransactionType.DISPOSE, "2021-03-01", coin="0.9", usd="45000"),
            txn(TransactionType.TRANSFER, "2021-04-01", coin="0.2", fee="0.0005", usd="11000"),
        ]
        entries = LotLedger().process(acquisitions + disposals, NOW)

        acquired_cost = Decimal("7000") + Decimal("2700") + Decimal("36015")
        accounted = sum(e.cost_basis for e in entries)
        assert abs(accounted - acquired_cost) < Decimal("1E-20")

        held = sum(e.asset_amount for e in unrealized(entries))
        assert held == Decimal("2.25") - Decimal("0.5") - Decimal("0.9") - Decimal("0.0005")
