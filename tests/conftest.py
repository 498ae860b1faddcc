"""Shared test fixtures for Cryptax."""

from collections.abc import Callable
from datetime import datetime
from decimal import Decimal
from pathlib import Path

import pytest

from cryptax.models.enums import TransactionType
from cryptax.models.transaction import Transaction

LEDGER_HEADER = (
    "Acct,UTC Dttm,Txn Type,Src,Dest,Txn COIN,Txn USD,Txn USD/COIN,"
    "Txn Fee COIN,Brkr Fee USD,Term Months,Hash Rate (GH/s)"
)


def make_txn(
    txn_type: TransactionType,
    when: str,
    coin: str | None = None,
    usd: str | None = None,
    rate: str | None = None,
    fee: str | None = None,
    broker_fee: str | None = None,
    account: str = "",
    **extra,
) -> Transaction:
    """Build a Transaction from compact string arguments; `when` is YYYY-MM-DD."""
    return Transaction(
        account=account,
        timestamp=datetime.strptime(when, "%Y-%m-%d"),
        txn_type=txn_type,
        coin_amount=Decimal(coin) if coin is not None else None,
        usd_amount=Decimal(usd) if usd is not None else None,
        usd_per_unit=Decimal(rate) if rate is not None else None,
        coin_fee=Decimal(fee) if fee is not None else None,
        broker_fee_usd=Decimal(broker_fee) if broker_fee is not None else None,
        **extra,
    )


@pytest.fixture
def txn() -> Callable[..., Transaction]:
    return make_txn


@pytest.fixture
def sample_ledger_rows() -> list[str]:
    return [
        "BTC,2021-01-01 0:00,acq,Coinbase,Ledger,1.0,100,,,,,",
        "BTC,2021-06-01 0:00,disp,Ledger,Coinbase,1.0,150,,,,,",
        "BTC,2021-07-01 0:00,mpur,,,,1200,,,,12,100000",
        "BTC,2021-07-05 0:00,minc,,,0.0001,5,,,,,100000",
        "ETH,3/1/2021 12:30,inc,,Kraken,2.0,,1500,,,,",
    ]


@pytest.fixture
def write_ledger(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a ledger CSV with the standard header and the given rows."""

    def _write(*rows: str, name: str = "ledger.csv") -> Path:
        path = tmp_path / name
        path.write_text("\n".join([LEDGER_HEADER, *rows]) + "\n")
        return path

    return _write


@pytest.fixture
def ledger_file(write_ledger: Callable[..., Path], sample_ledger_rows: list[str]) -> Path:
    return write_ledger(*sample_ledger_rows)
