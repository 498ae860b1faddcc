"""CSV writers for gains, unrealized cost basis, income years and mining days."""

import csv
import logging
from collections.abc import Collection, Sequence
from datetime import datetime
from pathlib import Path

from cryptax.config import get_settings
from cryptax.engines.pipeline import EngineResult
from cryptax.exceptions import ReportWriteError
from cryptax.models.gains import GainEntry, RealizedGainEntry, UnrealizedCostBasis
from cryptax.models.income import IncomeColumn, IncomeYearEntry
from cryptax.models.mining import MiningDayEntry
from cryptax.numeric import to_plain

logger = logging.getLogger(__name__)

GAIN_HEADER = [
    "Tax Year",
    "Term",
    "Date Acquired",
    "Date Disposed",
    "Broker Acquired",
    "Broker Disposed",
    "Coin Amount",
    "Proceeds",
    "Cost Basis",
    "Gain",
]

COL_COST_BASIS_SHORT_TERM = "Short-Term Cost Basis"
COL_COST_BASIS_LONG_TERM = "Long-Term Cost Basis"
COL_COST_BASIS_AVERAGE = "Average Cost Basis"

MINING_HEADER = [
    "Year",
    "Date",
    "Purchase (P)",
    "Reinvestment (R)",
    "Day Basis (P)",
    "Cum Basis (P)",
    "Day Basis (P&R)",
    "Day Income",
    "Cum Income",
    "Gain (P)",
    "Gain (P&R)",
    "Hashrate (GH/s)",
    "USD/Coin",
    "Yield (Coin/EH/s)",
    "Day Rate (P&R)",
    "Avg Rate (P&R)",
    "Day Rate (P)",
]

# Columns that are always written together for an account
_INCOME_GROUPS: list[tuple[IncomeColumn, ...]] = [
    (IncomeColumn.ORDINARY_INCOME,),
    (IncomeColumn.SHORT_TERM_CAPITAL_GAIN, IncomeColumn.LONG_TERM_CAPITAL_GAIN),
    (
        IncomeColumn.MINING_INCOME,
        IncomeColumn.MINING_EXPENSE,
        IncomeColumn.MINING_AMORTIZED_EXPENSE,
    ),
]


def account_prefix(account: str) -> str:
    """Bracketed account label for column headers; none for the default account."""
    return f"[{account}] " if account else ""


def gain_row(entry: GainEntry) -> list[str]:
    if isinstance(entry, RealizedGainEntry):
        return [
            str(entry.tax_year),
            entry.term.label,
            entry.date_acquired.isoformat(),
            entry.date_disposed.isoformat(),
            (entry.broker_acquired or "").strip(),
            (entry.broker_disposed or "").strip(),
            to_plain(entry.asset_amount),
            to_plain(entry.proceeds),
            to_plain(entry.cost_basis),
            to_plain(entry.gain),
        ]
    return [
        "",
        entry.term.label,
        entry.date_acquired.isoformat(),
        "",
        (entry.broker_acquired or "").strip(),
        "",
        to_plain(entry.asset_amount),
        "",
        to_plain(entry.cost_basis),
        "",
    ]


def income_column_groups(entries: Sequence[IncomeYearEntry]) -> list[tuple[str, tuple[IncomeColumn, ...]]]:
    """Pick, per account, the column groups that have any value in any year."""
    accounts = sorted({account for entry in entries for account in entry.accounts})
    selected: list[tuple[str, tuple[IncomeColumn, ...]]] = []
    for account in accounts:
        for group in _INCOME_GROUPS:
            if any(entry.value(column, account) is not None for entry in entries for column in group):
                selected.append((account, group))
    return selected


def mining_row(entry: MiningDayEntry) -> list[str]:
    return [
        str(entry.year),
        entry.day.isoformat(),
        to_plain(entry.purchase),
        to_plain(entry.reinvestment),
        to_plain(entry.basis_purchase),
        to_plain(entry.cum_basis_purchase),
        to_plain(entry.basis_purchase_and_reinvest),
        to_plain(entry.income),
        to_plain(entry.cum_income),
        to_plain(entry.gain_purchase),
        to_plain(entry.gain_purchase_and_reinvest),
        to_plain(entry.hashrate),
        to_plain(entry.usd_per_coin),
        to_plain(entry.mining_yield),
        to_plain(entry.day_rate_purchase_and_reinvest),
        to_plain(entry.avg_day_rate_purchase_and_reinvest),
        to_plain(entry.day_rate_purchase),
    ]


class CsvReportWriter:
    """Writes engine output next to the input ledger, one file per report."""

    def __init__(
        self,
        output_dir: Path,
        base_name: str,
        stamp: str | None = None,
        stablecoin_accounts: Collection[str] = (),
    ) -> None:
        self.output_dir = output_dir
        self.base_name = base_name
        self.stamp = stamp or datetime.now().strftime(get_settings().output_timestamp_format)
        self.stablecoin_accounts = set(stablecoin_accounts)

    def output_path(self, kind: str, account: str | None = None) -> Path:
        account_part = f"{account}_" if account else ""
        return self.output_dir / f"{self.base_name}_{kind}_{account_part}{self.stamp}.csv"

    def planned_paths(self, result: EngineResult) -> list[Path]:
        """Every file `write_all` would create for this result, in write order."""
        paths = [
            self.output_path("cb", account)
            for account in result.accounts
            if result.gains.get(account) and account not in self.stablecoin_accounts
        ]
        if any(a not in self.stablecoin_accounts for a in result.cost_basis.accounts):
            paths.append(self.output_path("ucb"))
        paths.append(self.output_path("inc"))
        paths += [self.output_path("min", a) for a in result.accounts if result.mining.get(a)]
        return paths

    def write_all(self, result: EngineResult) -> list[Path]:
        """Write every report, or nothing if any target file already exists."""
        for path in self.planned_paths(result):
            if path.exists():
                raise ReportWriteError(str(path), "file already exists")

        written: list[Path] = []
        for account in result.accounts:
            path = self.write_gains(account, result.gains.get(account, []))
            if path:
                written.append(path)
        path = self.write_cost_basis(result.cost_basis)
        if path:
            written.append(path)
        written.append(self.write_income(result.income))
        for account in result.accounts:
            path = self.write_mining(account, result.mining.get(account, []))
            if path:
                written.append(path)
        return written

    def write_gains(self, account: str, entries: Sequence[GainEntry]) -> Path | None:
        if not entries:
            logger.error("Skipping gains for account '%s': no entries", account)
            return None
        if account in self.stablecoin_accounts:
            logger.info("Skipping gains for account '%s': USD stablecoin", account)
            return None
        path = self.output_path("cb", account)
        self._write(path, [GAIN_HEADER, *(gain_row(e) for e in entries)])
        logger.info("Wrote %d gain entries to %s", len(entries), path)
        return path

    def write_cost_basis(self, summary: UnrealizedCostBasis) -> Path | None:
        accounts = sorted(a for a in summary.accounts if a not in self.stablecoin_accounts)
        if not accounts:
            logger.info("Skipping unrealized cost basis: no accounts to report")
            return None
        header: list[str] = []
        values: list[str] = []
        for account in accounts:
            prefix = account_prefix(account)
            header += [
                prefix + COL_COST_BASIS_SHORT_TERM,
                prefix + COL_COST_BASIS_LONG_TERM,
                prefix + COL_COST_BASIS_AVERAGE,
            ]
            values += [
                to_plain(summary.short_term_for(account)),
                to_plain(summary.long_term_for(account)),
                to_plain(summary.average_for(account)),
            ]
        path = self.output_path("ucb")
        self._write(path, [header, values])
        logger.info("Wrote unrealized cost basis to %s", path)
        return path

    def write_income(self, entries: Sequence[IncomeYearEntry]) -> Path:
        groups = income_column_groups(entries)
        header = ["Tax Year"] + [
            account_prefix(account) + column.value for account, group in groups for column in group
        ]
        rows = [header]
        for entry in entries:
            rows.append(
                [str(entry.tax_year)]
                + [to_plain(entry.value(column, account)) for account, group in groups for column in group]
            )
        path = self.output_path("inc")
        self._write(path, rows)
        logger.info("Wrote %d income entries to %s", len(entries), path)
        return path

    def write_mining(self, account: str, entries: Sequence[MiningDayEntry]) -> Path | None:
        if not entries:
            logger.info("Skipping mining for account '%s': no mining contracts", account)
            return None
        path = self.output_path("min", account)
        self._write(path, [MINING_HEADER, *(mining_row(e) for e in entries)])
        logger.info("Wrote %d mining entries to %s", len(entries), path)
        return path

    @staticmethod
    def _write(path: Path, rows: list[list[str]]) -> None:
        if path.exists():
            raise ReportWriteError(str(path), "file already exists")
        try:
            with path.open("x", newline="", encoding="utf-8") as handle:
                csv.writer(handle, dialect="excel").writerows(rows)
        except OSError as exc:
            raise ReportWriteError(str(path), str(exc)) from exc
