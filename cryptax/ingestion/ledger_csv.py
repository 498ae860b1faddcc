"""CSV ledger adapter.

Reads an Excel-style CSV with one transaction per row. Rows with a blank or
unknown type are counted as empty; rows that fail parsing or validation are
recorded as invalid. Neither stops the import.
"""

import csv
import logging
from datetime import datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path

from pydantic import ValidationError

from cryptax.exceptions import EmptyRecordError, InvalidRecordError
from cryptax.ingestion.base import BaseAdapter, LedgerImportResult, SkippedRecord
from cryptax.models.enums import TransactionType
from cryptax.models.transaction import Transaction, parse_timestamp

logger = logging.getLogger(__name__)

COL_ACCOUNT = "Acct"
COL_TIMESTAMP = "UTC Dttm"
COL_TYPE = "Txn Type"
COL_SOURCE = "Src"
COL_DESTINATION = "Dest"
COL_COIN_AMOUNT = "Txn COIN"
COL_USD_AMOUNT = "Txn USD"
COL_USD_PER_UNIT = "Txn USD/COIN"
COL_COIN_FEE = "Txn Fee COIN"
COL_BROKER_FEE_USD = "Brkr Fee USD"
COL_TERM_MONTHS = "Term Months"
COL_HASHRATE = "Hash Rate (GH/s)"

_DECIMAL_COLUMNS = {
    "coin_amount": COL_COIN_AMOUNT,
    "usd_amount": COL_USD_AMOUNT,
    "usd_per_unit": COL_USD_PER_UNIT,
    "coin_fee": COL_COIN_FEE,
    "broker_fee_usd": COL_BROKER_FEE_USD,
}


def _cell(row: dict[str, str], column: str) -> str:
    value = row.get(column)
    return value.strip() if value else ""


def _optional_decimal(row: dict[str, str], column: str, record_number: int) -> Decimal | None:
    text = _cell(row, column)
    if not text:
        return None
    try:
        return Decimal(text.replace(",", ""))
    except InvalidOperation:
        raise InvalidRecordError(record_number, f"unparsable {column} '{text}'") from None


def _lenient_int(row: dict[str, str], column: str) -> int | None:
    """Optional integer column; unparsable values count as absent."""
    text = _cell(row, column)
    try:
        return int(text) if text else None
    except ValueError:
        return None


def _optional_label(row: dict[str, str], column: str) -> str | None:
    value = row.get(column)
    return value.strip() if value is not None else None


class LedgerCsvAdapter(BaseAdapter):
    """Imports a transaction ledger CSV into Transaction models."""

    def parse(self, file_path: Path) -> LedgerImportResult:
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        result = LedgerImportResult(source=str(file_path))
        with file_path.open(newline="", encoding="utf-8-sig") as handle:
            reader = csv.DictReader(handle, dialect="excel")
            for record_number, row in enumerate(reader, start=1):
                try:
                    result.add(self.parse_row(row, record_number))
                except EmptyRecordError:
                    result.empty_records.append(record_number)
                except InvalidRecordError as exc:
                    logger.error("Invalid ledger record: %s", exc)
                    result.invalid_records.append(SkippedRecord(record_number, str(exc)))

        if result.invalid_records:
            logger.error(
                "Skipped %d invalid record(s): %s",
                len(result.invalid_records),
                " ".join(str(r.record_number) for r in result.invalid_records),
            )
        if result.empty_records:
            logger.info(
                "Skipped %d empty record(s): %s",
                len(result.empty_records),
                " ".join(str(n) for n in result.empty_records),
            )
        logger.info("Read %d transaction(s) from %s", result.transaction_count, file_path)
        return result

    def parse_row(self, row: dict[str, str], record_number: int) -> Transaction:
        """Convert one CSV row into a Transaction.

        Raises:
            EmptyRecordError: Blank row or blank/unknown transaction type.
            InvalidRecordError: Malformed values or missing required fields.
        """
        if None in row or any(value is None for value in row.values()):
            raise InvalidRecordError(record_number, "column count does not match the header")
        if not any(value.strip() for value in row.values()):
            raise EmptyRecordError(record_number)

        try:
            timestamp: datetime = parse_timestamp(_cell(row, COL_TIMESTAMP))
        except ValueError as exc:
            raise InvalidRecordError(record_number, f"unparsable {COL_TIMESTAMP}: {exc}") from None

        txn_type = TransactionType.from_code(row.get(COL_TYPE))
        if txn_type is None:
            raise EmptyRecordError(record_number)

        amounts = {
            field: _optional_decimal(row, column, record_number)
            for field, column in _DECIMAL_COLUMNS.items()
        }
        try:
            return Transaction(
                account=_cell(row, COL_ACCOUNT),
                timestamp=timestamp,
                txn_type=txn_type,
                source=_optional_label(row, COL_SOURCE),
                destination=_optional_label(row, COL_DESTINATION),
                term_months=_lenient_int(row, COL_TERM_MONTHS),
                hashrate=_lenient_int(row, COL_HASHRATE),
                **amounts,
            )
        except ValidationError as exc:
            messages = "; ".join(err["msg"] for err in exc.errors())
            raise InvalidRecordError(record_number, messages) from None

    def validate(self, data: LedgerImportResult) -> list[str]:
        errors: list[str] = []
        if data.transaction_count == 0:
            errors.append(f"{data.source} contained no transactions")
        for record in data.invalid_records:
            errors.append(record.message)
        return errors
