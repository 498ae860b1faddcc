"""Ingestion adapters for reading transaction ledgers."""

from cryptax.ingestion.base import BaseAdapter, LedgerImportResult, SkippedRecord
from cryptax.ingestion.ledger_csv import LedgerCsvAdapter

__all__ = ["BaseAdapter", "LedgerCsvAdapter", "LedgerImportResult", "SkippedRecord"]
