from cryptax.reports.csv_writer import CsvReportWriter, income_column_groups
from cryptax.reports.run_summary import AccountSummary, RunSummaryGenerator

__all__ = ["AccountSummary", "CsvReportWriter", "RunSummaryGenerator", "income_column_groups"]
