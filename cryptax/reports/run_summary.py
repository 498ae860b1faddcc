"""Plain-text summary of one engine run."""

from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from cryptax.engines.pipeline import EngineResult
from cryptax.ingestion.base import LedgerImportResult
from cryptax.models.enums import GainTerm
from cryptax.models.gains import UnrealizedGainEntry
from cryptax.numeric import ZERO

TEMPLATE_DIR = Path(__file__).parent / "templates"


@dataclass
class AccountSummary:
    account: str
    realized_count: int
    short_term_gain: Decimal
    long_term_gain: Decimal
    open_lots: int
    open_amount: Decimal
    mining_days: int

    @property
    def label(self) -> str:
        return self.account or "(default)"


class RunSummaryGenerator:
    """Builds per-account totals and renders them with the run summary template."""

    def __init__(self) -> None:
        self.env = Environment(loader=FileSystemLoader(str(TEMPLATE_DIR)), keep_trailing_newline=True)

    def account_summaries(self, result: EngineResult) -> list[AccountSummary]:
        summaries: list[AccountSummary] = []
        for account in result.accounts:
            realized = result.realized(account)
            open_lots = [g for g in result.gains.get(account, []) if isinstance(g, UnrealizedGainEntry)]
            summaries.append(
                AccountSummary(
                    account=account,
                    realized_count=len(realized),
                    short_term_gain=sum((g.gain for g in realized if g.term is GainTerm.SHORT_TERM), ZERO),
                    long_term_gain=sum((g.gain for g in realized if g.term is GainTerm.LONG_TERM), ZERO),
                    open_lots=len(open_lots),
                    open_amount=sum((g.asset_amount for g in open_lots), ZERO),
                    mining_days=len(result.mining.get(account, [])),
                )
            )
        return summaries

    def render(
        self,
        result: EngineResult,
        imported: LedgerImportResult | None = None,
        written: list[Path] | None = None,
    ) -> str:
        template = self.env.get_template("run_summary.txt")
        return template.render(
            imported=imported,
            accounts=self.account_summaries(result),
            income=result.income,
            written=written or [],
        )
