"""Calendar amortizer: spread a contract's cost over the tax years it covers."""

from datetime import date
from decimal import Decimal

from cryptax.calendar_utils import add_months, days_between, start_of_next_year
from cryptax.numeric import divide, precise

YearAccountAmounts = dict[int, dict[str, Decimal]]


class CalendarAmortizer:
    """Straight-line amortization, split across calendar years by day count."""

    def allocate(self, start: date, term_months: int, total_cost: Decimal) -> dict[int, Decimal]:
        """Split a contract's cost into per-year shares.

        The contract runs from `start` to `start + term_months`. Each year
        receives `total_cost * days_in_year / total_days`, so the shares sum
        to the total cost.
        """
        end = add_months(start, term_months)
        total_days = days_between(start, end)
        shares: dict[int, Decimal] = {}
        if total_days <= 0:
            return shares

        total = Decimal(total_days)
        segment_start = start
        with precise():
            while segment_start < end:
                segment_end = min(start_of_next_year(segment_start), end)
                segment_days = days_between(segment_start, segment_end)
                share = divide(total_cost * segment_days, total)
                year = segment_start.year
                shares[year] = shares.get(year, Decimal("0")) + share
                segment_start = segment_end
        return shares

    def amortize_into(
        self,
        allocations: YearAccountAmounts,
        account: str,
        start: date,
        term_months: int,
        total_cost: Decimal,
    ) -> YearAccountAmounts:
        """Add a contract's yearly shares to an existing (year -> account -> amount) map."""
        with precise():
            for year, share in self.allocate(start, term_months, total_cost).items():
                by_account = allocations.setdefault(year, {})
                by_account[account] = by_account.get(account, Decimal("0")) + share
        return allocations
