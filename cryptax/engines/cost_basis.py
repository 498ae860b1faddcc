"""Unrealized cost-basis summary across accounts."""

from collections.abc import Mapping, Sequence
from decimal import Decimal

from cryptax.models.enums import GainTerm
from cryptax.models.gains import GainEntry, UnrealizedCostBasis, UnrealizedGainEntry
from cryptax.numeric import ZERO, divide, is_negligible, precise


def summarize_unrealized(gains_by_account: Mapping[str, Sequence[GainEntry]]) -> UnrealizedCostBasis:
    """Sum open-lot cost basis per account, split by holding term.

    Accounts with no gain entries at all are left out. An account whose lots
    are all closed is listed with every value None.
    """
    summary = UnrealizedCostBasis()
    with precise():
        for account in sorted(gains_by_account):
            gains = gains_by_account[account]
            if not gains:
                continue

            short_term: Decimal | None = None
            long_term: Decimal | None = None
            coins: Decimal | None = None
            for gain in gains:
                if not isinstance(gain, UnrealizedGainEntry):
                    continue
                if gain.term == GainTerm.LONG_TERM:
                    long_term = (long_term or ZERO) + gain.cost_basis
                else:
                    short_term = (short_term or ZERO) + gain.cost_basis
                coins = (coins or ZERO) + gain.asset_amount

            average = None
            if coins is not None and not is_negligible(coins):
                average = divide((short_term or ZERO) + (long_term or ZERO), coins)

            summary.accounts.append(account)
            summary.short_term[account] = short_term
            summary.long_term[account] = long_term
            summary.average[account] = average
    return summary
