"""Settling a wager: result plus the payout it implies."""

from typing import Optional

from bettracker.models.wager import BetResult, Wager, WagerUpdate
from bettracker.services.stats_service import round2
from bettracker.utils.odds_utils import profit_for_stake


def default_payout(wager: Wager, result: BetResult) -> Optional[float]:
    """Payout implied by the wager's odds.

    win  -> stake + profit at the wager's American odds
    push -> stake returned
    loss -> None
    """
    if result == BetResult.win:
        return round2(wager.stake + profit_for_stake(wager.stake, wager.odds))
    if result == BetResult.push:
        return round2(wager.stake)
    return None


def settlement_update(
    wager: Wager,
    result: BetResult,
    payout: Optional[float] = None,
) -> WagerUpdate:
    """Build the update that settles `wager`.

    An explicit payout overrides the computed one (bookmakers round
    differently). Losses never carry a payout. Re-settling an already
    settled wager is allowed; the last write wins.
    """
    if result == BetResult.loss:
        return WagerUpdate(result=result, payout=None)
    if payout is None:
        payout = default_payout(wager, result)
    return WagerUpdate(result=result, payout=payout)
