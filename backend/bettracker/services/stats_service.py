"""
backend/bettracker/services/stats_service.py

Purpose:
    Statistics aggregator over a user's wager collection: headline totals,
    per-sport and per-month breakdowns, and win/loss streaks.
    Every function is pure. The caller's sequence is never mutated and
    malformed records (non-finite stake or odds) are skipped, never raised on.

    Headline and per-sport figures intentionally use different conventions:
    - headline win_rate divides by all settled wagers (pushes included),
      per-sport/per-month win_rate by wins + losses only;
    - headline avg_odds is the signed mean over settled wagers, per-sport
      average_odds the mean of |odds| over all wagers of that sport;
    - headline total_returns counts win payouts only, per-sport total_payout
      also counts the stake returned by a push.

Dependencies:
    - bettracker.models.stats
    - bettracker.utils.odds_utils
"""

from __future__ import annotations

import math
from collections import defaultdict
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable

from bettracker.models.stats import (
    BettingStats,
    MonthlyStats,
    SportStats,
    StatsSummary,
    StreakStats,
)
from bettracker.models.wager import BetResult, Wager
from bettracker.utils.odds_utils import is_finite_number

_CENT = Decimal("0.01")


def round2(value: float) -> float:
    """Round to 2 decimals, halves away from zero (2.675 -> 2.68, -0.125 -> -0.13)."""
    if not math.isfinite(value):
        return 0.0
    rounded = float(Decimal(repr(float(value))).quantize(_CENT, rounding=ROUND_HALF_UP))
    return rounded + 0.0  # normalizes -0.0


def _pct(numerator: float, denominator: float) -> float:
    if not denominator:
        return 0.0
    return numerator / denominator * 100


def _payout(wager: Wager) -> float:
    if wager.payout is None or not is_finite_number(wager.payout):
        return 0.0
    return wager.payout


def valid_wagers(wagers: Iterable[Wager]) -> list[Wager]:
    """Records usable for aggregation: finite numeric stake and odds."""
    return [w for w in wagers if is_finite_number(w.stake) and is_finite_number(w.odds)]


def chronological(wagers: Iterable[Wager]) -> list[Wager]:
    """Stable ascending sort by wager date; same-day wagers keep input order."""
    return sorted(wagers, key=lambda w: w.date)


def month_key(wager: Wager) -> str:
    return f"{wager.date.year:04d}-{wager.date.month:02d}"


def calculate_stats(wagers: Iterable[Wager]) -> BettingStats:
    """Headline totals over the collection."""
    valid = valid_wagers(wagers)
    settled = [w for w in valid if w.result is not None]

    total_bets = len(settled)
    wins = sum(1 for w in settled if w.result == BetResult.win)
    total_staked = sum(w.stake for w in valid)
    total_returns = sum(_payout(w) for w in settled if w.result == BetResult.win)
    net_profit = total_returns - total_staked
    avg_odds = sum(w.odds for w in settled) / total_bets if total_bets else 0.0

    return BettingStats(
        total_bets=total_bets,
        total_staked=round2(total_staked),
        total_returns=round2(total_returns),
        net_profit=round2(net_profit),
        roi=round2(_pct(net_profit, total_staked)),
        win_rate=round2(_pct(wins, total_bets)),
        avg_odds=round2(avg_odds),
    )


def sport_breakdown(wagers: Iterable[Wager]) -> list[SportStats]:
    """One record per sport, most wagers first.

    Pending wagers count toward total_bets, total_staked and average_odds
    but never toward wins/losses/pushes.
    """
    acc: dict[str, dict[str, Any]] = defaultdict(
        lambda: {
            "total_bets": 0,
            "wins": 0,
            "losses": 0,
            "pushes": 0,
            "total_staked": 0.0,
            "total_payout": 0.0,
            "abs_odds": 0.0,
        }
    )

    for wager in chronological(valid_wagers(wagers)):
        row = acc[wager.sport]
        row["total_bets"] += 1
        row["total_staked"] += wager.stake
        row["abs_odds"] += abs(wager.odds)
        if wager.result == BetResult.win:
            row["wins"] += 1
            row["total_payout"] += _payout(wager)
        elif wager.result == BetResult.loss:
            row["losses"] += 1
        elif wager.result == BetResult.push:
            row["pushes"] += 1
            row["total_payout"] += wager.stake

    out: list[SportStats] = []
    for sport, row in acc.items():
        net_profit = row["total_payout"] - row["total_staked"]
        out.append(
            SportStats(
                sport=sport,
                total_bets=row["total_bets"],
                wins=row["wins"],
                losses=row["losses"],
                pushes=row["pushes"],
                win_rate=round2(_pct(row["wins"], row["wins"] + row["losses"])),
                total_staked=round2(row["total_staked"]),
                total_payout=round2(row["total_payout"]),
                net_profit=round2(net_profit),
                roi=round2(_pct(net_profit, row["total_staked"])),
                average_odds=round2(row["abs_odds"] / row["total_bets"]),
            )
        )

    # Stable: equal counts keep first-appearance (chronological) order.
    out.sort(key=lambda s: s.total_bets, reverse=True)
    return out


def monthly_breakdown(wagers: Iterable[Wager]) -> list[MonthlyStats]:
    """One record per calendar month of the wager date, oldest first."""
    acc: dict[str, dict[str, Any]] = defaultdict(
        lambda: {
            "total_bets": 0,
            "net_profit": 0.0,
            "wins": 0,
            "losses": 0,
            "settled_staked": 0.0,
        }
    )

    for wager in valid_wagers(wagers):
        row = acc[month_key(wager)]
        row["total_bets"] += 1
        if wager.result is None:
            continue
        row["settled_staked"] += wager.stake
        if wager.result == BetResult.win:
            row["wins"] += 1
            row["net_profit"] += _payout(wager) - wager.stake
        elif wager.result == BetResult.loss:
            row["losses"] += 1
            row["net_profit"] -= wager.stake

    return [
        MonthlyStats(
            month=month,
            total_bets=row["total_bets"],
            net_profit=round2(row["net_profit"]),
            win_rate=round2(_pct(row["wins"], row["wins"] + row["losses"])),
            roi=round2(_pct(row["net_profit"], row["settled_staked"])),
        )
        for month, row in sorted(acc.items())
    ]


def calculate_streaks(wagers: Iterable[Wager]) -> StreakStats:
    """Win/loss streaks in date order. Pushes and pending wagers are skipped."""
    win_run = loss_run = 0
    best_win = best_loss = 0

    for wager in chronological(valid_wagers(wagers)):
        if wager.result == BetResult.win:
            win_run += 1
            loss_run = 0
            best_win = max(best_win, win_run)
        elif wager.result == BetResult.loss:
            loss_run += 1
            win_run = 0
            best_loss = max(best_loss, loss_run)

    return StreakStats(
        best_win_streak=best_win,
        best_loss_streak=best_loss,
        current_streak=win_run if win_run > 0 else -loss_run,
    )


def summarize(wagers: Iterable[Wager]) -> StatsSummary:
    """Full statistics bundle for one collection."""
    records = list(wagers)
    return StatsSummary(
        headline=calculate_stats(records),
        by_sport=sport_breakdown(records),
        by_month=monthly_breakdown(records),
        streaks=calculate_streaks(records),
    )
