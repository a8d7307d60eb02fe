"""CSV export of a wager collection."""

import csv
import io
from datetime import date
from typing import Iterable, Optional

from bettracker.models.wager import BetResult, Wager

CSV_HEADER = [
    "Date", "Sport", "Team", "Opponent", "Bet Type", "Odds",
    "Stake", "Result", "Payout", "Profit/Loss", "Notes",
]


def _num(value: float) -> str:
    """-110.0 -> "-110", 12.5 -> "12.5"."""
    return str(int(value)) if float(value).is_integer() else str(value)


def _profit_loss(wager: Wager) -> str:
    if wager.result == BetResult.win:
        return f"{(wager.payout or 0) - wager.stake:.2f}"
    if wager.result == BetResult.loss:
        return f"{-wager.stake:.2f}"
    return "0.00"


def wager_row(wager: Wager) -> list[str]:
    return [
        wager.date.isoformat(),
        wager.sport,
        wager.team,
        wager.opponent,
        wager.bet_type.value,
        _num(wager.odds),
        _num(wager.stake),
        wager.result.value if wager.result else "Pending",
        _num(wager.payout) if wager.payout else "",
        _profit_loss(wager),
        wager.notes or "",
    ]


def export_csv(wagers: Iterable[Wager]) -> str:
    """Render wagers as CSV, every field quoted, in the order given."""
    output = io.StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for wager in wagers:
        writer.writerow(wager_row(wager))
    return output.getvalue()


def export_filename(today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"bettracker-export-{today.isoformat()}.csv"
