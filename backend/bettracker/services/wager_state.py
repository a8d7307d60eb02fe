"""
backend/bettracker/services/wager_state.py

Purpose:
    Client-side state for a user's wager collection.
    WagerState is immutable; every update function takes a state and returns
    a new one with the headline stats recomputed. Nothing here is global:
    callers own the state value and pass it along.

Dependencies:
    - bettracker.services.stats_service
    - bettracker.services.plan_service
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Iterable, Mapping, Optional

from bettracker.models.stats import BettingStats, Plan, PlanUsage
from bettracker.models.wager import BetResult, Wager
from bettracker.services import plan_service
from bettracker.services.stats_service import calculate_stats


@dataclass(frozen=True)
class WagerState:
    wagers: tuple[Wager, ...] = ()
    stats: BettingStats = field(default_factory=BettingStats)
    is_loading: bool = False
    error: Optional[str] = None


def _with_wagers(state: WagerState, wagers: Iterable[Wager]) -> WagerState:
    wagers = tuple(wagers)
    return replace(state, wagers=wagers, stats=calculate_stats(wagers))


# ---------- Updates ----------

def set_wagers(state: WagerState, wagers: Iterable[Wager]) -> WagerState:
    return _with_wagers(state, wagers)


def add_wager(state: WagerState, wager: Wager) -> WagerState:
    """Newest first: the wager is prepended."""
    return _with_wagers(state, (wager, *state.wagers))


def update_wager(state: WagerState, wager_id: str, changes: Mapping[str, Any]) -> WagerState:
    """Merge `changes` into the wager with `wager_id`. Unknown ids are a no-op."""
    return _with_wagers(
        state,
        (w.model_copy(update=dict(changes)) if w.id == wager_id else w for w in state.wagers),
    )


def remove_wager(state: WagerState, wager_id: str) -> WagerState:
    return _with_wagers(state, (w for w in state.wagers if w.id != wager_id))


def replace_wager(state: WagerState, wager_id: str, wager: Wager) -> WagerState:
    """Drop `wager_id` and put `wager` at the front (tentative -> confirmed)."""
    return add_wager(remove_wager(state, wager_id), wager)


def set_loading(state: WagerState, is_loading: bool) -> WagerState:
    return replace(state, is_loading=is_loading)


def set_error(state: WagerState, error: Optional[str]) -> WagerState:
    return replace(state, error=error)


def clear_error(state: WagerState) -> WagerState:
    return replace(state, error=None)


# ---------- Queries ----------

def wagers_by_status(state: WagerState, status: Optional[BetResult] = None) -> list[Wager]:
    """Wagers with the given result; without a status, every settled wager."""
    if status is None:
        return [w for w in state.wagers if w.result is not None]
    return [w for w in state.wagers if w.result == status]


def wagers_by_sport(state: WagerState, sport: str) -> list[Wager]:
    return [w for w in state.wagers if w.sport == sport]


def plan_usage(state: WagerState, plan: Plan = Plan.free) -> PlanUsage:
    return plan_service.plan_usage(len(state.wagers), plan)
