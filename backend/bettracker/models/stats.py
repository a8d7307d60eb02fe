"""Aggregated wager statistics and plan usage records."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel

from bettracker.models.wager import Wager


class BettingStats(BaseModel):
    """Headline totals. total_bets counts settled wagers only."""
    total_bets: int = 0
    total_staked: float = 0.0
    total_returns: float = 0.0
    net_profit: float = 0.0
    roi: float = 0.0
    win_rate: float = 0.0
    avg_odds: float = 0.0


class SportStats(BaseModel):
    """Per-sport breakdown. win_rate excludes pushes; average_odds uses |odds|."""
    sport: str
    total_bets: int = 0
    wins: int = 0
    losses: int = 0
    pushes: int = 0
    win_rate: float = 0.0
    total_staked: float = 0.0
    total_payout: float = 0.0
    net_profit: float = 0.0
    roi: float = 0.0
    average_odds: float = 0.0


class MonthlyStats(BaseModel):
    month: str                                    # "YYYY-MM"
    total_bets: int = 0
    net_profit: float = 0.0
    win_rate: float = 0.0
    roi: float = 0.0


class StreakStats(BaseModel):
    best_win_streak: int = 0
    best_loss_streak: int = 0
    current_streak: int = 0                       # > 0 wins, < 0 losses


class StatsSummary(BaseModel):
    headline: BettingStats = BettingStats()
    by_sport: List[SportStats] = []
    by_month: List[MonthlyStats] = []
    streaks: StreakStats = StreakStats()


# ---------- Plans ----------

class Plan(str, Enum):
    free = "free"
    pro = "pro"


class PlanUsage(BaseModel):
    plan: Plan = Plan.free
    used: int = 0
    limit: Optional[int] = None                   # None = unlimited
    is_at_limit: bool = False


class PlanUsageRequest(BaseModel):
    """Request body for a plan usage check."""
    plan: Plan = Plan.free
    wagers: List[Wager] = []
