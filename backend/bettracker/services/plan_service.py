"""Free-plan wager limit: usage reporting and enforcement."""

import logging
from typing import Optional

from bettracker.config import settings
from bettracker.errors import PlanLimitError
from bettracker.models.stats import Plan, PlanUsage

logger = logging.getLogger("bettracker.plan")


def plan_limit(plan: Plan) -> Optional[int]:
    """Maximum number of wagers for a plan. None = unlimited."""
    if plan == Plan.free:
        return settings.FREE_PLAN_BET_LIMIT
    return None


def plan_usage(wager_count: int, plan: Plan = Plan.free) -> PlanUsage:
    limit = plan_limit(plan)
    return PlanUsage(
        plan=plan,
        used=wager_count,
        limit=limit,
        is_at_limit=limit is not None and wager_count >= limit,
    )


def ensure_can_create(wager_count: int, plan: Plan = Plan.free) -> None:
    """Raise PlanLimitError if one more wager would exceed the plan."""
    usage = plan_usage(wager_count, plan)
    if usage.is_at_limit:
        logger.info("Plan limit reached: %s plan, %d/%s wagers", plan.value, usage.used, usage.limit)
        raise PlanLimitError()
