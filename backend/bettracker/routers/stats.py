"""Stats API: aggregates, CSV export and plan usage for a posted wager collection."""

import logging

from fastapi import APIRouter
from fastapi.responses import StreamingResponse

from bettracker.models.stats import PlanUsage, PlanUsageRequest, StatsSummary
from bettracker.models.wager import WagerCollection
from bettracker.services import plan_service
from bettracker.services.export_service import export_csv, export_filename
from bettracker.services.stats_service import summarize

logger = logging.getLogger("bettracker.stats")

router = APIRouter(prefix="/api/stats", tags=["stats"])


@router.post("/summary", response_model=StatsSummary)
async def stats_summary(body: WagerCollection):
    """Headline totals, per-sport and per-month breakdowns, and streaks."""
    return summarize(body.wagers)


@router.post("/export")
async def export_wagers(body: WagerCollection):
    """Download the collection as a CSV attachment."""
    content = export_csv(body.wagers)
    logger.info("Exporting %d wagers to CSV", len(body.wagers))
    return StreamingResponse(
        iter([content]),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={export_filename()}"},
    )


@router.post("/plan-usage", response_model=PlanUsage)
async def plan_usage(body: PlanUsageRequest):
    return plan_service.plan_usage(len(body.wagers), body.plan)
