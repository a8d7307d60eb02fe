"""
backend/bettracker/services/migration_service.py

Purpose:
    One-time import of wagers kept in the old local storage format into the
    remote wager store. Legacy records are loosely typed: anything without a
    string id/team and numeric odds/stake is dropped, missing fields get
    defaults, and each record is created through the WagerRemote on its own
    so one bad record does not stop the rest.

Dependencies:
    - bettracker.providers.base (WagerRemote)
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from pydantic import ValidationError

from bettracker.errors import WagerApiError
from bettracker.models.wager import BetType, WagerCreate
from bettracker.providers.base import WagerRemote
from bettracker.utils.odds_utils import is_finite_number

logger = logging.getLogger("bettracker.migration")


@dataclass
class MigrationResult:
    success: bool = False
    migrated_count: int = 0
    failed_count: int = 0
    errors: list[str] = field(default_factory=list)
    legacy_found: int = 0


def _is_legacy_wager(entry: Any) -> bool:
    return (
        isinstance(entry, dict)
        and isinstance(entry.get("id"), str)
        and isinstance(entry.get("team"), str)
        and is_finite_number(entry.get("odds"))
        and is_finite_number(entry.get("stake"))
    )


def load_legacy_wagers(raw: str | None) -> list[dict]:
    """Parse the legacy JSON array and keep the well-formed entries."""
    if not raw:
        return []
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as exc:
        logger.error("Legacy wager data is not valid JSON: %s", exc)
        return []
    if not isinstance(parsed, list):
        logger.warning("Legacy wager data is not a list, ignoring")
        return []
    return [entry for entry in parsed if _is_legacy_wager(entry)]


def _to_create(entry: dict) -> WagerCreate:
    return WagerCreate(
        sport=entry.get("sport") or "Unknown",
        team=entry["team"],
        opponent=entry.get("opponent") or "Unknown",
        bet_type=entry.get("betType") or BetType.moneyline,
        odds=entry["odds"],
        stake=entry["stake"],
        date=entry.get("date") or date.today(),
        result=entry.get("result") or None,
        payout=entry.get("payout") or None,
        notes=entry.get("notes") or None,
    )


async def migrate_legacy_wagers(legacy: list[dict], remote: WagerRemote) -> MigrationResult:
    """Create each legacy wager remotely and report what happened."""
    result = MigrationResult(legacy_found=len(legacy))
    if not legacy:
        result.success = True
        return result

    logger.info("Migrating %d legacy wagers", len(legacy))
    for entry in legacy:
        try:
            await remote.create_wager(_to_create(entry))
        except (WagerApiError, ValidationError) as exc:
            message = exc.message if isinstance(exc, WagerApiError) else f"{exc.error_count()} invalid field(s)"
            logger.warning("Failed to migrate legacy wager %s: %s", entry.get("id"), message)
            result.failed_count += 1
            result.errors.append(f"Failed to migrate bet for {entry['team']}: {message}")
            continue
        result.migrated_count += 1

    result.success = result.migrated_count > 0
    if result.success and result.failed_count:
        logger.warning(
            "Partial migration: %d succeeded, %d failed",
            result.migrated_count, result.failed_count,
        )
    return result
