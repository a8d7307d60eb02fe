"""
backend/tests/test_migration_service.py

Purpose:
    Legacy local-storage import: filtering of malformed entries, defaults,
    and partial-failure reporting.
"""

from __future__ import annotations

import json
from datetime import date

import pytest

from bettracker.errors import WagerApiError
from bettracker.models.wager import BetType, Wager, WagerCreate, WagerUpdate
from bettracker.providers.base import WagerRemote
from bettracker.services.migration_service import load_legacy_wagers, migrate_legacy_wagers


class _RecordingRemote(WagerRemote):
    def __init__(self, fail_teams: set[str] | None = None):
        self.created: list[WagerCreate] = []
        self.fail_teams = fail_teams or set()

    async def get_wagers(self) -> list[Wager]:
        return []

    async def create_wager(self, payload: WagerCreate) -> Wager:
        if payload.team in self.fail_teams:
            raise WagerApiError("Internal server error", status_code=500)
        self.created.append(payload)
        return payload.to_wager(f"srv-{len(self.created)}")

    async def update_wager(self, wager_id: str, update: WagerUpdate) -> Wager:
        raise AssertionError("not used")

    async def delete_wager(self, wager_id: str) -> None:
        raise AssertionError("not used")


def test_load_keeps_only_well_formed_entries():
    raw = json.dumps(
        [
            {"id": "1", "team": "Chiefs", "odds": -110, "stake": 10},
            {"id": 2, "team": "Bills", "odds": -110, "stake": 10},
            {"id": "3", "team": "Jets", "odds": "-110", "stake": 10},
            {"id": "4", "team": "Eagles", "odds": 120},
            "garbage",
            None,
            {"id": "5", "team": "Lions", "odds": 150, "stake": 5.5, "sport": "NFL"},
        ]
    )

    legacy = load_legacy_wagers(raw)

    assert [entry["id"] for entry in legacy] == ["1", "5"]


@pytest.mark.parametrize("raw", [None, "", "not json", '{"id": "1"}', "42"])
def test_load_tolerates_missing_or_malformed_data(raw):
    assert load_legacy_wagers(raw) == []


@pytest.mark.asyncio
async def test_migration_fills_defaults():
    remote = _RecordingRemote()
    legacy = [
        {"id": "1", "team": "Chiefs", "odds": -110, "stake": 10},
        {
            "id": "2", "team": "Lakers", "odds": 150, "stake": 20, "sport": "NBA", "opponent": "Celtics",
            "betType": "prop", "date": "2023-11-02", "result": "win", "payout": 50, "notes": "MVP",
        },
    ]

    result = await migrate_legacy_wagers(legacy, remote)

    assert result.success is True
    assert (result.migrated_count, result.failed_count, result.legacy_found) == (2, 0, 2)
    first, second = remote.created
    assert (first.sport, first.opponent, first.bet_type) == ("Unknown", "Unknown", BetType.moneyline)
    assert first.date == date.today()
    assert second.bet_type == BetType.prop
    assert second.date == date(2023, 11, 2)
    assert second.payout == 50


@pytest.mark.asyncio
async def test_partial_failure_is_still_success():
    remote = _RecordingRemote(fail_teams={"Jets"})
    legacy = [
        {"id": "1", "team": "Chiefs", "odds": -110, "stake": 10},
        {"id": "2", "team": "Jets", "odds": -110, "stake": 10},
    ]

    result = await migrate_legacy_wagers(legacy, remote)

    assert result.success is True
    assert (result.migrated_count, result.failed_count) == (1, 1)
    assert result.errors == ["Failed to migrate bet for Jets: Internal server error"]


@pytest.mark.asyncio
async def test_entries_failing_validation_are_counted_as_failures():
    remote = _RecordingRemote()
    legacy = [{"id": "1", "team": "Chiefs", "odds": 0, "stake": 10}]

    result = await migrate_legacy_wagers(legacy, remote)

    assert result.success is False
    assert result.failed_count == 1
    assert remote.created == []


@pytest.mark.asyncio
async def test_nothing_to_migrate_is_success():
    result = await migrate_legacy_wagers([], _RecordingRemote())

    assert result.success is True
    assert result.legacy_found == 0
