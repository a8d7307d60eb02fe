"""
backend/tests/test_report_cli.py

Purpose:
    report.py subcommands against local JSON files.
"""

from __future__ import annotations

import json
import sys

import pytest

import report


def _write(path, payload) -> str:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return str(path)


_WAGERS = [
    {
        "id": "a", "sport": "NFL", "team": "Chiefs", "opponent": "Bills", "betType": "moneyline",
        "odds": -110, "stake": 10, "date": "2024-01-01", "result": "win", "payout": 19.09,
    },
    {
        "id": "b", "sport": "NBA", "team": "Lakers", "opponent": "Celtics", "betType": "spread",
        "odds": 150, "stake": 10, "date": "2024-01-02", "result": "loss",
    },
]


@pytest.mark.asyncio
async def test_summary_prints_headline(tmp_path, monkeypatch, capsys):
    source = _write(tmp_path / "wagers.json", {"wagers": _WAGERS})
    monkeypatch.setattr(sys, "argv", ["report.py", "summary", source])

    assert await report.main() == 0

    out = capsys.readouterr().out
    assert "BETTRACKER SUMMARY (2 wagers)" in out
    assert "Win rate: 50.00%" in out
    assert "Avg odds: +20" in out


@pytest.mark.asyncio
async def test_export_writes_csv(tmp_path, monkeypatch):
    source = _write(tmp_path / "wagers.json", _WAGERS)
    out_dir = tmp_path / "out"
    monkeypatch.setattr(sys, "argv", ["report.py", "export", source, "--out-dir", str(out_dir)])

    assert await report.main() == 0

    [csv_file] = list(out_dir.glob("bettracker-export-*.csv"))
    assert len(csv_file.read_text(encoding="utf-8").splitlines()) == 3


def test_reads_saved_api_response(tmp_path):
    doc = dict(_WAGERS[1], betType="SPREAD", result="LOSS", date="2024-01-02T00:00:00Z")
    source = _write(tmp_path / "bets.json", {"bets": [doc]})

    [wager] = report._read_wagers(source)

    assert wager.bet_type.value == "spread"
    assert wager.result.value == "loss"


@pytest.mark.asyncio
async def test_migrate_dry_run_counts_legacy_entries(tmp_path, monkeypatch, capsys):
    legacy = [{"id": "1", "team": "Chiefs", "odds": -110, "stake": 10}, {"id": "2", "team": "Jets"}]
    source = _write(tmp_path / "legacy.json", legacy)
    monkeypatch.setattr(sys, "argv", ["report.py", "migrate", source, "--dry-run"])

    assert await report.main() == 0

    assert "'legacy_found': 1" in capsys.readouterr().out


@pytest.mark.asyncio
async def test_missing_file_is_reported(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr(sys, "argv", ["report.py", "summary", str(tmp_path / "nope.json")])

    assert await report.main() == 1
    assert "INPUT ERROR" in capsys.readouterr().out
