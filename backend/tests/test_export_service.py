"""
backend/tests/test_export_service.py

Purpose:
    CSV layout of the wager export and its file name.
"""

from __future__ import annotations

import csv
import io
from datetime import date

from bettracker.models.wager import Wager
from bettracker.services.export_service import CSV_HEADER, export_csv, export_filename


def _wager(**overrides) -> Wager:
    fields = {
        "id": "w1",
        "sport": "NBA",
        "team": "Lakers",
        "opponent": "Celtics",
        "bet_type": "spread",
        "odds": -110,
        "stake": 20,
        "date": date(2024, 3, 5),
    }
    fields.update(overrides)
    return Wager(**fields)


def _rows(text: str) -> list[list[str]]:
    return list(csv.reader(io.StringIO(text)))


def test_every_field_is_quoted():
    text = export_csv([_wager()])

    header, row = text.splitlines()
    assert header == ",".join(f'"{name}"' for name in CSV_HEADER)
    assert row.startswith('"2024-03-05","NBA","Lakers"')


def test_profit_loss_column_per_result():
    rows = _rows(
        export_csv(
            [
                _wager(result="win", payout=38.18),
                _wager(result="loss", stake=12.5),
                _wager(result="push", payout=20),
                _wager(),
            ]
        )
    )[1:]

    assert [r[7] for r in rows] == ["win", "loss", "push", "Pending"]
    assert [r[8] for r in rows] == ["38.18", "", "20", ""]
    assert [r[9] for r in rows] == ["18.18", "-12.50", "0.00", "0.00"]


def test_notes_with_quotes_and_commas_survive():
    rows = _rows(export_csv([_wager(notes='Took "the points", late')]))

    assert rows[1][10] == 'Took "the points", late'


def test_export_of_empty_collection_is_header_only():
    assert _rows(export_csv([])) == [CSV_HEADER]


def test_export_filename():
    assert export_filename(date(2024, 7, 4)) == "bettracker-export-2024-07-04.csv"
