"""
backend/report.py

Purpose:
    CLI for a wager collection: print the stats summary, write the CSV export,
    or import a legacy local-storage dump into the wager API.

Usage:
    cd backend && python report.py summary wagers.json
    cd backend && python report.py summary --from-api
    cd backend && python report.py export wagers.json --out-dir exports/
    cd backend && python report.py migrate legacy.json --dry-run

Dependencies:
    - bettracker.services.stats_service
    - bettracker.providers.wager_api
"""

from __future__ import annotations

import argparse
import asyncio
import json
import os
import sys
from pathlib import Path
from pprint import pprint

sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from bettracker.errors import WagerApiError
from bettracker.middleware.logging import setup_logging
from bettracker.models.wager import Wager
from bettracker.providers.wager_api import WagerApiClient
from bettracker.services import optimistic_sync
from bettracker.services.export_service import export_csv, export_filename
from bettracker.services.migration_service import load_legacy_wagers, migrate_legacy_wagers
from bettracker.services.stats_service import summarize
from bettracker.services.wager_state import WagerState
from bettracker.utils.odds_utils import format_american


def _read_wagers(path: str) -> list[Wager]:
    """Accepts a bare JSON array, {"wagers": [...]}, or a saved /api/bets response."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if isinstance(data, dict) and "bets" in data:
        return [Wager.from_api(doc) for doc in data["bets"]]
    if isinstance(data, dict):
        data = data.get("wagers", [])
    return [Wager.model_validate(doc) for doc in data]


async def _fetch_wagers(base_url: str | None) -> list[Wager]:
    client = WagerApiClient(base_url=base_url)
    try:
        state = await optimistic_sync.load_wagers(WagerState(), client)
    finally:
        await client.aclose()
    if state.error:
        raise WagerApiError(state.error)
    return list(state.wagers)


def _print_summary(wagers: list[Wager]) -> None:
    summary = summarize(wagers)
    headline = summary.headline
    avg = format_american(headline.avg_odds) if headline.avg_odds else "n/a"

    print(f"\nBETTRACKER SUMMARY ({len(wagers)} wagers)")
    print("=" * 50)
    print(f"Settled: {headline.total_bets}   Win rate: {headline.win_rate:.2f}%   Avg odds: {avg}")
    print(f"Staked: {headline.total_staked:.2f}   Returns: {headline.total_returns:.2f}")
    print(f"Net: {headline.net_profit:+.2f}   ROI: {headline.roi:+.2f}%")

    print("\n--- BY SPORT ---")
    pprint([s.model_dump() for s in summary.by_sport], indent=2)
    print("\n--- BY MONTH ---")
    pprint([m.model_dump() for m in summary.by_month], indent=2)
    print("\n--- STREAKS ---")
    pprint(summary.streaks.model_dump(), indent=2)


async def _run_summary(args: argparse.Namespace) -> int:
    if args.from_api:
        wagers = await _fetch_wagers(args.base_url)
    elif args.file:
        wagers = _read_wagers(args.file)
    else:
        print("Either a wagers file or --from-api is required.")
        return 2
    _print_summary(wagers)
    return 0


async def _run_export(args: argparse.Namespace) -> int:
    wagers = _read_wagers(args.file)
    out_dir = Path(args.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    target = out_dir / export_filename()
    target.write_text(export_csv(wagers), encoding="utf-8")
    print({"ok": True, "exported": len(wagers), "file": str(target)})
    return 0


async def _run_migrate(args: argparse.Namespace) -> int:
    legacy = load_legacy_wagers(Path(args.file).read_text(encoding="utf-8"))
    if args.dry_run:
        print({"ok": True, "mode": "dry-run", "legacy_found": len(legacy)})
        return 0

    client = WagerApiClient(base_url=args.base_url)
    try:
        result = await migrate_legacy_wagers(legacy, client)
    finally:
        await client.aclose()
    pprint(vars(result), indent=2)
    return 0 if result.success else 1


async def main() -> int:
    parser = argparse.ArgumentParser(description="Wager tracker reports and maintenance.")
    parser.add_argument("--base-url", default=None, help="Wager API base URL (defaults to WAGER_API_BASE_URL).")
    sub = parser.add_subparsers(dest="command", required=True)

    p_summary = sub.add_parser("summary", help="Print headline, per-sport, per-month stats and streaks.")
    p_summary.add_argument("file", nargs="?", help="JSON file with wagers.")
    p_summary.add_argument("--from-api", action="store_true", help="Fetch wagers from the wager API instead.")

    p_export = sub.add_parser("export", help="Write the wagers as CSV.")
    p_export.add_argument("file", help="JSON file with wagers.")
    p_export.add_argument("--out-dir", default=".", help="Directory for the CSV file.")

    p_migrate = sub.add_parser("migrate", help="Import a legacy local-storage dump into the wager API.")
    p_migrate.add_argument("file", help="Legacy JSON array dump.")
    p_migrate.add_argument("--dry-run", action="store_true", help="Only count importable wagers.")

    args = parser.parse_args()
    setup_logging()

    handlers = {"summary": _run_summary, "export": _run_export, "migrate": _run_migrate}
    try:
        return await handlers[args.command](args)
    except WagerApiError as e:
        print(f"WAGER API ERROR: {e.message}")
        return 1
    except (OSError, ValueError) as e:
        print(f"INPUT ERROR: {e}")
        return 1


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
