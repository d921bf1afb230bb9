#!/usr/bin/env python3
"""
Compute the tournament dashboard once and write it as JSON for the static pages.

This script:
1. Loads every phase's match CSVs (HTTP, or a local directory)
2. Aggregates team and player statistics
3. Writes dashboard.json (and optionally one file per phase)

Usage:
    python scripts/precompute_dashboard.py
    python scripts/precompute_dashboard.py --data-dir ./data/csv
    python scripts/precompute_dashboard.py --async --base-url http://localhost:8000/data
    python scripts/precompute_dashboard.py --output ./public/data --split-phases
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
import time
from pathlib import Path
from typing import Optional

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from app.env import load_env  # noqa: E402
from app.analyzer import Scope, TournamentAnalyzer, _convert_to_serializable  # noqa: E402
from app.data_client import (  # noqa: E402
    AsyncTournamentDataClient,
    LocalTournamentDataClient,
    TournamentConfigError,
    TournamentDataClient,
    build_data_client,
)
from app.dataset import TournamentDataset  # noqa: E402
from app.settings import Settings  # noqa: E402


def _parse_args(argv: Optional[list] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Pre-compute tournament dashboard statistics."
    )
    parser.add_argument(
        "--base-url",
        default=None,
        help="Root URL holding <phase>/<file>.csv (default: TOURNAMENT_DATA_URL).",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Read CSVs from a local directory instead of HTTP.",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Output directory (default: TOURNAMENT_OUTPUT_DIR or ./data/precomputed).",
    )
    parser.add_argument(
        "--async",
        dest="use_async",
        action="store_true",
        help="Fetch over HTTP with the aiohttp client.",
    )
    parser.add_argument(
        "--split-phases",
        action="store_true",
        help="Also write one team/player table file per phase.",
    )
    return parser.parse_args(argv)


def load_dataset(args: argparse.Namespace, settings: Settings) -> TournamentDataset:
    if args.data_dir is not None:
        return LocalTournamentDataClient(args.data_dir).load_dataset()
    base_url = args.base_url or settings.data_url
    if args.use_async:
        client = AsyncTournamentDataClient(base_url, timeout=settings.request_timeout)
        return asyncio.run(client.load_dataset())
    if args.base_url:
        return TournamentDataClient(base_url, timeout=settings.request_timeout).load_dataset()
    return build_data_client(settings).load_dataset()


def write_json(path: Path, payload: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        json.dump(_convert_to_serializable(payload), handle, ensure_ascii=False, indent=2)


def main(argv: Optional[list] = None) -> int:
    load_env()
    args = _parse_args(argv)
    try:
        settings = Settings.from_env()
    except TournamentConfigError as exc:
        print(f"❌ Configuration error: {exc}")
        return 1
    logging.basicConfig(
        level=logging.DEBUG if settings.debug_mode else settings.log_level,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    output_dir = args.output or settings.output_dir or (
        Path(__file__).resolve().parents[1] / "data" / "precomputed"
    )

    start_time = time.time()
    try:
        dataset = load_dataset(args, settings)
    except TournamentConfigError as exc:
        print(f"❌ Configuration error: {exc}")
        return 1

    if dataset.is_empty:
        print("❌ No match files could be loaded.")
        return 1

    print(f"🎯 Loaded {dataset.match_count} matches across {len(dataset.phase_names())} phases")
    print("-" * 60)

    analyzer = TournamentAnalyzer(dataset)
    snapshot = analyzer.generate_dashboard()
    write_json(output_dir / "dashboard.json", snapshot.model_dump())
    written = 1

    if args.split_phases:
        for phase in dataset.phase_names():
            scope = Scope(phase=phase)
            payload = {
                "phase": phase,
                "teams": [stats.model_dump() for stats in analyzer.team_table(scope)],
                "players": [stats.model_dump() for stats in analyzer.player_table(scope, limit=None)],
                "matches": [summary.model_dump() for summary in analyzer.match_summaries(phase)],
            }
            write_json(output_dir / f"{phase}.json", payload)
            written += 1
            print(f"  ✅ {phase}: {len(payload['matches'])} matches")

    summary = snapshot.summary
    elapsed = time.time() - start_time
    print("\n" + "=" * 60)
    print("📊 SUMMARY")
    print("=" * 60)
    print(f"  🏟️  Matches:        {summary.total_matches}")
    print(f"  👥 Teams:          {summary.total_teams}")
    print(f"  🎮 Players:        {summary.total_players}")
    print(f"  🏆 Best team:      {snapshot.best_team.name if snapshot.best_team else '-'}")
    print(f"  📁 Files written:  {written} -> {output_dir}")
    print(f"  ⏱️  Elapsed:        {elapsed:.1f}s")
    return 0


if __name__ == "__main__":
    sys.exit(main())
