#!/usr/bin/env python3

"""Time ICM calculations across field sizes to pick a sensible player ceiling."""

from __future__ import annotations

import argparse
import json
import sys
import time
from pathlib import Path

if __package__ is None:
    repo_root = Path(__file__).resolve().parents[1]
    src_dir = repo_root / "src"
    if str(src_dir) not in sys.path:
        sys.path.insert(0, str(src_dir))

from gtoicm.core.config import EngineConfig
from gtoicm.core.icm import calculate_icm
from gtoicm.core.models import Player
from gtoicm.core.payouts import payout_preset


def _field(size: int) -> list[Player]:
    # Descending stacks so no two players share a memo-equivalent position.
    return [Player(id=f"seat{idx + 1}", chips=float(1000 * (size - idx) + 37 * idx)) for idx in range(size)]


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--min-players", type=int, default=2)
    parser.add_argument("--max-players", type=int, default=10)
    parser.add_argument("--repeat", type=int, default=3, help="Runs per field size; the fastest is reported")
    parser.add_argument("--preset", default="mtt_final_table_9")
    args = parser.parse_args()

    config = EngineConfig(max_players=max(args.max_players, 1))
    payouts = payout_preset(args.preset, 10_000)
    rows = []
    for size in range(args.min_players, args.max_players + 1):
        players = _field(size)
        best = float("inf")
        for _ in range(max(1, args.repeat)):
            start = time.perf_counter()
            calc = calculate_icm(players, payouts, config=config)
            best = min(best, time.perf_counter() - start)
        rows.append({"players": size, "seconds": round(best, 6), "warnings": len(calc.warnings)})

    print(json.dumps(rows, indent=2))


if __name__ == "__main__":
    main()
