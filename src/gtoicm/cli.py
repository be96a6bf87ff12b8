from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Sequence

from rich.console import Console
from rich.table import Table

from .core.config import EngineConfig
from .core.errors import ICMError
from .core.icm import calculate_icm
from .core.models import ICMCalculation, PayoutStructure, Player
from .core.payouts import available_presets, payout_preset
from .features.icm.schemas import ICMPayload


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="gto-icm", description="Independent Chip Model equity calculator")
    parser.add_argument("--stacks", nargs="+", type=float, required=True, help="Chip stacks, one per player")
    parser.add_argument(
        "--payouts",
        nargs="+",
        default=None,
        help="Payouts by place: absolute amounts (500 300 200) or percentages (50%% 30%% 20%%)",
    )
    parser.add_argument("--preset", choices=available_presets(), default=None, help="Use a standard payout table")
    parser.add_argument("--prize-pool", type=float, default=None, help="Prize pool for percentage payouts")
    parser.add_argument("--names", nargs="+", default=None, help="Player names in stack order")
    parser.add_argument("--json", action="store_true", help="Print JSON instead of a table")
    parser.add_argument("--verbose", action="store_true", help="Log engine diagnostics to stderr")
    return parser


def parse_payouts(raw: Sequence[str], prize_pool: float | None) -> PayoutStructure:
    """Read ``50%`` style tokens as percentages and bare numbers as amounts."""

    percent = [token.strip().endswith("%") for token in raw]
    if any(percent) and not all(percent):
        raise argparse.ArgumentTypeError("payouts must be all percentages or all absolute amounts")
    try:
        values = [float(token.strip().rstrip("%")) for token in raw]
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid payout value: {exc}") from exc
    if all(percent):
        return PayoutStructure(places=tuple(values), is_percentage=True, total_prize_pool=prize_pool)
    return PayoutStructure.absolute(values)


def _players(stacks: Sequence[float], names: Sequence[str] | None) -> list[Player]:
    labels = list(names or [])
    players = []
    for idx, chips in enumerate(stacks):
        name = labels[idx] if idx < len(labels) else f"Player {idx + 1}"
        players.append(Player(id=str(idx + 1), chips=chips, name=name))
    return players


def _render(console: Console, players: Sequence[Player], calc: ICMCalculation) -> None:
    names = {player.id: player.name or player.id for player in players}
    table = Table(title=f"ICM equity (prize pool {calc.total_prize_pool:,.2f})")
    table.add_column("Player")
    table.add_column("Chips", justify="right")
    table.add_column("Chip %", justify="right")
    table.add_column("Equity", justify="right")
    table.add_column("Equity %", justify="right")
    table.add_column("Finish odds", justify="left")
    for result in calc.players:
        odds = " ".join(f"{prob * 100:.1f}" for prob in result.finish_probabilities)
        table.add_row(
            names.get(result.player_id, result.player_id),
            f"{result.chips:,.0f}",
            f"{result.chip_percentage:.2f}",
            f"{result.equity:,.2f}",
            f"{result.equity_percentage:.2f}",
            odds,
        )
    console.print(table)
    for warning in calc.warnings:
        console.print(f"[yellow]warning:[/yellow] {warning.context}: {warning.message} ({warning.deviation:.2e})")


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else sys.argv[1:])

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    console = Console()
    try:
        if args.preset:
            structure = payout_preset(args.preset, args.prize_pool or 0.0)
        elif args.payouts:
            structure = parse_payouts(args.payouts, args.prize_pool)
        else:
            parser.error("either --payouts or --preset is required")
        config = EngineConfig.from_env()
        players = _players(args.stacks, args.names)
        calc = calculate_icm(players, structure, config=config)
    except (ICMError, argparse.ArgumentTypeError) as exc:
        console.print(f"[red]error:[/red] {exc}")
        return 2

    if args.json:
        console.print_json(json.dumps(ICMPayload.from_calculation(calc).to_dict()))
    else:
        _render(console, players, calc)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
