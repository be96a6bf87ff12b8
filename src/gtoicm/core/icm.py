"""ICM equity aggregation.

Combines finish-place probabilities with resolved payout amounts into the
expected prize money of every active player.  Every call builds its own
probability engine, so repeated calls with the same inputs return identical
results.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

import numpy as np

from . import feature_flags
from .config import EngineConfig, resolve_config
from .errors import DomainError, NumericWarning
from .finish import FinishProbabilityEngine
from .heads_up import heads_up_equity, heads_up_probabilities
from .models import ICMCalculation, ICMDiff, PayoutStructure, Player, PlayerEquity, active_players
from .payouts import as_payout_structure, resolve_payouts

__all__ = ["calculate_icm", "icm_diff", "icm_pressure", "quick_icm"]

logger = logging.getLogger(__name__)


def _use_heads_up(n: int, config: EngineConfig) -> bool:
    if n != 2 or not config.heads_up_fast_path:
        return False
    return not feature_flags.is_enabled(feature_flags.FORCE_GENERAL_ENGINE)


def _column_warnings(matrix: np.ndarray, tolerance: float) -> list[NumericWarning]:
    warnings: list[NumericWarning] = []
    for place in range(matrix.shape[1]):
        deviation = abs(math.fsum(matrix[:, place]) - 1.0)
        if deviation > tolerance:
            context = f"place {place + 1} across players"
            logger.warning("%s deviates from 1.0 by %.3e", context, deviation)
            warnings.append(NumericWarning("probabilities do not sum to 1", deviation=deviation, context=context))
    return warnings


def calculate_icm(
    players: Sequence[Player],
    payouts: PayoutStructure | Sequence[float],
    *,
    config: EngineConfig | None = None,
) -> ICMCalculation:
    """Return the ICM equity of every player with chips.

    Players with no chips are dropped before anything else.  ``payouts`` may be
    a :class:`PayoutStructure` or a plain list of absolute amounts.
    """

    config = resolve_config(config)
    active = active_players(players)
    if not active:
        raise DomainError("no active players")

    n = len(active)
    resolved = resolve_payouts(as_payout_structure(payouts), n)
    total_chips = math.fsum(player.chips for player in active)
    warnings: list[NumericWarning] = []

    if _use_heads_up(n, config):
        p1, p2 = heads_up_probabilities([active[0].chips, active[1].chips])
        matrix = np.array([[p1, p2], [p2, p1]], dtype=float)
        equities = np.array(heads_up_equity([active[0].chips, active[1].chips], resolved.amounts), dtype=float)
    else:
        engine = FinishProbabilityEngine(active, config=config)
        matrix = engine.matrix()
        equities = matrix @ np.asarray(resolved.amounts, dtype=float)
        warnings.extend(engine.warnings)
        if total_chips > 0:
            warnings.extend(_column_warnings(matrix, config.tolerance))
        logger.debug("finish probabilities resolved", extra={"players": n, "memo_entries": engine.memo_size})

    pool = resolved.total_prize_pool
    results = []
    for idx, player in enumerate(active):
        equity = float(equities[idx])
        results.append(
            PlayerEquity(
                player_id=player.id,
                chips=player.chips,
                chip_percentage=(player.chips / total_chips) * 100.0,
                equity=equity,
                equity_percentage=(equity / pool) * 100.0 if pool > 0 else 0.0,
                finish_probabilities=tuple(float(value) for value in matrix[idx]),
            )
        )

    return ICMCalculation(
        players=tuple(results),
        total_prize_pool=pool,
        payouts=resolved.amounts,
        warnings=tuple(warnings),
    )


def icm_pressure(
    player_id: str,
    players: Sequence[Player],
    payouts: PayoutStructure | Sequence[float],
    *,
    config: EngineConfig | None = None,
) -> float:
    """Return equity% minus chip% for ``player_id``.

    Positive values mean the stack is worth more than its chip share (short
    stacks on a steep payout ladder); negative values mean each chip is worth
    less than average, as is typical for the chip leader.  Players without
    chips have no pressure.
    """

    result = calculate_icm(players, payouts, config=config).result_for(player_id)
    if result is None:
        return 0.0
    return result.equity_percentage - result.chip_percentage


def _chips_of(players: Sequence[Player], player_id: str) -> float:
    for player in players:
        if player.id == player_id:
            return max(0.0, player.chips)
    return 0.0


def icm_diff(
    before: Sequence[Player],
    after_win: Sequence[Player],
    after_lose: Sequence[Player],
    hero_id: str,
    win_probability: float,
    payouts: PayoutStructure | Sequence[float],
    *,
    config: EngineConfig | None = None,
) -> ICMDiff:
    """Compare chip EV and ICM EV for an all-in with two outcomes.

    ``chip_ev`` values the expected chip stack at the pre-hand dollar-per-chip
    rate; ``icm_ev`` weights the ICM equity of each outcome.  ``icm_diff`` is
    the ICM EV gained or lost relative to not playing the hand.
    """

    before_icm = calculate_icm(before, payouts, config=config)
    hero_before = before_icm.result_for(hero_id)
    if hero_before is None:
        raise DomainError(f"hero '{hero_id}' not found in the starting stacks")

    win_eq = _outcome_equity(after_win, hero_id, payouts, config)
    lose_eq = _outcome_equity(after_lose, hero_id, payouts, config)
    icm_ev = win_probability * win_eq + (1.0 - win_probability) * lose_eq

    expected_chips = win_probability * _chips_of(after_win, hero_id) + (1.0 - win_probability) * _chips_of(
        after_lose, hero_id
    )
    total_before = math.fsum(player.chips for player in before if player.chips > 0)
    chip_value = before_icm.total_prize_pool / total_before
    return ICMDiff(
        chip_ev=expected_chips * chip_value,
        icm_ev=icm_ev,
        icm_diff=icm_ev - hero_before.equity,
    )


def _outcome_equity(
    players: Sequence[Player],
    hero_id: str,
    payouts: PayoutStructure | Sequence[float],
    config: EngineConfig | None,
) -> float:
    active = active_players(players)
    if not any(player.id == hero_id for player in active):
        # Busted hero finishes behind everyone still holding chips.
        return resolve_payouts(as_payout_structure(payouts), len(active) + 1).lowest
    return calculate_icm(active, payouts, config=config).equity_for(hero_id)


def quick_icm(stacks: Sequence[float], payouts: Sequence[float]) -> list[float]:
    """ICM equities for bare stack and absolute payout lists, in input order."""

    if not stacks:
        raise DomainError("no active players")
    if len(stacks) == 1:
        return [float(payouts[0]) if payouts else 0.0]
    if len(stacks) == 2:
        return list(heads_up_equity(stacks, payouts))
    players = [Player(id=f"p{idx}", chips=float(chips)) for idx, chips in enumerate(stacks)]
    result = calculate_icm(players, PayoutStructure.absolute(payouts))
    return [result.equity_for(player.id) for player in players]
