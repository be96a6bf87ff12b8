"""Malmuth–Harville finish-place probabilities.

The probability that a player finishes first is its share of the chips in
play.  Every later place is resolved recursively: some other player takes
first with probability proportional to its stack, and the question repeats
one place lower in the field that remains without them.

Without caching, the recursion walks every elimination order.  Each engine
instance keeps a memo table keyed by ``(player id, place, remaining ids)``,
which brings the worst case down to roughly ``O(n**2 * 2**n)``.  That is fine
for final tables but grows quickly, so the field size is capped by
:attr:`EngineConfig.max_players`.  A memo table is never shared between
engine instances: a cached entry is only valid for the chip counts it was
computed from.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

import numpy as np

from .config import EngineConfig, resolve_config
from .errors import DomainError, NumericWarning
from .models import FinishProbabilityVector, Player

__all__ = ["FinishProbabilityEngine", "finish_probabilities"]

logger = logging.getLogger(__name__)

_MemoKey = tuple[str, int, tuple[str, ...]]


class FinishProbabilityEngine:
    """Finish-place probabilities for one fixed set of stacks."""

    def __init__(self, players: Sequence[Player], *, config: EngineConfig | None = None) -> None:
        self.config = resolve_config(config)
        if not players:
            raise DomainError("no active players")
        if len(players) > self.config.max_players:
            raise DomainError(
                f"{len(players)} players exceeds the computation budget of {self.config.max_players}"
            )
        chips: dict[str, float] = {}
        for player in players:
            if player.id in chips:
                raise DomainError(f"duplicate player id '{player.id}'")
            if math.isnan(player.chips) or player.chips < 0:
                raise DomainError(f"player '{player.id}' has a negative chip count")
            chips[player.id] = float(player.chips)

        self._players = tuple(players)
        self._chips = chips
        self._ids = tuple(sorted(chips))
        self._total = sum(chips.values())
        self._memo: dict[_MemoKey, float] = {}
        self._vectors: dict[str, FinishProbabilityVector] = {}
        self.warnings: list[NumericWarning] = []

    @property
    def players(self) -> tuple[Player, ...]:
        return self._players

    @property
    def total_chips(self) -> float:
        return self._total

    @property
    def memo_size(self) -> int:
        return len(self._memo)

    def vector(self, player_id: str) -> FinishProbabilityVector:
        """Return P(finish 1st), P(finish 2nd), ... for ``player_id``."""

        cached = self._vectors.get(player_id)
        if cached is not None:
            return cached
        if player_id not in self._chips:
            raise DomainError(f"player '{player_id}' is not part of this calculation")

        n = len(self._ids)
        if self._total == 0:
            vector = tuple(1.0 if n == 1 and place == 0 else 0.0 for place in range(n))
        else:
            others = tuple(pid for pid in self._ids if pid != player_id)
            vector = tuple(self._place_probability(player_id, others, self._total, place) for place in range(n))
            self._check_sum(vector, f"finish vector for '{player_id}'")

        self._vectors[player_id] = vector
        return vector

    def matrix(self) -> np.ndarray:
        """Rows follow the input player order, columns are places."""

        return np.array([self.vector(player.id) for player in self._players], dtype=float)

    def _place_probability(self, player_id: str, others: tuple[str, ...], total: float, place: int) -> float:
        # ``others`` stays sorted so it doubles as the canonical memo key.
        if place == 0:
            if total > 0:
                return self._chips[player_id] / total
            return 1.0 if not others else 0.0
        if len(others) < place:
            return 0.0

        key = (player_id, place, others)
        cached = self._memo.get(key)
        if cached is not None:
            return cached

        prob = 0.0
        for idx, other in enumerate(others):
            other_chips = self._chips[other]
            remaining_total = total - other_chips
            if other_chips <= 0 or remaining_total <= 0:
                continue
            rest = others[:idx] + others[idx + 1 :]
            prob += (other_chips / total) * self._place_probability(player_id, rest, remaining_total, place - 1)

        self._memo[key] = prob
        return prob

    def _check_sum(self, values: Sequence[float], context: str) -> None:
        deviation = abs(math.fsum(values) - 1.0)
        if deviation > self.config.tolerance:
            warning = NumericWarning(
                "probabilities do not sum to 1",
                deviation=deviation,
                context=context,
            )
            self.warnings.append(warning)
            logger.warning("%s deviates from 1.0 by %.3e", context, deviation)


def finish_probabilities(
    player: Player | str,
    active_players: Sequence[Player],
    *,
    config: EngineConfig | None = None,
) -> FinishProbabilityVector:
    """One-shot helper with a private memo table."""

    player_id = player.id if isinstance(player, Player) else player
    engine = FinishProbabilityEngine(active_players, config=config)
    return engine.vector(player_id)
