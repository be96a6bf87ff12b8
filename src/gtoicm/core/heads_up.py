from __future__ import annotations

from collections.abc import Sequence

from .errors import DomainError

__all__ = ["heads_up_equity", "heads_up_probabilities"]


def heads_up_probabilities(stacks: Sequence[float]) -> tuple[float, float]:
    """Return each player's chance of winning a two-player finish."""

    if len(stacks) != 2:
        raise DomainError("heads-up shortcut needs exactly two stacks")
    s1, s2 = float(stacks[0]), float(stacks[1])
    if s1 < 0 or s2 < 0:
        raise DomainError("stacks cannot be negative")
    total = s1 + s2
    if total <= 0:
        raise DomainError("heads-up shortcut needs chips in play")
    return s1 / total, s2 / total


def heads_up_equity(stacks: Sequence[float], payouts: Sequence[float]) -> tuple[float, float]:
    """Closed-form ICM for two players.

    Equivalent to the general recursion with two players; missing payout
    places count as zero.
    """

    p1_win, p2_win = heads_up_probabilities(stacks)
    first = float(payouts[0]) if len(payouts) > 0 else 0.0
    second = float(payouts[1]) if len(payouts) > 1 else 0.0
    return (
        p1_win * first + p2_win * second,
        p2_win * first + p1_win * second,
    )
