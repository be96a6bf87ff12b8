"""Turn a payout specification into per-place amounts for the active field."""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import Final

from .errors import ConfigError
from .models import PayoutStructure

__all__ = [
    "COMMON_PAYOUTS",
    "ResolvedPayouts",
    "as_payout_structure",
    "available_presets",
    "payout_preset",
    "resolve_payouts",
]

logger = logging.getLogger(__name__)

# Percentages of the prize pool, first place first.
COMMON_PAYOUTS: Final[Mapping[str, tuple[float, ...]]] = MappingProxyType(
    {
        "sng_3_handed": (100.0,),
        "sng_6_max": (65.0, 35.0),
        "sng_9_max": (50.0, 30.0, 20.0),
        "sng_10_max": (50.0, 30.0, 20.0),
        "sng_18_max": (40.0, 30.0, 20.0, 10.0),
        "sng_27_max": (40.0, 30.0, 20.0, 10.0),
        "sng_45_max": (35.0, 25.0, 18.0, 12.0, 10.0),
        "mtt_final_table_9": (30.0, 20.0, 14.0, 10.5, 8.0, 6.5, 5.0, 3.5, 2.5),
        "mtt_final_table_6": (35.0, 25.0, 18.0, 12.0, 7.0, 3.0),
        "heads_up": (100.0,),
        "heads_up_split": (60.0, 40.0),
        "spin_3_handed": (80.0, 20.0),
    }
)

_PERCENT_SUM_TOLERANCE = 1e-6


@dataclass(frozen=True, slots=True)
class ResolvedPayouts:
    amounts: tuple[float, ...]
    total_prize_pool: float

    @property
    def lowest(self) -> float:
        return self.amounts[-1] if self.amounts else 0.0


def available_presets() -> tuple[str, ...]:
    return tuple(sorted(COMMON_PAYOUTS))


def payout_preset(name: str, total_prize_pool: float) -> PayoutStructure:
    key = name.strip().lower()
    try:
        places = COMMON_PAYOUTS[key]
    except KeyError:
        raise ConfigError(f"unknown payout preset '{name}'") from None
    return PayoutStructure.percentages(places, total_prize_pool)


def resolve_payouts(structure: PayoutStructure, active_player_count: int) -> ResolvedPayouts:
    """Return absolute amounts padded or truncated to ``active_player_count``.

    Percentage structures are scaled by ``total_prize_pool``; absolute
    structures define the pool as the sum of their places.  Places beyond the
    field size are dropped from ``amounts`` but still count towards the pool.
    """

    if active_player_count < 0:
        raise ConfigError("active player count cannot be negative")

    places = [float(value) for value in structure.places]
    if any(math.isnan(value) or value < 0 for value in places):
        raise ConfigError("payout places must be non-negative numbers")

    if structure.is_percentage:
        pool = structure.total_prize_pool
        if pool is None or pool <= 0:
            raise ConfigError("prize pool required for percentage payouts")
        percent_total = sum(places)
        if percent_total > 100.0 + _PERCENT_SUM_TOLERANCE:
            logger.warning("Payout percentages sum to %.4f%%, above 100%%", percent_total)
        amounts = [(value / 100.0) * pool for value in places]
        total = float(pool)
    else:
        amounts = places
        total = sum(amounts)

    if len(amounts) < active_player_count:
        amounts.extend([0.0] * (active_player_count - len(amounts)))
    return ResolvedPayouts(amounts=tuple(amounts[:active_player_count]), total_prize_pool=total)


def as_payout_structure(payouts: PayoutStructure | Sequence[float]) -> PayoutStructure:
    """Accept a structure as-is; bare sequences are read as absolute amounts."""

    if isinstance(payouts, PayoutStructure):
        return payouts
    return PayoutStructure.absolute(payouts)
