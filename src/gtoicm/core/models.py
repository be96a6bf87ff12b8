from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Literal

from .errors import DomainError, NumericWarning

__all__ = [
    "Blinds",
    "FinishProbabilityVector",
    "HeroPosition",
    "ICMCalculation",
    "ICMDiff",
    "PayoutStructure",
    "Player",
    "PlayerEquity",
    "PushFoldBranches",
    "PushFoldResult",
    "PushFoldScenario",
    "active_players",
]

FinishProbabilityVector = tuple[float, ...]
HeroPosition = Literal["sb", "bb", "btn"]


@dataclass(frozen=True, slots=True)
class Player:
    """A tournament entrant identified by ``id``."""

    id: str
    chips: float
    name: str | None = None

    @property
    def is_active(self) -> bool:
        return self.chips > 0


@dataclass(frozen=True, slots=True)
class PayoutStructure:
    """Ordered payouts indexed from first place.

    ``places`` holds percentages (0-100) of ``total_prize_pool`` when
    ``is_percentage`` is set, otherwise absolute amounts.
    """

    places: tuple[float, ...]
    is_percentage: bool = False
    total_prize_pool: float | None = None

    @classmethod
    def percentages(cls, places: Iterable[float], total_prize_pool: float) -> PayoutStructure:
        return cls(places=tuple(float(p) for p in places), is_percentage=True, total_prize_pool=total_prize_pool)

    @classmethod
    def absolute(cls, places: Iterable[float]) -> PayoutStructure:
        return cls(places=tuple(float(p) for p in places), is_percentage=False)


@dataclass(frozen=True, slots=True)
class PlayerEquity:
    player_id: str
    chips: float
    chip_percentage: float
    equity: float
    equity_percentage: float
    finish_probabilities: FinishProbabilityVector


@dataclass(frozen=True, slots=True)
class ICMCalculation:
    """Equity of every active player for one chip configuration."""

    players: tuple[PlayerEquity, ...]
    total_prize_pool: float
    payouts: tuple[float, ...]
    warnings: tuple[NumericWarning, ...] = ()

    def result_for(self, player_id: str) -> PlayerEquity | None:
        for result in self.players:
            if result.player_id == player_id:
                return result
        return None

    def equity_for(self, player_id: str, default: float = 0.0) -> float:
        result = self.result_for(player_id)
        return result.equity if result is not None else default

    @property
    def equities(self) -> tuple[float, ...]:
        return tuple(result.equity for result in self.players)


@dataclass(frozen=True, slots=True)
class ICMDiff:
    chip_ev: float
    icm_ev: float
    icm_diff: float


@dataclass(frozen=True, slots=True)
class Blinds:
    sb: float
    bb: float
    ante: float = 0.0


@dataclass(frozen=True, slots=True)
class PushFoldScenario:
    """Inputs for a single hero push versus fold comparison."""

    hero_chips: float
    villain_chips: float
    other_stacks: tuple[float, ...]
    payouts: PayoutStructure
    blinds: Blinds
    hero_equity_vs_range: float
    villain_call_frequency: float
    hero_position: HeroPosition = "sb"


@dataclass(frozen=True, slots=True)
class PushFoldBranches:
    """Stack configurations for each way the hand can play out.

    Every tuple holds all seated players, including any whose stack dropped to
    zero; callers filter with :func:`active_players`.
    """

    current: tuple[Player, ...]
    fold: tuple[Player, ...]
    villain_folds: tuple[Player, ...]
    called_win: tuple[Player, ...]
    called_lose: tuple[Player, ...]


@dataclass(frozen=True, slots=True)
class PushFoldResult:
    ev_push: float
    ev_fold: float
    should_push: bool
    ev_current: float
    ev_villain_folds: float
    ev_called: float
    ev_win: float
    ev_lose: float
    warnings: tuple[NumericWarning, ...] = ()

    @property
    def ev_diff(self) -> float:
        return self.ev_push - self.ev_fold

    @property
    def action(self) -> str:
        return "push" if self.should_push else "fold"


def active_players(players: Sequence[Player]) -> list[Player]:
    """Return the players holding chips; duplicate ids are rejected."""

    seen: set[str] = set()
    active: list[Player] = []
    for player in players:
        if player.id in seen:
            raise DomainError(f"duplicate player id '{player.id}'")
        seen.add(player.id)
        if player.is_active:
            active.append(player)
    return active
