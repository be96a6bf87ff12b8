"""ICM-aware push versus fold comparison.

Hero moves all-in against a single villain.  Each way the hand can end gives a
new set of stacks, and each of those is run back through
:func:`~gtoicm.core.icm.calculate_icm`:

* hero folds and villain collects the blinds and antes;
* villain folds to the push and hero collects them;
* villain calls and hero wins the matched stake plus dead money;
* villain calls and hero loses the matched stake, possibly busting.

Antes are dead money; blinds are part of the live stake, so a short all-in
only puts the matched part of a larger blind at risk.  Players left with no
chips drop out of the field before the branch is evaluated.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence

from .config import EngineConfig, resolve_config
from .errors import ConfigError, DomainError, NumericWarning
from .icm import calculate_icm
from .models import (
    Blinds,
    HeroPosition,
    PayoutStructure,
    Player,
    PushFoldBranches,
    PushFoldResult,
    PushFoldScenario,
)
from .payouts import as_payout_structure, resolve_payouts

__all__ = [
    "HERO_ID",
    "VILLAIN_ID",
    "build_branches",
    "evaluate_push_fold",
    "evaluate_scenario",
]

logger = logging.getLogger(__name__)

HERO_ID = "hero"
VILLAIN_ID = "villain"
_POSITIONS: frozenset[str] = frozenset({"sb", "bb", "btn"})


def _other_id(index: int) -> str:
    return f"other-{index + 1}"


def _validate(scenario: PushFoldScenario) -> None:
    if scenario.hero_position not in _POSITIONS:
        raise ConfigError(f"unknown hero position '{scenario.hero_position}'")
    if not 0.0 <= scenario.hero_equity_vs_range <= 1.0:
        raise ConfigError("hero equity vs range must be between 0 and 1")
    if not 0.0 <= scenario.villain_call_frequency <= 1.0:
        raise ConfigError("villain call frequency must be between 0 and 1")
    blinds = scenario.blinds
    if blinds.sb < 0 or blinds.bb < 0 or blinds.ante < 0:
        raise ConfigError("blinds and ante cannot be negative")
    if scenario.hero_chips <= 0:
        raise DomainError("hero has no chips")
    if scenario.villain_chips <= 0:
        raise DomainError("villain has no chips")
    if any(math.isnan(stack) or stack < 0 for stack in scenario.other_stacks):
        raise DomainError("other stacks cannot be negative")


def _blind_for(position: str, *, hero: bool, blinds: Blinds) -> float:
    if hero:
        return {"sb": blinds.sb, "bb": blinds.bb, "btn": 0.0}[position]
    # Villain sits in whichever blind hero does not occupy.
    return blinds.sb if position == "bb" else blinds.bb


def build_branches(scenario: PushFoldScenario) -> PushFoldBranches:
    """Return the stacks after each possible outcome of the push."""

    _validate(scenario)
    blinds = scenario.blinds
    hero_stack = float(scenario.hero_chips)
    villain_stack = float(scenario.villain_chips)
    others = [float(stack) for stack in scenario.other_stacks]

    hero_ante = min(hero_stack, blinds.ante)
    villain_ante = min(villain_stack, blinds.ante)
    hero_blind = min(hero_stack - hero_ante, _blind_for(scenario.hero_position, hero=True, blinds=blinds))
    villain_blind = min(
        villain_stack - villain_ante,
        _blind_for(scenario.hero_position, hero=False, blinds=blinds),
    )

    other_posts: list[float] = []
    for idx, stack in enumerate(others):
        post = min(stack, blinds.ante)
        if idx == 0 and scenario.hero_position == "btn":
            post += min(stack - post, blinds.sb)
        other_posts.append(post)
    others_after = [stack - post for stack, post in zip(others, other_posts, strict=True)]
    dead = math.fsum(other_posts)

    hero_posted = hero_ante + hero_blind
    villain_posted = villain_ante + villain_blind
    pot = hero_posted + villain_posted + dead

    matched = min(hero_stack - hero_ante, villain_stack - villain_ante)

    def seats(hero: float, villain: float, rest: Sequence[float]) -> tuple[Player, ...]:
        players = [Player(id=HERO_ID, chips=hero), Player(id=VILLAIN_ID, chips=villain)]
        players.extend(Player(id=_other_id(idx), chips=chips) for idx, chips in enumerate(rest))
        return tuple(players)

    return PushFoldBranches(
        current=seats(hero_stack, villain_stack, others),
        fold=seats(hero_stack - hero_posted, villain_stack - villain_posted + pot, others_after),
        villain_folds=seats(hero_stack - hero_posted + pot, villain_stack - villain_posted, others_after),
        called_win=seats(hero_stack + matched + villain_ante + dead, villain_stack - villain_ante - matched, others_after),
        called_lose=seats(hero_stack - hero_ante - matched, villain_stack + matched + hero_ante + dead, others_after),
    )


def _hero_equity(
    players: Sequence[Player],
    payouts: PayoutStructure,
    config: EngineConfig | None,
    branch: str,
) -> tuple[float, tuple[NumericWarning, ...]]:
    field = [player for player in players if player.chips > 0]
    if any(player.id == HERO_ID for player in field):
        result = calculate_icm(field, payouts, config=config)
        return result.equity_for(HERO_ID), result.warnings

    # Hero busted: they finish last among everyone still in before the bust.
    equity = resolve_payouts(payouts, len(field) + 1).lowest
    warning = NumericWarning(
        "hero eliminated; using the last-place payout",
        context=branch,
    )
    logger.debug("hero eliminated in branch", extra={"branch": branch, "equity": equity})
    return equity, (warning,)


def evaluate_scenario(scenario: PushFoldScenario, *, config: EngineConfig | None = None) -> PushFoldResult:
    config = resolve_config(config)
    branches = build_branches(scenario)
    payouts = scenario.payouts
    warnings: list[NumericWarning] = []

    def equity(name: str) -> float:
        value, branch_warnings = _hero_equity(getattr(branches, name), payouts, config, name)
        warnings.extend(branch_warnings)
        return value

    ev_current = equity("current")
    ev_fold = equity("fold")
    ev_villain_folds = equity("villain_folds")
    ev_win = equity("called_win")
    ev_lose = equity("called_lose")

    hero_eq = scenario.hero_equity_vs_range
    call_freq = scenario.villain_call_frequency
    ev_called = hero_eq * ev_win + (1.0 - hero_eq) * ev_lose
    ev_push = (1.0 - call_freq) * ev_villain_folds + call_freq * ev_called

    result = PushFoldResult(
        ev_push=ev_push,
        ev_fold=ev_fold,
        should_push=ev_push > ev_fold,
        ev_current=ev_current,
        ev_villain_folds=ev_villain_folds,
        ev_called=ev_called,
        ev_win=ev_win,
        ev_lose=ev_lose,
        warnings=tuple(warnings),
    )
    logger.debug(
        "push/fold evaluated",
        extra={"ev_push": ev_push, "ev_fold": ev_fold, "position": scenario.hero_position},
    )
    return result


def _as_blinds(blinds: Blinds | Mapping[str, float]) -> Blinds:
    if isinstance(blinds, Blinds):
        return blinds
    try:
        return Blinds(sb=float(blinds["sb"]), bb=float(blinds["bb"]), ante=float(blinds.get("ante") or 0.0))
    except KeyError as exc:
        raise ConfigError(f"blinds missing {exc.args[0]!r}") from exc


def evaluate_push_fold(
    hero_chips: float,
    villain_chips: float,
    other_stacks: Sequence[float],
    payouts: PayoutStructure | Sequence[float],
    blinds: Blinds | Mapping[str, float],
    hero_equity_vs_range: float,
    villain_call_frequency: float,
    hero_position: HeroPosition | str = "sb",
    *,
    config: EngineConfig | None = None,
) -> PushFoldResult:
    """Return push EV, fold EV and the recommendation for hero.

    ``payouts`` given as a plain list are absolute amounts.
    """

    scenario = PushFoldScenario(
        hero_chips=float(hero_chips),
        villain_chips=float(villain_chips),
        other_stacks=tuple(float(stack) for stack in other_stacks),
        payouts=as_payout_structure(payouts),
        blinds=_as_blinds(blinds),
        hero_equity_vs_range=float(hero_equity_vs_range),
        villain_call_frequency=float(villain_call_frequency),
        hero_position=str(hero_position).strip().lower(),  # type: ignore[arg-type]
    )
    return evaluate_scenario(scenario, config=config)
