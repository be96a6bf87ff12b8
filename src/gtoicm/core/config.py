"""Engine configuration.

Defaults cover typical final-table work.  Hosts can tighten or relax them via
environment variables without touching call sites; any call made without an
explicit config reads them through :func:`resolve_config`:

``GTOICM_TOLERANCE``
    Allowed deviation of a probability sum from 1.0 before a
    :class:`~gtoicm.core.errors.NumericWarning` is recorded.
``GTOICM_MAX_PLAYERS``
    Largest active field the recursive engine will accept.  Cost grows roughly
    as ``n**2 * 2**n`` so this doubles as the computation budget.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Final

from .errors import ConfigError

__all__ = ["EngineConfig", "resolve_config"]

logger = logging.getLogger(__name__)

_TOLERANCE_ENV: Final = "GTOICM_TOLERANCE"
_MAX_PLAYERS_ENV: Final = "GTOICM_MAX_PLAYERS"

DEFAULT_TOLERANCE: Final = 1e-9
DEFAULT_MAX_PLAYERS: Final = 13


@dataclass(frozen=True, slots=True)
class EngineConfig:
    tolerance: float = DEFAULT_TOLERANCE
    max_players: int = DEFAULT_MAX_PLAYERS
    heads_up_fast_path: bool = True

    def __post_init__(self) -> None:
        if self.tolerance <= 0:
            raise ConfigError("tolerance must be positive")
        if self.max_players < 1:
            raise ConfigError("max_players must be at least 1")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> EngineConfig:
        env = os.environ if environ is None else environ
        tolerance = _parse(env.get(_TOLERANCE_ENV), float, DEFAULT_TOLERANCE, _TOLERANCE_ENV)
        max_players = _parse(env.get(_MAX_PLAYERS_ENV), int, DEFAULT_MAX_PLAYERS, _MAX_PLAYERS_ENV)
        logger.debug("engine config resolved", extra={"tolerance": tolerance, "max_players": max_players})
        return cls(tolerance=tolerance, max_players=max_players)


def _parse(raw: str | None, kind: type, default, name: str):
    if raw is None or not raw.strip():
        return default
    try:
        return kind(raw.strip())
    except ValueError as exc:
        raise ConfigError(f"invalid value for {name}: {raw!r}") from exc


def resolve_config(config: EngineConfig | None) -> EngineConfig:
    """Return ``config``, or one read from the environment when none is given."""

    return config if config is not None else EngineConfig.from_env()
