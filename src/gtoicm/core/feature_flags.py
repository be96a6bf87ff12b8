"""Runtime switches for alternative engine paths.

Flags come from the ``GTOICM_FEATURES`` environment variable (comma-separated,
case-insensitive) and can be forced on or off for a block of code::

    from gtoicm.core import feature_flags

    with feature_flags.override(enable={feature_flags.FORCE_GENERAL_ENGINE}):
        calculate_icm(players, payouts)

``icm.force_general_engine`` routes two-player fields through the recursive
engine instead of the closed-form heads-up shortcut.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from typing import Final

__all__ = ["FORCE_GENERAL_ENGINE", "enabled_flags", "is_enabled", "override", "set_env_flags"]

ENV_VAR: Final = "GTOICM_FEATURES"

FORCE_GENERAL_ENGINE: Final = "icm.force_general_engine"

_overrides: list[tuple[frozenset[str], frozenset[str]]] = []


def _clean(names: Iterable[str] | None) -> frozenset[str]:
    return frozenset(name.strip().lower() for name in (names or ()) if name and name.strip())


def _from_env() -> frozenset[str]:
    raw = os.getenv(ENV_VAR) or ""
    return _clean(raw.split(","))


def enabled_flags() -> frozenset[str]:
    """Return every flag currently on, after applying overrides innermost last."""

    active = set(_from_env())
    for enabled, disabled in _overrides:
        active |= enabled
        active -= disabled
    return frozenset(active)


def is_enabled(flag: str) -> bool:
    return flag.strip().lower() in enabled_flags()


@contextmanager
def override(
    *,
    enable: Iterable[str] | None = None,
    disable: Iterable[str] | None = None,
) -> Iterator[None]:
    """Force flags on/off inside the ``with`` block; nested blocks win."""

    _overrides.append((_clean(enable), _clean(disable)))
    try:
        yield
    finally:
        _overrides.pop()


def set_env_flags(flags: Iterable[str]) -> None:
    os.environ[ENV_VAR] = ",".join(sorted(_clean(flags)))
