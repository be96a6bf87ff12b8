"""Independent Chip Model engine for tournament equity and push/fold spots."""

from __future__ import annotations

from .core.config import EngineConfig
from .core.errors import ConfigError, DomainError, ICMError, NumericWarning
from .core.finish import FinishProbabilityEngine, finish_probabilities
from .core.heads_up import heads_up_equity
from .core.icm import calculate_icm, icm_diff, icm_pressure, quick_icm
from .core.models import (
    Blinds,
    ICMCalculation,
    ICMDiff,
    PayoutStructure,
    Player,
    PlayerEquity,
    PushFoldResult,
    PushFoldScenario,
)
from .core.payouts import COMMON_PAYOUTS, payout_preset, resolve_payouts
from .core.push_fold import build_branches, evaluate_push_fold, evaluate_scenario

__version__ = "0.1.0"

__all__ = [
    "COMMON_PAYOUTS",
    "Blinds",
    "ConfigError",
    "DomainError",
    "EngineConfig",
    "FinishProbabilityEngine",
    "ICMCalculation",
    "ICMDiff",
    "ICMError",
    "NumericWarning",
    "PayoutStructure",
    "Player",
    "PlayerEquity",
    "PushFoldResult",
    "PushFoldScenario",
    "build_branches",
    "calculate_icm",
    "evaluate_push_fold",
    "evaluate_scenario",
    "finish_probabilities",
    "heads_up_equity",
    "icm_diff",
    "icm_pressure",
    "payout_preset",
    "quick_icm",
    "resolve_payouts",
]
