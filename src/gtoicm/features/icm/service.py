from __future__ import annotations

import logging
from collections.abc import Sequence

from ...core.config import EngineConfig, resolve_config
from ...core.icm import calculate_icm, icm_pressure
from ...core.models import PayoutStructure, Player, PushFoldScenario
from ...core.payouts import COMMON_PAYOUTS, available_presets
from ...core.push_fold import evaluate_scenario
from .concurrency import run_blocking
from .schemas import ICMPayload, PresetPayload, PressurePayload, PushFoldPayload

__all__ = ["ICMService"]

logger = logging.getLogger(__name__)


class ICMService:
    """Stateless facade over the engine for the HTTP layer.

    Each call builds fresh engine state; nothing is cached between requests.
    """

    def __init__(self, config: EngineConfig | None = None) -> None:
        self.config = resolve_config(config)

    def calculate(self, players: Sequence[Player], payouts: PayoutStructure) -> ICMPayload:
        calc = calculate_icm(players, payouts, config=self.config)
        if calc.warnings:
            logger.info("icm calculation finished with numeric warnings", extra={"warnings": len(calc.warnings)})
        return ICMPayload.from_calculation(calc)

    async def calculate_async(self, players: Sequence[Player], payouts: PayoutStructure) -> ICMPayload:
        return await run_blocking(self.calculate, players, payouts)

    def pressure(self, player_id: str, players: Sequence[Player], payouts: PayoutStructure) -> PressurePayload:
        value = icm_pressure(player_id, players, payouts, config=self.config)
        return PressurePayload(player_id=player_id, pressure=value)

    async def pressure_async(
        self,
        player_id: str,
        players: Sequence[Player],
        payouts: PayoutStructure,
    ) -> PressurePayload:
        return await run_blocking(self.pressure, player_id, players, payouts)

    def push_fold(self, scenario: PushFoldScenario) -> PushFoldPayload:
        result = evaluate_scenario(scenario, config=self.config)
        logger.debug(
            "push/fold request served",
            extra={"action": result.action, "others": len(scenario.other_stacks)},
        )
        return PushFoldPayload.from_result(result)

    async def push_fold_async(self, scenario: PushFoldScenario) -> PushFoldPayload:
        return await run_blocking(self.push_fold, scenario)

    def presets(self) -> list[PresetPayload]:
        return [PresetPayload(name=name, places=list(COMMON_PAYOUTS[name])) for name in available_presets()]

    def preset(self, name: str) -> PresetPayload:
        key = name.strip().lower()
        if key not in COMMON_PAYOUTS:
            raise KeyError(f"payout preset '{name}' not found")
        return PresetPayload(name=key, places=list(COMMON_PAYOUTS[key]))
