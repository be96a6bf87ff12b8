from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

from ...core.errors import NumericWarning
from ...core.models import ICMCalculation, PushFoldResult

__all__ = [
    "ICMPayload",
    "PlayerEquityPayload",
    "PresetPayload",
    "PressurePayload",
    "PushFoldPayload",
    "WarningPayload",
]


class _APIModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class WarningPayload(_APIModel):
    message: str
    deviation: float
    context: str | None = None

    @classmethod
    def from_warning(cls, warning: NumericWarning) -> WarningPayload:
        return cls(message=warning.message, deviation=warning.deviation, context=warning.context)


class PlayerEquityPayload(_APIModel):
    player_id: str
    chips: float
    chip_percentage: float
    equity: float
    equity_percentage: float
    finish_probabilities: list[float]


class ICMPayload(_APIModel):
    players: list[PlayerEquityPayload]
    total_prize_pool: float
    payouts: list[float]
    warnings: list[WarningPayload]

    @classmethod
    def from_calculation(cls, calc: ICMCalculation) -> ICMPayload:
        return cls(
            players=[
                PlayerEquityPayload(
                    player_id=result.player_id,
                    chips=result.chips,
                    chip_percentage=result.chip_percentage,
                    equity=result.equity,
                    equity_percentage=result.equity_percentage,
                    finish_probabilities=list(result.finish_probabilities),
                )
                for result in calc.players
            ],
            total_prize_pool=calc.total_prize_pool,
            payouts=list(calc.payouts),
            warnings=[WarningPayload.from_warning(w) for w in calc.warnings],
        )


class PressurePayload(_APIModel):
    player_id: str
    pressure: float


class PushFoldPayload(_APIModel):
    action: str
    should_push: bool
    ev_push: float
    ev_fold: float
    ev_diff: float
    ev_current: float
    ev_villain_folds: float
    ev_called: float
    ev_win: float
    ev_lose: float
    warnings: list[WarningPayload]

    @classmethod
    def from_result(cls, result: PushFoldResult) -> PushFoldPayload:
        return cls(
            action=result.action,
            should_push=result.should_push,
            ev_push=result.ev_push,
            ev_fold=result.ev_fold,
            ev_diff=result.ev_diff,
            ev_current=result.ev_current,
            ev_villain_folds=result.ev_villain_folds,
            ev_called=result.ev_called,
            ev_win=result.ev_win,
            ev_lose=result.ev_lose,
            warnings=[WarningPayload.from_warning(w) for w in result.warnings],
        )


class PresetPayload(_APIModel):
    name: str
    places: list[float]
