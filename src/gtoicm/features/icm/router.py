from __future__ import annotations

from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ...core.errors import ICMError
from ...core.models import Blinds, PayoutStructure, Player, PushFoldScenario
from ...core.payouts import payout_preset
from .service import ICMService

__all__ = [
    "BlindsRequest",
    "CalculateRequest",
    "PayoutRequest",
    "PlayerRequest",
    "PressureRequest",
    "PushFoldRequest",
    "create_icm_router",
]


class _RequestModel(BaseModel):
    # The web client sends camelCase; scripts tend to send snake_case.
    model_config = ConfigDict(populate_by_name=True)


class PlayerRequest(_RequestModel):
    id: str
    chips: float
    name: str | None = None

    def to_player(self) -> Player:
        return Player(id=self.id, chips=self.chips, name=self.name)


class PayoutRequest(_RequestModel):
    places: list[float] = Field(default_factory=list)
    is_percentage: bool = Field(False, alias="isPercentage")
    total_prize_pool: float | None = Field(None, alias="totalPrizePool")
    preset: str | None = None

    def to_structure(self) -> PayoutStructure:
        if self.preset:
            return payout_preset(self.preset, self.total_prize_pool or 0.0)
        return PayoutStructure(
            places=tuple(self.places),
            is_percentage=self.is_percentage,
            total_prize_pool=self.total_prize_pool,
        )


class CalculateRequest(_RequestModel):
    players: list[PlayerRequest]
    payouts: PayoutRequest

    def domain_players(self) -> list[Player]:
        return [player.to_player() for player in self.players]


class PressureRequest(CalculateRequest):
    player_id: str = Field(..., alias="playerId")


class BlindsRequest(_RequestModel):
    sb: float
    bb: float
    ante: float = 0.0


class PushFoldRequest(_RequestModel):
    hero_chips: float = Field(..., alias="heroChips")
    villain_chips: float = Field(..., alias="villainChips")
    other_stacks: list[float] = Field(default_factory=list, alias="otherStacks")
    payouts: PayoutRequest
    blinds: BlindsRequest
    hero_equity_vs_range: float = Field(..., alias="heroEquityVsRange")
    villain_call_frequency: float = Field(..., alias="villainCallFrequency")
    hero_position: str = Field("sb", alias="heroPosition")

    @field_validator("hero_position", mode="before")
    @classmethod
    def _normalise_position(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    def to_scenario(self) -> PushFoldScenario:
        return PushFoldScenario(
            hero_chips=self.hero_chips,
            villain_chips=self.villain_chips,
            other_stacks=tuple(self.other_stacks),
            payouts=self.payouts.to_structure(),
            blinds=Blinds(sb=self.blinds.sb, bb=self.blinds.bb, ante=self.blinds.ante),
            hero_equity_vs_range=self.hero_equity_vs_range,
            villain_call_frequency=self.villain_call_frequency,
            hero_position=self.hero_position,  # type: ignore[arg-type]
        )


class _ICMController:
    def __init__(self, service: ICMService) -> None:
        self.service = service

    async def calculate(self, body: CalculateRequest) -> JSONResponse:
        try:
            payload = await self.service.calculate_async(body.domain_players(), body.payouts.to_structure())
        except ICMError as exc:
            raise HTTPException(400, str(exc)) from exc
        return JSONResponse(payload.to_dict())

    async def pressure(self, body: PressureRequest) -> JSONResponse:
        try:
            payload = await self.service.pressure_async(
                body.player_id,
                body.domain_players(),
                body.payouts.to_structure(),
            )
        except ICMError as exc:
            raise HTTPException(400, str(exc)) from exc
        return JSONResponse(payload.to_dict())

    async def push_fold(self, body: PushFoldRequest) -> JSONResponse:
        try:
            payload = await self.service.push_fold_async(body.to_scenario())
        except ICMError as exc:
            raise HTTPException(400, str(exc)) from exc
        return JSONResponse(payload.to_dict())

    async def presets(self) -> JSONResponse:
        return JSONResponse([preset.to_dict() for preset in self.service.presets()])

    async def preset(self, name: str) -> JSONResponse:
        try:
            payload = self.service.preset(name)
        except KeyError as exc:
            raise HTTPException(404, exc.args[0]) from exc
        return JSONResponse(payload.to_dict())


def create_icm_router(service: ICMService | None = None) -> APIRouter:
    controller = _ICMController(service or ICMService())
    router = APIRouter(prefix="/api/v1/icm", tags=["icm"])

    @router.post("/calculate")
    async def calculate(body: CalculateRequest) -> JSONResponse:
        return await controller.calculate(body)

    @router.post("/pressure")
    async def pressure(body: PressureRequest) -> JSONResponse:
        return await controller.pressure(body)

    @router.post("/push-fold")
    async def push_fold(body: PushFoldRequest) -> JSONResponse:
        return await controller.push_fold(body)

    @router.get("/presets")
    async def presets() -> JSONResponse:
        return await controller.presets()

    @router.get("/presets/{name}")
    async def preset(name: str) -> JSONResponse:
        return await controller.preset(name)

    return router
