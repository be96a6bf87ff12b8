"""ICM feature: service layer, schemas, and API router."""

from .router import (
    BlindsRequest,
    CalculateRequest,
    PayoutRequest,
    PlayerRequest,
    PressureRequest,
    PushFoldRequest,
    create_icm_router,
)
from .schemas import (
    ICMPayload,
    PlayerEquityPayload,
    PresetPayload,
    PressurePayload,
    PushFoldPayload,
    WarningPayload,
)
from .service import ICMService

__all__ = [
    "BlindsRequest",
    "CalculateRequest",
    "ICMPayload",
    "ICMService",
    "PayoutRequest",
    "PlayerEquityPayload",
    "PlayerRequest",
    "PresetPayload",
    "PressurePayload",
    "PressureRequest",
    "PushFoldPayload",
    "PushFoldRequest",
    "WarningPayload",
    "create_icm_router",
]
