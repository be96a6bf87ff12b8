from __future__ import annotations

import os

from fastapi import FastAPI

from ..core.config import EngineConfig
from ..features.icm import ICMService, create_icm_router


def create_app(config: EngineConfig | None = None) -> FastAPI:
    application = FastAPI(title="GTO ICM", description="Independent Chip Model equity and push/fold API")
    application.include_router(create_icm_router(ICMService(config)))

    @application.get("/healthz")
    async def healthz() -> dict[str, str]:
        return {"status": "ok"}

    return application


app = create_app()


def main() -> None:  # pragma: no cover - runner
    import uvicorn

    host = os.environ.get("BIND", "127.0.0.1")
    port = int(os.environ.get("PORT", "8000"))
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":  # pragma: no cover
    main()
