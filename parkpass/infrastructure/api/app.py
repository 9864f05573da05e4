from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from parkpass.config.settings_env import settings
from parkpass.infrastructure.api.routers import lots, schedules, checkout, orders, staff, dashboard


def create_app() -> FastAPI:
    app = FastAPI(title="ParkPass", description="Parking lot booking and passes", version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.FRONTEND_BASE_URL],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    for module in (lots, schedules, checkout, orders, staff, dashboard):
        app.include_router(module.router)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


app = create_app()
