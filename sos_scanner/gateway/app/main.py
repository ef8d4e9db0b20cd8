"""FastAPI entry point for the scanner gateway."""

from __future__ import annotations

from fastapi import FastAPI

from ...service import ScannerService
from .deps import get_settings
from .routers import health, scanner


def create_app(service: ScannerService | None = None) -> FastAPI:
    app = FastAPI(title="SOS Scanner Gateway", version="1.0.0")

    @app.on_event("startup")
    async def startup_event() -> None:
        settings = get_settings()
        app.state.settings = settings
        app.state.service = service or ScannerService(config=settings.to_config())

    @app.on_event("shutdown")
    async def shutdown_event() -> None:
        await app.state.service.aclose()

    app.include_router(health.router)
    app.include_router(scanner.router, prefix="/scanner", tags=["scanner"])

    @app.get("/")
    async def root() -> dict[str, str]:
        settings = get_settings()
        return {"service": app.title, "environment": settings.environment}

    return app


app = create_app()
