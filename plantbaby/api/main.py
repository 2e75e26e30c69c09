"""PlantBaby FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from plantbaby.api.routers import identify, plants, stats
from plantbaby.core.config import Settings, get_settings
from plantbaby.core.core import PlantBaby
from plantbaby.core.errors import PlantBabyError

logger = logging.getLogger("plantbaby.api")


def create_app(settings: Settings | None = None) -> FastAPI:

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler — startup and shutdown."""
        app_settings = settings or get_settings()

        from plantbaby.core import setup_logging
        setup_logging(app_settings.log_level)

        plantbaby = PlantBaby(app_settings)
        app.state.plantbaby = plantbaby
        logger.info(f"PlantBaby started on http://{app_settings.host}:{app_settings.port}")
        yield

        plantbaby.close()
        logger.info("PlantBaby shutdown complete")

    app = FastAPI(
        title="PlantBaby",
        description="Houseplant care tracker — care log, schedules, statistics and photo identification",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(PlantBabyError)
    async def plantbaby_error_handler(request: Request, exc: PlantBabyError):
        if exc.status_code >= 500:
            logger.warning(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    # API routers
    app.include_router(plants.router, prefix="/api/plants", tags=["plants"])
    app.include_router(stats.router, prefix="/api/stats", tags=["stats"])
    app.include_router(identify.router, prefix="/api/identify", tags=["identify"])

    # Health check
    @app.get("/health", tags=["system"])
    async def health():
        return {"status": "ok", "service": "plantbaby", "version": "1.0.0"}

    return app
