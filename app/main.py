"""FastAPI application wiring for settings, routes, error handlers, and lifespan."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.api.errors import APIError
from app.api.routes import router
from app.core.config import Settings, get_settings
from app.core.logging import configure_logging
from app.models.schemas import ErrorBody, ErrorResponse
from app.services.leaderboard import LeaderboardService
from app.storage.base import RankStore
from app.storage.memory import InMemoryRankStore
from app.storage.redis import RedisRankStore, create_redis_client

logger = logging.getLogger(__name__)


def create_store(settings: Settings) -> RankStore:
    if settings.storage_backend == "memory":
        return InMemoryRankStore()
    return RedisRankStore(create_redis_client(settings.redis_url), name=settings.leaderboard_name)


def create_app(settings: Settings | None = None) -> FastAPI:
    # Invalid configuration raises here, before the app can serve anything.
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def app_lifespan(app: FastAPI):
        store = create_store(settings)
        app.state.store = store
        app.state.leaderboard_service = LeaderboardService(store, settings.policy())
        logger.info(
            "Leaderboard ready backend=%s mode=%s top=%d nearby=%d",
            settings.storage_backend,
            settings.update_mode.value,
            settings.top_limit,
            settings.nearby_range,
        )
        try:
            yield
        finally:
            await store.aclose()

    app = FastAPI(title="Leaderboard API", version="1.0.0", lifespan=app_lifespan)
    app.state.settings = settings

    @app.exception_handler(APIError)
    async def api_error_handler(_: Request, exc: APIError) -> JSONResponse:
        payload = ErrorResponse(
            error=ErrorBody(code=exc.code, message=exc.message, details=exc.details),
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=payload.model_dump(exclude_none=True),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
        errors = [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
            for err in exc.errors()
        ]
        payload = ErrorResponse(
            error=ErrorBody(
                code="VALIDATION_ERROR",
                message="Request validation failed",
                details={"errors": errors},
            ),
        )
        return JSONResponse(status_code=400, content=payload.model_dump(exclude_none=True))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        payload = ErrorResponse(
            error=ErrorBody(code="INTERNAL_ERROR", message="An unexpected error occurred"),
        )
        return JSONResponse(status_code=500, content=payload.model_dump(exclude_none=True))

    app.include_router(router)
    return app


app = create_app()
