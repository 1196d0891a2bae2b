"""HTTP route handlers for leaderboard operations and service health checks."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request

from app.api.errors import APIError, validation_error
from app.models.schemas import (
    HealthResponse,
    LeaderboardResponse,
    ReadyResponse,
    ResetResponse,
    SubmitScoreRequest,
)
from app.services.leaderboard import InvalidInputError, LeaderboardService

router = APIRouter(prefix="/api")


def get_service(request: Request) -> LeaderboardService:
    return request.app.state.leaderboard_service


@router.post("/submit", response_model=LeaderboardResponse)
async def submit_score(
    payload: SubmitScoreRequest,
    service: LeaderboardService = Depends(get_service),
) -> LeaderboardResponse:
    try:
        snapshot = await service.submit(payload.player_id, payload.score)
    except InvalidInputError as exc:
        raise validation_error("body", exc.field, exc.message) from exc
    return LeaderboardResponse.from_snapshot(snapshot)


@router.get("/leaderboard", response_model=LeaderboardResponse)
async def get_leaderboard(
    player_id: str | None = Query(default=None, alias="playerId"),
    service: LeaderboardService = Depends(get_service),
) -> LeaderboardResponse:
    try:
        snapshot = await service.get_leaderboard(player_id)
    except InvalidInputError as exc:
        raise validation_error("query", exc.field, exc.message) from exc
    return LeaderboardResponse.from_snapshot(snapshot)


@router.post("/reset", response_model=ResetResponse)
async def reset(service: LeaderboardService = Depends(get_service)) -> ResetResponse:
    await service.reset()
    return ResetResponse(message="Leaderboard reset")


# These probes are intended for infrastructure and do not need to appear in API docs.
@router.get("/health/live", response_model=HealthResponse, include_in_schema=False)
async def live() -> HealthResponse:
    return HealthResponse(status="ok")


@router.get("/health/ready", response_model=ReadyResponse, include_in_schema=False)
async def ready(service: LeaderboardService = Depends(get_service)) -> ReadyResponse:
    try:
        # Readiness verifies the backing store, not just process liveness.
        is_ready = await service.ping()
    except Exception as exc:
        raise APIError(
            code="STORE_UNAVAILABLE",
            message="Rank store readiness check failed",
            status_code=503,
        ) from exc

    if not is_ready:
        raise APIError(
            code="STORE_UNAVAILABLE",
            message="Rank store readiness check failed",
            status_code=503,
        )
    return ReadyResponse(status="ok")
