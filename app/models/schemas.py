"""Pydantic request/response schemas for the public leaderboard API.

JSON field names are camelCase (``playerId``, ``topPlayers``); the models
use snake_case attributes with generated aliases. These models define input
validation and response contracts used by routes, exception handlers and
the HTTP client.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, StringConstraints
from pydantic.alias_generators import to_camel

from app.models.domain import MAX_PLAYER_ID_LENGTH, MAX_SCORE, LeaderboardSnapshot, RankedEntry

PlayerId = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=1, max_length=MAX_PLAYER_ID_LENGTH),
]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ErrorBody(BaseModel):
    code: str
    message: str
    details: dict[str, Any] | None = None


class ErrorResponse(BaseModel):
    error: ErrorBody


class SubmitScoreRequest(CamelModel):
    player_id: PlayerId
    score: int = Field(ge=0, le=MAX_SCORE)


class LeaderboardPlayer(CamelModel):
    player_id: str
    score: int
    rank: int

    @classmethod
    def from_entry(cls, entry: RankedEntry) -> LeaderboardPlayer:
        return cls(player_id=entry.player_id, score=entry.score, rank=entry.rank)


class LeaderboardResponse(CamelModel):
    player_id: str
    player_rank: int
    player_score: int
    top_players: list[LeaderboardPlayer]
    nearby_players: list[LeaderboardPlayer]

    @classmethod
    def from_snapshot(cls, snapshot: LeaderboardSnapshot) -> LeaderboardResponse:
        return cls(
            player_id=snapshot.player_id,
            player_rank=snapshot.rank,
            player_score=snapshot.score,
            top_players=[LeaderboardPlayer.from_entry(e) for e in snapshot.top],
            nearby_players=[LeaderboardPlayer.from_entry(e) for e in snapshot.nearby],
        )


class ResetResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    status: Literal["ok"]


class ReadyResponse(BaseModel):
    status: Literal["ok"]
