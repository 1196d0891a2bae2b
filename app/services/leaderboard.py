"""Score submission and leaderboard snapshots on top of a rank store."""

from __future__ import annotations

import logging

from app.core.config import LeaderboardPolicy
from app.models.domain import (
    MAX_PLAYER_ID_LENGTH,
    MAX_SCORE,
    LeaderboardSnapshot,
    UpdateMode,
)
from app.services.ranking import RankingEngine
from app.storage.base import RankStore

logger = logging.getLogger(__name__)


class InvalidInputError(Exception):
    """Raised for caller input that must never reach the rank store."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


def normalize_player_id(player_id: str | None) -> str:
    pid = (player_id or "").strip()
    if not pid or len(pid) > MAX_PLAYER_ID_LENGTH:
        raise InvalidInputError(
            "playerId",
            f"playerId is required and must be <= {MAX_PLAYER_ID_LENGTH} characters.",
        )
    return pid


def validate_score(score: int) -> int:
    if isinstance(score, bool) or not isinstance(score, int):
        raise InvalidInputError("score", "Score must be an integer.")
    if score < 0:
        raise InvalidInputError("score", "Score must be non-negative.")
    if score > MAX_SCORE:
        raise InvalidInputError("score", "Score must fit in a signed 64-bit integer.")
    return score


class LeaderboardService:
    def __init__(self, store: RankStore, policy: LeaderboardPolicy | None = None):
        self.store = store
        self.policy = policy or LeaderboardPolicy()
        self.engine = RankingEngine(store)

    async def submit(self, player_id: str, score: int) -> LeaderboardSnapshot:
        pid = normalize_player_id(player_id)
        score = validate_score(score)
        accumulate = self.policy.update_mode is UpdateMode.ACCUMULATE

        await self.store.upsert(pid, score, accumulate)
        logger.info("Score submitted player=%s score=%d mode=%s", pid, score, self.policy.update_mode.value)

        # Other writers may land between the upsert and this read; the snapshot is
        # whatever the store reports now, not a transactional view of the write.
        return await self.build_snapshot(pid)

    async def get_leaderboard(self, player_id: str) -> LeaderboardSnapshot:
        return await self.build_snapshot(normalize_player_id(player_id))

    async def reset(self) -> None:
        await self.store.delete_all()
        logger.warning("Leaderboard reset, all player scores deleted")

    async def build_snapshot(self, player_id: str) -> LeaderboardSnapshot:
        top_limit = max(0, self.policy.top_limit)
        nearby_range = max(0, self.policy.nearby_range)

        own = await self.engine.rank_of(player_id)
        top = await self.engine.top(top_limit)

        nearby = []
        if own.rank > 0 and nearby_range > 0:
            window = await self.engine.nearby(own.rank, nearby_range)
            # Only the requester's own row is dropped; tied players stay.
            nearby = [entry for entry in window if entry.player_id != player_id]

        return LeaderboardSnapshot(
            player_id=player_id,
            rank=own.rank,
            score=own.score,
            top=top,
            nearby=nearby,
        )

    async def ping(self) -> bool:
        return await self.store.ping()
