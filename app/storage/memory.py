"""In-process rank store, used for local runs and tests."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone

from app.models.domain import MAX_SCORE, PlayerRecord
from app.storage.base import ScoreMapRankStore, ScoreOverflowError


class InMemoryRankStore(ScoreMapRankStore):
    def __init__(self) -> None:
        self._records: dict[str, PlayerRecord] = {}

    async def get(self, player_id: str) -> PlayerRecord | None:
        record = self._records.get(player_id)
        return replace(record) if record is not None else None

    async def upsert(self, player_id: str, score: int, accumulate: bool) -> None:
        # No await between reading and writing, so a cancelled task can't leave a half-applied update.
        current = self._records.get(player_id)
        new_score = current.score + score if accumulate and current is not None else score
        if new_score > MAX_SCORE:
            raise ScoreOverflowError(player_id)
        self._records[player_id] = PlayerRecord(
            player_id=player_id,
            score=new_score,
            updated_at=datetime.now(timezone.utc),
        )

    async def delete_all(self) -> None:
        self._records.clear()

    async def load_scores(self) -> dict[str, int]:
        return {player_id: record.score for player_id, record in self._records.items()}

    async def ping(self) -> bool:
        return True

    async def aclose(self) -> None:
        return None
