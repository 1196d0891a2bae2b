"""Rank store contract consumed by the ranking engine and leaderboard service."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Protocol

from app.models.domain import PlayerRecord, RankAndScore, RankedEntry
from app.services import ranking


class ScoreOverflowError(Exception):
    """Raised when an accumulated score would exceed the 64-bit signed range."""


class RankStore(Protocol):
    async def get(self, player_id: str) -> PlayerRecord | None: ...

    async def upsert(self, player_id: str, score: int, accumulate: bool) -> None: ...

    async def delete_all(self) -> None: ...

    async def rank_and_score(self, player_id: str) -> RankAndScore | None: ...

    async def top_n(self, n: int) -> list[RankedEntry]: ...

    async def windowed(self, center_rank: int, radius: int) -> list[RankedEntry]: ...

    async def ping(self) -> bool: ...

    async def aclose(self) -> None: ...


class ScoreMapRankStore(ABC):
    """Base for stores that rank by reading the whole score set in one pass."""

    @abstractmethod
    async def load_scores(self) -> dict[str, int]:
        """Return every player's current score."""

    async def rank_and_score(self, player_id: str) -> RankAndScore | None:
        found = ranking.rank_of(await self.load_scores(), player_id)
        return found if found.found else None

    async def top_n(self, n: int) -> list[RankedEntry]:
        return ranking.select_top(ranking.dense_rank(await self.load_scores()), n)

    async def windowed(self, center_rank: int, radius: int) -> list[RankedEntry]:
        ranked = ranking.dense_rank(await self.load_scores())
        return ranking.select_window(ranked, center_rank, radius)
