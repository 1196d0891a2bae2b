"""Dense ranking over the current score set.

Ranks are recomputed from the full score set on every query: any write to
any player can shift everyone below it, so nothing here is cached between
calls. Ordering is ``(score desc, player_id asc)``; players with equal scores
share a rank and the next distinct score takes the next integer (1, 2, 2, 3).
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING

from app.models.domain import NOT_FOUND, RankAndScore, RankedEntry

if TYPE_CHECKING:
    from app.storage.base import RankStore


def ordering_key(player_id: str, score: int) -> tuple[int, str]:
    return (-score, player_id)


def dense_rank(scores: Mapping[str, int]) -> list[RankedEntry]:
    """Rank every player, ordered by rank then player id."""
    ordered = sorted(scores.items(), key=lambda item: ordering_key(item[0], item[1]))
    ranked: list[RankedEntry] = []
    rank = 0
    previous: int | None = None
    for player_id, score in ordered:
        if score != previous:
            rank += 1
            previous = score
        ranked.append(RankedEntry(player_id=player_id, score=score, rank=rank))
    return ranked


def rank_of(scores: Mapping[str, int], player_id: str) -> RankAndScore:
    score = scores.get(player_id)
    if score is None:
        return NOT_FOUND
    # Dense rank is one more than the number of distinct higher scores.
    higher = {other for other in scores.values() if other > score}
    return RankAndScore(rank=len(higher) + 1, score=score)


def select_top(ranked: Iterable[RankedEntry], n: int) -> list[RankedEntry]:
    n = max(0, n)
    selected: list[RankedEntry] = []
    if n == 0:
        return selected
    for entry in ranked:
        selected.append(entry)
        if len(selected) == n:
            break
    return selected


def select_window(ranked: Iterable[RankedEntry], center_rank: int, radius: int) -> list[RankedEntry]:
    if center_rank <= 0:
        return []
    radius = max(0, radius)
    low = max(1, center_rank - radius)
    high = center_rank + radius
    window: list[RankedEntry] = []
    for entry in ranked:
        if entry.rank > high:
            break
        if entry.rank >= low:
            window.append(entry)
    return window


class RankingEngine:
    """Read-only ranking queries against a rank store."""

    def __init__(self, store: RankStore):
        self.store = store

    async def rank_of(self, player_id: str) -> RankAndScore:
        found = await self.store.rank_and_score(player_id)
        return found if found is not None else NOT_FOUND

    async def top(self, n: int) -> list[RankedEntry]:
        n = max(0, n)
        if n == 0:
            return []
        return await self.store.top_n(n)

    async def nearby(self, target_rank: int, radius: int) -> list[RankedEntry]:
        if target_rank <= 0:
            return []
        return await self.store.windowed(target_rank, max(0, radius))
