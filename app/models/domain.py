"""Domain types shared by the ranking engine, the service and the rank stores."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

MAX_PLAYER_ID_LENGTH = 128
MAX_SCORE = 2**63 - 1


class UpdateMode(str, Enum):
    REPLACE = "Replace"
    ACCUMULATE = "Accumulate"


@dataclass(slots=True)
class PlayerRecord:
    player_id: str
    score: int
    updated_at: datetime


@dataclass(frozen=True, slots=True)
class RankedEntry:
    player_id: str
    score: int
    rank: int


@dataclass(frozen=True, slots=True)
class RankAndScore:
    rank: int
    score: int

    @property
    def found(self) -> bool:
        return self.rank > 0


# Returned for players that have never submitted a score.
NOT_FOUND = RankAndScore(rank=-1, score=-1)


@dataclass(slots=True)
class LeaderboardSnapshot:
    player_id: str
    rank: int
    score: int
    top: list[RankedEntry] = field(default_factory=list)
    nearby: list[RankedEntry] = field(default_factory=list)
