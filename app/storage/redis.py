"""Redis-backed rank store.

Scores live in a hash rather than a sorted set: sorted-set scores are
doubles and lose precision above 2**53, while HINCRBY works on exact
64-bit integers and rejects overflow.
"""

from __future__ import annotations

from datetime import datetime, timezone

from redis.asyncio import Redis
from redis.exceptions import ResponseError

from app.models.domain import PlayerRecord
from app.storage.base import ScoreMapRankStore, ScoreOverflowError

# KEYS: scores hash, updated hash. ARGV: player id, score, accumulate flag, timestamp.
# HINCRBY runs first so an overflow aborts the script before anything is written.
UPSERT_SCRIPT = """
if ARGV[3] == "1" then
  redis.call("HINCRBY", KEYS[1], ARGV[1], ARGV[2])
else
  redis.call("HSET", KEYS[1], ARGV[1], ARGV[2])
end
redis.call("HSET", KEYS[2], ARGV[1], ARGV[4])
return 1
"""


def create_redis_client(redis_url: str) -> Redis:
    return Redis.from_url(redis_url, decode_responses=True)


def scores_key(name: str) -> str:
    return f"lb:{name}:scores"


def updated_key(name: str) -> str:
    return f"lb:{name}:updated"


class RedisRankStore(ScoreMapRankStore):
    def __init__(self, redis_client: Redis, name: str = "global"):
        self.redis = redis_client
        self.name = name
        self._upsert = redis_client.register_script(UPSERT_SCRIPT)

    async def get(self, player_id: str) -> PlayerRecord | None:
        async with self.redis.pipeline(transaction=True) as pipe:
            pipe.hget(scores_key(self.name), player_id)
            pipe.hget(updated_key(self.name), player_id)
            score, updated_at = await pipe.execute()
        if score is None:
            return None
        return PlayerRecord(
            player_id=player_id,
            score=int(score),
            updated_at=datetime.fromisoformat(updated_at),
        )

    async def upsert(self, player_id: str, score: int, accumulate: bool) -> None:
        now = datetime.now(timezone.utc).isoformat()
        try:
            await self._upsert(
                keys=[scores_key(self.name), updated_key(self.name)],
                args=[player_id, score, "1" if accumulate else "0", now],
            )
        except ResponseError as exc:
            if "overflow" in str(exc):
                raise ScoreOverflowError(player_id) from exc
            raise

    async def delete_all(self) -> None:
        await self.redis.delete(scores_key(self.name), updated_key(self.name))

    async def load_scores(self) -> dict[str, int]:
        rows = await self.redis.hgetall(scores_key(self.name))
        return {player_id: int(score) for player_id, score in rows.items()}

    async def ping(self) -> bool:
        response = await self.redis.ping()
        return bool(response)

    async def aclose(self) -> None:
        await self.redis.aclose()
