from __future__ import annotations

import pytest

from app.models.domain import NOT_FOUND, RankAndScore
from app.services.ranking import RankingEngine, dense_rank, rank_of, select_top, select_window

SAMPLE = {"A": 100, "B": 90, "C": 90, "D": 80}


def summarize(entries):
    return [(e.player_id, e.rank) for e in entries]


def test_dense_rank_shares_rank_on_ties_without_gaps():
    ranked = dense_rank({"D": 80, "C": 90, "A": 100, "B": 90, "E": 80, "F": 10})
    assert summarize(ranked) == [("A", 1), ("B", 2), ("C", 2), ("D", 3), ("E", 3), ("F", 4)]


def test_dense_rank_orders_ties_by_player_id_code_point():
    ranked = dense_rank({"b": 5, "B": 5, "a": 5, "Ä": 5})
    assert [e.player_id for e in ranked] == ["B", "a", "b", "Ä"]
    assert {e.rank for e in ranked} == {1}


def test_rank_of_matches_distinct_higher_scores():
    assert rank_of(SAMPLE, "A") == RankAndScore(rank=1, score=100)
    assert rank_of(SAMPLE, "B") == RankAndScore(rank=2, score=90)
    assert rank_of(SAMPLE, "C") == RankAndScore(rank=2, score=90)
    assert rank_of(SAMPLE, "D") == RankAndScore(rank=3, score=80)
    assert rank_of(SAMPLE, "ghost") is NOT_FOUND


def test_rank_of_agrees_with_dense_rank():
    scores = {f"p{i:02d}": (i * 7) % 5 for i in range(30)}
    ranked = dense_rank(scores)
    for entry in ranked:
        assert rank_of(scores, entry.player_id).rank == entry.rank


def test_select_top_breaks_ties_by_player_id():
    assert summarize(select_top(dense_rank(SAMPLE), 3)) == [("A", 1), ("B", 2), ("C", 2)]


@pytest.mark.parametrize("n, expected", [(0, 0), (-3, 0), (2, 2), (4, 4), (50, 4)])
def test_select_top_length_is_min_of_n_and_player_count(n, expected):
    assert len(select_top(dense_rank(SAMPLE), n)) == expected


def test_select_window_includes_all_ranks_in_range():
    window = select_window(dense_rank(SAMPLE), 2, 1)
    assert summarize(window) == [("A", 1), ("B", 2), ("C", 2), ("D", 3)]


def test_select_window_radius_zero_returns_tied_players():
    assert summarize(select_window(dense_rank(SAMPLE), 2, 0)) == [("B", 2), ("C", 2)]


def test_select_window_never_goes_below_rank_one():
    window = select_window(dense_rank(SAMPLE), 1, 5)
    assert min(e.rank for e in window) == 1
    assert len(window) == 4


def test_select_window_for_missing_player_is_empty():
    assert select_window(dense_rank(SAMPLE), -1, 2) == []


@pytest.mark.asyncio
async def test_engine_reads_latest_writes(memory_store):
    engine = RankingEngine(memory_store)
    for player_id, score in SAMPLE.items():
        await memory_store.upsert(player_id, score, accumulate=False)

    assert await engine.rank_of("D") == RankAndScore(rank=3, score=80)

    await memory_store.upsert("D", 95, accumulate=False)
    assert await engine.rank_of("D") == RankAndScore(rank=2, score=95)
    assert await engine.rank_of("B") == RankAndScore(rank=3, score=90)
    assert summarize(await engine.top(2)) == [("A", 1), ("D", 2)]


@pytest.mark.asyncio
async def test_engine_clamps_and_handles_missing(memory_store):
    engine = RankingEngine(memory_store)
    await memory_store.upsert("A", 1, accumulate=False)

    assert await engine.rank_of("nobody") == NOT_FOUND
    assert await engine.top(-1) == []
    assert await engine.nearby(0, 3) == []
    assert summarize(await engine.nearby(1, -2)) == [("A", 1)]
