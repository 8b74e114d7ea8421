"""Unit tests for identifier allocation."""

from __future__ import annotations

import threading

import pytest

from segment_rag.errors import PoolExhaustedError
from segment_rag.ingestion.ids import RANDOM_ID_BOUND, IdentifierPool, IdStrategy, allocate, take_one


@pytest.mark.parametrize("strategy", ["counter", "random"])
@pytest.mark.parametrize("count", [0, 1, 7, 1000])
def test_allocate_returns_distinct_values(strategy: str, count: int) -> None:
    pool = allocate(count, strategy, seed=1)
    assert len(pool.values()) == count
    assert pool.remaining == count


@pytest.mark.parametrize("strategy", list(IdStrategy))
def test_take_one_never_repeats_and_exhausts(strategy: IdStrategy) -> None:
    pool = allocate(200, strategy, seed=42)
    drawn = [take_one(pool) for _ in range(200)]
    assert len(set(drawn)) == 200
    assert set(drawn) == pool.values()
    with pytest.raises(PoolExhaustedError):
        take_one(pool)


def test_counter_is_dense_and_descending() -> None:
    pool = allocate(5, IdStrategy.COUNTER)
    assert [pool.take_one() for _ in range(5)] == [4, 3, 2, 1, 0]


def test_counter_is_reproducible_across_runs() -> None:
    first = allocate(10, "counter", start=10_000)
    second = allocate(10, "counter", start=10_000)
    assert first.take(10) == second.take(10) == list(range(10_000, 9_990, -1))


def test_counter_start_bounds() -> None:
    with pytest.raises(ValueError, match="too small"):
        allocate(10, "counter", start=5)
    with pytest.raises(ValueError, match="64 bits"):
        allocate(1, "counter", start=2**64)
    assert allocate(1, "counter", start=2**64 - 1).take_one() == 2**64 - 1


def test_random_values_are_in_range_and_seedable() -> None:
    a = allocate(100, "random", seed=7).take(100)
    b = allocate(100, "random", seed=7).take(100)
    assert a == b
    assert all(0 <= v < RANDOM_ID_BOUND for v in a)


def test_strategy_must_be_known() -> None:
    with pytest.raises(ValueError):
        allocate(3, "sequential")


def test_negative_count_rejected() -> None:
    with pytest.raises(ValueError):
        allocate(-1, "counter")


def test_take_is_all_or_nothing() -> None:
    pool = allocate(3, "counter")
    with pytest.raises(PoolExhaustedError):
        pool.take(4)
    assert pool.remaining == 3
    assert pool.take(3) == [2, 1, 0]
    assert pool.issued == 3
    assert pool.take(0) == []


def test_pool_rejects_duplicate_values() -> None:
    with pytest.raises(ValueError, match="unique"):
        IdentifierPool([1, 2, 2])


def test_concurrent_draws_stay_unique() -> None:
    pool = allocate(4000, "random", seed=3)
    drawn: list[int] = []
    lock = threading.Lock()

    def worker() -> None:
        for _ in range(500):
            value = pool.take_one()
            with lock:
                drawn.append(value)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(drawn) == len(set(drawn)) == 4000
    assert pool.remaining == 0
