"""Identifier allocation for points.

A pool of unique ids is generated before any segment exists and then
drawn from without replacement.  Two strategies are supported and must
be picked explicitly:

``counter``
    Dense reverse counter ``start, start - 1, ...``.  Deterministic, so
    re-running an ingestion overwrites the same points.
``random``
    Uniform random ids with duplicate rejection.  Unlikely to collide
    with ids that already exist in a shared collection, at the cost of
    reproducibility (unless seeded).
"""

from __future__ import annotations

import logging
import random
import threading
from collections import deque
from enum import Enum

from segment_rag.errors import PoolExhaustedError
from segment_rag.retrieval.models import MAX_POINT_ID

logger = logging.getLogger(__name__)

RANDOM_ID_BOUND = 2**63


class IdStrategy(str, Enum):
    COUNTER = "counter"
    RANDOM = "random"


class IdentifierPool:
    """Single-owner pool of unique ids.

    Draws are serialised by a lock, so the pool stays duplicate-free even
    if several workers share it.
    """

    def __init__(self, values: list[int]) -> None:
        if len(set(values)) != len(values):
            raise ValueError("identifier pool values must be unique")
        self._initial = frozenset(values)
        self._queue = deque(values)
        self._issued = 0
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._queue)

    @property
    def remaining(self) -> int:
        return len(self._queue)

    @property
    def issued(self) -> int:
        return self._issued

    def values(self) -> frozenset[int]:
        """Every id the pool was created with."""
        return self._initial

    def take_one(self) -> int:
        """Remove and return one id.

        Raises
        ------
        PoolExhaustedError
            The pool is empty.  There is no refill.
        """
        with self._lock:
            if not self._queue:
                raise PoolExhaustedError(f"identifier pool exhausted after {self._issued} ids")
            self._issued += 1
            return self._queue.popleft()

    def take(self, n: int) -> list[int]:
        """Remove and return *n* ids, or none at all if fewer remain."""
        if n < 0:
            raise ValueError(f"n must be >= 0, got {n}")
        with self._lock:
            if n > len(self._queue):
                raise PoolExhaustedError(
                    f"requested {n} ids but only {len(self._queue)} remain "
                    f"({self._issued} already issued)"
                )
            self._issued += n
            return [self._queue.popleft() for _ in range(n)]


def _reverse_counter(count: int, start: int | None) -> list[int]:
    if start is None:
        start = count - 1
    if start > MAX_POINT_ID:
        raise ValueError(f"start {start} does not fit in 64 bits")
    if start < count - 1:
        raise ValueError(f"start {start} too small for {count} non-negative ids")
    return list(range(start, start - count, -1))


def _random_unique(count: int, seed: int | None) -> list[int]:
    rng = random.Random(seed)
    seen: set[int] = set()
    values: list[int] = []
    while len(values) < count:
        candidate = rng.randrange(RANDOM_ID_BOUND)
        if candidate in seen:
            continue
        seen.add(candidate)
        values.append(candidate)
    return values


def allocate(
    count: int,
    strategy: IdStrategy | str,
    *,
    start: int | None = None,
    seed: int | None = None,
) -> IdentifierPool:
    """Generate a pool of *count* distinct ids using *strategy*.

    Parameters
    ----------
    count:
        Pool size; should exceed the number of segments the run can produce.
    strategy:
        ``"counter"`` or ``"random"``.
    start:
        Highest id for the counter strategy (default ``count - 1``).
    seed:
        Seed for the random strategy.
    """
    if count < 0:
        raise ValueError(f"count must be >= 0, got {count}")
    strategy = IdStrategy(strategy)
    if strategy is IdStrategy.COUNTER:
        values = _reverse_counter(count, start)
    else:
        values = _random_unique(count, seed)
    logger.info("Allocated %d ids (strategy=%s)", count, strategy.value)
    return IdentifierPool(values)


def take_one(pool: IdentifierPool) -> int:
    """Remove and return one id from *pool*."""
    return pool.take_one()
