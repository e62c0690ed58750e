"""
colony_core/scheduler.py
────────────────────────
AntScheduler: decides which route each ant takes.

The balancing rule
───────────────────
Ants are assigned one at a time, id 1 first. For ant i and every route R:

    finish(R) = len(R) + queued(R)

  len(R)    : hops on R (every room after start, end included).
  queued(R) : ants already assigned to R. Each one leaves start one turn
              before the next, so every queued ant delays the newcomer
              by exactly one turn.

The ant goes to the route with the smallest finish(R). Ties go to the
lowest route index, which is why the input must already be ranked
(shortest first).

Turn count
───────────
With q ants on route R, the last one leaves start at turn q − 1 and arrives
at turn len(R) + q − 2 (turn 0 is the first move). The schedule therefore
needs max over used routes of len(R) + q − 1 turns.

Routes as independent lanes
────────────────────────────
Nothing here checks whether two routes share an interior room. Each route is
a lane with its own queue; ants on different lanes never wait for each other.

NumPy design choices
────────────────────
  • The two vectors (lengths, queued) are int64 and sized once.
  • np.argmin returns the FIRST index of the minimum, which is exactly the
    lowest-index tie-break.
"""

from __future__ import annotations

import logging
from typing import List, Sequence

import numpy as np
from numpy.typing import NDArray

from antfarm.shared.models import Assignment, Route

logger = logging.getLogger(__name__)


class NoRoutesError(Exception):
    """
    Raised when ants must be scheduled but there is no route to put them on.

    Caller contract:
        The planner catches this and reports the strategy that produced the
        empty route set as failed. It is never a programming error: an
        unreachable end room legitimately yields zero routes.

    Attributes:
        ant_count: Number of ants that could not be scheduled.
    """

    def __init__(self, ant_count: int, message: str = "") -> None:
        self.ant_count = ant_count
        super().__init__(
            message or f"No route available for {ant_count} ant(s)."
        )


class AntScheduler:
    """
    Greedy ant-to-route assignment.

    Lifecycle:
        1. __init__() → store routes, size the numpy vectors.
        2. assign()   → place ants 1..ant_count, return the Assignment.
        3. Read:      → scheduler.queues, scheduler.turn_count.

    Calling assign() again recomputes from scratch and returns an equal result.

    Attributes:
        queues: List[List[int]] — ant ids per route, in departure order.
                Parallel to `routes`.
    """

    def __init__(self, ant_count: int, routes: Sequence[Route]) -> None:
        if ant_count < 1:
            raise ValueError(f"AntScheduler requires ant_count ≥ 1, got {ant_count}.")
        self._ant_count = ant_count
        self._routes: List[Route] = [tuple(route) for route in routes]
        self._lengths: NDArray[np.int64] = np.array(
            [len(route) for route in self._routes], dtype=np.int64
        )
        self.queues: List[List[int]] = [[] for _ in self._routes]

    @property
    def routes(self) -> List[Route]:
        return list(self._routes)

    def assign(self) -> Assignment:
        """
        Assign every ant to a route.

        Returns:
            Dict ant_id → route, covering ids 1..ant_count exactly once.

        Raises:
            NoRoutesError: if the route list is empty.
        """
        if not self._routes:
            raise NoRoutesError(self._ant_count)

        self.queues = [[] for _ in self._routes]
        queued = np.zeros(len(self._routes), dtype=np.int64)
        assignment: Assignment = {}

        for ant_id in range(1, self._ant_count + 1):
            idx = int(np.argmin(self._lengths + queued))
            self.queues[idx].append(ant_id)
            queued[idx] += 1
            assignment[ant_id] = self._routes[idx]

        logger.debug(
            "Assigned %d ant(s) over %d route(s): %s",
            self._ant_count, len(self._routes), [len(q) for q in self.queues],
        )
        return assignment

    @property
    def turn_count(self) -> int:
        """Turns needed by the current queues (0 before assign())."""
        finishes = [
            len(route) + len(queue)
            for route, queue in zip(self._routes, self.queues)
            if queue
        ]
        return max(finishes) - 1 if finishes else 0

    def __repr__(self) -> str:
        return (
            f"AntScheduler(ants={self._ant_count}, routes={len(self._routes)}, "
            f"turns={self.turn_count})"
        )
