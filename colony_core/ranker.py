"""
colony_core/ranker.py
─────────────────────
Route ranking: dedupe, then order by hop count.

The scheduler tries routes in ranked order and breaks ties by lowest index,
so ranking decides which of two equally good routes an ant gets.
"""

from __future__ import annotations

from collections import Counter
from typing import Iterable, List, Set

from antfarm.shared.models import Route


def rank_routes(routes: Iterable[Route]) -> List[Route]:
    """
    Return the distinct routes sorted by ascending hop count.

    Duplicates keep their first occurrence. sorted() is stable, so routes of
    equal length stay in discovery order.
    """
    unique = dict.fromkeys(tuple(route) for route in routes)
    return sorted(unique, key=len)


def shared_interior_rooms(routes: Iterable[Route]) -> Set[str]:
    """
    Interior rooms (everything but the end room) used by more than one route.

    Routes are scheduled as independent lanes, so two routes through the
    same room can put two ants in that room on the same turn. This helper
    only reports the overlap; nothing in the pipeline acts on it.
    """
    counts = Counter(name for route in routes for name in set(route[:-1]))
    return {name for name, seen in counts.items() if seen > 1}
