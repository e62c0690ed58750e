"""
colony_core/paths.py
────────────────────
Route discovery: two independent strategies over a ColonyGraph.

Exhaustive strategy (depth-first)
──────────────────────────────────
Walks depth-first from the start room. Every interior room is marked
visited as soon as it is entered, so no two routes found by ONE walk share
an interior room through the same branch. Start and end are never marked,
so every route can begin at start and finish at end.

When the walk reaches the end room it:
  1. records the route,
  2. detaches the direct start→end tunnel for the rest of the walk
     (a one-hop route is recorded at most once),
  3. restarts from the start room with the current visited flags,
and only then lets the suspended search continue where it left off.

Each time a room is entered, the end room (if it is a neighbour) is swapped
to the front of that room's connection list, so a branch that can finish
immediately always does so first.

Shortest-path-biased strategy
──────────────────────────────
Repeated once per outgoing tunnel of the start room:
  1. collect every simple start→end path that avoids visited rooms,
  2. keep the shortest one (fewest hops, first found on ties),
  3. mark its interior rooms visited,
  4. record it unless an identical route is already recorded.

Each repetition therefore takes the shortest route left in the colony.

State
──────
Both module-level functions MUTATE the graph they are given (visited flags,
connection order). PathEnumerator hands each of them a fresh clone().
The route accumulators are explicit locals/attributes, never module globals.

Both walks keep their own stack of _Frame objects instead of recursing, so
neither the number of routes nor the length of a route is bounded by the
interpreter's recursion limit. The visiting order is the one a recursive
depth-first walk would produce.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

from antfarm.shared.models import Route, StrategyKind
from colony_core.graph import ColonyGraph

logger = logging.getLogger(__name__)


@dataclass
class _Frame:
    """One room on the walk stack: where it was reached from, and how far
    through its connection list the walk has got."""

    name: str
    path: Route
    next_index: int = 0


# ── Exhaustive strategy ───────────────────────────────────────────────────────

def _end_first(connections: List[str], end_room: str) -> None:
    """Swap the end room (if present) into position 0, in place."""
    for i, name in enumerate(connections):
        if name == end_room:
            connections[0], connections[i] = connections[i], connections[0]


class _ExhaustiveWalk:
    """
    One depth-first pass over a graph it is allowed to mutate.

    Attributes:
        routes:          Routes recorded so far, discovery order.
        direct_detached: True once any route has been completed; from then on
                         the start room no longer offers its direct tunnel
                         to the end room.
    """

    def __init__(self, graph: ColonyGraph) -> None:
        self._graph = graph
        self.routes: List[Route] = []
        self.direct_detached: bool = False

    def run(self) -> List[Route]:
        graph = self._graph
        stack: List[_Frame] = []
        self._enter(stack, graph.start_room, ())

        while stack:
            frame = stack[-1]
            # Read the live list: a restart above this frame may reorder it.
            connections = graph.room(frame.name).connections
            if frame.next_index >= len(connections):
                stack.pop()
                continue

            neighbour = connections[frame.next_index]
            frame.next_index += 1
            if (
                frame.name == graph.start_room
                and neighbour == graph.end_room
                and self.direct_detached
            ):
                continue
            if not graph.is_visited(neighbour):
                self._enter(stack, neighbour, frame.path)

        return self.routes

    def _enter(self, stack: List[_Frame], name: str, prefix: Route) -> None:
        graph = self._graph

        if name == graph.end_room:
            self.routes.append(prefix + (name,))
            self.direct_detached = True
            # Restart from start; the suspended frames resume once it is done.
            self._enter(stack, graph.start_room, ())
            return

        room = graph.room(name)
        if name != graph.start_room:
            room.visited = True
            prefix = prefix + (name,)

        _end_first(room.connections, graph.end_room)
        stack.append(_Frame(name=name, path=prefix))


def enumerate_exhaustive(graph: ColonyGraph) -> List[Route]:
    """
    Run the exhaustive depth-first strategy on `graph` (mutated in place).

    Returns:
        Routes in discovery order. May contain duplicates; RouteRanker
        removes them. Empty if the end room is unreachable.
    """
    return _ExhaustiveWalk(graph).run()


# ── Shortest-path-biased strategy ─────────────────────────────────────────────

def _collect_simple_paths(graph: ColonyGraph, found: List[Route]) -> None:
    """
    Append to `found` every simple start→end path that avoids rooms already
    marked visited, in depth-first discovery order.

    Paths include the start room as their first element.
    """
    stack = [_Frame(name=graph.start_room, path=(graph.start_room,))]

    while stack:
        frame = stack[-1]
        connections = graph.room(frame.name).connections
        if frame.next_index >= len(connections):
            stack.pop()
            continue

        neighbour = connections[frame.next_index]
        frame.next_index += 1
        if neighbour in frame.path or graph.is_visited(neighbour):
            continue

        path = frame.path + (neighbour,)
        if neighbour == graph.end_room:
            found.append(path)
        else:
            stack.append(_Frame(name=neighbour, path=path))


def enumerate_shortest(graph: ColonyGraph) -> List[Route]:
    """
    Run the shortest-path-biased strategy on `graph` (mutated in place).

    Returns:
        Distinct routes, in the order they were taken. Empty if the end
        room is unreachable.
    """
    routes: List[Route] = []

    for _ in range(len(graph.start.connections)):
        candidates: List[Route] = []
        _collect_simple_paths(graph, candidates)
        if not candidates:
            break

        # min() keeps the first candidate among equals.
        shortest = min(candidates, key=len)
        route = shortest[1:]

        for name in route[:-1]:
            graph.room(name).visited = True

        if route not in routes:
            routes.append(route)

    return routes


# ── Facade ────────────────────────────────────────────────────────────────────

class PathEnumerator:
    """
    Runs either strategy on a private clone of a graph.

    Usage:
        enumerator = PathEnumerator(graph)
        dfs_routes = enumerator.exhaustive()
        bfs_routes = enumerator.shortest()

    The graph passed in is never mutated: every call clones it first, so the
    two strategies (and repeated calls) see identical starting state.
    """

    def __init__(self, graph: ColonyGraph) -> None:
        self._graph = graph

    def exhaustive(self) -> List[Route]:
        return self.enumerate(StrategyKind.EXHAUSTIVE)

    def shortest(self) -> List[Route]:
        return self.enumerate(StrategyKind.SHORTEST)

    def enumerate(self, strategy: StrategyKind) -> List[Route]:
        working = self._graph.clone()
        if strategy == StrategyKind.EXHAUSTIVE:
            routes = enumerate_exhaustive(working)
        else:
            routes = enumerate_shortest(working)

        logger.debug("%s strategy found %d route(s): %s", strategy.value, len(routes), routes)
        return routes
