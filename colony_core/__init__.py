"""
colony_core — route discovery and ant scheduling for an ant colony.

Public API:
    ColonyGraph       — rooms, one-way/two-way tunnels, clone()
    PathEnumerator    — exhaustive and shortest-path-biased route discovery
    rank_routes       — dedupe + order routes by hop count
    AntScheduler      — greedy ant → route assignment
    build_turns / render_schedule / select_shorter — turn synthesis and output
    NoRoutesError     — raised when ants must be scheduled with no route

Usage:
    from colony_core import AntScheduler, ColonyGraph, PathEnumerator, rank_routes

    graph = ColonyGraph.from_spec(spec)
    routes = rank_routes(PathEnumerator(graph).exhaustive())
    scheduler = AntScheduler(graph.ant_count, routes)
    try:
        scheduler.assign()
    except NoRoutesError:
        ...                          # end room unreachable
"""

from colony_core.graph import (
    ColonyGraph,
    ColonyGraphError,
    DuplicateLinkError,
    DuplicateRoomError,
    Room,
    SelfLinkError,
    UnknownRoomError,
)
from colony_core.paths import PathEnumerator, enumerate_exhaustive, enumerate_shortest
from colony_core.ranker import rank_routes, shared_interior_rooms
from colony_core.scheduler import AntScheduler, NoRoutesError
from colony_core.formatter import (
    EmptyScheduleError,
    build_turns,
    render_schedule,
    render_turn,
    select_shorter,
)

__all__ = [
    "ColonyGraph",
    "ColonyGraphError",
    "DuplicateLinkError",
    "DuplicateRoomError",
    "Room",
    "SelfLinkError",
    "UnknownRoomError",
    "PathEnumerator",
    "enumerate_exhaustive",
    "enumerate_shortest",
    "rank_routes",
    "shared_interior_rooms",
    "AntScheduler",
    "NoRoutesError",
    "EmptyScheduleError",
    "build_turns",
    "render_schedule",
    "render_turn",
    "select_shorter",
]
