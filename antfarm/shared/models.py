"""
antfarm/shared/models.py
────────────────────────
The single source of truth for every data structure in antfarm.

Design philosophy
-----------------
Two kinds of data flow through the planner:

  1. Validated input — what the Validator hands to the core. These are
     pydantic models: schema rules (positive ant count, integer
     coordinates) are enforced at construction time, so the core never
     sees a half-formed colony.

  2. Pipeline values — routes, assignments and move schedules. These are
     plain tuples/lists/dicts behind type aliases. They are produced and
     consumed inside one process run and never serialised, so they stay
     as light as possible.

Reading guide
-------------
Read top-to-bottom. Each model builds on the ones above it.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, Field


# ─────────────────────────────────────────────────────────────────────────────
# SECTION 1: ENUMERATIONS
# ─────────────────────────────────────────────────────────────────────────────

class StrategyKind(str, Enum):
    """
    The two independent route-discovery strategies.

    EXHAUSTIVE → depth-first walk that keeps restarting from the start room
                 after every route it completes.
    SHORTEST   → repeatedly takes the shortest remaining start→end route and
                 removes its interior rooms from consideration.

    The planner runs both and keeps whichever schedule needs fewer turns.
    """
    EXHAUSTIVE = "exhaustive"
    SHORTEST = "shortest-path"

    @property
    def failure_message(self) -> str:
        """User-facing line printed when this strategy produces no schedule."""
        return f"{self.value} strategy failed"


# ─────────────────────────────────────────────────────────────────────────────
# SECTION 2: PIPELINE TYPE ALIASES
# ─────────────────────────────────────────────────────────────────────────────

# A route lists the rooms an ant enters after leaving the start room,
# ending with the end room. len(route) is the route's hop count.
# e.g., ("A", "C", "end")
Route = Tuple[str, ...]

# Ant id (1-based) → the route that ant travels.
Assignment = Dict[int, Route]

# One ant entering one room during a turn: (ant_id, room_name).
Move = Tuple[int, str]

# All moves of one synchronised turn, ordered by ascending ant id.
Turn = List[Move]

# The whole run, turn 0 first.
MoveSchedule = List[Turn]


# ─────────────────────────────────────────────────────────────────────────────
# SECTION 3: VALIDATED INPUT
# ─────────────────────────────────────────────────────────────────────────────

class RoomDecl(BaseModel):
    """
    One declared room: `name x y`.

    Coordinates only matter to the Validator (uniqueness check). The core
    works on names alone.
    """
    name: str = Field(..., min_length=1, description="Unique room name")
    x: int = Field(..., description="Horizontal coordinate")
    y: int = Field(..., description="Vertical coordinate")


class TunnelDecl(BaseModel):
    """One declared tunnel `a-b`, in the order it appeared in the input."""
    a: str = Field(..., min_length=1)
    b: str = Field(..., min_length=1)


class ColonySpec(BaseModel):
    """
    A well-formed colony, as produced by the Validator.

    Invariants guaranteed by the Validator (not re-checked by the core):
        • ant_count ≥ 1 (also enforced here by Field(ge=1)).
        • start_room ≠ end_room, both declared.
        • room names and coordinates unique.
        • every tunnel endpoint declared, no self tunnel, no duplicate tunnel
          in either direction.
        • every room other than start/end has at least one tunnel.

    Fields:
        ant_count    → number of ants waiting in the start room.
        start_room   → name of the unique ##start room.
        end_room     → name of the unique ##end room.
        rooms        → declared rooms, in input order.
        tunnels      → declared tunnels, in input order. Order matters: it is
                       the neighbour discovery order the enumerators see.
        source_lines → the raw input, echoed unchanged before the schedule.
    """
    ant_count: int = Field(..., ge=1, description="Ants to move from start to end")
    start_room: str = Field(..., min_length=1)
    end_room: str = Field(..., min_length=1)
    rooms: List[RoomDecl] = Field(default_factory=list)
    tunnels: List[TunnelDecl] = Field(default_factory=list)
    source_lines: List[str] = Field(default_factory=list)

    @property
    def room_names(self) -> List[str]:
        """Declared room names, input order."""
        return [room.name for room in self.rooms]

    @property
    def adjacency(self) -> List[Tuple[str, List[str]]]:
        """
        The colony as an ordered list of (room_name, [neighbour_names]).

        Undirected view: a tunnel a-b lists b under a and a under b.
        Neighbour order follows tunnel declaration order. The Validator's
        isolated-room rule reads this view, since the graph stores tunnels
        at start and end one-way.
        """
        neighbours: Dict[str, List[str]] = {name: [] for name in self.room_names}
        for tunnel in self.tunnels:
            neighbours[tunnel.a].append(tunnel.b)
            neighbours[tunnel.b].append(tunnel.a)
        return [(name, neighbours[name]) for name in self.room_names]


# ─────────────────────────────────────────────────────────────────────────────
# SECTION 4: PIPELINE RESULTS
# ─────────────────────────────────────────────────────────────────────────────

class StrategyOutcome(BaseModel):
    """
    Everything one strategy produced, from ranked routes to rendered lines.

    Fields:
        strategy   → which strategy this is.
        routes     → ranked routes (ascending hop count, no duplicates).
        queues     → ant ids queued on each route, parallel to `routes`.
        lines      → rendered turns, one string per turn.
    """
    strategy: StrategyKind
    routes: List[Route] = Field(default_factory=list)
    queues: List[List[int]] = Field(default_factory=list)
    lines: List[str] = Field(default_factory=list)

    @property
    def turn_count(self) -> int:
        return len(self.lines)

    @property
    def assignment(self) -> Assignment:
        """Ant id → route, rebuilt from the per-route queues."""
        return {
            ant_id: route
            for route, queue in zip(self.routes, self.queues)
            for ant_id in queue
        }


class PlanResult(BaseModel):
    """
    The planner's final answer.

    Fields:
        winner     → the strategy whose schedule was selected.
        lines      → the winning schedule, one line per turn.
        outcomes   → every strategy that succeeded, keyed by kind.
        failures   → strategies that produced no schedule. Non-empty only when
                     the planner runs with require_both=False.
    """
    winner: StrategyKind
    lines: List[str]
    outcomes: Dict[StrategyKind, StrategyOutcome] = Field(default_factory=dict)
    failures: List[StrategyKind] = Field(default_factory=list)

    @property
    def turn_count(self) -> int:
        return len(self.lines)

    def outcome(self, strategy: StrategyKind) -> Optional[StrategyOutcome]:
        return self.outcomes.get(strategy)
