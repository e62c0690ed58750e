"""
colony_core/graph.py
────────────────────
The ColonyGraph: rooms, tunnels, and the per-walk visited flags.

How the graph is stored
────────────────────────
Each Room keeps an ordered list of neighbour *names* (not Room objects).
Insertion order is discovery order: the enumerators walk neighbours in the
order tunnels were declared, so the same input always yields the same routes.

Rooms are held in a dict keyed by name. Python dicts preserve insertion
order, so iterating the graph still follows declaration order while
lookup(name) stays O(1).

Directed storage of an undirected colony
─────────────────────────────────────────
Tunnels are undirected in the input, but two kinds are stored one-way:

  • A tunnel touching the END room is stored only as "other → end".
    The end room's own list never points back out.
  • A tunnel touching the START room is stored only as "start → other".
    No room ever points back into the start room.

Everything else is stored in both rooms' lists. With this layout an
enumerator can never walk back into start or out of end, so neither walk
needs special cases for those rooms.

Per-walk state
───────────────
Room.visited is scratch state for ONE enumeration pass. Each strategy works
on its own clone() of the graph, so flags set by one walk are never seen by
the other.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Iterator, List, Optional

if TYPE_CHECKING:
    from antfarm.shared.models import ColonySpec


# ── Errors ────────────────────────────────────────────────────────────────────

class ColonyGraphError(Exception):
    """Base class for every graph construction or lookup failure."""


class UnknownRoomError(ColonyGraphError):
    """
    Raised when a room name does not resolve to a declared room.

    Inside the core this is a contract violation: the Validator guarantees
    every referenced name exists, so the error is never caught by the
    pipeline and ends the run.

    Attributes:
        name: The name that failed to resolve.
    """

    def __init__(self, name: str, message: str = "") -> None:
        self.name = name
        super().__init__(message or f"Room {name!r} does not exist.")


class DuplicateRoomError(ColonyGraphError):
    """Raised by add_room() when the name is already declared."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Room {name!r} is declared more than once.")


class DuplicateLinkError(ColonyGraphError):
    """Raised by add_link() when the pair is already linked, in either direction."""

    def __init__(self, a: str, b: str) -> None:
        self.a = a
        self.b = b
        super().__init__(f"Duplicate link ({a} --- {b}).")


class SelfLinkError(ColonyGraphError):
    """Raised by add_link() when both endpoints are the same room."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Room {name!r} cannot be linked to itself.")


# ── Room ──────────────────────────────────────────────────────────────────────

@dataclass
class Room:
    """
    One room of the colony.

    Attributes:
        name:        Unique room name.
        connections: Names of the rooms reachable in one hop, discovery order.
        visited:     Scratch flag for the current enumeration pass.
    """

    name: str
    connections: List[str] = field(default_factory=list)
    visited: bool = False

    def __repr__(self) -> str:
        flag = ", visited" if self.visited else ""
        return f"Room({self.name!r} -> {self.connections}{flag})"


# ── Graph ─────────────────────────────────────────────────────────────────────

class ColonyGraph:
    """
    Owns every Room plus the colony's start room, end room and ant count.

    Usage:
        graph = ColonyGraph(start_room="start", end_room="end", ant_count=3)
        graph.add_room("start")
        graph.add_room("end")
        graph.add_link("start", "end")

        working = graph.clone()     # independent visited flags

    Attributes:
        start_room: Name of the unique start room.
        end_room:   Name of the unique end room.
        ant_count:  Number of ants to move, ≥ 1.
    """

    def __init__(self, start_room: str, end_room: str, ant_count: int) -> None:
        if ant_count < 1:
            raise ValueError(f"ColonyGraph requires ant_count ≥ 1, got {ant_count}.")
        if start_room == end_room:
            raise ValueError(
                f"Start and end room must differ, both are {start_room!r}."
            )

        self.start_room = start_room
        self.end_room = end_room
        self.ant_count = ant_count
        self._rooms: Dict[str, Room] = {}

    @classmethod
    def from_spec(cls, spec: "ColonySpec") -> "ColonyGraph":
        """
        Build a graph from a validated ColonySpec.

        Rooms are added in declaration order, then tunnels in declaration
        order. Both orders are significant for route discovery.
        """
        graph = cls(spec.start_room, spec.end_room, spec.ant_count)
        for room in spec.rooms:
            graph.add_room(room.name)
        for tunnel in spec.tunnels:
            graph.add_link(tunnel.a, tunnel.b)
        return graph

    # ── Construction ──────────────────────────────────────────────────────────

    def add_room(self, name: str) -> Room:
        """Declare a room with no connections. Raises DuplicateRoomError on repeat."""
        if name in self._rooms:
            raise DuplicateRoomError(name)
        room = Room(name=name)
        self._rooms[name] = room
        return room

    def add_link(self, a: str, b: str) -> None:
        """
        Record the tunnel a-b using the directed storage policy.

        Raises:
            UnknownRoomError:   either endpoint is undeclared.
            SelfLinkError:      a == b.
            DuplicateLinkError: the pair is already linked in either direction.
        """
        room_a = self.room(a)
        room_b = self.room(b)
        if a == b:
            raise SelfLinkError(a)
        if b in room_a.connections or a in room_b.connections:
            raise DuplicateLinkError(a, b)

        # End takes precedence, so a start-end tunnel lands on start only.
        if a == self.end_room:
            room_b.connections.append(a)
        elif b == self.end_room:
            room_a.connections.append(b)
        elif b == self.start_room:
            room_b.connections.append(a)
        elif a == self.start_room:
            room_a.connections.append(b)
        else:
            room_a.connections.append(b)
            room_b.connections.append(a)

    # ── Queries ───────────────────────────────────────────────────────────────

    def lookup(self, name: str) -> Optional[Room]:
        """Return the room called `name`, or None."""
        return self._rooms.get(name)

    def room(self, name: str) -> Room:
        """Return the room called `name`. Raises UnknownRoomError if absent."""
        room = self._rooms.get(name)
        if room is None:
            raise UnknownRoomError(name)
        return room

    @property
    def start(self) -> Room:
        return self.room(self.start_room)

    @property
    def end(self) -> Room:
        return self.room(self.end_room)

    def is_visited(self, name: str) -> bool:
        return self.room(name).visited

    def clone(self) -> "ColonyGraph":
        """
        Deep copy: new Room objects, new connection lists, same visited flags.

        Each enumeration strategy runs on its own clone so that marking
        rooms visited (or reordering connections) in one walk leaves the
        other walk's graph untouched.
        """
        twin = ColonyGraph(self.start_room, self.end_room, self.ant_count)
        twin._rooms = copy.deepcopy(self._rooms)
        return twin

    # ── Container protocol ────────────────────────────────────────────────────

    def __contains__(self, name: object) -> bool:
        return name in self._rooms

    def __iter__(self) -> Iterator[Room]:
        return iter(self._rooms.values())

    def __len__(self) -> int:
        return len(self._rooms)

    def __repr__(self) -> str:
        return (
            f"ColonyGraph(rooms={len(self._rooms)}, start={self.start_room!r}, "
            f"end={self.end_room!r}, ants={self.ant_count})"
        )
