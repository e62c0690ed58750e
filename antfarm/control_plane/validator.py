"""
antfarm/control_plane/validator.py
──────────────────────────────────
Input validation: raw colony description → ColonySpec.

The validator is the first gate in the pipeline. Nothing downstream
re-checks its work: the core assumes every name resolves, every tunnel is
unique and every interior room is connected.

Input format
─────────────
    3                 ← number of ants (integer ≥ 1)
    ##start
    start 0 0         ← room: name x y
    ##end
    end 5 0
    mid 2 0
    # a comment       ← ignored
    start-mid         ← tunnels: name-name, all at the end of the file
    mid-end

What it checks (in order)
──────────────────────────
  1. At least MIN_SIGNIFICANT_LINES lines once comments are dropped.
  2. First line is an integer ≥ 1.
  3. No line holds more than one '-' or more than two spaces.
  4. No line appears twice; the last line is not a marker.
  5. Exactly one ##start and one ##end, each directly followed by a room.
  6. Every other line is a room or a tunnel; tunnels come last.
  7. Room names and coordinates are unique.
  8. Tunnel endpoints exist; no self tunnel; no duplicate tunnel.
  9. Every room other than start/end has at least one tunnel.

Start and end may be left unconnected: an unreachable end room is not an
input error, it is a colony with no solution, reported by the planner.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from pydantic import ValidationError

from antfarm.shared.models import ColonySpec, RoomDecl, TunnelDecl
from colony_core.graph import ColonyGraph, ColonyGraphError

logger = logging.getLogger(__name__)

# ── Format constants ──────────────────────────────────────────────────────────

START_MARKER: str = "##start"
END_MARKER: str = "##end"

COMMENT_PREFIX: str = "#"
"""Lines starting with this are comments, unless they are a marker."""

MIN_SIGNIFICANT_LINES: int = 6
"""Ant count, ##start, start room, ##end, end room, one tunnel."""

ERROR_PREFIX: str = "ERROR: invalid data format"

_INTEGER = re.compile(r"^[+-]?\d+$")


class InvalidFormatError(Exception):
    """
    Raised when the colony description is malformed.

    Attributes:
        reason: Human-readable explanation of the first rule that failed.
    """

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)

    @property
    def diagnostic(self) -> str:
        """The single line shown to the user."""
        return f"{ERROR_PREFIX}. {self.reason}" if self.reason else ERROR_PREFIX


# ── Public API ────────────────────────────────────────────────────────────────

def validate_lines(lines: Sequence[str]) -> ColonySpec:
    """
    Validate a colony description and return it as a ColonySpec.

    Args:
        lines: The input, one element per line, without line terminators.

    Returns:
        A ColonySpec whose source_lines are `lines`, unmodified.

    Raises:
        InvalidFormatError: on the first rule violation.
    """
    source = list(lines)
    significant = _strip_comments(source)

    if len(significant) < MIN_SIGNIFICANT_LINES:
        raise InvalidFormatError(
            f"Expected at least {MIN_SIGNIFICANT_LINES} non-comment lines, "
            f"got {len(significant)}."
        )

    ant_count = _parse_ant_count(significant[0])
    body = significant[1:]

    _check_dashes(body)
    _check_spaces(body)
    _check_duplicate_lines(body)
    _check_last_line(body)

    start_room = _marked_room(body, START_MARKER)
    end_room = _marked_room(body, END_MARKER)

    rooms, tunnels = _split_rooms_and_tunnels(body)
    _check_unique_rooms(rooms)

    try:
        spec = ColonySpec(
            ant_count=ant_count,
            start_room=start_room.name,
            end_room=end_room.name,
            rooms=rooms,
            tunnels=tunnels,
            source_lines=source,
        )
    except ValidationError as e:
        raise InvalidFormatError(f"Colony schema rejected: {e.errors()[0]['msg']}") from e

    _check_graph(spec)
    _check_isolated_rooms(spec)

    logger.debug(
        "Validated colony: %d ant(s), %d room(s), %d tunnel(s), %s → %s",
        spec.ant_count, len(spec.rooms), len(spec.tunnels),
        spec.start_room, spec.end_room,
    )
    return spec


def load_colony(path: Union[str, Path]) -> ColonySpec:
    """
    Read and validate a colony file.

    Raises:
        OSError:            the file cannot be read (left to the caller).
        InvalidFormatError: the content is not UTF-8 text, or is malformed.
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise InvalidFormatError(
            f"File is not valid UTF-8 (byte {e.object[e.start]:#04x} at offset {e.start})."
        ) from e
    return validate_lines(text.splitlines())


# ── Line helpers ──────────────────────────────────────────────────────────────

def _is_marker(line: str) -> bool:
    return line in (START_MARKER, END_MARKER)


def _strip_comments(lines: Sequence[str]) -> List[str]:
    return [
        line for line in lines
        if not line.startswith(COMMENT_PREFIX) or _is_marker(line)
    ]


def _parse_room(line: str) -> Optional[RoomDecl]:
    """Return the room declared by `line`, or None if it is not a room line."""
    fields = line.split(" ")
    if len(fields) != 3 or not fields[0]:
        return None
    name, x, y = fields
    if not _INTEGER.match(x) or not _INTEGER.match(y):
        return None
    return RoomDecl(name=name, x=int(x), y=int(y))


def _parse_tunnel(line: str) -> Optional[TunnelDecl]:
    """Return the tunnel declared by `line`, or None if it is not a tunnel line."""
    parts = line.split("-")
    if len(parts) != 2:
        return None
    a, b = parts
    if not a or not b or " " in line:
        return None
    return TunnelDecl(a=a, b=b)


# ── Individual checks ─────────────────────────────────────────────────────────

def _parse_ant_count(line: str) -> int:
    if not _INTEGER.match(line):
        raise InvalidFormatError(f"First line must be the number of ants, got {line!r}.")
    ant_count = int(line)
    if ant_count <= 0:
        raise InvalidFormatError(f"Number of ants is invalid ({ant_count}).")
    return ant_count


def _check_dashes(lines: Sequence[str]) -> None:
    for line in lines:
        if line.count("-") > 1:
            raise InvalidFormatError(f"2 or more dashes in a line are not allowed: {line!r}.")


def _check_spaces(lines: Sequence[str]) -> None:
    for line in lines:
        if line.count(" ") > 2:
            raise InvalidFormatError(f"3 or more spaces in a line are not allowed: {line!r}.")


def _check_duplicate_lines(lines: Sequence[str]) -> None:
    seen = set()
    for line in lines:
        if line in seen:
            raise InvalidFormatError(f"Duplicate lines are not allowed: {line!r}.")
        seen.add(line)


def _check_last_line(lines: Sequence[str]) -> None:
    if lines and lines[-1].startswith(COMMENT_PREFIX):
        raise InvalidFormatError(f"The last line cannot be {lines[-1]!r}.")


def _marked_room(lines: Sequence[str], marker: str) -> RoomDecl:
    """Return the room declared right after the (unique) `marker` line."""
    positions = [i for i, line in enumerate(lines) if line == marker]
    if not positions:
        raise InvalidFormatError(f"No {marker} room.")
    if len(positions) > 1:
        raise InvalidFormatError(f"More than one {marker}.")

    i = positions[0]
    room = _parse_room(lines[i + 1]) if i + 1 < len(lines) else None
    if room is None:
        raise InvalidFormatError(f"{marker} must be followed by a room 'name x y'.")
    return room


def _split_rooms_and_tunnels(
    lines: Sequence[str],
) -> Tuple[List[RoomDecl], List[TunnelDecl]]:
    """
    Classify every non-marker line; tunnels must form one block at the end.
    """
    rooms: List[RoomDecl] = []
    tunnels: List[TunnelDecl] = []

    for line in lines:
        if _is_marker(line):
            if tunnels:
                raise InvalidFormatError("All tunnels have to be continuous at the end.")
            continue

        room = _parse_room(line)
        if room is not None:
            if tunnels:
                raise InvalidFormatError("All tunnels have to be continuous at the end.")
            rooms.append(room)
            continue

        tunnel = _parse_tunnel(line)
        if tunnel is None:
            raise InvalidFormatError(f"Room name or room coordinates invalid: {line!r}.")
        tunnels.append(tunnel)

    return rooms, tunnels


def _check_unique_rooms(rooms: Sequence[RoomDecl]) -> None:
    names = set()
    coords = set()
    for room in rooms:
        if room.name in names:
            raise InvalidFormatError(f"Duplicate room names are not allowed: {room.name!r}.")
        if (room.x, room.y) in coords:
            raise InvalidFormatError(
                f"Duplicate coordinates are not allowed: ({room.x}, {room.y})."
            )
        names.add(room.name)
        coords.add((room.x, room.y))
def _check_graph(spec: ColonySpec) -> None:
    """
    Build the graph once to check tunnel endpoints, self tunnels and
    duplicates with the same rules the core uses.
    """
    try:
        ColonyGraph.from_spec(spec)
    except ColonyGraphError as e:
        raise InvalidFormatError(str(e)) from e


def _check_isolated_rooms(spec: ColonySpec) -> None:
    """
    Every interior room needs a tunnel. Uses the undirected adjacency view:
    the graph stores tunnels at start and end one-way, so a room's own
    connection list may be empty even though a tunnel touches it.
    """
    for name, neighbours in spec.adjacency:
        if name in (spec.start_room, spec.end_room) or neighbours:
            continue
        raise InvalidFormatError(f"The room {name!r} is not connected to the anthill.")
