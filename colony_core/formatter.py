"""
colony_core/formatter.py
────────────────────────
ScheduleFormatter: from route queues to printable turns.

Turn synthesis
───────────────
For every route, in ranked order, and every ant queued on it:

    the ant at queue position j enters route[k] on turn j + k.

So the first ant on a route leaves start on turn 0, the second on turn 1,
and so on. Different routes start in parallel on turn 0. Turns from all
routes are merged by absolute index.

Rendering
──────────
A move renders as "L{ant_id}-{room}". A turn is its moves joined by single
spaces, ordered by ascending ant id (numeric: L2 before L10).

Winner selection
─────────────────
Given the rendered schedules of both strategies, the one with fewer turns
wins. Equal turn counts go to the exhaustive strategy. A strategy that
produced no turns counts as failed and can only win if the other one failed
too, in which case there is nothing to select.
"""

from __future__ import annotations

from typing import List, Sequence, Tuple

from antfarm.shared.models import Move, MoveSchedule, Route, StrategyKind, Turn

MOVE_TOKEN_FORMAT: str = "L{ant_id}-{room}"
"""Token for one ant entering one room."""

TOKEN_SEPARATOR: str = " "
"""Separator between tokens of the same turn."""


class EmptyScheduleError(Exception):
    """Raised by select_shorter() when neither strategy produced a turn."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message or "Neither strategy produced a schedule.")


def build_turns(
    routes: Sequence[Route],
    queues: Sequence[Sequence[int]],
) -> MoveSchedule:
    """
    Merge every route's ant queue into one turn-indexed schedule.

    Args:
        routes: Ranked routes.
        queues: Ant ids per route, departure order. Parallel to `routes`.

    Returns:
        One list of (ant_id, room) moves per turn, each sorted by ant id.
        Empty when no ant is queued anywhere.
    """
    schedule: MoveSchedule = []
    for route, queue in zip(routes, queues):
        for position, ant_id in enumerate(queue):
            for hop, room in enumerate(route):
                turn = position + hop
                while len(schedule) <= turn:
                    schedule.append([])
                schedule[turn].append((ant_id, room))

    for turn_moves in schedule:
        turn_moves.sort(key=lambda move: move[0])
    return schedule


def render_move(move: Move) -> str:
    ant_id, room = move
    return MOVE_TOKEN_FORMAT.format(ant_id=ant_id, room=room)


def render_turn(turn: Turn) -> str:
    """Render one turn, tokens ordered by ascending ant id."""
    ordered = sorted(turn, key=lambda move: move[0])
    return TOKEN_SEPARATOR.join(render_move(move) for move in ordered)


def render_schedule(schedule: MoveSchedule) -> List[str]:
    return [render_turn(turn) for turn in schedule]


def select_shorter(
    exhaustive: Sequence[str],
    shortest: Sequence[str],
) -> Tuple[StrategyKind, List[str]]:
    """
    Pick the schedule with fewer turns.

    Args:
        exhaustive: Rendered turns of the exhaustive strategy (may be empty).
        shortest:   Rendered turns of the shortest-path strategy (may be empty).

    Returns:
        (winning strategy, its turns).

    Raises:
        EmptyScheduleError: both inputs are empty.
    """
    if not exhaustive and not shortest:
        raise EmptyScheduleError()
    if not shortest:
        return StrategyKind.EXHAUSTIVE, list(exhaustive)
    if not exhaustive:
        return StrategyKind.SHORTEST, list(shortest)
    if len(exhaustive) > len(shortest):
        return StrategyKind.SHORTEST, list(shortest)
    return StrategyKind.EXHAUSTIVE, list(exhaustive)
