"""
tests/test_planner.py
─────────────────────
Planner + CLI test suite: the whole pipeline, input to printed turns.

Reading guide
─────────────
Group 1 — run_strategy()
    One strategy end to end, graph isolation, overlap warning.

Group 2 — plan_moves()
    Winner selection on topologies where the strategies agree or differ,
    unreachable end, require_both policy.

Group 3 — Large colonies
    Route counts and route lengths beyond the default recursion limit.

Group 4 — CLI
    stdout contract and exit codes.
"""

from __future__ import annotations

import logging
from typing import List, Tuple

import pytest

from antfarm import cli
from antfarm.control_plane import planner
from antfarm.control_plane.planner import (
    ScheduleUnavailableError,
    StrategyFailedError,
    plan_moves,
    run_strategy,
)
from antfarm.shared.models import ColonySpec, RoomDecl, StrategyKind, TunnelDecl
from colony_core.graph import ColonyGraph


# ─────────────────────────────────────────────────────────────────────────────
# HELPERS
# ─────────────────────────────────────────────────────────────────────────────

def _make_spec(
    ant_count: int,
    rooms: List[str],
    tunnels: List[Tuple[str, str]],
) -> ColonySpec:
    """ColonySpec with start='start', end='end' and distinct dummy coordinates."""
    return ColonySpec(
        ant_count=ant_count,
        start_room="start",
        end_room="end",
        rooms=[RoomDecl(name=name, x=i, y=0) for i, name in enumerate(rooms)],
        tunnels=[TunnelDecl(a=a, b=b) for a, b in tunnels],
    )


def _two_room(ants: int = 3) -> ColonySpec:
    return _make_spec(ants, ["start", "end"], [("start", "end")])


def _diamond(ants: int = 2) -> ColonySpec:
    return _make_spec(
        ants,
        ["start", "A", "B", "end"],
        [("start", "A"), ("A", "end"), ("start", "B"), ("B", "end")],
    )


def _detour(ants: int = 3) -> ColonySpec:
    return _make_spec(
        ants,
        ["start", "A", "end"],
        [("start", "A"), ("A", "end"), ("start", "end")],
    )


def _shortcut(ants: int = 3) -> ColonySpec:
    return _make_spec(
        ants,
        ["start", "A", "B", "D", "end"],
        [
            ("start", "A"), ("start", "B"), ("A", "B"),
            ("A", "D"), ("B", "end"), ("D", "end"),
        ],
    )


def _unreachable(ants: int = 2) -> ColonySpec:
    return _make_spec(ants, ["start", "A", "end"], [("start", "A")])


def _fan(width: int) -> ColonySpec:
    """`width` parallel routes start ─ rI ─ end, one ant per route."""
    middle = [f"r{i}" for i in range(width)]
    tunnels = [("start", name) for name in middle] + [(name, "end") for name in middle]
    return _make_spec(width, ["start"] + middle + ["end"], tunnels)


def _chain(length: int) -> ColonySpec:
    """A single corridor start ─ c0 ─ c1 ─ … ─ c{length-1} ─ end."""
    middle = [f"c{i}" for i in range(length)]
    names = ["start"] + middle + ["end"]
    return _make_spec(1, names, list(zip(names, names[1:])))


COLONY_FILE = [
    "3",
    "##start",
    "start 0 0",
    "##end",
    "end 9 0",
    "A 1 1",
    "B 1 -1",
    "# tunnels",
    "start-A",
    "A-end",
    "start-B",
    "B-end",
]


# ─────────────────────────────────────────────────────────────────────────────
# GROUP 1 — run_strategy()
# ─────────────────────────────────────────────────────────────────────────────

class TestRunStrategy:

    @pytest.mark.parametrize("strategy", list(StrategyKind))
    def test_diamond_outcome(self, strategy):
        outcome = run_strategy(ColonyGraph.from_spec(_diamond()), strategy)
        assert outcome.strategy == strategy
        assert outcome.routes == [("A", "end"), ("B", "end")]
        assert outcome.queues == [[1], [2]]
        assert outcome.lines == ["L1-A L2-B", "L1-end L2-end"]
        assert outcome.assignment == {1: ("A", "end"), 2: ("B", "end")}

    @pytest.mark.parametrize("strategy", list(StrategyKind))
    def test_unreachable_end_fails(self, strategy):
        with pytest.raises(StrategyFailedError) as exc_info:
            run_strategy(ColonyGraph.from_spec(_unreachable()), strategy)
        assert exc_info.value.strategy == strategy

    def test_graph_not_mutated(self):
        graph = ColonyGraph.from_spec(_shortcut())
        before = {room.name: list(room.connections) for room in graph}
        for strategy in StrategyKind:
            run_strategy(graph, strategy)
        assert all(not room.visited for room in graph)
        assert {room.name: room.connections for room in graph} == before

    def test_every_ant_id_assigned_once(self):
        outcome = run_strategy(ColonyGraph.from_spec(_shortcut(ants=11)), StrategyKind.SHORTEST)
        assert sorted(outcome.assignment) == list(range(1, 12))

    def test_shared_rooms_logged_not_fixed(self, caplog):
        """Exhaustive routes on the shortcut colony both pass through A."""
        with caplog.at_level(logging.WARNING, logger="antfarm.control_plane.planner"):
            outcome = run_strategy(
                ColonyGraph.from_spec(_shortcut()), StrategyKind.EXHAUSTIVE
            )
        assert outcome.routes == [("A", "B", "end"), ("A", "D", "end")]
        assert any("share interior room" in r.getMessage() for r in caplog.records)


# ─────────────────────────────────────────────────────────────────────────────
# GROUP 2 — plan_moves()
# ─────────────────────────────────────────────────────────────────────────────

class TestPlanMoves:

    def test_two_room_one_ant_per_turn(self):
        result = plan_moves(_two_room())
        assert result.lines == ["L1-end", "L2-end", "L3-end"]
        assert result.turn_count == 3

    def test_diamond_two_turns(self):
        result = plan_moves(_diamond())
        assert result.lines == ["L1-A L2-B", "L1-end L2-end"]

    def test_equal_turns_prefer_exhaustive(self):
        assert plan_moves(_diamond()).winner == StrategyKind.EXHAUSTIVE

    def test_exhaustive_wins_when_shortest_misses_detour(self):
        """
        Shortest-path keeps re-taking the direct hop (3 turns for 3 ants);
        exhaustive also uses start→A→end and finishes in 2.
        """
        result = plan_moves(_detour())
        assert result.winner == StrategyKind.EXHAUSTIVE
        assert result.lines == ["L1-end L3-A", "L2-end L3-end"]
        assert result.outcome(StrategyKind.SHORTEST).turn_count == 3

    def test_shortest_wins_when_walk_wastes_a_room(self):
        """
        Exhaustive sends everyone through A (4 turns); shortest-path uses
        start→B→end and start→A→D→end (3 turns).
        """
        result = plan_moves(_shortcut())
        assert result.winner == StrategyKind.SHORTEST
        assert result.lines == [
            "L1-B L3-A",
            "L1-end L2-B L3-D",
            "L2-end L3-end",
        ]
        assert result.outcome(StrategyKind.EXHAUSTIVE).turn_count == 4

    def test_unreachable_end_reports_both_strategies(self):
        with pytest.raises(ScheduleUnavailableError) as exc_info:
            plan_moves(_unreachable())
        assert exc_info.value.failures == [StrategyKind.EXHAUSTIVE, StrategyKind.SHORTEST]
        assert exc_info.value.messages == [
            "exhaustive strategy failed",
            "shortest-path strategy failed",
        ]

    def test_lenient_still_fails_when_both_fail(self):
        with pytest.raises(ScheduleUnavailableError):
            plan_moves(_unreachable(), require_both=False)

    def _fail_shortest(self, monkeypatch):
        real = planner.run_strategy

        def fake(graph, strategy):
            if strategy == StrategyKind.SHORTEST:
                raise StrategyFailedError(strategy, "forced")
            return real(graph, strategy)

        monkeypatch.setattr(planner, "run_strategy", fake)

    def test_single_failure_aborts_by_default(self, monkeypatch):
        self._fail_shortest(monkeypatch)
        with pytest.raises(ScheduleUnavailableError) as exc_info:
            plan_moves(_diamond())
        assert exc_info.value.failures == [StrategyKind.SHORTEST]

    def test_single_failure_tolerated_when_lenient(self, monkeypatch):
        self._fail_shortest(monkeypatch)
        result = plan_moves(_diamond(), require_both=False)
        assert result.winner == StrategyKind.EXHAUSTIVE
        assert result.failures == [StrategyKind.SHORTEST]
        assert result.lines == ["L1-A L2-B", "L1-end L2-end"]


# ─────────────────────────────────────────────────────────────────────────────
# GROUP 3 — Large colonies
# ─────────────────────────────────────────────────────────────────────────────

class TestLargeColonies:
    """
    Sizes are chosen above Python's default recursion limit (1000 frames),
    so these only pass if neither walk recurses per room or per route.
    """

    def test_many_parallel_routes(self):
        width = 400
        result = plan_moves(_fan(width))

        expected = [(f"r{i}", "end") for i in range(width)]
        for strategy in StrategyKind:
            assert result.outcome(strategy).routes == expected, strategy
        assert result.winner == StrategyKind.EXHAUSTIVE
        assert len(result.lines) == 2
        assert result.lines[0].split(" ")[:2] == ["L1-r0", "L2-r1"]

    def test_long_corridor(self):
        length = 1500
        result = plan_moves(_chain(length))

        for strategy in StrategyKind:
            (route,) = result.outcome(strategy).routes
            assert len(route) == length + 1
            assert route[0] == "c0" and route[-1] == "end"
        assert result.turn_count == length + 1
        assert result.lines[-1] == "L1-end"


# ─────────────────────────────────────────────────────────────────────────────
# GROUP 4 — CLI
# ─────────────────────────────────────────────────────────────────────────────

class TestCli:

    def _write(self, tmp_path, lines: List[str]):
        path = tmp_path / "colony.txt"
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    def test_echo_then_schedule(self, tmp_path, capsys):
        path = self._write(tmp_path, COLONY_FILE)
        code = cli.main([str(path)])
        out = capsys.readouterr().out

        assert code == 0
        expected_turns = ["L1-A L2-B", "L1-end L2-end L3-A", "L3-end"]
        assert out == "\n".join(COLONY_FILE) + "\n\n" + "\n".join(expected_turns) + "\n"

    def test_invalid_input_prints_single_error(self, tmp_path, capsys):
        lines = list(COLONY_FILE)
        lines[0] = "0"
        code = cli.main([str(self._write(tmp_path, lines))])
        out = capsys.readouterr().out

        assert code == 1
        assert out.startswith("ERROR: invalid data format.")
        assert out.count("\n") == 1

    def test_missing_file(self, tmp_path, capsys):
        code = cli.main([str(tmp_path / "missing.txt")])
        assert code == 1
        assert capsys.readouterr().out.startswith("ERROR: cannot read")

    def test_non_utf8_file_prints_single_error(self, tmp_path, capsys):
        path = tmp_path / "colony.txt"
        path.write_bytes(b"3\n##start\nstart 0 0\n##end\nend 9 0\n\xff\xfe 2 2\nstart-end\n")
        code = cli.main([str(path)])
        out = capsys.readouterr().out

        assert code == 1
        assert out.startswith("ERROR: invalid data format. File is not valid UTF-8")
        assert out.count("\n") == 1

    def test_unreachable_end_prints_failures(self, tmp_path, capsys):
        lines = ["2", "##start", "start 0 0", "##end", "end 5 0", "A 1 1", "start-A"]
        code = cli.main([str(self._write(tmp_path, lines))])
        out = capsys.readouterr().out

        assert code == 1
        assert out == (
            "\n".join(lines) + "\n\n"
            "exhaustive strategy failed\n"
            "shortest-path strategy failed\n"
        )
