"""
antfarm/control_plane — validation and planning.

Public API:
    validate_lines()          — raw lines → ColonySpec
    load_colony()             — file path → ColonySpec
    InvalidFormatError        — raised on malformed input
    plan_moves()              — ColonySpec → PlanResult (both strategies)
    run_strategy()            — one strategy on one graph → StrategyOutcome
    StrategyFailedError       — one strategy produced no schedule
    ScheduleUnavailableError  — no schedule can be printed
"""

from antfarm.control_plane.validator import (
    InvalidFormatError,
    load_colony,
    validate_lines,
)
from antfarm.control_plane.planner import (
    ScheduleUnavailableError,
    StrategyFailedError,
    plan_moves,
    run_strategy,
)

__all__ = [
    "InvalidFormatError",
    "load_colony",
    "validate_lines",
    "ScheduleUnavailableError",
    "StrategyFailedError",
    "plan_moves",
    "run_strategy",
]
