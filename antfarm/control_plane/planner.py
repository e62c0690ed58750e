"""
antfarm/control_plane/planner.py
────────────────────────────────
The planning layer: runs both route strategies and keeps the better schedule.

How plan_moves works
─────────────────────
1. Builds one ColonyGraph from the validated ColonySpec.

2. For each strategy (exhaustive, then shortest-path):
     a. PathEnumerator clones the graph and enumerates routes on the clone,
        so visited flags never leak from one strategy into the other.
     b. rank_routes() dedupes and orders the routes by hop count.
     c. AntScheduler assigns ants 1..N to the ranked routes.
     d. build_turns() + render_schedule() produce the printable turns.
   Any empty result raises StrategyFailedError for that strategy.

3. select_shorter() picks the schedule with fewer turns (ties → exhaustive).

Failure policy
───────────────
require_both=True (default):
    Both strategies must succeed before any schedule is produced. If either
    fails, ScheduleUnavailableError lists every failed strategy. In practice
    both fail together: each finds a route whenever the end is reachable.

require_both=False:
    A single surviving strategy is enough. Only a double failure raises.

Error handling contract
────────────────────────
  StrategyFailedError:       internal to plan_moves(); caught here and
                             collected per strategy. Raised directly only by
                             run_strategy() for callers that run one
                             strategy on their own.
  ScheduleUnavailableError:  raised to the caller (CLI) with the failed
                             strategies, in run order.
  UnknownRoomError:          NOT caught. It means the ColonySpec broke the
                             Validator's contract.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Sequence

from antfarm.shared.models import ColonySpec, PlanResult, StrategyKind, StrategyOutcome
from colony_core import (
    AntScheduler,
    ColonyGraph,
    NoRoutesError,
    PathEnumerator,
    build_turns,
    rank_routes,
    render_schedule,
    select_shorter,
    shared_interior_rooms,
)

logger = logging.getLogger(__name__)

STRATEGY_ORDER: Sequence[StrategyKind] = (StrategyKind.EXHAUSTIVE, StrategyKind.SHORTEST)
"""Order the strategies run in, and the order failures are reported in."""


class StrategyFailedError(Exception):
    """
    Raised when one strategy cannot produce a schedule.

    Attributes:
        strategy: Which strategy failed.
        reason:   Why (no route, or no turn).
    """

    def __init__(self, strategy: StrategyKind, reason: str = "") -> None:
        self.strategy = strategy
        self.reason = reason
        super().__init__(
            f"{strategy.failure_message}: {reason}" if reason else strategy.failure_message
        )


class ScheduleUnavailableError(Exception):
    """
    Raised when no schedule can be produced for the colony.

    Caller contract (CLI):
        Print one failure line per strategy in `failures` and no schedule.

    Attributes:
        failures: Failed strategies, in run order.
    """

    def __init__(self, failures: List[StrategyKind]) -> None:
        self.failures = failures
        super().__init__("; ".join(kind.failure_message for kind in failures))

    @property
    def messages(self) -> List[str]:
        return [kind.failure_message for kind in self.failures]


def run_strategy(graph: ColonyGraph, strategy: StrategyKind) -> StrategyOutcome:
    """
    Run one strategy end to end on a private clone of `graph`.

    Args:
        graph:    The colony. Not mutated.
        strategy: Which route-discovery strategy to use.

    Returns:
        StrategyOutcome with ranked routes, per-route queues and rendered turns.

    Raises:
        StrategyFailedError: no route reaches the end room, or no turn resulted.
    """
    routes = rank_routes(PathEnumerator(graph).enumerate(strategy))

    scheduler = AntScheduler(graph.ant_count, routes)
    try:
        scheduler.assign()
    except NoRoutesError as e:
        raise StrategyFailedError(strategy, str(e)) from e

    lines = render_schedule(build_turns(routes, scheduler.queues))
    if not lines:
        raise StrategyFailedError(strategy, "no turn produced")

    used = [route for route, queue in zip(routes, scheduler.queues) if queue]
    overlap = shared_interior_rooms(used)
    if overlap:
        # Lanes are scheduled independently; overlapping rooms are reported only.
        logger.warning(
            "%s strategy: routes in use share interior room(s) %s",
            strategy.value, sorted(overlap),
        )

    logger.info(
        "%s strategy: %d route(s), %d turn(s)",
        strategy.value, len(routes), len(lines),
    )
    return StrategyOutcome(
        strategy=strategy,
        routes=routes,
        queues=scheduler.queues,
        lines=lines,
    )


def plan_moves(spec: ColonySpec, require_both: bool = True) -> PlanResult:
    """
    Compute the turn-by-turn schedule for a validated colony.

    Args:
        spec:         Output of the Validator.
        require_both: If True, any failed strategy aborts the plan.

    Returns:
        PlanResult with the winning strategy and its rendered turns.

    Raises:
        ScheduleUnavailableError: see the module docstring for when.
    """
    graph = ColonyGraph.from_spec(spec)

    outcomes: Dict[StrategyKind, StrategyOutcome] = {}
    failures: List[StrategyKind] = []
    for strategy in STRATEGY_ORDER:
        try:
            outcomes[strategy] = run_strategy(graph, strategy)
        except StrategyFailedError as e:
            logger.warning("%s", e)
            failures.append(strategy)

    if failures and (require_both or not outcomes):
        raise ScheduleUnavailableError(failures)

    exhaustive = outcomes.get(StrategyKind.EXHAUSTIVE)
    shortest = outcomes.get(StrategyKind.SHORTEST)
    winner, lines = select_shorter(
        exhaustive.lines if exhaustive else [],
        shortest.lines if shortest else [],
    )

    logger.info("Selected %s strategy: %d turn(s)", winner.value, len(lines))
    return PlanResult(winner=winner, lines=lines, outcomes=outcomes, failures=failures)
