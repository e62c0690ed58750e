"""
antfarm — plan the movement of an ant colony from ##start to ##end.

Public API:
    validate_lines / load_colony — raw input → ColonySpec (InvalidFormatError)
    plan_moves                   — ColonySpec → PlanResult (ScheduleUnavailableError)
    main                         — command-line entry point (antfarm.cli)
"""

__version__ = "1.0.0"
