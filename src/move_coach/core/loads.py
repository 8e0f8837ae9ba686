"""
Working-load estimation from logged sessions.

Starting-load suggestions for top-set blocks and a rough e1RM estimate
for display.
"""

from .config import E1RM_MAX_RPE, EPLEY_DIVISOR, LOAD_PROGRESSION_FACTOR, round_half_up
from .models import CompletedSet, SessionLog


def _first_token(move: str) -> str:
    """Lower-cased first whitespace-delimited word of a movement name."""
    parts = move.split()
    return parts[0].lower() if parts else ""


def _find_related_set(move: str, log: SessionLog) -> CompletedSet | None:
    """First completed set in ``log`` whose name contains the first word of ``move``."""
    token = _first_token(move)
    for comp in log.completed:
        if token in (comp.move or "").lower():
            return comp
    return None


def suggest_starting_load(move: str, last_week_logs: list[SessionLog] | None) -> int | None:
    """
    Propose a starting load for ``move`` from last week's logs.

    Only the most recent log that has any completed sets is searched.
    Matching is a case-insensitive substring test on the first word of
    the target name, so "Back Squat" matches anything containing "back".
    A matched set without a recorded load counts as 0.

    Args:
        move: Target movement name
        last_week_logs: Logs from the previous week, oldest first

    Returns:
        Matched load × 1.02, rounded; None when there is nothing to go on
    """
    last = next(
        (log for log in reversed(last_week_logs or []) if log.completed),
        None,
    )
    if last is None:
        return None

    comp = _find_related_set(move, last)
    if comp is None:
        return None

    base = comp.last_load or 0
    return round_half_up(base * LOAD_PROGRESSION_FACTOR)


def estimate_e1rm(weight: float, reps: int, rpe: float) -> int:
    """
    Rough one-rep max from a set's load, reps and RPE.

    Reps in reserve (10 − RPE, floored at 0) are added to the reps done,
    then Epley: weight × (1 + reps / 30).

    Args:
        weight: Load lifted
        reps: Reps performed
        rpe: Reported effort (1-10)

    Returns:
        Estimated 1RM, rounded
    """
    rir = max(0.0, E1RM_MAX_RPE - rpe)
    max_reps_at_weight = reps + rir
    return round_half_up(weight * (1 + max_reps_at_weight / EPLEY_DIVISOR))
