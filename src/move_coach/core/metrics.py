"""
Training metrics: effort averages, adherence and red-flag triage.

All functions are pure and operate on the session logs of the Program
State.
"""

import math
from dataclasses import dataclass, field
from typing import Literal

from .config import RED_FLAG_PAIN, RED_FLAG_RPE, round_half_up
from .models import CompletedSet, ProgramState, SessionLog

RedFlagKind = Literal["missed", "pain", "high_rpe"]


@dataclass
class RedFlag:
    """A logged session that needs coach attention."""

    log_id: str
    date: str
    kind: RedFlagKind
    reason: str


@dataclass
class TriageReport:
    """KPIs for the current week."""

    week_index: int
    planned_count: int
    logged_count: int
    adherence: int  # percent
    red_flags: list[RedFlag] = field(default_factory=list)


def average_rpe(completed: list[CompletedSet]) -> float:
    """
    Mean reported RPE across completed sets, rounded to one decimal.

    Sets without a numeric RPE count as 0.  Returns 0.0 for no sets.
    """
    values: list[float] = []
    for c in completed:
        try:
            value = float(c.rpe) if c.rpe is not None else 0.0
        except (TypeError, ValueError):
            value = 0.0
        if math.isfinite(value):
            values.append(value)
    if not values:
        return 0.0
    return round_half_up(sum(values) / len(values) * 10) / 10


def adherence_percent(planned_count: int, logged_count: int) -> int:
    """
    Percentage of planned sessions that were logged.

    Returns 0 when nothing is planned.
    """
    if planned_count <= 0:
        return 0
    return round_half_up(100 * logged_count / planned_count)


def red_flag_for(log: SessionLog) -> RedFlag | None:
    """
    Classify one log.

    Reason priority: missed > pain > high effort; one reason per log.
    """
    if log.missed:
        return RedFlag(log.id, log.date, "missed", "Missed session")
    if log.pain_flag >= RED_FLAG_PAIN:
        return RedFlag(log.id, log.date, "pain", f"Pain {log.pain_flag}/5")
    if (log.rpe_avg or 0) >= RED_FLAG_RPE:
        return RedFlag(log.id, log.date, "high_rpe", f"High RPE {log.rpe_avg:g}")
    return None


def red_flags(logs: list[SessionLog]) -> list[RedFlag]:
    """Red flags for the given logs, in log order."""
    flags: list[RedFlag] = []
    for log in logs:
        flag = red_flag_for(log)
        if flag is not None:
            flags.append(flag)
    return flags


def triage(state: ProgramState) -> TriageReport:
    """
    Build the current-week triage report.

    Args:
        state: Program state

    Returns:
        TriageReport for ``state.week_index``
    """
    week_logs = state.logs_for_week(state.week_index)
    planned = len(state.sessions)
    return TriageReport(
        week_index=state.week_index,
        planned_count=planned,
        logged_count=len(week_logs),
        adherence=adherence_percent(planned, len(week_logs)),
        red_flags=red_flags(week_logs),
    )
