"""
Plan generation for move-coach.

Builds one week of planned sessions from the profile, readiness,
last week's logs and the current phase.  The generation call sits
behind the PlanBackend protocol so a real inference backend can be
substituted for the deterministic rule-based one without touching the
rule engine.
"""

import logging
from dataclasses import dataclass, field
from typing import Protocol

from .config import DELOAD_NOTES, SESSION_CUES, TOP_SET_RPE_THRESHOLD
from .constraints import infer_constraints
from .focus import choose_focus
from .loads import suggest_starting_load
from .models import (
    ExerciseBlock,
    Phase,
    PlannedSession,
    ReadinessSnapshot,
    SessionLog,
    UserProfile,
    WeekPlan,
    short_id,
)
from .templates.registry import build_blueprint

logger = logging.getLogger(__name__)


class GenerationError(Exception):
    """Raised when a backend cannot produce a week plan."""

    pass


@dataclass
class PlanRequest:
    """
    Everything a backend receives to plan one week.

    This is the integration seam for any external intelligence: a
    backend must answer with a WeekPlan whose sessions follow the
    PlannedSession shape.
    """

    profile: UserProfile
    readiness: ReadinessSnapshot
    phase: Phase
    week_index: int
    last_week_logs: list[SessionLog] = field(default_factory=list)


class PlanBackend(Protocol):
    """Capability that turns a PlanRequest into a WeekPlan."""

    def generate(self, request: PlanRequest) -> WeekPlan:
        """Plan one week; raise GenerationError on failure."""
        ...


def _with_load_suggestion(block: ExerciseBlock, last_week_logs: list[SessionLog]) -> ExerciseBlock:
    """Attach a starting load to top-set blocks; accessory work gets None."""
    if block.target_rpe >= TOP_SET_RPE_THRESHOLD:
        block.load_suggestion = suggest_starting_load(block.move, last_week_logs)
    else:
        block.load_suggestion = None
    return block


def generate_week(
    profile: UserProfile,
    readiness: ReadinessSnapshot,
    last_week_logs: list[SessionLog],
    phase: Phase,
    week_index: int,
) -> WeekPlan:
    """
    Generate the planned sessions for one week.

    Sessions follow the order of ``profile.days_available``, not calendar
    order.  Each day's template comes from the focus selector and is
    rendered under the profile's injury constraints.

    Args:
        profile: User profile
        readiness: Current readiness snapshot (passed through to the plan context)
        last_week_logs: Logs recorded in the previous week
        phase: Current periodization phase
        week_index: Current week number

    Returns:
        WeekPlan with one session per available day and phase notes
    """
    constraints = infer_constraints(profile)

    sessions: list[PlannedSession] = []
    for day in profile.days_available:
        focus = choose_focus(day, profile)
        blueprint = build_blueprint(focus, constraints)
        blocks = [_with_load_suggestion(b, last_week_logs) for b in blueprint.blocks]
        sessions.append(
            PlannedSession(
                id=short_id(),
                day=day,
                title=blueprint.title,
                warmup=blueprint.warmup,
                blocks=blocks,
                finisher=blueprint.finisher,
                cues=list(SESSION_CUES),
            )
        )
        logger.debug("Planned %s: %s (%d blocks)", day, focus, len(blocks))

    notes = DELOAD_NOTES if phase == "Deload" else ""
    return WeekPlan(phase=phase, week_index=week_index, sessions=sessions, notes=notes)


class RuleBasedBackend:
    """
    Deterministic stand-in for an inference backend.

    Runs the local rule engine; any unexpected error is reported as a
    GenerationError so callers can treat every backend the same way.
    """

    def generate(self, request: PlanRequest) -> WeekPlan:
        try:
            return generate_week(
                request.profile,
                request.readiness,
                request.last_week_logs,
                request.phase,
                request.week_index,
            )
        except (ValueError, KeyError, TypeError, RuntimeError) as e:
            raise GenerationError(f"Rule engine failed: {e}") from e
