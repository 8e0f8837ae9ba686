"""
Periodization: phase and week progression.

Every 4th week is forced to Deload.  Otherwise Base → Build → Peak,
and Deload → Base.  Peak has no successor of its own: it holds until
the next forced deload week.
"""

import logging
from dataclasses import replace

from .config import DELOAD_EVERY_N_WEEKS, PHASE_SUCCESSOR
from .models import Phase, ProgramState

logger = logging.getLogger(__name__)


def next_phase(current_phase: Phase, next_week_index: int) -> Phase:
    """
    Phase for the week being entered.

    Args:
        current_phase: Phase of the week being left
        next_week_index: Index of the week being entered

    Returns:
        New phase
    """
    if next_week_index % DELOAD_EVERY_N_WEEKS == 0:
        return "Deload"
    # TODO: decide whether Peak should roll into Base outside deload weeks
    return PHASE_SUCCESSOR.get(current_phase, current_phase)  # type: ignore[return-value]


def advance_week(state: ProgramState) -> ProgramState:
    """
    Move the program to the next week.

    Increments the week index by exactly one, applies the phase rule and
    clears the session list so the next week must be generated.  Logs
    are kept.

    Args:
        state: Current program state (not modified)

    Returns:
        New ProgramState
    """
    next_index = state.week_index + 1
    phase = next_phase(state.current_phase, next_index)
    logger.info(
        "Advancing week %d (%s) -> %d (%s)",
        state.week_index, state.current_phase, next_index, phase,
    )
    return replace(
        state,
        week_index=next_index,
        current_phase=phase,
        sessions=[],
        plan_notes="",
    )
