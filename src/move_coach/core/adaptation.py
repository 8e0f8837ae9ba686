"""
Adaptation rules: readiness-based load deltas and coach quick actions.

The quick actions are pure transforms over the session list.  They are
full rewrites rather than recorded deltas, so applying one twice
compounds (cap_sets twice removes two sets and annotates twice).
"""

import re
from dataclasses import replace

from .config import (
    CAP_SETS_ANNOTATION,
    CAP_SETS_DEFAULT_SLOTS,
    CAP_SETS_FLOOR,
    HIGH_SORENESS,
    HIGH_STRESS,
    PAIN_DELTA_PCT,
    QUICK_ACTIONS,
    READY_DELTA_PCT,
    READY_SLEEP_MIN,
    READY_SORENESS_MAX,
    READY_STRESS_MAX,
    SORENESS_DELTA_PCT,
    STRESS_DELTA_PCT,
    SWAP_PRESS_ANNOTATION,
    SWAP_PRESS_PATTERN,
    SWAP_PRESS_TARGET,
    round_half_up,
)
from .models import ExerciseBlock, PlannedSession, ProgramState, QuickAction, ReadinessSnapshot

_PRESS_RE = re.compile(SWAP_PRESS_PATTERN, re.IGNORECASE)


def load_delta_percent(readiness: ReadinessSnapshot, pain: bool) -> float:
    """
    Total percent change to apply to a working load.

    Rules are independent and additive:
      pain                                     −7
      sleep ≥ 7 and soreness ≤ 3 and stress ≤ 3 +3
      soreness ≥ 4                             −2
      stress ≥ 4                               −1

    Args:
        readiness: Current readiness snapshot
        pain: True if pain is present

    Returns:
        Summed delta in percent
    """
    delta = 0.0
    if pain:
        delta += PAIN_DELTA_PCT
    if (
        readiness.sleep >= READY_SLEEP_MIN
        and readiness.soreness <= READY_SORENESS_MAX
        and readiness.stress <= READY_STRESS_MAX
    ):
        delta += READY_DELTA_PCT
    if readiness.soreness >= HIGH_SORENESS:
        delta += SORENESS_DELTA_PCT
    if readiness.stress >= HIGH_STRESS:
        delta += STRESS_DELTA_PCT
    return delta


def adjust_load(previous_load: float, readiness: ReadinessSnapshot, pain: bool) -> int:
    """
    Adjust a working load for today's readiness and pain.

    new = round(previous × (1 + delta/100)), floored at 0.

    Args:
        previous_load: Last working load
        readiness: Current readiness snapshot
        pain: True if pain is present

    Returns:
        Adjusted load
    """
    delta = load_delta_percent(readiness, pain)
    return max(0, round_half_up(previous_load * (1 + delta / 100)))


def _cap_block(block: ExerciseBlock) -> ExerciseBlock:
    slots = block.slots or CAP_SETS_DEFAULT_SLOTS
    return replace(
        block,
        scheme=block.scheme + CAP_SETS_ANNOTATION,
        slots=max(CAP_SETS_FLOOR, slots - 1),
    )


def _swap_block(block: ExerciseBlock) -> ExerciseBlock:
    if not _PRESS_RE.search(block.move):
        return replace(block)
    return replace(
        block,
        move=SWAP_PRESS_TARGET,
        scheme=block.scheme + SWAP_PRESS_ANNOTATION,
    )


def cap_sets(sessions: list[PlannedSession]) -> list[PlannedSession]:
    """
    Remove one set from every block of every session (floored at 1).

    Each block's scheme gets an annotation so the cap is visible.
    """
    return [
        replace(s, blocks=[_cap_block(b) for b in s.blocks])
        for s in sessions
    ]


def swap_press(sessions: list[PlannedSession]) -> list[PlannedSession]:
    """
    Replace every pressing movement with the shoulder-safe DB neutral press.

    Any block whose movement name contains "press" (case-insensitive)
    is swapped, including one that is already the substitute.
    """
    return [
        replace(s, blocks=[_swap_block(b) for b in s.blocks])
        for s in sessions
    ]


def apply_quick_action(state: ProgramState, action: QuickAction) -> ProgramState:
    """
    Apply a coach quick action and return the new state.

    ``deload`` sets the phase directly, bypassing normal progression.
    ``cap_sets`` and ``swap_press`` rewrite the live session list.

    Args:
        state: Current program state (not modified)
        action: One of "deload", "cap_sets", "swap_press"

    Returns:
        New ProgramState

    Raises:
        ValueError: If action is unknown
    """
    if action == "deload":
        return replace(state, current_phase="Deload")
    if action == "cap_sets":
        return replace(state, sessions=cap_sets(state.sessions))
    if action == "swap_press":
        return replace(state, sessions=swap_press(state.sessions))
    raise ValueError(f"Unknown quick action: {action!r}. Must be one of {QUICK_ACTIONS}")
