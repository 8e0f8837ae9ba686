"""
Configuration constants for the move-coach rule engine.

All adjustable parameters are centralized here for easy tuning.
Template content (movements, schemes, warm-ups) lives in the bundled
YAML files under ``src/move_coach/templates/``.
"""

import math
from typing import Final

# =============================================================================
# CALENDAR
# =============================================================================

WEEKDAYS: Final[tuple[str, ...]] = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

GOALS: Final[tuple[str, ...]] = ("bjj_strength", "general_strength", "fat_loss", "youth")
INJURY_AREAS: Final[tuple[str, ...]] = ("shoulder", "knee", "hip", "back", "wrist", "ankle")
PHASES: Final[tuple[str, ...]] = ("Base", "Build", "Peak", "Deload")
EXTERNAL_LOADS: Final[tuple[str, ...]] = ("light", "moderate", "hard")
QUICK_ACTIONS: Final[tuple[str, ...]] = ("deload", "cap_sets", "swap_press")

# =============================================================================
# FOCUS SELECTION
# =============================================================================

# Fixed weekday overrides, checked before BJJ adjacency.
FIXED_DAY_FOCUS: Final[dict[str, str]] = {
    "Mon": "lower_strength",
    "Thu": "upper_shoulder_safe",
    "Sat": "gpp",
}
FOCUS_BEFORE_BJJ: Final[str] = "upper_shoulder_safe"
FOCUS_DEFAULT: Final[str] = "lower_strength"

# =============================================================================
# PLAN GENERATION
# =============================================================================

TOP_SET_RPE_THRESHOLD: Final[float] = 8  # Blocks at or above this get a load suggestion
SESSION_CUES: Final[tuple[str, ...]] = ("Own the positions.", "Leave 1–2 reps in the tank.")
DELOAD_NOTES: Final[str] = "Keep effort @6–7, cut 30% volume."
SHORT_ID_LENGTH: Final[int] = 6

# =============================================================================
# LOAD ESTIMATION
# =============================================================================

LOAD_PROGRESSION_FACTOR: Final[float] = 1.02  # 2% linear progression on last working load

# =============================================================================
# READINESS LOAD ADJUSTMENT, deltas in percent
# =============================================================================

PAIN_DELTA_PCT: Final[float] = -7.0
READY_DELTA_PCT: Final[float] = 3.0
SORENESS_DELTA_PCT: Final[float] = -2.0
STRESS_DELTA_PCT: Final[float] = -1.0

READY_SLEEP_MIN: Final[int] = 7     # sleep >= this ...
READY_SORENESS_MAX: Final[int] = 3  # ... and soreness <= this ...
READY_STRESS_MAX: Final[int] = 3    # ... and stress <= this counts as "ready"
HIGH_SORENESS: Final[int] = 4
HIGH_STRESS: Final[int] = 4

# =============================================================================
# QUICK ACTIONS
# =============================================================================

CAP_SETS_ANNOTATION: Final[str] = " (−1 set)"
CAP_SETS_FLOOR: Final[int] = 1
CAP_SETS_DEFAULT_SLOTS: Final[int] = 2  # Used when a block carries no slot count
SWAP_PRESS_PATTERN: Final[str] = "press"
SWAP_PRESS_TARGET: Final[str] = "DB Neutral Press"
SWAP_PRESS_ANNOTATION: Final[str] = " (shoulder-safe)"

# =============================================================================
# PERIODIZATION
# =============================================================================

DELOAD_EVERY_N_WEEKS: Final[int] = 4
PHASE_SUCCESSOR: Final[dict[str, str]] = {
    "Base": "Build",
    "Build": "Peak",
    "Deload": "Base",
    # Peak has no successor outside the forced deload week.
}

# =============================================================================
# TRIAGE
# =============================================================================

RED_FLAG_PAIN: Final[int] = 3
RED_FLAG_RPE: Final[float] = 9.0

# =============================================================================
# E1RM ESTIMATE
# =============================================================================

E1RM_MAX_RPE: Final[float] = 10.0
EPLEY_DIVISOR: Final[float] = 30.0

# =============================================================================
# DEFAULT STATE
# =============================================================================

DEFAULT_GOAL: Final[str] = "bjj_strength"
DEFAULT_TRAINING_AGE_YRS: Final[int] = 3
DEFAULT_DAYS_AVAILABLE: Final[tuple[str, ...]] = ("Mon", "Thu")
DEFAULT_MINUTES_PER_SESSION: Final[int] = 60
DEFAULT_BJJ_DAYS: Final[tuple[str, ...]] = ("Tue", "Fri")
DEFAULT_EQUIPMENT: Final[dict[str, bool]] = {
    "barbell": True,
    "rack": True,
    "dumbbells": True,
    "kettlebells": True,
    "bands": True,
    "sled": False,
}
DEFAULT_PHASE: Final[str] = "Base"
DEFAULT_WEEK_INDEX: Final[int] = 1
DEFAULT_SLEEP: Final[int] = 7
DEFAULT_SORENESS: Final[int] = 3
DEFAULT_STRESS: Final[int] = 3
DEFAULT_BJJ_LOAD: Final[str] = "moderate"

STATE_KEY: Final[str] = "move_mvp_state"


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer with halves going up.

    Loads and percentages round .5 toward +inf rather than to even,
    so 102.5 -> 103 and 50.5 -> 51.
    """
    return int(math.floor(value + 0.5))
