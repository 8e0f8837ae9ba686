"""
Daily focus selection.

Maps a training day to a template key from the weekday and the
athlete's grappling schedule.
"""

from .config import FIXED_DAY_FOCUS, FOCUS_BEFORE_BJJ, FOCUS_DEFAULT, WEEKDAYS
from .models import UserProfile


def next_weekday(day: str) -> str:
    """
    Return the calendar day after ``day`` (Sun wraps to Mon).

    Raises:
        ValueError: If day is not a weekday token
    """
    if day not in WEEKDAYS:
        raise ValueError(f"Invalid weekday: {day!r}")
    return WEEKDAYS[(WEEKDAYS.index(day) + 1) % len(WEEKDAYS)]


def choose_focus(day: str, profile: UserProfile) -> str:
    """
    Choose the template key for a training day.

    Precedence:
      1. Mon → lower_strength, Thu → upper_shoulder_safe, Sat → gpp
         (fixed, whatever the BJJ schedule says)
      2. Day before a BJJ day → upper_shoulder_safe
      3. Otherwise → lower_strength

    Args:
        day: Weekday token, e.g. "Wed"
        profile: User profile (for bjj_days)

    Returns:
        Template key
    """
    bjj_tomorrow = profile.is_bjj_day(next_weekday(day))

    if day in FIXED_DAY_FOCUS:
        return FIXED_DAY_FOCUS[day]

    return FOCUS_BEFORE_BJJ if bjj_tomorrow else FOCUS_DEFAULT
