"""
Data models for move-coach.

All core dataclasses representing the profile, readiness, planned
sessions, session logs, and the Program State aggregate that owns them.
"""

import uuid
from dataclasses import dataclass, field
from typing import Literal

from .config import (
    DEFAULT_BJJ_DAYS,
    DEFAULT_BJJ_LOAD,
    DEFAULT_DAYS_AVAILABLE,
    DEFAULT_EQUIPMENT,
    DEFAULT_GOAL,
    DEFAULT_MINUTES_PER_SESSION,
    DEFAULT_PHASE,
    DEFAULT_SLEEP,
    DEFAULT_SORENESS,
    DEFAULT_STRESS,
    DEFAULT_TRAINING_AGE_YRS,
    DEFAULT_WEEK_INDEX,
    EXTERNAL_LOADS,
    GOALS,
    INJURY_AREAS,
    PHASES,
    SHORT_ID_LENGTH,
    WEEKDAYS,
)

Weekday = Literal["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
Goal = Literal["bjj_strength", "general_strength", "fat_loss", "youth"]
InjuryArea = Literal["shoulder", "knee", "hip", "back", "wrist", "ankle"]
Phase = Literal["Base", "Build", "Peak", "Deload"]
ExternalLoad = Literal["light", "moderate", "hard"]
QuickAction = Literal["deload", "cap_sets", "swap_press"]


def short_id() -> str:
    """Return a short random identifier for sessions, logs and injuries."""
    return uuid.uuid4().hex[:SHORT_ID_LENGTH]


def _validate_weekdays(days: list[str], name: str) -> None:
    for day in days:
        if day not in WEEKDAYS:
            raise ValueError(f"{name} contains invalid weekday {day!r}")
    if len(set(days)) != len(days):
        raise ValueError(f"{name} must not contain duplicate weekdays")


@dataclass
class Injury:
    """
    A single injury entry on the profile.

    Only ever aggregated into a ConstraintSet; nothing references an
    injury by id outside profile editing.
    """

    area: InjuryArea
    aggravates: list[str] = field(default_factory=list)  # free-text movement tags
    severity: int = 2
    id: str = field(default_factory=short_id)

    def __post_init__(self) -> None:
        """Validate injury data."""
        if self.area not in INJURY_AREAS:
            raise ValueError(f"Invalid injury area: {self.area}")
        if not 1 <= self.severity <= 5:
            raise ValueError("severity must be between 1 and 5")


@dataclass
class Preferences:
    """Training preferences captured at onboarding."""

    barbell_bias: bool = True
    dislikes: list[str] = field(default_factory=list)


@dataclass
class UserProfile:
    """
    User profile with goal, schedule, equipment and injuries.

    ``days_available`` order is the order sessions are generated in;
    membership checks treat it as a set.  ``bjj_days`` marks days with
    high-intensity grappling so the day before can be shoulder-protective.
    """

    name: str = ""
    email: str = ""
    goal: Goal = DEFAULT_GOAL  # type: ignore[assignment]
    training_age_yrs: int = DEFAULT_TRAINING_AGE_YRS
    days_available: list[str] = field(default_factory=lambda: list(DEFAULT_DAYS_AVAILABLE))
    minutes_per_session: int = DEFAULT_MINUTES_PER_SESSION
    equipment: dict[str, bool] = field(default_factory=lambda: dict(DEFAULT_EQUIPMENT))
    bjj_days: list[str] = field(default_factory=lambda: list(DEFAULT_BJJ_DAYS))
    injuries: list[Injury] = field(default_factory=list)
    prefs: Preferences = field(default_factory=Preferences)

    def __post_init__(self) -> None:
        """Validate profile data."""
        if self.goal not in GOALS:
            raise ValueError(f"Invalid goal: {self.goal!r}. Must be one of {GOALS}")

        if self.training_age_yrs < 0:
            raise ValueError("training_age_yrs must be non-negative")

        if self.minutes_per_session <= 0:
            raise ValueError("minutes_per_session must be positive")

        _validate_weekdays(self.days_available, "days_available")
        _validate_weekdays(self.bjj_days, "bjj_days")

    def is_bjj_day(self, day: str) -> bool:
        """Return True if the given weekday is a grappling day."""
        return day in self.bjj_days


@dataclass(frozen=True)
class ConstraintSet:
    """
    Movement restrictions derived from the injury list.

    Never persisted; recomputed whenever the profile changes.
    """

    shoulder: bool = False

    def any(self) -> bool:
        """Return True if at least one restriction is active."""
        return self.shoulder

    def flags(self) -> list[str]:
        """Names of the active restrictions."""
        return ["shoulder"] if self.shoulder else []


@dataclass
class ReadinessSnapshot:
    """
    Today's readiness check-in.  Exactly one is kept; edits overwrite it.
    """

    sleep: int = DEFAULT_SLEEP        # 1-10
    soreness: int = DEFAULT_SORENESS  # 1-5
    stress: int = DEFAULT_STRESS      # 1-5
    hrv: float | None = None
    bjj_load: ExternalLoad = DEFAULT_BJJ_LOAD  # type: ignore[assignment]

    def __post_init__(self) -> None:
        """Validate readiness data."""
        if not 1 <= self.sleep <= 10:
            raise ValueError("sleep must be between 1 and 10")
        if not 1 <= self.soreness <= 5:
            raise ValueError("soreness must be between 1 and 5")
        if not 1 <= self.stress <= 5:
            raise ValueError("stress must be between 1 and 5")
        if self.bjj_load not in EXTERNAL_LOADS:
            raise ValueError(f"Invalid bjj_load: {self.bjj_load}")


@dataclass
class ExerciseBlock:
    """
    One movement slot inside a planned session.

    ``alt`` is populated when a constraint rules out the primary movement.
    ``slots`` is the set count that volume capping decrements.
    ``load_suggestion`` is None for accessory work and when no prior log
    matches; None means "no suggestion", never zero.
    """

    move: str
    scheme: str
    target_rpe: float
    slots: int
    alt: str | None = None
    load_suggestion: float | None = None

    def __post_init__(self) -> None:
        """Validate block data."""
        if not self.move:
            raise ValueError("move must be a non-empty string")
        if self.slots < 1:
            raise ValueError("slots must be positive")


@dataclass
class PlannedSession:
    """
    A planned session for the current week.

    Created by the plan generator; the whole list is replaced on every
    generation, never merged.
    """

    day: str
    title: str
    warmup: list[str] = field(default_factory=list)
    blocks: list[ExerciseBlock] = field(default_factory=list)
    finisher: str = ""
    cues: list[str] = field(default_factory=list)
    id: str = field(default_factory=short_id)

    def __post_init__(self) -> None:
        """Validate session data."""
        if self.day not in WEEKDAYS:
            raise ValueError(f"Invalid day: {self.day}")

    @property
    def total_slots(self) -> int:
        """Sum of planned sets across all blocks."""
        return sum(b.slots for b in self.blocks)


@dataclass
class CompletedSet:
    """What was actually done for one movement in a logged session."""

    move: str
    sets: int = 0
    reps: int = 0
    last_load: float | None = 0.0  # top-set working load
    rpe: float | None = None

    def __post_init__(self) -> None:
        """Validate completed-set data."""
        if self.sets < 0:
            raise ValueError("sets must be non-negative")
        if self.reps < 0:
            raise ValueError("reps must be non-negative")
        if self.last_load is not None and self.last_load < 0:
            raise ValueError("last_load must be non-negative")


@dataclass
class SessionLog:
    """
    A logged session.  Append-only: never mutated once stored.

    ``week_index`` is the week in which the log was recorded, which is
    what adherence and triage filter on.
    """

    week_index: int
    date: str  # ISO format: YYYY-MM-DD
    completed: list[CompletedSet] = field(default_factory=list)
    rpe_avg: float = 0.0
    pain_flag: int = 0
    notes: str = ""
    missed: bool = False
    session_id: str | None = None  # planned session this log belongs to, if any
    day: str | None = None
    id: str = field(default_factory=short_id)

    def __post_init__(self) -> None:
        """Validate log data."""
        _validate_iso_date(self.date)

        if self.week_index < 1:
            raise ValueError("week_index must be positive")

        if not 0 <= self.pain_flag <= 5:
            raise ValueError("pain_flag must be between 0 and 5")

        if self.day is not None and self.day not in WEEKDAYS:
            raise ValueError(f"Invalid day: {self.day}")


@dataclass
class WeekPlan:
    """Result of one plan-generation call."""

    phase: Phase
    week_index: int
    sessions: list[PlannedSession] = field(default_factory=list)
    notes: str = ""


@dataclass
class ProgramState:
    """
    Root aggregate: everything persisted and restored as one unit.

    ``sessions`` is either empty or exactly the sessions generated for the
    ``days_available`` configured at generation time.
    """

    profile: UserProfile = field(default_factory=UserProfile)
    current_phase: Phase = DEFAULT_PHASE  # type: ignore[assignment]
    week_index: int = DEFAULT_WEEK_INDEX
    sessions: list[PlannedSession] = field(default_factory=list)
    session_logs: list[SessionLog] = field(default_factory=list)
    readiness: ReadinessSnapshot = field(default_factory=ReadinessSnapshot)
    plan_notes: str = ""

    def __post_init__(self) -> None:
        """Validate program state."""
        if self.current_phase not in PHASES:
            raise ValueError(f"Invalid phase: {self.current_phase}")
        if self.week_index < 1:
            raise ValueError("week_index must be positive")

    def logs_for_week(self, week_index: int) -> list[SessionLog]:
        """Logs recorded during the given week, in insertion order."""
        return [log for log in self.session_logs if log.week_index == week_index]

    def last_week_logs(self) -> list[SessionLog]:
        """Logs recorded during the previous week."""
        return self.logs_for_week(self.week_index - 1)

    def find_session(self, session_id: str) -> PlannedSession | None:
        """Return the planned session with the given id, if present."""
        for session in self.sessions:
            if session.id == session_id:
                return session
        return None


def _validate_iso_date(date_str: str) -> None:
    """Validate date string is ISO format YYYY-MM-DD."""
    import re
    from datetime import datetime

    if not re.match(r"^\d{4}-\d{2}-\d{2}$", date_str):
        raise ValueError(f"Invalid date format: {date_str}. Expected YYYY-MM-DD")

    try:
        datetime.strptime(date_str, "%Y-%m-%d")
    except ValueError as e:
        raise ValueError(f"Invalid date: {date_str}") from e
