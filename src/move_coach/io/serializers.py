"""
JSON serialization for move-coach data models.

Handles conversion between dataclasses and JSON-compatible dicts, and
parsing of the compact set strings accepted by the CLI.
"""

import re
from typing import Any

from ..core.config import EXTERNAL_LOADS, GOALS, INJURY_AREAS, PHASES, WEEKDAYS
from ..core.models import (
    CompletedSet,
    ExerciseBlock,
    Injury,
    PlannedSession,
    Preferences,
    ProgramState,
    ReadinessSnapshot,
    SessionLog,
    UserProfile,
)


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


def validate_choice(value: Any, choices: tuple[str, ...], name: str) -> str:
    """
    Validate that a value is one of a fixed set of strings.

    Raises:
        ValidationError: If value is not in choices
    """
    if value not in choices:
        raise ValidationError(f"Invalid {name}: {value!r}. Must be one of {choices}")
    return value


def validate_weekdays(days: Any, name: str) -> list[str]:
    """
    Validate a list of weekday tokens (no duplicates).

    Raises:
        ValidationError: If any token is invalid or repeated
    """
    if not isinstance(days, list):
        raise ValidationError(f"{name} must be a list, got {type(days).__name__}")
    for day in days:
        validate_choice(day, WEEKDAYS, name)
    if len(set(days)) != len(days):
        raise ValidationError(f"{name} contains duplicate weekdays: {days}")
    return list(days)


def validate_range(value: int | float, low: int | float, high: int | float, name: str) -> int | float:
    """
    Validate that a value lies in [low, high].

    Raises:
        ValidationError: If value is out of range
    """
    if not low <= value <= high:
        raise ValidationError(f"{name} must be between {low} and {high}, got {value}")
    return value


def validate_non_negative(value: int | float, name: str) -> int | float:
    """
    Validate that a value is non-negative.

    Raises:
        ValidationError: If value is negative
    """
    if value < 0:
        raise ValidationError(f"{name} must be non-negative, got {value}")
    return value


def _optional_float(value: Any) -> float | None:
    return float(value) if value is not None else None


def require_mapping(data: Any, name: str) -> dict[str, Any]:
    """
    Validate that a decoded JSON value is an object.

    Raises:
        ValidationError: If data is not a dict
    """
    if not isinstance(data, dict):
        raise ValidationError(f"{name} must be an object, got {type(data).__name__}")
    return data


def require_list(data: Any, name: str) -> list[Any]:
    """
    Validate that a decoded JSON value is an array; None counts as empty.

    Raises:
        ValidationError: If data is not a list
    """
    if data is None:
        return []
    if not isinstance(data, list):
        raise ValidationError(f"{name} must be a list, got {type(data).__name__}")
    return data


# =============================================================================
# PROFILE
# =============================================================================


def injury_to_dict(injury: Injury) -> dict[str, Any]:
    """Convert Injury to JSON-compatible dict."""
    return {
        "id": injury.id,
        "area": injury.area,
        "aggravates": list(injury.aggravates),
        "severity": injury.severity,
    }


def dict_to_injury(data: dict[str, Any]) -> Injury:
    """
    Convert dict to Injury.

    Raises:
        ValidationError: If data is invalid
    """
    require_mapping(data, "injury")
    validate_choice(data.get("area"), INJURY_AREAS, "injury area")
    validate_range(int(data.get("severity", 2)), 1, 5, "severity")
    kwargs: dict[str, Any] = {
        "area": data["area"],
        "aggravates": [str(a) for a in require_list(data.get("aggravates"), "aggravates")],
        "severity": int(data.get("severity", 2)),
    }
    if data.get("id"):
        kwargs["id"] = str(data["id"])
    return Injury(**kwargs)


def user_profile_to_dict(profile: UserProfile) -> dict[str, Any]:
    """Convert UserProfile to JSON-compatible dict."""
    return {
        "name": profile.name,
        "email": profile.email,
        "goal": profile.goal,
        "training_age_yrs": profile.training_age_yrs,
        "days_available": list(profile.days_available),
        "minutes_per_session": profile.minutes_per_session,
        "equipment": dict(profile.equipment),
        "bjj_days": list(profile.bjj_days),
        "injuries": [injury_to_dict(i) for i in profile.injuries],
        "prefs": {
            "barbell_bias": profile.prefs.barbell_bias,
            "dislikes": list(profile.prefs.dislikes),
        },
    }


def dict_to_user_profile(data: dict[str, Any]) -> UserProfile:
    """
    Convert dict to UserProfile.

    Raises:
        ValidationError: If data is invalid
    """
    require_mapping(data, "profile")
    validate_choice(data.get("goal"), GOALS, "goal")
    validate_non_negative(int(data.get("training_age_yrs", 0)), "training_age_yrs")
    if int(data.get("minutes_per_session", 60)) <= 0:
        raise ValidationError("minutes_per_session must be positive")

    prefs_raw = require_mapping(data.get("prefs") or {}, "prefs")
    equipment_raw = require_mapping(data.get("equipment") or {}, "equipment")
    return UserProfile(
        name=str(data.get("name", "")),
        email=str(data.get("email", "")),
        goal=data["goal"],
        training_age_yrs=int(data.get("training_age_yrs", 0)),
        days_available=validate_weekdays(data.get("days_available", []), "days_available"),
        minutes_per_session=int(data.get("minutes_per_session", 60)),
        equipment={str(k): bool(v) for k, v in equipment_raw.items()},
        bjj_days=validate_weekdays(data.get("bjj_days", []), "bjj_days"),
        injuries=[dict_to_injury(i) for i in require_list(data.get("injuries"), "injuries")],
        prefs=Preferences(
            barbell_bias=bool(prefs_raw.get("barbell_bias", True)),
            dislikes=[str(d) for d in require_list(prefs_raw.get("dislikes"), "dislikes")],
        ),
    )


# =============================================================================
# READINESS
# =============================================================================


def readiness_to_dict(readiness: ReadinessSnapshot) -> dict[str, Any]:
    """Convert ReadinessSnapshot to JSON-compatible dict."""
    return {
        "sleep": readiness.sleep,
        "soreness": readiness.soreness,
        "stress": readiness.stress,
        "hrv": readiness.hrv,
        "bjj_load": readiness.bjj_load,
    }


def dict_to_readiness(data: dict[str, Any]) -> ReadinessSnapshot:
    """
    Convert dict to ReadinessSnapshot.

    Raises:
        ValidationError: If data is invalid
    """
    require_mapping(data, "readiness")
    sleep = int(validate_range(int(data.get("sleep", 7)), 1, 10, "sleep"))
    soreness = int(validate_range(int(data.get("soreness", 3)), 1, 5, "soreness"))
    stress = int(validate_range(int(data.get("stress", 3)), 1, 5, "stress"))
    bjj_load = validate_choice(data.get("bjj_load", "moderate"), EXTERNAL_LOADS, "bjj_load")
    return ReadinessSnapshot(
        sleep=sleep,
        soreness=soreness,
        stress=stress,
        hrv=_optional_float(data.get("hrv")),
        bjj_load=bjj_load,  # type: ignore[arg-type]
    )


# =============================================================================
# PLANNED SESSIONS
# =============================================================================


def block_to_dict(block: ExerciseBlock) -> dict[str, Any]:
    """Convert ExerciseBlock to JSON-compatible dict."""
    return {
        "move": block.move,
        "alt": block.alt,
        "scheme": block.scheme,
        "target_rpe": block.target_rpe,
        "slots": block.slots,
        "load_suggestion": block.load_suggestion,
    }


def dict_to_block(data: dict[str, Any]) -> ExerciseBlock:
    """
    Convert dict to ExerciseBlock.

    Raises:
        ValidationError: If data is invalid
    """
    require_mapping(data, "block")
    if not data.get("move"):
        raise ValidationError("Block is missing 'move'")
    slots = int(data.get("slots", 1))
    if slots < 1:
        raise ValidationError(f"slots must be positive, got {slots}")
    return ExerciseBlock(
        move=str(data["move"]),
        alt=data.get("alt"),
        scheme=str(data.get("scheme", "")),
        target_rpe=float(data.get("target_rpe", 0)),
        slots=slots,
        load_suggestion=_optional_float(data.get("load_suggestion")),
    )


def planned_session_to_dict(session: PlannedSession) -> dict[str, Any]:
    """Convert PlannedSession to JSON-compatible dict."""
    return {
        "id": session.id,
        "day": session.day,
        "title": session.title,
        "warmup": list(session.warmup),
        "blocks": [block_to_dict(b) for b in session.blocks],
        "finisher": session.finisher,
        "cues": list(session.cues),
    }


def dict_to_planned_session(data: dict[str, Any]) -> PlannedSession:
    """
    Convert dict to PlannedSession.

    Raises:
        ValidationError: If data is invalid
    """
    require_mapping(data, "session")
    validate_choice(data.get("day"), WEEKDAYS, "day")
    return PlannedSession(
        id=str(data["id"]),
        day=data["day"],
        title=str(data.get("title", "")),
        warmup=[str(w) for w in require_list(data.get("warmup"), "warmup")],
        blocks=[dict_to_block(b) for b in require_list(data.get("blocks"), "blocks")],
        finisher=str(data.get("finisher", "")),
        cues=[str(c) for c in require_list(data.get("cues"), "cues")],
    )


# =============================================================================
# SESSION LOGS
# =============================================================================


def completed_set_to_dict(comp: CompletedSet) -> dict[str, Any]:
    """Convert CompletedSet to JSON-compatible dict."""
    return {
        "move": comp.move,
        "sets": comp.sets,
        "reps": comp.reps,
        "last_load": comp.last_load,
        "rpe": comp.rpe,
    }


def dict_to_completed_set(data: dict[str, Any]) -> CompletedSet:
    """
    Convert dict to CompletedSet.

    Raises:
        ValidationError: If data is invalid
    """
    require_mapping(data, "completed set")
    validate_non_negative(int(data.get("sets", 0)), "sets")
    validate_non_negative(int(data.get("reps", 0)), "reps")
    last_load = _optional_float(data.get("last_load"))
    if last_load is not None:
        validate_non_negative(last_load, "last_load")
    return CompletedSet(
        move=str(data.get("move", "")),
        sets=int(data.get("sets", 0)),
        reps=int(data.get("reps", 0)),
        last_load=last_load,
        rpe=_optional_float(data.get("rpe")),
    )


def session_log_to_dict(log: SessionLog) -> dict[str, Any]:
    """Convert SessionLog to JSON-compatible dict."""
    return {
        "id": log.id,
        "week_index": log.week_index,
        "date": log.date,
        "session_id": log.session_id,
        "day": log.day,
        "completed": [completed_set_to_dict(c) for c in log.completed],
        "rpe_avg": log.rpe_avg,
        "pain_flag": log.pain_flag,
        "notes": log.notes,
        "missed": log.missed,
    }


def dict_to_session_log(data: dict[str, Any]) -> SessionLog:
    """
    Convert dict to SessionLog.

    Raises:
        ValidationError: If data is invalid
    """
    require_mapping(data, "session log")
    validate_range(int(data.get("pain_flag", 0)), 0, 5, "pain_flag")
    if int(data.get("week_index", 0)) < 1:
        raise ValidationError(f"week_index must be positive, got {data.get('week_index')}")
    try:
        return SessionLog(
            id=str(data["id"]),
            week_index=int(data["week_index"]),
            date=str(data["date"]),
            session_id=data.get("session_id"),
            day=data.get("day"),
            completed=[dict_to_completed_set(c) for c in require_list(data.get("completed"), "completed")],
            rpe_avg=float(data.get("rpe_avg") or 0.0),
            pain_flag=int(data.get("pain_flag", 0)),
            notes=str(data.get("notes") or ""),
            missed=bool(data.get("missed", False)),
        )
    except ValueError as e:
        raise ValidationError(str(e)) from e


# =============================================================================
# PROGRAM STATE
# =============================================================================


def program_state_to_dict(state: ProgramState) -> dict[str, Any]:
    """Convert the whole ProgramState aggregate to a JSON-compatible dict."""
    return {
        "profile": user_profile_to_dict(state.profile),
        "current_phase": state.current_phase,
        "week_index": state.week_index,
        "sessions": [planned_session_to_dict(s) for s in state.sessions],
        "session_logs": [session_log_to_dict(log) for log in state.session_logs],
        "readiness": readiness_to_dict(state.readiness),
        "plan_notes": state.plan_notes,
    }


def dict_to_program_state(data: dict[str, Any]) -> ProgramState:
    """
    Convert dict to ProgramState.

    Raises:
        ValidationError: If any part of the state is invalid
    """
    require_mapping(data, "Program state")
    validate_choice(data.get("current_phase"), PHASES, "current_phase")
    week_index = int(data.get("week_index", 0))
    if week_index < 1:
        raise ValidationError(f"week_index must be positive, got {week_index}")

    return ProgramState(
        profile=dict_to_user_profile(data["profile"]),
        current_phase=data["current_phase"],
        week_index=week_index,
        sessions=[dict_to_planned_session(s) for s in require_list(data.get("sessions"), "sessions")],
        session_logs=[dict_to_session_log(log) for log in require_list(data.get("session_logs"), "session_logs")],
        readiness=dict_to_readiness(data.get("readiness") or {}),
        plan_notes=str(data.get("plan_notes") or ""),
    )


# =============================================================================
# CLI SET STRINGS
# =============================================================================

def parse_weekday_list(text: str) -> list[str]:
    """
    Parse a comma-separated list of weekdays, keeping the given order.

    Tokens are matched case-insensitively on their first three letters,
    so "mon, Thursday" → ["Mon", "Thu"].  An empty string gives [].

    Raises:
        ValidationError: If a token is not a weekday or is repeated
    """
    lookup = {d.lower(): d for d in WEEKDAYS}
    days: list[str] = []
    for token in (t.strip() for t in text.split(",")):
        if not token:
            continue
        day = lookup.get(token[:3].lower())
        if day is None:
            raise ValidationError(f"Invalid weekday: '{token}'. Use Mon, Tue, ... Sun")
        days.append(day)
    return validate_weekdays(days, "days")


def parse_name_list(text: str) -> list[str]:
    """Split a comma-separated list, dropping blanks."""
    return [t.strip() for t in text.split(",") if t.strip()]


_SET_RE = re.compile(
    r"^(?P<move>[^=]+?)\s*=\s*"
    r"(?P<sets>\d+)\s*[xX×]\s*(?P<reps>\d+)"
    r"(?:\s*@\s*(?P<load>\d+(?:\.\d+)?))?"
    r"(?:\s*/\s*(?P<rpe>\d+(?:\.\d+)?))?\s*$"
)


def parse_completed_set(text: str) -> CompletedSet:
    """
    Parse one completed-movement string.

    Format: MOVE=SETSxREPS[@LOAD][/RPE]

    Examples:
        "Back Squat=3x5@225/8"   → 3 sets of 5 at 225, RPE 8
        "RDL=3x8@185"            → no RPE recorded
        "Grip Roll-ups=3x10"     → no load (0), no RPE

    Raises:
        ValidationError: If the format is not recognised
    """
    m = _SET_RE.match(text.strip())
    if m is None:
        raise ValidationError(
            f"Invalid set format: '{text}'.\n"
            "Use: MOVE=SETSxREPS[@LOAD][/RPE], e.g. 'Back Squat=3x5@225/8'"
        )
    rpe = float(m.group("rpe")) if m.group("rpe") is not None else None
    if rpe is not None:
        validate_range(rpe, 0, 10, "rpe")
    return CompletedSet(
        move=m.group("move").strip(),
        sets=int(m.group("sets")),
        reps=int(m.group("reps")),
        last_load=float(m.group("load")) if m.group("load") is not None else 0.0,
        rpe=rpe,
    )
