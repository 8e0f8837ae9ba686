"""
Program controller: owns the Program State and applies user actions.

Every action computes a new state from the rule engine, then hands the
whole state to the persistence port (full overwrite, last write wins).
Failures leave the held state untouched.
"""

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Protocol

from .adaptation import apply_quick_action
from .constraints import infer_constraints
from .metrics import TriageReport, average_rpe, triage
from .models import (
    CompletedSet,
    ConstraintSet,
    Injury,
    ProgramState,
    QuickAction,
    ReadinessSnapshot,
    SessionLog,
)
from .planner import PlanBackend, PlanRequest, RuleBasedBackend
from .progression import advance_week

logger = logging.getLogger(__name__)

GENERATION_FAILED_MESSAGE = "Failed to generate. Using fallback."

_QUICK_ACTION_MESSAGES: dict[str, str] = {
    "deload": "Deload toggled for this block.",
    "cap_sets": "Volume capped by −1 set.",
    "swap_press": "Swapped pressing to DB Neutral.",
}


class GenerationInProgressError(RuntimeError):
    """Raised when a week is requested while another generation is pending."""

    pass


class StatePort(Protocol):
    """Persistence for the Program State aggregate."""

    def load(self) -> ProgramState:
        ...

    def save(self, state: ProgramState) -> None:
        ...


@dataclass
class ActionResult:
    """Outcome of a user action, with the notice to show."""

    ok: bool
    message: str


class ProgramController:
    """
    Single owner of the Program State.

    Args:
        store: Persistence port (load/save)
        backend: Plan-generation capability; defaults to the rule engine
    """

    def __init__(self, store: StatePort, backend: PlanBackend | None = None):
        self.store = store
        self.backend: PlanBackend = backend if backend is not None else RuleBasedBackend()
        self.state: ProgramState = store.load()
        self._generating = False

    def _commit(self, state: ProgramState) -> ProgramState:
        self.store.save(state)
        self.state = state
        return state

    @property
    def constraints(self) -> ConstraintSet:
        """Movement restrictions for the current profile."""
        return infer_constraints(self.state.profile)

    @property
    def generating(self) -> bool:
        """True while a generation request is outstanding."""
        return self._generating

    # ------------------------------------------------------------------
    # Plan
    # ------------------------------------------------------------------

    def generate_week(self) -> ActionResult:
        """
        Replace the session list with a freshly generated week.

        On any backend failure the previous sessions are kept and a
        fallback notice is returned.

        Raises:
            GenerationInProgressError: If a generation is already pending
        """
        if self._generating:
            raise GenerationInProgressError("A week is already being generated")

        state = self.state
        request = PlanRequest(
            profile=state.profile,
            readiness=state.readiness,
            phase=state.current_phase,
            week_index=state.week_index,
            last_week_logs=state.last_week_logs(),
        )

        self._generating = True
        try:
            plan = self.backend.generate(request)
        except Exception:
            logger.exception("Plan generation failed for week %d", state.week_index)
            return ActionResult(False, GENERATION_FAILED_MESSAGE)
        finally:
            self._generating = False

        self._commit(replace(state, sessions=plan.sessions, plan_notes=plan.notes))
        logger.info("Generated %d sessions for week %d", len(plan.sessions), state.week_index)
        return ActionResult(True, "Week generated.")

    def advance_week(self) -> ActionResult:
        """Move to the next week; clears the plan."""
        state = self._commit(advance_week(self.state))
        return ActionResult(True, f"Advanced to week {state.week_index} ({state.current_phase}).")

    def apply_quick_action(self, action: QuickAction) -> ActionResult:
        """
        Apply a coach quick action to the live plan.

        Raises:
            ValueError: If action is unknown
        """
        self._commit(apply_quick_action(self.state, action))
        logger.info("Applied quick action %s", action)
        return ActionResult(True, _QUICK_ACTION_MESSAGES[action])

    # ------------------------------------------------------------------
    # Logs
    # ------------------------------------------------------------------

    def log_session(
        self,
        session_id: str | None,
        completed: list[CompletedSet],
        pain_flag: int = 0,
        notes: str = "",
        missed: bool = False,
        date: str | None = None,
    ) -> SessionLog:
        """
        Append a log for a planned session in the current week.

        Args:
            session_id: Id of the planned session, or None for an unplanned one
            completed: What was done per movement
            pain_flag: 0-5
            notes: Free text
            missed: True if the session was skipped
            date: ISO date (default: today)

        Returns:
            The stored SessionLog

        Raises:
            ValueError: If session_id is unknown or the log is invalid
        """
        day: str | None = None
        if session_id is not None:
            session = self.state.find_session(session_id)
            if session is None:
                raise ValueError(f"No planned session with id {session_id!r} this week")
            day = session.day

        entry = SessionLog(
            week_index=self.state.week_index,
            date=date or datetime.now().strftime("%Y-%m-%d"),
            session_id=session_id,
            day=day,
            completed=list(completed),
            rpe_avg=average_rpe(completed),
            pain_flag=int(pain_flag),
            notes=notes,
            missed=missed,
        )
        self._commit(replace(self.state, session_logs=[*self.state.session_logs, entry]))
        return entry

    def triage(self) -> TriageReport:
        """Adherence and red flags for the current week."""
        return triage(self.state)

    # ------------------------------------------------------------------
    # Profile / readiness
    # ------------------------------------------------------------------

    def edit_profile(self, **changes: Any) -> ActionResult:
        """
        Update profile fields.  The current plan is not migrated.

        Raises:
            ValueError: If the resulting profile is invalid
        """
        profile = replace(self.state.profile, **changes)
        self._commit(replace(self.state, profile=profile))
        return ActionResult(True, "Profile updated.")

    def add_injury(self, area: str, aggravates: list[str] | None = None, severity: int = 2) -> Injury:
        """Add an injury to the profile and return it."""
        injury = Injury(area=area, aggravates=list(aggravates or []), severity=severity)  # type: ignore[arg-type]
        self.edit_profile(injuries=[*self.state.profile.injuries, injury])
        return injury

    def remove_injury(self, injury_id: str) -> ActionResult:
        """
        Remove an injury by id.

        Raises:
            ValueError: If no injury has that id
        """
        remaining = [i for i in self.state.profile.injuries if i.id != injury_id]
        if len(remaining) == len(self.state.profile.injuries):
            raise ValueError(f"No injury with id {injury_id!r}")
        self.edit_profile(injuries=remaining)
        return ActionResult(True, "Injury removed.")

    def edit_readiness(self, **changes: Any) -> ActionResult:
        """
        Overwrite fields of the current readiness snapshot.

        Raises:
            ValueError: If the resulting snapshot is invalid
        """
        readiness: ReadinessSnapshot = replace(self.state.readiness, **changes)
        self._commit(replace(self.state, readiness=readiness))
        return ActionResult(True, "Readiness updated.")
