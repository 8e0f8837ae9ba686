"""
JSON-file storage for the Program State.

The whole aggregate (profile, phase, week, sessions, logs, readiness)
is kept as a single keyed blob and rewritten in full on every change.
"""

import json
import logging
import os
import tempfile
import warnings
from pathlib import Path

from ..core.config import STATE_KEY
from ..core.models import ProgramState
from .serializers import ValidationError, dict_to_program_state, program_state_to_dict

logger = logging.getLogger(__name__)


def default_state() -> ProgramState:
    """
    The documented starting state.

    goal=bjj_strength, phase=Base, week=1, no sessions or logs,
    readiness sleep=7 soreness=3 stress=3 bjj_load=moderate.
    """
    return ProgramState()


def restore_state(raw: dict, source: str) -> ProgramState:
    """
    Rebuild a ProgramState from its serialized form.

    A malformed state falls back to the default (with a warning)
    instead of raising, so a corrupt file never blocks the user.
    """
    try:
        return dict_to_program_state(raw)
    except (ValidationError, ValueError, KeyError, TypeError, AttributeError) as e:
        warnings.warn(
            f"move-coach: saved state in {source} is invalid ({e}); starting from defaults.",
            stacklevel=3,
        )
        logger.warning("Discarding invalid state in %s: %s", source, e)
        return default_state()


class StateStore:
    """
    Persists the Program State as one JSON document.

    The file holds an object whose ``key`` entry is the serialized
    state; other entries are left alone.  Writes go to a temp file that
    is then renamed over the original, so a reader never sees a
    half-written state.
    """

    def __init__(self, state_path: str | Path, key: str = STATE_KEY):
        """
        Initialize the state store.

        Args:
            state_path: Path to the JSON state file
            key: Entry under which the state is stored
        """
        self.state_path = Path(state_path)
        self.key = key

    def exists(self) -> bool:
        """Check if a state has been saved under this store's key."""
        return self._read_document().get(self.key) is not None

    def _read_document(self) -> dict:
        """Return the raw JSON document, or {} if missing or unreadable."""
        if not self.state_path.exists():
            return {}
        try:
            with open(self.state_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
            logger.warning("Cannot read %s: %s", self.state_path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def load(self) -> ProgramState:
        """
        Load the saved state.

        Missing file or key gives the default state, as does a
        malformed one.

        Returns:
            ProgramState
        """
        raw = self._read_document().get(self.key)
        if raw is None:
            return default_state()

        return restore_state(raw, str(self.state_path))

    def save(self, state: ProgramState) -> None:
        """
        Overwrite the saved state with ``state``.

        Args:
            state: Program state to persist
        """
        self.state_path.parent.mkdir(parents=True, exist_ok=True)

        document = self._read_document()
        document[self.key] = program_state_to_dict(state)
        self._write_document(document)
        logger.debug("Saved state to %s", self.state_path)

    def _write_document(self, document: dict) -> None:
        """Write the JSON document through a temp file and atomic rename."""
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.state_path.name}.", dir=self.state_path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2, ensure_ascii=False)
            os.replace(tmp_name, self.state_path)
        except OSError:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def clear(self) -> None:
        """
        Remove the saved state (dangerous - use with caution).
        """
        document = self._read_document()
        if document.pop(self.key, None) is not None:
            self._write_document(document)


class MemoryStore:
    """
    In-process store with the same load/save interface as StateStore.

    Keeps a serialized copy so callers cannot mutate what was saved.
    """

    def __init__(self, state: ProgramState | None = None):
        self._data: dict | None = program_state_to_dict(state) if state is not None else None
        self.saves = 0

    def load(self) -> ProgramState:
        if self._data is None:
            return default_state()
        return restore_state(self._data, "memory")

    def save(self, state: ProgramState) -> None:
        self._data = program_state_to_dict(state)
        self.saves += 1


def get_default_state_path() -> Path:
    """
    Get the default state file path.

    Returns:
        ~/.move-coach/state.json
    """
    return Path.home() / ".move-coach" / "state.json"


def get_default_store() -> StateStore:
    """
    Get a StateStore with the default path.

    Returns:
        StateStore instance
    """
    return StateStore(get_default_state_path())
