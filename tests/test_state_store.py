"""
Tests for Program State persistence and serialization.
"""

import json
from pathlib import Path

import pytest

from move_coach.core.config import STATE_KEY
from move_coach.core.models import (
    CompletedSet,
    Injury,
    ProgramState,
    ReadinessSnapshot,
    SessionLog,
    UserProfile,
)
from move_coach.core.planner import generate_week
from move_coach.io.serializers import (
    ValidationError,
    dict_to_program_state,
    parse_completed_set,
    parse_name_list,
    parse_weekday_list,
    program_state_to_dict,
)
from move_coach.io.state_store import MemoryStore, StateStore, default_state


# (path into the serialized state, wrongly-shaped value)
WRONG_SHAPES = [
    (("profile",), []),
    (("profile", "prefs"), "x"),
    (("profile", "equipment"), ["barbell", "rack"]),
    (("profile", "injuries"), [5]),
    (("sessions",), [5]),
    (("sessions",), "Mon"),
    (("sessions", 0, "blocks"), {"move": "Back Squat"}),
    (("sessions", 0, "blocks", 0), "Back Squat"),
    (("session_logs",), ["log"]),
    (("session_logs", 0, "completed"), [3]),
    (("readiness",), [7, 3, 3]),
]


def _reshaped(state: ProgramState, path: tuple, value) -> dict:
    data = program_state_to_dict(state)
    target = data
    for key in path[:-1]:
        target = target[key]
    target[path[-1]] = value
    return data


@pytest.fixture
def populated_state() -> ProgramState:
    profile = UserProfile(
        name="Ana",
        email="ana@example.com",
        injuries=[Injury(area="shoulder", aggravates=["overhead"], severity=3)],
    )
    readiness = ReadinessSnapshot(sleep=8, soreness=2, stress=4, hrv=61.5, bjj_load="hard")
    plan = generate_week(profile, readiness, [], "Build", 2)
    log = SessionLog(
        week_index=2,
        date="2026-03-09",
        session_id=plan.sessions[0].id,
        day="Mon",
        completed=[CompletedSet("Back Squat", 3, 5, 100.0, 8.0)],
        rpe_avg=8.0,
        pain_flag=1,
        notes="felt good",
    )
    return ProgramState(
        profile=profile,
        current_phase="Build",
        week_index=2,
        sessions=plan.sessions,
        session_logs=[log],
        readiness=readiness,
        plan_notes="",
    )


class TestDefaultState:
    def test_documented_defaults(self):
        state = default_state()
        assert state.profile.goal == "bjj_strength"
        assert state.profile.days_available == ["Mon", "Thu"]
        assert state.profile.bjj_days == ["Tue", "Fri"]
        assert state.current_phase == "Base"
        assert state.week_index == 1
        assert state.sessions == []
        assert state.session_logs == []
        assert state.readiness.sleep == 7
        assert state.readiness.soreness == 3
        assert state.readiness.stress == 3
        assert state.readiness.hrv is None
        assert state.readiness.bjj_load == "moderate"


class TestStateStore:
    def test_missing_file_gives_default(self, tmp_path: Path):
        store = StateStore(tmp_path / "state.json")
        assert not store.exists()
        assert store.load() == default_state()

    def test_save_then_load(self, tmp_path: Path, populated_state: ProgramState):
        store = StateStore(tmp_path / "nested" / "state.json")
        store.save(populated_state)

        assert store.exists()
        loaded = store.load()
        assert loaded == populated_state

    def test_state_kept_under_key(self, tmp_path: Path):
        path = tmp_path / "state.json"
        StateStore(path).save(ProgramState())
        document = json.loads(path.read_text(encoding="utf-8"))
        assert list(document) == [STATE_KEY]
        assert document[STATE_KEY]["week_index"] == 1

    def test_other_entries_preserved(self, tmp_path: Path):
        path = tmp_path / "state.json"
        path.write_text(json.dumps({"other_app": {"x": 1}}), encoding="utf-8")
        StateStore(path).save(ProgramState(week_index=3))
        document = json.loads(path.read_text(encoding="utf-8"))
        assert document["other_app"] == {"x": 1}
        assert document[STATE_KEY]["week_index"] == 3

    def test_save_overwrites(self, tmp_path: Path):
        store = StateStore(tmp_path / "state.json")
        store.save(ProgramState(week_index=2))
        store.save(ProgramState(week_index=5))
        assert store.load().week_index == 5
        assert not list(tmp_path.glob(".state.json.*"))

    def test_corrupt_json_gives_default(self, tmp_path: Path):
        path = tmp_path / "state.json"
        path.write_text("{not json", encoding="utf-8")
        state = StateStore(path).load()
        assert state.week_index == 1
        assert state.current_phase == "Base"

    def test_invalid_state_gives_default_with_warning(self, tmp_path: Path):
        path = tmp_path / "state.json"
        bad = program_state_to_dict(ProgramState(week_index=3))
        bad["current_phase"] = "Offseason"
        path.write_text(json.dumps({STATE_KEY: bad}), encoding="utf-8")

        with pytest.warns(UserWarning, match="starting from defaults"):
            state = StateStore(path).load()
        assert state.week_index == 1

    def test_clear(self, tmp_path: Path):
        store = StateStore(tmp_path / "state.json")
        store.save(ProgramState(week_index=4))
        store.clear()
        assert not store.exists()
        assert store.load().week_index == 1

    def test_clear_keeps_other_entries(self, tmp_path: Path):
        path = tmp_path / "state.json"
        path.write_text(json.dumps({"other_app": {"x": 1}}), encoding="utf-8")
        store = StateStore(path)
        store.save(ProgramState(week_index=4))
        store.clear()

        assert json.loads(path.read_text(encoding="utf-8")) == {"other_app": {"x": 1}}
        assert not list(tmp_path.glob(".state.json.*"))

    @pytest.mark.parametrize("path, value", WRONG_SHAPES)
    def test_wrongly_typed_section_gives_default(
        self, tmp_path: Path, populated_state: ProgramState, path, value
    ):
        state_file = tmp_path / "state.json"
        data = _reshaped(populated_state, path, value)
        state_file.write_text(json.dumps({STATE_KEY: data}), encoding="utf-8")

        with pytest.warns(UserWarning, match="starting from defaults"):
            state = StateStore(state_file).load()
        assert state == default_state()


class TestMemoryStore:
    def test_empty_gives_default(self):
        assert MemoryStore().load().week_index == 1

    def test_saved_copy_is_isolated(self, populated_state: ProgramState):
        store = MemoryStore()
        store.save(populated_state)
        populated_state.session_logs.clear()
        assert len(store.load().session_logs) == 1
        assert store.saves == 1

    def test_malformed_data_gives_default(self):
        store = MemoryStore()
        store._data = {"current_phase": "Base", "week_index": 1, "profile": []}
        with pytest.warns(UserWarning, match="starting from defaults"):
            state = store.load()
        assert state == default_state()


class TestSerializers:
    def test_round_trip(self, populated_state: ProgramState):
        data = json.loads(json.dumps(program_state_to_dict(populated_state)))
        assert dict_to_program_state(data) == populated_state

    def test_missing_optional_sections(self):
        data = program_state_to_dict(ProgramState())
        del data["readiness"]
        del data["plan_notes"]
        state = dict_to_program_state(data)
        assert state.readiness == ReadinessSnapshot()
        assert state.plan_notes == ""

    def test_invalid_weekday_rejected(self):
        data = program_state_to_dict(ProgramState())
        data["profile"]["days_available"] = ["Monday"]
        with pytest.raises(ValidationError):
            dict_to_program_state(data)

    def test_invalid_pain_rejected(self, populated_state: ProgramState):
        data = program_state_to_dict(populated_state)
        data["session_logs"][0]["pain_flag"] = 9
        with pytest.raises(ValidationError):
            dict_to_program_state(data)

    @pytest.mark.parametrize("path, value", WRONG_SHAPES)
    def test_wrong_shape_is_validation_error(self, populated_state: ProgramState, path, value):
        with pytest.raises(ValidationError, match="must be"):
            dict_to_program_state(_reshaped(populated_state, path, value))


class TestParseCompletedSet:
    def test_full(self):
        comp = parse_completed_set("Back Squat=3x5@225/8")
        assert comp == CompletedSet("Back Squat", 3, 5, 225.0, 8.0)

    def test_without_rpe(self):
        comp = parse_completed_set("RDL = 3x8 @ 185.5")
        assert comp.move == "RDL"
        assert comp.last_load == 185.5
        assert comp.rpe is None

    def test_without_load(self):
        comp = parse_completed_set("Grip Roll-ups=3x10")
        assert comp.last_load == 0.0
        assert comp.rpe is None

    def test_rpe_without_load(self):
        comp = parse_completed_set("Pull-ups=3x6/9")
        assert comp.last_load == 0.0
        assert comp.rpe == 9.0

    @pytest.mark.parametrize("text", ["Back Squat", "=3x5", "Squat=3x", "Squat=3x5@heavy"])
    def test_invalid(self, text):
        with pytest.raises(ValidationError):
            parse_completed_set(text)

    def test_rpe_out_of_range(self):
        with pytest.raises(ValidationError):
            parse_completed_set("Squat=3x5@100/11")


class TestParseLists:
    def test_weekdays(self):
        assert parse_weekday_list("mon, Thursday,SAT") == ["Mon", "Thu", "Sat"]
        assert parse_weekday_list("") == []

    def test_weekday_order_kept(self):
        assert parse_weekday_list("Sat,Mon") == ["Sat", "Mon"]

    def test_invalid_weekday(self):
        with pytest.raises(ValidationError):
            parse_weekday_list("Mon,Funday")

    def test_duplicate_weekday(self):
        with pytest.raises(ValidationError):
            parse_weekday_list("Mon,monday")

    def test_names(self):
        assert parse_name_list(" overhead, ,bench ") == ["overhead", "bench"]
