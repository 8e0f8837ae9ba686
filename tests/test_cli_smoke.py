"""
Smoke tests for the move-coach CLI.

Tests basic functionality:
- App runs and shows help
- State file is created
- A week is generated and shown
- Sessions can be logged and reviewed
- Quick actions, triage and week advance work end to end
"""

import json
import tempfile
from pathlib import Path

import pytest
from typer.testing import CliRunner

from move_coach.cli.main import app
from move_coach.core import program
from move_coach.core.config import STATE_KEY
from move_coach.core.planner import GenerationError


runner = CliRunner()


@pytest.fixture
def state_path():
    """Path to a state file inside a temporary directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir) / "state.json"


def _invoke(state_path: Path, *args: str, input: str | None = None):
    return runner.invoke(app, [*args, "--state-path", str(state_path)], input=input)


def _saved(state_path: Path) -> dict:
    return json.loads(state_path.read_text(encoding="utf-8"))[STATE_KEY]


def _generated(state_path: Path) -> list[dict]:
    result = _invoke(state_path, "generate")
    assert result.exit_code == 0, result.output
    return _saved(state_path)["sessions"]


class TestCLISmoke:
    """Basic smoke tests for CLI commands."""

    def test_app_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "generate" in result.output
        assert "triage" in result.output

    def test_menu_quit(self):
        result = runner.invoke(app, [], input="0\n")
        assert result.exit_code == 0
        assert "move-coach" in result.output

    def test_init_creates_state(self, state_path: Path):
        result = _invoke(
            state_path, "init",
            "--name", "Ana",
            "--goal", "general_strength",
            "--days", "Mon,Wed,Sat",
            "--bjj-days", "Thu",
        )

        assert result.exit_code == 0, result.output
        saved = _saved(state_path)
        assert saved["profile"]["name"] == "Ana"
        assert saved["profile"]["goal"] == "general_strength"
        assert saved["profile"]["days_available"] == ["Mon", "Wed", "Sat"]
        assert saved["week_index"] == 1
        assert saved["current_phase"] == "Base"

    def test_init_rejects_bad_day(self, state_path: Path):
        result = _invoke(state_path, "init", "--days", "Mon,Someday")
        assert result.exit_code == 1
        assert not state_path.exists()

    def test_init_existing_cancelled(self, state_path: Path):
        _invoke(state_path, "init", "--name", "Ana")
        result = _invoke(state_path, "init", "--name", "Bo", input="n\n")
        assert result.exit_code == 0
        assert "Cancelled" in result.output
        assert _saved(state_path)["profile"]["name"] == "Ana"

    def test_init_force_replaces(self, state_path: Path):
        _invoke(state_path, "init", "--name", "Ana")
        result = _invoke(state_path, "init", "--name", "Bo", "--force")
        assert result.exit_code == 0
        assert _saved(state_path)["profile"]["name"] == "Bo"

    def test_generate_and_plan(self, state_path: Path):
        sessions = _generated(state_path)
        assert [s["day"] for s in sessions] == ["Mon", "Thu"]

        result = _invoke(state_path, "plan")
        assert result.exit_code == 0
        assert "Lower Strength" in result.output

    def test_plan_json(self, state_path: Path):
        _generated(state_path)
        result = _invoke(state_path, "plan", "--json")
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["week_index"] == 1
        assert data["phase"] == "Base"
        assert data["constraints"] == []
        assert data["sessions"][1]["blocks"][0]["move"] == "Barbell Bench Press"

    def test_plan_without_sessions(self, state_path: Path):
        result = _invoke(state_path, "plan")
        assert result.exit_code == 0
        assert "No sessions yet" in result.output

    def test_generation_failure_exits_nonzero(self, state_path: Path, monkeypatch):
        class Broken:
            def generate(self, request):
                raise GenerationError("offline")

        monkeypatch.setattr(program, "RuleBasedBackend", Broken)
        result = _invoke(state_path, "generate")

        assert result.exit_code == 1
        assert "Failed to generate" in result.output


class TestLogging:
    def test_log_session_with_sets(self, state_path: Path):
        monday = _generated(state_path)[0]
        result = _invoke(
            state_path, "log-session", monday["id"],
            "--set", "Back Squat=3x5@100/8",
            "--set", "RDL=3x8@120/7",
            "--date", "2026-03-02",
        )

        assert result.exit_code == 0, result.output
        logs = _saved(state_path)["session_logs"]
        assert len(logs) == 1
        assert logs[0]["session_id"] == monday["id"]
        assert logs[0]["day"] == "Mon"
        assert logs[0]["rpe_avg"] == 7.5
        assert logs[0]["completed"][0]["last_load"] == 100.0

    def test_log_session_interactive(self, state_path: Path):
        _generated(state_path)
        # pick session 1, enter the squat, skip the other three blocks
        result = _invoke(
            state_path, "log-session", "--date", "2026-03-02",
            input="1\n3x5@100/8\n\n\n\n",
        )

        assert result.exit_code == 0, result.output
        log = _saved(state_path)["session_logs"][0]
        assert log["completed"] == [
            {"move": "Back Squat", "sets": 3, "reps": 5, "last_load": 100.0, "rpe": 8.0}
        ]

    def test_log_session_pain_flags(self, state_path: Path):
        monday = _generated(state_path)[0]
        result = _invoke(state_path, "log-session", monday["id"], "--missed", "--pain", "4")
        assert result.exit_code == 0
        assert "Red flag" in result.output

    def test_log_unknown_session(self, state_path: Path):
        _generated(state_path)
        result = _invoke(state_path, "log-session", "zzzzzz", "--set", "RDL=3x8")
        assert result.exit_code == 1
        assert _saved(state_path)["session_logs"] == []

    def test_log_bad_set_string(self, state_path: Path):
        monday = _generated(state_path)[0]
        result = _invoke(state_path, "log-session", monday["id"], "--set", "squats heavy")
        assert result.exit_code == 1

    def test_bracketed_set_string_is_reported(self, state_path: Path):
        monday = _generated(state_path)[0]
        result = _invoke(state_path, "log-session", monday["id"], "--set", "bad[/x]")
        assert result.exit_code == 1
        assert "bad[/x]" in result.output

    def test_bracketed_text_shown_verbatim_in_history(self, state_path: Path):
        monday = _generated(state_path)[0]
        result = _invoke(
            state_path, "log-session", monday["id"],
            "--set", "RDL [paused]=3x5@100/7",
            "--notes", "felt off [/b] today",
        )
        assert result.exit_code == 0, result.output
        assert _saved(state_path)["session_logs"][0]["notes"] == "felt off [/b] today"

        result = _invoke(state_path, "history")
        assert result.exit_code == 0, result.output
        assert "[/b]" in result.output
        assert "[paused]" in result.output

    def test_log_without_plan(self, state_path: Path):
        result = _invoke(state_path, "log-session", "abc123", "--set", "RDL=3x8")
        assert result.exit_code == 1

    def test_history_json(self, state_path: Path):
        monday = _generated(state_path)[0]
        _invoke(state_path, "log-session", monday["id"], "--set", "Back Squat=3x5@100/9")

        result = _invoke(state_path, "history", "--json")
        assert result.exit_code == 0
        logs = json.loads(result.output)
        assert len(logs) == 1
        assert logs[0]["rpe_avg"] == 9.0

    def test_history_empty(self, state_path: Path):
        result = _invoke(state_path, "history")
        assert result.exit_code == 0
        assert "No sessions logged yet" in result.output


class TestCoachActions:
    def test_quick_action_cap_sets(self, state_path: Path):
        _generated(state_path)
        result = _invoke(state_path, "quick-action", "cap_sets")

        assert result.exit_code == 0
        assert "Volume capped" in result.output
        assert _saved(state_path)["sessions"][0]["blocks"][0]["slots"] == 2

    def test_quick_action_swap_press(self, state_path: Path):
        _generated(state_path)
        result = _invoke(state_path, "quick-action", "swap_press")
        assert result.exit_code == 0
        assert _saved(state_path)["sessions"][1]["blocks"][0]["move"] == "DB Neutral Press"

    def test_quick_action_deload(self, state_path: Path):
        result = _invoke(state_path, "quick-action", "deload")
        assert result.exit_code == 0
        assert _saved(state_path)["current_phase"] == "Deload"

    def test_unknown_quick_action(self, state_path: Path):
        result = _invoke(state_path, "quick-action", "nap")
        assert result.exit_code == 1

    def test_next_week(self, state_path: Path):
        _generated(state_path)
        result = _invoke(state_path, "next-week", "--yes")

        assert result.exit_code == 0
        saved = _saved(state_path)
        assert saved["week_index"] == 2
        assert saved["current_phase"] == "Build"
        assert saved["sessions"] == []

    def test_next_week_prompt_declined(self, state_path: Path):
        _generated(state_path)
        result = _invoke(state_path, "next-week", input="n\n")
        assert result.exit_code == 0
        assert _saved(state_path)["week_index"] == 1

    def test_adjust_load(self, state_path: Path):
        result = _invoke(state_path, "adjust-load", "100")
        assert result.exit_code == 0
        assert "103" in result.output

        result = _invoke(state_path, "adjust-load", "100", "--pain")
        assert "96" in result.output

    def test_readiness_changes_adjustment(self, state_path: Path):
        result = _invoke(state_path, "readiness", "--sleep", "5", "--soreness", "4")
        assert result.exit_code == 0
        assert _saved(state_path)["readiness"]["sleep"] == 5

        result = _invoke(state_path, "adjust-load", "100")
        assert "98" in result.output

    def test_readiness_out_of_range(self, state_path: Path):
        result = _invoke(state_path, "readiness", "--sleep", "12")
        assert result.exit_code == 1


class TestProfileCommands:
    def test_add_shoulder_injury_then_generate(self, state_path: Path):
        result = _invoke(state_path, "add-injury", "shoulder", "--aggravates", "bench,overhead")
        assert result.exit_code == 0, result.output

        sessions = _generated(state_path)
        assert sessions[0]["blocks"][0]["alt"] == "Safety Bar Squat"
        assert sessions[1]["blocks"][0]["move"] == "DB Neutral Press"

    def test_remove_injury(self, state_path: Path):
        _invoke(state_path, "add-injury", "knee")
        injury_id = _saved(state_path)["profile"]["injuries"][0]["id"]

        result = _invoke(state_path, "remove-injury", injury_id)
        assert result.exit_code == 0
        assert _saved(state_path)["profile"]["injuries"] == []

    def test_invalid_injury_area(self, state_path: Path):
        result = _invoke(state_path, "add-injury", "elbow")
        assert result.exit_code == 1

    def test_profile_update(self, state_path: Path):
        result = _invoke(state_path, "profile", "--days", "Sat,Mon", "--no-barbell-bias")
        assert result.exit_code == 0, result.output
        profile = _saved(state_path)["profile"]
        assert profile["days_available"] == ["Sat", "Mon"]
        assert profile["prefs"]["barbell_bias"] is False

    def test_profile_bad_goal(self, state_path: Path):
        result = _invoke(state_path, "profile", "--goal", "bulk")
        assert result.exit_code == 1

    def test_profile_bracketed_name(self, state_path: Path):
        result = _invoke(state_path, "profile", "--name", "[bold]Ana[/i]")
        assert result.exit_code == 0, result.output
        assert "[bold]Ana[/i]" in result.output


class TestAnalysis:
    def test_triage_json(self, state_path: Path):
        sessions = _generated(state_path)
        _invoke(state_path, "log-session", sessions[0]["id"], "--set", "Back Squat=3x5@100/9")

        result = _invoke(state_path, "triage", "--json")
        assert result.exit_code == 0
        report = json.loads(result.output)
        assert report["adherence"] == 50
        assert report["red_flags"][0]["reason"] == "High RPE 9"

    def test_triage_clean_week(self, state_path: Path):
        result = _invoke(state_path, "triage")
        assert result.exit_code == 0
        assert "No red flags" in result.output

    def test_status(self, state_path: Path):
        _generated(state_path)
        result = _invoke(state_path, "status")
        assert result.exit_code == 0
        assert "Phase: Base" in result.output

    def test_status_json(self, state_path: Path):
        result = _invoke(state_path, "status", "--json")
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["week_index"] == 1
        assert data["planned_sessions"] == 0
