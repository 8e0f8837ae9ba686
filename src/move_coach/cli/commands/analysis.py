"""Analysis commands: triage, status."""

import json
from dataclasses import asdict

from .. import views
from ..app import JsonOption, StatePathOption, app, get_controller


@app.command()
def triage(
    state_path: StatePathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show this week's adherence and red flags.

    A log is flagged if it was missed, reported pain of 3 or more, or
    averaged RPE 9 or higher.
    """
    controller = get_controller(state_path)
    report = controller.triage()

    if json_out:
        print(json.dumps(asdict(report), indent=2, ensure_ascii=False))
        return

    views.print_triage(report)


@app.command()
def status(
    state_path: StatePathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show current phase, week, adherence and readiness.
    """
    controller = get_controller(state_path)
    state = controller.state
    report = controller.triage()

    if json_out:
        print(json.dumps({
            "phase": state.current_phase,
            "week_index": state.week_index,
            "adherence": report.adherence,
            "red_flags": len(report.red_flags),
            "planned_sessions": len(state.sessions),
            "constraints": controller.constraints.flags(),
            "readiness": asdict(state.readiness),
        }, indent=2, ensure_ascii=False))
        return

    views.console.print()
    views.console.print(views.format_status_display(state, report, controller.constraints))
    if report.red_flags:
        views.print_info("Run 'triage' for details.")
    if not state.sessions:
        views.print_info("No plan this week. Run 'generate'.")
