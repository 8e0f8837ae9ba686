"""Planning commands: generate, plan, quick-action, next-week, adjust-load."""

import json
from typing import Annotated

import typer

from ...core.adaptation import adjust_load as adjust_load_value
from ...core.adaptation import load_delta_percent
from ...core.config import QUICK_ACTIONS
from ...io.serializers import planned_session_to_dict, readiness_to_dict
from .. import views
from ..app import JsonOption, StatePathOption, app, get_controller


@app.command()
def generate(
    state_path: StatePathOption = None,
) -> None:
    """
    Generate this week's sessions from profile, readiness and last week's logs.

    Replaces any sessions already planned for the week.  On failure the
    existing plan is kept.
    """
    controller = get_controller(state_path)
    result = controller.generate_week()

    if not result.ok:
        views.print_warning(result.message)
        raise typer.Exit(1)

    views.print_success(result.message)
    views.console.print()
    views.print_plan(controller.state, controller.constraints)


@app.command()
def plan(
    state_path: StatePathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show this week's plan.

    The "Today" column applies the readiness and pain adjustment to each
    suggested starting load.
    """
    controller = get_controller(state_path)
    state = controller.state

    if json_out:
        print(json.dumps({
            "week_index": state.week_index,
            "phase": state.current_phase,
            "constraints": controller.constraints.flags(),
            "notes": state.plan_notes,
            "readiness": readiness_to_dict(state.readiness),
            "sessions": [planned_session_to_dict(s) for s in state.sessions],
        }, indent=2, ensure_ascii=False))
        return

    views.print_plan(state, controller.constraints)


@app.command("quick-action")
def quick_action(
    action: Annotated[
        str,
        typer.Argument(help="deload | cap_sets | swap_press"),
    ],
    state_path: StatePathOption = None,
) -> None:
    """
    Apply a coach quick action to the current plan.

    Actions stack: running cap_sets twice removes two sets.
    """
    if action not in QUICK_ACTIONS:
        views.print_error(f"Unknown action '{action}'. Use one of: {', '.join(QUICK_ACTIONS)}")
        raise typer.Exit(1)

    controller = get_controller(state_path)
    result = controller.apply_quick_action(action)  # type: ignore[arg-type]
    views.print_success(result.message)

    if controller.state.sessions or controller.state.plan_notes:
        views.console.print()
        views.print_plan(controller.state, controller.constraints)


@app.command("next-week")
def next_week(
    state_path: StatePathOption = None,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip the confirmation prompt"),
    ] = False,
) -> None:
    """
    Advance to the next week and apply the phase rule.

    Clears the current plan; logs are kept.
    """
    controller = get_controller(state_path)

    report = controller.triage()
    unlogged = report.planned_count - report.logged_count
    if unlogged > 0 and not yes:
        views.print_warning(f"{unlogged} planned session(s) this week have no log.")
        if not views.confirm_action("Advance anyway?"):
            views.print_info("Cancelled.")
            raise typer.Exit(0)

    result = controller.advance_week()
    views.print_success(result.message)
    if controller.state.current_phase == "Deload":
        views.print_info("Deload week: keep effort around RPE 6-7.")
    views.print_info("Run 'generate' to build the new week.")


@app.command("adjust-load")
def adjust_load(
    previous_load: Annotated[
        float,
        typer.Argument(help="Last working load"),
    ],
    state_path: StatePathOption = None,
    pain: Annotated[
        bool,
        typer.Option("--pain", help="Pain is present today"),
    ] = False,
) -> None:
    """
    Suggest today's working load from a previous one.

    Uses the saved readiness check-in; run 'readiness' first to update it.
    """
    if previous_load < 0:
        views.print_error("Load must be non-negative")
        raise typer.Exit(1)

    controller = get_controller(state_path)
    readiness = controller.state.readiness
    delta = load_delta_percent(readiness, pain)
    new_load = adjust_load_value(previous_load, readiness, pain)

    views.console.print(
        f"{previous_load:g} → [bold]{new_load}[/bold] ({delta:+g}%)"
    )
