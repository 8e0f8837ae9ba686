"""Session commands: log-session, history, and the interactive entry helpers."""

import json
from typing import Annotated, Optional

import typer
from rich.markup import escape

from ...core.models import CompletedSet, PlannedSession, ProgramState
from ...io.serializers import ValidationError, parse_completed_set, session_log_to_dict
from .. import views
from ..app import JsonOption, StatePathOption, app, get_controller


def _pick_session(state: ProgramState) -> PlannedSession | None:
    """Ask which planned session to log.  None if cancelled."""
    if not state.sessions:
        return None

    views.console.print()
    for i, session in enumerate(state.sessions, 1):
        views.console.print(f"  \\[{i}] {session.day} — {escape(session.title)}  [dim]({session.id})[/dim]")
    views.console.print()

    while True:
        raw = views.console.input("Session # (Enter to cancel): ").strip()
        if not raw:
            return None
        try:
            idx = int(raw)
        except ValueError:
            views.print_error("Enter a number")
            continue
        if 1 <= idx <= len(state.sessions):
            return state.sessions[idx - 1]
        views.print_error(f"Enter a number between 1 and {len(state.sessions)}")


def _interactive_sets(session: PlannedSession) -> list[CompletedSet]:
    """
    Prompt for what was done on each block of the session.

    Accepts SETSxREPS[@LOAD][/RPE] per movement, e.g. 3x5@225/8.
    An empty line skips the movement.
    """
    views.console.print()
    views.console.print("[bold]Enter what you did for each movement.[/bold]")
    views.console.print(
        "  Format: [cyan]SETSxREPS@LOAD/RPE[/cyan]"
        "  e.g. [green]3x5@225/8[/green]  [green]3x10[/green]"
    )
    views.console.print("  Press [bold]Enter[/bold] to skip a movement.\n")

    completed: list[CompletedSet] = []
    for block in session.blocks:
        hint = escape(block.scheme)
        if block.load_suggestion is not None:
            hint += f" @{block.load_suggestion}"
        while True:
            raw = views.console.input(f"  {escape(block.move)} [dim]({hint})[/dim]: ").strip()
            if not raw:
                break
            try:
                completed.append(parse_completed_set(f"{block.move}={raw}"))
            except (ValidationError, ValueError) as e:
                views.print_error(str(e).splitlines()[0])
                continue
            break
    return completed


@app.command("log-session")
def log_session(
    session_id: Annotated[
        Optional[str],
        typer.Argument(help="Planned session id (see 'plan'); prompts if omitted"),
    ] = None,
    state_path: StatePathOption = None,
    sets: Annotated[
        Optional[list[str]],
        typer.Option(
            "--set",
            "-s",
            help="Completed movement 'MOVE=SETSxREPS[@LOAD][/RPE]'; repeat per movement",
        ),
    ] = None,
    pain: Annotated[
        int,
        typer.Option("--pain", help="Pain during the session, 0-5"),
    ] = 0,
    notes: Annotated[
        str,
        typer.Option("--notes", "-n", help="Free-text notes"),
    ] = "",
    missed: Annotated[
        bool,
        typer.Option("--missed", help="Record the session as missed"),
    ] = False,
    date: Annotated[
        Optional[str],
        typer.Option("--date", "-d", help="Session date (YYYY-MM-DD, default: today)"),
    ] = None,
) -> None:
    """
    Log a planned session for the current week.

    Without --set (and without --missed) you are prompted per movement.
    """
    controller = get_controller(state_path)
    state = controller.state

    if not state.sessions:
        views.print_error("No sessions planned this week.")
        views.print_info("Run 'generate' first.")
        raise typer.Exit(1)

    if session_id is None:
        session = _pick_session(state)
        if session is None:
            views.print_info("Cancelled.")
            raise typer.Exit(0)
    else:
        session = state.find_session(session_id)
        if session is None:
            views.print_error(f"No planned session with id '{session_id}' this week")
            raise typer.Exit(1)

    if not 0 <= pain <= 5:
        views.print_error("Pain must be between 0 and 5")
        raise typer.Exit(1)

    completed: list[CompletedSet] = []
    if sets:
        try:
            completed = [parse_completed_set(s) for s in sets]
        except (ValidationError, ValueError) as e:
            views.print_error(str(e))
            raise typer.Exit(1)
    elif not missed:
        completed = _interactive_sets(session)

    try:
        entry = controller.log_session(
            session.id,
            completed,
            pain_flag=pain,
            notes=notes,
            missed=missed,
            date=date,
        )
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    status = "missed" if entry.missed else f"avg RPE {entry.rpe_avg:g}"
    views.print_success(f"Logged {entry.day} {session.title} on {entry.date} ({status}).")

    report = controller.triage()
    flag = next((f for f in report.red_flags if f.log_id == entry.id), None)
    if flag is not None:
        views.print_warning(f"Red flag: {flag.reason}")


@app.command()
def history(
    state_path: StatePathOption = None,
    week: Annotated[
        Optional[int],
        typer.Option("--week", "-w", help="Only logs recorded in this week"),
    ] = None,
    limit: Annotated[
        Optional[int],
        typer.Option("--limit", "-l", help="Show only the last N logs"),
    ] = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show logged sessions, oldest first.
    """
    controller = get_controller(state_path)
    state = controller.state

    logs = state.logs_for_week(week) if week is not None else list(state.session_logs)
    if limit is not None and limit > 0:
        logs = logs[-limit:]

    if json_out:
        print(json.dumps([session_log_to_dict(log) for log in logs], indent=2, ensure_ascii=False))
        return

    views.print_history(logs)
