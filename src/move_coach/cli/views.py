"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of plans, logs and triage.
"""

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..core.adaptation import adjust_load
from ..core.loads import estimate_e1rm
from ..core.metrics import TriageReport
from ..core.models import (
    ConstraintSet,
    PlannedSession,
    ProgramState,
    ReadinessSnapshot,
    SessionLog,
    UserProfile,
)

console = Console()


def _fmt_load(value: float | None) -> str:
    if value is None:
        return "—"
    return f"{value:g}"


def _current_pain(state: ProgramState) -> bool:
    """True if the most recent log this week reported any pain."""
    logs = state.logs_for_week(state.week_index)
    return bool(logs) and logs[-1].pain_flag > 0


def format_session_table(session: PlannedSession, readiness: ReadinessSnapshot, pain: bool) -> Table:
    """
    Build the main-work table for one planned session.

    The "Today" column is the load suggestion after the readiness and
    pain adjustment.
    """
    table = Table(show_header=True, header_style="bold", expand=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Movement", style="cyan")
    table.add_column("Scheme")
    table.add_column("RPE", justify="right")
    table.add_column("Sets", justify="right")
    table.add_column("Start", justify="right")
    table.add_column("Today", justify="right", style="bold")

    for i, block in enumerate(session.blocks, 1):
        move = escape(block.move)
        if block.alt:
            move += f" [dim](Alt: {escape(block.alt)})[/dim]"
        today = (
            _fmt_load(adjust_load(block.load_suggestion, readiness, pain))
            if block.load_suggestion is not None
            else "—"
        )
        table.add_row(
            str(i),
            move,
            escape(block.scheme),
            f"{block.target_rpe:g}",
            str(block.slots),
            _fmt_load(block.load_suggestion),
            today,
        )
    return table


def print_plan(state: ProgramState, constraints: ConstraintSet) -> None:
    """
    Print this week's plan: one panel per session.

    Args:
        state: Program state
        constraints: Active movement restrictions (shown in the header)
    """
    header = f"[bold]Week {state.week_index}[/bold] · Phase: [magenta]{state.current_phase}[/magenta]"
    if constraints.any():
        header += f" · Constraints: {', '.join(constraints.flags())}"
    console.print(header)

    if state.plan_notes:
        console.print(f"[yellow]{state.plan_notes}[/yellow]")

    if not state.sessions:
        console.print("[dim]No sessions yet. Run 'generate' to create your plan.[/dim]")
        return

    pain = _current_pain(state)
    logged_ids = {log.session_id for log in state.logs_for_week(state.week_index)}

    for session in state.sessions:
        done = " [green]✓ logged[/green]" if session.id in logged_ids else ""
        lines = [f"[dim]Warm-up:[/dim] {escape(' · '.join(session.warmup))}"]
        console.print()
        console.print(
            Panel(
                "\n".join(lines),
                title=f"{session.day} — {escape(session.title)}{done}",
                subtitle=f"id {session.id}",
                expand=False,
            )
        )
        console.print(format_session_table(session, state.readiness, pain))
        console.print(f"[dim]Finisher:[/dim] {escape(session.finisher)}")
        console.print(f"[dim]Cues:[/dim] {escape(' · '.join(session.cues))}")


def format_log_table(logs: list[SessionLog]) -> Table:
    """
    Format session logs as a Rich table.

    Args:
        logs: Logs to display

    Returns:
        Rich Table
    """
    table = Table(title="Session Log", show_header=True, header_style="bold")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Date", style="cyan")
    table.add_column("Wk", justify="right")
    table.add_column("Day")
    table.add_column("Work")
    table.add_column("RPE", justify="right")
    table.add_column("Pain", justify="right")
    table.add_column("Notes", style="dim")

    for i, log in enumerate(logs, 1):
        if log.missed:
            work = "[red]missed[/red]"
        else:
            parts = []
            for c in log.completed:
                load = f"@{c.last_load:g}" if c.last_load else ""
                e1rm = ""
                if c.last_load and c.reps and c.rpe is not None:
                    e1rm = f" (e1RM {estimate_e1rm(c.last_load, c.reps, c.rpe)})"
                parts.append(f"{escape(c.move)} {c.sets}x{c.reps}{load}{e1rm}")
            work = "\n".join(parts) if parts else "—"

        pain_style = "red" if log.pain_flag >= 3 else ""
        table.add_row(
            str(i),
            log.date,
            str(log.week_index),
            log.day or "-",
            work,
            f"{log.rpe_avg:g}",
            f"[{pain_style}]{log.pain_flag}[/{pain_style}]" if pain_style else str(log.pain_flag),
            escape(log.notes),
        )

    return table


def print_history(logs: list[SessionLog]) -> None:
    """
    Print session logs to console.

    Args:
        logs: Logs to display
    """
    if not logs:
        console.print("[yellow]No sessions logged yet.[/yellow]")
        return
    console.print(format_log_table(logs))


def print_triage(report: TriageReport) -> None:
    """Print adherence and red flags for the week."""
    console.print(
        f"[bold]Week {report.week_index}[/bold] · Adherence "
        f"{report.adherence}% ({report.logged_count}/{report.planned_count} logged)"
    )
    if not report.red_flags:
        console.print("[green]No red flags this week. Keep rolling.[/green]")
        return
    for flag in report.red_flags:
        console.print(f"  [red]•[/red] {flag.date}: {flag.reason}  [dim]({flag.log_id})[/dim]")


def format_status_display(state: ProgramState, report: TriageReport, constraints: ConstraintSet) -> str:
    """
    Format program status as text block.

    Returns:
        Formatted string
    """
    r = state.readiness
    hrv = f"{r.hrv:g}" if r.hrv is not None else "—"
    lines = [
        "Current status",
        f"- Phase: {state.current_phase}",
        f"- Week: {state.week_index}",
        f"- Adherence: {report.adherence}%",
        f"- Red flags: {len(report.red_flags)}",
        f"- Planned sessions: {len(state.sessions)}",
        f"- Constraints: {', '.join(constraints.flags()) or 'none'}",
        f"- Readiness: sleep {r.sleep}/10, soreness {r.soreness}/5, "
        f"stress {r.stress}/5, HRV {hrv}, BJJ load {r.bjj_load}",
    ]
    return "\n".join(lines)


def print_profile(profile: UserProfile) -> None:
    """Print the user profile."""
    table = Table(show_header=False, box=None)
    table.add_column(style="dim")
    table.add_column()
    table.add_row("Name", escape(profile.name) or "—")
    table.add_row("Email", escape(profile.email) or "—")
    table.add_row("Goal", profile.goal)
    table.add_row("Training age", f"{profile.training_age_yrs} yrs")
    table.add_row("Days available", ", ".join(profile.days_available) or "—")
    table.add_row("Minutes/session", str(profile.minutes_per_session))
    table.add_row("BJJ days", ", ".join(profile.bjj_days) or "—")
    owned = [k for k, v in profile.equipment.items() if v]
    table.add_row("Equipment", escape(", ".join(owned)) or "—")
    table.add_row("Barbell bias", "yes" if profile.prefs.barbell_bias else "no")
    if profile.prefs.dislikes:
        table.add_row("Dislikes", escape(", ".join(profile.prefs.dislikes)))
    console.print(table)

    if not profile.injuries:
        console.print("[dim]No injuries added.[/dim]")
        return
    console.print("[bold]Injuries[/bold]")
    for injury in profile.injuries:
        tags = escape(", ".join(injury.aggravates)) or "—"
        console.print(
            f"  {injury.id}  {injury.area}  severity {injury.severity}/5  aggravates: {tags}"
        )


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{escape(message)}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {escape(message)}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {escape(message)}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{escape(message)}[/blue]")


def confirm_action(message: str) -> bool:
    """
    Prompt user for confirmation.

    Args:
        message: Confirmation message

    Returns:
        True if confirmed, False otherwise
    """
    response = console.input(f"{escape(message)} [y/N]: ")
    return response.lower() in ("y", "yes")
