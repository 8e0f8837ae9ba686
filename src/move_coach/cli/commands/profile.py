"""Profile management commands: init, profile, injuries, readiness."""

from dataclasses import replace
from typing import Annotated, Optional

import typer

from ...core.config import DEFAULT_EQUIPMENT, EXTERNAL_LOADS, GOALS, INJURY_AREAS
from ...core.models import ProgramState, UserProfile
from ...io.serializers import ValidationError, parse_name_list, parse_weekday_list
from .. import views
from ..app import StatePathOption, app, get_controller, get_store


def _equipment_from(owned: str) -> dict[str, bool]:
    """Map a comma list of owned items onto the known equipment keys."""
    items = {i.lower() for i in parse_name_list(owned)}
    equipment = {k: k in items for k in DEFAULT_EQUIPMENT}
    for extra in items - set(equipment):
        equipment[extra] = True
    return equipment


@app.command()
def init(
    state_path: StatePathOption = None,
    name: Annotated[str, typer.Option("--name", help="Athlete name")] = "",
    email: Annotated[str, typer.Option("--email", help="Contact email")] = "",
    goal: Annotated[
        str,
        typer.Option("--goal", "-g", help="bjj_strength | general_strength | fat_loss | youth"),
    ] = "bjj_strength",
    training_age: Annotated[
        int,
        typer.Option("--training-age", help="Years of consistent training"),
    ] = 3,
    days: Annotated[
        str,
        typer.Option("--days", "-d", help="Training days in order, e.g. 'Mon,Wed,Sat'"),
    ] = "Mon,Thu",
    bjj_days: Annotated[
        str,
        typer.Option("--bjj-days", "-b", help="Grappling days, e.g. 'Tue,Fri'"),
    ] = "Tue,Fri",
    minutes: Annotated[
        int,
        typer.Option("--minutes", "-m", help="Minutes per session"),
    ] = 60,
    equipment: Annotated[
        Optional[str],
        typer.Option("--equipment", "-e", help="Owned equipment, e.g. 'barbell,rack,dumbbells'"),
    ] = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing state without prompting"),
    ] = False,
) -> None:
    """
    Create a fresh program with the given profile.

    Starts at week 1 in the Base phase with no sessions or logs.
    """
    store = get_store(state_path)

    if store.exists() and not force:
        views.print_warning(f"A program already exists at {store.state_path}.")
        if not views.confirm_action("Replace it (all logs will be lost)?"):
            views.print_info("Cancelled.")
            raise typer.Exit(0)

    if goal not in GOALS:
        views.print_error(f"Goal must be one of: {', '.join(GOALS)}")
        raise typer.Exit(1)

    try:
        profile = UserProfile(
            name=name,
            email=email,
            goal=goal,  # type: ignore[arg-type]
            training_age_yrs=training_age,
            days_available=parse_weekday_list(days),
            minutes_per_session=minutes,
            equipment=_equipment_from(equipment) if equipment is not None else dict(DEFAULT_EQUIPMENT),
            bjj_days=parse_weekday_list(bjj_days),
        )
    except (ValidationError, ValueError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    store.save(ProgramState(profile=profile))
    views.print_success(f"Program created at {store.state_path}")
    views.print_info("Next: 'move-coach generate' to build this week's plan.")


@app.command()
def profile(
    state_path: StatePathOption = None,
    name: Annotated[Optional[str], typer.Option("--name", help="Athlete name")] = None,
    email: Annotated[Optional[str], typer.Option("--email", help="Contact email")] = None,
    goal: Annotated[
        Optional[str],
        typer.Option("--goal", "-g", help="bjj_strength | general_strength | fat_loss | youth"),
    ] = None,
    training_age: Annotated[
        Optional[int],
        typer.Option("--training-age", help="Years of consistent training"),
    ] = None,
    days: Annotated[
        Optional[str],
        typer.Option("--days", "-d", help="Training days in order, e.g. 'Mon,Wed,Sat'"),
    ] = None,
    bjj_days: Annotated[
        Optional[str],
        typer.Option("--bjj-days", "-b", help="Grappling days, e.g. 'Tue,Fri'"),
    ] = None,
    minutes: Annotated[
        Optional[int],
        typer.Option("--minutes", "-m", help="Minutes per session"),
    ] = None,
    equipment: Annotated[
        Optional[str],
        typer.Option("--equipment", "-e", help="Owned equipment, e.g. 'barbell,rack'"),
    ] = None,
    barbell_bias: Annotated[
        Optional[bool],
        typer.Option("--barbell-bias/--no-barbell-bias", help="Prefer barbell variations"),
    ] = None,
    dislikes: Annotated[
        Optional[str],
        typer.Option("--dislikes", help="Disliked movements, comma separated"),
    ] = None,
) -> None:
    """
    Show the profile, or update the fields given as options.

    Changing days does not touch the current plan; run 'generate' again.
    """
    controller = get_controller(state_path)
    current = controller.state.profile

    changes: dict = {}
    try:
        if name is not None:
            changes["name"] = name
        if email is not None:
            changes["email"] = email
        if goal is not None:
            if goal not in GOALS:
                raise ValidationError(f"Goal must be one of: {', '.join(GOALS)}")
            changes["goal"] = goal
        if training_age is not None:
            changes["training_age_yrs"] = training_age
        if days is not None:
            changes["days_available"] = parse_weekday_list(days)
        if bjj_days is not None:
            changes["bjj_days"] = parse_weekday_list(bjj_days)
        if minutes is not None:
            changes["minutes_per_session"] = minutes
        if equipment is not None:
            changes["equipment"] = _equipment_from(equipment)
        if barbell_bias is not None or dislikes is not None:
            changes["prefs"] = replace(
                current.prefs,
                barbell_bias=current.prefs.barbell_bias if barbell_bias is None else barbell_bias,
                dislikes=current.prefs.dislikes if dislikes is None else parse_name_list(dislikes),
            )

        if changes:
            result = controller.edit_profile(**changes)
            views.print_success(result.message)
    except (ValidationError, ValueError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.console.print()
    views.print_profile(controller.state.profile)
    if changes and controller.state.sessions:
        views.print_info("Current plan unchanged; run 'generate' to apply the new profile.")


@app.command("add-injury")
def add_injury(
    area: Annotated[
        str,
        typer.Argument(help="shoulder | knee | hip | back | wrist | ankle"),
    ],
    state_path: StatePathOption = None,
    aggravates: Annotated[
        str,
        typer.Option("--aggravates", "-a", help="Aggravating movements, comma separated"),
    ] = "",
    severity: Annotated[
        int,
        typer.Option("--severity", "-s", help="Severity 1-5"),
    ] = 2,
) -> None:
    """
    Add an injury to the profile.

    A shoulder injury makes the next generated week shoulder-safe.
    """
    if area not in INJURY_AREAS:
        views.print_error(f"Area must be one of: {', '.join(INJURY_AREAS)}")
        raise typer.Exit(1)

    controller = get_controller(state_path)
    try:
        injury = controller.add_injury(area, parse_name_list(aggravates), severity)
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success(f"Added {injury.area} injury (id {injury.id}, severity {injury.severity}/5).")
    if controller.constraints.any():
        views.print_info(f"Active constraints: {', '.join(controller.constraints.flags())}")


@app.command("remove-injury")
def remove_injury(
    injury_id: Annotated[str, typer.Argument(help="Injury id (see 'profile')")],
    state_path: StatePathOption = None,
) -> None:
    """Remove an injury from the profile."""
    controller = get_controller(state_path)
    try:
        result = controller.remove_injury(injury_id)
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)
    views.print_success(result.message)


@app.command()
def readiness(
    state_path: StatePathOption = None,
    sleep: Annotated[Optional[int], typer.Option("--sleep", help="Sleep quality 1-10")] = None,
    soreness: Annotated[Optional[int], typer.Option("--soreness", help="Soreness 1-5")] = None,
    stress: Annotated[Optional[int], typer.Option("--stress", help="Stress 1-5")] = None,
    hrv: Annotated[Optional[float], typer.Option("--hrv", help="Heart-rate variability")] = None,
    clear_hrv: Annotated[bool, typer.Option("--clear-hrv", help="Forget the HRV reading")] = False,
    bjj_load: Annotated[
        Optional[str],
        typer.Option("--bjj-load", help="Grappling load today: light | moderate | hard"),
    ] = None,
) -> None:
    """
    Show or update today's readiness check-in.

    The snapshot is overwritten, not appended.
    """
    if bjj_load is not None and bjj_load not in EXTERNAL_LOADS:
        views.print_error(f"BJJ load must be one of: {', '.join(EXTERNAL_LOADS)}")
        raise typer.Exit(1)

    controller = get_controller(state_path)
    changes: dict = {}
    if sleep is not None:
        changes["sleep"] = sleep
    if soreness is not None:
        changes["soreness"] = soreness
    if stress is not None:
        changes["stress"] = stress
    if hrv is not None:
        changes["hrv"] = hrv
    if clear_hrv:
        changes["hrv"] = None
    if bjj_load is not None:
        changes["bjj_load"] = bjj_load

    if changes:
        try:
            result = controller.edit_readiness(**changes)
        except ValueError as e:
            views.print_error(str(e))
            raise typer.Exit(1)
        views.print_success(result.message)

    r = controller.state.readiness
    hrv_str = f"{r.hrv:g}" if r.hrv is not None else "—"
    views.console.print(
        f"Sleep {r.sleep}/10 · Soreness {r.soreness}/5 · Stress {r.stress}/5 · "
        f"HRV {hrv_str} · BJJ load {r.bjj_load}"
    )
