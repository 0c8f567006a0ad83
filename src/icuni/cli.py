"""CLI entry point for the ICUNI Connect draft project."""

import logging
import typer
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from . import __version__
from .config import config
from .models import Currency, DraftProject, Phase, TalentRef, Visibility
from .models.schedule import MAX_DURATION_WEEKS, MIN_DURATION_WEEKS
from .store import AppStore

app = typer.Typer(
    name="icuni",
    help="ICUNI Connect - assemble production projects and crews",
    no_args_is_help=True
)
draft_app = typer.Typer(
    help="Edit the draft project",
    no_args_is_help=True
)
app.add_typer(draft_app, name="draft")


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"icuni version {__version__}")
        raise typer.Exit()


def load_store() -> AppStore:
    """Open the store backed by the configured storage file."""
    return AppStore.from_config(config)


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Enable verbose logging"
    ),
) -> None:
    """ICUNI Connect - build a project draft, staff it, then submit it."""
    setup_logging(verbose)


def _format_money(amount: float, currency: Currency) -> str:
    return f"{Currency(currency).value} {amount:,.0f}"


@app.command()
def status() -> None:
    """Show the current draft project."""
    store = load_store()
    draft = store.draft

    typer.echo(f"📁 Project: {draft.name or '(untitled)'}")
    if draft.type:
        kind = " / ".join(part for part in (draft.type, draft.sub_type, draft.genre) if part)
        typer.echo(f"   Type: {kind}")
    typer.echo(f"   Budget: {_format_money(draft.budget, draft.currency)}")
    typer.echo(f"   Ambition: {draft.ambition}/10")
    typer.echo(f"   Visibility: {Visibility(draft.visibility).value}")

    if draft.brief:
        brief_preview = draft.brief[:70] + "..." if len(draft.brief) > 70 else draft.brief
        typer.echo(f"   Brief: {brief_preview}")

    typer.echo("\n🗓️  Schedule:")
    for item in draft.schedule:
        status_icon = "✅" if item.enabled else "⏸️ "
        typer.echo(f"   {status_icon} {Phase(item.phase).value}: {item.duration_weeks} wk")
    typer.echo(f"   Total duration: {draft.total_duration_weeks} weeks")

    wrap_date = draft.end_date
    if wrap_date:
        typer.echo(f"   Start: {draft.start_date}")
        typer.echo(f"   Wrapped & delivered: {wrap_date.isoformat()}")
    else:
        typer.echo("   Start: pending")

    typer.echo(f"\n👥 Crew ({len(draft.selected_talents)}):")
    for talent in draft.selected_talents:
        typer.echo(f"   • {talent.display_name or talent.talent_id} ({talent.primary_role}) [{talent.talent_id}]")
    if draft.selected_talents:
        typer.echo(f"   Est. crew commitment: ~{_format_money(draft.estimated_crew_cost, draft.currency)}")


@draft_app.command("set")
def set_fields(
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Project title"),
    brief: Optional[str] = typer.Option(None, "--brief", "-b", help="Creative brief"),
    project_type: Optional[str] = typer.Option(None, "--type", "-t", help="Project type"),
    sub_type: Optional[str] = typer.Option(None, "--sub-type", help="Project subtype"),
    genre: Optional[str] = typer.Option(None, "--genre", "-g", help="Genre"),
    currency: Optional[Currency] = typer.Option(None, "--currency", "-c", help="Budget currency"),
    budget: Optional[float] = typer.Option(None, "--budget", min=0, help="Total budget"),
    ambition: Optional[int] = typer.Option(None, "--ambition", "-a", min=0, max=10, help="Ambition 0-10"),
    start_date: Optional[datetime] = typer.Option(
        None,
        "--start-date",
        "-s",
        formats=["%Y-%m-%d"],
        help="Target start date (YYYY-MM-DD)"
    ),
    visibility: Optional[Visibility] = typer.Option(None, "--visibility", help="Listing visibility"),
    reveal_team: Optional[bool] = typer.Option(
        None,
        "--reveal-team/--hide-team",
        help="Show the roster on the public listing"
    ),
) -> None:
    """Update draft project fields."""
    changes: Dict[str, Any] = {
        "name": name,
        "brief": brief,
        "type": project_type,
        "sub_type": sub_type,
        "genre": genre,
        "currency": currency,
        "budget": budget,
        "ambition": ambition,
        "start_date": start_date.date().isoformat() if start_date else None,
        "visibility": visibility,
        "reveal_team": reveal_team,
    }
    changes = {k: v for k, v in changes.items() if v is not None}
    if not changes:
        typer.echo("⚠️  Nothing to update. See 'icuni draft set --help'")
        raise typer.Exit(1)

    store = load_store()
    store.update_draft(**changes)
    typer.echo(f"✅ Updated: {', '.join(changes)}")


@draft_app.command()
def schedule(
    phase: Phase = typer.Argument(
        ...,
        case_sensitive=False,
        help="Production phase"
    ),
    weeks: Optional[int] = typer.Option(
        None,
        "--weeks",
        "-w",
        min=MIN_DURATION_WEEKS,
        max=MAX_DURATION_WEEKS,
        help="Phase duration in weeks"
    ),
    enabled: Optional[bool] = typer.Option(
        None,
        "--enable/--disable",
        help="Include or exclude the phase from the total"
    ),
) -> None:
    """Adjust one phase of the production schedule."""
    changes: Dict[str, Any] = {}
    if weeks is not None:
        changes["duration_weeks"] = weeks
    if enabled is not None:
        changes["enabled"] = enabled
    if not changes:
        typer.echo("⚠️  Nothing to update. Pass --weeks and/or --enable/--disable")
        raise typer.Exit(1)

    store = load_store()
    store.update_schedule_item(list(Phase).index(phase), **changes)
    item = store.draft.schedule[list(Phase).index(phase)]
    state = "enabled" if item.enabled else "disabled"
    typer.echo(f"✅ {phase.value}: {item.duration_weeks} wk ({state})")
    typer.echo(f"   Total duration: {store.total_duration_weeks} weeks")


@draft_app.command()
def add(
    talent_id: str = typer.Argument(..., help="Talent identifier"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Display name"),
    slug: Optional[str] = typer.Option(None, "--slug", help="Public profile slug"),
    headline: Optional[str] = typer.Option(None, "--headline", help="One-line pitch"),
    city: Optional[str] = typer.Option(None, "--city", help="Home city"),
    fetch: bool = typer.Option(
        False,
        "--fetch",
        "-f",
        help="Load the talent profile from the API"
    ),
) -> None:
    """Add a talent to the draft project."""
    if fetch:
        from .services import ApiError, ProjectApiClient

        try:
            config.validate_api_required()
            talent = ProjectApiClient().get_talent(talent_id)
        except (ValueError, ApiError) as e:
            typer.echo(f"❌ Could not fetch talent {talent_id}: {e}")
            raise typer.Exit(1)
    else:
        talent = TalentRef(
            talent_id=talent_id,
            display_name=name or "",
            public_slug=slug or "",
            headline=headline,
            city=city,
        )

    store = load_store()
    if store.draft.has_talent(talent_id):
        typer.echo(f"ℹ️  {talent_id} is already in the project")
        return

    store.add_to_project(talent)
    typer.echo(f"✅ Added {talent.display_name or talent_id} ({len(store.draft.selected_talents)} in crew)")


@draft_app.command()
def remove(
    talent_id: str = typer.Argument(..., help="Talent identifier")
) -> None:
    """Remove a talent from the draft project."""
    store = load_store()
    if not store.draft.has_talent(talent_id):
        typer.echo(f"ℹ️  {talent_id} is not in the project")
        return

    store.remove_from_project(talent_id)
    typer.echo(f"✅ Removed {talent_id} ({len(store.draft.selected_talents)} in crew)")


@draft_app.command()
def clear(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation")
) -> None:
    """Discard the draft and start over."""
    if not yes:
        typer.confirm("Discard the current draft?", abort=True)

    store = load_store()
    store.clear_draft()
    typer.echo("🗑️  Draft cleared")


@draft_app.command("export")
def export_draft(
    output: Path = typer.Argument(..., help="YAML file to write", dir_okay=False)
) -> None:
    """Write the draft to a YAML file."""
    store = load_store()
    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        store.draft.to_yaml(output)
    except OSError as e:
        typer.echo(f"❌ Error saving draft: {e}")
        raise typer.Exit(1)
    typer.echo(f"✅ Draft saved: {output}")


@draft_app.command("import")
def import_draft(
    source: Path = typer.Argument(
        ...,
        help="YAML file to read",
        exists=True,
        file_okay=True,
        dir_okay=False
    )
) -> None:
    """Replace the draft with one read from a YAML file."""
    try:
        draft = DraftProject.from_yaml(source)
    except Exception as e:
        typer.echo(f"❌ Error loading draft: {e}")
        raise typer.Exit(1)

    store = load_store()
    store.set_draft(draft)
    typer.echo(f"✅ Draft loaded: {draft.name or '(untitled)'}")


@draft_app.command()
def submit(
    project_id: Optional[str] = typer.Option(
        None,
        "--project-id",
        "-p",
        help="Update this existing project instead of creating one"
    ),
    clear_after: bool = typer.Option(
        False,
        "--clear",
        help="Clear the draft once the project is saved"
    ),
) -> None:
    """Send the draft to the project API."""
    from .services import ApiError, ProjectApiClient

    store = load_store()
    draft = store.draft
    if not draft.name:
        typer.echo("❌ The draft needs a name before it can be saved")
        typer.echo("   Run 'icuni draft set --name \"...\"'")
        raise typer.Exit(1)

    try:
        config.validate_api_required()
    except ValueError as e:
        typer.echo(f"❌ Configuration error: {e}")
        raise typer.Exit(1)

    try:
        saved_id = ProjectApiClient().save_draft(draft, project_id=project_id)
    except ApiError as e:
        typer.echo(f"❌ Error saving project: {e}")
        raise typer.Exit(1)

    verb = "updated" if project_id else "created"
    typer.echo(f"✅ Project {verb}: {saved_id or '(no id returned)'}")

    if clear_after:
        store.clear_draft()
        typer.echo("🗑️  Draft cleared")


if __name__ == "__main__":
    app()
