"""CLI interface using Typer."""

from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from paliers.app_logging import configure_logging
from paliers.config import get_settings
from paliers.db import get_db
from paliers.persistence.store import StateStore
from paliers.tracking.controller import RecordResult, Tracker
from paliers.tracking.milestones import CELEBRATION_SECONDS
from paliers.tracking.models import (
    InvalidEntryError,
    InvalidPayloadError,
    InvalidSetupError,
    NotConfiguredError,
    NoWeightDetectedError,
    SetupLockedError,
    SpeechCaptureFailedError,
)

app = typer.Typer(
    help="Weight tracking with palier milestones",
    no_args_is_help=True,
)
console = Console()
logger = logging.getLogger(__name__)

weight_app = typer.Typer(help="Log and list weight entries")
app.add_typer(weight_app, name="weight")


# ============================================================================
# Helpers
# ============================================================================


def output_json(response: dict, file=None) -> None:
    """Output JSON response to stdout or file."""
    json_str = json.dumps(response, indent=2, ensure_ascii=False)
    if file:
        file.write(json_str)
    else:
        print(json_str)


def fail(
    command: str,
    message: str,
    json_output: bool,
    suggestions: Optional[list[str]] = None,
) -> NoReturn:
    """Report an error and exit with status 1."""
    logger.info("%s rejected: %s", command, message)
    if json_output:
        output_json({
            "success": False,
            "command": command,
            "errors": [message],
            "suggestions": suggestions or [],
        })
    else:
        console.print(f"[red]{message}[/red]")
        for suggestion in suggestions or []:
            console.print(suggestion)
    raise typer.Exit(1)


def get_tracker(command: str, json_output: bool) -> Tracker:
    """Open the tracker on the saved state."""
    settings = get_settings()
    store = StateStore(get_db())
    try:
        return Tracker.open(store, default_palier_step=settings.tracking.default_palier_step)
    except InvalidPayloadError as e:
        fail(
            command,
            f"Saved data is unreadable: {e}",
            json_output,
            ["Restore a backup with: paliers import <file>"],
        )


def parse_date_option(value: Optional[str], command: str, json_output: bool) -> date:
    if not value:
        return date.today()
    try:
        return date.fromisoformat(value)
    except ValueError:
        fail(command, f"Invalid date '{value}' (expected YYYY-MM-DD)", json_output)


def print_record(result: RecordResult, command: str, json_output: bool) -> None:
    entry = result.entry
    if json_output:
        data = {
            "date": entry.date.isoformat(),
            "weight": entry.weight,
            "previous_weight": result.previous_weight,
            "palier_level": result.palier_level,
            "level_delta": result.outcome.level_delta,
            "celebrate": result.outcome.celebrate,
        }
        if result.outcome.celebrate:
            data["celebration_seconds"] = CELEBRATION_SECONDS
        output_json({
            "success": True,
            "command": command,
            "data": data,
            "human_summary": f"Logged {entry.weight:.1f} kg on {entry.date.isoformat()}",
        })
        return

    console.print(
        f"[green]Poids de {entry.weight:.1f} kg enregistré pour le "
        f"{entry.date.strftime(get_settings().chart.date_format)}.[/green]"
    )
    if result.outcome.celebrate:
        plural = "s" if result.outcome.level_delta > 1 else ""
        console.print(
            Panel(
                f"[bold]{result.outcome.level_delta} palier{plural} franchi{plural} ![/bold]\n"
                f"Niveau actuel : {result.palier_level}",
                title="Bravo",
                border_style="yellow",
            )
        )


@app.callback()
def main() -> None:
    """Configure logging and make sure the database schema exists."""
    settings = get_settings()
    configure_logging(settings.logging.level)
    get_db().initialize_schema()


# ============================================================================
# Setup Commands
# ============================================================================


@app.command()
def setup(
    start_date: str = typer.Option(..., "--start-date", help="Start date (YYYY-MM-DD)"),
    start_weight: float = typer.Option(..., "--start-weight", help="Start weight in kg"),
    goal_weight: float = typer.Option(..., "--goal-weight", help="Goal weight in kg"),
    palier_step: Optional[float] = typer.Option(
        None, "--palier-step", help="Spacing between paliers in kg (default: 5)"
    ),
    edit: bool = typer.Option(False, "--edit", help="Unlock and change an existing setup"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Save the start date, start weight, goal weight and palier step."""
    tracker = get_tracker("setup", json_output)
    if edit:
        tracker.unlock_setup()

    try:
        state = tracker.setup(start_date, start_weight, goal_weight, palier_step)
    except SetupLockedError as e:
        fail("setup", str(e), json_output, ["Edit the setup with: paliers setup --edit ..."])
    except InvalidSetupError as e:
        fail("setup", str(e), json_output)

    config = state.config
    if json_output:
        output_json({
            "success": True,
            "command": "setup",
            "data": {
                "start_date": config.start_date.isoformat() if config.start_date else None,
                "start_weight": config.start_weight,
                "goal_weight": config.goal_weight,
                "palier_step": config.palier_step,
            },
            "human_summary": f"Setup saved: {config.start_weight:.1f} kg to {config.goal_weight:.1f} kg",
        })
    else:
        console.print("[green]Configuration enregistrée[/green]")
        console.print(f"  Départ : {config.start_weight:.1f} kg le {config.start_date}")
        console.print(f"  Objectif : {config.goal_weight:.1f} kg")
        console.print(f"  Paliers : tous les {config.palier_step:g} kg")


@app.command()
def step(
    palier_step: float = typer.Argument(..., help="Spacing between paliers in kg"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Change the palier step."""
    tracker = get_tracker("step", json_output)
    try:
        tracker.set_palier_step(palier_step)
    except InvalidSetupError as e:
        fail("step", str(e), json_output)

    if json_output:
        output_json({
            "success": True,
            "command": "step",
            "data": {"palier_step": palier_step},
            "human_summary": f"Palier step set to {palier_step:g} kg",
        })
    else:
        console.print(f"[green]Paliers tous les {palier_step:g} kg[/green]")


@app.command()
def theme(
    name: str = typer.Argument(..., help="Theme (light/dark)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Choose the light or dark theme."""
    tracker = get_tracker("theme", json_output)
    try:
        tracker.set_theme(name)
    except InvalidSetupError as e:
        fail("theme", str(e), json_output)

    if json_output:
        output_json({"success": True, "command": "theme", "data": {"theme": name}})
    else:
        console.print(f"[green]Thème : {name}[/green]")


# ============================================================================
# Weight Commands
# ============================================================================


@weight_app.command("add")
def weight_add(
    weight: float = typer.Argument(..., help="Weight in kg"),
    date_str: Optional[str] = typer.Option(
        None, "--date", "-d", help="Date (YYYY-MM-DD, default: today)"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Log a weight (replaces any weight already logged that day)."""
    measured_at = parse_date_option(date_str, "weight add", json_output)
    tracker = get_tracker("weight add", json_output)

    try:
        result = tracker.record_weight(measured_at, weight)
    except NotConfiguredError as e:
        fail("weight add", str(e), json_output, ["Run: paliers setup --start-date ... "])
    except InvalidEntryError as e:
        fail("weight add", str(e), json_output)

    print_record(result, "weight add", json_output)


@weight_app.command("list")
def weight_list(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """List all weight entries."""
    tracker = get_tracker("weight list", json_output)
    entries = tracker.state.log.all()

    if not entries:
        if json_output:
            output_json({
                "success": True,
                "command": "weight list",
                "data": {"entries": []},
                "human_summary": "No weight entries found",
            })
        else:
            console.print("Aucune mesure enregistrée")
        return

    if json_output:
        output_json({
            "success": True,
            "command": "weight list",
            "data": {
                "entries": [
                    {"date": e.date.isoformat(), "weight": e.weight} for e in entries
                ]
            },
            "human_summary": f"{len(entries)} entries",
        })
        return

    table = Table(title="Historique")
    table.add_column("Date", style="cyan")
    table.add_column("Poids", justify="right")
    table.add_column("", justify="right")

    prev_weight = None
    for entry in entries:
        delta = ""
        if prev_weight is not None:
            delta = f"{entry.weight - prev_weight:+.1f}"
        prev_weight = entry.weight
        table.add_row(entry.date.isoformat(), f"{entry.weight:.1f}", delta)

    console.print(table)


@app.command()
def dictate(
    transcript: Optional[str] = typer.Argument(
        None, help="Transcript text (prompted when omitted)"
    ),
    date_str: Optional[str] = typer.Option(
        None, "--date", "-d", help="Date (YYYY-MM-DD, default: today)"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Log a weight from a spoken transcript such as '80,5 kg'."""
    from paliers.tracking.voice import PromptCapture, TextCapture

    measured_at = parse_date_option(date_str, "dictate", json_output)
    tracker = get_tracker("dictate", json_output)

    if transcript is not None:
        capture = TextCapture(transcript)
    else:
        capture = PromptCapture(console, locale=get_settings().tracking.speech_locale)

    try:
        result = tracker.record_from_capture(capture, measured_at)
    except SpeechCaptureFailedError as e:
        fail("dictate", f"Erreur de reconnaissance: {e}", json_output)
    except NoWeightDetectedError:
        fail("dictate", "Aucun poids détecté. Essayez à nouveau.", json_output)
    except NotConfiguredError as e:
        fail("dictate", str(e), json_output, ["Run: paliers setup --start-date ... "])
    except InvalidEntryError as e:
        fail("dictate", str(e), json_output)

    print_record(result, "dictate", json_output)


# ============================================================================
# Views
# ============================================================================


@app.command()
def progress(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show progress against the start, the goal and the paliers."""
    from paliers.tracking.diagnostics import format_progress_report, generate_progress_report

    tracker = get_tracker("progress", json_output)
    report = generate_progress_report(tracker.state)

    if report is None:
        fail(
            "progress",
            "No weight entries yet",
            json_output,
            ["Log weight with: paliers weight add <weight>"],
        )

    if json_output:
        target = report.next_palier
        output_json({
            "success": True,
            "command": "progress",
            "data": {
                "current_weight": report.current_weight,
                "current_date": report.current_date.isoformat(),
                "entry_count": report.entry_count,
                "start_weight": report.start_weight,
                "lost": report.delta.lost if report.delta else None,
                "goal_weight": report.goal_weight,
                "remaining_to_goal": report.remaining_to_goal,
                "palier_step": report.palier_step,
                "palier_level": report.palier_level,
                "next_palier": {
                    "target_weight": target.target_weight,
                    "remaining": round(target.remaining, 2),
                    "reached": target.reached,
                } if target else None,
            },
            "human_summary": f"Current {report.current_weight:.1f} kg, {report.palier_level} paliers crossed",
        })
    else:
        console.print(format_progress_report(report))


@app.command()
def chart(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show the chart series (weights, goal line and palier lines)."""
    settings = get_settings()
    tracker = get_tracker("chart", json_output)
    projection = tracker.chart(
        padding=settings.chart.padding, date_format=settings.chart.date_format
    )

    if projection is None:
        if json_output:
            output_json({"success": True, "command": "chart", "data": None, "human_summary": "No data to chart"})
        else:
            console.print("Aucune mesure à afficher")
        return

    if json_output:
        output_json({
            "success": True,
            "command": "chart",
            "data": projection.to_dict(),
            "human_summary": f"{len(projection.labels)} points, {len(projection.series)} series",
        })
        return

    table = Table(title=f"Évolution ({projection.y_min:g} - {projection.y_max:g} kg)")
    table.add_column("Date", style="cyan")
    for series in projection.series:
        style = "blue" if series.kind == "weight" else "dim"
        table.add_column(series.label, justify="right", style=style)

    for i, label in enumerate(projection.labels):
        table.add_row(label, *[f"{s.values[i]:.1f}" for s in projection.series])

    console.print(table)


# ============================================================================
# Import / Export
# ============================================================================


@app.command("export")
def export_cmd(
    path: Optional[Path] = typer.Argument(None, help="Backup file (default: sauvegarde-poids.json)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Export all data to a JSON backup file."""
    tracker = get_tracker("export", json_output)
    target = path or Path(get_settings().export.filename)
    try:
        written = tracker.export_file(target)
    except OSError as e:
        fail("export", f"Cannot write backup to {target}: {e}", json_output)

    if json_output:
        output_json({
            "success": True,
            "command": "export",
            "data": {"path": str(written), "entries": len(tracker.state.log)},
        })
    else:
        console.print(f"[green]Sauvegarde écrite dans {written}[/green]")


@app.command("import")
def import_cmd(
    path: Path = typer.Argument(..., help="Backup file to import"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Replace all data with a JSON backup file."""
    settings = get_settings()
    store = StateStore(get_db())
    try:
        tracker = Tracker.open(store, default_palier_step=settings.tracking.default_palier_step)
    except InvalidPayloadError as e:
        # Import replaces everything, so an unreadable save is not needed
        logger.info("Ignoring unreadable saved data before import: %s", e)
        tracker = Tracker(store, default_palier_step=settings.tracking.default_palier_step)

    try:
        state = tracker.import_file(path)
    except InvalidPayloadError as e:
        fail("import", f"Fichier de sauvegarde invalide: {e}", json_output)

    if json_output:
        output_json({
            "success": True,
            "command": "import",
            "data": {
                "entries": len(state.log),
                "palier_level": state.milestones.palier_level,
                "configured": state.is_configured,
            },
        })
    else:
        console.print("[green]Données importées avec succès ![/green]")


if __name__ == "__main__":
    app()
