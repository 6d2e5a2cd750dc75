"""CLI entry point — open the notes editor, inspect and export saved notes."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from livenotes import __version__
from livenotes.codec import ProjectData, unmatched_offsets
from livenotes.config import CONFIG_PATH, init_config_if_missing, load_config
from livenotes.logging_setup import setup_logging
from livenotes.timefmt import format_absolute, format_relative

console = Console(highlight=False)


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

def _load_project(path: str | Path) -> ProjectData:
    """Read a backup-format JSON file or exit with an error."""
    path = Path(path)
    try:
        return ProjectData.from_dict(json.loads(path.read_text(encoding="utf-8")))
    except (json.JSONDecodeError, OSError, TypeError, ValueError, AttributeError) as exc:
        console.print(f"  [red bold]Error:[/red bold] could not read {path}: {exc}")
        sys.exit(1)


def _stamp(ms: int | None, anchor_ms: int) -> str:
    if ms is None:
        return ""
    if anchor_ms:
        return format_relative(ms - anchor_ms)
    return format_absolute(ms)


def _resolve_export_path(source: Path, output: str | None) -> Path:
    """Priority: -o > config export_folder/<source stem>.md"""
    if output:
        return Path(output)
    folder = load_config().get("export_folder", "~/notes")
    return Path(folder).expanduser() / f"{source.stem}.md"


def _open_editor(project: ProjectData | None, live: bool, title: str) -> None:
    from livenotes.app import NotesApp

    NotesApp(project=project, live=live, title=title).run()


# ---------------------------------------------------------------------------
# Main command group
# ---------------------------------------------------------------------------

@click.group(invoke_without_command=True)
@click.option("--debug", is_flag=True, default=False, help="Enable debug logging.")
@click.version_option(__version__, prog_name="livenotes")
@click.pass_context
def main(ctx: click.Context, debug: bool) -> None:
    """livenotes — meeting notes stamped against the recording clock."""
    cfg = load_config()
    setup_logging(debug=debug, log_file=cfg.get("log_file"), level=cfg.get("log_level"))
    if ctx.invoked_subcommand is None:
        ctx.invoke(edit)


@main.command()
@click.argument("file", required=False, type=click.Path(exists=True, dir_okay=False))
@click.option("--live", is_flag=True, default=False, help="Start a new live session (ignores FILE and backup).")
@click.option("-t", "--title", default="", help="Title used for backups and exports.")
def edit(file: str | None = None, live: bool = False, title: str = "") -> None:
    """Open the editor on FILE, the auto-backup, or a new live session."""
    from livenotes.backup import backup_age_minutes, has_backup, load_backup

    if live:
        _open_editor(None, live=True, title=title)
        return
    if file:
        _open_editor(_load_project(file), live=False, title=title or Path(file).stem)
        return

    if has_backup():
        backup = load_backup()
        if backup is not None:
            age = backup_age_minutes()
            console.print(f"  [yellow]Found an auto-backup from {age} minute(s) ago.[/yellow]")
            if click.confirm("  Restore it?", default=True):
                _open_editor(backup.project, live=False, title=title or backup.title)
                return
    _open_editor(None, live=True, title=title)


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
def show(file: str) -> None:
    """Print the blocks of FILE with their times and speakers."""
    project = _load_project(file)
    blocks, timestamps, speakers = project.decode()

    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Time")
    table.add_column("Speaker")
    table.add_column("Text", overflow="fold")
    for i, text in enumerate(blocks):
        table.add_row(str(i), _stamp(timestamps.get(i), project.anchor_ms), speakers.get(i, ""), text)
    console.print(table)
    console.print(f"  [dim]{len(blocks)} block(s), {len(timestamps)} timestamp(s)[/dim]")


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("-o", "--output", type=click.Path(dir_okay=False), default=None, help="Markdown file to write.")
@click.option("-t", "--title", default=None, help="Title for the front matter.")
def export(file: str, output: str | None, title: str | None) -> None:
    """Export FILE as Markdown."""
    from livenotes.output import save_notes

    source = Path(file)
    project = _load_project(source)
    target = _resolve_export_path(source, output)
    try:
        path = save_notes(project, target, title=title or source.stem)
    except OSError as exc:
        console.print(f"  [red bold]Error:[/red bold] could not write {target}: {exc}")
        sys.exit(1)
    console.print(f"  [green]Exported[/green]      {path}")


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--duration-ms", type=int, default=None, help="Recording length; clamps the last entry's end.")
def timeline(file: str, duration_ms: int | None) -> None:
    """Print the stamped blocks of FILE as timeline JSON."""
    from livenotes.metadata import build_timeline

    project = _load_project(file)
    blocks, timestamps, speakers = project.decode()
    entries = build_timeline(blocks, timestamps, speakers, project.anchor_ms, duration_ms)
    console.print_json(data=[e.to_dict() for e in entries])


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
def check(file: str) -> None:
    """Report timestamps in FILE whose offsets match no block start."""
    project = _load_project(file)
    missing = unmatched_offsets(project.text, dict(project.positions))
    if not missing:
        console.print(f"  [green]OK[/green]  all {len(project.positions)} timestamp(s) match a block start")
        return
    console.print(f"  [red]{len(missing)} unmatched offset(s):[/red] {', '.join(map(str, missing))}")
    sys.exit(1)


@main.command()
@click.option("--show", "show_values", is_flag=True, help="Show current config values.")
def config(show_values: bool) -> None:
    """Show or create the configuration file."""
    if show_values:
        cfg = load_config()
        for key, val in cfg.items():
            console.print(f"  [bold]{key}:[/bold] {val}")
        return
    if init_config_if_missing():
        console.print(f"  Created default config at [dim]{CONFIG_PATH}[/dim]")
    else:
        console.print(f"  Config file: [dim]{CONFIG_PATH}[/dim]")
    console.print("  Edit it directly, or use [bold]'livenotes config --show'[/bold] to view current values.")
