"""Command-line interface for tagging-rugby."""

import asyncio
import os
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn
from rich.table import Table

from tagging_rugby import __version__
from tagging_rugby.config import Config
from tagging_rugby.core.encoder.ffmpeg import FFmpegEncoder
from tagging_rugby.core.player.deps import check_all
from tagging_rugby.core.store.sqlite_store import SQLiteNoteStore
from tagging_rugby.models.records import TackleStats
from tagging_rugby.services.export import (
    ExportComplete,
    ExportFailed,
    ExportProgress,
    next_export_event,
    prepare_export,
)
from tagging_rugby.utils.exceptions import (
    ConfigurationError,
    DependencyError,
    PlayerError,
    TaggingRugbyError,
)
from tagging_rugby.utils.logger import get_logger, setup_logging

app = typer.Typer(
    name="tagging-rugby",
    help="Annotate rugby video from the terminal while mpv plays it",
    context_settings={"help_option_names": ["-h", "--help"]},
    add_completion=False,
)

console = Console(stderr=True)
logger = get_logger(__name__)


def load_config(
    config_path: Optional[Path] = None,
    db_path: Optional[Path] = None,
    socket_path: Optional[str] = None,
    terminal_ui: bool = False,
) -> Config:
    """Build the configuration and start logging; flags beat env beats YAML."""
    try:
        config = Config.from_env_or_yaml(config_path)
    except ConfigurationError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(2)
    if db_path is not None:
        config.store.db_path = str(db_path)
    if socket_path is not None:
        config.player.socket_path = socket_path

    # The terminal belongs to the UI while a video is open
    setup_logging(config.logging, console=False if terminal_ui else None)
    return config


@app.command("open")
def open_video(
    video: Path = typer.Argument(
        ...,
        help="Path to the video to annotate",
        exists=True,
        dir_okay=False,
        resolve_path=True,
    ),
    db: Optional[Path] = typer.Option(None, "--db", help="SQLite database file"),
    socket: Optional[str] = typer.Option(None, "--socket", help="mpv IPC socket path"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML config file"),
) -> None:
    """Launch mpv on a video and open the annotation UI.

    \b
    Example:
        tagging-rugby open match.mp4
        tagging-rugby open match.mp4 --db notes.db
    """
    from tagging_rugby.tui.app import run_tui

    config = load_config(config_path, db, socket, terminal_ui=True)
    logger.info(f"Opening {video}")
    try:
        asyncio.run(run_tui(str(video), config))
    except (DependencyError, PlayerError) as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1)


@app.command()
def doctor() -> None:
    """Check that mpv and ffmpeg are installed."""
    missing = 0
    for status in check_all():
        if status.found:
            console.print(f"[green]✓[/green] {status.name}: {status.path}")
        else:
            missing += 1
            console.print(f"[red]✗[/red] {status.name} not found. Install from {status.install_url}")
    if missing:
        raise typer.Exit(1)


@app.command()
def version() -> None:
    """Show version and exit."""
    typer.echo(f"tagging-rugby version {__version__}")


async def _export(
    video_path: str, config: Config, progress: Progress, saved_clips: bool = False
) -> ExportComplete | ExportFailed:
    store = SQLiteNoteStore(str(config.store.resolved_path))
    await store.initialize()
    try:
        encoder = FFmpegEncoder(
            binary=config.export.binary,
            preset=config.export.preset,
            stream_copy=config.export.stream_copy,
        )
        job = await prepare_export(
            store,
            video_path,
            encoder,
            video_duration=config.export.fallback_duration,
            pre_roll=config.export.pre_roll,
            post_roll=config.export.post_roll,
            saved_clips=saved_clips,
        )
        task = progress.add_task("Exporting clips", total=job.total)
        queue = job.start()
        while True:
            event = await next_export_event(queue)
            if isinstance(event, ExportProgress):
                progress.update(
                    task,
                    completed=event.current - 1,
                    description=os.path.basename(event.path),
                )
                continue
            if isinstance(event, ExportComplete):
                progress.update(task, completed=event.count)
            return event
    finally:
        await store.close()


@app.command()
def export(
    video: Path = typer.Argument(
        ...,
        help="Video whose tackles or saved clips should be cut",
        exists=True,
        dir_okay=False,
        resolve_path=True,
    ),
    copy: bool = typer.Option(False, "--copy", help="Copy streams instead of re-encoding"),
    clips: bool = typer.Option(False, "--clips", help="Export saved clip notes instead of tackles"),
    db: Optional[Path] = typer.Option(None, "--db", help="SQLite database file"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML config file"),
) -> None:
    """Export one clip per tackle, or every saved clip, without opening the UI.

    Clips are written to <video>-clips/<player>/ next to the video; saved
    clips go to <video>-clips/clips/.
    """
    config = load_config(config_path, db)
    if copy:
        config.export.stream_copy = True

    with Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
    ) as progress:
        try:
            result = asyncio.run(_export(str(video), config, progress, saved_clips=clips))
        except TaggingRugbyError as e:
            console.print(f"[red]Error:[/red] {e.message}")
            raise typer.Exit(1)

    if isinstance(result, ExportFailed):
        console.print(f"[red]Error:[/red] {result.error}")
        raise typer.Exit(1)
    console.print(f"[green]Exported {result.count} clip(s) to {result.output_dir}[/green]")


async def _load_stats(video_path: str | None, config: Config) -> list[TackleStats]:
    store = SQLiteNoteStore(str(config.store.resolved_path))
    await store.initialize()
    try:
        return await store.select_tackle_stats(video_path)
    finally:
        await store.close()


@app.command()
def stats(
    video: Optional[Path] = typer.Argument(
        None,
        help="Limit to one video; all videos when omitted",
        resolve_path=True,
    ),
    db: Optional[Path] = typer.Option(None, "--db", help="SQLite database file"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML config file"),
) -> None:
    """Print per-player tackle statistics."""
    config = load_config(config_path, db)
    rows = asyncio.run(_load_stats(str(video) if video else None, config))

    table = Table(title=f"Tackle Statistics ({video.name if video else 'All Videos'})")
    for column in ("Player", "Total", "Completed", "Missed", "Possible", "%", "Starred"):
        table.add_column(column, justify="left" if column == "Player" else "right")
    for row in rows:
        table.add_row(
            row.player,
            str(row.total),
            str(row.completed),
            str(row.missed),
            str(row.possible),
            row.percentage_display,
            str(row.starred),
        )
    Console().print(table)


if __name__ == "__main__":
    app()
