"""
Main CLI application using Typer.
"""

import asyncio
import logging
from pathlib import Path
from typing import Annotated, Optional, Tuple

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..adapters.file_selection_store import MEETING_FILE_SUFFIXES, FileSelectionStore
from ..config import AppConfig, get_default_config_path
from ..domain.availability_index import build_schedule_grid
from ..domain.best_window_calculator import BestWindowCalculator
from ..domain.exceptions import GatherTimeError
from ..domain.models import ALL_DAY_SLOT_INDEX, MeetingSelections
from ..domain.time_slot import TimeSlot
from ..services.meeting_summary import MeetingSummaryService

app = typer.Typer(
    name="gathertime",
    help="Find the meeting window most participants can attend",
    add_completion=False
)

console = Console()


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging.")] = False,
):
    """
    Rank candidate meeting windows from participants' availability votes.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _load_config(config_file: Optional[Path]) -> AppConfig:
    config_path = config_file or get_default_config_path()
    if config_file is not None:
        return AppConfig.load_from_yaml(config_path)
    return AppConfig.load_or_default(config_path)


def _load_meeting(meeting: str, config: AppConfig, top_n: int) -> Tuple[MeetingSummaryService, MeetingSelections]:
    """
    Load a meeting by file path, or by id from the configured meetings dir.
    """
    meeting_path = Path(meeting)
    if meeting_path.suffix in MEETING_FILE_SUFFIXES and meeting_path.exists():
        store = FileSelectionStore(meeting_path.parent, config.defaults.interval_minutes)
        meeting_id = meeting_path.stem
    else:
        store = FileSelectionStore(config.meetings_dir, config.defaults.interval_minutes)
        meeting_id = meeting

    service = MeetingSummaryService(
        selection_source=store,
        calculator=BestWindowCalculator(top_n=top_n),
    )
    return service, asyncio.run(service.fetch_selections(meeting_id))


@app.command()
def summary(
    meeting: Annotated[str, typer.Argument(help="Meeting file (.yaml/.json) or meeting id in the meetings directory.")],
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")] = None,
    top: Annotated[Optional[int], typer.Option("--top", "-n", min=1, help="Number of windows to show.")] = None,
    plain: Annotated[bool, typer.Option("--plain", help="One line per window instead of a table.")] = False,
):
    """
    Show the best non-overlapping windows for a meeting.

    Examples:

        gathertime summary meetings/kickoff.yaml

        gathertime summary kickoff --top 5
    """
    try:
        config = _load_config(config_file)
        top_n = top if top is not None else config.defaults.top_n

        service, selections = _load_meeting(meeting, config, top_n)
        result = service.calculate_summary(selections)

        console.print(
            f"\n[bold cyan]Meeting {selections.meeting_id}[/bold cyan] "
            f"[dim]({selections.selection_type.value})[/dim]"
        )
        console.print(f"   Participants: {result.total_participants}\n")

        if not result.best_windows:
            console.print("[yellow]No one has marked any availability yet.[/yellow]\n")
            return

        if plain:
            for window in result.best_windows:
                console.print(f"  {window.format_display(selections.interval_minutes)}")
            console.print()
            return

        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("#", justify="right")
        table.add_column("Date", style="bold yellow")
        table.add_column("Time")
        table.add_column("Available", justify="right")
        table.add_column("Participants", style="dim")

        for rank, window in enumerate(result.best_windows, 1):
            table.add_row(
                str(rank),
                pendulum.from_format(window.date, "YYYY-MM-DD").format("ddd YYYY-MM-DD"),
                window.format_time_range(selections.interval_minutes),
                f"{window.count} ({window.percentage})",
                ", ".join(str(p) for p in window.participants),
            )

        console.print(table)
        console.print()

    except (GatherTimeError, FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def schedule(
    meeting: Annotated[str, typer.Argument(help="Meeting file (.yaml/.json) or meeting id in the meetings directory.")],
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")] = None,
):
    """
    Show who is available in every slot of every date.
    """
    try:
        config = _load_config(config_file)
        _, selections = _load_meeting(meeting, config, config.defaults.top_n)
        grid = build_schedule_grid(selections.selections, selections.user_directory)

        if not grid.dates():
            console.print("[yellow]No one has marked any availability yet.[/yellow]")
            return

        table = Table(
            title=f"Availability for {selections.meeting_id}",
            show_header=True,
            header_style="bold cyan"
        )
        table.add_column("Date", style="bold yellow")
        table.add_column("Time")
        table.add_column("Count", justify="right")
        table.add_column("Participants", style="dim")

        for date in grid.dates():
            for slot_index, participants in grid.slots[date].items():
                if slot_index == ALL_DAY_SLOT_INDEX:
                    time_str = "ALL_DAY"
                else:
                    time_str = TimeSlot.from_index(slot_index, selections.interval_minutes).to_time_string()
                table.add_row(date, time_str, str(len(participants)), ", ".join(str(p) for p in participants))

        console.print()
        console.print(table)
        console.print()

    except (GatherTimeError, FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command("list")
def list_meetings(
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")] = None,
):
    """
    List the meeting ids in the meetings directory.
    """
    try:
        config = _load_config(config_file)
        meeting_ids = FileSelectionStore(config.meetings_dir).list_meetings()
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if not meeting_ids:
        console.print(f"[yellow]No meeting files in {config.meetings_dir}[/yellow]")
        return

    for meeting_id in meeting_ids:
        console.print(f"  {meeting_id}")


@app.command()
def slot(
    value: Annotated[str, typer.Argument(help="Slot index (e.g. 9) or time (e.g. 09:00).")],
    interval: Annotated[Optional[int], typer.Option("--interval", "-i", help="Slot interval in minutes. Defaults to the configured interval.")] = None,
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")] = None,
):
    """
    Convert a slot index to HH:mm, or HH:mm to a slot index.
    """
    try:
        if interval is None:
            interval = _load_config(config_file).defaults.interval_minutes

        if value.isdigit():
            time_slot = TimeSlot.from_index(int(value), interval)
            console.print(f"{time_slot.slot_index} -> {time_slot.to_time_string()}")
        else:
            time_slot = TimeSlot.from_time_string(value, interval)
            console.print(f"{time_slot.to_time_string()} -> {time_slot.slot_index}")
    except (GatherTimeError, FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]gathertime[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
