"""
Rich console configuration for the GPS track plotter.

Provides terminal output with progress bars, panels, and styled logging.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme
from rich.panel import Panel
from rich.table import Table
from rich.progress import (
    Progress,
    SpinnerColumn,
    TextColumn,
    BarColumn,
    TaskProgressColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
    MofNCompleteColumn,
)

TRACK_THEME = Theme({
    "info": "cyan",
    "warning": "yellow",
    "error": "bold red",
    "success": "bold green",
    "highlight": "bold magenta",
    "muted": "dim",
    "gps": "green",
    "pixel": "bold blue",
})

# Global console instance
console = Console(theme=TRACK_THEME)


def setup_rich_logging(verbose: bool = False) -> None:
    """
    Configure logging to use Rich handler.

    Args:
        verbose: Enable DEBUG level logging with full details
    """
    level = logging.DEBUG if verbose else logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[
            RichHandler(
                console=console,
                show_time=verbose,
                show_path=verbose,
                rich_tracebacks=True,
                tracebacks_show_locals=verbose,
                markup=True,
            )
        ],
        force=True,  # Override any existing configuration
    )


def create_progress() -> Progress:
    """
    Create a progress bar for frame rendering.

    Returns:
        Configured Progress instance
    """
    return Progress(
        SpinnerColumn("dots"),
        TextColumn("[bold blue]{task.description}"),
        BarColumn(bar_width=40, style="cyan", complete_style="green"),
        TaskProgressColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        TimeRemainingColumn(),
        console=console,
        transient=False,
    )


def create_gif_progress() -> Progress:
    """
    Create a progress bar for GIF assembly with a status field.

    The status field carries the assembler's own time estimate, which accounts
    for frames getting slower as the GIF grows.

    Returns:
        Configured Progress instance
    """
    return Progress(
        SpinnerColumn("dots"),
        TextColumn("[bold blue]{task.description}"),
        BarColumn(bar_width=40, style="cyan", complete_style="green"),
        TaskProgressColumn(),
        MofNCompleteColumn(),
        TextColumn("[dim]{task.fields[status]}[/]"),
        TimeElapsedColumn(),
        console=console,
        transient=False,
    )


def print_banner(version: str = "1.0.0") -> None:
    """Print a styled startup banner."""
    console.print("\n[bold cyan]GPS Track Plotter[/]")
    console.print("[dim]Animated route dots on a calibrated map image[/]")
    console.print(f"[muted]Version {version}[/]\n")


def print_config_summary(
    preset: str,
    map_file: str,
    track_file: str,
    dot_distance_m: float,
    dot_size: int,
    rotation_angle_deg: float,
    output_dir: str,
    max_frames: Optional[int] = None,
    gif_dir: Optional[str] = None,
) -> None:
    """
    Print a styled configuration summary panel.

    Args:
        preset: Configuration name
        map_file: Map image path
        track_file: GPX track path
        dot_distance_m: Minimum spacing between dots
        dot_size: Dot radius in pixels
        rotation_angle_deg: Clockwise map rotation
        output_dir: Frame output directory
        max_frames: Frame limit, None for all dots
        gif_dir: GIF output directory, None when GIF assembly is off
    """
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Key", style="dim")
    table.add_column("Value", style="bold")

    table.add_row("Preset", f"[highlight]{preset}[/]")
    table.add_row("Map", map_file)
    table.add_row("Track", f"[gps]{track_file}[/]")
    table.add_row("Dot Spacing", f"{dot_distance_m:g} m")
    table.add_row("Dot Size", f"{dot_size} px")
    table.add_row("Map Rotation", f"{rotation_angle_deg:g}°")
    table.add_row("Frames", "all dots" if max_frames is None else f"first {max_frames}")
    table.add_row("Output", f"[green]{output_dir}[/]")
    table.add_row("GIF", f"[green]{gif_dir}[/]" if gif_dir else "[dim]off[/]")

    panel = Panel(
        table,
        title="[bold]Configuration[/]",
        border_style="cyan",
        padding=(1, 2),
    )
    console.print(panel)
    console.print()


def print_phase(phase_num: int, total_phases: int, description: str) -> None:
    """
    Print a phase header for multi-step processing.

    Args:
        phase_num: Current phase number (1-indexed)
        total_phases: Total number of phases
        description: Description of this phase
    """
    console.print(
        f"\n[bold cyan]Step {phase_num}/{total_phases}:[/] [bold]{description}[/]"
    )


def print_completion_summary(
    output_dir: str,
    frame_count: int,
    gps_points: Optional[int] = None,
    dot_count: Optional[int] = None,
    gif_path: Optional[str] = None,
) -> None:
    """
    Print a styled completion summary.

    Args:
        output_dir: Directory holding the frames
        frame_count: Number of frames written
        gps_points: Track points read from the GPX file (optional)
        dot_count: Dots after resampling (optional)
        gif_path: Assembled GIF (optional)
    """
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Metric", style="dim")
    table.add_column("Value", style="bold green")

    if gps_points:
        table.add_row("GPS Points", f"{gps_points:,}")
    if dot_count:
        table.add_row("Dots", f"{dot_count:,}")
    table.add_row("Frames", f"{frame_count:,}")
    table.add_row("Output", output_dir)
    if gif_path:
        table.add_row("GIF", gif_path)

    panel = Panel(
        table,
        title="[bold green]Complete[/]",
        border_style="green",
        padding=(1, 2),
    )
    console.print()
    console.print(panel)


def print_error(message: str, hint: Optional[str] = None) -> None:
    """
    Print a styled error message.

    Args:
        message: Error message
        hint: Optional hint for resolution
    """
    console.print(f"\n[error]Error:[/] {message}")
    if hint:
        console.print(f"[muted]Hint: {hint}[/]")
