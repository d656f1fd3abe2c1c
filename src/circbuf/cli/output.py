"""Rich console output helpers for the CLI.

This module provides user-friendly console output using Rich library
with tables and formatted messages.
"""

import math

from rich.console import Console
from rich.table import Table

from circbuf.domain import ArcElement, Domain, LineElement

console = Console()

# Unicode symbols for consistent visual language
SYM_STEP = "▸"  # Step indicator
SYM_OK = "✓"  # Success
SYM_ERR = "✗"  # Error
SYM_DOT = "·"  # Separator/secondary info


def print_header(version: str) -> None:
    """Print application header.

    Args:
        version: Application version string
    """
    console.print(f"\n[bold]Circbuf[/bold] v{version}")
    console.print("─" * 44)


def print_step(message: str) -> None:
    """Print a processing step indicator.

    Args:
        message: Step description message
    """
    console.print(f"\n{SYM_STEP} {message}")


def print_source_info(kind: str, count: int, closed: bool, distance: float) -> None:
    """Print a summary of the input.

    Args:
        kind: Input kind (e.g., "polyline", "point set")
        count: Number of input points
        closed: Whether the polyline is closed
        distance: Signed buffer distance
    """
    shape = f"closed {kind}" if closed else kind
    console.print(f"  {shape} {SYM_DOT} {count} points {SYM_DOT} distance {distance:g}")


def _format_number(value: float) -> str:
    if math.isinf(value):
        return "∞"
    return f"{value:.4f}"


def print_contours(domain: Domain) -> None:
    """Print one table row per contour of a domain.

    Args:
        domain: Buffer result
    """
    table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
    table.add_column("#", justify="right")
    table.add_column("Kind")
    table.add_column("Lines", justify="right")
    table.add_column("Arcs", justify="right")
    table.add_column("Length", justify="right")
    table.add_column("Area", justify="right")

    for index, contour in enumerate(domain.contours, start=1):
        lines = sum(isinstance(e, LineElement) for e in contour.elements)
        arcs = sum(isinstance(e, ArcElement) for e in contour.elements)
        if contour.closed:
            kind = "ring"
            area = _format_number(contour.signed_area())
        else:
            kind = "open"
            area = "-"
        table.add_row(
            str(index), kind, str(lines), str(arcs), _format_number(contour.length), area
        )

    console.print(table)


def _format_time(seconds: float) -> str:
    """Format seconds into human-readable time string."""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    return f"{seconds:.1f}s"


def print_success(domain: Domain, total_time_s: float, warnings: int = 0) -> None:
    """Print success message with summary.

    Args:
        domain: Buffer result
        total_time_s: Total computation time in seconds
        warnings: Number of topology warnings raised by the input
    """
    console.print(f"\n[bold green]{SYM_OK} Complete[/bold green] in {_format_time(total_time_s)}")
    warning_style = "yellow" if warnings > 0 else "green"
    console.print(
        f"  {len(domain)} contours {SYM_DOT} area {_format_number(domain.area())} {SYM_DOT} "
        f"[{warning_style}]{warnings} warnings[/{warning_style}]"
    )


def print_error(message: str, details: str | None = None) -> None:
    """Print error message.

    Args:
        message: Main error message
        details: Optional detailed error information
    """
    console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {message}")
    if details:
        console.print(f"  {details}")
