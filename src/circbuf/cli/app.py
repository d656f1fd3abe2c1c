"""CLI application entry point for circbuf.

This module provides the main CLI interface using Typer.
"""

import time
import warnings
from pathlib import Path
from typing import Annotated

import typer

from circbuf import __version__
from circbuf.cli.output import (
    SYM_DOT,
    console,
    print_contours,
    print_error,
    print_header,
    print_source_info,
    print_step,
    print_success,
)
from circbuf.config import (
    BufferConfig,
    BufferSettings,
    CapStyle,
    GeometryConfig,
    InternalCornerStyle,
    JoinStyle,
    LoggingConfig,
    ProcessingConfig,
)
from circbuf.core import BufferCalculator
from circbuf.domain import ContinuousCurve, Domain, Point
from circbuf.exceptions import CircbufError, SplittingError, TopologyWarning
from circbuf.utils import configure_logging

# Create the Typer app
app = typer.Typer(
    name="circbuf",
    help="Compute exact buffers (signed offsets) of line/arc curves and point sets.",
    add_completion=False,
    no_args_is_help=True,
)

PointsOption = Annotated[
    list[str],
    typer.Option(
        "--point",
        "-p",
        help="Point as x,y (repeat for each point)",
    ),
]
DistanceOption = Annotated[
    float,
    typer.Option(
        "--distance",
        "-d",
        help="Signed buffer distance (positive = right side / outside of CCW rings)",
    ),
]
ToleranceOption = Annotated[
    float,
    typer.Option(
        "--tolerance",
        help="Geometric tolerance",
        min=1e-12,
    ),
]
LogFileOption = Annotated[
    Path | None,
    typer.Option(
        "--log-file",
        help="Write detailed logs to file",
    ),
]
LogLevelOption = Annotated[
    str,
    typer.Option(
        "--log-level",
        help="Logging level (DEBUG|INFO|WARNING|ERROR)",
    ),
]
VerboseOption = Annotated[
    bool,
    typer.Option(
        "--verbose",
        "-v",
        help="Verbose console output",
    ),
]
QuietOption = Annotated[
    bool,
    typer.Option(
        "--quiet",
        "-q",
        help="Minimal console output",
    ),
]


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]Circbuf[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Compute exact buffers of circulinear curves."""


def parse_points(values: list[str]) -> list[Point]:
    """Parse "x,y" strings into points.

    Args:
        values: Raw option values

    Returns:
        List of points

    Raises:
        typer.BadParameter: If a value is not a pair of numbers
    """
    points = []
    for value in values:
        parts = value.split(",")
        if len(parts) != 2:
            raise typer.BadParameter(f"Expected x,y but got '{value}'")
        try:
            points.append(Point(float(parts[0]), float(parts[1])))
        except ValueError:
            raise typer.BadParameter(f"Expected x,y but got '{value}'") from None
    return points


def _parse_style(enum_type: type, value: str, option: str):
    try:
        return enum_type(value.lower())
    except ValueError:
        valid = ", ".join(member.value for member in enum_type)
        print_error(f"Invalid {option}: {value}", details=f"Valid values: {valid}")
        raise typer.Exit(code=1) from None


def _report(domain: Domain, calculator: BufferCalculator, elapsed: float, verbose: bool) -> None:
    stats = calculator.stats
    if verbose:
        console.print(
            f"  {stats.sub_curve_count} sub-curves {SYM_DOT} {stats.piece_count} pieces "
            f"{SYM_DOT} {stats.discarded_count} discarded"
        )
    print_step("Contours")
    print_contours(domain)
    print_success(domain, elapsed, warnings=len(stats.warnings))


@app.command()
def polyline(
    point: PointsOption,
    distance: DistanceOption,
    closed: Annotated[
        bool,
        typer.Option(
            "--closed",
            help="Connect the last point back to the first",
        ),
    ] = False,
    join: Annotated[
        str,
        typer.Option(
            "--join",
            help="Join style for convex corners (round|bevel)",
        ),
    ] = "round",
    cap: Annotated[
        str,
        typer.Option(
            "--cap",
            help="Cap style for open ends (round|butt|square)",
        ),
    ] = "round",
    internal_corner: Annotated[
        str,
        typer.Option(
            "--internal-corner",
            help="Concave corner policy (none|trim)",
        ),
    ] = "none",
    tolerance: ToleranceOption = 1e-6,
    workers: Annotated[
        int,
        typer.Option(
            "--workers",
            "-j",
            help="Number of worker processes for independent sub-curves",
            min=1,
        ),
    ] = 1,
    log_file: LogFileOption = None,
    log_level: LogLevelOption = "WARNING",
    verbose: VerboseOption = False,
    quiet: QuietOption = False,
) -> None:
    """Buffer a polyline (or polygon with --closed) given by its points.

    Example:
        circbuf polyline -p 0,0 -p 4,0 -p 4,4 -d 1
    """
    if verbose and quiet:
        print_error("Cannot use --verbose and --quiet together")
        raise typer.Exit(code=1)

    points = parse_points(point)
    if len(points) < 2:
        print_error(
            "A polyline needs at least two points",
            details="Pass each vertex with --point x,y",
        )
        raise typer.Exit(code=1)

    settings = BufferSettings(
        buffer=BufferConfig(
            join=_parse_style(JoinStyle, join, "join style"),
            cap=_parse_style(CapStyle, cap, "cap style"),
            internal_corner=_parse_style(
                InternalCornerStyle, internal_corner, "internal corner style"
            ),
        ),
        geometry=GeometryConfig(tolerance=tolerance),
        processing=ProcessingConfig(max_workers=workers),
        logging=LoggingConfig(log_file=log_file, log_level=log_level),
    )
    configure_logging(
        log_file=settings.logging.log_file,
        console_level=settings.logging.log_level,
        file_level=settings.logging.file_log_level,
        quiet=quiet,
    )

    if not quiet:
        print_header(__version__)
        print_source_info("polyline", len(points), closed, distance)

    curve = ContinuousCurve.polyline(points, closed=closed)
    calculator = BufferCalculator(settings)
    _run(lambda: calculator.compute_buffer(curve, distance), calculator, quiet, verbose)


@app.command()
def points(
    point: PointsOption,
    distance: DistanceOption,
    tolerance: ToleranceOption = 1e-6,
    log_file: LogFileOption = None,
    log_level: LogLevelOption = "WARNING",
    verbose: VerboseOption = False,
    quiet: QuietOption = False,
) -> None:
    """Buffer a finite set of points (one disk per point, merged where they overlap).

    Example:
        circbuf points -p 0,0 -p 1.5,0 -d 1
    """
    if verbose and quiet:
        print_error("Cannot use --verbose and --quiet together")
        raise typer.Exit(code=1)

    sources = parse_points(point)
    if not sources:
        print_error("No points given", details="Pass each point with --point x,y")
        raise typer.Exit(code=1)

    settings = BufferSettings(
        geometry=GeometryConfig(tolerance=tolerance),
        logging=LoggingConfig(log_file=log_file, log_level=log_level),
    )
    configure_logging(
        log_file=settings.logging.log_file,
        console_level=settings.logging.log_level,
        file_level=settings.logging.file_log_level,
        quiet=quiet,
    )

    if not quiet:
        print_header(__version__)
        print_source_info("point set", len(sources), False, distance)

    calculator = BufferCalculator(settings)
    _run(lambda: calculator.compute_point_set_buffer(sources, distance), calculator, quiet, verbose)


def _run(compute, calculator: BufferCalculator, quiet: bool, verbose: bool) -> None:
    """Run a buffer computation and report its result or error."""
    if not quiet:
        print_step("Computing buffer")

    start = time.time()
    try:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", TopologyWarning)
            domain = compute()
    except SplittingError as e:
        print_error(
            "Could not resolve contour intersections",
            details=e.reason,
        )
        raise typer.Exit(code=1)
    except CircbufError as e:
        print_error(str(e))
        raise typer.Exit(code=1)

    if not quiet:
        _report(domain, calculator, time.time() - start, verbose)


def cli() -> None:
    """Entry point for the CLI application."""
    app()


def main() -> None:
    """Entry point for the CLI application (alias for cli)."""
    cli()


if __name__ == "__main__":
    cli()
