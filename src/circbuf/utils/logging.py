"""Logging utilities for Circbuf."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import structlog


@dataclass
class BufferStats:
    """Statistics from one buffer computation."""

    sub_curve_count: int = 0
    candidate_count: int = 0
    piece_count: int = 0
    discarded_crossing: int = 0
    discarded_distance: int = 0
    discarded_empty: int = 0
    contour_count: int = 0
    warnings: list[str] = field(default_factory=list)
    start_time: float | None = None
    end_time: float | None = None

    @property
    def duration_seconds(self) -> float:
        """Calculate processing duration."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0

    @property
    def discarded_count(self) -> int:
        return self.discarded_crossing + self.discarded_distance + self.discarded_empty


# Handlers installed on the root logger by configure_logging
_handlers: list[logging.Handler] = []


def reset_logging() -> None:
    """Remove and close the handlers installed by configure_logging."""
    root_logger = logging.getLogger()
    while _handlers:
        handler = _handlers.pop()
        root_logger.removeHandler(handler)
        handler.close()


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "WARNING",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure structured logging to the console and an optional file.

    Args:
        log_file: Path to log file (no file logging if None)
        console_level: Logging level for console output
        file_level: Logging level for file output
        quiet: If True, suppress console output except errors

    Returns:
        Configured structlog logger
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    reset_logging()

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(getattr(logging, file_level.upper()))
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
        )
        root_logger.addHandler(file_handler)
        _handlers.append(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.ERROR if quiet else getattr(logging, console_level.upper()))
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(console_handler)
    _handlers.append(console_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("circbuf")
    logger.info(
        "Logging initialized",
        log_file=str(log_file) if log_file else None,
        level=console_level,
    )

    return logger


class BufferLogger:
    """Logger for tracking the stages of a buffer computation and its statistics."""

    def __init__(self, logger: structlog.stdlib.BoundLogger) -> None:
        self._logger = logger
        self._stats = BufferStats()

    def log_start(self, piece_count: int, distance: float) -> None:
        """Log start of a buffer computation."""
        self._logger.debug("Computing buffer", pieces=piece_count, distance=distance)

    def log_sub_curves(self, piece_index: int, sub_curve_count: int) -> None:
        """Log the split of one source piece into simple sub-curves."""
        self._logger.debug("Source piece split", piece=piece_index, sub_curves=sub_curve_count)
        self._stats.sub_curve_count += sub_curve_count

    def log_sub_curve_complete(
        self,
        sub_curve_index: int,
        candidates: int,
        pieces: int,
        duration_ms: float,
    ) -> None:
        """Log the contours produced for one sub-curve."""
        self._logger.debug(
            "Sub-curve buffered",
            sub_curve=sub_curve_index,
            candidates=candidates,
            pieces=pieces,
            duration_ms=round(duration_ms, 2),
        )
        self._stats.candidate_count += candidates
        self._stats.piece_count += pieces

    def log_topology_warning(self, message: str) -> None:
        """Record a recoverable topology problem of the input."""
        self._logger.debug("Topology warning recorded", message=message)
        self._stats.warnings.append(message)

    def log_filtered(
        self,
        kept: int,
        discarded_crossing: int,
        discarded_distance: int,
        discarded_empty: int,
    ) -> None:
        """Log validity filter results."""
        self._logger.debug(
            "Contours filtered",
            kept=kept,
            crossing=discarded_crossing,
            too_close=discarded_distance,
            empty=discarded_empty,
        )
        self._stats.contour_count = kept
        self._stats.discarded_crossing += discarded_crossing
        self._stats.discarded_distance += discarded_distance
        self._stats.discarded_empty += discarded_empty

    def log_complete(self) -> None:
        """Log end of the computation."""
        self._logger.info(
            "Buffer computed",
            contours=self._stats.contour_count,
            discarded=self._stats.discarded_count,
            duration_seconds=round(self._stats.duration_seconds, 4),
        )

    @property
    def stats(self) -> BufferStats:
        """Get current computation statistics."""
        return self._stats
