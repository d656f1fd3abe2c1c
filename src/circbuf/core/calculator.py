"""Buffer computation orchestration.

This module drives the full buffer pipeline:
1. Validate and split every source piece into sub-curves without
   self-intersections
2. Build the raw boundary contours of each sub-curve, split their own loops
   apart and prune pieces too close to the sub-curve (optionally in worker
   processes)
3. Split all remaining contours against each other
4. Keep the contours that neither cross the source nor come too close to it

Key components:
- buffer_sub_curve: Top-level picklable function for parallel execution
- BufferCalculator: Main entry point
"""

import time
import warnings
from collections.abc import Sequence
from concurrent.futures import ProcessPoolExecutor
from typing import Any

import structlog

from circbuf.config import BufferSettings, GeometryConfig, get_default_settings
from circbuf.core.parallel import ContinuousParallelBuilder
from circbuf.core.postprocess import (
    ContourPostProcessor,
    CurveReference,
    PointSetReference,
)
from circbuf.core.simple_buffer import SimpleCurveBufferBuilder
from circbuf.core.splitter import split_continuous_curve
from circbuf.core.strategy import BufferStrategy
from circbuf.domain import Contour, ContinuousCurve, CurveSet, Domain, Extent, Point
from circbuf.exceptions import GeometryError, TopologyWarning
from circbuf.utils import BufferLogger, BufferStats


def _process_sub_curve(
    curve: ContinuousCurve,
    distance: float,
    geometry: GeometryConfig,
    strategy: BufferStrategy,
) -> tuple[int, list[ContinuousCurve], list[str]]:
    """Raw contours of one sub-curve, split and pruned against that sub-curve.

    Returns:
        Tuple of (raw candidate count, surviving pieces, topology warnings)
    """
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always", TopologyWarning)
        candidates = SimpleCurveBufferBuilder(strategy, geometry).build(curve, distance)

    processor = ContourPostProcessor(geometry.tolerance)
    pieces = processor.split_self_intersections(
        candidates, CurveReference.of([curve]), distance
    )
    messages = list(
        dict.fromkeys(str(w.message) for w in caught if issubclass(w.category, TopologyWarning))
    )
    return len(candidates), pieces, messages


def buffer_sub_curve(
    curve_dict: dict[str, Any],
    distance: float,
    settings_dict: dict[str, Any],
    strategy: BufferStrategy,
) -> dict[str, Any]:
    """Buffer a single sub-curve.

    Top-level function designed to be picklable for use with ProcessPoolExecutor.
    Deserializes the curve, builds and cleans its contours, and returns them
    serialized. Errors propagate to the caller through the future.

    Args:
        curve_dict: Serialized sub-curve (from ContinuousCurve.to_dict())
        distance: Signed buffer distance
        settings_dict: Serialized settings (from BufferSettings.model_dump())
        strategy: Join, cap and internal corner factories

    Returns:
        Dictionary with "candidates", "contours", "warnings" and "duration_ms"
    """
    start_time = time.time()
    settings = BufferSettings.model_validate(settings_dict)
    curve = ContinuousCurve.from_dict(curve_dict)

    candidate_count, pieces, messages = _process_sub_curve(
        curve, distance, settings.geometry, strategy
    )

    return {
        "candidates": candidate_count,
        "contours": [piece.to_dict() for piece in pieces],
        "warnings": messages,
        "duration_ms": (time.time() - start_time) * 1000,
    }


class BufferCalculator:
    """Computes buffers of circulinear curves and point sets.

    Example:
        calculator = BufferCalculator(BufferSettings())
        domain = calculator.compute_buffer(
            ContinuousCurve.polyline([Point(0, 0), Point(4, 0), Point(4, 4)]),
            1.0,
        )
    """

    def __init__(
        self,
        settings: BufferSettings | None = None,
        strategy: BufferStrategy | None = None,
    ) -> None:
        """Initialize the calculator.

        Args:
            settings: Application settings (defaults if None)
            strategy: Factories to use instead of those described by settings
        """
        self.settings = settings if settings is not None else get_default_settings()
        self.strategy = (
            strategy
            if strategy is not None
            else BufferStrategy.from_config(self.settings.buffer, self.settings.geometry)
        )
        self.tolerance = self.settings.geometry.tolerance
        self.parallel_builder = ContinuousParallelBuilder(self.strategy, self.settings.geometry)
        self.post_processor = ContourPostProcessor(self.tolerance)
        self.logger = structlog.get_logger(__name__)
        self._stats = BufferStats()

    @property
    def stats(self) -> BufferStats:
        """Statistics of the most recent computation."""
        return self._stats

    def create_continuous_parallel(
        self, curve: ContinuousCurve, distance: float
    ) -> ContinuousCurve:
        """Parallel of one continuous curve, joins included, loops not removed."""
        return self.parallel_builder.build(curve, distance)

    def create_parallel(self, curves: CurveSet | ContinuousCurve, distance: float) -> CurveSet:
        """Parallel of every piece of a curve, joins included, loops not removed."""
        pieces = curves.curves if isinstance(curves, CurveSet) else (curves,)
        return CurveSet(tuple(self.parallel_builder.build(c, distance) for c in pieces))

    def create_parallel_contour(self, contour: ContinuousCurve, distance: float) -> Contour:
        """Parallel of a contour, kept as a contour.

        Raises:
            GeometryError: If the curve is neither closed nor infinite at both ends
        """
        if not contour.closed and contour.extent != Extent.DOUBLY_INFINITE:
            raise GeometryError("Parallel contour requires a closed or doubly infinite curve")
        return Contour.of(self.parallel_builder.build(contour, distance))

    def create_parallel_boundary(
        self, boundary: CurveSet | ContinuousCurve, distance: float
    ) -> CurveSet:
        """Parallel of every contour of a boundary, one contour per input contour."""
        contours = boundary.curves if isinstance(boundary, CurveSet) else (boundary,)
        return CurveSet(tuple(self.create_parallel_contour(c, distance) for c in contours))

    def compute_buffer(self, curve: CurveSet | ContinuousCurve, distance: float) -> Domain:
        """Compute the buffer of a curve at a signed distance.

        Args:
            curve: Continuous curve or multi-piece curve
            distance: Signed distance; positive puts the boundary on the right
                of each piece (outside of counter-clockwise rings)

        Returns:
            Domain bounded by the buffer contours

        Raises:
            CurveContinuityError: If consecutive elements of a piece do not connect
            SplittingError: If contour splitting cannot be resolved
        """
        return self._compute(curve, distance, split_pieces=True)

    def compute_buffer_non_intersecting(
        self, curve: CurveSet | ContinuousCurve, distance: float
    ) -> Domain:
        """Compute the buffer of pieces known to have no self-intersections.

        Skips splitting each piece at its own crossings. Pieces may still
        cross each other. A self-intersecting piece gives undefined contours.
        """
        return self._compute(curve, distance, split_pieces=False)

    def _compute(
        self, curve: CurveSet | ContinuousCurve, distance: float, split_pieces: bool
    ) -> Domain:
        buffer_logger = BufferLogger(self.logger)
        buffer_logger.stats.start_time = time.time()
        self._stats = buffer_logger.stats

        pieces = curve.curves if isinstance(curve, CurveSet) else (curve,)
        buffer_logger.log_start(len(pieces), distance)

        if abs(distance) <= self.tolerance:
            return self._finish([], CurveReference.of(pieces), distance, buffer_logger)

        sub_curves: list[ContinuousCurve] = []
        for index, piece in enumerate(pieces):
            piece.check_continuity(self.tolerance)
            subs = split_continuous_curve(piece, self.tolerance) if split_pieces else [piece]
            buffer_logger.log_sub_curves(index, len(subs))
            sub_curves.extend(subs)

        candidates = self._buffer_sub_curves(sub_curves, distance, buffer_logger)
        return self._finish(candidates, CurveReference.of(pieces), distance, buffer_logger)

    def compute_point_set_buffer(self, points: Sequence[Point], distance: float) -> Domain:
        """Compute the buffer of a finite point set.

        Every point becomes a circle of radius |d|, counter-clockwise for a
        positive distance. Overlapping circles are merged by splitting.

        Raises:
            CoincidentContoursError: If two points coincide
        """
        buffer_logger = BufferLogger(self.logger)
        buffer_logger.stats.start_time = time.time()
        self._stats = buffer_logger.stats
        buffer_logger.log_start(len(points), distance)

        reference = PointSetReference(tuple(points))
        if abs(distance) <= self.tolerance:
            return self._finish([], reference, distance, buffer_logger)

        circles = [ContinuousCurve.circle(p, abs(distance), ccw=distance > 0) for p in points]
        buffer_logger.stats.candidate_count = len(circles)
        buffer_logger.stats.piece_count = len(circles)
        return self._finish(circles, reference, distance, buffer_logger)

    def _buffer_sub_curves(
        self,
        sub_curves: list[ContinuousCurve],
        distance: float,
        buffer_logger: BufferLogger,
    ) -> list[ContinuousCurve]:
        max_workers = self.settings.processing.max_workers
        results: list[dict[str, Any]] = []

        if max_workers > 1 and len(sub_curves) > 1:
            settings_dict = self.settings.model_dump()
            self.logger.info(
                "Starting parallel processing",
                sub_curve_count=len(sub_curves),
                max_workers=max_workers,
            )
            with ProcessPoolExecutor(max_workers=max_workers) as executor:
                futures = [
                    executor.submit(
                        buffer_sub_curve, sub.to_dict(), distance, settings_dict, self.strategy
                    )
                    for sub in sub_curves
                ]
                results = [future.result() for future in futures]
            pieces_per_sub = [
                [ContinuousCurve.from_dict(c) for c in result["contours"]] for result in results
            ]
        else:
            pieces_per_sub = []
            for sub in sub_curves:
                start_time = time.time()
                count, pieces, messages = _process_sub_curve(
                    sub, distance, self.settings.geometry, self.strategy
                )
                pieces_per_sub.append(pieces)
                results.append(
                    {
                        "candidates": count,
                        "warnings": messages,
                        "duration_ms": (time.time() - start_time) * 1000,
                    }
                )

        contours: list[ContinuousCurve] = []
        for index, (result, pieces) in enumerate(zip(results, pieces_per_sub)):
            for message in result["warnings"]:
                buffer_logger.log_topology_warning(message)
                warnings.warn(message, TopologyWarning, stacklevel=3)
            buffer_logger.log_sub_curve_complete(
                sub_curve_index=index,
                candidates=result["candidates"],
                pieces=len(pieces),
                duration_ms=result["duration_ms"],
            )
            contours.extend(pieces)
        return contours

    def _finish(
        self,
        candidates: list[ContinuousCurve],
        reference: CurveReference | PointSetReference,
        distance: float,
        buffer_logger: BufferLogger,
    ) -> Domain:
        contours = self.post_processor.split_mutual(candidates)
        result = self.post_processor.filter_valid(contours, reference, distance)
        buffer_logger.log_filtered(
            kept=len(result.kept),
            discarded_crossing=result.discarded_crossing,
            discarded_distance=result.discarded_distance,
            discarded_empty=result.discarded_empty,
        )
        buffer_logger.stats.end_time = time.time()
        buffer_logger.log_complete()
        return Domain(tuple(result.kept))
