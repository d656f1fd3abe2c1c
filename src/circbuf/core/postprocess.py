"""Cleanup of raw buffer contours.

Offsetting produces contours that loop back on themselves at concave corners,
cross each other where different parts of the source come close, and contain
pieces that lie too near the source. This module splits such contours apart
and keeps only the pieces that belong to the true buffer boundary.

Key classes:
- CurveReference: Distance and crossing queries against a source curve set
- PointSetReference: Distance queries against a finite point set
- ContourPostProcessor: Splitting and validity filtering
"""

from collections.abc import Sequence
from dataclasses import dataclass, field

import structlog

from circbuf.core.geometry import (
    curve_intersections,
    curves_overlap,
    distance_to_curves,
    distance_to_points,
)
from circbuf.core.splitter import split_continuous_curve, split_intersecting_contours
from circbuf.domain import Contour, ContinuousCurve, Point

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CurveReference:
    """Source curves a buffer is measured against."""

    curves: tuple[ContinuousCurve, ...]
    vertices: tuple[Point, ...] = field(default=())

    @classmethod
    def of(cls, curves: Sequence[ContinuousCurve]) -> "CurveReference":
        curves = tuple(curves)
        return cls(curves, tuple(p for c in curves for p in c.vertices()))

    def distance(self, point: Point) -> float:
        return distance_to_curves(point, self.curves)

    def crosses(self, contour: ContinuousCurve, tolerance: float) -> bool:
        """Check whether a contour meets the source away from its vertices.

        A shared stretch of positive length always counts as crossing.
        """
        for curve in self.curves:
            if curves_overlap(contour, curve, tolerance):
                return True
            for p in curve_intersections(contour, curve, tolerance):
                if not any(p.almost_equals(v, tolerance) for v in self.vertices):
                    return True
        return False


@dataclass(frozen=True)
class PointSetReference:
    """Finite point set a buffer is measured against."""

    points: tuple[Point, ...]

    def distance(self, point: Point) -> float:
        return distance_to_points(point, self.points)

    def crosses(self, contour: ContinuousCurve, tolerance: float) -> bool:
        return False


@dataclass
class FilterResult:
    """Contours kept by the validity filter, with discard counts."""

    kept: list[Contour] = field(default_factory=list)
    discarded_crossing: int = 0
    discarded_distance: int = 0
    discarded_empty: int = 0


class ContourPostProcessor:
    """Splits raw contours and filters out the invalid pieces.

    Example:
        processor = ContourPostProcessor(tolerance=1e-6)
        pieces = processor.split_self_intersections(raw, CurveReference.of([curve]), 1.0)
        result = processor.filter_valid(processor.split_mutual(pieces), reference, 1.0)
    """

    def __init__(self, tolerance: float) -> None:
        self.tolerance = tolerance

    def is_too_close(
        self,
        contour: ContinuousCurve,
        reference: CurveReference | PointSetReference,
        distance: float,
    ) -> bool:
        """Check whether any sample point of a contour comes closer than |d| to the source."""
        limit = abs(distance) - self.tolerance
        return any(reference.distance(p) < limit for p in contour.sample_points())

    def split_self_intersections(
        self,
        contours: Sequence[ContinuousCurve],
        reference: CurveReference | PointSetReference,
        distance: float,
    ) -> list[ContinuousCurve]:
        """Split each contour at its self-intersections and prune near pieces.

        Args:
            contours: Raw contours generated from one source curve
            reference: That source curve, used for the early distance pruning
            distance: Signed buffer distance

        Returns:
            Pieces free of self-intersections that stay far enough from the source
        """
        pieces: list[ContinuousCurve] = []
        for contour in contours:
            for piece in split_continuous_curve(contour, self.tolerance):
                if piece.is_empty() or self.is_too_close(piece, reference, distance):
                    continue
                pieces.append(piece)
        logger.debug(
            "Self-intersections split",
            contours=len(contours),
            pieces=len(pieces),
        )
        return pieces

    def split_mutual(self, contours: Sequence[ContinuousCurve]) -> list[ContinuousCurve]:
        """Split contours against each other so that no two of them cross."""
        if len(contours) < 2:
            return list(contours)
        return split_intersecting_contours(contours, self.tolerance)

    def filter_valid(
        self,
        contours: Sequence[ContinuousCurve],
        reference: CurveReference | PointSetReference,
        distance: float,
    ) -> FilterResult:
        """Keep the contours that belong to the buffer boundary.

        A contour is discarded when it is empty, when it meets the source
        anywhere but at a source vertex, or when one of its sample points is
        closer than |d| - tolerance to the source.

        Args:
            contours: Candidate contours, pairwise non-crossing
            reference: Full source the buffer is computed for
            distance: Signed buffer distance

        Returns:
            FilterResult with the surviving contours
        """
        result = FilterResult()
        for contour in contours:
            if contour.is_empty():
                result.discarded_empty += 1
            elif reference.crosses(contour, self.tolerance):
                result.discarded_crossing += 1
            elif self.is_too_close(contour, reference, distance):
                result.discarded_distance += 1
            else:
                result.kept.append(Contour.of(contour))
        return result
