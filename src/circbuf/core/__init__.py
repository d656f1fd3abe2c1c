"""Core algorithms for circbuf.

This module contains the buffer engine:

- Geometry queries (intersections, overlaps, distances)
- Join, cap and internal corner factories
- Parallel construction for continuous curves
- Boundary construction for self-intersection-free curves
- Curve splitting and contour validity filtering
- Orchestration across multi-piece curves and point sets

All services are designed to be:
- Stateless (safe for use in worker processes)
- Pure (no side effects besides logging)

Key classes:
- BufferCalculator: Computes buffers of curves and point sets
- BufferStrategy: Bundle of join, cap and internal corner factories
- ContinuousParallelBuilder: Chained parallel of one curve
- SimpleCurveBufferBuilder: Raw boundary contours of one curve
- ContourPostProcessor: Splitting and filtering of raw contours
"""

from circbuf.core.calculator import BufferCalculator, buffer_sub_curve
from circbuf.core.caps import ButtCapFactory, RoundCapFactory, SquareCapFactory
from circbuf.core.corners import (
    NO_CORNER,
    InternalCorner,
    NullInternalCornerFactory,
    TrimInternalCornerFactory,
)
from circbuf.core.geometry import (
    curve_intersections,
    curves_overlap,
    dedupe_points,
    distance_to_curves,
    distance_to_points,
    intersections,
    overlaps,
)
from circbuf.core.joins import BevelJoinFactory, RoundJoinFactory
from circbuf.core.parallel import ContinuousParallelBuilder
from circbuf.core.postprocess import (
    ContourPostProcessor,
    CurveReference,
    FilterResult,
    PointSetReference,
)
from circbuf.core.simple_buffer import SimpleCurveBufferBuilder
from circbuf.core.splitter import split_continuous_curve, split_intersecting_contours
from circbuf.core.strategy import BufferStrategy

__all__ = [
    "NO_CORNER",
    # Orchestration
    "BufferCalculator",
    "BufferStrategy",
    "buffer_sub_curve",
    # Factories
    "BevelJoinFactory",
    "ButtCapFactory",
    "InternalCorner",
    "NullInternalCornerFactory",
    "RoundCapFactory",
    "RoundJoinFactory",
    "SquareCapFactory",
    "TrimInternalCornerFactory",
    # Builders
    "ContinuousParallelBuilder",
    "ContourPostProcessor",
    "CurveReference",
    "FilterResult",
    "PointSetReference",
    "SimpleCurveBufferBuilder",
    # Geometry functions
    "curve_intersections",
    "curves_overlap",
    "dedupe_points",
    "distance_to_curves",
    "distance_to_points",
    "intersections",
    "overlaps",
    "split_continuous_curve",
    "split_intersecting_contours",
]
