"""Geometric queries between circulinear elements and curves.

This module provides the primitive calculations the buffer engine relies on:
- Element/element intersection points (lines, rays, arcs, circles)
- Detection of overlapping (coincident) elements
- Point to curve and point to point-set distances
- Point deduplication within tolerance

All functions are pure, stateless, and designed for use in parallel processing.
Every comparison takes an explicit tolerance.
"""

import math
from collections.abc import Iterable, Sequence

from circbuf.domain import (
    TWO_PI,
    ArcElement,
    CirculinearElement,
    ContinuousCurve,
    LineElement,
    Point,
    PointElement,
)

# Relative cross product below which two directions are treated as parallel
PARALLEL_EPSILON = 1e-12


def dedupe_points(points: Iterable[Point], tolerance: float) -> list[Point]:
    """Remove points lying within tolerance of an earlier point.

    Args:
        points: Points in any order
        tolerance: Coincidence distance

    Returns:
        Points in their original order with near-duplicates dropped

    Examples:
        >>> dedupe_points([Point(0, 0), Point(1e-9, 0), Point(1, 0)], 1e-6)
        [Point(x=0, y=0), Point(x=1, y=0)]
    """
    unique: list[Point] = []
    for p in points:
        if not any(p.almost_equals(q, tolerance) for q in unique):
            unique.append(p)
    return unique


def _endpoints(element: CirculinearElement) -> list[Point]:
    points = []
    if not math.isinf(element.t0):
        points.append(element.first_point)
    if not math.isinf(element.t1):
        points.append(element.last_point)
    return points


def _on_both(
    candidates: Iterable[Point],
    a: CirculinearElement,
    b: CirculinearElement,
    tolerance: float,
) -> list[Point]:
    return [p for p in candidates if a.distance(p) <= tolerance and b.distance(p) <= tolerance]


def _shared_endpoints(
    a: CirculinearElement, b: CirculinearElement, tolerance: float
) -> list[Point]:
    """Endpoints of either element lying on the other, for coincident supports."""
    return _on_both(_endpoints(a) + _endpoints(b), a, b, tolerance)


def _are_parallel(u: Point, v: Point) -> bool:
    return abs(u.cross(v)) <= PARALLEL_EPSILON * u.norm() * v.norm()


def _are_collinear(a: LineElement, b: LineElement, tolerance: float) -> bool:
    if not _are_parallel(a.direction, b.direction):
        return False
    offset = abs(a.direction.cross(b.origin - a.origin)) / a.direction.norm()
    return offset <= tolerance


def _line_line(a: LineElement, b: LineElement, tolerance: float) -> list[Point]:
    if _are_parallel(a.direction, b.direction):
        if _are_collinear(a, b, tolerance):
            return _shared_endpoints(a, b, tolerance)
        return []
    cross = a.direction.cross(b.direction)
    t = (b.origin - a.origin).cross(b.direction) / cross
    return _on_both([a.point(t)], a, b, tolerance)


def _line_arc(line: LineElement, arc: ArcElement, tolerance: float) -> list[Point]:
    d = line.direction
    n2 = d.dot(d)
    foot_t = (arc.center - line.origin).dot(d) / n2
    foot = line.point(foot_t)
    h = foot.distance(arc.center)
    r = arc.radius
    if h > r + tolerance:
        return []
    if abs(h - r) <= tolerance:
        candidates = [foot]
    else:
        half_chord = math.sqrt(r * r - h * h) / math.sqrt(n2)
        candidates = [line.point(foot_t - half_chord), line.point(foot_t + half_chord)]
    return _on_both(candidates, line, arc, tolerance)


def _arc_arc(a: ArcElement, b: ArcElement, tolerance: float) -> list[Point]:
    c1, c2 = a.center, b.center
    r1, r2 = a.radius, b.radius
    dist = c1.distance(c2)

    if dist <= tolerance:
        if abs(r1 - r2) <= tolerance:
            return _shared_endpoints(a, b, tolerance)
        return []
    if dist > r1 + r2 + tolerance or dist < abs(r1 - r2) - tolerance:
        return []

    u = (c2 - c1) * (1.0 / dist)
    if abs(dist - (r1 + r2)) <= tolerance:
        candidates = [c1 + u * r1]
    elif abs(dist - abs(r1 - r2)) <= tolerance:
        candidates = [c1 + u * r1] if r1 > r2 else [c1 - u * r1]
    else:
        along = (dist * dist + r1 * r1 - r2 * r2) / (2.0 * dist)
        h = math.sqrt(max(r1 * r1 - along * along, 0.0))
        base = c1 + u * along
        perp = Point(-u.y, u.x)
        candidates = [base + perp * h, base - perp * h]
    return _on_both(candidates, a, b, tolerance)


def intersections(
    a: CirculinearElement, b: CirculinearElement, tolerance: float
) -> list[Point]:
    """Find the intersection points of two elements.

    Tangential contacts count as intersections. When the elements lie on the
    same line or circle, only the endpoints of the shared portion are
    returned; use ``overlaps`` to detect such configurations.

    Args:
        a: First element
        b: Second element
        tolerance: Coincidence distance

    Returns:
        Deduplicated list of intersection points
    """
    if isinstance(a, PointElement):
        return [a.location] if b.distance(a.location) <= tolerance else []
    if isinstance(b, PointElement):
        return [b.location] if a.distance(b.location) <= tolerance else []

    if isinstance(a, LineElement) and isinstance(b, LineElement):
        points = _line_line(a, b, tolerance)
    elif isinstance(a, LineElement) and isinstance(b, ArcElement):
        points = _line_arc(a, b, tolerance)
    elif isinstance(a, ArcElement) and isinstance(b, LineElement):
        points = _line_arc(b, a, tolerance)
    elif isinstance(a, ArcElement) and isinstance(b, ArcElement):
        points = _arc_arc(a, b, tolerance)
    else:
        raise TypeError(f"Unsupported element types: {type(a).__name__}, {type(b).__name__}")

    return dedupe_points(points, tolerance)


def _ccw_interval(arc: ArcElement) -> tuple[float, float]:
    """Start angle and length of the arc as a counter-clockwise interval."""
    span = abs(arc.extent)
    start = arc.start_angle if arc.ccw else arc.start_angle + arc.extent
    return start, span


def overlaps(a: CirculinearElement, b: CirculinearElement, tolerance: float) -> bool:
    """Check whether two elements share a portion of positive length.

    Args:
        a: First element
        b: Second element
        tolerance: Minimum shared length that counts as an overlap

    Returns:
        True if the elements are collinear (or co-circular) and their ranges
        overlap by more than tolerance
    """
    if isinstance(a, LineElement) and isinstance(b, LineElement):
        if not _are_collinear(a, b, tolerance):
            return False
        da = a.direction
        n2 = da.dot(da)
        scale = b.direction.dot(da) / n2
        base = (b.origin - a.origin).dot(da) / n2
        s0 = base + scale * b.t0
        s1 = base + scale * b.t1
        lo, hi = min(s0, s1), max(s0, s1)
        shared = min(a.t1, hi) - max(a.t0, lo)
        return shared * math.sqrt(n2) > tolerance

    if isinstance(a, ArcElement) and isinstance(b, ArcElement):
        if a.center.distance(b.center) > tolerance or abs(a.radius - b.radius) > tolerance:
            return False
        a0, la = _ccw_interval(a)
        b0, lb = _ccw_interval(b)
        shift = (b0 - a0) % TWO_PI
        shared = 0.0
        for lo in (shift, shift - TWO_PI):
            shared += max(0.0, min(la, lo + lb) - max(0.0, lo))
        return shared * a.radius > tolerance

    return False


def curve_intersections(
    first: ContinuousCurve, second: ContinuousCurve, tolerance: float
) -> list[Point]:
    """Intersection points between two curves, across all element pairs."""
    points = [
        p
        for a in first.elements
        for b in second.elements
        for p in intersections(a, b, tolerance)
    ]
    return dedupe_points(points, tolerance)


def curves_overlap(first: ContinuousCurve, second: ContinuousCurve, tolerance: float) -> bool:
    """Check whether any element of one curve overlaps an element of the other."""
    return any(
        overlaps(a, b, tolerance) for a in first.elements for b in second.elements
    )


def distance_to_curves(point: Point, curves: Iterable[ContinuousCurve]) -> float:
    """Minimum distance from a point to a collection of curves.

    Returns:
        Distance, or infinity when the curves have no elements
    """
    return min(
        (element.distance(point) for curve in curves for element in curve.elements),
        default=math.inf,
    )


def distance_to_points(point: Point, points: Sequence[Point]) -> float:
    """Minimum distance from a point to a finite point set."""
    return min((point.distance(q) for q in points), default=math.inf)
