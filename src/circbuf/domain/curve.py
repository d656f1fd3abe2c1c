"""Curves built from circulinear elements.

This module defines the composite geometric types:
- Extent: Which ends of a curve are infinite
- ContinuousCurve: Directed chain of connected elements, open or closed
- Contour: A continuous curve known to be free of self-intersections
- CurveSet: A curve made of several continuous pieces
- Domain: A region bounded by disjoint contours
"""

import math
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any

from circbuf.domain.element import (
    TWO_PI,
    ArcElement,
    CirculinearElement,
    LineElement,
    PointElement,
    element_from_dict,
    segment,
)
from circbuf.domain.point import Point
from circbuf.exceptions import CurveContinuityError, GeometryError


class Extent(Enum):
    """Boundedness of an open curve, derived from its first and last parameters."""

    BOUNDED = auto()
    LEFT_INFINITE = auto()
    RIGHT_INFINITE = auto()
    DOUBLY_INFINITE = auto()


def choose_position(t0: float, t1: float) -> float:
    """Pick a representative parameter inside [t0, t1].

    Works for infinite bounds, which plain midpoints do not.

    Examples:
        >>> choose_position(0.0, 2.0)
        1.0
        >>> choose_position(-math.inf, 3.0)
        2.0
        >>> choose_position(-math.inf, math.inf)
        0.0
    """
    left = math.isinf(t0)
    right = math.isinf(t1)
    if left and right:
        return 0.0
    if left:
        return t1 - 1.0
    if right:
        return t0 + 1.0
    return (t0 + t1) / 2.0


def _element_area_term(element: CirculinearElement) -> float:
    """Contribution of one element to the shoelace integral 1/2 * (x dy - y dx)."""
    if isinstance(element, ArcElement):
        r = element.radius
        a = element.start_angle
        b = a + element.extent
        c = element.center
        return 0.5 * (
            r * r * element.extent
            + r * c.x * (math.sin(b) - math.sin(a))
            - r * c.y * (math.cos(b) - math.cos(a))
        )
    if isinstance(element, LineElement):
        p, q = element.first_point, element.last_point
        return 0.5 * (p.x * q.y - q.x * p.y)
    return 0.0


@dataclass(frozen=True, slots=True)
class ContinuousCurve:
    """A directed chain of elements whose consecutive endpoints coincide.

    Attributes:
        elements: Elements in order of travel
        closed: Whether the last element connects back to the first
    """

    elements: tuple[CirculinearElement, ...] = ()
    closed: bool = False

    def __iter__(self) -> Iterator[CirculinearElement]:
        return iter(self.elements)

    def __len__(self) -> int:
        return len(self.elements)

    @property
    def t0(self) -> float:
        return self.elements[0].t0

    @property
    def t1(self) -> float:
        return self.elements[-1].t1

    @property
    def first_point(self) -> Point:
        if not self.elements:
            raise GeometryError("Empty curve has no first point")
        return self.elements[0].first_point

    @property
    def last_point(self) -> Point:
        if not self.elements:
            raise GeometryError("Empty curve has no last point")
        return self.elements[-1].last_point

    @property
    def extent(self) -> Extent:
        left = math.isinf(self.t0)
        right = math.isinf(self.t1)
        if left and right:
            return Extent.DOUBLY_INFINITE
        if left:
            return Extent.LEFT_INFINITE
        if right:
            return Extent.RIGHT_INFINITE
        return Extent.BOUNDED

    def is_bounded(self) -> bool:
        return all(element.is_bounded() for element in self.elements)

    @property
    def length(self) -> float:
        return sum(element.length for element in self.elements)

    def is_empty(self) -> bool:
        return not self.elements or self.length == 0.0

    def reverse(self) -> "ContinuousCurve":
        return type(self)(
            tuple(element.reverse() for element in reversed(self.elements)),
            self.closed,
        )

    def vertices(self) -> list[Point]:
        """All finite element endpoints, without repeating shared junctions."""
        points = []
        for element in self.elements:
            if not math.isinf(element.t0):
                points.append(element.first_point)
        if self.elements and not self.closed and not math.isinf(self.t1):
            points.append(self.last_point)
        return points

    def singular_points(self, tolerance: float = 1e-9) -> list[Point]:
        """Points where the tangent direction jumps, plus the ends of an open curve."""
        points = []
        n = len(self.elements)
        for i, current in enumerate(self.elements):
            if i == 0 and not self.closed:
                if not math.isinf(current.t0):
                    points.append(current.first_point)
                continue
            previous = self.elements[i - 1]
            u = previous.tangent(previous.t1)
            v = current.tangent(current.t0)
            nu, nv = u.norm(), v.norm()
            if nu == 0.0 or nv == 0.0:
                points.append(current.first_point)
                continue
            if abs(u.cross(v)) > tolerance * nu * nv or u.dot(v) < 0.0:
                points.append(current.first_point)
        if n and not self.closed and not math.isinf(self.t1):
            points.append(self.last_point)
        return points

    def sample_points(self) -> list[Point]:
        """Vertices plus one interior point per element, for distance checks.

        Connector segments may pass closer to the source than the buffer
        distance, so neither their interiors nor their endpoints are sampled.
        A curve made of connectors only falls back to its vertices.
        """
        elements = self.elements
        connector = [isinstance(e, LineElement) and e.connector for e in elements]
        points = []
        for i, element in enumerate(elements):
            if connector[i] or isinstance(element, PointElement):
                continue
            if not math.isinf(element.t0) and not ((i > 0 or self.closed) and connector[i - 1]):
                points.append(element.first_point)
            points.append(element.point(choose_position(element.t0, element.t1)))
        if elements and not self.closed and not math.isinf(self.t1) and not connector[-1]:
            points.append(self.last_point)
        return points or self.vertices()

    def signed_area(self) -> float:
        """Signed area enclosed by a closed bounded curve.

        Positive for counter-clockwise curves, negative for clockwise ones.
        Open or unbounded curves enclose no finite area and return 0.0.
        """
        if not self.closed or not self.is_bounded():
            return 0.0
        return sum(_element_area_term(element) for element in self.elements)

    def check_continuity(self, tolerance: float) -> None:
        """Verify that consecutive elements connect.

        Raises:
            CurveContinuityError: If two consecutive elements are further apart
                than tolerance
        """
        for i in range(len(self.elements) - 1):
            gap = self.elements[i].last_point.distance(self.elements[i + 1].first_point)
            if gap > tolerance:
                raise CurveContinuityError(i, gap)

    def closing_gap(self) -> float:
        """Distance between the last and first points of a closed bounded curve."""
        if not self.closed or not self.elements or not self.is_bounded():
            return 0.0
        return self.last_point.distance(self.first_point)

    def to_dict(self) -> dict[str, Any]:
        return {
            "elements": [element.to_dict() for element in self.elements],
            "closed": self.closed,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ContinuousCurve":
        return cls(
            elements=tuple(element_from_dict(e) for e in data["elements"]),
            closed=data["closed"],
        )

    @classmethod
    def polyline(cls, points: Sequence[Point], closed: bool = False) -> "ContinuousCurve":
        """Build a polyline (or polygon when closed) through the given points."""
        elements = [segment(points[i], points[i + 1]) for i in range(len(points) - 1)]
        if closed and len(points) > 2 and points[-1] != points[0]:
            elements.append(segment(points[-1], points[0]))
        return cls(tuple(elements), closed)

    @classmethod
    def circle(cls, center: Point, radius: float, ccw: bool = True) -> "ContinuousCurve":
        """Build a full circle starting at angle 0."""
        extent = TWO_PI if ccw else -TWO_PI
        return cls((ArcElement(center, radius, 0.0, extent),), True)


@dataclass(frozen=True, slots=True)
class Contour(ContinuousCurve):
    """A continuous curve without self-intersections.

    Either a closed ring or an unbounded curve with two infinite ends. The
    region it bounds lies on its left.
    """

    @classmethod
    def of(cls, curve: ContinuousCurve) -> "Contour":
        return cls(curve.elements, curve.closed)


@dataclass(frozen=True, slots=True)
class CurveSet:
    """A curve made of several continuous pieces."""

    curves: tuple[ContinuousCurve, ...] = ()

    def __iter__(self) -> Iterator[ContinuousCurve]:
        return iter(self.curves)

    def __len__(self) -> int:
        return len(self.curves)

    def is_empty(self) -> bool:
        return all(curve.is_empty() for curve in self.curves)

    def vertices(self) -> list[Point]:
        return [p for curve in self.curves for p in curve.vertices()]

    def reverse(self) -> "CurveSet":
        return CurveSet(tuple(curve.reverse() for curve in self.curves))

    def to_dict(self) -> dict[str, Any]:
        return {"curves": [curve.to_dict() for curve in self.curves]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CurveSet":
        return cls(tuple(ContinuousCurve.from_dict(c) for c in data["curves"]))


@dataclass(frozen=True)
class Domain:
    """A planar region lying on the left of a set of disjoint contours.

    Attributes:
        contours: Boundary contours of the region
    """

    contours: tuple[Contour, ...] = field(default_factory=tuple)

    def __iter__(self) -> Iterator[Contour]:
        return iter(self.contours)

    def __len__(self) -> int:
        return len(self.contours)

    def is_empty(self) -> bool:
        return not self.contours

    def is_bounded(self) -> bool:
        return all(c.closed and c.is_bounded() for c in self.contours)

    def area(self) -> float:
        """Signed area of the region.

        Outer rings wind counter-clockwise and holes clockwise, so the sum of
        the contours' signed areas is the region's area. An unbounded region
        has infinite area.
        """
        if not self.is_bounded():
            return math.inf
        return sum(contour.signed_area() for contour in self.contours)

    def perimeter(self) -> float:
        return sum(contour.length for contour in self.contours)

    def boundary(self) -> CurveSet:
        return CurveSet(tuple(self.contours))

    def reverse(self) -> "Domain":
        """Domain bounded by the same contours travelled backwards (the complement)."""
        return Domain(tuple(Contour.of(contour.reverse()) for contour in self.contours))

    def to_dict(self) -> dict[str, Any]:
        return {"contours": [contour.to_dict() for contour in self.contours]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Domain":
        return cls(tuple(Contour.from_dict(c) for c in data["contours"]))
