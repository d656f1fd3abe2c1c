"""Circulinear elements: the atomic pieces of a curve.

Three element types are defined:
- LineElement: segment, ray, left-infinite ray or infinite line
- ArcElement: circular arc (a full circle is an arc with |extent| = 2*pi)
- PointElement: explicit degenerate element produced by offsetting

Each element is parametrized over [t0, t1], where either bound may be infinite
for lines. Orientation matters: the left side of the direction of travel is
the "inside" of an element, and a positive offset distance moves an element to
its right side.
"""

import math
from dataclasses import dataclass
from typing import Any

from circbuf.domain.point import Point
from circbuf.exceptions import DegenerateInputError, UnboundedCurveError

TWO_PI = 2.0 * math.pi


@dataclass(frozen=True, slots=True)
class LineElement:
    """A straight element ``origin + t * direction`` for t in [t0, t1].

    Attributes:
        origin: Reference point at t = 0
        direction: Direction vector (its length sets the parameter scale)
        t0: Start parameter, may be -inf
        t1: End parameter, may be +inf
        connector: Whether the element was inserted by a join or cap that may
            pass closer to the source than the buffer distance
    """

    origin: Point
    direction: Point
    t0: float = 0.0
    t1: float = 1.0
    connector: bool = False

    def point(self, t: float) -> Point:
        return self.origin + self.direction * t

    @property
    def first_point(self) -> Point:
        if math.isinf(self.t0):
            raise UnboundedCurveError("first")
        return self.point(self.t0)

    @property
    def last_point(self) -> Point:
        if math.isinf(self.t1):
            raise UnboundedCurveError("last")
        return self.point(self.t1)

    @property
    def length(self) -> float:
        return self.direction.norm() * (self.t1 - self.t0)

    def is_bounded(self) -> bool:
        return not (math.isinf(self.t0) or math.isinf(self.t1))

    def is_degenerate(self, tolerance: float) -> bool:
        """Check whether the element has (numerically) no extent."""
        if self.direction.norm() <= 0.0:
            return True
        return self.is_bounded() and self.length <= tolerance

    def tangent(self, t: float) -> Point:
        return self.direction

    def normal(self) -> Point:
        """Unit vector pointing to the right of the direction of travel.

        Raises:
            DegenerateInputError: If the direction vector has zero length
        """
        n = self.direction.norm()
        if n <= 0.0:
            raise DegenerateInputError("line", "zero-length direction vector")
        return Point(self.direction.y / n, -self.direction.x / n)

    def param_tolerance(self, tolerance: float) -> float:
        """Convert a distance tolerance into a parameter tolerance."""
        n = self.direction.norm()
        return tolerance / n if n > 0.0 else tolerance

    def is_inside(self, p: Point) -> bool:
        """Check whether a point lies strictly on the left of the supporting line."""
        return self.direction.cross(p - self.origin) > 0.0

    def parallel(self, distance: float) -> "LineElement | PointElement":
        """Offset the element by a signed distance (positive = right side)."""
        try:
            shift = self.normal() * distance
        except DegenerateInputError:
            return PointElement(self.origin)
        return LineElement(self.origin + shift, self.direction, self.t0, self.t1)

    def reverse(self) -> "LineElement":
        return LineElement(self.origin, -self.direction, -self.t1, -self.t0, self.connector)

    def sub(self, ta: float, tb: float) -> "LineElement":
        return LineElement(self.origin, self.direction, ta, tb, self.connector)

    def project(self, p: Point) -> float:
        """Parameter of the closest point on the element."""
        n2 = self.direction.dot(self.direction)
        if n2 <= 0.0:
            return self.t0 if not math.isinf(self.t0) else 0.0
        t = (p - self.origin).dot(self.direction) / n2
        return min(max(t, self.t0), self.t1)

    def distance(self, p: Point) -> float:
        return p.distance(self.point(self.project(p)))

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": "line",
            "origin": self.origin.to_dict(),
            "direction": self.direction.to_dict(),
            "t0": self.t0,
            "t1": self.t1,
            "connector": self.connector,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LineElement":
        return cls(
            origin=Point.from_dict(data["origin"]),
            direction=Point.from_dict(data["direction"]),
            t0=data["t0"],
            t1=data["t1"],
            connector=data.get("connector", False),
        )


@dataclass(frozen=True, slots=True)
class ArcElement:
    """A circular arc parametrized by swept angle, t in [0, |extent|].

    Attributes:
        center: Circle center
        radius: Circle radius
        start_angle: Angle of the first point, in radians
        extent: Signed swept angle; positive is counter-clockwise
    """

    center: Point
    radius: float
    start_angle: float
    extent: float

    @property
    def t0(self) -> float:
        return 0.0

    @property
    def t1(self) -> float:
        return abs(self.extent)

    @property
    def ccw(self) -> bool:
        return self.extent >= 0.0

    def angle_at(self, t: float) -> float:
        return self.start_angle + t if self.ccw else self.start_angle - t

    def point(self, t: float) -> Point:
        return Point.polar(self.center, self.radius, self.angle_at(t))

    @property
    def first_point(self) -> Point:
        return self.point(0.0)

    @property
    def last_point(self) -> Point:
        return self.point(self.t1)

    @property
    def length(self) -> float:
        return self.radius * abs(self.extent)

    def is_bounded(self) -> bool:
        return True

    def is_degenerate(self, tolerance: float) -> bool:
        return self.radius <= tolerance or self.length <= tolerance

    def tangent(self, t: float) -> Point:
        theta = self.angle_at(t)
        sign = 1.0 if self.ccw else -1.0
        return Point(-math.sin(theta), math.cos(theta)) * (sign * self.radius)

    def param_tolerance(self, tolerance: float) -> float:
        return tolerance / self.radius if self.radius > 0.0 else tolerance

    def is_inside(self, p: Point) -> bool:
        """Check whether a point lies on the left of the oriented circle.

        For a counter-clockwise arc this is the open disk, for a clockwise arc
        its exterior.
        """
        d = p.distance(self.center)
        return d < self.radius if self.ccw else d > self.radius

    def parallel(self, distance: float) -> "ArcElement | PointElement":
        """Offset the arc by a signed distance (positive = right side).

        The right side of a counter-clockwise arc is outward. When the offset
        radius vanishes the arc collapses onto its center.
        """
        radius = self.radius + distance if self.ccw else self.radius - distance
        if radius <= 0.0:
            return PointElement(self.center)
        return ArcElement(self.center, radius, self.start_angle, self.extent)

    def reverse(self) -> "ArcElement":
        return ArcElement(self.center, self.radius, self.start_angle + self.extent, -self.extent)

    def sub(self, ta: float, tb: float) -> "ArcElement":
        sign = 1.0 if self.ccw else -1.0
        return ArcElement(self.center, self.radius, self.angle_at(ta), sign * (tb - ta))

    def project(self, p: Point) -> float:
        """Parameter of the closest point on the arc.

        Angles outside the swept range snap to the nearest endpoint.
        """
        v = p - self.center
        if v.norm() <= 0.0:
            return 0.0
        sign = 1.0 if self.ccw else -1.0
        t = (sign * (v.angle() - self.start_angle)) % TWO_PI
        if t <= self.t1:
            return t
        if p.distance(self.first_point) <= p.distance(self.last_point):
            return 0.0
        return self.t1

    def distance(self, p: Point) -> float:
        return p.distance(self.point(self.project(p)))

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": "arc",
            "center": self.center.to_dict(),
            "radius": self.radius,
            "start_angle": self.start_angle,
            "extent": self.extent,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ArcElement":
        return cls(
            center=Point.from_dict(data["center"]),
            radius=data["radius"],
            start_angle=data["start_angle"],
            extent=data["extent"],
        )


@dataclass(frozen=True, slots=True)
class PointElement:
    """Degenerate element left over when an offset collapses to a point."""

    location: Point

    t0 = 0.0
    t1 = 0.0

    def point(self, t: float) -> Point:
        return self.location

    @property
    def first_point(self) -> Point:
        return self.location

    @property
    def last_point(self) -> Point:
        return self.location

    @property
    def length(self) -> float:
        return 0.0

    def is_bounded(self) -> bool:
        return True

    def is_degenerate(self, tolerance: float) -> bool:
        return True

    def tangent(self, t: float) -> Point:
        return Point(0.0, 0.0)

    def param_tolerance(self, tolerance: float) -> float:
        return tolerance

    def is_inside(self, p: Point) -> bool:
        return False

    def parallel(self, distance: float) -> "PointElement":
        return self

    def reverse(self) -> "PointElement":
        return self

    def sub(self, ta: float, tb: float) -> "PointElement":
        return self

    def project(self, p: Point) -> float:
        return 0.0

    def distance(self, p: Point) -> float:
        return p.distance(self.location)

    def to_dict(self) -> dict[str, Any]:
        return {"kind": "point", "location": self.location.to_dict()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PointElement":
        return cls(location=Point.from_dict(data["location"]))


CirculinearElement = LineElement | ArcElement | PointElement

_ELEMENT_TYPES: dict[str, type] = {
    "line": LineElement,
    "arc": ArcElement,
    "point": PointElement,
}


def element_from_dict(data: dict[str, Any]) -> CirculinearElement:
    """Deserialize any element from its dictionary form.

    Args:
        data: Dictionary produced by an element's to_dict()

    Returns:
        Element instance of the matching type
    """
    return _ELEMENT_TYPES[data["kind"]].from_dict(data)


def segment(start: Point, end: Point, connector: bool = False) -> LineElement:
    """Bounded segment from start to end."""
    return LineElement(start, end - start, 0.0, 1.0, connector)


def ray(origin: Point, direction: Point) -> LineElement:
    """Ray starting at origin and extending to infinity along direction."""
    return LineElement(origin, direction, 0.0, math.inf)


def ray_to(end: Point, direction: Point) -> LineElement:
    """Left-infinite ray arriving at end along direction."""
    return LineElement(end, direction, -math.inf, 0.0)


def straight_line(origin: Point, direction: Point) -> LineElement:
    """Infinite line through origin."""
    return LineElement(origin, direction, -math.inf, math.inf)


def arc(center: Point, radius: float, start_angle: float, extent: float) -> ArcElement:
    """Circular arc; positive extent sweeps counter-clockwise."""
    return ArcElement(center, radius, start_angle, extent)


def arc_between(center: Point, start: Point, end: Point, ccw: bool) -> ArcElement:
    """Arc around center from the direction of start to the direction of end.

    The radius is the distance from center to start. When both directions
    coincide the arc is empty, never a full turn.

    Args:
        center: Arc center
        start: Point giving the start angle and radius
        end: Point giving the end angle
        ccw: Sweep direction

    Returns:
        Arc with extent in [0, 2*pi) when ccw, (-2*pi, 0] otherwise
    """
    a0 = (start - center).angle()
    a1 = (end - center).angle()
    if ccw:
        extent = (a1 - a0) % TWO_PI
    else:
        extent = -((a0 - a1) % TWO_PI)
    return ArcElement(center, start.distance(center), a0, extent)
