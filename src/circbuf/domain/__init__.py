"""Domain models for circbuf.

This module contains the geometric value types the buffer engine works on.
All models are designed to be:

- Immutable (using frozen dataclasses)
- Serializable for inter-process communication (parallel processing)
- Explicit about degenerate and unbounded cases

Key classes:
- Point: A 2D point or vector
- LineElement, ArcElement, PointElement: Atomic curve elements
- ContinuousCurve: A chain of connected elements, open or closed
- Contour: A non-self-intersecting continuous curve
- CurveSet: A multi-piece curve
- Domain: A region bounded by contours
"""

from circbuf.domain.curve import (
    Contour,
    ContinuousCurve,
    CurveSet,
    Domain,
    Extent,
    choose_position,
)
from circbuf.domain.element import (
    TWO_PI,
    ArcElement,
    CirculinearElement,
    LineElement,
    PointElement,
    arc,
    arc_between,
    element_from_dict,
    ray,
    ray_to,
    segment,
    straight_line,
)
from circbuf.domain.point import Point

__all__: list[str] = [
    "TWO_PI",
    # Enums
    "Extent",
    # Core types
    "Point",
    "LineElement",
    "ArcElement",
    "PointElement",
    "CirculinearElement",
    "ContinuousCurve",
    "Contour",
    "CurveSet",
    "Domain",
    # Constructors
    "arc",
    "arc_between",
    "element_from_dict",
    "ray",
    "ray_to",
    "segment",
    "straight_line",
    "choose_position",
]
