"""Cap factories: close the offset at the finite ends of an open curve.

A cap goes from the end of one offset side to the start of the other one.
The signed distance decides the sweep direction so that the cap bulges away
from the source for both signs.
"""

from circbuf.domain import ContinuousCurve, Point, arc_between, segment


class RoundCapFactory:
    """Semicircular caps centered on the end of the source curve."""

    def __init__(self, tolerance: float = 1e-6) -> None:
        self.tolerance = tolerance

    def create_cap(self, start: Point, end: Point, distance: float) -> ContinuousCurve:
        """Create a half circle from start to end.

        The center is the midpoint of the two points, which is the endpoint of
        the source curve.

        Args:
            start: Last point of one offset side
            end: First point of the other offset side
            distance: Signed offset distance

        Returns:
            Semicircle, or an empty curve when start and end coincide
        """
        if start.almost_equals(end, self.tolerance):
            return ContinuousCurve()
        center = (start + end) * 0.5
        return ContinuousCurve((arc_between(center, start, end, ccw=distance > 0),))


class ButtCapFactory:
    """Flat caps: a connector segment across the end of the curve."""

    def __init__(self, tolerance: float = 1e-6) -> None:
        self.tolerance = tolerance

    def create_cap(self, start: Point, end: Point, distance: float) -> ContinuousCurve:
        if start.almost_equals(end, self.tolerance):
            return ContinuousCurve()
        return ContinuousCurve((segment(start, end, connector=True),))


class SquareCapFactory:
    """Projecting square caps extending half the chord past the curve end."""

    def __init__(self, tolerance: float = 1e-6) -> None:
        self.tolerance = tolerance

    def create_cap(self, start: Point, end: Point, distance: float) -> ContinuousCurve:
        """Create three segments forming a square end.

        The cap projects to the right of the chord for a positive distance and
        to its left otherwise.
        """
        if start.almost_equals(end, self.tolerance):
            return ContinuousCurve()
        chord = end - start
        length = chord.norm()
        outward = Point(chord.y / length, -chord.x / length) * (length / 2.0)
        if distance < 0:
            outward = -outward
        corner1 = start + outward
        corner2 = end + outward
        return ContinuousCurve(
            (segment(start, corner1), segment(corner1, corner2), segment(corner2, end))
        )
