"""Join factories: connect consecutive parallel elements across a corner.

A join goes from the last point of one parallel element to the first point of
the next. It is returned as a ContinuousCurve that callers splice into the
offset when its length is positive.
"""

from circbuf.domain import (
    CirculinearElement,
    ContinuousCurve,
    Point,
    arc_between,
    segment,
)


class RoundJoinFactory:
    """Circular joins centered on the corner of the source curve.

    The arc has radius |d| and sweeps through the turning angle of the source
    at the corner. On the convex side this is counter-clockwise for a positive
    distance and clockwise otherwise, so the join bulges away from the source.
    On the concave side it is a short back-loop that splitting and filtering
    remove later.
    """

    def __init__(self, tolerance: float = 1e-6) -> None:
        self.tolerance = tolerance

    def create_join(
        self,
        element_a: CirculinearElement,
        element_b: CirculinearElement,
        distance: float,
        point_a: Point,
        point_b: Point,
    ) -> ContinuousCurve:
        """Create a round join between two parallel endpoints.

        Args:
            element_a: Source element before the corner
            element_b: Source element after the corner
            distance: Signed offset distance
            point_a: Last point of the parallel of element_a
            point_b: First point of the parallel of element_b

        Returns:
            Arc from point_a to point_b, or an empty curve if they coincide
        """
        if point_a.almost_equals(point_b, self.tolerance):
            return ContinuousCurve()
        center = element_a.last_point
        ccw = self._turns_left(element_a, element_b, distance)
        return ContinuousCurve((arc_between(center, point_a, point_b, ccw=ccw),))

    def _turns_left(
        self, element_a: CirculinearElement, element_b: CirculinearElement, distance: float
    ) -> bool:
        u = element_a.tangent(element_a.t1)
        v = element_b.tangent(element_b.t0)
        cross = u.cross(v)
        # U-turn: go around the outside of the end
        if abs(cross) <= self.tolerance * u.norm() * v.norm() and u.dot(v) < 0.0:
            return distance > 0
        return cross > 0.0


class BevelJoinFactory:
    """Straight joins cutting the corner between the two parallel endpoints.

    The bevel passes closer to the corner than the offset distance, so it is
    marked as a connector.
    """

    def __init__(self, tolerance: float = 1e-6) -> None:
        self.tolerance = tolerance

    def create_join(
        self,
        element_a: CirculinearElement,
        element_b: CirculinearElement,
        distance: float,
        point_a: Point,
        point_b: Point,
    ) -> ContinuousCurve:
        """Create a bevel segment, or an empty curve if the endpoints coincide."""
        if point_a.almost_equals(point_b, self.tolerance):
            return ContinuousCurve()
        return ContinuousCurve((segment(point_a, point_b, connector=True),))
