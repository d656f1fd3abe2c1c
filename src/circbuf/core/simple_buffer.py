"""Boundary contours of the buffer around one self-intersection-free curve.

Both sides of the curve are offset. A closed curve yields two independent
rings; an open curve is stitched into one contour with caps at its finite ends,
except for an infinite line whose two sides never meet.
"""

from circbuf.config import GeometryConfig
from circbuf.core.parallel import ContinuousParallelBuilder
from circbuf.core.strategy import BufferStrategy
from circbuf.domain import CirculinearElement, ContinuousCurve, Extent, Point, segment
from circbuf.exceptions import GeometryError


class SimpleCurveBufferBuilder:
    """Builds the raw (unsplit) boundary contours for a single curve."""

    def __init__(self, strategy: BufferStrategy, geometry: GeometryConfig) -> None:
        self.strategy = strategy
        self.tolerance = geometry.tolerance
        self.parallel_builder = ContinuousParallelBuilder(strategy, geometry)

    def build(self, curve: ContinuousCurve, distance: float) -> list[ContinuousCurve]:
        """Create the boundary contours of the buffer of a curve.

        Args:
            curve: Continuous curve without self-intersections
            distance: Signed buffer distance

        Returns:
            One or two candidate contours, which may still self-intersect
        """
        positive = self.parallel_builder.build(curve, distance)
        negative = self.parallel_builder.build(curve, -distance).reverse()

        if curve.closed:
            return [
                ContinuousCurve(c.elements, True)
                for c in (positive, negative)
                if not c.is_empty()
            ]
        contours = self._open_contours(curve, positive, negative, distance)
        return [c for c in contours if not c.is_empty()]

    def _open_contours(
        self,
        curve: ContinuousCurve,
        positive: ContinuousCurve,
        negative: ContinuousCurve,
        distance: float,
    ) -> list[ContinuousCurve]:
        caps = self.strategy.cap_factory
        extent = curve.extent

        if extent == Extent.BOUNDED and curve.elements:
            if positive.is_empty() and negative.is_empty():
                return []
            pos_elements, pos_first, pos_last = self._side(curve, positive, distance)
            back_elements, neg_last, neg_first = self._side(curve, negative.reverse(), -distance)
            neg_elements = tuple(e.reverse() for e in reversed(back_elements))
            end_cap = caps.create_cap(pos_last, neg_first, distance)
            start_cap = caps.create_cap(neg_last, pos_first, distance)
            elements = pos_elements + end_cap.elements + neg_elements + start_cap.elements
            return [ContinuousCurve(elements, True)]

        if positive.is_empty() or negative.is_empty():
            return [positive, negative]

        if extent == Extent.DOUBLY_INFINITE:
            return [positive, negative]

        if extent == Extent.RIGHT_INFINITE:
            cap = caps.create_cap(negative.last_point, positive.first_point, distance)
            elements = negative.elements + cap.elements + positive.elements
            return [ContinuousCurve(elements, False)]

        if extent == Extent.LEFT_INFINITE:
            cap = caps.create_cap(positive.last_point, negative.first_point, distance)
            elements = positive.elements + cap.elements + negative.elements
            return [ContinuousCurve(elements, False)]

        raise GeometryError(f"Unhandled curve extent: {extent}")

    def _side(
        self, curve: ContinuousCurve, parallel: ContinuousCurve, distance: float
    ) -> tuple[tuple[CirculinearElement, ...], Point, Point]:
        """Elements and end points of one side of an open bounded curve.

        A side whose whole parallel vanished is replaced by the offsets of the
        two source endpoints, so the caps keep their centers on those endpoints.
        The segment in between lies closer to the source than the distance and
        is marked as a connector.
        """
        if not parallel.is_empty():
            return parallel.elements, parallel.first_point, parallel.last_point
        first = curve.elements[0]
        last = curve.elements[-1]
        start = _offset_point(first, first.t0, distance)
        end = _offset_point(last, last.t1, distance)
        if start.almost_equals(end, self.tolerance):
            return (), start, end
        return (segment(start, end, connector=True),), start, end


def _offset_point(element: CirculinearElement, t: float, distance: float) -> Point:
    """Point at signed distance to the right of an element, at parameter t."""
    tangent = element.tangent(t)
    norm = tangent.norm()
    normal = Point(tangent.y / norm, -tangent.x / norm)
    return element.point(t) + normal * distance
