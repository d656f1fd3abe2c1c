"""Parallel construction for a single continuous curve.

The builder offsets every element of a curve and chains the results, inserting
joins at convex corners and giving the internal corner policy a chance to
handle concave ones. Loops left at concave corners are not removed here.
"""

import math
import warnings

import structlog

from circbuf.config import GeometryConfig
from circbuf.core.strategy import BufferStrategy
from circbuf.domain import CirculinearElement, ContinuousCurve, Point
from circbuf.exceptions import TopologyWarning

logger = structlog.get_logger(__name__)


class ContinuousParallelBuilder:
    """Builds the parallel of a continuous curve at a signed distance.

    Example:
        builder = ContinuousParallelBuilder(strategy, GeometryConfig())
        outline = builder.build(ContinuousCurve.polyline(points, closed=True), 1.0)
    """

    def __init__(self, strategy: BufferStrategy, geometry: GeometryConfig) -> None:
        self.strategy = strategy
        self.tolerance = geometry.tolerance
        self.corner_probe = geometry.corner_probe

    def build(self, curve: ContinuousCurve, distance: float) -> ContinuousCurve:
        """Compute the chained parallel of a curve.

        Args:
            curve: Source curve
            distance: Signed offset distance (positive = right side)

        Returns:
            Parallel curve with the same closed flag, possibly empty
        """
        tol = self.tolerance
        sources = [e for e in curve.elements if not e.is_degenerate(tol)]
        if not sources:
            return ContinuousCurve((), curve.closed)

        queue: list[CirculinearElement] = []
        first_parallel = sources[0].parallel(distance)
        head_kept = not first_parallel.is_degenerate(tol)
        if head_kept:
            queue.append(first_parallel)

        previous = sources[0]
        previous_parallel = first_parallel
        for current in sources[1:]:
            current_parallel = current.parallel(distance)
            previous_parallel = self._connect(
                queue, previous, current, previous_parallel, current_parallel, distance
            )
            previous = current

        if curve.closed:
            gap = curve.closing_gap()
            if gap > tol:
                logger.warning("Closed curve does not close", gap=gap, tolerance=tol)
                warnings.warn(
                    f"Closed curve has a closing gap of {gap:.3g}; the offset is best effort",
                    TopologyWarning,
                    stacklevel=2,
                )
            head = queue[0] if head_kept and queue else first_parallel
            queue = self._close(
                queue, previous, sources[0], previous_parallel, head, head_kept, distance
            )

        return ContinuousCurve(tuple(queue), curve.closed)

    def _probe(self, element: CirculinearElement) -> Point:
        t0, t1 = element.t0, element.t1
        if math.isinf(t1):
            return element.point(t0 + self.corner_probe)
        return element.point(t0 + self.corner_probe * (t1 - t0))

    def is_internal_corner(
        self, previous: CirculinearElement, current: CirculinearElement, distance: float
    ) -> bool:
        """Classify the corner between two source elements.

        The corner is internal (concave on the offset side) when a point just
        past the corner lies outside the previous element for a positive
        distance, or inside it for a negative one.
        """
        inside = previous.is_inside(self._probe(current))
        return inside if distance < 0 else not inside

    def _is_smooth(
        self, previous_parallel: CirculinearElement, current_parallel: CirculinearElement
    ) -> bool:
        return previous_parallel.last_point.almost_equals(
            current_parallel.first_point, self.tolerance
        )

    def _connect(
        self,
        queue: list[CirculinearElement],
        previous: CirculinearElement,
        current: CirculinearElement,
        previous_parallel: CirculinearElement,
        current_parallel: CirculinearElement,
        distance: float,
    ) -> CirculinearElement:
        """Append the corner and the current parallel to the queue.

        Returns:
            The element standing for the current parallel at the next corner
        """
        tol = self.tolerance

        if self._is_smooth(previous_parallel, current_parallel):
            if not current_parallel.is_degenerate(tol):
                queue.append(current_parallel)
            return current_parallel

        if self.is_internal_corner(previous, current, distance):
            corner = self.strategy.internal_corner_factory.create_internal_corner(
                previous_parallel, current_parallel
            )
            if corner.handled:
                if queue and queue[-1] is previous_parallel:
                    queue.pop()
                queue.extend(e for e in corner.replacement if not e.is_degenerate(tol))
                return corner.replacement[-1] if corner.replacement else current_parallel

        join = self.strategy.join_factory.create_join(
            previous,
            current,
            distance,
            previous_parallel.last_point,
            current_parallel.first_point,
        )
        if join.length > 0:
            queue.extend(join.elements)
        if not current_parallel.is_degenerate(tol):
            queue.append(current_parallel)
        return current_parallel

    def _close(
        self,
        queue: list[CirculinearElement],
        last: CirculinearElement,
        first: CirculinearElement,
        last_parallel: CirculinearElement,
        head: CirculinearElement,
        head_kept: bool,
        distance: float,
    ) -> list[CirculinearElement]:
        """Connect the end of a closed parallel back to its start."""
        tol = self.tolerance

        if self._is_smooth(last_parallel, head):
            return queue

        if self.is_internal_corner(last, first, distance):
            corner = self.strategy.internal_corner_factory.create_internal_corner(
                last_parallel, head
            )
            if corner.handled:
                start = 1 if head_kept and queue else 0
                stop = len(queue) - 1 if queue and queue[-1] is last_parallel else len(queue)
                body = queue[start:stop] if stop > start else []
                return [e for e in corner.replacement if not e.is_degenerate(tol)] + body

        join = self.strategy.join_factory.create_join(
            last, first, distance, last_parallel.last_point, head.first_point
        )
        if join.length > 0:
            queue.extend(join.elements)
        return queue
