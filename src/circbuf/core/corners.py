"""Internal corner policies for concave turns of the offset.

At a concave corner the two parallel elements overlap. A policy may replace
them with an explicit list of elements; when it declines, the default join is
inserted and the resulting loop is removed later by splitting and filtering.
"""

from dataclasses import dataclass, field

from circbuf.core.geometry import intersections
from circbuf.domain import CirculinearElement


@dataclass(frozen=True, slots=True)
class InternalCorner:
    """Decision of an internal corner policy.

    Attributes:
        handled: Whether the policy took care of the corner
        replacement: Elements replacing [previous_parallel, current_parallel]
    """

    handled: bool
    replacement: tuple[CirculinearElement, ...] = field(default_factory=tuple)


NO_CORNER = InternalCorner(handled=False)


class NullInternalCornerFactory:
    """Policy that never handles internal corners."""

    def create_internal_corner(
        self,
        previous_parallel: CirculinearElement,
        current_parallel: CirculinearElement,
    ) -> InternalCorner:
        return NO_CORNER


class TrimInternalCornerFactory:
    """Trim both parallels at their crossing point closest to the corner.

    Declines when the parallels do not cross, in which case the corner falls
    back to a regular join.
    """

    def __init__(self, tolerance: float = 1e-6) -> None:
        self.tolerance = tolerance

    def create_internal_corner(
        self,
        previous_parallel: CirculinearElement,
        current_parallel: CirculinearElement,
    ) -> InternalCorner:
        """Compute the trimmed pair of parallels.

        Args:
            previous_parallel: Parallel of the element before the corner
            current_parallel: Parallel of the element after the corner

        Returns:
            Handled corner with the two trimmed elements, or NO_CORNER
        """
        crossings = intersections(previous_parallel, current_parallel, self.tolerance)
        if not crossings:
            return NO_CORNER

        reference = previous_parallel.last_point
        crossing = min(crossings, key=reference.distance)
        t_previous = previous_parallel.project(crossing)
        t_current = current_parallel.project(crossing)
        return InternalCorner(
            handled=True,
            replacement=(
                previous_parallel.sub(previous_parallel.t0, t_previous),
                current_parallel.sub(t_current, current_parallel.t1),
            ),
        )
