"""Immutable bundle of the pluggable buffer components."""

from dataclasses import dataclass
from typing import Protocol

from circbuf.config import (
    BufferConfig,
    CapStyle,
    GeometryConfig,
    InternalCornerStyle,
    JoinStyle,
)
from circbuf.core.caps import ButtCapFactory, RoundCapFactory, SquareCapFactory
from circbuf.core.corners import (
    InternalCorner,
    NullInternalCornerFactory,
    TrimInternalCornerFactory,
)
from circbuf.core.joins import BevelJoinFactory, RoundJoinFactory
from circbuf.domain import CirculinearElement, ContinuousCurve, Point
from circbuf.exceptions import ConfigurationError


class JoinFactory(Protocol):
    def create_join(
        self,
        element_a: CirculinearElement,
        element_b: CirculinearElement,
        distance: float,
        point_a: Point,
        point_b: Point,
    ) -> ContinuousCurve: ...


class CapFactory(Protocol):
    def create_cap(self, start: Point, end: Point, distance: float) -> ContinuousCurve: ...


class InternalCornerFactory(Protocol):
    def create_internal_corner(
        self,
        previous_parallel: CirculinearElement,
        current_parallel: CirculinearElement,
    ) -> InternalCorner: ...


@dataclass(frozen=True)
class BufferStrategy:
    """Join, cap and internal corner factories used by one calculator.

    Attributes:
        join_factory: Connects parallels across convex corners
        cap_factory: Closes open curves at their finite ends
        internal_corner_factory: Optional special-casing of concave corners
    """

    join_factory: JoinFactory
    cap_factory: CapFactory
    internal_corner_factory: InternalCornerFactory

    @classmethod
    def from_config(cls, buffer: BufferConfig, geometry: GeometryConfig) -> "BufferStrategy":
        """Build the strategy described by configuration.

        Args:
            buffer: Join, cap and internal corner styles
            geometry: Tolerance shared by the factories

        Returns:
            Strategy with one factory per component

        Raises:
            ConfigurationError: If a style has no matching factory
        """
        tol = geometry.tolerance

        if buffer.join == JoinStyle.ROUND:
            join_factory: JoinFactory = RoundJoinFactory(tol)
        elif buffer.join == JoinStyle.BEVEL:
            join_factory = BevelJoinFactory(tol)
        else:
            raise ConfigurationError(f"Unknown join style: {buffer.join}")

        if buffer.cap == CapStyle.ROUND:
            cap_factory: CapFactory = RoundCapFactory(tol)
        elif buffer.cap == CapStyle.BUTT:
            cap_factory = ButtCapFactory(tol)
        elif buffer.cap == CapStyle.SQUARE:
            cap_factory = SquareCapFactory(tol)
        else:
            raise ConfigurationError(f"Unknown cap style: {buffer.cap}")

        if buffer.internal_corner == InternalCornerStyle.NONE:
            corner_factory: InternalCornerFactory = NullInternalCornerFactory()
        elif buffer.internal_corner == InternalCornerStyle.TRIM:
            corner_factory = TrimInternalCornerFactory(tol)
        else:
            raise ConfigurationError(f"Unknown internal corner style: {buffer.internal_corner}")

        return cls(join_factory, cap_factory, corner_factory)
