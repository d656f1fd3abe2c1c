"""End-to-end buffer computations checked against hand-computed shapes.

These tests run the whole pipeline (parallels, splitting, filtering) and
compare the resulting domains with areas and vertices worked out by hand.
"""

import math

import pytest

from circbuf.config import (
    BufferConfig,
    BufferSettings,
    CapStyle,
    InternalCornerStyle,
    JoinStyle,
)
from circbuf.core.calculator import BufferCalculator
from circbuf.core.geometry import distance_to_curves
from circbuf.core.postprocess import CurveReference
from circbuf.domain import ContinuousCurve, CurveSet, Point, arc, straight_line

TOL = 1e-6

L_HEXAGON = [Point(0, 0), Point(4, 0), Point(4, 1), Point(1, 1), Point(1, 4), Point(0, 4)]

SHARP_TURN = [Point(0, 0), Point(10, 0), Point(1, 1), Point(1, 3)]


def square(side: float) -> ContinuousCurve:
    return ContinuousCurve.polyline(
        [Point(0, 0), Point(side, 0), Point(side, side), Point(0, side)], closed=True
    )


def calculator_with(**buffer_options) -> BufferCalculator:
    return BufferCalculator(BufferSettings(buffer=BufferConfig(**buffer_options)))


def assert_buffer_invariants(domain, source: ContinuousCurve, distance: float) -> None:
    """Check that every contour keeps its distance and never cuts the source."""
    reference = CurveReference.of([source])
    for contour in domain:
        for p in contour.sample_points():
            assert distance_to_curves(p, [source]) >= abs(distance) - TOL
        assert not reference.crosses(contour, TOL)


class TestClosedCurves:
    """Buffers of closed polygons."""

    def test_unit_square(self) -> None:
        """Test that the collapsed inner side leaves only the rounded outer ring."""
        domain = BufferCalculator().compute_buffer(square(1), 1.0)

        assert len(domain) == 1
        contour = domain.contours[0]
        assert contour.closed
        assert len(contour) == 8
        assert contour.signed_area() == pytest.approx(5 + math.pi)
        assert contour.length == pytest.approx(4 + 2 * math.pi)
        assert_buffer_invariants(domain, square(1), 1.0)

    def test_square_ring(self) -> None:
        """Test the annulus around a square with a hole at the inner parallel."""
        domain = BufferCalculator().compute_buffer(square(4), 0.25)

        areas = sorted(c.signed_area() for c in domain)
        assert areas == pytest.approx([-12.25, 20 + math.pi / 16])
        assert domain.area() == pytest.approx(7.75 + math.pi / 16)
        assert domain.is_bounded()
        assert_buffer_invariants(domain, square(4), 0.25)

    def test_bevel_square(self) -> None:
        domain = calculator_with(join=JoinStyle.BEVEL).compute_buffer(square(4), 0.5)

        areas = sorted(c.signed_area() for c in domain)
        assert areas == pytest.approx([-9.0, 24.5])
        assert domain.area() == pytest.approx(15.5)

    def test_l_hexagon(self) -> None:
        """Test a concave polygon whose inner parallel keeps a concave corner."""
        source = ContinuousCurve.polyline(L_HEXAGON, closed=True)
        domain = BufferCalculator().compute_buffer(source, 0.25)

        areas = sorted(c.signed_area() for c in domain)
        assert areas == pytest.approx([-3.2634126, 11.1829369], rel=1e-6)
        assert domain.area() == pytest.approx(7.9195243, rel=1e-6)
        assert_buffer_invariants(domain, source, 0.25)


class TestOpenCurves:
    """Buffers of open polylines and unbounded curves."""

    def test_stadium(self) -> None:
        source = ContinuousCurve.polyline([Point(0, 0), Point(4, 0)])
        domain = BufferCalculator().compute_buffer(source, 1.0)

        assert len(domain) == 1
        assert domain.area() == pytest.approx(8 + math.pi)
        assert_buffer_invariants(domain, source, 1.0)

    def test_butt_caps(self) -> None:
        source = ContinuousCurve.polyline([Point(0, 0), Point(4, 0)])
        domain = calculator_with(cap=CapStyle.BUTT).compute_buffer(source, 1.0)

        assert len(domain) == 1
        assert domain.area() == pytest.approx(8.0)

    def test_square_caps(self) -> None:
        source = ContinuousCurve.polyline([Point(0, 0), Point(4, 0)])
        domain = calculator_with(cap=CapStyle.SQUARE).compute_buffer(source, 1.0)
        assert domain.area() == pytest.approx(12.0)

    @pytest.mark.parametrize(
        "corner_style", [InternalCornerStyle.NONE, InternalCornerStyle.TRIM]
    )
    def test_l_polyline(self, corner_style) -> None:
        """Test that both corner policies give the same outline around a right angle."""
        source = ContinuousCurve.polyline([Point(0, 0), Point(4, 0), Point(4, 4)])
        domain = calculator_with(internal_corner=corner_style).compute_buffer(source, 1.0)

        assert len(domain) == 1
        assert domain.area() == pytest.approx(15 + 5 * math.pi / 4)
        assert_buffer_invariants(domain, source, 1.0)

    @pytest.mark.parametrize(
        "corner_style", [InternalCornerStyle.NONE, InternalCornerStyle.TRIM]
    )
    def test_sharp_turn(self, corner_style) -> None:
        """Test a polyline folding back by more than 170 degrees."""
        source = ContinuousCurve.polyline(SHARP_TURN)
        domain = calculator_with(internal_corner=corner_style).compute_buffer(source, 0.75)

        assert len(domain) == 1
        assert domain.area() == pytest.approx(24.8416, abs=1e-3)
        assert_buffer_invariants(domain, source, 0.75)

    def test_sharp_turn_with_bevels(self) -> None:
        """Test that a split node on a bevel does not discard the outline."""
        source = ContinuousCurve.polyline(SHARP_TURN)
        domain = calculator_with(join=JoinStyle.BEVEL).compute_buffer(source, 0.75)

        assert len(domain) == 1
        assert 23.88 < domain.area() < 24.03
        assert_buffer_invariants(domain, source, 0.75)

    def test_arc_tighter_than_distance(self) -> None:
        """Test a semicircle whose inner side vanishes entirely."""
        source = ContinuousCurve((arc(Point(0, 0), 2.0, 0.0, math.pi),))
        domain = BufferCalculator().compute_buffer(source, 3.0)

        expected = 21.5 * math.pi - 9 * math.acos(2 / 3) + 2 * math.sqrt(5)
        assert len(domain) == 1
        assert domain.is_bounded()
        assert domain.area() == pytest.approx(expected, abs=1e-6)
        assert_buffer_invariants(domain, source, 3.0)

    def test_crossing_lines(self) -> None:
        """Test that two crossing lines give a cross-shaped, unbounded domain."""
        lines = CurveSet(
            (
                ContinuousCurve((straight_line(Point(0, 0), Point(1, 0)),)),
                ContinuousCurve((straight_line(Point(0, 0), Point(0, 1)),)),
            )
        )
        domain = BufferCalculator().compute_buffer(lines, 1.0)

        assert len(domain) == 4
        assert not domain.is_bounded()
        assert domain.area() == math.inf
        corners = [p for contour in domain for p in contour.vertices()]
        expected = [Point(1, 1), Point(-1, 1), Point(-1, -1), Point(1, -1)]
        assert len(corners) == 4
        for corner in expected:
            assert any(corner.almost_equals(p, TOL) for p in corners)


class TestSymmetry:
    """Reversing the curve and the distance gives the complementary domain."""

    @pytest.mark.parametrize(
        "source, distance",
        [
            (square(4), 0.25),
            (ContinuousCurve.polyline(L_HEXAGON, closed=True), 0.25),
        ],
    )
    def test_reversed_curve_negated_distance(self, source, distance) -> None:
        calculator = BufferCalculator()
        forward = calculator.compute_buffer(source, distance)
        backward = calculator.compute_buffer(source.reverse(), -distance)

        assert len(backward) == len(forward)
        assert backward.area() == pytest.approx(-forward.area())
        assert backward.perimeter() == pytest.approx(forward.perimeter())


class TestPointSets:
    """Buffers of point sets through the calculator."""

    def test_row_of_points_merges(self) -> None:
        points = [Point(0, 0), Point(1.5, 0), Point(3, 0)]
        domain = BufferCalculator().compute_point_set_buffer(points, 1.0)

        assert len(domain) == 1
        contour = domain.contours[0]
        lens_area = 2 * math.acos(0.75) - 0.75 * math.sqrt(1.75)
        assert contour.signed_area() == pytest.approx(3 * math.pi - 2 * lens_area)
        for p in contour.sample_points():
            assert min(p.distance(q) for q in points) >= 1.0 - TOL
