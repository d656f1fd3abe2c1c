"""Tests for domain models to verify they work correctly."""

import math
import pickle

import pytest

from circbuf.domain import (
    ArcElement,
    Contour,
    ContinuousCurve,
    CurveSet,
    Domain,
    Extent,
    LineElement,
    Point,
    PointElement,
    arc,
    arc_between,
    choose_position,
    element_from_dict,
    ray,
    ray_to,
    segment,
    straight_line,
)
from circbuf.exceptions import (
    CoincidentContoursError,
    CurveContinuityError,
    DegenerateInputError,
    GeometryError,
    SplittingError,
    UnboundedCurveError,
)


def unit_square() -> ContinuousCurve:
    return ContinuousCurve.polyline(
        [Point(0, 0), Point(1, 0), Point(1, 1), Point(0, 1)], closed=True
    )


class TestPoint:
    """Tests for Point class."""

    def test_point_creation(self) -> None:
        """Test basic point creation."""
        p = Point(100.0, 200.0)
        assert p.x == 100.0
        assert p.y == 200.0

    def test_point_arithmetic(self) -> None:
        """Test vector addition, subtraction and scaling."""
        a = Point(1.0, 2.0)
        b = Point(3.0, -1.0)
        assert a + b == Point(4.0, 1.0)
        assert a - b == Point(-2.0, 3.0)
        assert a * 2.0 == Point(2.0, 4.0)
        assert 2.0 * a == Point(2.0, 4.0)
        assert -a == Point(-1.0, -2.0)

    def test_dot_and_cross(self) -> None:
        """Cross product is positive when the other vector points left."""
        x = Point(1.0, 0.0)
        y = Point(0.0, 1.0)
        assert x.dot(y) == 0.0
        assert x.cross(y) == 1.0
        assert y.cross(x) == -1.0

    def test_distance(self) -> None:
        """Test euclidean distance and tolerance comparison."""
        a = Point(0.0, 0.0)
        b = Point(3.0, 4.0)
        assert a.distance(b) == 5.0
        assert a.almost_equals(Point(1e-9, 0.0), 1e-6)
        assert not a.almost_equals(b, 1e-6)

    def test_polar(self) -> None:
        """Test point construction from center, radius and angle."""
        p = Point.polar(Point(1.0, 1.0), 2.0, math.pi / 2)
        assert p.x == pytest.approx(1.0)
        assert p.y == pytest.approx(3.0)

    def test_point_to_tuple(self) -> None:
        """Test point to tuple conversion."""
        assert Point(100.0, 200.0).to_tuple() == (100.0, 200.0)

    def test_point_serialization(self) -> None:
        """Test point serialization and deserialization."""
        p1 = Point(100.0, 200.0)
        p2 = Point.from_dict(p1.to_dict())
        assert p2 == p1

    def test_point_immutable(self) -> None:
        """Test that point is immutable."""
        p = Point(100.0, 200.0)
        with pytest.raises(AttributeError):
            p.x = 300.0  # type: ignore


class TestLineElement:
    """Tests for LineElement class."""

    def test_segment_endpoints(self) -> None:
        """Test segment endpoints and length."""
        s = segment(Point(0, 0), Point(2, 0))
        assert s.first_point == Point(0, 0)
        assert s.last_point == Point(2, 0)
        assert s.length == 2.0
        assert s.is_bounded()

    def test_parallel_moves_to_the_right(self) -> None:
        """Positive offsets move a segment to the right of its direction."""
        s = segment(Point(0, 0), Point(2, 0)).parallel(1.0)
        assert s.first_point.almost_equals(Point(0, -1), 1e-12)
        assert s.last_point.almost_equals(Point(2, -1), 1e-12)

        left = segment(Point(0, 0), Point(2, 0)).parallel(-1.0)
        assert left.first_point.almost_equals(Point(0, 1), 1e-12)

    def test_reverse(self) -> None:
        """Test that reversing swaps the endpoints."""
        s = segment(Point(0, 0), Point(2, 1)).reverse()
        assert s.first_point == Point(2, 1)
        assert s.last_point == Point(0, 0)

    def test_is_inside_is_left_side(self) -> None:
        """Test that the inside of a line is its left side."""
        s = segment(Point(0, 0), Point(2, 0))
        assert s.is_inside(Point(1, 1))
        assert not s.is_inside(Point(1, -1))

    def test_project_clamps_to_range(self) -> None:
        """Test that projections beyond the ends snap to the ends."""
        s = segment(Point(0, 0), Point(2, 0))
        assert s.project(Point(1, 3)) == pytest.approx(0.5)
        assert s.project(Point(5, 3)) == 1.0
        assert s.project(Point(-5, 3)) == 0.0
        assert s.distance(Point(1, 3)) == pytest.approx(3.0)

    def test_sub(self) -> None:
        """Test extraction of a sub-segment."""
        s = segment(Point(0, 0), Point(4, 0)).sub(0.25, 0.5)
        assert s.first_point == Point(1, 0)
        assert s.last_point == Point(2, 0)

    def test_ray_has_no_last_point(self) -> None:
        """Test that asking for an infinite end raises."""
        r = ray(Point(0, 0), Point(1, 0))
        assert r.first_point == Point(0, 0)
        assert not r.is_bounded()
        with pytest.raises(UnboundedCurveError):
            _ = r.last_point

    def test_left_infinite_ray(self) -> None:
        """Test a ray arriving at a point from infinity."""
        r = ray_to(Point(0, 0), Point(1, 0))
        assert r.last_point == Point(0, 0)
        with pytest.raises(UnboundedCurveError):
            _ = r.first_point

    def test_zero_direction_is_degenerate(self) -> None:
        """Test that a zero direction collapses instead of producing NaNs."""
        line = LineElement(Point(1, 1), Point(0, 0))
        assert line.is_degenerate(1e-6)
        with pytest.raises(DegenerateInputError):
            line.normal()
        assert line.parallel(1.0) == PointElement(Point(1, 1))


class TestArcElement:
    """Tests for ArcElement class."""

    def test_quarter_arc_endpoints(self) -> None:
        """Test endpoints and length of a quarter arc."""
        a = arc(Point(0, 0), 1.0, 0.0, math.pi / 2)
        assert a.first_point.almost_equals(Point(1, 0), 1e-12)
        assert a.last_point.almost_equals(Point(0, 1), 1e-12)
        assert a.length == pytest.approx(math.pi / 2)
        assert a.t1 == pytest.approx(math.pi / 2)

    def test_parallel_of_ccw_arc_grows(self) -> None:
        """The right side of a counter-clockwise arc is outward."""
        a = arc(Point(0, 0), 1.0, 0.0, math.pi / 2)
        outer = a.parallel(1.0)
        assert isinstance(outer, ArcElement)
        assert outer.radius == pytest.approx(2.0)

    def test_parallel_of_cw_arc_shrinks(self) -> None:
        """The right side of a clockwise arc is inward."""
        a = arc(Point(0, 0), 1.0, 0.0, -math.pi / 2)
        inner = a.parallel(0.5)
        assert isinstance(inner, ArcElement)
        assert inner.radius == pytest.approx(0.5)

    def test_parallel_collapses_to_center(self) -> None:
        """Test that an offset past the center yields a point element."""
        a = arc(Point(3, 4), 1.0, 0.0, math.pi)
        assert a.parallel(-2.0) == PointElement(Point(3, 4))

    def test_reverse(self) -> None:
        """Test that reversing swaps endpoints and orientation."""
        a = arc(Point(0, 0), 1.0, 0.0, math.pi / 2).reverse()
        assert not a.ccw
        assert a.first_point.almost_equals(Point(0, 1), 1e-12)
        assert a.last_point.almost_equals(Point(1, 0), 1e-12)

    def test_is_inside_depends_on_orientation(self) -> None:
        """The inside of an arc is the disk when ccw, the exterior when cw."""
        ccw = arc(Point(0, 0), 1.0, 0.0, math.pi)
        cw = ccw.reverse()
        assert ccw.is_inside(Point(0.1, 0.1))
        assert not cw.is_inside(Point(0.1, 0.1))
        assert cw.is_inside(Point(3, 3))

    def test_project_outside_range_snaps_to_endpoint(self) -> None:
        """Test projection of points beyond the swept range."""
        a = arc(Point(0, 0), 1.0, 0.0, math.pi / 2)
        assert a.project(Point(0, 5)) == pytest.approx(math.pi / 2)
        assert a.project(Point(2, -0.1)) == 0.0

    def test_sub(self) -> None:
        """Test extraction of a sub-arc."""
        a = arc(Point(0, 0), 1.0, 0.0, math.pi / 2).sub(0.0, math.pi / 4)
        half = math.sqrt(0.5)
        assert a.last_point.almost_equals(Point(half, half), 1e-12)

    def test_arc_between(self) -> None:
        """Test arc construction from center and two points."""
        ccw = arc_between(Point(0, 0), Point(1, 0), Point(0, 1), ccw=True)
        assert ccw.extent == pytest.approx(math.pi / 2)
        cw = arc_between(Point(0, 0), Point(1, 0), Point(0, 1), ccw=False)
        assert cw.extent == pytest.approx(-3 * math.pi / 2)
        empty = arc_between(Point(0, 0), Point(1, 0), Point(1, 0), ccw=True)
        assert empty.length == 0.0

    def test_element_serialization(self) -> None:
        """Test that every element kind survives a dictionary round-trip."""
        elements = [
            segment(Point(0, 0), Point(1, 2)),
            arc(Point(1, 1), 2.0, 0.5, -1.0),
            PointElement(Point(3, 3)),
            straight_line(Point(0, 0), Point(1, 1)),
        ]
        for element in elements:
            assert element_from_dict(element.to_dict()) == element


class TestContinuousCurve:
    """Tests for ContinuousCurve class."""

    def test_polyline_closes_polygon(self) -> None:
        """Test that a closed polyline gets a closing segment."""
        square = unit_square()
        assert square.closed
        assert len(square) == 4
        assert square.last_point == Point(0, 0)
        assert square.length == pytest.approx(4.0)

    def test_signed_area(self) -> None:
        """Test orientation-dependent area of polygons."""
        square = unit_square()
        assert square.signed_area() == pytest.approx(1.0)
        assert square.reverse().signed_area() == pytest.approx(-1.0)

    def test_circle_area(self) -> None:
        """Test area of full circles away from the origin."""
        circle = ContinuousCurve.circle(Point(2, 3), 1.0)
        assert circle.signed_area() == pytest.approx(math.pi)
        assert ContinuousCurve.circle(Point(2, 3), 1.0, ccw=False).signed_area() == pytest.approx(
            -math.pi
        )

    def test_half_disk_area(self) -> None:
        """Test area of a contour mixing an arc and a segment."""
        half_disk = ContinuousCurve(
            (arc(Point(0, 0), 1.0, 0.0, math.pi), segment(Point(-1, 0), Point(1, 0))),
            closed=True,
        )
        assert half_disk.signed_area() == pytest.approx(math.pi / 2)

    def test_open_curve_has_no_area(self) -> None:
        """Test that open curves enclose nothing."""
        curve = ContinuousCurve.polyline([Point(0, 0), Point(1, 0), Point(1, 1)])
        assert curve.signed_area() == 0.0

    def test_extent(self) -> None:
        """Test classification of curve ends."""
        assert unit_square().extent == Extent.BOUNDED
        assert ContinuousCurve((ray(Point(0, 0), Point(1, 0)),)).extent == Extent.RIGHT_INFINITE
        assert ContinuousCurve((ray_to(Point(0, 0), Point(1, 0)),)).extent == Extent.LEFT_INFINITE
        assert (
            ContinuousCurve((straight_line(Point(0, 0), Point(1, 0)),)).extent
            == Extent.DOUBLY_INFINITE
        )

    def test_vertices(self) -> None:
        """Test that shared junctions are listed once."""
        open_curve = ContinuousCurve.polyline([Point(0, 0), Point(1, 0), Point(1, 1)])
        assert open_curve.vertices() == [Point(0, 0), Point(1, 0), Point(1, 1)]
        assert len(unit_square().vertices()) == 4

    def test_sample_points_skip_connectors(self) -> None:
        """Test that connector segments are not sampled, endpoints included."""
        curve = ContinuousCurve(
            (
                segment(Point(0, 0), Point(2, 0)),
                segment(Point(2, 0), Point(2, 2), connector=True),
            )
        )
        samples = curve.sample_points()
        assert samples == [Point(0, 0), Point(1, 0)]

    def test_sample_points_skip_junction_after_connector(self) -> None:
        curve = ContinuousCurve(
            (
                segment(Point(0, 0), Point(2, 0), connector=True),
                segment(Point(2, 0), Point(2, 2)),
                segment(Point(2, 2), Point(0, 0), connector=True),
            ),
            True,
        )
        assert curve.sample_points() == [Point(2, 1)]

    def test_sample_points_of_connectors_only(self) -> None:
        curve = ContinuousCurve((segment(Point(0, 0), Point(2, 0), connector=True),))
        assert curve.sample_points() == [Point(0, 0), Point(2, 0)]

    def test_connector_flag_preserved(self) -> None:
        bevel = segment(Point(0, 0), Point(1, 1), connector=True)
        assert bevel.reverse().connector
        assert element_from_dict(bevel.to_dict()).connector
        assert not segment(Point(0, 0), Point(1, 1)).connector

    def test_singular_points(self) -> None:
        """Test that only tangent discontinuities are reported."""
        assert len(unit_square().singular_points()) == 4
        assert ContinuousCurve.circle(Point(0, 0), 1.0).singular_points() == []

        straight = ContinuousCurve.polyline([Point(0, 0), Point(1, 0), Point(2, 0)])
        assert straight.singular_points() == [Point(0, 0), Point(2, 0)]

    def test_check_continuity(self) -> None:
        """Test detection of disconnected consecutive elements."""
        unit_square().check_continuity(1e-6)

        broken = ContinuousCurve(
            (segment(Point(0, 0), Point(1, 0)), segment(Point(1, 0.5), Point(2, 0)))
        )
        with pytest.raises(CurveContinuityError) as exc_info:
            broken.check_continuity(1e-6)
        assert exc_info.value.index == 0
        assert exc_info.value.gap == pytest.approx(0.5)

    def test_empty_curve_has_no_endpoints(self) -> None:
        """Test endpoint access on an empty curve."""
        curve = ContinuousCurve()
        assert curve.is_empty()
        with pytest.raises(GeometryError):
            _ = curve.first_point

    def test_curve_serialization(self) -> None:
        """Test curve serialization and deserialization."""
        curve = ContinuousCurve(
            (segment(Point(0, 0), Point(1, 0)), arc(Point(1, 1), 1.0, -math.pi / 2, math.pi)),
        )
        assert ContinuousCurve.from_dict(curve.to_dict()) == curve

    def test_reverse_keeps_type(self) -> None:
        """Test that reversing a contour yields a contour."""
        contour = Contour.of(unit_square())
        reversed_contour = contour.reverse()
        assert isinstance(reversed_contour, Contour)
        assert reversed_contour.signed_area() == pytest.approx(-1.0)


class TestChoosePosition:
    """Tests for representative parameter selection."""

    def test_bounded_range(self) -> None:
        assert choose_position(0.0, 2.0) == 1.0

    def test_infinite_ranges(self) -> None:
        assert choose_position(-math.inf, 3.0) == 2.0
        assert choose_position(3.0, math.inf) == 4.0
        assert choose_position(-math.inf, math.inf) == 0.0


class TestCurveSetAndDomain:
    """Tests for CurveSet and Domain classes."""

    def test_curve_set(self) -> None:
        """Test multi-piece curve helpers."""
        curves = CurveSet(
            (
                ContinuousCurve.polyline([Point(0, 0), Point(1, 0)]),
                ContinuousCurve.polyline([Point(0, 1), Point(1, 1)]),
            )
        )
        assert len(curves) == 2
        assert len(curves.vertices()) == 4
        assert CurveSet.from_dict(curves.to_dict()) == curves

    def test_domain_area_and_perimeter(self) -> None:
        """Test that holes subtract from the area."""
        outer = Contour.of(
            ContinuousCurve.polyline(
                [Point(0, 0), Point(4, 0), Point(4, 4), Point(0, 4)], closed=True
            )
        )
        hole = Contour.of(
            ContinuousCurve.polyline(
                [Point(1, 1), Point(3, 1), Point(3, 3), Point(1, 3)], closed=True
            ).reverse()
        )
        domain = Domain((outer, hole))
        assert domain.is_bounded()
        assert domain.area() == pytest.approx(12.0)
        assert domain.perimeter() == pytest.approx(24.0)
        assert domain.reverse().area() == pytest.approx(-12.0)
        assert Domain.from_dict(domain.to_dict()) == domain

    def test_unbounded_domain(self) -> None:
        """Test that a half-plane has infinite area."""
        half_plane = Domain((Contour((straight_line(Point(0, 0), Point(1, 0)),)),))
        assert not half_plane.is_bounded()
        assert half_plane.area() == math.inf

    def test_empty_domain(self) -> None:
        """Test the empty domain."""
        domain = Domain()
        assert domain.is_empty()
        assert domain.area() == 0.0


class TestExceptions:
    """Tests for exception pickling across worker processes."""

    def test_exceptions_survive_pickling(self) -> None:
        errors = [
            CurveContinuityError(2, 0.5),
            DegenerateInputError("line", "zero-length direction vector"),
            UnboundedCurveError("last"),
            SplittingError("no outgoing branch"),
            CoincidentContoursError(0, 1),
        ]
        for error in errors:
            restored = pickle.loads(pickle.dumps(error))
            assert type(restored) is type(error)
            assert str(restored) == str(error)

    def test_coincident_contours_is_splitting_error(self) -> None:
        error = CoincidentContoursError(0, 3)
        assert isinstance(error, SplittingError)
        assert "0" in error.reason and "3" in error.reason
