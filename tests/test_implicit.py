"""Test module for ConicEquation and ConicImplicitizer in svgconic.implicit

The tests are run using pytest.
These tests ensure that line and quadratic segments are converted into conic
equations which vanish on the segment, including all degenerate fallbacks.
"""

import math

import numpy as np
import pytest

from svgconic.bezier import BezierCurve
from svgconic.common import InvalidSegmentError
from svgconic.geom import Interval, Point
from svgconic.implicit import ConicEquation, ConicImplicitizer

###############################################################################
# Line Tests
###############################################################################


class TestImplicitizeLine:
    """Test implicitization of line segments."""

    def test_horizontal_line(self):
        """Line (0,0)-(4,0) gives y^2 = 0 restricted to 0 <= x <= 4."""
        equation = ConicImplicitizer.implicitize_line(Point(0.0, 0.0), Point(4.0, 0.0))

        assert equation.coefficients == pytest.approx((0.0, 0.0, 1.0, 0.0, 0.0, 0.0))
        assert equation.x_domain == Interval(0.0, 4.0)
        assert equation.y_range is None
        assert equation.kind == "linear"
        assert not equation.is_vertical_line

    def test_vertical_line(self):
        """Line (2,0)-(2,5) falls back to x - 2 = 0 restricted to 0 <= y <= 5."""
        equation = ConicImplicitizer.implicitize_line(Point(2.0, 0.0), Point(2.0, 5.0))

        assert equation.coefficients == (0.0, 0.0, 0.0, 1.0, 0.0, -2.0)
        assert equation.x_domain is None
        assert equation.y_range == Interval(0.0, 5.0)
        assert equation.is_vertical_line

    def test_vertical_line_downwards(self):
        """The range of a vertical line is ordered even if the line points down."""
        equation = ConicImplicitizer.implicitize_line(Point(-1.0, 5.0), Point(-1.0, 1.0))
        assert equation.y_range == Interval(1.0, 5.0)
        assert equation.residual(Point(-1.0, 3.0)) == 0.0

    def test_nearly_vertical_line(self):
        """Coefficients overflowing to infinity use the vertical fallback."""
        equation = ConicImplicitizer.implicitize_line(Point(0.0, 0.0), Point(1e-200, 1.0))

        assert equation.is_vertical_line
        assert equation.is_finite()
        assert equation.y_range == Interval(0.0, 1.0)

    def test_sloped_line(self):
        """Line (1,2)-(3,8): m = 3, h = -1."""
        equation = ConicImplicitizer.implicitize_line(Point(1.0, 2.0), Point(3.0, 8.0))

        assert equation.coefficients == pytest.approx((9.0, -6.0, 1.0, -6.0, 2.0, 1.0))
        assert equation.x_domain == Interval(1.0, 3.0)

    @pytest.mark.parametrize(
        "p0, p1",
        [
            (Point(1.0, 2.0), Point(3.0, 8.0)),
            (Point(-4.5, 0.25), Point(7.0, -3.0)),
            (Point(100.0, 100.0), Point(0.0, 0.0)),
        ],
    )
    def test_line_vanishes_on_segment(self, p0, p1):
        """The equation vanishes on every point of the segment."""
        equation = ConicImplicitizer.implicitize_line(p0, p1)
        for t in np.linspace(0.0, 1.0, 11):
            point = Point(p0.x + t * (p1.x - p0.x), p0.y + t * (p1.y - p0.y))
            assert equation.residual(point) == pytest.approx(0.0, abs=1e-9)
            assert equation.x_domain.contains(point.x, tolerance=1e-12)

    def test_coincident_points(self):
        """A zero-length line has no equation."""
        with pytest.raises(InvalidSegmentError):
            ConicImplicitizer.implicitize_line(Point(1.0, 1.0), Point(1.0, 1.0))

    def test_non_finite_point(self):
        """Non-finite input points are rejected."""
        with pytest.raises(InvalidSegmentError):
            ConicImplicitizer.implicitize_line(Point(0.0, 0.0), Point(math.nan, 1.0))


###############################################################################
# Quadratic Tests
###############################################################################


class TestImplicitizeQuadratic:
    """Test implicitization of quadratic Bezier curves."""

    def test_symmetric_parabola(self):
        """Quadratic (0,0) (1,2) (2,0) is the parabola y = 2x - x^2 scaled by 64."""
        p0, p1, p2 = Point(0.0, 0.0), Point(1.0, 2.0), Point(2.0, 0.0)
        equation = ConicImplicitizer.implicitize_quadratic(p0, p1, p2)

        assert equation.kind == "parabolic"
        assert equation.coefficients == pytest.approx((64.0, 0.0, 0.0, -128.0, 64.0, 0.0))
        assert not ConicImplicitizer.is_vanishing(equation.coefficients)
        assert equation.residual(p0) == pytest.approx(0.0)
        assert equation.residual(p2) == pytest.approx(0.0)
        assert equation.residual(Point(1.0, 1.0)) == pytest.approx(0.0)
        assert equation.x_domain == Interval(0.0, 2.0)
        assert equation.y_range == Interval(0.0, 2.0)

    def test_collinear_falls_back_to_line(self):
        """Quadratic (0,0) (1,1) (2,2) degenerates to the line y = x."""
        equation = ConicImplicitizer.implicitize_quadratic(Point(0.0, 0.0), Point(1.0, 1.0), Point(2.0, 2.0))

        assert equation.kind == "linear"
        assert equation.coefficients == pytest.approx((1.0, -2.0, 1.0, 0.0, 0.0, 0.0))
        assert equation.x_domain == Interval(0.0, 2.0)
        assert equation.y_range is None

    def test_collinear_vertical_falls_back_to_vertical_line(self):
        """Evenly spaced control points on a vertical line give x = const."""
        equation = ConicImplicitizer.implicitize_quadratic(Point(3.0, 0.0), Point(3.0, 2.0), Point(3.0, 4.0))
        assert equation.is_vertical_line
        assert equation.coefficients == (0.0, 0.0, 0.0, 1.0, 0.0, -3.0)

    def test_unevenly_spaced_collinear_is_squared_line(self):
        """Collinear but unevenly spaced control points give the squared line."""
        equation = ConicImplicitizer.implicitize_quadratic(Point(0.0, 0.0), Point(1.0, 1.0), Point(4.0, 4.0))

        assert equation.coefficients == pytest.approx((-8.0, 16.0, -8.0, 0.0, 0.0, 0.0))
        assert equation.residual(Point(2.5, 2.5)) == pytest.approx(0.0)

    def test_doubled_back_collinear_is_restricted_to_curve(self):
        """A collinear curve turning back before its control point is restricted to the turning point."""
        equation = ConicImplicitizer.implicitize_quadratic(Point(0.0, 0.0), Point(1.0, 1.0), Point(0.0, 0.0))

        assert equation.kind == "parabolic"
        assert equation.x_domain == Interval(0.0, 0.5)
        assert equation.y_range == Interval(0.0, 0.5)
        assert equation.residual(Point(0.25, 0.25)) == pytest.approx(0.0)

    def test_unevenly_spaced_collinear_keeps_full_box(self):
        """Without turning point the restriction of a collinear curve spans the end points."""
        equation = ConicImplicitizer.implicitize_quadratic(Point(0.0, 0.0), Point(1.0, 1.0), Point(4.0, 4.0))
        assert equation.x_domain == Interval(0.0, 4.0)
        assert equation.y_range == Interval(0.0, 4.0)

    @pytest.mark.parametrize("scale", [1e3, 1.0, 1e-2, 1e-4])
    def test_degeneracy_is_scale_invariant(self, scale):
        """The same curve stays parabolic at every scale."""
        controls = [(0.0, 0.0), (0.5 * scale, 2.0 * scale), (2.0 * scale, 0.3 * scale)]
        p0, p1, p2 = (Point(*point) for point in controls)
        equation = ConicImplicitizer.implicitize_quadratic(p0, p1, p2)
        magnitude = max(abs(value) for value in equation.coefficients) * scale * scale

        assert equation.kind == "parabolic"
        assert equation.x_domain == Interval(0.0, 2.0 * scale)
        for x, y in BezierCurve.evaluate_quadratic(controls, np.linspace(0.0, 1.0, 11)):
            assert equation.evaluate(x, y) / magnitude == pytest.approx(0.0, abs=1e-9)

    @pytest.mark.parametrize("scale", [1e3, 1e-4])
    def test_collinear_fallback_is_scale_invariant(self, scale):
        """Evenly spaced collinear control points fall back to the line at every scale."""
        equation = ConicImplicitizer.implicitize_quadratic(
            Point(0.0, 0.0), Point(scale, scale), Point(2.0 * scale, 2.0 * scale)
        )
        assert equation.kind == "linear"

    def test_collapsed_quadratic(self):
        """A quadratic collapsed to one point has no equation."""
        point = Point(2.0, 2.0)
        with pytest.raises(InvalidSegmentError):
            ConicImplicitizer.implicitize_quadratic(point, point, point)

    @pytest.mark.parametrize(
        "controls",
        [
            [(0.0, 0.0), (1.0, 3.0), (4.0, 1.0)],
            [(10.0, -5.0), (-3.0, 7.5), (2.0, 12.0)],
            [(0.0, 0.0), (5.0, 0.0), (5.0, 5.0)],
            [(1.0, 1.0), (2.0, 4.0), (3.0, 1.5)],
        ],
    )
    def test_quadratic_vanishes_on_curve(self, controls):
        """The equation vanishes on sample points of the curve within the bounding box."""
        p0, p1, p2 = (Point(*point) for point in controls)
        equation = ConicImplicitizer.implicitize_quadratic(p0, p1, p2)
        scale = max(abs(value) for value in equation.coefficients)

        assert equation.kind == "parabolic"
        for x, y in BezierCurve.evaluate_quadratic(controls, np.linspace(0.0, 1.0, 21)):
            assert equation.evaluate(x, y) / scale == pytest.approx(0.0, abs=1e-9)
            assert equation.x_domain.contains(x, tolerance=1e-12)
            assert equation.y_range.contains(y, tolerance=1e-12)

    def test_eliminate_through_x_vanishes_for_linear_x(self):
        """With x(t) linear in t all closed form coefficients vanish."""
        coefficients = ConicImplicitizer.eliminate_through_x(Point(0.0, 0.0), Point(1.0, 2.0), Point(2.0, 0.0))
        assert ConicImplicitizer.is_vanishing(coefficients)

    def test_eliminate_through_y_vanishes_for_linear_y(self):
        """With y(t) linear in t the y closed form vanishes."""
        coefficients = ConicImplicitizer.eliminate_through_y(Point(0.0, 0.0), Point(2.0, 1.0), Point(0.0, 2.0))
        assert ConicImplicitizer.is_vanishing(coefficients)

    def test_near_collinear_within_eps(self):
        """Coefficients below the zero test use the line fallback."""
        equation = ConicImplicitizer.implicitize_quadratic(
            Point(0.0, 0.0), Point(1.0, 1.0 + 1e-6), Point(2.0, 2.0), eps=1e-3
        )
        assert equation.kind == "linear"

    def test_non_finite_point(self):
        """Non-finite control points are rejected."""
        with pytest.raises(InvalidSegmentError):
            ConicImplicitizer.implicitize_quadratic(Point(0.0, 0.0), Point(math.inf, 1.0), Point(2.0, 0.0))

    def test_overflowing_coefficients(self):
        """Coefficients overflowing to infinity are rejected."""
        with pytest.raises(InvalidSegmentError):
            ConicImplicitizer.implicitize_quadratic(Point(0.0, 0.0), Point(1e200, 3e200), Point(4e200, 1e200))


###############################################################################
# ConicEquation Tests
###############################################################################


class TestConicEquation:
    """Test class for ConicEquation functionality."""

    def test_evaluate(self):
        """evaluate() computes a x^2 + b xy + c y^2 + d x + e y + f."""
        equation = ConicEquation(1.0, 2.0, 3.0, 4.0, 5.0, 6.0)
        assert equation.evaluate(1.0, 2.0) == 1.0 + 4.0 + 12.0 + 4.0 + 10.0 + 6.0

    def test_is_finite(self):
        """Equations with non-finite coefficients or bounds are not finite."""
        assert ConicEquation(1.0, 0.0, 0.0, 0.0, 0.0, 0.0, x_domain=Interval(0.0, 1.0)).is_finite()
        assert not ConicEquation(math.inf, 0.0, 0.0, 0.0, 0.0, 0.0).is_finite()
        assert not ConicEquation(1.0, 0.0, 0.0, 0.0, 0.0, 0.0, y_range=Interval(0.0, math.inf)).is_finite()

    def test_dict_round_trip(self):
        """to_dict() and from_dict() are inverse."""
        equation = ConicEquation(
            64.0, 0.0, 0.0, -128.0, 64.0, 0.0, Interval(0.0, 2.0), Interval(0.0, 2.0), kind="parabolic"
        )
        data = equation.to_dict()

        assert data["kind"] == "parabolic"
        assert data["coefficients"] == [64.0, 0.0, 0.0, -128.0, 64.0, 0.0]
        assert ConicEquation.from_dict(data) == equation

    def test_dict_without_restriction(self):
        """Missing restrictions are restored as None."""
        equation = ConicEquation.from_dict({"coefficients": [0, 0, 0, 1, 0, -2], "y_range": {"lower": 0, "upper": 5}})
        assert equation.is_vertical_line
        assert equation.y_range == Interval(0.0, 5.0)
