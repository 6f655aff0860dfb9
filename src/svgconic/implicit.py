"""Implicitization of line and quadratic Bezier segments into conic equations.

A conic equation is ``a*x^2 + b*xy + c*y^2 + d*x + e*y + f = 0``. Lines are
expressed as squared lines ``(y - m*x - h)^2 = 0`` so that every emitted record
has the same degree-2 form.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from svgconic.common import DEFAULT_DEGENERATE_EPS, EquationKind, InvalidSegmentError
from svgconic.geom import Interval, Point

logger = logging.getLogger(__name__)

Coefficients = Tuple[float, float, float, float, float, float]


###############################################################################
# ConicEquation
###############################################################################
@dataclass(frozen=True)
class ConicEquation:
    """
    Conic equation a*x^2 + b*xy + c*y^2 + d*x + e*y + f = 0 restricted to a bounding box.

    Attributes:
        a, b, c, d, e, f (float): The coefficients.
        x_domain (Optional[Interval]): Restriction on x. None for vertical lines.
        y_range (Optional[Interval]): Restriction on y. Set for quadratic curves and vertical lines.
        kind (EquationKind): "linear" for line segments, "parabolic" for quadratic curves.
    """

    # pylint: disable=too-many-instance-attributes
    a: float
    b: float
    c: float
    d: float
    e: float
    f: float
    x_domain: Optional[Interval] = None
    y_range: Optional[Interval] = None
    kind: EquationKind = "linear"

    @property
    def coefficients(self) -> Coefficients:
        """Tuple[float, ...]: The coefficients (a, b, c, d, e, f)."""
        return (self.a, self.b, self.c, self.d, self.e, self.f)

    @property
    def is_vertical_line(self) -> bool:
        """bool: True if the equation is the vertical line special case x = const."""
        return self.kind == "linear" and self.x_domain is None

    def evaluate(self, x: float, y: float) -> float:
        """Return the residual of the equation at (x, y)."""
        return self.a * x * x + self.b * x * y + self.c * y * y + self.d * x + self.e * y + self.f

    def residual(self, point: Point) -> float:
        """Return the residual of the equation at the given _point_."""
        return self.evaluate(point.x, point.y)

    def is_finite(self) -> bool:
        """Return True if all coefficients and restriction bounds are finite."""
        if not all(math.isfinite(value) for value in self.coefficients):
            return False
        return all(interval.is_finite() for interval in (self.x_domain, self.y_range) if interval is not None)

    def to_dict(self) -> dict:
        """Convert the ConicEquation instance to a dictionary."""
        return {
            "kind": self.kind,
            "coefficients": list(self.coefficients),
            "x_domain": self.x_domain.to_dict() if self.x_domain else None,
            "y_range": self.y_range.to_dict() if self.y_range else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> ConicEquation:
        """Create a ConicEquation instance from a dictionary."""
        x_domain = data.get("x_domain")
        y_range = data.get("y_range")
        return cls(
            *[float(value) for value in data["coefficients"]],
            x_domain=Interval.from_dict(x_domain) if x_domain else None,
            y_range=Interval.from_dict(y_range) if y_range else None,
            kind=data.get("kind", "linear"),
        )


###############################################################################
# ConicImplicitizer
###############################################################################
class ConicImplicitizer:
    """Collection of static methods converting canonical segments into conic equations."""

    @staticmethod
    def _check_finite(*points: Point) -> None:
        for point in points:
            if not point.is_finite():
                raise InvalidSegmentError(f"Segment contains a non-finite point {point}")

    @staticmethod
    def _line_coefficients(p0: Point, p1: Point) -> Coefficients:
        """Coefficients of (y - m*x - h)^2 = 0, possibly non-finite for (near) vertical lines."""
        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            slope = np.float64(p1.y - p0.y) / np.float64(p1.x - p0.x)
            intercept = np.float64(p0.y) - slope * np.float64(p0.x)
            coefficients = (
                slope * slope,
                -2.0 * slope,
                np.float64(1.0),
                2.0 * slope * intercept,
                -2.0 * intercept,
                intercept * intercept,
            )
        return tuple(float(value) for value in coefficients)  # type: ignore[return-value]

    @staticmethod
    def implicitize_line(p0: Point, p1: Point) -> ConicEquation:
        """
        Implicitize the line segment from _p0_ to _p1_.

        Normal case: m^2 x^2 - 2m xy + y^2 + 2mh x - 2h y + h^2 = 0 with the domain on x.
        If the slope, intercept or any derived coefficient is not finite (vertical or
        nearly vertical line) the equation x - x0 = 0 is returned with the restriction on y.

        Args:
            p0 (Point): Start point
            p1 (Point): End point

        Returns:
            ConicEquation: the linear equation

        Raises:
            InvalidSegmentError: If a point is not finite or both points coincide.
        """
        ConicImplicitizer._check_finite(p0, p1)

        coefficients = ConicImplicitizer._line_coefficients(p0, p1)
        if all(math.isfinite(value) for value in coefficients):
            return ConicEquation(*coefficients, x_domain=Interval.spanning(p0.x, p1.x), kind="linear")

        if p0.y == p1.y:
            raise InvalidSegmentError(f"Zero-length line segment at {p0}")
        return ConicEquation(0.0, 0.0, 0.0, 1.0, 0.0, -p0.x, y_range=Interval.spanning(p0.y, p1.y), kind="linear")

    @staticmethod
    def eliminate_through_x(p0: Point, p1: Point, p2: Point) -> Coefficients:
        """
        Closed form conic of the quadratic Bezier curve (p0, p1, p2).

        With Ax = 2(x1-x0), Ay = 2(y1-y0), Bx = x0-2x1+x2, By = y0-2y1+y2 and
        delta = By*Ax - Bx*Ay the parameter t = (By*X - Bx*Y) / delta (X = x-x0,
        Y = y-y0) is substituted into X(t). All coefficients carry the factor Bx,
        so they vanish if x(t) is linear in t.
        """
        x0, y0 = p0.x, p0.y
        ax = 2.0 * (p1.x - x0)
        ay = 2.0 * (p1.y - y0)
        bx = x0 - 2.0 * p1.x + p2.x
        by = y0 - 2.0 * p1.y + p2.y
        delta = by * ax - bx * ay

        a = -bx * by * by
        b = 2.0 * bx * bx * by
        c = -bx * bx * bx
        d = delta * delta - ax * by * delta + 2.0 * bx * by * by * x0 - 2.0 * bx * bx * by * y0
        e = ax * bx * delta - 2.0 * bx * bx * by * x0 + 2.0 * bx * bx * bx * y0
        f = (
            -x0 * delta * delta
            + (ax * by * x0 - ax * bx * y0) * delta
            - bx * by * by * x0 * x0
            + 2.0 * bx * bx * by * x0 * y0
            - bx * bx * bx * y0 * y0
        )
        return (a, b, c, d, e, f)

    @staticmethod
    def eliminate_through_y(p0: Point, p1: Point, p2: Point) -> Coefficients:
        """Same as eliminate_through_x() with the roles of x and y exchanged. Carries the factor By."""
        a, b, c, d, e, f = ConicImplicitizer.eliminate_through_x(
            Point(p0.y, p0.x), Point(p1.y, p1.x), Point(p2.y, p2.x)
        )
        return (c, b, a, e, d, f)

    @staticmethod
    def is_vanishing(coefficients: Coefficients, eps: float = DEFAULT_DEGENERATE_EPS) -> bool:
        """Return True if all _coefficients_ are within _eps_ of zero."""
        return all(abs(value) <= eps for value in coefficients)

    @staticmethod
    def unit_controls(p0: Point, p1: Point, p2: Point) -> Optional[Tuple[Point, Point, Point]]:
        """
        Translate the control points to _p0_ and scale them to unit extent.

        The closed form coefficients grow with up to the 6th power of the coordinates,
        so zero tests are done on the unit control points to be independent of scale.

        Returns:
            The unit control points, or None if all control points coincide.

        Raises:
            InvalidSegmentError: If the extent of the control points overflows.
        """
        extent = max(max(abs(p.x - p0.x), abs(p.y - p0.y)) for p in (p1, p2))
        if not math.isfinite(extent):
            raise InvalidSegmentError(f"Quadratic segment {p0} {p1} {p2} has a non-finite extent")
        if extent == 0.0:
            return None
        return tuple(Point((p.x - p0.x) / extent, (p.y - p0.y) / extent) for p in (p0, p1, p2))  # type: ignore

    @staticmethod
    def is_collinear(unit_p0: Point, unit_p1: Point, unit_p2: Point, eps: float = DEFAULT_DEGENERATE_EPS) -> bool:
        """Return True if the unit control points lie on a line (delta = By*Ax - Bx*Ay vanishes)."""
        ax = 2.0 * (unit_p1.x - unit_p0.x)
        ay = 2.0 * (unit_p1.y - unit_p0.y)
        bx = unit_p0.x - 2.0 * unit_p1.x + unit_p2.x
        by = unit_p0.y - 2.0 * unit_p1.y + unit_p2.y
        return abs(by * ax - bx * ay) <= eps

    @staticmethod
    def curve_extent(p0: Point, p1: Point, p2: Point) -> Tuple[Interval, Interval]:
        """Tight (x, y) intervals of the quadratic Bezier curve including interior extrema."""
        intervals = []
        for v0, v1, v2 in ((p0.x, p1.x, p2.x), (p0.y, p1.y, p2.y)):
            values = [v0, v2]
            denominator = v0 - 2.0 * v1 + v2
            if denominator != 0.0:
                t = (v0 - v1) / denominator
                if 0.0 < t < 1.0:
                    values.append((1.0 - t) * (1.0 - t) * v0 + 2.0 * (1.0 - t) * t * v1 + t * t * v2)
            intervals.append(Interval.spanning(*values))
        return intervals[0], intervals[1]

    @staticmethod
    def implicitize_quadratic(
        p0: Point, p1: Point, p2: Point, eps: float = DEFAULT_DEGENERATE_EPS
    ) -> ConicEquation:
        """
        Implicitize the quadratic Bezier curve (p0, p1, p2).

        The closed form of eliminate_through_x() is used. If it vanishes the parameter
        is eliminated through y instead. If that vanishes as well the control points
        are collinear and evenly spaced and the line from _p0_ to _p2_ is returned.
        The zero tests use the unit control points (see unit_controls()), the
        returned coefficients are those of the original points.

        Collinear but unevenly spaced control points give a squared line. It is
        restricted to the extent of the curve, which may double back before
        reaching the control point.

        Args:
            p0 (Point): Start point
            p1 (Point): Control point
            p2 (Point): End point
            eps (float): Zero test of the coefficients of the unit control points

        Returns:
            ConicEquation: "parabolic" equation restricted to the control point bounding box
                or the "linear" fallback

        Raises:
            InvalidSegmentError: If a point is not finite, a coefficient overflows or the
                fallback line has zero length.
        """
        ConicImplicitizer._check_finite(p0, p1, p2)

        unit = ConicImplicitizer.unit_controls(p0, p1, p2)
        if unit is None:
            return ConicImplicitizer.implicitize_line(p0, p2)

        if not ConicImplicitizer.is_vanishing(ConicImplicitizer.eliminate_through_x(*unit), eps):
            coefficients = ConicImplicitizer.eliminate_through_x(p0, p1, p2)
        elif not ConicImplicitizer.is_vanishing(ConicImplicitizer.eliminate_through_y(*unit), eps):
            coefficients = ConicImplicitizer.eliminate_through_y(p0, p1, p2)
        else:
            logger.debug("Collinear quadratic control points %s %s %s, using line", p0, p1, p2)
            return ConicImplicitizer.implicitize_line(p0, p2)

        if not all(math.isfinite(value) for value in coefficients):
            raise InvalidSegmentError(f"Quadratic segment {p0} {p1} {p2} produces non-finite coefficients")

        if ConicImplicitizer.is_collinear(*unit, eps=eps):
            x_domain, y_range = ConicImplicitizer.curve_extent(p0, p1, p2)
        else:
            x_domain = Interval.spanning(p0.x, p1.x, p2.x)
            y_range = Interval.spanning(p0.y, p1.y, p2.y)

        return ConicEquation(*coefficients, x_domain=x_domain, y_range=y_range, kind="parabolic")
