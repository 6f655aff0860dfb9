"""Bezier curve handling utilities for flattening cubic curves into quadratic chains."""

from __future__ import annotations

import logging
import math
from typing import List, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from svgconic.common import DEFAULT_MAX_SUBDIVISIONS
from svgconic.geom import Point

logger = logging.getLogger(__name__)

# Parameters used to measure the deviation of a quadratic piece from its cubic piece.
# Includes t = 1/2 -+ sqrt(3)/6 where the mid-point approximation error peaks.
_DEVIATION_PARAMS: NDArray[np.float64] = np.unique(
    np.concatenate(
        (
            np.linspace(0.0, 1.0, 17, dtype=np.float64),
            np.array([0.5 - math.sqrt(3.0) / 6.0, 0.5 + math.sqrt(3.0) / 6.0], dtype=np.float64),
        )
    )
)
_TANGENT_PARALLEL_EPS: float = 1.0e-12

QuadraticPiece = Tuple[Point, Point, Point]
ControlPoints = Union[Sequence[Tuple[float, float]], Sequence[Point], NDArray[np.float64]]


class BezierCurve:
    """Class to handle quadratic and cubic Bezier curve operations.

    Provides NumPy-vectorized evaluation and subdivision of Bezier curves and the
    reduction of a cubic curve to a C0-continuous chain of quadratic curves.
    """

    @staticmethod
    def _control_array(points: ControlPoints, count: int) -> NDArray[np.float64]:
        """Return the given control points as (count, 2) float array."""
        if isinstance(points, np.ndarray) and points.dtype == np.float64:
            points_array = points
        else:
            points_array = np.asarray(points, dtype=np.float64)
        if points_array.ndim != 2 or points_array.shape[1] < 2:
            raise ValueError("Bezier control points require (x, y) formatted points.")
        if points_array.shape[0] != count:
            raise ValueError(f"Expected {count} control points, got {points_array.shape[0]}.")
        return points_array[:, :2]

    @staticmethod
    def _param_array(t: Union[float, Sequence[float], NDArray[np.float64]]) -> NDArray[np.float64]:
        return np.atleast_1d(np.asarray(t, dtype=np.float64))

    @classmethod
    def evaluate_cubic(
        cls, points: ControlPoints, t: Union[float, Sequence[float], NDArray[np.float64]]
    ) -> NDArray[np.float64]:
        """
        Evaluate a cubic Bezier curve at the given parameter(s).
        B(t) = (1-t)^3*P0 + 3*(1-t)^2*t*P1 + 3*(1-t)*t^2*P2 + t^3*P3

        Returns:
            NDArray[np.float64] of shape (len(t), 2)
        """
        ctrl = cls._control_array(points, 4)
        params = cls._param_array(t)
        omt = 1.0 - params
        weights = np.stack(
            (omt * omt * omt, 3.0 * omt * omt * params, 3.0 * omt * params * params, params * params * params),
            axis=1,
        )
        return weights @ ctrl

    @classmethod
    def evaluate_cubic_derivative(
        cls, points: ControlPoints, t: Union[float, Sequence[float], NDArray[np.float64]]
    ) -> NDArray[np.float64]:
        """
        Evaluate the first derivative of a cubic Bezier curve at the given parameter(s).
        B'(t) = 3*(1-t)^2*(P1-P0) + 6*(1-t)*t*(P2-P1) + 3*t^2*(P3-P2)

        Returns:
            NDArray[np.float64] of shape (len(t), 2)
        """
        ctrl = cls._control_array(points, 4)
        params = cls._param_array(t)
        omt = 1.0 - params
        deltas = np.diff(ctrl, axis=0)
        weights = np.stack((3.0 * omt * omt, 6.0 * omt * params, 3.0 * params * params), axis=1)
        return weights @ deltas

    @classmethod
    def evaluate_quadratic(
        cls, points: ControlPoints, t: Union[float, Sequence[float], NDArray[np.float64]]
    ) -> NDArray[np.float64]:
        """
        Evaluate a quadratic Bezier curve at the given parameter(s).
        B(t) = (1-t)^2*P0 + 2*(1-t)*t*P1 + t^2*P2

        Returns:
            NDArray[np.float64] of shape (len(t), 2)
        """
        ctrl = cls._control_array(points, 3)
        params = cls._param_array(t)
        omt = 1.0 - params
        weights = np.stack((omt * omt, 2.0 * omt * params, params * params), axis=1)
        return weights @ ctrl

    @classmethod
    def split_cubic_uniform(cls, points: ControlPoints, pieces: int) -> NDArray[np.float64]:
        """Split a cubic Bezier curve into _pieces_ sub-curves of equal parameter length.

        Junction points are computed once and shared by neighbouring sub-curves, so
        the chain is C0-continuous by construction. The first and last junction are
        the original end points.

        Args:
            points: The four control points of the cubic curve.
            pieces: Number of sub-curves (>= 1).

        Returns:
            Array of shape (pieces, 4, 2) holding the control points of each sub-curve.

        Raises:
            ValueError: If _pieces_ is smaller than 1.
        """
        if pieces < 1:
            raise ValueError(f"Number of pieces must be at least 1, got {pieces}")
        ctrl = cls._control_array(points, 4)

        params = np.linspace(0.0, 1.0, pieces + 1, dtype=np.float64)
        knots = cls.evaluate_cubic(ctrl, params)
        knots[0] = ctrl[0]
        knots[-1] = ctrl[3]
        # Derivative scaled to the parameter length of a single piece
        handles = cls.evaluate_cubic_derivative(ctrl, params) / (3.0 * pieces)

        result = np.empty((pieces, 4, 2), dtype=np.float64)
        result[:, 0] = knots[:-1]
        result[:, 1] = knots[:-1] + handles[:-1]
        result[:, 2] = knots[1:] - handles[1:]
        result[:, 3] = knots[1:]
        return result

    @staticmethod
    def _deviation(cubics: NDArray[np.float64], controls: NDArray[np.float64]) -> NDArray[np.float64]:
        """Maximum parametric distance between each cubic piece and its quadratic (c0, control, c3)."""
        params = _DEVIATION_PARAMS
        omt = 1.0 - params
        cubic_weights = np.stack(
            (omt * omt * omt, 3.0 * omt * omt * params, 3.0 * omt * params * params, params * params * params),
            axis=1,
        )
        quad_weights = np.stack((omt * omt, 2.0 * omt * params, params * params), axis=1)
        quads = np.stack((cubics[:, 0], controls, cubics[:, 3]), axis=1)

        cubic_samples = np.einsum("kj,njd->nkd", cubic_weights, cubics)
        quad_samples = np.einsum("kj,njd->nkd", quad_weights, quads)
        distances = np.hypot(
            cubic_samples[:, :, 0] - quad_samples[:, :, 0], cubic_samples[:, :, 1] - quad_samples[:, :, 1]
        )
        return np.max(distances, axis=1)

    @classmethod
    def fit_quadratic_controls(cls, cubics: NDArray[np.float64]) -> Tuple[NDArray[np.float64], NDArray[np.float64]]:
        """Fit one quadratic control point per cubic piece.

        Two candidates are evaluated per piece, both keeping the piece's end points:
        - tangent intersection: matches both end tangents exactly; only valid if the
          tangent lines meet ahead of both end points,
        - mid-point approximation: (3*(c1 + c2) - (c0 + c3)) / 4.
        The candidate with the smaller deviation is kept.

        Args:
            cubics: Array of shape (n, 4, 2) with the control points of n cubic pieces.

        Returns:
            Tuple of (controls, deviations) with shapes (n, 2) and (n,).
        """
        c0, c1, c2, c3 = cubics[:, 0], cubics[:, 1], cubics[:, 2], cubics[:, 3]
        midpoint_controls = (3.0 * (c1 + c2) - (c0 + c3)) / 4.0
        midpoint_deviation = cls._deviation(cubics, midpoint_controls)

        # Solve c0 + s*d0 = c3 + u*d1 for the tangent intersection
        d0 = c1 - c0
        d1 = c2 - c3
        chord = c3 - c0
        det = d1[:, 0] * d0[:, 1] - d1[:, 1] * d0[:, 0]
        scale = np.hypot(d0[:, 0], d0[:, 1]) * np.hypot(d1[:, 0], d1[:, 1])
        with np.errstate(divide="ignore", invalid="ignore"):
            s = (d1[:, 0] * chord[:, 1] - d1[:, 1] * chord[:, 0]) / det
            u = (d0[:, 0] * chord[:, 1] - d0[:, 1] * chord[:, 0]) / det
            tangent_controls = c0 + s[:, np.newaxis] * d0
        tangent_valid = (
            (np.abs(det) > _TANGENT_PARALLEL_EPS * scale)
            & np.isfinite(s)
            & np.isfinite(u)
            & (s > 0.0)
            & (u > 0.0)
        )
        tangent_controls = np.where(tangent_valid[:, np.newaxis], tangent_controls, midpoint_controls)
        tangent_deviation = np.where(tangent_valid, cls._deviation(cubics, tangent_controls), np.inf)

        use_tangent = tangent_deviation < midpoint_deviation
        controls = np.where(use_tangent[:, np.newaxis], tangent_controls, midpoint_controls)
        deviations = np.where(use_tangent, tangent_deviation, midpoint_deviation)
        return controls, deviations

    @classmethod
    def flatten_cubic(
        cls,
        points: ControlPoints,
        tolerance: float,
        max_subdivisions: int = DEFAULT_MAX_SUBDIVISIONS,
    ) -> List[QuadraticPiece]:
        """Approximate a cubic Bezier curve by a chain of quadratic Bezier curves.

        The cubic is split into 1, 2, 3, ... pieces of equal parameter length until
        every fitted quadratic piece deviates at most _tolerance_ from its cubic
        piece. The number of pieces is capped by _max_subdivisions_, so a tolerance
        of zero terminates with the capped chain.

        Args:
            points: The four control points (p0, p1, p2, p3) of the cubic curve.
            tolerance: Maximum allowed deviation (same units as the coordinates).
            max_subdivisions: Maximum number of quadratic pieces.

        Returns:
            Non-empty list of (q0, q1, q2) tuples. The first q0 equals p0, the last
            q2 equals p3 and each q2 equals the q0 of the following piece.

        Raises:
            ValueError: If the tolerance is negative or not finite, if
                _max_subdivisions_ is smaller than 1 or if the control points are
                not finite.
        """
        if not math.isfinite(tolerance) or tolerance < 0.0:
            raise ValueError(f"Tolerance must be a finite non-negative number, got {tolerance}")
        if max_subdivisions < 1:
            raise ValueError(f"max_subdivisions must be at least 1, got {max_subdivisions}")
        ctrl = cls._control_array(points, 4)
        if not np.all(np.isfinite(ctrl)):
            raise ValueError("Cubic control points must be finite.")

        for pieces in range(1, max_subdivisions + 1):
            cubics = cls.split_cubic_uniform(ctrl, pieces)
            controls, deviations = cls.fit_quadratic_controls(cubics)
            max_deviation = float(np.max(deviations))
            if max_deviation <= tolerance:
                break
        else:
            logger.debug(
                "Subdivision cap %d reached with deviation %g > tolerance %g", max_subdivisions, max_deviation, tolerance
            )

        logger.debug("Flattened cubic into %d quadratic pieces (deviation %g)", pieces, max_deviation)
        return [
            (
                Point(float(cubic[0, 0]), float(cubic[0, 1])),
                Point(float(control[0]), float(control[1])),
                Point(float(cubic[3, 0]), float(cubic[3, 1])),
            )
            for cubic, control in zip(cubics, controls)
        ]

    @classmethod
    def flatten(
        # pylint: disable=too-many-arguments,too-many-positional-arguments
        cls,
        p0: Point,
        p1: Point,
        p2: Point,
        p3: Point,
        tolerance: float,
        max_subdivisions: int = DEFAULT_MAX_SUBDIVISIONS,
    ) -> List[QuadraticPiece]:
        """Convenience wrapper of flatten_cubic() taking the four control points separately."""
        return cls.flatten_cubic((p0, p1, p2, p3), tolerance, max_subdivisions)
