"""Handling geometries"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import NamedTuple, Sequence, Tuple, Union


###############################################################################
# Point
###############################################################################
class Point(NamedTuple):
    """Real-valued 2D coordinate."""

    x: float
    y: float

    def is_finite(self) -> bool:
        """Return True if both coordinates are finite numbers."""
        return GeomMath.is_finite(self.x) and GeomMath.is_finite(self.y)

    def reflect(self, center: Point) -> Point:
        """Return the point mirrored at the given _center_."""
        return Point(2.0 * center.x - self.x, 2.0 * center.y - self.y)

    def __str__(self) -> str:
        return f"({self.x:g}, {self.y:g})"


###############################################################################
# GeomMath
###############################################################################
class GeomMath:
    """Class to provide various static methods related to geometry handling."""

    @staticmethod
    def is_finite(value: float) -> bool:
        """Return True if _value_ is neither NaN nor infinite."""
        return math.isfinite(value)

    @staticmethod
    def transform_point(affine_trafo: Sequence[Union[int, float]], point: Sequence[Union[int, float]]) -> Point:
        """
        Perform an affine transformation on the given 2D point.

        The given _affine_trafo_ is a list of 6 floats, performing an affine transformation.
        The transformation is defined as:
            | x' | = | a00 a01 b0 |   | x |
            | y' | = | a10 a11 b1 | * | y |
            | 1  | = |  0   0  1  |   | 1 |
        with
            affine_trafo = [a00, a01, a10, a11, b0, b1]

        Args:
            affine_trafo (Tuple/List[float]): Affine transformation - [a00, a01, a10, a11, b0, b1]
            point (Tuple/List[float]): 2D point - (x, y)

        Returns:
            Point: the transformed point
        """
        x_new = float(affine_trafo[0] * point[0] + affine_trafo[1] * point[1] + affine_trafo[4])
        y_new = float(affine_trafo[2] * point[0] + affine_trafo[3] * point[1] + affine_trafo[5])
        return Point(x_new, y_new)

    @staticmethod
    def scale_flip_trafo(scale_factor: float, flip_y: bool) -> Tuple[float, float, float, float, float, float]:
        """
        Affine transformation scaling uniformly by _scale_factor_ and optionally
        inverting the vertical axis (SVG y grows downwards, graphing tools upwards).

        Args:
            scale_factor (float): The scale factor.
            flip_y (bool): If True the y-axis is inverted.

        Returns:
            Tuple[float, ...]: Affine transformation [a00, a01, a10, a11, b0, b1]
        """
        y_factor = -scale_factor if flip_y else scale_factor
        return (scale_factor, 0.0, 0.0, y_factor, 0.0, 0.0)


###############################################################################
# Interval
###############################################################################
@dataclass(frozen=True)
class Interval:
    """
    Closed interval [lower, upper] used as domain or range restriction of an equation.

    Attributes:
        lower (float): The minimum value.
        upper (float): The maximum value.
    """

    lower: float
    upper: float

    def __post_init__(self):
        # Normalize bounds to ensure lower <= upper
        if self.lower > self.upper:
            lower, upper = self.upper, self.lower
            object.__setattr__(self, "lower", lower)
            object.__setattr__(self, "upper", upper)

    @classmethod
    def spanning(cls, *values: float) -> Interval:
        """Create the smallest interval containing all given _values_."""
        if not values:
            raise ValueError("At least one value is required to create an Interval.")
        return cls(min(values), max(values))

    @property
    def length(self) -> float:
        """float: The length of the interval (difference between upper and lower)."""
        return self.upper - self.lower

    def contains(self, value: float, tolerance: float = 0.0) -> bool:
        """Return True if _value_ lies within the interval (widened by _tolerance_)."""
        return self.lower - tolerance <= value <= self.upper + tolerance

    def is_finite(self) -> bool:
        """Return True if both bounds are finite numbers."""
        return GeomMath.is_finite(self.lower) and GeomMath.is_finite(self.upper)

    @classmethod
    def from_dict(cls, data: dict) -> Interval:
        """Create an Interval instance from a dictionary."""
        return cls(lower=data.get("lower", 0.0), upper=data.get("upper", 0.0))

    def to_dict(self) -> dict:
        """Convert the Interval instance to a dictionary."""
        return {"lower": self.lower, "upper": self.upper}

    def __str__(self):
        return f"Interval(lower={self.lower}, upper={self.upper}, length={self.length})"
