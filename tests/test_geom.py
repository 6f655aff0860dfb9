"""Test module for svgconic.geom

The tests are run using pytest.
These tests ensure that all functions and interfaces in src/svgconic/geom.py
remain working correctly after changes and refactoring.
"""

import math

import pytest

from svgconic.geom import GeomMath, Interval, Point

###############################################################################
# Point Tests
###############################################################################


class TestPoint:
    """Test class for Point functionality."""

    def test_point_is_tuple(self):
        """Point should compare equal to a plain tuple."""
        assert Point(1.0, 2.0) == (1.0, 2.0)
        x, y = Point(3.0, 4.0)
        assert (x, y) == (3.0, 4.0)

    def test_is_finite(self):
        """Points with NaN or infinity are not finite."""
        assert Point(1.0, -2.0).is_finite()
        assert not Point(math.nan, 0.0).is_finite()
        assert not Point(0.0, math.inf).is_finite()

    def test_reflect(self):
        """Reflecting a point at a center mirrors it."""
        assert Point(1.0, 1.0).reflect(Point(2.0, 3.0)) == Point(3.0, 5.0)
        assert Point(2.0, 3.0).reflect(Point(2.0, 3.0)) == Point(2.0, 3.0)


###############################################################################
# GeomMath Tests
###############################################################################


class TestGeomMath:
    """Test class for GeomMath functionality."""

    def test_transform_point_identity(self):
        """Test point transformation with identity matrix."""
        result = GeomMath.transform_point([1, 0, 0, 1, 0, 0], (10.0, 20.0))
        assert result == (10.0, 20.0)
        assert isinstance(result, Point)

    def test_transform_point_translation(self):
        """Test point transformation with translation."""
        result = GeomMath.transform_point([1, 0, 0, 1, 5.0, 10.0], (10.0, 20.0))
        assert result == (15.0, 30.0)

    def test_transform_point_complex(self):
        """Test point transformation with scaling, rotation, and translation."""
        # x' = 0*10 + (-2)*20 + 5 = -35
        # y' = 2*10 + 0*20 + 10 = 30
        result = GeomMath.transform_point([0, -2, 2, 0, 5.0, 10.0], (10.0, 20.0))
        assert result == (-35.0, 30.0)

    def test_transform_point_return_type(self):
        """transform_point always returns floats."""
        result = GeomMath.transform_point([1, 0, 0, 1, 0, 0], (10, 20))
        assert isinstance(result.x, float)
        assert isinstance(result.y, float)

    def test_scale_flip_trafo(self):
        """Scale and flip trafo scales uniformly and inverts y."""
        trafo = GeomMath.scale_flip_trafo(10.0, True)
        assert trafo == (10.0, 0.0, 0.0, -10.0, 0.0, 0.0)
        assert GeomMath.transform_point(trafo, (1.0, 2.0)) == (10.0, -20.0)

    def test_scale_without_flip(self):
        """Without flip only the scale is applied."""
        trafo = GeomMath.scale_flip_trafo(2.0, False)
        assert GeomMath.transform_point(trafo, (1.0, 2.0)) == (2.0, 4.0)


###############################################################################
# Interval Tests
###############################################################################


class TestInterval:
    """Test class for Interval functionality."""

    def test_bounds_normalized(self):
        """Lower and upper are swapped if given in wrong order."""
        interval = Interval(5.0, 1.0)
        assert interval.lower == 1.0
        assert interval.upper == 5.0
        assert interval.length == 4.0

    def test_spanning(self):
        """spanning() returns the smallest interval containing all values."""
        interval = Interval.spanning(3.0, -1.0, 2.0)
        assert interval == Interval(-1.0, 3.0)

    def test_spanning_requires_values(self):
        """spanning() without values raises ValueError."""
        with pytest.raises(ValueError):
            Interval.spanning()

    def test_contains(self):
        """contains() respects the closed bounds and the tolerance."""
        interval = Interval(0.0, 2.0)
        assert interval.contains(0.0)
        assert interval.contains(2.0)
        assert not interval.contains(2.1)
        assert interval.contains(2.1, tolerance=0.2)

    def test_immutable(self):
        """Interval is frozen."""
        interval = Interval(0.0, 1.0)
        with pytest.raises(Exception):  # FrozenInstanceError
            interval.lower = 5.0

    def test_dict_round_trip(self):
        """to_dict() and from_dict() are inverse."""
        interval = Interval(-1.5, 2.5)
        assert Interval.from_dict(interval.to_dict()) == interval

    def test_is_finite(self):
        """Intervals with infinite bounds are not finite."""
        assert Interval(0.0, 1.0).is_finite()
        assert not Interval(0.0, math.inf).is_finite()
