"""Absolute path segments produced by the normalizer and consumed by the implicitizer.

Every drawing segment carries its own start point ``p0``; it is the end point of
the previous segment. The normalizer establishes that invariant, the segments
themselves do not check it.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Iterable, List, Sequence, Tuple, Union

from svgconic.geom import GeomMath, Point

###############################################################################
# PathSegment variants
###############################################################################


@dataclass(frozen=True)
class MoveTo:
    """Start of a new subpath at _p_. Draws nothing."""

    p: Point

    @property
    def end(self) -> Point:
        """Point: current position after this segment."""
        return self.p


@dataclass(frozen=True)
class LineTo:
    """Straight line from _p0_ to _p1_."""

    p0: Point
    p1: Point

    @property
    def end(self) -> Point:
        """Point: current position after this segment."""
        return self.p1


@dataclass(frozen=True)
class QuadTo:
    """Quadratic Bezier curve from _p0_ via control point _p1_ to _p2_."""

    p0: Point
    p1: Point
    p2: Point

    @property
    def end(self) -> Point:
        """Point: current position after this segment."""
        return self.p2


@dataclass(frozen=True)
class CubicTo:
    """Cubic Bezier curve from _p0_ via control points _p1_, _p2_ to _p3_."""

    p0: Point
    p1: Point
    p2: Point
    p3: Point

    @property
    def end(self) -> Point:
        """Point: current position after this segment."""
        return self.p3


@dataclass(frozen=True)
class ClosePath:
    """Implicit straight line from the current point _p0_ back to the subpath start _p_start_."""

    p0: Point
    p_start: Point

    @property
    def end(self) -> Point:
        """Point: current position after this segment."""
        return self.p_start

    @property
    def is_zero_length(self) -> bool:
        """bool: True if the current point already equals the subpath start."""
        return self.p0 == self.p_start


PathSegment = Union[MoveTo, LineTo, QuadTo, CubicTo, ClosePath]


###############################################################################
# Functions
###############################################################################


def segment_points(segment: PathSegment) -> Tuple[Point, ...]:
    """Return all points of the given _segment_ in declaration order."""
    return tuple(getattr(segment, field.name) for field in fields(segment))


def transform_segment(segment: PathSegment, affine_trafo: Sequence[Union[int, float]]) -> PathSegment:
    """Return a copy of _segment_ with all points transformed by _affine_trafo_.

    Args:
        segment: The segment to transform.
        affine_trafo: Affine transformation [a00, a01, a10, a11, b0, b1]

    Returns:
        PathSegment: a new segment of the same type
    """
    transformed = [GeomMath.transform_point(affine_trafo, point) for point in segment_points(segment)]
    return type(segment)(*transformed)


def transform_segments(
    segments: Iterable[PathSegment], affine_trafo: Sequence[Union[int, float]]
) -> List[PathSegment]:
    """Transform all _segments_ by _affine_trafo_ (see transform_segment())."""
    return [transform_segment(segment, affine_trafo) for segment in segments]
