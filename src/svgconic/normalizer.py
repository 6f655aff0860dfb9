"""Normalization of SVG path commands and their conversion into conic equations."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from svgconic.bezier import BezierCurve
from svgconic.common import InvalidSegmentError, InvalidSegmentPolicy
from svgconic.geom import Point
from svgconic.implicit import ConicEquation, ConicImplicitizer
from svgconic.segments import ClosePath, CubicTo, LineTo, MoveTo, PathSegment, QuadTo, transform_segments
from svgconic.settings import DEFAULT_SETTINGS, ConversionSettings
from svgconic.svgpath import PathCommand

logger = logging.getLogger(__name__)


###############################################################################
# ConversionResult
###############################################################################
@dataclass
class ConversionResult:
    """Outcome of converting one or more paths.

    Attributes:
        equations: The conic equations in segment order.
        segments: The absolute (transformed) segments the equations were built from.
        warnings: Diagnostics of skipped commands and segments.
        elapsed: Conversion time in seconds, set by the converter.
    """

    equations: List[ConicEquation] = field(default_factory=list)
    segments: List[PathSegment] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    elapsed: float = 0.0

    def extend(self, other: ConversionResult) -> None:
        """Append the content of _other_ to this result."""
        self.equations.extend(other.equations)
        self.segments.extend(other.segments)
        self.warnings.extend(other.warnings)
        self.elapsed += other.elapsed


###############################################################################
# PathNormalizer
###############################################################################
class PathNormalizer:
    """Converts PathCommand sequences into absolute segments and conic equations.

    The conversion runs in two passes:
    - normalize(): sequential pass tracking the current point, converting relative
      coordinates to absolute ones and resolving smooth curve control points,
    - implicitize(): stateless map of each segment to zero or more equations,
      cubic curves are flattened into quadratic curves first.
    """

    def __init__(self, settings: ConversionSettings = DEFAULT_SETTINGS):
        settings.validate()
        self._settings = settings

    @property
    def settings(self) -> ConversionSettings:
        """ConversionSettings: The settings used by this normalizer."""
        return self._settings

    @staticmethod
    def _diagnostic(message: str, warnings: Optional[List[str]]) -> None:
        logger.warning(message)
        if warnings is not None:
            warnings.append(message)

    @staticmethod
    def _points(values: Sequence[float], origin: Point) -> List[Point]:
        """Pair up _values_ as points, offset by _origin_."""
        return [Point(origin.x + values[i], origin.y + values[i + 1]) for i in range(0, len(values) - 1, 2)]

    def normalize(self, commands: Sequence[PathCommand], warnings: Optional[List[str]] = None) -> List[PathSegment]:
        """Convert _commands_ into absolute PathSegments.

        Every drawing segment starts at the end point of the previous segment.
        MoveTo starts a new subpath, ClosePath returns to the subpath start.
        Unrecognized commands (including elliptical arcs) are skipped with a
        diagnostic; arcs still move the current point to their end point.

        Args:
            commands: The path commands in input order.
            warnings: Optional list collecting diagnostics.

        Returns:
            List[PathSegment]: the absolute segments
        """
        segments: List[PathSegment] = []
        current = Point(0.0, 0.0)
        subpath_start = current
        # Second control point of the previous cubic / control point of the previous quadratic
        last_cubic_ctrl: Optional[Point] = None
        last_quad_ctrl: Optional[Point] = None

        cmd_idx = 0
        while cmd_idx < len(commands):
            command = commands[cmd_idx]
            cmd_idx += 1
            kind = command.kind
            info = command.info
            if info is not None and len(command.values) != info.num_values:
                self._diagnostic(f"Ignored command {command}: expected {info.num_values} values", warnings)
                last_cubic_ctrl = last_quad_ctrl = None
                continue
            origin = current if command.relative else Point(0.0, 0.0)
            cubic_ctrl: Optional[Point] = None
            quad_ctrl: Optional[Point] = None

            if kind == "move":
                (current,) = self._points(command.values, origin)
                subpath_start = current
                segments.append(MoveTo(current))

            elif kind in ("line", "horizontal-line", "vertical-line"):
                if kind == "line":
                    (end,) = self._points(command.values, origin)
                elif kind == "horizontal-line":
                    end = Point(origin.x + command.values[0], current.y)
                else:
                    end = Point(current.x, origin.y + command.values[0])
                segments.append(LineTo(current, end))
                current = end

            elif kind in ("cubic-curve", "smooth-cubic-curve"):
                if kind == "cubic-curve":
                    ctrl1, ctrl2, end = self._points(command.values, origin)
                else:
                    ctrl2, end = self._points(command.values, origin)
                    ctrl1 = last_cubic_ctrl.reflect(current) if last_cubic_ctrl else current
                segments.append(CubicTo(current, ctrl1, ctrl2, end))
                cubic_ctrl = ctrl2
                current = end

            elif kind in ("quadratic-curve", "smooth-quadratic-curve"):
                if kind == "quadratic-curve":
                    ctrl, end = self._points(command.values, origin)
                else:
                    (end,) = self._points(command.values, origin)
                    ctrl = last_quad_ctrl.reflect(current) if last_quad_ctrl else current
                segments.append(QuadTo(current, ctrl, end))
                quad_ctrl = ctrl
                current = end

            elif kind == "close":
                segments.append(ClosePath(current, subpath_start))
                current = subpath_start

            else:
                self._diagnostic(f"Ignored command {command} ({kind})", warnings)
                if kind == "elliptical-arc":
                    current = Point(origin.x + command.values[5], origin.y + command.values[6])

            last_cubic_ctrl = cubic_ctrl
            last_quad_ctrl = quad_ctrl

        return segments

    def implicitize_segment(self, segment: PathSegment) -> List[ConicEquation]:
        """Return the equations of a single absolute _segment_.

        Raises:
            InvalidSegmentError: If the segment has no finite equation.
            TypeError: If _segment_ is not a PathSegment.
        """
        eps = self._settings.degenerate_eps

        if isinstance(segment, MoveTo):
            return []
        if isinstance(segment, LineTo):
            return [ConicImplicitizer.implicitize_line(segment.p0, segment.p1)]
        if isinstance(segment, ClosePath):
            if segment.is_zero_length:
                logger.debug("Zero-length close at %s produces no equation", segment.p0)
                return []
            return [ConicImplicitizer.implicitize_line(segment.p0, segment.p_start)]
        if isinstance(segment, QuadTo):
            return [ConicImplicitizer.implicitize_quadratic(segment.p0, segment.p1, segment.p2, eps)]
        if isinstance(segment, CubicTo):
            pieces = BezierCurve.flatten_cubic(
                (segment.p0, segment.p1, segment.p2, segment.p3),
                self._settings.tolerance,
                self._settings.max_subdivisions,
            )
            return [ConicImplicitizer.implicitize_quadratic(q0, q1, q2, eps) for q0, q1, q2 in pieces]
        raise TypeError(f"Unsupported segment type: {type(segment).__name__}")

    def implicitize(self, segments: Sequence[PathSegment], warnings: Optional[List[str]] = None) -> List[ConicEquation]:
        """Map all _segments_ to conic equations.

        Segments without a finite equation are skipped with a diagnostic, or
        re-raised if the settings request InvalidSegmentPolicy.RAISE.

        Raises:
            InvalidSegmentError: Only with InvalidSegmentPolicy.RAISE.
        """
        equations: List[ConicEquation] = []
        for index, segment in enumerate(segments):
            try:
                equations.extend(self.implicitize_segment(segment))
            except InvalidSegmentError as e:
                if self._settings.invalid_segment_policy is InvalidSegmentPolicy.RAISE:
                    raise
                self._diagnostic(f"Skipped segment {index} ({type(segment).__name__}): {e}", warnings)
        return equations

    def convert(self, commands: Sequence[PathCommand]) -> ConversionResult:
        """Normalize, transform and implicitize the given _commands_.

        Raises:
            InvalidSegmentError: Only with InvalidSegmentPolicy.RAISE.
        """
        result = ConversionResult()
        segments = self.normalize(commands, result.warnings)
        if not self._settings.is_identity_transform:
            segments = transform_segments(segments, self._settings.affine_trafo)
        result.segments = segments
        result.equations = self.implicitize(segments, result.warnings)
        return result
