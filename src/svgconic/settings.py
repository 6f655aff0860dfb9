"""Settings of the path to conic conversion."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Tuple

from svgconic.common import (
    DEFAULT_DEGENERATE_EPS,
    DEFAULT_FLIP_Y,
    DEFAULT_MAX_SUBDIVISIONS,
    DEFAULT_SCALE,
    DEFAULT_TOLERANCE,
    InvalidSegmentPolicy,
)
from svgconic.geom import GeomMath

###############################################################################
# ConversionSettings
###############################################################################


@dataclass(frozen=True)
class ConversionSettings:
    """Settings controlling transform, flattening and implicitization.

    Attributes:
        scale: Uniform scale factor applied to all points before implicitization.
        flip_y: If True the vertical axis is inverted (SVG y grows downwards).
        tolerance: Maximum deviation of the quadratic chain replacing a cubic curve.
        max_subdivisions: Maximum number of quadratic pieces per cubic curve.
        degenerate_eps: Zero test of the quadratic conic coefficients of the unit control points.
        invalid_segment_policy: Skip segments without finite equation or reject the path.
    """

    scale: float = DEFAULT_SCALE
    flip_y: bool = DEFAULT_FLIP_Y
    tolerance: float = DEFAULT_TOLERANCE
    max_subdivisions: int = DEFAULT_MAX_SUBDIVISIONS
    degenerate_eps: float = DEFAULT_DEGENERATE_EPS
    invalid_segment_policy: InvalidSegmentPolicy = InvalidSegmentPolicy.SKIP

    @property
    def affine_trafo(self) -> Tuple[float, float, float, float, float, float]:
        """Affine transformation [a00, a01, a10, a11, b0, b1] applied to the input points."""
        return GeomMath.scale_flip_trafo(self.scale, self.flip_y)

    @property
    def is_identity_transform(self) -> bool:
        """bool: True if the input points are used unchanged."""
        return self.scale == 1.0 and not self.flip_y

    def validate(self) -> None:
        """Validate the settings.

        Raises:
            ValueError: If any setting is out of range.
        """
        if not math.isfinite(self.scale) or self.scale <= 0.0:
            raise ValueError(f"Scale must be a positive finite number, got {self.scale}")
        if not math.isfinite(self.tolerance) or self.tolerance < 0.0:
            raise ValueError(f"Tolerance must be a non-negative finite number, got {self.tolerance}")
        if self.max_subdivisions < 1:
            raise ValueError(f"max_subdivisions must be at least 1, got {self.max_subdivisions}")
        if not math.isfinite(self.degenerate_eps) or self.degenerate_eps < 0.0:
            raise ValueError(f"degenerate_eps must be a non-negative finite number, got {self.degenerate_eps}")

    def with_changes(self, **changes) -> ConversionSettings:
        """Return a validated copy with the given attributes replaced."""
        settings = replace(self, **changes)
        settings.validate()
        return settings

    def to_dict(self) -> dict:
        """Convert settings to a dictionary for serialization."""
        return {
            "scale": self.scale,
            "flip_y": self.flip_y,
            "tolerance": self.tolerance,
            "max_subdivisions": self.max_subdivisions,
            "degenerate_eps": self.degenerate_eps,
            "invalid_segment_policy": self.invalid_segment_policy.name,
        }

    @classmethod
    def from_dict(cls, data: dict) -> ConversionSettings:
        """Create validated ConversionSettings from a dictionary."""
        policy = data.get("invalid_segment_policy", InvalidSegmentPolicy.SKIP)
        if isinstance(policy, str):
            try:
                policy = InvalidSegmentPolicy[policy.upper()]
            except KeyError as e:
                raise ValueError(f"Unknown invalid_segment_policy: {policy}") from e
        settings = cls(
            scale=float(data.get("scale", DEFAULT_SCALE)),
            flip_y=bool(data.get("flip_y", DEFAULT_FLIP_Y)),
            tolerance=float(data.get("tolerance", DEFAULT_TOLERANCE)),
            max_subdivisions=int(data.get("max_subdivisions", DEFAULT_MAX_SUBDIVISIONS)),
            degenerate_eps=float(data.get("degenerate_eps", DEFAULT_DEGENERATE_EPS)),
            invalid_segment_policy=policy,
        )
        settings.validate()
        return settings

    def __str__(self) -> str:
        return (
            f"ConversionSettings(scale={self.scale:g}, flip_y={self.flip_y}"
            f", tolerance={self.tolerance:g}, max_subdivisions={self.max_subdivisions}"
            f", degenerate_eps={self.degenerate_eps:g}, policy={self.invalid_segment_policy.name})"
        )


# Settings presets
DEFAULT_SETTINGS = ConversionSettings()

STRICT_SETTINGS = ConversionSettings(invalid_segment_policy=InvalidSegmentPolicy.RAISE)

IDENTITY_SETTINGS = ConversionSettings(scale=1.0, flip_y=False)
