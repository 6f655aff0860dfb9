"""Central module containing constants and definitions for path to conic conversion."""

from __future__ import annotations

from enum import Enum, auto
from typing import Literal

###############################################################################
# Types
###############################################################################


EquationKind = Literal["linear", "parabolic"]


###############################################################################
# Enums and Consts
###############################################################################


class InvalidSegmentPolicy(Enum):
    """Enum to define how segments without a finite equation are handled."""

    SKIP = auto()
    RAISE = auto()


DEFAULT_SCALE: float = 10.0
DEFAULT_FLIP_Y: bool = True
# Maximum deviation between a cubic and its quadratic chain (output units)
DEFAULT_TOLERANCE: float = 0.3
# Termination cap of the cubic flattener (number of quadratic pieces)
DEFAULT_MAX_SUBDIVISIONS: int = 64
# Absolute zero test of quadratic conic coefficients
DEFAULT_DEGENERATE_EPS: float = 1.0e-9

DEFAULT_OUTPUT_FILE: str = "equations.txt"
DEFAULT_INPUT_FILE: str = "input.svg"


###############################################################################
# Exceptions
###############################################################################


class ConversionError(Exception):
    """Base exception for path to conic conversion errors."""


class InvalidSegmentError(ConversionError):
    """Raised when a segment cannot be expressed by a finite conic equation."""


class UnsupportedCommandError(ConversionError):
    """Raised when a path command cannot be tokenized in strict mode."""


class SvgDocumentError(ConversionError):
    """Raised when an SVG document cannot be parsed."""
