"""Rendering of conic equations as Desmos LaTeX expressions."""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Iterable, List, Union

from svgconic.geom import Interval
from svgconic.implicit import ConicEquation

logger = logging.getLogger(__name__)


class DesmosFormatter:
    """Collection of static methods to render ConicEquations for the Desmos graphing calculator.

    An equation is rendered as
        a x^2 + b xy + c y^2 + d x + e y + f = 0 \\left\\{lower \\leq x \\leq upper\\right\\}
    followed by the range restriction for quadratic curves.
    """

    @staticmethod
    def format_number(value: float) -> str:
        """
        Render _value_ with the shortest round-trip representation.
        Exponent notation is converted to LaTeX: 1.5e-05 -> 1.5\\cdot10^{-5}

        Raises:
            ValueError: If _value_ is not finite.
        """
        value = float(value)
        if not math.isfinite(value):
            raise ValueError(f"Cannot format non-finite number {value}")
        if value == 0.0:
            return "0"

        text = repr(value)
        if "e" in text:
            mantissa, exponent = text.split("e")
            if mantissa.endswith(".0"):
                mantissa = mantissa[:-2]
            return f"{mantissa}\\cdot10^{{{int(exponent)}}}"
        if text.endswith(".0"):
            text = text[:-2]
        return text

    @staticmethod
    def fold_signs(expression: str) -> str:
        """Merge signs of negative terms into their operators: "+ -" -> "-", "- -" -> "+"."""
        return expression.replace("+ -", "-").replace("- -", "+")

    @staticmethod
    def format_equation(equation: ConicEquation) -> str:
        """Render the implicit equation without restrictions."""
        fmt = DesmosFormatter.format_number
        expression = (
            f"{fmt(equation.a)}x^2 + {fmt(equation.b)}xy + {fmt(equation.c)}y^2"
            f" + {fmt(equation.d)}x + {fmt(equation.e)}y + {fmt(equation.f)} = 0"
        )
        return DesmosFormatter.fold_signs(expression)

    @staticmethod
    def format_restriction(interval: Interval, variable: str) -> str:
        """Render _interval_ as Desmos restriction on _variable_ including the braces."""
        fmt = DesmosFormatter.format_number
        return f"\\left\\{{{fmt(interval.lower)} \\leq {variable} \\leq {fmt(interval.upper)}\\right\\}}"

    @staticmethod
    def format(equation: ConicEquation) -> str:
        """Render _equation_ followed by its domain and range restrictions."""
        text = DesmosFormatter.format_equation(equation)
        if equation.x_domain is not None:
            text += DesmosFormatter.format_restriction(equation.x_domain, "x")
        if equation.y_range is not None:
            text += DesmosFormatter.format_restriction(equation.y_range, "y")
        return text

    @staticmethod
    def format_all(equations: Iterable[ConicEquation]) -> List[str]:
        """Render all _equations_ in order."""
        return [DesmosFormatter.format(equation) for equation in equations]


def write_equations(file_path: Union[str, Path], equations: Iterable[ConicEquation]) -> int:
    """Write one rendered equation per line to _file_path_.

    Returns:
        int: number of written equations
    """
    lines = DesmosFormatter.format_all(equations)
    Path(file_path).write_text("\n".join(lines), encoding="utf-8")
    logger.info("Wrote %d equations to %s", len(lines), file_path)
    return len(lines)
