"""Handling Paths for SVG"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import ClassVar, List, Optional, Pattern, Sequence, Tuple

from svgconic.common import UnsupportedCommandError

logger = logging.getLogger(__name__)

###############################################################################
# PathCommandInfo
###############################################################################


@dataclass(frozen=True)
class PathCommandInfo:
    """Metadata for SVG path commands.

    Attributes:
        kind: Name of the command kind, e.g. "cubic-curve"
        num_values: Number of numeric arguments of one command instance
        is_curve: Whether this command represents a curve
        is_drawing: Whether this command draws (vs. move)
    """

    kind: str
    num_values: int
    is_curve: bool
    is_drawing: bool = True


# Command registry with metadata, keyed by the upper case (absolute) letter
COMMAND_INFO = {
    "M": PathCommandInfo("move", 2, False, False),
    "L": PathCommandInfo("line", 2, False),
    "H": PathCommandInfo("horizontal-line", 1, False),
    "V": PathCommandInfo("vertical-line", 1, False),
    "C": PathCommandInfo("cubic-curve", 6, True),
    "S": PathCommandInfo("smooth-cubic-curve", 4, True),
    "Q": PathCommandInfo("quadratic-curve", 4, True),
    "T": PathCommandInfo("smooth-quadratic-curve", 2, True),
    "A": PathCommandInfo("elliptical-arc", 7, True),
    "Z": PathCommandInfo("close", 0, False),
}

UNKNOWN_KIND = "unknown"


###############################################################################
# PathCommand
###############################################################################


@dataclass(frozen=True)
class PathCommand:
    """One SVG path command with its numeric arguments.

    Attributes:
        code: The command letter; lower case means relative coordinates.
        values: The numeric arguments of exactly one command instance.
    """

    code: str
    values: Tuple[float, ...] = ()

    @property
    def info(self) -> Optional[PathCommandInfo]:
        """Optional[PathCommandInfo]: Registry entry of the command or None if unknown."""
        return COMMAND_INFO.get(self.code.upper())

    @property
    def kind(self) -> str:
        """str: The command kind, "unknown" for letters not in the registry."""
        info = self.info
        return info.kind if info else UNKNOWN_KIND

    @property
    def relative(self) -> bool:
        """bool: True if the coordinates are relative to the current point."""
        return self.code.islower()

    def __str__(self) -> str:
        if not self.values:
            return self.code
        return self.code + " ".join(f"{value:g}" for value in self.values)


###############################################################################
# SvgPathTokenizer
###############################################################################


class SvgPathTokenizer:
    """
    Splits the string of an SVG path "d" attribute into PathCommand records.
    Commands (command : number of values : command-character):
        MoveTo:           2: Mm
        LineTo:           2: Ll   1: Hh(x)   1:Vv(y)
        CubicBezier:      6: Cc   4: Ss
        QuadraticBezier:  4: Qq   2: Tt
        ArcCurve:         7: Aa
        ClosePath:        0: Zz
    Repeated argument groups are split into separate commands of the same letter,
    extra pairs after a MoveTo become LineTo commands.
    """

    # Command letters:
    SVG_CMDS: ClassVar[str] = "MmLlHhVvCcSsQqTtAaZz"
    # Definition of a number:
    SVG_ARGS: ClassVar[str] = r"[-+]?[0-9]*\.?[0-9]+(?:[eE][-+]?[0-9]+)?"
    # A token is either a number or a single letter
    TOKEN_RE: ClassVar[Pattern[str]] = re.compile(rf"({SVG_ARGS})|([A-Za-z])")
    NUMBER_RE: ClassVar[Pattern[str]] = re.compile(SVG_ARGS)
    # Positions of the large-arc and sweep flags within the arc arguments
    ARC_FLAG_POSITIONS: ClassVar[Tuple[int, ...]] = (3, 4)

    @classmethod
    def split_tokens(cls, path_string: str) -> Tuple[Tuple[str, str], ...]:
        """Return the immutable token sequence of _path_string_ as (number, letter) pairs."""
        return tuple(cls.TOKEN_RE.findall(path_string))

    @staticmethod
    def _read_numbers(
        tokens: Sequence[Tuple[str, str]], cursor: int, limit: Optional[int]
    ) -> Tuple[Tuple[float, ...], int]:
        """Read up to _limit_ consecutive numbers (all if None) starting at _cursor_."""
        values: List[float] = []
        while cursor < len(tokens) and tokens[cursor][0] and (limit is None or len(values) < limit):
            values.append(float(tokens[cursor][0]))
            cursor += 1
        return tuple(values), cursor

    @classmethod
    def _read_arc_values(cls, tokens: Sequence[Tuple[str, str]], cursor: int) -> Tuple[Tuple[float, ...], int]:
        """Read the arguments of one elliptical arc starting at _cursor_.

        The large-arc and sweep flags are the single characters "0" or "1" and need
        no separator, so "a5 5 0 0110 0" has the flags 0 and 1 followed by x = 10.
        Reading stops at the first value that does not fit its position.
        """
        num_values = COMMAND_INFO["A"].num_values
        values: List[float] = []
        pending = ""
        while len(values) < num_values:
            if not pending:
                if cursor >= len(tokens) or not tokens[cursor][0]:
                    break
                pending = tokens[cursor][0]
                cursor += 1
            if len(values) in cls.ARC_FLAG_POSITIONS:
                if pending[0] not in "01":
                    break
                values.append(float(pending[0]))
                pending = pending[1:]
            else:
                if not cls.NUMBER_RE.fullmatch(pending):
                    break
                values.append(float(pending))
                pending = ""
        return tuple(values), cursor

    @staticmethod
    def _report(message: str, strict: bool, warnings: Optional[List[str]]) -> None:
        if strict:
            raise UnsupportedCommandError(message)
        logger.warning(message)
        if warnings is not None:
            warnings.append(message)

    @classmethod
    def tokenize(
        cls, path_string: str, strict: bool = False, warnings: Optional[List[str]] = None
    ) -> List[PathCommand]:
        """Take the given SVG _path_string_ and split it into PathCommand records.

        Letters not in COMMAND_INFO are kept as commands with all following numbers as
        values, so the consumer decides how to handle them.

        Args:
            path_string (str): SVG path string input
            strict (bool): If True malformed input raises, otherwise it is dropped with a warning
            warnings (Optional[List[str]]): Receives the messages of dropped input if given

        Returns:
            List[PathCommand]: the commands in input order

        Raises:
            UnsupportedCommandError: In strict mode, if numbers precede the first command,
                follow a ClosePath, or an argument group is incomplete.
        """
        tokens = cls.split_tokens(path_string)
        commands: List[PathCommand] = []
        code: Optional[str] = None
        cursor = 0

        while cursor < len(tokens):
            number, letter = tokens[cursor]

            if letter:
                code = letter
                cursor += 1
                info = COMMAND_INFO.get(code.upper())
                if info is None:
                    values, cursor = cls._read_numbers(tokens, cursor, None)
                    commands.append(PathCommand(code, values))
                    code = None
                    continue
                if info.num_values == 0:
                    commands.append(PathCommand(code))
                    continue
            elif code is None or COMMAND_INFO[code.upper()].num_values == 0:
                cls._report(f"Number {number} without command at token {cursor}", strict, warnings)
                cursor += 1
                continue

            num_values = COMMAND_INFO[code.upper()].num_values
            if code.upper() == "A":
                values, cursor = cls._read_arc_values(tokens, cursor)
            else:
                values, cursor = cls._read_numbers(tokens, cursor, num_values)
            if len(values) < num_values:
                cls._report(f"Incomplete arguments for command {code}: {values}", strict, warnings)
                continue
            commands.append(PathCommand(code, values))

            # Implicit repetition after a MoveTo continues as LineTo
            if code == "M":
                code = "L"
            elif code == "m":
                code = "l"

        return commands

    @staticmethod
    def format_commands(commands: Sequence[PathCommand]) -> str:
        """Join the given _commands_ to an SVG path string."""
        return " ".join(str(command) for command in commands)
